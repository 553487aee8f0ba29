# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""The main Microcks container.

:class:`MicrocksContainer` is a testcontainers ``DockerContainer`` running the
Microcks "uber" distribution. Artifacts and secrets declared with the
``with_*`` builder methods are imported once the container is ready, one at
a time, in declaration order: main artifacts, secondary artifacts, main
remote artifacts, secondary remote artifacts, then secrets.

Synchronous usage (testcontainers contract)::

    with MicrocksContainer().with_main_artifacts(['apipastries-openapi.yaml']) as microcks:
        url = microcks.get_rest_mock_endpoint('API Pastries', '0.0.1')

Asynchronous usage::

    async with MicrocksContainer().with_main_artifacts(['apipastries-openapi.yaml']) as microcks:
        result = await microcks.test_endpoint(test_request)
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Iterable
from typing import Any

from testcontainers.core.container import DockerContainer
from testcontainers.core.waiting_utils import wait_for_logs

from microcks_testcontainers import endpoints
from microcks_testcontainers.client import MicrocksClient
from microcks_testcontainers.constants import (
    MICROCKS_GRPC_PORT,
    MICROCKS_HTTP_PORT,
    MICROCKS_READY_PATTERN,
)
from microcks_testcontainers.environment import get_microcks_image, get_startup_timeout
from microcks_testcontainers.errors import E, MicrocksError
from microcks_testcontainers.logging import get_logger
from microcks_testcontainers.models import (
    RequestResponsePair,
    Secret,
    TestRequest,
    TestResult,
    UnidirectionalEvent,
)

logger = get_logger(__name__)


class MicrocksContainer(DockerContainer):
    """Testcontainers wrapper around the Microcks uber image.

    Args:
        image: Image to run. Defaults to ``MICROCKS_IMAGE`` or the pinned
            Microcks release.
        **kwargs: Passed to ``DockerContainer``.
    """

    def __init__(self, image: str | None = None, **kwargs: Any) -> None:  # noqa: ANN401
        """Initialize the container with the given image."""
        super().__init__(image or get_microcks_image(), **kwargs)
        self._main_artifacts: list[str] = []
        self._secondary_artifacts: list[str] = []
        self._main_remote_artifacts: list[str] = []
        self._secondary_remote_artifacts: list[str] = []
        self._secrets: list[Secret] = []
        self._client: MicrocksClient | None = None

    @property
    def image_name(self) -> str:
        """Name of the image used for this container."""
        return self.image

    def with_main_artifacts(self, artifacts: Iterable[str | os.PathLike[str]]) -> MicrocksContainer:
        """Declare files to import as primary artifacts once started."""
        self._main_artifacts.extend(os.fspath(a) for a in artifacts)
        return self

    def with_secondary_artifacts(self, artifacts: Iterable[str | os.PathLike[str]]) -> MicrocksContainer:
        """Declare files to import as secondary artifacts once started."""
        self._secondary_artifacts.extend(os.fspath(a) for a in artifacts)
        return self

    def with_main_remote_artifacts(self, urls: Iterable[str]) -> MicrocksContainer:
        """Declare URLs Microcks downloads as primary artifacts once started."""
        self._main_remote_artifacts.extend(urls)
        return self

    def with_secondary_remote_artifacts(self, urls: Iterable[str]) -> MicrocksContainer:
        """Declare URLs Microcks downloads as secondary artifacts once started."""
        self._secondary_remote_artifacts.extend(urls)
        return self

    def with_secret(self, secret: Secret) -> MicrocksContainer:
        """Declare a secret to create once started."""
        self._secrets.append(secret)
        return self

    def _has_pending_imports(self) -> bool:
        return bool(
            self._main_artifacts
            or self._secondary_artifacts
            or self._main_remote_artifacts
            or self._secondary_remote_artifacts
            or self._secrets
        )

    def _start_container(self) -> None:
        if not self.ports:
            self.with_exposed_ports(MICROCKS_HTTP_PORT, MICROCKS_GRPC_PORT)
        logger.info('Starting Microcks container', image=self.image)
        super().start()
        wait_for_logs(self, MICROCKS_READY_PATTERN, timeout=get_startup_timeout())
        self._client = MicrocksClient(self.http_endpoint)
        logger.info('Microcks container ready', http_endpoint=self.http_endpoint)

    def start(self) -> MicrocksContainer:
        """Start the container, wait for it, then import declared artifacts.

        Imports run on a private event loop.

        Raises:
            MicrocksError: If artifacts or secrets are declared and this is
                called from a running event loop; use :meth:`astart` there.
        """
        if self._has_pending_imports():
            try:
                asyncio.get_running_loop()
            except RuntimeError:
                pass
            else:
                raise MicrocksError(
                    code=E.EVENT_LOOP_RUNNING,
                    message='Cannot import artifacts synchronously from a running event loop',
                    hint='Use `await container.astart()` or `async with container:` instead.',
                )

        self._start_container()
        if self._has_pending_imports():
            asyncio.run(self._import_declared_then_close())
        return self

    async def astart(self) -> MicrocksContainer:
        """Start the container in a worker thread, then import declared artifacts.

        The container is stopped again if an import fails.
        """
        await asyncio.to_thread(self._start_container)
        try:
            await self.import_declared()
        except BaseException:
            await self.astop()
            raise
        return self

    async def astop(self) -> None:
        """Stop the container in a worker thread."""
        if self._client is not None:
            await self._client.aclose()
        await asyncio.to_thread(self.stop)

    async def __aenter__(self) -> MicrocksContainer:
        return await self.astart()

    async def __aexit__(self, *exc_info: object) -> None:
        await self.astop()

    async def import_declared(self) -> None:
        """Import every artifact and secret declared with the builder methods."""
        for path in self._main_artifacts:
            await self.import_as_main_artifact(path)
        for path in self._secondary_artifacts:
            await self.import_as_secondary_artifact(path)
        for url in self._main_remote_artifacts:
            await self.download_as_main_remote_artifact(url)
        for url in self._secondary_remote_artifacts:
            await self.download_as_secondary_remote_artifact(url)
        for secret in self._secrets:
            await self.create_secret(secret)

    async def _import_declared_then_close(self) -> None:
        try:
            await self.import_declared()
        finally:
            await self.client.aclose()

    @property
    def client(self) -> MicrocksClient:
        """REST client of this container.

        Raises:
            MicrocksError: If the container has not been started.
        """
        if self._client is None:
            raise MicrocksError(
                code=E.CONTAINER_NOT_STARTED,
                message='The Microcks container has not been started',
            )
        return self._client

    def _mapped(self, port: int) -> tuple[str, str]:
        if self.get_wrapped_container() is None:
            raise MicrocksError(
                code=E.CONTAINER_NOT_STARTED,
                message='The Microcks container has not been started',
            )
        return self.get_container_host_ip(), str(self.get_exposed_port(port))

    @property
    def http_endpoint(self) -> str:
        """Endpoint of the Microcks API, e.g. ``http://localhost:32768``."""
        host, port = self._mapped(MICROCKS_HTTP_PORT)
        return f'http://{host}:{port}'

    @property
    def grpc_endpoint(self) -> str:
        """Endpoint of the gRPC mocks, e.g. ``grpc://localhost:32769``."""
        return self.get_grpc_mock_endpoint()

    def get_rest_mock_endpoint(self, service: str, version: str) -> str:
        """Base URL of the REST mocks of a service."""
        return endpoints.rest_mock_endpoint(*self._mapped(MICROCKS_HTTP_PORT), service, version)

    def get_soap_mock_endpoint(self, service: str, version: str) -> str:
        """Base URL of the SOAP mocks of a service."""
        return endpoints.soap_mock_endpoint(*self._mapped(MICROCKS_HTTP_PORT), service, version)

    def get_graphql_mock_endpoint(self, service: str, version: str) -> str:
        """Base URL of the GraphQL mocks of a service."""
        return endpoints.graphql_mock_endpoint(*self._mapped(MICROCKS_HTTP_PORT), service, version)

    def get_grpc_mock_endpoint(self) -> str:
        """Target of the gRPC mocks."""
        return endpoints.grpc_mock_endpoint(*self._mapped(MICROCKS_GRPC_PORT))

    async def import_as_main_artifact(self, artifact_path: str | os.PathLike[str]) -> None:
        """See :meth:`MicrocksClient.import_as_main_artifact`."""
        await self.client.import_as_main_artifact(artifact_path)

    async def import_as_secondary_artifact(self, artifact_path: str | os.PathLike[str]) -> None:
        """See :meth:`MicrocksClient.import_as_secondary_artifact`."""
        await self.client.import_as_secondary_artifact(artifact_path)

    async def download_as_main_remote_artifact(self, url: str) -> None:
        """See :meth:`MicrocksClient.download_as_main_remote_artifact`."""
        await self.client.download_as_main_remote_artifact(url)

    async def download_as_secondary_remote_artifact(self, url: str) -> None:
        """See :meth:`MicrocksClient.download_as_secondary_remote_artifact`."""
        await self.client.download_as_secondary_remote_artifact(url)

    async def create_secret(self, secret: Secret) -> None:
        """See :meth:`MicrocksClient.create_secret`."""
        await self.client.create_secret(secret)

    async def test_endpoint(self, test_request: TestRequest) -> TestResult:
        """See :meth:`MicrocksClient.test_endpoint`."""
        return await self.client.test_endpoint(test_request)

    async def get_messages_for_test_case(self, test_result: TestResult, operation_name: str) -> list[RequestResponsePair]:
        """See :meth:`MicrocksClient.get_messages_for_test_case`."""
        return await self.client.get_messages_for_test_case(test_result, operation_name)

    async def get_event_messages_for_test_case(
        self,
        test_result: TestResult,
        operation_name: str,
    ) -> list[UnidirectionalEvent]:
        """See :meth:`MicrocksClient.get_event_messages_for_test_case`."""
        return await self.client.get_event_messages_for_test_case(test_result, operation_name)
