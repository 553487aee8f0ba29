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

"""Async client for the Microcks REST API.

Covers what a test needs from a running Microcks instance: importing
artifacts (uploaded from disk or downloaded by Microcks from a URL),
creating secrets, launching a conformance test and waiting for its outcome,
and reading the messages exchanged during a test.

Any unexpected status code raises a :class:`MicrocksError`; nothing is
retried. Transport failures propagate as ``httpx.HTTPError``.

Usage::

    async with MicrocksClient('http://localhost:32768') as client:
        await client.import_as_main_artifact('specs/apipastries-openapi.yaml')
        result = await client.test_endpoint(
            TestRequest(
                service_id='API Pastries:0.0.1',
                runner_type=TestRunnerType.OPEN_API_SCHEMA,
                test_endpoint='http://good-impl:3002',
                timeout=2000,
            )
        )
"""

from __future__ import annotations

import asyncio
import os
import time
from pathlib import Path
from typing import Any

import httpx
from pydantic import TypeAdapter

from microcks_testcontainers.endpoints import build_test_case_id
from microcks_testcontainers.environment import get_test_poll_interval
from microcks_testcontainers.errors import E, MicrocksError, unexpected_status
from microcks_testcontainers.http_client import close_cached_clients, get_cached_client
from microcks_testcontainers.logging import get_logger
from microcks_testcontainers.models import (
    RequestResponsePair,
    Secret,
    TestRequest,
    TestResult,
    UnidirectionalEvent,
    to_wire,
)

logger = get_logger(__name__)

_PAIRS = TypeAdapter(list[RequestResponsePair])
_EVENTS = TypeAdapter(list[UnidirectionalEvent])


def _body(response: httpx.Response) -> Any:  # noqa: ANN401
    try:
        return response.json()
    except ValueError:
        return response.text


class MicrocksClient:
    """Async client bound to the HTTP endpoint of one Microcks instance.

    Args:
        http_endpoint: Base URL of Microcks, e.g. ``http://localhost:32768``.
        poll_interval: Seconds between two polls of a running test. Defaults
            to ``MICROCKS_TEST_POLL_INTERVAL`` or 0.25.
        http_client: Client to use instead of the per-loop cached one.
            It is not closed by :meth:`aclose`.
    """

    def __init__(
        self,
        http_endpoint: str,
        *,
        poll_interval: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client with the given endpoint."""
        self._base_url = http_endpoint.rstrip('/')
        self._poll_interval = poll_interval if poll_interval is not None else get_test_poll_interval()
        self._http_client = http_client

    @property
    def http_endpoint(self) -> str:
        """Base URL of the Microcks API."""
        return self._base_url

    @property
    def _cache_key(self) -> str:
        return f'microcks/{self._base_url}'

    def _client(self) -> httpx.AsyncClient:
        if self._http_client is not None:
            return self._http_client
        return get_cached_client(self._cache_key)

    async def aclose(self) -> None:
        """Close the cached HTTP client of the current event loop."""
        if self._http_client is None:
            await close_cached_clients(self._cache_key)

    async def __aenter__(self) -> MicrocksClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def import_as_main_artifact(self, artifact_path: str | os.PathLike[str]) -> None:
        """Import an artifact as a primary one.

        Args:
            artifact_path: Path to an OpenAPI, AsyncAPI, Postman collection,
                Protobuf, GraphQL schema, ... file.

        Raises:
            MicrocksError: If the file does not exist or the upload fails.
        """
        await self._upload_artifact(Path(artifact_path), main_artifact=True)

    async def import_as_secondary_artifact(self, artifact_path: str | os.PathLike[str]) -> None:
        """Import an artifact as a secondary one, enriching an existing API.

        Raises:
            MicrocksError: If the file does not exist or the upload fails.
        """
        await self._upload_artifact(Path(artifact_path), main_artifact=False)

    async def download_as_main_remote_artifact(self, url: str) -> None:
        """Ask Microcks to download and import an artifact as a primary one.

        Raises:
            MicrocksError: If Microcks cannot download or import the artifact.
        """
        await self._download_artifact(url, main_artifact=True)

    async def download_as_secondary_remote_artifact(self, url: str) -> None:
        """Ask Microcks to download and import an artifact as a secondary one.

        Raises:
            MicrocksError: If Microcks cannot download or import the artifact.
        """
        await self._download_artifact(url, main_artifact=False)

    async def _upload_artifact(self, path: Path, *, main_artifact: bool) -> None:
        if not path.is_file():
            raise MicrocksError(
                code=E.ARTIFACT_NOT_FOUND,
                message=f'Artifact {path} does not exist or cannot be read',
            )

        content = await asyncio.to_thread(path.read_bytes)
        params = {} if main_artifact else {'mainArtifact': 'false'}
        resp = await self._client().post(
            f'{self._base_url}/api/artifact/upload',
            params=params,
            files={'file': (path.name, content)},
        )
        if resp.status_code != 201:
            raise unexpected_status(
                E.ARTIFACT_IMPORT_FAILED,
                f'Artifact {path.name} has not been correctly imported',
                resp.status_code,
                _body(resp),
            )
        logger.info('Imported artifact', artifact=path.name, main_artifact=main_artifact)

    async def _download_artifact(self, url: str, *, main_artifact: bool) -> None:
        resp = await self._client().post(
            f'{self._base_url}/api/artifact/download',
            data={'mainArtifact': 'true' if main_artifact else 'false', 'url': url},
        )
        if resp.status_code != 201:
            raise unexpected_status(
                E.ARTIFACT_DOWNLOAD_FAILED,
                f'Artifact {url} has not been correctly downloaded',
                resp.status_code,
                _body(resp),
            )
        logger.info('Downloaded remote artifact', url=url, main_artifact=main_artifact)

    async def create_secret(self, secret: Secret) -> None:
        """Create a secret to access a remote Git repository, test endpoint or broker.

        Raises:
            MicrocksError: If Microcks does not answer ``201 Created``.
        """
        resp = await self._client().post(
            f'{self._base_url}/api/secrets',
            json=to_wire(secret),
            headers={'Accept': 'application/json'},
        )
        if resp.status_code != 201:
            raise unexpected_status(
                E.SECRET_CREATION_FAILED,
                f'Secret {secret.name} has not been correctly created',
                resp.status_code,
                _body(resp),
            )
        logger.info('Created secret', secret=secret.name)

    async def test_endpoint(self, test_request: TestRequest) -> TestResult:
        """Launch a conformance test and wait for its outcome.

        The test result is polled until Microcks reports the test as finished
        or ``test_request.timeout`` milliseconds have elapsed, whichever
        comes first.

        Args:
            test_request: What to test, where, and how.

        Returns:
            The last fetched test result.

        Raises:
            MicrocksError: If the test cannot be launched or polled.
        """
        resp = await self._client().post(f'{self._base_url}/api/tests', json=to_wire(test_request))
        if resp.status_code != 201:
            raise unexpected_status(
                E.TEST_LAUNCH_FAILED,
                "Couldn't launch a new test on Microcks",
                resp.status_code,
                _body(resp),
            )

        test_result_id = str(resp.json()['id'])
        log = logger.bind(test_result_id=test_result_id, service_id=test_request.service_id)
        log.info('Launched test', endpoint=test_request.test_endpoint, runner=test_request.runner_type.value)

        deadline = time.monotonic() + test_request.timeout / 1000
        result = await self.refresh_test_result(test_result_id)
        polls = 1
        while result.in_progress and time.monotonic() < deadline:
            await asyncio.sleep(self._poll_interval)
            result = await self.refresh_test_result(test_result_id)
            polls += 1
            log.debug('Polled test result', polls=polls, in_progress=result.in_progress)

        if result.in_progress:
            log.warning('Test still in progress after timeout', timeout_ms=test_request.timeout)
        else:
            log.info('Test finished', success=result.success, polls=polls)
        return result

    async def refresh_test_result(self, test_result_id: str) -> TestResult:
        """Fetch the current state of a test run.

        Raises:
            MicrocksError: If Microcks does not answer with a 2xx status.
        """
        resp = await self._client().get(f'{self._base_url}/api/tests/{test_result_id}')
        if not resp.is_success:
            raise unexpected_status(
                E.TEST_RESULT_FETCH_FAILED,
                f'Error while fetching test result {test_result_id}',
                resp.status_code,
                _body(resp),
            )
        return TestResult.model_validate(resp.json())

    async def get_messages_for_test_case(
        self,
        test_result: TestResult,
        operation_name: str,
    ) -> list[RequestResponsePair]:
        """Get the request/response pairs exchanged while testing an operation.

        Args:
            test_result: Result of the test run.
            operation_name: Full operation name, e.g. ``GET /pastries``.

        Raises:
            MicrocksError: If Microcks does not answer with a 2xx status.
        """
        return _PAIRS.validate_python(await self._get_test_case_items(test_result, operation_name, 'messages'))

    async def get_event_messages_for_test_case(
        self,
        test_result: TestResult,
        operation_name: str,
    ) -> list[UnidirectionalEvent]:
        """Get the events received while testing an async operation.

        Args:
            test_result: Result of the test run.
            operation_name: Full operation name, e.g. ``SUBSCRIBE pastry/orders``.

        Raises:
            MicrocksError: If Microcks does not answer with a 2xx status.
        """
        return _EVENTS.validate_python(await self._get_test_case_items(test_result, operation_name, 'events'))

    async def _get_test_case_items(self, test_result: TestResult, operation_name: str, kind: str) -> Any:  # noqa: ANN401
        test_case_id = build_test_case_id(test_result, operation_name)
        resp = await self._client().get(f'{self._base_url}/api/tests/{test_result.id}/{kind}/{test_case_id}')
        if not resp.is_success:
            raise unexpected_status(
                E.MESSAGES_FETCH_FAILED,
                f'Error while fetching {kind} of test case {test_case_id}',
                resp.status_code,
                _body(resp),
            )
        return resp.json()
