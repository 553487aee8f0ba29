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

"""A Microcks container together with its optional sidecars.

All members join one network and find each other by alias::

    microcks               main container, API on 8080
    postman                Postman runtime, on 3000 (optional)
    microcks-async-minion  async minion, on 8081 (optional)

The discovery URLs are injected into the main container's environment when
the ensemble is built, so they are in place before anything starts.

Usage::

    with Network() as network:
        async with (
            MicrocksContainersEnsemble(network)
            .with_main_artifacts(['pastry-orders-asyncapi.yml'])
            .with_async_feature()
            .with_kafka_connection(KafkaConnection('kafka:19092'))
        ) as ensemble:
            topic = ensemble.async_minion_container.get_kafka_mock_topic(
                'Pastry orders API', '0.1.0', 'SUBSCRIBE pastry/orders'
            )
"""

from __future__ import annotations

import os
from collections.abc import Iterable

from testcontainers.core.network import Network

from microcks_testcontainers.async_minion import MicrocksAsyncMinionContainer
from microcks_testcontainers.connections import (
    AmazonServiceConnection,
    GenericConnection,
    KafkaConnection,
)
from microcks_testcontainers.constants import (
    ASYNC_MINION_ALIAS,
    MICROCKS_ALIAS,
    MICROCKS_ASYNC_MINION_HTTP_PORT,
    MICROCKS_HTTP_PORT,
    POSTMAN_ALIAS,
    POSTMAN_RUNTIME_PORT,
)
from microcks_testcontainers.container import MicrocksContainer
from microcks_testcontainers.errors import E, MicrocksError
from microcks_testcontainers.logging import get_logger
from microcks_testcontainers.models import Secret
from microcks_testcontainers.postman import MicrocksPostmanContainer

logger = get_logger(__name__)

_NATIVE_SUFFIX = '-native'

_Member = MicrocksContainer | MicrocksPostmanContainer | MicrocksAsyncMinionContainer


def async_minion_image_for(microcks_image: str) -> str:
    """Derive the async minion image matching a Microcks uber image.

    Native builds have no native minion counterpart, so the ``-native``
    suffix is dropped.

    Args:
        microcks_image: Image of the main container.

    Returns:
        The matching async minion image.
    """
    image = microcks_image.replace('microcks-uber', 'microcks-uber-async-minion')
    if image.endswith(_NATIVE_SUFFIX):
        image = image[: -len(_NATIVE_SUFFIX)]
    return image


class MicrocksContainersEnsemble:
    """Builds, starts and stops Microcks with its optional sidecars.

    Args:
        network: Network shared by every member of the ensemble.
        image: Image of the main container. Defaults to ``MICROCKS_IMAGE``
            or the pinned Microcks release.
    """

    def __init__(self, network: Network, image: str | None = None) -> None:
        """Initialize the ensemble on the given network."""
        self._network = network
        self._microcks = MicrocksContainer(image)
        self._microcks.with_network(network)
        self._microcks.with_network_aliases(MICROCKS_ALIAS)
        self._microcks.with_env('POSTMAN_RUNNER_URL', f'http://{POSTMAN_ALIAS}:{POSTMAN_RUNTIME_PORT}')
        self._microcks.with_env('TEST_CALLBACK_URL', f'http://{MICROCKS_ALIAS}:{MICROCKS_HTTP_PORT}')
        self._microcks.with_env('ASYNC_MINION_URL', f'http://{ASYNC_MINION_ALIAS}:{MICROCKS_ASYNC_MINION_HTTP_PORT}')
        self._postman: MicrocksPostmanContainer | None = None
        self._async_minion: MicrocksAsyncMinionContainer | None = None
        self._started: list[_Member] = []

    @property
    def microcks_container(self) -> MicrocksContainer:
        """The main Microcks container."""
        return self._microcks

    @property
    def postman_container(self) -> MicrocksPostmanContainer | None:
        """The Postman runtime container, if enabled."""
        return self._postman

    @property
    def async_minion_container(self) -> MicrocksAsyncMinionContainer | None:
        """The async minion container, if enabled."""
        return self._async_minion

    def with_postman(self, image: str | None = None) -> MicrocksContainersEnsemble:
        """Enable the Postman runtime, needed by ``POSTMAN`` test runners."""
        self._postman = MicrocksPostmanContainer(self._network, image)
        return self

    def with_async_feature(self, image: str | None = None) -> MicrocksContainersEnsemble:
        """Enable the async minion.

        Args:
            image: Image of the async minion. Derived from the main image
                when omitted.
        """
        self._async_minion = MicrocksAsyncMinionContainer(
            self._network,
            image or async_minion_image_for(self._microcks.image_name),
        )
        return self

    def _require_async_minion(self) -> MicrocksAsyncMinionContainer:
        if self._async_minion is None:
            raise MicrocksError(
                code=E.ASYNC_FEATURE_DISABLED,
                message='Async feature must have been enabled first',
                hint='Call with_async_feature() before configuring broker connections.',
            )
        return self._async_minion

    def with_kafka_connection(self, connection: KafkaConnection) -> MicrocksContainersEnsemble:
        """Connect the async minion to a Kafka broker."""
        self._require_async_minion().with_kafka_connection(connection)
        return self

    def with_mqtt_connection(self, connection: GenericConnection) -> MicrocksContainersEnsemble:
        """Connect the async minion to an MQTT broker."""
        self._require_async_minion().with_mqtt_connection(connection)
        return self

    def with_amqp_connection(self, connection: GenericConnection) -> MicrocksContainersEnsemble:
        """Connect the async minion to an AMQP broker."""
        self._require_async_minion().with_amqp_connection(connection)
        return self

    def with_amazon_sqs_connection(self, connection: AmazonServiceConnection) -> MicrocksContainersEnsemble:
        """Connect the async minion to Amazon SQS."""
        self._require_async_minion().with_amazon_sqs_connection(connection)
        return self

    def with_amazon_sns_connection(self, connection: AmazonServiceConnection) -> MicrocksContainersEnsemble:
        """Connect the async minion to Amazon SNS."""
        self._require_async_minion().with_amazon_sns_connection(connection)
        return self

    def with_main_artifacts(self, artifacts: Iterable[str | os.PathLike[str]]) -> MicrocksContainersEnsemble:
        """Declare files to import as primary artifacts once started."""
        self._microcks.with_main_artifacts(artifacts)
        return self

    def with_secondary_artifacts(self, artifacts: Iterable[str | os.PathLike[str]]) -> MicrocksContainersEnsemble:
        """Declare files to import as secondary artifacts once started."""
        self._microcks.with_secondary_artifacts(artifacts)
        return self

    def with_main_remote_artifacts(self, urls: Iterable[str]) -> MicrocksContainersEnsemble:
        """Declare URLs Microcks downloads as primary artifacts once started."""
        self._microcks.with_main_remote_artifacts(urls)
        return self

    def with_secondary_remote_artifacts(self, urls: Iterable[str]) -> MicrocksContainersEnsemble:
        """Declare URLs Microcks downloads as secondary artifacts once started."""
        self._microcks.with_secondary_remote_artifacts(urls)
        return self

    def with_secret(self, secret: Secret) -> MicrocksContainersEnsemble:
        """Declare a secret to create once started."""
        self._microcks.with_secret(secret)
        return self

    def _members(self) -> list[_Member]:
        members: list[_Member] = [self._microcks]
        if self._postman is not None:
            members.append(self._postman)
        if self._async_minion is not None:
            members.append(self._async_minion)
        return members

    async def start(self) -> MicrocksContainersEnsemble:
        """Start Microcks (importing artifacts), then each enabled sidecar.

        If a member fails to start, the members already started are stopped
        before the error propagates.
        """
        logger.info(
            'Starting Microcks ensemble',
            postman=self._postman is not None,
            async_minion=self._async_minion is not None,
        )
        for member in self._members():
            try:
                await member.astart()
            except BaseException:
                await self._stop_started()
                raise
            self._started.append(member)
        return self

    async def stop(self) -> None:
        """Stop every started member of the ensemble, in start order.

        Every member gets stopped even if an earlier one fails to.

        Raises:
            Exception: The first error raised while stopping a member.
        """
        errors = await self._stop_started()
        logger.info('Stopped Microcks ensemble', failures=len(errors))
        if errors:
            raise errors[0]

    async def _stop_started(self) -> list[Exception]:
        started, self._started = self._started, []
        errors: list[Exception] = []
        for member in started:
            try:
                await member.astop()
            except Exception as e:
                logger.warning('Failed to stop ensemble member', image=member.image, error=e)
                errors.append(e)
        return errors

    async def __aenter__(self) -> MicrocksContainersEnsemble:
        return await self.start()

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()
