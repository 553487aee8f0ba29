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

"""The Microcks async minion container.

The async minion publishes mock messages of AsyncAPI operations on
WebSocket endpoints and, once connected to brokers, on Kafka, MQTT, AMQP,
Amazon SQS and Amazon SNS destinations. It finds the main Microcks container
through the ``microcks`` alias of the shared network.
"""

from __future__ import annotations

import asyncio
from typing import Any

from testcontainers.core.container import DockerContainer
from testcontainers.core.network import Network
from testcontainers.core.waiting_utils import wait_for_logs

from microcks_testcontainers import endpoints
from microcks_testcontainers.connections import (
    AmazonServiceConnection,
    GenericConnection,
    KafkaConnection,
)
from microcks_testcontainers.constants import (
    ASYNC_MINION_ALIAS,
    ASYNC_MINION_READY_PATTERN,
    MICROCKS_ALIAS,
    MICROCKS_ASYNC_MINION_HTTP_PORT,
    MICROCKS_HTTP_PORT,
)
from microcks_testcontainers.environment import get_async_minion_image, get_startup_timeout
from microcks_testcontainers.logging import get_logger

logger = get_logger(__name__)


class MicrocksAsyncMinionContainer(DockerContainer):
    """Testcontainers wrapper around the Microcks async minion image.

    Args:
        network: Network shared with the main Microcks container.
        image: Image to run. Defaults to ``MICROCKS_ASYNC_MINION_IMAGE`` or
            the pinned release.
        **kwargs: Passed to ``DockerContainer``.
    """

    def __init__(self, network: Network, image: str | None = None, **kwargs: Any) -> None:  # noqa: ANN401
        """Initialize the container on the given network."""
        super().__init__(image or get_async_minion_image(), **kwargs)
        self._protocols = ''
        self.with_network(network)
        self.with_network_aliases(ASYNC_MINION_ALIAS)
        self.with_env('MICROCKS_HOST_PORT', f'{MICROCKS_ALIAS}:{MICROCKS_HTTP_PORT}')
        self.with_exposed_ports(MICROCKS_ASYNC_MINION_HTTP_PORT)

    @property
    def async_protocols(self) -> str:
        """Comma-prefixed list of enabled broker protocols, e.g. ``,KAFKA,MQTT``."""
        return self._protocols

    def _add_protocol(self, protocol: str) -> None:
        if f',{protocol}' not in self._protocols:
            self._protocols += f',{protocol}'
        self.with_env('ASYNC_PROTOCOLS', self._protocols)

    def with_kafka_connection(self, connection: KafkaConnection) -> MicrocksAsyncMinionContainer:
        """Connect to a Kafka broker to publish mock messages on topics."""
        self._add_protocol('KAFKA')
        self.with_env('KAFKA_BOOTSTRAP_SERVER', connection.bootstrap_servers)
        return self

    def with_mqtt_connection(self, connection: GenericConnection) -> MicrocksAsyncMinionContainer:
        """Connect to an MQTT broker to publish mock messages on topics."""
        self._add_protocol('MQTT')
        self.with_env('MQTT_SERVER', connection.server)
        self.with_env('MQTT_USERNAME', connection.username)
        self.with_env('MQTT_PASSWORD', connection.password)
        return self

    def with_amqp_connection(self, connection: GenericConnection) -> MicrocksAsyncMinionContainer:
        """Connect to an AMQP broker to publish mock messages on destinations."""
        self._add_protocol('AMQP')
        self.with_env('AMQP_SERVER', connection.server)
        self.with_env('AMQP_USERNAME', connection.username)
        self.with_env('AMQP_PASSWORD', connection.password)
        return self

    def with_amazon_sqs_connection(self, connection: AmazonServiceConnection) -> MicrocksAsyncMinionContainer:
        """Connect to Amazon SQS to publish mock messages on queues."""
        self._add_protocol('SQS')
        self._with_amazon_env('SQS', connection)
        return self

    def with_amazon_sns_connection(self, connection: AmazonServiceConnection) -> MicrocksAsyncMinionContainer:
        """Connect to Amazon SNS to publish mock messages on topics."""
        self._add_protocol('SNS')
        self._with_amazon_env('SNS', connection)
        return self

    def _with_amazon_env(self, service: str, connection: AmazonServiceConnection) -> None:
        self.with_env(f'AWS_{service}_REGION', connection.region)
        self.with_env('AWS_ACCESS_KEY_ID', connection.access_key)
        self.with_env('AWS_SECRET_ACCESS_KEY', connection.secret_key)
        if connection.endpoint_override is not None:
            self.with_env(f'AWS_{service}_ENDPOINT', connection.endpoint_override)

    def start(self) -> MicrocksAsyncMinionContainer:
        """Start the container and wait until it is ready."""
        logger.info('Starting async minion container', image=self.image, protocols=self._protocols or None)
        super().start()
        wait_for_logs(self, ASYNC_MINION_READY_PATTERN, timeout=get_startup_timeout())
        return self

    async def astart(self) -> MicrocksAsyncMinionContainer:
        """Start the container in a worker thread."""
        await asyncio.to_thread(self.start)
        return self

    async def astop(self) -> None:
        """Stop the container in a worker thread."""
        await asyncio.to_thread(self.stop)

    def _host_port(self) -> tuple[str, str]:
        return self.get_container_host_ip(), str(self.get_exposed_port(MICROCKS_ASYNC_MINION_HTTP_PORT))

    def get_ws_mock_endpoint(self, service: str, version: str, operation_name: str) -> str:
        """WebSocket URL publishing the mock messages of an operation."""
        return endpoints.ws_mock_endpoint(*self._host_port(), service, version, operation_name)

    def get_kafka_mock_topic(self, service: str, version: str, operation_name: str) -> str:
        """Kafka topic receiving the mock messages of an operation."""
        return endpoints.kafka_mock_topic(service, version, operation_name)

    def get_mqtt_mock_topic(self, service: str, version: str, operation_name: str) -> str:
        """MQTT topic receiving the mock messages of an operation."""
        return endpoints.mqtt_mock_topic(service, version, operation_name)

    def get_amqp_mock_destination(self, service: str, version: str, operation_name: str) -> str:
        """AMQP destination receiving the mock messages of an operation."""
        return endpoints.amqp_mock_destination(service, version, operation_name)

    def get_amazon_sqs_mock_queue(self, service: str, version: str, operation_name: str) -> str:
        """Amazon SQS queue receiving the mock messages of an operation."""
        return endpoints.amazon_service_mock_destination(service, version, operation_name)

    def get_amazon_sns_mock_topic(self, service: str, version: str, operation_name: str) -> str:
        """Amazon SNS topic receiving the mock messages of an operation."""
        return endpoints.amazon_service_mock_destination(service, version, operation_name)
