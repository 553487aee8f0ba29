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

"""Mock endpoint, topic and queue names exposed by Microcks.

These are pure functions: the containers only supply their host and mapped
port. Async operation names as written in AsyncAPI documents may carry an
action prefix (``SUBSCRIBE pastry/orders``); only the channel part after the
first space is used.

Examples::

    >>> rest_mock_endpoint('localhost', 8080, 'API Pastries', '0.0.1')
    'http://localhost:8080/rest/API Pastries/0.0.1'
    >>> kafka_mock_topic('Pastry orders API', '0.1.0', 'SUBSCRIBE pastry/orders')
    'PastryordersAPI-0.1.0-pastry-orders'
"""

import re
from urllib.parse import quote_plus

from microcks_testcontainers.models import TestResult

_WHITESPACE = re.compile(r'\s')


def _strip_whitespace(value: str) -> str:
    return _WHITESPACE.sub('', value)


def _service_part(service: str) -> str:
    return _strip_whitespace(service).replace('-', '')


def operation_channel(operation_name: str) -> str:
    """Drop the ``SUBSCRIBE``/``PUBLISH`` action prefix of an operation name.

    Args:
        operation_name: Operation name, with or without action prefix.

    Returns:
        The part after the first space, or the name unchanged.
    """
    if ' ' in operation_name:
        return operation_name.split(' ')[1]
    return operation_name


def rest_mock_endpoint(host: str, port: int | str, service: str, version: str) -> str:
    """Base URL of the REST mocks of a service."""
    return f'http://{host}:{port}/rest/{service}/{version}'


def soap_mock_endpoint(host: str, port: int | str, service: str, version: str) -> str:
    """Base URL of the SOAP mocks of a service."""
    return f'http://{host}:{port}/soap/{service}/{version}'


def graphql_mock_endpoint(host: str, port: int | str, service: str, version: str) -> str:
    """Base URL of the GraphQL mocks of a service."""
    return f'http://{host}:{port}/graphql/{service}/{version}'


def grpc_mock_endpoint(host: str, port: int | str) -> str:
    """Target of the gRPC mocks; all gRPC services share one port."""
    return f'grpc://{host}:{port}'


def ws_mock_endpoint(host: str, port: int | str, service: str, version: str, operation_name: str) -> str:
    """WebSocket URL publishing the mock messages of an operation.

    Whitespace in the service name and version is replaced by ``+``.
    """
    service_part = _WHITESPACE.sub('+', service)
    version_part = _WHITESPACE.sub('+', version)
    return f'ws://{host}:{port}/api/ws/{service_part}/{version_part}/{operation_channel(operation_name)}'


def kafka_mock_topic(service: str, version: str, operation_name: str) -> str:
    """Kafka topic receiving the mock messages of an operation."""
    operation = operation_channel(operation_name).replace('/', '-')
    return f'{_service_part(service)}-{version}-{operation}'


def mqtt_mock_topic(service: str, version: str, operation_name: str) -> str:
    """MQTT topic receiving the mock messages of an operation."""
    return f'{_service_part(service)}-{_strip_whitespace(version)}-{operation_channel(operation_name)}'


def amqp_mock_destination(service: str, version: str, operation_name: str) -> str:
    """AMQP destination receiving the mock messages of an operation."""
    return f'{_service_part(service)}-{_strip_whitespace(version)}-{operation_channel(operation_name)}'


def amazon_service_mock_destination(service: str, version: str, operation_name: str) -> str:
    """SQS queue or SNS topic receiving the mock messages of an operation.

    Amazon names do not allow dots, so they are removed from the version.
    """
    version_part = _strip_whitespace(version).replace('.', '')
    operation = operation_channel(operation_name).replace('/', '-')
    return f'{_service_part(service)}-{version_part}-{operation}'


def build_test_case_id(test_result: TestResult, operation_name: str) -> str:
    """Identifier Microcks gives to the test case of an operation.

    Slashes in the operation name become ``!`` before URL encoding, so the
    identifier can be used as a single path segment.

    Args:
        test_result: Result of the test run.
        operation_name: Full operation name, e.g. ``GET /pastries``.

    Returns:
        ``<test result id>-<test number>-<encoded operation>``.
    """
    operation = quote_plus(operation_name.replace('/', '!'))
    return f'{test_result.id}-{test_result.test_number}-{operation}'

