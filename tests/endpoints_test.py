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

"""Tests for mock endpoint, topic and queue names."""

import pytest

from microcks_testcontainers.endpoints import (
    amazon_service_mock_destination,
    amqp_mock_destination,
    build_test_case_id,
    graphql_mock_endpoint,
    grpc_mock_endpoint,
    kafka_mock_topic,
    mqtt_mock_topic,
    operation_channel,
    rest_mock_endpoint,
    soap_mock_endpoint,
    ws_mock_endpoint,
)
from microcks_testcontainers.models import TestResult

# =============================================================================
# Synchronous protocols
# =============================================================================


def test_rest_mock_endpoint() -> None:
    """REST mocks live under /rest/{service}/{version}."""
    assert rest_mock_endpoint('localhost', 32768, 'API Pastries', '0.0.1') == (
        'http://localhost:32768/rest/API Pastries/0.0.1'
    )


def test_soap_mock_endpoint() -> None:
    """SOAP mocks live under /soap/{service}/{version}."""
    assert soap_mock_endpoint('localhost', 32768, 'HelloService Mock', '0.9') == (
        'http://localhost:32768/soap/HelloService Mock/0.9'
    )


def test_graphql_mock_endpoint() -> None:
    """GraphQL mocks live under /graphql/{service}/{version}."""
    assert graphql_mock_endpoint('127.0.0.1', '40000', 'Movie Graph API', '1.0') == (
        'http://127.0.0.1:40000/graphql/Movie Graph API/1.0'
    )


def test_grpc_mock_endpoint() -> None:
    """gRPC mocks share one target for every service."""
    assert grpc_mock_endpoint('localhost', 32769) == 'grpc://localhost:32769'


# =============================================================================
# Async protocols
# =============================================================================


@pytest.mark.parametrize(
    ('operation_name', 'expected'),
    [
        ('SUBSCRIBE pastry/orders', 'pastry/orders'),
        ('PUBLISH user/signedup', 'user/signedup'),
        ('pastry/orders', 'pastry/orders'),
    ],
)
def test_operation_channel(operation_name: str, expected: str) -> None:
    """The action prefix is dropped when present."""
    assert operation_channel(operation_name) == expected


def test_ws_mock_endpoint_replaces_whitespace_with_plus() -> None:
    """Whitespace in service and version becomes '+' in WebSocket URLs."""
    assert ws_mock_endpoint('localhost', 32770, 'Pastry orders API', '0.1.0', 'SUBSCRIBE pastry/orders') == (
        'ws://localhost:32770/api/ws/Pastry+orders+API/0.1.0/pastry/orders'
    )


def test_kafka_mock_topic() -> None:
    """Kafka topics drop whitespace and dashes from the service, slashes become dashes."""
    assert kafka_mock_topic('Pastry orders API', '0.1.0', 'SUBSCRIBE pastry/orders') == (
        'PastryordersAPI-0.1.0-pastry-orders'
    )


def test_kafka_mock_topic_strips_dashes_from_service() -> None:
    """Dashes in the service name are removed."""
    assert kafka_mock_topic('user-signedup API', '1.0', 'user/signedup') == 'usersignedupAPI-1.0-user-signedup'


def test_mqtt_mock_topic_keeps_slashes() -> None:
    """MQTT topics keep the operation channel as-is."""
    assert mqtt_mock_topic('Pastry orders API', '0.1.0', 'SUBSCRIBE pastry/orders') == (
        'PastryordersAPI-0.1.0-pastry/orders'
    )


def test_mqtt_mock_topic_strips_whitespace_from_version() -> None:
    """Whitespace in the version is removed."""
    assert mqtt_mock_topic('Orders', '1.0 beta', 'orders') == 'Orders-1.0beta-orders'


def test_amqp_mock_destination() -> None:
    """AMQP destinations follow the MQTT naming."""
    assert amqp_mock_destination('Pastry orders API', '0.1.0', 'SUBSCRIBE pastry/orders') == (
        'PastryordersAPI-0.1.0-pastry/orders'
    )


def test_amazon_service_mock_destination_drops_dots() -> None:
    """Amazon names cannot contain dots or slashes."""
    assert amazon_service_mock_destination('Pastry orders API', '0.1.0', 'SUBSCRIBE pastry/orders') == (
        'PastryordersAPI-010-pastry-orders'
    )


# =============================================================================
# Test case identifiers
# =============================================================================


def test_build_test_case_id_encodes_operation() -> None:
    """Slashes become '!' and the operation is URL encoded."""
    result = TestResult(id='65f1', test_number=2)
    assert build_test_case_id(result, 'GET /pastries') == '65f1-2-GET+%21pastries'


def test_build_test_case_id_async_operation() -> None:
    """Async operation names keep their action prefix."""
    result = TestResult(id='abc', test_number=1)
    assert build_test_case_id(result, 'SUBSCRIBE pastry/orders') == 'abc-1-SUBSCRIBE+pastry%21orders'
