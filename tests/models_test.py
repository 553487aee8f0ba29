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

"""Tests for the Microcks wire models."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from microcks_testcontainers.models import (
    RequestResponsePair,
    Secret,
    TestRequest,
    TestResult,
    TestRunnerType,
    UnidirectionalEvent,
    to_wire,
)


class TestTestRequest:
    """Tests for TestRequest."""

    def test_dumps_camel_case_without_none(self) -> None:
        """Only set fields are sent, with Microcks' camelCase names."""
        request = TestRequest(
            service_id='API Pastries:0.0.1',
            runner_type=TestRunnerType.OPEN_API_SCHEMA,
            test_endpoint='http://good-impl:3002',
            timeout=2000,
        )

        assert to_wire(request) == {
            'serviceId': 'API Pastries:0.0.1',
            'runnerType': 'OPEN_API_SCHEMA',
            'testEndpoint': 'http://good-impl:3002',
            'timeout': 2000,
        }

    def test_optional_fields(self) -> None:
        """Secret, filtered operations and headers use their wire names."""
        request = TestRequest(
            service_id='API Pastries:0.0.1',
            runner_type=TestRunnerType.POSTMAN,
            test_endpoint='http://impl:3003',
            timeout=3000,
            secret_name='pastries-secret',
            filtered_operations=['GET /pastries'],
            operations_headers={'GET /pastries': [{'name': 'x-api-key', 'values': 'abc'}]},
        )

        wire = to_wire(request)
        assert wire['secretName'] == 'pastries-secret'
        assert wire['filteredOperations'] == ['GET /pastries']
        assert wire['operationsHeaders'] == {'GET /pastries': [{'name': 'x-api-key', 'values': 'abc'}]}

    def test_timedelta_timeout_is_converted_to_millis(self) -> None:
        """A timedelta timeout is sent in milliseconds."""
        request = TestRequest(
            service_id='Pastry orders API:0.1.0',
            runner_type=TestRunnerType.ASYNC_API_SCHEMA,
            test_endpoint='ws://impl:4001/websocket',
            timeout=timedelta(seconds=5),
        )

        assert request.timeout == 5000

    def test_zero_timeout_is_accepted(self) -> None:
        """A zero timeout means a single fetch of the result."""
        request = TestRequest(
            service_id='API Pastries:0.0.1',
            runner_type=TestRunnerType.HTTP,
            test_endpoint='http://impl',
            timeout=0,
        )

        assert to_wire(request)['timeout'] == 0

    def test_negative_timeout_is_rejected(self) -> None:
        """A negative timeout is rejected."""
        with pytest.raises(ValidationError):
            TestRequest(
                service_id='API Pastries:0.0.1',
                runner_type=TestRunnerType.HTTP,
                test_endpoint='http://impl',
                timeout=-1,
            )

    def test_populates_by_alias(self) -> None:
        """Camel case keys are accepted as well."""
        request = TestRequest.model_validate(
            {
                'serviceId': 'API Pastries:0.0.1',
                'runnerType': 'HTTP',
                'testEndpoint': 'http://impl',
                'timeout': 100,
            }
        )
        assert request.runner_type is TestRunnerType.HTTP


def test_secret_dumps_camel_case() -> None:
    """Secret fields use their wire names and unset fields are omitted."""
    secret = Secret(name='my-secret', token='abc', token_header='x-token', ca_cert_pem='PEM')

    assert to_wire(secret) == {
        'name': 'my-secret',
        'token': 'abc',
        'tokenHeader': 'x-token',
        'caCertPem': 'PEM',
    }


def test_test_result_parses_server_payload() -> None:
    """A Microcks test result is parsed, unknown fields are ignored."""
    result = TestResult.model_validate(
        {
            'id': '65f1',
            'version': 0,
            'testNumber': 2,
            'testDate': 1700000000000,
            'testedEndpoint': 'http://bad-impl:3001',
            'serviceId': '65aa',
            'timeout': 2000,
            'elapsedTime': 120,
            'success': False,
            'inProgress': False,
            'runnerType': 'OPEN_API_SCHEMA',
            'authorizedClient': None,
            'operationsHeaders': {'GET /pastries': [{'name': 'x-api-key', 'values': 'abc'}]},
            'testCaseResults': [
                {
                    'success': False,
                    'elapsedTime': 40,
                    'operationName': 'GET /pastries',
                    'testStepResults': [
                        {
                            'success': False,
                            'elapsedTime': 40,
                            'requestName': 'pastries_json',
                            'message': 'object has missing required properties',
                        }
                    ],
                }
            ],
            'secretRef': {'secretId': 's1', 'name': 'my-secret'},
        }
    )

    assert result.test_number == 2
    assert result.runner_type is TestRunnerType.OPEN_API_SCHEMA
    assert result.test_case_results[0].operation_name == 'GET /pastries'
    assert result.test_case_results[0].test_step_results[0].message == 'object has missing required properties'
    assert result.secret_ref is not None
    assert result.secret_ref.secret_id == 's1'
    assert result.operations_headers == {'GET /pastries': [{'name': 'x-api-key', 'values': 'abc'}]}


def test_request_response_pair_parses_headers() -> None:
    """Exchanged messages keep their headers."""
    pair = RequestResponsePair.model_validate(
        {
            'request': {'name': 'Millefeuille', 'content': '', 'headers': [{'name': 'Accept', 'values': ['*/*']}]},
            'response': {'status': '200', 'mediaType': 'application/json', 'content': '{"name":"Millefeuille"}'},
        }
    )

    assert pair.request.headers is not None
    assert pair.request.headers[0].values == ['*/*']
    assert pair.response.media_type == 'application/json'


def test_unidirectional_event_parses_event_message() -> None:
    """Events expose their message content."""
    event = UnidirectionalEvent.model_validate(
        {'eventMessage': {'id': 'e1', 'mediaType': 'application/json', 'content': '{"status":"VALIDATED"}'}}
    )

    assert event.event_message.content == '{"status":"VALIDATED"}'
