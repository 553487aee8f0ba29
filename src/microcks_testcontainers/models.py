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

"""Wire models exchanged with the Microcks REST API.

Microcks speaks camelCase JSON. Models are populated by field name or by
alias and always dumped with ``by_alias=True`` (see :func:`to_wire`).
Models describing server responses ignore fields they do not know about so
that newer Microcks versions keep working.

The ``__test__ = False`` markers keep pytest from collecting ``Test*``
classes when they are imported into test modules.
"""

import sys
from datetime import timedelta
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

if sys.version_info < (3, 11):
    from strenum import StrEnum
else:
    from enum import StrEnum


class TestRunnerType(StrEnum):
    """Strategies Microcks can use to test an endpoint."""

    __test__ = False

    HTTP = 'HTTP'
    SOAP_HTTP = 'SOAP_HTTP'
    SOAP_UI = 'SOAP_UI'
    POSTMAN = 'POSTMAN'
    OPEN_API_SCHEMA = 'OPEN_API_SCHEMA'
    ASYNC_API_SCHEMA = 'ASYNC_API_SCHEMA'
    GRPC_PROTOBUF = 'GRPC_PROTOBUF'
    GRAPHQL_SCHEMA = 'GRAPHQL_SCHEMA'


class _WireModel(BaseModel):
    """Base for request payloads: strict about unknown fields."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra='forbid', populate_by_name=True, alias_generator=to_camel)


class _ServerModel(BaseModel):
    """Base for server responses: tolerant about unknown fields."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra='ignore', populate_by_name=True, alias_generator=to_camel)


class Secret(_WireModel):
    """Credentials to reach a remote Git repository, test endpoint or broker."""

    name: str
    description: str | None = None
    username: str | None = None
    password: str | None = None
    token: str | None = None
    token_header: str | None = None
    ca_cert_pem: str | None = None


class SecretRef(_ServerModel):
    """Reference to a secret stored in Microcks."""

    secret_id: str | None = None
    name: str | None = None


class TestRequest(_WireModel):
    """Specification of a conformance test to run.

    Attributes:
        service_id: ``<service name>:<version>`` of the API under test.
        test_endpoint: URL of the implementation, as reachable from Microcks.
        runner_type: Testing strategy.
        timeout: Test timeout in milliseconds. A ``timedelta`` is accepted.
        secret_name: Name of a secret to use while calling the endpoint.
        filtered_operations: Restrict the test to these operations.
        operations_headers: Extra headers per operation name.
    """

    __test__: ClassVar[bool] = False

    service_id: str
    test_endpoint: str
    runner_type: TestRunnerType
    timeout: int = Field(ge=0)
    secret_name: str | None = None
    filtered_operations: list[str] | None = None
    operations_headers: dict[str, Any] | None = None

    @field_validator('timeout', mode='before')
    @classmethod
    def _timeout_in_millis(cls, value: Any) -> Any:
        if isinstance(value, timedelta):
            return int(value.total_seconds() * 1000)
        return value


class TestStepResult(_ServerModel):
    """Outcome of one request or event check within a test case."""

    __test__: ClassVar[bool] = False

    success: bool = False
    elapsed_time: int | None = None
    request_name: str | None = None
    event_message_name: str | None = None
    message: str | None = None


class TestCaseResult(_ServerModel):
    """Outcome of the tests of one operation."""

    __test__: ClassVar[bool] = False

    success: bool = False
    elapsed_time: int | None = None
    operation_name: str
    test_step_results: list[TestStepResult] = Field(default_factory=list)


class TestResult(_ServerModel):
    """State of a conformance test run, as reported by Microcks."""

    __test__: ClassVar[bool] = False

    id: str
    version: int | None = None
    test_number: int | None = None
    test_date: int | None = None
    tested_endpoint: str | None = None
    service_id: str | None = None
    timeout: int | None = None
    elapsed_time: int | None = None
    success: bool = False
    in_progress: bool = False
    runner_type: TestRunnerType | None = None
    operations_headers: dict[str, Any] | None = None
    test_case_results: list[TestCaseResult] = Field(default_factory=list)
    secret_ref: SecretRef | None = None


class Header(_ServerModel):
    """A header of an exchanged message."""

    name: str
    values: list[str] = Field(default_factory=list)


class Message(_ServerModel):
    """Fields shared by every message Microcks records."""

    id: str | None = None
    name: str | None = None
    content: str | None = None
    operation_id: str | None = None
    test_case_id: str | None = None
    source_artifact: str | None = None
    headers: list[Header] | None = None


class Request(Message):
    """A request sent by Microcks to the tested endpoint."""

    query_parameters: list[dict[str, Any]] | None = None


class Response(Message):
    """A response received by Microcks from the tested endpoint."""

    status: str | None = None
    media_type: str | None = None
    dispatch_criteria: str | None = None
    is_fault: bool | None = None


class EventMessage(Message):
    """An asynchronous message received by Microcks during a test."""

    media_type: str | None = None
    dispatch_criteria: str | None = None


class RequestResponsePair(_ServerModel):
    """A request and the response it produced."""

    request: Request
    response: Response


class UnidirectionalEvent(_ServerModel):
    """An event captured on a broker or WebSocket channel."""

    event_message: EventMessage


def to_wire(model: BaseModel) -> dict[str, Any]:
    """Dump a model to the camelCase JSON-ready dict Microcks expects.

    Args:
        model: The model to dump.

    Returns:
        A dict without ``None`` values, keyed by aliases.
    """
    return model.model_dump(mode='json', by_alias=True, exclude_none=True)
