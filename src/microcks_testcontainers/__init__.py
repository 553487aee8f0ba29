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

"""Microcks for Testcontainers.

Embeds Microcks in tests as throwaway containers: serve mocks derived from
API contracts, and run conformance tests of real implementations against
the same contracts.

    - :class:`MicrocksContainer`: the main Microcks container
    - :class:`MicrocksContainersEnsemble`: Microcks plus Postman runtime and
      async minion sidecars on a shared network
    - :class:`MicrocksClient`: async client of the Microcks REST API
"""

from microcks_testcontainers.async_minion import MicrocksAsyncMinionContainer
from microcks_testcontainers.client import MicrocksClient
from microcks_testcontainers.connections import (
    AmazonServiceConnection,
    GenericConnection,
    KafkaConnection,
)
from microcks_testcontainers.container import MicrocksContainer
from microcks_testcontainers.ensemble import MicrocksContainersEnsemble
from microcks_testcontainers.errors import ErrorCode, MicrocksError
from microcks_testcontainers.models import (
    EventMessage,
    Header,
    Request,
    RequestResponsePair,
    Response,
    Secret,
    SecretRef,
    TestCaseResult,
    TestRequest,
    TestResult,
    TestRunnerType,
    TestStepResult,
    UnidirectionalEvent,
)
from microcks_testcontainers.postman import MicrocksPostmanContainer


def package_name() -> str:
    """Get the fully qualified package name."""
    return 'microcks_testcontainers'


__all__ = [
    'AmazonServiceConnection',
    'ErrorCode',
    'EventMessage',
    'GenericConnection',
    'Header',
    'KafkaConnection',
    'MicrocksAsyncMinionContainer',
    'MicrocksClient',
    'MicrocksContainer',
    'MicrocksContainersEnsemble',
    'MicrocksError',
    'MicrocksPostmanContainer',
    'Request',
    'RequestResponsePair',
    'Response',
    'Secret',
    'SecretRef',
    'TestCaseResult',
    'TestRequest',
    'TestResult',
    'TestRunnerType',
    'TestStepResult',
    'UnidirectionalEvent',
    'package_name',
]
