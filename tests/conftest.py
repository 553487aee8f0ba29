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

"""Shared fixtures: a scripted Microcks HTTP stub and a Docker-less testcontainers."""

from collections.abc import Callable, Generator
from pathlib import Path
from unittest import mock
from unittest.mock import MagicMock

import httpx
import pytest
from testcontainers.core.container import DockerContainer
from testcontainers.core.network import Network

from microcks_testcontainers.http_client import clear_client_cache

RESOURCES_DIR = Path(__file__).parent / 'resources'

# Host ports the fake Docker daemon maps container ports to.
MAPPED_PORTS = {8080: 32768, 9090: 32769, 8081: 32770}

Handler = Callable[[httpx.Request], httpx.Response]


class MicrocksStub:
    """Records requests and answers them with a per-test handler."""

    def __init__(self, handler: Handler) -> None:
        """Initialize the stub with the handler producing responses."""
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        """Record and answer a request."""
        self.requests.append(request)
        return self.handler(request)

    def client(self) -> httpx.AsyncClient:
        """Build an async client routed to this stub."""
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture(autouse=True)
def clear_cache() -> None:
    """Forget cached HTTP clients between tests."""
    clear_client_cache()


@pytest.fixture
def artifact(tmp_path: Path) -> Path:
    """A small OpenAPI artifact on disk."""
    path = tmp_path / 'apipastries-openapi.yaml'
    path.write_text('openapi: 3.0.2\ninfo:\n  title: API Pastries\n  version: 0.0.1\n')
    return path


@pytest.fixture
def fake_docker() -> Generator[MagicMock, None, None]:
    """Patch testcontainers so containers 'start' without a Docker daemon.

    Yields:
        The mock standing in for ``DockerContainer.start``.
    """
    with (
        mock.patch('testcontainers.core.container.DockerClient'),
        mock.patch.object(DockerContainer, 'start', autospec=True) as start,
        mock.patch.object(DockerContainer, 'stop', autospec=True),
        mock.patch.object(DockerContainer, 'get_wrapped_container', return_value=MagicMock()),
        mock.patch.object(DockerContainer, 'get_container_host_ip', return_value='localhost'),
        mock.patch.object(DockerContainer, 'get_exposed_port', side_effect=lambda port: MAPPED_PORTS[port]),
        mock.patch('microcks_testcontainers.container.wait_for_logs'),
        mock.patch('microcks_testcontainers.async_minion.wait_for_logs'),
        mock.patch('microcks_testcontainers.postman.wait_for_logs'),
    ):
        yield start


@pytest.fixture
def network() -> MagicMock:
    """A stand-in for a created testcontainers network."""
    fake = MagicMock(spec=Network)
    fake.name = 'microcks-test-network'
    return fake


@pytest.fixture
def created_stub() -> MicrocksStub:
    """A Microcks stub answering ``201 Created`` to everything."""
    return MicrocksStub(lambda request: httpx.Response(201))
