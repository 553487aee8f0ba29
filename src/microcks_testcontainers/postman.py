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

"""The Microcks Postman runtime container, used by ``POSTMAN`` test runners."""

from __future__ import annotations

import asyncio
from typing import Any

from testcontainers.core.container import DockerContainer
from testcontainers.core.network import Network
from testcontainers.core.waiting_utils import wait_for_logs

from microcks_testcontainers.constants import POSTMAN_ALIAS, POSTMAN_READY_PATTERN
from microcks_testcontainers.environment import get_postman_image, get_startup_timeout
from microcks_testcontainers.logging import get_logger

logger = get_logger(__name__)


class MicrocksPostmanContainer(DockerContainer):
    """Postman runtime reachable as ``postman`` on the shared network."""

    def __init__(self, network: Network, image: str | None = None, **kwargs: Any) -> None:  # noqa: ANN401
        """Initialize the container on the given network."""
        super().__init__(image or get_postman_image(), **kwargs)
        self.with_network(network)
        self.with_network_aliases(POSTMAN_ALIAS)

    def start(self) -> MicrocksPostmanContainer:
        """Start the container and wait until it is ready."""
        logger.info('Starting Postman runtime container', image=self.image)
        super().start()
        wait_for_logs(self, POSTMAN_READY_PATTERN, timeout=get_startup_timeout())
        return self

    async def astart(self) -> MicrocksPostmanContainer:
        """Start the container in a worker thread."""
        await asyncio.to_thread(self.start)
        return self

    async def astop(self) -> None:
        """Stop the container in a worker thread."""
        await asyncio.to_thread(self.stop)
