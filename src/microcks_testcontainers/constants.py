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

"""Well-known ports, images, aliases and log patterns of Microcks containers."""

from typing import Final

# Ports.
MICROCKS_HTTP_PORT: Final[int] = 8080
MICROCKS_GRPC_PORT: Final[int] = 9090
MICROCKS_ASYNC_MINION_HTTP_PORT: Final[int] = 8081
POSTMAN_RUNTIME_PORT: Final[int] = 3000

# Default images.
DEFAULT_MICROCKS_IMAGE: Final[str] = 'quay.io/microcks/microcks-uber:1.8.1'
DEFAULT_ASYNC_MINION_IMAGE: Final[str] = 'quay.io/microcks/microcks-uber-async-minion:1.8.1'
DEFAULT_POSTMAN_IMAGE: Final[str] = 'quay.io/microcks/microcks-postman-runtime:latest'

# Aliases on the shared ensemble network.
MICROCKS_ALIAS: Final[str] = 'microcks'
ASYNC_MINION_ALIAS: Final[str] = 'microcks-async-minion'
POSTMAN_ALIAS: Final[str] = 'postman'

# Readiness log patterns (regular expressions).
MICROCKS_READY_PATTERN: Final[str] = r'.*Started MicrocksApplication.*'
ASYNC_MINION_READY_PATTERN: Final[str] = r'.*Profile prod activated\..*'
POSTMAN_READY_PATTERN: Final[str] = r'.*postman-runtime wrapper listening on port.*'

# Delay between two polls of a running test, in seconds.
DEFAULT_TEST_POLL_INTERVAL: Final[float] = 0.25

# Maximum time to wait for a readiness log line, in seconds.
DEFAULT_STARTUP_TIMEOUT: Final[float] = 120.0

# Timeout applied to a single REST call against Microcks, in seconds.
DEFAULT_HTTP_TIMEOUT: Final[float] = 30.0
