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

"""Environment-driven configuration.

Every knob can be left alone: the accessors below fall back to the defaults
from :mod:`microcks_testcontainers.constants` when a variable is unset or
holds a value that cannot be used.
"""

import os
import sys

from microcks_testcontainers.constants import (
    DEFAULT_ASYNC_MINION_IMAGE,
    DEFAULT_MICROCKS_IMAGE,
    DEFAULT_POSTMAN_IMAGE,
    DEFAULT_STARTUP_TIMEOUT,
    DEFAULT_TEST_POLL_INTERVAL,
)

if sys.version_info < (3, 11):
    from strenum import StrEnum
else:
    from enum import StrEnum


class EnvVar(StrEnum):
    """Enumerates all the environment variables read by this library."""

    MICROCKS_IMAGE = 'MICROCKS_IMAGE'
    MICROCKS_ASYNC_MINION_IMAGE = 'MICROCKS_ASYNC_MINION_IMAGE'
    MICROCKS_POSTMAN_IMAGE = 'MICROCKS_POSTMAN_IMAGE'
    MICROCKS_TEST_POLL_INTERVAL = 'MICROCKS_TEST_POLL_INTERVAL'
    MICROCKS_STARTUP_TIMEOUT = 'MICROCKS_STARTUP_TIMEOUT'


def _positive_float(var: EnvVar, default: float) -> float:
    raw = os.getenv(var)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def get_microcks_image() -> str:
    """Returns the image used for the main Microcks container.

    Returns:
        The value of ``MICROCKS_IMAGE`` or the pinned default.
    """
    return os.getenv(EnvVar.MICROCKS_IMAGE) or DEFAULT_MICROCKS_IMAGE


def get_async_minion_image() -> str:
    """Returns the image used for the async minion container."""
    return os.getenv(EnvVar.MICROCKS_ASYNC_MINION_IMAGE) or DEFAULT_ASYNC_MINION_IMAGE


def get_postman_image() -> str:
    """Returns the image used for the Postman runtime container."""
    return os.getenv(EnvVar.MICROCKS_POSTMAN_IMAGE) or DEFAULT_POSTMAN_IMAGE


def get_test_poll_interval() -> float:
    """Returns the delay, in seconds, between two polls of a running test."""
    return _positive_float(EnvVar.MICROCKS_TEST_POLL_INTERVAL, DEFAULT_TEST_POLL_INTERVAL)


def get_startup_timeout() -> float:
    """Returns how long, in seconds, to wait for a container readiness log."""
    return _positive_float(EnvVar.MICROCKS_STARTUP_TIMEOUT, DEFAULT_STARTUP_TIMEOUT)
