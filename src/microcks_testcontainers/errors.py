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

"""Structured errors raised by the Microcks containers and client.

Every error carries a named ``MICROCKS-*`` code so that a failing test
reports *which* step broke, plus the HTTP status and body when the failure
came from the Microcks REST API.

Code categories::

    MICROCKS-ARTIFACT-*     Artifact upload and download
    MICROCKS-SECRET-*       Secret creation
    MICROCKS-TEST-*         Conformance test launch and polling
    MICROCKS-MESSAGES-*     Exchanged messages retrieval
    MICROCKS-ASYNC-*        Async feature configuration
    MICROCKS-CONTAINER-*    Container lifecycle
    MICROCKS-EVENT-LOOP-*   Sync start called from a running event loop

Usage::

    from microcks_testcontainers.errors import E, MicrocksError

    raise MicrocksError(
        code=E.ARTIFACT_NOT_FOUND,
        message='Artifact specs/api.yaml does not exist or cannot be read',
    )
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Enumeration of all diagnostic codes."""

    ARTIFACT_NOT_FOUND = 'MICROCKS-ARTIFACT-NOT-FOUND'
    ARTIFACT_IMPORT_FAILED = 'MICROCKS-ARTIFACT-IMPORT-FAILED'
    ARTIFACT_DOWNLOAD_FAILED = 'MICROCKS-ARTIFACT-DOWNLOAD-FAILED'
    SECRET_CREATION_FAILED = 'MICROCKS-SECRET-CREATION-FAILED'
    TEST_LAUNCH_FAILED = 'MICROCKS-TEST-LAUNCH-FAILED'
    TEST_RESULT_FETCH_FAILED = 'MICROCKS-TEST-RESULT-FETCH-FAILED'
    MESSAGES_FETCH_FAILED = 'MICROCKS-MESSAGES-FETCH-FAILED'
    ASYNC_FEATURE_DISABLED = 'MICROCKS-ASYNC-FEATURE-DISABLED'
    CONTAINER_NOT_STARTED = 'MICROCKS-CONTAINER-NOT-STARTED'
    EVENT_LOOP_RUNNING = 'MICROCKS-EVENT-LOOP-RUNNING'


# Short alias.
E = ErrorCode


class MicrocksError(Exception):
    """An error raised by a Microcks container or client operation.

    Attributes:
        code: The diagnostic code.
        message: Human-readable description of what went wrong.
        hint: Optional suggestion for fixing the problem.
        status_code: HTTP status returned by Microcks, if any.
        body: Decoded response body returned by Microcks, if any.
    """

    def __init__(
        self,
        *,
        code: ErrorCode,
        message: str,
        hint: str = '',
        status_code: int | None = None,
        body: Any = None,
    ) -> None:
        """Initialize a MicrocksError.

        Args:
            code: The diagnostic code.
            message: The error message.
            hint: Optional fix suggestion.
            status_code: Optional HTTP status code.
            body: Optional response body.
        """
        self.code = code
        self.message = message
        self.hint = hint
        self.status_code = status_code
        self.body = body
        super().__init__(self._render())

    def _render(self) -> str:
        text = f'[{self.code.value}] {self.message}'
        if self.status_code is not None:
            text += f' (HTTP {self.status_code})'
        if self.hint:
            text += f'\n  hint: {self.hint}'
        return text


def unexpected_status(code: ErrorCode, message: str, status_code: int, body: Any = None) -> MicrocksError:
    """Build the error raised when Microcks answers with an unexpected status.

    Args:
        code: The diagnostic code of the failed operation.
        message: What the operation was trying to do.
        status_code: The HTTP status actually received.
        body: The decoded response body, when there is one.

    Returns:
        A :class:`MicrocksError` pointing at the container logs.
    """
    return MicrocksError(
        code=code,
        message=message,
        hint='Please check the Microcks container logs.',
        status_code=status_code,
        body=body,
    )
