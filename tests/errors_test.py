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

"""Tests for Microcks error codes and rendering."""

import pytest

from microcks_testcontainers.errors import E, ErrorCode, MicrocksError, unexpected_status


class TestErrorCode:
    """Tests for ErrorCode."""

    def test_codes_are_prefixed(self) -> None:
        """All codes share the MICROCKS- prefix."""
        assert all(code.value.startswith('MICROCKS-') for code in ErrorCode)

    def test_codes_are_unique(self) -> None:
        """No two members share a value."""
        values = [code.value for code in ErrorCode]
        assert len(values) == len(set(values))

    def test_alias(self) -> None:
        """E is a short alias for ErrorCode."""
        assert E is ErrorCode

    def test_str_comparison(self) -> None:
        """Codes compare equal to their string value."""
        assert ErrorCode.ARTIFACT_NOT_FOUND == 'MICROCKS-ARTIFACT-NOT-FOUND'


class TestMicrocksError:
    """Tests for MicrocksError."""

    def test_message_only(self) -> None:
        """The code prefixes the message."""
        error = MicrocksError(code=E.CONTAINER_NOT_STARTED, message='Not started')

        assert str(error) == '[MICROCKS-CONTAINER-NOT-STARTED] Not started'
        assert error.hint == ''
        assert error.status_code is None
        assert error.body is None

    def test_with_hint(self) -> None:
        """The hint is rendered on its own line."""
        error = MicrocksError(
            code=E.ASYNC_FEATURE_DISABLED,
            message='Async feature must have been enabled first',
            hint='Call with_async_feature() first.',
        )

        assert str(error) == (
            '[MICROCKS-ASYNC-FEATURE-DISABLED] Async feature must have been enabled first\n'
            '  hint: Call with_async_feature() first.'
        )

    def test_is_raisable(self) -> None:
        """MicrocksError is a regular exception."""
        with pytest.raises(MicrocksError, match='ARTIFACT-NOT-FOUND'):
            raise MicrocksError(code=E.ARTIFACT_NOT_FOUND, message='missing.yaml')


def test_unexpected_status() -> None:
    """HTTP failures carry status, body and a pointer to the logs."""
    error = unexpected_status(E.SECRET_CREATION_FAILED, 'Secret s has not been created', 409, {'message': 'dup'})

    assert error.code is E.SECRET_CREATION_FAILED
    assert error.status_code == 409
    assert error.body == {'message': 'dup'}
    assert str(error) == (
        '[MICROCKS-SECRET-CREATION-FAILED] Secret s has not been created (HTTP 409)\n'
        '  hint: Please check the Microcks container logs.'
    )
