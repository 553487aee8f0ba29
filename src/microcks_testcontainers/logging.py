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

"""Typed structured logging.

The library only ever calls :func:`get_logger`; it never configures logging
on import. A test suite that wants readable output calls
:func:`configure_logging` once, typically from a ``conftest.py``.

Usage::

    from microcks_testcontainers.logging import configure_logging, get_logger

    configure_logging(verbose=True)
    logger = get_logger(__name__)
    logger.info('Artifact imported', artifact='apipastries-openapi.yaml')
    await logger.ainfo('Test finished', success=True)
"""

import logging
import sys
from typing import Protocol

import structlog


class Logger(Protocol):
    """Protocol matching the subset of structlog's BoundLogger we use."""

    def debug(self, event: str | None = None, **kw: object) -> None:
        """Log a debug message."""
        ...

    def info(self, event: str | None = None, **kw: object) -> None:
        """Log an info message."""
        ...

    def warning(self, event: str | None = None, **kw: object) -> None:
        """Log a warning message."""
        ...

    def error(self, event: str | None = None, **kw: object) -> None:
        """Log an error message."""
        ...

    def exception(self, event: str | None = None, **kw: object) -> None:
        """Log an exception with traceback."""
        ...

    async def adebug(self, event: str | None = None, **kw: object) -> None:
        """Log a debug message asynchronously."""
        ...

    async def ainfo(self, event: str | None = None, **kw: object) -> None:
        """Log an info message asynchronously."""
        ...

    async def awarning(self, event: str | None = None, **kw: object) -> None:
        """Log a warning message asynchronously."""
        ...

    async def aerror(self, event: str | None = None, **kw: object) -> None:
        """Log an error message asynchronously."""
        ...

    def bind(self, **new_values: object) -> 'Logger':
        """Return a new logger with bound context values."""
        ...


def get_logger(name: str | None = None) -> Logger:
    """Get a typed logger instance.

    Args:
        name: Optional logger name (typically ``__name__``).

    Returns:
        A typed logger instance.
    """
    return structlog.get_logger(name)


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    json_log: bool = False,
) -> None:
    """Configure structlog on top of the standard library root logger.

    Args:
        verbose: Enable debug-level output (shows every poll of a test run).
        quiet: Only show warnings and errors.
        json_log: Render one JSON object per line instead of console output.
    """
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        format='%(message)s',
        stream=sys.stderr,
        level=level,
        force=True,
    )

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_log:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    for handler in logging.root.handlers:
        handler.setFormatter(formatter)
