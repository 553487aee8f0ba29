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

"""Per-event-loop cache of ``httpx.AsyncClient`` instances.

A started container lives for a whole test session, but test code may drive
it from several event loops: pytest-asyncio creates one loop per test by
default, and the synchronous :meth:`MicrocksContainer.start` runs its artifact
imports on a private loop. An ``httpx.AsyncClient`` is bound to the loop it
was first used on, so clients are cached per loop and per Microcks endpoint:

1. Outer level: ``WeakKeyDictionary`` keyed by event loop, cleaned up when
   the loop is garbage collected.
2. Inner level: plain dict keyed by a cache key, usually
   ``microcks/<http endpoint>``.

Example::

    client = get_cached_client('microcks/http://localhost:32768')
    response = await client.get('http://localhost:32768/api/services')
"""

import asyncio
import threading
import weakref
from collections.abc import MutableMapping

import httpx

from microcks_testcontainers.constants import DEFAULT_HTTP_TIMEOUT
from microcks_testcontainers.logging import get_logger

logger = get_logger(__name__)

_loop_clients: MutableMapping[asyncio.AbstractEventLoop, dict[str, httpx.AsyncClient]] = weakref.WeakKeyDictionary()

_cache_lock = threading.Lock()


def get_cached_client(cache_key: str, timeout: httpx.Timeout | float | None = None) -> httpx.AsyncClient:
    """Get or create a cached httpx.AsyncClient for the current event loop.

    Args:
        cache_key: Unique identifier for this client configuration.
        timeout: Request timeout, a float in seconds or an ``httpx.Timeout``.
            Defaults to 30s total with 10s connect timeout.

    Returns:
        A cached or newly created httpx.AsyncClient instance.

    Raises:
        RuntimeError: If called outside of an async context (no running loop).

    Note:
        The configuration is only used when creating a new client. A cached
        client is returned as-is.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError as e:
        raise RuntimeError(
            'get_cached_client() must be called from within an async context '
            '(inside an async function with a running event loop)'
        ) from e

    with _cache_lock:
        loop_cache = _loop_clients.setdefault(loop, {})

        if cache_key in loop_cache:
            client = loop_cache[cache_key]
            if not client.is_closed:
                return client
            logger.debug('Cached client was closed, creating new one', cache_key=cache_key)
            del loop_cache[cache_key]

        if timeout is None:
            timeout = httpx.Timeout(DEFAULT_HTTP_TIMEOUT, connect=10.0)
        elif isinstance(timeout, (int, float)):
            timeout = httpx.Timeout(float(timeout))

        client = httpx.AsyncClient(timeout=timeout)

        loop_cache[cache_key] = client
        logger.debug('Created new httpx client', cache_key=cache_key, loop_id=id(loop))

        return client


async def close_cached_clients(cache_key: str | None = None) -> None:
    """Close and remove the cached clients of the current event loop.

    Args:
        cache_key: If provided, only close the client with this key.
            If None, close all clients cached for the current loop.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return

    clients_to_close: dict[str, httpx.AsyncClient] = {}

    with _cache_lock:
        if loop not in _loop_clients:
            return

        loop_cache = _loop_clients[loop]

        if cache_key is not None:
            if cache_key in loop_cache:
                clients_to_close[cache_key] = loop_cache.pop(cache_key)
        else:
            clients_to_close.update(loop_cache)
            loop_cache.clear()

    # Closing is async I/O, keep it outside the lock.
    for key, client in clients_to_close.items():
        try:
            await client.aclose()
            logger.debug('Closed cached client', cache_key=key)
        except Exception as e:
            logger.warning('Failed to close cached client', cache_key=key, error=e)


def clear_client_cache() -> None:
    """Forget every cached client without closing it. Meant for tests."""
    with _cache_lock:
        _loop_clients.clear()
    logger.debug('Cleared all client caches')
