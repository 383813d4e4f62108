"""Shared HTTP client handling."""

import asyncio

import httpx

from maintainability_index.config import get_verify_ssl

_async_http_client: httpx.AsyncClient | None = None
_async_http_client_verify_ssl: bool | None = None
_async_http_client_loop: asyncio.AbstractEventLoop | None = None


async def _get_async_http_client() -> httpx.AsyncClient:
    """Get or create a global async HTTP client with connection pooling.

    Recreates the client if the SSL verification setting has changed or the
    client belongs to an event loop that is no longer running.
    """
    global _async_http_client, _async_http_client_verify_ssl, _async_http_client_loop
    current_verify_ssl = get_verify_ssl()
    current_loop = asyncio.get_running_loop()

    # Recreate client if setting changed, loop changed, or client is closed/None
    if (
        _async_http_client is None
        or _async_http_client.is_closed
        or _async_http_client_verify_ssl != current_verify_ssl
        or _async_http_client_loop is not current_loop
    ):
        # Close existing client if it still belongs to this loop
        if (
            _async_http_client is not None
            and not _async_http_client.is_closed
            and _async_http_client_loop is current_loop
        ):
            await _async_http_client.aclose()

        _async_http_client = httpx.AsyncClient(
            verify=current_verify_ssl,
            timeout=10,
            limits=httpx.Limits(
                max_connections=20,
                max_keepalive_connections=10,
                keepalive_expiry=30.0,
            ),
        )
        _async_http_client_verify_ssl = current_verify_ssl
        _async_http_client_loop = current_loop
    return _async_http_client


async def close_async_http_client() -> None:
    """Close the global async HTTP client. Call this before the loop exits."""
    global _async_http_client, _async_http_client_verify_ssl, _async_http_client_loop
    if _async_http_client is not None and not _async_http_client.is_closed:
        await _async_http_client.aclose()
    _async_http_client = None
    _async_http_client_verify_ssl = None
    _async_http_client_loop = None
