"""Dispatcher - Feeds a prepared request to the handler-under-test in-process.

No socket is opened. The handler is wrapped in an httpx transport and the
request is handed straight to that transport, so the handler sees exactly
the headers the builder assembled (httpx.Client would add its own defaults).

Supported handlers:
    - httpx.BaseTransport / httpx.AsyncBaseTransport, used as-is
    - ASGI applications (FastAPI, Starlette, ...)
    - WSGI applications (Flask, plain WSGI callables, ...)
    - plain callables, sync or async, taking an httpx.Request and returning
      an httpx.Response

Exceptions raised by the handler propagate unchanged.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any

import httpx

from htest.config import ClientConfig, Interface
from htest.cookies import parse_set_cookies
from htest.errors import ConfigurationError
from htest.models import PreparedRequest, ResponseCapture

logger = logging.getLogger(__name__)


def _is_coroutine_callable(app: Any) -> bool:
    if inspect.iscoroutinefunction(app):
        return True
    call = getattr(app, "__call__", None)
    return call is not None and inspect.iscoroutinefunction(call)


def _positional_arity(app: Any) -> int | None:
    """Number of positional parameters app accepts, None if unknown."""
    try:
        signature = inspect.signature(app)
    except (TypeError, ValueError):
        return None

    count = 0
    for param in signature.parameters.values():
        if param.kind == param.VAR_POSITIONAL:
            return None
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            count += 1
    return count


def detect_interface(app: Any) -> Interface:
    """Guess how app wants to be called.

    A single positional parameter means a plain httpx handler, sync or
    async. Other coroutine callables are ASGI; anything else is WSGI.
    """
    if _positional_arity(app) == 1:
        return Interface.HANDLER
    if _is_coroutine_callable(app):
        return Interface.ASGI
    return Interface.WSGI


def _runs_async(transport: httpx.BaseTransport | httpx.AsyncBaseTransport) -> bool:
    """Whether transport must be driven through handle_async_request.

    MockTransport implements both interfaces; only an async handler forces
    the async one.
    """
    if not isinstance(transport, httpx.BaseTransport):
        return True
    if isinstance(transport, httpx.MockTransport):
        return _is_coroutine_callable(transport.handler)
    return False


def build_transport(
    app: Any, config: ClientConfig
) -> httpx.BaseTransport | httpx.AsyncBaseTransport:
    """Wrap app in the httpx transport matching its calling convention.

    Raises:
        ConfigurationError: If app is not callable.
    """
    if isinstance(app, (httpx.BaseTransport, httpx.AsyncBaseTransport)):
        return app

    if not callable(app):
        raise ConfigurationError(f"handler-under-test must be callable, got {type(app).__name__}")

    interface = config.interface
    if interface == Interface.AUTO:
        interface = detect_interface(app)

    if interface == Interface.ASGI:
        return httpx.ASGITransport(
            app=app, client=(config.remote_host, config.remote_port)
        )
    if interface == Interface.WSGI:
        return httpx.WSGITransport(app=app, remote_addr=config.remote_host)
    return httpx.MockTransport(app)


def _flatten_headers(headers: dict[str, list[str]]) -> list[tuple[str, str]]:
    return [(name, value) for name, values in headers.items() for value in values]


def _collect_headers(response: httpx.Response) -> dict[str, list[str]]:
    """Response headers with lowercase keys and list values, order kept."""
    headers: dict[str, list[str]] = {}
    for key, value in response.headers.multi_items():
        headers.setdefault(key.lower(), []).append(value)
    return headers


class Dispatcher:
    """Runs one prepared request through the handler-under-test.

    Usage:
        dispatcher = Dispatcher(app)
        capture = dispatcher.dispatch(prepared_request)
    """

    def __init__(self, app: Any, config: ClientConfig | None = None) -> None:
        self._config = config or ClientConfig()
        self._transport = build_transport(app, self._config)

    @property
    def transport(self) -> httpx.BaseTransport | httpx.AsyncBaseTransport:
        return self._transport

    def _build_request(self, prepared: PreparedRequest) -> httpx.Request:
        return httpx.Request(
            method=prepared.method.value,
            url=self._config.base_url + prepared.request_uri,
            headers=_flatten_headers(prepared.headers),
            content=prepared.body,
        )

    def _send(self, request: httpx.Request) -> httpx.Response:
        transport = self._transport

        if not _runs_async(transport):
            response = transport.handle_request(request)
            response.read()
            return response

        async def send_async() -> httpx.Response:
            response = await transport.handle_async_request(request)
            await response.aread()
            return response

        return asyncio.run(send_async())

    def dispatch(self, prepared: PreparedRequest) -> ResponseCapture:
        """Send prepared to the handler and record what comes back.

        Blocks until the handler returns. Handler exceptions are not caught.
        """
        logger.debug("dispatching %s %s", prepared.method.value, prepared.request_uri)

        response = self._send(self._build_request(prepared))

        headers = _collect_headers(response)
        capture = ResponseCapture(
            status_code=response.status_code,
            headers=headers,
            body=response.content,
            request=prepared,
            cookies=parse_set_cookies(headers.get("set-cookie", [])),
        )

        logger.debug(
            "%s %s -> %d (%d bytes)",
            prepared.method.value,
            prepared.request_uri,
            capture.status_code,
            len(capture.body),
        )
        return capture
