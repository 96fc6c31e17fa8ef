"""Pytest configuration and fixtures for htest tests.

This file provides:
- make_capture / make_prepared: ResponseCapture builders for Response tests
- echo_app: FastAPI app that reports back what it received
- wsgi_echo_app: the same idea as a bare WSGI callable
"""

from __future__ import annotations

import json
from typing import Any, Callable

import pytest
from fastapi import FastAPI, Request, Response

from htest.models import PreparedRequest, ResponseCapture, ResponseCookie, Verb


def make_prepared(
    method: Verb = Verb.GET,
    request_uri: str = "/",
    headers: dict[str, list[str]] | None = None,
    body: bytes | None = None,
) -> PreparedRequest:
    return PreparedRequest(
        method=method,
        request_uri=request_uri,
        headers=headers or {},
        body=body,
        remote_addr="0.0.0.0:3000",
    )


def make_capture(
    status_code: int = 200,
    headers: dict[str, list[str]] | None = None,
    body: bytes = b"",
    cookies: list[ResponseCookie] | None = None,
) -> ResponseCapture:
    """Create a ResponseCapture for testing Response helpers.

    Prefer this over constructing ResponseCapture directly - it fills in a
    dispatched request nobody in these tests looks at.
    """
    return ResponseCapture(
        status_code=status_code,
        headers=headers or {},
        body=body,
        request=make_prepared(),
        cookies=cookies or [],
    )


@pytest.fixture
def echo_app() -> FastAPI:
    """FastAPI app echoing the request it received as JSON."""
    app = FastAPI()

    @app.api_route("/echo", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
    async def echo(request: Request) -> dict[str, Any]:
        body = await request.body()
        return {
            "method": request.method,
            "path": request.url.path,
            "query": list(request.query_params.multi_items()),
            "headers": {k: v for k, v in request.headers.items()},
            "cookies": dict(request.cookies),
            "body": body.decode("utf-8"),
            "client": [request.client.host, request.client.port] if request.client else None,
        }

    @app.get("/text")
    async def text() -> Response:
        return Response(content='{"not": "decoded"}', media_type="text/plain")

    @app.get("/login")
    async def login() -> Response:
        response = Response(content="ok", media_type="text/plain")
        response.set_cookie("session", "abc123", path="/", httponly=True)
        response.set_cookie("theme", "dark", max_age=3600, samesite="strict")
        return response

    @app.get("/boom")
    async def boom() -> None:
        raise RuntimeError("handler exploded")

    return app


def _wsgi_echo(environ: dict[str, Any], start_response: Callable[..., Any]) -> list[bytes]:
    length = int(environ.get("CONTENT_LENGTH") or 0)
    body = environ["wsgi.input"].read(length) if length else b""
    payload = {
        "method": environ["REQUEST_METHOD"],
        "path": environ["PATH_INFO"],
        "query_string": environ.get("QUERY_STRING", ""),
        "content_type": environ.get("CONTENT_TYPE", ""),
        "user_agent": environ.get("HTTP_USER_AGENT", ""),
        "remote_addr": environ.get("REMOTE_ADDR", ""),
        "body": body.decode("utf-8"),
    }
    start_response("200 OK", [("Content-Type", "application/json")])
    return [json.dumps(payload).encode("utf-8")]


@pytest.fixture
def wsgi_echo_app() -> Callable[..., list[bytes]]:
    return _wsgi_echo
