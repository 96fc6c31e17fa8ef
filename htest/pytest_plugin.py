"""pytest plugin: ini options and fixtures for building htest requests.

Registered through the pytest11 entry point, so installing htest is enough:

    def test_search(htest):
        htest(app).query("q", "v").get("/search").expect_code(200)

Defaults can be changed per project in the pytest ini section:

    [tool.pytest.ini_options]
    htest_user_agent = "my-service-tests"
"""

from __future__ import annotations

from typing import Any, Callable

import pytest

from htest.config import (
    DEFAULT_BASE_URL,
    DEFAULT_REMOTE_ADDR,
    DEFAULT_USER_AGENT,
    ClientConfig,
)
from htest.request import Request


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addini(
        "htest_user_agent",
        help="User-Agent sent by htest requests unless a test sets one",
        default=DEFAULT_USER_AGENT,
    )
    parser.addini(
        "htest_remote_addr",
        help="Client address (host:port) reported to the handler-under-test",
        default=DEFAULT_REMOTE_ADDR,
    )
    parser.addini(
        "htest_base_url",
        help="Scheme and host htest requests are addressed to",
        default=DEFAULT_BASE_URL,
    )


@pytest.fixture
def htest_config(pytestconfig: pytest.Config) -> ClientConfig:
    """ClientConfig built from the htest_* ini options."""
    return ClientConfig(
        user_agent=pytestconfig.getini("htest_user_agent"),
        remote_addr=pytestconfig.getini("htest_remote_addr"),
        base_url=pytestconfig.getini("htest_base_url"),
    )


@pytest.fixture
def htest(htest_config: ClientConfig) -> Callable[[Any], Request]:
    """Factory returning a fresh request builder for a handler-under-test."""

    def make_request(app: Any) -> Request:
        return Request(app, htest_config)

    return make_request
