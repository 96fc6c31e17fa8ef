"""Tests for the htest pytest plugin fixtures (loaded via the pytest11 entry point)."""

from typing import Any, Callable

from fastapi import FastAPI

from htest.config import DEFAULT_USER_AGENT, ClientConfig
from htest.request import Request


def test_htest_config_from_ini_defaults(htest_config: ClientConfig) -> None:
    assert htest_config == ClientConfig()
    assert htest_config.user_agent == DEFAULT_USER_AGENT


def test_htest_factory_builds_fresh_requests(
    htest: Callable[[Any], Request], echo_app: FastAPI
) -> None:
    first = htest(echo_app)
    second = htest(echo_app)

    assert isinstance(first, Request)
    assert first is not second

    first.get("/echo").expect_code(200)
    second.query("x", "1").get("/echo").expect_code(200)


def test_htest_fixture_end_to_end(htest: Callable[[Any], Request], echo_app: FastAPI) -> None:
    echoed = htest(echo_app).header("X-Id", "7").get("/echo").expect_code(200).json()

    assert echoed["headers"]["x-id"] == "7"
    assert echoed["headers"]["user-agent"] == DEFAULT_USER_AGENT
