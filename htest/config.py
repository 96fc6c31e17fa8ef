"""Client configuration shared by every request builder.

There are no config files or environment variables: a ClientConfig is built
in code, or from pytest ini options by htest.pytest_plugin.
"""

from __future__ import annotations

from enum import Enum

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_USER_AGENT = "htest-client"
DEFAULT_REMOTE_ADDR = "0.0.0.0:3000"
DEFAULT_BASE_URL = "http://example.com"


class Interface(str, Enum):
    """How the handler-under-test is called."""

    AUTO = "auto"  # Detect from the handler's call signature (default)
    ASGI = "asgi"
    WSGI = "wsgi"
    HANDLER = "handler"  # Plain callable: httpx.Request -> httpx.Response


class ClientConfig(BaseModel):
    """Defaults applied to every request a builder assembles."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    user_agent: str = Field(
        default=DEFAULT_USER_AGENT, description="User-Agent sent unless a test sets one"
    )
    remote_addr: str = Field(
        default=DEFAULT_REMOTE_ADDR, description="Client address reported to the handler"
    )
    base_url: str = Field(
        default=DEFAULT_BASE_URL, description="Scheme and host requests are addressed to"
    )
    interface: Interface = Field(default=Interface.AUTO, description="Handler calling convention")

    @field_validator("remote_addr")
    @classmethod
    def validate_remote_addr(cls, v: str) -> str:
        host, sep, port = v.rpartition(":")
        if not sep or not host or not port.isdigit():
            raise ValueError("remote_addr must be in host:port form")
        return v

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        try:
            url = httpx.URL(v)
        except httpx.InvalidURL as e:
            raise ValueError(f"invalid base_url: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError("base_url must be an absolute http(s) URL")
        return v.rstrip("/")

    @property
    def remote_host(self) -> str:
        return self.remote_addr.rpartition(":")[0]

    @property
    def remote_port(self) -> int:
        return int(self.remote_addr.rpartition(":")[2])
