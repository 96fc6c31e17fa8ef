"""Internal data models for htest.

All models use Pydantic v2. Header keys are lowercase and header values are
lists so repeated headers survive a round trip.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Verb(str, Enum):
    """HTTP methods a request builder can dispatch with."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


# =============================================================================
# Request Models
# =============================================================================


class RequestSpec(BaseModel):
    """Accumulated request configuration, mutated until dispatch.

    query is a list of pairs, not a mapping: the same key may appear several
    times and every occurrence must reach the handler. form is a mapping
    because re-setting a form field replaces its value.
    """

    model_config = ConfigDict(extra="forbid")

    verb: Verb | None = Field(default=None, description="Set by the terminal verb call")
    path: str | None = Field(default=None, description="Request path, may carry a query string")
    headers: dict[str, list[str]] = Field(
        default_factory=dict, description="Explicit headers (lowercase keys)"
    )
    query: list[tuple[str, str]] = Field(
        default_factory=list, description="Explicit query pairs in insertion order"
    )
    form: dict[str, str] = Field(default_factory=dict, description="Form fields")
    cookies: dict[str, str] = Field(default_factory=dict, description="Request cookies")
    body: bytes | None = Field(default=None, description="Encoded request body")
    content_type: str | None = Field(
        default=None, description="Content-Type chosen by the body encoder"
    )


class PreparedRequest(BaseModel):
    """The request exactly as handed to the handler-under-test."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    method: Verb = Field(description="HTTP method")
    request_uri: str = Field(description="Path plus query string, e.g. /items?a=1")
    headers: dict[str, list[str]] = Field(
        default_factory=dict, description="Request headers (lowercase keys, array values)"
    )
    body: bytes | None = Field(default=None, description="Request body")
    remote_addr: str = Field(description="Placeholder client address, host:port")

    def header(self, name: str) -> str:
        """First value of a header, or an empty string."""
        values = self.headers.get(name.lower())
        return values[0] if values else ""


# =============================================================================
# Response Models
# =============================================================================


class ResponseCookie(BaseModel):
    """One cookie parsed from a Set-Cookie response header."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    value: str
    path: str | None = None
    domain: str | None = None
    expires: str | None = None
    max_age: int | None = None
    secure: bool = False
    http_only: bool = False
    same_site: str | None = None
    raw: str = Field(description="The Set-Cookie header value this cookie came from")


class ResponseCapture(BaseModel):
    """Everything recorded from a single dispatch. Read-only once created."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    status_code: int = Field(description="HTTP status code")
    headers: dict[str, list[str]] = Field(
        default_factory=dict, description="Response headers (lowercase keys, array values)"
    )
    body: bytes = Field(default=b"", description="Raw response body")
    request: PreparedRequest = Field(description="The request that produced this response")
    cookies: list[ResponseCookie] = Field(
        default_factory=list, description="Cookies from Set-Cookie headers, in header order"
    )
