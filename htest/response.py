"""Response - Read-only view of a captured response, with assertion helpers."""

from __future__ import annotations

from typing import Any, TypeVar, overload

from pydantic import TypeAdapter, ValidationError

from htest.body_encoder import MIME_JSON
from htest.errors import ExpectationError, SerializationError
from htest.models import PreparedRequest, ResponseCapture, ResponseCookie

T = TypeVar("T")


class Response:
    """Wraps a ResponseCapture returned by a request builder's verb call.

    expect_* helpers return the response itself so checks can be chained:

        resp = htest.new(app).get("/items").expect_code(200)
        items = resp.json(list[Item])
    """

    def __init__(self, capture: ResponseCapture) -> None:
        self._capture = capture

    def __repr__(self) -> str:
        return f"<Response {self.status_code} {self.request.method.value} {self.request.request_uri}>"

    @property
    def capture(self) -> ResponseCapture:
        return self._capture

    @property
    def status_code(self) -> int:
        return self._capture.status_code

    @property
    def headers(self) -> dict[str, list[str]]:
        """All response headers, lowercase keys."""
        return self._capture.headers

    @property
    def body(self) -> bytes:
        return self._capture.body

    @property
    def request(self) -> PreparedRequest:
        """The request as it was dispatched."""
        return self._capture.request

    def header(self, name: str) -> str:
        """First value of a response header, or an empty string."""
        values = self._capture.headers.get(name.lower())
        return values[0] if values else ""

    def header_values(self, name: str) -> list[str]:
        return list(self._capture.headers.get(name.lower(), []))

    def body_string(self) -> str:
        """Response body as text. Undecodable bytes are replaced."""
        return self._capture.body.decode("utf-8", errors="replace")

    @overload
    def json(self) -> Any: ...

    @overload
    def json(self, into: type[T]) -> T | None: ...

    def json(self, into: Any = Any) -> Any:
        """Decode a JSON response body.

        The body is only decoded when the response Content-Type starts with
        application/json. For any other content type nothing is decoded and
        None is returned, even if the body happens to be valid JSON.

        Args:
            into: Type to validate the decoded body against (pydantic model,
                dataclass, TypedDict, list[...], ...). Defaults to Any, which
                returns plain dicts/lists/scalars.

        Raises:
            SerializationError: If the content type matches but the body is not
                valid JSON or does not validate against into.
        """
        __tracebackhide__ = True

        if not self.header("content-type").startswith(MIME_JSON):
            return None

        try:
            return TypeAdapter(into).validate_json(self._capture.body)
        except ValidationError as e:
            raise SerializationError(
                f"can't decode response body into {getattr(into, '__name__', into)}: {e}"
            ) from e

    def expect_code(self, expected: int) -> Response:
        """Fail unless the status code equals expected.

        The failure message carries the response body to ease debugging.
        """
        __tracebackhide__ = True

        if self.status_code != expected:
            raise ExpectationError(
                f"expecting http response status code {expected}, got {self.status_code}, "
                f"body: {self.body_string()}"
            )
        return self

    def expect_header(self, name: str, value: str) -> Response:
        """Fail unless the first value of header name equals value."""
        __tracebackhide__ = True

        actual = self.header(name)
        if actual != value:
            raise ExpectationError(
                f"expecting response header {name!r} to be {value!r}, got {actual!r}, "
                f"body: {self.body_string()}"
            )
        return self

    def cookies(self) -> list[ResponseCookie]:
        """Cookies set by the response; empty when there is no Set-Cookie header."""
        return list(self._capture.cookies)
