"""Request - Fluent builder that assembles one request and dispatches it.

Usage:
    resp = (
        htest.new(app)
        .header("Authorization", "Bearer token")
        .query("q", "v")
        .get("/search")
        .expect_code(200)
    )

Setters return the builder. A verb call (get/post/put/patch/delete)
assembles the request, sends it to the handler-under-test and returns a
Response. A builder dispatches exactly once; touching it afterwards raises
ConfigurationError.
"""

from __future__ import annotations

from typing import Any

from htest.body_encoder import add_form_field, set_json_body
from htest.config import ClientConfig
from htest.cookies import format_cookie_header
from htest.dispatcher import Dispatcher
from htest.errors import ConfigurationError
from htest.models import PreparedRequest, RequestSpec, Verb
from htest.response import Response
from htest.url_composer import compose_path


class Request:
    """Accumulates request configuration for a single dispatch."""

    def __init__(self, app: Any, config: ClientConfig | None = None) -> None:
        """Initialize the builder.

        Args:
            app: The handler-under-test: an ASGI or WSGI app, a callable taking
                an httpx.Request and returning an httpx.Response, or an httpx
                transport.
            config: Client defaults (user agent, remote address, base URL).
        """
        self._config = config or ClientConfig()
        self._dispatcher = Dispatcher(app, self._config)
        self._spec = RequestSpec()
        self._dispatched = False

    @property
    def spec(self) -> RequestSpec:
        return self._spec

    def _check_configuring(self) -> None:
        __tracebackhide__ = True
        if self._dispatched:
            raise ConfigurationError(
                "request was already dispatched, create a new builder for another request"
            )

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def header(self, name: str, value: str) -> Request:
        """Set a header, replacing earlier values for the same name."""
        __tracebackhide__ = True
        self._check_configuring()
        self._spec.headers[name.lower()] = [value]
        return self

    def cookie(self, name: str, value: str) -> Request:
        __tracebackhide__ = True
        self._check_configuring()
        self._spec.cookies[name] = value
        return self

    def query(self, key: str, value: str) -> Request:
        """Add a query parameter. Repeated keys are all sent."""
        __tracebackhide__ = True
        self._check_configuring()
        self._spec.query.append((key, value))
        return self

    def form(self, key: str, value: str) -> Request:
        """Set a url-encoded form field. Setting a key again replaces it."""
        __tracebackhide__ = True
        self._check_configuring()
        add_form_field(self._spec, key, value)
        return self

    def body_json(self, value: Any) -> Request:
        """Send value as a JSON body."""
        __tracebackhide__ = True
        self._check_configuring()
        set_json_body(self._spec, value)
        return self

    # -------------------------------------------------------------------------
    # Assembly and dispatch
    # -------------------------------------------------------------------------

    def prepare(self, verb: Verb | str, path: str) -> PreparedRequest:
        """Assemble the request without sending it.

        Body headers are only added when there is a body. An explicit
        Content-Type header wins over the body encoder's media type.

        Raises:
            ParseError: If path or its query string is malformed.
        """
        __tracebackhide__ = True
        spec = self._spec
        headers = {name: list(values) for name, values in spec.headers.items()}

        if spec.body is not None:
            headers["content-length"] = [str(len(spec.body))]
            if not headers.get("content-type", [""])[0] and spec.content_type:
                headers["content-type"] = [spec.content_type]

        if "user-agent" not in headers:
            headers["user-agent"] = [self._config.user_agent]

        if spec.cookies:
            existing = headers.get("cookie", [""])[0]
            headers["cookie"] = [format_cookie_header(spec.cookies, existing)]

        return PreparedRequest(
            method=verb if isinstance(verb, Verb) else Verb(verb.upper()),
            request_uri=compose_path(path, spec.query),
            headers=headers,
            body=spec.body,
            remote_addr=self._config.remote_addr,
        )

    def _execute(self, verb: Verb, path: str) -> Response:
        __tracebackhide__ = True
        self._check_configuring()

        self._spec.verb = verb
        self._spec.path = path
        prepared = self.prepare(verb, path)

        self._dispatched = True
        return Response(self._dispatcher.dispatch(prepared))

    def get(self, path: str) -> Response:
        __tracebackhide__ = True
        return self._execute(Verb.GET, path)

    def post(self, path: str) -> Response:
        __tracebackhide__ = True
        return self._execute(Verb.POST, path)

    def put(self, path: str) -> Response:
        __tracebackhide__ = True
        return self._execute(Verb.PUT, path)

    def patch(self, path: str) -> Response:
        __tracebackhide__ = True
        return self._execute(Verb.PATCH, path)

    def delete(self, path: str) -> Response:
        __tracebackhide__ = True
        return self._execute(Verb.DELETE, path)


def new(app: Any, config: ClientConfig | None = None) -> Request:
    """Start building a request against app."""
    return Request(app, config)
