"""htest - build a request, run it through an in-process handler, inspect the response."""

from htest.config import ClientConfig, Interface
from htest.errors import (
    ConfigurationError,
    ExpectationError,
    HTestError,
    ParseError,
    SerializationError,
)
from htest.models import PreparedRequest, RequestSpec, ResponseCapture, ResponseCookie, Verb
from htest.request import Request, new
from htest.response import Response

__version__ = "0.1.0"

__all__ = [
    "ClientConfig",
    "ConfigurationError",
    "ExpectationError",
    "HTestError",
    "Interface",
    "ParseError",
    "PreparedRequest",
    "Request",
    "RequestSpec",
    "Response",
    "ResponseCapture",
    "ResponseCookie",
    "SerializationError",
    "Verb",
    "new",
]
