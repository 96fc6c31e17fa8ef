"""Errors raised by htest.

Every error is raised at the point of misuse so the failing test line shows
up in the pytest traceback. Exceptions from the handler-under-test are never
wrapped: they propagate as-is.
"""


class HTestError(Exception):
    """Base class for htest errors."""


class ConfigurationError(HTestError):
    """Raised when a request builder is misused.

    Mixing form and JSON bodies, setting a JSON body twice, or touching a
    builder after it has already dispatched.
    """


class ParseError(HTestError):
    """Raised when a request path or its query string is malformed."""


class SerializationError(HTestError):
    """Raised when a value cannot be encoded to JSON, or a JSON response body
    cannot be decoded into the requested type."""


class ExpectationError(HTestError, AssertionError):
    """Raised by Response.expect_* helpers when a check fails.

    Subclasses AssertionError so pytest reports it as a plain test failure.
    """
