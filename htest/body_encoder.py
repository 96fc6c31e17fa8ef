"""Body Encoder - Turns form fields or a JSON value into request body bytes.

A request carries either a form body or a JSON body, never both. The
encoder records its media type on RequestSpec.content_type; an explicit
Content-Type header set by the test still wins when the request is
assembled.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic_core import PydanticSerializationError, to_json, to_jsonable_python

from htest.errors import ConfigurationError, SerializationError
from htest.models import RequestSpec
from htest.url_composer import encode_query

MIME_FORM = "application/x-www-form-urlencoded"
MIME_JSON = "application/json"


def encode_form(fields: dict[str, str]) -> bytes:
    """URL-encode form fields, keys sorted."""
    return encode_query(list(fields.items())).encode("ascii")


def add_form_field(spec: RequestSpec, key: str, value: str) -> None:
    """Set a form field, replacing any earlier value for key.

    The whole form is re-encoded into spec.body on every call.

    Raises:
        ConfigurationError: If the request already has a JSON body.
    """
    if spec.content_type is None:
        spec.content_type = MIME_FORM

    if spec.content_type != MIME_FORM:
        raise ConfigurationError(
            f"content-type should be empty or '{MIME_FORM}', "
            f"got '{spec.content_type}': can't mix .form(...) with .body_json(...)"
        )

    spec.form[key] = value
    spec.body = encode_form(spec.form)


def _check_finite(value: Any, path: str) -> None:
    """Raise SerializationError on the first NaN or infinite float in value."""
    if isinstance(value, float):
        if not math.isfinite(value):
            raise SerializationError(
                f"request body is not JSON serializable: unsupported value {value!r} at {path}"
            )
    elif isinstance(value, dict):
        for key, item in value.items():
            _check_finite(item, f"{path}.{key}")
    elif isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            _check_finite(item, f"{path}[{index}]")


def set_json_body(spec: RequestSpec, value: Any) -> None:
    """Serialize value as the JSON request body.

    Pydantic models, dataclasses, mappings, sequences and scalars are
    accepted. Output is compact (no whitespace between tokens).

    Raises:
        ConfigurationError: If a body encoder already chose a content-type
            (a form body, or an earlier .body_json(...) call).
        SerializationError: If value is not JSON serializable, including
            NaN and infinite floats, which have no JSON representation.
    """
    if spec.content_type:
        raise ConfigurationError(
            f"content-type is already '{spec.content_type}': "
            "can't mix .body_json(...) with .form(...) or call it twice"
        )

    try:
        jsonable = to_jsonable_python(value)
    except PydanticSerializationError as e:
        raise SerializationError(f"request body is not JSON serializable: {e}") from e

    _check_finite(jsonable, "$")
    spec.body = to_json(jsonable)

    spec.content_type = MIME_JSON
