"""JSON request decoding and response encoding helpers.

`read_json` enforces a single, size-bounded JSON document per request body and
reports failures through the `JSONDecodeFailure` hierarchy. Syntax problems
are located with the standard library decoder, typed validation is delegated
to pydantic (strict JSON mode, so ``1`` never silently becomes ``"1"``).
Unknown object keys are looked up against the target's fields at every
nesting level.

`write_json` and `error_json` build Starlette JSON responses with a forced
``Content-Type: application/json``.
"""

import functools
import json
import logging
import re
import types
import typing
from collections.abc import Mapping
from typing import Any
from typing import TypeVar
from typing import get_args
from typing import get_origin

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel
from pydantic import PydanticUserError
from pydantic import TypeAdapter
from pydantic import ValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse

from toolkit.core.config import ToolkitSettings
from toolkit.core.exceptions import BodyTooLargeError
from toolkit.core.exceptions import EmptyBodyError
from toolkit.core.exceptions import InternalDecodeError
from toolkit.core.exceptions import MalformedJSONError
from toolkit.core.exceptions import MultipleJSONValuesError
from toolkit.core.exceptions import SerializationError
from toolkit.core.exceptions import TypeMismatchError
from toolkit.core.exceptions import UnknownFieldError
from toolkit.models.toolkit_models import JSONEnvelope

__all__ = [
    "encode_json",
    "error_json",
    "read_json",
    "write_json",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")

JSON_MEDIA_TYPE = "application/json"

_JSON_WHITESPACE = " \t\n\r"
_JSON_STRING = re.compile(r'"(?:[^"\\]|\\.)*"', re.DOTALL)
_DECODER = json.JSONDecoder()

# pydantic error types that mean "right place, wrong JSON type"
_TYPE_MISMATCH_ERRORS = {"int_from_float"}

_SEQUENCE_ORIGINS = (list, tuple, set, frozenset)
_UNION_ORIGINS = (typing.Union, types.UnionType)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


async def _read_body(request: Request, max_bytes: int) -> bytes:
    chunks: list[bytes] = []
    size = 0
    async for chunk in request.stream():
        size += len(chunk)
        if size > max_bytes:
            logger.warning("Rejected JSON body larger than %d bytes", max_bytes)
            raise BodyTooLargeError(max_bytes)
        chunks.append(chunk)
    return b"".join(chunks)


@functools.lru_cache(maxsize=128)
def _adapter_for(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


def _is_unterminated_input(text: str, err: json.JSONDecodeError) -> bool:
    """Tells whether decoding failed because the input stopped mid-value."""
    rest = text[err.pos :]
    if not rest.strip(_JSON_WHITESPACE):
        return True
    return rest.startswith('"') and _JSON_STRING.match(rest) is None


def _decode_document(text: str) -> tuple[Any, int, int]:
    """Locates and parses the single JSON value in ``text``.

    Returns:
        The parsed value and the ``(start, end)`` span it occupies.
    """
    start = len(text) - len(text.lstrip(_JSON_WHITESPACE))
    if start == len(text):
        raise EmptyBodyError()
    try:
        parsed, end = _DECODER.raw_decode(text, start)
    except json.JSONDecodeError as err:
        if _is_unterminated_input(text, err):
            raise MalformedJSONError() from err
        raise MalformedJSONError(offset=err.pos) from err
    return parsed, start, end


def _holds_model(annotation: Any) -> bool:
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return True
    return any(_holds_model(arg) for arg in get_args(annotation))


def _unknown_key(value: Any, annotation: Any, path: tuple[str, ...]) -> str | None:
    """Returns the dotted path of the first key in ``value`` no model declares."""
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return _unknown_key_in_model(value, annotation, path)

    origin = get_origin(annotation)
    args = get_args(annotation)
    if origin in _SEQUENCE_ORIGINS and isinstance(value, list) and args:
        for index, item in enumerate(value):
            found = _unknown_key(item, args[0], (*path, str(index)))
            if found:
                return found
    elif origin in (dict, Mapping) and isinstance(value, dict) and len(args) == 2:
        for key, item in value.items():
            found = _unknown_key(item, args[1], (*path, key))
            if found:
                return found
    elif origin in _UNION_ORIGINS:
        # Unknown only if every model-bearing member rejects the value
        results = [_unknown_key(value, arg, path) for arg in args if _holds_model(arg)]
        if results and all(results):
            return results[0]
    return None


def _unknown_key_in_model(value: Any, model: type[BaseModel], path: tuple[str, ...]) -> str | None:
    if not isinstance(value, dict) or model.model_config.get("extra") == "allow":
        return None
    fields_by_key = {}
    for name, field in model.model_fields.items():
        for key in (name, field.alias, field.validation_alias):
            if isinstance(key, str):
                fields_by_key[key] = field
    for key, item in value.items():
        field = fields_by_key.get(key)
        if field is None:
            return ".".join((*path, key))
        found = _unknown_key(item, field.annotation, (*path, key))
        if found:
            return found
    return None


def _type_mismatch(err: ValidationError, offset: int) -> TypeMismatchError | None:
    for detail in err.errors():
        if detail["type"].endswith("_type") or detail["type"] in _TYPE_MISMATCH_ERRORS:
            loc = detail["loc"]
            if loc:
                return TypeMismatchError(field=".".join(str(part) for part in loc))
            return TypeMismatchError(offset=offset)
    return None


def _forbidden_extra(err: ValidationError) -> UnknownFieldError | None:
    for detail in err.errors():
        if detail["type"] == "extra_forbidden":
            return UnknownFieldError(name=".".join(str(part) for part in detail["loc"]))
    return None


async def read_json(
    request: Request,
    target: type[T],
    settings: ToolkitSettings,
    max_size: int | None = None,
    allow_unknown_fields: bool | None = None,
) -> T:
    """Decodes the request body into an instance of ``target``.

    Args:
        request: The incoming request. Its body is consumed.
        target: A pydantic model class, or any type pydantic can validate.
        settings: Supplies the size limit and unknown-field policy.
        max_size: Overrides ``settings.max_json_size`` for this call.
        allow_unknown_fields: Overrides ``settings.allow_unknown_fields`` for this call.

    Returns:
        The validated value.

    Raises:
        JSONDecodeFailure: A subclass describing why the body was rejected.
        ValidationError: For validation failures with no dedicated error kind,
            such as a missing required field.
    """
    max_bytes = max_size or settings.effective_max_json_size
    if allow_unknown_fields is None:
        allow_unknown_fields = settings.allow_unknown_fields

    try:
        adapter = _adapter_for(target)
    except (PydanticUserError, TypeError) as err:
        logger.error("Cannot decode JSON into %r: %s", target, err)
        raise InternalDecodeError(str(err)) from err

    body = await _read_body(request, max_bytes)
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as err:
        raise MalformedJSONError(offset=err.start) from err

    parsed, start, end = _decode_document(text)
    unknown = None if allow_unknown_fields else _unknown_key(parsed, target, ())
    try:
        value = adapter.validate_json(text[start:end], strict=True)
    except ValidationError as err:
        classified = _type_mismatch(err, start)
        if classified is None and unknown:
            classified = UnknownFieldError(name=unknown)
        if classified is None:
            classified = _forbidden_extra(err)
        logger.debug("JSON body failed validation against %r: %s", target, classified or err)
        if classified is None:
            raise
        raise classified from err

    if unknown:
        raise UnknownFieldError(name=unknown)
    if text[end:].strip(_JSON_WHITESPACE):
        raise MultipleJSONValuesError()
    return value


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def encode_json(payload: Any) -> bytes:
    """Serializes ``payload`` to compact JSON bytes for outbound requests.

    Raises:
        SerializationError: If the payload holds values JSON cannot represent.
    """
    try:
        return json.dumps(jsonable_encoder(payload), allow_nan=False, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError) as err:
        raise SerializationError(f"payload cannot be encoded as JSON: {err}") from err


def write_json(status_code: int, payload: Any, headers: Mapping[str, str] | None = None) -> JSONResponse:
    """Builds a JSON response.

    Caller headers are applied first, then ``Content-Type`` is forced to
    ``application/json``.

    Raises:
        SerializationError: If the payload holds values JSON cannot represent.
    """
    response_headers = {key: value for key, value in (headers or {}).items() if key.lower() != "content-type"}
    try:
        return JSONResponse(jsonable_encoder(payload), status_code=status_code, headers=response_headers)
    except (TypeError, ValueError) as err:
        raise SerializationError(f"payload cannot be encoded as JSON: {err}") from err


def error_json(err: BaseException, status_code: int = 400) -> JSONResponse:
    """Wraps ``err`` in the standard error envelope. Only ``str(err)`` is exposed."""
    envelope = JSONEnvelope(error=True, message=str(err))
    return write_json(status_code, envelope.model_dump(exclude_none=True))
