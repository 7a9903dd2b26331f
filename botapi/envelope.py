"""Response envelope parsing.

Every Bot API response is a JSON object shaped like::

    {"ok": true, "result": ...}
    {"ok": false, "error_code": 429, "description": "...", "parameters": {"retry_after": 3}}

:func:`parse_envelope` turns raw bytes into a :class:`BotResponse`, binding
``result`` to the caller's expected type (which may be a union alias such as
:data:`botapi.models.ChatMember`).
"""

from __future__ import annotations

import json
import types
from typing import Any, Generic, Optional, TypeVar, Union, get_args, get_origin

from pydantic import BaseModel, TypeAdapter, ValidationError

from botapi.exceptions import BotRequestError, DecodeError
from botapi.models import ResponseParameters

T = TypeVar("T")


class BotResponse(BaseModel, Generic[T]):
    """Decoded Bot API envelope. ``result`` is only meaningful when ``ok`` is true."""

    ok: bool
    result: Optional[T] = None
    error_code: Optional[int] = None
    description: Optional[str] = None
    parameters: Optional[ResponseParameters] = None

    model_config = {"populate_by_name": True, "arbitrary_types_allowed": True}

    def unwrap(self) -> T:
        """Return ``result`` or raise :class:`BotRequestError` for a failed call."""
        if self.ok:
            return self.result  # type: ignore[return-value]
        raise self.to_error()

    def to_error(self) -> BotRequestError:
        return BotRequestError(
            self.error_code if self.error_code is not None else 0,
            self.description or "Unknown error",
            self.parameters,
        )


def parse_envelope(body: Union[bytes, str, dict], result_type: Any = Any) -> BotResponse[Any]:
    """Decode *body* into a :class:`BotResponse`.

    Args:
        body: Raw response bytes/text, or an already-parsed JSON object.
        result_type: Expected type of ``result``; validated only when ``ok`` is true.

    Raises:
        DecodeError: If the body is not JSON, is not an object, lacks ``ok``,
            or ``result`` does not match *result_type*.
    """
    if isinstance(body, (bytes, bytearray, str)):
        try:
            raw = json.loads(body)
        except ValueError as exc:
            raise DecodeError(f"response is not valid JSON: {exc}") from exc
    else:
        raw = body
    if not isinstance(raw, dict):
        raise DecodeError(f"response envelope must be a JSON object, got {type(raw).__name__}")
    if "ok" not in raw:
        raise DecodeError("response envelope is missing 'ok'")

    try:
        envelope = BotResponse[Any].model_validate({k: v for k, v in raw.items() if k != "result"})
    except ValidationError as exc:
        raise DecodeError(f"malformed response envelope: {exc}") from exc

    if envelope.ok:
        if "result" not in raw:
            raise DecodeError("successful response envelope is missing 'result'")
        try:
            envelope.result = TypeAdapter(result_type).validate_python(raw["result"])
        except ValidationError as exc:
            raise DecodeError(f"result does not match {_type_name(result_type)}: {exc}") from exc
    return envelope


def default_for(result_type: Any) -> Any:
    """Zero value handed back instead of raising when remote errors are ignored."""
    origin = get_origin(result_type) or result_type
    if origin is Union or origin is getattr(types, "UnionType", None):
        args = [a for a in get_args(result_type) if a is not type(None)]
        return default_for(args[0]) if len(args) == 1 else None
    if isinstance(origin, type):
        if issubclass(origin, bool):
            return False
        if issubclass(origin, (int, float, str, list, dict, tuple)):
            return origin()
    return None


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", None) or repr(tp)


__all__ = ["BotResponse", "parse_envelope", "default_for"]
