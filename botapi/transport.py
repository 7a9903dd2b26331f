"""Request body encoding: compact JSON or multipart/form-data.

The Bot API accepts two submission modes.  Metadata-only calls travel as a
compact JSON object; any call that uploads raw bytes must be multipart.
:func:`choose_transport` picks between them per call, so a caller writes one
call site whether its file argument is a remote reference or local bytes.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic_core import to_jsonable_python

from botapi.args import BotArgs, FieldKind
from botapi.exceptions import EncodingError
from botapi.models import InputFile

logger = logging.getLogger("botapi.transport")

APPLICATION_JSON = "application/json"
MULTIPART_FORM_DATA = "multipart/form-data"
OCTET_STREAM = "application/octet-stream"


def to_jsonable(value: Any) -> Any:
    """Convert models, lists and scalars into plain JSON data, dropping absent fields."""
    if isinstance(value, InputFile):
        raise EncodingError(f"raw file '{value.filename}' cannot be embedded in a JSON body")
    return to_jsonable_python(value, by_alias=True, exclude_none=True, serialize_as_any=True)


def dumps(data: Any) -> str:
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


@dataclass(frozen=True)
class JsonBody:
    """A request sent as a UTF-8 ``application/json`` object."""

    payload: Dict[str, Any]
    content_type: str = APPLICATION_JSON

    def encode(self) -> bytes:
        return dumps(self.payload).encode("utf-8")


@dataclass(frozen=True)
class FormPart:
    """One named part of a multipart form; ``filename`` is set for file parts."""

    name: str
    value: Union[str, bytes]
    filename: Optional[str] = None
    content_type: Optional[str] = None

    @property
    def is_file(self) -> bool:
        return self.filename is not None


@dataclass(frozen=True)
class MultipartForm:
    """A request sent as ``multipart/form-data``."""

    parts: Tuple[FormPart, ...] = field(default_factory=tuple)
    content_type: str = MULTIPART_FORM_DATA

    def names(self) -> List[str]:
        return [part.name for part in self.parts]

    def get(self, name: str) -> Optional[FormPart]:
        for part in self.parts:
            if part.name == name:
                return part
        return None

    def to_requests_files(self) -> List[Tuple[str, Tuple[Any, ...]]]:
        """Render the parts in the ``files=`` shape accepted by :mod:`requests`."""
        files: List[Tuple[str, Tuple[Any, ...]]] = []
        for part in self.parts:
            if part.is_file:
                files.append((part.name, (part.filename, part.value, part.content_type or OCTET_STREAM)))
            else:
                files.append((part.name, (None, part.value)))
        return files


Transport = Union[JsonBody, MultipartForm]


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _file_part(name: str, file: InputFile) -> FormPart:
    return FormPart(name=name, value=file.content, filename=file.filename, content_type=file.content_type)


def encode_json(args: Union[BotArgs, Mapping[str, Any]]) -> JsonBody:
    """Encode *args* as a JSON body keyed by wire name, omitting absent fields.

    Raises:
        EncodingError: If a field holds raw file content.
    """
    if isinstance(args, BotArgs):
        items = [(d.wire_name, value) for d, value in args.iter_wire_fields()]
    else:
        items = [(name, value) for name, value in args.items() if value is not None]
    payload: Dict[str, Any] = {}
    for name, value in items:
        if isinstance(value, InputFile):
            raise EncodingError(f"field '{name}' holds raw file content; {type(args).__name__} cannot be sent as multipart")
        payload[name] = to_jsonable(value)
    return JsonBody(payload)


def build_multipart(args: BotArgs) -> MultipartForm:
    """Encode *args* as multipart parts, one per non-absent field, in declared order.

    Raw files become file parts named after the field's wire name; strings,
    booleans and numbers become text parts; everything else becomes a text
    part holding its JSON serialisation.  Attached files follow the fields.

    Raises:
        EncodingError: If a file-capable field has no wire name.
    """
    parts: List[FormPart] = []
    for descriptor, value in args.iter_wire_fields():
        if not descriptor.wire_name:
            if descriptor.kind is FieldKind.FILE:
                raise EncodingError(
                    f"file field '{descriptor.attribute}' of {type(args).__name__} has no wire name"
                )
            continue
        if isinstance(value, InputFile):
            parts.append(_file_part(descriptor.wire_name, value))
        elif isinstance(value, (str, bool, int, float)):
            parts.append(FormPart(name=descriptor.wire_name, value=_scalar_text(value)))
        else:
            parts.append(FormPart(name=descriptor.wire_name, value=dumps(to_jsonable(value))))
    for attached in args.attached_files():
        parts.append(_file_part(attached.name, attached.file))
    return MultipartForm(tuple(parts))


def choose_transport(args: Union[BotArgs, Mapping[str, Any]]) -> Transport:
    """Pick multipart when the bag may use it and actually carries raw bytes."""
    if isinstance(args, BotArgs) and args.supports_multipart and args.use_multipart():  # type: ignore[attr-defined]
        form = build_multipart(args)
        logger.debug("Transport selected", extra={"transport": "multipart", "args_type": type(args).__name__, "parts": len(form.parts)})
        return form
    body = encode_json(args)
    logger.debug("Transport selected", extra={"transport": "json", "args_type": type(args).__name__})
    return body
