"""Discriminated-union decoding shared by every polymorphic model family.

A :class:`UnionFamily` pairs a discriminator field name (``status`` for chat
members, ``type`` for input media) with a fixed table mapping each literal
discriminator value to its concrete pydantic model.  Decoding sniffs the
discriminator on the generic JSON object and then validates the *whole*
original object against the matched variant, so every variant-specific field
is populated.

Encoding is the mirror operation: the runtime class of the instance decides
the schema, and the discriminator is a constant default on each variant.

Families plug into pydantic through :meth:`UnionFamily.annotated`, which
returns an ``Annotated`` alias usable as a field type anywhere in the model
catalog.
"""

from __future__ import annotations

import json
from typing import Annotated, Any, Dict, Generic, Mapping, Type, TypeVar, Union

from pydantic import BaseModel, BeforeValidator, SerializeAsAny, ValidationError

from botapi.exceptions import DecodeError, EncodingError

ModelT = TypeVar("ModelT", bound=BaseModel)

RawJson = Union[str, bytes, bytearray, Mapping[str, Any]]


def _as_object(raw: RawJson) -> Mapping[str, Any]:
    """Parse *raw* into a generic JSON object without binding a schema."""
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            raw = json.loads(raw)
        except ValueError as exc:
            raise DecodeError(f"invalid JSON: {exc}") from exc
    if not isinstance(raw, Mapping):
        raise DecodeError(f"expected a JSON object, got {type(raw).__name__}")
    return raw


class UnionFamily(Generic[ModelT]):
    """A closed set of variants selected by a string discriminator.

    Args:
        name: Family name, used in error messages.
        base: Common base model every variant subclasses.
        discriminator: Wire name of the discriminator field.
        variants: Mapping of discriminator value to concrete variant model.
    """

    def __init__(
        self,
        name: str,
        base: Type[ModelT],
        discriminator: str,
        variants: Mapping[str, Type[ModelT]],
    ) -> None:
        self.name = name
        self.base = base
        self.discriminator = discriminator
        self.variants: Dict[str, Type[ModelT]] = dict(variants)
        self._tags = {cls: tag for tag, cls in self.variants.items()}

    def decode(self, raw: RawJson) -> ModelT:
        """Decode *raw* into the variant its discriminator names.

        Raises:
            DecodeError: On a missing or non-string discriminator, an unknown
                discriminator value, or a payload that does not fit the variant.
        """
        obj = _as_object(raw)
        if self.discriminator not in obj:
            raise DecodeError(f"missing discriminator '{self.discriminator}' for {self.name}")
        tag = obj[self.discriminator]
        if not isinstance(tag, str):
            raise DecodeError(
                f"wrong discriminator type for {self.name}: "
                f"'{self.discriminator}' must be a string, got {type(tag).__name__}"
            )
        variant = self.variants.get(tag)
        if variant is None:
            raise DecodeError(f"unknown variant '{tag}' for {self.name}")
        try:
            return variant.model_validate(obj)
        except ValidationError as exc:
            raise DecodeError(f"invalid {variant.__name__}: {exc}") from exc

    def encode(self, instance: ModelT) -> Dict[str, Any]:
        """Serialise *instance* with the schema of its runtime class."""
        if type(instance) not in self._tags:
            raise EncodingError(f"{type(instance).__name__} is not a member of {self.name}")
        return instance.model_dump(mode="json", by_alias=True, exclude_none=True)

    def tag_of(self, instance: ModelT) -> str:
        """Return the discriminator value of *instance*."""
        try:
            return self._tags[type(instance)]
        except KeyError:
            raise EncodingError(f"{type(instance).__name__} is not a member of {self.name}") from None

    def _coerce(self, value: Any) -> Any:
        # Already-built variants pass straight through; other base instances have no wire tag.
        if isinstance(value, self.base):
            if type(value) not in self._tags:
                raise DecodeError(f"{type(value).__name__} is not a variant of {self.name}")
            return value
        return self.decode(value)

    def annotated(self) -> Any:
        """Return an ``Annotated`` type that decodes through this family."""
        return Annotated[SerializeAsAny[self.base], BeforeValidator(self._coerce)]

    def __repr__(self) -> str:
        return f"UnionFamily({self.name!r}, discriminator={self.discriminator!r}, variants={sorted(self.variants)!r})"


def decode_union(raw: RawJson, discriminator: str, variants: Mapping[str, Type[ModelT]]) -> ModelT:
    """One-shot form of :meth:`UnionFamily.decode` for ad-hoc variant tables."""
    return UnionFamily("union", BaseModel, discriminator, variants).decode(raw)  # type: ignore[arg-type]


def encode_union(instance: BaseModel) -> Dict[str, Any]:
    """Serialise a union member by its runtime type, dropping absent fields."""
    return instance.model_dump(mode="json", by_alias=True, exclude_none=True)
