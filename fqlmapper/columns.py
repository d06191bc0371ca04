"""Reflection over Column-annotated entity fields"""

from dataclasses import fields as dataclass_fields
from dataclasses import is_dataclass
from enum import Enum
from functools import lru_cache
from typing import Annotated, Any, get_args, get_origin, get_type_hints

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from fqlmapper.entities import VARIABLE, Column
from fqlmapper.exceptions import MultiplePrimaryKeysError


class ColumnDescriptor(BaseModel):
    """Mapping metadata for one entity field, optionally with its resolved content."""

    model_config = ConfigDict(frozen=True)

    name: str
    field_name: str
    primary: bool = False
    structured: bool = False
    content: str | None = None
    annotation: Any = Field(default=None, exclude=True, repr=False)


def _annotated_columns(entity_class: type) -> list[tuple[str, Column, Any]]:
    """Return (field name, Column, field type) in declaration order."""
    found: list[tuple[str, Column, Any]] = []

    if isinstance(entity_class, type) and issubclass(entity_class, BaseModel):
        for field_name, info in entity_class.model_fields.items():
            column = next((m for m in info.metadata if isinstance(m, Column)), None)
            if column is not None:
                found.append((field_name, column, info.annotation))
        return found

    if is_dataclass(entity_class):
        hints = get_type_hints(entity_class, include_extras=True)
        for f in dataclass_fields(entity_class):
            type_hint = hints.get(f.name)
            if type_hint is None or get_origin(type_hint) is not Annotated:
                continue
            base_type, *extras = get_args(type_hint)
            column = next((m for m in extras if isinstance(m, Column)), None)
            if column is not None:
                found.append((f.name, column, base_type))
        return found

    raise TypeError(
        f"{entity_class} is not a mappable entity. Use a Pydantic model or a dataclass."
    )


def get_columns(entity_class: type) -> list[ColumnDescriptor]:
    """Return one descriptor per Column-annotated field, in declaration order.

    Raises:
        MultiplePrimaryKeysError: if more than one column is flagged primary
    """
    columns = [
        ColumnDescriptor(
            name=field_name if column.name == VARIABLE else column.name,
            field_name=field_name,
            primary=column.primary,
            structured=column.json,
            annotation=annotation,
        )
        for field_name, column, annotation in _annotated_columns(entity_class)
    ]

    primaries = [column.name for column in columns if column.primary]
    if len(primaries) > 1:
        raise MultiplePrimaryKeysError(
            f"{entity_class.__name__} declares more than one primary column: "
            f"{', '.join(primaries)}"
        )
    return columns


def read_columns(entity: Any) -> list[ColumnDescriptor]:
    """Return the entity's descriptors with content resolved from its current values."""
    return [
        column.model_copy(update={"content": read_content(entity, column)})
        for column in get_columns(type(entity))
    ]


def read_content(entity: Any, column: ColumnDescriptor) -> str | None:
    """Resolve one column's textual content.

    A field that cannot be read, or holds None, resolves to None instead of
    raising.
    """
    try:
        value = getattr(entity, column.field_name)
        if value is None:
            return None
        if column.structured:
            return encode_json(value, column.annotation)
        if isinstance(value, Enum):
            return str(value.value)
        return str(value)
    except Exception:
        return None


@lru_cache(maxsize=256)
def type_adapter(annotation: Any) -> TypeAdapter:
    return TypeAdapter(annotation if annotation is not None else Any)


def _adapter(annotation: Any) -> TypeAdapter:
    try:
        return type_adapter(annotation)
    except TypeError:
        # unhashable annotation
        return TypeAdapter(annotation)


def encode_json(value: Any, annotation: Any = None) -> str:
    """Serialize a structured value to JSON text."""
    return _adapter(annotation).dump_json(value).decode()


def decode_json(text: str, annotation: Any = None) -> Any:
    """Inverse of encode_json for the same field type."""
    return _adapter(annotation).validate_json(text)
