from collections.abc import Callable
from dataclasses import is_dataclass
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel

from fqlmapper.columns import decode_json, get_columns, type_adapter
from fqlmapper.connection import TableEntry

T = TypeVar("T")


@runtime_checkable
class RowDecoder(Protocol[T]):
    """Turns raw result rows into entities"""

    def map_row_to_entity(self, row: TableEntry) -> T: ...

    def map_rows_to_entities(self, rows: list[TableEntry]) -> list[T]: ...


class ModelDecoder(Generic[T]):
    """Default decoder: the inverse of reading an entity's columns.

    Cells are looked up by column name; structured columns are parsed back
    through the field's type, scalar text is coerced by Pydantic validation.
    Missing cells and the literal "null" become None.
    """

    def __init__(self, entity_class: type[T]):
        self.entity_class = entity_class
        self.columns = get_columns(entity_class)

    def _decode(self, row: TableEntry) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for column in self.columns:
            if column.name not in row:
                continue
            value = row.content[column.name]
            if value is None or value == "null":
                data[column.field_name] = None
            elif column.structured and isinstance(value, str):
                data[column.field_name] = decode_json(value, column.annotation)
            else:
                data[column.field_name] = value
        return data

    def map_row_to_entity(self, row: TableEntry) -> T:
        """Map a result row to an entity"""
        return type_adapter(self.entity_class).validate_python(self._decode(row))

    def map_rows_to_entities(self, rows: list[TableEntry]) -> list[T]:
        """Map result rows to entities"""
        return [self.map_row_to_entity(row) for row in rows]


class ManualDecoder(Generic[T]):
    """Wraps a user supplied (row) -> entity function"""

    def __init__(self, func: Callable[[TableEntry], T]):
        self._func = func

    def map_row_to_entity(self, row: TableEntry) -> T:
        return self._func(row)

    def map_rows_to_entities(self, rows: list[TableEntry]) -> list[T]:
        return [self._func(row) for row in rows]


def create_decoder(entity_class: type, decoder: Any = None) -> RowDecoder:
    """Pick the decoder for an entity class.

    Args:
        entity_class: The entity class rows are decoded into
        decoder: A RowDecoder, a (row) -> entity callable, or None for the default

    Raises:
        TypeError: if no decoder is given and the class is neither a Pydantic model nor a dataclass
    """
    if decoder is not None:
        if isinstance(decoder, RowDecoder):
            return decoder
        if callable(decoder):
            return ManualDecoder(decoder)

    if is_dataclass(entity_class) or (
        isinstance(entity_class, type) and issubclass(entity_class, BaseModel)
    ):
        return ModelDecoder(entity_class)

    raise TypeError(
        f"Cannot create a decoder for {entity_class}. "
        f"Use a dataclass, a Pydantic model, or provide a decoder."
    )
