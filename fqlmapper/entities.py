"""Column and table metadata for entity classes"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

# Sentinels meaning "derive this value from the class or its fields"
VARIABLE = "%VAR%"
CLASS_NAME = "%CLASS%"
FROM_FIELDS = "%FIELDS%"


class TableKind(str, Enum):
    RELATIONAL = "RELATIONAL"
    DOCUMENT = "DOCUMENT"


@dataclass(frozen=True)
class Column:
    """Column metadata attached to an entity field.

    Usage:
        class User(BaseModel):
            id: Annotated[int, Column(primary=True)]
            name: Annotated[str, Column("user_name")]
            tags: Annotated[list[str], Column(json=True)]

    Fields without a Column annotation are not mapped.
    """

    name: str = VARIABLE
    primary: bool = False
    json: bool = False


@dataclass(frozen=True)
class TableMeta:
    """Type-level table metadata, as declared by @table"""

    name: str = CLASS_NAME
    primary: str = FROM_FIELDS
    structure: str = FROM_FIELDS
    kind: TableKind = TableKind.RELATIONAL


def table(
    cls: type | None = None,
    *,
    name: str = CLASS_NAME,
    primary: str = FROM_FIELDS,
    structure: str = FROM_FIELDS,
    kind: TableKind = TableKind.RELATIONAL,
) -> Any:
    """Attach table metadata to an entity class.

    Can be used bare (``@table``) or with arguments (``@table(name="users")``).
    Every argument left at its sentinel is derived at build time.
    """

    def decorator(cls: type) -> type:
        cls.__table_meta__ = TableMeta(  # type: ignore[attr-defined]
            name=name, primary=primary, structure=structure, kind=kind
        )
        return cls

    if cls is not None:
        return decorator(cls)
    return decorator


def get_table_meta(entity_class: type) -> TableMeta:
    """Return the declared table metadata, or all-sentinel defaults."""
    return getattr(entity_class, "__table_meta__", TableMeta())
