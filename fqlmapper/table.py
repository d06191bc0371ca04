"""Table definition resolved at build time"""

from pydantic import BaseModel, ConfigDict

from fqlmapper.columns import ColumnDescriptor
from fqlmapper.entities import CLASS_NAME, FROM_FIELDS, TableKind, TableMeta
from fqlmapper.exceptions import MissingPrimaryKeyError, UnsupportedTableKindError


class TableDefinition(BaseModel):
    """Resolved, immutable table name, primary key, structure and kind."""

    model_config = ConfigDict(frozen=True)

    name: str
    primary: str
    structure: str
    kind: TableKind = TableKind.RELATIONAL

    def create_statement(self) -> str:
        """Text of the create-table statement for this definition"""
        return (
            f"create table '{self.name}' structure '{self.structure}' "
            f"primary-key '{self.primary}'"
        )


def resolve_table(
    entity_class: type, meta: TableMeta, columns: list[ColumnDescriptor]
) -> TableDefinition:
    """Apply the sentinel rules to the declared metadata.

    Raises:
        UnsupportedTableKindError: if the declared kind is not relational
        MissingPrimaryKeyError: if no primary column can be resolved
    """
    if meta.kind != TableKind.RELATIONAL:
        raise UnsupportedTableKindError(
            f"Repositories only work with relational tables, "
            f"{entity_class.__name__} declares {TableKind(meta.kind).value}"
        )

    if meta.name == CLASS_NAME:
        name = f"{entity_class.__module__}.{entity_class.__qualname__}"
    else:
        name = meta.name

    if meta.primary == FROM_FIELDS:
        primary_column = next((column for column in columns if column.primary), None)
        if primary_column is None:
            raise MissingPrimaryKeyError(
                f"No primary key found for {entity_class.__name__}"
            )
        primary = primary_column.name
    else:
        primary = meta.primary

    if meta.structure == FROM_FIELDS:
        structure = "".join(column.name for column in columns)
    else:
        structure = meta.structure

    return TableDefinition(name=name, primary=primary, structure=structure, kind=meta.kind)
