"""fqlmapper: entity/table mapping over a statement-level query connection"""

from fqlmapper.conditions import (
    Condition,
    ConditionBuilder,
    ConditionSet,
    ConditionSetBuilder,
    LegacyConditionSetBuilder,
    Operator,
)
from fqlmapper.connection import ColumnValue, Connection, Response, Result, TableEntry
from fqlmapper.db_context import DatabaseManager, connected
from fqlmapper.entities import CLASS_NAME, FROM_FIELDS, VARIABLE, Column, TableKind, table
from fqlmapper.entity_mapper import ManualDecoder, ModelDecoder, RowDecoder, create_decoder
from fqlmapper.exceptions import (
    AlreadyBuiltError,
    ConditionParseError,
    ConnectionNotFoundError,
    MissingPrimaryKeyError,
    MultiplePrimaryKeysError,
    NotBuiltError,
    PrimaryKeyUnresolvedError,
    RepositoryError,
    UnsupportedTableKindError,
)
from fqlmapper.repository import Repository, RepositoryConfig
from fqlmapper.statement import InsertBuilder, RemoveBuilder, SelectBuilder, SortOrder, Statement
from fqlmapper.table import TableDefinition

__all__ = [
    "AlreadyBuiltError",
    "CLASS_NAME",
    "Column",
    "ColumnValue",
    "Condition",
    "ConditionBuilder",
    "ConditionParseError",
    "ConditionSet",
    "ConditionSetBuilder",
    "Connection",
    "ConnectionNotFoundError",
    "DatabaseManager",
    "FROM_FIELDS",
    "InsertBuilder",
    "LegacyConditionSetBuilder",
    "ManualDecoder",
    "MissingPrimaryKeyError",
    "ModelDecoder",
    "MultiplePrimaryKeysError",
    "NotBuiltError",
    "Operator",
    "PrimaryKeyUnresolvedError",
    "RemoveBuilder",
    "Repository",
    "RepositoryConfig",
    "RepositoryError",
    "Response",
    "Result",
    "RowDecoder",
    "SelectBuilder",
    "SortOrder",
    "Statement",
    "TableDefinition",
    "TableEntry",
    "TableKind",
    "UnsupportedTableKindError",
    "VARIABLE",
    "connected",
    "create_decoder",
    "table",
]
