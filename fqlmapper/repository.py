"""Repository class"""

import threading
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from fqlmapper.columns import ColumnDescriptor, get_columns, read_columns
from fqlmapper.conditions import ConditionSet, LegacyConditionSetBuilder, equality
from fqlmapper.connection import Connection, Response, TableEntry
from fqlmapper.database_operations import DatabaseOperations
from fqlmapper.entities import get_table_meta
from fqlmapper.entity_mapper import RowDecoder, create_decoder
from fqlmapper.exceptions import (
    AlreadyBuiltError,
    NotBuiltError,
    PrimaryKeyUnresolvedError,
)
from fqlmapper.statement import InsertBuilder, RemoveBuilder, SelectBuilder, Statement
from fqlmapper.table import TableDefinition, resolve_table

T = TypeVar("T")


class RepositoryConfig(BaseModel):
    """Configuration options for Repository"""

    db_name: str = Field(
        default="default",
        description="Registered connection used when none is passed or current",
    )
    allow_null_primary: bool = Field(
        default=False,
        description="Pin update/delete to the text 'null' when the primary key "
        "has no value instead of raising PrimaryKeyUnresolvedError",
    )


class Repository(Generic[T]):
    """Maps one entity class onto one relational table.

    Usage:
        @table(name="users")
        class User(BaseModel):
            id: Annotated[int, Column(primary=True)]
            name: Annotated[str, Column()]

        users = Repository(User, connection)
        users.build()
        users.save(User(id=7, name="Joker"))
        user = users.find_one_by_primary(7)

    build() must be called exactly once before any data operation.
    """

    def __init__(
        self,
        entity_class: type[T],
        connection: Connection | None = None,
        *,
        decoder: RowDecoder[T] | Any = None,
        config: RepositoryConfig | None = None,
    ):
        if entity_class is None:
            raise ValueError("entity_class is required")

        self.entity_class = entity_class
        self.config = config or RepositoryConfig()
        self._table: TableDefinition | None = None
        self._build_lock = threading.Lock()

        # Composition: Inject dependencies
        self.db_ops = DatabaseOperations(connection, self.config.db_name)
        self.decoder = create_decoder(entity_class, decoder)

    @property
    def table(self) -> TableDefinition | None:
        """The table definition, or None before build()"""
        return self._table

    @property
    def is_built(self) -> bool:
        return self._table is not None

    def build(self) -> TableDefinition:
        """Resolve the table definition and issue its create statement.

        Raises:
            AlreadyBuiltError: if the repository was built before
            UnsupportedTableKindError: if the table is not relational
            MissingPrimaryKeyError: if no primary key can be resolved
        """
        with self._build_lock:
            if self._table is not None:
                raise AlreadyBuiltError(self._table.name)

            table = resolve_table(
                self.entity_class,
                get_table_meta(self.entity_class),
                get_columns(self.entity_class),
            )
            self.db_ops.execute(table.create_statement(), False)
            self._table = table
            return table

    def _require_table(self) -> TableDefinition:
        if self._table is None:
            raise NotBuiltError(self.entity_class)
        return self._table

    @staticmethod
    def _to_condition_set(conditions: str | ConditionSet) -> ConditionSet:
        if isinstance(conditions, ConditionSet):
            return conditions
        return LegacyConditionSetBuilder(conditions).build()

    def _insert_builder(
        self, table: TableDefinition, columns: list[ColumnDescriptor]
    ) -> InsertBuilder:
        keys = ["key"]
        values = ["value"]
        for column in columns:
            keys.append(column.name)
            values.append(column.content if column.content is not None else "null")
        return InsertBuilder(table.name).keys(*keys).values(*values)

    def _primary_content(
        self, table: TableDefinition, columns: list[ColumnDescriptor]
    ) -> str:
        column = next((c for c in columns if c.primary), None)
        if column is None:
            column = next((c for c in columns if c.name == table.primary), None)

        content = column.content if column is not None else None
        if content is not None:
            return content
        if self.config.allow_null_primary:
            return "null"
        raise PrimaryKeyUnresolvedError(
            f"{self.entity_class.__name__} has no value for primary key '{table.primary}'"
        )

    def format_entity(self, row: TableEntry) -> T:
        """Convert one result row into an entity.

        Delegates to the decoder; override in subclasses to customize decoding.
        """
        return self.decoder.map_row_to_entity(row)

    def format_entities(self, rows: list[TableEntry]) -> list[T]:
        return [self.format_entity(row) for row in rows]

    def query(self, statement: str | Statement) -> Response:
        """Issue a statement as is and return the raw response"""
        return self.db_ops.execute(statement)

    def select(self, *columns: str) -> SelectBuilder:
        """A select builder targeted at this repository's table, for find_all()"""
        table = self._require_table()
        return SelectBuilder(*columns).from_(table.name)

    # Write operations
    def save(self, entity: T) -> None:
        """Insert the entity as a new row"""
        table = self._require_table()
        columns = read_columns(entity)
        self.db_ops.execute(self._insert_builder(table, columns).build())

    def save_all(self, entities: list[T]) -> None:
        """Save entities one by one, in order. Earlier saves are kept if a later one fails."""
        for entity in entities:
            self.save(entity)

    def update(self, entity: T) -> None:
        """Replace the row whose primary key equals the entity's"""
        table = self._require_table()
        columns = read_columns(entity)
        primary = self._primary_content(table, columns)
        self.db_ops.execute(
            self._insert_builder(table, columns).primary(primary).build()
        )

    def update_by(self, entity: T, field: str, value: Any) -> None:
        self.update_where(entity, equality(field, value))

    def update_where(self, entity: T, conditions: str | ConditionSet) -> None:
        """Overwrite every row matching the conditions with the entity's columns"""
        table = self._require_table()
        condition_set = self._to_condition_set(conditions)
        columns = read_columns(entity)
        self.db_ops.execute(
            self._insert_builder(table, columns).where(condition_set).build()
        )

    def delete(self, entity: T) -> None:
        """Remove the row with the entity's primary key"""
        table = self._require_table()
        primary = self._primary_content(table, read_columns(entity))
        self.db_ops.execute(RemoveBuilder(primary).from_(table.name).build())

    def delete_all(self) -> None:
        table = self._require_table()
        self.db_ops.execute(RemoveBuilder("*").from_(table.name).build())

    def delete_all_by(self, field: str, value: Any) -> None:
        self.delete_all_where(equality(field, value))

    def delete_all_where(self, conditions: str | ConditionSet) -> None:
        table = self._require_table()
        condition_set = self._to_condition_set(conditions)
        self.db_ops.execute(
            RemoveBuilder("*").from_(table.name).where(condition_set).build()
        )

    # Read operations
    def find_one_by(self, field: str, value: Any) -> T | None:
        return self.find_one_where(equality(field, value))

    def find_one_by_primary(self, primary: Any) -> T | None:
        table = self._require_table()
        rows = self.db_ops.fetch_all(
            SelectBuilder("*").from_(table.name).primary(primary).build()
        )
        return self.format_entity(rows[0]) if rows else None

    def find_one_where(self, conditions: str | ConditionSet) -> T | None:
        table = self._require_table()
        condition_set = self._to_condition_set(conditions)
        rows = self.db_ops.fetch_all(
            SelectBuilder("*").from_(table.name).where(condition_set).build()
        )
        return self.format_entity(rows[0]) if rows else None

    def find_all(self, statement: SelectBuilder | None = None) -> list[T]:
        """Return every row, or the rows selected by a caller-built statement"""
        table = self._require_table()
        if statement is None:
            statement = SelectBuilder("*").from_(table.name)
        return self.format_entities(self.db_ops.fetch_all(statement.build()))

    def find_all_by(self, field: str, value: Any) -> list[T]:
        return self.find_all_where(equality(field, value))

    def find_all_where(self, conditions: str | ConditionSet) -> list[T]:
        table = self._require_table()
        condition_set = self._to_condition_set(conditions)
        rows = self.db_ops.fetch_all(
            SelectBuilder("*").from_(table.name).where(condition_set).build()
        )
        return self.format_entities(rows)
