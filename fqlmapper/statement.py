"""
Statement builders for insert, select and remove statements.
The goal is to produce statements without execution.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from fqlmapper.conditions import ConditionSet, to_text
from fqlmapper.exceptions import ConditionParseError


class StatementKind(str, Enum):
    CREATE = "create"
    INSERT = "insert"
    SELECT = "select"
    REMOVE = "remove"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


def _quote(value: str) -> str:
    return value if value == "*" else f"'{value}'"


class Statement(BaseModel):
    """An immutable statement handed to a connection"""

    model_config = ConfigDict(frozen=True)

    kind: StatementKind
    table: str | None = None
    keys: tuple[str, ...] = ()
    values: tuple[str, ...] = ()
    columns: tuple[str, ...] = ()
    primary: str | None = None
    where: ConditionSet | None = None
    sort: str | None = None
    order: SortOrder | None = None
    limit: int | None = None

    def _row(self, row: tuple[str, ...]) -> str:
        # first entry is the row header ("key" / "value"), the rest are cells
        header, *cells = row
        return " ".join([header, *(f"'{cell}'" for cell in cells)])

    def to_query(self) -> str:
        """Render the statement as query text"""
        parts: list[str] = []

        if self.kind == StatementKind.INSERT:
            parts.append(f"insert into '{self.table}'")
            if self.keys:
                parts.append(self._row(self.keys))
            if self.values:
                parts.append(self._row(self.values))
        elif self.kind == StatementKind.SELECT:
            columns = " ".join(_quote(column) for column in self.columns) or "*"
            parts.append(f"select value {columns}")
            if self.table is not None:
                parts.append(f"from '{self.table}'")
        elif self.kind == StatementKind.REMOVE:
            columns = " ".join(_quote(column) for column in self.columns) or "*"
            parts.append(f"remove column {columns}")
            if self.table is not None:
                parts.append(f"from '{self.table}'")
        else:
            raise ValueError(f"{self.kind.value} statements are issued as text")

        if self.primary is not None:
            parts.append(f"primary-key '{self.primary}'")
        if self.where is not None:
            if self.where.is_empty():
                raise ValueError("A where clause needs at least one condition")
            parts.append(f"where {self.where.to_query()}")
        if self.sort is not None:
            parts.append(f"sort '{self.sort}'")
        if self.order is not None:
            parts.append(f"order {self.order.value}")
        if self.limit is not None:
            parts.append(f"limit {self.limit}")

        return " ".join(parts)

    def __str__(self) -> str:
        return self.to_query()


class _StatementBuilder:
    """Immutable fluent wrapper around a Statement"""

    def __init__(self, statement: Statement):
        self._statement = statement

    def _update(self, **changes: Any):
        new_builder = object.__new__(type(self))
        new_builder._statement = self._statement.model_copy(update=changes)
        return new_builder

    def primary(self, value: Any):
        """Pin the statement to the row with this primary key"""
        return self._update(primary=to_text(value))

    def where(self, conditions: ConditionSet):
        """Scope the statement to rows matching the conditions, which must not be empty"""
        if conditions.is_empty():
            raise ConditionParseError("Conditions are empty")
        return self._update(where=conditions)

    @property
    def table(self) -> str | None:
        return self._statement.table

    def build(self) -> Statement:
        return self._statement

    def to_query(self) -> str:
        return self._statement.to_query()

    def __str__(self) -> str:
        return f"Query: {self.to_query()}"


class InsertBuilder(_StatementBuilder):
    """
    Builds insert statements.

    Usage:
        statement = (
            InsertBuilder("users")
            .keys("key", "id", "name")
            .values("value", "7", "Joker")
            .build()
        )

    With .primary(...) or .where(...) the insert replaces matching rows.
    """

    def __init__(self, table: str):
        super().__init__(Statement(kind=StatementKind.INSERT, table=table))

    def keys(self, *keys: str) -> "InsertBuilder":
        return self._update(keys=tuple(keys))

    def values(self, *values: str) -> "InsertBuilder":
        return self._update(values=tuple(values))


class SelectBuilder(_StatementBuilder):
    """
    Builds select statements.

    Usage:
        statement = SelectBuilder("*").from_("users").sort("name").limit(10).build()
    """

    def __init__(self, *columns: str):
        super().__init__(
            Statement(kind=StatementKind.SELECT, columns=tuple(columns) or ("*",))
        )

    def from_(self, table: str) -> "SelectBuilder":
        return self._update(table=table)

    def sort(self, column: str) -> "SelectBuilder":
        return self._update(sort=column)

    def order(self, order: SortOrder | str) -> "SelectBuilder":
        if not isinstance(order, SortOrder):
            order = SortOrder(order.lower())
        return self._update(order=order)

    def limit(self, count: int) -> "SelectBuilder":
        if count < 1:
            raise ValueError("Limit must be 1 or greater")
        return self._update(limit=count)


class RemoveBuilder(_StatementBuilder):
    """
    Builds remove statements. The target is a primary key value or "*".

    Usage:
        statement = RemoveBuilder("7").from_("users").build()
    """

    def __init__(self, target: Any):
        super().__init__(
            Statement(kind=StatementKind.REMOVE, columns=(to_text(target),))
        )

    def from_(self, table: str) -> "RemoveBuilder":
        return self._update(table=table)
