import pytest

from fqlmapper.connection import Response, Result, TableEntry
from fqlmapper.db_context import DatabaseManager
from fqlmapper.statement import Statement, StatementKind


class RecordingConnection:
    """Records every statement and answers selects with canned rows."""

    def __init__(self, rows: list[dict] | None = None, fail_on_call: int | None = None):
        self.calls: list[tuple[str | Statement, bool]] = []
        self.rows = rows or []
        self.fail_on_call = fail_on_call

    @property
    def statements(self) -> list[str | Statement]:
        return [statement for statement, _ in self.calls]

    def query(self, statement, track_result=True):
        self.calls.append((statement, track_result))
        if self.fail_on_call is not None and len(self.calls) == self.fail_on_call:
            raise RuntimeError(f"connection failed on call {self.fail_on_call}")
        if isinstance(statement, Statement) and statement.kind == StatementKind.SELECT:
            return Result(entries=[TableEntry(content=row) for row in self.rows])
        return Response()


@pytest.fixture
def connection():
    """A fresh recording connection for each test."""
    return RecordingConnection()


@pytest.fixture
def registered_connection():
    """A recording connection registered as 'test_db', removed afterwards."""
    conn = RecordingConnection()
    DatabaseManager.add_connection("test_db", conn)
    yield conn
    DatabaseManager.remove_connection("test_db")
