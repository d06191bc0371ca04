import traceback
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from functools import wraps

from fqlmapper.connection import Connection
from fqlmapper.exceptions import ConnectionNotFoundError
from fqlmapper.statement import Statement, StatementKind

# Context variable to store the current connection (only one per context)
_current_connection: ContextVar[Connection | None] = ContextVar(
    "current_connection", default=None
)
_connections: dict[str, Connection] = {}


@dataclass
class QueryLog:
    """Represents a logged statement"""

    query: str
    statement: Statement | None = None
    track_result: bool = True
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    stack_trace: str | None = None

    def __repr__(self) -> str:
        return f"QueryLog(query={self.query!r}, track_result={self.track_result!r}, timestamp={self.timestamp})"


class QueryTracker:
    """Records the statements issued while it is enabled"""

    def __init__(self, enabled: bool = False):
        self.enabled = enabled
        self.queries: list[QueryLog] = []

    def log_query(
        self,
        statement: str | Statement,
        track_result: bool = True,
        stack_trace: str | None = None,
    ):
        if not self.enabled:
            return
        self.queries.append(
            QueryLog(
                query=str(statement),
                statement=statement if isinstance(statement, Statement) else None,
                track_result=track_result,
                stack_trace=stack_trace,
            )
        )

    def get_queries(self) -> list[QueryLog]:
        return self.queries.copy()

    def statements(self, kind: StatementKind | None = None) -> list[Statement]:
        """Built statements issued so far, optionally only those of one kind.

        Text statements (the create-table statement, raw queries) are skipped.
        """
        return [
            log.statement
            for log in self.queries
            if log.statement is not None and (kind is None or log.statement.kind == kind)
        ]

    def count(self) -> int:
        return len(self.queries)


# Context variable to store the query tracker
_query_tracker: ContextVar[QueryTracker | None] = ContextVar(
    "query_tracker", default=None
)


class DatabaseManager:
    """Manages named connections and the connection current to a context"""

    @classmethod
    def add_connection(cls, name: str, connection: Connection):
        """Register a connection under a name"""
        _connections[name] = connection

    @classmethod
    def remove_connection(cls, name: str) -> Connection | None:
        """Unregister a connection, returning it if it was registered"""
        return _connections.pop(name, None)

    @classmethod
    def get_connection(cls, name: str = "default") -> Connection:
        """Get a registered connection by name"""
        if name not in _connections:
            raise ConnectionNotFoundError(f"Connection '{name}' not found")
        return _connections[name]

    @classmethod
    def get_current_connection(cls) -> Connection | None:
        """Get the current active connection from context"""
        return _current_connection.get()

    @classmethod
    def get_query_tracker(cls) -> QueryTracker | None:
        """Get the current query tracker from context"""
        return _query_tracker.get()

    @classmethod
    def log_query(cls, statement: str | Statement, track_result: bool = True):
        """Log a statement to the current query tracker if available"""
        tracker = _query_tracker.get()
        if tracker:
            # Skip the last 2 frames: this method and the DatabaseOperations method
            stack = traceback.extract_stack()
            relevant_stack = stack[:-2]
            stack_trace = "".join(traceback.format_list(relevant_stack))
            tracker.log_query(statement, track_result, stack_trace)

    @classmethod
    @contextmanager
    def connect(cls, db_name: str = "default", track_queries: bool = False):
        """Context manager making a registered connection current.

        Nested calls make the inner connection current until the inner block
        exits, then the outer one is current again.

        Args:
            db_name: Name of the registered connection to use
            track_queries: Whether to enable query tracking for this block
        """
        conn = cls.get_connection(db_name)
        conn_token = _current_connection.set(conn)

        tracker_token = None
        if track_queries and not _query_tracker.get():
            tracker = QueryTracker(enabled=True)
            tracker_token = _query_tracker.set(tracker)

        try:
            yield conn
        finally:
            _current_connection.reset(conn_token)
            if tracker_token:
                _query_tracker.reset(tracker_token)

    @classmethod
    @contextmanager
    def track_queries(cls):
        """Context manager recording every statement issued inside the block.

        with DatabaseManager.track_queries() as tracker:
            repo.find_one_by_primary(7)
            selects = tracker.statements(StatementKind.SELECT)

        Nested blocks share the outer tracker.
        """
        current_tracker = _query_tracker.get()
        if current_tracker:
            was_enabled = current_tracker.enabled
            current_tracker.enabled = True
            try:
                yield current_tracker
            finally:
                current_tracker.enabled = was_enabled
            return

        tracker = QueryTracker(enabled=True)
        token = _query_tracker.set(tracker)
        try:
            yield tracker
        finally:
            _query_tracker.reset(token)


def connected(db_name: str = "default", query_logs: bool = False):
    """Decorator to run a function with a registered connection made current.

    Args:
        db_name: Name of the registered connection to use
        query_logs: Whether to enable query tracking for the call

    Example:
        @connected(query_logs=True)
        def register(user):
            user_repo.save(user)
            tracker = DatabaseManager.get_query_tracker()
            if tracker:
                print(f"Issued {tracker.count()} statements")
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            with DatabaseManager.connect(db_name, track_queries=query_logs):
                return func(*args, **kwargs)

        return wrapper

    return decorator
