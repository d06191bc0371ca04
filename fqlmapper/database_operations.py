from fqlmapper.connection import Connection, Response, Result, TableEntry
from fqlmapper.db_context import DatabaseManager
from fqlmapper.exceptions import ConnectionNotFoundError
from fqlmapper.statement import Statement


class DatabaseOperations:
    """Composition class for issuing statements to a connection"""

    def __init__(self, connection: Connection | None = None, db_name: str = "default"):
        self._connection = connection
        self.db_name = db_name

    def get_connection(self) -> Connection:
        """Explicit connection first, then the context-current one, then the registry"""
        if self._connection is not None:
            return self._connection
        conn = DatabaseManager.get_current_connection()
        if conn is not None:
            return conn
        try:
            return DatabaseManager.get_connection(self.db_name)
        except ConnectionNotFoundError:
            raise ConnectionNotFoundError(
                f"No connection available. Pass one to the repository, use "
                f"DatabaseManager.connect(), or register one as '{self.db_name}'."
            ) from None

    def execute(self, statement: str | Statement, track_result: bool = True) -> Response:
        """Issue a statement and return the raw response"""
        conn = self.get_connection()
        DatabaseManager.log_query(statement, track_result)
        return conn.query(statement, track_result)

    def fetch_all(self, statement: Statement) -> list[TableEntry]:
        """Issue a select statement and return its raw entries"""
        conn = self.get_connection()
        DatabaseManager.log_query(statement)
        response = conn.query(statement, True)
        if not isinstance(response, Result):
            message = f"Expected a Result for '{statement.to_query()}', got {type(response).__name__}"
            if response.exception:
                message += f" ({response.type.value}: {response.exception})"
            raise TypeError(message)
        return response.entries
