"""
Statement Tracking Example

This example maps an entity onto a table and prints every statement the
repository issues. PrintingConnection stands in for a real query engine.
"""

from typing import Annotated

from pydantic import BaseModel

from fqlmapper import (
    Column,
    DatabaseManager,
    Repository,
    Response,
    Result,
    SelectBuilder,
    Statement,
    table,
)


class PrintingConnection:
    """Echoes statements and answers every select with no rows"""

    def query(self, statement: str | Statement, track_result: bool = True) -> Response:
        print(f"  -> {statement}")
        if isinstance(statement, Statement) and statement.kind == "select":
            return Result()
        return Response()


class Address(BaseModel):
    street: str
    city: str


@table(name="users")
class User(BaseModel):
    id: Annotated[int, Column(primary=True)]
    name: Annotated[str, Column()]
    address: Annotated[Address | None, Column(json=True)] = None


def main():
    DatabaseManager.add_connection("default", PrintingConnection())
    users = Repository(User)

    print("\n=== Build ===")
    users.build()

    with DatabaseManager.track_queries() as tracker:
        print("\n=== Writes ===")
        joker = User(id=7, name="Joker", address=Address(street="Main St 1", city="Berlin"))
        users.save(joker)
        joker.name = "The Joker"
        users.update(joker)
        users.delete_all_where("name = Batman")

        print("\n=== Reads ===")
        users.find_one_by_primary(7)
        users.find_all(SelectBuilder("*").from_("users").sort("name").limit(10))

    print(f"\nTotal statements issued: {tracker.count()}")
    for i, log in enumerate(tracker.get_queries(), 1):
        print(f"  {i}. {log.query} at {log.timestamp.isoformat()}")


if __name__ == "__main__":
    main()
