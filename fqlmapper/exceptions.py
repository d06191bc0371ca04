"""Repository exceptions"""


class RepositoryError(Exception):
    """Base error for everything raised by fqlmapper."""


class NotBuiltError(RepositoryError):
    """A data operation was called before build()."""

    def __init__(self, entity_class: type | None = None):
        name = entity_class.__name__ if entity_class is not None else "Repository"
        super().__init__(
            f"{name} repository has to be built with build() before it can be used"
        )


class AlreadyBuiltError(RepositoryError):
    """build() was called on a repository that already has a table definition."""

    def __init__(self, table_name: str):
        self.table_name = table_name
        super().__init__(f"Repository for table '{table_name}' has already been built")


class UnsupportedTableKindError(RepositoryError):
    """Repositories only work with relational tables."""


class MissingPrimaryKeyError(RepositoryError):
    """No primary key could be resolved for the table."""


class MultiplePrimaryKeysError(RepositoryError):
    """More than one column is flagged as primary."""


class PrimaryKeyUnresolvedError(RepositoryError):
    """The entity's primary column has no value to pin the statement to."""


class ConditionParseError(RepositoryError):
    """Malformed legacy condition text."""


class ConnectionNotFoundError(RepositoryError):
    """No connection was passed, made current, or registered under the name."""
