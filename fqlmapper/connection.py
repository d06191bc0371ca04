"""Connection protocol and the response objects it returns"""

import json
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from fqlmapper.statement import Statement


class ResponseType(str, Enum):
    SUCCESS = "SUCCESS"
    RESULT = "RESULT"
    ERROR = "ERROR"
    FORBIDDEN = "FORBIDDEN"


class Response(BaseModel):
    """Outcome of one executed statement"""

    model_config = ConfigDict(frozen=True)

    type: ResponseType = ResponseType.SUCCESS
    exception: str | None = None

    @property
    def ok(self) -> bool:
        return self.type in (ResponseType.SUCCESS, ResponseType.RESULT)


class ColumnValue(BaseModel):
    """One cell of a returned row, with typed accessors.

    Numeric accessors return -1 and as_bool returns False when the cell is empty.
    """

    model_config = ConfigDict(frozen=True)

    content: Any = None

    def is_empty(self) -> bool:
        return self.content is None or self.content == "null"

    def as_str(self) -> str | None:
        if self.is_empty():
            return None
        return str(self.content)

    def as_int(self) -> int:
        text = self.as_str()
        return -1 if text is None else int(text)

    def as_float(self) -> float:
        text = self.as_str()
        return -1.0 if text is None else float(text)

    def as_bool(self) -> bool:
        text = self.as_str()
        return text is not None and text.lower() == "true"

    def as_json(self) -> Any:
        text = self.as_str()
        return None if text is None else json.loads(text)

    def __str__(self) -> str:
        return self.as_str() or ""


class TableEntry(BaseModel):
    """One raw row of a Result"""

    model_config = ConfigDict(frozen=True)

    content: dict[str, Any] = Field(default_factory=dict)
    creation: int = -1

    def get(self, column: str) -> ColumnValue:
        return ColumnValue(content=self.content.get(column))

    def __contains__(self, column: str) -> bool:
        return column in self.content

    def as_dict(self) -> dict[str, Any]:
        return dict(self.content)


class Result(Response):
    """Response carrying row data"""

    type: ResponseType = ResponseType.RESULT
    columns: list[str] = Field(default_factory=list)
    entries: list[TableEntry] = Field(default_factory=list)


@runtime_checkable
class Connection(Protocol):
    """The query engine a repository delegates to.

    Text statements (create table) are passed as str; everything else as a
    Statement. Select statements answer with a Result.
    """

    def query(self, statement: str | Statement, track_result: bool = True) -> Response:
        ...
