"""
Condition sets used to scope update, remove and select statements.

A ConditionSet is an OR of AND-groups:
    where 'a' = '1' and 'b' = '2' or 'c' = '3'
reads as (a = 1 AND b = 2) OR (c = 3).
"""

import shlex
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from fqlmapper.exceptions import ConditionParseError


class Operator(str, Enum):
    EQUALS = "="
    NOT_EQUALS = "!="
    GREATER = ">"
    GREATER_EQUALS = ">="
    LESS = "<"
    LESS_EQUALS = "<="
    CONTAINS = "contains"


def to_text(value: Any) -> str:
    """Textual form of a condition or pin value; None becomes 'null'."""
    if value is None:
        return "null"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


class Condition(BaseModel):
    """A single field comparison"""

    model_config = ConfigDict(frozen=True)

    field: str
    operator: Operator = Operator.EQUALS
    value: str

    def to_query(self) -> str:
        return f"'{self.field}' {self.operator.value} '{self.value}'"


class ConditionSet(BaseModel):
    """OR of AND-groups of conditions"""

    model_config = ConfigDict(frozen=True)

    groups: tuple[tuple[Condition, ...], ...] = ()

    def is_empty(self) -> bool:
        return not any(self.groups)

    def to_query(self) -> str:
        return " or ".join(
            " and ".join(condition.to_query() for condition in group)
            for group in self.groups
            if group
        )

    def __str__(self) -> str:
        return self.to_query()


class ConditionBuilder:
    """
    Builds one Condition for a field.

    Usage:
        condition = ConditionBuilder("age").greater_than(18).build()
    """

    def __init__(self, field: str):
        self.field = str(field)
        self._operator: Operator | None = None
        self._value: str | None = None

    def _with(self, operator: Operator, value: Any) -> "ConditionBuilder":
        new_builder = ConditionBuilder(self.field)
        new_builder._operator = operator
        new_builder._value = to_text(value)
        return new_builder

    def equals(self, value: Any) -> "ConditionBuilder":
        return self._with(Operator.EQUALS, value)

    def not_equals(self, value: Any) -> "ConditionBuilder":
        return self._with(Operator.NOT_EQUALS, value)

    def greater_than(self, value: Any) -> "ConditionBuilder":
        return self._with(Operator.GREATER, value)

    def greater_or_equal(self, value: Any) -> "ConditionBuilder":
        return self._with(Operator.GREATER_EQUALS, value)

    def less_than(self, value: Any) -> "ConditionBuilder":
        return self._with(Operator.LESS, value)

    def less_or_equal(self, value: Any) -> "ConditionBuilder":
        return self._with(Operator.LESS_EQUALS, value)

    def contains(self, value: Any) -> "ConditionBuilder":
        return self._with(Operator.CONTAINS, value)

    def build(self) -> Condition:
        if self._operator is None or self._value is None:
            raise ValueError(f"Condition on '{self.field}' has no comparison")
        return Condition(field=self.field, operator=self._operator, value=self._value)


class ConditionSetBuilder:
    """
    Fluent, immutable builder for ConditionSet.

    Usage:
        conditions = (
            ConditionSetBuilder(ConditionBuilder("a").equals(1).build())
            .and_(ConditionBuilder("b").equals(2).build())
            .or_(ConditionBuilder("c").equals(3).build())
            .build()
        )
    """

    def __init__(self, condition: Condition | None = None):
        self.groups: list[list[Condition]] = [[condition]] if condition is not None else []

    def _clone(self) -> "ConditionSetBuilder":
        new_builder = ConditionSetBuilder()
        new_builder.groups = [group.copy() for group in self.groups]
        return new_builder

    def and_(self, condition: Condition) -> "ConditionSetBuilder":
        """Add a condition to the current AND-group"""
        new_builder = self._clone()
        if not new_builder.groups:
            new_builder.groups.append([])
        new_builder.groups[-1].append(condition)
        return new_builder

    def or_(self, condition: Condition) -> "ConditionSetBuilder":
        """Start a new AND-group with the condition"""
        new_builder = self._clone()
        new_builder.groups.append([condition])
        return new_builder

    def build(self) -> ConditionSet:
        return ConditionSet(groups=tuple(tuple(group) for group in self.groups))


def equality(field: str, value: Any) -> ConditionSet:
    """One-clause condition set: field equals value"""
    return ConditionSetBuilder(ConditionBuilder(field).equals(value).build()).build()


class LegacyConditionSetBuilder:
    """
    Parses textual conditions into a ConditionSet.

    Accepted form, with an optional leading 'where':
        name = Joker and age > 18 or 'full name' contains 'Jo Ker'

    Tokens are split shell-style, so quoted fields and values may hold spaces.
    """

    _CONNECTIVES = ("and", "or")

    def __init__(self, conditions: str):
        self.conditions = conditions

    def _tokenize(self) -> list[str]:
        try:
            return shlex.split(self.conditions)
        except ValueError as e:
            raise ConditionParseError(
                f"Cannot tokenize conditions {self.conditions!r}: {e}"
            ) from e

    def build(self) -> ConditionSet:
        tokens = self._tokenize()
        if tokens and tokens[0].lower() == "where":
            tokens = tokens[1:]
        if not tokens:
            raise ConditionParseError("Conditions are empty")

        operators = {operator.value: operator for operator in Operator}
        builder = ConditionSetBuilder()
        connective = "or"
        index = 0

        while index < len(tokens):
            if len(tokens) - index < 3:
                raise ConditionParseError(
                    f"Incomplete condition near {' '.join(tokens[index:])!r}"
                )
            field, raw_operator, value = tokens[index : index + 3]
            operator = operators.get(raw_operator.lower())
            if operator is None:
                raise ConditionParseError(f"Unknown operator {raw_operator!r}")

            condition = Condition(field=field, operator=operator, value=value)
            builder = builder.or_(condition) if connective == "or" else builder.and_(condition)
            index += 3

            if index < len(tokens):
                connective = tokens[index].lower()
                if connective not in self._CONNECTIVES:
                    raise ConditionParseError(
                        f"Expected 'and' or 'or', got {tokens[index]!r}"
                    )
                index += 1
                if index == len(tokens):
                    raise ConditionParseError(
                        f"Dangling {connective!r} at end of conditions"
                    )

        return builder.build()
