"""
Tests for conditions, condition sets and the legacy condition parser.
"""

import pytest

from fqlmapper.conditions import (
    Condition,
    ConditionBuilder,
    ConditionSet,
    ConditionSetBuilder,
    LegacyConditionSetBuilder,
    Operator,
    equality,
)
from fqlmapper.exceptions import ConditionParseError


class TestConditionBuilder:
    """Test single conditions"""

    def test_equals(self):
        """Test the default equality comparison"""
        condition = ConditionBuilder("id").equals(7).build()

        assert condition == Condition(field="id", operator=Operator.EQUALS, value="7")
        assert condition.to_query() == "'id' = '7'"

    @pytest.mark.parametrize(
        "method, operator",
        [
            ("not_equals", Operator.NOT_EQUALS),
            ("greater_than", Operator.GREATER),
            ("greater_or_equal", Operator.GREATER_EQUALS),
            ("less_than", Operator.LESS),
            ("less_or_equal", Operator.LESS_EQUALS),
            ("contains", Operator.CONTAINS),
        ],
    )
    def test_comparisons(self, method, operator):
        """Test each comparison method"""
        condition = getattr(ConditionBuilder("age"), method)(18).build()

        assert condition.operator == operator
        assert condition.value == "18"

    def test_none_value(self):
        """Test that None compares as null"""
        assert ConditionBuilder("name").equals(None).build().value == "null"

    def test_missing_comparison(self):
        """Test building a condition without a comparison"""
        with pytest.raises(ValueError, match="has no comparison"):
            ConditionBuilder("id").build()


class TestConditionSetBuilder:
    """Test OR-of-AND condition sets"""

    def test_and_or_groups(self):
        """Test grouping of and/or conditions"""
        a = ConditionBuilder("a").equals(1).build()
        b = ConditionBuilder("b").equals(2).build()
        c = ConditionBuilder("c").equals(3).build()

        conditions = ConditionSetBuilder(a).and_(b).or_(c).build()

        assert conditions.groups == ((a, b), (c,))
        assert conditions.to_query() == "'a' = '1' and 'b' = '2' or 'c' = '3'"

    def test_builder_immutability(self):
        """Test that and_/or_ return new builders"""
        a = ConditionBuilder("a").equals(1).build()
        base = ConditionSetBuilder(a)
        extended = base.and_(a)

        assert base.build().groups == ((a,),)
        assert extended.build().groups == ((a, a),)

    def test_empty_set(self):
        """Test an empty condition set"""
        assert ConditionSetBuilder().build().is_empty()
        assert ConditionSet().to_query() == ""

    def test_equality_shortcut(self):
        """Test that equality() equals the long form"""
        long_form = ConditionSetBuilder(ConditionBuilder("name").equals("x").build()).build()

        assert equality("name", "x") == long_form


class TestLegacyConditionSetBuilder:
    """Test parsing textual conditions"""

    def test_single_condition(self):
        """Test that a single comparison parses to the equality shortcut"""
        assert LegacyConditionSetBuilder("name = Joker").build() == equality("name", "Joker")

    def test_and_or(self):
        """Test connectives"""
        conditions = LegacyConditionSetBuilder(
            "where a = 1 and b > 2 or c != 3"
        ).build()

        assert conditions.to_query() == "'a' = '1' and 'b' > '2' or 'c' != '3'"
        assert len(conditions.groups) == 2

    def test_quoted_tokens(self):
        """Test fields and values containing spaces"""
        conditions = LegacyConditionSetBuilder("'full name' contains 'Jo Ker'").build()

        assert conditions.groups[0][0] == Condition(
            field="full name", operator=Operator.CONTAINS, value="Jo Ker"
        )

    def test_connectives_are_case_insensitive(self):
        """Test upper case AND/OR/WHERE"""
        conditions = LegacyConditionSetBuilder("WHERE a = 1 AND b = 2 OR c = 3").build()

        assert len(conditions.groups) == 2
        assert len(conditions.groups[0]) == 2

    @pytest.mark.parametrize(
        "text, message",
        [
            ("", "empty"),
            ("where", "empty"),
            ("a =", "Incomplete"),
            ("a ~ 1", "Unknown operator"),
            ("a = 1 b = 2", "Expected 'and' or 'or'"),
            ("a = 1 and", "Dangling"),
            ("a = 'unterminated", "Cannot tokenize"),
        ],
    )
    def test_malformed_conditions(self, text, message):
        """Test that malformed text raises ConditionParseError"""
        with pytest.raises(ConditionParseError, match=message):
            LegacyConditionSetBuilder(text).build()
