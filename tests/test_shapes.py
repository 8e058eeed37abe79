"""Tests for the KeyWith, FlatMap and OrderedPairList shape types."""
import pytest
import numpy as np
from fakehash import (
    TypeConstraint,
    KeyWith,
    FlatMap,
    OrderedPairList,
    Str,
    Int,
    ArrayRef,
    Maybe,
    is_key_with,
    is_flat_map,
    is_ordered_pair_list,
    type_storage,
    diagnose,
    assert_shape,
    key_with_of,
    get_type_registry
)
from utils.exceptions import ShapeMismatch, KeyTypeMismatch, ValueTypeMismatch


NOT_LIST_LIKE = ["Hello", "", 42, None, {"a": 1}, {"a", "b"}, b"ab"]


class TestPredicates:
    """Tests for the structure-only predicates."""

    def test_is_key_with(self):
        """Test pair predicate accepts exactly two elements."""
        assert is_key_with(["a", "b"])
        assert is_key_with(("a", 1))
        assert not is_key_with([])
        assert not is_key_with(["a"])
        assert not is_key_with(["a", "b", "c"])

    def test_is_flat_map(self):
        """Test flat map predicate accepts even lengths, including zero."""
        assert is_flat_map([])
        assert is_flat_map(["a", 1, "b", 2])
        assert not is_flat_map(["a"])
        assert not is_flat_map(["a", 1, "b"])

    def test_is_ordered_pair_list(self):
        """Test ordered pair list predicate accepts any list."""
        assert is_ordered_pair_list([])
        assert is_ordered_pair_list(["a", "x"])
        assert is_ordered_pair_list([1, 2, 3])

    @pytest.mark.parametrize("value", NOT_LIST_LIKE)
    def test_predicates_reject_non_lists(self, value):
        """Test every predicate rejects values that are not list-like."""
        assert not is_key_with(value)
        assert not is_flat_map(value)
        assert not is_ordered_pair_list(value)

    def test_base_constraints_match_predicates(self):
        """Test unparameterized types check structure only."""
        for value in [[], ["a"], ["a", 1], [1, 2], ["a", 1, "b"], "ab", None]:
            assert KeyWith.check(value) == is_key_with(value)
            assert FlatMap.check(value) == is_flat_map(value)
            assert OrderedPairList.check(value) == is_ordered_pair_list(value)

    def test_base_constraint_ignores_element_types(self):
        """Test structure checks do not look at keys or values."""
        assert KeyWith.check([1, 2])
        assert FlatMap.check([1, 2, 3, 4])
        assert OrderedPairList.check([1, 2, 3])


class TestKeyWith:
    """Tests for KeyWith[X]."""

    def test_valid_pair(self):
        """Test a string key with a matching value."""
        assert KeyWith[Str].check(["a", "b"])
        assert KeyWith[Str].check(("Content-Type", "text/plain"))

    @pytest.mark.parametrize("value", [["a", 1], ["a"], [], ["a", "b", "c"], [1, "b"], "ab"])
    def test_invalid_pairs(self, value):
        """Test wrong arity, key type and value type are rejected."""
        assert not KeyWith[Str].check(value)

    def test_repeated_checks_agree(self):
        """Test checking the same value twice gives the same answer."""
        constraint = KeyWith[Int]
        for value in [["a", 1], ["a", "b"], []]:
            assert constraint.check(value) == constraint.check(value)

    def test_key_checked_before_value(self):
        """Test the value is not inspected when the key fails."""
        seen = []
        recorder = TypeConstraint('Recorded', constraint=lambda value: seen.append(value) or True)
        constraint = KeyWith.parameterize(recorder)

        assert not constraint.check([1, "value"])
        assert seen == []
        assert constraint.check(["key", "value"])
        assert seen == ["value"]

    def test_nested_parameter(self):
        """Test KeyWith over a parameterized value type."""
        constraint = KeyWith[ArrayRef[Int]]
        assert constraint.check(["ids", [1, 2, 3]])
        assert not constraint.check(["ids", [1, "2"]])

    def test_name(self):
        """Test parameterized names are derived from the parameter."""
        assert KeyWith[Str].name == "KeyWith[Str]"
        assert KeyWith[ArrayRef[Int]].name == "KeyWith[ArrayRef[Int]]"


class TestFlatMap:
    """Tests for FlatMap[X]."""

    def test_valid_flat_map(self):
        """Test alternating string keys and matching values."""
        assert FlatMap[Int].check(["k1", 1, "k2", 2])

    def test_empty_is_valid(self):
        """Test the empty flat map is valid."""
        assert FlatMap[Int].check([])

    def test_odd_length(self):
        """Test odd lengths are rejected."""
        assert not FlatMap[Int].check(["k1", 1, "k2"])

    def test_value_mismatch(self):
        """Test a value of the wrong type is rejected."""
        assert not FlatMap[Int].check(["k1", "x"])

    def test_key_mismatch(self):
        """Test a non-string key is rejected."""
        assert not FlatMap[Int].check(["k1", 1, 2, 2])

    def test_duplicate_keys_allowed(self):
        """Test duplicate keys keep list semantics."""
        assert FlatMap[Str].check(["Set-Cookie", "a=1", "Set-Cookie", "b=2"])

    def test_generated_check_rechecks_parity(self):
        """Test the generated closure rejects odd lengths on its own."""
        generated = FlatMap.generate_constraint_for(Int)
        assert not generated(["k1", 1, "k2"])
        assert generated(["k1", 1])

    def test_numpy_values(self):
        """Test NumPy integer scalars satisfy Int values."""
        assert FlatMap[Int].check(["a", np.int64(1), "b", np.int32(2)])
        assert not FlatMap[Int].check(["a", np.float64(1.5)])


class TestOrderedPairList:
    """Tests for OrderedPairList[X]."""

    def test_valid_list(self):
        """Test a list of string/value pairs."""
        assert OrderedPairList[Str].check([["a", "x"], ["b", "y"]])

    def test_value_mismatch(self):
        """Test one bad value fails the whole list."""
        assert not OrderedPairList[Str].check([["a", "x"], ["b", 5]])

    def test_empty_is_valid(self):
        """Test the empty list is valid."""
        assert OrderedPairList[Str].check([])

    def test_flat_list_rejected(self):
        """Test elements must themselves be pairs."""
        assert not OrderedPairList[Str].check(["a", "x"])

    def test_wrong_arity_element(self):
        """Test an element with three items is rejected."""
        assert not OrderedPairList[Str].check([["a", "x"], ["b", "y", "z"]])

    def test_stops_at_first_failure(self):
        """Test elements after the first failure are not inspected."""
        seen = []
        recorder = TypeConstraint(
            'Recorded',
            constraint=lambda value: seen.append(value) or value != "bad"
        )
        constraint = OrderedPairList.parameterize(recorder)

        assert not constraint.check([["a", "ok"], ["b", "bad"], ["c", "never"]])
        assert seen == ["ok", "bad"]

    def test_uses_cached_pair_constraint(self):
        """Test the element check comes from the KeyWith parameterization cache."""
        OrderedPairList[Int]
        assert key_with_of(Int) is KeyWith[Int]

    def test_maybe_values(self):
        """Test pairs whose values may be None."""
        constraint = OrderedPairList[Maybe[Str]]
        assert constraint.check([["X-Zombies", None], ["Content-Type", "text/plain"]])
        assert not constraint.check([["X-Zombies", 0]])


class TestCompositionHelper:
    """Tests for key_with_of."""

    def test_returns_parameterized_pair(self):
        """Test the helper returns KeyWith[X]."""
        pair = key_with_of(Str)
        assert pair.name == "KeyWith[Str]"
        assert pair.parameterized_from is KeyWith
        assert pair.type_parameter is Str

    def test_accepts_names(self):
        """Test type parameters can be given by name."""
        assert key_with_of("Int") is key_with_of(Int)

    def test_does_not_register_names(self):
        """Test derived pair types stay anonymous."""
        key_with_of(Int)
        assert "KeyWith[Int]" not in get_type_registry()


class TestDiagnostics:
    """Tests for failure classification."""

    def test_valid_values(self):
        """Test valid values produce no diagnosis."""
        assert diagnose(KeyWith[Str], ["a", "b"]) is None
        assert diagnose(FlatMap[Int], []) is None
        assert diagnose(OrderedPairList[Str], [["a", "b"]]) is None
        assert diagnose(KeyWith, [1, 2]) is None

    def test_shape_mismatch(self):
        """Test structural failures."""
        assert diagnose(KeyWith[Str], "Hello") is ShapeMismatch
        assert diagnose(KeyWith[Str], ["a"]) is ShapeMismatch
        assert diagnose(FlatMap[Int], ["a", 1, "b"]) is ShapeMismatch
        assert diagnose(OrderedPairList[Str], ["a", "x"]) is ShapeMismatch

    def test_key_mismatch(self):
        """Test key failures are reported before value failures."""
        assert diagnose(KeyWith[Str], [1, 2]) is KeyTypeMismatch
        assert diagnose(FlatMap[Int], ["a", 1, 2, 2]) is KeyTypeMismatch
        assert diagnose(OrderedPairList[Str], [[1, "x"]]) is KeyTypeMismatch

    def test_value_mismatch(self):
        """Test value failures."""
        assert diagnose(KeyWith[Str], ["a", []]) is ValueTypeMismatch
        assert diagnose(FlatMap[Int], ["k1", "x"]) is ValueTypeMismatch
        assert diagnose(OrderedPairList[Str], [["a", "x"], ["b", 5]]) is ValueTypeMismatch

    def test_non_shape_type(self):
        """Test diagnosing a non-shape type is an error."""
        with pytest.raises(ValueError):
            diagnose(Str, "a")

    def test_assert_shape(self):
        """Test assert_shape returns the value or raises the diagnosed error."""
        assert assert_shape(KeyWith[Str], ["a", "b"]) == ["a", "b"]

        with pytest.raises(ValueTypeMismatch) as exc_info:
            assert_shape(KeyWith[Str], ["a", 1])

        assert exc_info.value.details['type'] == "KeyWith[Str]"
        assert "KeyWith[Str]" in exc_info.value.message


class TestTypeStorage:
    """Tests for name enumeration."""

    def test_type_storage(self):
        """Test every shape type is listed by name."""
        assert type_storage() == {
            "KeyWith": "KeyWith",
            "FlatMap": "FlatMap",
            "OrderedPairList": "OrderedPairList",
        }

    def test_registry_lists_shape_types(self):
        """Test the registry reports the same names for this module."""
        assert get_type_registry().list_names(package="fakehash.shapes") == type_storage()
