"""Unit tests for `understudy.calls`."""

import dataclasses

import pytest

from understudy.calls import CallRecord, strictly_equal

# pylint: disable=magic-value-comparison


class Thing:  # pylint: disable=too-few-public-methods
    """An object with value equality, to check it is not used."""

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Thing)

    __hash__ = object.__hash__


# --- strictly_equal ---


@pytest.mark.parametrize(
    ("a", "b"),
    [
        (1, 1),
        (10**20, int("1" + "0" * 20)),
        ("abc", "".join(["a", "b", "c"])),
        (b"xy", bytes([120, 121])),
        (2.5, 2.5),
        (1 + 2j, 1 + 2j),
        (True, True),
        (None, None),
    ],
)
def test_equal_scalars_are_strictly_equal(a, b):
    """Scalars of the same type compare by value."""
    assert strictly_equal(a, b)


@pytest.mark.parametrize(
    ("a", "b"),
    [
        (1, 1.0),
        (1, True),
        (0, False),
        ("1", 1),
        (b"a", "a"),
        (None, 0),
        (1, 2),
    ],
)
def test_mixed_types_and_different_values_are_not_strictly_equal(a, b):
    """Values of different types never compare equal, even if `==` says so."""
    assert not strictly_equal(a, b)


def test_containers_compare_by_identity():
    """Equal but distinct containers are not strictly equal."""
    items = [1, 2]
    assert strictly_equal(items, items)
    assert not strictly_equal(items, [1, 2])
    assert not strictly_equal((1, [2]), (1, [2]))
    assert not strictly_equal({"a": 1}, {"a": 1})


def test_custom_eq_is_ignored():
    """User-defined `__eq__` does not make distinct objects strictly equal."""
    thing = Thing()
    assert strictly_equal(thing, thing)
    assert not strictly_equal(Thing(), Thing())


def test_nan_only_equals_itself():
    """A NaN object is equal to itself but not to another NaN."""
    nan = float("nan")
    assert strictly_equal(nan, nan)
    assert not strictly_equal(nan, float("nan"))


# --- CallRecord ---


class TestCallRecord:
    """Tests for the CallRecord value object."""

    @staticmethod
    def test_defaults() -> None:
        """A bare record has no args, no kwargs and no return value."""
        record = CallRecord()
        assert record.args == ()
        assert dict(record.kwargs) == {}
        assert record.return_value is None
        assert record.call_context is None
        assert record.exception is None
        assert not record.raised

    @staticmethod
    def test_is_immutable() -> None:
        """Fields cannot be reassigned."""
        record = CallRecord(args=(1,))
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.args = (2,)  # type: ignore[misc]

    @staticmethod
    def test_kwargs_are_read_only_copies() -> None:
        """Mutating the source dict or the record's mapping is impossible."""
        source = {"a": 1}
        record = CallRecord(kwargs=source)
        source["a"] = 2
        assert record.kwargs["a"] == 1
        with pytest.raises(TypeError):
            record.kwargs["a"] = 3  # type: ignore[index]

    @staticmethod
    def test_args_are_stored_as_tuple() -> None:
        """Any sequence of args is normalized to a tuple."""
        record = CallRecord(args=[1, 2])  # type: ignore[arg-type]
        assert record.args == (1, 2)

    @staticmethod
    def test_equality_by_fields() -> None:
        """Records with the same fields compare equal."""
        assert CallRecord(args=(1,), return_value=2) == CallRecord(
            args=(1,), kwargs={}, return_value=2
        )
        assert CallRecord(args=(1,)) != CallRecord(args=(2,))

    @staticmethod
    def test_matches() -> None:
        """`matches` applies strict comparison positionally and by keyword."""
        obj = object()
        record = CallRecord(args=(1, obj), kwargs={"k": "v"})
        assert record.matches((1, obj), {"k": "v"})
        assert not record.matches((1, obj), {})
        assert not record.matches((1, object()), {"k": "v"})
        assert not record.matches((1,), {"k": "v"})
        assert not record.matches((1, obj), {"k": "w"})
