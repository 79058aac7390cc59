# pyright: reportPrivateUsage=false

"""Test suite for `pasteblocks.utils` module."""

from __future__ import annotations

import pytest

from pasteblocks.utils import iter_runs, lazyproperty

# -- iter_runs() ---------------------------------


@pytest.mark.parametrize(
    ("items", "expected_value"),
    [
        ("", []),
        ("a", [("a", 0, 1)]),
        ("aabccc", [("a", 0, 2), ("b", 2, 1), ("c", 3, 3)]),
        # -- a key value that recurs after a different one starts a new run --
        ("abba", [("a", 0, 1), ("b", 1, 2), ("a", 3, 1)]),
    ],
)
def test_iter_runs_generates_maximal_runs(items: str, expected_value: list[tuple[str, int, int]]):
    assert list(iter_runs(items, lambda c: c)) == expected_value


def test_iter_runs_groups_by_the_key_function():
    assert list(iter_runs([1, 3, 2, 4, 5], lambda n: n % 2)) == [(1, 0, 2), (0, 2, 2), (1, 4, 1)]


# -- lazyproperty --------------------------------


class DescribeLazyproperty:
    """Unit-test suite for `pasteblocks.utils.lazyproperty` decorator."""

    def it_computes_the_value_on_first_access_only(self, obj: _Counter):
        assert obj.value == 1
        assert obj.value == 1
        assert obj.calls == 1

    def it_stores_the_value_per_instance(self):
        a, b = _Counter(), _Counter()
        assert (a.value, b.value) == (1, 1)
        assert (a.calls, b.calls) == (1, 1)

    def it_adopts_the_docstring_of_the_decorated_method(self):
        assert _Counter.value.__doc__ == "Number of times this property was computed."

    def it_is_read_only(self, obj: _Counter):
        with pytest.raises(AttributeError, match="can't set attribute"):
            obj.value = 42  # pyright: ignore[reportAttributeAccessIssue]

    def but_it_recomputes_a_None_value(self):
        obj = _NoneValue()
        assert obj.value is None
        assert obj.value is None
        assert obj.calls == 2

    # -- fixtures --------------------------------------------------------------------------------

    @pytest.fixture
    def obj(self) -> _Counter:
        return _Counter()


class _Counter:
    def __init__(self):
        self.calls = 0

    @lazyproperty
    def value(self) -> int:
        """Number of times this property was computed."""
        self.calls += 1
        return self.calls


class _NoneValue:
    def __init__(self):
        self.calls = 0

    @lazyproperty
    def value(self) -> None:
        self.calls += 1
        return None
