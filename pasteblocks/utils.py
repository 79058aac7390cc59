from __future__ import annotations

import functools
from itertools import groupby
from typing import Any, Callable, Generic, Hashable, Iterator, Sequence, TypeVar, cast

_T = TypeVar("_T")
_K = TypeVar("_K", bound=Hashable)


def iter_runs(items: Sequence[_T], key: Callable[[_T], _K]) -> Iterator[tuple[_K, int, int]]:
    """Generate `(key_value, offset, length)` for each maximal run of items sharing a key value.

    Example
    -------
    iter_runs("aabccc", lambda c: c) -> ("a", 0, 2), ("b", 2, 1), ("c", 3, 3)
    """
    offset = 0
    for value, group in groupby(items, key=key):
        length = sum(1 for _ in group)
        yield value, offset, length
        offset += length


class lazyproperty(Generic[_T]):
    """Decorator like @property, but evaluated only on first access.

    Like @property, this can only be used to decorate methods having only a `self` parameter, and
    is accessed like an attribute on an instance, i.e. trailing parentheses are not used. Unlike
    @property, the decorated method is only evaluated on first access; the resulting value is
    cached and that same value returned on second and later access without re-evaluation of the
    method.

    The cached value is stored in the __dict__ of the *instance* under the name of the decorated
    method. Because this is a *data descriptor*, its `__get__()` method runs on each access and
    shadows that __dict__ item.

    A lazyproperty is read-only. Attempting to assign to a lazyproperty raises AttributeError
    unconditionally.
    """

    def __init__(self, fget: Callable[..., _T]) -> None:
        self._fget = fget
        self._name = fget.__name__
        # --- adopt fget's __name__, __doc__, and other attributes
        functools.update_wrapper(self, fget)  # pyright: ignore

    def __get__(self, obj: Any, type: Any = None) -> _T:
        """Called on each access of the decorated attribute on class or instance.

        When accessed on the class, e.g. `Obj.fget`, the descriptor itself is returned.
        """
        if obj is None:
            return self  # type: ignore

        value = obj.__dict__.get(self._name)
        if value is None:
            # --- on first access, the __dict__ item will be absent. Evaluate fget()
            # --- and store that value in the host-object __dict__ under the same name
            value = self._fget(obj)
            obj.__dict__[self._name] = value
        return cast(_T, value)

    def __set__(self, obj: Any, value: Any) -> None:
        """Raises unconditionally, to preserve read-only behavior."""
        raise AttributeError("can't set attribute")
