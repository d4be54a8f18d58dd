"""Capture-by-value for pipeline callbacks.

A selector or transform that reads state from its defining scope sees that
state while the pipeline runs. Python closures capture variables by
reference, so a later mutation of a captured list or dict changes what the
callback observes mid-traversal. ``captured`` copies and freezes values when
the callback is built:

    bounds = captured(low=18, high=25, genders=["MALE"])
    sel = lambda p: bounds.low <= p.age <= bounds.high

Mutating the original ``genders`` list afterwards has no effect on ``sel``,
and ``bounds`` itself rejects assignment.
"""

from __future__ import annotations

import copy
import dataclasses
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

_SCALARS = (str, bytes, int, float, complex, bool, type(None), frozenset, range)


def freeze(value: Any) -> Any:
    """Return an immutable deep copy of value.

    Lists and tuples become tuples, sets become frozensets, mappings become
    read-only mapping proxies. Frozen dataclasses are deep-copied; mutable
    dataclasses are rejected.

    Raises:
        TypeError: If value is a dataclass instance that is not frozen
    """
    if isinstance(value, _SCALARS):
        return value
    if isinstance(value, Captured):
        return value
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(freeze(v) for v in value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        if not type(value).__dataclass_params__.frozen:  # type: ignore[attr-defined]
            raise TypeError(f"Cannot capture mutable dataclass {type(value).__name__!r}; declare it frozen=True")
        return copy.deepcopy(value)
    if callable(value):
        return value
    return copy.deepcopy(value)


class Captured:
    """Read-only namespace of frozen values."""

    __slots__ = ("_values",)

    def __init__(self, **values: Any) -> None:
        object.__setattr__(self, "_values", {k: freeze(v) for k, v in values.items()})

    def __getattr__(self, name: str) -> Any:
        values = object.__getattribute__(self, "_values")
        try:
            return values[name]
        except KeyError:
            raise AttributeError(f"Nothing captured under {name!r}") from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Captured values are read-only")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("Captured values are read-only")

    def __iter__(self) -> Iterator[str]:
        return iter(object.__getattribute__(self, "_values"))

    def __repr__(self) -> str:
        values = object.__getattribute__(self, "_values")
        inner = ", ".join(f"{k}={v!r}" for k, v in values.items())
        return f"Captured({inner})"


def captured(**values: Any) -> Captured:
    """Freeze values into a read-only namespace for use inside callbacks."""
    return Captured(**values)
