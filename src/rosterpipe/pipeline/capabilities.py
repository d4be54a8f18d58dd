"""Capability contracts for pipeline callbacks.

A pipeline is parameterized by three single-operation behaviors:

    selector:  X → bool
    transform: X → Y
    sink:      Y → None

Each role is satisfied by any plain callable, or by an object exposing the
role's single operation (``test``, ``apply`` or ``accept``). There is no
shared base type.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, TypeVar, runtime_checkable

X = TypeVar("X")
Y = TypeVar("Y")
X_contra = TypeVar("X_contra", contravariant=True)
Y_co = TypeVar("Y_co", covariant=True)

# Type aliases
Selector = Callable[[X], bool]
Transform = Callable[[X], Y]
Sink = Callable[[Y], None]


@runtime_checkable
class SupportsTest(Protocol[X_contra]):
    """Single-method selector object."""

    def test(self, x: X_contra) -> bool: ...


@runtime_checkable
class SupportsApply(Protocol[X_contra, Y_co]):
    """Single-method transform object."""

    def apply(self, x: X_contra) -> Y_co: ...


@runtime_checkable
class SupportsAccept(Protocol[X_contra]):
    """Single-method sink object."""

    def accept(self, y: X_contra) -> None: ...


def identity(x: X) -> X:
    """Default transform that returns its argument."""
    return x


def always_true(x: Any) -> bool:
    """Default selector that accepts every element."""
    return True


def discard(y: Any) -> None:
    """Default sink that ignores its argument."""
    return None


def _resolve(obj: Any, role: str, method: str) -> Callable[..., Any]:
    """Resolve a capability to a plain callable.

    Args:
        obj: Callable or single-method object
        role: Role name used in error messages
        method: Name of the single operation for this role

    Returns:
        Callable implementing the role

    Raises:
        TypeError: If obj neither is callable nor exposes ``method``
    """
    if callable(obj):
        return obj

    bound = getattr(obj, method, None)
    if callable(bound):
        return bound

    raise TypeError(
        f"{type(obj).__name__!r} object cannot be used as a {role}: "
        f"expected a callable or an object with a {method}() method"
    )


def as_selector(obj: Selector[X] | SupportsTest[X]) -> Selector[X]:
    """Resolve a selector capability to a callable."""
    return _resolve(obj, "selector", "test")


def as_transform(obj: Transform[X, Y] | SupportsApply[X, Y]) -> Transform[X, Y]:
    """Resolve a transform capability to a callable."""
    return _resolve(obj, "transform", "apply")


def as_sink(obj: Sink[Y] | SupportsAccept[Y]) -> Sink[Y]:
    """Resolve a sink capability to a callable."""
    return _resolve(obj, "sink", "accept")
