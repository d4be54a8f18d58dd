"""Two-operand integer operations passed as behavior."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

IntegerOperation = Callable[[int, int], int]


@runtime_checkable
class IntegerMath(Protocol):
    """Object exposing a single two-operand integer operation."""

    def operation(self, a: int, b: int) -> int: ...


def addition(a: int, b: int) -> int:
    return a + b


def subtraction(a: int, b: int) -> int:
    return a - b


def multiplication(a: int, b: int) -> int:
    return a * b


OPERATIONS: dict[str, IntegerOperation] = {
    "add": addition,
    "subtract": subtraction,
    "multiply": multiplication,
}

SYMBOLS: dict[str, str] = {
    "add": "+",
    "subtract": "-",
    "multiply": "*",
}


def operate_binary(a: int, b: int, op: IntegerOperation | IntegerMath) -> int:
    """Apply op to a and b.

    Args:
        a: Left operand
        b: Right operand
        op: Callable or object with an ``operation`` method

    Returns:
        Result of the operation

    Raises:
        TypeError: If op is neither callable nor an IntegerMath
    """
    if callable(op):
        return op(a, b)
    if isinstance(op, IntegerMath):
        return op.operation(a, b)
    raise TypeError(f"{type(op).__name__!r} object is not an integer operation")
