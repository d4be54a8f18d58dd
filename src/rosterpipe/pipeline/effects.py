"""Effect logs for observing pipeline traversals.

Records every capability invocation in the order it happened, so ordering
and exactly-once properties can be checked after a run.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

R = TypeVar("R")


@dataclass(frozen=True)
class Effect:
    """A single recorded invocation.

    Attributes:
        stage: Capability role or label that was invoked
        value: Argument it was invoked with
    """

    stage: str
    value: Any


class EffectLog:
    """Ordered record of capability invocations."""

    def __init__(self) -> None:
        self._effects: list[Effect] = []

    def record(self, stage: str, value: Any) -> None:
        """Append an invocation to the log.

        Args:
            stage: Capability role or label
            value: Argument the capability received
        """
        self._effects.append(Effect(stage, value))

    def track(self, stage: str, fn: Callable[[Any], R]) -> Callable[[Any], R]:
        """Wrap a capability so each call is recorded before it runs.

        The wrapped callable's return value and exceptions pass through.

        Args:
            stage: Label for the recorded invocations
            fn: Capability to wrap

        Returns:
            Tracked callable
        """

        def tracked(value: Any) -> R:
            self.record(stage, value)
            return fn(value)

        tracked.__name__ = getattr(fn, "__name__", stage)
        return tracked

    def appender(self, stage: str = "sink") -> Callable[[Any], None]:
        """Create a sink that only records its argument."""

        def append(value: Any) -> None:
            self.record(stage, value)

        return append

    @property
    def effects(self) -> list[Effect]:
        """All recorded invocations, oldest first."""
        return list(self._effects)

    def values(self, stage: str) -> list[Any]:
        """Arguments recorded for one stage, in order."""
        return [e.value for e in self._effects if e.stage == stage]

    def sink_values(self) -> list[Any]:
        """Arguments recorded under the ``sink`` stage."""
        return self.values("sink")

    def stages(self) -> list[str]:
        """Stage labels of all invocations, in order."""
        return [e.stage for e in self._effects]

    def clear(self) -> None:
        """Forget all recorded invocations."""
        self._effects.clear()

    def __len__(self) -> int:
        return len(self._effects)
