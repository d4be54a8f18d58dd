"""Pipeline engine.

Drives a source through selector → transform → sink one element at a time:

    for e in source:
        if selector(e):
            sink(transform(e))

Nothing is buffered between stages and the source is iterated exactly once,
so generators and unbounded iterators are valid sources. A failure raised by
any capability stops the traversal and propagates to the caller unchanged,
annotated with the stage and position it came from.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TypeVar

from rosterpipe.pipeline.capabilities import (
    Selector,
    Sink,
    SupportsAccept,
    SupportsApply,
    SupportsTest,
    Transform,
    as_selector,
    as_sink,
    as_transform,
    identity,
)

X = TypeVar("X")
Y = TypeVar("Y")


def failure_note(stage: str, position: int, accepted: int) -> str:
    """Describe where in a traversal a capability failed.

    Args:
        stage: "selector", "transform" or "sink"
        position: 0-based position of the element in the source
        accepted: Number of elements accepted so far, including this one
            when the failure came from the transform or sink

    Returns:
        Note text attached to the propagated exception
    """
    return (
        f"pipeline {stage} failed on source element {position} "
        f"({accepted} accepted so far); remaining elements were not processed"
    )


def process_elements(
    source: Iterable[X],
    selector: Selector[X] | SupportsTest[X],
    transform: Transform[X, Y] | SupportsApply[X, Y],
    sink: Sink[Y] | SupportsAccept[Y],
) -> None:
    """Select, transform and consume each element of source in order.

    Args:
        source: Finite (or lazily produced) sequence of elements
        selector: Decides whether an element proceeds
        transform: Maps an accepted element to the value handed to sink
        sink: Consumes each transformed value

    Raises:
        Exception: Whatever a capability raised, with a note naming the
            failing stage and source position
    """
    test = as_selector(selector)
    apply = as_transform(transform)
    accept = as_sink(sink)

    accepted = 0
    for position, element in enumerate(source):
        stage = "selector"
        try:
            if not test(element):
                continue
            accepted += 1
            stage = "transform"
            value = apply(element)
            stage = "sink"
            accept(value)
        except Exception as e:
            e.add_note(failure_note(stage, position, accepted))
            raise


def for_each_matching(
    source: Iterable[X],
    selector: Selector[X] | SupportsTest[X],
    sink: Sink[X] | SupportsAccept[X],
) -> None:
    """Hand every element of source accepted by selector to sink, in order.

    Equivalent to ``process_elements(source, selector, identity, sink)``.
    """
    process_elements(source, selector, identity, sink)
