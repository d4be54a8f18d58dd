"""Lazy stage combinators.

The fused engine split into reusable pieces:

    consume(transform(select(source, selector), fn), sink)

and the equivalent fluent form:

    Stream(source).filter(selector).map(fn).for_each(sink)

Every stage is a generator, so each element is selected, transformed and
consumed before the next one is pulled from the source.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Generic, TypeVar

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
)

X = TypeVar("X")
Y = TypeVar("Y")


def select(source: Iterable[X], selector: Selector[X] | SupportsTest[X]) -> Iterator[X]:
    """Yield the elements of source accepted by selector."""
    test = as_selector(selector)
    return (element for element in source if test(element))


def transform(source: Iterable[X], fn: Transform[X, Y] | SupportsApply[X, Y]) -> Iterator[Y]:
    """Yield fn(element) for each element of source."""
    apply = as_transform(fn)
    return (apply(element) for element in source)


def consume(source: Iterable[Y], sink: Sink[Y] | SupportsAccept[Y]) -> None:
    """Pull every element of source and hand it to sink."""
    accept = as_sink(sink)
    for value in source:
        accept(value)


class Stream(Generic[X]):
    """Single-use lazy sequence with chainable stages.

    Chaining a stage hands the underlying iterator to the new stream, so a
    stream can be chained, iterated or terminated exactly once.
    """

    def __init__(self, source: Iterable[X]) -> None:
        self._iterator: Iterator[X] | None = iter(source)

    def _take(self) -> Iterator[X]:
        if self._iterator is None:
            raise RuntimeError("Stream has already been consumed")
        iterator, self._iterator = self._iterator, None
        return iterator

    @property
    def consumed(self) -> bool:
        """True once the stream has been chained, iterated or terminated."""
        return self._iterator is None

    def filter(self, selector: Selector[X] | SupportsTest[X]) -> Stream[X]:
        """Keep only elements accepted by selector."""
        return Stream(select(self._take(), selector))

    def map(self, fn: Transform[X, Y] | SupportsApply[X, Y]) -> Stream[Y]:
        """Map each element through fn."""
        return Stream(transform(self._take(), fn))

    def for_each(self, sink: Sink[X] | SupportsAccept[X]) -> None:
        """Terminal stage: hand every remaining element to sink."""
        consume(self._take(), sink)

    def to_list(self) -> list[X]:
        """Terminal stage: collect the remaining elements."""
        return list(self._take())

    def __iter__(self) -> Iterator[X]:
        return self._take()
