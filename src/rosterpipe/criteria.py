"""Search criteria for the roster and the search approaches built on them.

Approaches 1–9 progress from hard-coded searches to a generic pipeline:

1. Search for members matching one characteristic
2. Generalize the search to an age range
3. Pass the criteria as an object with a ``test`` method
4. Pass an ad-hoc object instead of a named class
5. Pass the criteria as a lambda
6. Pass a standard predicate
7. Pass both the criteria and the action as functions
8. Add a transform stage and generalize the element type
9. Chain lazy stream stages
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from rich import print

from rosterpipe.pipeline import Stream, captured, for_each_matching, process_elements
from rosterpipe.pipeline.registry import CapabilityRegistry, get_registry, selector, sink, transform
from rosterpipe.roster import Person, Sex, create_roster, print_person

logger = logging.getLogger(__name__)


# Selectors


@selector()
def selective_service(person: Person) -> bool:
    """Male and between 18 and 25 inclusive."""
    return person.gender == Sex.MALE and 18 <= person.age <= 25


def older_than(age: int) -> Callable[[Person], bool]:
    """Selector factory: age >= the given age."""
    bounds = captured(age=age)
    return lambda person: person.age >= bounds.age


def within_age_range(low: int, high: int) -> Callable[[Person], bool]:
    """Selector factory: low <= age <= high."""
    bounds = captured(low=low, high=high)
    return lambda person: bounds.low <= person.age <= bounds.high


def male_within(low: int, high: int) -> Callable[[Person], bool]:
    """Selector factory: male and low <= age <= high."""
    bounds = captured(low=low, high=high)
    return lambda person: person.gender == Sex.MALE and bounds.low <= person.age <= bounds.high


class CheckPersonEligibleForSelectiveService:
    """Named criteria object for approach 3."""

    def test(self, person: Person) -> bool:
        return person.gender == Sex.MALE and 18 <= person.age <= 25


# Transforms


@transform("email")
def email_of(person: Person) -> str:
    return person.email_address


@transform("name")
def name_of(person: Person) -> str:
    return person.name


@transform("age")
def age_of(person: Person) -> int:
    return person.age


# Sinks

sink("print_person")(print_person)


@sink("print_value")
def print_value(value: Any) -> None:
    print(value)


BUILTINS: dict[str, dict[str, Callable[..., Any]]] = {
    "selector": {"selective_service": selective_service},
    "transform": {"email": email_of, "name": name_of, "age": age_of},
    "sink": {"print_person": print_person, "print_value": print_value},
}


def register_builtins(registry: CapabilityRegistry | None = None) -> None:
    """Register the built-in selectors, transforms and sinks.

    Decorators register them once at import time; this puts them back after
    a registry has been cleared.
    """
    if registry is None:
        registry = get_registry()
    for role, entries in BUILTINS.items():
        for name, fn in entries.items():
            registry.register(role, name, fn)


# Approaches 1-7


def print_persons_older_than(roster: Iterable[Person], age: int) -> None:
    """Approach 1: print members at least ``age`` years old."""
    for_each_matching(roster, older_than(age), print_person)


def print_persons_within_age_range(roster: Iterable[Person], low: int, high: int) -> None:
    """Approach 2: print members with low <= age <= high."""
    for_each_matching(roster, within_age_range(low, high), print_person)


def print_persons(roster: Iterable[Person], tester: Any) -> None:
    """Approaches 3-6: print members accepted by tester.

    Args:
        roster: Members to search
        tester: Callable or object with a ``test`` method
    """
    for_each_matching(roster, tester, print_person)


def process_persons(roster: Iterable[Person], tester: Any, block: Any) -> None:
    """Approach 7: hand members accepted by tester to block."""
    for_each_matching(roster, tester, block)


# Demonstrations


class _AgeRangeTester:
    """Stands in for an anonymous criteria class."""

    def test(self, person: Person) -> bool:
        return person.gender == Sex.MALE and 18 <= person.age <= 25


def demo_older_than() -> None:
    print_persons_older_than(create_roster(), 18)


def demo_within_age_range() -> None:
    print_persons_within_age_range(create_roster(), 20, 40)


def demo_named_criteria() -> None:
    print_persons(create_roster(), CheckPersonEligibleForSelectiveService())


def demo_anonymous_criteria() -> None:
    print_persons(create_roster(), _AgeRangeTester())


def demo_lambda_criteria() -> None:
    print_persons(create_roster(), lambda p: p.gender == Sex.MALE and 18 <= p.age <= 25)


def demo_predicate() -> None:
    print_persons(create_roster(), selective_service)


def demo_criteria_and_action() -> None:
    process_persons(
        create_roster(),
        lambda p: p.gender == Sex.MALE and 18 <= p.age <= 25,
        lambda person: print_person(person),
    )


def demo_generic_elements() -> None:
    process_elements(
        create_roster(),
        lambda p: p.gender == Sex.MALE and 18 <= p.age <= 40,
        lambda p: p.email_address,
        lambda email: print(email),
    )


def demo_stream() -> None:
    (
        Stream(create_roster())
        .filter(lambda p: p.gender == Sex.MALE and 18 <= p.age <= 35)
        .map(lambda p: p.email_address)
        .for_each(lambda email: print(email))
    )


DEMOS: dict[int, tuple[str, Callable[[], None]]] = {
    1: ("Search for members older than an age", demo_older_than),
    2: ("Search within an age range", demo_within_age_range),
    3: ("Criteria in a named class", demo_named_criteria),
    4: ("Criteria in an ad-hoc class", demo_anonymous_criteria),
    5: ("Criteria as a lambda", demo_lambda_criteria),
    6: ("Criteria as a standard predicate", demo_predicate),
    7: ("Criteria and action as functions", demo_criteria_and_action),
    8: ("Generic select, transform and consume", demo_generic_elements),
    9: ("Chained lazy stream stages", demo_stream),
}


def run_demo(number: int) -> None:
    """Run one numbered approach.

    Raises:
        KeyError: If there is no approach with that number
    """
    if number not in DEMOS:
        raise KeyError(f"No approach {number} (choose 1-{len(DEMOS)})")
    title, demo = DEMOS[number]
    logger.debug("Running approach %d: %s", number, title)
    demo()
