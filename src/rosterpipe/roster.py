"""Person records and the demonstration roster."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from rich import print


class Sex(Enum):
    """Gender recorded for a person."""

    MALE = "male"
    FEMALE = "female"


@dataclass(frozen=True)
class Person:
    """A roster member.

    Attributes:
        name: Display name
        birthday: Date of birth
        gender: Recorded gender
        email_address: Contact email
    """

    name: str
    birthday: date
    gender: Sex
    email_address: str

    def age_on(self, day: date) -> int:
        """Whole years between birthday and day."""
        years = day.year - self.birthday.year
        if (day.month, day.day) < (self.birthday.month, self.birthday.day):
            years -= 1
        return years

    @property
    def age(self) -> int:
        """Age as of today."""
        return self.age_on(date.today())

    @property
    def email(self) -> str:
        return self.email_address

    def describe(self) -> str:
        """One-line summary used by print_person."""
        return f"{self.name}, {self.age}, {self.gender.name}, {self.email_address}"


def create_roster() -> list[Person]:
    """Build the demonstration roster."""
    return [
        Person("Fred", date(1980, 6, 20), Sex.MALE, "fred@example.com"),
        Person("Jane", date(1990, 7, 15), Sex.FEMALE, "jane@example.com"),
        Person("George", date(1991, 8, 13), Sex.MALE, "george@example.com"),
        Person("Bob", date(2000, 9, 12), Sex.MALE, "bob@example.com"),
    ]


def print_person(person: Person) -> None:
    """Sink: print a person's summary line."""
    print(person.describe())
