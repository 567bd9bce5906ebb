"""Value objects for the organization domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ulid import ULID

PERSON_ID_PATTERN = re.compile(r"[0-9]{7}")

DEFAULT_RANK = "Newbie"


@dataclass(frozen=True)
class GroupId:
    """Identifier for a Group aggregate.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> GroupId:
        """Generate a new GroupId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> GroupId:
        """Create GroupId from string value.

        Args:
            value: ULID string

        Returns:
            GroupId instance

        Raises:
            ValueError: If value is not a valid ULID
        """
        if not isinstance(value, str):
            raise ValueError(f"Invalid GroupId: {value!r}")
        try:
            ulid = ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid GroupId: {value}") from e

        return cls(value=str(ulid))


@dataclass(frozen=True)
class PersonId:
    """Identifier for a Person aggregate.

    Person ids are supplied from outside (personal numbers), never generated
    by the store, and always consist of exactly seven digits.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def from_string(cls, value: str) -> PersonId:
        """Create PersonId from string value.

        Raises:
            ValueError: If value is not exactly seven digits
        """
        if not isinstance(value, str) or not PERSON_ID_PATTERN.fullmatch(value):
            raise ValueError(f"Invalid PersonId: {value!r}")

        return cls(value=value)


@dataclass(frozen=True)
class RemovalResult:
    """Outcome of a hard removal, reported even when nothing matched."""

    matched: int
    deleted: int


@dataclass(frozen=True)
class DischargeResult:
    """Outcome of a discharge."""

    matched: int
