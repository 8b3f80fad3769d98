"""A Value Object representing an email address in the domain.

Accounts keep the address as the user typed it (trimmed) for display and
delivery, and a normalized form for lookups and the uniqueness constraint.
"""

import re
from dataclasses import dataclass
from typing import ClassVar

from place_identity.core.exceptions import InvalidEmailError
from place_identity.core.logging import mask_email


def normalize_email(value: str) -> str:
    """Return the lookup key for an email address: trimmed and lowercased."""
    return value.strip().lower()


@dataclass(frozen=True, slots=True)
class Email:
    """An immutable, self-validating email address.

    Attributes:
        value: The trimmed address, case preserved.
    """

    value: str

    MAX_LENGTH: ClassVar[int] = 254
    EMAIL_PATTERN: ClassVar[re.Pattern] = re.compile(
        r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    )

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise InvalidEmailError()

        trimmed = self.value.strip()
        object.__setattr__(self, "value", trimmed)

        if not trimmed or len(trimmed) > self.MAX_LENGTH:
            raise InvalidEmailError()
        if not self.EMAIL_PATTERN.match(trimmed):
            raise InvalidEmailError()

    @property
    def normalized(self) -> str:
        return normalize_email(self.value)

    @property
    def domain(self) -> str:
        return self.normalized.split("@")[1]

    def mask_for_logging(self) -> str:
        return mask_email(self.value)

    def __str__(self) -> str:
        return self.value
