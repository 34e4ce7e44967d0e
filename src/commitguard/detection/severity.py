"""Severity levels attached to detector findings."""

from enum import IntEnum
from typing import Union


class Severity(IntEnum):
    """Ordered severity levels (LOW < MEDIUM < HIGH)."""
    LOW = 1
    MEDIUM = 2
    HIGH = 3

    def __str__(self) -> str:
        return self.name.lower()

    @classmethod
    def from_string(cls, value: Union[str, int]) -> "Severity":
        """Parse the textual rendering (or the numeric level) back into a Severity."""
        if isinstance(value, bool):
            raise ValueError(f"Unknown severity: {value!r}")
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise ValueError(f"Unknown severity: {value!r}") from None
        if not isinstance(value, str):
            raise ValueError(f"Unknown severity: {value!r}")
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown severity: '{value}'") from None
