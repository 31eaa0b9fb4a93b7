"""Severity definitions for scanner findings."""

from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    """Enumerate the supported severity levels for findings."""

    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @property
    def rank(self) -> int:
        """Return an integer ranking to drive sorting and exit code decisions."""

        ordering = {
            Severity.CRITICAL: 3,
            Severity.HIGH: 2,
            Severity.MEDIUM: 1,
            Severity.LOW: 0,
        }
        return ordering[self]

    @classmethod
    def parse(cls, text: str) -> "Severity":
        """Resolve a severity name in any casing (``critical``, ``HIGH``...)."""

        lowered = str(text).strip().lower()
        for severity in cls:
            if severity.value.lower() == lowered:
                return severity
        choices = ", ".join(severity.value.lower() for severity in cls)
        raise ValueError(f"Unknown severity {text!r}; expected one of: {choices}")

    def __str__(self) -> str:
        return self.value
