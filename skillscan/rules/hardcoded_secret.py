"""Detect credentials hardcoded in C# string literals and connection strings."""

from __future__ import annotations

import re
from typing import Iterator, Optional

from skillscan.severity import Severity
from skillscan.utils import iter_source_lines

from . import Hit, rule

CONNECTION_PASSWORD_PATTERN = re.compile(r'"[^"]*?\b(?:password|pwd)\s*=\s*([^;"]*)', re.IGNORECASE)
SECRET_ASSIGNMENT_PATTERN = re.compile(
    r'\b(\w*(?:password|passwd|secret|api_?key|access_?key|token|credential)\w*)\s*[:=]\s*@?"([^"]{4,})"',
    re.IGNORECASE,
)
PLACEHOLDER_HINTS = ("changeme", "change-me", "example", "placeholder", "your-", "your_", "dummy", "xxx", "<")


def _is_placeholder(value: str) -> bool:
    lowered = value.lower()
    return any(hint in lowered for hint in PLACEHOLDER_HINTS)


def _classify(value: str) -> Optional[Severity]:
    value = value.strip()
    if not value or value.startswith("{") or value.startswith("$"):
        return None
    if _is_placeholder(value):
        return Severity.LOW
    return Severity.CRITICAL


@rule("ASP001", Severity.CRITICAL, "Hardcoded credential", skill="secrets-management", category="security")
def hardcoded_credentials(path: str, text: str) -> Iterator[Hit]:
    for number, line in iter_source_lines(text):
        match = CONNECTION_PASSWORD_PATTERN.search(line)
        if match:
            severity = _classify(match.group(1))
            if severity is not None:
                yield Hit(
                    number,
                    "Connection string embeds a password; load it from configuration or a secret store",
                    severity,
                )
                continue

        match = SECRET_ASSIGNMENT_PATTERN.search(line)
        if match:
            severity = _classify(match.group(2))
            if severity is not None:
                yield Hit(
                    number,
                    f"'{match.group(1)}' is assigned a literal secret; use user-secrets, "
                    "environment variables or Azure Key Vault instead",
                    severity,
                )


RULES = (hardcoded_credentials,)
