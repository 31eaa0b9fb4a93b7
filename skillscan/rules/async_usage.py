"""Detect sync-over-async blocking calls."""

from __future__ import annotations

import re
from typing import Iterator

from skillscan.severity import Severity
from skillscan.utils import iter_source_lines

from . import Hit, rule

BLOCKING_PATTERNS = (
    (re.compile(r"\.GetAwaiter\(\)\s*\.GetResult\(\)"), ".GetAwaiter().GetResult()"),
    (re.compile(r"\.Wait\(\s*\)"), ".Wait()"),
    (re.compile(r"\.Result\b(?!\s*[=(])"), ".Result"),
)


@rule("ASP003", Severity.HIGH, "Blocking on asynchronous code", skill="async-programming", category="performance")
def blocking_async_calls(path: str, text: str) -> Iterator[Hit]:
    for number, line in iter_source_lines(text):
        for pattern, label in BLOCKING_PATTERNS:
            if pattern.search(line):
                yield Hit(
                    number,
                    f"{label} blocks a thread waiting on a Task; await it instead to avoid thread-pool starvation",
                )
                break


RULES = (blocking_async_calls,)
