"""Hosting and diagnostics checks for Program.cs style startup code."""

from __future__ import annotations

import re
from typing import Iterator

from skillscan.severity import Severity
from skillscan.utils import iter_source_lines, line_of

from . import Hit, rule

DEVELOPER_PAGE_PATTERN = re.compile(r"\bUseDeveloperExceptionPage\s*\(")
ENVIRONMENT_GUARD_PATTERN = re.compile(r"\bIsDevelopment\s*\(")
CONSOLE_WRITE_PATTERN = re.compile(r"\bConsole\.(Write(?:Line)?)\s*\(")


@rule(
    "ASP004",
    Severity.HIGH,
    "Developer exception page without environment guard",
    skill="error-handling",
    category="middleware",
)
def unguarded_developer_exception_page(path: str, text: str) -> Iterator[Hit]:
    # Whole-file check: any IsDevelopment() call counts as the guard.
    if ENVIRONMENT_GUARD_PATTERN.search(text):
        return
    for match in DEVELOPER_PAGE_PATTERN.finditer(text):
        yield Hit(
            line_of(text, match.start()),
            "UseDeveloperExceptionPage() is not wrapped in an IsDevelopment() check and "
            "can leak stack traces in production",
        )


@rule("ASP006", Severity.LOW, "Console output instead of ILogger", skill="logging", category="observability")
def console_output(path: str, text: str) -> Iterator[Hit]:
    for number, line in iter_source_lines(text):
        match = CONSOLE_WRITE_PATTERN.search(line)
        if match:
            yield Hit(number, f"Console.{match.group(1)} bypasses logging; inject ILogger<T> and log structured messages")


RULES = (unguarded_developer_exception_page, console_output)
