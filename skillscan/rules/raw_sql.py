"""Flag raw SQL commands built from interpolated or concatenated strings."""

from __future__ import annotations

import re
from typing import Iterator

from skillscan.severity import Severity
from skillscan.utils import iter_source_lines

from . import Hit, rule

RAW_SQL_CALL_PATTERN = re.compile(
    r"\b(FromSqlRaw|ExecuteSqlRaw(?:Async)?|SqlQueryRaw)\s*(?:<[^>(]*>)?\s*\(|\bnew\s+(SqlCommand)\s*\("
)
DYNAMIC_STRING_PATTERN = re.compile(r'\$@?"|@\$"|"\s*\+|\+\s*"|\bstring\.Format\s*\(|\bString\.Format\s*\(')


@rule("ASP002", Severity.CRITICAL, "SQL built from dynamic strings", skill="data-access", category="data")
def dynamic_raw_sql(path: str, text: str) -> Iterator[Hit]:
    for number, line in iter_source_lines(text):
        match = RAW_SQL_CALL_PATTERN.search(line)
        if not match:
            continue
        if not DYNAMIC_STRING_PATTERN.search(line, match.end()):
            continue
        api = match.group(1) or match.group(2)
        yield Hit(
            number,
            f"{api} receives an interpolated or concatenated string; use parameters "
            "or FromSqlInterpolated to avoid SQL injection",
        )


RULES = (dynamic_raw_sql,)
