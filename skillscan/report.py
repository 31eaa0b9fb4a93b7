"""Render a ScanResult as console text, JSON or Markdown."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .result import Finding, ScanResult
from .rules import RuleRegistry
from .severity import Severity

DIAGNOSTICS_GROUP = ("scanner", "diagnostics")


class UnknownOutputFormat(ValueError):
    """Raised for an output format outside :class:`ReportFormat`."""


class ReportFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"
    MARKDOWN = "markdown"

    @classmethod
    def parse(cls, text: str) -> "ReportFormat":
        try:
            return cls(str(text).strip().lower())
        except ValueError:
            choices = "|".join(fmt.value for fmt in cls)
            raise UnknownOutputFormat(f"Unknown output format {text!r}; expected {choices}") from None

    @classmethod
    def choices(cls) -> List[str]:
        return [fmt.value for fmt in cls]


def format_console(result: ScanResult) -> str:
    """Create a human-readable summary followed by one line per finding."""

    lines: List[str] = []
    lines.append("Scan Summary")
    lines.append("=" * 40)
    for severity, count in result.summary.as_rows():
        lines.append(f"{severity.value}: {count}")
    lines.append(f"Total: {result.summary.total}")
    lines.append(f"Files scanned: {result.files_scanned}")
    if result.files_skipped:
        lines.append(f"Files skipped: {result.files_skipped}")

    if result.findings:
        lines.append("")
        lines.append("Issues")
        lines.append("-" * 40)
        for finding in result.findings:
            lines.append(
                f"[{finding.severity.value}] {finding.rule_id} {finding.file}:{finding.line} - {finding.message}"
            )
    else:
        lines.append("")
        lines.append("No issues found.")
    return "\n".join(lines)


def format_json(result: ScanResult) -> str:
    return json.dumps(result.to_dict(), indent=2)


def format_markdown(result: ScanResult) -> str:
    lines: List[str] = ["# Scan Report", "", "## Summary", "", "| Severity | Count |", "|----------|------:|"]
    for severity, count in result.summary.as_rows():
        lines.append(f"| {severity.value} | {count} |")
    lines.append(f"| **Total** | **{result.summary.total}** |")
    lines.append("")
    lines.append("## Issues")
    lines.append("")
    if not result.findings:
        lines.append("_No issues found._")
        lines.append("")
    for finding in result.findings:
        lines.append(f"### [{finding.severity.value}] {finding.rule_id}: {finding.message}")
        lines.append("")
        lines.append(f"- **File:** `{finding.file}`")
        lines.append(f"- **Line:** {finding.line}")
        lines.append(f"- **Rule:** {finding.rule_id}")
        lines.append("")
    return "\n".join(lines)


def render(result: ScanResult, report_format: ReportFormat | str = ReportFormat.CONSOLE) -> str:
    fmt = report_format if isinstance(report_format, ReportFormat) else ReportFormat.parse(report_format)
    if fmt is ReportFormat.CONSOLE:
        return format_console(result)
    if fmt is ReportFormat.JSON:
        return format_json(result)
    if fmt is ReportFormat.MARKDOWN:
        return format_markdown(result)
    raise UnknownOutputFormat(f"Unhandled output format: {fmt}")


def build_skill_report(
    result: ScanResult,
    registry: RuleRegistry,
    project_path: str,
    generated_at: Optional[datetime] = None,
) -> Dict[str, object]:
    """Group the findings of a full scan by the skill whose rule produced them.

    Every skill in ``registry`` gets an entry, including skills without issues.
    Scanner diagnostics (unreadable files, failing rules) are listed under a
    separate ``scanner`` entry only when present and are not
    counted as a checked skill.
    """

    grouped: Dict[Tuple[str, str], List[Finding]] = {pair: [] for pair in registry.skills()}
    for finding in result.findings:
        owner = registry.get(finding.rule_id)
        key = (owner.skill, owner.category) if owner is not None else DIAGNOSTICS_GROUP
        grouped.setdefault(key, []).append(finding)

    results = [
        {"skill_name": skill, "category": category, "issues": [finding.to_dict() for finding in findings]}
        for (skill, category), findings in grouped.items()
    ]
    timestamp = generated_at or datetime.now(timezone.utc)
    return {
        "generated_at": timestamp.isoformat(),
        "project_path": project_path,
        "results": results,
        "summary": {
            "total_skills_checked": len(registry.skills()),
            "total_issues": result.summary.total,
            "critical_issues": result.summary.count(Severity.CRITICAL),
            "high_issues": result.summary.count(Severity.HIGH),
        },
    }


def format_skill_report_summary(report: Dict[str, object]) -> str:
    summary = report["summary"]
    rows = [
        ("Skills Checked", summary["total_skills_checked"]),
        ("Total Issues", summary["total_issues"]),
        ("Critical Issues", summary["critical_issues"]),
        ("High Issues", summary["high_issues"]),
    ]
    lines = [f"{'Metric':<20} Value", "-" * 30]
    lines.extend(f"{label:<20} {value}" for label, value in rows)
    return "\n".join(lines)


def format_rule_table(registry: RuleRegistry) -> str:
    rows = [("Rule", "Severity", "Skill", "Category", "Title")]
    rows.extend((item.rule_id, item.severity.value, item.skill, item.category, item.title) for item in registry)
    widths = [max(len(row[index]) for row in rows) for index in range(len(rows[0]))]
    lines = []
    for position, row in enumerate(rows):
        lines.append(" | ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip())
        if position == 0:
            lines.append("-+-".join("-" * width for width in widths))
    return "\n".join(lines)


def write_report(text: str, output_path: Optional[str]) -> None:
    """Print ``text`` to stdout, or write it to ``output_path`` when given."""

    if not output_path:
        print(text)
        return
    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(text + "\n", encoding="utf-8")
    print(f"Report written to {output_path}")
