"""Core result data structures for the scanner."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .severity import Severity

SEVERITY_ORDER: Sequence[Severity] = (
    Severity.CRITICAL,
    Severity.HIGH,
    Severity.MEDIUM,
    Severity.LOW,
)


@dataclass(frozen=True)
class Finding:
    """Capture a single rule violation."""

    file: str
    line: int
    rule_id: str
    message: str
    severity: Severity

    def to_dict(self) -> Dict[str, object]:
        data = asdict(self)
        data["severity"] = self.severity.value
        return data

    def sort_key(self) -> Tuple[str, int, str, int]:
        return (self.file, self.line, self.rule_id, -self.severity.rank)


@dataclass(frozen=True)
class Summary:
    """Aggregate finding counts by severity."""

    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0

    @classmethod
    def from_findings(cls, findings: Iterable[Finding]) -> "Summary":
        counts = {severity: 0 for severity in SEVERITY_ORDER}
        for finding in findings:
            counts[finding.severity] += 1
        return cls(**{severity.value.lower(): count for severity, count in counts.items()})

    def count(self, severity: Severity) -> int:
        return getattr(self, severity.value.lower())

    def to_dict(self) -> Dict[str, int]:
        data = asdict(self)
        data["total"] = self.total
        return data

    def as_rows(self) -> List[Tuple[Severity, int]]:
        """Return severity/count pairs ordered for reporting."""

        return [(severity, self.count(severity)) for severity in SEVERITY_ORDER]

    @property
    def total(self) -> int:
        return sum(self.count(severity) for severity in SEVERITY_ORDER)


@dataclass(frozen=True)
class ScanResult:
    """Bundle scan summary and the ordered findings of one invocation."""

    findings: Tuple[Finding, ...] = ()
    files_scanned: int = 0
    files_skipped: int = 0
    summary: Summary = field(default_factory=Summary)

    @classmethod
    def from_findings(
        cls, findings: Iterable[Finding], files_scanned: int = 0, files_skipped: int = 0
    ) -> "ScanResult":
        """Sort ``findings`` deterministically and derive the summary counts."""

        ordered = tuple(sorted(findings, key=Finding.sort_key))
        return cls(
            findings=ordered,
            files_scanned=files_scanned,
            files_skipped=files_skipped,
            summary=Summary.from_findings(ordered),
        )

    @property
    def highest_severity(self) -> Optional[Severity]:
        for severity, count in self.summary.as_rows():
            if count:
                return severity
        return None

    def exit_code(self, fail_on: Severity = Severity.CRITICAL) -> int:
        """Return 1 when any finding is at or above ``fail_on``, otherwise 0."""

        highest = self.highest_severity
        if highest is not None and highest.rank >= fail_on.rank:
            return 1
        return 0

    def to_dict(self) -> Dict[str, object]:
        return {
            "summary": self.summary.to_dict(),
            "issues": [finding.to_dict() for finding in self.findings],
        }
