"""Scan pipeline: enumerate files, evaluate every rule, collect a ScanResult."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Collection, Iterable, List, Optional, Tuple

from .result import Finding, ScanResult
from .rules import Rule, RuleRegistry
from .severity import Severity
from .utils import (
    DEFAULT_EXCLUDE_DIRS,
    DEFAULT_EXTENSIONS,
    FileReadFailure,
    iter_code_files,
    read_text_file,
    relative_path,
)
from .utils.code import resolve_root

DEFAULT_LOGGER_NAME = "skillscan"
DEFAULT_MAX_FILE_SIZE_BYTES = 2_000_000
READ_FAILURE_RULE_ID = "SCAN001"
RULE_FAILURE_RULE_ID = "SCAN002"

logger = logging.getLogger(DEFAULT_LOGGER_NAME).getChild("engine")


def configure_logging(verbose: bool = False, logger_name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """Configure and return the package logger.

    A single stderr handler is attached the first time; later calls only
    adjust the level so repeated CLI invocations in one process do not
    duplicate output.
    """

    base = logging.getLogger(logger_name)
    base.setLevel(logging.INFO if verbose else logging.WARNING)

    if not base.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s - %(message)s"))
        base.addHandler(handler)

    return base


def evaluate_rules(rules: Iterable[Rule], path: str, text: str) -> List[Finding]:
    """Invoke every rule once on one file's text.

    A rule that raises is contained: its failure becomes a Low finding and the
    remaining rules still run.
    """

    findings: List[Finding] = []
    for item in rules:
        try:
            findings.extend(item.evaluate(path, text))
        except Exception as exc:  # pylint: disable=broad-except
            logger.debug("Rule %s failed on %s", item.rule_id, path, exc_info=True)
            findings.append(
                Finding(
                    file=path,
                    line=1,
                    rule_id=RULE_FAILURE_RULE_ID,
                    message=f"Rule {item.rule_id} could not evaluate this file: {exc}",
                    severity=Severity.LOW,
                )
            )
    return findings


class FileScanner:
    """Read one file at a time and run the registered rules against it."""

    def __init__(self, root: Path, registry: RuleRegistry, max_file_size_bytes: int) -> None:
        self.root = root
        self.rules = list(registry)
        self.max_file_size_bytes = max_file_size_bytes

    def scan_file(self, path: Path) -> Tuple[bool, List[Finding]]:
        """Return whether the rules ran on ``path`` and the findings produced."""

        display = relative_path(path, self.root)
        try:
            size = path.stat().st_size
        except OSError as exc:
            return False, [self._read_failure(display, FileReadFailure(path, exc.strerror or str(exc)))]
        if self.max_file_size_bytes and size > self.max_file_size_bytes:
            logger.info("Skipping %s (%d bytes exceeds limit of %d)", display, size, self.max_file_size_bytes)
            return False, []

        try:
            text = read_text_file(path)
        except FileReadFailure as exc:
            return False, [self._read_failure(display, exc)]
        return True, evaluate_rules(self.rules, display, text)

    def _read_failure(self, display: str, exc: FileReadFailure) -> Finding:
        logger.warning("Unable to read %s: %s", display, exc.reason)
        return Finding(
            file=display,
            line=1,
            rule_id=READ_FAILURE_RULE_ID,
            message=f"File could not be read and was not analysed: {exc.reason}",
            severity=Severity.LOW,
        )


def scan_path(
    root: str | Path,
    registry: RuleRegistry,
    *,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    exclude_dirs: Collection[str] = DEFAULT_EXCLUDE_DIRS,
    workers: int = 1,
    max_file_size_bytes: Optional[int] = DEFAULT_MAX_FILE_SIZE_BYTES,
) -> ScanResult:
    """Scan ``root`` with every rule in ``registry`` and return the result.

    Raises :class:`~skillscan.utils.PathNotFound` before any work when the
    root is missing. Findings are collected per file and merged here, so the
    outcome does not depend on ``workers`` or completion order.
    """

    base = resolve_root(root)
    files = list(iter_code_files(base, extensions=extensions, exclude_dirs=exclude_dirs))
    logger.info("Discovered %d file(s) under %s; %d rule(s) registered", len(files), base, len(registry))

    scanner = FileScanner(base, registry, max_file_size_bytes or 0)
    findings: List[Finding] = []
    analysed = 0
    if workers > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            outcomes = list(executor.map(scanner.scan_file, files))
    else:
        outcomes = [scanner.scan_file(path) for path in files]
    for ran, per_file in outcomes:
        analysed += int(ran)
        findings.extend(per_file)

    result = ScanResult.from_findings(findings, files_scanned=analysed, files_skipped=len(files) - analysed)
    logger.info(
        "Scanned %d file(s), skipped %d; %d finding(s)",
        result.files_scanned,
        result.files_skipped,
        result.summary.total,
    )
    return result
