import logging
from pathlib import Path

import pytest

from skillscan.engine import READ_FAILURE_RULE_ID, RULE_FAILURE_RULE_ID, evaluate_rules, scan_path
from skillscan.rules import Hit, RuleRegistry, builtin_registry, rule
from skillscan.severity import Severity
from skillscan.utils import PathNotFound


def write(root: Path, relative: str, content) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")
    return path


def counting_registry(calls):
    def make(rule_id):
        @rule(rule_id, Severity.LOW, f"counter {rule_id}")
        def check(path, text):
            calls.append((rule_id, path))
            if "flag" in text:
                yield Hit(1, f"{rule_id} saw flag")

        return check

    return RuleRegistry([make("RULE001"), make("RULE002"), make("RULE003")])


def test_every_rule_runs_once_per_file(tmp_path):
    write(tmp_path, "A.cs", "flag")
    write(tmp_path, "B.cs", "clean")
    write(tmp_path, "sub/C.cs", "flag flag")
    write(tmp_path, "sub/D.cs", "clean")
    calls = []

    result = scan_path(tmp_path, counting_registry(calls))

    assert len(calls) == 4 * 3
    assert len(set(calls)) == 12
    assert result.files_scanned == 4
    assert result.summary.total == 2 * 3
    assert result.summary.low == result.summary.total


def test_scan_is_idempotent(tmp_path):
    write(tmp_path, "Program.cs", 'app.UseDeveloperExceptionPage();\nConsole.WriteLine("hi");\n')
    write(tmp_path, "Worker.cs", "var x = task.Result;\n")

    first = scan_path(tmp_path, builtin_registry())
    second = scan_path(tmp_path, builtin_registry())

    assert first == second
    assert first.summary.total == 3


def test_findings_are_sorted_by_file_then_line(tmp_path):
    write(tmp_path, "b/Second.cs", 'Console.WriteLine("a");\nvar y = t.Result;\n')
    write(tmp_path, "a/First.cs", 'var x = t.Result;\nConsole.WriteLine("b");\n')

    result = scan_path(tmp_path, builtin_registry())

    assert [(f.file, f.line) for f in result.findings] == [
        ("a/First.cs", 1),
        ("a/First.cs", 2),
        ("b/Second.cs", 1),
        ("b/Second.cs", 2),
    ]


def test_parallel_scan_matches_sequential(tmp_path):
    for index in range(12):
        write(tmp_path, f"Module{index}/Service{index}.cs", f'var v{index} = call().Result;\nConsole.Write("{index}");\n')

    sequential = scan_path(tmp_path, builtin_registry(), workers=1)
    parallel = scan_path(tmp_path, builtin_registry(), workers=4)

    assert parallel.findings == sequential.findings
    assert parallel.summary == sequential.summary
    assert parallel.summary.total == 24


def test_unreadable_file_becomes_low_finding_and_scan_continues(tmp_path, caplog):
    write(tmp_path, "Broken.cs", b"\xff\xfe\x00not utf8 \x80\x81")
    write(tmp_path, "Worker.cs", "var x = task.Result;\n")

    with caplog.at_level(logging.WARNING, logger="skillscan"):
        result = scan_path(tmp_path, builtin_registry())

    rule_ids = {(f.file, f.rule_id) for f in result.findings}
    assert ("Broken.cs", READ_FAILURE_RULE_ID) in rule_ids
    assert ("Worker.cs", "ASP003") in rule_ids
    broken = [f for f in result.findings if f.rule_id == READ_FAILURE_RULE_ID][0]
    assert broken.severity is Severity.LOW
    assert broken.line == 1
    assert (result.files_scanned, result.files_skipped) == (1, 1)
    assert any("Broken.cs" in record.getMessage() for record in caplog.records)


def test_crashing_rule_is_contained(tmp_path):
    @rule("RULE666", Severity.HIGH, "explodes")
    def explode(path, text):
        raise RuntimeError("boom")

    @rule("RULE007", Severity.MEDIUM, "works")
    def works(path, text):
        yield Hit(2, "still evaluated")

    findings = evaluate_rules([explode, works], "Api.cs", "line1\nline2\n")

    assert [(f.rule_id, f.severity) for f in findings] == [
        (RULE_FAILURE_RULE_ID, Severity.LOW),
        ("RULE007", Severity.MEDIUM),
    ]
    assert "RULE666" in findings[0].message
    assert "boom" in findings[0].message


def test_oversized_files_are_skipped(tmp_path):
    write(tmp_path, "Huge.cs", "var x = task.Result;\n" + "// padding\n" * 200)
    write(tmp_path, "Small.cs", "var x = task.Result;\n")

    result = scan_path(tmp_path, builtin_registry(), max_file_size_bytes=100)

    assert [f.file for f in result.findings] == ["Small.cs"]
    assert result.files_scanned == 1
    assert result.files_skipped == 1


def test_missing_root_raises_without_running_rules(tmp_path):
    calls = []

    with pytest.raises(PathNotFound):
        scan_path(tmp_path / "nope", counting_registry(calls))

    assert calls == []
