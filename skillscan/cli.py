"""Command-line entry points for the ASP.NET Core skill scanner."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from .config import ConfigError, ScanConfig, default_config_path, load_config
from .engine import configure_logging, scan_path
from .report import (
    ReportFormat,
    build_skill_report,
    format_rule_table,
    format_skill_report_summary,
    render,
    write_report,
)
from .result import ScanResult
from .rules import RuleRegistry, builtin_registry
from .severity import Severity
from .skills import default_skills_dir, find_skill, format_skill_info, format_skill_table, iter_skills
from .utils import PathNotFound
from .utils.code import resolve_root


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skillscan",
        description="Scan C# sources for ASP.NET Core best-practice violations.",
    )
    parser.add_argument(
        "--path",
        "-Path",
        "-p",
        dest="path",
        required=True,
        help="Root directory of the project to scan.",
    )
    parser.add_argument(
        "--output-format",
        "-OutputFormat",
        "-f",
        dest="output_format",
        type=str.lower,
        choices=ReportFormat.choices(),
        default=ReportFormat.CONSOLE.value,
        help="Report format (defaults to console).",
    )
    parser.add_argument(
        "--out",
        "--output",
        dest="output_path",
        default=None,
        help="Write the report to this file instead of stdout.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="YAML settings file (defaults to <path>/.skillscan.yaml when present).",
    )
    parser.add_argument(
        "--fail-on",
        type=str.lower,
        choices=[severity.value.lower() for severity in Severity],
        default=None,
        help="Lowest severity that produces exit code 1 (defaults to critical).",
    )
    parser.add_argument(
        "--disable",
        dest="disabled_rules",
        action="append",
        default=[],
        metavar="RULE_ID",
        help="Skip a rule by identifier (repeatable).",
    )
    parser.add_argument(
        "--workers",
        type=_positive_int,
        default=None,
        help="Number of files scanned in parallel.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log progress at INFO level.")
    return parser


def _read_config(config_arg: Optional[str], root: Path) -> ScanConfig:
    if config_arg:
        config_path = Path(config_arg)
        if not config_path.is_file():
            raise ConfigError(f"Config file not found: {config_path}")
        return load_config(config_path)
    discovered = default_config_path(root)
    return load_config(discovered) if discovered else ScanConfig()


def load_settings(args: argparse.Namespace, root: Path) -> ScanConfig:
    config = _read_config(args.config, root)

    disabled = tuple(config.disabled_rules) + tuple(rule_id.upper() for rule_id in args.disabled_rules)
    return config.with_overrides(
        fail_on=Severity.parse(args.fail_on) if args.fail_on else None,
        workers=args.workers,
        disabled_rules=disabled,
    )


def run_scan(root: str | Path, config: ScanConfig, registry: Optional[RuleRegistry] = None) -> ScanResult:
    rules = (registry if registry is not None else builtin_registry()).without(config.disabled_rules)
    return scan_path(
        root,
        rules,
        extensions=config.extensions,
        exclude_dirs=config.exclude_dirs,
        workers=config.workers,
        max_file_size_bytes=config.max_file_size_bytes,
    )


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logger = configure_logging(args.verbose)

    try:
        root = resolve_root(args.path)
    except PathNotFound as exc:
        logger.error("%s", exc)
        return 1

    try:
        config = load_settings(args, root)
    except ConfigError as exc:
        logger.error("%s", exc)
        return 1

    result = run_scan(root, config)
    write_report(render(result, ReportFormat.parse(args.output_format)), args.output_path)
    return result.exit_code(config.fail_on)


def build_skills_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skillscan-skills",
        description="Browse the ASP.NET Core skill catalogue and run its checks.",
    )
    parser.add_argument(
        "--skills-dir",
        default=None,
        help="Catalogue root (defaults to ./skills or ../skills).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List available skills")
    list_parser.add_argument("--category", default=None, help="Filter by category")

    info_parser = subparsers.add_parser("info", help="Show details about a skill")
    info_parser.add_argument("skill", help="Skill name")

    subparsers.add_parser("rules", help="List the built-in checks and the skill each belongs to")

    check_parser = subparsers.add_parser("check", help="Run one skill's checks on a project")
    check_parser.add_argument("skill", help="Skill name")
    check_parser.add_argument("--path", default=".", help="Path to the project")
    check_parser.add_argument(
        "--output-format",
        "--output",
        "-f",
        dest="output_format",
        type=str.lower,
        choices=ReportFormat.choices(),
        default=ReportFormat.CONSOLE.value,
        help="Report format (defaults to console).",
    )
    check_parser.add_argument("--out", dest="output_path", default=None, help="Write the report to this file.")
    check_parser.add_argument("--config", default=None, help="YAML settings file.")

    report_parser = subparsers.add_parser("report", help="Run every skill and write a JSON report grouped by skill")
    report_parser.add_argument("--path", default=".", help="Path to the project")
    report_parser.add_argument("--out", "--output", dest="output_path", default=None, help="Output file path")
    report_parser.add_argument("--config", default=None, help="YAML settings file.")
    return parser


def _prepare_project(path: str, config_arg: Optional[str]) -> Tuple[Path, ScanConfig]:
    root = resolve_root(path)
    return root, _read_config(config_arg, root)


def check_skill(args: argparse.Namespace, logger: logging.Logger) -> int:
    registry = builtin_registry()
    selected = registry.only_skill(args.skill)
    if not selected:
        known = ", ".join(skill for skill, _ in registry.skills())
        logger.error("No checks registered for skill '%s' (known: %s)", args.skill, known)
        return 1

    root, config = _prepare_project(args.path, args.config)
    result = run_scan(root, config, selected)
    write_report(render(result, ReportFormat.parse(args.output_format)), args.output_path)
    return result.exit_code(config.fail_on)


def generate_report(args: argparse.Namespace) -> int:
    root, config = _prepare_project(args.path, args.config)
    registry = builtin_registry().without(config.disabled_rules)
    result = run_scan(root, config, registry)
    report = build_skill_report(result, registry, str(root))
    write_report(json.dumps(report, indent=2), args.output_path)
    if args.output_path:
        print(format_skill_report_summary(report))
    return 0


def skills_main(argv: List[str] | None = None) -> int:
    parser = build_skills_parser()
    args = parser.parse_args(argv)
    logger = configure_logging()

    if args.command == "rules":
        print(format_rule_table(builtin_registry()))
        return 0

    if args.command in ("check", "report"):
        try:
            if args.command == "check":
                return check_skill(args, logger)
            return generate_report(args)
        except (PathNotFound, ConfigError) as exc:
            logger.error("%s", exc)
            return 1

    skills_dir = Path(args.skills_dir) if args.skills_dir else default_skills_dir()
    if not skills_dir.is_dir():
        logger.error("Skills directory not found: %s", skills_dir)
        return 1

    if args.command == "list":
        print(format_skill_table(list(iter_skills(skills_dir, args.category))))
        return 0

    skill = find_skill(skills_dir, args.skill)
    if skill is None:
        logger.error("Skill '%s' not found", args.skill)
        return 1
    print(format_skill_info(skill, builtin_registry().only_skill(skill.name)))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
