"""Browse the skill catalogue: ``<skills_dir>/<category>/<skill>/SKILL.md``."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

import yaml

from .rules import Rule

SKILL_FILENAME = "SKILL.md"
FRONT_MATTER_DELIMITER = "---"


@dataclass(frozen=True)
class SkillMetadata:
    """Front matter of a SKILL.md file."""

    name: Optional[str] = None
    description: Optional[str] = None
    version: Optional[str] = None
    priority: Optional[str] = None
    categories: Tuple[str, ...] = ()
    use_when: Tuple[str, ...] = ()
    prerequisites: Tuple[str, ...] = ()
    related_skills: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SkillMetadata":
        # Unknown keys are ignored so newer skill files still load.
        return cls(
            name=_optional_str(data.get("name")),
            description=_optional_str(data.get("description")),
            version=_optional_str(data.get("version")),
            priority=_optional_str(data.get("priority")),
            categories=_str_tuple(data.get("categories")),
            use_when=_str_tuple(data.get("use_when")),
            prerequisites=_str_tuple(data.get("prerequisites")),
            related_skills=_str_tuple(data.get("related_skills")),
        )


@dataclass(frozen=True)
class Skill:
    category: str
    name: str
    path: Path
    metadata: SkillMetadata

    def scripts(self) -> List[Path]:
        return _list_files(self.path / "scripts", "*")

    def references(self) -> List[Path]:
        return _list_files(self.path / "references", "*.md")


def extract_front_matter(content: str) -> Optional[str]:
    """Return the YAML between the leading ``---`` and the next ``---``."""

    if not content.startswith(FRONT_MATTER_DELIMITER):
        return None
    end = content.find(FRONT_MATTER_DELIMITER, len(FRONT_MATTER_DELIMITER))
    if end < 0:
        return None
    return content[len(FRONT_MATTER_DELIMITER):end].strip()


def parse_skill_metadata(path: Path) -> Optional[SkillMetadata]:
    """Parse the front matter of ``path``; ``None`` when absent or invalid."""

    try:
        content = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError):
        return None
    front_matter = extract_front_matter(content)
    if front_matter is None:
        return None
    try:
        data = yaml.safe_load(front_matter)
    except yaml.YAMLError:
        return None
    if not isinstance(data, dict):
        return None
    return SkillMetadata.from_dict(data)


def iter_skills(skills_dir: Path, category: Optional[str] = None) -> Iterator[Skill]:
    """Yield every skill with a parsable SKILL.md, optionally for one category."""

    if not skills_dir.is_dir():
        return
    for category_path in sorted(p for p in skills_dir.iterdir() if p.is_dir()):
        if category and category_path.name.lower() != category.lower():
            continue
        for skill_path in sorted(p for p in category_path.iterdir() if p.is_dir()):
            metadata = parse_skill_metadata(skill_path / SKILL_FILENAME)
            if metadata is None:
                continue
            yield Skill(category=category_path.name, name=skill_path.name, path=skill_path, metadata=metadata)


def find_skill(skills_dir: Path, name: str) -> Optional[Skill]:
    for skill in iter_skills(skills_dir):
        if skill.name == name:
            return skill
    return None


def default_skills_dir(cwd: Optional[Path] = None) -> Path:
    base = cwd or Path.cwd()
    for candidate in (base / "skills", base.parent / "skills"):
        if candidate.is_dir():
            return candidate.resolve()
    return base / "skills"


def truncate(value: str, max_length: int) -> str:
    if len(value) <= max_length:
        return value
    return value[: max_length - 3] + "..."


def format_skill_table(skills: List[Skill]) -> str:
    rows = [("Category", "Skill", "Priority", "Description")]
    for skill in skills:
        rows.append(
            (
                skill.category,
                skill.name,
                skill.metadata.priority or "unknown",
                truncate(skill.metadata.description or "", 50),
            )
        )
    widths = [max(len(row[index]) for row in rows) for index in range(len(rows[0]))]
    lines = []
    for position, row in enumerate(rows):
        lines.append(" | ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip())
        if position == 0:
            lines.append("-+-".join("-" * width for width in widths))
    return "\n".join(lines)


def format_skill_info(skill: Skill, rules: Iterable[Rule] = ()) -> str:
    meta = skill.metadata
    lines = [
        f"Skill: {skill.name}",
        "=" * 40,
        meta.name or skill.name,
        "",
        f"Description: {meta.description or ''}",
        f"Version: {meta.version or ''}",
        f"Priority: {meta.priority or ''}",
        f"Categories: {', '.join(meta.categories)}",
    ]
    if meta.use_when:
        lines.append("")
        lines.append("Use when:")
        lines.extend(f"  - {item}" for item in meta.use_when)
    scripts = skill.scripts()
    if scripts:
        lines.append("")
        lines.append("Available scripts:")
        lines.extend(f"  - {path.name}" for path in scripts)
    references = skill.references()
    if references:
        lines.append("")
        lines.append("Reference documents:")
        lines.extend(f"  - {path.name}" for path in references)
    checks = list(rules)
    if checks:
        lines.append("")
        lines.append("Built-in checks:")
        lines.extend(f"  - {item.rule_id} [{item.severity.value}] {item.title}" for item in checks)
    return "\n".join(lines)


def _list_files(directory: Path, pattern: str) -> List[Path]:
    if not directory.is_dir():
        return []
    return sorted(path for path in directory.glob(pattern) if path.is_file())


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _str_tuple(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(str(item) for item in value)
    return (str(value),)
