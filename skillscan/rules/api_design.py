"""API design checks for controller classes."""

from __future__ import annotations

import re
from typing import Iterator, List

from skillscan.severity import Severity
from skillscan.utils import line_of

from . import Hit, rule

CONTROLLER_CLASS_PATTERN = re.compile(
    r"^(?P<prefix>[ \t]*(?:\[[^\]\n]*\][ \t]*)*)"
    r"(?P<modifiers>(?:(?:public|internal|sealed|partial|abstract)\s+)*)"
    r"class\s+(?P<name>\w+)[^{;:\n]*:\s*(?P<bases>[^{\n]*)",
    re.MULTILINE,
)
ASSEMBLY_API_CONTROLLER = re.compile(r"\[\s*assembly\s*:\s*ApiController")


def _attribute_block(lines: List[str], class_line: int) -> str:
    """Collect the attribute and comment lines directly above ``class_line`` (1-based)."""

    collected: List[str] = []
    index = class_line - 2
    while index >= 0:
        stripped = lines[index].strip()
        if stripped.startswith("[") or stripped.startswith("//") or not stripped:
            collected.append(stripped)
            index -= 1
            continue
        break
    return "\n".join(collected)


@rule("ASP005", Severity.MEDIUM, "Controller missing [ApiController]", skill="api-design", category="api")
def missing_api_controller_attribute(path: str, text: str) -> Iterator[Hit]:
    if ASSEMBLY_API_CONTROLLER.search(text):
        return
    lines = text.splitlines()
    for match in CONTROLLER_CLASS_PATTERN.finditer(text):
        if not re.search(r"\bControllerBase\b", match.group("bases")):
            continue
        if "abstract" in match.group("modifiers"):
            continue
        number = line_of(text, match.start("modifiers"))
        attributes = match.group("prefix") + "\n" + _attribute_block(lines, number)
        if re.search(r"\bApiController(?:Attribute)?\b", attributes):
            continue
        yield Hit(
            number,
            f"Controller '{match.group('name')}' derives from ControllerBase without [ApiController]; "
            "automatic model validation and binding-source inference are disabled",
        )


RULES = (missing_api_controller_attribute,)
