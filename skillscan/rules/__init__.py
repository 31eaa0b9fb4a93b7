"""Rule registry for scanner."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, List, NamedTuple, Optional

from skillscan.result import Finding
from skillscan.severity import Severity


class Hit(NamedTuple):
    """A match reported by a rule check; the owning rule turns it into a Finding."""

    line: int
    message: str
    severity: Optional[Severity] = None


CheckFunction = Callable[[str, str], Iterable[Hit]]


class DuplicateRuleError(ValueError):
    """Raised when two rules are registered under the same identifier."""


@dataclass(frozen=True)
class Rule:
    """Describe one stateless check over a file's full text."""

    rule_id: str
    severity: Severity
    title: str
    check: CheckFunction
    skill: str = "general"
    category: str = "general"

    def evaluate(self, path: str, text: str) -> List[Finding]:
        """Run the check on ``text`` and stamp each hit with this rule's identity."""

        return [
            Finding(
                file=path,
                line=max(int(hit.line), 1),
                rule_id=self.rule_id,
                message=hit.message,
                severity=hit.severity or self.severity,
            )
            for hit in self.check(path, text)
        ]


def rule(
    rule_id: str,
    severity: Severity,
    title: str,
    skill: str = "general",
    category: str = "general",
) -> Callable[[CheckFunction], Rule]:
    """Decorate a check function so it becomes a registrable :class:`Rule`.

    ``skill`` and ``category`` name the catalogue entry the check belongs to.
    """

    def decorator(check: CheckFunction) -> Rule:
        return Rule(
            rule_id=rule_id,
            severity=severity,
            title=title,
            check=check,
            skill=skill,
            category=category,
        )

    return decorator


class RuleRegistry:
    """Ordered collection of rules keyed by their identifier."""

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self._rules: Dict[str, Rule] = {}
        for item in rules:
            self.register(item)

    def register(self, item: Rule) -> Rule:
        if item.rule_id in self._rules:
            raise DuplicateRuleError(f"Rule {item.rule_id} is already registered")
        self._rules[item.rule_id] = item
        return item

    def get(self, rule_id: str) -> Optional[Rule]:
        return self._rules.get(rule_id)

    def without(self, rule_ids: Iterable[str]) -> "RuleRegistry":
        """Return a copy of the registry minus ``rule_ids`` (case-insensitive)."""

        disabled = {rule_id.upper() for rule_id in rule_ids}
        return RuleRegistry(item for item in self if item.rule_id.upper() not in disabled)

    def only_skill(self, skill: str) -> "RuleRegistry":
        """Return a copy holding only the rules of ``skill`` (case-insensitive)."""

        wanted = skill.lower()
        return RuleRegistry(item for item in self if item.skill.lower() == wanted)

    def skills(self) -> List[Tuple[str, str]]:
        """Return the distinct (skill, category) pairs in registration order."""

        seen: Dict[str, str] = {}
        for item in self:
            seen.setdefault(item.skill, item.category)
        return list(seen.items())

    @property
    def rule_ids(self) -> List[str]:
        return list(self._rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(list(self._rules.values()))

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules


def builtin_registry() -> RuleRegistry:
    """Return a fresh registry holding the bundled ASP.NET Core sample rules."""

    from .api_design import RULES as API_DESIGN_RULES
    from .async_usage import RULES as ASYNC_RULES
    from .hardcoded_secret import RULES as SECRET_RULES
    from .hosting import RULES as HOSTING_RULES
    from .raw_sql import RULES as RAW_SQL_RULES

    bundled = [*SECRET_RULES, *RAW_SQL_RULES, *ASYNC_RULES, *HOSTING_RULES, *API_DESIGN_RULES]
    return RuleRegistry(sorted(bundled, key=lambda item: item.rule_id))
