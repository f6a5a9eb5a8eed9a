from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from convention_checker.config import ConfigurationError
from convention_checker.models import RuleSettings, Severity
from convention_checker.rules.base import Rule, SourceParseRule

logger = logging.getLogger(__name__)


class DuplicateRuleError(ConfigurationError):
    pass


class UnknownRuleError(ConfigurationError):
    pass


class RuleRegistry:
    """Rules keyed by id, in registration order, each with an enabled flag.

    The registry is configured once and then frozen; the engine only reads it.
    """

    def __init__(self, rules: Iterable[Rule] = ()):
        self._rules: dict[str, Rule] = {}
        self._enabled: dict[str, bool] = {}
        self._severity: dict[str, Severity] = {}
        self._frozen = False
        for rule in rules:
            self.register(rule)

    def register(self, rule: Rule, *, enabled: bool = True) -> None:
        self._check_mutable()
        if not rule.id:
            raise ConfigurationError(f"Rule {type(rule).__name__} has no id")
        if rule.id in self._rules:
            raise DuplicateRuleError(f"Rule id already registered: {rule.id}")
        self._rules[rule.id] = rule
        self._enabled[rule.id] = enabled

    def enable(self, rule_id: str) -> None:
        self._check_mutable()
        self._require(rule_id)
        self._enabled[rule_id] = True

    def disable(self, rule_id: str) -> None:
        self._check_mutable()
        self._require(rule_id)
        self._enabled[rule_id] = False

    def set_severity(self, rule_id: str, severity: Severity) -> None:
        self._check_mutable()
        self._require(rule_id)
        self._require_adjustable(rule_id)
        self._severity[rule_id] = severity

    def apply(self, settings: Iterable[RuleSettings]) -> None:
        """Apply per-rule configuration; unknown ids fail before anything changes."""
        self._check_mutable()
        items = list(settings)
        for item in items:
            self._require(item.rule_id)
            if item.severity is not None:
                self._require_adjustable(item.rule_id)
        for item in items:
            if item.enabled is not None:
                self._enabled[item.rule_id] = item.enabled
            if item.severity is not None:
                self._severity[item.rule_id] = item.severity
            logger.debug("rule %s: enabled=%s severity=%s", item.rule_id, item.enabled, item.severity)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, rule_id: str) -> Rule:
        self._require(rule_id)
        return self._rules[rule_id]

    def is_enabled(self, rule_id: str) -> bool:
        self._require(rule_id)
        return self._enabled[rule_id]

    def severity_for(self, rule_id: str) -> Severity:
        self._require(rule_id)
        return self._severity.get(rule_id, self._rules[rule_id].severity)

    def severity_override(self, rule_id: str) -> Severity | None:
        return self._severity.get(rule_id)

    def enabled_rules(self) -> list[Rule]:
        return [rule for rule_id, rule in self._rules.items() if self._enabled[rule_id]]

    def rule_ids(self) -> list[str]:
        return list(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules

    def __iter__(self) -> Iterator[Rule]:
        return iter(list(self._rules.values()))

    def __len__(self) -> int:
        return len(self._rules)

    def _require(self, rule_id: str) -> None:
        if rule_id not in self._rules:
            raise UnknownRuleError(f"Unknown rule id: {rule_id}")

    def _check_mutable(self) -> None:
        if self._frozen:
            raise ConfigurationError("Rule registry is frozen; configure it before checking")

    def _require_adjustable(self, rule_id: str) -> None:
        # Unreadable files always fail the check.
        if rule_id == SourceParseRule.id:
            raise ConfigurationError(f"Severity of '{rule_id}' is fixed at {SourceParseRule.severity.value}")
