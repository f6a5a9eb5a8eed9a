from __future__ import annotations

from collections.abc import Iterable

from convention_checker.models import Finding, SyntaxUnit
from convention_checker.rules.base import Rule


FIELD_INJECTION_ANNOTATIONS = ("Autowired", "Inject", "Resource", "Value")


class NoFieldInjectionRule(Rule):
    id = "no-field-injection"
    description = "Use constructor injection instead of injecting into fields"

    def evaluate(self, unit: SyntaxUnit) -> Iterable[Finding]:
        for item in unit.fields:
            for name in FIELD_INJECTION_ANNOTATIONS:
                if name in item.annotations:
                    yield self.finding(
                        unit,
                        item.line,
                        item.column,
                        f"@{name} on field '{item.name}'; inject it through the constructor",
                    )
                    break
