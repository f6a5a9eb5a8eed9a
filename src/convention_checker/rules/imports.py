from __future__ import annotations

from collections.abc import Iterable

from convention_checker.models import Finding, SyntaxUnit
from convention_checker.rules.base import Rule


class NoWildcardImportRule(Rule):
    id = "no-wildcard-import"
    description = "Import the types you use explicitly instead of whole packages"

    def evaluate(self, unit: SyntaxUnit) -> Iterable[Finding]:
        for item in unit.imports:
            if not item.is_wildcard:
                continue
            keyword = "import static" if item.is_static else "import"
            yield self.finding(
                unit,
                item.line,
                item.column,
                f"Wildcard import '{keyword} {item.name}'; import the used types explicitly",
            )
