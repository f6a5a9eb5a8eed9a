from __future__ import annotations

import re
from collections.abc import Iterable

from convention_checker.models import Finding, MethodDecl, SyntaxUnit
from convention_checker.rules.base import Rule


NULLABLE_ANNOTATIONS = {"Nullable", "CheckForNull"}
NON_REFERENCE_RETURNS = {"void", "boolean", "byte", "char", "short", "int", "long", "float", "double"}

RETURN_NULL_RE = re.compile(r"\breturn\s+null\s*;")

# Blocks that belong to another function: lambda bodies and anonymous classes.
LAMBDA_BODY_RE = re.compile(r"->\s*$")
SWITCH_RULE_RE = re.compile(r"^\s*(?:case\b[^:]*?|default\s*)->\s*$")
ANONYMOUS_CLASS_RE = re.compile(r"\bnew\s+[\w$.]+\s*(?:<[^;{}]*>)?\s*\([^;{}]*\)\s*$")


class PreferOptionalRule(Rule):
    id = "prefer-optional"
    description = "Return Optional instead of a nullable reference"

    def evaluate(self, unit: SyntaxUnit) -> Iterable[Finding]:
        for item in unit.methods:
            if item.is_constructor or item.return_type in NON_REFERENCE_RETURNS:
                continue

            marker = NULLABLE_ANNOTATIONS.intersection(item.annotations)
            if marker:
                yield self.finding(
                    unit,
                    item.line,
                    item.column,
                    f"Method '{item.name}' is @{sorted(marker)[0]}; return Optional<{item.return_type}> instead",
                )

            yield from self._null_returns(unit, item)

    def _null_returns(self, unit: SyntaxUnit, item: MethodDecl) -> Iterable[Finding]:
        if item.body is None:
            return
        first, last = item.body
        # One entry per open brace: True when it opens a lambda or anonymous class body.
        nested: list[bool] = []
        prefix = ""
        for line_number in range(first, last + 1):
            line = unit.code_lines[line_number - 1]
            starts = {match.start() for match in RETURN_NULL_RE.finditer(line)}
            for column, char in enumerate(line):
                if column in starts and not any(nested):
                    yield self.finding(
                        unit,
                        line_number,
                        column + 1,
                        f"Method '{item.name}' returns null; return Optional.empty() instead",
                    )
                if char == "{":
                    nested.append(_opens_other_function(prefix))
                    prefix = ""
                elif char in "};":
                    if char == "}" and nested:
                        nested.pop()
                    prefix = ""
                else:
                    prefix += char
            prefix += " "


def _opens_other_function(prefix: str) -> bool:
    if ANONYMOUS_CLASS_RE.search(prefix):
        return True
    return bool(LAMBDA_BODY_RE.search(prefix)) and not SWITCH_RULE_RE.match(prefix)
