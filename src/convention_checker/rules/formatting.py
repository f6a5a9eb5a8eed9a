from __future__ import annotations

from collections.abc import Iterable

from convention_checker.models import Finding, SyntaxUnit
from convention_checker.rules.base import Rule


DEFAULT_MAX_LINE_LENGTH = 120

EXEMPT_LINE_PREFIXES = ("import ", "package ")


class LineLengthRule(Rule):
    id = "line-length"
    description = "Lines are at most the configured length"

    def __init__(self, max_length: int = DEFAULT_MAX_LINE_LENGTH):
        if max_length <= 0:
            raise ValueError("max_length must be positive")
        self.max_length = max_length

    def evaluate(self, unit: SyntaxUnit) -> Iterable[Finding]:
        for idx, line in enumerate(unit.lines, start=1):
            if len(line) <= self.max_length:
                continue
            if line.lstrip().startswith(EXEMPT_LINE_PREFIXES):
                continue
            yield self.finding(
                unit,
                idx,
                self.max_length + 1,
                f"Line is {len(line)} characters long (limit {self.max_length})",
            )


class NoTabIndentRule(Rule):
    id = "no-tab-indent"
    description = "Indent with spaces"

    def evaluate(self, unit: SyntaxUnit) -> Iterable[Finding]:
        for idx, line in enumerate(unit.lines, start=1):
            indent = line[: len(line) - len(line.lstrip(" \t"))]
            if "\t" in indent:
                yield self.finding(unit, idx, indent.index("\t") + 1, "Tab character used for indentation")
