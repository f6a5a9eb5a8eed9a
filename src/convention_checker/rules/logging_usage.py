from __future__ import annotations

import re
from collections.abc import Iterable

from convention_checker.models import Finding, SyntaxUnit
from convention_checker.rules.base import Rule, simple_type_name


CONSOLE_PATTERNS = [
    (re.compile(r"\bSystem\s*\.\s*(out|err)\b"), "System.{0} used for output; log through a Logger"),
    (re.compile(r"\.\s*printStackTrace\s*\(\s*\)"), "printStackTrace() bypasses logging; log the exception"),
]

LOGGER_TYPES = {"Logger", "Log", "XLogger"}
LOGGER_MODIFIERS = frozenset({"private", "static", "final"})


class NoConsoleOutputRule(Rule):
    id = "no-console-output"
    description = "Write diagnostics through a logger, not the console"

    def evaluate(self, unit: SyntaxUnit) -> Iterable[Finding]:
        for idx, line in enumerate(unit.code_lines, start=1):
            for pattern, message in CONSOLE_PATTERNS:
                for match in pattern.finditer(line):
                    groups = match.groups()
                    yield self.finding(unit, idx, match.start() + 1, message.format(*groups))


class LoggerDeclarationRule(Rule):
    id = "logger-declaration"
    description = "Loggers are declared private static final"

    def evaluate(self, unit: SyntaxUnit) -> Iterable[Finding]:
        for item in unit.fields:
            if simple_type_name(item.type_name) not in LOGGER_TYPES:
                continue
            missing = sorted(LOGGER_MODIFIERS - item.modifiers)
            if missing:
                yield self.finding(
                    unit,
                    item.line,
                    item.column,
                    f"Logger '{item.name}' should be private static final (missing: {' '.join(missing)})",
                )
