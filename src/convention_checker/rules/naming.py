from __future__ import annotations

import re
from collections.abc import Iterable

from convention_checker.models import Finding, SyntaxUnit
from convention_checker.rules.base import Rule, simple_type_name


UPPER_CAMEL_RE = re.compile(r"^[A-Z][A-Za-z0-9]*$")
LOWER_CAMEL_RE = re.compile(r"^[a-z][A-Za-z0-9]*$")
UPPER_SNAKE_RE = re.compile(r"^[A-Z][A-Z0-9]*(?:_[A-Z0-9]+)*$")

CONSTANT_NAME_EXEMPT = {"serialVersionUID"}
LOGGER_TYPES = {"Logger", "Log", "XLogger"}


class TypeNamingRule(Rule):
    id = "type-naming"
    description = "Type names are UpperCamelCase"

    def evaluate(self, unit: SyntaxUnit) -> Iterable[Finding]:
        for decl in unit.classes:
            if not UPPER_CAMEL_RE.match(decl.name):
                yield self.finding(
                    unit,
                    decl.line,
                    decl.column,
                    f"{decl.kind.capitalize()} name '{decl.name}' is not UpperCamelCase",
                )


class MethodNamingRule(Rule):
    id = "method-naming"
    description = "Method names are lowerCamelCase"

    def evaluate(self, unit: SyntaxUnit) -> Iterable[Finding]:
        for item in unit.methods:
            if item.is_constructor:
                continue
            if not LOWER_CAMEL_RE.match(item.name):
                yield self.finding(
                    unit,
                    item.line,
                    item.column,
                    f"Method name '{item.name}' is not lowerCamelCase",
                )


class ConstantNamingRule(Rule):
    id = "constant-naming"
    description = "static final fields are UPPER_SNAKE_CASE"

    def evaluate(self, unit: SyntaxUnit) -> Iterable[Finding]:
        for item in unit.fields:
            if not (item.is_static and item.is_final):
                continue
            if item.name in CONSTANT_NAME_EXEMPT:
                continue
            if simple_type_name(item.type_name) in LOGGER_TYPES:
                continue
            if not UPPER_SNAKE_RE.match(item.name):
                yield self.finding(
                    unit,
                    item.line,
                    item.column,
                    f"Constant '{item.name}' is not UPPER_SNAKE_CASE",
                )
