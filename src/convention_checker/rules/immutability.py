from __future__ import annotations

import re
from collections.abc import Iterable

from convention_checker.models import Finding, Severity, SyntaxUnit
from convention_checker.rules.base import Rule, simple_type_name


IMPLICITLY_FINAL_OWNERS = {"interface", "annotation"}

# JPA needs mutable, non-final state on these types.
PERSISTENCE_ANNOTATIONS = {"Entity", "Embeddable", "MappedSuperclass"}

# Lombok @Value makes every field private final.
FINAL_FIELDS_ANNOTATIONS = {"Value"}

FINAL_FIELD_EXEMPT_OWNERS = PERSISTENCE_ANNOTATIONS | FINAL_FIELDS_ANNOTATIONS

THREAD_UNSAFE_TYPES = {
    "SimpleDateFormat",
    "DateFormat",
    "DecimalFormat",
    "NumberFormat",
    "MessageFormat",
    "Calendar",
    "GregorianCalendar",
    "StringBuilder",
    "HashMap",
    "LinkedHashMap",
    "TreeMap",
    "ArrayList",
    "LinkedList",
    "HashSet",
    "LinkedHashSet",
    "TreeSet",
}

NEW_INSTANCE_RE = re.compile(r"^new\s+([\w$.]+)")

LOMBOK_MUTABLE_ANNOTATIONS = {"Data", "Setter"}


class FinalFieldRule(Rule):
    id = "final-field"
    description = "Instance fields should be final"

    def evaluate(self, unit: SyntaxUnit) -> Iterable[Finding]:
        for item in unit.fields:
            if item.is_static or item.is_final:
                continue
            if item.owner_kind in IMPLICITLY_FINAL_OWNERS:
                continue
            owner = unit.find_class(item.owner)
            if owner is not None and FINAL_FIELD_EXEMPT_OWNERS.intersection(owner.annotations):
                continue
            yield self.finding(
                unit,
                item.line,
                item.column,
                f"Field '{item.name}' in {item.owner} is not final",
            )


class StaticMutableFieldRule(Rule):
    id = "static-mutable-field"
    description = "Static fields must be final; mutable static state is shared across threads"
    severity = Severity.ERROR

    def evaluate(self, unit: SyntaxUnit) -> Iterable[Finding]:
        for item in unit.fields:
            if not item.is_static or item.is_final:
                continue
            yield self.finding(
                unit,
                item.line,
                item.column,
                f"Static field '{item.name}' in {item.owner} is mutable shared state; make it final",
            )


class ThreadUnsafeStaticRule(Rule):
    id = "thread-unsafe-static"
    description = "Thread-unsafe types must not be held in static fields"
    severity = Severity.ERROR

    def evaluate(self, unit: SyntaxUnit) -> Iterable[Finding]:
        for item in unit.fields:
            if not item.is_static:
                continue
            unsafe = _unsafe_type(item.type_name, item.initializer)
            if unsafe is None:
                continue
            yield self.finding(
                unit,
                item.line,
                item.column,
                f"Static field '{item.name}' holds a {unsafe}, which is not thread-safe",
            )


class NoLombokDataRule(Rule):
    id = "no-lombok-data"
    description = "Prefer @Value/@Getter over Lombok annotations that generate setters"

    def evaluate(self, unit: SyntaxUnit) -> Iterable[Finding]:
        for decl in unit.classes:
            for name in decl.annotations:
                if name in LOMBOK_MUTABLE_ANNOTATIONS:
                    yield self.finding(
                        unit,
                        decl.line,
                        decl.column,
                        f"@{name} on {decl.qualified_name} generates setters; prefer @Value or @Getter",
                    )
        for item in unit.fields:
            if "Setter" in item.annotations:
                yield self.finding(
                    unit,
                    item.line,
                    item.column,
                    f"@Setter on field '{item.name}' makes it mutable",
                )


def _unsafe_type(type_name: str, initializer: str | None) -> str | None:
    declared = simple_type_name(type_name)
    if declared in THREAD_UNSAFE_TYPES:
        return declared
    if initializer:
        match = NEW_INSTANCE_RE.match(initializer)
        if match:
            created = simple_type_name(match.group(1))
            if created in THREAD_UNSAFE_TYPES:
                return created
    return None
