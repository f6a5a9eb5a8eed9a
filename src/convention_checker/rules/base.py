from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from convention_checker.models import Finding, Location, Severity, SyntaxUnit


class Rule(ABC):
    """A stateless check over one SyntaxUnit.

    Subclasses set ``id``, ``description`` and ``severity`` as class
    attributes and implement ``evaluate``. ``evaluate`` must not keep state
    between calls; the engine runs the same instance on many units at once.
    """

    id: str = ""
    description: str = ""
    severity: Severity = Severity.WARN

    @abstractmethod
    def evaluate(self, unit: SyntaxUnit) -> Iterable[Finding]:
        raise NotImplementedError

    def finding(self, unit: SyntaxUnit, line: int, column: int, message: str) -> Finding:
        return Finding(
            rule_id=self.id,
            location=Location(file_path=unit.path, line=line, column=column),
            message=message,
            severity=self.severity,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"


class SourceParseRule(Rule):
    """Reserved id under which files that failed to parse are reported."""

    id = "parse-error"
    description = "Source file could not be read or scanned"
    severity = Severity.ERROR

    def evaluate(self, unit: SyntaxUnit) -> Iterable[Finding]:
        return ()


def simple_type_name(type_name: str) -> str:
    """``java.util.Map<String, List<X>>[]`` -> ``Map``."""
    base = type_name.split("<", 1)[0]
    base = base.replace("[]", "").replace("...", "").strip()
    return base.rsplit(".", 1)[-1].strip()
