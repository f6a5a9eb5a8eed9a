from __future__ import annotations

from convention_checker.engine import CheckCancelledError, check
from convention_checker.javasyntax import ParseError, parse_java
from convention_checker.models import CheckReport, Finding, Location, Severity, SyntaxUnit
from convention_checker.pipeline import build_registry, run_check
from convention_checker.registry import DuplicateRuleError, RuleRegistry, UnknownRuleError

__version__ = "0.1.0"

__all__ = [
    "CheckCancelledError",
    "CheckReport",
    "DuplicateRuleError",
    "Finding",
    "Location",
    "ParseError",
    "RuleRegistry",
    "Severity",
    "SyntaxUnit",
    "UnknownRuleError",
    "build_registry",
    "check",
    "parse_java",
    "run_check",
]
