from __future__ import annotations

from convention_checker.models import AppConfig
from convention_checker.rules.base import Rule, SourceParseRule
from convention_checker.rules.formatting import LineLengthRule, NoTabIndentRule
from convention_checker.rules.immutability import (
    FinalFieldRule,
    NoLombokDataRule,
    StaticMutableFieldRule,
    ThreadUnsafeStaticRule,
)
from convention_checker.rules.imports import NoWildcardImportRule
from convention_checker.rules.logging_usage import LoggerDeclarationRule, NoConsoleOutputRule
from convention_checker.rules.naming import ConstantNamingRule, MethodNamingRule, TypeNamingRule
from convention_checker.rules.nullability import PreferOptionalRule
from convention_checker.rules.spring import NoFieldInjectionRule


def default_rules(config: AppConfig | None = None) -> list[Rule]:
    config = config or AppConfig()
    return [
        SourceParseRule(),
        NoWildcardImportRule(),
        FinalFieldRule(),
        StaticMutableFieldRule(),
        ThreadUnsafeStaticRule(),
        PreferOptionalRule(),
        ConstantNamingRule(),
        TypeNamingRule(),
        MethodNamingRule(),
        NoFieldInjectionRule(),
        NoLombokDataRule(),
        NoConsoleOutputRule(),
        LoggerDeclarationRule(),
        LineLengthRule(config.max_line_length),
        NoTabIndentRule(),
    ]


__all__ = ["Rule", "SourceParseRule", "default_rules"]
