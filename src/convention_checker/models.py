from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


class Severity(str, Enum):
    WARN = "WARN"
    ERROR = "ERROR"

    @classmethod
    def parse(cls, value: object) -> Severity:
        text = str(value).strip().upper()
        if text == "WARNING":
            text = "WARN"
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"Unknown severity: {value!r} (expected WARN or ERROR)") from None


@dataclass(frozen=True)
class ScanSettings:
    include_exts: tuple[str, ...] = (".java",)
    exclude_dirs: tuple[str, ...] = (
        ".git",
        ".idea",
        ".gradle",
        ".mvn",
        "build",
        "out",
        "target",
        "node_modules",
    )
    max_file_size_bytes: int = 500_000
    max_files: int = 40_000


@dataclass(frozen=True)
class RuleSettings:
    rule_id: str
    enabled: bool | None = None
    severity: Severity | None = None


@dataclass(frozen=True)
class AppConfig:
    rules: tuple[RuleSettings, ...] = ()
    scan: ScanSettings = field(default_factory=ScanSettings)
    workers: int | None = None
    max_line_length: int = 120


@dataclass(frozen=True)
class Location:
    file_path: str
    line: int
    column: int


@dataclass(frozen=True)
class Finding:
    rule_id: str
    location: Location
    message: str
    severity: Severity

    def sort_key(self) -> tuple:
        return (
            self.location.file_path,
            self.location.line,
            self.location.column,
            self.rule_id,
            self.message,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule_id": self.rule_id,
            "file_path": self.location.file_path,
            "line": self.location.line,
            "column": self.location.column,
            "severity": self.severity.value,
            "message": self.message,
        }


@dataclass(frozen=True)
class ImportDecl:
    name: str
    is_static: bool
    line: int
    column: int

    @property
    def is_wildcard(self) -> bool:
        return self.name.endswith(".*")


@dataclass(frozen=True)
class ClassDecl:
    name: str
    kind: str
    qualified_name: str
    modifiers: frozenset[str]
    annotations: tuple[str, ...]
    outer: str | None
    line: int
    column: int


@dataclass(frozen=True)
class FieldDecl:
    name: str
    type_name: str
    owner: str
    owner_kind: str
    modifiers: frozenset[str]
    annotations: tuple[str, ...]
    initializer: str | None
    line: int
    column: int

    @property
    def has_initializer(self) -> bool:
        return self.initializer is not None

    @property
    def is_static(self) -> bool:
        return "static" in self.modifiers

    @property
    def is_final(self) -> bool:
        return "final" in self.modifiers


@dataclass(frozen=True)
class MethodDecl:
    name: str
    return_type: str | None
    owner: str
    owner_kind: str
    modifiers: frozenset[str]
    annotations: tuple[str, ...]
    parameters: tuple[str, ...]
    line: int
    column: int
    body: tuple[int, int] | None = None

    @property
    def is_constructor(self) -> bool:
        return self.return_type is None


@dataclass(frozen=True)
class SyntaxUnit:
    path: str
    package: str | None
    imports: tuple[ImportDecl, ...]
    classes: tuple[ClassDecl, ...]
    fields: tuple[FieldDecl, ...]
    methods: tuple[MethodDecl, ...]
    lines: tuple[str, ...]
    code_lines: tuple[str, ...]

    def find_class(self, qualified_name: str) -> ClassDecl | None:
        for item in self.classes:
            if item.qualified_name == qualified_name:
                return item
        return None


@dataclass(frozen=True)
class CheckReport:
    findings: tuple[Finding, ...]
    passed: bool

    @classmethod
    def from_findings(cls, findings: list[Finding]) -> CheckReport:
        ordered = tuple(sorted(findings, key=Finding.sort_key))
        passed = not any(item.severity is Severity.ERROR for item in ordered)
        return cls(findings=ordered, passed=passed)

    @property
    def error_count(self) -> int:
        return sum(1 for item in self.findings if item.severity is Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for item in self.findings if item.severity is Severity.WARN)

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "findings_count": len(self.findings),
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "findings": [item.to_dict() for item in self.findings],
        }


@dataclass(frozen=True)
class CheckSummary:
    root: str
    files_seen: int
    units_checked: int
    parse_errors: int
    rules_enabled: int
    findings_count: int
    passed: bool

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
