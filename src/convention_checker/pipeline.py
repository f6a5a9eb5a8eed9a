from __future__ import annotations

import logging
import threading
from pathlib import Path

from convention_checker.engine import check
from convention_checker.models import AppConfig, CheckReport, CheckSummary
from convention_checker.reader import read_source_tree
from convention_checker.registry import RuleRegistry
from convention_checker.rules import default_rules

logger = logging.getLogger(__name__)


def build_registry(config: AppConfig) -> RuleRegistry:
    registry = RuleRegistry(default_rules(config))
    registry.apply(config.rules)
    return registry


def run_check(
    config: AppConfig,
    root: str | Path,
    *,
    registry: RuleRegistry | None = None,
    cancel_event: threading.Event | None = None,
) -> tuple[CheckReport, CheckSummary]:
    # Configuration errors surface here, before any file is read.
    if registry is None:
        registry = build_registry(config)
    registry.freeze()

    root_path = Path(root)
    logger.info("Reading sources under %s", root_path)
    read = read_source_tree(root_path, config.scan, cancel_event=cancel_event)

    report = check(
        read.units,
        registry,
        parse_errors=read.errors,
        max_workers=config.workers,
        cancel_event=cancel_event,
    )

    summary = CheckSummary(
        root=str(root_path.resolve()),
        files_seen=read.files_seen,
        units_checked=len(read.units),
        parse_errors=len(read.errors),
        rules_enabled=len(registry.enabled_rules()),
        findings_count=len(report.findings),
        passed=report.passed,
    )
    return report, summary
