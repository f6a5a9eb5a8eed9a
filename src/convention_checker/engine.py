from __future__ import annotations

import logging
import os
import threading
from collections.abc import Sequence
from concurrent.futures import CancelledError, ThreadPoolExecutor, as_completed
from dataclasses import replace

from convention_checker.javasyntax import ParseError
from convention_checker.models import CheckReport, Finding, Location, Severity, SyntaxUnit
from convention_checker.registry import RuleRegistry
from convention_checker.rules.base import Rule, SourceParseRule

logger = logging.getLogger(__name__)

PARSE_ERROR_RULE_ID = SourceParseRule.id


class CheckCancelledError(CancelledError):
    """The check pass was cancelled; no report is produced."""


def check(
    units: Sequence[SyntaxUnit],
    registry: RuleRegistry,
    *,
    parse_errors: Sequence[ParseError] = (),
    max_workers: int | None = None,
    cancel_event: threading.Event | None = None,
) -> CheckReport:
    """Run every enabled rule against every unit and return the sorted report.

    Rule failures become ERROR findings for the failing rule and unit; parse
    errors become one ERROR finding per file under ``parse-error``. Units are
    evaluated on a thread pool, and findings are sorted once all workers have
    finished, so the report does not depend on scheduling.
    """
    rules = [rule for rule in registry.enabled_rules() if rule.id != PARSE_ERROR_RULE_ID]
    findings: list[Finding] = []
    lock = threading.Lock()

    if parse_errors:
        if PARSE_ERROR_RULE_ID in registry and registry.is_enabled(PARSE_ERROR_RULE_ID):
            findings.extend(_parse_error_finding(error) for error in parse_errors)
        else:
            logger.info("%d parse errors not reported: %s is disabled", len(parse_errors), PARSE_ERROR_RULE_ID)

    def evaluate_unit(unit: SyntaxUnit) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise CheckCancelledError("Check cancelled")
        unit_findings: list[Finding] = []
        for rule in rules:
            unit_findings.extend(_evaluate_rule(rule, unit, registry))
        with lock:
            findings.extend(unit_findings)

    if rules and units:
        workers = max_workers or os.cpu_count() or 1
        logger.info("Checking %d units with %d rules on %d workers", len(units), len(rules), workers)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="convention-check") as executor:
            futures = [executor.submit(evaluate_unit, unit) for unit in units]
            try:
                for future in as_completed(futures):
                    if cancel_event is not None and cancel_event.is_set():
                        raise CheckCancelledError("Check cancelled")
                    future.result()
            except CancelledError:
                for pending in futures:
                    pending.cancel()
                logger.info("Check cancelled; discarding partial results")
                raise

    if cancel_event is not None and cancel_event.is_set():
        logger.info("Check cancelled; discarding partial results")
        raise CheckCancelledError("Check cancelled")

    with lock:
        report = CheckReport.from_findings(findings)

    logger.info(
        "Check finished: %d findings (%d errors, %d warnings), passed=%s",
        len(report.findings),
        report.error_count,
        report.warning_count,
        report.passed,
    )
    return report


def _evaluate_rule(rule: Rule, unit: SyntaxUnit, registry: RuleRegistry) -> list[Finding]:
    try:
        produced = list(rule.evaluate(unit))
        for item in produced:
            if not isinstance(item, Finding):
                raise TypeError(f"rule produced {type(item).__name__}, expected Finding")
            if item.rule_id != rule.id:
                raise ValueError(f"rule produced a finding for '{item.rule_id}'")
    except Exception as exc:
        logger.warning("Rule %s failed on %s", rule.id, unit.path, exc_info=True)
        return [
            Finding(
                rule_id=rule.id,
                location=Location(file_path=unit.path, line=1, column=1),
                message=f"Rule '{rule.id}' failed: {type(exc).__name__}: {exc}",
                severity=Severity.ERROR,
            )
        ]

    override = registry.severity_override(rule.id)
    if override is None:
        return produced
    return [replace(item, severity=override) for item in produced]


def _parse_error_finding(error: ParseError) -> Finding:
    return Finding(
        rule_id=PARSE_ERROR_RULE_ID,
        location=Location(file_path=error.file_path, line=error.line, column=error.column),
        message=f"Cannot parse file: {error.message}",
        severity=Severity.ERROR,
    )
