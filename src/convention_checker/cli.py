from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace

from convention_checker.config import ConfigurationError, load_config
from convention_checker.engine import CheckCancelledError
from convention_checker.pipeline import build_registry, run_check
from convention_checker.reporting import render_text, write_reports

logger = logging.getLogger(__name__)

EXIT_PASSED = 0
EXIT_FAILED = 1
EXIT_FAULT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="convention-checker",
        description="Check Java sources against mechanically checkable coding conventions",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser("check", help="Check a source tree or a single file")
    check_parser.add_argument("path", help="Root directory or .java file")
    check_parser.add_argument("--config", default=None, help="JSON config path")
    check_parser.add_argument("--format", choices=["text", "json"], default="text")
    check_parser.add_argument("--output-dir", default=None, help="Also write JSON/CSV reports here")
    check_parser.add_argument("--workers", type=int, default=None)

    rules_parser = subparsers.add_parser("rules", help="List rules and whether they are enabled")
    rules_parser.add_argument("--config", default=None, help="JSON config path")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config(args.config)
        registry = build_registry(config)
    except ConfigurationError as exc:
        print(f"convention-checker: configuration error: {exc}", file=sys.stderr)
        return EXIT_FAULT

    if args.command == "rules":
        rows = [
            {
                "id": rule.id,
                "enabled": registry.is_enabled(rule.id),
                "severity": registry.severity_for(rule.id).value,
                "description": rule.description,
            }
            for rule in registry
        ]
        print(json.dumps(rows, indent=2))
        return EXIT_PASSED

    if args.command == "check":
        if args.workers is not None:
            if args.workers <= 0:
                parser.error("--workers must be a positive integer")
            config = replace(config, workers=args.workers)

        try:
            report, summary = run_check(config, args.path, registry=registry)
        except (CheckCancelledError, KeyboardInterrupt):
            print("convention-checker: check cancelled", file=sys.stderr)
            return EXIT_FAULT
        except FileNotFoundError as exc:
            print(f"convention-checker: {exc}", file=sys.stderr)
            return EXIT_FAULT
        except Exception:
            logger.exception("Internal error while checking %s", args.path)
            return EXIT_FAULT

        if args.output_dir:
            try:
                write_reports(report, args.output_dir, summary)
            except OSError as exc:
                logger.error("Cannot write reports to %s", args.output_dir, exc_info=True)
                print(f"convention-checker: cannot write reports: {exc}", file=sys.stderr)
                return EXIT_FAULT

        if args.format == "json":
            print(json.dumps({"summary": summary.to_dict(), **report.to_dict()}, indent=2, ensure_ascii=True))
        else:
            print(render_text(report))

        return EXIT_PASSED if report.passed else EXIT_FAILED

    parser.error(f"Unsupported command: {args.command}")
    return EXIT_FAULT


if __name__ == "__main__":
    raise SystemExit(main())
