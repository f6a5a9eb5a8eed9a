from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path

from convention_checker.engine import CheckCancelledError
from convention_checker.javasyntax import ParseError, parse_java
from convention_checker.models import ScanSettings, SyntaxUnit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReadResult:
    units: tuple[SyntaxUnit, ...]
    errors: tuple[ParseError, ...]
    files_seen: int
    files_skipped: int = 0


def read_source_tree(
    root: str | Path,
    scan_settings: ScanSettings,
    *,
    cancel_event: threading.Event | None = None,
) -> ReadResult:
    root_path = Path(root).resolve()
    if not root_path.exists():
        raise FileNotFoundError(f"Path does not exist: {root_path}")

    base = root_path.parent if root_path.is_file() else root_path
    units: list[SyntaxUnit] = []
    errors: list[ParseError] = []
    files_seen = 0
    files_skipped = 0

    for file_path in _iter_source_files(root_path, scan_settings):
        if cancel_event is not None and cancel_event.is_set():
            raise CheckCancelledError("Check cancelled while reading sources")
        if files_seen >= scan_settings.max_files:
            logger.warning("Stopped reading after %d files (max_files)", scan_settings.max_files)
            break
        files_seen += 1

        relative = file_path.relative_to(base).as_posix()
        try:
            if file_path.stat().st_size > scan_settings.max_file_size_bytes:
                logger.info("Skipping %s: larger than %d bytes", relative, scan_settings.max_file_size_bytes)
                files_skipped += 1
                continue
        except OSError as exc:
            error = ParseError(relative, f"cannot stat file: {exc}")
            logger.warning("Parse error: %s", error)
            errors.append(error)
            continue

        try:
            units.append(read_source_file(file_path, relative))
        except ParseError as exc:
            logger.warning("Parse error: %s", exc)
            errors.append(exc)

    logger.info("Read %d units from %s (%d parse errors)", len(units), root_path, len(errors))
    return ReadResult(
        units=tuple(units),
        errors=tuple(errors),
        files_seen=files_seen,
        files_skipped=files_skipped,
    )


def read_source_file(path: str | Path, relative: str | None = None) -> SyntaxUnit:
    file_path = Path(path)
    display = relative or file_path.as_posix()
    try:
        text = file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ParseError(display, f"not valid UTF-8: {exc.reason}") from exc
    except OSError as exc:
        raise ParseError(display, f"cannot read file: {exc}") from exc

    unit = parse_java(text, display)
    logger.debug(
        "%s: %d imports, %d types, %d fields, %d methods",
        display,
        len(unit.imports),
        len(unit.classes),
        len(unit.fields),
        len(unit.methods),
    )
    return unit


def _iter_source_files(root: Path, scan_settings: ScanSettings):
    include = {ext.lower() for ext in scan_settings.include_exts}
    exclude = set(scan_settings.exclude_dirs)

    if root.is_file():
        yield root
        return

    for path in sorted(root.rglob("*")):
        if not path.is_file():
            continue
        if any(part in exclude for part in path.relative_to(root).parts[:-1]):
            continue
        if path.suffix.lower() in include:
            yield path
