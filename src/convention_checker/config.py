from __future__ import annotations

import json
import os
from dataclasses import replace
from pathlib import Path

from convention_checker.models import AppConfig, RuleSettings, ScanSettings, Severity


class ConfigurationError(ValueError):
    """Invalid checker setup; always raised before any file is checked."""


class ConfigError(ConfigurationError):
    """The configuration file is missing or malformed."""


WORKERS_ENV = "CONVENTION_CHECKER_WORKERS"


def load_config(path: str | Path | None = None) -> AppConfig:
    if path is None:
        return _apply_env(AppConfig())

    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file is not valid JSON: {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError("Config must be a JSON object")

    rules = _parse_rules(raw.get("rules", {}))

    scan_raw = raw.get("scan", {})
    if not isinstance(scan_raw, dict):
        raise ConfigError("'scan' must be an object")

    defaults = ScanSettings()
    scan = ScanSettings(
        include_exts=tuple(
            ext.lower() for ext in _ensure_string_list(scan_raw.get("include_exts", list(defaults.include_exts)))
        ),
        exclude_dirs=tuple(_ensure_string_list(scan_raw.get("exclude_dirs", list(defaults.exclude_dirs)))),
        max_file_size_bytes=_positive_int(scan_raw.get("max_file_size_bytes", defaults.max_file_size_bytes), "max_file_size_bytes"),
        max_files=_positive_int(scan_raw.get("max_files", defaults.max_files), "max_files"),
    )

    engine_raw = raw.get("engine", {})
    if not isinstance(engine_raw, dict):
        raise ConfigError("'engine' must be an object")
    workers = engine_raw.get("workers")
    if workers is not None:
        workers = _positive_int(workers, "workers")

    options_raw = raw.get("options", {})
    if not isinstance(options_raw, dict):
        raise ConfigError("'options' must be an object")

    config = AppConfig(
        rules=rules,
        scan=scan,
        workers=workers,
        max_line_length=_positive_int(options_raw.get("max_line_length", 120), "max_line_length"),
    )
    return _apply_env(config)


def _parse_rules(value: object) -> tuple[RuleSettings, ...]:
    if not isinstance(value, dict):
        raise ConfigError("'rules' must be an object mapping rule id to settings")

    settings: list[RuleSettings] = []
    for rule_id, item in value.items():
        if isinstance(item, bool):
            settings.append(RuleSettings(rule_id=str(rule_id), enabled=item))
            continue
        if not isinstance(item, dict):
            raise ConfigError(f"Settings for rule '{rule_id}' must be a boolean or an object")

        enabled = item.get("enabled")
        if enabled is not None and not isinstance(enabled, bool):
            raise ConfigError(f"'enabled' for rule '{rule_id}' must be a boolean")

        severity = item.get("severity")
        if severity is not None:
            try:
                severity = Severity.parse(severity)
            except ValueError as exc:
                raise ConfigError(f"Rule '{rule_id}': {exc}") from exc

        settings.append(RuleSettings(rule_id=str(rule_id), enabled=enabled, severity=severity))

    return tuple(settings)


def _apply_env(config: AppConfig) -> AppConfig:
    raw = (os.getenv(WORKERS_ENV) or "").strip()
    if not raw:
        return config
    return replace(config, workers=_positive_int(raw, WORKERS_ENV))


def _positive_int(value: object, name: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"'{name}' must be a positive integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"'{name}' must be a positive integer") from None
    if number <= 0:
        raise ConfigError(f"'{name}' must be a positive integer")
    return number


def _ensure_string_list(value: object) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError("Expected a list of strings")
    return [str(item) for item in value]
