from __future__ import annotations

import json
import os
from pathlib import Path

from .app_metadata import APP_NAME, APP_VERSION
from .models import (
    DEFAULT_FREE_SCAN_DELIMITERS,
    DEFAULT_HEADER_KEYWORDS,
    DEFAULT_LONG_FORM_HOSTS,
    DEFAULT_PLAYLIST_PREFIXES,
    DEFAULT_REFERENCE_HOSTS,
    DEFAULT_WATCH_LATER_SENTINEL,
    ImportMode,
    IngestConfig,
)

__all__ = [
    "APP_NAME",
    "APP_VERSION",
    "CONFIG_FILENAME",
    "CONFIG_SCHEMA_VERSION",
    "config_path",
    "config_to_dict",
    "default_config",
    "load_config",
    "save_config",
]

CONFIG_FILENAME = "TubeIntake_config.json"
CONFIG_SCHEMA_VERSION = 1

SUBMIT_CONCURRENCY_MIN = 1
SUBMIT_CONCURRENCY_MAX = 16
RESOLVE_TIMEOUT_SECONDS_MIN = 1.0
RESOLVE_TIMEOUT_SECONDS_MAX = 120.0
SETTLE_TIMEOUT_SECONDS_MIN = 0.0
SETTLE_TIMEOUT_SECONDS_MAX = 600.0
MAX_BATCH_ITEMS_MIN = 0
MAX_BATCH_ITEMS_MAX = 10000
IMPORT_MODE_VALUES = {item.value for item in ImportMode}


def _paths():
    from . import paths as paths_module

    return paths_module


def _coerce_int(value: object, default: int, minimum: int, maximum: int) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        parsed = default
    return max(minimum, min(maximum, parsed))


def _coerce_float(value: object, default: float, minimum: float, maximum: float) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        parsed = default
    if parsed != parsed:
        parsed = default
    return max(minimum, min(maximum, parsed))


def _coerce_text_tuple(value: object, *, default: tuple[str, ...], lowercase: bool = False) -> tuple[str, ...]:
    if isinstance(value, str):
        items = [value]
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        return tuple(default)
    cleaned: list[str] = []
    for item in items:
        text = str(item or "").strip()
        if lowercase:
            text = text.lower()
        if text and text not in cleaned:
            cleaned.append(text)
    return tuple(cleaned) if cleaned else tuple(default)


def _coerce_playlist_prefixes(value: object) -> tuple[str, ...]:
    prefixes = _coerce_text_tuple(value, default=DEFAULT_PLAYLIST_PREFIXES)
    valid = tuple(item for item in prefixes if len(item) == 2)
    return valid if valid else DEFAULT_PLAYLIST_PREFIXES


def _coerce_delimiters(value: object, *, default: str) -> str:
    text = str(value if value is not None else "")
    unique = "".join(dict.fromkeys(ch for ch in text if ch not in {"\r", "\n"}))
    return unique if unique else default


def default_config() -> IngestConfig:
    return IngestConfig(
        schema_version=CONFIG_SCHEMA_VERSION,
        reference_hosts=DEFAULT_REFERENCE_HOSTS,
        long_form_hosts=DEFAULT_LONG_FORM_HOSTS,
        playlist_prefixes=DEFAULT_PLAYLIST_PREFIXES,
        watch_later_sentinel=DEFAULT_WATCH_LATER_SENTINEL,
        header_keywords=DEFAULT_HEADER_KEYWORDS,
        free_scan_delimiters=DEFAULT_FREE_SCAN_DELIMITERS,
        submit_concurrency=4,
        resolve_timeout_seconds=10.0,
        settle_timeout_seconds=0.0,
        max_batch_items=0,
        default_import_mode=ImportMode.CHANNELS.value,
    )


def _sanitize_payload(payload: dict[str, object]) -> IngestConfig:
    defaults = default_config()
    default_import_mode = str(payload.get("default_import_mode", defaults.default_import_mode) or "").strip().lower()
    if default_import_mode not in IMPORT_MODE_VALUES:
        default_import_mode = defaults.default_import_mode
    watch_later_sentinel = str(payload.get("watch_later_sentinel", defaults.watch_later_sentinel) or "").strip()

    return IngestConfig(
        schema_version=CONFIG_SCHEMA_VERSION,
        reference_hosts=_coerce_text_tuple(
            payload.get("reference_hosts"),
            default=defaults.reference_hosts,
            lowercase=True,
        ),
        long_form_hosts=_coerce_text_tuple(
            payload.get("long_form_hosts"),
            default=defaults.long_form_hosts,
            lowercase=True,
        ),
        playlist_prefixes=_coerce_playlist_prefixes(payload.get("playlist_prefixes")),
        watch_later_sentinel=watch_later_sentinel or defaults.watch_later_sentinel,
        header_keywords=_coerce_text_tuple(
            payload.get("header_keywords"),
            default=defaults.header_keywords,
            lowercase=True,
        ),
        free_scan_delimiters=_coerce_delimiters(
            payload.get("free_scan_delimiters"),
            default=defaults.free_scan_delimiters,
        ),
        submit_concurrency=_coerce_int(
            payload.get("submit_concurrency", defaults.submit_concurrency),
            defaults.submit_concurrency,
            SUBMIT_CONCURRENCY_MIN,
            SUBMIT_CONCURRENCY_MAX,
        ),
        resolve_timeout_seconds=_coerce_float(
            payload.get("resolve_timeout_seconds", defaults.resolve_timeout_seconds),
            defaults.resolve_timeout_seconds,
            RESOLVE_TIMEOUT_SECONDS_MIN,
            RESOLVE_TIMEOUT_SECONDS_MAX,
        ),
        settle_timeout_seconds=_coerce_float(
            payload.get("settle_timeout_seconds", defaults.settle_timeout_seconds),
            defaults.settle_timeout_seconds,
            SETTLE_TIMEOUT_SECONDS_MIN,
            SETTLE_TIMEOUT_SECONDS_MAX,
        ),
        max_batch_items=_coerce_int(
            payload.get("max_batch_items", defaults.max_batch_items),
            defaults.max_batch_items,
            MAX_BATCH_ITEMS_MIN,
            MAX_BATCH_ITEMS_MAX,
        ),
        default_import_mode=default_import_mode,
    )


def config_path() -> Path:
    return _paths().runtime_storage_dir() / CONFIG_FILENAME


def _load_config_from_path(path: Path) -> IngestConfig | None:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        if isinstance(raw, dict):
            return _sanitize_payload(raw)
    except (OSError, UnicodeError, json.JSONDecodeError, TypeError, ValueError):
        return None
    return None


def load_config() -> IngestConfig:
    primary = config_path()
    if primary.exists():
        loaded = _load_config_from_path(primary)
        if loaded is not None:
            return loaded
    return default_config()


def config_to_dict(config: IngestConfig) -> dict[str, object]:
    return {
        "schema_version": CONFIG_SCHEMA_VERSION,
        "reference_hosts": list(config.reference_hosts),
        "long_form_hosts": list(config.long_form_hosts),
        "playlist_prefixes": list(config.playlist_prefixes),
        "watch_later_sentinel": str(config.watch_later_sentinel or DEFAULT_WATCH_LATER_SENTINEL),
        "header_keywords": list(config.header_keywords),
        "free_scan_delimiters": str(config.free_scan_delimiters or DEFAULT_FREE_SCAN_DELIMITERS),
        "submit_concurrency": int(config.submit_concurrency),
        "resolve_timeout_seconds": float(config.resolve_timeout_seconds),
        "settle_timeout_seconds": float(config.settle_timeout_seconds),
        "max_batch_items": int(config.max_batch_items),
        "default_import_mode": str(config.default_import_mode or ImportMode.CHANNELS.value),
    }


def save_config(config: IngestConfig) -> str | None:
    payload = config_to_dict(config)
    path = config_path()
    tmp_path = path.with_suffix(f"{path.suffix}.tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        os.replace(str(tmp_path), str(path))
        return str(path)
    except (OSError, TypeError, ValueError):
        try:
            tmp_path.unlink(missing_ok=True)
        except OSError:
            pass
        return None
