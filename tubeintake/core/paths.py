from __future__ import annotations

import os
from pathlib import Path

from .app_metadata import APP_NAME

HOME_ENV = "TUBEINTAKE_HOME"


def appdata_dir() -> Path:
    override = os.environ.get(HOME_ENV)
    if override:
        return Path(override).expanduser().resolve()
    base = os.environ.get("LOCALAPPDATA")
    if base:
        return Path(base).resolve() / APP_NAME
    return Path.home() / f".{APP_NAME.lower()}"


def runtime_storage_dir() -> Path:
    target = appdata_dir()
    try:
        target.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise RuntimeError(
            f"Unable to create storage directory: {target}. "
            "Check folder permissions and available disk space."
        ) from exc
    return target
