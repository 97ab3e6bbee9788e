from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from cull.engine import PROGRESS_INTERVAL
from cull.errors import ConfigError
from cull.files import DEFAULT_SIDECAR_EXTENSIONS

logger = logging.getLogger(__name__)

DEFAULT_LOG_PATH = Path("~/.config/cull/deleted_images.log")


@dataclass(frozen=True)
class CullConfig:
    log_path: Path = DEFAULT_LOG_PATH
    sidecar_extensions: tuple[str, ...] = DEFAULT_SIDECAR_EXTENSIONS
    progress_interval: int = PROGRESS_INTERVAL

    def with_overrides(
        self,
        log_path: str | None = None,
        sidecar_extensions: Iterable[str] | None = None,
        progress_interval: int | None = None,
    ) -> CullConfig:
        updated = self
        if log_path:
            updated = replace(updated, log_path=Path(log_path))
        if sidecar_extensions:
            updated = replace(updated, sidecar_extensions=_normalize_extensions(sidecar_extensions))
        if progress_interval is not None:
            updated = replace(updated, progress_interval=_check_interval(progress_interval))
        return updated

    @property
    def resolved_log_path(self) -> Path:
        return self.log_path.expanduser()


def load_config(path: Path | None) -> CullConfig:
    """Build a config from an optional JSON file.

    A missing path gives the defaults; an unreadable file is reported and
    also gives the defaults. Invalid values raise ``ConfigError``.
    """
    if path is None or not path.exists():
        return CullConfig()
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Failed to read config %s: %s", path, exc)
        return CullConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must contain a JSON object")
    return _config_from_dict(data)


def _config_from_dict(data: dict[str, Any]) -> CullConfig:
    config = CullConfig()
    if "log_path" in data:
        config = replace(config, log_path=Path(str(data["log_path"])))
    if "sidecar_extensions" in data:
        extensions = data["sidecar_extensions"]
        if not isinstance(extensions, list) or not all(isinstance(e, str) for e in extensions):
            raise ConfigError("sidecar_extensions must be a list of strings")
        config = replace(config, sidecar_extensions=_normalize_extensions(extensions))
    if "progress_interval" in data:
        interval = data["progress_interval"]
        if not isinstance(interval, int) or isinstance(interval, bool):
            raise ConfigError("progress_interval must be an integer")
        config = replace(config, progress_interval=_check_interval(interval))
    return config


def _normalize_extensions(extensions: Iterable[str]) -> tuple[str, ...]:
    normalized: list[str] = []
    for ext in extensions:
        ext = ext.strip()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = "." + ext
        if ext not in normalized:
            normalized.append(ext)
    return tuple(normalized)


def _check_interval(interval: int) -> int:
    if interval < 1:
        raise ConfigError(f"progress_interval must be >= 1, got {interval}")
    return interval
