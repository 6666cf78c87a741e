"""Persistent conversion settings schema and load/save helpers."""

from __future__ import annotations

import json
import os
import platform
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from asciify_converter import CHAR_SETS, CUSTOM_CHAR_SET, DEFAULT_CUSTOM_CHARS, ConversionConfig
from asciify_converter.adjust import ADJUST_MAX, ADJUST_MIN
from asciify_converter.converter import MAX_DENSITY, MIN_DENSITY
from asciify_converter.loader import MAX_WIDTH


CONFIG_VERSION = 1


@dataclass
class ConversionSettings:
    char_set: str = CUSTOM_CHAR_SET
    custom_chars: str = DEFAULT_CUSTOM_CHARS
    density: int = 50
    aspect_scale: float = 0.5
    color_enabled: bool = False


@dataclass
class AdjustmentSettings:
    brightness: int = 0
    contrast: int = 0


@dataclass
class LoaderSettings:
    max_width: int = MAX_WIDTH


@dataclass
class ControllerSettings:
    min_interval_ms: int = 32


@dataclass
class DiagnosticsSettings:
    keep_log_files: int = 7


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    conversion: ConversionSettings = field(default_factory=ConversionSettings)
    adjustment: AdjustmentSettings = field(default_factory=AdjustmentSettings)
    loader: LoaderSettings = field(default_factory=LoaderSettings)
    controller: ControllerSettings = field(default_factory=ControllerSettings)
    diagnostics: DiagnosticsSettings = field(default_factory=DiagnosticsSettings)

    def to_conversion_config(self) -> ConversionConfig:
        c = self.conversion
        return ConversionConfig(
            char_set=c.char_set,
            custom_chars=c.custom_chars,
            density=c.density,
            aspect_scale=c.aspect_scale,
            color_enabled=c.color_enabled,
        )


def config_root() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "Asciify"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "Asciify"
    return Path.home() / ".config" / "asciify"


def config_path() -> Path:
    return config_root() / "config.json"


def _merge(dataclass_type, raw: Any):
    defaults = dataclass_type()  # type: ignore[misc]
    if not isinstance(raw, dict):
        return defaults
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _clamp(value: Any, low: float, high: float, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return max(low, min(high, number))


def normalize_conversion(settings: ConversionSettings) -> None:
    settings.density = int(_clamp(settings.density, MIN_DENSITY, MAX_DENSITY, 50))
    settings.aspect_scale = _clamp(settings.aspect_scale, -1.0, 1.0, 0.5)
    settings.color_enabled = bool(settings.color_enabled)
    if not isinstance(settings.char_set, str) or settings.char_set not in CHAR_SETS:
        settings.char_set = CUSTOM_CHAR_SET
    if not isinstance(settings.custom_chars, str):
        settings.custom_chars = DEFAULT_CUSTOM_CHARS
    if not CHAR_SETS[settings.char_set] and not settings.custom_chars:
        settings.custom_chars = DEFAULT_CUSTOM_CHARS


def normalize_adjustment(settings: AdjustmentSettings) -> None:
    settings.brightness = int(_clamp(settings.brightness, ADJUST_MIN, ADJUST_MAX, 0))
    settings.contrast = int(_clamp(settings.contrast, ADJUST_MIN, ADJUST_MAX, 0))


def _normalize_loader(cfg: AppConfig) -> None:
    cfg.loader.max_width = int(_clamp(cfg.loader.max_width, 16, 4096, MAX_WIDTH))


def _normalize_controller(cfg: AppConfig) -> None:
    cfg.controller.min_interval_ms = int(_clamp(cfg.controller.min_interval_ms, 0, 1000, 32))


def normalize_config(cfg: AppConfig) -> AppConfig:
    normalize_conversion(cfg.conversion)
    normalize_adjustment(cfg.adjustment)
    _normalize_loader(cfg)
    _normalize_controller(cfg)
    cfg.diagnostics.keep_log_files = int(_clamp(cfg.diagnostics.keep_log_files, 2, 90, 7))
    return cfg


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return AppConfig()
    if not isinstance(data, dict):
        return AppConfig()

    cfg = AppConfig(
        config_version=CONFIG_VERSION,
        conversion=_merge(ConversionSettings, data.get("conversion", {})),
        adjustment=_merge(AdjustmentSettings, data.get("adjustment", {})),
        loader=_merge(LoaderSettings, data.get("loader", {})),
        controller=_merge(ControllerSettings, data.get("controller", {})),
        diagnostics=_merge(DiagnosticsSettings, data.get("diagnostics", {})),
    )
    return normalize_config(cfg)


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True, ensure_ascii=False), encoding="utf-8")
    return path
