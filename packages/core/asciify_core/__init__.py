"""Core app services for settings, logging, background conversion, and diagnostics."""

from .config import AppConfig, load_config, normalize_config, save_config
from .conversion_controller import (
    ConversionController,
    ConversionRequest,
    ConversionStatus,
    convert_request,
    convert_settings,
)
from .diagnostics import DiagnosticsExporter, build_doctor_payload

__all__ = [
    "AppConfig",
    "ConversionController",
    "ConversionRequest",
    "ConversionStatus",
    "DiagnosticsExporter",
    "build_doctor_payload",
    "convert_request",
    "convert_settings",
    "load_config",
    "normalize_config",
    "save_config",
]
