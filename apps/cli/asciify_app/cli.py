"""CLI entrypoints for image conversion, presets, settings, and diagnostics."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

from asciify_converter import CHAR_SETS, AsciifyError, load_pixel_buffer, to_markup
from asciify_core import (
    AppConfig,
    DiagnosticsExporter,
    build_doctor_payload,
    convert_settings,
    load_config,
    normalize_config,
    save_config,
)
from asciify_core.logging_setup import configure_logging, get_logger, install_crash_hooks

EXIT_INVALID = 2

logger = get_logger("cli")


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False, default=str))


def _config_path(args: argparse.Namespace) -> Path | None:
    return Path(args.config).expanduser() if args.config else None


def _apply_overrides(cfg: AppConfig, args: argparse.Namespace) -> AppConfig:
    overrides = {
        ("conversion", "char_set"): args.char_set,
        ("conversion", "custom_chars"): args.custom_chars,
        ("conversion", "density"): args.density,
        ("conversion", "aspect_scale"): args.aspect,
        ("conversion", "color_enabled"): args.color,
        ("adjustment", "brightness"): args.brightness,
        ("adjustment", "contrast"): args.contrast,
        ("loader", "max_width"): args.max_width,
    }
    for (section, key), value in overrides.items():
        if value is not None:
            setattr(getattr(cfg, section), key, value)
    return normalize_config(cfg)


def cmd_convert(args: argparse.Namespace) -> int:
    cfg = _apply_overrides(load_config(_config_path(args)), args)

    buffer = load_pixel_buffer(args.image, max_width=cfg.loader.max_width)
    artifact = convert_settings(buffer, cfg)

    fmt = args.format or ("markup" if cfg.conversion.color_enabled else "text")
    output = to_markup(artifact) if fmt == "markup" else artifact.to_text()
    logger.info(
        "converted %s to %d rows",
        args.image,
        artifact.row_count,
        extra={"event": "cli_convert"},
    )

    if args.out:
        out_path = Path(args.out).expanduser()
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(output, encoding="utf-8")
    else:
        print(output)

    if args.save:
        save_config(cfg, _config_path(args))
    return 0


def cmd_presets(_args: argparse.Namespace) -> int:
    _print_json(CHAR_SETS)
    return 0


def cmd_config_show(args: argparse.Namespace) -> int:
    _print_json(asdict(load_config(_config_path(args))))
    return 0


def cmd_config_reset(args: argparse.Namespace) -> int:
    path = save_config(AppConfig(), _config_path(args))
    _print_json({"reset": True, "path": str(path)})
    return 0


def cmd_doctor(args: argparse.Namespace) -> int:
    cfg = load_config(_config_path(args))
    payload = build_doctor_payload(cfg)

    if args.export:
        exporter = DiagnosticsExporter()
        out_dir = Path(args.out_dir).expanduser().resolve() if args.out_dir else None
        bundle = exporter.bundle(cfg=cfg, doctor_payload=payload, output_dir=out_dir)
        payload["diagnostics_bundle"] = str(bundle)

    _print_json(payload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="asciify", description="Convert images to character art")
    parser.add_argument("--config", default=None, help="Optional settings file path")
    sub = parser.add_subparsers(dest="command", required=True)

    convert_cmd = sub.add_parser("convert", help="Convert an image to text")
    convert_cmd.add_argument("image", help="Input image path")
    convert_cmd.add_argument("--char-set", choices=list(CHAR_SETS), default=None)
    convert_cmd.add_argument("--custom-chars", default=None, help="Ramp used with the CUSTOM character set")
    convert_cmd.add_argument("--density", type=int, default=None, help="Sampling density, 5-200")
    convert_cmd.add_argument("--aspect", type=float, default=None, help="Vertical aspect scale, -1 to 1")
    convert_cmd.add_argument("--color", action=argparse.BooleanOptionalAction, default=None)
    convert_cmd.add_argument("--brightness", type=int, default=None, help="Brightness, -100 to 100")
    convert_cmd.add_argument("--contrast", type=int, default=None, help="Contrast, -100 to 100")
    convert_cmd.add_argument("--max-width", type=int, default=None, help="Downscale wider images to this width")
    convert_cmd.add_argument("--format", choices=["text", "markup"], default=None)
    convert_cmd.add_argument("--out", default=None, help="Write output to a file instead of stdout")
    convert_cmd.add_argument("--save", action="store_true", help="Persist the effective settings")
    convert_cmd.set_defaults(func=cmd_convert)

    presets_cmd = sub.add_parser("presets", help="List character set presets")
    presets_cmd.set_defaults(func=cmd_presets)

    config_cmd = sub.add_parser("config", help="Show or reset saved settings")
    config_sub = config_cmd.add_subparsers(dest="config_cmd", required=True)
    show_cmd = config_sub.add_parser("show", help="Print effective settings")
    show_cmd.set_defaults(func=cmd_config_show)
    reset_cmd = config_sub.add_parser("reset", help="Restore default settings")
    reset_cmd.set_defaults(func=cmd_config_reset)

    doctor_cmd = sub.add_parser("doctor", help="Print diagnostics")
    doctor_cmd.add_argument("--export", action="store_true", help="Export offline diagnostics bundle")
    doctor_cmd.add_argument("--out-dir", default=None, help="Optional output directory for diagnostics bundle")
    doctor_cmd.set_defaults(func=cmd_doctor)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(keep_files=load_config(_config_path(args)).diagnostics.keep_log_files, console=False)
    install_crash_hooks()
    try:
        return int(args.func(args))
    except AsciifyError as exc:
        logger.error("%s", exc, extra={"event": "cli_error"})
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INVALID


if __name__ == "__main__":
    raise SystemExit(main())
