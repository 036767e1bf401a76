"""dithertone command line.

Usage:
    dithertone in.png out.png --preset "Retro Game Boy"
    dithertone in.jpg out.png --set effect=dithering --set ditheringAlgorithm=atkinson
    dithertone --list-algorithms
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

import sentry_sdk

from _version import __version__
from diagnostics import init_diagnostics
from effects import registry
from engine.errors import ProcessingError
from engine.params import ColorPalette, ProcessingParams, field_name
from engine.pipeline import process
from engine.presets import apply_preset, list_presets
from image.reader import read_image
from image.writer import write_image
from security import strip_pii, validate_output_path

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_USAGE = 2

# Opt-in telemetry: Sentry only reports when the consent file says "yes"
CONSENT_PATH = "~/.dithertone/telemetry_consent"


def _init_sentry():
    consent = Path(os.path.expanduser(CONSENT_PATH))
    dsn = ""
    if consent.exists() and consent.read_text().strip() == "yes":
        dsn = os.environ.get("SENTRY_DSN", "")

    sentry_sdk.init(
        dsn=dsn,
        release=f"dithertone@{__version__}",
        environment=os.environ.get("SENTRY_ENV", "development"),
        traces_sample_rate=0.1,
        before_send=strip_pii,
        max_breadcrumbs=50,
    )


def _parse_value(raw: str):
    """JSON scalars (numbers, true/false, null) or a bare string."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def parse_assignments(assignments: list[str]) -> dict:
    """Turn ``key=value`` strings into a params dict keyed by field name.

    Raises:
        ValueError: Malformed assignment or unknown parameter.
    """
    updates = {}
    for item in assignments:
        key, sep, raw = item.partition("=")
        if not sep or not key:
            raise ValueError(f"expected key=value, got {item!r}")
        name = field_name(key.strip())
        if name is None:
            raise ValueError(f"unknown parameter: {key.strip()}")
        updates[name] = _parse_value(raw.strip())
    return updates


def build_params(preset: str | None, assignments: list[str], seed: int | None):
    """Neutral params, then the preset, then ``--set`` overrides, then the seed."""
    params = ProcessingParams()
    if preset:
        try:
            params = apply_preset(params, preset)
        except KeyError:
            raise ValueError(f"unknown preset: {preset}") from None
    updates = parse_assignments(assignments)
    if updates:
        params = params.with_updates(**updates)
    if seed is not None:
        params = params.with_updates(seed=seed)
    # Fail fast on non-numeric values before any I/O
    params.normalized()
    return params


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dithertone",
        description="Apply tone, dithering and duotone effects to an image.",
    )
    parser.add_argument("input", nargs="?", help="Source image")
    parser.add_argument("output", nargs="?", help="Destination image")
    parser.add_argument("--preset", help="Named preset to start from")
    parser.add_argument(
        "--set",
        dest="assignments",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override one parameter (snake_case or camelCase key); repeatable",
    )
    parser.add_argument("--seed", type=int, help="Seed for the noise algorithms")
    parser.add_argument("--list-presets", action="store_true")
    parser.add_argument("--list-algorithms", action="store_true")
    parser.add_argument("--list-palettes", action="store_true")
    parser.add_argument("--version", action="version", version=__version__)
    return parser


def _print_listings(args) -> bool:
    printed = False
    if args.list_presets:
        for name in list_presets():
            print(name)
        printed = True
    if args.list_algorithms:
        for info in registry.list_all():
            print(f"{info['id']}\t{info['family']}\t{info['name']}")
        printed = True
    if args.list_palettes:
        for palette in ColorPalette:
            print(palette.value)
        printed = True
    return printed


def run(argv: list[str] | None = None) -> int:
    """CLI body. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if _print_listings(args):
        return EXIT_OK

    if not args.input or not args.output:
        parser.print_usage(sys.stderr)
        print("dithertone: error: INPUT and OUTPUT are required", file=sys.stderr)
        return EXIT_USAGE

    try:
        params = build_params(args.preset, args.assignments, args.seed)
    except ValueError as e:
        print(f"dithertone: error: {e}", file=sys.stderr)
        return EXIT_USAGE

    output_errors = validate_output_path(args.output)
    if output_errors:
        print(f"dithertone: error: {'; '.join(output_errors)}", file=sys.stderr)
        return EXIT_IO_ERROR

    try:
        source = read_image(args.input)
    except (OSError, ValueError) as e:
        print(f"dithertone: error: {e}", file=sys.stderr)
        return EXIT_IO_ERROR

    try:
        result = process(source, params)
    except ProcessingError as e:
        print(f"dithertone: error: {e}", file=sys.stderr)
        return EXIT_USAGE

    try:
        write_image(result, args.output)
    except (OSError, ValueError) as e:
        logger.exception("Write failed")
        print(f"dithertone: error: {e}", file=sys.stderr)
        return EXIT_IO_ERROR

    logger.info(
        "Wrote %dx%d image (effect=%s, palette=%s)",
        result.width,
        result.height,
        params.effect.value,
        params.color_palette.value,
    )
    return EXIT_OK


def main():
    init_diagnostics()
    _init_sentry()
    sys.exit(run())


if __name__ == "__main__":
    main()
