from __future__ import annotations

import argparse
import logging
from pathlib import Path

from deckform.core.config.loader import SCHEMA_PATH, load_config, presentation_from_config
from deckform.core.errors import ConfigValidationError, DeckformError
from deckform.core.inspect.pptx_inspect import summarize_pptx
from deckform.core.render.writers import WRITER_TYPES

MAX_ERRORS_SHOWN = 30


def _package_root() -> Path:
    # .../src/deckform/apps/cli/main.py -> .../src/deckform
    return Path(__file__).resolve().parents[2]


def _print_validation_errors(source: Path, errors: list[str]) -> None:
    print(f"[NG] {source.as_posix()} does not conform to schema")
    for m in errors[:MAX_ERRORS_SHOWN]:
        print(f"  - {m}")
    if len(errors) > MAX_ERRORS_SHOWN:
        print(f"  ... ({len(errors)} errors)")


def cmd_paths(_: argparse.Namespace) -> int:
    print(f"package_root: {_package_root()}")
    print(f"schema.presentation: {SCHEMA_PATH}")
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    config_path = Path(args.config).resolve()
    if not config_path.exists():
        print(f"[NG] config not found: {config_path}")
        return 2

    try:
        load_config(config_path)
    except ConfigValidationError as e:
        _print_validation_errors(config_path, e.errors)
        return 2
    except DeckformError as e:
        print(f"[NG] {e}")
        return 2

    print(f"[OK] {config_path.as_posix()}")
    return 0


def cmd_render(args: argparse.Namespace) -> int:
    config_path = Path(args.config).resolve()
    out_path = Path(args.out).resolve()

    if not config_path.exists():
        print(f"[NG] config not found: {config_path}")
        return 2

    try:
        data = load_config(config_path)
        deck = presentation_from_config(data, writer_type=args.format)
        deck.save(out_path)
    except ConfigValidationError as e:
        _print_validation_errors(config_path, e.errors)
        print("[NG] validation failed; render aborted")
        return 2
    except DeckformError as e:
        print("[NG] render failed")
        print(f"      detail: {e}")
        return 2

    print(f"[OK] rendered: {out_path} ({deck.document.slide_count} slides)")
    return 0


def cmd_inspect(args: argparse.Namespace) -> int:
    in_path = Path(args.input).resolve()
    if not in_path.exists():
        print(f"[NG] input not found: {in_path}")
        return 2

    summary = summarize_pptx(in_path)
    print("slides:", summary["slides"])
    print("TOTAL text_shapes:", summary["text_shapes"])
    print("TOTAL picture_shapes:", summary["picture_shapes"])
    print("TOTAL other_shapes:", summary["other_shapes"])
    for s in summary["per_slide"]:
        print(
            f"  slide {s['index'] + 1:>3}: name={s['name']!r}, text_shapes={s['text_shapes']:>2}, "
            f"pictures={s['picture_shapes']:>2}, other={s['other_shapes']:>2}"
        )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="deckform")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_paths = sub.add_parser("paths", help="show package and schema paths")
    p_paths.set_defaults(func=cmd_paths)

    p_val = sub.add_parser("validate", help="validate a presentation config against the schema")
    p_val.add_argument("--config", required=True, help="path to presentation config (.json)")
    p_val.set_defaults(func=cmd_validate)

    p_rnd = sub.add_parser("render", help="build a presentation from a config and save it")
    p_rnd.add_argument("--config", required=True, help="path to presentation config (.json)")
    p_rnd.add_argument("--out", required=True, help="output path (.pptx or .json)")
    p_rnd.add_argument("--format", choices=WRITER_TYPES, default=None, help="writer type (default: PowerPoint2007)")
    p_rnd.set_defaults(func=cmd_render)

    p_ins = sub.add_parser("inspect", help="summarize slides and shapes of a .pptx")
    p_ins.add_argument("input", help="path to .pptx")
    p_ins.set_defaults(func=cmd_inspect)

    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    raise SystemExit(args.func(args))


if __name__ == "__main__":
    main()
