from __future__ import annotations

import argparse
import enum
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .builder import BuildTarget, build_targets
from .config import AppConfig


logger = logging.getLogger("svg2icon")

EXIT_OK = 0
EXIT_INVALID_INPUT = 2
EXIT_BUILD_FAILED = 3


class PathKind(enum.Enum):
    INVALID = "invalid"
    DIRECTORY = "directory"
    FILE = "file"


def _configure_logging(log_path: str | None, verbose: bool) -> None:
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_path:
        log_file = Path(log_path).expanduser()
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_file))
        except OSError as exc:  # pragma: no cover - filesystem permissions
            print(f"Warning: failed to open log file {log_file}: {exc}", file=sys.stderr)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        handlers=handlers,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="svg2icon",
        description="Convert an SVG into Windows .ico and macOS .icns icon files.",
        epilog=(
            "If <output> is an existing directory, <input>.ico and <input>.icns are created "
            "inside it. An .ico or .icns output creates only that file. An .icon output, "
            "or one without an extension, creates both files using <output> as the base name."
        ),
    )
    parser.add_argument("input", help="Path to the source .svg file.")
    parser.add_argument("output", help="Output directory or file path.")
    parser.add_argument(
        "--sequential",
        dest="parallel",
        action="store_false",
        default=None,
        help="Build containers one after another instead of concurrently.",
    )
    parser.add_argument("--log-file", dest="log_file", help="Write detailed logs to this file.")
    parser.add_argument(
        "--verbose", dest="verbose", action="store_true", help="Enable verbose logging."
    )
    return parser.parse_args(argv)


def validate_svg(path: Path) -> None:
    if path.suffix.lower() != ".svg":
        raise ValueError("Input file must be an .svg")
    if not path.exists():
        raise FileNotFoundError(f"Input file does not exist: {path}")
    if path.is_dir():
        raise ValueError(f"Input path can't be a directory: {path}")
    try:
        with path.open("rb") as handle:
            handle.read(1)
    except OSError as exc:
        raise ValueError(f"Can't read input file {path}: {exc}") from exc


def classify_output(path: Path) -> PathKind:
    if path.is_dir():
        return PathKind.DIRECTORY
    parent = path.parent if str(path.parent) else Path(".")
    if not parent.is_dir():
        return PathKind.INVALID
    if not path.stem or (path.name.startswith(".") and not path.suffix):
        return PathKind.INVALID
    return PathKind.FILE


def plan_targets(source: Path, output: Path) -> List[BuildTarget]:
    kind = classify_output(output)
    if kind is PathKind.INVALID:
        raise ValueError(f"Invalid output path: {output}")

    if kind is PathKind.DIRECTORY:
        base = output / source.stem
        return [
            BuildTarget("ico", base.with_name(base.name + ".ico")),
            BuildTarget("icns", base.with_name(base.name + ".icns")),
        ]

    suffix = output.suffix.lower()
    if suffix == ".ico":
        return [BuildTarget("ico", output)]
    if suffix == ".icns":
        return [BuildTarget("icns", output)]
    if suffix in ("", ".icon"):
        base = output.with_suffix("")
        return [
            BuildTarget("ico", base.with_name(base.name + ".ico")),
            BuildTarget("icns", base.with_name(base.name + ".icns")),
        ]
    raise ValueError(f"Unsupported output extension: {output.suffix}")


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)

    try:
        config = AppConfig.from_env(log_path=args.log_file, parallel=args.parallel)
    except ValueError as exc:
        print(f"svg2icon: {exc}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    _configure_logging(config.log_path, args.verbose)

    source = Path(args.input).expanduser()
    output = Path(args.output).expanduser()

    try:
        validate_svg(source)
        targets = plan_targets(source, output)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("%s", exc)
        return EXIT_INVALID_INPUT

    logger.debug(
        "Planned targets → %s (parallel=%s)",
        ", ".join(str(target.destination) for target in targets),
        config.parallel,
    )

    results = build_targets(source, targets, parallel=config.parallel)
    failed = [result for result in results if not result.ok]
    for result in results:
        if result.ok:
            print(result.target.destination)

    if failed:
        logger.error("%d of %d builds failed", len(failed), len(results))
        return EXIT_BUILD_FAILED
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
