"""Generate typed DevTools bindings from a protocol schema.

CLI::

    python -m devtools_core.codegen --schema protocol.json --output proto.py
    python -m devtools_core.codegen --schema protocol.json --output proto.py --check
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from devtools_core.emitter import generate
from devtools_core.errors import GenerationError, SchemaError
from devtools_core.schema import load_schema

logger = logging.getLogger(__name__)

_PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_SCHEMA_PATH = _PACKAGE_DIR / "protocol.json"
DEFAULT_OUTPUT_PATH = _PACKAGE_DIR / "proto.py"

EXIT_OK = 0
EXIT_STALE = 1
EXIT_ERROR = 2


def render(schema_path: str | Path) -> str:
    """Load *schema_path* and return the generated module source."""
    return generate(load_schema(schema_path))


def write_bindings(schema_path: str | Path, output_path: str | Path) -> bool:
    """Regenerate *output_path*; return ``True`` if its content changed."""
    output_path = Path(output_path)
    source = render(schema_path)
    if output_path.is_file() and output_path.read_text(encoding="utf-8") == source:
        logger.info("%s is up to date", output_path)
        return False
    output_path.write_text(source, encoding="utf-8")
    logger.info("Wrote %s", output_path)
    return True


def check_bindings(schema_path: str | Path, output_path: str | Path) -> bool:
    """Return ``True`` if *output_path* matches what the schema generates."""
    output_path = Path(output_path)
    if not output_path.is_file():
        return False
    return output_path.read_text(encoding="utf-8") == render(schema_path)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="python -m devtools_core.codegen",
        description="Generate typed DevTools protocol bindings",
    )
    parser.add_argument("--schema", type=Path, default=DEFAULT_SCHEMA_PATH)
    parser.add_argument("--output", type=Path, default=DEFAULT_OUTPUT_PATH)
    parser.add_argument(
        "--check",
        action="store_true",
        help="Exit non-zero if the output file is out of date instead of writing it.",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        stream=sys.stderr,
    )

    try:
        if args.check:
            if check_bindings(args.schema, args.output):
                return EXIT_OK
            print(f"{args.output} is out of date with {args.schema}", file=sys.stderr)
            return EXIT_STALE
        write_bindings(args.schema, args.output)
    except (SchemaError, GenerationError) as exc:
        print(f"codegen: {exc}", file=sys.stderr)
        return EXIT_ERROR
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
