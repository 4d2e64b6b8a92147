"""Command-line utilities for json_hash."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .config_loader import HashConfig, load_config, with_overrides
from .errors import JsonHashError
from .hasher import JsonHash
from .logging_pipeline import configure_structured_logging
from .settings import get_settings
from .types import JsonObject

PACKAGE_LOGGER = "json_hash"


def _read_stdin() -> str | None:
    """Read JSON payload from stdin if available."""
    try:
        if sys.stdin and not sys.stdin.isatty():
            return sys.stdin.read()
    except OSError as e:
        print(f"Error reading stdin: {e}", file=sys.stderr)
    return None


def _load_json(path: str | None, stdin_payload: str | None) -> JsonObject:
    """Load a JSON document from file or stdin."""
    if path:
        text = Path(path).read_text(encoding="utf-8")
        return _parse_json_dict(text)
    if stdin_payload:
        return _parse_json_dict(stdin_payload)
    raise ValueError("No input provided. Use --input or pipe JSON via stdin.")


def _parse_json_dict(payload: str) -> JsonObject:
    """Parse a JSON string and ensure the result is a dictionary."""

    data = json.loads(payload)
    if not isinstance(data, dict):
        raise ValueError("Input JSON must be an object at the top level.")
    return data


def _build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", help="Path to a TOML, YAML or JSON configuration file.")
    common.add_argument("--hash-length", type=int, help="Characters kept per hash.")
    common.add_argument(
        "--precision",
        type=int,
        dest="floating_point_precision",
        help="Fractional digits kept when hashing floats.",
    )
    common.add_argument(
        "--no-update-existing",
        dest="update_existing_hashes",
        action="store_false",
        default=None,
        help="Keep objects that already carry a _hash untouched.",
    )
    common.add_argument(
        "--no-recursive",
        dest="recursive",
        action="store_false",
        default=None,
        help="Do not descend into objects that already carry a _hash.",
    )
    common.add_argument("--log-level", help="Logging level (default from JSON_HASH_LOG_LEVEL).")
    common.add_argument(
        "--log-json", action="store_true", help="Emit structured JSON logs on stderr."
    )

    parser = argparse.ArgumentParser(
        prog="json-hash",
        description="Add and verify structural hashes in JSON documents.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    apply_cmd = commands.add_parser(
        "apply", parents=[common], help="Write _hash into every object of a document."
    )
    apply_cmd.add_argument("--input", "-i", help="JSON file. If omitted, reads stdin.")
    apply_cmd.add_argument("--output", "-o", help="Destination file. Defaults to stdout.")
    apply_cmd.add_argument("--indent", type=int, help="Pretty-print with this indent.")

    validate_cmd = commands.add_parser(
        "validate", parents=[common], help="Verify every _hash of a document."
    )
    validate_cmd.add_argument("--input", "-i", help="JSON file. If omitted, reads stdin.")
    validate_cmd.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Quiet mode: suppress output, just return exit code.",
    )

    hash_cmd = commands.add_parser(
        "hash", parents=[common], help="Print the hash of a literal string."
    )
    hash_cmd.add_argument("text", help="Text to hash, used verbatim.")
    return parser


def _resolve_config(args: argparse.Namespace) -> HashConfig:
    config = load_config(args.config)
    overrides = {
        key: getattr(args, key)
        for key in (
            "hash_length",
            "floating_point_precision",
            "update_existing_hashes",
            "recursive",
        )
        if getattr(args, key) is not None
    }
    return with_overrides(config, overrides)


def _run(args: argparse.Namespace) -> int:
    hasher = JsonHash(_resolve_config(args))

    if args.command == "hash":
        print(hasher.calc_hash(args.text))
        return 0

    document = _load_json(args.input, _read_stdin() if not args.input else None)

    if args.command == "apply":
        hashed = hasher.apply_to(document, in_place=True)
        text = json.dumps(
            hashed,
            indent=args.indent,
            separators=None if args.indent is not None else (",", ":"),
            ensure_ascii=False,
        )
        if args.output:
            Path(args.output).write_text(text + "\n", encoding="utf-8")
        else:
            print(text)
        return 0

    result = hasher.check(document)
    if not args.quiet:
        print(json.dumps(result.to_dict(), separators=(",", ":")))
    return 0 if result.ok else 1


def main(argv: list[str] | None = None) -> int:
    """Hash or validate JSON documents."""
    parser = _build_parser()

    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:  # pragma: no cover - controlled via tests
        exit_code = int(exc.code) if isinstance(exc.code, int) else 1
        return 0 if exit_code == 0 else 1

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    level_name = (args.log_level or get_settings().log_level).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        print(f"Unknown log level: {level_name}", file=sys.stderr)
        return 1

    previous_handlers = list(package_logger.handlers)
    previous_level = package_logger.level
    previous_propagate = package_logger.propagate
    if args.log_json:
        configure_structured_logging(package_logger, level=level)
        package_logger.propagate = False
    else:
        logging.basicConfig(level=level, stream=sys.stderr)
        package_logger.setLevel(level)

    try:
        return _run(args)
    except (JsonHashError, json.JSONDecodeError, ValueError, OSError) as exc:
        if not getattr(args, "quiet", False):
            print(str(exc), file=sys.stderr)
        return 1
    finally:
        package_logger.handlers = previous_handlers
        package_logger.setLevel(previous_level)
        package_logger.propagate = previous_propagate


if __name__ == "__main__":
    raise SystemExit(main())
