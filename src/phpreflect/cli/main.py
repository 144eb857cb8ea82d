# Copyright 2026 phpreflect Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the phpreflect command-line interface."""

import argparse
import sys
from pathlib import Path

from yachalk import chalk

from phpreflect.config.settings import CONFIG_FILE_NAME, ConfigError, ReflectConfig, load_config
from phpreflect.core.logging import configure_logging
from phpreflect.parser.lexer import LexerError
from phpreflect.reflection.entities import EntityParseError
from phpreflect.reflection.file import SourceFile
from phpreflect.source.lint import SourceValidationError
from phpreflect.source.loader import SourceLoadError

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the phpreflect CLI."""
    parser = argparse.ArgumentParser(
        prog="phpreflect",
        description="phpreflect - reflect PHP source files into XML for documentation generators",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # parse subcommand
    parse_parser = subparsers.add_parser(
        "parse",
        help="Reflect a PHP file and print its XML document",
        description="Tokenize and reflect a single PHP file, then emit the XML structure document.",
    )
    parse_parser.add_argument("file", help="PHP source file to reflect")
    _add_common_arguments(parse_parser)
    parse_parser.add_argument(
        "--validate",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Run 'php -l' before parsing (default: from configuration, otherwise off)",
    )
    parse_parser.add_argument(
        "--output",
        "-o",
        help="Write the document to this file instead of stdout",
    )
    parse_parser.add_argument(
        "--pretty",
        action="store_true",
        help="Indent the XML output",
    )

    # markers subcommand
    markers_parser = subparsers.add_parser(
        "markers",
        help="List TODO/FIXME style markers",
        description="Print every marker comment found in the given PHP files.",
    )
    markers_parser.add_argument("files", nargs="+", help="PHP source files to scan")
    _add_common_arguments(markers_parser)

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _add_common_arguments(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "--config",
        help=f"Configuration file (default: {CONFIG_FILE_NAME} in the current directory, if present)",
    )
    subparser.add_argument(
        "--marker",
        action="append",
        default=[],
        metavar="TERM",
        help="Additional marker keyword (repeatable)",
    )
    subparser.add_argument(
        "--markers",
        metavar="T1,T2",
        help="Comma-separated marker keywords replacing the configured set",
    )
    subparser.add_argument("--verbose", "-v", action="store_true", help="Emit debug log events")
    subparser.add_argument("--json-logs", action="store_true", help="Emit log events as JSON lines")


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "parse":
        return _cmd_parse(args)
    if args.command == "markers":
        return _cmd_markers(args)
    return 0


def _load_config(args: argparse.Namespace) -> ReflectConfig | None:
    """Return the configuration to use, or None after reporting an error."""
    if args.config:
        config_path = Path(args.config)
    else:
        config_path = Path.cwd() / CONFIG_FILE_NAME
        if not config_path.exists():
            return ReflectConfig()
    try:
        return load_config(config_path)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None


def _apply_markers(source: SourceFile, config: ReflectConfig, args: argparse.Namespace) -> None:
    if args.markers:
        source.set_markers(term.strip() for term in args.markers.split(",") if term.strip())
    else:
        source.set_markers(config.markers)
    for term in args.marker:
        source.add_marker(term)


def _reflect(path: str, config: ReflectConfig, args: argparse.Namespace, validate: bool) -> SourceFile | None:
    """Load and process one file, or report the fatal error and return None."""
    try:
        source = SourceFile.from_path(
            path,
            validate=validate,
            php_binary=config.php_binary,
            fallback_encoding=config.fallback_encoding,
        )
    except SourceLoadError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None
    except SourceValidationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None

    _apply_markers(source, config, args)
    try:
        source.process()
    except (LexerError, EntityParseError) as exc:
        print(f"Error: {path}: {exc}", file=sys.stderr)
        return None
    return source


def _cmd_parse(args: argparse.Namespace) -> int:
    """Handle the parse subcommand."""
    config = _load_config(args)
    if config is None:
        return 1
    configure_logging(level="DEBUG" if args.verbose else config.log_level, json_format=args.json_logs)

    validate = config.validate if args.validate is None else args.validate
    source = _reflect(args.file, config, args, validate)
    if source is None:
        return 1

    document = source.serialize(pretty=args.pretty)
    if args.output:
        output = Path(args.output)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(document + "\n", encoding="utf-8")
        print(f"Wrote '{output}'.")
    else:
        print(document)
    return 0


def _cmd_markers(args: argparse.Namespace) -> int:
    """Handle the markers subcommand."""
    config = _load_config(args)
    if config is None:
        return 1
    configure_logging(level="DEBUG" if args.verbose else config.log_level, json_format=args.json_logs)

    has_errors = False
    count = 0
    for path in args.files:
        source = _reflect(path, config, args, validate=False)
        if source is None:
            has_errors = True
            continue
        for marker in source.markers:
            location = chalk.blue(f"{path}:{marker.line}")
            print(f"{location}  {chalk.yellow(marker.term)}  {marker.content}")
            count += 1

    print(f"Found {count} marker(s).")
    return 1 if has_errors else 0
