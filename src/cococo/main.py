from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

from . import __version__
from .config.config_parser import build_converter_config, load_config_file
from .config.logging_config import init_logging
from .converter import Converter
from .tool_runner import ToolInvocationError


def build_parser() -> argparse.ArgumentParser:
    """Brief: Construct the command line parser for the ``cococo`` CLI."""

    parser = argparse.ArgumentParser(
        prog="cococo",
        description=(
            "Convert Xcode xcresult code coverage into SonarQube's generic "
            "coverage XML format."
        ),
    )
    parser.add_argument(
        "archives",
        nargs="*",
        metavar="ARCHIVE",
        help="xcresult archives to convert, in order",
    )
    parser.add_argument(
        "--excluded-file-extensions",
        action="append",
        metavar="EXT",
        default=None,
        help="Skip files whose path ends with EXT (repeatable, e.g. .h)",
    )
    parser.add_argument(
        "--ignored-paths",
        action="append",
        metavar="SUBSTRING",
        default=None,
        help="Skip files whose path contains SUBSTRING (repeatable)",
    )
    parser.add_argument(
        "--legacy",
        action="store_true",
        default=None,
        help="Invoke xccov without --archive (Xcode 11.3 and earlier)",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write the XML document to this file instead of stdout",
    )
    parser.add_argument(
        "-j",
        "--workers",
        type=int,
        default=None,
        help="Maximum concurrent xccov invocations (default: CPU count)",
    )
    parser.add_argument(
        "--tool",
        default=None,
        help="Executable providing xccov (default: xcrun)",
    )
    parser.add_argument("--config", default=None, help="Path to YAML config")
    parser.add_argument(
        "--log-level",
        default=None,
        help="debug, info, warn, error or crit (default: info)",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log errors (hides per-file progress)",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def _logging_settings(cfg: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    log_cfg = dict(cfg.get("logging") or {})
    if args.log_level:
        log_cfg["level"] = args.log_level
    if args.quiet:
        log_cfg["level"] = "error"
    return log_cfg


def _write_output(document: str, output: Optional[str]) -> None:
    if not output:
        sys.stdout.write(document)
        sys.stdout.flush()
        return
    with open(output, "w", encoding="utf-8") as f:
        f.write(document)


def main(argv: List[str] | None = None) -> int:
    """
    Main entry point for the coverage converter.
    Parses arguments, loads configuration, converts archives, writes the XML.

    Args:
        argv: Command-line arguments.

    Returns:
        An exit code: 0 on success, 1 on configuration or conversion failure.

    Example use:
        CLI:
            cococo build/Test.xcresult --ignored-paths Pods/ > sonar-coverage.xml
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    cfg: Dict[str, Any] = {}
    if args.config:
        try:
            cfg = load_config_file(args.config)
        except (OSError, ValueError) as exc:
            print(f"cococo: {exc}", file=sys.stderr)
            return 1

    init_logging(_logging_settings(cfg, args))
    logger = logging.getLogger("cococo.main")
    if args.config:
        logger.debug("Loaded config from %s", args.config)

    try:
        converter_config = build_converter_config(
            cfg,
            overrides={
                "excluded_file_extensions": args.excluded_file_extensions,
                "ignored_paths": args.ignored_paths,
                "legacy_mode": args.legacy,
                "max_workers": args.workers,
                "tool_command": args.tool,
            },
        )
    except ValueError as exc:
        print(f"cococo: invalid settings: {exc}", file=sys.stderr)
        return 1

    archives = list(args.archives) or list(cfg.get("archives") or [])
    if not archives:
        print(
            "cococo: no xcresult archives given (pass paths or set 'archives' in the config)",
            file=sys.stderr,
        )
        return 1

    converter = Converter(converter_config)
    try:
        document = converter.convert(archives)
    except ToolInvocationError as exc:
        print(f"cococo: conversion failed: {exc}", file=sys.stderr)
        return 1

    output = args.output or cfg.get("output")
    try:
        _write_output(document, output)
    except OSError as exc:
        print(f"cococo: cannot write {output}: {exc}", file=sys.stderr)
        return 1

    logger.info("Converted %d archive(s)", len(archives))
    return 0


if __name__ == "__main__":
    sys.exit(main())
