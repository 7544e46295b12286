"""
Command line front end: load a settings document into the settings declared by some modules and show the result.

Run "python3 -m typedsettings settings.json --module myapp.settings" to check a settings file against the settings
myapp declares.
"""

import argparse
import importlib
import json
import sys
from pathlib import Path
from typing import Any

from typedsettings.dumper import DUMP_BEGIN
from typedsettings.dumper import DUMP_END
from typedsettings.dumper import dump_settings
from typedsettings.exceptions import CoercionError
from typedsettings.loader import load_settings
from typedsettings.logger import SETTINGS_LOGGER
from typedsettings.logging.logging_provider import LOGGING_PROVIDER
from typedsettings.settings import REGISTRY

log = SETTINGS_LOGGER.getChild(__name__)


def parse_override(text: str) -> tuple[str, Any]:
    """
    Split a KEY=VALUE override.

    VALUE is parsed as JSON if possible (so "1", "true" and "[1, 2]" become numbers, booleans and arrays), otherwise it
    is taken as a plain string.
    """
    key, sep, raw = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {text!r}")
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        value = raw
    return key, value


def make_parser() -> argparse.ArgumentParser:
    "Build the argument parser."
    p = argparse.ArgumentParser(prog="typedsettings", description=__doc__.strip().splitlines()[0])
    p.add_argument("document", type=Path, help="JSON or YAML settings document")
    p.add_argument(
        "-m",
        "--module",
        action="append",
        default=[],
        help="module declaring settings (imported before loading); may be repeated",
    )
    p.add_argument(
        "--set",
        action="append",
        default=[],
        type=parse_override,
        metavar="KEY=VALUE",
        help="change a console-enabled setting after loading; may be repeated",
    )
    p.add_argument("--suppress-warnings", action="store_true", help="do not report keys missing from the document")
    p.add_argument("--dump-parse", action="store_true", help="include the parsed document in the report")
    p.add_argument("--log-dir", type=Path, help="also write logs to this directory")
    p.add_argument("--log-level", help="log level (default: $TYPEDSETTINGS_LOG_LEVEL or INFO)")
    return p


def main(argv: list[str] | None = None) -> int:
    "Main function; returns the exit code."
    args = make_parser().parse_args(argv)
    LOGGING_PROVIDER.init_logging(args.log_dir, args.log_level)

    # Declared settings must stay alive while we work with them; the registry only holds weak references.
    modules = [importlib.import_module(name) for name in args.module]
    log.debug(f"Imported {len(modules)} settings modules, {len(REGISTRY)} settings registered")

    report = load_settings(args.document, suppress_warnings=args.suppress_warnings, dump_parse=args.dump_parse)
    if report.text:
        print(report.text)
    if not report.success:
        return 1

    status = 0
    for key, value in args.set:
        try:
            changed = REGISTRY.set_from_console(key, value)
        except CoercionError as exc:
            log.error(f"Cannot set {key}: {exc}")
            status = 2
            continue
        if changed is None:
            log.error(f"No console-enabled setting named {key!r}")
            status = 2

    print(DUMP_BEGIN)
    dump = dump_settings()
    if dump:
        print(dump)
    print(DUMP_END)
    return status


if __name__ == "__main__":
    sys.exit(main())
