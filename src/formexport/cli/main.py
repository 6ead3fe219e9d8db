"""
Command-line interface for FORMEXPORT.

This module provides a CLI for listing forms and exporting their
submissions as CSV.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .. import __version__
from ..config.settings import AppSettings, get_settings_manager
from ..core.errors import ExportConfigurationError, FormStoreError
from ..core.export import (
    DEFAULT_SEPARATOR,
    export_form,
    get_export_header,
    resolve_separator,
    suggest_filename,
)
from ..core.models import ExportSpec
from ..infrastructure.json_form_store import JsonFormStore
from ..infrastructure.logging_config import setup_logging, get_logger
from ..infrastructure.paths import ensure_directory
from ..infrastructure.sinks import FileSink, StreamSink


logger = get_logger(__name__)

STDOUT_TARGET = "-"


def create_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser for the CLI.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="formexport",
        description="Export form submissions as CSV"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"FORMEXPORT {__version__}"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    parser.add_argument(
        "--no-log-file",
        action="store_true",
        help="Log to the console only"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Forms command
    forms_parser = subparsers.add_parser("forms", help="List forms in a form store")
    forms_parser.add_argument("store", type=Path, help="Path to the form store JSON file")

    # Columns command
    columns_parser = subparsers.add_parser("columns", help="Show the columns an export would have")
    columns_parser.add_argument("store", type=Path, help="Path to the form store JSON file")
    columns_parser.add_argument("form_id", type=int, help="Form to inspect")
    columns_parser.add_argument("--hide-type", action="append", default=[], metavar="TYPE",
                                help="Additional field type to leave out (repeatable)")

    # Export command
    export_parser = subparsers.add_parser("export", help="Export form submissions as CSV")
    export_parser.add_argument("store", type=Path, help="Path to the form store JSON file")
    export_parser.add_argument("form_id", type=int, help="Form to export")
    export_parser.add_argument("-s", "--separator", default=None,
                              help="Single character separating values (default from settings, else ',')")
    export_parser.add_argument("-o", "--output", type=str, default=None,
                              help="Output file or directory, '-' for stdout "
                                   "(default: suggested file name in the output directory)")
    export_parser.add_argument("--hide-type", action="append", default=[], metavar="TYPE",
                              help="Additional field type to leave out (repeatable)")
    export_parser.add_argument("--overwrite", action="store_true",
                              help="Replace the output file if it exists")

    return parser


def _hidden_types_provider(settings: AppSettings, args: argparse.Namespace):
    extra = list(settings.hidden_field_types) + list(args.hide_type)
    return lambda: extra


def _resolve_output_path(
    output: Optional[str],
    settings: AppSettings,
    form_id: int,
    title: str
) -> Path:
    """
    Work out where an export file should go.

    Args:
        output: The --output value, if given.
        settings: Current settings (for the default output directory).
        form_id: The exported form.
        title: The form title, used for the suggested file name.

    Returns:
        Path of the file to write.
    """
    if output is None:
        if settings.output_directory:
            directory = ensure_directory(Path(settings.output_directory))
        else:
            directory = Path.cwd()
        return directory / suggest_filename(form_id, title)

    path = Path(output)
    if path.is_dir():
        return path / suggest_filename(form_id, title)
    return path


def cmd_forms(args: argparse.Namespace, settings: AppSettings) -> int:
    """
    List the forms of a form store.

    Args:
        args: Parsed command-line arguments.
        settings: Current settings.

    Returns:
        Exit code (0 for success).
    """
    store = JsonFormStore(args.store)
    forms = store.list_forms()

    if not forms:
        print("No forms found.")
        return 0

    for form in forms:
        print(f"{form.id}\t{form.title}")
    return 0


def cmd_columns(args: argparse.Namespace, settings: AppSettings) -> int:
    """
    Print the header an export of a form would have.

    Args:
        args: Parsed command-line arguments.
        settings: Current settings.

    Returns:
        Exit code (0 for success).
    """
    store = JsonFormStore(args.store)
    header = get_export_header(store, args.form_id, _hidden_types_provider(settings, args))

    for index, label in enumerate(header, start=1):
        print(f"{index}\t{label}")
    return 0


def cmd_export(args: argparse.Namespace, settings: AppSettings) -> int:
    """
    Export the submissions of a form.

    Args:
        args: Parsed command-line arguments.
        settings: Current settings.

    Returns:
        Exit code (0 for success).
    """
    store = JsonFormStore(args.store)

    default_separator = resolve_separator(settings.default_separator, DEFAULT_SEPARATOR)
    separator = resolve_separator(args.separator, default_separator)
    if args.separator is not None and separator != args.separator:
        logger.warning(f"Separator {args.separator!r} is not a single character, using {separator!r}")

    spec = ExportSpec(form_id=args.form_id, separator=separator)
    hidden_types = _hidden_types_provider(settings, args)

    if args.output == STDOUT_TARGET:
        export_form(store, spec, StreamSink(sys.stdout.buffer), hidden_types)
        return 0

    title = store.get_form_title(args.form_id) if args.form_id else ""
    output_path = _resolve_output_path(args.output, settings, args.form_id, title)

    with FileSink(output_path, overwrite=args.overwrite) as sink:
        stats = export_form(store, spec, sink, hidden_types)

    print(f"Exported {stats.row_count} submissions to {output_path} ({stats.get_size_string()})")
    return 0


COMMANDS = {
    "forms": cmd_forms,
    "columns": cmd_columns,
    "export": cmd_export,
}


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Argument list. Defaults to sys.argv[1:].

    Returns:
        Exit code.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    manager = get_settings_manager()
    settings = manager.get()

    # Setup logging
    log_level = logging.DEBUG if args.verbose else settings.log_level
    setup_logging(
        level=log_level,
        log_file=settings.log_file_path,
        log_to_file=settings.log_to_file and not args.no_log_file
    )

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 0

    try:
        exit_code = handler(args, settings)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1
    except FileExistsError as e:
        logger.error(f"Output file already exists (use --overwrite): {e.filename}")
        return 1
    except ExportConfigurationError as e:
        logger.error(str(e))
        return 1
    except FormStoreError as e:
        logger.error(f"Could not read form store: {e}")
        return 1
    except OSError as e:
        logger.error(f"Export failed: {e}")
        return 1

    if exit_code == 0 and hasattr(args, "store"):
        manager.add_recent_store(str(args.store))

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
