"""
Command-line interface for translatable.

Provides CLI commands for translatable record types:
- check-repair: Verify a record type's schema and migrate legacy values
- show-config: Print the active configuration

Usage:
    translatable check-repair myapp.models:Article
    translatable check-repair myapp.models.Article --db data/app.db --locale fr --yes
    translatable show-config

Exit status:
    0 for every diagnostic outcome (including a failed check), 1 when the
    database cannot be read or written.
"""

import argparse
import sys
from collections.abc import Sequence

from translatable.checker import ConfirmFn, SchemaRepairChecker, ask_confirmation
from translatable.config import config, configure_logging, print_config_summary
from translatable.db.errors import DatabaseError, UnsafeIdentifierError
from translatable.errors import ModelResolutionError
from translatable.registry import resolve_model_class


def _answer(answer: bool, reason: str) -> ConfirmFn:
    """Build a confirm callback that always gives ``answer``."""

    def confirm(prompt: str, default: bool) -> bool:
        print(f"{prompt} {'yes' if answer else 'no'} ({reason})")
        return answer

    return confirm


def build_confirm(args: argparse.Namespace) -> ConfirmFn:
    """
    Choose how the repair question is answered.

    --yes / --no answer it without asking. Without either flag the question
    is asked on stdin, unless stdin is not a terminal, in which case the
    repair is declined.
    """
    if args.assume_yes:
        return _answer(True, "--yes")
    if args.assume_no:
        return _answer(False, "--no")
    if not sys.stdin.isatty():
        return _answer(False, "stdin is not interactive")
    return ask_confirmation


def cmd_check_repair(args: argparse.Namespace) -> int:
    """
    Run the schema repair checker against one record type.

    Returns:
        0 when the check ran (whatever it found), 1 on database errors
    """
    print("=" * 60)
    print(f"CHECK-REPAIR {args.class_name}")
    print("=" * 60)

    try:
        model_class = resolve_model_class(args.class_name)
    except ModelResolutionError as e:
        print(f"ERROR: {e}")
        return 0

    original_path = config.database.path
    if args.db:
        config.database.path = args.db

    try:
        checker = SchemaRepairChecker(model_class, locale=args.locale, confirm=build_confirm(args))
        checker.run()
        return 0
    except (DatabaseError, UnsafeIdentifierError) as e:
        print(f"Error checking {args.class_name}: {e}", file=sys.stderr)
        return 1
    finally:
        config.database.path = original_path


def cmd_show_config(args: argparse.Namespace) -> int:
    """Print the configuration summary."""
    print_config_summary()
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="translatable",
        description="Translatable - locale-keyed attribute storage tools",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # check-repair command
    check_parser = subparsers.add_parser(
        "check-repair",
        help="Check a record type and repair legacy values",
        description=(
            "Verify that a record type can store translations and offer to convert "
            "stored values that are not locale maps yet."
        ),
    )
    check_parser.add_argument(
        "class_name",
        help="Record type to check, as package.module:ClassName or package.module.ClassName",
    )
    check_parser.add_argument(
        "--db",
        type=str,
        help="SQLite database path (default: [database] path, or TRANSLATABLE_DB_PATH env var)",
    )
    check_parser.add_argument(
        "--locale",
        type=str,
        help="Locale assigned to legacy values (default: the active locale)",
    )
    answer_group = check_parser.add_mutually_exclusive_group()
    answer_group.add_argument(
        "--yes",
        "-y",
        dest="assume_yes",
        action="store_true",
        help="Apply repairs without asking",
    )
    answer_group.add_argument(
        "--no",
        dest="assume_no",
        action="store_true",
        help="Report repairs without applying them",
    )
    check_parser.set_defaults(func=cmd_check_repair)

    # show-config command
    config_parser = subparsers.add_parser(
        "show-config",
        help="Show the active configuration",
    )
    config_parser.set_defaults(func=cmd_show_config)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging()
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
