"""Command line entry points."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from cleanup.pipeline import run_cleanup, show_summary
from core.config import AppConfig
from core.report import Reporter
from customize.pipeline import run_setup, show_next_steps
from customize.prompts import collect_config, default_choices


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="template-kit",
        description="Set up or clean up the Next.js + Supabase SaaS template.",
    )
    parser.add_argument(
        "--root", help="template project directory (default: current directory)"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    cleanup = commands.add_parser(
        "cleanup", help="remove example code and schema of disabled features"
    )
    cleanup.add_argument("--dry-run", action="store_true")

    setup = commands.add_parser("setup", help="choose features and fill in app details")
    setup.add_argument(
        "-y", "--yes", action="store_true", help="use defaults instead of prompting"
    )
    setup.add_argument("--app-name")
    setup.add_argument("--description")
    setup.add_argument("--author")
    setup.add_argument("--database-prefix")
    setup.add_argument(
        "--disable",
        action="append",
        default=[],
        metavar="FLAG",
        help="turn a feature off with --yes, e.g. examples.chatMessages",
    )
    setup.add_argument("--dry-run", action="store_true")
    return parser


def cleanup(settings: AppConfig, reporter: Reporter, dry_run: bool = False) -> int:
    try:
        result = run_cleanup(settings, reporter, dry_run=dry_run)
        show_summary(result, reporter)
    except Exception as exc:
        reporter.error(f"Cleanup failed: {exc}")
        return 1
    return 0


def setup(settings: AppConfig, reporter: Reporter, args: argparse.Namespace) -> int:
    try:
        if args.yes:
            config = default_choices(
                app_name=args.app_name,
                description=args.description,
                author=args.author,
                database_prefix=args.database_prefix,
                disabled=args.disable,
            )
        else:
            reporter.header("Next.js + Supabase SaaS Template Setup")
            reporter.step("Let's customize your template:")
            config = collect_config(input)
        run_setup(settings, config, reporter, dry_run=args.dry_run)
        show_next_steps(config, reporter)
    except Exception as exc:
        reporter.error(f"Setup failed: {exc}")
        return 1
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the ``template-kit`` command."""
    args = build_parser().parse_args(argv)
    settings = AppConfig.from_env().with_root(args.root)
    reporter = Reporter(color=settings.color)
    if args.command == "cleanup":
        return cleanup(settings, reporter, dry_run=args.dry_run)
    return setup(settings, reporter, args)


def clean_main() -> int:
    """``template-clean``: cleanup with no options."""
    return main(["cleanup"])


if __name__ == "__main__":
    sys.exit(main())
