"""Template cleanup: drop the code and schema of disabled features."""

from __future__ import annotations

import pathlib
from dataclasses import dataclass, field

from cleanup.pruner import prune_feature
from cleanup.targets import FEATURE_TARGETS, FeatureTargets
from core.config import AppConfig
from core.features import load_template_config
from core.report import Reporter
from migration.editor import MigrationEditor, Removal


@dataclass
class FeatureOutcome:
    """Result of cleaning up one disabled feature."""

    targets: FeatureTargets
    removed_paths: list[pathlib.Path] = field(default_factory=list)
    removal: Removal | None = None


@dataclass
class CleanupResult:
    config_found: bool = True
    outcomes: list[FeatureOutcome] = field(default_factory=list)
    migration_found: bool = True
    migration_written: bool = False
    dry_run: bool = False

    @property
    def removed_paths(self) -> list[pathlib.Path]:
        return [path for outcome in self.outcomes for path in outcome.removed_paths]


def run_cleanup(
    settings: AppConfig, reporter: Reporter, dry_run: bool = False
) -> CleanupResult:
    """Remove every feature the template config disables.

    The migration is edited in memory and checked before any file is deleted,
    so a schema problem aborts the run with the project untouched.
    """
    result = CleanupResult(dry_run=dry_run)
    reporter.step("Cleaning up template based on configuration...")

    config = load_template_config(settings.config_path)
    if config is None:
        reporter.warning(f"{settings.config_file} not found, skipping cleanup")
        result.config_found = False
        return result

    disabled = [t for t in FEATURE_TARGETS if not config.is_enabled(t.flag)]
    if not disabled:
        reporter.info("All optional features are enabled, nothing to remove")
        return result

    editor = None
    if any(t.schema for t in disabled):
        editor = MigrationEditor.load(settings.migration_path)
        if editor is None:
            reporter.warning(f"Migration file not found: {settings.migration_file}")
            result.migration_found = False

    for targets in disabled:
        outcome = FeatureOutcome(targets)
        if editor is not None and targets.schema:
            outcome.removal = editor.strip(targets.label, targets.schema)
        result.outcomes.append(outcome)
    if editor is not None:
        editor.verify()

    verb = "Would remove" if dry_run else "Removed"
    for outcome in result.outcomes:
        targets = outcome.targets
        reporter.step(f"Removing {targets.label} ({targets.flag} is disabled)...")
        outcome.removed_paths = prune_feature(settings.root, targets, dry_run)
        for path in outcome.removed_paths:
            reporter.success(f"{verb}: {_relative(path, settings.root)}")
        if outcome.removal is not None:
            if outcome.removal:
                reporter.success(outcome.removal.describe())
            else:
                reporter.info(outcome.removal.describe())

    if editor is not None:
        if dry_run:
            if editor.changed:
                reporter.info(f"Would update {settings.migration_file}")
        elif editor.save():
            result.migration_written = True
            reporter.success(f"Updated {settings.migration_file}")
        else:
            reporter.info(f"{settings.migration_file} already clean")
    return result


def show_summary(result: CleanupResult, reporter: Reporter) -> None:
    """Print what the cleanup run did."""
    title = "Cleanup preview" if result.dry_run else "Cleanup complete"
    reporter.header("")
    reporter.header(title)
    reporter.header("=" * len(title))

    if not result.config_found:
        reporter.info("No configuration found, nothing was changed.")
        return
    if not result.outcomes:
        reporter.info("Every optional feature is enabled, nothing was changed.")
        return

    for outcome in result.outcomes:
        parts = [f"{len(outcome.removed_paths)} path(s)"]
        if outcome.removal is not None:
            parts.append(f"{len(outcome.removal.statements)} SQL statement(s)")
        reporter.info(f"- {outcome.targets.label}: " + ", ".join(parts))
    if not result.migration_found:
        reporter.warning("Migration was not updated (file missing)")
    elif result.migration_written:
        reporter.info("- database migration updated")

    if not result.dry_run:
        reporter.success("Your template is now customized!")
        reporter.info('Run "pnpm dev" to start development')


def _relative(path: pathlib.Path, root: pathlib.Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)
