"""Delete the files and directories of disabled features."""

from __future__ import annotations

import pathlib
import shutil

from cleanup.targets import FeatureTargets


def remove_file(path: pathlib.Path, dry_run: bool = False) -> bool:
    """Delete a file if present. Returns True if something was (or would be) removed."""
    if not path.exists() and not path.is_symlink():
        return False
    if not dry_run:
        path.unlink()
    return True


def remove_directory(path: pathlib.Path, dry_run: bool = False) -> bool:
    """Recursively delete a directory if present."""
    if not path.exists() and not path.is_symlink():
        return False
    if not dry_run:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    return True


def prune_feature(
    root: pathlib.Path, targets: FeatureTargets, dry_run: bool = False
) -> list[pathlib.Path]:
    """Remove every path owned by a feature and return the ones that existed."""
    removed = []
    for relative in targets.directories:
        if remove_directory(root / relative, dry_run):
            removed.append(root / relative)
    for relative in targets.files:
        if remove_file(root / relative, dry_run):
            removed.append(root / relative)
    return removed
