"""Exceptions raised by the template kit."""

from __future__ import annotations


class TemplateKitError(Exception):
    """Base class for errors that abort a run."""


class TemplateConfigError(TemplateKitError):
    """The feature configuration file is malformed or fails validation."""


class MigrationParseError(TemplateKitError):
    """The migration SQL could not be split into statements."""

    def __init__(self, message: str, line: int) -> None:
        super().__init__(f"{message} (line {line})")
        self.line = line


class MigrationEditError(TemplateKitError):
    """Removing a feature would leave the migration inconsistent."""
