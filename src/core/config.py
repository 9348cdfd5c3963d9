from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass, replace

DEFAULT_CONFIG_FILE = "template.config.json"
DEFAULT_MIGRATION_FILE = "supabase/migrations/00_initial_schema.sql"


@dataclass(frozen=True)
class AppConfig:
    """Tool configuration loaded from environment."""

    root: pathlib.Path
    config_file: str = DEFAULT_CONFIG_FILE
    migration_file: str = DEFAULT_MIGRATION_FILE
    color: bool = True

    @property
    def config_path(self) -> pathlib.Path:
        return self.root / self.config_file

    @property
    def migration_path(self) -> pathlib.Path:
        return self.root / self.migration_file

    def with_root(self, root: str | os.PathLike[str] | None) -> AppConfig:
        """Return a copy pointing at another project directory."""
        if root is None:
            return self
        return replace(self, root=pathlib.Path(root))

    @classmethod
    def from_env(cls) -> AppConfig:
        """Load configuration from environment variables."""
        return cls(
            root=pathlib.Path(os.getenv("TEMPLATE_ROOT") or os.getcwd()),
            config_file=os.getenv("TEMPLATE_CONFIG", DEFAULT_CONFIG_FILE),
            migration_file=os.getenv("TEMPLATE_MIGRATION", DEFAULT_MIGRATION_FILE),
            color="NO_COLOR" not in os.environ,
        )
