"""Pytest configuration and fixtures."""

from __future__ import annotations

import pathlib
from collections.abc import Callable

import pytest

from cleanup.targets import FEATURE_TARGETS
from core.config import DEFAULT_MIGRATION_FILE, AppConfig
from core.features import TemplateConfig, write_template_config
from core.report import Reporter

FIXTURES = pathlib.Path(__file__).parent / "fixtures"

WriteConfig = Callable[..., pathlib.Path]


@pytest.fixture
def migration_sql() -> str:
    """The template's initial migration, as shipped."""
    return (FIXTURES / "00_initial_schema.sql").read_text(encoding="utf-8")


@pytest.fixture
def project(tmp_path: pathlib.Path, migration_sql: str) -> pathlib.Path:
    """A template checkout with every optional feature's files present."""
    for targets in FEATURE_TARGETS:
        for directory in targets.directories:
            path = tmp_path / directory
            (path / "nested").mkdir(parents=True)
            (path / "route.ts").write_text("export {}\n", encoding="utf-8")
            (path / "nested" / "helper.ts").write_text("export {}\n", encoding="utf-8")
        for file in targets.files:
            path = tmp_path / file
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(f"// {targets.label}\n", encoding="utf-8")

    (tmp_path / "src/app/(protected)/dashboard").mkdir(parents=True)
    (tmp_path / "src/app/(protected)/dashboard/page.tsx").write_text(
        "export default function Page() {}\n", encoding="utf-8"
    )
    migration = tmp_path / DEFAULT_MIGRATION_FILE
    migration.parent.mkdir(parents=True)
    migration.write_text(migration_sql, encoding="utf-8")
    return tmp_path


@pytest.fixture
def write_config(project: pathlib.Path) -> WriteConfig:
    """Write template.config.json with the shipped defaults plus overrides.

    Overrides are keyword arguments named after the camelCase flag, e.g.
    ``write_config(chatMessages=False)``.
    """

    def _write(**flags: bool) -> pathlib.Path:
        data = TemplateConfig.defaults().model_dump(by_alias=True)
        for name, value in flags.items():
            group = next(g for g, values in data["features"].items() if name in values)
            data["features"][group][name] = value
        path = project / "template.config.json"
        write_template_config(path, TemplateConfig.model_validate(data))
        return path

    return _write


@pytest.fixture
def settings(project: pathlib.Path) -> AppConfig:
    return AppConfig(root=project, color=False)


@pytest.fixture
def reporter() -> Reporter:
    return Reporter(color=False)
