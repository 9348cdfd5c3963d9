"""Tests for template setup."""

from __future__ import annotations

import json
import pathlib
from collections.abc import Iterator

import pytest

from core.config import AppConfig
from core.errors import TemplateConfigError
from core.features import TemplateConfig, load_template_config
from core.report import Level, Reporter
from customize.pipeline import (
    render_env_example,
    replace_placeholders,
    run_setup,
    show_next_steps,
)
from customize.prompts import ask_yes_no, collect_config, default_choices

PACKAGE_JSON = """\
{
  "name": "{{APP_NAME}}",
  "description": "{{APP_DESCRIPTION}}",
  "author": "{{AUTHOR_NAME}}",
  "private": true
}
"""


def answers(*replies: str) -> Iterator[str]:
    return iter(replies)


class TestPrompts:
    """Tests for interactive questions."""

    @pytest.mark.parametrize(
        ("reply", "default", "expected"),
        [
            ("", True, True),
            ("", False, False),
            ("n", True, False),
            ("N", True, False),
            ("anything", True, True),
            ("y", False, True),
            ("yes", False, False),
        ],
    )
    def test_yes_no(self, reply: str, default: bool, expected: bool) -> None:
        """Test yes/no answers against both defaults."""
        assert ask_yes_no(lambda _: reply, "Include?", default) is expected

    def test_yes_no_hint(self) -> None:
        """Test the prompt shows which answer is the default."""
        asked: list[str] = []
        ask_yes_no(lambda q: asked.append(q) or "", "Include Sentry?", True)
        ask_yes_no(lambda q: asked.append(q) or "", "Include Apple OAuth?", False)
        assert asked == ["Include Sentry? (Y/n): ", "Include Apple OAuth? (y/N): "]

    def test_collect_config_defaults(self) -> None:
        """Test empty answers give the documented defaults."""
        config = collect_config(lambda _: "")
        assert config.app.name == "my-saas-app"
        assert config.app.description == "A Next.js SaaS application"
        assert config.app.author == "Developer"
        assert config.database.prefix == ""
        assert config.is_enabled("auth.emailPassword")
        assert not config.is_enabled("auth.googleOAuth")
        assert config.is_enabled("integrations.fileUpload")
        assert config.is_enabled("examples.externalAccounts")
        assert config == default_choices()

    def test_collect_config_answers(self) -> None:
        """Test every answer lands on the right flag."""
        replies = answers(
            "acme-app", "Acme dashboard", "Ada", "acme_",
            "y", "n",  # google, apple
            "n", "n",  # example oauth, file upload
            "", "n",  # sentry, vercel analytics
            "n", "",  # chat, ai
        )
        config = collect_config(lambda _: next(replies))

        assert config.app.name == "acme-app"
        assert config.database.prefix == "acme_"
        assert config.is_enabled("auth.googleOAuth")
        assert not config.is_enabled("integrations.exampleOAuth")
        assert not config.is_enabled("integrations.fileUpload")
        assert config.is_enabled("monitoring.sentry")
        assert not config.is_enabled("monitoring.vercelAnalytics")
        assert not config.is_enabled("examples.chatMessages")
        assert config.is_enabled("examples.aiRequests")

    def test_default_choices_disable(self) -> None:
        """Test --disable flags switch features off."""
        config = default_choices(
            app_name="acme", disabled=["examples.chatMessages", "monitoring.sentry"]
        )
        assert config.app.name == "acme"
        assert not config.is_enabled("examples.chatMessages")
        assert not config.is_enabled("monitoring.sentry")
        assert config.is_enabled("examples.aiRequests")

    def test_default_choices_unknown_flag(self) -> None:
        """Test an unknown flag name is rejected."""
        with pytest.raises(TemplateConfigError, match="unknown feature flag"):
            default_choices(disabled=["examples.videoCalls"])


class TestFiles:
    """Tests for the files setup writes."""

    def test_replace_placeholders(self, tmp_path: pathlib.Path) -> None:
        """Test placeholders are filled once."""
        path = tmp_path / "package.json"
        path.write_text(PACKAGE_JSON, encoding="utf-8")
        reporter = Reporter(color=False)

        assert replace_placeholders(path, {"{{APP_NAME}}": "acme"}, reporter)
        assert '"name": "acme"' in path.read_text(encoding="utf-8")
        assert not replace_placeholders(path, {"{{APP_NAME}}": "acme"}, reporter)

    def test_replace_placeholders_missing_file(self, tmp_path: pathlib.Path) -> None:
        """Test a missing file is a warning."""
        reporter = Reporter(color=False)
        assert not replace_placeholders(tmp_path / "package.json", {}, reporter)
        assert reporter.messages(Level.WARNING) == ["File not found: package.json"]

    def test_env_example_follows_features(self) -> None:
        """Test disabled providers are commented out."""
        config = default_choices(disabled=["integrations.exampleOAuth"])
        env = render_env_example(config)

        assert "NEXT_PUBLIC_SUPABASE_URL=\n" in env
        assert "\nSENTRY_AUTH_TOKEN=\n" in env
        assert "# Google OAuth (disabled)\n# GOOGLE_CLIENT_ID=" in env
        assert "# Example OAuth Provider (disabled)\n# EXAMPLE_CLIENT_ID=" in env
        assert env.endswith("OPENROUTER_API_KEY=\n")

    def test_env_example_enabled_provider(self) -> None:
        """Test an enabled provider gets live variables."""
        config = default_choices()
        config.features.auth.google_oauth = True
        env = render_env_example(config)
        assert "# Google OAuth\nGOOGLE_CLIENT_ID=\nGOOGLE_CLIENT_SECRET=" in env


class TestRunSetup:
    """Tests for the whole setup step."""

    @pytest.fixture
    def root(self, tmp_path: pathlib.Path) -> pathlib.Path:
        (tmp_path / "package.json").write_text(PACKAGE_JSON, encoding="utf-8")
        return tmp_path

    def test_writes_project_files(self, root: pathlib.Path) -> None:
        """Test setup writes package.json, the config and env.example."""
        settings = AppConfig(root=root, color=False)
        config = default_choices(
            app_name="acme-app",
            description='The "best" app',
            disabled=["examples.chatMessages"],
        )
        written = run_setup(settings, config, Reporter(color=False))

        assert sorted(p.name for p in written) == [
            "env.example",
            "package.json",
            "template.config.json",
        ]
        package = json.loads((root / "package.json").read_text(encoding="utf-8"))
        assert package["name"] == "acme-app"
        assert package["description"] == 'The "best" app'
        assert package["author"] == "Developer"
        assert load_template_config(root / "template.config.json") == config

    def test_dry_run_writes_nothing(self, root: pathlib.Path) -> None:
        """Test dry run only reports."""
        settings = AppConfig(root=root, color=False)
        reporter = Reporter(color=False)
        written = run_setup(settings, default_choices(), reporter, dry_run=True)

        assert written == []
        assert (root / "package.json").read_text(encoding="utf-8") == PACKAGE_JSON
        assert not (root / "template.config.json").exists()
        assert "would write env.example" in reporter.messages()

    def test_next_steps_mention_cleanup(self) -> None:
        """Test disabled features point at the cleanup command."""
        reporter = Reporter(color=False)
        show_next_steps(default_choices(disabled=["examples.aiRequests"]), reporter)
        messages = reporter.messages()
        assert "   supabase db reset" in messages
        assert "- examples.aiRequests" in messages
        assert any("template-kit cleanup" in m for m in messages)

    def test_next_steps_all_enabled(self) -> None:
        """Test the shipped defaults list Apple OAuth as disabled."""
        reporter = Reporter(color=False)
        config = TemplateConfig.defaults()
        show_next_steps(config, reporter)
        assert "- auth.appleOAuth" in reporter.messages()
