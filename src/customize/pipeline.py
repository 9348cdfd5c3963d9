"""Template setup: record feature choices and fill in project metadata."""

from __future__ import annotations

import json
import pathlib

from core.config import AppConfig
from core.features import TemplateConfig, write_template_config
from core.report import Reporter

PACKAGE_JSON = "package.json"
ENV_EXAMPLE = "env.example"


def replace_placeholders(
    path: pathlib.Path,
    replacements: dict[str, str],
    reporter: Reporter,
    dry_run: bool = False,
) -> bool:
    """Replace literal placeholders in a file. Returns True if it changed."""
    if not path.exists():
        reporter.warning(f"File not found: {path.name}")
        return False
    text = path.read_text(encoding="utf-8")
    new = text
    for old, value in replacements.items():
        new = new.replace(old, value)
    if new == text:
        return False
    if dry_run:
        reporter.info(f"would update {path.name}")
    else:
        path.write_text(new, encoding="utf-8")
        reporter.success(f"Updated {path.name}")
    return True


def _json_escape(value: str) -> str:
    return json.dumps(value)[1:-1]


def package_json_replacements(config: TemplateConfig) -> dict[str, str]:
    return {
        "{{APP_NAME}}": _json_escape(config.app.name),
        "{{APP_DESCRIPTION}}": _json_escape(config.app.description),
        "{{AUTHOR_NAME}}": _json_escape(config.app.author),
    }


def _optional(enabled: bool, title: str, names: list[str]) -> str:
    if enabled:
        return "\n".join([f"# {title}", *(f"{name}=" for name in names)])
    return "\n".join([f"# {title} (disabled)", *(f"# {name}=" for name in names)])


def render_env_example(config: TemplateConfig) -> str:
    """Build env.example with variables for the chosen features."""
    features = config.features
    sentry = "SENTRY_AUTH_TOKEN="
    if not features.monitoring.sentry:
        sentry = f"# {sentry}"
    blocks = [
        "# Next.js + Supabase SaaS Template Environment Variables\n"
        "# Copy this file to .env.local and fill in your values",
        "# Supabase Configuration\n"
        "NEXT_PUBLIC_SUPABASE_URL=\n"
        "NEXT_PUBLIC_SUPABASE_PUBLISHABLE_KEY=\n"
        "SUPABASE_SECRET_KEY=",
        f"# Optional: Sentry Error Monitoring\n{sentry}",
        "# Optional: External OAuth Providers\n"
        + _optional(
            features.auth.google_oauth,
            "Google OAuth",
            ["GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET"],
        ),
        _optional(
            features.auth.apple_oauth,
            "Apple OAuth",
            ["APPLE_CLIENT_ID", "APPLE_CLIENT_SECRET"],
        ),
        "# Optional: Example Integration (remove if not needed)\n"
        + _optional(
            features.integrations.example_oauth,
            "Example OAuth Provider",
            ["EXAMPLE_CLIENT_ID", "EXAMPLE_CLIENT_SECRET", "EXAMPLE_WEBHOOK_SECRET"],
        ),
        "# Optional: Background Jobs\nINNGEST_SIGNING_KEY=",
        "# Optional: AI Integration\nOPENROUTER_API_KEY=",
    ]
    return "\n\n".join(blocks) + "\n"


def run_setup(
    settings: AppConfig,
    config: TemplateConfig,
    reporter: Reporter,
    dry_run: bool = False,
) -> list[pathlib.Path]:
    """Write the chosen configuration into the project. Returns written paths."""
    reporter.step("Configuring template...")
    written: list[pathlib.Path] = []

    package_json = settings.root / PACKAGE_JSON
    if replace_placeholders(
        package_json, package_json_replacements(config), reporter, dry_run
    ):
        written.append(package_json)

    env_example = settings.root / ENV_EXAMPLE
    if dry_run:
        reporter.info(f"would write {settings.config_path.name}")
        reporter.info(f"would write {env_example.name}")
        return written

    write_template_config(settings.config_path, config)
    reporter.success(f"Updated {settings.config_path.name}")
    env_example.write_text(render_env_example(config), encoding="utf-8")
    reporter.success(f"Updated {env_example.name}")
    written.extend([settings.config_path, env_example])
    return written


def show_next_steps(config: TemplateConfig, reporter: Reporter) -> None:
    reporter.header("")
    reporter.header("Template Setup Complete!")
    reporter.header("========================")

    reporter.step("Next Steps:")
    steps = [
        ("Install dependencies:", ["pnpm install"]),
        (
            "Set up environment variables:",
            ["cp env.example .env.local", "# Edit .env.local with your values"],
        ),
        ("Set up Supabase:", ["supabase login", "supabase init", "supabase start"]),
        ("Run database migrations:", ["supabase db reset"]),
        ("Start development server:", ["pnpm dev"]),
    ]
    for number, (title, commands) in enumerate(steps, start=1):
        reporter.info(f"{number}. {title}")
        for command in commands:
            reporter.info(f"   {command}")

    disabled = [
        f"{group}.{name}"
        for group, flags in config.features.model_dump(by_alias=True).items()
        for name, enabled in flags.items()
        if not enabled
    ]
    if disabled:
        reporter.step("Disabled features:")
        for flag in disabled:
            reporter.info(f"- {flag}")
        reporter.info(
            'Run "template-kit cleanup" to remove their example code and schema'
        )
