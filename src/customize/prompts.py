"""Interactive questions asked by ``template-kit setup``."""

from __future__ import annotations

from collections.abc import Callable

from core.errors import TemplateConfigError
from core.features import (
    AppInfo,
    AuthFeatures,
    DatabaseInfo,
    ExampleFeatures,
    Features,
    IntegrationFeatures,
    MonitoringFeatures,
    TemplateConfig,
)

Ask = Callable[[str], str]

DEFAULT_APP_NAME = "my-saas-app"
DEFAULT_DESCRIPTION = "A Next.js SaaS application"
DEFAULT_AUTHOR = "Developer"


def ask_text(ask: Ask, question: str, default: str = "") -> str:
    return ask(question).strip() or default


def ask_yes_no(ask: Ask, question: str, default: bool) -> bool:
    """Ask a y/n question; an empty answer takes the default."""
    hint = "(Y/n)" if default else "(y/N)"
    answer = ask(f"{question} {hint}: ").strip().lower()
    if not answer:
        return default
    if default:
        return answer != "n"
    return answer == "y"


def collect_app_info(ask: Ask) -> tuple[AppInfo, DatabaseInfo]:
    app = AppInfo(
        name=ask_text(ask, "App name (kebab-case): ", DEFAULT_APP_NAME),
        description=ask_text(ask, "App description: ", DEFAULT_DESCRIPTION),
        author=ask_text(ask, "Author name: ", DEFAULT_AUTHOR),
    )
    database = DatabaseInfo(prefix=ask_text(ask, "Database table prefix (optional): "))
    return app, database


def collect_features(ask: Ask) -> Features:
    """Ask for every optional feature. Email/password and accounts are always on."""
    return Features(
        auth=AuthFeatures(
            email_password=True,
            google_oauth=ask_yes_no(ask, "Include Google OAuth?", False),
            apple_oauth=ask_yes_no(ask, "Include Apple OAuth?", False),
        ),
        integrations=IntegrationFeatures(
            example_oauth=ask_yes_no(ask, "Include example OAuth integration?", True),
            file_upload=ask_yes_no(ask, "Include file upload (avatars)?", True),
        ),
        monitoring=MonitoringFeatures(
            sentry=ask_yes_no(ask, "Include Sentry error monitoring?", True),
            vercel_analytics=ask_yes_no(ask, "Include Vercel Analytics?", True),
        ),
        examples=ExampleFeatures(
            chat_messages=ask_yes_no(ask, "Include example chat messages table?", True),
            ai_requests=ask_yes_no(ask, "Include example AI requests table?", True),
            external_accounts=True,
        ),
    )


def collect_config(ask: Ask) -> TemplateConfig:
    app, database = collect_app_info(ask)
    return TemplateConfig(app=app, features=collect_features(ask), database=database)


def default_choices(
    app_name: str | None = None,
    description: str | None = None,
    author: str | None = None,
    database_prefix: str | None = None,
    disabled: list[str] | None = None,
) -> TemplateConfig:
    """Answers used by ``setup --yes``: every prompt's default, plus overrides."""
    features = Features(
        auth=AuthFeatures(email_password=True, google_oauth=False, apple_oauth=False),
        integrations=IntegrationFeatures(example_oauth=True, file_upload=True),
        monitoring=MonitoringFeatures(sentry=True, vercel_analytics=True),
        examples=ExampleFeatures(
            chat_messages=True, ai_requests=True, external_accounts=True
        ),
    )
    data = features.model_dump(by_alias=True)
    for flag in disabled or []:
        group, _, name = flag.partition(".")
        if group not in data or name not in data[group]:
            raise TemplateConfigError(f"unknown feature flag: {flag}")
        data[group][name] = False
    return TemplateConfig(
        app=AppInfo(
            name=app_name or DEFAULT_APP_NAME,
            description=description or DEFAULT_DESCRIPTION,
            author=author or DEFAULT_AUTHOR,
        ),
        features=Features.model_validate(data),
        database=DatabaseInfo(prefix=database_prefix or ""),
    )
