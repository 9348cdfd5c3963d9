"""Feature flag configuration for the SaaS template.

The configuration lives in ``template.config.json`` at the project root and
uses the same camelCase keys as the template's TypeScript config. Flags that
are missing from the file count as disabled; anything that is not a JSON
boolean is rejected.
"""

from __future__ import annotations

import json
import pathlib

from pydantic import BaseModel, ConfigDict, Field, StrictBool, ValidationError

from core.errors import TemplateConfigError


class _FlagGroup(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    def flag(self, name: str) -> bool:
        """Look up a flag by its camelCase key or attribute name."""
        for attr, field in type(self).model_fields.items():
            if name in (attr, field.alias):
                return bool(getattr(self, attr))
        raise KeyError(name)

    def any_enabled(self) -> bool:
        return any(getattr(self, attr) for attr in type(self).model_fields)


class AuthFeatures(_FlagGroup):
    email_password: StrictBool = Field(default=False, alias="emailPassword")
    google_oauth: StrictBool = Field(default=False, alias="googleOAuth")
    apple_oauth: StrictBool = Field(default=False, alias="appleOAuth")


class IntegrationFeatures(_FlagGroup):
    example_oauth: StrictBool = Field(default=False, alias="exampleOAuth")
    file_upload: StrictBool = Field(default=False, alias="fileUpload")


class MonitoringFeatures(_FlagGroup):
    sentry: StrictBool = False
    vercel_analytics: StrictBool = Field(default=False, alias="vercelAnalytics")


class ExampleFeatures(_FlagGroup):
    chat_messages: StrictBool = Field(default=False, alias="chatMessages")
    ai_requests: StrictBool = Field(default=False, alias="aiRequests")
    external_accounts: StrictBool = Field(default=False, alias="externalAccounts")


class Features(BaseModel):
    model_config = ConfigDict(extra="forbid")

    auth: AuthFeatures = Field(default_factory=AuthFeatures)
    integrations: IntegrationFeatures = Field(default_factory=IntegrationFeatures)
    monitoring: MonitoringFeatures = Field(default_factory=MonitoringFeatures)
    examples: ExampleFeatures = Field(default_factory=ExampleFeatures)


class AppInfo(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = ""
    description: str = ""
    author: str = ""


class DatabaseInfo(BaseModel):
    model_config = ConfigDict(extra="forbid")

    prefix: str = ""


class TemplateConfig(BaseModel):
    """Validated template configuration."""

    model_config = ConfigDict(extra="forbid")

    app: AppInfo = Field(default_factory=AppInfo)
    features: Features = Field(default_factory=Features)
    database: DatabaseInfo = Field(default_factory=DatabaseInfo)

    @classmethod
    def defaults(cls) -> TemplateConfig:
        """Configuration the template ships with: every example enabled."""
        return cls(
            app=AppInfo(
                name="{{APP_NAME}}",
                description="{{APP_DESCRIPTION}}",
                author="{{AUTHOR_NAME}}",
            ),
            features=Features(
                auth=AuthFeatures(
                    email_password=True, google_oauth=True, apple_oauth=False
                ),
                integrations=IntegrationFeatures(example_oauth=True, file_upload=True),
                monitoring=MonitoringFeatures(sentry=True, vercel_analytics=True),
                examples=ExampleFeatures(
                    chat_messages=True, ai_requests=True, external_accounts=True
                ),
            ),
            database=DatabaseInfo(prefix="{{DATABASE_PREFIX}}"),
        )

    def group(self, name: str) -> _FlagGroup:
        value = getattr(self.features, name, None)
        if not isinstance(value, _FlagGroup):
            raise KeyError(name)
        return value

    def is_enabled(self, flag: str) -> bool:
        """Read a flag by dotted path, e.g. ``examples.chatMessages``."""
        group_name, _, flag_name = flag.partition(".")
        if not flag_name:
            raise KeyError(flag)
        return self.group(group_name).flag(flag_name)

    def has_feature(self, group: str) -> bool:
        """True when any flag of the group is enabled."""
        return self.group(group).any_enabled()

    def to_json(self) -> str:
        return json.dumps(self.model_dump(by_alias=True), indent=2) + "\n"


def parse_template_config(text: str, source: str = "template config") -> TemplateConfig:
    """Parse and validate the JSON text of a template config."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise TemplateConfigError(f"{source} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise TemplateConfigError(f"{source} must contain a JSON object")
    try:
        return TemplateConfig.model_validate(data)
    except ValidationError as exc:
        raise TemplateConfigError(f"{source} failed validation:\n{exc}") from exc


def load_template_config(path: pathlib.Path) -> TemplateConfig | None:
    """Load the config file, or return None if it does not exist."""
    if not path.is_file():
        return None
    return parse_template_config(path.read_text(encoding="utf-8"), source=path.name)


def write_template_config(path: pathlib.Path, config: TemplateConfig) -> None:
    path.write_text(config.to_json(), encoding="utf-8")
