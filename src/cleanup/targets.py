"""Files, directories and schema owned by each optional template feature."""

from __future__ import annotations

from dataclasses import dataclass

from migration.editor import SchemaObjects


@dataclass(frozen=True)
class FeatureTargets:
    """Everything removed when ``flag`` is disabled.

    Paths are relative to the project root and use forward slashes.
    """

    flag: str
    label: str
    directories: tuple[str, ...] = ()
    files: tuple[str, ...] = ()
    schema: SchemaObjects = SchemaObjects()


FEATURE_TARGETS: tuple[FeatureTargets, ...] = (
    FeatureTargets(
        flag="examples.chatMessages",
        label="chat example",
        directories=("src/app/api/chat", "src/components/chat"),
        files=("src/app/(protected)/chat/page.tsx",),
        schema=SchemaObjects(tables=frozenset({"chat_messages"})),
    ),
    FeatureTargets(
        flag="examples.aiRequests",
        label="AI requests example",
        directories=("src/app/api/ai", "src/components/ai"),
        schema=SchemaObjects(tables=frozenset({"ai_requests"})),
    ),
    FeatureTargets(
        flag="integrations.exampleOAuth",
        label="OAuth example",
        directories=("src/app/api/connections/example", "src/lib/example"),
    ),
    FeatureTargets(
        flag="integrations.fileUpload",
        label="file upload",
        directories=("src/app/api/avatar",),
        files=("src/components/settings/avatar-settings.tsx",),
        schema=SchemaObjects(
            sections=("STORAGE BUCKET FOR AVATARS",),
            buckets=frozenset({"avatars"}),
        ),
    ),
)
