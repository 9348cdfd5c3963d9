"""Remove the schema of disabled features from the initial migration."""

from __future__ import annotations

import pathlib
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field

from core.errors import MigrationEditError
from migration.document import MigrationDocument, Statement
from migration.objects import INDEX_DEPENDENT_KINDS, mentioned_tables


@dataclass(frozen=True)
class SchemaObjects:
    """Database objects owned by one feature.

    Attributes:
        tables: Table names; every statement defining or altering them goes.
        sections: Banner titles of sections that are dropped whole.
        buckets: Storage bucket ids; statements creating or guarding them go.
    """

    tables: frozenset[str] = frozenset()
    sections: tuple[str, ...] = ()
    buckets: frozenset[str] = frozenset()

    def __bool__(self) -> bool:
        return bool(self.tables or self.sections or self.buckets)

    def owns(self, statement: Statement) -> bool:
        if statement.target is not None and statement.target in self.tables:
            return True
        return bool(statement.sql.buckets & self.buckets)


@dataclass
class Removal:
    """What was taken out of the migration for one feature."""

    label: str
    statements: list[Statement] = field(default_factory=list)
    sections: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.statements or self.sections)

    def describe(self) -> str:
        if not self:
            return f"{self.label}: nothing to remove from migration"
        parts = [f"{len(self.statements)} statement(s)"]
        if self.sections:
            parts.append("section(s) " + ", ".join(self.sections))
        return f"{self.label}: removed " + " and ".join(parts)


def strip_objects(
    document: MigrationDocument, label: str, objects: SchemaObjects
) -> Removal:
    """Remove everything ``objects`` owns from ``document``.

    Statements that only name an index, such as ``COMMENT ON INDEX``, go with
    the index when it is removed.
    """
    removal = Removal(label)
    for title in objects.sections:
        section = document.remove_section(title)
        if section is not None:
            removal.sections.append(section.title or title)
            removal.statements.extend(section.statements)

    indexes = _index_names(removal.statements)
    indexes |= _index_names(s for s in document.statements() if objects.owns(s))

    def owned(statement: Statement) -> bool:
        if objects.owns(statement):
            return True
        return (
            statement.sql.kind in INDEX_DEPENDENT_KINDS
            and statement.sql.name in indexes
        )

    before = Counter(document.titles())
    removal.statements.extend(document.remove_statements(owned))
    removal.sections.extend((before - Counter(document.titles())).elements())
    return removal


def _index_names(statements: Iterable[Statement]) -> set[str]:
    return {s.sql.name for s in statements if s.sql.kind == "index" and s.sql.name}


def check_references(document: MigrationDocument, removed_tables: set[str]) -> None:
    """Fail if a remaining statement still names a removed table."""
    for statement in document.statements():
        dangling = statement.sql.references & removed_tables
        dangling |= mentioned_tables(statement.code, removed_tables)
        if dangling:
            raise MigrationEditError(
                f"line {statement.line}: {statement.sql.kind or 'statement'} "
                f"{statement.target or ''} still references removed table(s) "
                + ", ".join(sorted(dangling))
            )


class MigrationEditor:
    """Loads a migration file, strips features from it and writes it back."""

    def __init__(self, path: pathlib.Path, text: str) -> None:
        self.path = path
        self._original = text
        self.document = MigrationDocument.parse(text)
        self.removals: list[Removal] = []

    @classmethod
    def load(cls, path: pathlib.Path) -> MigrationEditor | None:
        """Open the migration, or return None when the file is missing."""
        if not path.is_file():
            return None
        return cls(path, path.read_text(encoding="utf-8"))

    def strip(self, label: str, objects: SchemaObjects) -> Removal:
        removal = strip_objects(self.document, label, objects)
        self.removals.append(removal)
        return removal

    def verify(self) -> None:
        removed_tables = {
            statement.target
            for removal in self.removals
            for statement in removal.statements
            if statement.sql.kind == "table" and statement.target
        }
        check_references(self.document, removed_tables)

    @property
    def text(self) -> str:
        return self.document.render()

    @property
    def changed(self) -> bool:
        return self.text != self._original

    def save(self) -> bool:
        """Write the file if its content changed. Returns True when written."""
        if not self.changed:
            return False
        self.path.write_text(self.text, encoding="utf-8")
        return True
