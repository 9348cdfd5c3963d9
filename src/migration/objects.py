"""Work out which database objects a single SQL statement touches."""

from __future__ import annotations

import re
from dataclasses import dataclass

_IDENT = r'(?:"(?:[^"]|"")+"|[A-Za-z_][A-Za-z0-9_$]*)'
_NAME = rf"{_IDENT}(?:\s*\.\s*{_IDENT}){{0,2}}"

# (kind, pattern) pairs; the first match wins. ``name`` captures the table the
# statement belongs to, ``object`` the statement's own object name.
_STATEMENT_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    (kind, re.compile(pattern.replace("NAME", _NAME).replace("IDENT", _IDENT), re.I))
    for kind, pattern in [
        (
            "table",
            r"^CREATE\s+(?:OR\s+REPLACE\s+)?(?:(?:GLOBAL|LOCAL)\s+)?"
            r"(?:(?:TEMP|TEMPORARY|UNLOGGED)\s+)?TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?"
            r"(?P<name>NAME)",
        ),
        (
            "alter table",
            r"^ALTER\s+TABLE\s+(?:IF\s+EXISTS\s+)?(?:ONLY\s+)?(?P<name>NAME)",
        ),
        ("drop table", r"^DROP\s+TABLE\s+(?:IF\s+EXISTS\s+)?(?P<name>NAME)"),
        (
            "index",
            r"^CREATE\s+(?:UNIQUE\s+)?INDEX\s+(?:CONCURRENTLY\s+)?"
            r"(?:(?:IF\s+NOT\s+EXISTS\s+)?(?P<object>IDENT)\s+)?"
            r"ON\s+(?:ONLY\s+)?(?P<name>NAME)",
        ),
        (
            "alter index",
            r"^(?:ALTER|DROP)\s+INDEX\s+(?:CONCURRENTLY\s+)?(?:IF\s+EXISTS\s+)?"
            r"(?P<object>NAME)",
        ),
        (
            "policy",
            r"^(?:CREATE|ALTER|DROP)\s+POLICY\s+(?:IF\s+EXISTS\s+)?IDENT\s+"
            r"ON\s+(?P<name>NAME)",
        ),
        (
            "trigger",
            r"^(?:CREATE\s+(?:OR\s+REPLACE\s+)?(?:CONSTRAINT\s+)?|DROP\s+)TRIGGER\s+"
            r"(?:IF\s+EXISTS\s+)?IDENT\s+(?:.*?\s)?ON\s+(?P<name>NAME)",
        ),
        (
            "view",
            r"^CREATE\s+(?:OR\s+REPLACE\s+)?(?:(?:TEMP|TEMPORARY)\s+)?"
            r"(?:MATERIALIZED\s+)?VIEW\s+(?:IF\s+NOT\s+EXISTS\s+)?(?P<name>NAME)",
        ),
        # Single-table form only; a list of tables is left for the name check.
        (
            "publication",
            r"^ALTER\s+PUBLICATION\s+IDENT\s+(?:ADD|DROP|SET)\s+TABLE\s+"
            r"(?:ONLY\s+)?(?P<name>NAME)\s*;?$",
        ),
        ("comment", r"^COMMENT\s+ON\s+TABLE\s+(?P<name>NAME)"),
        ("column comment", r"^COMMENT\s+ON\s+COLUMN\s+(?P<name>NAME)"),
        (
            "comment",
            r"^COMMENT\s+ON\s+(?:POLICY|TRIGGER|CONSTRAINT|RULE)\s+IDENT\s+"
            r"ON\s+(?P<name>NAME)",
        ),
        ("index comment", r"^COMMENT\s+ON\s+INDEX\s+(?P<object>NAME)"),
        ("grant", r"^(?:GRANT|REVOKE)\s+(?:.*?\s)?ON\s+(?:TABLE\s+)?(?P<name>NAME)"),
        ("insert", r"^INSERT\s+INTO\s+(?P<name>NAME)"),
    ]
]

# Statements that only make sense while the index they name exists.
INDEX_DEPENDENT_KINDS = frozenset({"alter index", "index comment"})

_REFERENCES = re.compile(rf"\bREFERENCES\s+(?P<name>{_NAME})", re.I)
_IDENT_PART = re.compile(_IDENT)
_BUCKET_ID = re.compile(r"\bbucket_id\s*=\s*'((?:[^']|'')*)'", re.I)
_VALUES = re.compile(r"\bVALUES\b", re.I)
_ROW_FIRST_LITERAL = re.compile(r"\(\s*'((?:[^']|'')*)'")
_STRING_LITERAL = re.compile(r"(?<![\w$])[Ee]'(?:[^'\\]|\\.|'')*'|'(?:[^']|'')*'")


@dataclass(frozen=True)
class SqlObject:
    """What a statement defines or changes.

    Attributes:
        kind: Statement category (``table``, ``index``, ``policy`` ...), or
            None when the statement is not recognised.
        target: Normalised name of the table the statement belongs to.
        name: Normalised name of the index the statement creates or names.
        references: Tables named in ``REFERENCES`` clauses, other than target.
        buckets: Storage bucket ids the statement creates or guards.
    """

    kind: str | None = None
    target: str | None = None
    name: str | None = None
    references: frozenset[str] = frozenset()
    buckets: frozenset[str] = frozenset()


def normalize_name(name: str) -> str:
    """Normalise a possibly quoted, possibly schema-qualified name.

    Unquoted parts are folded to lower case and the ``public`` schema is
    dropped, so ``public.Chat_Messages`` and ``chat_messages`` compare equal.
    """
    parts = []
    for part in _IDENT_PART.findall(name):
        if part.startswith('"'):
            parts.append(part[1:-1].replace('""', '"'))
        else:
            parts.append(part.lower())
    if len(parts) > 1 and parts[0] == "public":
        parts = parts[1:]
    return ".".join(parts)


def describe(code: str) -> SqlObject:
    """Describe a statement given its comment-free code."""
    kind = None
    target = None
    name = None
    for candidate, pattern in _STATEMENT_PATTERNS:
        match = pattern.match(code)
        if match:
            kind = candidate
            groups = match.groupdict()
            if groups.get("name"):
                target = normalize_name(groups["name"])
            if groups.get("object"):
                name = normalize_name(groups["object"])
            if kind == "column comment" and target is not None:
                target = target.rpartition(".")[0] or None
            break

    references = frozenset(
        normalize_name(m.group("name")) for m in _REFERENCES.finditer(code)
    ) - {target}

    buckets = {_unquote(value) for value in _BUCKET_ID.findall(code)}
    if target == "storage.buckets":
        values = _VALUES.search(code)
        if values:
            buckets.update(
                _unquote(value)
                for value in _ROW_FIRST_LITERAL.findall(code, values.end())
            )

    return SqlObject(
        kind=kind,
        target=target,
        name=name,
        references=references,
        buckets=frozenset(buckets),
    )


def mentioned_tables(code: str, tables: set[str]) -> set[str]:
    """Return the tables in ``tables`` that ``code`` names outside string literals."""
    bare = _STRING_LITERAL.sub("''", code)
    found = set()
    for table in tables:
        parts = (re.escape(part) for part in table.split("."))
        pattern = r'"?\s*\.\s*"?'.join(parts)
        if re.search(rf"(?<![\w$]){pattern}(?![\w$])", bare, re.I):
            found.add(table)
    return found


def _unquote(literal: str) -> str:
    return literal.replace("''", "'")
