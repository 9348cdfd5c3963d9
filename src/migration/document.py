"""Editable model of a migration file.

A migration is a run of sections. Each section after the first opens with a
banner comment::

    -- =============================================
    -- ROW LEVEL SECURITY
    -- =============================================

and holds the statements up to the next banner. Comments directly above a
statement (no blank line in between) belong to that statement; anything
further up is kept as loose text. Rendering a document that was not edited
gives back the original text exactly.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from migration.lexer import Token, TokenKind, tokenize
from migration.objects import SqlObject, describe

_RULE = re.compile(r"^\s*--\s*={3,}\s*$")


@dataclass
class Statement:
    """One SQL statement plus the text that sits in front of it."""

    body: str
    code: str
    line: int
    comments: str = ""
    leading: str = ""
    sql: SqlObject = field(default_factory=SqlObject)

    @property
    def target(self) -> str | None:
        return self.sql.target

    def render(self, with_leading: bool = True) -> str:
        return (self.leading if with_leading else "") + self.comments + self.body


@dataclass
class Section:
    """A banner-delimited part of the migration.

    Attributes:
        title: Banner text, or None for the part before the first banner.
        header: Raw banner lines.
        statements: Statements in source order.
        trailer: Blank lines and loose comments after the last statement.
    """

    title: str | None
    header: str = ""
    statements: list[Statement] = field(default_factory=list)
    trailer: str = ""

    def render(self) -> str:
        return self.header + "".join(s.render() for s in self.statements) + self.trailer

    def matches(self, title: str) -> bool:
        return self.title is not None and self.title.casefold() == title.casefold()


@dataclass
class MigrationDocument:
    sections: list[Section]

    @classmethod
    def parse(cls, text: str) -> MigrationDocument:
        return _Parser(tokenize(text)).parse()

    def render(self) -> str:
        return "".join(section.render() for section in self.sections)

    def statements(self) -> Iterator[Statement]:
        for section in self.sections:
            yield from section.statements

    def titles(self) -> list[str]:
        return [s.title for s in self.sections if s.title is not None]

    def find_section(self, title: str) -> Section | None:
        for section in self.sections:
            if section.matches(title):
                return section
        return None

    def remove_section(self, title: str) -> Section | None:
        """Remove a titled section and everything in it."""
        section = self.find_section(title)
        if section is not None:
            self.sections.remove(section)
        return section

    def remove_statements(
        self, predicate: Callable[[Statement], bool]
    ) -> list[Statement]:
        """Remove matching statements and any section they leave empty.

        A removed statement takes its attached comments with it. The gap in
        front of a run of removed statements is kept only where the following
        text has none of its own; loose comments are always kept.
        """
        removed: list[Statement] = []
        for section in list(self.sections):
            kept: list[Statement] = []
            gap: str | None = None
            for statement in section.statements:
                if predicate(statement):
                    removed.append(statement)
                    if gap is None:
                        gap = statement.leading
                    elif statement.leading.strip():
                        gap += statement.leading
                    continue
                if gap is not None:
                    statement.leading = _merge_gap(gap, statement.leading)
                    gap = None
                kept.append(statement)
            if gap is not None and gap.strip():
                section.trailer = gap + section.trailer
            if len(kept) == len(section.statements):
                continue
            section.statements = kept
            if not kept and section.title is not None:
                self.sections.remove(section)
        return removed


def _merge_gap(removed: str, following: str) -> str:
    if removed.strip():
        return removed + following
    return following or removed


class _Parser:
    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._sections = [Section(title=None)]
        self._trivia: list[Token] = []

    def parse(self) -> MigrationDocument:
        for token in self._tokens:
            if token.kind is TokenKind.STATEMENT:
                self._add_statement(token)
            else:
                self._trivia.append(token)
        self._flush_banners()
        self._sections[-1].trailer += _join(self._trivia)
        return MigrationDocument(self._sections)

    def _add_statement(self, token: Token) -> None:
        self._flush_banners()
        split = len(self._trivia)
        while split > 0 and self._trivia[split - 1].kind is TokenKind.COMMENT:
            split -= 1
        statement = Statement(
            body=token.text,
            code=token.code,
            line=token.line,
            comments=_join(self._trivia[split:]),
            leading=_join(self._trivia[:split]),
            sql=describe(token.code),
        )
        self._sections[-1].statements.append(statement)
        self._trivia = []

    def _flush_banners(self) -> None:
        """Open a new section for every banner in the pending trivia."""
        while True:
            banner = _find_banner(self._trivia)
            if banner is None:
                return
            start, end, title = banner
            self._sections[-1].trailer += _join(self._trivia[:start])
            header = _join(self._trivia[start:end])
            self._sections.append(Section(title=title, header=header))
            self._trivia = self._trivia[end:]


def _find_banner(trivia: list[Token]) -> tuple[int, int, str] | None:
    for start, token in enumerate(trivia):
        if not _is_rule(token):
            continue
        end = start + 1
        while end < len(trivia) and _is_title_line(trivia[end]):
            end += 1
        if end > start + 1 and end < len(trivia) and _is_rule(trivia[end]):
            titles = trivia[start + 1 : end]
            lines = [t.text.strip().lstrip("-").strip() for t in titles]
            return start, end + 1, " ".join(lines)
    return None


def _is_rule(token: Token) -> bool:
    return token.kind is TokenKind.COMMENT and bool(_RULE.match(token.text))


def _is_title_line(token: Token) -> bool:
    return (
        token.kind is TokenKind.COMMENT
        and token.text.lstrip().startswith("--")
        and not _RULE.match(token.text)
    )


def _join(tokens: list[Token]) -> str:
    return "".join(token.text for token in tokens)
