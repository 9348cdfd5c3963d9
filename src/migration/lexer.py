"""Split migration SQL into trivia lines and statements.

Only as much of the SQL grammar is understood as is needed to find statement
boundaries: comments, quoted strings and identifiers, and dollar-quoted
bodies are skipped so a ``;`` inside them never ends a statement.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from core.errors import MigrationParseError

_TRIVIA_LINE = re.compile(r"[ \t\r\f]*(?:--[^\n]*)?(?:\n|\Z)")
_BLOCK_COMMENT_START = re.compile(r"[ \t\r\f]*/\*")
_BLANK_TAIL = re.compile(r"[ \t\r\f]*(?:\n|\Z)")
_DOLLAR_TAG = re.compile(r"\$(?:[A-Za-z_][A-Za-z_0-9]*)?\$")


class TokenKind(Enum):
    BLANK = "blank"
    COMMENT = "comment"
    STATEMENT = "statement"


@dataclass(frozen=True)
class Token:
    """A slice of the source text.

    Attributes:
        kind: Blank line, comment, or statement.
        text: Exact source text, including the trailing newline.
        line: 1-based line the token starts on.
        code: For statements, the SQL with comments removed and whitespace
            collapsed. Empty for trivia.
    """

    kind: TokenKind
    text: str
    line: int
    code: str = ""


def tokenize(text: str) -> list[Token]:
    """Split SQL text into tokens whose texts concatenate back to ``text``."""
    tokens: list[Token] = []
    pos = 0
    line = 1
    size = len(text)
    while pos < size:
        match = _TRIVIA_LINE.match(text, pos)
        if match and match.end() > pos:
            chunk = match.group(0)
            kind = TokenKind.COMMENT if chunk.strip() else TokenKind.BLANK
            tokens.append(Token(kind, chunk, line))
        elif _BLOCK_COMMENT_START.match(text, pos):
            end = _skip_block_comment(text, text.index("/*", pos), line, pos)
            # Code may follow on the same line; only a blank tail is folded in.
            tail = _BLANK_TAIL.match(text, end)
            if tail:
                end = tail.end()
            tokens.append(Token(TokenKind.COMMENT, text[pos:end], line))
        else:
            end, code = _scan_statement(text, pos, line)
            tokens.append(Token(TokenKind.STATEMENT, text[pos:end], line, code))
        consumed = tokens[-1].text
        line += consumed.count("\n")
        pos += len(consumed)
    return tokens


def _line_at(text: str, start: int, start_line: int, index: int) -> int:
    return start_line + text.count("\n", start, index)


def _skip_block_comment(text: str, index: int, line: int, start: int) -> int:
    close = text.find("*/", index + 2)
    if close == -1:
        raise MigrationParseError(
            "unterminated block comment", _line_at(text, start, line, index)
        )
    return close + 2


def _skip_quoted(
    text: str, index: int, line: int, start: int, backslash: bool = False
) -> int:
    """Return the index just past the quoted run opened at ``index``.

    ``backslash`` marks a Postgres ``E'...'`` string, where ``\\'`` does not
    close the literal.
    """
    quote = text[index]
    cursor = index + 1
    while True:
        close = text.find(quote, cursor)
        if close == -1:
            what = "string literal" if quote == "'" else "quoted identifier"
            raise MigrationParseError(
                f"unterminated {what}", _line_at(text, start, line, index)
            )
        if backslash and _escaped(text, index, close):
            cursor = close + 1
            continue
        if text.startswith(quote * 2, close):
            cursor = close + 2
            continue
        return close + 1


def _escaped(text: str, opening: int, index: int) -> bool:
    backslashes = 0
    while index - backslashes - 1 > opening and text[index - backslashes - 1] == "\\":
        backslashes += 1
    return backslashes % 2 == 1


def _opens_escape_string(text: str, index: int, start: int) -> bool:
    if index == start or text[index - 1] not in "Ee":
        return False
    before = index - 2
    return before < start or not (text[before].isalnum() or text[before] in "_$")


def _scan_statement(text: str, start: int, line: int) -> tuple[int, str]:
    """Return the end of the statement starting at ``start`` and its code."""
    size = len(text)
    parts: list[str] = []
    run = start
    index = start
    while index < size:
        char = text[index]
        if char == ";":
            parts.append(text[run : index + 1])
            tail = _TRIVIA_LINE.match(text, index + 1)
            end = tail.end() if tail else index + 1
            return end, _squash(parts)
        if text.startswith("--", index):
            parts.append(text[run:index])
            parts.append(" ")
            newline = text.find("\n", index)
            index = size if newline == -1 else newline
            run = index
        elif text.startswith("/*", index):
            parts.append(text[run:index])
            parts.append(" ")
            index = _skip_block_comment(text, index, line, start)
            run = index
        elif char in ("'", '"'):
            escapes = char == "'" and _opens_escape_string(text, index, start)
            index = _skip_quoted(text, index, line, start, escapes)
        elif char == "$" and _starts_dollar_quote(text, index):
            tag = _DOLLAR_TAG.match(text, index).group(0)  # type: ignore[union-attr]
            close = text.find(tag, index + len(tag))
            if close == -1:
                raise MigrationParseError(
                    "unterminated dollar-quoted string",
                    _line_at(text, start, line, index),
                )
            index = close + len(tag)
        else:
            index += 1
    # Final statement without a terminating semicolon.
    parts.append(text[run:size])
    return size, _squash(parts)


def _starts_dollar_quote(text: str, index: int) -> bool:
    if index > 0 and (text[index - 1].isalnum() or text[index - 1] == "_"):
        return False
    return _DOLLAR_TAG.match(text, index) is not None


def _squash(parts: list[str]) -> str:
    return " ".join("".join(parts).split())
