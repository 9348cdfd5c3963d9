"""Tests for splitting migration SQL into tokens."""

from __future__ import annotations

import pytest

from core.errors import MigrationParseError
from migration.lexer import TokenKind, tokenize


def statements(text: str) -> list[str]:
    return [t.code for t in tokenize(text) if t.kind is TokenKind.STATEMENT]


class TestTokenize:
    """Tests for statement boundaries."""

    def test_tokens_cover_input(self, migration_sql: str) -> None:
        """Test token texts concatenate back to the input."""
        assert "".join(t.text for t in tokenize(migration_sql)) == migration_sql

    def test_trivia_kinds(self) -> None:
        """Test blank, comment and statement tokens with line numbers."""
        tokens = tokenize("\n-- note\nSELECT 1;\n")
        assert [t.kind for t in tokens] == [
            TokenKind.BLANK,
            TokenKind.COMMENT,
            TokenKind.STATEMENT,
        ]
        assert [t.line for t in tokens] == [1, 2, 3]

    def test_semicolon_in_string(self) -> None:
        """Test a semicolon inside a string does not end the statement."""
        assert statements("INSERT INTO t VALUES ('a;b', 'it''s');\nSELECT 2;\n") == [
            "INSERT INTO t VALUES ('a;b', 'it''s');",
            "SELECT 2;",
        ]

    def test_semicolon_in_dollar_quote(self) -> None:
        """Test a function body is one statement."""
        sql = (
            "CREATE FUNCTION f() RETURNS trigger AS $body$\n"
            "BEGIN\n  RETURN NEW;\nEND;\n$body$ LANGUAGE plpgsql;\n"
            "SELECT 1;\n"
        )
        result = statements(sql)
        assert len(result) == 2
        assert result[0].endswith("$body$ LANGUAGE plpgsql;")

    def test_comments_removed_from_code(self) -> None:
        """Test code has comments stripped and whitespace collapsed."""
        sql = "CREATE TABLE t ( -- inline\n  id INT /* block ; */\n);\n"
        assert statements(sql) == ["CREATE TABLE t ( id INT );"]

    def test_trailing_comment_stays_with_statement(self) -> None:
        """Test a same-line comment belongs to its statement."""
        tokens = tokenize("SELECT 1; -- done\nSELECT 2;\n")
        assert tokens[0].text == "SELECT 1; -- done\n"
        assert tokens[1].text == "SELECT 2;\n"

    def test_two_statements_on_one_line(self) -> None:
        """Test statements sharing a line are split."""
        assert statements("SELECT 1; SELECT 2;\n") == ["SELECT 1;", "SELECT 2;"]

    def test_statement_without_semicolon(self) -> None:
        """Test the last statement may omit its semicolon."""
        assert statements("SELECT 1;\nSELECT 2") == ["SELECT 1;", "SELECT 2"]

    def test_block_comment_is_trivia(self) -> None:
        """Test a leading block comment is not a statement."""
        tokens = tokenize("/* header\n   text */\nSELECT 1;\n")
        assert tokens[0].kind is TokenKind.COMMENT
        assert tokens[1].line == 3

    def test_escape_string_backslash_quote(self) -> None:
        """Test a backslash-escaped quote does not close an E'' string."""
        sql = "INSERT INTO t VALUES (E'it\\'s; fine', e'\\\\');\nSELECT 2;\n"
        assert statements(sql) == [
            "INSERT INTO t VALUES (E'it\\'s; fine', e'\\\\');",
            "SELECT 2;",
        ]

    def test_plain_string_backslash(self) -> None:
        """Test a backslash has no special meaning in a standard string."""
        assert statements("SELECT 'C:\\';\nSELECT 2;\n") == [
            "SELECT 'C:\\';",
            "SELECT 2;",
        ]

    def test_identifier_ending_in_e(self) -> None:
        """Test a quote after a word ending in e is a plain string."""
        assert statements("SELECT name'x\\';\n") == ["SELECT name'x\\';"]


class TestErrors:
    """Tests for malformed SQL."""

    @pytest.mark.parametrize(
        ("sql", "message"),
        [
            ("SELECT 'open;\n", "string literal"),
            ('SELECT "open;\n', "quoted identifier"),
            ("SELECT 1 /* open;\n", "block comment"),
            ("CREATE FUNCTION f() AS $$ BEGIN;\n", "dollar-quoted"),
        ],
    )
    def test_unterminated(self, sql: str, message: str) -> None:
        """Test unterminated constructs raise."""
        with pytest.raises(MigrationParseError, match=message):
            tokenize(sql)

    def test_error_reports_line(self) -> None:
        """Test the error carries the line where the construct opened."""
        with pytest.raises(MigrationParseError) as info:
            tokenize("SELECT 1;\n\nINSERT INTO t VALUES (\n  'open);\n")
        assert info.value.line == 4
