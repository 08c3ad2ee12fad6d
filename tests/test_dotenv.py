"""Tests for .env definition file parsing."""

import pytest

from env_audit.core.scanner.dotenv import (
    parse_dotenv_content,
    parse_dotenv_file,
    parse_dotenv_line,
)


class TestParseDotenvLine:
    """Single-line parsing."""

    @pytest.mark.parametrize(
        "line,expected",
        [
            ("KEY=value", ("KEY", "value")),
            ("KEY = value ", ("KEY", "value")),
            ('KEY="quoted value"', ("KEY", "quoted value")),
            ("KEY='single'", ("KEY", "single")),
            ("export KEY=value", ("KEY", "value")),
            ("export  SPACED=1", ("SPACED", "1")),
            ("EMPTY=", ("EMPTY", "")),
            ("URL=postgres://u:p@h/db?x=1", ("URL", "postgres://u:p@h/db?x=1")),
            ("9LIVES=cat", ("9LIVES", "cat")),
        ],
    )
    def test_assignments(self, line, expected):
        assert parse_dotenv_line(line) == expected

    @pytest.mark.parametrize(
        "line",
        [
            "",
            "   ",
            "# comment",
            "   # indented comment",
            "NO_EQUALS_SIGN",
            "=value",
            "BAD-KEY=1",
            "HAS SPACE=1",
            "exportKEY",
        ],
    )
    def test_ignored_lines(self, line):
        assert parse_dotenv_line(line) is None

    def test_export_prefix_requires_whitespace(self):
        """A key that merely starts with 'export' is a normal key."""
        assert parse_dotenv_line("exported=1") == ("exported", "1")

    def test_mismatched_quotes_are_kept(self):
        assert parse_dotenv_line("KEY=\"abc'") == ("KEY", "\"abc'")


class TestParseDotenvContent:
    """Whole-file parsing."""

    def test_line_numbers_are_one_based(self):
        content = "# header\n\nFIRST=1\n\nSECOND=2\n"
        sites = parse_dotenv_content(content, ".env")
        assert [(s.name, s.location.line) for s in sites] == [("FIRST", 3), ("SECOND", 5)]

    def test_sites_carry_file_and_value(self):
        sites = parse_dotenv_content("API_KEY='abc'\n", "config/.env")
        assert sites[0].source_file == "config/.env"
        assert sites[0].location.path == "config/.env"
        assert sites[0].location.column is None
        assert sites[0].value == "abc"

    def test_duplicates_are_all_reported(self):
        sites = parse_dotenv_content("A=1\nA=2\n", ".env")
        assert [s.location.line for s in sites] == [1, 2]

    def test_crlf_line_endings(self):
        sites = parse_dotenv_content("A=1\r\nB=2\r\n", ".env")
        assert [(s.name, s.value) for s in sites] == [("A", "1"), ("B", "2")]

    def test_empty_content(self):
        assert parse_dotenv_content("") == []


class TestParseDotenvFile:
    """Reading from disk."""

    def test_reads_file(self, tmp_path):
        env = tmp_path / ".env"
        env.write_text("PORT=8080\n", encoding="utf-8")
        sites = parse_dotenv_file(env, display_path=".env")
        assert sites[0].name == "PORT"
        assert sites[0].location.path == ".env"

    def test_byte_order_mark_is_stripped(self, tmp_path):
        env = tmp_path / ".env"
        env.write_bytes("\ufeffAPI_KEY=1\nOTHER=2\n".encode("utf-8"))
        sites = parse_dotenv_file(env)
        assert [s.name for s in sites] == ["API_KEY", "OTHER"]

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(OSError):
            parse_dotenv_file(tmp_path / "nope.env")
