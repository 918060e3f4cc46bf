"""Tests for the ConfigError hierarchy and its source pointer."""

from __future__ import annotations

import pytest

from proxyconf.diagnostics import (
    ConfigError,
    DocumentSyntaxError,
    DuplicateNameError,
    FormatError,
    MissingRequiredError,
    MutualExclusionError,
    StructuralError,
    TypeMismatchError,
    UnknownDirectiveError,
    UnknownKeyError,
)
from proxyconf.infrastructure.document import Span

SOURCE = "filter name=\"a\"\nbad-node x=1\n"


class TestLocation:
    def test_line_and_column(self) -> None:
        err = ConfigError("msg", span=Span(20, 1), source_name="f.kdl", source_text=SOURCE)
        assert (err.line, err.column) == (2, 5)

    def test_start_of_text(self) -> None:
        err = ConfigError("msg", span=Span(0, 3), source_text=SOURCE)
        assert (err.line, err.column) == (1, 1)

    def test_defaults(self) -> None:
        err = ConfigError("msg")
        assert err.span == Span(0)
        assert err.source_name == "<unknown>"


class TestHelp:
    def test_pointer_block(self) -> None:
        err = UnknownDirectiveError(
            "Unknown directive: 'bad-node'",
            span=Span(16, 8),
            source_name="f.kdl",
            source_text=SOURCE,
        )
        assert err.help == "\n".join(
            [
                "Unknown directive: 'bad-node'",
                "  --> f.kdl:2:1",
                "   |",
                " 2 | bad-node x=1",
                "   | ^^^^^^^^",
            ]
        )
        assert str(err) == err.help

    def test_multiline_span_clipped_to_first_line(self) -> None:
        err = ConfigError("msg", span=Span(0, 100), source_text="abc\ndef")
        assert err.help.splitlines()[-1] == "   | ^^^"

    def test_empty_span_gets_one_caret(self) -> None:
        err = ConfigError("msg", span=Span(4, 0), source_text="abc\ndef")
        assert err.help.splitlines()[-1] == "   | ^"

    def test_wide_gutter(self) -> None:
        text = "\n" * 11 + "x\n"
        err = ConfigError("msg", span=Span(11, 1), source_name="f", source_text=text)
        assert err.help.splitlines()[2:] == ["    |", " 12 | x", "    | ^"]

    def test_without_source_text(self) -> None:
        err = ConfigError("msg", source_name="f.kdl")
        assert err.help == "msg\n  --> f.kdl:1:1"


class TestDetail:
    def test_to_detail(self) -> None:
        err = FormatError("bad", span=Span(16, 8), source_name="f.kdl", source_text=SOURCE)
        detail = err.to_detail()
        assert detail["source"] == "f.kdl"
        assert detail["line"] == 2
        assert detail["column"] == 1
        assert detail["offset"] == 16
        assert detail["length"] == 8
        assert detail["help"] == err.help


class TestCodes:
    @pytest.mark.parametrize(
        ("cls", "code"),
        [
            (StructuralError, "STRUCTURAL"),
            (MissingRequiredError, "MISSING_REQUIRED"),
            (UnknownDirectiveError, "UNKNOWN_DIRECTIVE"),
            (UnknownKeyError, "UNKNOWN_KEY"),
            (TypeMismatchError, "TYPE_MISMATCH"),
            (FormatError, "FORMAT"),
            (MutualExclusionError, "MUTUAL_EXCLUSION"),
            (DuplicateNameError, "DUPLICATE_NAME"),
            (DocumentSyntaxError, "SYNTAX"),
        ],
    )
    def test_code(self, cls: type[ConfigError], code: str) -> None:
        err = cls("x")
        assert err.code == code
        assert isinstance(err, ConfigError)
