"""ConfigError hierarchy — span-anchored diagnostics.

INVARIANT: every failure while reading or validating a document is raised
as exactly one ConfigError subclass. Nothing is aggregated: the first error
aborts the enclosing parse and propagates unchanged to the caller.

Each error carries the human message, the span it points at, the source
name, and the source text so it can render a ``help`` block::

    Unknown directive: 'not-filter'
      --> proxy.kdl:3:1
       |
     3 | not-filter name="bad.one"
       | ^^^^^^^^^^^^^^^^^^^^^^^^^
"""

from __future__ import annotations

from typing import Any

from proxyconf.infrastructure.document import Span


class ConfigError(Exception):
    """Base class for all configuration diagnostics."""

    code = "CONFIG_ERROR"

    def __init__(
        self,
        message: str,
        *,
        span: Span | None = None,
        source_name: str = "<unknown>",
        source_text: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.span = span or Span(0)
        self.source_name = source_name
        self.source_text = source_text

    def __str__(self) -> str:
        return self.help

    @property
    def line(self) -> int:
        """1-based line of the span start."""
        return self.source_text.count("\n", 0, self.span.offset) + 1

    @property
    def column(self) -> int:
        """1-based column of the span start."""
        line_start = self.source_text.rfind("\n", 0, self.span.offset) + 1
        return self.span.offset - line_start + 1

    @property
    def help(self) -> str:
        """Message followed by a source pointer with a caret underline."""
        location = f"  --> {self.source_name}:{self.line}:{self.column}"
        if not self.source_text:
            return f"{self.message}\n{location}"

        line_start = self.source_text.rfind("\n", 0, self.span.offset) + 1
        line_end = self.source_text.find("\n", self.span.offset)
        if line_end == -1:
            line_end = len(self.source_text)
        source_line = self.source_text[line_start:line_end]

        # Multi-line spans are underlined up to the end of their first line.
        width = max(1, min(self.span.length, line_end - self.span.offset))
        gutter = " " * len(str(self.line))
        pointer = " " * (self.column - 1) + "^" * width
        return "\n".join(
            [
                self.message,
                location,
                f" {gutter} |",
                f" {self.line} | {source_line}",
                f" {gutter} | {pointer}",
            ]
        )

    def to_detail(self) -> dict[str, Any]:
        """Structured payload for ServiceError.detail."""
        return {
            "source": self.source_name,
            "line": self.line,
            "column": self.column,
            "offset": self.span.offset,
            "length": self.span.length,
            "help": self.help,
        }


class StructuralError(ConfigError):
    """Wrong focus kind, missing children block, or empty required block."""

    code = "STRUCTURAL"


class MissingRequiredError(ConfigError):
    """A required directive, property, or positional argument is absent."""

    code = "MISSING_REQUIRED"


class UnknownDirectiveError(ConfigError):
    """A block holds a directive no schema entry consumed."""

    code = "UNKNOWN_DIRECTIVE"


class UnknownKeyError(ConfigError):
    """A named entry's key is not in the allow-list."""

    code = "UNKNOWN_KEY"


class TypeMismatchError(ConfigError):
    """An entry's scalar kind differs from the expected kind."""

    code = "TYPE_MISMATCH"


class FormatError(ConfigError):
    """An entry's text failed a target-type-specific parse."""

    code = "FORMAT"


class MutualExclusionError(ConfigError):
    """A cross-field dependency between options is violated."""

    code = "MUTUAL_EXCLUSION"


class DuplicateNameError(ConfigError):
    """Two named definitions in one document share a name."""

    code = "DUPLICATE_NAME"


class DocumentSyntaxError(ConfigError):
    """The document text is not well-formed."""

    code = "SYNTAX"
