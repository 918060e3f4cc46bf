"""Read KDL-style text into a :class:`Document` with source spans.

Supports the subset of KDL that configuration files use:

- nodes with positional values, ``key=value`` properties and ``{ ... }`` blocks
- quoted strings with escapes, raw strings (``r#"..."#`` and ``#"..."#``)
- decimal, hex (``0x``), octal (``0o``) and binary (``0b``) numbers
- ``true``/``false``/``null`` in both v1 and v2 (``#true``) spellings,
  bare identifiers as string values
- ``//`` and nested ``/* */`` comments, ``/-`` slashdash, ``\\`` line
  continuations, and ``(type)`` annotations (parsed and ignored)

Node names are read verbatim, so ``127.0.0.1:8080 { ... }`` is accepted
without quoting.
"""

from __future__ import annotations

import logging
import re

from proxyconf.diagnostics import DocumentSyntaxError
from proxyconf.infrastructure.document import Document, Entry, Node, Scalar, Span

logger = logging.getLogger(__name__)

_NEWLINES = "\n\r\x0c\x85\u2028\u2029"
_INLINE_SPACE = " \t\ufeff\u00a0\u1680\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a\u202f\u205f\u3000"
_NON_IDENTIFIER = set('\\/(){}<>;[]=,"') | set(_NEWLINES) | set(_INLINE_SPACE)

_RAW_STRING_START = re.compile(r'r?(#*)"')
_DECIMAL = re.compile(r"[+-]?[0-9][0-9_]*(\.[0-9][0-9_]*)?([eE][+-]?[0-9][0-9_]*)?")
_RADIX = re.compile(r"([+-]?)0([xob])([0-9a-fA-F][0-9a-fA-F_]*)")
_RADIX_BASES = {"x": 16, "o": 8, "b": 2}
_MAX_DEPTH = 128

_KEYWORDS: dict[str, Scalar] = {
    "true": True,
    "false": False,
    "null": None,
    "#true": True,
    "#false": False,
    "#null": None,
    "#inf": float("inf"),
    "#-inf": float("-inf"),
    "#nan": float("nan"),
}

_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "\\": "\\",
    '"': '"',
    "/": "/",
    "b": "\b",
    "f": "\f",
    "s": " ",
}


def parse_document(text: str, source_name: str = "<string>") -> Document:
    """Parse *text* into a root Document that keeps the source text.

    Raises:
        DocumentSyntaxError: The text is not well-formed.
    """
    reader = _Reader(text, source_name)
    nodes = reader.read_nodes(nested=False)
    logger.debug("Read %d top-level nodes from %s", len(nodes), source_name)
    return Document(nodes=tuple(nodes), span=Span(0, len(text)), text=text)


class _Reader:
    """Single-pass recursive-descent reader over the raw text."""

    def __init__(self, text: str, source_name: str) -> None:
        self.text = text
        self.source_name = source_name
        self.pos = 0
        self.depth = 0

    # ------------------------------------------------------------------
    # Cursor helpers
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        return self.text[index] if index < len(self.text) else ""

    def _at(self, literal: str) -> bool:
        return self.text.startswith(literal, self.pos)

    def _eof(self) -> bool:
        return self.pos >= len(self.text)

    def _error(self, message: str, start: int | None = None, length: int = 1) -> DocumentSyntaxError:
        offset = self.pos if start is None else start
        return DocumentSyntaxError(
            message,
            span=Span(offset, length),
            source_name=self.source_name,
            source_text=self.text,
        )

    # ------------------------------------------------------------------
    # Whitespace and comments
    # ------------------------------------------------------------------

    def _skip_block_comment(self) -> None:
        start = self.pos
        depth = 0
        while True:
            if self._at("/*"):
                depth += 1
                self.pos += 2
            elif self._at("*/"):
                depth -= 1
                self.pos += 2
                if depth == 0:
                    return
            elif self._eof():
                raise self._error("Unterminated block comment", start, 2)
            else:
                self.pos += 1

    def _skip_to_line_end(self) -> None:
        while not self._eof() and self._peek() not in _NEWLINES:
            self.pos += 1

    def _consume_newline(self) -> bool:
        if self._at("\r\n"):
            self.pos += 2
            return True
        if self._peek() and self._peek() in _NEWLINES:
            self.pos += 1
            return True
        return False

    def _skip_inline(self) -> bool:
        """Skip spaces, block comments and line continuations on one line."""
        start = self.pos
        while not self._eof():
            char = self._peek()
            if char in _INLINE_SPACE:
                self.pos += 1
            elif self._at("/*"):
                self._skip_block_comment()
            elif char == "\\":
                escape_at = self.pos
                self.pos += 1
                while self._peek() and self._peek() in _INLINE_SPACE:
                    self.pos += 1
                if self._at("//"):
                    self._skip_to_line_end()
                if not self._consume_newline() and not self._eof():
                    raise self._error("Expected a newline after line continuation", escape_at)
            else:
                break
        return self.pos > start

    def _skip_line_space(self) -> None:
        """Skip everything that may separate two nodes."""
        while not self._eof():
            if self._skip_inline():
                continue
            if self._consume_newline():
                continue
            if self._at("//"):
                self._skip_to_line_end()
            elif self._peek() == ";":
                self.pos += 1
            else:
                break

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def read_nodes(self, *, nested: bool) -> list[Node]:
        nodes: list[Node] = []
        while True:
            self._skip_line_space()
            if self._eof() or (nested and self._peek() == "}"):
                return nodes
            if self._peek() == "}":
                raise self._error("Unexpected '}' outside of a children block")
            discarded = False
            if self._at("/-"):
                self.pos += 2
                self._skip_line_space()
                discarded = True
            node = self._read_node()
            if not discarded:
                nodes.append(node)

    def _read_node(self) -> Node:
        start = self.pos
        self._skip_annotation()
        name_at = self.pos
        name = self._read_name()
        name_span = Span(name_at, self.pos - name_at)
        end = self.pos
        entries: list[Entry] = []
        children: Document | None = None

        while True:
            spaced = self._skip_inline()
            char = self._peek()
            if self._eof() or char in _NEWLINES or char in ";}":
                break
            if self._at("//"):
                self._skip_to_line_end()
                break
            if self._at("/-"):
                self.pos += 2
                self._skip_inline()
                if self._peek() == "{":
                    self._read_children()
                else:
                    self._read_entry()
                end = self.pos
                continue
            if char == "{":
                children = self._read_children()
                end = self.pos
                self._skip_inline()
                if self._at("//"):
                    self._skip_to_line_end()
                if not (self._eof() or self._peek() in _NEWLINES or self._peek() in ";}"):
                    raise self._error("Expected end of node after children block")
                break
            if not spaced:
                raise self._error("Expected whitespace before node entry")
            entries.append(self._read_entry())
            end = self.pos

        if self._peek() == ";":
            self.pos += 1
        return Node(
            name=name,
            span=Span(start, end - start),
            entries=tuple(entries),
            children=children,
            name_span=name_span,
        )

    def _read_children(self) -> Document:
        open_at = self.pos
        if self.depth >= _MAX_DEPTH:
            raise self._error("Children blocks nested too deeply", open_at)
        self.depth += 1
        self.pos += 1
        nodes = self.read_nodes(nested=True)
        if self._peek() != "}":
            raise self._error("Unclosed children block", open_at)
        self.pos += 1
        self.depth -= 1
        return Document(nodes=tuple(nodes), span=Span(open_at, self.pos - open_at))

    def _read_name(self) -> str:
        if self._is_string_start():
            return self._read_string()
        token = self._read_bare()
        if not token:
            raise self._error("Expected a node name")
        return token

    # ------------------------------------------------------------------
    # Entries and values
    # ------------------------------------------------------------------

    def _read_entry(self) -> Entry:
        start = self.pos
        self._skip_annotation()
        if self._is_string_start():
            text = self._read_string()
            if self._peek() == "=":
                self.pos += 1
                value = self._read_value()
                return Entry(value=value, name=text, span=Span(start, self.pos - start))
            return Entry(value=text, span=Span(start, self.pos - start))

        token_at = self.pos
        token = self._read_bare()
        if not token:
            raise self._error(f"Unexpected character {self._peek()!r}")
        if self._peek() == "=":
            self.pos += 1
            value = self._read_value()
            return Entry(value=value, name=token, span=Span(start, self.pos - start))
        value = self._interpret(token, token_at)
        return Entry(value=value, span=Span(start, self.pos - start))

    def _read_value(self) -> Scalar:
        self._skip_annotation()
        if self._is_string_start():
            return self._read_string()
        token_at = self.pos
        token = self._read_bare()
        if not token:
            raise self._error("Expected a value after '='")
        return self._interpret(token, token_at)

    def _interpret(self, token: str, start: int) -> Scalar:
        if token in _KEYWORDS:
            return _KEYWORDS[token]
        radix = _RADIX.fullmatch(token)
        if radix:
            sign, base, digits = radix.groups()
            try:
                number = int(digits.replace("_", ""), _RADIX_BASES[base])
            except ValueError:
                raise self._error(f"Invalid number literal '{token}'", start, len(token)) from None
            return -number if sign == "-" else number
        decimal = _DECIMAL.fullmatch(token)
        if decimal:
            cleaned = token.replace("_", "")
            if decimal.group(1) or decimal.group(2):
                return float(cleaned)
            return int(cleaned)
        if token[0].isdigit() or (token[0] in "+-." and token[1:2].isdigit()):
            raise self._error(f"Invalid number literal '{token}'", start, len(token))
        if token.startswith("#"):
            raise self._error(f"Unknown keyword '{token}'", start, len(token))
        return token

    def _read_bare(self) -> str:
        start = self.pos
        while not self._eof() and self._peek() not in _NON_IDENTIFIER:
            self.pos += 1
        return self.text[start : self.pos]

    def _skip_annotation(self) -> None:
        if self._peek() != "(":
            return
        open_at = self.pos
        self.pos += 1
        if self._is_string_start():
            self._read_string()
        else:
            self._read_bare()
        if self._peek() != ")":
            raise self._error("Unclosed type annotation", open_at)
        self.pos += 1

    # ------------------------------------------------------------------
    # Strings
    # ------------------------------------------------------------------

    def _is_string_start(self) -> bool:
        if self._peek() == '"':
            return True
        match = _RAW_STRING_START.match(self.text, self.pos)
        return match is not None and (self._peek() == "r" or bool(match.group(1)))

    def _read_string(self) -> str:
        if self._peek() != '"':
            return self._read_raw_string()
        start = self.pos
        self.pos += 1
        chars: list[str] = []
        while True:
            if self._eof():
                raise self._error("Unterminated string", start)
            char = self._peek()
            if char == '"':
                self.pos += 1
                return "".join(chars)
            if char == "\\":
                chars.append(self._read_escape())
                continue
            chars.append(char)
            self.pos += 1

    def _read_escape(self) -> str:
        escape_at = self.pos
        self.pos += 1
        code = self._peek()
        if code in _ESCAPES:
            self.pos += 1
            return _ESCAPES[code]
        if code == "u" and self._peek(1) == "{":
            close = self.text.find("}", self.pos)
            digits = self.text[self.pos + 2 : close] if close != -1 else ""
            if not digits or len(digits) > 6 or not all(c in "0123456789abcdefABCDEF" for c in digits):
                raise self._error("Invalid unicode escape", escape_at, 2)
            code_point = int(digits, 16)
            if code_point > 0x10FFFF or 0xD800 <= code_point <= 0xDFFF:
                raise self._error("Invalid unicode escape", escape_at, 2)
            self.pos = close + 1
            return chr(code_point)
        raise self._error(f"Invalid escape sequence '\\{code}'", escape_at, 2)

    def _read_raw_string(self) -> str:
        start = self.pos
        match = _RAW_STRING_START.match(self.text, self.pos)
        assert match is not None
        terminator = '"' + match.group(1)
        self.pos = match.end()
        close = self.text.find(terminator, self.pos)
        if close == -1:
            raise self._error("Unterminated raw string", start)
        value = self.text[self.pos : close]
        self.pos = close + len(terminator)
        return value
