"""Neutral view over a parsed configuration document.

A Document is an ordered list of nodes. A Node has a name, an ordered list
of entries (positional or ``key=value``), and an optional child block which
is itself a Document. Every element carries the span of source text it was
read from so diagnostics can point at it.

INVARIANT: the tree is immutable once built. Parse contexts hold plain
references into it and never copy it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

Scalar = str | int | float | bool | None


@dataclass(frozen=True)
class Span:
    """A ``[offset, offset + length)`` range of characters in the source text."""

    offset: int
    length: int = 0

    @property
    def end(self) -> int:
        return self.offset + self.length


@dataclass(frozen=True)
class Entry:
    """One scalar argument of a node.

    ``name`` is None for positional arguments.
    """

    value: Scalar
    span: Span
    name: str | None = None

    @property
    def is_positional(self) -> bool:
        return self.name is None


@dataclass(frozen=True)
class Node:
    """A named directive with entries and an optional child block.

    ``name_span`` covers the name token as written, quotes included.
    """

    name: str
    span: Span
    entries: tuple[Entry, ...] = ()
    children: Document | None = None
    name_span: Span = field(default_factory=lambda: Span(0))


@dataclass(frozen=True)
class Document:
    """An ordered list of nodes.

    The root document keeps the full source ``text``; nested child blocks
    leave it empty.
    """

    nodes: tuple[Node, ...] = ()
    span: Span = field(default_factory=lambda: Span(0))
    text: str = ""
