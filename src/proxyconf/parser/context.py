"""ParseContext — a cursor over a parsed document.

A context is focused either on a Document (the root, or a child block) or
on a single Node with its entries. Contexts are frozen and only hold
references into the document tree, so deriving a new one is cheap.

INVARIANT: every node-only accessor fails with StructuralError when the
focus is a Document, never with an unchecked exception.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, TypeVar

from proxyconf.diagnostics import (
    ConfigError,
    MissingRequiredError,
    StructuralError,
    UnknownKeyError,
)
from proxyconf.infrastructure.document import Document, Entry, Node, Span
from proxyconf.parser.typed_value import TypedValue

if TYPE_CHECKING:
    from proxyconf.parser.rules import Rule

T = TypeVar("T")


@dataclass(frozen=True)
class DocumentFocus:
    """Focus on a list of nodes: the document root or a child block."""

    document: Document


@dataclass(frozen=True)
class NodeFocus:
    """Focus on one node and its entries."""

    node: Node
    entries: tuple[Entry, ...]


Focus = DocumentFocus | NodeFocus


@dataclass(frozen=True)
class ParseContext:
    """Where the parser currently is, plus what diagnostics need.

    Attributes:
        doc: The root document (holds the source text for diagnostics).
        source_name: Identifier of the document, used in error labels.
        current: The current focus.
    """

    doc: Document
    source_name: str
    current: Focus

    @classmethod
    def root(cls, doc: Document, source_name: str) -> ParseContext:
        """Create a context focused on the root of *doc*."""
        return cls(doc=doc, source_name=source_name, current=DocumentFocus(doc))

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def enter_block(self) -> ParseContext:
        """Return a document-focused context over the current node's children."""
        if isinstance(self.current, DocumentFocus):
            raise self.error(
                "Cannot enter block: current context is already a document root",
                kind=StructuralError,
            )
        children = self.current.node.children
        if children is None:
            raise self.error(
                "Expected a children block { ... }, but none found", kind=StructuralError
            )
        return replace(self, current=DocumentFocus(children))

    def for_node(self, node: Node) -> ParseContext:
        """Return a context focused on *node*, sharing this document and source."""
        return replace(self, current=NodeFocus(node, node.entries))

    def nodes(self) -> list[ParseContext]:
        """Contexts for each immediate child node, in source order."""
        if isinstance(self.current, DocumentFocus):
            block = self.current.document
        else:
            if self.current.node.children is None:
                raise self.error("Expected children block", kind=StructuralError)
            block = self.current.node.children
        return [self.for_node(node) for node in block.nodes]

    def req_nodes(self) -> list[ParseContext]:
        """Like :meth:`nodes`, but an empty block is an error."""
        nodes = self.nodes()
        if not nodes:
            raise self.error(f"Block '{self.name()}' cannot be empty", kind=StructuralError)
        return nodes

    # ------------------------------------------------------------------
    # Node introspection
    # ------------------------------------------------------------------

    def _node_focus(self) -> NodeFocus:
        if isinstance(self.current, DocumentFocus):
            raise self.error("Expected node, but current is a document", kind=StructuralError)
        return self.current

    def name(self) -> str:
        """Name of the current node (``server`` in ``server "localhost"``)."""
        return self._node_focus().node.name

    def expect_name(self, expected: str) -> None:
        """Fail unless the current node is named *expected*."""
        if isinstance(self.current, DocumentFocus):
            raise self.error(
                f"Expected node '{expected}', but current is a document", kind=StructuralError
            )
        actual = self.current.node.name
        if actual != expected:
            raise self.error(f"Expected '{expected}', found '{actual}'", kind=StructuralError)

    def has_children_block(self) -> bool:
        return self._node_focus().node.children is not None

    def parse_name(self, target: type[T]) -> T:
        """Construct *target* from the node's name via the ``parse_as`` path."""
        node = self._node_focus().node
        name_entry = Entry(value=node.name, span=node.name_span)
        return TypedValue(self, name_entry).parse_as(target)

    def validate(self, rules: Iterable[Rule]) -> None:
        """Check *rules* in order; the first violation is raised."""
        for rule in rules:
            rule.check(self)

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    def args(self) -> tuple[Entry, ...]:
        """All entries of the current node, positional and named."""
        return self._node_focus().entries

    def args_map(self, start: int = 0, stop: int | None = None) -> dict[str, str]:
        """Named entries within ``args()[start:stop]`` as a key → string map.

        Positional entries are skipped. Non-string values use their lossy
        string form; if a key repeats, its first occurrence wins.
        """
        entries = self.args()
        end = len(entries) if stop is None else stop
        if not 0 <= start <= end <= len(entries):
            raise self.error("Range out of bounds", kind=StructuralError)

        mapping: dict[str, str] = {}
        for entry in entries[start:end]:
            if entry.name is None or entry.name in mapping:
                continue
            mapping[entry.name] = TypedValue(self, entry).as_string_lossy()
        return mapping

    def args_map_with_only_keys(
        self, start: int = 0, stop: int | None = None, *, allowed: Sequence[str]
    ) -> dict[str, str]:
        """:meth:`args_map`, failing on any key outside *allowed*."""
        mapping = self.args_map(start, stop)
        for key in mapping:
            if key not in allowed:
                raise self.error(
                    f"Unknown configuration key: '{key}'. Allowed keys are: {list(allowed)}",
                    kind=UnknownKeyError,
                )
        return mapping

    def first(self) -> TypedValue:
        """The first entry of any kind."""
        entries = self.args()
        if not entries:
            raise self.error("Missing required first argument", kind=MissingRequiredError)
        return TypedValue(self, entries[0])

    def arg(self, index: int) -> TypedValue:
        """The *index*-th positional entry (0-based)."""
        positional = [entry for entry in self.args() if entry.is_positional]
        if not 0 <= index < len(positional):
            raise self.error(
                f"Missing required argument at position {index + 1}",
                kind=MissingRequiredError,
            )
        return TypedValue(self, positional[index])

    def opt_prop(self, key: str) -> TypedValue | None:
        """The first named entry called *key*, or None."""
        for entry in self.args():
            if entry.name == key:
                return TypedValue(self, entry)
        return None

    def prop(self, key: str) -> TypedValue:
        """The first named entry called *key*; missing is an error."""
        value = self.opt_prop(key)
        if value is None:
            raise self.error(f"Missing required property '{key}'", kind=MissingRequiredError)
        return value

    def props(self, *keys: str) -> tuple[TypedValue | None, ...]:
        """:meth:`opt_prop` for several keys at once, in order."""
        return tuple(self.opt_prop(key) for key in keys)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def current_span(self) -> Span:
        if isinstance(self.current, DocumentFocus):
            return self.current.document.span
        return self.current.node.span

    def error(self, message: str, *, kind: type[ConfigError] = ConfigError) -> ConfigError:
        """Build (not raise) a *kind* error anchored at the current span."""
        return self.error_with_span(message, self.current_span(), kind=kind)

    def error_with_span(
        self, message: str, span: Span, *, kind: type[ConfigError] = ConfigError
    ) -> ConfigError:
        """Build (not raise) a *kind* error anchored at an arbitrary *span*."""
        return kind(
            message,
            span=span,
            source_name=self.source_name,
            source_text=self.doc.text,
        )
