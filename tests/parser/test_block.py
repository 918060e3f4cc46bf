"""Tests for BlockParser closed-schema consumption."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from proxyconf.diagnostics import MissingRequiredError, StructuralError, UnknownDirectiveError
from proxyconf.parser.block import BlockParser
from proxyconf.parser.context import DocumentFocus, ParseContext

MakeCtx = Callable[[str], ParseContext]

BLOCK = """\
settings {
    key "a"
    item 1
    other
    item 2
}
"""


def _first(ctx: ParseContext) -> object:
    return ctx.first().entry.value


class TestClaiming:
    def test_node_context_enters_block(self, node_ctx: MakeCtx) -> None:
        block = BlockParser(node_ctx(BLOCK))
        assert isinstance(block.ctx.current, DocumentFocus)
        assert block.pending == ["key", "item", "other", "item"]

    def test_document_context_used_as_is(self, make_ctx: MakeCtx) -> None:
        block = BlockParser(make_ctx("a\nb\n"))
        assert block.pending == ["a", "b"]

    def test_required_optional_repeated(self, node_ctx: MakeCtx) -> None:
        block = BlockParser(node_ctx(BLOCK))
        assert block.required("key", _first) == "a"
        assert block.optional("missing", _first) is None
        assert block.repeated("item", _first) == [1, 2]
        assert block.optional("other", lambda ctx: ctx.name()) == "other"
        assert block.pending == []
        block.exhaust()

    def test_repeated_none(self, make_ctx: MakeCtx) -> None:
        assert BlockParser(make_ctx("a\n")).repeated("b", _first) == []

    def test_required_takes_first_occurrence(self, node_ctx: MakeCtx) -> None:
        block = BlockParser(node_ctx(BLOCK))
        assert block.required("item", _first) == 1
        assert block.pending == ["key", "other", "item"]


class TestErrors:
    def test_missing_required(self, node_ctx: MakeCtx) -> None:
        with pytest.raises(MissingRequiredError) as exc_info:
            BlockParser(node_ctx(BLOCK)).required("absent", _first)
        assert exc_info.value.message == "Missing required directive 'absent'"

    def test_unknown_directive_points_at_node(self, node_ctx: MakeCtx) -> None:
        block = BlockParser(node_ctx(BLOCK))
        block.required("key", _first)
        block.repeated("item", _first)
        with pytest.raises(UnknownDirectiveError) as exc_info:
            block.exhaust()
        assert exc_info.value.message == "Unknown directive: 'other'"
        assert (exc_info.value.line, exc_info.value.column) == (4, 5)

    def test_no_children_block(self, node_ctx: MakeCtx) -> None:
        with pytest.raises(StructuralError, match="Expected a children block"):
            BlockParser(node_ctx("leaf 1\n"))

    def test_use_after_exhaust(self, make_ctx: MakeCtx) -> None:
        block = BlockParser(make_ctx(""))
        block.exhaust()
        with pytest.raises(StructuralError, match="Block already exhausted"):
            block.optional("a", _first)
        with pytest.raises(StructuralError, match="Block already exhausted"):
            block.exhaust()

    def test_extractor_errors_propagate(self, node_ctx: MakeCtx) -> None:
        block = BlockParser(node_ctx(BLOCK))
        with pytest.raises(MissingRequiredError, match="Missing required first argument"):
            block.required("other", _first)
