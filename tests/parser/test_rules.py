"""Tests for declarative structural rules."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from proxyconf.diagnostics import FormatError, StructuralError, TypeMismatchError, UnknownKeyError
from proxyconf.domain.types import PrimitiveType
from proxyconf.parser.context import ParseContext
from proxyconf.parser.rules import Name, NamePredicate, NoChildren, NoPositionalArgs, OnlyKeysTyped

MakeCtx = Callable[[str], ParseContext]

TLS_KEYS = OnlyKeysTyped(
    {
        "cert-path": PrimitiveType.STRING,
        "offer-h2": PrimitiveType.BOOL,
    }
)


class TestNoChildren:
    def test_passes(self, node_ctx: MakeCtx) -> None:
        node_ctx("n a=1\n").validate([NoChildren()])

    def test_empty_block_counts(self, node_ctx: MakeCtx) -> None:
        with pytest.raises(StructuralError) as exc_info:
            node_ctx("n {}\n").validate([NoChildren()])
        assert exc_info.value.message == "Directive 'n' does not accept a children block"


class TestNoPositionalArgs:
    def test_points_at_first_positional(self, node_ctx: MakeCtx) -> None:
        ctx = node_ctx('n a=1 "oops" "again"\n')
        with pytest.raises(StructuralError) as exc_info:
            ctx.validate([NoPositionalArgs()])
        assert exc_info.value.message == "Directive 'n' does not accept positional arguments"
        assert exc_info.value.span == ctx.args()[1].span


class TestOnlyKeysTyped:
    def test_passes(self, node_ctx: MakeCtx) -> None:
        node_ctx('n cert-path="c" offer-h2=#true\n').validate([TLS_KEYS])

    def test_positional_entries_are_ignored(self, node_ctx: MakeCtx) -> None:
        node_ctx('n "positional"\n').validate([TLS_KEYS])

    def test_unknown_key(self, node_ctx: MakeCtx) -> None:
        with pytest.raises(UnknownKeyError) as exc_info:
            node_ctx('n cert="c"\n').validate([TLS_KEYS])
        assert exc_info.value.message == (
            "Unknown configuration key: 'cert'. Allowed keys are: ['cert-path', 'offer-h2']"
        )

    def test_wrong_kind(self, node_ctx: MakeCtx) -> None:
        ctx = node_ctx('n cert-path="c" offer-h2="yes"\n')
        with pytest.raises(TypeMismatchError) as exc_info:
            ctx.validate([TLS_KEYS])
        assert exc_info.value.message == "Key 'offer-h2' expects Boolean, found String"
        assert exc_info.value.span == ctx.args()[1].span


class TestName:
    @pytest.mark.parametrize(
        ("predicate", "name", "ok"),
        [
            (NamePredicate.SOCKET_ADDR, "127.0.0.1:80", True),
            (NamePredicate.SOCKET_ADDR, "[::1]:443", True),
            (NamePredicate.SOCKET_ADDR, "localhost:80", False),
            (NamePredicate.FQDN, "com.example.auth", True),
            (NamePredicate.FQDN, "bad..name", False),
        ],
    )
    def test_predicate(self, predicate: NamePredicate, name: str, ok: bool) -> None:
        assert predicate.test(name) is ok

    def test_violation(self, node_ctx: MakeCtx) -> None:
        with pytest.raises(FormatError) as exc_info:
            node_ctx("localhost:80\n").validate([Name(NamePredicate.SOCKET_ADDR)])
        assert exc_info.value.message == "Node name 'localhost:80' is not a valid socket address"


class TestValidate:
    def test_first_violation_wins(self, node_ctx: MakeCtx) -> None:
        ctx = node_ctx('n "pos" bad=1 {}\n')
        with pytest.raises(StructuralError, match="children block"):
            ctx.validate([NoChildren(), NoPositionalArgs(), TLS_KEYS])
        with pytest.raises(UnknownKeyError):
            ctx.validate([TLS_KEYS, NoPositionalArgs()])

    def test_empty_rule_list(self, node_ctx: MakeCtx) -> None:
        node_ctx('n "anything" goes=1 {}\n').validate([])
