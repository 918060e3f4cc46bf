"""Tests for the filter chain schema."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from proxyconf.diagnostics import (
    FormatError,
    MissingRequiredError,
    StructuralError,
    UnknownDirectiveError,
)
from proxyconf.domain.models import ConfiguredFilter, FilterChain
from proxyconf.parser.context import ParseContext
from proxyconf.sections.chain import ChainParser

MakeCtx = Callable[[str], ParseContext]


class TestChainParser:
    def test_two_filters(self, make_ctx: MakeCtx) -> None:
        chain = ChainParser().parse(
            make_ctx(
                """\
filter name="com.example.auth"
filter name="com.example.logger" level="debug" format="json"
"""
            )
        )
        assert chain == FilterChain(
            filters=[
                ConfiguredFilter(name="com.example.auth", args={}),
                ConfiguredFilter(
                    name="com.example.logger", args={"level": "debug", "format": "json"}
                ),
            ]
        )

    def test_empty_chain(self, make_ctx: MakeCtx) -> None:
        assert ChainParser().parse(make_ctx("")) == FilterChain(filters=[])

    def test_node_context(self, node_ctx: MakeCtx) -> None:
        chain = ChainParser().parse(node_ctx('chain-filters "x" {\n    filter name="a.b"\n}\n'))
        assert [f.name for f in chain.filters] == ["a.b"]

    def test_name_position_does_not_matter(self, make_ctx: MakeCtx) -> None:
        chain = ChainParser().parse(make_ctx('filter retries=3 name="a.b" strict=#true\n'))
        assert chain.filters[0].args == {"retries": "3", "strict": "true"}

    def test_invalid_filter_name(self, make_ctx: MakeCtx) -> None:
        with pytest.raises(FormatError) as exc_info:
            ChainParser().parse(make_ctx('filter name="invalid name with spaces"\n'))
        assert exc_info.value.message.startswith("Invalid FQDN 'invalid name with spaces'")

    def test_unknown_directive(self, make_ctx: MakeCtx) -> None:
        with pytest.raises(UnknownDirectiveError) as exc_info:
            ChainParser().parse(make_ctx('filter name="a.b"\nnot-filter name="bad.one"\n'))
        assert exc_info.value.message == "Unknown directive: 'not-filter'"
        assert exc_info.value.line == 2

    def test_missing_name(self, make_ctx: MakeCtx) -> None:
        with pytest.raises(MissingRequiredError) as exc_info:
            ChainParser().parse(make_ctx('filter level="debug"\n'))
        assert exc_info.value.message == "Missing required property 'name'"

    def test_positional_rejected(self, make_ctx: MakeCtx) -> None:
        with pytest.raises(StructuralError, match="does not accept positional arguments"):
            ChainParser().parse(make_ctx('filter "com.example.auth"\n'))
