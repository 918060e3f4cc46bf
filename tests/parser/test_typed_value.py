"""Tests for TypedValue coercions."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from proxyconf.diagnostics import FormatError, TypeMismatchError
from proxyconf.domain.names import FQDN
from proxyconf.domain.types import PrimitiveType, UpstreamProto
from proxyconf.parser.context import ParseContext
from proxyconf.parser.typed_value import TypedValue, lossy_text

MakeCtx = Callable[[str], ParseContext]


@pytest.fixture
def value(node_ctx: MakeCtx) -> Callable[[str], TypedValue]:
    """TypedValue for the first entry of a one-node document."""

    def _value(text: str) -> TypedValue:
        return node_ctx(f"n {text}\n").first()

    return _value


class TestKinds:
    @pytest.mark.parametrize(
        ("text", "kind"),
        [
            ('"x"', PrimitiveType.STRING),
            ("5", PrimitiveType.INTEGER),
            ("5.5", PrimitiveType.FLOAT),
            ("#true", PrimitiveType.BOOL),
            ("#null", PrimitiveType.NULL),
        ],
    )
    def test_kind(self, value: Callable[[str], TypedValue], text: str, kind: PrimitiveType) -> None:
        assert value(text).kind is kind


class TestStrictAccessors:
    def test_as_str(self, value: Callable[[str], TypedValue]) -> None:
        assert value('"hello"').as_str() == "hello"
        with pytest.raises(TypeMismatchError) as exc_info:
            value("5").as_str()
        assert exc_info.value.message == "Expected a string value, found Integer(5)"

    def test_as_bool(self, value: Callable[[str], TypedValue]) -> None:
        assert value("#false").as_bool() is False
        with pytest.raises(TypeMismatchError) as exc_info:
            value('"yes"').as_bool()
        assert exc_info.value.message == "Expected a boolean, found String('yes')"

    def test_as_usize(self, value: Callable[[str], TypedValue]) -> None:
        assert value("0").as_usize() == 0
        assert value("42").as_usize() == 42

    @pytest.mark.parametrize(
        ("text", "found"),
        [("-1", "Integer(-1)"), ("#true", "Boolean(true)"), ("1.5", "Float(1.5)"), ("#null", "Null")],
    )
    def test_as_usize_rejects(self, value: Callable[[str], TypedValue], text: str, found: str) -> None:
        with pytest.raises(TypeMismatchError) as exc_info:
            value(text).as_usize()
        assert exc_info.value.message == f"Expected a positive integer, found {found}"

    def test_error_points_at_entry(self, node_ctx: MakeCtx) -> None:
        ctx = node_ctx("node a=1 b=2\n")
        with pytest.raises(TypeMismatchError) as exc_info:
            ctx.prop("b").as_str()
        assert exc_info.value.span == ctx.args()[1].span
        assert exc_info.value.column == 10


class TestLossy:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [('"abc"', "abc"), ("12", "12"), ("2.0", "2"), ("2.5", "2.5"), ("#true", "true"), ("#false", "false")],
    )
    def test_as_string_lossy(self, value: Callable[[str], TypedValue], text: str, expected: str) -> None:
        assert value(text).as_string_lossy() == expected

    def test_null_is_rejected(self, value: Callable[[str], TypedValue]) -> None:
        with pytest.raises(TypeMismatchError, match="Cannot parse 'null' as a string or number"):
            value("#null").as_string_lossy()

    def test_lossy_text_helper(self) -> None:
        assert lossy_text(True) == "true"
        assert lossy_text(-3.0) == "-3"


class TestParseAs:
    def test_from_str_types(self, value: Callable[[str], TypedValue]) -> None:
        parsed = value('"Com.Example."').parse_as(FQDN)
        assert isinstance(parsed, FQDN)
        assert parsed == "Com.Example"

    def test_constructor_fallback(self, value: Callable[[str], TypedValue]) -> None:
        assert value('"12"').parse_as(int) == 12
        assert value('"h2-only"').parse_as(UpstreamProto) is UpstreamProto.H2_ONLY

    def test_numbers_parse_through_text(self, value: Callable[[str], TypedValue]) -> None:
        assert value("8080").parse_as(str) == "8080"

    def test_format_error(self, value: Callable[[str], TypedValue]) -> None:
        with pytest.raises(FormatError) as exc_info:
            value('"invalid name with spaces"').parse_as(FQDN)
        assert exc_info.value.message == (
            "Invalid FQDN 'invalid name with spaces'. Reason: invalid char found in FQDN"
        )

    def test_enum_format_error(self, value: Callable[[str], TypedValue]) -> None:
        with pytest.raises(FormatError) as exc_info:
            value('"h3"').parse_as(UpstreamProto)
        assert exc_info.value.message.startswith("Invalid UpstreamProto 'h3'. Reason:")
