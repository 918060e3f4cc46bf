"""TypedValue — deferred, span-aware coercion of one entry.

Every coercion failure points at the entry itself rather than the whole
node, so the caret lands on the offending value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

from proxyconf.diagnostics import FormatError, TypeMismatchError
from proxyconf.domain.types import PrimitiveType, kind_of
from proxyconf.infrastructure.document import Entry

if TYPE_CHECKING:
    from proxyconf.parser.context import ParseContext

T = TypeVar("T")


@runtime_checkable
class FromStr(Protocol):
    """Types that construct themselves from text, raising ValueError on failure."""

    @classmethod
    def from_str(cls, text: str) -> FromStr: ...


def _describe(value: object) -> str:
    kind = kind_of(value)
    if kind is PrimitiveType.NULL:
        return "Null"
    if kind is PrimitiveType.BOOL:
        return f"Boolean({str(value).lower()})"
    return f"{kind}({value!r})"


def lossy_text(value: str | int | float | bool) -> str:
    """Textual form of a non-null scalar, as it would be written in a document."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class TypedValue:
    """A read-only handle to one entry and the context that produced it."""

    ctx: ParseContext
    entry: Entry

    @property
    def kind(self) -> PrimitiveType:
        return kind_of(self.entry.value)

    def _mismatch(self, expected: str) -> TypeMismatchError:
        return self.ctx.error_with_span(  # type: ignore[return-value]
            f"Expected {expected}, found {_describe(self.entry.value)}",
            self.entry.span,
            kind=TypeMismatchError,
        )

    def as_str(self) -> str:
        if self.kind is not PrimitiveType.STRING:
            raise self._mismatch("a string value")
        return self.entry.value  # type: ignore[return-value]

    def as_bool(self) -> bool:
        if self.kind is not PrimitiveType.BOOL:
            raise self._mismatch("a boolean")
        return self.entry.value  # type: ignore[return-value]

    def as_usize(self) -> int:
        value = self.entry.value
        if self.kind is not PrimitiveType.INTEGER or value < 0:  # type: ignore[operator]
            raise self._mismatch("a positive integer")
        return value  # type: ignore[return-value]

    def as_string_lossy(self) -> str:
        """String, number, or boolean rendered as text; null is an error."""
        if self.entry.value is None:
            raise self.ctx.error_with_span(
                "Cannot parse 'null' as a string or number",
                self.entry.span,
                kind=TypeMismatchError,
            )
        return lossy_text(self.entry.value)

    def parse_as(self, target: type[T]) -> T:
        """Construct *target* from the lossy string form of the value.

        Uses ``target.from_str(text)`` when available, otherwise
        ``target(text)``. A ``ValueError``/``TypeError`` becomes a
        FormatError naming the type, the raw text, and the reason.
        """
        raw = self.as_string_lossy()
        try:
            if isinstance(target, type) and issubclass(target, FromStr):
                return target.from_str(raw)  # type: ignore[return-value]
            return target(raw)  # type: ignore[call-arg]
        except (ValueError, TypeError) as exc:
            raise self.ctx.error_with_span(
                f"Invalid {target.__name__} '{raw}'. Reason: {exc}",
                self.entry.span,
                kind=FormatError,
            ) from exc
