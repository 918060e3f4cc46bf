"""The contract every section parser implements."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar

if TYPE_CHECKING:
    from proxyconf.parser.context import ParseContext

T_co = TypeVar("T_co", covariant=True)


class SectionParser(Protocol[T_co]):
    """Turns a context into one typed configuration value.

    Implementations raise a :class:`~proxyconf.diagnostics.ConfigError`
    on the first problem they find.
    """

    def parse(self, ctx: ParseContext) -> T_co: ...
