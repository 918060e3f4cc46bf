"""BlockParser — closed-schema consumption of a block's directives.

Section parsers claim directives by name with :meth:`required`,
:meth:`optional`, and :meth:`repeated`, then call :meth:`exhaust`. Any
directive nobody claimed is reported as unknown, so a typo can never be
silently ignored.

Usage::

    block = BlockParser(ctx)
    source = block.required("key", extract_key)
    algorithm = block.optional("algorithm", extract_algorithm)
    block.exhaust()
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from proxyconf.diagnostics import MissingRequiredError, StructuralError, UnknownDirectiveError
from proxyconf.parser.context import NodeFocus, ParseContext

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BlockParser:
    """Tracks which child directives of one block are still unclaimed.

    Accepts a node-focused context (its children block is entered) or a
    document-focused one (used as is). Construction fails if the block
    cannot be entered.
    """

    def __init__(self, ctx: ParseContext) -> None:
        self._ctx = ctx.enter_block() if isinstance(ctx.current, NodeFocus) else ctx
        self._pending: list[ParseContext] = self._ctx.nodes()
        self._exhausted = False

    @property
    def ctx(self) -> ParseContext:
        return self._ctx

    @property
    def pending(self) -> list[str]:
        """Names of the directives not yet claimed, in source order."""
        return [child.name() for child in self._pending]

    def _take(self, name: str) -> ParseContext | None:
        if self._exhausted:
            raise self._ctx.error(
                f"Block already exhausted; cannot claim '{name}'", kind=StructuralError
            )
        for index, child in enumerate(self._pending):
            if child.name() == name:
                return self._pending.pop(index)
        return None

    def required(self, name: str, extract: Callable[[ParseContext], T]) -> T:
        """Claim the first directive called *name*; absence is an error."""
        child = self._take(name)
        if child is None:
            raise self._ctx.error(
                f"Missing required directive '{name}'", kind=MissingRequiredError
            )
        return extract(child)

    def optional(self, name: str, extract: Callable[[ParseContext], T]) -> T | None:
        """Claim the first directive called *name*, or return None."""
        child = self._take(name)
        if child is None:
            return None
        return extract(child)

    def repeated(self, name: str, extract: Callable[[ParseContext], T]) -> list[T]:
        """Claim every directive called *name*, in source order."""
        results: list[T] = []
        while (child := self._take(name)) is not None:
            results.append(extract(child))
        return results

    def exhaust(self) -> None:
        """Finish the block; any unclaimed directive is an error."""
        if self._exhausted:
            raise self._ctx.error("Block already exhausted", kind=StructuralError)
        self._exhausted = True
        if self._pending:
            leftover = self._pending[0]
            raise leftover.error(
                f"Unknown directive: '{leftover.name()}'", kind=UnknownDirectiveError
            )
        logger.debug("Block exhausted cleanly")
