"""Declarative structural rules checked before extraction.

Usage::

    ctx.validate([
        NoChildren(),
        NoPositionalArgs(),
        OnlyKeysTyped({"cert-path": PrimitiveType.STRING}),
        Name(NamePredicate.SOCKET_ADDR),
    ])

Rules are independent of each other; ``validate`` stops at the first one
that fails.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

from proxyconf.diagnostics import (
    FormatError,
    StructuralError,
    TypeMismatchError,
    UnknownKeyError,
)
from proxyconf.domain.names import FQDN, SocketAddress
from proxyconf.domain.types import PrimitiveType, kind_of

if TYPE_CHECKING:
    from proxyconf.parser.context import ParseContext


class Rule(Protocol):
    def check(self, ctx: ParseContext) -> None: ...


@dataclass(frozen=True)
class NoChildren:
    """The node must not have a ``{ ... }`` block."""

    def check(self, ctx: ParseContext) -> None:
        if ctx.has_children_block():
            raise ctx.error(
                f"Directive '{ctx.name()}' does not accept a children block",
                kind=StructuralError,
            )


@dataclass(frozen=True)
class NoPositionalArgs:
    """Every entry must be ``key=value``."""

    def check(self, ctx: ParseContext) -> None:
        for entry in ctx.args():
            if entry.is_positional:
                raise ctx.error_with_span(
                    f"Directive '{ctx.name()}' does not accept positional arguments",
                    entry.span,
                    kind=StructuralError,
                )


@dataclass(frozen=True)
class OnlyKeysTyped:
    """Named entries must use an allowed key and that key's scalar kind."""

    allowed: Mapping[str, PrimitiveType] = field(default_factory=dict)

    def check(self, ctx: ParseContext) -> None:
        for entry in ctx.args():
            if entry.name is None:
                continue
            expected = self.allowed.get(entry.name)
            if expected is None:
                raise ctx.error_with_span(
                    f"Unknown configuration key: '{entry.name}'. "
                    f"Allowed keys are: {list(self.allowed)}",
                    entry.span,
                    kind=UnknownKeyError,
                )
            found = kind_of(entry.value)
            if found is not expected:
                raise ctx.error_with_span(
                    f"Key '{entry.name}' expects {expected}, found {found}",
                    entry.span,
                    kind=TypeMismatchError,
                )


class NamePredicate(StrEnum):
    """Checks on the literal text of a node's name."""

    SOCKET_ADDR = "socket address"
    FQDN = "qualified name"

    def test(self, name: str) -> bool:
        parser = SocketAddress if self is NamePredicate.SOCKET_ADDR else FQDN
        try:
            parser.from_str(name)
        except ValueError:
            return False
        return True


@dataclass(frozen=True)
class Name:
    """The node's name itself must satisfy *predicate*."""

    predicate: NamePredicate

    def check(self, ctx: ParseContext) -> None:
        name = ctx.name()
        if not self.predicate.test(name):
            raise ctx.error(
                f"Node name '{name}' is not a valid {self.predicate}", kind=FormatError
            )
