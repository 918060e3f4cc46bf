"""Document root schema.

::

    services {
        api-gateway {
            listeners { ... }
            connectors { ... }
        }
    }

    definitions {
        chain-filters "auth" {
            filter name="com.example.auth"
        }
        key-profile "by-path" {
            key "${uri_path}"
        }
    }

``services`` is required and must hold at least one service. Names must be
unique within a document.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TypeVar

from proxyconf.diagnostics import DuplicateNameError, StructuralError
from proxyconf.domain.models import (
    ConfigBundle,
    Connectors,
    FilterChain,
    KeyTemplateConfig,
    Listeners,
    ProxyConfig,
)
from proxyconf.infrastructure.document import Document
from proxyconf.parser.block import BlockParser
from proxyconf.parser.context import ParseContext
from proxyconf.sections.base import SectionParser
from proxyconf.sections.chain import ChainParser
from proxyconf.sections.connectors import ConnectorsSection
from proxyconf.sections.key_profile import KeyProfileParser
from proxyconf.sections.listeners import ListenersSection
from proxyconf.sections.service import ServiceSection

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RootParser:
    """Parses a whole document into a :class:`ConfigBundle`."""

    def __init__(
        self,
        listeners: SectionParser[Listeners] | None = None,
        connectors: SectionParser[Connectors] | None = None,
    ) -> None:
        self.listeners = listeners or ListenersSection()
        self.connectors = connectors or ConnectorsSection()

    def parse(self, ctx: ParseContext) -> ConfigBundle:
        block = BlockParser(ctx)
        services = block.required("services", self.extract_services)
        chains, key_profiles = block.optional("definitions", self.extract_definitions) or ({}, {})
        block.exhaust()
        return ConfigBundle(
            source_name=ctx.source_name,
            services=services,
            chains=chains,
            key_profiles=key_profiles,
        )

    def extract_services(self, ctx: ParseContext) -> list[ProxyConfig]:
        services: list[ProxyConfig] = []
        seen: set[str] = set()
        for service_ctx in ctx.req_nodes():
            name = service_ctx.name()
            if name in seen:
                raise service_ctx.error(
                    f"Duplicate service name '{name}'", kind=DuplicateNameError
                )
            seen.add(name)
            services.append(ServiceSection(self.listeners, self.connectors).parse(service_ctx))
        return services

    def extract_definitions(
        self, ctx: ParseContext
    ) -> tuple[dict[str, FilterChain], dict[str, KeyTemplateConfig]]:
        block = BlockParser(ctx)
        chains = _unique(block.repeated("chain-filters", _named(ChainParser().parse)))
        profiles = _unique(block.repeated("key-profile", _named(KeyProfileParser().parse)))
        block.exhaust()
        return chains, profiles


def _named(parse: Callable[[ParseContext], T]) -> Callable[[ParseContext], tuple[ParseContext, str, T]]:
    """Wrap *parse* for ``directive "name" { ... }`` definitions."""

    def extract(ctx: ParseContext) -> tuple[ParseContext, str, T]:
        for entry in ctx.args():
            if not entry.is_positional:
                raise ctx.error_with_span(
                    f"'{ctx.name()}' takes a positional name, found property '{entry.name}'",
                    entry.span,
                    kind=StructuralError,
                )
        if len(ctx.args()) > 1:
            raise ctx.error_with_span(
                f"'{ctx.name()}' takes exactly one name",
                ctx.args()[1].span,
                kind=StructuralError,
            )
        name = ctx.arg(0).as_str()
        return ctx, name, parse(ctx)

    return extract


def _unique(items: Iterable[tuple[ParseContext, str, T]]) -> dict[str, T]:
    result: dict[str, T] = {}
    for ctx, name, value in items:
        if name in result:
            raise ctx.error(
                f"Duplicate {ctx.name()} definition '{name}'", kind=DuplicateNameError
            )
        result[name] = value
    return result


def parse_config(document: Document, source_name: str) -> ConfigBundle:
    """Parse a root *document* with the default section parsers."""
    bundle = RootParser().parse(ParseContext.root(document, source_name))
    logger.debug(
        "Parsed %s: %d services, %d chains, %d key profiles",
        source_name,
        len(bundle.services),
        len(bundle.chains),
        len(bundle.key_profiles),
    )
    return bundle
