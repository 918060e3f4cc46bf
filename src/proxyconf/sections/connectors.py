"""``connectors`` section — upstreams a service proxies to.

::

    connectors {
        load-balance selection="ketama" key="uri-path"
        upstream "10.0.0.1:443" tls-sni="api.example.com" proto="h2-or-h1"
        upstream "10.0.0.2:8080"
    }

At least one ``upstream`` is required. ``load-balance`` is optional and
defaults to round-robin.
"""

from __future__ import annotations

import logging

from proxyconf.diagnostics import MissingRequiredError, MutualExclusionError, StructuralError
from proxyconf.domain.models import Connectors, LoadBalanceConfig, UpstreamConfig
from proxyconf.domain.names import SocketAddress
from proxyconf.domain.types import PrimitiveType, SelectionKind, UpstreamProto
from proxyconf.parser.block import BlockParser
from proxyconf.parser.context import ParseContext
from proxyconf.parser.rules import NoChildren, NoPositionalArgs, OnlyKeysTyped

logger = logging.getLogger(__name__)


class ConnectorsSection:
    """Parses a ``connectors`` node into :class:`Connectors`."""

    def parse(self, ctx: ParseContext) -> Connectors:
        ctx.expect_name("connectors")
        block = BlockParser(ctx)
        load_balance = block.optional("load-balance", self.extract_load_balance)
        upstreams = block.repeated("upstream", self.extract_upstream)
        if not upstreams:
            raise block.ctx.error(
                "Missing required directive 'upstream'", kind=MissingRequiredError
            )
        block.exhaust()
        logger.debug("Parsed %d upstreams", len(upstreams))
        return Connectors(upstreams=upstreams, load_balance=load_balance)

    def extract_upstream(self, ctx: ParseContext) -> UpstreamConfig:
        ctx.validate(
            [
                NoChildren(),
                OnlyKeysTyped({"tls-sni": PrimitiveType.STRING, "proto": PrimitiveType.STRING}),
            ]
        )
        positional = [entry for entry in ctx.args() if entry.is_positional]
        if len(positional) > 1:
            raise ctx.error_with_span(
                "'upstream' takes exactly one address", positional[1].span, kind=StructuralError
            )
        addr = ctx.arg(0).parse_as(SocketAddress)

        sni, proto_value = ctx.props("tls-sni", "proto")
        tls_sni = sni.as_str() if sni else None
        proto = proto_value.parse_as(UpstreamProto) if proto_value else UpstreamProto.H1_ONLY

        if proto is not UpstreamProto.H1_ONLY and tls_sni is None:
            raise ctx.error(
                f"proto '{proto}' requires TLS, specify 'tls-sni'", kind=MutualExclusionError
            )
        return UpstreamConfig(addr=addr, tls_sni=tls_sni, proto=proto)

    def extract_load_balance(self, ctx: ParseContext) -> LoadBalanceConfig:
        ctx.validate(
            [
                NoChildren(),
                NoPositionalArgs(),
                OnlyKeysTyped({"selection": PrimitiveType.STRING, "key": PrimitiveType.STRING}),
            ]
        )
        selection_value, key_value = ctx.props("selection", "key")
        selection = (
            selection_value.parse_as(SelectionKind)
            if selection_value
            else SelectionKind.ROUND_ROBIN
        )
        key = key_value.as_str() if key_value else None

        if selection.is_hashing and key is None:
            raise ctx.error(
                f"selection '{selection}' hashes requests, specify 'key'",
                kind=MutualExclusionError,
            )
        if key is not None and not selection.is_hashing:
            raise ctx.error(
                f"'key' is only used by hashing selections, not '{selection}'",
                kind=MutualExclusionError,
            )
        return LoadBalanceConfig(selection=selection, key=key)
