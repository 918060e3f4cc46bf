"""``listeners`` section — where a service accepts connections.

::

    listeners {
        "0.0.0.0:80"
        "0.0.0.0:443" cert-path="./cert.pem" key-path="./key.pem" offer-h2=#true
    }

Each child is named by its socket address. TLS is enabled by giving both
``cert-path`` and ``key-path``; HTTP/2 is only offered over TLS and is on
by default there.
"""

from __future__ import annotations

import logging
from pathlib import Path

from proxyconf.diagnostics import MutualExclusionError
from proxyconf.domain.models import ListenerConfig, Listeners, TcpListener, TlsConfig
from proxyconf.domain.names import SocketAddress
from proxyconf.domain.types import PrimitiveType
from proxyconf.parser.context import ParseContext
from proxyconf.parser.rules import Name, NamePredicate, NoChildren, NoPositionalArgs, OnlyKeysTyped

logger = logging.getLogger(__name__)

LISTENER_KEYS = OnlyKeysTyped(
    {
        "cert-path": PrimitiveType.STRING,
        "key-path": PrimitiveType.STRING,
        "offer-h2": PrimitiveType.BOOL,
    }
)


class ListenersSection:
    """Parses a ``listeners`` node into :class:`Listeners`."""

    def parse(self, ctx: ParseContext) -> Listeners:
        ctx.expect_name("listeners")
        listeners = [self.extract_listener(node_ctx) for node_ctx in ctx.req_nodes()]
        logger.debug("Parsed %d listeners", len(listeners))
        return Listeners(listeners=listeners)

    def extract_listener(self, ctx: ParseContext) -> ListenerConfig:
        ctx.validate(
            [
                NoChildren(),
                NoPositionalArgs(),
                LISTENER_KEYS,
                Name(NamePredicate.SOCKET_ADDR),
            ]
        )
        addr = ctx.parse_name(SocketAddress)
        cert, key, h2 = ctx.props("cert-path", "key-path", "offer-h2")
        return self.resolve_tcp_listener(
            ctx,
            addr,
            cert_path=cert.as_str() if cert else None,
            key_path=key.as_str() if key else None,
            offer_h2=h2.as_bool() if h2 else None,
        )

    def resolve_tcp_listener(
        self,
        ctx: ParseContext,
        addr: SocketAddress,
        *,
        cert_path: str | None,
        key_path: str | None,
        offer_h2: bool | None,
    ) -> ListenerConfig:
        """Apply the TLS/HTTP2 combination rules.

        ================  ================  ==========  =====================
        cert-path         key-path          offer-h2    result
        ================  ================  ==========  =====================
        absent            absent            absent      plain TCP
        present           present           any         TLS, h2 default true
        one of the two                      any         MutualExclusionError
        absent            absent            present     MutualExclusionError
        ================  ================  ==========  =====================
        """
        if (cert_path is None) != (key_path is None):
            raise ctx.error(
                "'cert-path' and 'key-path' must either BOTH be present, "
                "or NEITHER should be present",
                kind=MutualExclusionError,
            )
        if cert_path is None or key_path is None:
            if offer_h2 is not None:
                raise ctx.error(
                    "'offer-h2' requires TLS, specify 'cert-path' and 'key-path'",
                    kind=MutualExclusionError,
                )
            return ListenerConfig(source=TcpListener(addr=addr))

        tls = TlsConfig(cert_path=Path(cert_path), key_path=Path(key_path))
        offer = True if offer_h2 is None else offer_h2
        return ListenerConfig(source=TcpListener(addr=addr, tls=tls, offer_h2=offer))
