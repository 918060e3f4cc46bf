"""Write configuration values back to KDL text.

The output uses the same directive and key names the section parsers
read, so parsing ``to_kdl(value)`` with the matching parser yields an
equal value. Chains and key profiles render as block contents (the
parser's input), listeners/connectors/services as complete nodes.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from proxyconf.domain.models import (
    ConfigBundle,
    Connectors,
    FilterChain,
    KeyTemplateConfig,
    Listeners,
    ProxyConfig,
)

INDENT = "    "

_BARE = re.compile(r"^[A-Za-z_][A-Za-z0-9_.\-]*$")
_RESERVED = {"true", "false", "null", "inf", "nan"}


def quote(text: str) -> str:
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


def ident(text: str) -> str:
    """A node name or key: bare when unambiguous, quoted otherwise."""
    if _BARE.match(text) and text not in _RESERVED:
        return text
    return quote(text)


def _props(pairs: dict[str, str | bool | None]) -> str:
    parts: list[str] = []
    for key, value in pairs.items():
        if value is None:
            continue
        if isinstance(value, bool):
            parts.append(f"{ident(key)}={'#true' if value else '#false'}")
        else:
            parts.append(f"{ident(key)}={quote(value)}")
    return "".join(f" {part}" for part in parts)


def _block(head: str, lines: list[str]) -> list[str]:
    return [f"{head} {{", *(f"{INDENT}{line}" for line in lines), "}"]


def _join(lines: list[str]) -> str:
    return "\n".join(lines) + "\n"


def _chain_lines(chain: FilterChain) -> list[str]:
    return [f"filter name={quote(f.name)}{_props(dict(f.args))}" for f in chain.filters]


def _key_profile_lines(profile: KeyTemplateConfig) -> list[str]:
    lines = [
        f"key {quote(profile.source)}{_props({'fallback': profile.fallback})}",
        f"algorithm{_props({'name': profile.algorithm.name, 'seed': profile.algorithm.seed})}",
    ]
    if profile.transforms:
        steps = [f"{ident(step.name)}{_props(dict(step.params))}" for step in profile.transforms]
        lines.extend(_block("transforms-order", steps))
    return lines


def _listeners_lines(listeners: Listeners) -> list[str]:
    lines: list[str] = []
    for listener in listeners.listeners:
        tcp = listener.source
        if tcp.tls is None:
            lines.append(quote(tcp.addr))
            continue
        props = _props(
            {
                "cert-path": str(tcp.tls.cert_path),
                "key-path": str(tcp.tls.key_path),
                "offer-h2": tcp.offer_h2,
            }
        )
        lines.append(f"{quote(tcp.addr)}{props}")
    return _block("listeners", lines)


def _connectors_lines(connectors: Connectors) -> list[str]:
    lines: list[str] = []
    balance = connectors.load_balance
    if balance is not None:
        key = balance.key if balance.selection.is_hashing else None
        lines.append(f"load-balance{_props({'selection': str(balance.selection), 'key': key})}")
    for upstream in connectors.upstreams:
        props = _props({"tls-sni": upstream.tls_sni, "proto": str(upstream.proto)})
        lines.append(f"upstream {quote(upstream.addr)}{props}")
    return _block("connectors", lines)


def _service_lines(service: ProxyConfig) -> list[str]:
    return _block(
        ident(service.name),
        [*_listeners_lines(service.listeners), *_connectors_lines(service.connectors)],
    )


def _bundle_lines(bundle: ConfigBundle) -> list[str]:
    lines = _block("services", [line for s in bundle.services for line in _service_lines(s)])
    definitions: list[str] = []
    for name, chain in bundle.chains.items():
        definitions.extend(_block(f"chain-filters {quote(name)}", _chain_lines(chain)))
    for name, profile in bundle.key_profiles.items():
        definitions.extend(_block(f"key-profile {quote(name)}", _key_profile_lines(profile)))
    if definitions:
        lines.extend(["", *_block("definitions", definitions)])
    return lines


_WRITERS: dict[type, Callable[[Any], list[str]]] = {
    FilterChain: _chain_lines,
    KeyTemplateConfig: _key_profile_lines,
    Listeners: _listeners_lines,
    Connectors: _connectors_lines,
    ProxyConfig: _service_lines,
    ConfigBundle: _bundle_lines,
}


def to_kdl(value: object) -> str:
    """Render *value* as KDL text."""
    writer = _WRITERS.get(type(value))
    if writer is None:
        raise TypeError(f"Cannot render {type(value).__name__} as KDL")
    return _join(writer(value))
