"""Typed configuration value objects produced by the section parsers.

All models are frozen: a parse produces them once and hands them to the
caller, and nothing mutates them afterwards.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from proxyconf.domain.names import FQDN, SocketAddress
from proxyconf.domain.types import SelectionKind, UpstreamProto

DEFAULT_HASH_ALGORITHM = "xxhash64"


# --- Filter chains ---


class ConfiguredFilter(BaseModel):
    """One ``filter`` directive: a qualified filter name plus its arguments."""

    model_config = {"frozen": True}

    name: FQDN
    args: dict[str, str] = Field(default_factory=dict)


class FilterChain(BaseModel):
    """Filters in the order they appear in the source."""

    model_config = {"frozen": True}

    filters: list[ConfiguredFilter] = Field(default_factory=list)


# --- Cache key profiles ---


class HashAlgorithm(BaseModel):
    model_config = {"frozen": True}

    name: str = DEFAULT_HASH_ALGORITHM
    seed: str | None = None


class Transform(BaseModel):
    model_config = {"frozen": True}

    name: str
    params: dict[str, str] = Field(default_factory=dict)


class KeyTemplateConfig(BaseModel):
    """How a cache key is built: template, fallback, hash, and transforms."""

    model_config = {"frozen": True}

    source: str
    fallback: str | None = None
    algorithm: HashAlgorithm = Field(default_factory=HashAlgorithm)
    transforms: list[Transform] = Field(default_factory=list)


# --- Listeners ---


class TlsConfig(BaseModel):
    model_config = {"frozen": True}

    cert_path: Path
    key_path: Path


class TcpListener(BaseModel):
    """A TCP listener, optionally terminating TLS."""

    model_config = {"frozen": True}

    addr: SocketAddress
    tls: TlsConfig | None = None
    offer_h2: bool = False


class ListenerConfig(BaseModel):
    model_config = {"frozen": True}

    source: TcpListener


class Listeners(BaseModel):
    model_config = {"frozen": True}

    listeners: list[ListenerConfig] = Field(default_factory=list)


# --- Connectors ---


class UpstreamConfig(BaseModel):
    model_config = {"frozen": True}

    addr: SocketAddress
    tls_sni: str | None = None
    proto: UpstreamProto = UpstreamProto.H1_ONLY


class LoadBalanceConfig(BaseModel):
    model_config = {"frozen": True}

    selection: SelectionKind = SelectionKind.ROUND_ROBIN
    key: str | None = None


class Connectors(BaseModel):
    """Upstreams a service proxies to, plus how one is selected."""

    model_config = {"frozen": True}

    upstreams: list[UpstreamConfig] = Field(default_factory=list)
    load_balance: LoadBalanceConfig | None = None


# --- Services ---


class ProxyConfig(BaseModel):
    """One proxied service: its name, listeners, and connectors."""

    model_config = {"frozen": True}

    name: str
    listeners: Listeners
    connectors: Connectors


class ConfigBundle(BaseModel):
    """Everything one configuration document defines.

    Attributes:
        source_name: Identifier of the document the bundle was read from.
        services: Services in source order.
        chains: Named filter chains from ``definitions``.
        key_profiles: Named cache key profiles from ``definitions``.
    """

    model_config = {"frozen": True}

    source_name: str
    services: list[ProxyConfig] = Field(default_factory=list)
    chains: dict[str, FilterChain] = Field(default_factory=dict)
    key_profiles: dict[str, KeyTemplateConfig] = Field(default_factory=dict)
