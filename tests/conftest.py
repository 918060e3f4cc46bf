"""Shared pytest fixtures and test helpers for proxyconf tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from proxyconf.infrastructure.reader import parse_document
from proxyconf.parser.context import ParseContext

SOURCE_NAME = "test.kdl"

FULL_CONFIG = """\
services {
    api-gateway {
        listeners {
            "0.0.0.0:80"
            "0.0.0.0:443" cert-path="./cert.pem" key-path="./key.pem" offer-h2=#false
        }
        connectors {
            load-balance selection="ketama" key="uri-path"
            upstream "10.0.0.1:443" tls-sni="api.example.com" proto="h2-or-h1"
            upstream "10.0.0.2:8080"
        }
    }
    static-site {
        listeners {
            "[::]:8080"
        }
        connectors {
            upstream "127.0.0.1:9000"
        }
    }
}

definitions {
    chain-filters "auth" {
        filter name="com.example.auth" mode="strict"
        filter name="com.example.logger" level="debug" sample=10
    }
    key-profile "by-path" {
        key "${uri_path}" fallback="${client_ip}"
        algorithm name="xxhash32" seed="idk"
        transforms-order {
            remove-query-params
            lowercase
            truncate length=256
        }
    }
}
"""


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host PROXYCONF_* variables out of every test."""
    import os

    for key in list(os.environ):
        if key.startswith("PROXYCONF_"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo configure_logging() side effects from CLI invocations."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    pc = logging.getLogger("proxyconf")
    pc_level = pc.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    pc.setLevel(pc_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def make_ctx() -> Callable[[str], ParseContext]:
    """Parse text and return a context focused on the document root."""

    def _make(text: str) -> ParseContext:
        return ParseContext.root(parse_document(text, SOURCE_NAME), SOURCE_NAME)

    return _make


@pytest.fixture
def node_ctx(make_ctx: Callable[[str], ParseContext]) -> Callable[[str], ParseContext]:
    """Parse text and return a context focused on its first node."""

    def _make(text: str) -> ParseContext:
        return make_ctx(text).nodes()[0]

    return _make


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """A complete, valid configuration file."""
    path = tmp_path / "proxy.kdl"
    path.write_text(FULL_CONFIG, encoding="utf-8")
    return path


@pytest.fixture
def full_config() -> str:
    """Text of a complete, valid configuration document."""
    return FULL_CONFIG
