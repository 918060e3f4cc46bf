"""Pydantic models for ``proxyconf.toml`` sections, with code-baked defaults.

Sparse TOML contract: defaults live here, the file only holds overrides.
"""

from __future__ import annotations

from pydantic import BaseModel


class SourceConfig(BaseModel):
    """[source] section — how configuration files are located and read."""

    model_config = {"frozen": True}

    extension: str = ".kdl"
    recursive: bool = False
    encoding: str = "utf-8"
