"""ConfigService — load, validate, and re-render configuration files."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from proxyconf.diagnostics import ConfigError
from proxyconf.domain.models import ConfigBundle
from proxyconf.infrastructure.sources import ConfigSource, FileSystemSource, SourceError
from proxyconf.infrastructure.writer import to_kdl
from proxyconf.sections.root import parse_config
from proxyconf.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from proxyconf.config.settings import ProxyconfSettings

logger = logging.getLogger(__name__)


class ConfigService:
    """Runs the read → parse pipeline over a config path.

    Every public method returns a ServiceResult; the first configuration
    error aborts the run and is reported in ``result.error``.
    """

    def __init__(self, settings: ProxyconfSettings, source: ConfigSource | None = None) -> None:
        self._settings = settings
        self._source = source or FileSystemSource(
            extension=settings.source.extension,
            recursive=settings.source.recursive,
            encoding=settings.source.encoding,
        )

    def load(self, path: Path) -> list[ConfigBundle]:
        """Parse every document under *path*.

        Raises:
            SourceError: *path* does not resolve to readable files.
            ConfigError: A document is malformed or fails validation.
        """
        documents = asyncio.run(self._source.collect(path))
        bundles = [parse_config(document, source_name) for document, source_name in documents]
        logger.debug("Loaded %d documents from %s", len(bundles), path)
        return bundles

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def check(self, path: Path) -> ServiceResult:
        """Validate *path* and summarise what it defines."""
        try:
            bundles = self.load(path)
        except (ConfigError, SourceError) as exc:
            return _failure("check", exc)

        services = [service for bundle in bundles for service in bundle.services]
        return ServiceResult(
            ok=True,
            op="check",
            data={
                "files": [bundle.source_name for bundle in bundles],
                "services": [service.name for service in services],
                "listeners": sum(len(s.listeners.listeners) for s in services),
                "upstreams": sum(len(s.connectors.upstreams) for s in services),
                "chains": sum(len(bundle.chains) for bundle in bundles),
                "key_profiles": sum(len(bundle.key_profiles) for bundle in bundles),
            },
        )

    def show(self, path: Path) -> ServiceResult:
        """Return the parsed configuration as plain data."""
        try:
            bundles = self.load(path)
        except (ConfigError, SourceError) as exc:
            return _failure("show", exc)
        return ServiceResult(
            ok=True,
            op="show",
            data={"bundles": [bundle.model_dump(mode="json") for bundle in bundles]},
        )

    def fmt(self, path: Path) -> ServiceResult:
        """Re-render each document in canonical form."""
        try:
            bundles = self.load(path)
        except (ConfigError, SourceError) as exc:
            return _failure("fmt", exc)
        return ServiceResult(
            ok=True,
            op="fmt",
            data={"documents": {bundle.source_name: to_kdl(bundle) for bundle in bundles}},
        )


def _failure(op: str, exc: ConfigError | SourceError) -> ServiceResult:
    if isinstance(exc, ConfigError):
        logger.debug("%s failed: %s at %s:%d", op, exc.code, exc.source_name, exc.line)
        error = ServiceError(code=exc.code, message=exc.message, detail=exc.to_detail())
    else:
        error = ServiceError(code="SOURCE", message=str(exc))
    return ServiceResult(ok=False, op=op, error=error)
