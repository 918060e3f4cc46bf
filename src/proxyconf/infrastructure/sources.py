"""Config sources locate configuration files and read them into documents.

A source resolves an entry path into ``(document, source_name)`` pairs.
Reading is the only I/O in the pipeline; parsing the documents afterwards
is synchronous and side-effect free.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Protocol

from proxyconf.infrastructure.document import Document
from proxyconf.infrastructure.reader import parse_document

logger = logging.getLogger(__name__)


class SourceError(Exception):
    """The entry path could not be resolved into configuration files."""


class ConfigSource(Protocol):
    async def collect(self, entry_path: Path) -> list[tuple[Document, str]]: ...


class FileSystemSource:
    """Read one file, or every matching file in a directory (sorted by path).

    Attributes:
        extension: Suffix selecting files inside a directory.
        recursive: Descend into subdirectories.
        encoding: Text encoding of the files.
    """

    def __init__(
        self,
        *,
        extension: str = ".kdl",
        recursive: bool = False,
        encoding: str = "utf-8",
    ) -> None:
        self.extension = extension
        self.recursive = recursive
        self.encoding = encoding

    def resolve(self, entry_path: Path) -> list[Path]:
        """List the files *entry_path* stands for."""
        if entry_path.is_file():
            return [entry_path]
        if not entry_path.is_dir():
            raise SourceError(f"Config path not found: {entry_path}")
        pattern = f"*{self.extension}"
        found = entry_path.rglob(pattern) if self.recursive else entry_path.glob(pattern)
        files = sorted(p for p in found if p.is_file())
        if not files:
            raise SourceError(f"No '{pattern}' files in {entry_path}")
        return files

    def _read(self, path: Path) -> tuple[Document, str]:
        source_name = str(path)
        try:
            text = path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceError(f"Cannot read {path}: {exc}") from exc
        logger.debug("Read config file %s (%d chars)", source_name, len(text))
        return parse_document(text, source_name), source_name

    async def collect(self, entry_path: Path) -> list[tuple[Document, str]]:
        files = self.resolve(entry_path)
        return list(await asyncio.gather(*(asyncio.to_thread(self._read, f) for f in files)))
