"""Command: re-render configuration in canonical form."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from proxyconf.commands._base import ProxyconfCommand

if TYPE_CHECKING:
    from proxyconf.commands._context import AppContext


@click.command(
    cls=ProxyconfCommand,
    examples="""\
  proxyconf fmt proxy.kdl
  proxyconf fmt conf.d/ > merged.kdl""",
)
@click.argument("path", type=click.Path(path_type=Path))
@click.pass_obj
def fmt(app: AppContext, path: Path) -> None:
    """Print each document in PATH in canonical KDL form."""
    app.emit(app.service.fmt(path))
