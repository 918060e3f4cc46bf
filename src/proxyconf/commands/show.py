"""Command: print the parsed configuration."""

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
  proxyconf show proxy.kdl
  proxyconf --json show conf.d/""",
)
@click.argument("path", type=click.Path(path_type=Path))
@click.pass_obj
def show(app: AppContext, path: Path) -> None:
    """Print the configuration in PATH as JSON data."""
    app.emit(app.service.show(path))
