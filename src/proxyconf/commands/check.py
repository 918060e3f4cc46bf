"""Command: validate configuration files."""

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
  proxyconf check proxy.kdl
  proxyconf check conf.d/
  proxyconf --json check conf.d/""",
)
@click.argument("path", type=click.Path(path_type=Path))
@click.pass_obj
def check(app: AppContext, path: Path) -> None:
    """Validate PATH and summarise the services it defines."""
    app.emit(app.service.check(path))
