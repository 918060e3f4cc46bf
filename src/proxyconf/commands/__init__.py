"""Subcommand modules for proxyconf.

register_commands() imports lazily to keep ``proxyconf --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the standalone commands on the root CLI group."""
    from proxyconf.commands.check import check
    from proxyconf.commands.fmt import fmt
    from proxyconf.commands.show import show

    cli.add_command(check)
    cli.add_command(show)
    cli.add_command(fmt)
