"""Filter chain schema.

::

    filter name="com.example.auth"
    filter name="com.example.logger" level="debug" format="json"

Every directive must be ``filter``; ``name`` is a qualified identifier and
every other property becomes a filter argument.
"""

from __future__ import annotations

from proxyconf.domain.models import ConfiguredFilter, FilterChain
from proxyconf.domain.names import FQDN
from proxyconf.parser.block import BlockParser
from proxyconf.parser.context import ParseContext
from proxyconf.parser.rules import NoChildren, NoPositionalArgs


class ChainParser:
    """Parses a block of ``filter`` directives into a :class:`FilterChain`."""

    def parse(self, ctx: ParseContext) -> FilterChain:
        block = BlockParser(ctx)
        filters = block.repeated("filter", self.extract_filter)
        block.exhaust()
        return FilterChain(filters=filters)

    def extract_filter(self, ctx: ParseContext) -> ConfiguredFilter:
        ctx.validate([NoChildren(), NoPositionalArgs()])
        name = ctx.prop("name").parse_as(FQDN)
        args = {key: value for key, value in ctx.args_map().items() if key != "name"}
        return ConfiguredFilter(name=name, args=args)
