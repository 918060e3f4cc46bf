"""Service schema, composing the listeners and connectors parsers.

::

    api-gateway {
        listeners { ... }
        connectors { ... }
    }
"""

from __future__ import annotations

import logging

from proxyconf.domain.models import Connectors, Listeners, ProxyConfig
from proxyconf.parser.block import BlockParser
from proxyconf.parser.context import ParseContext
from proxyconf.sections.base import SectionParser

logger = logging.getLogger(__name__)


class ServiceSection:
    """Parses one service node into a :class:`ProxyConfig`.

    The sub-parsers are injected so callers can swap either schema.

    Attributes:
        listeners: Parser for the ``listeners`` directive.
        connectors: Parser for the ``connectors`` directive.
        name: Explicit service name; defaults to the node's own name.
    """

    def __init__(
        self,
        listeners: SectionParser[Listeners],
        connectors: SectionParser[Connectors],
        name: str | None = None,
    ) -> None:
        self.listeners = listeners
        self.connectors = connectors
        self.name = name

    def parse(self, ctx: ParseContext) -> ProxyConfig:
        name = self.name or ctx.name()
        block = BlockParser(ctx)
        listeners = block.required("listeners", self.listeners.parse)
        connectors = block.required("connectors", self.connectors.parse)
        block.exhaust()
        logger.debug("Parsed service %s", name)
        return ProxyConfig(name=name, listeners=listeners, connectors=connectors)
