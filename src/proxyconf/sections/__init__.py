"""Section parsers, one per configuration schema.

Each implements :class:`SectionParser`: a context in, a typed value out.
They are the only code that knows key names, defaults, and cross-field
rules.
"""

from proxyconf.sections.base import SectionParser
from proxyconf.sections.chain import ChainParser
from proxyconf.sections.connectors import ConnectorsSection
from proxyconf.sections.key_profile import KeyProfileParser
from proxyconf.sections.listeners import ListenersSection
from proxyconf.sections.root import RootParser, parse_config
from proxyconf.sections.service import ServiceSection

__all__ = [
    "ChainParser",
    "ConnectorsSection",
    "KeyProfileParser",
    "ListenersSection",
    "RootParser",
    "SectionParser",
    "ServiceSection",
    "parse_config",
]
