"""Parser core: contexts, typed values, rules, and block consumption.

Schema-agnostic: section parsers in :mod:`proxyconf.sections` supply the
key names, defaults, and cross-field rules.
"""

from proxyconf.parser.block import BlockParser
from proxyconf.parser.context import DocumentFocus, NodeFocus, ParseContext
from proxyconf.parser.rules import Name, NamePredicate, NoChildren, NoPositionalArgs, OnlyKeysTyped
from proxyconf.parser.typed_value import TypedValue

__all__ = [
    "BlockParser",
    "DocumentFocus",
    "Name",
    "NamePredicate",
    "NoChildren",
    "NoPositionalArgs",
    "NodeFocus",
    "OnlyKeysTyped",
    "ParseContext",
    "TypedValue",
]
