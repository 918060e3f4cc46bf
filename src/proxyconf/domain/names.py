"""Domain scalar types constructed from text.

Each type exposes ``from_str(text)`` which raises ``ValueError`` with a
short reason on malformed input. The parser's generic ``parse_as`` hook
uses that to report errors without knowing the types themselves.

Both types validate as plain strings inside pydantic models.
"""

from __future__ import annotations

import ipaddress
import re
from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

FQDN_MAX_LENGTH = 253
LABEL_MAX_LENGTH = 63

_LABEL = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?$")
_LABEL_CHARS = re.compile(r"^[A-Za-z0-9-]*$")


class FQDN(str):
    """A dot-separated qualified identifier such as ``com.example.auth``.

    A single trailing dot is accepted and dropped.
    """

    __slots__ = ()

    @classmethod
    def from_str(cls, text: str) -> FQDN:
        name = text[:-1] if text.endswith(".") and len(text) > 1 else text
        if not name:
            raise ValueError("empty FQDN")
        if len(name) > FQDN_MAX_LENGTH:
            raise ValueError("too long FQDN")
        for label in name.split("."):
            if not label:
                raise ValueError("empty label in FQDN")
            if not _LABEL_CHARS.match(label):
                raise ValueError("invalid char found in FQDN")
            if len(label) > LABEL_MAX_LENGTH:
                raise ValueError("too long label in FQDN")
            if not _LABEL.match(label):
                raise ValueError("label in FQDN starts or ends with a hyphen")
        return cls(name)

    @property
    def labels(self) -> list[str]:
        return self.split(".")

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_after_validator_function(
            cls.from_str, core_schema.str_schema()
        )


class SocketAddress(str):
    """An ``ip:port`` pair; IPv6 hosts are bracketed (``[::1]:443``).

    The string form is canonical: ``SocketAddress.from_str("[0:0::1]:80")``
    renders as ``[::1]:80``.
    """

    __slots__ = ()

    @classmethod
    def from_str(cls, text: str) -> SocketAddress:
        host, sep, port_text = text.rpartition(":")
        if not sep or not host:
            raise ValueError("invalid socket address syntax")
        if not (port_text.isascii() and port_text.isdigit()):
            raise ValueError("invalid port")
        port = int(port_text)
        if port > 65535:
            raise ValueError("port out of range")

        bracketed = host.startswith("[") and host.endswith("]")
        try:
            address = ipaddress.ip_address(host[1:-1] if bracketed else host)
        except ValueError:
            raise ValueError("invalid socket address syntax") from None
        if address.version == 6 and not bracketed:
            raise ValueError("invalid socket address syntax")
        if address.version == 4 and bracketed:
            raise ValueError("invalid socket address syntax")

        if address.version == 6:
            return cls(f"[{address}]:{port}")
        return cls(f"{address}:{port}")

    @property
    def host(self) -> str:
        return self.rpartition(":")[0].strip("[]")

    @property
    def port(self) -> int:
        return int(self.rpartition(":")[2])

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_after_validator_function(
            cls.from_str, core_schema.str_schema()
        )
