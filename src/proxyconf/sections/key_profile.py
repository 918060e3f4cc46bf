"""Cache key profile schema.

::

    key "${cookie_session}" fallback="${client_ip}:${user_agent}"
    algorithm name="xxhash32" seed="idk"
    transforms-order {
        remove-query-params
        lowercase
        truncate length="256"
    }

Only ``key`` is required. The algorithm defaults to ``xxhash64`` with no
seed; transforms default to none and keep their source order.
"""

from __future__ import annotations

from proxyconf.domain.models import HashAlgorithm, KeyTemplateConfig, Transform
from proxyconf.parser.block import BlockParser
from proxyconf.parser.context import ParseContext


class KeyProfileParser:
    """Parses a key profile block into a :class:`KeyTemplateConfig`."""

    def parse(self, ctx: ParseContext) -> KeyTemplateConfig:
        block = BlockParser(ctx)
        source, fallback = block.required("key", self.extract_key)
        algorithm = block.optional("algorithm", self.extract_algorithm) or HashAlgorithm()
        transforms = block.optional("transforms-order", self.extract_transforms) or []
        block.exhaust()
        return KeyTemplateConfig(
            source=source,
            fallback=fallback,
            algorithm=algorithm,
            transforms=transforms,
        )

    def extract_key(self, ctx: ParseContext) -> tuple[str, str | None]:
        source = ctx.first().as_str()
        options = ctx.args_map_with_only_keys(1, allowed=["fallback"])
        return source, options.get("fallback")

    def extract_algorithm(self, ctx: ParseContext) -> HashAlgorithm:
        options = ctx.args_map_with_only_keys(allowed=["name", "seed"])
        if "name" in options:
            return HashAlgorithm(name=options["name"], seed=options.get("seed"))
        return HashAlgorithm(seed=options.get("seed"))

    def extract_transforms(self, ctx: ParseContext) -> list[Transform]:
        return [
            Transform(name=step.name(), params=step.args_map()) for step in ctx.nodes()
        ]
