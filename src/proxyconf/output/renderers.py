"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.text import Text

from proxyconf.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from proxyconf.services.result import ServiceResult

Renderer = Callable[["ServiceResult", "Console"], None]


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()
    if result.ok:
        _OP_RENDERERS.get(result.op, _render_generic)(result, console)
    else:
        _render_error(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="pc.ok"), Text(f"  {result.op}", style="pc.op"))


def _field(console: Console, key: str, value: Any) -> None:
    console.print(Text(f"  {key}: ", style="pc.key"), Text(str(value)), sep="")


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Status line plus the source pointer of a configuration diagnostic."""
    err = result.error
    msg = err.message if err else "Unknown error"
    header = [Text("ERROR", style="pc.error"), Text(f"  {result.op}", style="pc.op")]
    if err:
        header.append(Text(f" [{err.code}]", style="pc.code"))
    console.print(*header, Text(" — "), Text(msg), sep="")

    if err and "help" in err.detail:
        # The first help line repeats the message.
        pointer = str(err.detail["help"]).split("\n", 1)[1:]
        for line in pointer:
            console.print(Text(line, style="pc.source"), soft_wrap=True)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            if k != "help":
                console.print(f"    {k}: {v}", markup=False)


# ── Op renderers ──────────────────────────────────────────────────────


def _render_check(result: ServiceResult, console: Console) -> None:
    data = result.data
    files = data.get("files", [])
    _status_line(console, result)
    for source in files:
        console.print(Text(f"  {source}", style="pc.source"))
    services = data.get("services", [])
    if services:
        names = Text("  services: ", style="pc.key")
        names.append(", ".join(services), style="pc.name")
        console.print(names)
    for key in ("listeners", "upstreams", "chains", "key_profiles"):
        _field(console, key, data.get(key, 0))


def _render_fmt(result: ServiceResult, console: Console) -> None:
    documents: dict[str, str] = result.data.get("documents", {})
    many = len(documents) > 1
    for source, text in documents.items():
        if many:
            console.print(Text(f"// {source}", style="pc.source"))
        console.print(text, end="", markup=False, soft_wrap=True)


def _render_show(result: ServiceResult, console: Console) -> None:
    console.print(json.dumps(result.data.get("bundles", []), indent=2), markup=False, soft_wrap=True)


def _render_generic(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


_OP_RENDERERS: dict[str, Renderer] = {
    "check": _render_check,
    "fmt": _render_fmt,
    "show": _render_show,
}
