"""Rich/JSON output helpers.

The CLI renders response envelopes for humans (Rich text) or machines
(``--json``). Both paths return a string; the caller decides the stream.
"""

from __future__ import annotations

import json as _json
from collections.abc import Iterable, Mapping
from typing import Any

from rich.table import Table
from rich.text import Text

from foundry_bridge.output.console import render


def _field(key: str, value: Any) -> Text:
    text = Text(f"  {key}: ", style="bridge.key")
    if isinstance(value, (dict, list)):
        value = _json.dumps(value, separators=(",", ":"))
    style = "bridge.id" if key == "id" or key.endswith("Id") else ""
    text.append(str(value), style=style)
    return text


def format_response(
    response: Mapping[str, Any], method: str, *, json_output: bool = False
) -> str:
    """Format a response envelope for display."""
    if json_output:
        return _json.dumps(dict(response), indent=2, default=str)

    method_text = Text(f"  {method}", style="bridge.method")
    if not response.get("success"):
        message = response.get("error") or "Unknown error"
        return render((Text("ERROR", style="bridge.error"), method_text, Text(f": {message}")))

    fields = [_field(key, value) for key, value in response.items() if key != "success"]
    return render((Text("OK", style="bridge.ok"), method_text), *fields)


def format_methods(
    methods: Iterable[tuple[str, str, bool]], *, json_output: bool = False
) -> str:
    """Render ``(name, family, privileged)`` rows as a table or JSON list."""
    rows = list(methods)
    if json_output:
        return _json.dumps(
            [{"method": n, "family": f, "privileged": p} for n, f, p in rows], indent=2
        )

    table = Table(show_header=True, pad_edge=False)
    table.add_column("Method", style="bridge.method")
    table.add_column("Family", style="bridge.family")
    table.add_column("GM only")
    for name, family, privileged in rows:
        table.add_row(name, family, "yes" if privileged else "no")
    return render(table)
