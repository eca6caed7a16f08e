"""Command output.

Documents (objects/arrays) are printed as JSON; RDF serializations are
strings and printed as-is, trimmed.
"""

from __future__ import annotations

import json
from typing import Any

import typer


def render_output(data: Any, *, indent: int = 2) -> str:
    """Serialize a command result. `indent <= 0` means compact JSON."""

    if isinstance(data, str):
        return data.strip()
    if indent > 0:
        return json.dumps(data, ensure_ascii=False, indent=indent)
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


def write_output(data: Any, *, indent: int = 2, newline: bool = True) -> None:
    typer.echo(render_output(data, indent=indent), nl=newline)
