"""Options shared by every command, and value parsers for option strings.

Typer has no option groups, so the common options are declared once as
`Annotated` aliases and gathered into `CommonOptions` inside each command.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

import typer

from jsonld_cli.core.errors import OptionError

_TRUE = frozenset({"true", "t", "1", "yes", "y"})
_FALSE = frozenset({"false", "f", "0", "no", "n"})
_EMBED_VALUES = frozenset({"@always", "@last", "@never", "@link", "@once"})


def parse_bool(value: str | bool) -> bool:
    """Parse `true/t/1/yes/y` and `false/f/0/no/n` (any case)."""

    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value:
        lowered = value.lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    raise OptionError(f"Invalid boolean: {value}", {"value": value})


def parse_embed(value: str | bool) -> str | bool:
    """`--embed` takes a boolean or one of the `@embed` keyword values."""

    if isinstance(value, str) and value.lower() in _EMBED_VALUES:
        return value.lower()
    return parse_bool(value)


@dataclass
class CommonOptions:
    indent: int | None = None
    newline: bool = True
    insecure: bool = False
    allow: str | None = None
    input_type: str | None = None
    auto_base: bool = False
    base: str | None = None
    lint: bool = False
    safe: bool = False


InputArg = Annotated[
    str,
    typer.Argument(metavar="[filename|URL|-]", help="Input file, URL, or - for stdin."),
]
IndentOpt = Annotated[
    int | None,
    typer.Option("--indent", "-i", metavar="SPACES", help="spaces to indent [2]"),
]
NewlineOpt = Annotated[
    bool,
    typer.Option(
        "--newline/--no-newline",
        " /-N",
        help="output the trailing newline [newline]",
    ),
]
InsecureOpt = Annotated[
    bool,
    typer.Option("--insecure", "-k", help="allow insecure connections [false]"),
]
AllowOpt = Annotated[
    str | None,
    typer.Option(
        "--allow",
        "-a",
        metavar="LIST",
        help="allowed secondary resource loaders (none,all,stdin,file,http,https) [http,https]",
    ),
]
TypeOpt = Annotated[
    str | None,
    typer.Option("--type", "-t", metavar="TYPE", help="input data type [auto]"),
]
AutoBaseOpt = Annotated[
    bool,
    typer.Option("--auto-base", "-B", help="use base IRI from source [false]"),
]
BaseOpt = Annotated[
    str | None,
    typer.Option("--base", "-b", metavar="BASE", help="base IRI [null]"),
]
LintOpt = Annotated[
    bool,
    typer.Option("--lint", "-l", help="show lint warnings [false]"),
]
SafeOpt = Annotated[
    bool,
    typer.Option("--safe", "-s", help="enable safe mode [false]"),
]
