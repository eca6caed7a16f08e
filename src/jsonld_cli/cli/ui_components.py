"""Terminal rendering for lint warnings and errors (Rich).

Both go to stdout, like the command output, so a failing invocation shows
its error where the document would have been.
"""

from __future__ import annotations

import traceback
from contextlib import contextmanager
from typing import Any, Iterator

import typer
from pyld.jsonld import JsonLdError
from rich.console import Console
from rich.markup import escape
from rich.pretty import pretty_repr

from jsonld_cli.core.domain.models import LintWarning
from jsonld_cli.core.errors import JsonLdCliError


def _stdout_console() -> Console:
    # built per call so it follows whatever sys.stdout currently is
    return Console(soft_wrap=True)


def _pretty(value: Any) -> str:
    return pretty_repr(value, max_width=100, max_depth=10, max_string=500)


def print_lint_warning(warning: LintWarning) -> None:
    console = _stdout_console()
    console.print(f"WARNING: {escape(warning.message)}")
    console.print(_pretty(warning.model_dump()), markup=False)


def _error_extras(exc: BaseException) -> dict[str, Any]:
    if isinstance(exc, JsonLdError):
        extras = {"type": exc.type, "code": exc.code, "details": exc.details}
        return {k: v for k, v in extras.items() if v}
    if isinstance(exc, JsonLdCliError):
        return dict(exc.details)
    return {}


def _cause_of(exc: BaseException) -> BaseException | None:
    cause = getattr(exc, "cause", None)
    if isinstance(cause, BaseException):
        return cause
    return exc.__cause__


def report_error(exc: BaseException, *, verbose: bool = False) -> None:
    """Print an error and its cause chain.

    CLI errors print their message; anything else (and everything with
    `verbose`) prints the traceback. Structured details follow `Error:` and
    each cause is reported the same way after `Error Cause:`.
    """

    seen: set[int] = set()
    label = "Error:"
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, JsonLdCliError) and not verbose:
            typer.echo(f"{label} {current.message}")
        else:
            lines = traceback.format_exception(
                type(current), current, current.__traceback__, chain=False
            )
            typer.echo("".join(lines).rstrip())
        extras = _error_extras(current)
        if extras:
            typer.echo(f"{label} {_pretty(extras)}")
        current = _cause_of(current)
        label = "Error Cause:"


@contextmanager
def exit_on_error(*, verbose: bool = False) -> Iterator[None]:
    """Report any failure inside the block and exit with status 1."""

    try:
        yield
    except (typer.Exit, typer.Abort):
        raise
    except Exception as exc:
        report_error(exc, verbose=verbose)
        raise typer.Exit(code=1) from exc
