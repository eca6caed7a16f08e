"""`jsonld` command line interface.

Each command gathers its options, hands them to the `Processor` and prints
the result. Every failure is reported on stdout and exits with status 1.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Annotated, Any, Callable

import typer

from jsonld_cli import __version__
from jsonld_cli.cli.options import (
    AllowOpt,
    AutoBaseOpt,
    BaseOpt,
    CommonOptions,
    IndentOpt,
    InputArg,
    InsecureOpt,
    LintOpt,
    NewlineOpt,
    SafeOpt,
    TypeOpt,
    parse_bool,
    parse_embed,
)
from jsonld_cli.cli.output import write_output
from jsonld_cli.cli.ui_components import exit_on_error, print_lint_warning
from jsonld_cli.core.config import AppSettings
from jsonld_cli.core.domain.input_type import InputType
from jsonld_cli.core.domain.loaders import parse_allow
from jsonld_cli.core.errors import OptionError
from jsonld_cli.core.logging import setup_logging
from jsonld_cli.core.services.processor import (
    CanonicalizationAlgorithm,
    Processor,
    ProcessingOptions,
    ProcessorHooks,
    resolve_base,
)

EPILOG = (
    "The primary input for all commands can be a filename, a URL beginning with "
    '"http://" or "https://", or "-" for stdin (the default). Secondary loaded '
    "resources can only be HTTP or HTTPS by default for security reasons unless "
    'the "-a/--allow" option is used.\n\n'
    "Input type can be specified as a standard content type or a simple string "
    "for common types (json, nquads, turtle, trig, ntriples, rdfxml). If the "
    "input type is not specified it will be auto-detected based on file "
    "extension, URL content type, or by guessing with various parsers. Guessing "
    "may not always produce correct results.\n\n"
    'Output type can be specified for the "format" command and a N-Quads '
    'shortcut for the "canonize" command. For other commands you can pipe '
    'JSON-LD output to the "format" command.'
)

app = typer.Typer(
    name="jsonld",
    no_args_is_help=True,
    add_completion=False,
    # option help carries "[default]" hints that are not Rich markup
    rich_markup_mode=None,
    help="A JSON-LD command line interface tool.",
    epilog=EPILOG,
    context_settings={"help_option_names": ["-h", "--help"]},
)

# marks commands that print nothing on success
_NO_OUTPUT = object()


@dataclass
class CliState:
    settings: AppSettings = field(default_factory=AppSettings)
    verbose: bool = False


def _state(ctx: typer.Context) -> CliState:
    root = ctx.find_root()
    if not isinstance(root.obj, CliState):
        root.obj = CliState()
    return root.obj


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=_version_callback,
            is_eager=True,
            help="output the version number",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="debug logging on stderr"),
    ] = False,
) -> None:
    """A JSON-LD command line interface tool."""

    settings = AppSettings()
    setup_logging(verbose=verbose, settings=settings)
    ctx.obj = CliState(settings=settings, verbose=verbose)


def _execute(
    ctx: typer.Context,
    source: str,
    common: CommonOptions,
    action: Callable[[Processor], Any],
    *,
    check: Callable[[], None] | None = None,
) -> None:
    state = _state(ctx)
    with exit_on_error(verbose=state.verbose):
        if check is not None:
            check()
        allow = common.allow if common.allow is not None else state.settings.default_allow
        options = ProcessingOptions(
            allow=parse_allow(allow),
            insecure=common.insecure,
            input_type=InputType.from_name(common.input_type) if common.input_type else None,
            base=resolve_base(source, base=common.base, auto_base=common.auto_base),
            lint=common.lint,
            safe=common.safe,
        )
        hooks = ProcessorHooks(warning=print_lint_warning)
        with Processor(options=options, hooks=hooks, settings=state.settings) as processor:
            result = action(processor)
        if result is not _NO_OUTPUT:
            indent = common.indent if common.indent is not None else state.settings.default_indent
            write_output(result, indent=indent, newline=common.newline)


def _require(value: str | None, message: str) -> Callable[[], None]:
    def check() -> None:
        if not value:
            raise OptionError(message)

    return check


@app.command("format")
def format_(
    ctx: typer.Context,
    source: InputArg = "-",
    context: Annotated[
        str | None,
        typer.Option("--context", "-c", metavar="filename|URL", help="context filename or URL"),
    ] = None,
    output_format: Annotated[
        str | None,
        typer.Option("--format", "-f", metavar="FORMAT", help="output format [json]"),
    ] = None,
    n_quads: Annotated[
        bool,
        typer.Option("--n-quads", "-q", help="output application/n-quads [false]"),
    ] = False,
    json_: Annotated[
        bool,
        typer.Option("--json", "-j", help="output application/json [true]"),
    ] = False,
    indent: IndentOpt = None,
    newline: NewlineOpt = True,
    insecure: InsecureOpt = False,
    allow: AllowOpt = None,
    input_type: TypeOpt = None,
    auto_base: AutoBaseOpt = False,
    base: BaseOpt = None,
    lint: LintOpt = False,
    safe: SafeOpt = False,
) -> None:
    """format and convert JSON-LD"""

    common = CommonOptions(indent, newline, insecure, allow, input_type, auto_base, base, lint, safe)
    fmt = output_format or "json"
    if n_quads:
        fmt = "application/n-quads"
    if json_:
        fmt = "application/json"
    _execute(ctx, source, common, lambda p: p.format_document(source, fmt, context=context))


@app.command("lint")
def lint_(
    ctx: typer.Context,
    source: InputArg = "-",
    indent: IndentOpt = None,
    newline: NewlineOpt = True,
    insecure: InsecureOpt = False,
    allow: AllowOpt = None,
    input_type: TypeOpt = None,
    auto_base: AutoBaseOpt = False,
    base: BaseOpt = None,
    lint: LintOpt = False,
    safe: SafeOpt = False,
) -> None:
    """lint JSON-LD"""

    common = CommonOptions(indent, newline, insecure, allow, input_type, auto_base, base, lint, safe)

    def action(processor: Processor) -> Any:
        processor.lint(source)
        return _NO_OUTPUT

    _execute(ctx, source, common, action)


@app.command("compact")
def compact(
    ctx: typer.Context,
    source: InputArg = "-",
    context: Annotated[
        str | None,
        typer.Option("--context", "-c", metavar="filename|URL", help="context filename or URL"),
    ] = None,
    compact_arrays: Annotated[
        bool,
        typer.Option(
            "--compact-arrays/--no-compact-arrays",
            " /-A",
            help="compact arrays to single values when appropriate",
        ),
    ] = True,
    graph: Annotated[
        bool,
        typer.Option("--graph", "-g", help="always output top-level graph [false]"),
    ] = False,
    indent: IndentOpt = None,
    newline: NewlineOpt = True,
    insecure: InsecureOpt = False,
    allow: AllowOpt = None,
    input_type: TypeOpt = None,
    auto_base: AutoBaseOpt = False,
    base: BaseOpt = None,
    lint: LintOpt = False,
    safe: SafeOpt = False,
) -> None:
    """compact JSON-LD"""

    common = CommonOptions(indent, newline, insecure, allow, input_type, auto_base, base, lint, safe)
    _execute(
        ctx,
        source,
        common,
        lambda p: p.compact(source, context, compact_arrays=compact_arrays, graph=graph),
        check=_require(context, "Context not specified, use -c/--context"),
    )


@app.command("expand")
def expand(
    ctx: typer.Context,
    source: InputArg = "-",
    context: Annotated[
        str | None,
        typer.Option("--context", "-c", metavar="filename|URL", help="context filename or URL"),
    ] = None,
    keep_free_floating_nodes: Annotated[
        bool,
        typer.Option("--keep-free-floating-nodes", help="keep free-floating nodes"),
    ] = False,
    indent: IndentOpt = None,
    newline: NewlineOpt = True,
    insecure: InsecureOpt = False,
    allow: AllowOpt = None,
    input_type: TypeOpt = None,
    auto_base: AutoBaseOpt = False,
    base: BaseOpt = None,
    lint: LintOpt = False,
    safe: SafeOpt = False,
) -> None:
    """expand JSON-LD"""

    common = CommonOptions(indent, newline, insecure, allow, input_type, auto_base, base, lint, safe)
    _execute(
        ctx,
        source,
        common,
        lambda p: p.expand(source, context=context, keep_free_floating_nodes=keep_free_floating_nodes),
    )


@app.command("flatten")
def flatten(
    ctx: typer.Context,
    source: InputArg = "-",
    context: Annotated[
        str | None,
        typer.Option(
            "--context",
            "-c",
            metavar="filename|URL",
            help="context filename or URL for compaction [none]",
        ),
    ] = None,
    indent: IndentOpt = None,
    newline: NewlineOpt = True,
    insecure: InsecureOpt = False,
    allow: AllowOpt = None,
    input_type: TypeOpt = None,
    auto_base: AutoBaseOpt = False,
    base: BaseOpt = None,
    lint: LintOpt = False,
    safe: SafeOpt = False,
) -> None:
    """flatten JSON-LD"""

    common = CommonOptions(indent, newline, insecure, allow, input_type, auto_base, base, lint, safe)
    _execute(ctx, source, common, lambda p: p.flatten(source, context=context))


@app.command("frame")
def frame(
    ctx: typer.Context,
    source: InputArg = "-",
    frame_: Annotated[
        str | None,
        typer.Option("--frame", "-f", metavar="filename|URL", help="frame to use"),
    ] = None,
    embed: Annotated[
        str,
        typer.Option("--embed", metavar="EMBED", help="default @embed flag [true]"),
    ] = "true",
    explicit: Annotated[
        str,
        typer.Option("--explicit", metavar="EXPLICIT", help="default @explicit flag [false]"),
    ] = "false",
    omit_default: Annotated[
        str,
        typer.Option(
            "--omit-default",
            metavar="OMIT-DEFAULT",
            help="default @omitDefault flag [false]",
        ),
    ] = "false",
    indent: IndentOpt = None,
    newline: NewlineOpt = True,
    insecure: InsecureOpt = False,
    allow: AllowOpt = None,
    input_type: TypeOpt = None,
    auto_base: AutoBaseOpt = False,
    base: BaseOpt = None,
    lint: LintOpt = False,
    safe: SafeOpt = False,
) -> None:
    """frame JSON-LD"""

    common = CommonOptions(indent, newline, insecure, allow, input_type, auto_base, base, lint, safe)

    def action(processor: Processor) -> Any:
        return processor.frame(
            source,
            frame_,
            embed=parse_embed(embed),
            explicit=parse_bool(explicit),
            omit_default=parse_bool(omit_default),
        )

    _execute(
        ctx,
        source,
        common,
        action,
        check=_require(frame_, "Frame not specified, use -f/--frame"),
    )


@app.command("toRdf")
def to_rdf(
    ctx: typer.Context,
    source: InputArg = "-",
    output_format: Annotated[
        str | None,
        typer.Option(
            "--format",
            "-f",
            metavar="FORMAT",
            help="format to output ('application/n-quads' for N-Quads)",
        ),
    ] = None,
    n_quads: Annotated[
        bool,
        typer.Option("--n-quads", "-q", help="use 'application/n-quads' format"),
    ] = False,
    generalized_rdf: Annotated[
        bool,
        typer.Option("--generalized-rdf", "-g", help="produce generalized RDF"),
    ] = False,
    indent: IndentOpt = None,
    newline: NewlineOpt = True,
    insecure: InsecureOpt = False,
    allow: AllowOpt = None,
    input_type: TypeOpt = None,
    auto_base: AutoBaseOpt = False,
    base: BaseOpt = None,
    lint: LintOpt = False,
    safe: SafeOpt = False,
) -> None:
    """convert JSON-LD into an RdfDataset"""

    common = CommonOptions(indent, newline, insecure, allow, input_type, auto_base, base, lint, safe)
    fmt = output_format or ("application/n-quads" if n_quads else None)
    _execute(
        ctx,
        source,
        common,
        lambda p: p.to_rdf(source, output_format=fmt, generalized_rdf=generalized_rdf),
    )


@app.command("fromRdf")
def from_rdf(
    ctx: typer.Context,
    source: InputArg = "-",
    use_rdf_type: Annotated[
        bool,
        typer.Option("--use-rdf-type", help="use rdf:type instead of @type [false]"),
    ] = False,
    use_native_types: Annotated[
        bool,
        typer.Option(
            "--use-native-types",
            help="convert XSD boolean, integer and double literals to native JSON [false]",
        ),
    ] = False,
    indent: IndentOpt = None,
    newline: NewlineOpt = True,
    insecure: InsecureOpt = False,
    allow: AllowOpt = None,
    input_type: TypeOpt = None,
    auto_base: AutoBaseOpt = False,
    base: BaseOpt = None,
    lint: LintOpt = False,
    safe: SafeOpt = False,
) -> None:
    """convert an RDF dataset (N-Quads by default) into JSON-LD"""

    common = CommonOptions(indent, newline, insecure, allow, input_type, auto_base, base, lint, safe)
    _execute(
        ctx,
        source,
        common,
        lambda p: p.from_rdf(source, use_rdf_type=use_rdf_type, use_native_types=use_native_types),
    )


@app.command("canonize")
def canonize(
    ctx: typer.Context,
    source: InputArg = "-",
    output_format: Annotated[
        str | None,
        typer.Option(
            "--format",
            "-f",
            metavar="FORMAT",
            help="format to output ('application/n-quads' for N-Quads)",
        ),
    ] = None,
    n_quads: Annotated[
        bool,
        typer.Option("--n-quads", "-q", help="use 'application/n-quads' format"),
    ] = False,
    algorithm: Annotated[
        CanonicalizationAlgorithm,
        typer.Option("--algorithm", help="canonicalization algorithm"),
    ] = CanonicalizationAlgorithm.URDNA2015,
    indent: IndentOpt = None,
    newline: NewlineOpt = True,
    insecure: InsecureOpt = False,
    allow: AllowOpt = None,
    input_type: TypeOpt = None,
    auto_base: AutoBaseOpt = False,
    base: BaseOpt = None,
    lint: LintOpt = False,
    safe: SafeOpt = False,
) -> None:
    """canonize JSON-LD"""

    common = CommonOptions(indent, newline, insecure, allow, input_type, auto_base, base, lint, safe)
    fmt = output_format or ("application/n-quads" if n_quads else None)
    _execute(
        ctx,
        source,
        common,
        lambda p: p.canonize(source, output_format=fmt, algorithm=algorithm),
    )


def run() -> None:
    """Console script entry point; any error exits with status 1."""

    try:
        app()
    except SystemExit as exc:
        # usage errors exit with 2 in standalone mode
        if exc.code == 2:
            sys.exit(1)
        raise
