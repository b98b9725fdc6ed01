"""CLI commands for photognome.

- rename: build a plan (dry run by default), optionally apply it.
- apply: execute a saved plan.
- undo: reverse the most recent apply.
- template: preview a naming template.
- config show: print resolved settings.
- config set: save a default to config.toml.
- version.

Design:
- Option values left unset on the command line are resolved through
  ``resolve_setting`` (env > config file > default), so every option can be
  given a persistent default in config.toml.
- Exit codes are defined as an Enum: 0 success, 1 error, 2 partial.
- Library exceptions are turned into red messages and an error exit code here
  and nowhere else.
"""

import os
import sys
from enum import Enum
from pathlib import Path
from typing import Annotated, List, Optional

import typer
from pydantic import ValidationError
from rich.table import Table

from photognome.__about__ import __version__
from photognome.cli.console import ENV_DISABLE_RICH, get_console
from photognome.cli.renderer import (
    render_apply_result,
    render_plan,
    render_undo_result,
)
from photognome.core.apply import ApplyResult, apply_plan
from photognome.core.ledger import UndoLedger
from photognome.core.planner import build_plan
from photognome.core.template import render_preview, unknown_tokens
from photognome.core.undo import undo_last
from photognome.errors import PhotognomeError
from photognome.models.plan import (
    DEFAULT_MAX_FILENAME_LEN,
    DEFAULT_TEMPLATE,
    PlanRequest,
    RenamePlan,
)
from photognome.utils.config import (
    get_config_file,
    get_ledger_path,
    parse_setting,
    resolve_setting,
    set_setting,
)
from photognome.utils.debug import setup_logger
from photognome.utils.json import dumps
from photognome.utils.plan_store import get_latest_plan_id, load_plan, save_plan

app = typer.Typer(
    name="photognome",
    help="Rename camera JPEGs from their EXIF/XMP metadata using a template.",
    add_completion=False,
)
config_app = typer.Typer(help="Inspect and change photognome settings.")
app.add_typer(config_app, name="config")


class ExitCode(int, Enum):
    """Exit codes for CLI commands."""

    SUCCESS = 0
    ERROR = 1
    PARTIAL = 2


# Arguments and options
JPG_INPUT = Annotated[
    Path,
    typer.Argument(help="Folder of JPEGs, or a single JPEG file."),
]
RAW_INPUT = Annotated[
    Optional[Path],
    typer.Option("--raw-input", "-r", help="Folder holding XMP/DNG/RAF sidecars."),
]
RAW_PARENT = Annotated[
    Optional[bool],
    typer.Option(
        "--raw-parent/--no-raw-parent",
        help="Without --raw-input, look for sidecars one folder above the JPEGs.",
        show_default=False,
    ),
]
TEMPLATE = Annotated[
    Optional[str],
    typer.Option(
        "--template",
        "-t",
        help="Naming template, e.g. '{year}{month}{day}_{orig_name}'.",
    ),
]
EXCLUDE = Annotated[
    Optional[List[str]],
    typer.Option(
        "--exclude",
        "-x",
        help="Text to strip from new names (repeatable, case-insensitive).",
    ),
]
DEDUPE = Annotated[
    Optional[bool],
    typer.Option(
        "--dedupe-same-maker/--no-dedupe-same-maker",
        help="Drop the lens maker when it equals the camera maker.",
        show_default=False,
    ),
]
MAX_LEN = Annotated[
    Optional[int],
    typer.Option("--max-len", help="Maximum filename length, extension included."),
]
RECURSIVE = Annotated[
    Optional[bool],
    typer.Option(
        "--recursive/--no-recursive",
        help="Descend into sub-folders.",
        show_default=False,
    ),
]
INCLUDE_HIDDEN = Annotated[
    Optional[bool],
    typer.Option(
        "--include-hidden/--no-include-hidden",
        help="Include dot-files and dot-folders.",
        show_default=False,
    ),
]
APPLY = Annotated[
    bool,
    typer.Option("--apply", help="Rename the files right away instead of a dry run."),
]
BACKUP = Annotated[
    Optional[bool],
    typer.Option(
        "--backup-originals/--no-backup-originals",
        help="Copy each original into <jpg folder>/backup before renaming it.",
        show_default=False,
    ),
]
JSON_OUTPUT = Annotated[
    bool,
    typer.Option("--json", help="Write machine-readable JSON to stdout."),
]
YES = Annotated[
    bool,
    typer.Option("--yes", "-y", help="Do not ask for confirmation."),
]


@app.callback()
def callback(
    no_rich: Annotated[
        bool,
        typer.Option(
            "--no-rich",
            help="Disable Rich colour output (or set PHOTOGNOME_NO_RICH=1).",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose", "-v", help="Show debug logging (or set PHOTOGNOME_DEBUG=1)."
        ),
    ] = False,
) -> None:
    """Rename camera JPEGs from their metadata."""
    if no_rich:
        os.environ[ENV_DISABLE_RICH] = "1"
    setup_logger(verbose=verbose)


def _fail(message: str) -> typer.Exit:
    get_console(stderr=True).print(f"[red]Error: {message}[/red]")
    return typer.Exit(ExitCode.ERROR)


def _apply_exit_code(result: ApplyResult) -> ExitCode:
    return ExitCode.PARTIAL if result.failed else ExitCode.SUCCESS


def _run_apply(plan: RenamePlan, backup_originals: bool) -> ApplyResult:
    ledger = UndoLedger(get_ledger_path())
    try:
        return apply_plan(plan, ledger, backup_originals=backup_originals)
    except PhotognomeError as e:
        raise _fail(str(e)) from e


@app.command()
def rename(  # noqa: PLR0913
    jpg_input: JPG_INPUT,
    raw_input: RAW_INPUT = None,
    raw_parent: RAW_PARENT = None,
    template: TEMPLATE = None,
    exclude: EXCLUDE = None,
    dedupe_same_maker: DEDUPE = None,
    max_len: MAX_LEN = None,
    recursive: RECURSIVE = None,
    include_hidden: INCLUDE_HIDDEN = None,
    apply: APPLY = False,
    backup_originals: BACKUP = None,
    json_output: JSON_OUTPUT = False,
) -> None:
    """Plan new names for JPEGs (dry run) and optionally apply them."""
    console = get_console()
    try:
        request = PlanRequest(
            jpg_input=jpg_input,
            raw_input=raw_input,
            raw_parent_if_missing=resolve_setting(
                "rename.raw_parent_if_missing", default=False, cli_value=raw_parent
            ),
            template=resolve_setting(
                "rename.template", default=DEFAULT_TEMPLATE, cli_value=template
            ),
            exclusions=resolve_setting(
                "rename.exclusions",
                default=[],
                cli_value=list(exclude) if exclude else None,
            ),
            dedupe_same_maker=resolve_setting(
                "rename.dedupe_same_maker", default=True, cli_value=dedupe_same_maker
            ),
            max_filename_len=resolve_setting(
                "rename.max_filename_len",
                default=DEFAULT_MAX_FILENAME_LEN,
                cli_value=max_len,
            ),
            recursive=resolve_setting(
                "rename.recursive", default=False, cli_value=recursive
            ),
            include_hidden=resolve_setting(
                "rename.include_hidden", default=False, cli_value=include_hidden
            ),
        )
    except ValidationError as e:
        raise _fail(f"Invalid options: {e.errors()[0]['msg']}") from e

    try:
        if json_output:
            plan = build_plan(request)
        else:
            with console.status("[cyan]Planning names...", spinner="dots"):
                plan = build_plan(request)
    except PhotognomeError as e:
        raise _fail(str(e)) from e

    plan_id = save_plan(plan, extra_args={"apply": apply})

    result: Optional[ApplyResult] = None
    if apply:
        backup = resolve_setting(
            "apply.backup_originals", default=False, cli_value=backup_originals
        )
        result = _run_apply(plan, backup)

    if json_output:
        payload = {"plan": plan.model_dump(mode="json"), "apply": result}
        sys.stdout.write(dumps(payload, indent=2) + "\n")
    else:
        render_plan(plan, console=console)
        if result is not None:
            render_apply_result(result, console=console)
        else:
            console.print(
                f"Dry run: nothing renamed. Plan saved as [bold]{plan_id}[/bold]; "
                f"run [bold]photognome apply {plan_id}[/bold] to rename."
            )

    if result is not None:
        raise typer.Exit(_apply_exit_code(result))
    if plan.stats.errors:
        raise typer.Exit(ExitCode.PARTIAL)


@app.command("apply")
def apply_command(
    plan_id: Annotated[
        Optional[str],
        typer.Argument(help="ID of a saved plan (defaults to the latest)."),
    ] = None,
    backup_originals: BACKUP = None,
    yes: YES = False,
) -> None:
    """Apply a saved rename plan."""
    console = get_console()
    plan_id = plan_id or get_latest_plan_id()
    if plan_id is None:
        raise _fail("No saved plan found. Run 'photognome rename' first.")
    try:
        plan, _ = load_plan(plan_id)
    except (FileNotFoundError, ValueError) as e:
        raise _fail(str(e)) from e

    render_plan(plan, console=console)
    if not plan.changed_candidates:
        console.print("[yellow]Nothing to rename.[/yellow]")
        raise typer.Exit(ExitCode.SUCCESS)
    if not yes and not typer.confirm(f"Rename {len(plan.changed_candidates)} file(s)?"):
        console.print("Aborted.")
        raise typer.Exit(ExitCode.SUCCESS)

    backup = resolve_setting(
        "apply.backup_originals", default=False, cli_value=backup_originals
    )
    result = _run_apply(plan, backup)
    render_apply_result(result, console=console)
    raise typer.Exit(_apply_exit_code(result))


@app.command()
def undo(yes: YES = False) -> None:
    """Restore the original names of the most recent apply."""
    console = get_console()
    ledger = UndoLedger(get_ledger_path())
    try:
        entry = ledger.peek()
    except PhotognomeError as e:
        raise _fail(str(e)) from e
    if entry is None or not entry.operations:
        raise _fail("Nothing to undo: no rename has been applied")

    prompt = f"Restore {len(entry.operations)} file(s) to their original names?"
    if not yes and not typer.confirm(prompt):
        console.print("Aborted.")
        raise typer.Exit(ExitCode.SUCCESS)

    try:
        result = undo_last(ledger)
    except PhotognomeError as e:
        raise _fail(str(e)) from e
    render_undo_result(result, console=console)
    raise typer.Exit(ExitCode.PARTIAL if result.skipped else ExitCode.SUCCESS)


@app.command("template")
def template_command(
    template: Annotated[str, typer.Argument(help="Template to preview.")],
) -> None:
    """Preview the filename a template produces for sample metadata."""
    console = get_console()
    try:
        preview = render_preview(
            template,
            exclusions=resolve_setting("rename.exclusions", default=[]),
            dedupe_same_maker=resolve_setting("rename.dedupe_same_maker", default=True),
            max_len=resolve_setting(
                "rename.max_filename_len", default=DEFAULT_MAX_FILENAME_LEN
            ),
        )
    except PhotognomeError as e:
        raise _fail(str(e)) from e
    console.print(f"Preview: [bold green]{preview}[/bold green]")
    unknown = unknown_tokens(template)
    if unknown:
        names = ", ".join("{" + name + "}" for name in unknown)
        console.print(f"[yellow]Unknown tokens left as-is: {names}[/yellow]")


SETTINGS = {
    "rename.template": DEFAULT_TEMPLATE,
    "rename.exclusions": [],
    "rename.dedupe_same_maker": True,
    "rename.max_filename_len": DEFAULT_MAX_FILENAME_LEN,
    "rename.recursive": False,
    "rename.include_hidden": False,
    "rename.raw_parent_if_missing": False,
    "apply.backup_originals": False,
}


@config_app.command("show")
def config_show() -> None:
    """Show resolved settings and where the config file lives."""
    console = get_console()
    table = Table(title="photognome settings")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, default in SETTINGS.items():
        table.add_row(key, str(resolve_setting(key, default=default)))
    console.print(table)
    console.print(f"Config file: {get_config_file()}")
    console.print(f"Undo ledger: {get_ledger_path()}")


@config_app.command("set")
def config_set(
    key: Annotated[str, typer.Argument(help="Dotted key, e.g. rename.template.")],
    value: Annotated[
        str, typer.Argument(help="New value; lists are comma separated.")
    ],
) -> None:
    """Save a default for KEY in the config file."""
    if key not in SETTINGS:
        known = ", ".join(SETTINGS)
        raise _fail(f"Unknown setting: {key} (known: {known})")
    try:
        parsed = parse_setting(value, SETTINGS[key])
    except ValueError as e:
        raise _fail(f"Invalid value for {key}: {e}") from e
    if key == "rename.max_filename_len" and parsed <= 0:
        raise _fail(f"Invalid value for {key}: must be positive")
    try:
        path = set_setting(key, parsed)
    except OSError as e:
        raise _fail(f"Could not write config: {e}") from e
    get_console().print(f"Saved {key} = {parsed!r} to {path}", markup=False)


@app.command()
def version() -> None:
    """Show the version of photognome."""
    get_console().print(f"PhotoGnome version: [bold]{__version__}[/bold]")


def main() -> None:
    """Main entry point for the CLI."""
    app()
