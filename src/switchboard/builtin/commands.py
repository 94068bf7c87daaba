"""Builtin commands: help, version and interactive."""

from __future__ import annotations

from typing import Optional

import click
import typer
from rich.console import Console
from rich.table import Table

from switchboard import __version__
from switchboard.cli.registry import CommandContext
from switchboard.core.dispatch import strip_program_prefix
from switchboard.core.matcher import display_identifier, normalize_identifier
from switchboard.errors import CommandFailedError
from switchboard.hookspecs import hookimpl


def _context(ctx: typer.Context) -> CommandContext | None:
    obj = ctx.find_root().obj
    return obj if isinstance(obj, CommandContext) else None


def _resolve_path(root: click.Group, segments: list[str]) -> click.Command | None:
    command: click.Command = root
    for segment in segments:
        if not isinstance(command, click.Group):
            return None
        child = command.commands.get(segment)
        if child is None or child.hidden:
            return None
        command = child
    return command


def _plain_help(command: click.Command, info_name: str) -> str:
    with click.Context(command, info_name=info_name) as sub_ctx:
        formatter = sub_ctx.make_formatter()
        click.Command.format_help(command, sub_ctx, formatter)
        return formatter.getvalue().rstrip("\n")


def _render_overview(root: click.Group, prog_name: str, interactive: bool) -> None:
    console = Console(highlight=False)
    usage = "[COMMAND]" if interactive else f"{prog_name} [COMMAND]"
    console.print(f"[bold]USAGE[/bold]\n  {'switchboard> ' if interactive else '$ '}{usage}\n")

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Command", style="bold green")
    table.add_column("Description", style="dim")
    for name in sorted(root.commands):
        command = root.commands[name]
        if command.hidden:
            continue
        table.add_row(name, command.get_short_help_str(limit=70))
    console.print("[bold]COMMANDS[/bold]")
    console.print(table)


def help_command(
    ctx: typer.Context,
    path: Optional[list[str]] = typer.Argument(None, help="Topic or command to describe."),  # noqa: B008, UP007
) -> None:
    """Show help for switchboard, a topic or a command."""

    state = _context(ctx)
    interactive = state.interactive if state is not None else False
    root_ctx = ctx.find_root()
    root = root_ctx.command
    prog_name = root_ctx.info_name or "switchboard"
    if not isinstance(root, click.Group):
        return

    segments = normalize_identifier(" ".join(path or [])).split(":") if path else []
    if not segments:
        _render_overview(root, prog_name, interactive)
        return

    command = _resolve_path(root, segments)
    if command is None:
        shown = display_identifier(":".join(segments))
        raise CommandFailedError(f"Command {shown} not found. Run 'help' for a list of available commands.")

    text = _plain_help(command, " ".join([prog_name, *segments]))
    if interactive:
        text = strip_program_prefix(text, prog_name)
    typer.echo(text)


def version_command() -> None:
    """Show the switchboard version."""

    typer.echo(f"Version: {__version__}")


def interactive_command(ctx: typer.Context) -> None:
    """Start an interactive session."""

    state = _context(ctx)
    if state is not None and state.interactive:
        raise CommandFailedError("The 'interactive' command is not available in interactive mode.")

    from switchboard.cli.app import run_interactive
    from switchboard.config import load_settings

    settings = state.settings if state is not None else load_settings()
    raise typer.Exit(run_interactive(settings))


@hookimpl
def register_cli_commands(app: typer.Typer) -> None:
    app.command("help")(help_command)
    app.command("version")(version_command)
    app.command("interactive")(interactive_command)
