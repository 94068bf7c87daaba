"""Plugin loading and root command tree assembly."""

from __future__ import annotations

from types import ModuleType
from typing import Any

import pluggy
import typer
from loguru import logger

from switchboard import __version__
from switchboard.hookspecs import SWITCHBOARD_HOOK_NAMESPACE, SwitchboardHookSpecs

ROOT_HELP = "Publish, subscribe and manage realtime resources from the terminal."


class SwitchboardFramework:
    """Collects commands and aliases contributed by plugins."""

    def __init__(self, bin_name: str = "switchboard") -> None:
        self.bin_name = bin_name
        self._plugin_manager = pluggy.PluginManager(SWITCHBOARD_HOOK_NAMESPACE)
        self._plugin_manager.add_hookspecs(SwitchboardHookSpecs)
        self._failed_plugins: dict[str, str] = {}

    @property
    def failed_plugins(self) -> dict[str, str]:
        return dict(self._failed_plugins)

    def register_plugin(self, plugin: ModuleType | object, name: str | None = None) -> None:
        self._plugin_manager.register(plugin, name=name)

    def load_plugins(self, *, entry_points: bool = True) -> None:
        """Register builtin commands, then installed ``switchboard`` entry points."""

        from switchboard.builtin import commands

        if not self._plugin_manager.is_registered(commands):
            self.register_plugin(commands, name="builtin")
        if not entry_points:
            return
        try:
            loaded = self._plugin_manager.load_setuptools_entrypoints(SWITCHBOARD_HOOK_NAMESPACE)
        except Exception as exc:
            self._failed_plugins["entrypoints"] = str(exc)
            logger.opt(exception=True).warning("plugin.load_failed group={}", SWITCHBOARD_HOOK_NAMESPACE)
            return
        logger.debug("plugin.loaded count={}", loaded)

    def build_app(self) -> typer.Typer:
        """Create the root Typer application and let plugins populate it."""

        app = typer.Typer(
            name=self.bin_name,
            help=ROOT_HELP,
            add_completion=False,
            rich_markup_mode=None,
        )

        @app.callback(invoke_without_command=True)
        def _root(
            ctx: typer.Context,
            version: bool = typer.Option(False, "--version", "-v", is_eager=True, help="Show the version and exit."),
        ) -> None:
            if version:
                typer.echo(f"Version: {__version__}")
                raise typer.Exit()
            if ctx.invoked_subcommand is None:
                from switchboard.builtin.commands import help_command

                help_command(ctx, None)

        self._plugin_manager.hook.register_cli_commands(app=app)
        return app

    def command_aliases(self) -> dict[str, str]:
        aliases: dict[str, str] = {}
        for provided in self._plugin_manager.hook.provide_command_aliases():
            if provided:
                aliases.update(provided)
        return aliases

    def hook_report(self) -> dict[str, list[str]]:
        """Return hook implementation summary for diagnostics."""

        report: dict[str, list[str]] = {}
        for hook_name in ("register_cli_commands", "provide_command_aliases"):
            caller: Any = getattr(self._plugin_manager.hook, hook_name)
            names = [impl.plugin_name for impl in caller.get_hookimpls()]
            if names:
                report[hook_name] = names
        return report
