"""Pluggy hook namespace and command plugin specifications."""

from __future__ import annotations

from typing import Any

import pluggy

SWITCHBOARD_HOOK_NAMESPACE = "switchboard"
hookspec = pluggy.HookspecMarker(SWITCHBOARD_HOOK_NAMESPACE)
hookimpl = pluggy.HookimplMarker(SWITCHBOARD_HOOK_NAMESPACE)


class SwitchboardHookSpecs:
    """Hook contract for command plugins."""

    @hookspec
    def register_cli_commands(self, app: Any) -> None:
        """Register topics and commands onto the root Typer application."""

    @hookspec
    def provide_command_aliases(self) -> dict[str, str] | None:
        """Return extra names mapping to existing command identifiers."""
