"""Collaborator contracts used by the dispatch core."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class CommandRegistry(Protocol):
    """Read-only view over the known commands and topics."""

    separator: str

    def list_identifiers(self) -> list[str]:
        """Return every visible runnable identifier in canonical form."""
        ...

    def list_topics(self) -> list[str]:
        """Return every visible topic in canonical form."""
        ...

    def find_alias_target(self, identifier: str) -> str | None:
        """Return the identifier an alias points to, if ``identifier`` is one."""
        ...

    def list_aliases(self) -> list[str]:
        ...

    def contains(self, identifier: str) -> bool:
        """Exact lookup across commands, topics and aliases, hidden ones included."""
        ...

    def is_topic(self, identifier: str) -> bool:
        """True when ``identifier`` only groups subcommands and has no action of its own."""
        ...


@runtime_checkable
class CommandExecutor(Protocol):
    """Runs one resolved command."""

    async def run(self, command_id: str, args: list[str]) -> None:
        """Run ``command_id`` with ``args``; raise an ``ExecutorError`` on failure."""
        ...
