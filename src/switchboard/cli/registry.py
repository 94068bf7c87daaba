"""Command registry and executor backed by a Typer application."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import click
import typer
from loguru import logger
from typer.main import get_command

from switchboard.config import Settings
from switchboard.core.matcher import CANONICAL_SEPARATOR, normalize_identifier, split_identifier
from switchboard.errors import CommandFailedError, CommandNotFoundError, SwitchboardError, UsageError


@dataclass
class CommandContext:
    """Shared state handed to commands as ``click.Context.obj``."""

    registry: TyperCommandRegistry
    settings: Settings
    interactive: bool = False


@dataclass(frozen=True)
class _Entry:
    command: click.Command
    hidden: bool
    topic: bool
    runnable: bool


class TyperCommandRegistry:
    """Flattened view of a Typer command tree keyed by ``topic:command`` ids.

    Sub-applications become topics. A topic is runnable only when its group
    callback accepts being invoked without a subcommand.
    """

    separator = CANONICAL_SEPARATOR

    def __init__(self, app: typer.Typer, *, aliases: Mapping[str, str] | None = None) -> None:
        root = get_command(app)
        if not isinstance(root, click.Group):
            raise TypeError("the root application must define a group of commands")
        self._root = root
        self._entries: dict[str, _Entry] = {}
        self._walk(root, [], hidden=False)
        self._aliases: dict[str, str] = {}
        for alias, target in (aliases or {}).items():
            self.add_alias(alias, target)

    @property
    def root(self) -> click.Group:
        return self._root

    def add_alias(self, alias: str, target: str) -> None:
        alias_id = normalize_identifier(alias)
        target_id = normalize_identifier(target)
        if target_id not in self._entries:
            logger.warning("registry.alias_ignored alias={} target={}", alias_id, target_id)
            return
        if alias_id in self._entries:
            logger.warning("registry.alias_shadowed alias={}", alias_id)
            return
        self._aliases[alias_id] = target_id

    def list_identifiers(self) -> list[str]:
        return sorted(key for key, entry in self._entries.items() if entry.runnable and not entry.hidden)

    def list_topics(self) -> list[str]:
        return sorted(key for key, entry in self._entries.items() if entry.topic and not entry.hidden)

    def list_aliases(self) -> list[str]:
        return sorted(alias for alias, target in self._aliases.items() if not self._entries[target].hidden)

    def find_alias_target(self, identifier: str) -> str | None:
        return self._aliases.get(normalize_identifier(identifier))

    def contains(self, identifier: str) -> bool:
        key = normalize_identifier(identifier)
        return key in self._entries or key in self._aliases

    def is_topic(self, identifier: str) -> bool:
        entry = self._entries.get(normalize_identifier(identifier))
        return entry is not None and entry.topic and not entry.runnable

    def get(self, identifier: str) -> click.Command | None:
        key = normalize_identifier(identifier)
        if not key:
            return self._root
        entry = self._entries.get(self._aliases.get(key, key))
        return entry.command if entry is not None else None

    def children(self, identifier: str = "") -> list[str]:
        """Names of the visible direct subcommands of ``identifier``."""

        prefix = normalize_identifier(identifier)
        depth = len(split_identifier(prefix))
        names: list[str] = []
        for key, entry in self._entries.items():
            segments = key.split(CANONICAL_SEPARATOR)
            if entry.hidden or len(segments) != depth + 1:
                continue
            if CANONICAL_SEPARATOR.join(segments[:depth]) == prefix:
                names.append(segments[-1])
        return sorted(names)

    def short_help(self, identifier: str) -> str:
        command = self.get(identifier)
        if command is None:
            return ""
        return command.get_short_help_str(limit=80)

    def options(self, identifier: str) -> list[tuple[str, str]]:
        """Visible option flags of ``identifier`` paired with their help text."""

        command = self.get(identifier)
        if command is None:
            return []
        flags: list[tuple[str, str]] = []
        for param in command.params:
            if not isinstance(param, click.Option) or param.hidden:
                continue
            flags.extend((flag, param.help or "") for flag in [*param.opts, *param.secondary_opts])
        return sorted(flags)

    def _walk(self, group: click.Group, path: list[str], *, hidden: bool) -> None:
        for name, command in group.commands.items():
            key = CANONICAL_SEPARATOR.join([*path, name])
            is_group = isinstance(command, click.Group)
            entry = _Entry(
                command=command,
                hidden=hidden or command.hidden,
                topic=is_group,
                runnable=not is_group or bool(command.invoke_without_command),
            )
            self._entries[key] = entry
            if isinstance(command, click.Group):
                self._walk(command, [*path, name], hidden=entry.hidden)


class TyperCommandExecutor:
    """Runs registry commands through click in a worker thread."""

    def __init__(self, registry: TyperCommandRegistry, *, prog_name: str, obj: Any = None) -> None:
        self._registry = registry
        self._prog_name = prog_name
        self._obj = obj

    async def run(self, command_id: str, args: list[str]) -> None:
        if command_id and not self._registry.contains(command_id):
            raise CommandNotFoundError(command_id)
        target = self._registry.find_alias_target(command_id) or command_id
        argv = [*split_identifier(target), *args]
        if not args and self._registry.is_topic(target):
            # A bare topic shows its commands instead of failing with a missing-command usage error.
            argv = ["help", *argv] if self._registry.contains("help") else [*argv, "--help"]
        logger.debug("executor.run id={} argv={}", target, argv)
        await asyncio.to_thread(self._invoke, argv)

    def _invoke(self, argv: list[str]) -> None:
        try:
            result = self._registry.root.main(
                args=argv,
                prog_name=self._prog_name,
                standalone_mode=False,
                obj=self._obj,
            )
        except click.UsageError as exc:
            usage = exc.ctx.get_usage() if exc.ctx is not None else None
            raise UsageError(f"{exc.format_message()}\nSee more help with --help", usage) from exc
        except click.Abort as exc:
            raise CommandFailedError("Aborted!") from exc
        except click.ClickException as exc:
            raise CommandFailedError(exc.format_message(), exit_code=exc.exit_code) from exc
        except SwitchboardError:
            raise
        except Exception as exc:
            logger.opt(exception=True).debug("executor.failed argv={}", argv)
            raise CommandFailedError(str(exc) or type(exc).__name__) from exc

        # click returns the exit code instead of raising when standalone_mode is off
        if isinstance(result, int) and not isinstance(result, bool) and result != 0:
            raise CommandFailedError(f"Command exited with code {result}", exit_code=result)
