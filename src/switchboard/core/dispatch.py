"""Route an argument vector to the executor, correcting unknown commands."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol

from loguru import logger

from switchboard.core.matcher import CANONICAL_SEPARATOR, display_identifier
from switchboard.core.resolver import CommandResolver, NotFound
from switchboard.core.types import CommandExecutor, CommandRegistry
from switchboard.errors import CommandNotFoundError, ResolutionMissError, UsageError

HELP_HINT_RE = re.compile(r"see more help with --help", re.IGNORECASE)
SEGMENT_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


class Notifier(Protocol):
    def warning(self, message: str) -> None: ...

    def confirm(self, message: str) -> bool: ...


@dataclass(frozen=True)
class CommandLine:
    """An argument vector split into a command identifier and its arguments."""

    command_id: str
    args: list[str]
    known: bool


def split_command(argv: list[str], registry: CommandRegistry) -> CommandLine:
    """Find the command path at the head of ``argv``.

    The longest run of leading words that names a registered command wins.
    A bare topic followed by more words is not a match, since topics do not
    take arguments; the whole run is then reported as unknown.
    """

    if not argv or argv[0].startswith("-"):
        return CommandLine(command_id="", args=list(argv), known=True)

    head = [segment for segment in argv[0].split(CANONICAL_SEPARATOR) if segment]
    index = 1
    while index < len(argv) and SEGMENT_RE.match(argv[index]):
        head.append(argv[index])
        index += 1
    rest = list(argv[index:])

    for size in range(len(head), 0, -1):
        candidate = CANONICAL_SEPARATOR.join(head[:size])
        if not registry.contains(candidate):
            continue
        if registry.is_topic(candidate) and size < len(head):
            break
        return CommandLine(command_id=candidate, args=[*head[size:], *rest], known=True)

    return CommandLine(command_id=CANONICAL_SEPARATOR.join(head), args=rest, known=False)


def strip_program_prefix(text: str, bin_name: str) -> str:
    """Drop the program name from usage and example lines for interactive display."""

    pattern = re.compile(rf"(?m)^(\s*(?:Usage:\s*|\$\s*)?){re.escape(bin_name)} ")
    return pattern.sub(r"\1", text)


class Dispatcher:
    """Run commands and recover from unknown identifiers via the resolver."""

    def __init__(
        self,
        registry: CommandRegistry,
        executor: CommandExecutor,
        resolver: CommandResolver,
        notifier: Notifier,
        *,
        bin_name: str = "switchboard",
        interactive: bool = False,
        confirm_suggestions: bool = False,
    ) -> None:
        self._registry = registry
        self._executor = executor
        self._resolver = resolver
        self._notifier = notifier
        self._bin_name = bin_name
        self._interactive = interactive
        self._confirm_suggestions = confirm_suggestions

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    async def dispatch(self, argv: list[str]) -> None:
        line = split_command(argv, self._registry)
        command_id = self._registry.find_alias_target(line.command_id) or line.command_id
        logger.debug("dispatch.run id={} args={}", command_id, len(line.args))
        try:
            await self._executor.run(command_id, line.args)
        except CommandNotFoundError:
            await self._recover(line.command_id, line.args)

    async def _recover(self, raw_id: str, args: list[str]) -> None:
        outcome = self._resolver.resolve(raw_id, args)
        if isinstance(outcome, NotFound):
            raise ResolutionMissError(raw_id, self.not_found_message(raw_id))

        corrected = display_identifier(outcome.matched_id)
        if outcome.corrected:
            typed = display_identifier(outcome.typed_id)
            self._notifier.warning(f"{typed} is not a {self._bin_name} command. Running {corrected} instead.")
            if self._confirm_suggestions and not self._notifier.confirm(f"Did you mean {corrected}?"):
                raise ResolutionMissError(raw_id, self.not_found_message(raw_id))
        logger.info("dispatch.corrected typed={} id={}", raw_id, outcome.matched_id)

        try:
            await self._executor.run(outcome.matched_id, outcome.forwarded_args)
        except CommandNotFoundError as exc:
            raise ResolutionMissError(raw_id, self.not_found_message(raw_id)) from exc
        except UsageError as exc:
            raise exc.with_message(
                self.qualify_help_hint(exc.message, outcome.matched_id),
                self.format_usage(exc.usage),
            ) from exc

    def qualify_help_hint(self, message: str, command_id: str) -> str:
        """Replace a bare ``--help`` hint with one naming the full command path."""

        invocation = f"{self._program_prefix()}{display_identifier(command_id)} --help"
        return HELP_HINT_RE.sub(lambda _: f"See more help with:\n  {invocation}", message)

    def format_usage(self, usage: str | None) -> str | None:
        if usage is None or not self._interactive:
            return usage
        return strip_program_prefix(usage, self._bin_name)

    def not_found_message(self, raw_id: str) -> str:
        shown = display_identifier(raw_id) or raw_id
        if self._interactive:
            return f"Command {shown} not found. Run 'help' for a list of available commands."
        return f"Command {shown} not found.\nRun {self._bin_name} --help for a list of available commands."

    def _program_prefix(self) -> str:
        return "" if self._interactive else f"{self._bin_name} "
