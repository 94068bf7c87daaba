from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from switchboard.core.matcher import normalize_identifier
from switchboard.errors import CommandNotFoundError


@dataclass
class FakeRegistry:
    identifiers: list[str]
    topics: list[str] = field(default_factory=list)
    aliases: dict[str, str] = field(default_factory=dict)
    hidden: list[str] = field(default_factory=list)
    separator: str = ":"

    def list_identifiers(self) -> list[str]:
        return sorted(self.identifiers)

    def list_topics(self) -> list[str]:
        return sorted(self.topics)

    def list_aliases(self) -> list[str]:
        return sorted(self.aliases)

    def find_alias_target(self, identifier: str) -> str | None:
        return self.aliases.get(normalize_identifier(identifier))

    def contains(self, identifier: str) -> bool:
        key = normalize_identifier(identifier)
        return key in {*self.identifiers, *self.topics, *self.aliases, *self.hidden}

    def is_topic(self, identifier: str) -> bool:
        key = normalize_identifier(identifier)
        return key in self.topics and key not in self.identifiers


@dataclass
class FakeExecutor:
    registry: FakeRegistry
    calls: list[tuple[str, list[str]]] = field(default_factory=list)
    failures: dict[str, Exception] = field(default_factory=dict)

    async def run(self, command_id: str, args: list[str]) -> None:
        self.calls.append((command_id, list(args)))
        if command_id and not self.registry.contains(command_id):
            raise CommandNotFoundError(command_id)
        failure = self.failures.get(command_id)
        if failure is not None:
            raise failure


@dataclass
class FakeNotifier:
    answer: bool = True
    warnings: list[str] = field(default_factory=list)
    questions: list[str] = field(default_factory=list)

    def warning(self, message: str) -> None:
        self.warnings.append(message)

    def confirm(self, message: str) -> bool:
        self.questions.append(message)
        return self.answer


@pytest.fixture
def registry() -> FakeRegistry:
    return FakeRegistry(
        identifiers=[
            "channels:publish",
            "channels:list",
            "channels:subscribe",
            "rooms:create",
            "help",
            "version",
        ],
        topics=["channels", "rooms"],
        aliases={"pub": "channels:publish"},
        hidden=["debug:dump"],
    )


@pytest.fixture
def executor(registry: FakeRegistry) -> FakeExecutor:
    return FakeExecutor(registry)


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()
