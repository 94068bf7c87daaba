from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest
from conftest import FakeExecutor, FakeRegistry

from switchboard.cli.history import HistoryManager
from switchboard.cli.session import FORCED_EXIT_CODE, WRAPPER_EXIT_CODE, InteractiveSession
from switchboard.cli.state import SessionState
from switchboard.core.dispatch import Dispatcher
from switchboard.core.resolver import CommandResolver
from switchboard.errors import UsageError


class FakeReader:
    def __init__(self, inputs: list[str | BaseException]) -> None:
        self._inputs = list(inputs)
        self.closed = False
        self.paused = False
        self.pauses = 0
        self.resumes = 0
        self.cleared = 0
        self.read_while_paused = False

    async def read_line(self) -> str:
        if self.paused:
            self.read_while_paused = True
        if not self._inputs:
            raise EOFError
        item = self._inputs.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    def clear_line(self) -> None:
        self.cleared += 1

    def pause(self) -> None:
        self.paused = True
        self.pauses += 1

    def resume(self) -> None:
        self.paused = False
        self.resumes += 1

    def close(self) -> None:
        self.closed = True


@dataclass
class FakeRenderer:
    infos: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    usage_errors: list[tuple[str, str | None]] = field(default_factory=list)
    markers: int = 0
    notices: int = 0
    welcomed: list[str] = field(default_factory=list)

    def info(self, message: str) -> None:
        self.infos.append(message)

    def warning(self, message: str) -> None:
        self.warnings.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)

    def usage_error(self, message: str, usage: str | None = None) -> None:
        self.usage_errors.append((message, usage))

    def interrupt_marker(self) -> None:
        self.markers += 1

    def interrupt_notice(self) -> None:
        self.notices += 1

    def welcome(self, bin_name: str, version: str) -> None:
        self.welcomed.append(f"{bin_name} {version}")

    def confirm(self, message: str) -> bool:
        return True


class InterruptingExecutor(FakeExecutor):
    def __init__(self, registry: FakeRegistry, interrupts: int) -> None:
        super().__init__(registry)
        self.interrupts = interrupts
        self.session: InteractiveSession | None = None

    async def run(self, command_id: str, args: list[str]) -> None:
        assert self.session is not None
        for _ in range(self.interrupts):
            self.session.interrupts.trigger()
        await super().run(command_id, args)


def _session(
    registry: FakeRegistry,
    executor: FakeExecutor,
    inputs: list[str | BaseException],
    *,
    wrapper_mode: bool = False,
    history: HistoryManager | None = None,
    suppress_welcome: bool = True,
) -> tuple[InteractiveSession, FakeReader, FakeRenderer, list[int]]:
    reader = FakeReader(inputs)
    renderer = FakeRenderer()
    terminated: list[int] = []
    dispatcher = Dispatcher(
        registry,
        executor,
        CommandResolver(registry),
        renderer,
        interactive=True,
    )
    session = InteractiveSession(
        dispatcher,
        reader,
        renderer,
        state=SessionState(wrapper_mode=wrapper_mode),
        history=history,
        suppress_welcome=suppress_welcome,
        terminate=terminated.append,
    )
    return session, reader, renderer, terminated


@pytest.mark.asyncio
async def test_exit_returns_zero_and_closes_reader(registry, executor) -> None:
    session, reader, _, _ = _session(registry, executor, ["exit", "version"])

    assert await session.run() == 0
    assert reader.closed
    assert executor.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("word", ["exit", "quit", ".exit"])
async def test_wrapper_mode_exit_uses_distinguished_code(registry, executor, word: str) -> None:
    session, _, _, _ = _session(registry, executor, [word], wrapper_mode=True)

    assert await session.run() == WRAPPER_EXIT_CODE


@pytest.mark.asyncio
async def test_end_of_input_ends_session(registry, executor) -> None:
    session, reader, _, _ = _session(registry, executor, ["version"])

    assert await session.run() == 0
    assert reader.closed
    assert executor.calls == [("version", [])]


@pytest.mark.asyncio
async def test_every_dispatch_settles_exactly_once(registry, executor) -> None:
    executor.failures["version"] = RuntimeError("kaput")
    session, reader, renderer, _ = _session(
        registry,
        executor,
        ["channels publish news", "   ", "zzzzzzzz", "version", "exit"],
    )

    await session.run()

    assert reader.pauses == 3
    assert reader.resumes == 3
    assert not reader.read_while_paused
    assert not session.state.running
    assert renderer.errors == [
        "Command zzzzzzzz not found. Run 'help' for a list of available commands.",
        "kaput",
    ]


@pytest.mark.asyncio
async def test_corrected_command_warns_then_runs(registry, executor) -> None:
    session, _, renderer, _ = _session(registry, executor, ['channels pubish news "hello world"'])

    await session.run()

    assert renderer.warnings == ["channels pubish is not a switchboard command. Running channels publish instead."]
    assert executor.calls[-1] == ("channels:publish", ["news", "hello world"])


@pytest.mark.asyncio
async def test_usage_error_is_rendered_with_interactive_hint(registry, executor) -> None:
    executor.failures["channels:publish"] = UsageError(
        "Missing argument 'CHANNEL'.\nSee more help with --help",
        "Usage: switchboard channels publish [OPTIONS] CHANNEL",
    )
    session, _, renderer, _ = _session(registry, executor, ["channels pubish"])

    await session.run()

    assert renderer.usage_errors == [
        (
            "Missing argument 'CHANNEL'.\nSee more help with:\n  channels publish --help",
            "Usage: channels publish [OPTIONS] CHANNEL",
        )
    ]


@pytest.mark.asyncio
async def test_tokenizer_warnings_are_shown(registry, executor) -> None:
    session, _, renderer, _ = _session(registry, executor, ['channels publish news "hello'])

    await session.run()

    assert renderer.warnings == ["Unclosed double quote in input; treating the rest of the line as one argument."]
    assert executor.calls == [("channels:publish", ["news", "hello"])]


@pytest.mark.asyncio
async def test_idle_interrupt_clears_line_and_never_exits(registry, executor) -> None:
    session, reader, renderer, terminated = _session(
        registry,
        executor,
        [KeyboardInterrupt(), KeyboardInterrupt(), "version", "exit"],
    )

    assert await session.run() == 0
    assert reader.cleared == 2
    assert renderer.markers == 2
    assert terminated == []
    assert executor.calls == [("version", [])]


@pytest.mark.asyncio
async def test_single_interrupt_while_running_is_recorded(registry) -> None:
    executor = InterruptingExecutor(registry, interrupts=1)
    session, _, renderer, terminated = _session(registry, executor, ["version"])
    executor.session = session

    await session.run()

    assert renderer.notices == 1
    assert terminated == []
    assert not session.state.interrupt_armed


@pytest.mark.asyncio
async def test_second_interrupt_while_running_terminates(registry) -> None:
    executor = InterruptingExecutor(registry, interrupts=2)
    session, _, renderer, terminated = _session(registry, executor, ["version"])
    executor.session = session

    await session.run()

    assert renderer.notices == 1
    assert terminated == [FORCED_EXIT_CODE]


@pytest.mark.asyncio
async def test_bin_name_alone_reports_interactive_mode(registry, executor) -> None:
    session, _, renderer, _ = _session(registry, executor, ["switchboard", "switchboard version"])

    await session.run()

    assert renderer.infos == [
        "You're already in interactive mode. Type 'help' or press TAB to see available commands."
    ]
    assert executor.calls == [("version", [])]


@pytest.mark.asyncio
async def test_interactive_command_is_blocked(registry, executor) -> None:
    session, _, renderer, _ = _session(registry, executor, ["interactive"])

    await session.run()

    assert renderer.errors == ["The 'interactive' command is not available in interactive mode."]
    assert executor.calls == []


@pytest.mark.asyncio
async def test_history_records_non_empty_lines(registry, executor, tmp_path: Path) -> None:
    history = HistoryManager(tmp_path / "history")
    session, _, _, _ = _session(registry, executor, ["version", "  ", "help", "exit"], history=history)

    await session.run()

    assert history.load() == ["version", "help"]


@pytest.mark.asyncio
async def test_history_failure_does_not_stop_dispatch(registry, executor, tmp_path: Path) -> None:
    broken = tmp_path / "history"
    broken.mkdir()
    session, _, renderer, _ = _session(registry, executor, ["version"], history=HistoryManager(broken))

    await session.run()

    assert executor.calls == [("version", [])]
    assert renderer.errors == []


@pytest.mark.asyncio
async def test_welcome_banner_unless_suppressed(registry, executor) -> None:
    session, _, renderer, _ = _session(registry, executor, [], suppress_welcome=False)

    await session.run()

    assert len(renderer.welcomed) == 1
    assert renderer.welcomed[0].startswith("switchboard ")
