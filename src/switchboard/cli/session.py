"""Interactive read-eval loop."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from typing import Protocol

from loguru import logger

from switchboard import __version__
from switchboard.cli.history import HistoryManager
from switchboard.cli.interrupts import InterruptAction, InterruptHandler
from switchboard.cli.state import SessionState
from switchboard.core.dispatch import Dispatcher
from switchboard.core.matcher import normalize_identifier
from switchboard.core.tokenizer import tokenize
from switchboard.errors import ResolutionMissError, SwitchboardError, UsageError

EXIT_COMMANDS = frozenset({"exit", "quit", ".exit"})
INTERACTIVE_UNSUITABLE = frozenset({"interactive"})
WRAPPER_EXIT_CODE = 42
FORCED_EXIT_CODE = 130


class InputReader(Protocol):
    @property
    def closed(self) -> bool: ...

    async def read_line(self) -> str: ...

    def clear_line(self) -> None: ...

    def pause(self) -> None: ...

    def resume(self) -> None: ...

    def close(self) -> None: ...


class SessionRenderer(Protocol):
    def info(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def usage_error(self, message: str, usage: str | None = None) -> None: ...

    def interrupt_marker(self) -> None: ...

    def interrupt_notice(self) -> None: ...

    def welcome(self, bin_name: str, version: str) -> None: ...


def hard_exit(code: int) -> None:
    """Leave the process now, without waiting for a command still running in a worker thread."""
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (OSError, ValueError):
            pass
    os._exit(code)


class InteractiveSession:
    """Reads lines, runs them one at a time and reacts to interrupts.

    The session is ``Idle`` while waiting for input and ``Running`` while a
    command is in flight. Input is paused for the whole run and resumed
    exactly once when the command settles, whatever the outcome.
    """

    def __init__(
        self,
        dispatcher: Dispatcher,
        reader: InputReader,
        renderer: SessionRenderer,
        *,
        state: SessionState,
        history: HistoryManager | None = None,
        bin_name: str = "switchboard",
        suppress_welcome: bool = False,
        terminate: Callable[[int], None] = hard_exit,
    ) -> None:
        self._dispatcher = dispatcher
        self._reader = reader
        self._renderer = renderer
        self._state = state
        self._history = history
        self._bin_name = bin_name
        self._suppress_welcome = suppress_welcome
        self._terminate = terminate
        self._interrupts = InterruptHandler(state, self._on_interrupt)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def interrupts(self) -> InterruptHandler:
        return self._interrupts

    def exit_code(self) -> int:
        return WRAPPER_EXIT_CODE if self._state.wrapper_mode else 0

    async def run(self) -> int:
        if not self._suppress_welcome:
            self._renderer.welcome(self._bin_name, __version__)
        logger.info("session.start wrapper_mode={}", self._state.wrapper_mode)

        with self._interrupts.activated():
            while not self._reader.closed:
                try:
                    line = await self._reader.read_line()
                except KeyboardInterrupt:
                    self._interrupts.trigger()
                    continue
                except EOFError:
                    break
                if line.strip() in EXIT_COMMANDS:
                    break
                await self.handle_line(line)

        self._reader.close()
        code = self.exit_code()
        logger.info("session.end exit_code={}", code)
        return code

    async def handle_line(self, line: str) -> None:
        result = tokenize(line)
        for warning in result.warnings:
            self._renderer.warning(warning)
        if not result.tokens:
            return

        self._record_history(line)
        argv = self._screen(result.tokens)
        if argv is None:
            return

        self._begin()
        try:
            await self._dispatcher.dispatch(argv)
        except ResolutionMissError as exc:
            self._renderer.error(exc.message)
        except UsageError as exc:
            self._renderer.usage_error(exc.message, exc.usage)
        except SwitchboardError as exc:
            self._renderer.error(str(exc))
        except Exception as exc:
            logger.opt(exception=True).error("session.dispatch_failed argv={}", argv)
            self._renderer.error(str(exc) or type(exc).__name__)
        finally:
            self._settle()

    def _screen(self, tokens: list[str]) -> list[str] | None:
        if tokens[0] == self._bin_name:
            if len(tokens) == 1:
                self._renderer.info(
                    "You're already in interactive mode. Type 'help' or press TAB to see available commands."
                )
                return None
            tokens = tokens[1:]
        if normalize_identifier(tokens[0]) in INTERACTIVE_UNSUITABLE:
            self._renderer.error(f"The '{tokens[0]}' command is not available in interactive mode.")
            return None
        return tokens

    def _record_history(self, line: str) -> None:
        if self._history is None:
            return
        try:
            self._history.append(line)
        except Exception:
            logger.opt(exception=True).warning("session.history_failed path={}", self._history.path)

    def _begin(self) -> None:
        if self._state.running:
            raise RuntimeError("a command is already running")
        self._state.running = True
        self._reader.pause()

    def _settle(self) -> None:
        self._state.running = False
        self._state.interrupt_armed = False
        self._reader.resume()

    def _on_interrupt(self, action: InterruptAction) -> None:
        if action is InterruptAction.CLEAR_LINE:
            self._reader.clear_line()
            self._renderer.interrupt_marker()
        elif action is InterruptAction.RECORD:
            self._renderer.interrupt_notice()
        else:
            self._renderer.warning("Interrupted twice; exiting.")
            self._terminate(FORCED_EXIT_CODE)
