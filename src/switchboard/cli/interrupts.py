"""Process interrupt (SIGINT) handling for the interactive session."""

from __future__ import annotations

import asyncio
import contextlib
import signal
from collections.abc import Callable, Iterator
from enum import StrEnum
from typing import Any

from loguru import logger

from switchboard.cli.state import SessionState


class InterruptAction(StrEnum):
    CLEAR_LINE = "clear_line"
    RECORD = "record"
    TERMINATE = "terminate"


def decide_interrupt(state: SessionState) -> InterruptAction:
    """Pick the reaction to one interrupt from the session state alone."""

    if not state.running:
        return InterruptAction.CLEAR_LINE
    if state.interrupt_armed:
        return InterruptAction.TERMINATE
    return InterruptAction.RECORD


class InterruptHandler:
    """Owned SIGINT subscription; at most one may be installed per process."""

    _active: InterruptHandler | None = None

    def __init__(self, state: SessionState, on_action: Callable[[InterruptAction], None]) -> None:
        self._state = state
        self._on_action = on_action
        self._loop: asyncio.AbstractEventLoop | None = None
        self._previous: Any = None
        self._mode: str | None = None

    @property
    def installed(self) -> bool:
        return self._mode is not None

    def trigger(self) -> InterruptAction:
        action = decide_interrupt(self._state)
        if action is InterruptAction.RECORD:
            self._state.interrupt_armed = True
        logger.debug("interrupt.{} state={!r}", action.value, self._state)
        self._on_action(action)
        return action

    def install(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        active = InterruptHandler._active
        if active is not None and active is not self:
            raise RuntimeError("another interrupt handler is already installed")
        if self.installed:
            return

        self._loop = loop or asyncio.get_running_loop()
        try:
            self._loop.add_signal_handler(signal.SIGINT, self.trigger)
            self._mode = "loop"
        except (NotImplementedError, RuntimeError, ValueError):
            try:
                self._previous = signal.signal(signal.SIGINT, self._on_signal)
                self._mode = "signal"
            except ValueError:
                # Not on the main thread: signals cannot be observed here.
                logger.debug("interrupt.install skipped: not on the main thread")
                self._mode = "none"
        InterruptHandler._active = self

    def remove(self) -> None:
        if self._mode == "loop" and self._loop is not None:
            self._loop.remove_signal_handler(signal.SIGINT)
        elif self._mode == "signal":
            signal.signal(signal.SIGINT, self._previous or signal.default_int_handler)
        self._mode = None
        self._loop = None
        self._previous = None
        if InterruptHandler._active is self:
            InterruptHandler._active = None

    @contextlib.contextmanager
    def activated(self, loop: asyncio.AbstractEventLoop | None = None) -> Iterator[InterruptHandler]:
        self.install(loop)
        try:
            yield self
        finally:
            self.remove()

    def _on_signal(self, _signum: int, _frame: Any) -> None:
        if self._loop is not None and self._loop.is_running():
            self._loop.call_soon_threadsafe(self.trigger)
        else:
            self.trigger()
