"""Mutable state of one interactive session."""

from __future__ import annotations

from enum import StrEnum


class SessionPhase(StrEnum):
    IDLE = "idle"
    RUNNING = "running"


class SessionState:
    """Running/idle flag plus interrupt bookkeeping for one session.

    ``wrapper_mode`` is fixed when the session starts. ``running`` is true while
    a command is in flight and ``interrupt_armed`` records that one interrupt
    already arrived during that command.
    """

    def __init__(self, *, wrapper_mode: bool = False) -> None:
        self._wrapper_mode = wrapper_mode
        self.running = False
        self.interrupt_armed = False

    @property
    def wrapper_mode(self) -> bool:
        return self._wrapper_mode

    @property
    def phase(self) -> SessionPhase:
        return SessionPhase.RUNNING if self.running else SessionPhase.IDLE

    def __repr__(self) -> str:
        return (
            f"SessionState(phase={self.phase.value}, wrapper_mode={self._wrapper_mode}, "
            f"interrupt_armed={self.interrupt_armed})"
        )
