"""Application-level exception types for switchboard."""

from __future__ import annotations


class SwitchboardError(Exception):
    """Base exception for switchboard."""

    exit_code: int = 1


class ExecutorError(SwitchboardError):
    """Base exception for failures reported by a command executor."""


class CommandNotFoundError(ExecutorError):
    """Raised when a command id has no registered handler."""

    def __init__(self, command_id: str) -> None:
        super().__init__(f"command not found: {command_id}")
        self.command_id = command_id


class UsageError(ExecutorError):
    """Raised when a command is invoked with missing or invalid arguments."""

    exit_code = 2

    def __init__(self, message: str, usage: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.usage = usage

    def with_message(self, message: str, usage: str | None = None) -> UsageError:
        return UsageError(message, usage if usage is not None else self.usage)


class CommandFailedError(ExecutorError):
    """Raised for any other command failure."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


class ResolutionMissError(SwitchboardError):
    """Raised when a typed command is not close enough to any known command."""

    def __init__(self, command_id: str, message: str) -> None:
        super().__init__(message)
        self.command_id = command_id
        self.message = message
