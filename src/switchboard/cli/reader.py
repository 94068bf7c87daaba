"""Interactive line input built on prompt_toolkit."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document
from prompt_toolkit.history import History
from prompt_toolkit.patch_stdout import patch_stdout

from switchboard.core.matcher import CANONICAL_SEPARATOR

DEFAULT_PROMPT = "switchboard> "


class CompletionSource(Protocol):
    def children(self, identifier: str = "") -> list[str]: ...

    def short_help(self, identifier: str) -> str: ...

    def options(self, identifier: str) -> list[tuple[str, str]]: ...


class CommandPathCompleter(Completer):
    """Complete command path words, then the flags of the command they name."""

    def __init__(self, source: CompletionSource) -> None:
        self._source = source

    def get_completions(self, document: Document, complete_event: CompleteEvent) -> Iterable[Completion]:
        text = document.text_before_cursor
        words = text.split()
        if text and not text[-1].isspace():
            current = words.pop() if words else ""
        else:
            current = ""

        path: list[str] = []
        for word in words:
            if word.startswith("-") or word not in self._source.children(CANONICAL_SEPARATOR.join(path)):
                break
            path.append(word)
        parent = CANONICAL_SEPARATOR.join(path)

        if current.startswith("-"):
            used = set(words)
            for flag, help_text in self._source.options(parent):
                if flag.startswith(current) and flag not in used:
                    yield Completion(flag, start_position=-len(current), display_meta=help_text)
            return

        # Arguments already follow the command path; only flags are completed from here on.
        if len(path) != len(words):
            return
        for name in self._source.children(parent):
            if name.startswith(current):
                identifier = CANONICAL_SEPARATOR.join([*path, name])
                yield Completion(
                    name,
                    start_position=-len(current),
                    display_meta=self._source.short_help(identifier),
                )


class LineReader:
    """Reads one line at a time; paused while a command is running."""

    def __init__(
        self,
        prompt: str = DEFAULT_PROMPT,
        *,
        history: History | None = None,
        completer: Completer | None = None,
    ) -> None:
        self._prompt = prompt
        self._session: PromptSession[str] = PromptSession(
            history=history,
            completer=completer,
            complete_while_typing=False,
        )
        self._paused = False
        self._closed = False

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def closed(self) -> bool:
        return self._closed

    async def read_line(self) -> str:
        """Prompt for a line; Ctrl+C raises KeyboardInterrupt and Ctrl+D EOFError."""
        if self._closed:
            raise EOFError
        if self._paused:
            raise RuntimeError("input reader is paused")
        with patch_stdout(raw=True):
            # SIGINT stays with the session handler; Ctrl+C at the prompt arrives as a key press.
            return await self._session.prompt_async(self._prompt, handle_sigint=False)

    def clear_line(self) -> None:
        app = self._session.app
        if app.is_running:
            app.current_buffer.reset()

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    def close(self) -> None:
        self._closed = True
