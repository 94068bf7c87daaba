"""Persistent interactive command history."""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from prompt_toolkit.history import InMemoryHistory


class HistoryManager:
    """Line-per-entry history file bounded to ``max_entries`` lines."""

    def __init__(self, path: Path, max_entries: int = 1000) -> None:
        self._path = path.expanduser()
        self._max_entries = max_entries

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[str]:
        if not self._path.exists():
            return []
        try:
            lines = self._path.read_text(encoding="utf-8").splitlines()
        except OSError as exc:
            logger.warning("history.load_failed path={} error={}", self._path, exc)
            return []
        entries = [line for line in lines if line.strip()]
        if self._max_entries:
            entries = entries[-self._max_entries :]
        return entries

    def append(self, line: str) -> None:
        entry = " ".join(line.splitlines()).strip()
        if not entry or self._max_entries == 0:
            return
        entries = [*self.load(), entry][-self._max_entries :]
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text("\n".join(entries) + "\n", encoding="utf-8")

    def prompt_history(self) -> InMemoryHistory:
        """History for up-arrow recall, seeded from the file."""
        return InMemoryHistory(self.load())
