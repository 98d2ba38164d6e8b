"""Testimony recording and playback, and the judge action log of an area."""

from __future__ import annotations

from collections import deque
from typing import Iterable, Iterator, Sequence

from akashi.area_types import TestimonyProgress, TestimonyRecording

JUDGELOG_LIMIT = 10


class Testimony:
    """The recorded statements of an area; the first statement is the title."""

    def __init__(self) -> None:
        self.recording = TestimonyRecording.STOPPED
        self.statement = 0
        self._statements: list[list[str]] = []

    @property
    def statements(self) -> list[list[str]]:
        """A copy of every recorded statement, title first."""
        return [list(statement) for statement in self._statements]

    def __len__(self) -> int:
        return len(self._statements)

    def __iter__(self) -> Iterator[list[str]]:
        return iter(self.statements)

    def restart(self) -> None:
        """Go back to the first statement and switch to playback."""
        self.recording = TestimonyRecording.PLAYBACK
        self.statement = 0

    def clear(self) -> None:
        """Drop every statement and stop the recorder."""
        self.recording = TestimonyRecording.STOPPED
        self.statement = -1
        self._statements.clear()

    def record_statement(self, statement: Iterable[str]) -> None:
        """Append a statement and move the index forward by one."""
        self.statement += 1
        self._statements.append(list(statement))

    def _check_index(self, position: int, upper: int) -> None:
        if not 0 <= position < upper:
            raise IndexError(f"statement position {position} out of range")

    def add_statement(self, position: int, statement: Iterable[str]) -> None:
        """Insert a statement at ``position``."""
        self._check_index(position, len(self._statements) + 1)
        self._statements.insert(position, list(statement))

    def replace_statement(self, position: int, statement: Iterable[str]) -> None:
        """Replace the statement at ``position``."""
        self._check_index(position, len(self._statements))
        self._statements[position] = list(statement)

    def remove_statement(self, position: int) -> None:
        """Remove the statement at ``position`` and move the index back by one."""
        self._check_index(position, len(self._statements))
        del self._statements[position]
        self.statement -= 1

    def jump_to_statement(self, position: int) -> tuple[list[str], TestimonyProgress]:
        """Jump to ``position``; past the end loops to the first, before it stays there."""
        if len(self._statements) < 2:
            raise IndexError("testimony has no statements besides its title")
        self.statement = position
        if self.statement > len(self._statements) - 1:
            self.statement = 1
            return list(self._statements[1]), TestimonyProgress.LOOPED
        if self.statement <= 1:
            self.statement = 1
            return list(self._statements[1]), TestimonyProgress.STAYED_AT_FIRST
        return list(self._statements[self.statement]), TestimonyProgress.OK


class Judgelog:
    """The most recent judge actions of an area, oldest first."""

    def __init__(self, entries: Sequence[str] = ()) -> None:
        self._entries: deque[str] = deque(entries, maxlen=JUDGELOG_LIMIT)

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __bool__(self) -> bool:
        return bool(self._entries)

    def append(self, entry: str) -> None:
        """Add an entry, dropping the oldest once the log is full."""
        self._entries.append(entry)