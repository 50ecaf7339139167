"""Static word list used for completion."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator

COMPLETION_LIMIT = 1000


class Dictionary:
    """Ordered, read-only list of known words.

    Lookups keep the order in which words were loaded; no sorting or ranking
    is applied.
    """

    def __init__(self, words: Iterable[str] = ()) -> None:
        self._words: tuple[str, ...] = tuple(words)
        self._members = frozenset(self._words)

    @classmethod
    def load(cls, path: Path) -> "Dictionary":
        raw = path.read_text(encoding="utf-8")
        words = (line.rstrip("\r") for line in raw.split("\n"))
        return cls(word for word in words if word.strip())

    def __contains__(self, word: object) -> bool:
        return word in self._members

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def starting_with(
        self, prefix: str, limit: int = COMPLETION_LIMIT
    ) -> tuple[list[str], bool]:
        """Return up to ``limit`` words beginning with ``prefix``.

        The flag is true when more matches existed than were returned.
        """
        matches: list[str] = []
        for word in self._words:
            if not word.startswith(prefix):
                continue
            if len(matches) == limit:
                return matches, True
            matches.append(word)
        return matches, False
