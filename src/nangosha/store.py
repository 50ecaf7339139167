"""In-memory text of the documents the editor has sent."""

from __future__ import annotations


class DocumentStore:
    """Maps a document URI to its complete current text.

    Entries are only ever overwritten, never removed; every change carries the
    full replacement text.
    """

    def __init__(self) -> None:
        self._documents: dict[str, str] = {}

    def set(self, uri: str, text: str) -> None:
        self._documents[uri] = text

    def get(self, uri: str) -> str | None:
        return self._documents.get(uri)

    def __contains__(self, uri: object) -> bool:
        return uri in self._documents

    def __len__(self) -> int:
        return len(self._documents)
