"""Completion, diagnostic and quick-fix computations.

These functions work on plain text and lsprotocol structures; the server
module owns the document store and the spell checker and passes in what
each computation needs. Offsets exchanged with the editor are UTF-16 code
units and are converted with pygls' ``PositionCodec``.
"""

from __future__ import annotations

import re
from typing import Mapping, Sequence

from lsprotocol.types import (
    CodeAction,
    CodeActionKind,
    CompletionItem,
    CompletionList,
    CompletionOptions,
    Diagnostic,
    DiagnosticOptions,
    DiagnosticSeverity,
    Position,
    PositionEncodingKind,
    Range,
    ServerCapabilities,
    TextDocumentSyncKind,
    TextEdit,
    WorkspaceEdit,
)
from pygls.workspace import PositionCodec

from nangosha.dictionary import COMPLETION_LIMIT, Dictionary

_NON_WORD_RE = re.compile(r"\W+")
_TRAILING_WORD_RE = re.compile(r"\w*\Z")

default_codec = PositionCodec(encoding=PositionEncodingKind.Utf16)


def server_capabilities(identifier: str) -> ServerCapabilities:
    return ServerCapabilities(
        text_document_sync=TextDocumentSyncKind.Full,
        completion_provider=CompletionOptions(),
        code_action_provider=True,
        diagnostic_provider=DiagnosticOptions(
            identifier=identifier,
            inter_file_dependencies=False,
            workspace_diagnostics=False,
        ),
    )


def split_lines(text: str) -> list[str]:
    return text.split("\n")


def extract_prefix(line_until_cursor: str) -> str:
    """Drop everything up to and including the last non-word character."""
    match = _TRAILING_WORD_RE.search(line_until_cursor)
    return match.group(0) if match else ""


def tokenize(text: str) -> list[str]:
    return [token for token in _NON_WORD_RE.split(text) if token]


def complete(
    text: str,
    position: Position,
    dictionary: Dictionary,
    *,
    limit: int = COMPLETION_LIMIT,
    codec: PositionCodec = default_codec,
) -> CompletionList:
    lines = split_lines(text)
    if not 0 <= position.line < len(lines):
        return CompletionList(is_incomplete=False, items=[])
    line = lines[position.line]
    cursor = Position(
        line=position.line,
        character=min(position.character, codec.client_num_units(line)),
    )
    character = codec.position_from_client_units(lines, cursor).character
    prefix = extract_prefix(line[:character])
    words, truncated = dictionary.starting_with(prefix, limit)
    return CompletionList(
        is_incomplete=truncated,
        items=[CompletionItem(label=word) for word in words],
    )


def diagnostic_message(word: str, suggestions: Sequence[str]) -> str:
    if suggestions:
        return f'"{word}" is not recognized; did you mean: {", ".join(suggestions)}'
    return f'"{word}" is not recognized.'


def find_diagnostics(
    text: str,
    suggestions: Mapping[str, Sequence[str]],
    *,
    source: str,
    codec: PositionCodec = default_codec,
) -> list[Diagnostic]:
    """One diagnostic per whole-word occurrence of each misspelled word.

    Words reported by the checker that are not tokens of ``text`` are skipped.
    The word and its suggestions travel in ``Diagnostic.data`` so quick fixes
    can be built later without running the checker again.
    """
    tokens = set(tokenize(text))
    lines = split_lines(text)
    diagnostics: list[Diagnostic] = []
    for word, candidates in suggestions.items():
        if word not in tokens:
            continue
        pattern = re.compile(rf"\b{re.escape(word)}\b")
        message = diagnostic_message(word, candidates)
        for line_number, line in enumerate(lines):
            for match in pattern.finditer(line):
                span = Range(
                    start=Position(line=line_number, character=match.start()),
                    end=Position(line=line_number, character=match.end()),
                )
                diagnostics.append(
                    Diagnostic(
                        range=codec.range_to_client_units(lines, span),
                        message=message,
                        severity=DiagnosticSeverity.Error,
                        source=source,
                        data={"word": word, "suggestions": list(candidates)},
                    )
                )
    return diagnostics


def _suggestions_of(diagnostic: Diagnostic) -> list[str]:
    data = diagnostic.data
    if not isinstance(data, dict):
        return []
    suggestions = data.get("suggestions")
    if not isinstance(suggestions, list):
        return []
    return [item for item in suggestions if isinstance(item, str)]


def quick_fixes(uri: str, diagnostics: Sequence[Diagnostic]) -> list[CodeAction]:
    actions: list[CodeAction] = []
    for diagnostic in diagnostics:
        for suggestion in _suggestions_of(diagnostic):
            actions.append(
                CodeAction(
                    title=f'Replace with "{suggestion}"',
                    kind=CodeActionKind.QuickFix,
                    diagnostics=[diagnostic],
                    edit=WorkspaceEdit(
                        changes={
                            uri: [TextEdit(range=diagnostic.range, new_text=suggestion)]
                        }
                    ),
                )
            )
    return actions
