"""Language server wiring: protocol handlers over an owned document store."""

from __future__ import annotations

import logging
from typing import BinaryIO, TypeVar

from lsprotocol.converters import get_converter
from lsprotocol.types import (
    CodeActionParams,
    CompletionParams,
    Diagnostic,
    DidChangeTextDocumentParams,
    DocumentDiagnosticParams,
    FullDocumentDiagnosticReport,
)
from pygls.workspace import PositionCodec

from nangosha.dictionary import COMPLETION_LIMIT, Dictionary
from nangosha.dispatch import Dispatcher, Reply
from nangosha.exceptions import MessageDecodeError
from nangosha.features import (
    complete,
    default_codec,
    find_diagnostics,
    quick_fixes,
    server_capabilities,
)
from nangosha.framing import MessageBuffer, encode_message
from nangosha.messages import JSONObject, JSONValue, Message, decode_message, response_payload
from nangosha.spellcheck import SpellChecker
from nangosha.store import DocumentStore

logger = logging.getLogger(__name__)

SERVER_NAME = "nangosha"
SERVER_VERSION = "0.1.0"

INITIALIZE = "initialize"
INITIALIZED = "initialized"
SHUTDOWN = "shutdown"
EXIT = "exit"
TEXT_DOCUMENT_DID_CHANGE = "textDocument/didChange"
TEXT_DOCUMENT_COMPLETION = "textDocument/completion"
TEXT_DOCUMENT_DIAGNOSTIC = "textDocument/diagnostic"
TEXT_DOCUMENT_CODE_ACTION = "textDocument/codeAction"

ParamsT = TypeVar("ParamsT")


class ResponseWriter:
    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def write(self, message: JSONObject) -> None:
        self._stream.write(encode_message(message))
        self._stream.flush()


class NangoshaServer:
    """Single-client server; messages are handled one at a time, in order.

    The spell checker runs synchronously inside ``textDocument/diagnostic``,
    so a slow checker holds up every message queued behind it.
    """

    def __init__(
        self,
        dictionary: Dictionary,
        spell_checker: SpellChecker,
        *,
        store: DocumentStore | None = None,
        name: str = SERVER_NAME,
        version: str = SERVER_VERSION,
        completion_limit: int = COMPLETION_LIMIT,
        codec: PositionCodec = default_codec,
    ) -> None:
        self.dictionary = dictionary
        self.spell_checker = spell_checker
        self.store = store if store is not None else DocumentStore()
        self.name = name
        self.version = version
        self.completion_limit = completion_limit
        self.codec = codec
        self.converter = get_converter()
        self.dispatcher = Dispatcher()
        self.running = True
        self.shutdown_requested = False
        self._register_features()

    def _register_features(self) -> None:
        requests = {
            INITIALIZE: self.initialize,
            SHUTDOWN: self.shutdown,
            TEXT_DOCUMENT_COMPLETION: self.completion,
            TEXT_DOCUMENT_DIAGNOSTIC: self.diagnostic,
            TEXT_DOCUMENT_CODE_ACTION: self.code_action,
        }
        notifications = {
            INITIALIZED: self.initialized,
            EXIT: self.exit,
            TEXT_DOCUMENT_DID_CHANGE: self.did_change,
        }
        for method, handler in requests.items():
            self.dispatcher.request(method)(handler)
        for method, handler in notifications.items():
            self.dispatcher.notification(method)(handler)

    def _params(self, message: Message, params_type: type[ParamsT]) -> ParamsT | None:
        try:
            return self.converter.structure(message.params, params_type)
        except Exception as exc:
            logger.warning("ignoring %s with invalid params: %s", message.method, exc)
            return None

    # Lifecycle

    def initialize(self, message: Message) -> JSONValue:
        capabilities = self.converter.unstructure(server_capabilities(self.name))
        return {
            "capabilities": capabilities,
            "serverInfo": {"name": self.name, "version": self.version},
        }

    def initialized(self, message: Message) -> None:
        return None

    def shutdown(self, message: Message) -> JSONValue:
        self.shutdown_requested = True
        return None

    def exit(self, message: Message) -> None:
        self.running = False

    # Documents

    def did_change(self, message: Message) -> None:
        params = self._params(message, DidChangeTextDocumentParams)
        if params is None or not params.content_changes:
            return
        uri = params.text_document.uri
        text = params.content_changes[0].text
        logger.debug("didChange %s (%d chars)", uri, len(text))
        self.store.set(uri, text)

    def completion(self, message: Message) -> JSONValue:
        params = self._params(message, CompletionParams)
        if params is None:
            return None
        text = self.store.get(params.text_document.uri)
        if text is None:
            return None
        result = complete(
            text,
            params.position,
            self.dictionary,
            limit=self.completion_limit,
            codec=self.codec,
        )
        return self.converter.unstructure(result)

    def diagnose(self, text: str) -> list[Diagnostic]:
        suggestions = self.spell_checker.check(text)
        return find_diagnostics(text, suggestions, source=self.name, codec=self.codec)

    def diagnostic(self, message: Message) -> JSONValue:
        params = self._params(message, DocumentDiagnosticParams)
        if params is None:
            return None
        text = self.store.get(params.text_document.uri)
        if text is None:
            return None
        report = FullDocumentDiagnosticReport(items=self.diagnose(text))
        return self.converter.unstructure(report)

    def code_action(self, message: Message) -> JSONValue:
        params = self._params(message, CodeActionParams)
        if params is None:
            return None
        actions = quick_fixes(params.text_document.uri, params.context.diagnostics)
        return self.converter.unstructure(actions)

    # Transport

    def handle(self, payload: bytes) -> JSONObject | None:
        try:
            message = decode_message(payload)
        except MessageDecodeError as exc:
            logger.warning("dropping undecodable message: %s", exc)
            return None
        logger.debug("received %s", message.method)
        outcome = self.dispatcher.dispatch(message)
        if isinstance(outcome, Reply):
            return response_payload(outcome.id, outcome.result)
        return None

    def serve(self, reader: BinaryIO, writer: BinaryIO, *, chunk_size: int = 4096) -> int:
        """Process input until EOF or ``exit``; return the process exit code."""
        buffer = MessageBuffer()
        responses = ResponseWriter(writer)
        read = getattr(reader, "read1", reader.read)
        while self.running:
            chunk = read(chunk_size)
            if not chunk:
                break
            for payload in buffer.feed(chunk):
                response = self.handle(payload)
                if response is not None:
                    responses.write(response)
                if not self.running:
                    break
        if buffer.pending:
            logger.info("discarding %d unframed bytes", buffer.pending)
        return 0 if self.shutdown_requested else 1
