"""Content-Length framing for JSON-RPC over a byte stream.

Each frame is ``Content-Length: <bytes>\\r\\n\\r\\n<payload>`` where the declared
count is the UTF-8 byte length of the JSON payload.
"""

from __future__ import annotations

import json
import re
from typing import Iterator

from nangosha.messages import JSONValue

_HEADER_RE = re.compile(rb"Content-Length: (\d+)\r\n")
_HEADER_END = b"\r\n\r\n"


class MessageBuffer:
    """Accumulates raw input and releases complete payloads in arrival order.

    A header that is missing or malformed is indistinguishable from one that
    has not fully arrived yet, so the buffer simply waits for more input.
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    @property
    def pending(self) -> int:
        return len(self._buffer)

    def reset(self) -> None:
        self._buffer.clear()

    def feed(self, chunk: bytes | bytearray) -> Iterator[bytes]:
        if chunk:
            self._buffer.extend(chunk)
        return self._drain()

    def _drain(self) -> Iterator[bytes]:
        while True:
            payload = self._next_payload()
            if payload is None:
                return
            yield payload

    def _next_payload(self) -> bytes | None:
        match = _HEADER_RE.search(self._buffer)
        if match is None:
            return None
        header_end = self._buffer.find(_HEADER_END, match.start())
        if header_end < 0:
            return None
        start = header_end + len(_HEADER_END)
        end = start + int(match.group(1))
        if len(self._buffer) < end:
            return None
        payload = bytes(self._buffer[start:end])
        del self._buffer[:end]
        return payload


def encode_message(message: JSONValue) -> bytes:
    payload = json.dumps(message, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    header = f"Content-Length: {len(payload)}\r\n\r\n".encode("ascii")
    return header + payload
