from __future__ import annotations

import json
import subprocess

from nangosha.framing import MessageBuffer

_BANNER = "@(#) International Ispell Version 3.1.20 (but really Aspell 0.60.8)"

URI = "file:///tmp/notes.txt"


class FakeRunner:
    """Stands in for ``subprocess.run`` and records each invocation."""

    def __init__(
        self,
        stdout: bytes = b"",
        *,
        returncode: int = 0,
        stderr: bytes = b"",
        error: BaseException | None = None,
    ) -> None:
        self.stdout = stdout
        self.returncode = returncode
        self.stderr = stderr
        self.error = error
        self.calls: list[tuple[list[str], dict[str, object]]] = []

    def __call__(self, command, **kwargs) -> subprocess.CompletedProcess:
        self.calls.append((list(command), kwargs))
        if self.error is not None:
            raise self.error
        return subprocess.CompletedProcess(
            command, self.returncode, stdout=self.stdout, stderr=self.stderr
        )


def pipe_output(*lines: str) -> bytes:
    return "\n".join([_BANNER, *lines, ""]).encode("utf-8")


def rpc_frame(message: dict) -> bytes:
    body = json.dumps(message).encode("utf-8")
    header = f"Content-Length: {len(body)}\r\n\r\n".encode("utf-8")
    return header + body


def rpc_request(msg_id: int, method: str, params: object = None) -> dict:
    return {"jsonrpc": "2.0", "id": msg_id, "method": method, "params": params}


def rpc_notification(method: str, params: object = None) -> dict:
    return {"jsonrpc": "2.0", "method": method, "params": params}


def did_change(text: str, *, uri: str = URI, version: int = 1) -> dict:
    return rpc_notification(
        "textDocument/didChange",
        {
            "textDocument": {"uri": uri, "version": version},
            "contentChanges": [{"text": text}],
        },
    )


def read_frames(data: bytes) -> list[dict]:
    return [json.loads(payload) for payload in MessageBuffer().feed(data)]
