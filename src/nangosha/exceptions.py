"""Error types raised by the language server."""

from __future__ import annotations


class NangoshaError(RuntimeError):
    """Base class for errors raised by nangosha."""


class ConfigError(NangoshaError):
    """Settings file or environment could not be turned into valid settings."""


class MessageDecodeError(NangoshaError):
    """A framed payload is not a usable JSON-RPC message.

    The payload is dropped by the server loop; no response can be addressed
    because the request id is unknown.
    """

    def __init__(self, message: str, *, payload: bytes = b"") -> None:
        super().__init__(message)
        self.payload = payload


class SpellCheckError(NangoshaError):
    """The external spell checker failed or produced unusable output.

    Never escapes ``SpellChecker.check``; it is converted to an empty
    suggestion mapping there.
    """

    def __init__(self, message: str, *, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode
