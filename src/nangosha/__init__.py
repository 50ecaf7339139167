"""Nangosha package root."""

from nangosha.dictionary import Dictionary
from nangosha.exceptions import ConfigError, MessageDecodeError, NangoshaError, SpellCheckError
from nangosha.server import SERVER_VERSION, NangoshaServer
from nangosha.spellcheck import SpellChecker
from nangosha.store import DocumentStore

__all__ = [
    "__version__",
    "ConfigError",
    "Dictionary",
    "DocumentStore",
    "MessageDecodeError",
    "NangoshaError",
    "NangoshaServer",
    "SpellCheckError",
    "SpellChecker",
]

__version__ = SERVER_VERSION
