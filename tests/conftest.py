from __future__ import annotations

import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
for _path in (ROOT, ROOT / "src"):
    if str(_path) not in sys.path:
        sys.path.insert(0, str(_path))


import pytest

from nangosha.dictionary import Dictionary
from nangosha.server import NangoshaServer
from nangosha.spellcheck import SpellChecker
from tests.lsp_helpers import FakeRunner, pipe_output


@pytest.fixture
def make_server():
    def _make(
        words: list[str] | None = None,
        *,
        runner: FakeRunner | None = None,
        **kwargs: object,
    ) -> NangoshaServer:
        checker = SpellChecker(runner=runner or FakeRunner(pipe_output()))
        return NangoshaServer(Dictionary(words or []), checker, **kwargs)

    return _make


@pytest.fixture(autouse=True)
def _reset_nangosha_logger():
    yield
    logger = logging.getLogger("nangosha")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
