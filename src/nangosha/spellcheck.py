"""Adapter around an external ispell-compatible spell checker.

The checker is run once per call in pipe mode (``aspell -a``). Every input
line is prefixed with ``^`` so document text is never read as a pipe-mode
command. Two output shapes are used::

    & <word> <count> <offset>: <suggestion>, <suggestion>, ...
    # <word> <offset>

Everything else (banner, ``*`` for correct words, blank separators) is ignored.
"""

from __future__ import annotations

import logging
import subprocess
from typing import Callable, Sequence

from nangosha.exceptions import SpellCheckError

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = ("aspell", "-a")

Runner = Callable[..., subprocess.CompletedProcess]


def pipe_input(text: str) -> str:
    return "".join(f"^{line}\n" for line in text.split("\n"))


def parse_pipe_output(output: str) -> dict[str, list[str]]:
    suggestions: dict[str, list[str]] = {}
    for raw_line in output.splitlines():
        line = raw_line.rstrip("\r")
        if line.startswith("& "):
            head, sep, tail = line.partition(":")
            fields = head.split()
            if not sep or len(fields) < 2:
                continue
            candidates = [item.strip() for item in tail.split(",") if item.strip()]
            suggestions.setdefault(fields[1], candidates)
        elif line.startswith("# "):
            fields = line.split()
            if len(fields) >= 2:
                suggestions.setdefault(fields[1], [])
    return suggestions


class SpellChecker:
    """Runs the external checker synchronously and parses its output.

    Any failure degrades to an empty mapping: every word is then treated as
    valid for that call.
    """

    def __init__(
        self,
        command: Sequence[str] = DEFAULT_COMMAND,
        *,
        runner: Runner = subprocess.run,
        timeout: float | None = None,
    ) -> None:
        if not command:
            raise ValueError("spell checker command must not be empty")
        self.command = list(command)
        self.timeout = timeout
        self._runner = runner

    def check(self, text: str) -> dict[str, list[str]]:
        """Map each misspelled word to its ordered suggestions."""
        try:
            output = self._run(text)
        except SpellCheckError as exc:
            logger.warning("spell checker unavailable: %s", exc)
            return {}
        return parse_pipe_output(output)

    def _run(self, text: str) -> str:
        try:
            completed = self._runner(
                self.command,
                input=pipe_input(text).encode("utf-8"),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise SpellCheckError(f"timed out after {exc.timeout}s") from exc
        except OSError as exc:
            raise SpellCheckError(f"could not start {self.command[0]}: {exc}") from exc
        if completed.returncode != 0:
            detail = (completed.stderr or b"").decode("utf-8", errors="replace").strip()
            raise SpellCheckError(
                f"{self.command[0]} exited with {completed.returncode}: {detail}",
                returncode=completed.returncode,
            )
        try:
            return (completed.stdout or b"").decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SpellCheckError(f"undecodable output: {exc}") from exc
