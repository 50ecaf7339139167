from __future__ import annotations

import logging
import subprocess

import pytest

from nangosha.spellcheck import DEFAULT_COMMAND, SpellChecker, parse_pipe_output, pipe_input
from tests.lsp_helpers import FakeRunner, pipe_output


def test_parse_pipe_output_reads_both_line_shapes() -> None:
    output = pipe_output(
        "*",
        "& teh 3 1: the, tea, ten",
        "*",
        "# qwxz 5",
        "",
        "? colour 0 1: color",
        "+ walk",
    ).decode("utf-8")
    assert parse_pipe_output(output) == {"teh": ["the", "tea", "ten"], "qwxz": []}


def test_parse_pipe_output_keeps_first_report_of_a_word() -> None:
    output = "& teh 1 1: the\n& teh 2 9: tea, the\n"
    assert parse_pipe_output(output) == {"teh": ["the"]}


def test_parse_pipe_output_ignores_malformed_suggestion_lines() -> None:
    assert parse_pipe_output("& teh 1 1 the\n&\n#\n") == {}


def test_pipe_input_escapes_every_line() -> None:
    assert pipe_input("*star\n# hash") == "^*star\n^# hash\n"


def test_check_feeds_text_to_command() -> None:
    runner = FakeRunner(pipe_output("& teh 1 1: the"))
    checker = SpellChecker(runner=runner, timeout=2.5)
    assert checker.check("teh quick fox") == {"teh": ["the"]}
    [(command, kwargs)] = runner.calls
    assert command == list(DEFAULT_COMMAND)
    assert kwargs["input"] == b"^teh quick fox\n"
    assert kwargs["timeout"] == 2.5
    assert kwargs["check"] is False


@pytest.mark.parametrize(
    "runner",
    [
        FakeRunner(returncode=1, stderr=b"No word lists can be found"),
        FakeRunner(error=FileNotFoundError(2, "No such file", "aspell")),
        FakeRunner(error=subprocess.TimeoutExpired(["aspell", "-a"], 1.0)),
        FakeRunner(b"\xff\xfe& teh 1 1: the\n"),
    ],
)
def test_check_failures_degrade_to_no_suggestions(runner: FakeRunner, caplog) -> None:
    checker = SpellChecker(["aspell", "-a"], runner=runner)
    with caplog.at_level(logging.WARNING, logger="nangosha"):
        assert checker.check("teh") == {}
    assert any("spell checker unavailable" in record.getMessage() for record in caplog.records)


def test_empty_command_is_rejected() -> None:
    with pytest.raises(ValueError):
        SpellChecker([])
