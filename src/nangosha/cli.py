from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import Optional

import typer

from nangosha.config import ServerSettings, load_settings
from nangosha.dictionary import Dictionary
from nangosha.exceptions import ConfigError
from nangosha.logs import configure_logging
from nangosha.server import NangoshaServer
from nangosha.spellcheck import Runner, SpellChecker

app = typer.Typer(add_completion=False, help="Dictionary-backed spelling language server.")


def _resolve_settings(
    config: Optional[Path],
    *,
    dictionary: Optional[Path] = None,
    log_file: Optional[Path] = None,
    log_level: Optional[str] = None,
    spell_command: Optional[str] = None,
    spell_timeout: Optional[float] = None,
) -> ServerSettings:
    overrides = {
        "dictionary": dictionary,
        "log_file": log_file,
        "log_level": log_level,
        "spell_command": spell_command,
        "spell_timeout": spell_timeout,
    }
    try:
        return load_settings(config_path=config, overrides=overrides)
    except ConfigError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _load_dictionary(path: Optional[Path]) -> Dictionary:
    if path is None:
        return Dictionary()
    try:
        return Dictionary.load(path)
    except OSError as exc:
        raise typer.BadParameter(f"cannot read dictionary {path}: {exc}") from exc


def build_server(
    settings: ServerSettings, *, runner: Runner = subprocess.run
) -> NangoshaServer:
    checker = SpellChecker(
        settings.spell_command, runner=runner, timeout=settings.spell_timeout
    )
    return NangoshaServer(
        _load_dictionary(settings.dictionary),
        checker,
        completion_limit=settings.completion_limit,
    )


@app.command()
def serve(
    dictionary: Optional[Path] = typer.Option(
        None, "--dictionary", help="Word list, one word per line."
    ),
    config: Optional[Path] = typer.Option(None, "--config"),
    log_file: Optional[Path] = typer.Option(None, "--log-file"),
    log_level: Optional[str] = typer.Option(None, "--log-level"),
    spell_command: Optional[str] = typer.Option(
        None, "--spell-command", help="ispell-compatible pipe-mode command."
    ),
    spell_timeout: Optional[float] = typer.Option(None, "--spell-timeout"),
) -> None:
    """Speak the language server protocol on stdin/stdout."""
    settings = _resolve_settings(
        config,
        dictionary=dictionary,
        log_file=log_file,
        log_level=log_level,
        spell_command=spell_command,
        spell_timeout=spell_timeout,
    )
    logger = configure_logging(settings.log_file, settings.log_level)
    server = build_server(settings)
    logger.info(
        "serving with %d dictionary words, checker %s",
        len(server.dictionary),
        " ".join(settings.spell_command),
    )
    raise typer.Exit(code=server.serve(sys.stdin.buffer, sys.stdout.buffer))


@app.command()
def check(
    path: Path = typer.Argument(..., help="Text file to check."),
    config: Optional[Path] = typer.Option(None, "--config"),
    spell_command: Optional[str] = typer.Option(None, "--spell-command"),
    spell_timeout: Optional[float] = typer.Option(None, "--spell-timeout"),
) -> None:
    """Print the diagnostics the server would publish for PATH."""
    settings = _resolve_settings(
        config, spell_command=spell_command, spell_timeout=spell_timeout
    )
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise typer.BadParameter(f"cannot read {path}: {exc}") from exc
    diagnostics = build_server(settings).diagnose(text)
    for diagnostic in diagnostics:
        start = diagnostic.range.start
        typer.echo(f"{path}:{start.line + 1}:{start.character + 1}: {diagnostic.message}")
    raise typer.Exit(code=1 if diagnostics else 0)


def main() -> None:
    app()
