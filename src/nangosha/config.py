from __future__ import annotations

import os
import shlex
import tomllib
from collections.abc import Mapping
from datetime import date, datetime, time
from pathlib import Path
from typing import List, Optional, TypeAlias

from pydantic import BaseModel, ValidationError, field_validator

from nangosha.dictionary import COMPLETION_LIMIT
from nangosha.exceptions import ConfigError
from nangosha.spellcheck import DEFAULT_COMMAND

DEFAULT_CONFIG_NAME = "nangosha.toml"
SERVER_SECTION = "server"

ENV_OVERRIDES = {
    "NANGOSHA_DICTIONARY": "dictionary",
    "NANGOSHA_LOG_FILE": "log_file",
    "NANGOSHA_LOG_LEVEL": "log_level",
    "NANGOSHA_SPELL_COMMAND": "spell_command",
    "NANGOSHA_SPELL_TIMEOUT": "spell_timeout",
}

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


class ServerSettings(BaseModel):
    dictionary: Optional[Path] = None
    log_file: Optional[Path] = None
    log_level: str = "INFO"
    spell_command: List[str] = list(DEFAULT_COMMAND)
    spell_timeout: Optional[float] = None
    completion_limit: int = COMPLETION_LIMIT

    @field_validator("spell_command", mode="before")
    @classmethod
    def _split_command(cls, value: object) -> object:
        if isinstance(value, str):
            return shlex.split(value)
        return value

    @field_validator("spell_command")
    @classmethod
    def _require_command(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("spell_command must name an executable")
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return level

    @field_validator("spell_timeout")
    @classmethod
    def _positive_timeout(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value <= 0:
            raise ValueError("spell_timeout must be positive")
        return value

    @field_validator("completion_limit")
    @classmethod
    def _positive_limit(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("completion_limit must be positive")
        return value


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError as exc:
        raise ConfigError(f"cannot read {path}: {exc}") from exc
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML in {path}: {exc}") from exc
    return data


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def server_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get(SERVER_SECTION, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{SERVER_SECTION}] must be a table")
    return section


def env_overrides(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    source = os.environ if environ is None else environ
    overrides: dict[str, str] = {}
    for key, field in ENV_OVERRIDES.items():
        value = source.get(key, "").strip()
        if value:
            overrides[field] = value
    return overrides


def merge_payload(*layers: Mapping[str, object]) -> dict[str, object]:
    """Later layers win; ``None`` values never override."""
    merged: dict[str, object] = {}
    for layer in layers:
        for key, value in layer.items():
            if value is not None:
                merged[key] = value
    return merged


def load_settings(
    *,
    root: Path | None = None,
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, object] | None = None,
) -> ServerSettings:
    payload = merge_payload(
        server_defaults(root=root, config_path=config_path),
        env_overrides(environ),
        overrides or {},
    )
    try:
        return ServerSettings.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
