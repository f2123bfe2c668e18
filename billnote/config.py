"""Service configuration read from a TOML file."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields
from pathlib import Path


class ConfigError(ValueError):
    """The configuration file is malformed or incomplete."""


@dataclass(frozen=True, slots=True)
class Config:
    """Where to listen, which store to use, the signing secret and the URL prefix."""

    host: str
    database_url: str
    secret_key: str
    base_path: str


def load_config(path: str | Path = "./config.toml") -> Config:
    """Read and validate the configuration; unknown keys are ignored."""
    with open(path, "rb") as handle:
        try:
            data = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"invalid configuration file: {exc}") from exc
    values = {}
    for field in fields(Config):
        if field.name not in data:
            raise ConfigError(f"missing field `{field.name}`")
        value = data[field.name]
        if not isinstance(value, str):
            raise ConfigError(f"field `{field.name}` must be a string")
        values[field.name] = value
    return Config(**values)