"""
Configuration loading from cgf.yaml.

Uses typed dataclasses throughout so the rest of the app gets IDE
completion and type-checker support without touching raw dicts.
The file is optional; every setting has a default.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from chessfinder.api import SUPPORTED_APIS
from chessfinder.cli.display import OUTPUTS
from chessfinder.http import DEFAULT_USER_AGENT

DEFAULT_CONFIG_PATH = Path("cgf.yaml")


@dataclass
class HttpConfig:
    timeout: float = 10   # seconds before a request is abandoned
    user_agent: str = DEFAULT_USER_AGENT


@dataclass
class DefaultsConfig:
    api: str = "chess.com"
    output: str = "table"


@dataclass
class LoggingConfig:
    level: str = "WARNING"
    file: str | None = None  # rotating log file; stderr only when unset

    @property
    def level_number(self) -> int:
        return logging.getLevelName(self.level.upper())


@dataclass
class Config:
    http: HttpConfig = field(default_factory=HttpConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | Path | None = None) -> Config:
    """
    Load and validate the config file.

    With no path, cgf.yaml in the working directory is used when present and
    defaults otherwise.

    Raises:
        FileNotFoundError: an explicitly given config file is missing.
        ValueError: fields are invalid or the file has the wrong structure.
    """
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return Config()
        cfg_path = DEFAULT_CONFIG_PATH
    else:
        cfg_path = Path(path)
        if not cfg_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {cfg_path.resolve()}\n"
                "Copy cgf.example.yaml to cgf.yaml and adjust it."
            )

    with cfg_path.open("r", encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {cfg_path}: {exc}") from exc

    try:
        http_raw = raw.get("http") or {}
        defaults_raw = raw.get("defaults") or {}
        logging_raw = raw.get("logging") or {}
        config = Config(
            http=HttpConfig(
                timeout=float(http_raw.get("timeout", 10)),
                user_agent=str(http_raw.get("user_agent", DEFAULT_USER_AGENT)),
            ),
            defaults=DefaultsConfig(
                api=str(defaults_raw.get("api", "chess.com")),
                output=str(defaults_raw.get("output", "table")),
            ),
            logging=LoggingConfig(
                level=str(logging_raw.get("level", "WARNING")),
                file=logging_raw.get("file"),
            ),
        )
    except (AttributeError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid {cfg_path.name} structure: {exc}") from exc

    _validate(config)
    return config


def _validate(config: Config) -> None:
    if config.http.timeout <= 0:
        raise ValueError("http.timeout must be > 0")
    if config.defaults.api not in SUPPORTED_APIS:
        raise ValueError(
            f"defaults.api must be one of {SUPPORTED_APIS}, got '{config.defaults.api}'"
        )
    if config.defaults.output not in OUTPUTS:
        raise ValueError(
            f"defaults.output must be one of {OUTPUTS}, got '{config.defaults.output}'"
        )
    if not isinstance(config.logging.level_number, int):
        raise ValueError(f"logging.level is not a logging level: '{config.logging.level}'")
