"""
Command-line entry point.

Wires together:  args → config → logging → API client → finder → display
"""

from __future__ import annotations

import argparse
import logging
import logging.handlers
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.markup import escape

from chessfinder.api import ApiError, create_api
from chessfinder.cli.display import UnsupportedOutputError, display_game
from chessfinder.cli.parser import finder_from_args, parse_args
from chessfinder.config import LoggingConfig, load_config
from chessfinder.decoder.errors import DecodeError
from chessfinder.finder import GameNotFoundError
from chessfinder.http import HttpClient

logger = logging.getLogger("chessfinder")

err_console = Console(stderr=True, legacy_windows=False)

_LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"


def configure_logging(config: LoggingConfig, verbosity: int = 0) -> None:
    """Console (stderr) logging, plus a rotating file when configured."""
    level = config.level_number
    if verbosity == 1:
        level = min(level, logging.INFO)
    elif verbosity >= 2:
        level = logging.DEBUG

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.file:
        log_file = Path(config.file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                log_file, maxBytes=2 * 1024 * 1024, backupCount=3,  # 2 MB × 3 files
                encoding="utf-8",
            )
        )
    logging.basicConfig(level=level, format=_LOG_FORMAT, handlers=handlers, force=True)


def run(args: argparse.Namespace) -> int:
    try:
        config = load_config(args.config)
    except FileNotFoundError as exc:
        err_console.print(f"[red]Error:[/] {escape(str(exc))}")
        return 1
    except ValueError as exc:
        err_console.print(f"[red]Config error:[/] {escape(str(exc))}")
        return 1

    configure_logging(config.logging, args.verbose)
    output = args.output or config.defaults.output
    finder = finder_from_args(args, config.defaults.api)
    api = create_api(finder.api, HttpClient(config.http.timeout, config.http.user_agent))

    logger.info("Finding game")
    try:
        game = finder.find(api)
    except GameNotFoundError as exc:
        err_console.print(f"[yellow]Not found:[/] {escape(str(exc))}")
        return 1
    except ApiError as exc:
        err_console.print(f"[red]API error:[/] {escape(str(exc))}")
        return 1

    try:
        display_game(game, output)
    except DecodeError as exc:
        # Name the payload so it can be fetched and inspected by hand.
        err_console.print(
            f"[red]Could not decode[/] {escape(game.source)}: {escape(str(exc))}"
        )
        return 1
    except UnsupportedOutputError as exc:
        err_console.print(f"[red]Error:[/] {escape(str(exc))}")
        return 1

    logger.info("Done!")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    return run(parse_args(argv))
