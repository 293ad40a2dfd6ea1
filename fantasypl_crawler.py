#!/usr/bin/env python3
"""
FPL League Crawler CLI

Logs in to Fantasy Premier League, fetches the standings of every configured
classic league plus each entrant's history, and reports the highest score of
every week and the overall ranking.

Usage:
    python fantasypl_crawler.py -c fantasypl-crawler.conf
"""

import argparse
import logging
import sys
from pathlib import Path

from fplcrawler import (
    AuthError,
    ConfigError,
    DecodeError,
    FPLClient,
    TransportError,
    crawl,
    load_config,
)
from fplcrawler.constants import DEFAULT_CONFIG_FILE, INSTANCE_NAME
from fplcrawler.logging_config import level_from_config, setup_logging


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Fantasy Premier League classic league crawler")
    parser.add_argument(
        "--config", "-c",
        default=None,
        help=f"Config file of an instance (default: {DEFAULT_CONFIG_FILE})",
    )

    args = parser.parse_args(argv)

    logger = setup_logging(log_to_file=False)
    logger.info(f"Start {INSTANCE_NAME}")

    config_path = args.config
    if not config_path:
        logger.warning(
            f"Can not find config path in command line. Use default path instead: {DEFAULT_CONFIG_FILE}"
        )
        config_path = DEFAULT_CONFIG_FILE

    try:
        config = load_config(config_path)
    except ConfigError as e:
        logger.critical(str(e))
        return 1

    level = level_from_config(config.app.loglevel)
    log_dir = Path(config.app.logdir) if config.app.logdir else None
    logger = setup_logging(log_dir=log_dir, level=level, log_to_file=log_dir is not None)
    logger.info(f"Log level: {logging.getLevelName(level)}")

    client = FPLClient.from_config(config)
    try:
        client.login(config.fpl.username, config.fpl.password)
        summary = crawl(config, client)
    except (AuthError, TransportError, DecodeError) as e:
        logger.critical(str(e))
        return 1

    logger.info(
        f"Done: {len(summary.leagues)} league(s) reported, "
        f"{len(summary.skipped_leagues)} empty, {len(summary.failures)} failure(s)"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
