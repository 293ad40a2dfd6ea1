"""Crawler configuration loading."""

import tomllib
from pathlib import Path

from .errors import ConfigError
from .schemas import CrawlerConfig
from .utils import load_toml

REQUIRED_SECTIONS = ('app', 'fpl')


def load_config(path: Path | str) -> CrawlerConfig:
    """
    Load and validate the crawler config file.

    The file is TOML with an [app] and an [fpl] section. The returned
    config is passed explicitly through the pipeline.

    Args:
        path: Path to the config file

    Returns:
        CrawlerConfig with validated settings

    Raises:
        ConfigError: If the file is missing, malformed, lacks a required
            section, or has invalid values

    Example:
        from fplcrawler.config import load_config
        config = load_config('fantasypl-crawler.conf')
        print(config.fpl.leagueids)
    """
    try:
        raw = load_toml(path)
    except FileNotFoundError as e:
        raise ConfigError(f'Can not load config file {path}: {e}') from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f'Config file {path} is not valid TOML: {e}') from e
    except UnicodeDecodeError as e:
        raise ConfigError(f'Config file {path} is not valid UTF-8: {e}') from e
    except OSError as e:
        raise ConfigError(f'Can not read config file {path}: {e}') from e

    for section in REQUIRED_SECTIONS:
        if not isinstance(raw.get(section), dict):
            raise ConfigError(f'[{section}] part of config file {path} is not valid')

    try:
        return CrawlerConfig.model_validate(raw)
    except ValueError as e:
        raise ConfigError(f'Config file {path} has invalid values:\n{e}') from e


def worker_limit(config: CrawlerConfig) -> int | None:
    """Thread pool cap from config; None means one worker per entry."""
    return config.app.maxworkers or None
