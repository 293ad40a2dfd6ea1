"""Utility functions for file I/O and payload decoding."""

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import DecodeError

T = TypeVar('T', bound=BaseModel)
logger = logging.getLogger('fplcrawler.utils')


def load_toml(path: Path | str) -> dict[str, Any]:
    """
    Load a TOML file.

    Args:
        path: Path to TOML file (str or Path object)

    Returns:
        Parsed TOML as nested dicts

    Raises:
        FileNotFoundError: If file doesn't exist
        tomllib.TOMLDecodeError: If TOML is malformed
        UnicodeDecodeError: If the file is not UTF-8

    Example:
        data = load_toml('fantasypl-crawler.conf')
        print(data['fpl']['leagueids'])
    """
    path = Path(path)

    logger.debug(f'Loading TOML from: {path}')

    if not path.is_file():
        logger.error(f'File not found: {path}')
        raise FileNotFoundError(f'File not found: {path}')

    try:
        with open(path, 'rb') as f:
            data = tomllib.load(f)
        logger.debug(f'Successfully loaded TOML from: {path}')
    except tomllib.TOMLDecodeError as e:
        logger.error(f'Invalid TOML in {path}: {e}')
        raise

    return data


def decode_payload(payload: Any, schema: type[T], source: str = 'response') -> T:
    """
    Decode an API payload into a schema instance.

    Accepts raw bytes or str (JSON text), an already-decoded mapping, or an
    instance of the schema itself.

    Raises:
        DecodeError: If the payload is not valid JSON or does not match schema
    """
    if isinstance(payload, schema):
        return payload

    try:
        if isinstance(payload, (bytes, bytearray, str)):
            data = json.loads(payload)
        else:
            data = payload
        return schema.model_validate(data)
    except json.JSONDecodeError as e:
        raise DecodeError(f'Invalid JSON in {source}: {e.msg} at position {e.pos}') from e
    except ValidationError as e:
        raise DecodeError(f'Unexpected {schema.__name__} shape in {source}: {e}') from e


def save_text(
    path: Path | str,
    text: str,
    create_dirs: bool = True,
) -> None:
    """
    Save a report string to a text file.

    Args:
        path: Path to write to (str or Path object)
        text: Content to write
        create_dirs: Create parent directories if they don't exist (default: True)

    Raises:
        OSError: If file cannot be written
    """
    path = Path(path)

    logger.debug(f'Saving text to: {path}')

    if create_dirs:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f'Failed to create directory {path.parent}: {e}')
            raise

    try:
        with open(path, 'w', encoding='utf-8') as f:
            f.write(text)
        logger.debug(f'Successfully saved text to: {path}')
    except OSError as e:
        logger.error(f'Failed to write file {path}: {e}')
        raise
