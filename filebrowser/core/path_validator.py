"""Fail-closed checks for user supplied directory and file paths.

Both checks return ``False`` instead of raising: malformed input, characters the
OS reserves, and any error while resolving the path all count as "not valid".
"""

import os
from pathlib import Path

from loguru import logger

if os.name == "nt":
    _CONTROL_CHARS = frozenset(chr(i) for i in range(32))
    INVALID_PATH_CHARS = _CONTROL_CHARS | frozenset('"<>|')
    INVALID_FILE_NAME_CHARS = INVALID_PATH_CHARS | frozenset(":*?\\/")
else:
    INVALID_PATH_CHARS = frozenset("\0")
    INVALID_FILE_NAME_CHARS = frozenset("\0/")


def has_invalid_chars(text: str, invalid: frozenset[str]) -> bool:
    """Whether ``text`` contains any of the ``invalid`` characters."""
    return not invalid.isdisjoint(text)


def is_valid_directory(path: str | os.PathLike[str] | None) -> bool:
    """Whether ``path`` names an existing, accessible directory."""
    if path is None:
        return False
    try:
        text = os.fspath(path)
        if not text or has_invalid_chars(text, INVALID_PATH_CHARS):
            return False
        return os.path.isdir(os.path.abspath(text))
    except (OSError, TypeError, ValueError) as e:
        logger.debug(f"Rejected directory path {path!r}: {e}")
        return False


def is_valid_file(path: str | os.PathLike[str] | None) -> bool:
    """Whether ``path`` names an existing regular file with a legal file name."""
    if path is None:
        return False
    try:
        text = os.fspath(path)
        if not text or has_invalid_chars(Path(text).name, INVALID_FILE_NAME_CHARS):
            return False
        return os.path.isfile(os.path.abspath(text))
    except (OSError, TypeError, ValueError) as e:
        logger.debug(f"Rejected file path {path!r}: {e}")
        return False
