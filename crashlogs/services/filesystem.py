"""Filesystem access used by crash report discovery.

Missing or unreadable locations are normal on hosts without a given user or
device, so these helpers report them as empty results instead of raising.
"""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def list_files_in_directory(path: str | Path) -> list[str]:
    """List regular files directly under a directory, sorted by name."""
    try:
        with os.scandir(path) as entries:
            files = [entry.path for entry in entries if entry.is_file()]
    except OSError as e:
        logger.debug("Cannot list files in %s: %s", path, e)
        return []
    return sorted(files)


def list_directories_in_directory(path: str | Path) -> list[str]:
    """List subdirectories directly under a directory, sorted by name."""
    try:
        with os.scandir(path) as entries:
            directories = [entry.path for entry in entries if entry.is_dir()]
    except OSError as e:
        logger.debug("Cannot list directories in %s: %s", path, e)
        return []
    return sorted(directories)


def read_file(path: str | Path) -> tuple[str, bool]:
    """Read a text file.

    Returns:
        Tuple of (content, ok). On failure content is empty and ok is False.
    """
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            return f.read(), True
    except OSError as e:
        logger.debug("Cannot read %s: %s", path, e)
        return "", False
