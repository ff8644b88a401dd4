"""Reading markup messages from disk for the CLI."""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import TextIO

from .constants import DEFAULT_MAX_FILE_SIZE

MAX_FILE_SIZE_ENV_VAR = "MINEDOWN_MAX_FILE_SIZE"


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Return the largest markup file, in bytes, the CLI agrees to read.

    `MINEDOWN_MAX_FILE_SIZE` overrides `default` when set.

    Raises:
        ValueError: If the override is not a positive whole number of bytes.
    """
    raw = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if raw is None:
        return default

    try:
        limit = int(raw)
    except ValueError as error:
        raise ValueError(
            f"{MAX_FILE_SIZE_ENV_VAR} must be a byte count, got {raw!r}"
        ) from error

    if limit <= 0:
        raise ValueError(f"{MAX_FILE_SIZE_ENV_VAR} must be at least 1 byte, got {limit}")

    return limit


def stat_markup_file(filepath: Path) -> os.stat_result:
    """Stat a markup file without following symlinks.

    Raises:
        IOError: If the file cannot be stat'ed, is a symlink, or is not a
            plain file.
    """
    try:
        info = os.stat(filepath, follow_symlinks=False)
    except OSError as error:
        raise IOError(f"Cannot read markup file {filepath}: {error}") from error

    if stat.S_ISLNK(info.st_mode):
        raise IOError(f"Markup file {filepath} is a symlink; pass the target path instead.")
    if not stat.S_ISREG(info.st_mode):
        raise IOError(f"Markup file {filepath} is not a regular file.")

    return info


def check_markup_size(info: os.stat_result, max_size: int, filepath: Path) -> None:
    if info.st_size > max_size:
        raise IOError(
            f"Markup file {filepath} is {info.st_size} bytes, "
            f"over the maximum allowed size of {max_size} bytes."
        )


def open_markup_file(filepath: Path) -> TextIO:
    """Open a markup file as UTF-8 text, reporting failures as `IOError`."""
    try:
        return open(filepath, "r", encoding="UTF-8")
    except (FileNotFoundError, PermissionError, IsADirectoryError, NotADirectoryError) as error:
        raise IOError(f"Cannot read markup file {filepath}: {error}") from error


def read_message(filepath: Path, max_size: int) -> str:
    """Load one markup message from `filepath`.

    The file must be a plain UTF-8 file no larger than `max_size` bytes.
    Trailing line breaks are dropped, so an editor's final newline does not
    become part of the message.

    Examples:
        message = read_message(Path("motd.txt"), get_max_file_size())
    """
    check_markup_size(stat_markup_file(filepath), max_size, filepath)
    try:
        with open_markup_file(filepath) as handle:
            content = handle.read()
    except UnicodeDecodeError as error:
        raise IOError(f"Markup file {filepath} is not valid UTF-8: {error}") from error
    return content.rstrip("\r\n")
