"""Non-blocking directory and file reads.

Blocking filesystem calls run on the default executor so the event loop stays
free. Callers await them one at a time; nothing here fans out.
"""

import asyncio
from pathlib import Path

from .errors import DataSourceUnavailableError


async def list_subdirectories(path: Path) -> list[Path]:
    """Return the subdirectories of ``path``, sorted by name.

    Raises DataSourceUnavailableError if the directory cannot be listed.
    """
    try:
        return await asyncio.to_thread(_sorted_entries, path, True)
    except OSError as e:
        raise DataSourceUnavailableError(path, e.strerror or str(e)) from e


async def list_jsonl_files(path: Path) -> list[Path]:
    """Return the ``*.jsonl`` files directly inside ``path``, sorted by name.

    Raises DataSourceUnavailableError if the directory cannot be listed.
    """
    try:
        entries = await asyncio.to_thread(_sorted_entries, path, False)
    except OSError as e:
        raise DataSourceUnavailableError(path, e.strerror or str(e)) from e
    return [p for p in entries if p.suffix == ".jsonl"]


async def read_lines(path: Path) -> list[str]:
    """Read a UTF-8 text file as a list of lines. Raises OSError."""
    return await asyncio.to_thread(_read_lines, path)


def _sorted_entries(path: Path, directories: bool) -> list[Path]:
    if directories:
        entries = [p for p in path.iterdir() if p.is_dir()]
    else:
        entries = [p for p in path.iterdir() if p.is_file()]
    return sorted(entries, key=lambda p: p.name)


def _read_lines(path: Path) -> list[str]:
    with path.open(encoding="utf-8", errors="replace") as f:
        return [line.rstrip("\r\n") for line in f]
