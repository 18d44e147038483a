"""File enumeration and text reading helpers shared by the resolution stages.

The enumerator is a plain generator over glob matches; reads are coroutines
that hand the blocking I/O to a worker thread so many documents can be in
flight on one event loop.
"""
from __future__ import annotations

import asyncio
import glob
import logging
import os
from dataclasses import dataclass
from typing import Iterable, Iterator, Union

from common.logging_utils import extra_context, is_debug_enabled

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileLocation:
    """A matched file and the stat metadata captured when it was found."""
    path: str
    size: int
    mtime: float


def iter_files(patterns: Iterable[str]) -> Iterator[FileLocation]:
    """Lazily yield the regular files matching each glob pattern.

    Matches of one pattern are yielded in sorted order; a file matched by
    several patterns is yielded once.
    """
    seen = set()
    for pattern in patterns:
        for path in sorted(glob.iglob(pattern)):
            if path in seen or not os.path.isfile(path):
                continue
            seen.add(path)
            stat = os.stat(path)
            yield FileLocation(path=path, size=stat.st_size, mtime=stat.st_mtime)


def _read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8") as fh:
        return fh.read()


async def read_file_text(location: Union[FileLocation, str]) -> str:
    """Read the full UTF-8 text of a file.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    path = location.path if isinstance(location, FileLocation) else location
    if is_debug_enabled(logger):
        logger.debug(
            "Reading file",
            extra=extra_context(event="file_read", component="file_io", target=path),
        )
    return await asyncio.to_thread(_read_text, path)
