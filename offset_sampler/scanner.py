#!/usr/bin/env python3
"""
Line-start offset discovery over buffered reads or a memory mapping
"""

import logging
import mmap
import os
from contextlib import contextmanager
from typing import BinaryIO, Iterator

import numpy as np
from tqdm import tqdm

from .config import LINE_LENGTH_VALUE, STDIN_PATH
from .errors import InputError, ResourceError


logger = logging.getLogger(__name__)

NEWLINE = 0x0A
SCAN_CHUNK_SIZE = 1 << 24


# ============================================================================
# INPUT ACQUISITION
# ============================================================================

@contextmanager
def open_input(path: str) -> Iterator[BinaryIO]:
    """Open a seekable input file for binary reading

    Raises:
        InputError: for standard input or a file that cannot be opened
    """
    if path == STDIN_PATH:
        raise InputError("Stdin not yet supported with this function")
    try:
        handle = open(path, "rb")
    except OSError as e:
        raise InputError(f"Could not open input file {path}: {e.strerror}") from e
    with handle:
        yield handle


class FileMapping:
    """Read-only memory mapping of a whole file

    Use as a context manager; the mapping and its descriptor are released
    on exit, including when the body raises. Empty files get an empty
    ``bytes`` view, since zero-length mappings are refused by the OS.
    """

    def __init__(self, path: str):
        self.path = path
        self.size = 0
        self.view = b""
        self._handle = None
        self._map = None

    @property
    def descriptor(self) -> int:
        return self._handle.fileno()

    def __enter__(self):
        if self.path == STDIN_PATH:
            raise InputError("Stdin not yet supported with mmap setup function")
        try:
            self._handle = open(self.path, "rb")
        except OSError as e:
            raise InputError(f"Could not open input file {self.path}: {e.strerror}") from e

        try:
            self.size = os.fstat(self.descriptor).st_size
            if self.size > 0:
                self._map = mmap.mmap(self.descriptor, 0, access=mmap.ACCESS_READ)
                self.view = self._map
        except (OSError, ValueError) as e:
            self._handle.close()
            raise ResourceError(f"Mmap of {self.path} failed: {e}") from e

        logger.debug(f"Mapped {self.path} ({self.size} bytes)")
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def close(self):
        if self._map is not None:
            self._map.close()
            self._map = None
        if self._handle is not None:
            self._handle.close()
            self._handle = None
        self.view = b""
        logger.debug(f"Released mapping of {self.path}")


# ============================================================================
# SCANNERS
# ============================================================================

def iter_buffered_line_offsets(
    handle: BinaryIO,
    max_line_length: int = LINE_LENGTH_VALUE,
    progress: bool = False,
) -> Iterator[int]:
    """Yield the offset of every line read through buffered I/O

    Each read stops after a newline or ``max_line_length`` bytes. A longer
    line is cut there and its remainder is returned by the next read as a
    record of its own. A last line without a newline still counts.
    """
    start_offset = handle.tell()
    total = os.fstat(handle.fileno()).st_size
    with tqdm(total=total, unit="B", unit_scale=True, desc="Scanning",
              disable=not progress) as bar:
        while True:
            line = handle.readline(max_line_length)
            if not line:
                break
            yield start_offset
            start_offset += len(line)
            bar.update(len(line))


def iter_mapped_line_offsets(
    mapping: FileMapping,
    chunk_size: int = SCAN_CHUNK_SIZE,
    progress: bool = False,
) -> Iterator[int]:
    """Yield the offset of every newline-terminated line in a mapping

    A last line without a newline is not counted.
    """
    start_offset = 0
    with tqdm(total=mapping.size, unit="B", unit_scale=True, desc="Scanning",
              disable=not progress) as bar:
        for chunk_start in range(0, mapping.size, chunk_size):
            # slicing copies the chunk, so no buffer export outlives the mapping
            chunk = np.frombuffer(
                mapping.view[chunk_start:chunk_start + chunk_size], dtype=np.uint8
            )
            for pos in np.flatnonzero(chunk == NEWLINE):
                yield start_offset
                start_offset = chunk_start + int(pos) + 1
            bar.update(len(chunk))
