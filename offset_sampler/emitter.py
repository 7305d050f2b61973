#!/usr/bin/env python3
"""
Writing sampled lines back out from their byte offsets
"""

import logging
import os
import warnings
from typing import BinaryIO, Iterable

from .config import LINE_LENGTH_VALUE
from .errors import BoundaryError
from .scanner import FileMapping, open_input


logger = logging.getLogger(__name__)


def _is_truncated(line: bytes, max_line_length: int, more_follows: bool) -> bool:
    """A capped read cut the line only if the file continues past it"""
    return (
        len(line) == max_line_length
        and not line.endswith(b"\n")
        and more_follows
    )


def _report_truncated(truncated: int, max_line_length: int):
    if truncated:
        warnings.warn(
            BoundaryError(
                f"{truncated} line(s) exceeded {max_line_length} bytes "
                f"and were truncated"
            ),
            stacklevel=3,
        )


# ============================================================================
# BUFFERED EMISSION
# ============================================================================

def emit_sorted_via_buffered(
    path: str,
    offsets: Iterable[int],
    out: BinaryIO,
    max_line_length: int = LINE_LENGTH_VALUE,
) -> int:
    """Write lines at ascending offsets in one forward pass

    Every seek is relative to the current position, so the file is never
    read backwards. ``offsets`` must be sorted.

    Returns:
        Number of lines written
    """
    logger.debug(f"Emitting sorted sample from {path} via buffered reads")
    written = 0
    truncated = 0
    previous_offset = 0
    previous_line_length = 0
    with open_input(path) as handle:
        size = os.fstat(handle.fileno()).st_size
        for offset in offsets:
            handle.seek(offset - previous_offset - previous_line_length, os.SEEK_CUR)
            line = handle.readline(max_line_length)
            out.write(line)
            truncated += _is_truncated(line, max_line_length, handle.tell() < size)
            previous_line_length = len(line)
            previous_offset = offset
            written += 1
    _report_truncated(truncated, max_line_length)
    return written


def emit_unsorted_via_buffered(
    path: str,
    offsets: Iterable[int],
    out: BinaryIO,
    max_line_length: int = LINE_LENGTH_VALUE,
) -> int:
    """Write lines at arbitrary offsets, seeking from the start for each"""
    logger.debug(f"Emitting unsorted sample from {path} via buffered reads")
    written = 0
    truncated = 0
    with open_input(path) as handle:
        size = os.fstat(handle.fileno()).st_size
        for offset in offsets:
            handle.seek(offset, os.SEEK_SET)
            line = handle.readline(max_line_length)
            out.write(line)
            truncated += _is_truncated(line, max_line_length, handle.tell() < size)
            written += 1
    _report_truncated(truncated, max_line_length)
    return written


# ============================================================================
# MAPPED EMISSION
# ============================================================================

def emit_via_mapping(
    mapping: FileMapping,
    offsets: Iterable[int],
    out: BinaryIO,
    max_line_length: int = LINE_LENGTH_VALUE,
) -> int:
    """Write lines straight out of a mapping, in the order given

    Each line runs up to and including its newline, or stops at the
    length cap or the end of the mapping, whichever comes first.
    """
    logger.debug(f"Emitting sample from {mapping.path} via memory mapping")
    view = mapping.view
    written = 0
    truncated = 0
    for offset in offsets:
        limit = min(offset + max_line_length, mapping.size)
        newline = view.find(b"\n", offset, limit)
        stop = newline + 1 if newline != -1 else limit
        out.write(view[offset:stop])
        if newline == -1 and offset + max_line_length < mapping.size:
            truncated += 1
        written += 1
    _report_truncated(truncated, max_line_length)
    return written
