#!/usr/bin/env python3
"""
Offset reservoir: Algorithm R sampling and full-population shuffling
"""

import logging
from typing import Iterable, Iterator

import numpy as np

from .errors import ResourceError
from .random_source import UniformSource


logger = logging.getLogger(__name__)

OFFSET_DTYPE = np.int64

# Raw integer widths used to draw the replacement slot
BUFFERED_SLOT_BITS = 63
MAPPED_SLOT_BITS = 31


# ============================================================================
# RESERVOIR
# ============================================================================

class OffsetReservoir:
    """Holder of line-start byte offsets

    ``offsets`` always has ``capacity`` slots; only the first ``count``
    are meaningful. A fixed reservoir never changes capacity. A growable
    one is extended by ``increment`` slots whenever it fills up.
    """

    def __init__(self, capacity: int, growable: bool = False, increment: int = 0):
        if capacity < 0:
            raise ValueError(f"Reservoir capacity must be >= 0, got {capacity}")
        if growable and increment <= 0:
            raise ValueError("A growable reservoir needs a positive increment")
        self.growable = growable
        self.increment = increment
        self.count = 0
        self.offsets = self._allocate(capacity)

    @staticmethod
    def _allocate(capacity: int) -> np.ndarray:
        try:
            return np.empty(capacity, dtype=OFFSET_DTYPE)
        except MemoryError as e:
            raise ResourceError(
                f"Could not allocate memory for {capacity} offsets"
            ) from e

    @property
    def capacity(self) -> int:
        return len(self.offsets)

    def __len__(self) -> int:
        return self.count

    def __iter__(self) -> Iterator[int]:
        return (int(offset) for offset in self.selected())

    def selected(self) -> np.ndarray:
        """View of the meaningful offsets, in array order"""
        return self.offsets[:self.count]

    def grow(self):
        """Extend capacity by one increment"""
        new_capacity = self.capacity + self.increment
        resized = self._allocate(new_capacity)
        resized[:self.count] = self.offsets[:self.count]
        self.offsets = resized
        logger.debug(f"Grew offset reservoir to {new_capacity} slots")

    def append(self, offset: int):
        if self.count == self.capacity:
            if not self.growable:
                raise ResourceError("Offset reservoir is full")
            self.grow()
        self.offsets[self.count] = offset
        self.count += 1

    def sort(self):
        """Sort the meaningful offsets ascending, in place"""
        self.selected().sort()

    def shuffle(self, source: UniformSource):
        """Fisher-Yates shuffle of the meaningful offsets, in place"""
        offsets = self.offsets
        for i in range(self.count - 1, 0, -1):
            j = source.index(i)
            offsets[i], offsets[j] = offsets[j], offsets[i]

    def dump(self) -> Iterator[str]:
        """Yield one ``[index] offset`` line per meaningful slot"""
        for idx, offset in enumerate(self.selected()):
            yield f"[{idx:012d}] {int(offset):012d}"


# ============================================================================
# SAMPLING ALGORITHMS
# ============================================================================

def sample_fixed_k(
    line_offsets: Iterable[int],
    reservoir: OffsetReservoir,
    source: UniformSource,
    slot_bits: int = BUFFERED_SLOT_BITS,
) -> OffsetReservoir:
    """Fill a fixed reservoir with a uniform sample via Algorithm R

    Args:
        line_offsets: Line-start offsets in file order
        reservoir: Empty reservoir whose capacity is the sample size k
        source: Random source; both draws are taken for every line past k
        slot_bits: Width of the raw integer reduced modulo k for the slot

    Returns:
        The same reservoir, with ``count == min(k, n)``
    """
    k = reservoir.capacity
    if k == 0:
        reservoir.count = 0
        return reservoir
    offsets = reservoir.offsets
    ln_idx = 0
    for ln_idx, offset in enumerate(line_offsets, start=1):
        if ln_idx <= k:
            offsets[ln_idx - 1] = offset
            continue
        p_replacement = k / ln_idx
        rand_idx = source.raw_integer(slot_bits) % k
        if source.uniform() < p_replacement:
            logger.debug(
                f"Replacing slot {rand_idx} with line {ln_idx - 1} "
                f"(offset {offset}, p={p_replacement:.6f})"
            )
            offsets[rand_idx] = offset

    # fewer lines than the sample size
    reservoir.count = min(ln_idx, k)
    logger.debug(f"Scanned {ln_idx} lines, kept {reservoir.count}")
    return reservoir


def shuffle_all(
    line_offsets: Iterable[int],
    reservoir: OffsetReservoir,
    source: UniformSource,
) -> OffsetReservoir:
    """Collect every offset into a growable reservoir, then shuffle it"""
    for offset in line_offsets:
        reservoir.append(offset)
    logger.debug(f"Collected {reservoir.count} offsets, shuffling")
    reservoir.shuffle(source)
    return reservoir
