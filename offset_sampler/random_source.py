#!/usr/bin/env python3
"""
Uniform random source shared by the sampling and shuffling passes
"""

import logging
import time
from typing import Optional

import numpy as np


logger = logging.getLogger(__name__)


# ============================================================================
# RANDOM SOURCE
# ============================================================================

class UniformSource:
    """Seedable wrapper around a numpy Generator

    Exposes only the draws the sampler needs, so tests can swap in a stub
    with the same three methods.
    """

    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            seed = time.time_ns()
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def uniform(self) -> float:
        """Uniform float in [0, 1)"""
        return float(self._rng.random())

    def raw_integer(self, bits: int) -> int:
        """Uniform integer in [0, 2**bits)"""
        return int(self._rng.integers(0, (1 << bits) - 1, endpoint=True))

    def index(self, upper: int) -> int:
        """Uniform integer in [0, upper], both ends included"""
        return int(self._rng.integers(0, upper, endpoint=True))


# ============================================================================
# PROCESS-WIDE SOURCE
# ============================================================================

_process_source: Optional[UniformSource] = None


def get_process_source(seed: Optional[int] = None) -> UniformSource:
    """Return the process-wide source, creating it on first use

    The source is seeded exactly once. A seed passed after creation is
    ignored.
    """
    global _process_source
    if _process_source is None:
        _process_source = UniformSource(seed)
        logger.debug(f"Seeded process random source with {_process_source.seed}")
    elif seed is not None and seed != _process_source.seed:
        logger.debug(
            f"Ignoring seed {seed}; process source already seeded with "
            f"{_process_source.seed}"
        )
    return _process_source
