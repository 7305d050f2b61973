#!/usr/bin/env python3
"""
Configuration for offset reservoir sampling
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import ConfigurationError, InputError


# ============================================================================
# CONSTANTS
# ============================================================================

DEFAULT_SAMPLE_SIZE_INCREMENT = 10000
LINE_LENGTH_VALUE = 65536
STDIN_PATH = "-"

WITHOUT_REPLACEMENT = "without-replacement"
WITH_REPLACEMENT = "with-replacement"
REPLACEMENT_MODES = (WITHOUT_REPLACEMENT, WITH_REPLACEMENT)

AS_SAMPLED = "as-sampled"
PRESERVE_ORDER = "preserve-order"
ORDER_MODES = (AS_SAMPLED, PRESERVE_ORDER)

BACKEND_MMAP = "mmap"
BACKEND_BUFFERED = "buffered"
BACKEND_HYBRID = "hybrid"
BACKENDS = (BACKEND_MMAP, BACKEND_BUFFERED, BACKEND_HYBRID)


# ============================================================================
# CONFIGURATION CLASSES
# ============================================================================

@dataclass(frozen=True)
class SamplerConfig:
    """Options for one sampling run"""
    input_path: str
    sample_size: Optional[int] = None  # None means shuffle the whole file
    replacement: str = WITHOUT_REPLACEMENT
    order: str = AS_SAMPLED
    backend: str = BACKEND_MMAP

    # Tunables
    max_line_length: int = LINE_LENGTH_VALUE
    size_increment: int = DEFAULT_SAMPLE_SIZE_INCREMENT
    seed: Optional[int] = None
    progress: bool = False

    @classmethod
    def create(cls, input_path, sample_size: Optional[int] = None, **options):
        """Factory method to create and validate a config"""
        config = cls(input_path=str(input_path), sample_size=sample_size, **options)
        config.validate()
        return config

    @property
    def sample_size_specified(self) -> bool:
        return self.sample_size is not None

    @property
    def initial_capacity(self) -> int:
        """Reservoir capacity to allocate before scanning"""
        if self.sample_size_specified:
            return self.sample_size
        return self.size_increment

    @property
    def scans_buffered(self) -> bool:
        return self.backend in (BACKEND_BUFFERED, BACKEND_HYBRID)

    @property
    def emits_mapped(self) -> bool:
        return self.backend in (BACKEND_MMAP, BACKEND_HYBRID)

    @property
    def preserve_order(self) -> bool:
        return self.order == PRESERVE_ORDER

    def validate(self):
        """Reject mode combinations the sampler cannot run

        Raises:
            ConfigurationError: for unknown, unsupported or conflicting modes
            InputError: for standard input or a missing path
        """
        if self.replacement not in REPLACEMENT_MODES:
            raise ConfigurationError(f"Unknown replacement mode: {self.replacement}")
        if self.order not in ORDER_MODES:
            raise ConfigurationError(f"Unknown order mode: {self.order}")
        if self.backend not in BACKENDS:
            raise ConfigurationError(f"Unknown I/O backend: {self.backend}")

        if self.replacement == WITH_REPLACEMENT:
            raise ConfigurationError(
                "This application does not yet support sampling with replacement"
            )
        if self.sample_size_specified and self.sample_size <= 0:
            raise ConfigurationError(
                f"Sample size must be a positive integer, got {self.sample_size}"
            )
        if not self.sample_size_specified and self.backend == BACKEND_MMAP:
            raise ConfigurationError(
                "This application does not yet support sampling without "
                "replacement without specified k via memory mapping"
            )
        if self.max_line_length <= 0:
            raise ConfigurationError(
                f"Maximum line length must be positive, got {self.max_line_length}"
            )
        if self.size_increment <= 0:
            raise ConfigurationError(
                f"Size increment must be positive, got {self.size_increment}"
            )
        if self.seed is not None and self.seed < 0:
            raise ConfigurationError(f"Seed must be a non-negative integer, got {self.seed}")

        if not self.input_path:
            raise InputError("No input file given")
        if self.input_path == STDIN_PATH:
            raise InputError("Stdin not yet supported with this application")
        if not Path(self.input_path).is_file():
            raise InputError(f"Input file not found: {self.input_path}")
