#!/usr/bin/env python3
"""
Sampling pipeline: scan offsets, order them, emit the selected lines
"""

import logging
from typing import BinaryIO, Optional

from .config import SamplerConfig
from .emitter import emit_sorted_via_buffered, emit_unsorted_via_buffered, emit_via_mapping
from .errors import ConfigurationError
from .random_source import UniformSource, get_process_source
from .reservoir import (
    BUFFERED_SLOT_BITS,
    MAPPED_SLOT_BITS,
    OffsetReservoir,
    sample_fixed_k,
    shuffle_all,
)
from .scanner import FileMapping, iter_buffered_line_offsets, iter_mapped_line_offsets, open_input


logger = logging.getLogger(__name__)


# ============================================================================
# PHASES
# ============================================================================

def sample_offsets(config: SamplerConfig, source: UniformSource) -> OffsetReservoir:
    """Scan the input once and return the reservoir of selected offsets"""
    if config.sample_size_specified:
        reservoir = OffsetReservoir(config.initial_capacity)
    else:
        reservoir = OffsetReservoir(
            config.initial_capacity, growable=True, increment=config.size_increment
        )

    if config.scans_buffered:
        with open_input(config.input_path) as handle:
            line_offsets = iter_buffered_line_offsets(
                handle, config.max_line_length, progress=config.progress
            )
            if config.sample_size_specified:
                logger.debug(f"Sampling k={config.sample_size} via buffered scan")
                sample_fixed_k(line_offsets, reservoir, source, BUFFERED_SLOT_BITS)
            else:
                logger.debug("Shuffling all offsets via buffered scan")
                shuffle_all(line_offsets, reservoir, source)
    else:
        if not config.sample_size_specified:
            raise ConfigurationError(
                "This application does not yet support sampling without "
                "replacement without specified k via memory mapping"
            )
        with FileMapping(config.input_path) as mapping:
            logger.debug(f"Sampling k={config.sample_size} via memory-mapped scan")
            line_offsets = iter_mapped_line_offsets(mapping, progress=config.progress)
            sample_fixed_k(line_offsets, reservoir, source, MAPPED_SLOT_BITS)

    return reservoir


def emit_sample(config: SamplerConfig, reservoir: OffsetReservoir, out: BinaryIO) -> int:
    """Write the reservoir's lines to ``out`` in reservoir order"""
    if config.emits_mapped:
        with FileMapping(config.input_path) as mapping:
            return emit_via_mapping(mapping, reservoir, out, config.max_line_length)
    if config.preserve_order:
        return emit_sorted_via_buffered(
            config.input_path, reservoir, out, config.max_line_length
        )
    return emit_unsorted_via_buffered(
        config.input_path, reservoir, out, config.max_line_length
    )


def _log_reservoir(reservoir: OffsetReservoir):
    if logger.isEnabledFor(logging.DEBUG):
        for row in reservoir.dump():
            logger.debug(row)


# ============================================================================
# ENTRY POINT
# ============================================================================

def run_sample(
    config: SamplerConfig,
    out: BinaryIO,
    source: Optional[UniformSource] = None,
) -> int:
    """Sample lines from ``config.input_path`` and write them to ``out``

    Args:
        config: Validated run configuration
        out: Binary stream receiving the selected lines verbatim
        source: Random source; defaults to the process-wide one

    Returns:
        Number of lines written

    Raises:
        ReservoirSampleError: any configuration, input or resource failure
    """
    config.validate()
    if source is None:
        source = get_process_source(config.seed)

    reservoir = sample_offsets(config, source)
    _log_reservoir(reservoir)

    if config.preserve_order:
        reservoir.sort()
        _log_reservoir(reservoir)

    written = emit_sample(config, reservoir, out)
    logger.debug(f"Wrote {written} lines")
    return written
