#!/usr/bin/env python3
"""
Error kinds raised by the sampling core
"""


class ReservoirSampleError(Exception):
    """Base class for every failure the sampler reports"""


class ConfigurationError(ReservoirSampleError):
    """Unsupported or conflicting mode combination"""


class InputError(ReservoirSampleError):
    """Input file missing, not openable, or not seekable"""


class ResourceError(ReservoirSampleError):
    """Mapping or allocation failure"""


class BoundaryError(ReservoirSampleError, UserWarning):
    """A line ran past the maximum line length and was truncated.

    Issued through ``warnings.warn``; truncation is the accepted outcome,
    so this never aborts a run.
    """
