#!/usr/bin/env python3
"""
Offset-based reservoir sampling of newline-delimited files
"""

__version__ = "1.0"

from .config import SamplerConfig
from .errors import (
    ReservoirSampleError,
    ConfigurationError,
    InputError,
    ResourceError,
    BoundaryError,
)
from .random_source import UniformSource
from .sampler import run_sample

__all__ = [
    "SamplerConfig",
    "ReservoirSampleError",
    "ConfigurationError",
    "InputError",
    "ResourceError",
    "BoundaryError",
    "UniformSource",
    "run_sample",
]
