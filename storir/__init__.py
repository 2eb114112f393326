"""
Stochastic room impulse responses from perceptual room parameters.

This namespace re-exports the most commonly used classes and helpers so
they can be imported directly from ``storir``::

    from storir import AcousticParameters, BatchGenerator, WavWriter
"""

# Parameters and errors.
from .errors import (EmptyOutputError, InvalidParameterError, StorirError,
                     WriteFailureError)
from .parameters import AcousticParameters, Algorithm, NoiseColor

# Synthesis.
from .synthesis import (DecayEnvelope, GenerationRequest, ImpulseResponseBuffer,
                        NoiseSource, generate_impulse)

# Batch and output.
from .batch import BatchGenerator, BatchReport
from .writer import WavWriter

# Helpers.
from .utils import decibels_to_gain, import_configs_objs

__version__ = '0.1.0'

# Public API surface.
__all__ = [
    'AcousticParameters',
    'Algorithm',
    'NoiseColor',
    'StorirError',
    'InvalidParameterError',
    'EmptyOutputError',
    'WriteFailureError',
    'DecayEnvelope',
    'GenerationRequest',
    'ImpulseResponseBuffer',
    'NoiseSource',
    'generate_impulse',
    'BatchGenerator',
    'BatchReport',
    'WavWriter',
    'decibels_to_gain',
    'import_configs_objs',
]
