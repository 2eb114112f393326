"""
Impulse response synthesis: envelope model, noise source, segment
synthesizer and assembler::

    from storir.synthesis import DecayEnvelope, GenerationRequest, generate_impulse
"""

from .assembler import ImpulseResponseBuffer, assemble, normalize_peak
from .envelope import DIRECT_LEVEL, DecayEnvelope, Region, RegionKind
from .improved import default_drr, thin_out_reflections, thin_to_drr
from .noise import NoiseSource, draw_seed_sequence, new_base_seed
from .segments import (GenerationRequest, SegmentLayout, generate_impulse,
                       plan_segments, synthesize)

__all__ = [
    # Envelope
    'DIRECT_LEVEL',
    'DecayEnvelope',
    'Region',
    'RegionKind',

    # Noise
    'NoiseSource',
    'draw_seed_sequence',
    'new_base_seed',

    # Segments
    'GenerationRequest',
    'SegmentLayout',
    'generate_impulse',
    'plan_segments',
    'synthesize',

    # Improved variant
    'default_drr',
    'thin_out_reflections',
    'thin_to_drr',

    # Assembly
    'ImpulseResponseBuffer',
    'assemble',
    'normalize_peak',
]
