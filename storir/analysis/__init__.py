"""
Measurement helpers for generated impulse responses::

    from storir.analysis import decay_time, direct_to_reverberant_ratio
"""

from .decay import DECAY_RANGES, decay_time, schroeder_decay
from .drr import direct_to_reverberant_ratio

__all__ = [
    'DECAY_RANGES',
    'decay_time',
    'schroeder_decay',
    'direct_to_reverberant_ratio',
]
