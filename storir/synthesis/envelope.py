"""
Piecewise exponential decay envelope.

The envelope is a linear amplitude scale over time made of three regions:

1. **ITDG** – held at the direct-sound level (1.0) until the first reflection.
2. **Early reflections** – exponential decay at the EDT-derived rate.
3. **Late reverberation** – exponential decay at the RT60-derived rate,
   unbounded in time.

Each region starts at the level the previous one ended on, so the envelope
is continuous in value even though its decay rate changes at the
boundaries. Regions are explicit objects so that every segment (and every
boundary) can be inspected and tested on its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

import numpy as np

from ..parameters import AcousticParameters
from ..utils import EDT_EXTRAPOLATION, LN_RT60_DROP, decibels_to_gain

logger = logging.getLogger(__name__)

# Amplitude of the direct sound; the envelope never exceeds it.
DIRECT_LEVEL = 1.0


class RegionKind(str, Enum):
    ITDG = 'itdg'
    EARLY_REFLECTIONS = 'early_reflections'
    LATE_REVERB = 'late_reverb'


@dataclass(frozen=True)
class Region:
    """
    One exponential piece ``level * exp(-rate * (t - start))`` on ``[start, end)``.

    Times are in seconds, ``rate`` in 1/s. ``end`` may be ``inf``.
    """

    kind: RegionKind
    start: float
    end: float
    level: float
    rate: float

    @property
    def duration(self) -> float:
        return self.end - self.start

    @property
    def end_level(self) -> float:
        """Amplitude reached at ``end`` (0 for an unbounded region)."""
        if np.isinf(self.end):
            return 0.0 if self.rate > 0 else self.level
        return float(self.level * np.exp(-self.rate * self.duration))

    def contains(self, t):
        t = np.asarray(t, dtype=float)
        return (t >= self.start) & (t < self.end)

    def amplitude(self, t):
        t = np.asarray(t, dtype=float)
        return self.level * np.exp(-self.rate * (t - self.start))


def _early_rate(edt_s: float) -> float:
    # 10 dB over EDT extrapolates to 60 dB over 6 * EDT.
    return LN_RT60_DROP / (EDT_EXTRAPOLATION * edt_s)


def _late_rate(rt60_s: float) -> float:
    return LN_RT60_DROP / rt60_s


class DecayEnvelope:
    """
    Target amplitude decay shared (read-only) by every draw of a batch.

    Parameters
    ----------
    regions : sequence of Region
        Contiguous regions ordered in time; the last one must be unbounded.

    Notes
    -----
    Instances are immutable and safe to share across threads and to pickle
    into worker processes.
    """

    __slots__ = ('_regions',)

    def __init__(self, regions):
        regions = tuple(regions)
        if not regions:
            raise ValueError('An envelope needs at least one region')
        for previous, current in zip(regions, regions[1:]):
            if current.start != previous.end:
                raise ValueError(f'Region {current.kind.value} does not start where '
                                 f'{previous.kind.value} ends')
        if not np.isinf(regions[-1].end):
            raise ValueError('The last region must be unbounded')
        self._regions = regions

    @classmethod
    def from_parameters(cls, params: AcousticParameters) -> "DecayEnvelope":
        """
        Build the three-region envelope for a set of acoustic parameters.

        Raises
        ------
        InvalidParameterError
            If the parameters do not validate.
        """
        params.validate()

        itdg_end = params.itdg * 0.001
        er_end = itdg_end + params.er_duration * 0.001
        early_rate = _early_rate(params.edt * 0.001)
        late_rate = _late_rate(params.rt60 * 0.001)

        if params.early_slower_than_late:
            logger.warning('EDT %.1f ms implies a slower early decay than RT60 %.1f ms',
                           params.edt, params.rt60)

        # A growing segment is never allowed.
        early_rate = max(early_rate, 0.0)

        itdg = Region(RegionKind.ITDG, 0.0, itdg_end, DIRECT_LEVEL, 0.0)
        early = Region(RegionKind.EARLY_REFLECTIONS, itdg_end, er_end, itdg.end_level, early_rate)
        late = Region(RegionKind.LATE_REVERB, er_end, np.inf, early.end_level, late_rate)
        return cls((itdg, early, late))

    @property
    def regions(self) -> Tuple[Region, ...]:
        return self._regions

    def region(self, kind: RegionKind) -> Region:
        for region in self._regions:
            if region.kind is kind:
                return region
        raise KeyError(kind)

    @property
    def boundaries(self) -> Tuple[float, ...]:
        """Start times of every region after the first one (s)."""
        return tuple(region.start for region in self._regions[1:])

    def __call__(self, t):
        """
        Evaluate the envelope at time(s) ``t`` (s). Negative times are clamped to 0.

        Returns a float for scalar input, an ndarray otherwise.
        """
        scalar = np.ndim(t) == 0
        t = np.maximum(np.asarray(t, dtype=float), 0.0)
        out = np.zeros(t.shape, dtype=float)
        for region in self._regions:
            mask = region.contains(t)
            out[mask] = region.amplitude(t[mask])
        return float(out) if scalar else out

    def time_to_level(self, level: float) -> float:
        """
        Earliest time (s) at which the envelope drops to ``level`` or below.

        Returns ``inf`` if it never does (only possible for a flat tail).
        """
        if level >= DIRECT_LEVEL:
            return 0.0
        for region in self._regions:
            if region.end_level > level:
                continue
            if region.level <= level:
                return region.start
            return region.start + float(np.log(region.level / level)) / region.rate
        return np.inf

    def time_to_floor(self, floor_db: float) -> float:
        """Time (s) at which the envelope falls ``floor_db`` below the direct sound."""
        return self.time_to_level(float(decibels_to_gain(floor_db)) * DIRECT_LEVEL)
