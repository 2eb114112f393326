"""
Segment synthesis: envelope-shaped noise laid out as ITDG, early
reflections and late reverberation.

``sample[i] = noise[i] * envelope(i / fs)``, except during the ITDG where
the buffer holds a single direct-sound impulse at ``i = 0``, as loud as the
loudest reflection (so it is the peak after normalization), followed by
exact silence. Sample 0 is the direct sound for every draw,
including when the ITDG is zero.

The late tail stops when the envelope falls ``floor_db`` below the direct
sound, or earlier when the buffer would exceed ``max_duration_ms``; the
latter is a truncation, not an error.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..parameters import AcousticParameters, Algorithm, NoiseColor
from ..utils import ms_to_samples
from .assembler import ImpulseResponseBuffer, assemble
from .envelope import DIRECT_LEVEL, DecayEnvelope, RegionKind
from .improved import default_drr, thin_to_drr
from .noise import CHUNK_SIZE, NoiseSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationRequest:
    """One draw of a batch: parameters, draw index and the batch base seed."""

    parameters: AcousticParameters
    index: int
    base_seed: int

    def noise_source(self) -> NoiseSource:
        return NoiseSource.for_draw(self.base_seed, self.index, self.parameters.noise_color)


@dataclass(frozen=True)
class SegmentLayout:
    """Sample counts of each segment of a buffer, after truncation."""

    itdg: int
    early: int
    tail: int
    requested: int

    @property
    def total(self) -> int:
        return self.itdg + self.early + self.tail

    @property
    def truncated(self) -> bool:
        return self.total < self.requested

    @property
    def early_slice(self) -> slice:
        return slice(self.itdg, self.itdg + self.early)

    @property
    def tail_slice(self) -> slice:
        return slice(self.itdg + self.early, self.total)


def plan_segments(envelope: DecayEnvelope, params: AcousticParameters) -> SegmentLayout:
    """
    Work out how many samples each segment takes.

    The ITDG and early-reflection lengths come straight from the
    parameters; the tail runs until the envelope reaches the floor. The
    total is then capped at ``max_duration_ms`` (segments are cut from the
    end backwards).
    """
    fs = params.sample_rate
    itdg = ms_to_samples(params.itdg, fs)
    early = ms_to_samples(params.er_duration, fs)

    tail_start = envelope.region(RegionKind.LATE_REVERB).start
    tail_seconds = max(envelope.time_to_floor(params.floor_db) - tail_start, 0.0)
    max_samples = max(ms_to_samples(params.max_duration_ms, fs), 1)
    tail = max_samples if math.isinf(tail_seconds) else math.ceil(tail_seconds * fs)

    requested = max(itdg + early + tail, 1)
    if requested > max_samples:
        logger.warning('Impulse response cut at %d samples (%.0f ms safeguard), %d requested',
                       max_samples, params.max_duration_ms, requested)
        itdg = min(itdg, max_samples)
        early = min(early, max_samples - itdg)
        tail = max_samples - itdg - early
    elif itdg + early + tail == 0:
        tail = 1
    return SegmentLayout(itdg, early, tail, requested)


def synthesize(envelope: DecayEnvelope, noise: NoiseSource, params: AcousticParameters):
    """
    Produce the raw (unnormalized) samples of one draw.

    Parameters
    ----------
    envelope : DecayEnvelope
        Shared decay envelope.
    noise : NoiseSource
        Noise stream owned by this draw.
    params : AcousticParameters
        Parameters the envelope was built from.

    Returns
    -------
    samples : ndarray
        float64 buffer.
    layout : SegmentLayout
        Segment boundaries within ``samples``.
    """
    layout = plan_segments(envelope, params)
    fs = params.sample_rate
    samples = np.empty(layout.total, dtype=float)

    # Pink noise is shaped over the whole buffer in one block.
    chunk_size = CHUNK_SIZE if noise.color is NoiseColor.WHITE else layout.total

    start = 0
    for block in noise.chunks(layout.total, chunk_size):
        stop = start + block.size
        samples[start:stop] = block * envelope(np.arange(start, stop) / fs)
        start = stop

    # Gap: direct sound only, never below the loudest reflection.
    samples[:layout.itdg] = 0.0
    samples[0] = max(DIRECT_LEVEL * envelope(0.0), np.max(np.abs(samples[1:]), initial=0.0))
    return samples, layout


def generate_impulse(request: GenerationRequest,
                     envelope: Optional[DecayEnvelope] = None) -> ImpulseResponseBuffer:
    """
    Run the full single-draw pipeline: noise, segments, variant-specific
    shaping and assembly.

    Parameters
    ----------
    request : GenerationRequest
        Draw to produce.
    envelope : DecayEnvelope, optional
        Pre-built envelope for ``request.parameters``; built on demand if omitted.

    Returns
    -------
    ImpulseResponseBuffer
        Normalized, read-only buffer for ``request.index``.
    """
    params = request.parameters
    if envelope is None:
        envelope = DecayEnvelope.from_parameters(params)

    noise = request.noise_source()
    samples, layout = synthesize(envelope, noise, params)

    drr_target = None
    if params.algorithm is Algorithm.IMPROVED:
        drr_target = params.drr if params.drr is not None else default_drr(params.rt60, noise.rng)
        thin_to_drr(samples, layout, drr_target, noise.rng)

    return assemble(samples, request, layout, drr_target=drr_target)
