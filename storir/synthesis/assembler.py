"""
Collect synthesized samples into an immutable, peak-normalized buffer.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..errors import EmptyOutputError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImpulseResponseBuffer:
    """
    One realization of the impulse response.

    Attributes
    ----------
    samples : ndarray
        Read-only float64 samples, peak-normalized to 1.0 unless silent.
    sample_rate : int
        Sampling rate (Hz).
    index : int
        Draw index within the batch.
    seed : int
        Base seed of the batch; ``(seed, index)`` reproduces the draw.
    truncated : bool
        True if the duration safeguard cut the late tail.
    normalized : bool
        False only for a silent buffer, which is emitted as-is.
    drr_target : float or None
        DRR (dB) the ``improved`` variant aimed for.
    """

    samples: np.ndarray
    sample_rate: int
    index: int
    seed: int
    truncated: bool = False
    normalized: bool = True
    drr_target: Optional[float] = None

    def __len__(self):
        return len(self.samples)

    @property
    def duration(self) -> float:
        """Length in seconds."""
        return len(self.samples) / self.sample_rate


def normalize_peak(samples):
    """
    Scale ``samples`` so that ``max(|x|) == 1``.

    Raises
    ------
    EmptyOutputError
        If the buffer is empty, silent or not finite.
    """
    samples = np.asarray(samples, dtype=float)
    if samples.size == 0:
        raise EmptyOutputError('Buffer has no samples')
    peak = np.max(np.abs(samples))
    if not np.isfinite(peak):
        raise EmptyOutputError('Buffer contains non-finite samples')
    if peak == 0:
        raise EmptyOutputError('Buffer is silent')
    return samples / peak


def assemble(samples, request, layout, drr_target=None):
    """
    Wrap one draw's samples into an :class:`ImpulseResponseBuffer`.

    A silent buffer is logged and kept unnormalized instead of being
    divided by zero.
    """
    try:
        out = normalize_peak(samples)
        normalized = True
    except EmptyOutputError as err:
        logger.warning('Impulse %d not normalized: %s', request.index, err)
        out = np.array(samples, dtype=float)
        normalized = False

    out.setflags(write=False)
    return ImpulseResponseBuffer(
        samples=out,
        sample_rate=request.parameters.sample_rate,
        index=request.index,
        seed=request.base_seed,
        truncated=layout.truncated,
        normalized=normalized,
        drr_target=drr_target,
    )
