"""
Direct-to-reverberant ratio (DRR) shaping for the ``improved`` variant.

A freshly synthesized buffer is dense, so its reverberant energy dwarfs
the single direct-sound sample. To reach a target DRR, random subsets of
the remaining reflections are zeroed pass after pass (1/8 of the early
reflections and 1/10 of the late tail each time) until the ratio is
within :data:`DRR_TOLERANCE_DB` of the target or a pass can no longer
remove anything. All random choices use the draw's own generator.
"""

import numpy as np

from ..analysis import direct_to_reverberant_ratio

# Half-width (dB) of the accepted band around the target DRR.
DRR_TOLERANCE_DB = 0.5

# Fraction of the remaining non-zero samples removed per pass.
EARLY_THINNING = 1.0 / 8.0
LATE_THINNING = 1.0 / 10.0


def default_drr(rt60, rng):
    """Random target DRR (dB) in ``[-rt60 / 100, 0)``, with ``rt60`` in ms."""
    return rt60 * (-1.0 / 100.0) + rng.uniform(0.0, rt60 / 100.0)


def _current_drr(samples):
    try:
        return direct_to_reverberant_ratio(samples, window_length=0.0, direct_index=0)
    except ValueError:
        # No reverberant energy left.
        return np.inf


def thin_out_reflections(samples, region, rate, rng):
    """
    Zero a random ``rate`` share of the non-zero samples in ``region``, in place.

    Returns
    -------
    int
        Number of samples removed.
    """
    indices = np.flatnonzero(samples[region]) + (region.start or 0)
    # The direct sound is never thinned.
    indices = indices[indices > 0]
    num_rays = int(round(indices.size * rate))
    if num_rays < 1:
        return 0
    samples[rng.choice(indices, size=num_rays, replace=False)] = 0.0
    return num_rays


def thin_to_drr(samples, layout, target_db, rng):
    """
    Thin reflections in place until the DRR reaches ``target_db``.

    Parameters
    ----------
    samples : ndarray
        Raw buffer with the direct sound at index 0; modified in place.
    layout : SegmentLayout
        Segment boundaries of ``samples``.
    target_db : float
        Desired DRR (dB).
    rng : numpy.random.Generator
        The draw's generator.

    Returns
    -------
    float
        DRR (dB) achieved.
    """
    current = _current_drr(samples)
    if current > target_db + DRR_TOLERANCE_DB:
        return current

    while current < target_db - DRR_TOLERANCE_DB:
        removed = thin_out_reflections(samples, layout.early_slice, EARLY_THINNING, rng)
        removed += thin_out_reflections(samples, layout.tail_slice, LATE_THINNING, rng)
        # Nothing left to thin: the highest reachable DRR.
        if removed == 0:
            break
        current = _current_drr(samples)
    return current
