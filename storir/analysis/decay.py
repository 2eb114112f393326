"""
Reverberation-time estimation from a synthesized impulse response.

* :func:`schroeder_decay` – Schroeder backward integration, in dB.
* :func:`decay_time` – conventional T30/T20/T10/EDT estimator extrapolated
  to a 60 dB decay by linear regression over the Schroeder curve.

Used to check that generated buffers match the requested RT60 and EDT.
"""

import sys

import numpy as np
from scipy import stats

# (start dB, end dB, factor to 60 dB) of each estimator window.
DECAY_RANGES = {
    't30': (-5.0, -35.0, 2.0),
    't20': (-5.0, -25.0, 3.0),
    't10': (-5.0, -15.0, 6.0),
    'edt': (0.0, -10.0, 6.0),
}


def schroeder_decay(rir):
    """
    Energy decay curve (dB re. total energy) by Schroeder backward integration.

    Parameters
    ----------
    rir : array_like
        Impulse response.

    Returns
    -------
    ndarray
        Decay curve in dB, 0 dB at the first sample.

    Raises
    ------
    ValueError
        If the impulse response has no energy.
    """
    energy = np.asarray(rir, dtype=float) ** 2
    if energy.size == 0 or not np.any(energy > 0):
        raise ValueError('The impulse response has no energy')
    sch = np.cumsum(energy[::-1])[::-1]
    return 10.0 * np.log10(sch / sch[0] + sys.float_info.epsilon)


def decay_time(rir, fs, rt='t30'):
    """
    Estimate the reverberation time of an impulse response.

    Parameters
    ----------
    rir : ndarray
        Impulse response (time-domain).
    fs : int or float
        Sampling rate (Hz).
    rt : {'t30', 't20', 't10', 'edt'}, default='t30'
        Decay range used for the regression. The result is extrapolated to
        60 dB with the standard factor.

    Returns
    -------
    float
        Estimated T60 (s).

    Notes
    -----
    * The IR is windowed starting at its maximum absolute value.
    * The regression runs between the Schroeder samples closest to the start
      and end levels of the selected range.
    """
    rt = rt.lower()
    if rt not in DECAY_RANGES:
        raise ValueError(f"Unknown decay range {rt!r}; use one of {sorted(DECAY_RANGES)}")
    init, end, factor = DECAY_RANGES[rt]

    rir = np.asarray(rir, dtype=float)
    if rir.size == 0:
        raise ValueError('The impulse response has no samples')

    # Window the signal starting at its maximum.
    in_max = int(np.argmax(np.abs(rir)))
    sch_db = schroeder_decay(rir[in_max:])

    # Linear regression over the selected decay range.
    init_sample = int(np.abs(sch_db - init).argmin())
    end_sample = int(np.abs(sch_db - end).argmin())
    if end_sample - init_sample < 2:
        raise ValueError(f'The impulse response does not decay over the {rt} range')
    x = np.arange(init_sample, end_sample + 1) / fs
    y = sch_db[init_sample:end_sample + 1]
    slope, intercept = stats.linregress(x, y)[0:2]

    # Reverberation time extrapolated to T60.
    db_regress_init = (init - intercept) / slope
    db_regress_end = (end - intercept) / slope
    return float(factor * (db_regress_end - db_regress_init))
