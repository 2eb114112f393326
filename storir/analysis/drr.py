"""
Direct-to-reverberant ratio (DRR) of an impulse response.
"""

import numpy as np


def direct_to_reverberant_ratio(rir, fs=None, window_length=0.0025, direct_index=None):
    """
    Direct-to-reverberant energy ratio (dB).

    The direct part spans ``window_length`` seconds on each side of the
    direct sound; everything after it is reverberant.

    Parameters
    ----------
    rir : array_like
        Room impulse response.
    fs : float, optional
        Sampling rate (Hz). Required when ``window_length`` is non-zero.
    window_length : float, default=0.0025
        Half-width (s) of the direct window.
    direct_index : int, optional
        Index of the direct sound; defaults to the peak of ``|rir|``.

    Returns
    -------
    float
        DRR in dB.

    Raises
    ------
    ValueError
        If the RIR is empty, has no direct energy or no reverberant energy.
    """
    rir = np.asarray(rir, dtype=float)
    if rir.size == 0:
        raise ValueError('The RIR cannot be empty')
    if window_length and fs is None:
        raise ValueError('fs is required for a non-zero window length')

    t_d = int(np.argmax(np.abs(rir))) if direct_index is None else int(direct_index)
    t_o = int(window_length * fs) if window_length else 0
    init_idx = max(t_d - t_o, 0)
    final_idx = min(t_d + t_o + 1, rir.size)

    direct_energy = np.sum(rir[init_idx:final_idx] ** 2)
    late_energy = np.sum(rir[final_idx:] ** 2)
    if late_energy == 0:
        raise ValueError('The energy of the reverberant part is zero')
    if direct_energy == 0:
        raise ValueError('The energy of the direct part is zero')

    return float(10 * np.log10(direct_energy / late_energy))
