"""
Unit conversions, named decibel constants, and configuration loading.

The decay model mixes three conventions that are easy to confuse, so the
relations are spelled out here once:

* amplitude in dB is ``20 * log10(gain)``; a 60 dB drop is a gain of 1e-3,
  i.e. ``ln(1000)`` nepers;
* RT60 is the time for a 60 dB drop;
* EDT is the time for the first 10 dB drop, which extrapolates to a 60 dB
  equivalent time of ``6 * EDT``.

:func:`import_configs_objs` loads a Python configuration file (see
``configs/default.py``) and returns its top-level variables as a dict.
"""

from importlib.machinery import SourceFileLoader
from types import ModuleType

import numpy as np

# Amplitude decibels per decade of linear gain.
DB_PER_DECADE = 20.0

# Decay range (dB) defining the reverberation time.
RT60_DECAY_DB = 60.0

# Decay range (dB) over which the early decay time is measured.
EDT_DECAY_DB = 10.0

# Factor taking an EDT window to its 60 dB equivalent.
EDT_EXTRAPOLATION = RT60_DECAY_DB / EDT_DECAY_DB

# Nepers in a 60 dB amplitude drop: ln(10 ** (60 / 20)) = ln(1000).
LN_RT60_DROP = np.log(10.0 ** (RT60_DECAY_DB / DB_PER_DECADE))


def decibels_to_gain(decibels):
    """Convert amplitude decibels to a linear gain factor."""
    return 10.0 ** (np.asarray(decibels, dtype=float) / DB_PER_DECADE)


def gain_to_decibels(gain):
    """Convert a linear gain factor to amplitude decibels (``-inf`` for 0)."""
    with np.errstate(divide='ignore'):
        return DB_PER_DECADE * np.log10(np.asarray(gain, dtype=float))


def ms_to_samples(duration_ms, fs):
    """Number of samples spanned by ``duration_ms`` milliseconds at ``fs`` Hz."""
    return int(round(duration_ms * 0.001 * fs))


def decay_rate(decay_time_s, decay_db=RT60_DECAY_DB):
    """
    Exponential amplitude decay rate (1/s) for a given decay time.

    Parameters
    ----------
    decay_time_s : float
        Time (s) for the amplitude to fall by ``decay_db``.
    decay_db : float, default=60
        Size of the drop in amplitude decibels.

    Returns
    -------
    float
        Rate ``k`` such that ``exp(-k * decay_time_s)`` equals the drop.
    """
    nepers = np.log(10.0) * decay_db / DB_PER_DECADE
    return nepers / decay_time_s


def import_configs_objs(config_file):
    """
    Dynamically import a Python configuration file and return its namespace.

    The target file is executed in an ephemeral module created via
    :class:`importlib.machinery.SourceFileLoader`. Module metadata entries
    (``__name__``, ``__doc__``, ...) and any modules the file imported are
    dropped; the remaining top-level variables are returned.

    Parameters
    ----------
    config_file : str or os.PathLike
        Filesystem path to the configuration file.

    Returns
    -------
    dict
        Mapping of variable names to their values.

    Raises
    ------
    ValueError
        If ``config_file`` is ``None``.
    """
    if config_file is None:
        raise ValueError("No config path")

    # Execute the file at ``config_file``.
    loader = SourceFileLoader('config', str(config_file))
    mod = ModuleType(loader.name)
    loader.exec_module(mod)

    return {
        name: value for name, value in vars(mod).items()
        if not name.startswith('__') and not isinstance(value, ModuleType)
    }
