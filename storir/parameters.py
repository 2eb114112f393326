from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Mapping, Optional

from .errors import InvalidParameterError
from .utils import EDT_EXTRAPOLATION


class Algorithm(str, Enum):
    """Synthesis recipe selecting the envelope/noise treatment."""

    SIMPLE = 'simple'
    IMPROVED = 'improved'


class NoiseColor(str, Enum):
    """Spectral color of the stochastic excitation."""

    WHITE = 'white'
    PINK = 'pink'


# Config-file keys that differ from the dataclass field names.
_CONFIG_ALIASES = {
    'fs': 'sample_rate',
    'max_duration': 'max_duration_ms',
}


@dataclass(frozen=True)
class AcousticParameters:
    """
    Perceptual room parameters driving the synthesis.

    All durations are in milliseconds.

    Parameters
    ----------
    sample_rate : int
        Output sampling rate (Hz).
    rt60 : float
        Time for the late reverberation to decay by 60 dB.
    edt : float
        Time for the early reflections to decay by their first 10 dB.
    itdg : float
        Initial time delay gap between the direct sound and the first reflection.
    er_duration : float
        Length of the early-reflection segment.
    num_impulses : int
        Number of independent realizations to produce.
    algorithm : Algorithm
        Synthesis variant.
    drr : float or None
        Target direct-to-reverberant ratio (dB), ``improved`` variant only.
        ``None`` lets every draw pick its own.
    noise_color : NoiseColor
        Excitation spectrum.
    floor_db : float
        Level (dB re. the direct sound) at which the late tail is cut.
    max_duration_ms : float
        Hard cap on the buffer duration.
    """

    sample_rate: int = 44100
    rt60: float = 500.0
    edt: float = 50.0
    itdg: float = 3.0
    er_duration: float = 80.0
    num_impulses: int = 5
    algorithm: Algorithm = Algorithm.SIMPLE
    drr: Optional[float] = None
    noise_color: NoiseColor = NoiseColor.WHITE
    floor_db: float = -80.0
    max_duration_ms: float = 10000.0

    def __post_init__(self):
        # Accept plain strings coming from config files or the CLI.
        for name, enum_type in (('algorithm', Algorithm), ('noise_color', NoiseColor)):
            value = getattr(self, name)
            if not isinstance(value, enum_type):
                try:
                    object.__setattr__(self, name, enum_type(value))
                except ValueError:
                    allowed = ', '.join(member.value for member in enum_type)
                    raise InvalidParameterError(name, value, f'must be one of: {allowed}') from None

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "AcousticParameters":
        """Build parameters from a config namespace, ignoring unrelated keys."""
        names = {field.name for field in fields(cls)}
        kwargs = {}
        for key, value in config.items():
            key = _CONFIG_ALIASES.get(key, key)
            if key in names and value is not None:
                kwargs[key] = value
        return cls(**kwargs)

    @property
    def early_slower_than_late(self) -> bool:
        """True when the EDT-derived early slope is flatter than the RT60 slope."""
        return EDT_EXTRAPOLATION * self.edt > self.rt60

    def validate(self) -> "AcousticParameters":
        """
        Check every field, raising :class:`InvalidParameterError` on the first
        violation. Pure: validating the same instance twice gives the same verdict.

        Returns
        -------
        AcousticParameters
            ``self``, to allow chaining.
        """
        _require_positive_int('sample_rate', self.sample_rate)
        _require_positive_int('num_impulses', self.num_impulses)
        _require_positive('rt60', self.rt60)
        _require_positive('edt', self.edt)
        _require_non_negative('itdg', self.itdg)
        _require_non_negative('er_duration', self.er_duration)
        _require_positive('max_duration_ms', self.max_duration_ms)

        if not _is_real(self.floor_db) or self.floor_db >= 0:
            raise InvalidParameterError('floor_db', self.floor_db, 'must be a negative level in dB')
        if self.drr is not None and not _is_real(self.drr):
            raise InvalidParameterError('drr', self.drr, 'must be a finite number of dB')
        return self


def _is_real(value) -> bool:
    return (isinstance(value, numbers.Real) and not isinstance(value, bool)
            and math.isfinite(value))


def _require_positive_int(name, value):
    if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value <= 0:
        raise InvalidParameterError(name, value, 'must be a positive integer')


def _require_positive(name, value):
    if not _is_real(value) or value <= 0:
        raise InvalidParameterError(name, value, 'must be a positive duration')


def _require_non_negative(name, value):
    if not _is_real(value) or value < 0:
        raise InvalidParameterError(name, value, 'must be a non-negative duration')
