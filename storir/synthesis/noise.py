"""
Seeded stochastic excitation for one impulse response draw.

Every draw owns its own :class:`numpy.random.Generator`. Draw seeds are
derived from a base seed and the draw index through
:class:`numpy.random.SeedSequence` (``spawn_key=(index,)``), which yields the
same streams as ``SeedSequence(base_seed).spawn(n)[index]``: independent
across draws and reproducible no matter which order, thread or process
they run in.

White noise is standard Gaussian. Pink (1/f) noise comes from
:func:`colorednoise.powerlaw_psd_gaussian`, which also has unit variance.
"""

import colorednoise as cn
import numpy as np

from ..parameters import NoiseColor

# Default number of samples produced per step when iterating lazily.
CHUNK_SIZE = 4096

# Power-law exponents understood by colorednoise: 0=white; 1=pink.
_BETA = {NoiseColor.WHITE: 0, NoiseColor.PINK: 1}


def draw_seed_sequence(base_seed, index):
    """Seed sequence of draw ``index`` within a batch seeded by ``base_seed``."""
    return np.random.SeedSequence(entropy=base_seed, spawn_key=(index,))


def new_base_seed():
    """Fresh base seed from OS entropy, small enough to print and reuse."""
    return int(np.random.SeedSequence().generate_state(1, dtype=np.uint32)[0])


class NoiseSource:
    """
    Zero-mean, unit-variance i.i.d. (white) or 1/f (pink) sample stream.

    Parameters
    ----------
    seed : int, sequence of int or numpy.random.SeedSequence
        Seed of the private generator. The same seed always produces a
        bit-identical stream.
    color : NoiseColor or str, default='white'
        Excitation spectrum.

    Notes
    -----
    The stream is consumed as it is read; restarting it requires a new
    instance with the same seed.
    """

    __slots__ = ('color', '_rng')

    def __init__(self, seed, color=NoiseColor.WHITE):
        self.color = NoiseColor(color)
        self._rng = np.random.default_rng(seed)

    @classmethod
    def for_draw(cls, base_seed, index, color=NoiseColor.WHITE):
        return cls(draw_seed_sequence(base_seed, index), color)

    @property
    def rng(self):
        """The draw's private generator, for any other random decision it makes."""
        return self._rng

    def take(self, samples):
        """Return the next ``samples`` values of the stream as a float64 array."""
        if samples <= 0:
            return np.zeros(0, dtype=float)
        if self.color is NoiseColor.WHITE:
            return self._rng.standard_normal(samples)
        # Each block is shaped independently; needs at least two samples.
        if samples == 1:
            return self._rng.standard_normal(1)
        return cn.powerlaw_psd_gaussian(_BETA[self.color], samples, random_state=self._rng)

    def chunks(self, total_samples, chunk_size=CHUNK_SIZE):
        """
        Lazily yield ``total_samples`` values in blocks of ``chunk_size``.
        """
        remaining = total_samples
        while remaining > 0:
            current_chunk = min(chunk_size, remaining)
            yield self.take(current_chunk)
            remaining -= current_chunk

    def __iter__(self):
        while True:
            yield from self.take(CHUNK_SIZE)
