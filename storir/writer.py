"""
WAV output for generated impulse responses.

:class:`WavWriter` writes one file per draw, named after the draw index so
that files of the same batch never collide. Each file is first written
under a temporary ``.part`` name in the target folder and renamed once
complete, so an interrupted run never leaves a truncated ``.wav`` behind.
The folder itself must already exist.
"""

import os
from pathlib import Path

import soundfile as sf

from .errors import WriteFailureError


class WavWriter:
    """
    Callable writer: ``writer(buffer) -> Path``.

    Parameters
    ----------
    folder : str or os.PathLike
        Existing output folder.
    prefix : str, default='impulse'
        Filename prefix; files are named ``{prefix}_{index:04d}.wav``.
    subtype : str, default='PCM_16'
        libsndfile sample format used for quantization.
    """

    __slots__ = ('folder', 'prefix', 'subtype')

    def __init__(self, folder, prefix='impulse', subtype='PCM_16'):
        self.folder = Path(folder)
        self.prefix = prefix
        self.subtype = subtype
        if not sf.check_format('WAV', subtype):
            raise ValueError(f'Unsupported WAV subtype: {subtype}')

    def path_for(self, index):
        return self.folder / f'{self.prefix}_{index:04d}.wav'

    def __call__(self, buffer):
        target = self.path_for(buffer.index)
        partial = target.with_name(target.name + '.part')
        try:
            sf.write(partial, buffer.samples, buffer.sample_rate,
                     subtype=self.subtype, format='WAV')
            os.replace(partial, target)
        except (OSError, RuntimeError) as err:
            partial.unlink(missing_ok=True)
            raise WriteFailureError(buffer.index, f'{err.__class__.__name__}: {err}') from err
        return target
