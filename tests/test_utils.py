import os

import numpy as np
import pytest

from storir.utils import (EDT_EXTRAPOLATION, LN_RT60_DROP, decay_rate, decibels_to_gain,
                          gain_to_decibels, import_configs_objs, ms_to_samples)


@pytest.mark.parametrize('decibels, expected', [
    (-60.0, 0.001),
    (-20.0, 0.1),
    (0.0, 1.0),
    (20.0, 10.0),
    (60.0, 1000.0),
])
def test_decibels_to_gain(decibels, expected) -> None:
    assert decibels_to_gain(decibels) == pytest.approx(expected)


def test_gain_to_decibels_inverts() -> None:
    assert gain_to_decibels(1e-4) == pytest.approx(-80.0)
    assert gain_to_decibels(0.0) == -np.inf


def test_named_constants() -> None:
    assert LN_RT60_DROP == pytest.approx(np.log(1000.0))
    assert EDT_EXTRAPOLATION == 6.0
    assert decay_rate(0.5) == pytest.approx(np.log(1000.0) / 0.5)
    assert decay_rate(0.05, decay_db=10.0) == pytest.approx(np.log(10.0) / 2 / 0.05)


def test_ms_to_samples_rounds() -> None:
    assert ms_to_samples(4.0, 44100) == 176
    assert ms_to_samples(100.0, 44100) == 4410
    assert ms_to_samples(0.0, 44100) == 0


def test_import_configs_objs(tmp_path) -> None:
    config_file = tmp_path / 'exp.py'
    config_file.write_text('import os\n"""doc"""\nrt60 = 750.0\nfolder = os.path.join("a", "b")\n')

    config = import_configs_objs(config_file)

    assert config == {'rt60': 750.0, 'folder': os.path.join('a', 'b')}


def test_import_configs_objs_requires_path() -> None:
    with pytest.raises(ValueError):
        import_configs_objs(None)
