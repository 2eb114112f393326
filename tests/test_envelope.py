import logging

import numpy as np
import pytest

from storir import AcousticParameters, InvalidParameterError
from storir.synthesis import DecayEnvelope, Region, RegionKind

EPS = 1e-9


def _grid(envelope, seconds=2.0, fs=48000):
    t = np.arange(int(seconds * fs)) / fs
    return envelope(t)


@pytest.mark.parametrize('params', [
    AcousticParameters(),
    AcousticParameters(rt60=500.0, edt=50.0, itdg=4.0, er_duration=100.0),
    AcousticParameters(rt60=1200.0, edt=10.0, itdg=0.0, er_duration=30.0),
    AcousticParameters(rt60=200.0, edt=150.0, itdg=20.0, er_duration=0.0),
    AcousticParameters(rt60=300.0, edt=300.0, itdg=0.0, er_duration=0.0),
])
def test_envelope_starts_at_one_and_never_grows(params) -> None:
    envelope = DecayEnvelope.from_parameters(params)
    values = _grid(envelope)

    assert envelope(0.0) == 1.0
    assert np.all(values >= 0.0)
    assert np.all(values <= 1.0)
    assert np.all(np.diff(values) <= 1e-15)


@pytest.mark.parametrize('params', [
    AcousticParameters(rt60=500.0, edt=50.0, itdg=4.0, er_duration=100.0),
    AcousticParameters(rt60=2000.0, edt=400.0, itdg=12.0, er_duration=60.0),
])
def test_envelope_is_continuous_at_boundaries(params) -> None:
    envelope = DecayEnvelope.from_parameters(params)

    for boundary in envelope.boundaries:
        assert envelope(boundary - EPS) == pytest.approx(envelope(boundary), abs=1e-6)

    regions = envelope.regions
    for previous, current in zip(regions, regions[1:]):
        assert current.level == pytest.approx(previous.end_level, rel=1e-12)


def test_regions_follow_the_decay_definitions() -> None:
    params = AcousticParameters(rt60=500.0, edt=50.0, itdg=4.0, er_duration=100.0)
    envelope = DecayEnvelope.from_parameters(params)

    itdg = envelope.region(RegionKind.ITDG)
    early = envelope.region(RegionKind.EARLY_REFLECTIONS)
    late = envelope.region(RegionKind.LATE_REVERB)

    # Flat gap.
    assert itdg.rate == 0.0
    assert envelope(0.002) == 1.0
    # First 10 dB of the early reflections take one EDT.
    assert envelope(0.004 + 0.050) == pytest.approx(10 ** (-10 / 20))
    # 60 dB of the late tail take one RT60.
    assert late.amplitude(late.start + 0.5) == pytest.approx(late.level * 1e-3)
    assert late.rate == pytest.approx(np.log(1000.0) / 0.5)
    assert early.end == late.start == pytest.approx(0.104)


def test_zero_gap_collapses_first_region() -> None:
    envelope = DecayEnvelope.from_parameters(AcousticParameters(itdg=0.0))
    itdg = envelope.region(RegionKind.ITDG)

    assert itdg.duration == 0.0
    assert envelope(0.0) == 1.0
    assert envelope(0.001) < 1.0


def test_time_to_floor() -> None:
    params = AcousticParameters(rt60=500.0, edt=50.0, itdg=4.0, er_duration=100.0)
    envelope = DecayEnvelope.from_parameters(params)

    # -20 dB after the early reflections, 60 dB more over one RT60.
    assert envelope.time_to_floor(-80.0) == pytest.approx(0.604)
    assert envelope.time_to_floor(-10.0) == pytest.approx(0.054)
    assert envelope(envelope.time_to_floor(-80.0)) == pytest.approx(1e-4)


def test_slow_early_decay_is_allowed_but_logged(caplog) -> None:
    params = AcousticParameters(rt60=300.0, edt=200.0)
    with caplog.at_level(logging.WARNING, logger='storir.synthesis.envelope'):
        envelope = DecayEnvelope.from_parameters(params)

    assert 'slower early decay' in caplog.text
    assert np.all(np.diff(_grid(envelope, seconds=1.0)) <= 1e-15)


def test_invalid_parameters_fail() -> None:
    with pytest.raises(InvalidParameterError):
        DecayEnvelope.from_parameters(AcousticParameters(rt60=0.0))


def test_envelope_rejects_gaps_between_regions() -> None:
    first = Region(RegionKind.ITDG, 0.0, 0.01, 1.0, 0.0)
    second = Region(RegionKind.LATE_REVERB, 0.02, np.inf, 1.0, 10.0)
    with pytest.raises(ValueError):
        DecayEnvelope([first, second])
