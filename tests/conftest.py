import pytest

from storir import AcousticParameters


@pytest.fixture
def reference_params():
    return AcousticParameters(
        sample_rate=44100, rt60=500.0, edt=50.0, itdg=4.0, er_duration=100.0, num_impulses=1,
    )


@pytest.fixture
def small_params():
    return AcousticParameters(
        sample_rate=8000, rt60=300.0, edt=30.0, itdg=3.0, er_duration=40.0, num_impulses=5,
    )


class CollectingWriter:
    """Writer double that keeps every buffer it receives."""

    def __init__(self, fail_on=()):
        self.buffers = {}
        self.fail_on = set(fail_on)

    def __call__(self, buffer):
        if buffer.index in self.fail_on:
            raise OSError(f'disk full while writing {buffer.index}')
        self.buffers[buffer.index] = buffer
        return f'memory://{buffer.index}'


@pytest.fixture
def collecting_writer():
    return CollectingWriter()
