import numpy as np

from storir.synthesis import NoiseSource, draw_seed_sequence


def test_same_seed_gives_identical_stream() -> None:
    first = NoiseSource.for_draw(42, 0).take(5000)
    second = NoiseSource.for_draw(42, 0).take(5000)
    assert np.array_equal(first, second)


def test_draws_are_independent() -> None:
    a = NoiseSource.for_draw(42, 0).take(20000)
    b = NoiseSource.for_draw(42, 1).take(20000)
    c = NoiseSource.for_draw(43, 0).take(20000)

    assert abs(np.corrcoef(a, b)[0, 1]) < 0.05
    assert abs(np.corrcoef(a, c)[0, 1]) < 0.05


def test_white_noise_is_standardized() -> None:
    samples = NoiseSource(7).take(50000)
    assert abs(samples.mean()) < 0.05
    assert abs(samples.std() - 1.0) < 0.05


def test_draw_seed_matches_spawned_children() -> None:
    child = np.random.SeedSequence(42).spawn(3)[2]
    a = np.random.default_rng(child).standard_normal(10)
    b = np.random.default_rng(draw_seed_sequence(42, 2)).standard_normal(10)
    assert np.array_equal(a, b)


def test_lazy_iteration_and_chunks() -> None:
    source = NoiseSource(3)
    blocks = list(source.chunks(10000, chunk_size=4096))
    assert [block.size for block in blocks] == [4096, 4096, 1808]

    stream = iter(NoiseSource(3))
    first = [next(stream) for _ in range(5)]
    assert len(first) == 5
    assert all(isinstance(value, float) for value in first)


def test_pink_noise_is_reproducible() -> None:
    first = NoiseSource(11, 'pink').take(8192)
    second = NoiseSource(11, 'pink').take(8192)
    white = NoiseSource(11, 'white').take(8192)

    assert first.shape == (8192,)
    assert np.array_equal(first, second)
    assert not np.allclose(first, white)
