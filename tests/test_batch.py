from dataclasses import replace

import numpy as np
import pandas as pd
import pytest

import storir.batch
from storir import BatchGenerator, InvalidParameterError
from conftest import CollectingWriter


def test_five_distinct_impulses(small_params, collecting_writer) -> None:
    report = BatchGenerator(small_params, collecting_writer, base_seed=42,
                            show_progress=False).generate()

    buffers = collecting_writer.buffers
    assert sorted(buffers) == [0, 1, 2, 3, 4]
    assert report.succeeded == [0, 1, 2, 3, 4]
    assert report.failed == []
    for i in range(5):
        for j in range(i + 1, 5):
            assert not np.array_equal(buffers[i].samples, buffers[j].samples)


@pytest.mark.parametrize('executor, workers', [('thread', 3), ('process', 2)])
def test_parallel_matches_sequential(small_params, executor, workers) -> None:
    sequential, pooled = CollectingWriter(), CollectingWriter()
    BatchGenerator(small_params, sequential, base_seed=7, show_progress=False).generate()
    report = BatchGenerator(small_params, pooled, base_seed=7, workers=workers,
                            executor=executor, show_progress=False).generate()

    assert report.succeeded == [0, 1, 2, 3, 4]
    assert sorted(pooled.buffers) == sorted(sequential.buffers)
    for index, buffer in sequential.buffers.items():
        assert np.array_equal(buffer.samples, pooled.buffers[index].samples)


def test_invalid_parameters_produce_nothing(small_params, collecting_writer) -> None:
    with pytest.raises(InvalidParameterError):
        BatchGenerator(replace(small_params, rt60=0.0), collecting_writer, base_seed=1)
    assert collecting_writer.buffers == {}


def test_write_failure_is_isolated(small_params) -> None:
    writer = CollectingWriter(fail_on={2})
    report = BatchGenerator(small_params, writer, base_seed=3, show_progress=False).generate()

    assert report.failed == [2]
    assert report.succeeded == [0, 1, 3, 4]
    assert sorted(writer.buffers) == [0, 1, 3, 4]
    assert 'failed: 2' in report.summary()


def test_synthesis_failure_is_isolated(small_params, collecting_writer, monkeypatch) -> None:
    real_generate = storir.batch.generate_impulse

    def flaky(request, envelope=None):
        if request.index == 1:
            raise RuntimeError('boom')
        return real_generate(request, envelope)

    monkeypatch.setattr(storir.batch, 'generate_impulse', flaky)
    report = BatchGenerator(small_params, collecting_writer, base_seed=3,
                            show_progress=False).generate()

    assert report.failed == [1]
    assert sorted(collecting_writer.buffers) == [0, 2, 3, 4]
    frame = report.to_frame()
    assert frame.loc[1, 'error'] == 'RuntimeError: boom'


def test_report_frame_and_csv(small_params, collecting_writer, tmp_path) -> None:
    report = BatchGenerator(small_params, collecting_writer, base_seed=11,
                            show_progress=False).generate()
    frame = report.to_frame()

    assert list(frame['index']) == [0, 1, 2, 3, 4]
    assert set(frame['status']) == {'ok'}
    assert (frame['seed'] == 11).all()
    assert frame.loc[0, 'file'] == 'memory://0'
    assert frame['t30_s'].notna().all()

    path = report.save(tmp_path / 'report.csv')
    assert len(pd.read_csv(path)) == 5


def test_random_base_seed_is_reported(small_params, collecting_writer) -> None:
    generator = BatchGenerator(replace(small_params, num_impulses=1), collecting_writer,
                               show_progress=False, measure_decay=False)
    report = generator.generate()
    assert report.base_seed == generator.base_seed
    assert np.isnan(report.to_frame().loc[0, 't30_s'])


def test_rejects_unknown_executor(small_params, collecting_writer) -> None:
    with pytest.raises(ValueError):
        BatchGenerator(small_params, collecting_writer, executor='cluster')
