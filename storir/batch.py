"""
Batch driver: produce ``num_impulses`` independent impulse responses and
hand each one to a writer.

Draws only share the read-only :class:`DecayEnvelope`; each owns a noise
generator derived from ``(base_seed, index)``. They can therefore run
sequentially or on a worker pool and give the same buffers either way.
Computation happens on the workers, writing happens in the calling
process as results arrive.

A draw that fails (in synthesis or while writing) is logged and recorded
in the :class:`BatchReport`; the remaining draws carry on.
"""

import concurrent.futures
import logging
from dataclasses import dataclass, field
from math import nan
from typing import List

import pandas as pd
from progress.bar import IncrementalBar

from .analysis import decay_time
from .parameters import AcousticParameters
from .synthesis import DecayEnvelope, GenerationRequest, generate_impulse, new_base_seed

logger = logging.getLogger(__name__)

EXECUTORS = {
    'process': concurrent.futures.ProcessPoolExecutor,
    'thread': concurrent.futures.ThreadPoolExecutor,
}

REPORT_COLUMNS = [
    'index', 'seed', 'file', 'samples', 'duration_s', 'truncated', 'normalized',
    'drr_target', 'edt_s', 't30_s', 'status', 'error',
]


@dataclass
class BatchReport:
    """Per-draw outcome of a batch run."""

    base_seed: int
    records: List[dict] = field(default_factory=list)

    @property
    def succeeded(self):
        return sorted(r['index'] for r in self.records if r['status'] == 'ok')

    @property
    def failed(self):
        return sorted(r['index'] for r in self.records if r['status'] == 'failed')

    def summary(self):
        total = len(self.records)
        text = f'{len(self.succeeded)}/{total} impulses written (seed {self.base_seed})'
        if self.failed:
            text += f'; failed: {", ".join(map(str, self.failed))}'
        return text

    def to_frame(self):
        df = pd.DataFrame(self.records, columns=REPORT_COLUMNS)
        return df.sort_values('index', ignore_index=True)

    def save(self, path):
        self.to_frame().to_csv(path, index=False)
        return path


class BatchGenerator:
    """
    Generate and write a batch of impulse responses.

    Parameters
    ----------
    parameters : AcousticParameters
        Validated here; an invalid set raises before any draw starts.
    writer : callable
        ``writer(buffer)`` stores one :class:`ImpulseResponseBuffer`
        (tagged by ``buffer.index``) and returns where it went.
    base_seed : int, optional
        Batch seed; a fresh one is drawn if omitted (see ``report.base_seed``).
    workers : int, default=1
        Number of compute workers; 1 runs the draws in the calling thread.
    executor : {'process', 'thread'}, default='process'
        Pool type used when ``workers > 1``.
    measure_decay : bool, default=True
        Record the measured EDT and T30 of every buffer in the report.
    show_progress : bool, default=True
        Display a console progress bar.
    """

    __slots__ = (
        'parameters', 'writer', 'base_seed', 'workers', 'executor',
        'measure_decay', 'show_progress', 'envelope',
    )

    def __init__(self, parameters: AcousticParameters, writer, base_seed=None, workers=1,
                 executor='process', measure_decay=True, show_progress=True):
        if executor not in EXECUTORS:
            raise ValueError(f"executor must be one of {sorted(EXECUTORS)}, got {executor!r}")
        if workers < 1:
            raise ValueError('workers must be at least 1')

        self.parameters = parameters
        self.writer = writer
        self.base_seed = new_base_seed() if base_seed is None else int(base_seed)
        self.workers = int(workers)
        self.executor = executor
        self.measure_decay = measure_decay
        self.show_progress = show_progress

        # Fails fast on invalid parameters.
        self.envelope = DecayEnvelope.from_parameters(parameters)

    def request(self, index):
        return GenerationRequest(self.parameters, index, self.base_seed)

    def process_single_draw(self, index):
        """Synthesize draw ``index`` (no writing)."""
        return generate_impulse(self.request(index), self.envelope)

    def generate(self):
        """
        Run every draw and write the successful ones.

        Returns
        -------
        BatchReport
            One record per draw index, in index order.
        """
        num_impulses = self.parameters.num_impulses
        logger.info('Generating %d impulses (seed %d, %d worker(s))',
                    num_impulses, self.base_seed, self.workers)

        report = BatchReport(self.base_seed)
        bar = IncrementalBar('Generating impulses', max=num_impulses) if self.show_progress else None

        for index, buffer, error in self._iter_draws():
            if error is None:
                record = self._deliver(buffer)
            else:
                logger.error('Impulse %d failed during synthesis: %s', index, error)
                record = self._failed_record(index, error)
            report.records.append(record)
            if bar is not None:
                bar.next()

        if bar is not None:
            bar.finish()
        report.records.sort(key=lambda r: r['index'])
        logger.info(report.summary())
        return report

    def _iter_draws(self):
        indices = range(self.parameters.num_impulses)

        if self.workers == 1:
            for index in indices:
                try:
                    yield index, self.process_single_draw(index), None
                except Exception as err:
                    yield index, None, err
            return

        with EXECUTORS[self.executor](max_workers=self.workers) as executor:
            futures = {
                executor.submit(generate_impulse, self.request(index), self.envelope): index
                for index in indices
            }
            for future in concurrent.futures.as_completed(futures):
                index = futures[future]
                try:
                    yield index, future.result(), None
                except Exception as err:
                    yield index, None, err

    def _deliver(self, buffer):
        record = {
            'index': buffer.index,
            'seed': buffer.seed,
            'file': None,
            'samples': len(buffer),
            'duration_s': buffer.duration,
            'truncated': buffer.truncated,
            'normalized': buffer.normalized,
            'drr_target': nan if buffer.drr_target is None else buffer.drr_target,
            'edt_s': nan,
            't30_s': nan,
            'status': 'ok',
            'error': None,
        }
        if self.measure_decay:
            record['edt_s'] = self._measure(buffer, 'edt')
            record['t30_s'] = self._measure(buffer, 't30')

        try:
            location = self.writer(buffer)
        except Exception as err:
            logger.error('Impulse %d could not be written: %s', buffer.index, err)
            record.update(status='failed', error=f'{err.__class__.__name__}: {err}')
            return record

        record['file'] = None if location is None else str(location)
        return record

    def _failed_record(self, index, error):
        record = dict.fromkeys(REPORT_COLUMNS)
        record.update(index=index, seed=self.base_seed, status='failed',
                      error=f'{error.__class__.__name__}: {error}')
        return record

    @staticmethod
    def _measure(buffer, rt):
        try:
            return decay_time(buffer.samples, buffer.sample_rate, rt)
        except ValueError as err:
            logger.debug('Impulse %d: no %s estimate (%s)', buffer.index, rt, err)
            return nan
