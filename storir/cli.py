"""
Command-line entry point.

Loads an optional Python config file, applies flag overrides, validates
the acoustic parameters (exit code 2 on failure, nothing written), runs the
batch and writes ``report.csv`` next to the impulses. Exit code 1 signals
that at least one draw failed.
"""

import argparse
import logging
import sys
from pathlib import Path

from .batch import BatchGenerator
from .parameters import AcousticParameters, Algorithm, NoiseColor
from .utils import import_configs_objs
from .writer import WavWriter

DEFAULT_CONFIG = {
    'folder': None,
    'seed': None,
    'workers': 1,
    'executor': 'process',
    'measure_decay': True,
    'file_prefix': 'impulse',
    'subtype': 'PCM_16',
}

# Flag destination -> config key.
_OVERRIDES = {
    'folder': 'folder',
    'fs': 'fs',
    'rt60': 'rt60',
    'edt': 'edt',
    'itdg': 'itdg',
    'er_duration': 'er_duration',
    'num_impulses': 'num_impulses',
    'algorithm': 'algorithm',
    'drr': 'drr',
    'noise_color': 'noise_color',
    'max_duration': 'max_duration',
    'seed': 'seed',
    'workers': 'workers',
    'executor': 'executor',
}


def build_parser():
    parser = argparse.ArgumentParser(
        prog='storir',
        description='Generate stochastic room impulse responses as WAV files.',
    )
    parser.add_argument('--config', help='Python config file with the run settings')
    parser.add_argument('-f', '--folder', help='Output folder')

    acoustic = parser.add_argument_group('acoustic parameters (ms)')
    acoustic.add_argument('--fs', type=int, help='Sampling rate (Hz)')
    acoustic.add_argument('--rt60', type=float, help='Reverberation time')
    acoustic.add_argument('--edt', type=float, help='Early decay time')
    acoustic.add_argument('--itdg', type=float, help='Initial time delay gap')
    acoustic.add_argument('--er-duration', type=float, help='Early reflections duration')
    acoustic.add_argument('--max-duration', type=float, help='Duration safeguard')

    synthesis = parser.add_argument_group('synthesis')
    synthesis.add_argument('-n', '--num-impulses', type=int, help='Number of impulses')
    synthesis.add_argument('--algorithm', choices=[a.value for a in Algorithm])
    synthesis.add_argument('--drr', type=float, help='Target DRR (dB), improved algorithm')
    synthesis.add_argument('--noise-color', choices=[c.value for c in NoiseColor])
    synthesis.add_argument('--seed', type=int, help='Base seed for reproducible batches')
    synthesis.add_argument('--workers', type=int, help='Compute workers')
    synthesis.add_argument('--executor', choices=['process', 'thread'])
    synthesis.add_argument('--no-measure', action='store_true',
                           help='Skip EDT/T30 measurement in the report')

    parser.add_argument('-v', '--verbose', action='count', default=0)
    return parser


def load_config(args):
    """Merge defaults, the config file and command-line overrides."""
    config = dict(DEFAULT_CONFIG)
    if args.config is not None:
        config.update(import_configs_objs(args.config))
    for dest, key in _OVERRIDES.items():
        value = getattr(args, dest)
        if value is not None:
            config[key] = value
    if args.no_measure:
        config['measure_decay'] = False
    return config


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.WARNING - 10 * min(args.verbose, 2),
        format='%(levelname)s %(name)s: %(message)s',
    )

    config = load_config(args)
    if not config.get('folder'):
        print('No output folder given (--folder or `folder` in the config).', file=sys.stderr)
        return 2

    try:
        parameters = AcousticParameters.from_config(config).validate()
        writer = WavWriter(config['folder'], config['file_prefix'], config['subtype'])
        generator = BatchGenerator(
            parameters, writer,
            base_seed=config['seed'],
            workers=config['workers'],
            executor=config['executor'],
            measure_decay=config['measure_decay'],
        )
    except ValueError as err:
        print(f'Error: {err}', file=sys.stderr)
        return 2

    folder = Path(config['folder'])
    folder.mkdir(parents=True, exist_ok=True)
    print(f'Saving impulses to {folder}!')

    report = generator.generate()
    report.save(folder / 'report.csv')
    print(report.summary())
    return 1 if report.failed else 0


if __name__ == '__main__':
    sys.exit(main())
