"""
Default run configuration: five independent realizations of a medium room
(RT60 500 ms, EDT 50 ms) at 44.1 kHz.

This module is loaded as a config object; every top-level variable below is
read by ``storir`` (CLI flags override them).
"""

# Acoustic parameters (durations in ms):
fs = 44100  # Sampling rate (Hz).
rt60 = 500.0  # Reverberation time: 60 dB decay of the late tail.
edt = 50.0  # Early decay time: first 10 dB of the early reflections.
itdg = 3.0  # Initial time delay gap.
er_duration = 80.0  # Early reflections duration.

# Synthesis:
algorithm = 'simple'  # 'simple' or 'improved' (DRR-targeted thinning).
drr = None  # Target DRR (dB) for 'improved'; None picks one per draw.
noise_color = 'white'  # 'white' or 'pink'.
floor_db = -80.0  # Level at which the late tail is cut.
max_duration = 10000.0  # Duration safeguard (ms).

# Batch:
num_impulses = 5  # Independent realizations.
seed = None  # Base seed; None draws a fresh one (printed in the report).
workers = 1  # Compute workers.
executor = 'process'  # 'process' or 'thread' pool when workers > 1.
measure_decay = True  # Store measured EDT/T30 in the report.

# Output:
folder = 'tmp'  # Output folder (created if missing).
file_prefix = 'impulse'  # Files are named {file_prefix}_{index:04d}.wav.
subtype = 'PCM_16'  # WAV sample format.
