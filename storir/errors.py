"""
Exception taxonomy for stochastic impulse response generation.

* :class:`InvalidParameterError` – a parameter failed validation; fatal to
  the whole run, raised before any synthesis work starts.
* :class:`EmptyOutputError` – a synthesized buffer is silent, so it cannot be
  peak-normalized. Recovered locally by the assembler.
* :class:`WriteFailureError` – the audio writer could not store one draw.
  Isolated per draw by the batch driver.
"""


class StorirError(Exception):
    """Base error for the storir package."""


class InvalidParameterError(StorirError, ValueError):
    """Raised when an acoustic parameter is out of its valid range."""

    def __init__(self, field, value, reason):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f'Invalid parameter {field}={value!r}: {reason}')


class EmptyOutputError(StorirError):
    """Raised when a buffer has no energy and peak normalization is impossible."""


class WriteFailureError(StorirError):
    """Raised when one impulse response could not be written to disk."""

    def __init__(self, index, message):
        self.index = index
        super().__init__(f'Impulse {index}: {message}')
