"""Error types raised by scalesampler.

- ``InvalidArgument`` - a bad tonality, degree, octave, span, or config value.
  Always recoverable by correcting the input; never corrupts sampler state.
- ``NoteRangeError`` - a note index outside the frequency table.
- ``UnsupportedOperation`` - connecting an instrument twice, or disconnecting
  one that was never connected.
- ``SchedulingInvariantViolation`` - a scheduling pass found an impossible
  state. The sampler stops and must be restarted with ``play()``.
"""


class InvalidArgument (ValueError):

	"""
	Raised when a caller supplies a value outside the supported range.
	"""


class NoteRangeError (InvalidArgument, IndexError):

	"""
	Raised when a note index falls outside the frequency table.
	"""


class UnsupportedOperation (RuntimeError):

	"""
	Raised for connect/disconnect requests that would not change anything.
	"""


class SchedulingInvariantViolation (RuntimeError):

	"""
	Raised from inside a scheduling pass when the sampler state is inconsistent.
	"""
