"""Absolute-pitch note model.

A `Note` is an index into a 9-octave equal-tempered frequency table
(C0 = index 0 = 16.35 Hz, B8 = index 107). Everything else - octave,
degree, letter, frequency - is derived from that index, and two notes are
equal exactly when their indexes are equal.

`TonalNote` adds the tonic and tonality it was generated in, which decides
how the pitch is *spelled* (the same index is ``C`` in one key and ``B♯``
in another). `SampleNote` adds the mutable performance attributes the
transform pipeline writes: velocity, dot/dedot, and articulation.

`Rest` is a typed marker for a silent step. A ``None`` entry in a sample
means "hold the previous note" and is distinct from `Rest`.
"""

import math
import typing

import scalesampler.constants.velocity
import scalesampler.errors
import scalesampler.key_signature
import scalesampler.tonality


OCTAVES: typing.List[typing.List[float]] = [
	[16.35, 17.32, 18.35, 19.45, 20.60, 21.83, 23.12, 24.50, 25.96, 27.50, 29.14, 30.87],
	[32.70, 34.65, 36.71, 38.89, 41.20, 43.65, 46.25, 49.00, 51.91, 55.00, 58.27, 61.74],
	[65.41, 69.30, 73.42, 77.78, 82.41, 87.31, 92.50, 98.00, 103.83, 110.00, 116.54, 123.47],
	[130.81, 138.59, 146.83, 155.56, 164.81, 174.61, 185.00, 196.00, 207.65, 220.00, 233.08, 246.94],
	[261.63, 277.18, 293.66, 311.13, 329.63, 349.23, 369.99, 392.00, 415.30, 440.00, 466.16, 493.88],
	[523.25, 554.37, 587.33, 622.25, 659.25, 698.46, 739.99, 783.99, 830.61, 880.00, 932.33, 987.77],
	[1046.50, 1108.73, 1174.66, 1244.51, 1318.51, 1396.91, 1479.98, 1567.98, 1661.22, 1760.00, 1864.66, 1975.53],
	[2093.00, 2217.46, 2349.32, 2489.02, 2637.02, 2793.83, 2959.96, 3135.96, 3322.44, 3520.00, 3729.31, 3951.07],
	[4186.01, 4434.92, 4698.63, 4978.03, 5274.04, 5587.65, 5919.91, 6271.93, 6644.88, 7040.00, 7458.62, 7902.13],
]

OCTAVE_COUNT = len(OCTAVES)
NOTE_COUNT = OCTAVE_COUNT * 12

FREQS: typing.Tuple[float, ...] = tuple(freq for octave in OCTAVES for freq in octave)

DEG_LETTERS = "CCDDEFFGGAAB"

# Index of C4 in the frequency table and its MIDI note number.
MIDDLE_C_INDEX = 48
MIDDLE_C_MIDI = 60

# Keys (by major degree) where F is written E♯ and C is written B♯.
SHARP_E_MAJOR_DEGREES: typing.FrozenSet[int] = frozenset({6, 9})
SHARP_B_MAJOR_DEGREES: typing.FrozenSet[int] = frozenset({1, 4})


class Spelling (typing.NamedTuple):

	"""A displayed note name: letter, accidental (``""``, ``"♯"``, ``"♭"``), and octave."""

	letter: str
	accidental: str
	octave: int

	@property
	def name (self) -> str:
		return self.letter + self.accidental

	@property
	def label (self) -> str:
		return f"{self.letter}{self.accidental}{self.octave}"


def _is_raised (degree: int) -> bool:
	return degree > 0 and DEG_LETTERS[degree - 1] == DEG_LETTERS[degree]


class Note:

	"""
	An immutable note identified by its absolute chromatic index.
	"""

	__slots__ = ("_index",)

	def __init__ (self, index: int) -> None:

		"""
		Create a note from an absolute index (0 = C0, 107 = B8).

		Raises:
			NoteRangeError: If the index is outside the frequency table.
		"""

		if isinstance(index, bool) or not isinstance(index, int):
			raise scalesampler.errors.NoteRangeError(f"Note index must be an integer, got {index!r}")

		if not 0 <= index < NOTE_COUNT:
			raise scalesampler.errors.NoteRangeError(f"Note index {index} outside 0-{NOTE_COUNT - 1}")

		self._index = index

	@classmethod
	def from_degree (cls, degree: int, octave: int) -> "Note":

		"""Create the note at a degree (0-11) within an octave."""

		if not 0 <= degree <= 11:
			raise scalesampler.errors.InvalidArgument(f"Degree must be 0-11, got {degree!r}")

		return cls(octave * 12 + degree)

	@property
	def index (self) -> int:
		return self._index

	@property
	def octave (self) -> int:
		return self._index // 12

	@property
	def degree (self) -> int:
		return self._index % 12

	@property
	def letter (self) -> str:
		return DEG_LETTERS[self.degree]

	@property
	def is_black (self) -> bool:
		return _is_raised(self.degree)

	@property
	def freq (self) -> float:
		return FREQS[self._index]

	@property
	def midi (self) -> int:
		return self._index - MIDDLE_C_INDEX + MIDDLE_C_MIDI

	@property
	def spelling (self) -> Spelling:

		"""The natural spelling: sharps for black keys."""

		return Spelling(self.letter, scalesampler.tonality.SHARP if self.is_black else "", self.octave)

	@property
	def flat_spelling (self) -> Spelling:

		"""Black keys written as the letter above lowered by a flat."""

		if not self.is_black:
			return Spelling(self.letter, "", self.octave)

		return Spelling(DEG_LETTERS[self.degree + 1], scalesampler.tonality.FLAT, self.octave)

	@property
	def label (self) -> str:
		return self.spelling.label

	@property
	def flat_label (self) -> str:
		return self.flat_spelling.label

	def __eq__ (self, other: object) -> bool:

		if not isinstance(other, Note):
			return NotImplemented

		return self._index == other._index

	def __hash__ (self) -> int:
		return hash(self._index)

	def __repr__ (self) -> str:
		return f"{type(self).__name__}({self._index}, {self.label})"


class TonalNote (Note):

	"""
	A note that knows the tonic and tonality it was generated in.
	"""

	__slots__ = ("_tonic", "_tonality")

	def __init__ (self, index: int, tonic: Note, tonality: scalesampler.tonality.Tonality) -> None:

		super().__init__(index)
		self._tonic = Note(tonic.index)
		self._tonality = scalesampler.tonality.parse_tonality(tonality)

	@property
	def tonic (self) -> Note:
		return self._tonic

	@property
	def tonality (self) -> scalesampler.tonality.Tonality:
		return self._tonality

	@property
	def key_signature (self) -> scalesampler.key_signature.KeySignature:
		return scalesampler.key_signature.get_key_signature(self._tonality, self._tonic.degree)

	@property
	def interval (self) -> int:

		"""Half steps above the tonic, within one octave."""

		return (self.index - self._tonic.index) % 12

	@property
	def is_tonic (self) -> bool:
		return self.interval == 0

	@property
	def is_dominant (self) -> bool:
		return self.interval == 7

	@property
	def is_leading_tone (self) -> bool:
		return self.interval == 11

	@property
	def spelling (self) -> Spelling:

		"""
		Spell the pitch for this note's key signature.

		Sharp keys write F as E♯ and C as B♯ where the key calls for it (B♯
		belongs to the octave below). Flat keys write black keys as flats.
		Everything else uses the natural sharp spelling.
		"""

		key_sig = self.key_signature
		degree = self.degree

		if not key_sig.is_flat:

			if degree == 5 and key_sig.major_degree in SHARP_E_MAJOR_DEGREES:
				return Spelling("E", scalesampler.tonality.SHARP, self.octave)

			if degree == 0 and key_sig.major_degree in SHARP_B_MAJOR_DEGREES:
				return Spelling("B", scalesampler.tonality.SHARP, self.octave - 1)

			return super().spelling

		return self.flat_spelling

	def __repr__ (self) -> str:
		return f"{type(self).__name__}({self.index}, {self.label}, tonic={self._tonic.label}, {self._tonality.name})"


class SampleNote (TonalNote):

	"""
	A tonal note carrying the performance attributes of one sample step.
	"""

	__slots__ = ("velocity", "dot", "dedot", "articulation")

	def __init__ (
		self,
		index: int,
		tonic: Note,
		tonality: scalesampler.tonality.Tonality,
		velocity: float = scalesampler.constants.velocity.DEFAULT_VELOCITY,
		dot: bool = False,
		dedot: bool = False,
		articulation: typing.Optional[float] = None,
	) -> None:

		super().__init__(index, tonic, tonality)
		self.velocity = velocity
		self.dot = dot
		self.dedot = dedot
		self.articulation = articulation

	@classmethod
	def from_note (cls, note: TonalNote) -> "SampleNote":

		"""Create a fresh sample note (default performance attributes) from a tonal note."""

		return cls(note.index, note.tonic, note.tonality)


class Rest:

	"""
	A typed marker for a silent step.
	"""

	__slots__ = ()

	def __eq__ (self, other: object) -> bool:
		return isinstance(other, Rest)

	def __hash__ (self) -> int:
		return hash(Rest)

	def __repr__ (self) -> str:
		return "Rest()"


def frequency_to_midi (freq: float) -> int:

	"""Return the nearest MIDI note number for a frequency (A4 = 440 Hz = 69)."""

	if freq <= 0:
		raise scalesampler.errors.InvalidArgument(f"Frequency must be positive, got {freq!r}")

	return int(round(69 + 12 * math.log2(freq / 440.0)))
