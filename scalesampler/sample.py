"""Samples: ordered note sequences ready for transformation and playback.

A `TonalSample` is what the scale generator produces - an ordered list of
entries plus the tonic and tonality they share. Entries are `TonalNote`
objects, `Rest` markers, or ``None`` (hold the previous note).

A `Sample` is a playback-ready copy built from a `TonalSample` each time
the sampler rebuilds. Its pitched entries are fresh `SampleNote` objects
the transform pipeline may mutate, and it carries the rhythmic context the
pipeline needs: beat unit, tempo, time signature, notes per measure, the
play counter at build time, and the previous sample.
"""

import dataclasses
import enum
import typing

import scalesampler.constants.durations
import scalesampler.errors
import scalesampler.notes
import scalesampler.tonality


Entry = typing.Optional[typing.Union[scalesampler.notes.Note, scalesampler.notes.Rest]]


class BeatUnit (enum.IntEnum):

	"""
	Supported note lengths. ``value / bpm`` is the note duration in seconds.
	"""

	SIXTEENTH = scalesampler.constants.durations.SIXTEENTH
	EIGHTH = scalesampler.constants.durations.EIGHTH
	QUARTER = scalesampler.constants.durations.QUARTER
	HALF = scalesampler.constants.durations.HALF

	@property
	def note_value (self) -> int:

		"""The note value denominator: 16, 8, 4, or 2."""

		return scalesampler.constants.durations.WHOLE_NOTE_UNITS // int(self)

	@property
	def label (self) -> str:
		return f"1/{self.note_value}"

	def seconds (self, bpm: float) -> float:
		return int(self) / bpm


@dataclasses.dataclass(frozen=True)
class TimeSignature:

	"""
	A guessed time signature. ``invalid`` marks a fallback 4/4 that does not
	divide the sample evenly.
	"""

	upper: int
	lower: int
	total_beats: float
	invalid: bool = False

	@property
	def label (self) -> str:
		return f"{self.upper}/{self.lower}"


TIMESIG_GUESS_4: typing.Tuple[int, ...] = (4, 2, 3, 5, 7)
TIMESIG_GUESS_8: typing.Tuple[int, ...] = (6, 3, 7)


def _divides (total: float, b: int) -> bool:
	return float(total).is_integer() and int(total) % b == 0


def guess_time_signature (num_notes: int, note_value: int) -> TimeSignature:

	"""Guess a reasonable time signature for a run of equal-length notes.

	Tries x/4 first (4/4, then 2/4, 3/4, 5/4, 7/4), then one big x/4 measure
	when the beats are whole, then x/8 (6/8, 3/8, 7/8) for eighth notes or
	shorter. Anything else falls back to an invalid 4/4.

	Parameters:
		num_notes: Number of equal-valued notes.
		note_value: Note value denominator (4 for quarters, 8 for eighths).

	Example:
		```python
		guess_time_signature(8, 4).label    # → "4/4"
		guess_time_signature(6, 4).label    # → "2/4"
		guess_time_signature(3, 8).label    # → "3/8"
		```
	"""

	if note_value <= 0:
		raise scalesampler.errors.InvalidArgument(f"Note value must be positive, got {note_value!r}")

	total_beats = num_notes / note_value * 4

	for b in TIMESIG_GUESS_4:
		if _divides(total_beats, b):
			return TimeSignature(b, 4, total_beats)

	if total_beats > 0 and float(total_beats).is_integer():
		return TimeSignature(int(total_beats), 4, total_beats)

	if note_value % 8 == 0:
		total_eighths = num_notes / note_value * 8
		for b in TIMESIG_GUESS_8:
			if _divides(total_eighths, b):
				return TimeSignature(b, 8, total_eighths)

	return TimeSignature(4, 4, total_beats, invalid=True)


class TonalSample:

	"""
	An ordered sequence of entries sharing one tonic and tonality.
	"""

	def __init__ (
		self,
		notes: typing.Iterable[Entry],
		tonic: scalesampler.notes.Note,
		tonality: scalesampler.tonality.Tonality,
	) -> None:

		self.notes: typing.List[Entry] = list(notes)
		self.tonic = tonic
		self.tonality = tonality

	def __len__ (self) -> int:
		return len(self.notes)

	def __iter__ (self) -> typing.Iterator[Entry]:
		return iter(self.notes)

	def __getitem__ (self, i: int) -> Entry:
		return self.notes[i]

	def __setitem__ (self, i: int, value: Entry) -> None:
		self.notes[i] = value

	def __repr__ (self) -> str:
		return f"{type(self).__name__}({self.labels()!r}, tonality={self.tonality.name})"

	def indexes (self) -> typing.List[typing.Optional[int]]:

		"""Absolute note indexes, with ``None`` for rests and holds."""

		return [entry.index if isinstance(entry, scalesampler.notes.Note) else None for entry in self.notes]

	def labels (self) -> typing.List[str]:

		"""Display labels using each note's key-aware spelling."""

		labels = []

		for entry in self.notes:
			if isinstance(entry, scalesampler.notes.Note):
				labels.append(entry.label)
			elif isinstance(entry, scalesampler.notes.Rest):
				labels.append("r")
			else:
				labels.append("-")

		return labels

	def copy (self) -> "TonalSample":
		return TonalSample(self.notes, self.tonic, self.tonality)

	def pop (self) -> Entry:
		return self.notes.pop()

	def pad (self, min_size: int) -> None:

		"""Repeat entries from the start until the sample has at least ``min_size`` entries."""

		if not self.notes:
			return

		while len(self.notes) < min_size:
			self.notes.extend(self.notes[:min_size - len(self.notes)])


class Sample (TonalSample):

	"""
	A playback-ready sample with its rhythmic context.
	"""

	def __init__ (
		self,
		notes: typing.Iterable[Entry],
		tonic: scalesampler.notes.Note,
		tonality: scalesampler.tonality.Tonality,
		beat: BeatUnit = BeatUnit.QUARTER,
		bpm: float = 60,
		counter: int = 0,
		prev: typing.Optional["Sample"] = None,
	) -> None:

		super().__init__(notes, tonic, tonality)

		if bpm <= 0:
			raise scalesampler.errors.InvalidArgument("BPM must be positive")

		self.beat = BeatUnit(beat)
		self.bpm = bpm
		self.counter = counter
		self.prev = prev
		self.time_sig = guess_time_signature(len(self.notes), self.beat.note_value)

	@classmethod
	def from_scale (
		cls,
		scale: TonalSample,
		beat: BeatUnit = BeatUnit.QUARTER,
		bpm: float = 60,
		counter: int = 0,
		prev: typing.Optional["Sample"] = None,
		min_size: int = 0,
	) -> "Sample":

		"""Build a sample from a generated scale, giving every pitched entry fresh performance state."""

		entries: typing.List[Entry] = []

		for entry in scale:
			if isinstance(entry, scalesampler.notes.TonalNote):
				entries.append(scalesampler.notes.SampleNote.from_note(entry))
			elif isinstance(entry, scalesampler.notes.Note):
				entries.append(scalesampler.notes.SampleNote(entry.index, scale.tonic, scale.tonality))
			else:
				entries.append(entry)

		sample = cls(entries, scale.tonic, scale.tonality, beat=beat, bpm=bpm, counter=counter, prev=prev)

		if min_size > len(sample):
			sample.pad(min_size)
			sample.time_sig = guess_time_signature(len(sample), sample.beat.note_value)

		return sample

	@property
	def note_duration (self) -> float:

		"""Seconds per undotted note."""

		return self.beat.seconds(self.bpm)

	@property
	def duration (self) -> float:

		"""Seconds for the whole sample (dotted pairs keep their combined length)."""

		return self.note_duration * len(self.notes)

	@property
	def notes_per_measure (self) -> int:
		return max(1, int(round(self.time_sig.upper * self.beat.note_value / self.time_sig.lower)))

	def copy (self) -> "Sample":

		"""Copy the entries list; entries themselves are shared."""

		return Sample(self.notes, self.tonic, self.tonality, beat=self.beat, bpm=self.bpm, counter=self.counter, prev=self.prev)
