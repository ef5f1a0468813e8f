"""Scale and arpeggio generation.

``generate()`` walks a tonic by the half steps of its tonality's interval
table, one octave at a time, producing a `TonalSample` whose first entry is
always the tonic. Generation is deterministic: the same arguments always
give the same indexes.
"""

import logging
import typing

import scalesampler.errors
import scalesampler.notes
import scalesampler.sample
import scalesampler.tonality


logger = logging.getLogger(__name__)


def _validate_int (name: str, value: typing.Any, low: int, high: int) -> int:

	if isinstance(value, bool) or not isinstance(value, int):
		raise scalesampler.errors.InvalidArgument(f"{name} must be an integer, got {value!r}")

	if not low <= value <= high:
		raise scalesampler.errors.InvalidArgument(f"{name} must be {low}-{high}, got {value}")

	return value


def available_octaves (tonic: scalesampler.notes.Note, direction: scalesampler.tonality.Direction) -> int:

	"""
	Return how many whole octaves fit in the frequency table from the tonic
	in the first direction of travel.
	"""

	if direction.starts_ascending:
		return (scalesampler.notes.NOTE_COUNT - 1 - tonic.index) // 12

	return tonic.index // 12


def _walk (
	start: scalesampler.notes.Note,
	tonic: scalesampler.notes.Note,
	tonality: scalesampler.tonality.Tonality,
	steps: typing.Sequence[int],
	octaves: int,
	ascending: bool,
) -> typing.List[scalesampler.notes.TonalNote]:

	"""Walk from ``start`` by ``steps`` for ``octaves`` octaves, including the start note."""

	sign = 1 if ascending else -1
	index = start.index
	notes = [scalesampler.notes.TonalNote(index, tonic, tonality)]

	for _ in range(octaves):
		for step in steps:
			index += sign * step
			notes.append(scalesampler.notes.TonalNote(index, tonic, tonality))

	return notes


def generate (
	tonic_degree: int,
	tonality: typing.Any = scalesampler.tonality.Tonality.MAJOR,
	octave: int = 4,
	direction: typing.Any = scalesampler.tonality.Direction.ASCEND,
	octaves: int = 1,
	arpeggio: bool = False,
	clip: bool = False,
) -> scalesampler.sample.TonalSample:

	"""Generate a scale or arpeggio sample.

	Parameters:
		tonic_degree: Tonic degree, 0 (C) to 11 (B).
		tonality: A `Tonality`, its code, or its name.
		octave: Octave of the tonic (0 to ``OCTAVE_COUNT - 1``).
		direction: A `Direction`, its code, or its name.
		octaves: Number of octaves to span (at least 1).
		arpeggio: Walk the arpeggio table instead of the scale table.
		clip: Clamp ``octaves`` to the room available in the frequency table
		      instead of raising.

	Returns:
		A `TonalSample` starting on the tonic.

	Raises:
		InvalidArgument: For an unknown tonality or direction, a degree or
		    octave out of range, or a span that does not fit (without ``clip``).

	Example:
		```python
		scale = generate(0, Tonality.MAJOR, octave=4)
		scale.labels()  # → ['C4', 'D4', 'E4', 'F4', 'G4', 'A4', 'B4', 'C5']
		```
	"""

	tonality = scalesampler.tonality.parse_tonality(tonality)
	direction = scalesampler.tonality.parse_direction(direction)
	tonic_degree = _validate_int("Tonic degree", tonic_degree, 0, 11)
	octave = _validate_int("Octave", octave, 0, scalesampler.notes.OCTAVE_COUNT - 1)
	octaves = _validate_int("Octave span", octaves, 1, scalesampler.notes.OCTAVE_COUNT)

	tonic = scalesampler.notes.Note.from_degree(tonic_degree, octave)
	available = available_octaves(tonic, direction)

	if octaves > available:
		if not clip:
			raise scalesampler.errors.InvalidArgument(
				f"Octave span {octaves} from {tonic.label} exceeds the {available} available"
			)
		logger.debug(f"Clipping octave span {octaves} to {available} from {tonic.label}")
		octaves = available

	table = scalesampler.tonality.get_table(tonality, arpeggio)
	ascending = direction.starts_ascending

	notes = _walk(tonic, tonic, tonality, table.for_direction(ascending), octaves, ascending)

	if direction.is_multi:
		# Return leg starts on the turnaround note, which is already present.
		back = _walk(notes[-1], tonic, tonality, table.for_direction(not ascending), octaves, not ascending)
		notes.extend(back[1:])

	return scalesampler.sample.TonalSample(notes, tonic, tonality)
