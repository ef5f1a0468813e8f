"""Tonalities, directions, and their half-step interval tables.

Each tonality carries two interval tables: one for stepping through the
scale and one for stepping through its arpeggio. A table lists the
half steps walked from the tonic to the octave above. Walking downward uses
the reversed list unless the table gives an explicit descending sequence
(melodic minor descends as natural minor).

Module-level constants:
- `TONALITY_DEFINITIONS`: Maps each `Tonality` to its scale/arpeggio tables
- `MAJOR_OFFSETS`: Distance from each tonality's tonic to the major key that
  shares its key signature (`None` when no key signature is defined)
- `MINOR_TONALITIES`: Tonalities labelled as minor keys
- `SHARP_LABELS` / `FLAT_LABELS`: Natural sharp and flat names per degree
- `DEGREE_LABELS`: Display labels for the 12 tonic degrees
"""

import dataclasses
import enum
import typing

import scalesampler.errors


class Tonality (enum.IntEnum):

	"""
	The 18 supported scale types.
	"""

	# Diatonic modes
	MAJOR = 0
	DORIAN = 1
	PHRYGIAN = 2
	LYDIAN = 3
	MIXOLYDIAN = 4
	NATURAL_MINOR = 5
	LOCRIAN = 6
	# Other minor
	HARMONIC_MINOR = 7
	MELODIC_MINOR = 8
	# Octatonic
	DIMINISHED = 9
	# Hexatonic
	WHOLE_TONE = 10
	AUGMENTED = 11
	PROMETHEUS = 12
	BLUES = 13
	TRITONE = 14
	# Pentatonic
	MAJOR_PENTATONIC = 15
	MINOR_PENTATONIC = 16
	JAPANESE = 17


class Direction (enum.IntEnum):

	"""
	The order in which a scale is walked.
	"""

	ASCEND = 0
	DESCEND = 1
	ASCEND_DESCEND = 2
	DESCEND_ASCEND = 3

	@property
	def is_multi (self) -> bool:

		"""True for the two composite (there-and-back) directions."""

		return self in (Direction.ASCEND_DESCEND, Direction.DESCEND_ASCEND)

	@property
	def starts_ascending (self) -> bool:
		return self in (Direction.ASCEND, Direction.ASCEND_DESCEND)


@dataclasses.dataclass(frozen=True)
class IntervalTable:

	"""
	Half-step sequences for walking up and down one octave.
	"""

	ascend: typing.Tuple[int, ...]
	descend: typing.Optional[typing.Tuple[int, ...]] = None

	def __post_init__ (self) -> None:

		if sum(self.ascend) != 12:
			raise scalesampler.errors.InvalidArgument(f"Ascending intervals must span an octave: {self.ascend}")

		if self.descend is None:
			object.__setattr__(self, "descend", tuple(reversed(self.ascend)))

		elif sum(self.descend) != 12:
			raise scalesampler.errors.InvalidArgument(f"Descending intervals must span an octave: {self.descend}")

	def for_direction (self, ascending: bool) -> typing.Tuple[int, ...]:

		"""Return the half steps for one octave in the given direction."""

		if ascending:
			return self.ascend

		return typing.cast(typing.Tuple[int, ...], self.descend)


@dataclasses.dataclass(frozen=True)
class TonalityDefinition:

	"""
	Scale and arpeggio tables for one tonality.
	"""

	scale: IntervalTable
	arpeggio: IntervalTable

	def table (self, arpeggio: bool = False) -> IntervalTable:
		return self.arpeggio if arpeggio else self.scale


def _table (*ascend: int, descend: typing.Optional[typing.Sequence[int]] = None) -> IntervalTable:
	return IntervalTable(tuple(ascend), tuple(descend) if descend is not None else None)


# Arpeggio tables marked "provisional" have not been checked against a
# theorist and are treated as configuration data.
TONALITY_DEFINITIONS: typing.Dict[Tonality, TonalityDefinition] = {
	Tonality.MAJOR: TonalityDefinition(
		scale = _table(2, 2, 1, 2, 2, 2, 1),
		arpeggio = _table(4, 3, 5),
	),
	Tonality.DORIAN: TonalityDefinition(
		scale = _table(2, 1, 2, 2, 2, 1, 2),
		arpeggio = _table(3, 4, 5),
	),
	Tonality.PHRYGIAN: TonalityDefinition(
		scale = _table(1, 2, 2, 2, 1, 2, 2),
		arpeggio = _table(3, 4, 5),
	),
	Tonality.LYDIAN: TonalityDefinition(
		scale = _table(2, 2, 2, 1, 2, 2, 1),
		arpeggio = _table(4, 3, 5),
	),
	Tonality.MIXOLYDIAN: TonalityDefinition(
		scale = _table(2, 2, 1, 2, 2, 1, 2),
		arpeggio = _table(4, 3, 5),
	),
	Tonality.NATURAL_MINOR: TonalityDefinition(
		scale = _table(2, 1, 2, 2, 1, 2, 2),
		arpeggio = _table(3, 4, 5),
	),
	Tonality.LOCRIAN: TonalityDefinition(
		scale = _table(1, 2, 2, 1, 2, 2, 2),
		arpeggio = _table(3, 3, 6),
	),
	Tonality.HARMONIC_MINOR: TonalityDefinition(
		scale = _table(2, 1, 2, 2, 1, 3, 1),
		arpeggio = _table(3, 4, 5),
	),
	Tonality.MELODIC_MINOR: TonalityDefinition(
		scale = _table(2, 1, 2, 2, 2, 2, 1, descend=(2, 2, 1, 2, 2, 1, 2)),
		# provisional
		arpeggio = _table(3, 4, 5),
	),
	Tonality.DIMINISHED: TonalityDefinition(
		scale = _table(2, 1, 2, 1, 2, 1, 2, 1),
		arpeggio = _table(3, 3, 3, 3),
	),
	Tonality.WHOLE_TONE: TonalityDefinition(
		scale = _table(2, 2, 2, 2, 2, 2),
		arpeggio = _table(4, 4, 4),
	),
	Tonality.AUGMENTED: TonalityDefinition(
		scale = _table(3, 1, 3, 1, 3, 1),
		arpeggio = _table(4, 4, 4),
	),
	Tonality.PROMETHEUS: TonalityDefinition(
		scale = _table(2, 2, 2, 3, 1, 2),
		# provisional
		arpeggio = _table(4, 6, 2),
	),
	Tonality.BLUES: TonalityDefinition(
		scale = _table(3, 2, 1, 1, 3, 2),
		# provisional
		arpeggio = _table(3, 4, 3, 2),
	),
	Tonality.TRITONE: TonalityDefinition(
		scale = _table(1, 3, 2, 1, 3, 2),
		# provisional
		arpeggio = _table(6, 6),
	),
	Tonality.MAJOR_PENTATONIC: TonalityDefinition(
		scale = _table(2, 2, 3, 2, 3),
		arpeggio = _table(4, 3, 5),
	),
	Tonality.MINOR_PENTATONIC: TonalityDefinition(
		scale = _table(3, 2, 2, 3, 2),
		arpeggio = _table(3, 4, 5),
	),
	Tonality.JAPANESE: TonalityDefinition(
		scale = _table(1, 4, 2, 3, 2),
		# provisional
		arpeggio = _table(5, 2, 5),
	),
}


# Half steps from the tonic to the tonic of the major key with the same
# signature. Symmetric and exotic scales have no defined key signature.
MAJOR_OFFSETS: typing.Dict[Tonality, typing.Optional[int]] = {
	Tonality.MAJOR: 0,
	Tonality.DORIAN: -2,
	Tonality.PHRYGIAN: -4,
	Tonality.LYDIAN: -5,
	Tonality.MIXOLYDIAN: -7,
	Tonality.NATURAL_MINOR: -9,
	Tonality.LOCRIAN: -11,
	Tonality.HARMONIC_MINOR: -9,
	Tonality.MELODIC_MINOR: -9,
	Tonality.DIMINISHED: None,
	Tonality.WHOLE_TONE: None,
	Tonality.AUGMENTED: None,
	Tonality.PROMETHEUS: None,
	Tonality.BLUES: -9,
	Tonality.TRITONE: None,
	Tonality.MAJOR_PENTATONIC: 0,
	Tonality.MINOR_PENTATONIC: -9,
	Tonality.JAPANESE: -4,
}


MINOR_TONALITIES: typing.FrozenSet[Tonality] = frozenset({
	Tonality.NATURAL_MINOR,
	Tonality.HARMONIC_MINOR,
	Tonality.MELODIC_MINOR,
	Tonality.BLUES,
	Tonality.MINOR_PENTATONIC,
})


SHARP = "♯"
FLAT = "♭"

SHARP_LABELS: typing.List[str] = ["C", "C♯", "D", "D♯", "E", "F", "F♯", "G", "G♯", "A", "A♯", "B"]
FLAT_LABELS: typing.List[str] = ["C", "D♭", "D", "E♭", "E", "F", "G♭", "G", "A♭", "A", "B♭", "B"]

# Tonic choices as offered to users.
DEGREE_LABELS: typing.List[str] = ["C", "D♭", "D", "E♭", "E", "F", "F♯", "G", "A♭", "A", "B♭", "B"]


def is_minor (tonality: Tonality) -> bool:

	"""Return True when the tonality's key signature is labelled as a minor key."""

	return tonality in MINOR_TONALITIES


def _parse_enum (enum_cls: typing.Type[typing.Any], value: typing.Any, kind: str) -> typing.Any:

	if isinstance(value, enum_cls):
		return value

	if isinstance(value, str):
		name = value.strip().upper().replace("-", "_").replace(" ", "_")
		if name in enum_cls.__members__:
			return enum_cls[name]
		if not name.isdigit():
			raise scalesampler.errors.InvalidArgument(
				f"Unknown {kind}: {value!r}. Available: {list(enum_cls.__members__)}"
			)

	if isinstance(value, bool):
		raise scalesampler.errors.InvalidArgument(f"Unknown {kind}: {value!r}")

	try:
		return enum_cls(int(value))
	except (TypeError, ValueError):
		raise scalesampler.errors.InvalidArgument(
			f"Unknown {kind}: {value!r}. Available: {list(enum_cls.__members__)}"
		) from None


def parse_tonality (value: typing.Any) -> Tonality:

	"""Accept a `Tonality`, its integer code, or its name (case-insensitive)."""

	return typing.cast(Tonality, _parse_enum(Tonality, value, "tonality"))


def parse_direction (value: typing.Any) -> Direction:

	"""Accept a `Direction`, its integer code, or its name (``"ascend-descend"`` works too)."""

	return typing.cast(Direction, _parse_enum(Direction, value, "direction"))


def get_table (tonality: Tonality, arpeggio: bool = False) -> IntervalTable:

	"""
	Return the interval table for a tonality.
	"""

	return TONALITY_DEFINITIONS[parse_tonality(tonality)].table(arpeggio)
