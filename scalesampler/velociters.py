"""Velocity stages.

A velociter writes the ``velocity`` of each pitched note in a sample.
Rests and holds are skipped but still count as positions in the measure.
"""

import enum
import random
import typing

import scalesampler.constants.velocity
import scalesampler.errors
import scalesampler.notes


Stage = typing.Callable[[typing.Any, random.Random], None]


class BeatPosition (enum.Enum):

	"""Where an entry falls within its measure."""

	DOWNBEAT = "downbeat"
	MIDBEAT = "midbeat"
	PICKUP = "pickup"
	OTHER = "other"


def classify (i: int, per_measure: int) -> BeatPosition:

	"""
	Classify position ``i`` in a measure of ``per_measure`` entries.

	The downbeat wins over the other positions, then the midbeat (only for
	measures of four or more entries), then the pickup (the last entry).
	"""

	offset = i % per_measure

	if offset == 0:
		return BeatPosition.DOWNBEAT

	if per_measure >= 4 and offset == per_measure // 2:
		return BeatPosition.MIDBEAT

	if offset == per_measure - 1:
		return BeatPosition.PICKUP

	return BeatPosition.OTHER


def none (sample: typing.Any, rng: random.Random) -> None:

	"""Keep the default velocity."""


def turnt (sample: typing.Any, rng: random.Random) -> None:

	"""Give every note a uniformly random velocity."""

	for entry in sample:
		if isinstance(entry, scalesampler.notes.SampleNote):
			entry.velocity = rng.random()


def dawn (sample: typing.Any, rng: random.Random) -> None:

	"""
	Accent by metric position: downbeats and midbeats at full velocity,
	pickups slightly softer, and the remaining notes alternating between
	two softer levels.
	"""

	time_sig = getattr(sample, "time_sig", None)

	if time_sig is None or time_sig.invalid:
		return

	per_measure = sample.notes_per_measure
	velocity = scalesampler.constants.velocity.DOWNBEAT_VELOCITY

	for i, entry in enumerate(sample):

		if not isinstance(entry, scalesampler.notes.SampleNote):
			continue

		position = classify(i, per_measure)

		if position is BeatPosition.DOWNBEAT:
			velocity = scalesampler.constants.velocity.DOWNBEAT_VELOCITY
		elif position is BeatPosition.MIDBEAT:
			velocity = scalesampler.constants.velocity.MIDBEAT_VELOCITY
		elif position is BeatPosition.PICKUP:
			velocity = scalesampler.constants.velocity.PICKUP_VELOCITY
		elif velocity == scalesampler.constants.velocity.OTHER_VELOCITY_HIGH:
			velocity = scalesampler.constants.velocity.OTHER_VELOCITY_LOW
		else:
			velocity = scalesampler.constants.velocity.OTHER_VELOCITY_HIGH

		entry.velocity = velocity


VELOCITERS: typing.Dict[str, Stage] = {
	"NONE": none,
	"TURNT": turnt,
	"DAWN": dawn,
}


def get_velociter (name: typing.Any) -> Stage:

	"""
	Return a named velociter stage. Callables pass through unchanged.
	"""

	if callable(name):
		return typing.cast(Stage, name)

	key = str(name).upper()

	if key not in VELOCITERS:
		raise scalesampler.errors.InvalidArgument(f"Unknown velociter: {name}")

	return VELOCITERS[key]
