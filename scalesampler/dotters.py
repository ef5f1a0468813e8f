"""Dotting stages.

A dotter pairs two adjacent notes at a measure start into a dotted rhythm:
the first note takes one and a half beats (``dot``) and the second half a
beat (``dedot``), so the pair keeps its combined length. Pairs never cross
a measure boundary, and a note that is already part of a pair (or follows
one) is never dotted again.
"""

import logging
import random
import typing

import scalesampler.errors
import scalesampler.sequence_utils


logger = logging.getLogger(__name__)

# Widest leap (in half steps, exclusive) that DROF will dot across.
STEP_LIMIT = 8

DOT_ARTICULATION = 0.5
DEDOT_ARTICULATION = 0.2

DROF_MEASURE_START_CHANCE = 0.15
DROF_THIRD_NOTE_CHANCE = 0.10

Stage = typing.Callable[[typing.Any, random.Random], None]


def _is_paired (entry: typing.Any) -> bool:
	return bool(getattr(entry, "dot", False) or getattr(entry, "dedot", False))


def can_dot (sample: typing.Any, i: int) -> bool:

	"""
	Return True if entries ``i`` and ``i + 1`` may become a dotted pair.
	"""

	per_measure = sample.notes_per_measure

	if per_measure < 2 or i % per_measure >= per_measure - 1:
		return False

	if i < 0 or i + 1 >= len(sample):
		return False

	a, b = sample[i], sample[i + 1]

	if not scalesampler.sequence_utils.is_note(a, b):
		return False

	if _is_paired(a) or _is_paired(b):
		return False

	return i == 0 or not _is_paired(sample[i - 1])


def dot_at (sample: typing.Any, i: int) -> None:

	"""Mark entries ``i`` and ``i + 1`` as a dotted pair."""

	a, b = sample[i], sample[i + 1]

	a.dot = b.dedot = True
	b.dot = a.dedot = False
	a.articulation = DOT_ARTICULATION
	b.articulation = DEDOT_ARTICULATION


def try_dot (sample: typing.Any, i: int) -> bool:

	if can_dot(sample, i):
		dot_at(sample, i)
		return True

	return False


def measure_starts (sample: typing.Any) -> typing.Iterator[int]:

	"""Yield the index of the first entry of every measure."""

	return iter(range(0, len(sample), max(1, sample.notes_per_measure)))


def interval_at (sample: typing.Any, i: int) -> float:

	"""Half steps between entries ``i`` and ``i + 1``, or infinity if either is not a note."""

	a = scalesampler.sequence_utils.at(sample, i) if i >= 0 else None
	b = scalesampler.sequence_utils.at(sample, i + 1) if i + 1 < len(sample) else None

	if scalesampler.sequence_utils.is_note(a, b):
		return abs(a.index - b.index)

	return float("inf")


def _is_stepwise (sample: typing.Any, i: int) -> bool:

	"""True when the two intervals from ``i`` are moving and narrower than a minor sixth."""

	first = interval_at(sample, i)
	second = interval_at(sample, i + 1)

	return 0 < first < STEP_LIMIT and 0 < second < STEP_LIMIT


def none (sample: typing.Any, rng: random.Random) -> None:

	"""Leave every note undotted."""


def crim (sample: typing.Any, rng: random.Random) -> None:

	"""Dot the first two notes of every measure where possible."""

	for i in measure_starts(sample):
		try_dot(sample, i)


def drof (sample: typing.Any, rng: random.Random) -> None:

	"""
	Occasionally dot a measure: 15% of measures at their first note, a
	further 10% at their third, and only where the melody moves by step.
	"""

	for i in measure_starts(sample):

		p = rng.random()

		if p < DROF_MEASURE_START_CHANCE:
			if _is_stepwise(sample, i):
				try_dot(sample, i)

		elif p < DROF_MEASURE_START_CHANCE + DROF_THIRD_NOTE_CHANCE:
			if _is_stepwise(sample, i + 2):
				try_dot(sample, i + 2)


DOTTERS: typing.Dict[str, Stage] = {
	"NONE": none,
	"CRIM": crim,
	"DROF": drof,
}


def get_dotter (name: typing.Any) -> Stage:

	"""
	Return a named dotter stage. Callables pass through unchanged.
	"""

	if callable(name):
		return typing.cast(Stage, name)

	key = str(name).upper()

	if key not in DOTTERS:
		raise scalesampler.errors.InvalidArgument(f"Unknown dotter: {name}")

	return DOTTERS[key]
