"""Named shuffler stages.

Each stage reorders (and sometimes fills) a freshly built `Sample` in place
and has the pipeline stage signature ``stage(sample, rng)``. Stages are
no-ops for samples with fewer than three entries.

Pick a stage by name with ``get_shuffler()``:

```python
stage = get_shuffler("TONAK")
stage(sample, rng)
```
"""

import functools
import random
import typing

import scalesampler.errors
import scalesampler.notes
import scalesampler.sequence_utils
import scalesampler.shuffler


OCTAVE = 12
MAJOR_SIXTH = 9
MINOR_SEVENTH = 10
MAJOR_SEVENTH = 11

MIN_SIZE = scalesampler.shuffler.MIN_SIZE

Picker = typing.Callable[[typing.Sequence[typing.Any], int, random.Random], scalesampler.shuffler.Pick]
ChanceList = typing.List[typing.Tuple[float, Picker]]
Stage = typing.Callable[[typing.Any, random.Random], None]


def _pick_at (entries: typing.Sequence[typing.Any], i: int) -> scalesampler.shuffler.Pick:

	"""Pick the entry at ``i``; holds and out-of-range positions give no value."""

	entry = scalesampler.sequence_utils.at(entries, i) if i >= 0 else None

	if entry is None:
		return scalesampler.shuffler.NO_VALUE

	return scalesampler.shuffler.Pick.of(entry)


def first (entries: typing.Sequence[typing.Any], i: int, rng: random.Random) -> scalesampler.shuffler.Pick:
	return _pick_at(entries, 0)


def last (entries: typing.Sequence[typing.Any], i: int, rng: random.Random) -> scalesampler.shuffler.Pick:
	return _pick_at(entries, len(entries) - 1)


def previous (entries: typing.Sequence[typing.Any], i: int, rng: random.Random) -> scalesampler.shuffler.Pick:
	return _pick_at(entries, i - 1)


def rest (entries: typing.Sequence[typing.Any], i: int, rng: random.Random) -> scalesampler.shuffler.Pick:
	return scalesampler.shuffler.REST


def any_entry (entries: typing.Sequence[typing.Any], i: int, rng: random.Random) -> scalesampler.shuffler.Pick:
	return _pick_at(entries, rng.randrange(len(entries))) if entries else scalesampler.shuffler.NO_VALUE


def position (index: int) -> Picker:

	"""A picker for a fixed position."""

	return lambda entries, i, rng: _pick_at(entries, index)


def fraction (key: str) -> Picker:

	"""A picker for a ``/N``, ``//N`` or ``/cN`` position expression."""

	key = typing.cast(str, scalesampler.shuffler.parse_key(key))

	return lambda entries, i, rng: _pick_at(entries, scalesampler.shuffler.resolve_index(key, len(entries)))


def chance_fill (sample: typing.Any, i: int, chances: ChanceList, rng: random.Random) -> typing.Any:

	"""
	Try each ``(probability, picker)`` in order with a fresh draw, replacing
	position ``i`` with the first picker that fires. Returns the entry now at ``i``.
	"""

	for probability, picker in chances:

		if probability > rng.random():
			pick = picker(sample, i, rng)
			if pick.is_value:
				sample[i] = pick.entry()
			break

	return sample[i]


def chance_fills (sample: typing.Any, chances: ChanceList, chance: float, rng: random.Random) -> None:

	"""Run ``chance_fill`` at each position with probability ``chance``."""

	for i in range(len(sample)):

		if chance < 1 and chance < rng.random():
			continue

		chance_fill(sample, i, chances, rng)


def smooth (sample: typing.Any) -> None:

	"""
	Swap neighbours wherever three consecutive notes do not move in one
	direction, evening out zig-zags.
	"""

	for i in range(1, len(sample) - 1):

		prev, curr, nxt = sample[i - 1], sample[i], sample[i + 1]

		if not scalesampler.sequence_utils.is_note(prev, curr, nxt):
			continue

		if prev.index < curr.index < nxt.index or prev.index > curr.index > nxt.index or curr.index == nxt.index:
			continue

		sample[i + 1] = curr
		sample[i] = nxt


def shuffle_by_octave (sample: typing.Any, rng: random.Random) -> None:

	"""Shuffle runs of notes that stay within an octave of the run's first note."""

	value: typing.Optional[int] = None
	lo = 0

	for i in range(len(sample)):

		entry = sample[i]

		if not scalesampler.sequence_utils.is_note(entry):
			continue

		if value is None:
			value = entry.index
			lo = i
			continue

		if abs(entry.index - value) > OCTAVE or i == len(sample) - 1:
			scalesampler.sequence_utils.shuffle(sample, rng, start=lo, end=i - 1)
			value = entry.index
			lo = i


def avoid_octave_jumps (sample: typing.Any) -> None:

	"""When a note is followed by the same degree in another octave, swap the second one ahead."""

	for i in range(len(sample) - 2):

		a, b, c = sample[i], sample[i + 1], sample[i + 2]

		if not scalesampler.sequence_utils.is_note(a, b):
			continue

		if a.degree == b.degree and a.octave != b.octave and scalesampler.sequence_utils.is_note(c):
			sample[i + 1] = c
			sample[i + 2] = b


def replace_large_intervals (
	sample: typing.Any,
	rng: random.Random,
	limit: int = MAJOR_SEVENTH,
	picker: Picker = rest,
) -> None:

	"""Replace the second note of any leap wider than ``limit`` half steps."""

	for i in range(len(sample) - 1):

		a, b = sample[i], sample[i + 1]

		if scalesampler.sequence_utils.is_note(a, b) and abs(a.index - b.index) > limit:
			pick = picker(sample, i + 1, rng)
			if pick.is_value:
				sample[i + 1] = pick.entry()


def replace_consecutive_large_intervals (
	sample: typing.Any,
	rng: random.Random,
	limit: int = MINOR_SEVENTH,
	picker: Picker = rest,
) -> None:

	"""Replace a note that is both approached and left by a leap wider than ``limit``."""

	for i in range(1, len(sample) - 1):

		prev, curr, nxt = sample[i - 1], sample[i], sample[i + 1]

		if not scalesampler.sequence_utils.is_note(prev, curr, nxt):
			continue

		if abs(prev.index - curr.index) > limit and abs(curr.index - nxt.index) > limit:
			pick = picker(sample, i, rng)
			if pick.is_value:
				sample[i] = pick.entry()


def _fresh (entry: typing.Any) -> typing.Any:

	"""Copy a note into fresh performance state so the previous sample is left alone."""

	if isinstance(entry, scalesampler.notes.TonalNote):
		return scalesampler.notes.SampleNote.from_note(entry)

	return entry


def rephrase (sample: typing.Any, orig: typing.Sequence[typing.Any], rng: random.Random, head: int = 2, tail: typing.Optional[int] = None) -> None:

	"""
	Overwrite the sample with an earlier one, then shuffle its head and tail
	so the phrase is recognisable but varied.
	"""

	if tail is None:
		tail = head

	for i in range(min(len(sample), len(orig))):
		sample[i] = _fresh(orig[i])

	scalesampler.sequence_utils.shuffle(sample, rng, start=0, end=head)
	scalesampler.sequence_utils.shuffle(sample, rng, start=len(sample) - tail - 1)


def mid_shuffle (sample: typing.Any, rng: random.Random) -> None:

	"""Shuffle the middle half of the sample."""

	mid = len(sample) // 2
	quarter = mid // 2
	scalesampler.sequence_utils.shuffle(sample, rng, start=mid - quarter, end=mid + quarter)


def _sized (stage: Stage) -> Stage:

	"""Make a stage a no-op on samples too short to reorder."""

	@functools.wraps(stage)
	def wrapped (sample: typing.Any, rng: random.Random) -> None:
		if len(sample) >= MIN_SIZE:
			stage(sample, rng)

	return wrapped


SOFA_FILL: ChanceList = [(0.30, position(4)), (0.40, rest), (0.60, previous)]
SOFA_FILL_CHANCE = 0.40
SOFA_START: ChanceList = [(0.5, first)]

BIMOM_FILL: ChanceList = [(0.10, first), (0.20, fraction("/c2")), (1.00, rest)]
BIMOM_FILL_CHANCE = 0.15
BIMOM_START: ChanceList = [(0.25, first)]
BIMOM_END: ChanceList = [(0.10, position(1)), (0.25, last)]

TONAK_FILL: ChanceList = [(0.20, rest), (0.45, position(3)), (0.50, position(4))]
TONAK_FILL_CHANCE = 0.20
TONAK_START: ChanceList = [(0.55, first)]

JARD_FILL: ChanceList = [(0.15, any_entry), (0.30, fraction("//2")), (0.31, fraction("/c2")), (1.00, rest)]
JARD_FILL_CHANCE = 0.15
JARD_HOLD_MIN_LENGTH = 24

CHUNE_REPHRASE_MODULO = 3
CHUNE_REPHRASE_HEAD = 2
CHUNE_REPHRASE_TAIL = 3
CHUNE_REPHRASE_MIN_PREV = 8


def none (sample: typing.Any, rng: random.Random) -> None:

	"""Leave the sample in scale order."""


@_sized
def randy (sample: typing.Any, rng: random.Random) -> None:

	"""Shuffle every entry."""

	scalesampler.sequence_utils.shuffle(sample, rng)


@_sized
def sofa (sample: typing.Any, rng: random.Random) -> None:

	"""Shuffle and smooth, sprinkle repeats and rests, then repair sixth-plus leaps."""

	starter = chance_fill(sample, 0, SOFA_START, rng)
	scalesampler.sequence_utils.shuffle(sample, rng)
	smooth(sample)
	smooth(sample)
	chance_fills(sample, SOFA_FILL, SOFA_FILL_CHANCE, rng)
	sample[0] = starter
	smooth(sample)

	def repair (entries: typing.Sequence[typing.Any], i: int, rng: random.Random) -> scalesampler.shuffler.Pick:
		return previous(entries, i, rng) if rng.random() > 0.2 else scalesampler.shuffler.REST

	replace_large_intervals(sample, rng, MAJOR_SIXTH, repair)


@_sized
def bimom (sample: typing.Any, rng: random.Random) -> None:

	"""Shuffle the head, middle and tail separately with start and end overrides."""

	starter = chance_fill(sample, 0, BIMOM_START, rng)
	ender = chance_fill(sample, len(sample) - 1, BIMOM_END, rng)
	scalesampler.sequence_utils.shuffle(sample, rng, start=0, end=3)
	mid_shuffle(sample, rng)
	scalesampler.sequence_utils.shuffle(sample, rng, start=len(sample) - 4)
	chance_fills(sample, BIMOM_FILL, BIMOM_FILL_CHANCE, rng)
	sample[0] = starter
	sample[len(sample) - 1] = ender


@_sized
def tonak (sample: typing.Any, rng: random.Random) -> None:

	"""Shuffle within octave windows, smooth, and repair octave jumps and large leaps."""

	starter = chance_fill(sample, 0, TONAK_START, rng)
	shuffle_by_octave(sample, rng)
	chance_fills(sample, TONAK_FILL, TONAK_FILL_CHANCE, rng)
	smooth(sample)

	if rng.random() > 0.5:
		smooth(sample)

	avoid_octave_jumps(sample)
	smooth(sample)
	replace_consecutive_large_intervals(sample, rng)
	sample[0] = starter
	smooth(sample)
	replace_large_intervals(sample, rng)


@_sized
def jard (sample: typing.Any, rng: random.Random) -> None:

	"""
	Shuffle the second to fifth notes and part of the upper half. Long samples
	that end near a leading tone hold it over the last three steps.
	"""

	scalesampler.sequence_utils.shuffle(sample, rng, start=1, end=4)
	chance_fills(sample, JARD_FILL, JARD_FILL_CHANCE, rng)
	scalesampler.sequence_utils.shuffle(
		sample,
		rng,
		start = min(len(sample) // 2, 23),
		limit = max(3, len(sample) // 4),
	)

	if len(sample) < JARD_HOLD_MIN_LENGTH:
		return

	hold = None

	for i in range(1, 4):
		entry = sample[len(sample) - i]
		if isinstance(entry, scalesampler.notes.TonalNote) and entry.is_leading_tone:
			hold = entry
			break

	if hold is not None:
		for i in range(1, 4):
			sample[len(sample) - i] = hold


CHUNE_DELEGATES: typing.List[typing.Tuple[int, Stage]] = [
	(21, bimom),
	(8, jard),
	(5, tonak),
]


@_sized
def chune (sample: typing.Any, rng: random.Random) -> None:

	"""
	Rotate through the other stages by play counter, and every third
	counter rephrase the previous sample when it ends on a movement.
	"""

	counter = getattr(sample, "counter", 0)
	prev = getattr(sample, "prev", None)
	delegate: Stage = sofa
	is_rephrase = False

	if counter > 0:

		for modulus, stage in CHUNE_DELEGATES:
			if counter % modulus == 0:
				delegate = stage
				break

		is_rephrase = (
			counter % CHUNE_REPHRASE_MODULO == 0
			and prev is not None
			and len(prev) >= CHUNE_REPHRASE_MIN_PREV
			and not scalesampler.sequence_utils.notes_equal(
				scalesampler.sequence_utils.at(prev, -2),
				scalesampler.sequence_utils.at(prev, -1),
			)
		)

	if is_rephrase:
		rephrase(sample, prev, rng, CHUNE_REPHRASE_HEAD, CHUNE_REPHRASE_TAIL)
	else:
		delegate(sample, rng)


# Table-built stages: fill some positions with the tonic, a random entry or a
# hold, shuffle fully, then maybe force the tonic first.
TONIK = scalesampler.shuffler.Shuffler(
	fill = {"chance": 0.3, "chances": {0: 0.5, "random": 0.6, "null": 1.0}},
	start = {"chances": {0: 0.2}},
)

SOFO = scalesampler.shuffler.Shuffler(
	fill = {"chance": 0.4, "chances": {0: 0.0, "random": 0.7, "null": 1.0}},
	start = {"chances": {0: 0.5}},
)


SHUFFLERS: typing.Dict[str, Stage] = {
	"NONE": none,
	"RANDY": randy,
	"TONAK": tonak,
	"SOFA": sofa,
	"BIMOM": bimom,
	"JARD": jard,
	"CHUNE": chune,
	"TONIK": TONIK,
	"SOFO": SOFO,
}


def get_shuffler (name: typing.Any) -> Stage:

	"""
	Return a named shuffler stage. Callables pass through unchanged.
	"""

	if callable(name):
		return typing.cast(Stage, name)

	key = str(name).upper()

	if key not in SHUFFLERS:
		raise scalesampler.errors.InvalidArgument(f"Unknown shuffler: {name}")

	return SHUFFLERS[key]
