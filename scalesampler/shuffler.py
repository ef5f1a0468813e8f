"""Configurable probabilistic shuffler.

A `Shuffler` is built from three weighted-probability tables:

- **fill** - a value that may overwrite positions *before* reordering.
  ``fill["chance"]`` is the per-position probability of overwriting.
- **start** - a value forced into the first position *after* reordering.
- **end** - a value forced into the last position *after* reordering.

Each table maps keys to probabilities. Entries are tried in ascending
probability order against one uniform draw; the first entry whose
probability is at least the draw wins. When none qualifies there is no
substitution.

Keys:

- an integer (or integer string) - the entry at that position; negative
  values count from the end
- ``"/N"`` - position ``round(len / N)``
- ``"//N"`` - position ``floor(len / N)``
- ``"/cN"`` - position ``ceil(len / N)``
- ``"random"`` - a uniformly chosen existing entry
- ``"rest"`` - a `Rest` marker
- ``"null"`` - ``None`` (hold the previous note)

Example:
	```python
	tonak = Shuffler(
		fill = {"chance": 0.2, "chances": {"rest": 0.2, 3: 0.45, 4: 0.5}},
		start = {"chances": {0: 0.55}},
	)
	tonak(sample, rng)
	```
"""

import dataclasses
import enum
import math
import random
import re
import typing

import scalesampler.errors
import scalesampler.notes
import scalesampler.sequence_utils


MIN_SIZE = 3

_EXPR_PATTERN = re.compile(r"^/(/|c)?(\d+)$")
_LITERAL_KEYS = ("random", "rest", "null")


class PickKind (enum.Enum):

	"""What a table lookup decided."""

	NO_VALUE = "no_value"
	REST = "rest"
	HOLD = "hold"
	VALUE = "value"


@dataclasses.dataclass(frozen=True)
class Pick:

	"""
	The tagged result of a table lookup. ``NO_VALUE`` means "no substitution".
	"""

	kind: PickKind
	note: typing.Optional[scalesampler.notes.Note] = None

	@classmethod
	def of (cls, entry: typing.Any) -> "Pick":

		"""Wrap an existing sample entry."""

		if isinstance(entry, scalesampler.notes.Note):
			return cls(PickKind.VALUE, entry)

		if isinstance(entry, scalesampler.notes.Rest):
			return REST

		return HOLD

	@property
	def is_value (self) -> bool:
		return self.kind is not PickKind.NO_VALUE

	def entry (self) -> typing.Any:

		"""The object to place into a sample."""

		if self.kind is PickKind.VALUE:
			return self.note

		if self.kind is PickKind.REST:
			return scalesampler.notes.Rest()

		if self.kind is PickKind.HOLD:
			return None

		raise ValueError("NO_VALUE has no sample entry")


NO_VALUE = Pick(PickKind.NO_VALUE)
REST = Pick(PickKind.REST)
HOLD = Pick(PickKind.HOLD)


def parse_key (key: typing.Any) -> typing.Union[int, str]:

	"""Normalise a table key, raising `InvalidArgument` for malformed keys."""

	if isinstance(key, bool):
		raise scalesampler.errors.InvalidArgument(f"Invalid shuffler key: {key!r}")

	if isinstance(key, int):
		return key

	if key is None:
		return "null"

	if isinstance(key, str):
		text = key.strip()
		if text in _LITERAL_KEYS or _EXPR_PATTERN.match(text):
			return text
		try:
			return int(text)
		except ValueError:
			pass

	raise scalesampler.errors.InvalidArgument(f"Invalid shuffler key: {key!r}")


def _round_half_up (value: float) -> int:
	return math.floor(value + 0.5)


def resolve_index (key: typing.Union[int, str], length: int) -> int:

	"""Resolve an index key or ``/N`` expression to a position (may be out of range)."""

	if isinstance(key, int):
		return length + key if key < 0 else key

	match = _EXPR_PATTERN.match(key)

	if match is None:
		raise scalesampler.errors.InvalidArgument(f"Not an index expression: {key!r}")

	rounder, divisor_text = match.groups()
	divisor = int(divisor_text)

	if divisor == 0:
		raise scalesampler.errors.InvalidArgument(f"Division by zero in shuffler key: {key!r}")

	ratio = length / divisor

	if rounder == "/":
		return math.floor(ratio)

	if rounder == "c":
		return math.ceil(ratio)

	return _round_half_up(ratio)


@dataclasses.dataclass
class ChanceTable:

	"""
	One weighted table: sorted ``(key, probability)`` entries plus the fill chance.
	"""

	chances: typing.List[typing.Tuple[typing.Union[int, str], float]] = dataclasses.field(default_factory=list)
	chance: float = 0.0

	@classmethod
	def from_options (cls, options: typing.Optional[typing.Mapping[str, typing.Any]]) -> "ChanceTable":

		if not options:
			return cls()

		raw = options.get("chances") or {}
		chances = []

		for key, probability in raw.items():
			probability = float(probability)
			if not 0.0 <= probability <= 1.0:
				raise scalesampler.errors.InvalidArgument(f"Probability for {key!r} must be 0-1, got {probability}")
			chances.append((parse_key(key), probability))

		chances.sort(key=lambda item: item[1])

		return cls(chances=chances, chance=float(options.get("chance", 0.0)))

	def lookup (self, entries: typing.Sequence[typing.Any], rng: random.Random) -> Pick:

		"""Draw once and return the first qualifying entry's pick, or `NO_VALUE`."""

		if not self.chances:
			return NO_VALUE

		draw = rng.random()

		for key, probability in self.chances:

			if probability < draw:
				continue

			if key == "random":
				return Pick.of(scalesampler.sequence_utils.random_element(entries, rng))

			if key == "rest":
				return REST

			if key == "null":
				return HOLD

			index = resolve_index(key, len(entries))

			if not 0 <= index < len(entries):
				# Past the end: no substitution.
				return NO_VALUE

			return Pick.of(entries[index])

		return NO_VALUE


ShuffleFn = typing.Callable[..., typing.Any]


def _default_shuffle (sample: typing.Any, rng: random.Random) -> None:
	scalesampler.sequence_utils.shuffle(sample, rng)


class Shuffler:

	"""
	A shuffle stage configured with fill/start/end tables and a base shuffle.
	"""

	def __init__ (
		self,
		shuffle: typing.Optional[ShuffleFn] = None,
		fill: typing.Optional[typing.Mapping[str, typing.Any]] = None,
		start: typing.Optional[typing.Mapping[str, typing.Any]] = None,
		end: typing.Optional[typing.Mapping[str, typing.Any]] = None,
	) -> None:

		"""
		Parameters:
			shuffle: Base reorder function ``shuffle(sample, rng)``. Defaults to a
			    full Fisher-Yates shuffle.
			fill: ``{"chance": p, "chances": {key: probability}}``.
			start: ``{"chances": {key: probability}}``.
			end: ``{"chances": {key: probability}}``.
		"""

		self.shuffle = shuffle or _default_shuffle
		self.fill = ChanceTable.from_options(fill)
		self.start = ChanceTable.from_options(start)
		self.end = ChanceTable.from_options(end)

	def __call__ (self, sample: typing.Any, rng: random.Random) -> typing.Any:

		if len(sample) >= MIN_SIZE:
			self.run(sample, rng)

		return sample

	def run (self, sample: typing.Any, rng: random.Random) -> None:

		"""Apply fill, the base shuffle, then the start/end overrides."""

		entries = list(sample)

		filler = self.fill.lookup(entries, rng)
		starter = self.start.lookup(entries, rng)
		ender = self.end.lookup(entries, rng)

		if filler.is_value:
			for i in range(len(sample)):
				if self.fill.chance >= rng.random():
					sample[i] = filler.entry()

		self.shuffle(sample, rng)

		if starter.is_value:
			sample[0] = starter.entry()

		if ender.is_value:
			sample[len(sample) - 1] = ender.entry()
