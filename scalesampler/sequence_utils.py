import random
import typing

import scalesampler.notes

T = typing.TypeVar("T")


def shuffle (
	items: typing.MutableSequence[T],
	rng: random.Random,
	start: int = 0,
	end: typing.Optional[int] = None,
	limit: typing.Optional[int] = None,
) -> typing.MutableSequence[T]:

	"""Shuffle a sequence in place with Fisher-Yates, optionally bounded.

	Only positions ``start`` to ``end`` (inclusive) take part. ``limit``
	bounds the walk to ``limit + 1`` swaps (a limit of 0 still swaps the
	last position once), which leaves the lower part of the range partly
	in order.

	Parameters:
		items: The sequence to shuffle (a list or a sample).
		rng: Random number generator instance.
		start: First position to shuffle.
		end: Last position to shuffle (defaults to the last item).
		limit: Swaps allowed after the first one.

	Example:
		```python
		notes = list(range(8))
		shuffle(notes, rng, start=1, end=4)   # only positions 1-4 move
		```
	"""

	length = len(items)

	if end is None or end >= length:
		end = length - 1

	if limit is None:
		limit = length

	start = max(0, start)
	swaps = 0
	i = end

	while i > start and swaps <= limit:
		j = rng.randint(start, i)
		items[i], items[j] = items[j], items[i]
		i -= 1
		swaps += 1

	return items


def random_element (items: typing.Sequence[T], rng: random.Random) -> typing.Optional[T]:

	"""Return a uniformly chosen element, or None for an empty sequence."""

	if not items:
		return None

	return items[rng.randrange(len(items))]


def at (items: typing.Sequence[T], i: int) -> typing.Optional[T]:

	"""Index with negative wrap-around, returning None when out of range."""

	if i < 0:
		i += len(items)

	if not 0 <= i < len(items):
		return None

	return items[i]


def is_note (*entries: typing.Any) -> bool:

	"""True when every entry is a pitched note (not a rest, hold, or missing)."""

	return bool(entries) and all(isinstance(entry, scalesampler.notes.Note) for entry in entries)


def notes_equal (a: typing.Any, b: typing.Any) -> bool:

	"""Compare two entries: notes by index, rests and holds by kind."""

	if is_note(a, b):
		return bool(a == b)

	return type(a) is type(b)
