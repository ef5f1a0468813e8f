"""The transform pipeline.

Every freshly built `Sample` passes through three stages in order: a
shuffler reorders (and sometimes fills) it, a dotter pairs notes into
dotted rhythms, and a velociter sets accents. Stages are looked up by name
from their registries or passed in as callables.
"""

import dataclasses
import random
import typing

import scalesampler.dotters
import scalesampler.notes
import scalesampler.shufflers
import scalesampler.velociters


Stage = typing.Callable[[typing.Any, random.Random], None]


def unshare (sample: typing.Any) -> None:

	"""
	Give every position its own note object. Shufflers may repeat a note;
	dotting and velocity are per position.
	"""

	seen: typing.Set[int] = set()

	for i, entry in enumerate(sample):

		if not isinstance(entry, scalesampler.notes.SampleNote):
			continue

		if id(entry) in seen:
			sample[i] = scalesampler.notes.SampleNote.from_note(entry)
		else:
			seen.add(id(entry))


@dataclasses.dataclass
class Pipeline:

	"""
	The transform pipeline run on every freshly built sample: shuffle, then
	dot, then set velocities. Each stage mutates the sample it is handed and
	keeps no reference to it.

	Example:
		```python
		pipeline = Pipeline.from_names("TONAK", "DROF", "DAWN")
		pipeline(sample, rng)
		```
	"""

	shuffler: Stage = scalesampler.shufflers.none
	dotter: Stage = scalesampler.dotters.none
	velociter: Stage = scalesampler.velociters.none

	@classmethod
	def from_names (
		cls,
		shuffler: typing.Any = "NONE",
		dotter: typing.Any = "NONE",
		velociter: typing.Any = "NONE",
	) -> "Pipeline":

		"""Build a pipeline from stage names (or callables)."""

		return cls(
			shuffler = scalesampler.shufflers.get_shuffler(shuffler),
			dotter = scalesampler.dotters.get_dotter(dotter),
			velociter = scalesampler.velociters.get_velociter(velociter),
		)

	def __call__ (self, sample: typing.Any, rng: random.Random) -> typing.Any:

		self.shuffler(sample, rng)
		unshare(sample)
		self.dotter(sample, rng)
		self.velociter(sample, rng)

		return sample
