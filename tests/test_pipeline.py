import random
import typing

import pytest

import scalesampler.dotters
import scalesampler.errors
import scalesampler.pipeline
import scalesampler.sample
import scalesampler.scales
import scalesampler.shufflers
import scalesampler.velociters


def _sample () -> scalesampler.sample.Sample:
	return scalesampler.sample.Sample.from_scale(scalesampler.scales.generate(0, octave=4))


def test_default_pipeline_changes_nothing () -> None:

	sample = _sample()
	before = sample.indexes()

	scalesampler.pipeline.Pipeline()(sample, random.Random(0))

	assert sample.indexes() == before
	assert not any(n.dot for n in sample)


def test_stages_run_in_order () -> None:

	calls: typing.List[str] = []

	def stage (name: str) -> typing.Callable[[typing.Any, random.Random], None]:
		return lambda sample, rng: calls.append(name)

	pipeline = scalesampler.pipeline.Pipeline.from_names(stage("shuffle"), stage("dot"), stage("velocity"))
	result = pipeline(_sample(), random.Random(0))

	assert calls == ["shuffle", "dot", "velocity"]
	assert len(result) == 8


def test_from_names () -> None:

	pipeline = scalesampler.pipeline.Pipeline.from_names("tonak", "crim", "dawn")

	assert pipeline.shuffler is scalesampler.shufflers.tonak
	assert pipeline.dotter is scalesampler.dotters.crim
	assert pipeline.velociter is scalesampler.velociters.dawn


@pytest.mark.parametrize("names", [("WHAT", "NONE", "NONE"), ("NONE", "WHAT", "NONE"), ("NONE", "NONE", "WHAT")])
def test_unknown_stage_names_raise (names: typing.Tuple[str, str, str]) -> None:

	with pytest.raises(scalesampler.errors.InvalidArgument):
		scalesampler.pipeline.Pipeline.from_names(*names)


def test_repeated_notes_are_separated_before_dotting () -> None:

	"""A shuffler that repeats one note object still gets independent dots per position."""

	def repeat_first (sample: typing.Any, rng: random.Random) -> None:
		for i in range(len(sample)):
			sample[i] = sample[0]

	sample = _sample()
	scalesampler.pipeline.Pipeline.from_names(repeat_first, "CRIM")(sample, random.Random(0))

	assert len({id(n) for n in sample}) == len(sample)
	assert [n.dot for n in sample] == [True, False, False, False, True, False, False, False]
