import random

import pytest

import scalesampler.errors
import scalesampler.notes
import scalesampler.sample
import scalesampler.scales
import scalesampler.shufflers
import scalesampler.tonality


Tonality = scalesampler.tonality.Tonality


def _sample (degree: int = 0, octaves: int = 2, counter: int = 0, prev: object = None) -> scalesampler.sample.Sample:
	scale = scalesampler.scales.generate(degree, Tonality.MAJOR, octave=3, octaves=octaves)
	return scalesampler.sample.Sample.from_scale(scale, counter=counter, prev=prev)


def _notes (*indexes: int) -> list:
	return [scalesampler.notes.Note(i) for i in indexes]


@pytest.mark.parametrize("name", sorted(scalesampler.shufflers.SHUFFLERS))
def test_every_shuffler_keeps_the_length (name: str) -> None:

	stage = scalesampler.shufflers.get_shuffler(name)

	for seed in range(25):
		sample = _sample(counter=seed)
		stage(sample, random.Random(seed))

		assert len(sample) == 15
		for entry in sample:
			assert entry is None or isinstance(entry, (scalesampler.notes.Note, scalesampler.notes.Rest))


@pytest.mark.parametrize("name", sorted(scalesampler.shufflers.SHUFFLERS))
def test_every_shuffler_ignores_short_samples (name: str) -> None:

	scale = scalesampler.scales.generate(0, Tonality.MAJOR, octave=4, arpeggio=True)
	sample = scalesampler.sample.Sample(list(scale)[:2], scale.tonic, scale.tonality)

	scalesampler.shufflers.get_shuffler(name)(sample, random.Random(1))

	assert sample.indexes() == [48, 52]


def test_none_keeps_scale_order () -> None:

	sample = _sample()
	before = sample.indexes()

	scalesampler.shufflers.none(sample, random.Random(1))

	assert sample.indexes() == before


def test_randy_is_a_permutation () -> None:

	sample = _sample()
	before = sorted(sample.indexes())

	scalesampler.shufflers.randy(sample, random.Random(7))

	assert sorted(sample.indexes()) == before


def test_get_shuffler () -> None:

	assert scalesampler.shufflers.get_shuffler("tonak") is scalesampler.shufflers.tonak

	custom = lambda sample, rng: None
	assert scalesampler.shufflers.get_shuffler(custom) is custom

	with pytest.raises(scalesampler.errors.InvalidArgument):
		scalesampler.shufflers.get_shuffler("nope")


def test_smooth_untangles_a_zigzag () -> None:

	entries = _notes(60, 64, 62)
	scalesampler.shufflers.smooth(entries)

	assert [n.index for n in entries] == [60, 62, 64]


def test_smooth_skips_rests () -> None:

	entries = [scalesampler.notes.Note(60), scalesampler.notes.Rest(), scalesampler.notes.Note(62)]
	scalesampler.shufflers.smooth(entries)

	assert isinstance(entries[1], scalesampler.notes.Rest)


def test_avoid_octave_jumps () -> None:

	entries = _notes(48, 60, 50)
	scalesampler.shufflers.avoid_octave_jumps(entries)

	assert [n.index for n in entries] == [48, 50, 60]


def test_replace_large_intervals () -> None:

	entries = _notes(48, 62, 64)
	scalesampler.shufflers.replace_large_intervals(entries, random.Random(1))

	assert entries[0].index == 48
	assert isinstance(entries[1], scalesampler.notes.Rest)
	assert entries[2].index == 64


def test_replace_consecutive_large_intervals () -> None:

	entries = _notes(48, 60, 48, 50)
	scalesampler.shufflers.replace_consecutive_large_intervals(entries, random.Random(1))

	assert isinstance(entries[1], scalesampler.notes.Rest)
	assert entries[2].index == 48


def test_shuffle_by_octave_keeps_notes_near_their_window () -> None:

	"""Three octaves of C major shuffled by octave window keep the same notes."""

	sample = _sample(octaves=3)
	before = sorted(sample.indexes())

	scalesampler.shufflers.shuffle_by_octave(sample, random.Random(5))

	assert sorted(sample.indexes()) == before


def test_rephrase_copies_the_previous_phrase () -> None:

	"""Rephrase keeps the middle of the earlier phrase and shuffles only its ends."""

	orig = _sample()
	sample = _sample(degree=2)

	scalesampler.shufflers.rephrase(sample, orig, random.Random(9), head=2, tail=3)

	assert sorted(sample.indexes()) == sorted(orig.indexes())
	assert sample.indexes()[3:11] == orig.indexes()[3:11]

	for entry, original in zip(sample, orig):
		assert entry is not original


def test_chune_rephrases_on_every_third_pass () -> None:

	prev = _sample()
	sample = _sample(degree=7, counter=3, prev=prev)

	scalesampler.shufflers.chune(sample, random.Random(2))

	assert sorted(sample.indexes()) == sorted(prev.indexes())


def test_chune_without_history_delegates () -> None:

	"""Without a previous sample CHUNE shuffles the current one."""

	sample = _sample(degree=7, counter=3)
	scalesampler.shufflers.chune(sample, random.Random(2))

	assert all(index is None or index % 12 in {7, 9, 11, 0, 2, 4, 6} for index in sample.indexes())


def test_jard_holds_a_trailing_leading_tone () -> None:

	"""A long sample ending near its leading tone holds it over the last three steps."""

	scale = scalesampler.scales.generate(0, Tonality.MAJOR, octave=2, octaves=4)
	sample = scalesampler.sample.Sample.from_scale(scale)

	class NoShuffle (random.Random):
		def randint (self, a: int, b: int) -> int:
			return b
		def random (self) -> float:
			return 0.99

	sample[len(sample) - 1] = scalesampler.notes.SampleNote(71, scale.tonic, scale.tonality)

	scalesampler.shufflers.jard(sample, NoShuffle())

	assert sample.indexes()[-3:] == [71, 71, 71]
