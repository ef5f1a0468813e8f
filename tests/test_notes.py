import unittest

import pytest

import scalesampler.errors
import scalesampler.notes
import scalesampler.scales
import scalesampler.tonality


Tonality = scalesampler.tonality.Tonality


class NoteTests (unittest.TestCase):

	"""
	Tests for the absolute-pitch note model.
	"""

	def test_middle_c (self) -> None:

		"""
		Index 48 should be C4 at 261.63 Hz, MIDI note 60.
		"""

		note = scalesampler.notes.Note(48)

		self.assertEqual(note.octave, 4)
		self.assertEqual(note.degree, 0)
		self.assertEqual(note.letter, "C")
		self.assertFalse(note.is_black)
		self.assertAlmostEqual(note.freq, 261.63)
		self.assertEqual(note.midi, 60)
		self.assertEqual(note.label, "C4")


	def test_black_key_spellings (self) -> None:

		"""
		Black keys spell naturally as sharps, and as flats through flat_label.
		"""

		note = scalesampler.notes.Note(49)

		self.assertTrue(note.is_black)
		self.assertEqual(note.label, "C♯4")
		self.assertEqual(note.flat_label, "D♭4")


	def test_a4_is_440 (self) -> None:

		self.assertEqual(scalesampler.notes.Note(57).freq, 440.0)
		self.assertEqual(scalesampler.notes.Note(57).midi, 69)


	def test_range (self) -> None:

		"""
		Indexes outside the frequency table are rejected.
		"""

		self.assertEqual(scalesampler.notes.Note(0).label, "C0")
		self.assertEqual(scalesampler.notes.Note(107).label, "B8")

		for bad in (-1, 108, 1.5, True, "3"):
			with self.assertRaises(scalesampler.errors.NoteRangeError):
				scalesampler.notes.Note(bad)


	def test_note_range_error_is_invalid_argument (self) -> None:

		self.assertTrue(issubclass(scalesampler.errors.NoteRangeError, scalesampler.errors.InvalidArgument))
		self.assertTrue(issubclass(scalesampler.errors.NoteRangeError, IndexError))


	def test_from_degree (self) -> None:

		self.assertEqual(scalesampler.notes.Note.from_degree(7, 3).index, 43)

		with self.assertRaises(scalesampler.errors.InvalidArgument):
			scalesampler.notes.Note.from_degree(12, 3)


def test_equality_is_by_index_only () -> None:

	"""Plain, tonal and sample notes with the same index are equal and hash alike."""

	tonic = scalesampler.notes.Note(48)
	plain = scalesampler.notes.Note(60)
	tonal = scalesampler.notes.TonalNote(60, tonic, Tonality.MAJOR)
	other_key = scalesampler.notes.TonalNote(60, scalesampler.notes.Note(49), Tonality.LOCRIAN)
	sampled = scalesampler.notes.SampleNote(60, tonic, Tonality.MAJOR, velocity=0.1, dot=True)

	assert plain == plain
	assert plain == tonal and tonal == plain
	assert tonal == other_key and other_key == sampled and tonal == sampled
	assert len({plain, tonal, other_key, sampled}) == 1
	assert plain != scalesampler.notes.Note(61)


def test_spelling_is_idempotent () -> None:

	note = scalesampler.notes.TonalNote(53, scalesampler.notes.Note(54), Tonality.MAJOR)

	assert note.spelling == note.spelling
	assert note.label == note.label


def test_f_sharp_major_writes_e_sharp () -> None:

	scale = scalesampler.scales.generate(6, Tonality.MAJOR, octave=4)

	assert scale.labels() == ["F♯4", "G♯4", "A♯4", "B4", "C♯5", "D♯5", "E♯5", "F♯5"]


def test_c_sharp_harmonic_minor_writes_b_sharp_an_octave_down () -> None:

	"""The leading tone of C♯ harmonic minor is C5, written B♯4."""

	scale = scalesampler.scales.generate(1, Tonality.HARMONIC_MINOR, octave=4)

	assert scale.indexes()[6] == 60
	assert scale[6].label == "B♯4"


def test_flat_key_uses_flats () -> None:

	scale = scalesampler.scales.generate(1, Tonality.MAJOR, octave=4)

	assert scale.labels() == ["D♭4", "E♭4", "F4", "G♭4", "A♭4", "B♭4", "C5", "D♭5"]


def test_tonal_note_intervals () -> None:

	tonic = scalesampler.notes.Note(48)

	assert scalesampler.notes.TonalNote(48, tonic, Tonality.MAJOR).is_tonic
	assert scalesampler.notes.TonalNote(67, tonic, Tonality.MAJOR).is_dominant
	assert scalesampler.notes.TonalNote(59, tonic, Tonality.MAJOR).is_leading_tone
	assert scalesampler.notes.TonalNote(59, tonic, Tonality.MAJOR).interval == 11


def test_sample_note_defaults () -> None:

	note = scalesampler.notes.SampleNote.from_note(
		scalesampler.notes.TonalNote(48, scalesampler.notes.Note(48), Tonality.MAJOR)
	)

	assert note.velocity == 0.8
	assert note.dot is False
	assert note.dedot is False
	assert note.articulation is None


def test_rest_marker () -> None:

	assert scalesampler.notes.Rest() == scalesampler.notes.Rest()
	assert scalesampler.notes.Rest() != None  # noqa: E711
	assert scalesampler.notes.Rest() != scalesampler.notes.Note(0)


def test_frequency_to_midi () -> None:

	assert scalesampler.notes.frequency_to_midi(440.0) == 69
	assert scalesampler.notes.frequency_to_midi(scalesampler.notes.Note(48).freq) == 60

	with pytest.raises(scalesampler.errors.InvalidArgument):
		scalesampler.notes.frequency_to_midi(0)
