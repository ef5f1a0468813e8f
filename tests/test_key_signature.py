import unittest

import scalesampler.errors
import scalesampler.key_signature
import scalesampler.tonality


Tonality = scalesampler.tonality.Tonality


class KeySignatureTests (unittest.TestCase):

	"""
	Tests for key signature records.
	"""

	def test_major_accidental_counts (self) -> None:

		"""
		C major has no accidentals, G major one sharp, F major one flat.
		"""

		c = scalesampler.key_signature.get_key_signature(Tonality.MAJOR, 0)
		g = scalesampler.key_signature.get_key_signature(Tonality.MAJOR, 7)
		f = scalesampler.key_signature.get_key_signature(Tonality.MAJOR, 5)

		self.assertEqual(c.accidental_count, 0)
		self.assertFalse(c.is_flat)
		self.assertFalse(c.is_sharp)

		self.assertEqual(g.accidental_count, 1)
		self.assertTrue(g.is_sharp)

		self.assertEqual(f.accidental_count, 1)
		self.assertTrue(f.is_flat)


	def test_relative_minor (self) -> None:

		"""
		A natural minor shares C major's signature and is labelled as a minor key.
		"""

		a_minor = scalesampler.key_signature.get_key_signature(Tonality.NATURAL_MINOR, 9)

		self.assertEqual(a_minor.major_degree, 0)
		self.assertEqual(a_minor.minor_degree, 9)
		self.assertTrue(a_minor.is_minor)
		self.assertEqual(a_minor.accidental_count, 0)
		self.assertEqual(a_minor.label, "Am")


	def test_c_minor_is_flat (self) -> None:

		c_minor = scalesampler.key_signature.get_key_signature(Tonality.NATURAL_MINOR, 0)

		self.assertEqual(c_minor.major_degree, 3)
		self.assertTrue(c_minor.is_flat)
		self.assertEqual(c_minor.accidental_count, 3)
		self.assertEqual(c_minor.label, "Cm")


	def test_modes_map_to_parent_major (self) -> None:

		"""
		D dorian and G mixolydian both use C major's signature.
		"""

		self.assertEqual(scalesampler.key_signature.get_key_signature(Tonality.DORIAN, 2).major_degree, 0)
		self.assertEqual(scalesampler.key_signature.get_key_signature(Tonality.MIXOLYDIAN, 7).major_degree, 0)
		self.assertEqual(scalesampler.key_signature.get_key_signature(Tonality.LYDIAN, 5).major_degree, 0)


	def test_symmetric_scales_have_no_signature (self) -> None:

		for tonality in (Tonality.DIMINISHED, Tonality.WHOLE_TONE, Tonality.AUGMENTED, Tonality.PROMETHEUS, Tonality.TRITONE):
			self.assertFalse(scalesampler.key_signature.get_key_signature(tonality, 0).defined)

		self.assertTrue(scalesampler.key_signature.get_key_signature(Tonality.BLUES, 0).defined)


	def test_records_are_cached (self) -> None:

		first = scalesampler.key_signature.get_key_signature(Tonality.MAJOR, 2)
		second = scalesampler.key_signature.get_key_signature("major", 2)

		self.assertIs(first, second)


	def test_invalid_input (self) -> None:

		with self.assertRaises(scalesampler.errors.InvalidArgument):
			scalesampler.key_signature.get_key_signature(Tonality.MAJOR, 12)

		with self.assertRaises(scalesampler.errors.InvalidArgument):
			scalesampler.key_signature.get_key_signature("no-such-mode", 0)

		with self.assertRaises(scalesampler.errors.InvalidArgument):
			scalesampler.key_signature.get_key_signature(99, 0)
