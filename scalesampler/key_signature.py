"""Key signature records for every (tonality, tonic degree) pair.

Each tonality is normalised to the major key that shares its signature
(``major_degree``). Whether that key is written with flats or sharps, and
how many accidentals it carries, follows the circle of fifths. Records are
computed once at import and shared read-only.
"""

import dataclasses
import typing

import scalesampler.errors
import scalesampler.tonality


# Major keys written with flats: D♭, E♭, F, A♭, B♭.
FLAT_MAJOR_DEGREES: typing.FrozenSet[int] = frozenset({1, 3, 5, 8, 10})

# Accidentals in the major key on each degree (C, D♭, D, E♭, E, F, F♯, G, A♭, A, B♭, B).
ACCIDENTAL_COUNTS: typing.Tuple[int, ...] = (0, 5, 2, 3, 4, 1, 6, 1, 4, 3, 2, 5)


@dataclasses.dataclass(frozen=True)
class KeySignature:

	"""
	Derived accidental and spelling metadata for one tonality and tonic.

	Attributes:
		tonality: The tonality this record describes.
		degree: Tonic degree (0-11).
		major_degree: Tonic degree of the major key sharing the signature.
		minor_degree: Tonic degree of that major key's relative minor.
		is_minor: Whether the signature is labelled as a minor key.
		is_flat: Whether the signature is written with flats.
		accidental_count: Number of sharps or flats in the signature.
		label: Display label, e.g. ``"F♯"`` or ``"Cm"``.
		defined: False for symmetric/exotic scales with no standard signature.
	"""

	tonality: scalesampler.tonality.Tonality
	degree: int
	major_degree: int
	minor_degree: int
	is_minor: bool
	is_flat: bool
	accidental_count: int
	label: str
	defined: bool = True

	@property
	def is_sharp (self) -> bool:
		return not self.is_flat and self.accidental_count > 0


def _compute (tonality: scalesampler.tonality.Tonality, degree: int) -> KeySignature:

	offset = scalesampler.tonality.MAJOR_OFFSETS[tonality]
	defined = offset is not None

	major_degree = (degree + (offset or 0)) % 12
	minor_degree = (major_degree - 3) % 12
	is_minor = scalesampler.tonality.is_minor(tonality)
	is_flat = major_degree in FLAT_MAJOR_DEGREES

	names = scalesampler.tonality.FLAT_LABELS if is_flat else scalesampler.tonality.SHARP_LABELS
	label = names[minor_degree] + "m" if is_minor else names[major_degree]

	return KeySignature(
		tonality = tonality,
		degree = degree,
		major_degree = major_degree,
		minor_degree = minor_degree,
		is_minor = is_minor,
		is_flat = is_flat,
		accidental_count = ACCIDENTAL_COUNTS[major_degree],
		label = label,
		defined = defined,
	)


_KEY_SIGNATURES: typing.Dict[typing.Tuple[scalesampler.tonality.Tonality, int], KeySignature] = {
	(tonality, degree): _compute(tonality, degree)
	for tonality in scalesampler.tonality.Tonality
	for degree in range(12)
}


def get_key_signature (tonality: typing.Any, degree: int) -> KeySignature:

	"""Return the cached key signature for a tonality and tonic degree.

	Parameters:
		tonality: A `Tonality`, its integer code, or its name.
		degree: Tonic degree, 0 (C) to 11 (B).

	Raises:
		InvalidArgument: If the tonality is unknown or the degree is out of range.

	Example:
		```python
		get_key_signature(Tonality.MAJOR, 7).accidental_count   # → 1 (G major)
		get_key_signature(Tonality.NATURAL_MINOR, 0).label      # → "Cm"
		```
	"""

	tonality = scalesampler.tonality.parse_tonality(tonality)

	if isinstance(degree, bool) or not isinstance(degree, int) or not 0 <= degree <= 11:
		raise scalesampler.errors.InvalidArgument(f"Tonic degree must be an integer 0-11, got {degree!r}")

	return _KEY_SIGNATURES[(tonality, degree)]
