"""Sampler configuration.

Every sampler setting is described by a `Param` (its kind, default, range
or choices, and whether changing it regenerates the scale). `SamplerConfig`
is the validated, immutable set of values the sampler runs from; changes go
through ``replace()`` so a bad value never reaches a running sampler.

Configuration files are YAML with up to three sections:

```yaml
sampler:
  degree: 7
  tonality: HARMONIC_MINOR
  beat: 1/8
  bpm: 90
  loop: true
  shuffler: TONAK
midi:
  device_name: "IAC Driver Bus 1"
osc:
  host: 127.0.0.1
  port: 57120
```
"""

import dataclasses
import enum
import logging
import os
import typing

import yaml

import scalesampler.dotters
import scalesampler.errors
import scalesampler.sample
import scalesampler.shufflers
import scalesampler.tonality
import scalesampler.velociters


logger = logging.getLogger(__name__)


class ParamKind (enum.Enum):

	INTEGER = "integer"
	NUMBER = "number"
	BOOLEAN = "boolean"
	ENUM = "enum"


@dataclasses.dataclass(frozen=True)
class Param:

	"""
	Metadata for one setting.

	``structural`` settings define the scale itself; changing one while
	playing regenerates the scale.
	"""

	name: str
	kind: ParamKind
	default: typing.Any
	min: typing.Optional[float] = None
	max: typing.Optional[float] = None
	choices: typing.Optional[typing.Tuple[typing.Any, ...]] = None
	structural: bool = False
	parser: typing.Optional[typing.Callable[[typing.Any], typing.Any]] = None

	def coerce (self, value: typing.Any) -> typing.Any:

		"""
		Return ``value`` in canonical form.

		Raises:
			InvalidArgument: If the value has the wrong type or is out of range.
		"""

		if self.kind is ParamKind.BOOLEAN:
			if not isinstance(value, bool):
				raise scalesampler.errors.InvalidArgument(f"{self.name} must be true or false, got {value!r}")
			return value

		if self.kind is ParamKind.ENUM:
			assert self.parser is not None
			return self.parser(value)

		if isinstance(value, bool) or not isinstance(value, (int, float)):
			raise scalesampler.errors.InvalidArgument(f"{self.name} must be a number, got {value!r}")

		if self.kind is ParamKind.INTEGER:
			if isinstance(value, float) and not value.is_integer():
				raise scalesampler.errors.InvalidArgument(f"{self.name} must be an integer, got {value!r}")
			value = int(value)

		if (self.min is not None and value < self.min) or (self.max is not None and value > self.max):
			raise scalesampler.errors.InvalidArgument(f"{self.name} must be {self.min}-{self.max}, got {value}")

		return value


def _parse_beat (value: typing.Any) -> scalesampler.sample.BeatUnit:

	"""Accept a `BeatUnit`, its unit count (15/30/60/120), its label (``"1/8"``) or its name."""

	if isinstance(value, scalesampler.sample.BeatUnit):
		return value

	if isinstance(value, int) and not isinstance(value, bool):
		try:
			return scalesampler.sample.BeatUnit(value)
		except ValueError:
			pass

	if isinstance(value, str):
		text = value.strip()
		for unit in scalesampler.sample.BeatUnit:
			if text == unit.label or text.upper() == unit.name:
				return unit

	raise scalesampler.errors.InvalidArgument(
		f"Unknown beat unit: {value!r} (expected one of {[unit.label for unit in scalesampler.sample.BeatUnit]})"
	)


def _stage_parser (registry: typing.Mapping[str, typing.Any], what: str) -> typing.Callable[[typing.Any], str]:

	def parse (value: typing.Any) -> str:

		key = str(value).strip().upper() if isinstance(value, str) else None

		if key not in registry:
			raise scalesampler.errors.InvalidArgument(f"Unknown {what}: {value!r} (expected one of {sorted(registry)})")

		return key

	return parse


MAX_OCTAVE = 7
MAX_SPAN = 7
MAX_REBUILD_EVERY = 48
MAX_MIN_SIZE = 48
MIN_BPM = 30
MAX_BPM = 300


PARAMS: typing.Dict[str, Param] = {param.name: param for param in (
	Param("degree", ParamKind.INTEGER, 0, min=0, max=11, structural=True),
	Param(
		"tonality", ParamKind.ENUM, scalesampler.tonality.Tonality.MAJOR,
		choices = tuple(scalesampler.tonality.Tonality),
		structural = True,
		parser = scalesampler.tonality.parse_tonality,
	),
	Param(
		"direction", ParamKind.ENUM, scalesampler.tonality.Direction.ASCEND,
		choices = tuple(scalesampler.tonality.Direction),
		structural = True,
		parser = scalesampler.tonality.parse_direction,
	),
	Param("octave", ParamKind.INTEGER, 4, min=1, max=MAX_OCTAVE, structural=True),
	Param("octaves", ParamKind.INTEGER, 1, min=1, max=MAX_SPAN, structural=True),
	Param("arpeggio", ParamKind.BOOLEAN, False, structural=True),
	Param(
		"beat", ParamKind.ENUM, scalesampler.sample.BeatUnit.EIGHTH,
		choices = tuple(scalesampler.sample.BeatUnit),
		parser = _parse_beat,
	),
	Param("bpm", ParamKind.NUMBER, 60, min=MIN_BPM, max=MAX_BPM),
	Param("loop", ParamKind.BOOLEAN, False),
	Param("shuffle", ParamKind.INTEGER, 1, min=0, max=MAX_REBUILD_EVERY),
	Param(
		"shuffler", ParamKind.ENUM, "NONE",
		choices = tuple(scalesampler.shufflers.SHUFFLERS),
		parser = _stage_parser(scalesampler.shufflers.SHUFFLERS, "shuffler"),
	),
	Param(
		"dotter", ParamKind.ENUM, "NONE",
		choices = tuple(scalesampler.dotters.DOTTERS),
		parser = _stage_parser(scalesampler.dotters.DOTTERS, "dotter"),
	),
	Param(
		"velociter", ParamKind.ENUM, "NONE",
		choices = tuple(scalesampler.velociters.VELOCITERS),
		parser = _stage_parser(scalesampler.velociters.VELOCITERS, "velociter"),
	),
	Param("rests", ParamKind.BOOLEAN, False),
	Param("min_size", ParamKind.INTEGER, 0, min=0, max=MAX_MIN_SIZE),
)}

STRUCTURAL: typing.FrozenSet[str] = frozenset(name for name, param in PARAMS.items() if param.structural)

# Alternative spellings accepted in configuration files.
ALIASES: typing.Dict[str, str] = {
	"tonic": "degree",
	"tonic_degree": "degree",
	"tonicDegree": "degree",
	"octave_span": "octaves",
	"octaveSpan": "octaves",
	"use_arpeggio": "arpeggio",
	"useArpeggio": "arpeggio",
	"beat_unit": "beat",
	"beatUnit": "beat",
	"rebuild_every": "shuffle",
	"rebuildEvery": "shuffle",
	"minSize": "min_size",
}


def canonical_name (name: str) -> str:

	"""Resolve an alias to its setting name, raising for unknown settings."""

	name = ALIASES.get(name, name)

	if name not in PARAMS:
		raise scalesampler.errors.InvalidArgument(f"Unknown setting: {name!r}")

	return name


@dataclasses.dataclass(frozen=True)
class SamplerConfig:

	"""
	A validated set of sampler settings.

	Values are coerced on construction, so ``SamplerConfig(tonality="dorian",
	beat="1/4")`` stores `Tonality.DORIAN` and `BeatUnit.QUARTER`.

	Example:
		```python
		config = SamplerConfig(degree=2, tonality="DORIAN", bpm=120)
		faster = config.replace(bpm=180)
		```
	"""

	degree: int = PARAMS["degree"].default
	tonality: scalesampler.tonality.Tonality = PARAMS["tonality"].default
	direction: scalesampler.tonality.Direction = PARAMS["direction"].default
	octave: int = PARAMS["octave"].default
	octaves: int = PARAMS["octaves"].default
	arpeggio: bool = PARAMS["arpeggio"].default
	beat: scalesampler.sample.BeatUnit = PARAMS["beat"].default
	bpm: float = PARAMS["bpm"].default
	loop: bool = PARAMS["loop"].default
	shuffle: int = PARAMS["shuffle"].default
	shuffler: str = PARAMS["shuffler"].default
	dotter: str = PARAMS["dotter"].default
	velociter: str = PARAMS["velociter"].default
	rests: bool = PARAMS["rests"].default
	min_size: int = PARAMS["min_size"].default

	def __post_init__ (self) -> None:

		for name, param in PARAMS.items():
			object.__setattr__(self, name, param.coerce(getattr(self, name)))

	@staticmethod
	def validate (name: str, value: typing.Any) -> typing.Any:

		"""
		Validate one setting and return its canonical value.

		Raises:
			InvalidArgument: For an unknown setting or a bad value.
		"""

		return PARAMS[canonical_name(name)].coerce(value)

	def replace (self, **changes: typing.Any) -> "SamplerConfig":

		"""Return a copy with some settings changed (aliases accepted)."""

		resolved = {canonical_name(name): value for name, value in changes.items()}

		return dataclasses.replace(self, **resolved)

	def changed (self, other: "SamplerConfig") -> typing.Set[str]:

		"""Names of the settings that differ from ``other``."""

		return {name for name in PARAMS if getattr(self, name) != getattr(other, name)}

	def as_dict (self) -> typing.Dict[str, typing.Any]:

		"""Plain values suitable for YAML: enum settings are written by name or label."""

		result: typing.Dict[str, typing.Any] = {}

		for name in PARAMS:
			value = getattr(self, name)
			if isinstance(value, scalesampler.sample.BeatUnit):
				value = value.label
			elif isinstance(value, enum.Enum):
				value = value.name
			result[name] = value

		return result

	@classmethod
	def from_mapping (cls, mapping: typing.Optional[typing.Mapping[str, typing.Any]]) -> "SamplerConfig":

		"""Build a config from a flat key/value mapping, validating every entry."""

		if not mapping:
			return cls()

		return cls().replace(**dict(mapping))


def load_config (config_path: str = "config.yaml") -> typing.Dict[str, typing.Any]:

	"""
	Load configuration from a YAML file.

	A missing file logs a warning and returns an empty configuration.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return {}

	with open(config_path, "r") as f:
		config = yaml.safe_load(f)

	if config is None:
		return {}

	if not isinstance(config, dict):
		raise scalesampler.errors.InvalidArgument(f"Config file {config_path} must contain a mapping")

	return config


def load_sampler_config (config_path: str = "config.yaml") -> SamplerConfig:

	"""Load the ``sampler:`` section of a YAML file as a `SamplerConfig`."""

	return SamplerConfig.from_mapping(load_config(config_path).get("sampler"))
