"""The lookahead sampler.

A `Sampler` turns its configuration into a scale, rebuilds a transformed
`Sample` from that scale when a rebuild is due, and queues every note of
the sample on its instruments and tone parameter slightly ahead of real
time.

Scheduling works in passes. Each pass compares the host clock with
``next_time`` (the time of the first note not yet queued) and, while the
current sample would end after it, queues one full pass through the
sample. A looping sampler then arms the next pass a little before the
queued notes run out; a one-shot sampler silences the tone at the end and
arms its own stop.

Example:
	```python
	host = scalesampler.host.AsyncioHost()
	sampler = scalesampler.sampler.Sampler(host, degree=7, tonality="DORIAN", loop=True)
	sampler.connect(instrument)
	sampler.play()
	```
"""

import logging
import random
import typing

import scalesampler.config
import scalesampler.constants.durations
import scalesampler.constants.timing
import scalesampler.constants.velocity
import scalesampler.errors
import scalesampler.event_emitter
import scalesampler.host
import scalesampler.notes
import scalesampler.pipeline
import scalesampler.renderer
import scalesampler.sample
import scalesampler.scales


logger = logging.getLogger(__name__)

LOOKAHEAD = scalesampler.constants.timing.LOOKAHEAD
STOP_DELAY = scalesampler.constants.timing.STOP_DELAY

STAGE_SETTINGS = frozenset({"shuffler", "dotter", "velociter"})
TEMPO_SETTINGS = frozenset({"beat", "bpm"})


class Sampler:

	"""
	Plays generated scales through a lookahead scheduler.

	The sampler is either stopped or playing. ``play()`` builds the scale and
	runs the first scheduling pass immediately; ``stop()`` cancels every
	pending timer and silences the tone. Settings may change at any time
	through ``update()`` or the ``set_*`` methods.

	Events (see ``sampler.events``):

	- ``"play"`` - after ``play()`` has queued its first pass
	- ``"rebuild"`` - with the new `Sample`, whenever one is built
	- ``"schedule"`` - with the sample and the time of its first queued note
	- ``"stop"`` - after the sampler stops
	"""

	def __init__ (
		self,
		host: scalesampler.host.Host,
		tone: typing.Optional[scalesampler.renderer.ToneParameter] = None,
		config: typing.Optional[scalesampler.config.SamplerConfig] = None,
		rng: typing.Optional[random.Random] = None,
		seed: typing.Optional[int] = None,
		**settings: typing.Any,
	) -> None:

		"""
		Parameters:
			host: Clock and timers.
			tone: The tone parameter that follows the melody's frequency
			    (defaults to an in-memory `ToneTimeline`).
			config: Initial settings.
			rng: Random source for the transform pipeline.
			seed: Seed for a new random source when ``rng`` is not given.
			**settings: Individual settings applied on top of ``config``.

		Raises:
			InvalidArgument: If any setting is invalid.
		"""

		base = config or scalesampler.config.SamplerConfig()

		self.config = base.replace(**settings) if settings else base
		self.host = host
		self.tone: scalesampler.renderer.ToneParameter = tone if tone is not None else scalesampler.renderer.ToneTimeline()
		self.rng = rng or random.Random(seed)
		self.events = scalesampler.event_emitter.EventEmitter()
		self.pipeline = self._build_pipeline(self.config)

		self.instruments: typing.List[scalesampler.renderer.Instrument] = []

		self.playing = False
		self.scale: typing.Optional[scalesampler.sample.TonalSample] = None
		self.sample: typing.Optional[scalesampler.sample.Sample] = None
		self.counter = 0
		self.last_note: typing.Optional[scalesampler.notes.Note] = None
		self.next_time: typing.Optional[float] = None

		self._generation = 0
		self._schedule_handle: typing.Optional[scalesampler.host.TimerHandle] = None
		self._stop_handle: typing.Optional[scalesampler.host.TimerHandle] = None

	# ------------------------------------------------------------------
	# Instruments
	# ------------------------------------------------------------------

	def connect (self, instrument: scalesampler.renderer.Instrument) -> scalesampler.renderer.Instrument:

		"""
		Add an instrument to trigger.

		Raises:
			InvalidArgument: If ``instrument`` has no ``trigger`` method.
			UnsupportedOperation: If it is already connected.
		"""

		if not scalesampler.renderer.is_instrument(instrument):
			raise scalesampler.errors.InvalidArgument(f"Not an instrument: {instrument!r}")

		if instrument in self.instruments:
			raise scalesampler.errors.UnsupportedOperation("Already connected to that instrument")

		self.instruments.append(instrument)

		return instrument

	def disconnect (self, instrument: typing.Optional[scalesampler.renderer.Instrument] = None) -> None:

		"""
		Remove one instrument, or every instrument when none is given.

		Raises:
			UnsupportedOperation: If ``instrument`` is not connected.
		"""

		if instrument is None:
			self.instruments.clear()
			return

		if instrument not in self.instruments:
			raise scalesampler.errors.UnsupportedOperation("Not connected to that instrument")

		self.instruments.remove(instrument)

	# ------------------------------------------------------------------
	# Transport
	# ------------------------------------------------------------------

	def play (self) -> None:

		"""
		Start (or restart) playing from the current clock time.

		The scale is generated before anything else changes, so a generation
		error leaves the sampler exactly as it was.
		"""

		scale = self._build_scale(self.config)

		self.stop()

		self._generation += 1
		self.scale = scale
		self.counter = 0
		self.sample = self._sample_from_scale(prev=None)
		self.last_note = None
		self.playing = True
		self.next_time = self.host.now()

		logger.info(f"Playing {scale.tonic.label} {self.config.tonality.name} at {self.config.bpm} BPM ({self.config.beat.label})")

		self.schedule_pass()
		self.events.emit("play")

	start = play

	def stop (self) -> None:

		"""
		Stop playing and silence the tone. Does nothing when already stopped.
		"""

		if not self.playing:
			return

		self._halt()
		self._silence()

		logger.info("Stopped")

		self.events.emit("stop")

	def reshuffle (self) -> scalesampler.sample.Sample:

		"""
		Rebuild the sample through the transform pipeline now.

		While playing, the new sample takes over from the first note not yet
		queued.
		"""

		if self.scale is None:
			self.scale = self._build_scale(self.config)

		return self._rebuild()

	def on_schedule (self, sample: scalesampler.sample.Sample, time: float) -> None:

		"""
		Called once per scheduling pass that queued notes, with the time of
		the first queued note. Override in a subclass.
		"""

	# ------------------------------------------------------------------
	# Settings
	# ------------------------------------------------------------------

	def update (self, mapping: typing.Optional[typing.Mapping[str, typing.Any]] = None, **changes: typing.Any) -> None:

		"""
		Change one or more settings.

		Every value is validated (and a new scale generated, when needed)
		before anything is applied, so an invalid change leaves the sampler
		untouched.

		Raises:
			InvalidArgument: If a setting name or value is invalid.
		"""

		if mapping:
			changes = {**dict(mapping), **changes}

		config = self.config.replace(**changes)
		changed = config.changed(self.config)

		if not changed:
			return

		regenerate = bool(changed & scalesampler.config.STRUCTURAL) or ("loop" in changed and config.direction.is_multi)
		scale = self._build_scale(config) if regenerate and self.playing else None

		self.config = config

		if changed & STAGE_SETTINGS:
			self.pipeline = self._build_pipeline(config)

		if "bpm" in changed:
			logger.info(f"BPM set to {config.bpm}")

		if not self.playing:
			if regenerate:
				self.scale = None
			return

		self._cancel_stop()

		if scale is not None:
			self.scale = scale
			self.counter = 0

		if changed & TEMPO_SETTINGS and self.sample is not None:
			self.sample.beat = config.beat
			self.sample.bpm = config.bpm

		if "shuffler" in changed:
			self.counter = 0

		if "loop" in changed and config.loop:
			self.schedule_pass()

		elif not config.loop and self.next_time is not None:

			if "loop" in changed:
				# Let the queued pass finish, then go quiet.
				self._cancel_schedule()
				self.tone.schedule_value_at(0, self.next_time)

			self._arm_stop(self.host.now())

	def set_degree (self, degree: int) -> None:
		self.update(degree=degree)

	def set_tonality (self, tonality: typing.Any) -> None:
		self.update(tonality=tonality)

	def set_direction (self, direction: typing.Any) -> None:
		self.update(direction=direction)

	def set_octave (self, octave: int) -> None:
		self.update(octave=octave)

	def set_octaves (self, octaves: int) -> None:
		self.update(octaves=octaves)

	def set_arpeggio (self, arpeggio: bool) -> None:
		self.update(arpeggio=arpeggio)

	def set_beat (self, beat: typing.Any) -> None:
		self.update(beat=beat)

	def set_bpm (self, bpm: float) -> None:
		self.update(bpm=bpm)

	def set_loop (self, loop: bool) -> None:
		self.update(loop=loop)

	def set_shuffle (self, every: int) -> None:

		"""Rebuild the sample every ``every`` passes (0 rebuilds only on play)."""

		self.update(shuffle=every)

	def set_shuffler (self, name: str) -> None:
		self.update(shuffler=name)

	def set_dotter (self, name: str) -> None:
		self.update(dotter=name)

	def set_velociter (self, name: str) -> None:
		self.update(velociter=name)

	def set_rests (self, rests: bool) -> None:
		self.update(rests=rests)

	def set_min_size (self, min_size: int) -> None:
		self.update(min_size=min_size)

	# ------------------------------------------------------------------
	# Scheduling
	# ------------------------------------------------------------------

	@property
	def rebuild_due (self) -> bool:

		every = self.config.shuffle

		return self.counter == 0 or (every > 0 and self.counter % every == 0)

	def schedule_pass (self) -> None:

		"""
		Queue every note that falls due within the lookahead window, then arm
		the next pass (looping) or the stop (one-shot).

		Any exception stops the sampler and propagates to the caller, which
		for timer callbacks is the host's error channel.
		"""

		self._cancel_schedule()

		if not self.playing:
			return

		try:
			self._run_pass()
		except Exception:
			self._halt()
			self._silence()
			raise

	def _run_pass (self) -> None:

		now = self.host.now()
		first_time: typing.Optional[float] = None

		if self.next_time is None:
			self.next_time = now

		while now + self._require_sample().duration > self.next_time:

			if self.rebuild_due:
				self._rebuild()

			if first_time is None:
				first_time = self.next_time

			for entry in self._require_sample():
				self.next_time += self._play_entry(entry, self.next_time)

			self.counter += 1

			if not self.config.loop:
				break

		sample = self._require_sample()

		if first_time is not None:
			logger.debug(f"Queued pass {self.counter - 1} from {first_time:.3f}s to {self.next_time:.3f}s")
			self.on_schedule(sample, first_time)
			self.events.emit("schedule", sample, first_time)

		if self.config.loop:
			delay = max(sample.duration - LOOKAHEAD, LOOKAHEAD)
			self._schedule_handle = self.host.call_later(delay, self._guarded(self.schedule_pass))
			return

		self.tone.schedule_value_at(0, self.next_time)
		self._arm_stop(now)

	def _play_entry (self, entry: scalesampler.sample.Entry, time: float) -> float:

		"""Queue one sample entry at ``time`` and return its duration."""

		sample = self._require_sample()
		duration = sample.note_duration

		if isinstance(entry, scalesampler.notes.Note):

			if getattr(entry, "dot", False):
				duration *= scalesampler.constants.durations.DOT_RATIO
			elif getattr(entry, "dedot", False):
				duration *= scalesampler.constants.durations.DEDOT_RATIO

			velocity = getattr(entry, "velocity", scalesampler.constants.velocity.DEFAULT_VELOCITY)

			for instrument in list(self.instruments):
				instrument.trigger(entry.freq, duration, time, velocity)

			self.tone.schedule_value_at(entry.freq, time)
			self.last_note = entry

		elif isinstance(entry, scalesampler.notes.Rest) or self.config.rests:
			self.tone.schedule_value_at(0, time)

		# A hold leaves the tone on the last note's frequency.

		return duration

	def _rebuild (self) -> scalesampler.sample.Sample:

		"""Build a fresh sample from the scale and run it through the pipeline."""

		old = self.sample
		sample = self._sample_from_scale(prev=old)

		if old is not None:
			old.prev = None

		self.pipeline(sample, self.rng)
		self.sample = sample

		logger.debug(f"Rebuilt sample {sample.labels()} at pass {self.counter}")

		self.events.emit("rebuild", sample)

		return sample

	def _sample_from_scale (self, prev: typing.Optional[scalesampler.sample.Sample]) -> scalesampler.sample.Sample:

		if self.scale is None:
			raise scalesampler.errors.SchedulingInvariantViolation("No scale has been generated")

		return scalesampler.sample.Sample.from_scale(
			self.scale,
			beat = self.config.beat,
			bpm = self.config.bpm,
			counter = self.counter,
			prev = prev,
			min_size = self.config.min_size,
		)

	def _require_sample (self) -> scalesampler.sample.Sample:

		if self.sample is None:
			raise scalesampler.errors.SchedulingInvariantViolation("Scheduling pass ran without a sample")

		return self.sample

	@staticmethod
	def _build_scale (config: scalesampler.config.SamplerConfig) -> scalesampler.sample.TonalSample:

		scale = scalesampler.scales.generate(
			config.degree,
			tonality = config.tonality,
			octave = config.octave,
			direction = config.direction,
			octaves = config.octaves,
			arpeggio = config.arpeggio,
			clip = True,
		)

		if config.loop and config.direction.is_multi:
			# The loop returns to the first note, so the last one would repeat it.
			scale.pop()

		return scale

	@staticmethod
	def _build_pipeline (config: scalesampler.config.SamplerConfig) -> scalesampler.pipeline.Pipeline:
		return scalesampler.pipeline.Pipeline.from_names(config.shuffler, config.dotter, config.velociter)

	# ------------------------------------------------------------------
	# Timers
	# ------------------------------------------------------------------

	def _guarded (self, callback: typing.Callable[[], None]) -> typing.Callable[[], None]:

		"""Wrap a timer callback so it is ignored after a stop or a newer play."""

		generation = self._generation

		def fire () -> None:
			if generation == self._generation and self.playing:
				callback()

		return fire

	def _arm_stop (self, now: float) -> None:

		self._cancel_stop()

		assert self.next_time is not None
		delay = (self.next_time - now) + STOP_DELAY

		self._stop_handle = self.host.call_later(delay, self._guarded(self.stop))

	def _cancel_schedule (self) -> None:

		if self._schedule_handle is not None:
			self._schedule_handle.cancel()
			self._schedule_handle = None

	def _cancel_stop (self) -> None:

		if self._stop_handle is not None:
			self._stop_handle.cancel()
			self._stop_handle = None

	def _silence (self) -> None:

		"""Silence the tone from now on and release sounding instrument notes."""

		now = self.host.now()
		self.tone.cancel_from(now)
		self.tone.schedule_value_at(0, now)

		for instrument in self.instruments:
			release = getattr(instrument, "all_notes_off", None)
			if callable(release):
				release()

	def _halt (self) -> None:

		"""Cancel both timers and enter the stopped state."""

		self._cancel_schedule()
		self._cancel_stop()
		self._generation += 1
		self.playing = False
		self.next_time = None
