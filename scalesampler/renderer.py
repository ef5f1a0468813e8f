"""Renderer collaborators: the tone parameter and the instruments.

The sampler drives two kinds of renderer:

- a **tone parameter** - a single scheduled value (the frequency of a
  continuous tone) set with ``schedule_value_at(value, time)`` and cleared
  from a point in time with ``cancel_from(time)``
- any number of **instruments** - anything with
  ``trigger(frequency, duration, at_time, velocity)``

`ToneTimeline` is an in-memory tone parameter. `MidiInstrument` plays
triggers on a MIDI output port (via ``mido``) and can record them to a
standard MIDI file. `OscInstrument` forwards triggers to a synth over OSC
(via ``python-osc``).
"""

import bisect
import datetime
import logging
import typing

import mido
import pythonosc.udp_client

import scalesampler.constants.velocity
import scalesampler.host
import scalesampler.notes


logger = logging.getLogger(__name__)

# Releases lead the nominal note end so a re-struck pitch is not cut off.
NOTE_OFF_MARGIN = 0.001


class ToneParameter (typing.Protocol):

	def schedule_value_at (self, value: float, time: float) -> None:
		...

	def cancel_from (self, time: float) -> None:
		...


class Instrument (typing.Protocol):

	def trigger (self, frequency: float, duration: float, at_time: float, velocity: float) -> None:
		...


def is_instrument (obj: typing.Any) -> bool:

	"""True if ``obj`` can be connected to a sampler as an instrument."""

	return callable(getattr(obj, "trigger", None))


class ToneTimeline:

	"""
	A scheduled-value timeline.

	Values are kept sorted by time. Scheduling a second value at an existing
	time keeps both, in the order they were scheduled, and the later one wins.

	Example:
		```python
		tone = ToneTimeline()
		tone.schedule_value_at(440.0, 1.0)
		tone.schedule_value_at(0, 2.0)
		tone.value_at(1.5)  # → 440.0
		```
	"""

	def __init__ (self, initial: float = 0.0) -> None:

		self.initial = initial
		self._times: typing.List[float] = []
		self._values: typing.List[float] = []

	@property
	def events (self) -> typing.List[typing.Tuple[float, float]]:

		"""``(time, value)`` pairs in time order."""

		return list(zip(self._times, self._values))

	def schedule_value_at (self, value: float, time: float) -> None:

		i = bisect.bisect_right(self._times, time)
		self._times.insert(i, time)
		self._values.insert(i, value)

	def cancel_from (self, time: float) -> None:

		"""Remove every value scheduled at or after ``time``."""

		i = bisect.bisect_left(self._times, time)
		del self._times[i:]
		del self._values[i:]

	def value_at (self, time: float) -> float:

		i = bisect.bisect_right(self._times, time)

		if i == 0:
			return self.initial

		return self._values[i - 1]


def to_midi_velocity (velocity: float) -> int:

	"""Scale a 0.0-1.0 velocity to 1-127 (a note_on with velocity 0 would be a note_off)."""

	scaled = int(round(velocity * scalesampler.constants.velocity.MIDI_MAX_VELOCITY))

	return max(1, min(scalesampler.constants.velocity.MIDI_MAX_VELOCITY, scaled))


class MidiInstrument:

	"""
	Plays triggers as MIDI notes on an output port.

	Note on/off messages are sent through the host's timers at the trigger's
	absolute time, so the port receives them as they become due. Send
	failures are logged and never stop the sampler.
	"""

	def __init__ (
		self,
		port: typing.Any,
		host: scalesampler.host.Host,
		channel: int = 0,
		record: bool = False,
		record_filename: typing.Optional[str] = None,
		record_bpm: float = 120,
	) -> None:

		"""
		Parameters:
			port: An open ``mido`` output port (or anything with ``send(msg)``).
			host: Clock and timers, shared with the sampler.
			channel: MIDI channel, 0-15.
			record: When True, keep every sent message for ``save_recording()``.
			record_filename: Output file name (defaults to a timestamp).
			record_bpm: Tempo written to the recording; seconds are converted to
			    ticks at this tempo.
		"""

		if not 0 <= channel <= 15:
			raise ValueError(f"MIDI channel must be 0-15, got {channel}")

		self.port = port
		self.host = host
		self.channel = channel

		self.recording = record
		self.record_filename = record_filename
		self.record_bpm = record_bpm
		self.recorded_events: typing.List[typing.Tuple[float, mido.Message]] = []

		self.active_notes: typing.Set[int] = set()
		self._pending: typing.List[typing.Any] = []

	def trigger (self, frequency: float, duration: float, at_time: float, velocity: float) -> None:

		note = scalesampler.notes.frequency_to_midi(frequency)

		if not 0 <= note <= 127:
			logger.warning(f"Frequency {frequency} Hz is outside the MIDI note range - skipped")
			return

		midi_velocity = to_midi_velocity(velocity)
		now = self.host.now()

		on = mido.Message("note_on", channel=self.channel, note=note, velocity=midi_velocity)
		off = mido.Message("note_off", channel=self.channel, note=note, velocity=0)

		self._schedule(on, at_time, now)
		self._schedule(off, max(at_time, at_time + duration - NOTE_OFF_MARGIN), now)

	def _schedule (self, message: mido.Message, at_time: float, now: float) -> None:

		handle: typing.Any = None

		def fire () -> None:
			if handle in self._pending:
				self._pending.remove(handle)
			self._send(message, at_time)

		handle = self.host.call_later(at_time - now, fire)
		self._pending.append(handle)

	def _send (self, message: mido.Message, at_time: float) -> None:

		"""
		Send a MIDI message to the output port.
		"""

		if message.type == "note_on":
			self.active_notes.add(message.note)
		else:
			self.active_notes.discard(message.note)

		if self.recording:
			self.recorded_events.append((at_time, message))

		try:
			self.port.send(message)
		except Exception:
			logger.exception("MIDI send failed (device may be disconnected)")

	def all_notes_off (self) -> None:

		"""
		Cancel pending messages and release every sounding note.
		"""

		for handle in self._pending:
			handle.cancel()

		self._pending.clear()

		now = self.host.now()

		for note in sorted(self.active_notes):
			self._send(mido.Message("note_off", channel=self.channel, note=note, velocity=0), now)

	def save_recording (self) -> typing.Optional[str]:

		"""
		Save the recorded messages to a MIDI file and return its name.
		"""

		if not self.recording or not self.recorded_events:
			return None

		if self.record_filename:
			filename = self.record_filename
		else:
			now = datetime.datetime.now()
			filename = now.strftime("sample_%Y%m%d_%H%M%S.mid")

		logger.info(f"Saving MIDI recording ({len(self.recorded_events)} events) to {filename}...")

		mid = mido.MidiFile(type=0)
		track = mido.MidiTrack()
		mid.tracks.append(track)

		track.append(mido.MetaMessage("set_tempo", tempo=mido.bpm2tempo(self.record_bpm), time=0))

		events = sorted(self.recorded_events, key=lambda x: x[0])
		start = events[0][0]
		last_tick = 0

		for at_time, message in events:

			tick = int(round(mido.second2tick(at_time - start, mid.ticks_per_beat, mido.bpm2tempo(self.record_bpm))))
			track.append(message.copy(time=max(0, tick - last_tick)))
			last_tick = max(last_tick, tick)

		try:
			mid.save(filename)
			logger.info(f"Saved {filename}")
		except Exception as e:
			logger.error(f"Failed to save MIDI recording: {e}")
			return None

		return filename


class OscInstrument:

	"""
	Forwards triggers to an OSC synth as ``/trigger freq duration at_time velocity``.

	Times are on the host clock; the receiving synth is expected to share
	that clock or to play on arrival. Send failures are logged.
	"""

	def __init__ (
		self,
		host: str = "127.0.0.1",
		port: int = 57120,
		address: str = "/trigger",
		client: typing.Optional[typing.Any] = None,
	) -> None:

		self.address = address
		self._client = client or pythonosc.udp_client.SimpleUDPClient(host, port)

		logger.info(f"OSC instrument sending {address} to {host}:{port}")

	def trigger (self, frequency: float, duration: float, at_time: float, velocity: float) -> None:
		self.send(self.address, float(frequency), float(duration), float(at_time), float(velocity))

	def send (self, address: str, *args: typing.Any) -> None:

		"""Send an OSC message."""

		try:
			self._client.send_message(address, list(args))
		except Exception as e:
			logger.warning(f"OSC send error: {e}")


def open_midi_output (device_name: typing.Optional[str] = None) -> typing.Tuple[typing.Optional[str], typing.Optional[typing.Any]]:

	"""
	Select and open a MIDI output port.

	If ``device_name`` is given, that port is opened. Otherwise the only
	available port is used, or the user is asked to choose when there are
	several. Failures are logged.

	Returns:
		``(device_name, port)``, or ``(None, None)`` when nothing could be opened.
	"""

	try:
		outputs = mido.get_output_names()
		logger.info(f"Available MIDI outputs: {outputs}")

		if not outputs:
			logger.error("No MIDI output devices found.")
			return None, None

		if device_name is not None:

			if device_name not in outputs:
				logger.error(f"MIDI output device '{device_name}' not found. Available devices: {outputs}")
				return None, None

			selected = device_name

		elif len(outputs) == 1:
			selected = outputs[0]
			logger.info(f"One MIDI output found - using '{selected}'")

		else:
			selected = _prompt_for_device(outputs)

		port = mido.open_output(selected)
		logger.info(f"Opened MIDI output: {selected}")

		return selected, port

	except Exception as e:
		logger.error(f"Failed to open MIDI output: {e}")
		return None, None


def _prompt_for_device (outputs: typing.Sequence[str]) -> str:

	print("\nAvailable MIDI output devices:\n")

	for i, name in enumerate(outputs, 1):
		print(f"  {i}. {name}")

	print()

	while True:
		try:
			choice = int(input(f"Select a device (1-{len(outputs)}): "))
			if 1 <= choice <= len(outputs):
				break
		except ValueError:
			pass
		print(f"Enter a number between 1 and {len(outputs)}.")

	selected = outputs[choice - 1]

	print("\nTip: To skip this prompt, set the device name in config.yaml:\n")
	print("  midi:")
	print(f"    device_name: \"{selected}\"\n")

	return selected
