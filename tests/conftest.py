import itertools
import typing

import mido
import pytest

import scalesampler.renderer


class FakeMidiOut:

	"""Minimal MIDI output stub that keeps every message it is sent."""

	def __init__ (self) -> None:

		self.messages: typing.List[mido.Message] = []

	def send (self, message: mido.Message) -> None:

		self.messages.append(message)

	def close (self) -> None:

		"""No-op close for the fake device."""

		return None


class FakeTimer:

	"""A timer on the fake host's manual clock."""

	def __init__ (self, when: float, order: int, callback: typing.Callable[[], typing.Any]) -> None:

		self.when = when
		self.order = order
		self.callback = callback
		self.cancelled = False
		self.fired = False

	def cancel (self) -> None:

		self.cancelled = True


class FakeHost:

	"""
	A host with a manual clock. Timers only fire inside ``advance()``, in
	time order, with the clock set to each timer's due time.
	"""

	def __init__ (self, start: float = 0.0) -> None:

		self.time = start
		self.timers: typing.List[FakeTimer] = []
		self._order = itertools.count()

	def now (self) -> float:

		return self.time

	def call_later (self, delay: float, callback: typing.Callable[[], typing.Any]) -> FakeTimer:

		timer = FakeTimer(self.time + max(0.0, delay), next(self._order), callback)
		self.timers.append(timer)
		return timer

	def pending (self) -> typing.List[FakeTimer]:

		"""Timers that are neither cancelled nor fired, soonest first."""

		live = [t for t in self.timers if not t.cancelled and not t.fired]
		return sorted(live, key=lambda t: (t.when, t.order))

	def advance (self, seconds: float) -> None:

		"""Move the clock forward, firing every timer that falls due."""

		target = self.time + seconds

		while True:
			due = [t for t in self.pending() if t.when <= target]
			if not due:
				break
			timer = due[0]
			self.time = timer.when
			timer.fired = True
			timer.callback()

		self.time = target


class RecordingInstrument:

	"""An instrument that records every trigger as (frequency, duration, at_time, velocity)."""

	def __init__ (self) -> None:

		self.triggers: typing.List[typing.Tuple[float, float, float, float]] = []

	def trigger (self, frequency: float, duration: float, at_time: float, velocity: float) -> None:

		self.triggers.append((frequency, duration, at_time, velocity))

	@property
	def times (self) -> typing.List[float]:

		return [t[2] for t in self.triggers]


class FakeOscClient:

	"""Stands in for ``pythonosc.udp_client.SimpleUDPClient``."""

	def __init__ (self) -> None:

		self.sent: typing.List[typing.Tuple[str, typing.Any]] = []

	def send_message (self, address: str, value: typing.Any) -> None:

		self.sent.append((address, value))


_fake_outputs: typing.List[FakeMidiOut] = []


def _fake_get_output_names () -> list[str]:

	"""Return a fixed list of MIDI output names for tests."""

	return ["Dummy MIDI"]


def _fake_open_output (name: str) -> FakeMidiOut:

	"""Return a fake MIDI output regardless of the name."""

	port = FakeMidiOut()
	_fake_outputs.append(port)
	return port


@pytest.fixture
def patch_midi (monkeypatch: pytest.MonkeyPatch) -> typing.List[FakeMidiOut]:

	"""Patch mido to use fake MIDI outputs. Returns the list of ports opened."""

	_fake_outputs.clear()
	monkeypatch.setattr(mido, "get_output_names", _fake_get_output_names)
	monkeypatch.setattr(mido, "open_output", _fake_open_output)

	return _fake_outputs


@pytest.fixture
def host () -> FakeHost:

	return FakeHost()


@pytest.fixture
def tone () -> scalesampler.renderer.ToneTimeline:

	return scalesampler.renderer.ToneTimeline()


@pytest.fixture
def instrument () -> RecordingInstrument:

	return RecordingInstrument()
