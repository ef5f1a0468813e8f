import logging
import os

import mido
import pytest

import conftest
import scalesampler.renderer


def test_tone_timeline () -> None:

	tone = scalesampler.renderer.ToneTimeline()

	tone.schedule_value_at(440.0, 1.0)
	tone.schedule_value_at(0, 3.0)
	tone.schedule_value_at(220.0, 2.0)

	assert tone.value_at(0.5) == 0.0
	assert tone.value_at(1.0) == 440.0
	assert tone.value_at(2.5) == 220.0
	assert tone.value_at(10.0) == 0
	assert [t for t, _ in tone.events] == [1.0, 2.0, 3.0]


def test_tone_timeline_later_value_wins_at_the_same_time () -> None:

	tone = scalesampler.renderer.ToneTimeline()

	tone.schedule_value_at(440.0, 1.0)
	tone.schedule_value_at(0, 1.0)

	assert tone.value_at(1.0) == 0


def test_tone_timeline_cancel_from () -> None:

	tone = scalesampler.renderer.ToneTimeline()

	for t in range(5):
		tone.schedule_value_at(100.0 + t, float(t))

	tone.cancel_from(2.0)

	assert tone.events == [(0.0, 100.0), (1.0, 101.0)]


def test_is_instrument () -> None:

	assert scalesampler.renderer.is_instrument(conftest.RecordingInstrument())
	assert not scalesampler.renderer.is_instrument(object())
	assert not scalesampler.renderer.is_instrument(None)


@pytest.mark.parametrize("velocity, expected", [(1.0, 127), (0.0, 1), (0.5, 64), (2.0, 127)])
def test_to_midi_velocity (velocity: float, expected: int) -> None:

	assert scalesampler.renderer.to_midi_velocity(velocity) == expected


class TestMidiInstrument:

	def test_trigger_sends_note_on_and_off_when_due (self, host: conftest.FakeHost) -> None:

		port = conftest.FakeMidiOut()
		instrument = scalesampler.renderer.MidiInstrument(port, host, channel=2)

		instrument.trigger(440.0, 0.5, 1.0, 1.0)

		assert port.messages == []

		host.advance(1.0)

		assert len(port.messages) == 1
		assert port.messages[0].type == "note_on"
		assert port.messages[0].note == 69
		assert port.messages[0].velocity == 127
		assert port.messages[0].channel == 2
		assert instrument.active_notes == {69}

		host.advance(0.5)

		assert port.messages[1].type == "note_off"
		assert instrument.active_notes == set()

	def test_all_notes_off (self, host: conftest.FakeHost) -> None:

		port = conftest.FakeMidiOut()
		instrument = scalesampler.renderer.MidiInstrument(port, host)

		instrument.trigger(440.0, 2.0, 0.0, 0.8)
		instrument.trigger(880.0, 1.0, 5.0, 0.8)
		host.advance(0.5)

		instrument.all_notes_off()

		assert host.pending() == []
		assert [(m.type, m.note) for m in port.messages] == [("note_on", 69), ("note_off", 69)]

	def test_restruck_note_is_not_cut_by_previous_release (self, host: conftest.FakeHost) -> None:

		"""A note ending exactly when the same pitch starts again releases first."""

		port = conftest.FakeMidiOut()
		instrument = scalesampler.renderer.MidiInstrument(port, host)

		instrument.trigger(440.0, 1.0, 1.0, 1.0)
		instrument.trigger(440.0, 1.0, 0.0, 1.0)
		host.advance(1.5)

		assert [m.type for m in port.messages] == ["note_on", "note_off", "note_on"]
		assert instrument.active_notes == {69}

	def test_very_short_note_still_releases_after_it_starts (self, host: conftest.FakeHost) -> None:

		port = conftest.FakeMidiOut()
		instrument = scalesampler.renderer.MidiInstrument(port, host)

		instrument.trigger(440.0, 0.0005, 0.0, 1.0)
		host.advance(0.01)

		assert [m.type for m in port.messages] == ["note_on", "note_off"]
		assert instrument.active_notes == set()

	def test_out_of_range_frequency_is_skipped (self, host: conftest.FakeHost, caplog: pytest.LogCaptureFixture) -> None:

		instrument = scalesampler.renderer.MidiInstrument(conftest.FakeMidiOut(), host)

		with caplog.at_level(logging.WARNING):
			instrument.trigger(20000.0, 1.0, 0.0, 1.0)

		assert host.pending() == []
		assert "outside the MIDI note range" in caplog.text

	def test_send_failure_is_logged (self, host: conftest.FakeHost, caplog: pytest.LogCaptureFixture) -> None:

		class BrokenPort:
			def send (self, message: mido.Message) -> None:
				raise OSError("device unplugged")

		instrument = scalesampler.renderer.MidiInstrument(BrokenPort(), host)
		instrument.trigger(440.0, 0.5, 0.0, 1.0)

		with caplog.at_level(logging.ERROR):
			host.advance(1.0)

		assert "MIDI send failed" in caplog.text

	def test_bad_channel (self, host: conftest.FakeHost) -> None:

		with pytest.raises(ValueError):
			scalesampler.renderer.MidiInstrument(conftest.FakeMidiOut(), host, channel=16)

	def test_save_recording (self, host: conftest.FakeHost, tmp_path: "os.PathLike[str]") -> None:

		filename = os.path.join(str(tmp_path), "take.mid")
		instrument = scalesampler.renderer.MidiInstrument(
			conftest.FakeMidiOut(), host, record=True, record_filename=filename, record_bpm=120,
		)

		instrument.trigger(261.63, 0.5, 0.0, 1.0)
		instrument.trigger(293.66, 0.5, 0.5, 1.0)
		host.advance(2.0)

		assert instrument.save_recording() == filename

		mid = mido.MidiFile(filename)
		notes = [(m.type, m.note) for m in mid.tracks[0] if not m.is_meta]

		assert notes == [("note_on", 60), ("note_off", 60), ("note_on", 62), ("note_off", 62)]
		assert mid.length == pytest.approx(1.0, abs=0.01)

	def test_nothing_to_save (self, host: conftest.FakeHost) -> None:

		assert scalesampler.renderer.MidiInstrument(conftest.FakeMidiOut(), host).save_recording() is None


def test_osc_instrument_sends_triggers () -> None:

	client = conftest.FakeOscClient()
	instrument = scalesampler.renderer.OscInstrument(address="/note", client=client)

	instrument.trigger(440, 0.5, 12.0, 0.8)

	assert client.sent == [("/note", [440.0, 0.5, 12.0, 0.8])]


def test_osc_send_failure_is_logged (caplog: pytest.LogCaptureFixture) -> None:

	class BrokenClient:
		def send_message (self, address: str, value: object) -> None:
			raise OSError("network down")

	instrument = scalesampler.renderer.OscInstrument(client=BrokenClient())

	with caplog.at_level(logging.WARNING):
		instrument.trigger(440.0, 0.5, 0.0, 1.0)

	assert "OSC send error" in caplog.text


def test_open_midi_output (patch_midi: list) -> None:

	name, port = scalesampler.renderer.open_midi_output()

	assert name == "Dummy MIDI"
	assert port is patch_midi[0]


def test_open_named_midi_output (patch_midi: list) -> None:

	assert scalesampler.renderer.open_midi_output("Dummy MIDI")[0] == "Dummy MIDI"
	assert scalesampler.renderer.open_midi_output("Other") == (None, None)
