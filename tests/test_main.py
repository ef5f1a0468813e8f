import os

import pytest

import scalesampler.__main__
import scalesampler.host
import scalesampler.renderer


def test_build_instruments (patch_midi: list) -> None:

	host = scalesampler.host.AsyncioHost()
	config = {
		'sampler': {'bpm': 90},
		'midi': {'device_name': 'Dummy MIDI', 'channel': 3},
		'osc': {'port': 9000},
	}

	midi, osc = scalesampler.__main__.build_instruments(config, host)

	assert isinstance(midi, scalesampler.renderer.MidiInstrument)
	assert midi.port is patch_midi[0]
	assert midi.channel == 3
	assert midi.record_bpm == 90
	assert isinstance(osc, scalesampler.renderer.OscInstrument)


def test_build_instruments_without_midi (patch_midi: list) -> None:

	config = {'midi': {'enabled': False}}

	assert scalesampler.__main__.build_instruments(config, scalesampler.host.AsyncioHost()) == []
	assert patch_midi == []


def test_main_rejects_a_bad_config (tmp_path: "os.PathLike[str]") -> None:

	path = os.path.join(str(tmp_path), 'config.yaml')

	with open(path, 'w') as f:
		f.write("sampler:\n  bpm: 1000\n")

	with pytest.raises(SystemExit) as exc:
		scalesampler.__main__.main([path])

	assert exc.value.code == 2
