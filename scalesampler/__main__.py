import asyncio
import logging
import signal
import sys
import typing

import scalesampler.config
import scalesampler.errors
import scalesampler.host
import scalesampler.renderer
import scalesampler.sampler


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def build_instruments (
	config: typing.Dict[str, typing.Any],
	host: scalesampler.host.Host,
) -> typing.List[typing.Any]:

	"""
	Create the MIDI and OSC instruments named in the configuration.

	MIDI is used unless ``midi.enabled`` is false. OSC is used when an
	``osc:`` section is present.
	"""

	instruments: typing.List[typing.Any] = []

	midi_config = config.get('midi') or {}

	if midi_config.get('enabled', True):

		device_name, port = scalesampler.renderer.open_midi_output(midi_config.get('device_name'))

		if port is not None:
			instruments.append(scalesampler.renderer.MidiInstrument(
				port,
				host,
				channel = midi_config.get('channel', 0),
				record = midi_config.get('record', False),
				record_filename = midi_config.get('record_filename'),
				record_bpm = (config.get('sampler') or {}).get('bpm', 120),
			))

	osc_config = config.get('osc')

	if osc_config is not None:
		osc_config = osc_config or {}
		instruments.append(scalesampler.renderer.OscInstrument(
			host = osc_config.get('host', '127.0.0.1'),
			port = osc_config.get('port', 57120),
			address = osc_config.get('address', '/trigger'),
		))

	return instruments


async def run (config: typing.Dict[str, typing.Any]) -> None:

	"""
	Play the configured sampler until Ctrl+C, or until a one-shot sample ends.
	"""

	sampler_config = scalesampler.config.SamplerConfig.from_mapping(config.get('sampler'))

	host = scalesampler.host.AsyncioHost()
	sampler = scalesampler.sampler.Sampler(host, config=sampler_config, seed=config.get('seed'))

	instruments = build_instruments(config, host)

	if not instruments:
		logger.warning("No instruments configured - the sample will play silently.")

	for instrument in instruments:
		sampler.connect(instrument)

	stop_event = asyncio.Event()
	loop = asyncio.get_running_loop()

	def _request_stop () -> None:
		stop_event.set()

	def _handle_exception (loop: asyncio.AbstractEventLoop, context: typing.Dict[str, typing.Any]) -> None:

		exception = context.get('exception')

		if exception is not None:
			logger.error("Sampler failed", exc_info=exception)
		else:
			logger.error(context.get('message', 'Unknown event loop error'))

		stop_event.set()

	for sig in (signal.SIGINT, signal.SIGTERM):
		loop.add_signal_handler(sig, _request_stop)

	loop.set_exception_handler(_handle_exception)
	sampler.events.on('stop', _request_stop)

	logger.info("Playing sample. Press Ctrl+C to stop.")
	sampler.play()

	await stop_event.wait()

	sampler.stop()

	for instrument in instruments:
		if isinstance(instrument, scalesampler.renderer.MidiInstrument):
			instrument.save_recording()


def main (argv: typing.Optional[typing.List[str]] = None) -> None:

	"""
	Main entry point: ``python -m scalesampler [config.yaml]``.
	"""

	argv = sys.argv[1:] if argv is None else argv
	config_path = argv[0] if argv else 'config.yaml'

	logger.info("scalesampler starting...")

	try:
		config = scalesampler.config.load_config(config_path)
		asyncio.run(run(config))
	except scalesampler.errors.InvalidArgument as e:
		logger.error(f"Invalid configuration: {e}")
		sys.exit(2)
	except KeyboardInterrupt:
		logger.info("Stopping...")


if __name__ == "__main__":
	main()
