import pytest
import scalesampler.event_emitter


def test_on_and_emit () -> None:

	"""Registered callbacks are called on emit."""

	emitter = scalesampler.event_emitter.EventEmitter()
	received: list[int] = []

	emitter.on("rebuild", lambda v: received.append(v))
	emitter.emit("rebuild", 42)

	assert received == [42]


def test_emit_without_listeners_is_noop () -> None:

	emitter = scalesampler.event_emitter.EventEmitter()
	emitter.emit("stop")


def test_listeners_called_in_registration_order () -> None:

	emitter = scalesampler.event_emitter.EventEmitter()
	order: list[str] = []

	emitter.on("stop", lambda: order.append("a"))
	emitter.on("stop", lambda: order.append("b"))
	emitter.emit("stop")

	assert order == ["a", "b"]


def test_off_removes_callback () -> None:

	"""off() prevents a previously registered callback from being called."""

	emitter = scalesampler.event_emitter.EventEmitter()
	received: list[int] = []

	def cb (v: int) -> None:
		received.append(v)

	emitter.on("schedule", cb)
	emitter.off("schedule", cb)
	emitter.emit("schedule", 1)

	assert received == []


def test_off_raises_for_unregistered_callback () -> None:

	"""off() raises ValueError when the callback was never registered."""

	emitter = scalesampler.event_emitter.EventEmitter()

	with pytest.raises(ValueError, match="schedule"):
		emitter.off("schedule", lambda: None)


def test_once_fires_a_single_time () -> None:

	emitter = scalesampler.event_emitter.EventEmitter()
	received: list[int] = []

	emitter.once("rebuild", lambda v: received.append(v))
	emitter.emit("rebuild", 1)
	emitter.emit("rebuild", 2)

	assert received == [1]
	assert emitter.listeners("rebuild") == []


def test_async_callbacks_are_rejected () -> None:

	"""Listeners run inside timer callbacks, so coroutine functions cannot be awaited."""

	emitter = scalesampler.event_emitter.EventEmitter()

	async def cb () -> None:
		return None

	with pytest.raises(ValueError):
		emitter.on("stop", cb)


def test_listener_removed_during_emit_still_runs_this_time () -> None:

	emitter = scalesampler.event_emitter.EventEmitter()
	received: list[str] = []

	def first () -> None:
		received.append("first")
		if second in emitter.listeners("stop"):
			emitter.off("stop", second)

	def second () -> None:
		received.append("second")

	emitter.on("stop", first)
	emitter.on("stop", second)

	emitter.emit("stop")
	emitter.emit("stop")

	assert received == ["first", "second", "first"]
