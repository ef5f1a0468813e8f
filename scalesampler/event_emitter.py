import inspect
import logging
import typing


logger = logging.getLogger(__name__)

CallbackType = typing.Callable[..., typing.Any]


class EventEmitter:

	"""
	A simple synchronous event emitter.

	Listeners run in registration order on the caller's thread, inside the
	sampler's scheduling pass, so they should return quickly.
	"""

	def __init__ (self) -> None:

		self._listeners: typing.Dict[str, typing.List[CallbackType]] = {}


	def on (self, event_name: str, callback: CallbackType) -> None:

		"""
		Register a callback for an event name.

		Raises ``ValueError`` for coroutine functions, which cannot be awaited
		from a timer callback.
		"""

		if inspect.iscoroutinefunction(callback):
			raise ValueError(f"Async callback cannot listen to {event_name!r}")

		self._listeners.setdefault(event_name, []).append(callback)

	def once (self, event_name: str, callback: CallbackType) -> None:

		"""
		Register a callback that is removed after its first call.
		"""

		def wrapper (*args: typing.Any, **kwargs: typing.Any) -> None:
			self.off(event_name, wrapper)
			callback(*args, **kwargs)

		self.on(event_name, wrapper)

	def off (self, event_name: str, callback: CallbackType) -> None:

		"""
		Unregister a previously registered callback.

		Raises ``ValueError`` if the callback is not registered for the event.
		"""

		if callback not in self._listeners.get(event_name, []):
			raise ValueError(f"Callback not registered for event {event_name!r}")

		self._listeners[event_name].remove(callback)

	def listeners (self, event_name: str) -> typing.List[CallbackType]:
		return list(self._listeners.get(event_name, []))


	def emit (self, event_name: str, *args: typing.Any, **kwargs: typing.Any) -> None:

		"""
		Call every listener for an event. Listeners added or removed during
		the emit take effect on the next one.
		"""

		for callback in self.listeners(event_name):
			callback(*args, **kwargs)
