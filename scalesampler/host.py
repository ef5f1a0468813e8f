"""Clock and timer host.

The sampler never reads a clock or sets a timer directly. It asks its
host for the current time and for one-shot callbacks, which keeps it
usable from an asyncio application and testable with a manual clock.

- ``now()`` returns monotonic seconds on the same timeline as the times
  passed to instruments and the tone parameter.
- ``call_later(delay, callback)`` runs ``callback`` once after ``delay``
  seconds and returns a handle whose ``cancel()`` prevents it from firing.

Exceptions raised inside a timer callback go to the host's error channel.
For `AsyncioHost` that is the event loop's exception handler.
"""

import asyncio
import typing


class TimerHandle (typing.Protocol):

	def cancel (self) -> None:
		...


class Host (typing.Protocol):

	def now (self) -> float:
		...

	def call_later (self, delay: float, callback: typing.Callable[[], typing.Any]) -> TimerHandle:
		...


class AsyncioHost:

	"""
	A host backed by an asyncio event loop.

	When no loop is given, the running loop is looked up on first use, so
	the host must then be used from inside a coroutine or loop callback.
	"""

	def __init__ (self, loop: typing.Optional[asyncio.AbstractEventLoop] = None) -> None:

		self._loop = loop

	@property
	def loop (self) -> asyncio.AbstractEventLoop:

		if self._loop is None:
			self._loop = asyncio.get_running_loop()

		return self._loop

	def now (self) -> float:
		return self.loop.time()

	def call_later (self, delay: float, callback: typing.Callable[[], typing.Any]) -> asyncio.TimerHandle:
		return self.loop.call_later(max(0.0, delay), callback)
