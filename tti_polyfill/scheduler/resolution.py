"""Single-fulfillment bridge between the scheduler and whoever awaits the result."""

import asyncio
import logging
from collections.abc import Generator
from typing import Any

from tti_polyfill.exceptions import DoubleResolutionError

logger = logging.getLogger(__name__)


class InteractiveResolution:
	"""Wraps an asyncio.Future that is fulfilled at most once.

	The future is created on first use so the object can be built outside a
	running event loop. A second `resolve()` raises instead of replacing the
	stored value.
	"""

	def __init__(self):
		self._future: asyncio.Future[float] | None = None

	@property
	def future(self) -> asyncio.Future[float]:
		if self._future is None:
			self._future = asyncio.get_running_loop().create_future()
		return self._future

	@property
	def done(self) -> bool:
		return self._future is not None and self._future.done()

	def resolve(self, value: float) -> None:
		future = self.future
		if future.done():
			existing = future.result() if not future.cancelled() and future.exception() is None else float('nan')
			raise DoubleResolutionError(existing, value)
		future.set_result(value)
		logger.debug(f'[InteractiveResolution] Resolved to {value:.0f}ms')

	def reject(self, error: BaseException) -> None:
		future = self.future
		if future.done():
			logger.warning(f'[InteractiveResolution] Already settled, dropping error: {error}')
			return
		future.set_exception(error)
		# Mark retrieved so an unawaited rejection is not logged when the future is collected
		future.exception()

	def result(self) -> float | None:
		"""The resolved value, or None while pending."""
		if self._future is None or not self._future.done() or self._future.cancelled():
			return None
		if self._future.exception() is not None:
			return None
		return self._future.result()

	def __await__(self) -> Generator[Any, None, float]:
		# shield so a cancelled waiter does not cancel the shared result
		return asyncio.shield(self.future).__await__()
