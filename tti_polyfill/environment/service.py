"""Page environment: clock plus the timing signals a browser would expose."""

import logging
import time
from collections.abc import Callable

from tti_polyfill.core.views import LongTask
from tti_polyfill.environment.views import TimingSignals

logger = logging.getLogger(__name__)


def _monotonic_ms() -> float:
	return time.monotonic() * 1000


class PageEnvironment:
	"""Timing signals for one page load.

	`now()` is a monotonic offset in ms from navigation start. The other
	signals are absolute epoch-ms values recorded as the page progresses and
	stay None until they happen.

	Args:
		clock: Monotonic millisecond clock, injectable for tests
		navigation_start: Epoch ms of navigation start (defaults to the current wall time)
	"""

	def __init__(self, clock: Callable[[], float] | None = None, navigation_start: float | None = None):
		self._clock = clock or _monotonic_ms
		self._origin = self._clock()
		self.navigation_start: float = navigation_start if navigation_start is not None else time.time() * 1000
		self.dom_content_loaded_end: float | None = None
		self.first_paint: float | None = None
		self._long_tasks: list[LongTask] = []
		self._loaded = False

	def now(self) -> float:
		return self._clock() - self._origin

	def _absolute(self, timestamp: float | None) -> float:
		return timestamp if timestamp is not None else self.navigation_start + self.now()

	def mark_dom_content_loaded(self, timestamp: float | None = None) -> None:
		"""Record the end of the DOMContentLoaded event (epoch ms, defaults to now)."""
		self.dom_content_loaded_end = self._absolute(timestamp)
		logger.debug(f'[PageEnvironment] DOMContentLoaded ended at +{self.dom_content_loaded_end - self.navigation_start:.0f}ms')

	def mark_first_paint(self, timestamp: float | None = None) -> None:
		self.first_paint = self._absolute(timestamp)
		logger.debug(f'[PageEnvironment] First paint at +{self.first_paint - self.navigation_start:.0f}ms')

	def mark_loaded(self) -> None:
		"""Record that the page fired its load event."""
		self._loaded = True

	def is_loaded(self) -> bool:
		return self._loaded

	def add_long_task(self, start: float, end: float) -> None:
		"""Record a long main-thread task, ms relative to navigation start.

		Only records the task; `FirstConsistentlyInteractiveDetector.add_long_task` also postpones the pending check.
		"""
		self._long_tasks.append(LongTask(start=start, end=end))
		self._long_tasks.sort(key=lambda task: task.end)

	@property
	def long_tasks(self) -> list[LongTask]:
		return list(self._long_tasks)

	def signals(self) -> TimingSignals:
		return TimingSignals(
			navigation_start=self.navigation_start,
			dom_content_loaded_end=self.dom_content_loaded_end,
			first_paint=self.first_paint,
			now=self.now(),
			long_tasks=self.long_tasks,
		)
