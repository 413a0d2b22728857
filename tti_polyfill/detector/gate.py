import logging

from tti_polyfill.environment.service import PageEnvironment
from tti_polyfill.scheduler.service import QuiescenceScheduler


class LifecycleGate:
	"""Holds the scheduler back until the page has loaded, then enables it once."""

	def __init__(self, scheduler: QuiescenceScheduler, environment: PageEnvironment, logger: logging.Logger | None = None):
		self._scheduler = scheduler
		self._environment = environment
		self.logger = logger or logging.getLogger(__name__)
		self._opened = False
		self._armed = False
		self._fired = False

	@property
	def fired(self) -> bool:
		return self._fired

	def open(self) -> None:
		"""Enable the scheduler now if the page is loaded, otherwise on the load signal."""
		if self._opened:
			return
		self._opened = True

		if self._environment.is_loaded():
			self._fire()
			return

		self.logger.debug('[LifecycleGate] Page still loading, deferring detection until load')
		self._armed = True
		self._scheduler.mark_waiting_for_load()

	def on_page_loaded(self) -> None:
		if not self._armed or self._fired:
			return
		self._fire()

	def _fire(self) -> None:
		self._fired = True
		self._armed = False
		self._scheduler.enable()
