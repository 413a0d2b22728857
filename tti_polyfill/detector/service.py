"""First consistently interactive detector: wires events, tracker, gate and scheduler together."""

from collections.abc import Awaitable, Iterable
from typing import ClassVar

from bubus import BaseEvent
from pydantic import Field, PrivateAttr

from tti_polyfill.core.service import MAX_QUIET_REQUESTS
from tti_polyfill.core.views import NetworkRequest
from tti_polyfill.detector.events import (
	DomMutationEvent,
	LongTaskEvent,
	PageLoadedEvent,
	RequestFinishedEvent,
	RequestStartedEvent,
)
from tti_polyfill.detector.gate import LifecycleGate
from tti_polyfill.environment.service import PageEnvironment
from tti_polyfill.scheduler.resolution import InteractiveResolution
from tti_polyfill.scheduler.service import QuiescenceScheduler
from tti_polyfill.scheduler.views import DetectorConfig, SchedulerState
from tti_polyfill.tracker.service import RequestTracker
from tti_polyfill.watchdog_base import BaseWatchdog


class FirstConsistentlyInteractiveDetector(BaseWatchdog):
	"""Detects when a page becomes first consistently interactive.

	Each instance owns its own tracker, timer and result, so several detectors
	can run side by side. Request activity arrives as bus events (or through
	`on_request_start` / `on_request_end`) and can only postpone the next check.
	"""

	LISTENS_TO: ClassVar[list[type[BaseEvent]]] = [
		RequestStartedEvent,
		RequestFinishedEvent,
		PageLoadedEvent,
		LongTaskEvent,
		DomMutationEvent,
	]
	EMITS: ClassVar[list[type[BaseEvent]]] = []

	environment: PageEnvironment = Field(default_factory=PageEnvironment)
	config: DetectorConfig = Field(default_factory=DetectorConfig)

	_tracker: RequestTracker = PrivateAttr()
	_resolution: InteractiveResolution = PrivateAttr()
	_scheduler: QuiescenceScheduler = PrivateAttr()
	_gate: LifecycleGate = PrivateAttr()

	def model_post_init(self, __context) -> None:
		self._tracker = RequestTracker(now=self.environment.now)
		self._resolution = InteractiveResolution()
		self._scheduler = QuiescenceScheduler(
			tracker=self._tracker,
			environment=self.environment,
			resolution=self._resolution,
			config=self.config,
			logger=self.log_sink,
		)
		self._gate = LifecycleGate(self._scheduler, self.environment, logger=self.log_sink)

	@property
	def state(self) -> SchedulerState:
		return self._scheduler.state

	@property
	def scheduler(self) -> QuiescenceScheduler:
		return self._scheduler

	@property
	def tracker(self) -> RequestTracker:
		return self._tracker

	# Public API

	def wait_for_interactive(self) -> Awaitable[float]:
		"""Start detection and return an awaitable of the first consistently interactive time (ms).

		Must be called with a running event loop. Repeated calls share the same result.
		"""
		# Bind the result to the running loop before any check can resolve it
		_ = self._resolution.future
		self._gate.open()
		return self._resolution

	def enable(self) -> None:
		self._scheduler.enable()

	def disable(self) -> None:
		self._scheduler.disable()

	def set_min_value_override(self, value: float) -> None:
		self._scheduler.set_min_value_override(value)

	def add_network_requests(self, requests: Iterable[NetworkRequest]) -> None:
		self._scheduler.add_network_requests(requests)

	def add_long_task(self, start: float, end: float) -> None:
		"""Record a long main-thread task and push the pending check to a quiet window after it ends."""
		self.environment.add_long_task(start, end)
		self._scheduler.postpone(since=end)

	# Request lifecycle

	def on_request_start(self, request_id: str) -> None:
		self._tracker.before_request(request_id)
		if len(self._tracker) > MAX_QUIET_REQUESTS:
			self._scheduler.postpone()

	def on_request_end(self, request_id: str) -> None:
		start_time = self._tracker.after_request(request_id)
		if start_time is not None:
			self._scheduler.add_network_requests([NetworkRequest(start=start_time, end=self.environment.now())])

	# Event handlers

	async def on_RequestStartedEvent(self, event: RequestStartedEvent) -> None:
		self.on_request_start(event.request_id)

	async def on_RequestFinishedEvent(self, event: RequestFinishedEvent) -> None:
		self.on_request_end(event.request_id)

	async def on_PageLoadedEvent(self, event: PageLoadedEvent) -> None:
		self.logger.debug('[FirstConsistentlyInteractiveDetector] Page load complete')
		self.environment.mark_loaded()
		self._gate.on_page_loaded()

	async def on_LongTaskEvent(self, event: LongTaskEvent) -> None:
		self.add_long_task(event.start, event.end)

	async def on_DomMutationEvent(self, event: DomMutationEvent) -> None:
		if self.config.use_mutation_observer:
			self._scheduler.postpone()
