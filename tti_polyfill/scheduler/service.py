"""Quiescence scheduler: owns the single check timer and the detection state machine."""

import asyncio
import logging
import math
from collections.abc import Iterable

from tti_polyfill.core.service import compute_first_consistently_interactive, compute_last_known_network_2_busy
from tti_polyfill.core.views import NetworkRequest
from tti_polyfill.environment.service import PageEnvironment
from tti_polyfill.exceptions import QuiescenceTimeoutError
from tti_polyfill.scheduler.resolution import InteractiveResolution
from tti_polyfill.scheduler.views import DetectorConfig, SchedulerState
from tti_polyfill.tracker.service import RequestTracker


class QuiescenceScheduler:
	"""Runs detection attempts on a postpone-only timer until the page is quiet.

	Only one timer is ever armed. `request_check` moves it later, never earlier,
	so a request finishing quickly cannot race an already committed check.
	Everything runs on one event loop and no method awaits, so handlers never
	interleave.
	"""

	def __init__(
		self,
		tracker: RequestTracker,
		environment: PageEnvironment,
		resolution: InteractiveResolution,
		config: DetectorConfig | None = None,
		logger: logging.Logger | None = None,
	):
		self._tracker = tracker
		self._environment = environment
		self._resolution = resolution
		self._config = config or DetectorConfig()
		self.logger = logger or logging.getLogger(__name__)

		self._state = SchedulerState.IDLE
		self._min_value_override: float | None = self._config.min_value
		self._network_requests: list[NetworkRequest] = []

		self._timer: asyncio.TimerHandle | None = None
		self._activation_time = -math.inf
		self._check_count = 0

	@property
	def state(self) -> SchedulerState:
		return self._state

	@property
	def activation_time(self) -> float:
		"""Time (ms since navigation start) the armed check is due; -inf before the first."""
		return self._activation_time

	@property
	def check_count(self) -> int:
		"""Number of detection attempts actually executed."""
		return self._check_count

	@property
	def has_armed_timer(self) -> bool:
		return self._timer is not None

	@property
	def network_requests(self) -> list[NetworkRequest]:
		return list(self._network_requests)

	def mark_waiting_for_load(self) -> None:
		if self._state == SchedulerState.IDLE:
			self._state = SchedulerState.WAITING_FOR_LOAD
			self.logger.debug('[QuiescenceScheduler] Waiting for page load before scheduling checks')

	def enable(self) -> None:
		"""Start scheduling checks, beginning with one due immediately."""
		if self._state == SchedulerState.SCHEDULING:
			self.logger.debug('[QuiescenceScheduler] Already enabled, ignoring enable()')
			return
		if self._state.is_terminal:
			self.logger.debug(f'[QuiescenceScheduler] Cannot enable a {self._state.value} scheduler')
			return

		self.logger.debug('[QuiescenceScheduler] Enabling first consistently interactive detection')
		self._state = SchedulerState.SCHEDULING
		self.request_check(0)

	def disable(self) -> None:
		"""Cancel the armed check and stop for good. Request instrumentation stays installed."""
		if self._state.is_terminal:
			return
		self.logger.debug(f'[QuiescenceScheduler] Disabling (was {self._state.value})')
		self._cancel_timer()
		self._state = SchedulerState.DISABLED

	def set_min_value_override(self, value: float) -> None:
		"""Use `value` as the minimum result instead of DOMContentLoaded end, from the next check on."""
		if self._state == SchedulerState.RESOLVED:
			self.logger.warning('[QuiescenceScheduler] Already resolved, min value override has no effect')
			return
		self._min_value_override = value

	def add_network_requests(self, requests: Iterable[NetworkRequest]) -> None:
		"""Append completed requests (e.g. from resource timing) to the log used for busy detection.

		Ignored once resolved or disabled; request instrumentation outlives detection.
		"""
		if self._state.is_terminal:
			return
		self._network_requests.extend(requests)

	def request_check(self, earliest_time: float) -> None:
		"""Arm the check for `earliest_time` (ms since navigation start) unless one is already due later.

		Args:
			earliest_time: Earliest moment the next detection attempt may run
		"""
		if self._state != SchedulerState.SCHEDULING:
			if self._state.is_terminal:
				self.logger.debug(f'[QuiescenceScheduler] Scheduler is {self._state.value}, not scheduling a check')
			else:
				self.logger.warning('[QuiescenceScheduler] enable() must be called before scheduling checks')
			return

		if earliest_time <= self._activation_time:
			self.logger.debug(
				f'[QuiescenceScheduler] Check already due at {self._activation_time:.0f}ms, '
				f'not moving it to {earliest_time:.0f}ms'
			)
			return

		self._cancel_timer()
		delay_ms = max(0.0, earliest_time - self._environment.now())
		loop = asyncio.get_running_loop()
		self._timer = loop.call_later(delay_ms / 1000, self._on_timer)
		self._activation_time = earliest_time

		self.logger.debug(f'[QuiescenceScheduler] Rescheduled check to {earliest_time:.0f}ms (in {delay_ms:.0f}ms)')

	def postpone(self, quiet_for_ms: float | None = None, since: float | None = None) -> None:
		"""Push the check out to a quiet window after fresh activity.

		Args:
			quiet_for_ms: Window length, defaults to the configured quiet window
			since: End of the activity in ms since navigation start, defaults to now
		"""
		if self._state != SchedulerState.SCHEDULING:
			return
		window = quiet_for_ms if quiet_for_ms is not None else self._config.quiet_window_ms
		activity_end = since if since is not None else self._environment.now()
		self.request_check(activity_end + window)

	def _resolve_min_value(self, dom_content_loaded_offset: float | None) -> float | None:
		if self._min_value_override is not None:
			return self._min_value_override
		return dom_content_loaded_offset

	def _on_timer(self) -> None:
		self._timer = None
		self.on_timer_fire()

	def on_timer_fire(self) -> None:
		"""Run one detection attempt. Does nothing unless the scheduler is scheduling."""
		if self._state != SchedulerState.SCHEDULING:
			self.logger.debug(f'[QuiescenceScheduler] Timer fired while {self._state.value}, skipping check')
			return

		self._check_count += 1
		self.logger.debug(f'[QuiescenceScheduler] Check #{self._check_count} for first consistently interactive')

		signals = self._environment.signals()
		current_time = signals.now
		incomplete_starts = self._tracker.snapshot()

		last_busy = compute_last_known_network_2_busy(incomplete_starts, self._network_requests, current_time)

		search_start = signals.first_paint_offset
		if search_start is None:
			search_start = signals.dom_content_loaded_offset
		if search_start is None:
			search_start = 0.0

		min_value = self._resolve_min_value(signals.dom_content_loaded_offset)

		self.logger.debug(
			f'[QuiescenceScheduler] search_start={search_start:.0f}ms min_value={min_value} '
			f'last_busy={last_busy:.0f}ms now={current_time:.0f}ms in_flight={len(incomplete_starts)} '
			f'completed={len(self._network_requests)} long_tasks={len(signals.long_tasks)}'
		)

		if min_value is None:
			# Checks normally start after load, so DOMContentLoaded is only missing during startup
			self.logger.debug('[QuiescenceScheduler] No usable minimum value yet, postponing check')
			if not self._check_budget_exhausted():
				self.request_check(
					max(last_busy + self._config.quiet_window_ms, current_time + self._config.retry_interval_ms)
				)
			return

		result = compute_first_consistently_interactive(
			search_start,
			min_value,
			last_busy,
			current_time,
			signals.long_tasks,
			quiet_window=self._config.quiet_window_ms,
		)

		if result is not None:
			self.logger.info(f'[QuiescenceScheduler] First consistently interactive at {result:.0f}ms')
			self._cancel_timer()
			self._state = SchedulerState.RESOLVED
			self._resolution.resolve(result)
			return

		if self._check_budget_exhausted():
			return

		self.logger.debug(
			f'[QuiescenceScheduler] Could not detect first consistently interactive, '
			f'retrying in {self._config.retry_interval_ms:.0f}ms'
		)
		self.request_check(current_time + self._config.retry_interval_ms)

	def _check_budget_exhausted(self) -> bool:
		max_checks = self._config.max_checks
		if max_checks is None or self._check_count < max_checks:
			return False

		self.logger.warning(f'[QuiescenceScheduler] Giving up after {self._check_count} checks without a quiet window')
		self._cancel_timer()
		self._state = SchedulerState.DISABLED
		self._resolution.reject(QuiescenceTimeoutError(self._check_count))
		return True

	def _cancel_timer(self) -> None:
		if self._timer is not None:
			self._timer.cancel()
			self._timer = None
