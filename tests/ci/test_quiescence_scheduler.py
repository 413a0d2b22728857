"""Tests for the quiescence scheduler state machine.

Most checks are forced by calling on_timer_fire() directly against a fake
clock. TestArmedTimer runs on the real clock with short intervals.
"""

import asyncio
import logging
import math

import pytest

from tti_polyfill.core.views import NetworkRequest
from tti_polyfill.environment.service import PageEnvironment
from tti_polyfill.exceptions import DoubleResolutionError, QuiescenceTimeoutError
from tti_polyfill.scheduler.resolution import InteractiveResolution
from tti_polyfill.scheduler.service import QuiescenceScheduler
from tti_polyfill.scheduler.views import DetectorConfig, SchedulerState
from tti_polyfill.tracker.service import RequestTracker


class TestRequestCheck:
	@pytest.mark.asyncio
	async def test_request_check_before_enable_is_ignored(self, make_scheduler, caplog):
		scheduler, _, _ = make_scheduler()

		with caplog.at_level(logging.WARNING):
			scheduler.request_check(1000)

		assert scheduler.activation_time == -math.inf
		assert scheduler.has_armed_timer is False
		assert 'enable() must be called before scheduling checks' in caplog.text

	@pytest.mark.asyncio
	async def test_activation_time_never_moves_earlier(self, make_scheduler):
		scheduler, _, _ = make_scheduler()
		scheduler.enable()

		activation_times = [scheduler.activation_time]
		for earliest_time in [3000, 2000, 3000, 500, 7000, 6999, 7001]:
			scheduler.request_check(earliest_time)
			activation_times.append(scheduler.activation_time)

		assert activation_times == sorted(activation_times)
		assert activation_times == [0, 3000, 3000, 3000, 3000, 7000, 7000, 7001]
		assert scheduler.has_armed_timer is True

	@pytest.mark.asyncio
	async def test_enable_twice_is_a_no_op(self, make_scheduler):
		scheduler, _, _ = make_scheduler()
		scheduler.enable()
		scheduler.request_check(4000)
		scheduler.enable()

		assert scheduler.state == SchedulerState.SCHEDULING
		assert scheduler.activation_time == 4000


class TestTimerFire:
	@pytest.mark.asyncio
	async def test_missing_dom_content_loaded_defers_check(self, make_scheduler, clock):
		"""A check before DOMContentLoaded must not resolve and retries at least 1s later"""
		scheduler, _, resolution = make_scheduler()
		scheduler.enable()
		clock.advance(200)

		scheduler.on_timer_fire()

		assert scheduler.check_count == 1
		assert scheduler.state == SchedulerState.SCHEDULING
		assert resolution.done is False
		assert scheduler.activation_time >= clock.ms + 1000
		# last busy 0 + quiet window dominates now + retry
		assert scheduler.activation_time == 5000

	@pytest.mark.asyncio
	async def test_resolves_once_quiet(self, make_scheduler, environment, clock):
		scheduler, _, resolution = make_scheduler()
		environment.mark_dom_content_loaded(environment.navigation_start + 800)
		scheduler.enable()

		clock.advance(4000)
		scheduler.on_timer_fire()
		assert resolution.done is False
		assert scheduler.activation_time == 5000

		clock.advance(1800)
		scheduler.on_timer_fire()

		assert scheduler.state == SchedulerState.RESOLVED
		assert resolution.result() == 800
		assert await resolution == 800
		assert scheduler.has_armed_timer is False

	@pytest.mark.asyncio
	async def test_first_paint_is_preferred_search_start(self, make_scheduler, environment, clock):
		scheduler, _, resolution = make_scheduler()
		environment.mark_dom_content_loaded(environment.navigation_start + 300)
		environment.mark_first_paint(environment.navigation_start + 900)
		scheduler.enable()

		clock.advance(5900)
		scheduler.on_timer_fire()

		assert resolution.result() == 900

	@pytest.mark.asyncio
	async def test_busy_network_keeps_retrying(self, make_scheduler, environment, clock):
		scheduler, tracker, resolution = make_scheduler()
		environment.mark_dom_content_loaded(environment.navigation_start + 100)
		for request_id in ('a', 'b', 'c'):
			tracker.before_request(request_id)
		scheduler.enable()

		clock.advance(20_000)
		scheduler.on_timer_fire()

		assert resolution.done is False
		assert scheduler.activation_time == 21_000

	@pytest.mark.asyncio
	async def test_completed_request_log_is_used(self, make_scheduler, environment, clock):
		scheduler, _, resolution = make_scheduler()
		environment.mark_dom_content_loaded(environment.navigation_start + 100)
		scheduler.add_network_requests(
			[
				NetworkRequest(start=0, end=3000),
				NetworkRequest(start=10, end=4000),
				NetworkRequest(start=20, end=2000),
			]
		)
		scheduler.enable()

		clock.advance(6000)
		scheduler.on_timer_fire()
		assert resolution.done is False

		clock.advance(1000)
		scheduler.on_timer_fire()
		assert resolution.result() == 100

	@pytest.mark.asyncio
	async def test_no_check_runs_after_resolution(self, make_scheduler, environment, clock):
		scheduler, _, resolution = make_scheduler()
		environment.mark_dom_content_loaded(environment.navigation_start + 100)
		scheduler.enable()
		clock.advance(6000)
		scheduler.on_timer_fire()
		assert scheduler.check_count == 1

		scheduler.on_timer_fire()
		scheduler.request_check(99_999)

		assert scheduler.check_count == 1
		assert scheduler.has_armed_timer is False
		with pytest.raises(DoubleResolutionError):
			resolution.resolve(42.0)
		assert resolution.result() == 100


class TestDisable:
	@pytest.mark.asyncio
	async def test_forced_check_after_disable_is_a_no_op(self, make_scheduler, environment, clock):
		"""Scenario B: disabling mid-scheduling stops every later check"""
		scheduler, _, resolution = make_scheduler()
		environment.mark_dom_content_loaded(environment.navigation_start + 100)
		scheduler.enable()
		clock.advance(1000)
		scheduler.on_timer_fire()
		attempts = scheduler.check_count

		scheduler.disable()
		clock.advance(10_000)
		scheduler.on_timer_fire()

		assert scheduler.check_count == attempts
		assert scheduler.state == SchedulerState.DISABLED
		assert scheduler.has_armed_timer is False
		assert resolution.done is False

	@pytest.mark.asyncio
	async def test_disable_is_idempotent_and_terminal(self, make_scheduler):
		scheduler, _, _ = make_scheduler()
		scheduler.disable()
		scheduler.disable()
		scheduler.enable()

		assert scheduler.state == SchedulerState.DISABLED
		assert scheduler.has_armed_timer is False


	@pytest.mark.asyncio
	async def test_completed_requests_are_dropped_once_disabled(self, make_scheduler):
		scheduler, _, _ = make_scheduler()
		scheduler.add_network_requests([NetworkRequest(start=0, end=100)])
		scheduler.disable()

		scheduler.add_network_requests([NetworkRequest(start=200, end=300)] * 50)

		assert [(r.start, r.end) for r in scheduler.network_requests] == [(0, 100)]

class TestMinValueOverride:
	@pytest.mark.asyncio
	async def test_override_applies_to_every_check(self, make_scheduler, environment, clock):
		"""Scenario C: the override wins over DOMContentLoaded timing"""
		scheduler, _, resolution = make_scheduler()
		scheduler.set_min_value_override(20_000)
		scheduler.enable()

		# No DOMContentLoaded yet, the override still provides a minimum
		clock.advance(1000)
		scheduler.on_timer_fire()
		assert resolution.done is False
		assert scheduler.activation_time == 2000

		environment.mark_dom_content_loaded(environment.navigation_start + 700)
		clock.advance(5000)
		scheduler.on_timer_fire()

		assert resolution.result() == 20_000

	@pytest.mark.asyncio
	async def test_config_min_value(self, make_scheduler, environment, clock):
		scheduler, _, resolution = make_scheduler(min_value=1500)
		environment.mark_dom_content_loaded(environment.navigation_start + 700)
		scheduler.enable()
		clock.advance(5700)
		scheduler.on_timer_fire()

		assert resolution.result() == 1500

	@pytest.mark.asyncio
	async def test_zero_override_is_honoured(self, make_scheduler, environment, clock):
		scheduler, _, resolution = make_scheduler()
		environment.mark_first_paint(environment.navigation_start + 0)
		scheduler.set_min_value_override(0)
		scheduler.enable()
		clock.advance(5000)
		scheduler.on_timer_fire()

		assert resolution.result() == 0


class TestCheckBudget:
	@pytest.mark.asyncio
	async def test_unbounded_by_default(self, make_scheduler, environment, clock):
		scheduler, tracker, _ = make_scheduler()
		environment.mark_dom_content_loaded(environment.navigation_start + 100)
		for request_id in ('a', 'b', 'c'):
			tracker.before_request(request_id)
		scheduler.enable()

		for _ in range(50):
			clock.advance(1000)
			scheduler.on_timer_fire()

		assert scheduler.check_count == 50
		assert scheduler.state == SchedulerState.SCHEDULING

	@pytest.mark.asyncio
	async def test_exhausted_budget_rejects(self, make_scheduler, environment, clock):
		scheduler, _, resolution = make_scheduler(max_checks=2)
		environment.mark_dom_content_loaded(environment.navigation_start + 100)
		scheduler.enable()

		scheduler.on_timer_fire()
		assert scheduler.state == SchedulerState.SCHEDULING
		clock.advance(1000)
		scheduler.on_timer_fire()

		assert scheduler.state == SchedulerState.DISABLED
		assert scheduler.has_armed_timer is False
		with pytest.raises(QuiescenceTimeoutError):
			await resolution


class TestArmedTimer:
	@staticmethod
	def real_clock_scheduler() -> QuiescenceScheduler:
		environment = PageEnvironment()
		environment.mark_dom_content_loaded()
		# The quiet window is never reached, so every check reschedules
		config = DetectorConfig(retry_interval_ms=20, quiet_window_ms=60_000, max_checks=None)
		return QuiescenceScheduler(RequestTracker(now=environment.now), environment, InteractiveResolution(), config)

	@staticmethod
	async def wait_for_checks(scheduler: QuiescenceScheduler, count: int) -> None:
		async def _poll():
			while scheduler.check_count < count:
				await asyncio.sleep(0.005)

		await asyncio.wait_for(_poll(), timeout=5)

	@pytest.mark.asyncio
	async def test_timer_keeps_checking_while_scheduling(self):
		scheduler = self.real_clock_scheduler()
		scheduler.enable()

		await self.wait_for_checks(scheduler, 3)

		assert scheduler.state == SchedulerState.SCHEDULING
		assert scheduler.has_armed_timer is True
		scheduler.disable()

	@pytest.mark.asyncio
	async def test_armed_timer_never_fires_after_disable(self):
		scheduler = self.real_clock_scheduler()
		scheduler.enable()
		await self.wait_for_checks(scheduler, 1)
		assert scheduler.has_armed_timer is True
		attempts = scheduler.check_count

		scheduler.disable()
		# Sleep well past the moment the cancelled check was due
		await asyncio.sleep(0.1)

		assert scheduler.check_count == attempts
		assert scheduler.state == SchedulerState.DISABLED
		assert scheduler.has_armed_timer is False
