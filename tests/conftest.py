import os

# Leave logging to pytest's capture handlers
os.environ.setdefault('TTI_POLYFILL_SETUP_LOGGING', 'false')

import pytest
from bubus import EventBus

from tti_polyfill.environment.service import PageEnvironment
from tti_polyfill.scheduler.resolution import InteractiveResolution
from tti_polyfill.scheduler.service import QuiescenceScheduler
from tti_polyfill.scheduler.views import DetectorConfig
from tti_polyfill.tracker.service import RequestTracker

NAVIGATION_START = 1_700_000_000_000.0


class FakeClock:
	"""Millisecond clock that only moves when told to."""

	def __init__(self):
		self.ms = 0.0

	def __call__(self) -> float:
		return self.ms

	def advance(self, ms: float) -> None:
		self.ms += ms


@pytest.fixture
def clock():
	return FakeClock()


@pytest.fixture
def environment(clock):
	return PageEnvironment(clock=clock, navigation_start=NAVIGATION_START)


@pytest.fixture
def make_scheduler(environment):
	"""Build a scheduler with its own tracker and resolution; disabled again on teardown."""
	created: list[QuiescenceScheduler] = []

	def _make(**config_overrides):
		config_values = {'retry_interval_ms': 1000, 'quiet_window_ms': 5000, 'max_checks': None}
		config_values.update(config_overrides)
		tracker = RequestTracker(now=environment.now)
		resolution = InteractiveResolution()
		scheduler = QuiescenceScheduler(tracker, environment, resolution, DetectorConfig(**config_values))
		created.append(scheduler)
		return scheduler, tracker, resolution

	yield _make

	for scheduler in created:
		scheduler.disable()


@pytest.fixture
async def event_bus():
	bus = EventBus()
	yield bus
	await bus.stop()
