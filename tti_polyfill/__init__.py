from tti_polyfill.config import CONFIG
from tti_polyfill.logging_config import setup_logging

if CONFIG.TTI_POLYFILL_SETUP_LOGGING:
	setup_logging()

from tti_polyfill.adapters.cdp import CDPNetworkAdapter
from tti_polyfill.core.service import compute_first_consistently_interactive, compute_last_known_network_2_busy
from tti_polyfill.core.views import LongTask, NetworkRequest
from tti_polyfill.detector.events import (
	DomMutationEvent,
	LongTaskEvent,
	PageLoadedEvent,
	RequestFinishedEvent,
	RequestStartedEvent,
)
from tti_polyfill.detector.service import FirstConsistentlyInteractiveDetector
from tti_polyfill.environment.service import PageEnvironment
from tti_polyfill.exceptions import DoubleResolutionError, QuiescenceTimeoutError, TTIPolyfillError
from tti_polyfill.scheduler.service import QuiescenceScheduler
from tti_polyfill.scheduler.views import DetectorConfig, SchedulerState

__all__ = [
	'FirstConsistentlyInteractiveDetector',
	'QuiescenceScheduler',
	'DetectorConfig',
	'SchedulerState',
	'PageEnvironment',
	'CDPNetworkAdapter',
	'RequestStartedEvent',
	'RequestFinishedEvent',
	'PageLoadedEvent',
	'DomMutationEvent',
	'LongTaskEvent',
	'NetworkRequest',
	'LongTask',
	'compute_first_consistently_interactive',
	'compute_last_known_network_2_busy',
	'TTIPolyfillError',
	'DoubleResolutionError',
	'QuiescenceTimeoutError',
]
