from tti_polyfill.detector.events import (
	DomMutationEvent,
	LongTaskEvent,
	PageLoadedEvent,
	RequestFinishedEvent,
	RequestStartedEvent,
)
from tti_polyfill.detector.gate import LifecycleGate
from tti_polyfill.detector.service import FirstConsistentlyInteractiveDetector

__all__ = [
	'FirstConsistentlyInteractiveDetector',
	'LifecycleGate',
	'DomMutationEvent',
	'LongTaskEvent',
	'PageLoadedEvent',
	'RequestFinishedEvent',
	'RequestStartedEvent',
]
