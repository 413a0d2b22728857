"""Events consumed by the first consistently interactive detector."""

from bubus import BaseEvent


class RequestStartedEvent(BaseEvent[None]):
	"""Page code issued a network request."""

	request_id: str
	url: str = ''


class RequestFinishedEvent(BaseEvent[None]):
	"""A request finished, successfully or not."""

	request_id: str
	failed: bool = False


class PageLoadedEvent(BaseEvent[None]):
	"""The page fired its load event."""


class LongTaskEvent(BaseEvent[None]):
	"""A main-thread task longer than 50ms finished (ms since navigation start)."""

	start: float
	end: float


class DomMutationEvent(BaseEvent[None]):
	"""The DOM changed; only acted on when mutation observation is enabled."""
