"""Tracks in-flight requests initiated by page code."""

import logging
from collections.abc import Callable

from tti_polyfill.tracker.views import PendingRequest

logger = logging.getLogger(__name__)


class RequestTracker:
	"""Maps request ids to their start times.

	Mutated only by the request lifecycle callbacks and read by the scheduler,
	all on the same event loop.
	"""

	def __init__(self, now: Callable[[], float]):
		self._now = now
		self._pending: dict[str, PendingRequest] = {}

	def before_request(self, request_id: str) -> PendingRequest:
		"""Record the start of a request. A repeated id replaces the earlier entry."""
		if request_id in self._pending:
			# Re-insert so the snapshot order follows the latest start
			del self._pending[request_id]
		pending = PendingRequest(request_id=request_id, start_time=self._now())
		self._pending[request_id] = pending
		logger.debug(f'[RequestTracker] Starting request {request_id}, in flight: {len(self._pending)}')
		return pending

	def after_request(self, request_id: str) -> float | None:
		"""Forget a request. Returns its start time, or None for an unknown id."""
		pending = self._pending.pop(request_id, None)
		if pending is None:
			logger.debug(f'[RequestTracker] Ignoring completion of untracked request {request_id}')
			return None
		logger.debug(f'[RequestTracker] Completed request {request_id}, in flight: {len(self._pending)}')
		return pending.start_time

	def snapshot(self) -> list[float]:
		"""Start times of the requests currently in flight, oldest first."""
		return [pending.start_time for pending in self._pending.values()]

	def __len__(self) -> int:
		return len(self._pending)

	def __contains__(self, request_id: object) -> bool:
		return request_id in self._pending
