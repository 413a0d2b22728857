"""Pure functions deciding where a quiescence window begins."""

from collections.abc import Sequence

from tti_polyfill.core.views import LongTask, NetworkRequest

# A page is network 2-busy while more than this many requests are in flight
MAX_QUIET_REQUESTS = 2
QUIET_WINDOW_MS = 5000.0


def compute_last_known_network_2_busy(
	incomplete_request_starts: Sequence[float],
	observed_requests: Sequence[NetworkRequest],
	current_time: float,
) -> float:
	"""Find the last moment more than two requests were in flight.

	Args:
		incomplete_request_starts: Start times of requests still in flight
		observed_requests: Completed requests
		current_time: Now, relative to navigation start

	Returns:
		current_time if the network is 2-busy right now, the last 2-busy
		timestamp otherwise, or 0 if the network was never 2-busy
	"""
	if len(incomplete_request_starts) > MAX_QUIET_REQUESTS:
		return current_time

	# (timestamp, is_start)
	endpoints: list[tuple[float, bool]] = []
	for request in observed_requests:
		endpoints.append((request.start, True))
		endpoints.append((request.end, False))
	for start in incomplete_request_starts:
		endpoints.append((start, True))

	# Stable sort keeps ties in insertion order
	endpoints.sort(key=lambda endpoint: endpoint[0])

	# Walk backwards from now, undoing each endpoint
	active = len(incomplete_request_starts)
	for timestamp, is_start in reversed(endpoints):
		if is_start:
			active -= 1
		else:
			active += 1
			if active > MAX_QUIET_REQUESTS:
				return timestamp

	return 0.0


def compute_first_consistently_interactive(
	search_start: float,
	min_value: float,
	last_known_network_2_busy: float,
	current_time: float,
	long_tasks: Sequence[LongTask] = (),
	quiet_window: float = QUIET_WINDOW_MS,
) -> float | None:
	"""Return the first consistently interactive time, or None if not reached yet.

	The candidate is search_start, pushed past the end of the last long task
	that finished after it. Both the network and the main thread must have been
	quiet for quiet_window ms before current_time.
	"""
	if current_time - last_known_network_2_busy < quiet_window:
		return None

	candidate = search_start
	if long_tasks:
		candidate = max(candidate, long_tasks[-1].end)

	if current_time - candidate < quiet_window:
		return None

	return max(candidate, min_value)
