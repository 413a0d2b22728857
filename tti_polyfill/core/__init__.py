from tti_polyfill.core.service import (
	MAX_QUIET_REQUESTS,
	QUIET_WINDOW_MS,
	compute_first_consistently_interactive,
	compute_last_known_network_2_busy,
)
from tti_polyfill.core.views import LongTask, NetworkRequest

__all__ = [
	'MAX_QUIET_REQUESTS',
	'QUIET_WINDOW_MS',
	'compute_first_consistently_interactive',
	'compute_last_known_network_2_busy',
	'LongTask',
	'NetworkRequest',
]
