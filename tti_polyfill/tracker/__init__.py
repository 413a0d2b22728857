from tti_polyfill.tracker.service import RequestTracker
from tti_polyfill.tracker.views import PendingRequest

__all__ = ['RequestTracker', 'PendingRequest']
