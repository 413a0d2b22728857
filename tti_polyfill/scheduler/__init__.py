from tti_polyfill.scheduler.service import QuiescenceScheduler
from tti_polyfill.scheduler.views import DetectorConfig, SchedulerState

__all__ = ['QuiescenceScheduler', 'DetectorConfig', 'SchedulerState']
