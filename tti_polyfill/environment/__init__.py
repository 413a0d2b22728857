from tti_polyfill.environment.service import PageEnvironment
from tti_polyfill.environment.views import TimingSignals

__all__ = ['PageEnvironment', 'TimingSignals']
