from pydantic import BaseModel, ConfigDict, Field

from tti_polyfill.core.views import LongTask


class TimingSignals(BaseModel):
	"""Point-in-time copy of the page timing signals.

	Absolute values are epoch milliseconds, like the fields of performance.timing.
	"""

	model_config = ConfigDict(extra='forbid')

	navigation_start: float
	dom_content_loaded_end: float | None = None
	first_paint: float | None = None
	now: float = Field(..., description='ms since navigation start')
	long_tasks: list[LongTask] = Field(default_factory=list)

	@property
	def dom_content_loaded_offset(self) -> float | None:
		"""DOMContentLoaded end relative to navigation start, if it has happened."""
		if self.dom_content_loaded_end is None:
			return None
		return self.dom_content_loaded_end - self.navigation_start

	@property
	def first_paint_offset(self) -> float | None:
		if self.first_paint is None:
			return None
		return self.first_paint - self.navigation_start
