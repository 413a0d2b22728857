"""State and configuration models for the quiescence scheduler."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from tti_polyfill.config import CONFIG


class SchedulerState(str, Enum):
	"""Lifecycle of a scheduler. RESOLVED and DISABLED are terminal."""

	IDLE = 'idle'
	WAITING_FOR_LOAD = 'waiting_for_load'
	SCHEDULING = 'scheduling'
	RESOLVED = 'resolved'
	DISABLED = 'disabled'

	@property
	def is_terminal(self) -> bool:
		return self in (SchedulerState.RESOLVED, SchedulerState.DISABLED)


class DetectorConfig(BaseModel):
	"""Per-detector settings. Defaults come from the environment, see tti_polyfill.config."""

	model_config = ConfigDict(extra='forbid')

	min_value: float | None = Field(
		default=None, description='Lower bound for the result in ms; DOMContentLoaded end when unset'
	)
	use_mutation_observer: bool = Field(default=False, description='Postpone checks when the DOM changes')
	retry_interval_ms: float = Field(default_factory=lambda: CONFIG.TTI_POLYFILL_RETRY_INTERVAL_MS, gt=0)
	quiet_window_ms: float = Field(default_factory=lambda: CONFIG.TTI_POLYFILL_QUIET_WINDOW_MS, gt=0)
	max_checks: int | None = Field(
		default_factory=lambda: CONFIG.TTI_POLYFILL_MAX_CHECKS,
		ge=1,
		description='Give up after this many checks; None keeps checking until the page is quiet',
	)
