"""Base class for components that react to events on a bubus EventBus."""

import logging
from typing import ClassVar

from bubus import BaseEvent, EventBus
from pydantic import BaseModel, ConfigDict, Field


class BaseWatchdog(BaseModel):
	"""Subclasses declare LISTENS_TO and implement one `on_<EventName>` handler per event."""

	model_config = ConfigDict(
		arbitrary_types_allowed=True,
		extra='forbid',
		validate_assignment=False,
		revalidate_instances='never',
	)

	LISTENS_TO: ClassVar[list[type[BaseEvent]]] = []
	EMITS: ClassVar[list[type[BaseEvent]]] = []

	event_bus: EventBus = Field(description='Bus the watchdog listens and dispatches on')
	log_sink: logging.Logger | None = Field(default=None, exclude=True, description='Receives diagnostics')

	@property
	def logger(self) -> logging.Logger:
		return self.log_sink or logging.getLogger(type(self).__module__)

	def attach_to_bus(self) -> None:
		"""Register this watchdog's handlers for every event in LISTENS_TO."""
		for event_class in self.LISTENS_TO:
			handler_name = f'on_{event_class.__name__}'
			handler = getattr(self, handler_name, None)
			if handler is None or not callable(handler):
				raise TypeError(f'{type(self).__name__} listens to {event_class.__name__} but has no {handler_name}()')
			self.event_bus.on(event_class, handler)
		self.logger.debug(f'[{type(self).__name__}] Attached to event bus for {[e.__name__ for e in self.LISTENS_TO]}')
