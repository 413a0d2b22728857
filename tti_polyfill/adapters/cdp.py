"""CDP adapter turning DevTools Network/Page events into detector events."""

from typing import TYPE_CHECKING, Any, ClassVar

from bubus import BaseEvent
from pydantic import Field, PrivateAttr

from tti_polyfill.detector.events import PageLoadedEvent, RequestFinishedEvent, RequestStartedEvent
from tti_polyfill.environment.service import PageEnvironment
from tti_polyfill.watchdog_base import BaseWatchdog

if TYPE_CHECKING:
	from cdp_use.cdp.network import LoadingFailedEvent, LoadingFinishedEvent, RequestWillBeSentEvent
	from cdp_use.cdp.page import DomContentEventFiredEvent, LifecycleEventEvent, LoadEventFiredEvent
	from cdp_use.cdp.target import SessionID


class CDPNetworkAdapter(BaseWatchdog):
	"""Feeds request lifecycle and load signals from one CDP session to the event bus.

	Handlers stay registered after the detector is disabled; the CDP client
	offers no way to remove a single handler.
	"""

	LISTENS_TO: ClassVar[list[type[BaseEvent]]] = []
	EMITS: ClassVar[list[type[BaseEvent]]] = [RequestStartedEvent, RequestFinishedEvent, PageLoadedEvent]

	cdp_client: Any = Field(description='cdp_use.CDPClient connected to the browser')
	environment: PageEnvironment
	session_id: str | None = Field(default=None, description='Only events from this session are forwarded')

	# Requests initiated by page code that can keep it busy
	RELEVANT_RESOURCE_TYPES: ClassVar[set[str]] = {
		'Document',
		'Script',
		'XHR',
		'Fetch',
	}

	IGNORED_URL_PATTERNS: ClassVar[set[str]] = {
		# Analytics and tracking
		'analytics',
		'tracking',
		'telemetry',
		'beacon',
		# Ads
		'doubleclick',
		'adsystem',
		'adserver',
		# Long-lived connections never finish
		'heartbeat',
		'livechat',
		'wss://',
	}

	_tracked_request_ids: set[str] = PrivateAttr(default_factory=set)
	_handlers_registered: bool = PrivateAttr(default=False)
	# wallTime - timestamp from the first request, converts CDP monotonic seconds to epoch ms
	_wall_time_offset_ms: float | None = PrivateAttr(default=None)

	async def start(self) -> None:
		"""Enable the Network and Page domains and register handlers (once)."""
		await self.cdp_client.send.Network.enable(session_id=self.session_id)
		await self.cdp_client.send.Page.enable(session_id=self.session_id)
		await self.cdp_client.send.Page.setLifecycleEventsEnabled(params={'enabled': True}, session_id=self.session_id)

		if not self._handlers_registered:
			self._register_cdp_handlers()
			self._handlers_registered = True
			self.logger.debug('[CDPNetworkAdapter] Registered CDP Network and Page event handlers')

	def _register_cdp_handlers(self) -> None:
		register = self.cdp_client.register
		register.Network.requestWillBeSent(self._on_request_will_be_sent)
		register.Network.loadingFinished(self._on_loading_finished)
		register.Network.loadingFailed(self._on_loading_failed)
		register.Page.domContentEventFired(self._on_dom_content_loaded)
		register.Page.loadEventFired(self._on_page_load_complete)
		register.Page.lifecycleEvent(self._on_lifecycle_event)

	def _is_own_session(self, session_id: 'SessionID | None') -> bool:
		return self.session_id is None or session_id == self.session_id

	def _to_epoch_ms(self, timestamp: float | None) -> float | None:
		if timestamp is None or self._wall_time_offset_ms is None:
			return None
		return timestamp * 1000 + self._wall_time_offset_ms

	def _should_track_request(self, resource_type: str, url: str) -> bool:
		"""Determine if a request should count towards network activity."""
		if resource_type not in self.RELEVANT_RESOURCE_TYPES:
			return False

		url_lower = url.lower()
		if url_lower.startswith(('data:', 'blob:')):
			return False

		if any(pattern in url_lower for pattern in self.IGNORED_URL_PATTERNS):
			return False

		return True

	async def _on_request_will_be_sent(self, event: 'RequestWillBeSentEvent', session_id: 'SessionID | None') -> None:
		try:
			if not self._is_own_session(session_id):
				return

			wall_time = event.get('wallTime')
			timestamp = event.get('timestamp')
			if self._wall_time_offset_ms is None and wall_time is not None and timestamp is not None:
				self._wall_time_offset_ms = (wall_time - timestamp) * 1000

			request_id = event.get('requestId', '')
			url = event.get('request', {}).get('url', '')
			resource_type = event.get('type', '')

			if not request_id or not self._should_track_request(resource_type, url):
				return

			self._tracked_request_ids.add(request_id)
			await self.event_bus.dispatch(RequestStartedEvent(request_id=request_id, url=url))

		except Exception as e:
			self.logger.debug(f'[CDPNetworkAdapter] Error in _on_request_will_be_sent: {e}')

	async def _finish_request(self, request_id: str, failed: bool) -> None:
		if request_id not in self._tracked_request_ids:
			return
		self._tracked_request_ids.discard(request_id)
		await self.event_bus.dispatch(RequestFinishedEvent(request_id=request_id, failed=failed))

	async def _on_loading_finished(self, event: 'LoadingFinishedEvent', session_id: 'SessionID | None') -> None:
		try:
			if self._is_own_session(session_id):
				await self._finish_request(event.get('requestId', ''), failed=False)
		except Exception as e:
			self.logger.debug(f'[CDPNetworkAdapter] Error in _on_loading_finished: {e}')

	async def _on_loading_failed(self, event: 'LoadingFailedEvent', session_id: 'SessionID | None') -> None:
		try:
			if self._is_own_session(session_id):
				await self._finish_request(event.get('requestId', ''), failed=True)
		except Exception as e:
			self.logger.debug(f'[CDPNetworkAdapter] Error in _on_loading_failed: {e}')

	async def _on_dom_content_loaded(self, event: 'DomContentEventFiredEvent', session_id: 'SessionID | None') -> None:
		if self._is_own_session(session_id) and self.environment.dom_content_loaded_end is None:
			self.environment.mark_dom_content_loaded(self._to_epoch_ms(event.get('timestamp')))

	async def _on_lifecycle_event(self, event: 'LifecycleEventEvent', session_id: 'SessionID | None') -> None:
		if not self._is_own_session(session_id):
			return
		if event.get('name') == 'firstPaint' and self.environment.first_paint is None:
			self.environment.mark_first_paint(self._to_epoch_ms(event.get('timestamp')))

	async def _on_page_load_complete(self, event: 'LoadEventFiredEvent', session_id: 'SessionID | None') -> None:
		try:
			if not self._is_own_session(session_id):
				return
			self.environment.mark_loaded()
			await self.event_bus.dispatch(PageLoadedEvent())
		except Exception as e:
			self.logger.debug(f'[CDPNetworkAdapter] Error in _on_page_load_complete: {e}')
