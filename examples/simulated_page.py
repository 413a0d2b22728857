"""
Simulate a page load and print its first consistently interactive time.

Shortens the quiet window so the demo finishes in about a second:
	python examples/simulated_page.py
"""

import asyncio

from bubus import EventBus
from dotenv import load_dotenv

load_dotenv()

from tti_polyfill import (
	DetectorConfig,
	FirstConsistentlyInteractiveDetector,
	PageEnvironment,
	PageLoadedEvent,
	RequestFinishedEvent,
	RequestStartedEvent,
)


async def main():
	event_bus = EventBus()
	environment = PageEnvironment()
	detector = FirstConsistentlyInteractiveDetector(
		event_bus=event_bus,
		environment=environment,
		config=DetectorConfig(quiet_window_ms=500, retry_interval_ms=100),
	)
	detector.attach_to_bus()

	waiter = detector.wait_for_interactive()

	await asyncio.sleep(0.05)
	environment.mark_dom_content_loaded()
	environment.mark_first_paint()

	# A burst of four API calls keeps the network busy for a while
	for i in range(4):
		await event_bus.dispatch(RequestStartedEvent(request_id=f'api-{i}', url=f'https://example.com/api/{i}'))
	await event_bus.dispatch(PageLoadedEvent())

	for i in range(4):
		await asyncio.sleep(0.1)
		await event_bus.dispatch(RequestFinishedEvent(request_id=f'api-{i}'))

	fci = await waiter
	print(f'First consistently interactive: {fci:.0f}ms after navigation start')
	print(f'Detected at {environment.now():.0f}ms after {detector.scheduler.check_count} checks')

	await event_bus.stop()


if __name__ == '__main__':
	asyncio.run(main())
