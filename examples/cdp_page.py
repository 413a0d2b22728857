"""
Measure first consistently interactive for a real page over the Chrome DevTools Protocol.

Setup:
1. Start Chrome with remote debugging: google-chrome --remote-debugging-port=9222
2. Set CDP_URL to the browser websocket URL shown at http://localhost:9222/json/version
"""

import asyncio
import os

from bubus import EventBus
from cdp_use import CDPClient
from dotenv import load_dotenv

load_dotenv()

from tti_polyfill import CDPNetworkAdapter, FirstConsistentlyInteractiveDetector, PageEnvironment


async def main(url: str = 'https://example.com'):
	cdp_url = os.getenv('CDP_URL')
	if not cdp_url:
		raise SystemExit('CDP_URL is not set')

	client = CDPClient(cdp_url)
	await client.start()

	try:
		target = await client.send.Target.createTarget(params={'url': 'about:blank'})
		attached = await client.send.Target.attachToTarget(params={'targetId': target['targetId'], 'flatten': True})
		session_id = attached['sessionId']

		event_bus = EventBus()
		environment = PageEnvironment()
		adapter = CDPNetworkAdapter(event_bus=event_bus, environment=environment, cdp_client=client, session_id=session_id)
		detector = FirstConsistentlyInteractiveDetector(event_bus=event_bus, environment=environment)
		detector.attach_to_bus()
		await adapter.start()

		waiter = detector.wait_for_interactive()
		await client.send.Page.navigate(params={'url': url}, session_id=session_id)

		fci = await asyncio.wait_for(waiter, timeout=120)
		print(f'{url}: first consistently interactive at {fci:.0f}ms')

		await event_bus.stop()
	finally:
		await client.stop()


if __name__ == '__main__':
	asyncio.run(main())
