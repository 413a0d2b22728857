"""Configuration for tti_polyfill, read from the environment on every access."""

import os

from dotenv import load_dotenv

load_dotenv()


def _parse_bool(value: str) -> bool:
	return value.lower()[:1] in 'ty1'


class Config:
	"""Lazily evaluated settings, so changes to os.environ are picked up by tests."""

	@property
	def TTI_POLYFILL_LOGGING_LEVEL(self) -> str:
		return os.getenv('TTI_POLYFILL_LOGGING_LEVEL', 'info').lower()

	@property
	def TTI_POLYFILL_SETUP_LOGGING(self) -> bool:
		return _parse_bool(os.getenv('TTI_POLYFILL_SETUP_LOGGING', 'true'))

	@property
	def TTI_POLYFILL_RETRY_INTERVAL_MS(self) -> float:
		return float(os.getenv('TTI_POLYFILL_RETRY_INTERVAL_MS', '1000'))

	@property
	def TTI_POLYFILL_QUIET_WINDOW_MS(self) -> float:
		return float(os.getenv('TTI_POLYFILL_QUIET_WINDOW_MS', '5000'))

	@property
	def TTI_POLYFILL_MAX_CHECKS(self) -> int | None:
		value = os.getenv('TTI_POLYFILL_MAX_CHECKS', '').strip()
		if not value:
			return None
		return int(value)


CONFIG = Config()
