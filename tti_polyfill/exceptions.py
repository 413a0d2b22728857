class TTIPolyfillError(Exception):
	"""Base class for errors raised by tti_polyfill."""


class DoubleResolutionError(TTIPolyfillError):
	"""Raised when the interactive result is fulfilled a second time."""

	def __init__(self, existing: float, attempted: float):
		self.existing = existing
		self.attempted = attempted
		super().__init__(f'First consistently interactive already resolved to {existing}, refusing {attempted}')


class QuiescenceTimeoutError(TTIPolyfillError):
	"""Raised to waiters when the check budget runs out before the page went quiet."""

	def __init__(self, checks: int):
		self.checks = checks
		super().__init__(f'No quiescence window found after {checks} checks')
