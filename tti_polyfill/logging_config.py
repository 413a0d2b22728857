import logging
import sys

from tti_polyfill.config import CONFIG


class TTIPolyfillFormatter(logging.Formatter):
	def format(self, record: logging.LogRecord) -> str:
		# tti_polyfill.scheduler.service -> scheduler
		original_name = record.name
		if isinstance(record.name, str) and record.name.startswith('tti_polyfill.'):
			parts = record.name.split('.')
			record.name = parts[-2] if len(parts) > 2 else parts[-1]
		try:
			return super().format(record)
		finally:
			record.name = original_name


def setup_logging(stream=None, log_level: str | None = None, force_setup: bool = False) -> logging.Logger:
	"""Configure console logging for tti_polyfill.

	Args:
		stream: Output stream for the console handler (defaults to sys.stdout)
		log_level: Overrides TTI_POLYFILL_LOGGING_LEVEL when given
		force_setup: Replace existing root handlers even if logging is already configured

	Returns:
		The package logger
	"""
	log_type = log_level or CONFIG.TTI_POLYFILL_LOGGING_LEVEL

	package_logger = logging.getLogger('tti_polyfill')

	# Respect an application that already configured logging
	if logging.getLogger().hasHandlers() and not force_setup:
		return package_logger

	root = logging.getLogger()
	root.handlers = []

	console = logging.StreamHandler(stream or sys.stdout)
	console.setFormatter(TTIPolyfillFormatter('%(levelname)-8s [%(name)s] %(message)s'))

	root.addHandler(console)

	if log_type == 'debug':
		root.setLevel(logging.DEBUG)
		package_logger.setLevel(logging.DEBUG)
	elif log_type == 'warning':
		root.setLevel(logging.WARNING)
		package_logger.setLevel(logging.WARNING)
	else:
		root.setLevel(logging.INFO)
		package_logger.setLevel(logging.INFO)

	# Third-party loggers stay quiet unless something goes wrong
	for name in ('bubus', 'cdp_use', 'websockets'):
		third_party = logging.getLogger(name)
		third_party.setLevel(logging.ERROR)
		third_party.propagate = False

	package_logger.debug(f'Logging configured (level={log_type})')
	return package_logger
