"""Centralized logging configuration for skillsync."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOGGER_NAME = "skillsync"


def setup_logging(verbose: bool = False, log_file: Optional[Path] = None) -> logging.Logger:
	"""
	Set up logging with a console handler and an optional file handler.

	Args:
		verbose: Show DEBUG output on the console (default: warnings only)
		log_file: Also write DEBUG-level logs to this rotating file

	Returns:
		The configured package logger
	"""
	logger = logging.getLogger(LOGGER_NAME)
	logger.setLevel(logging.DEBUG)
	logger.propagate = False

	# Reconfiguring replaces the previous handlers
	for handler in list(logger.handlers):
		logger.removeHandler(handler)
		handler.close()

	console_handler = logging.StreamHandler(sys.stderr)
	console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
	console_handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
	logger.addHandler(console_handler)

	if log_file:
		log_path = Path(log_file)
		log_path.parent.mkdir(parents=True, exist_ok=True)
		file_handler = RotatingFileHandler(
			log_path,
			maxBytes=5 * 1024 * 1024,  # 5 MB
			backupCount=3,
		)
		file_handler.setLevel(logging.DEBUG)
		file_handler.setFormatter(logging.Formatter(
			"%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s",
			datefmt="%Y-%m-%d %H:%M:%S",
		))
		logger.addHandler(file_handler)

	return logger
