"""Configuration system using platformdirs for cross-platform paths."""

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import platformdirs

from .errors import ConfigError
from .resolver import ResolutionMode

logger = logging.getLogger(__name__)

APP_NAME = "skillsync"
APP_AUTHOR = "skillsync"


@dataclass
class Config:
	"""Defaults for every run, overridable by config.toml, env vars and CLI flags."""

	config_dir: Path = field(default_factory=lambda: Path(platformdirs.user_config_dir(APP_NAME, APP_AUTHOR)))

	# Derived paths
	config_file: Path = field(init=False)

	# User-configurable
	marketplace: Path = field(default_factory=lambda: Path(".claude-plugin") / "marketplace.json")
	plugins_dir: Path = field(default_factory=lambda: Path("."))
	sync_output: Path = field(default_factory=lambda: Path.home() / ".codex" / "skills")
	project_output: Path = field(default_factory=lambda: Path(".codex") / "skills")
	package_output: Optional[Path] = None
	resolution: ResolutionMode = ResolutionMode.MANIFEST
	prefix: bool = False
	strict: bool = False
	jobs: int = 1
	log_file: Optional[Path] = None

	def __post_init__(self) -> None:
		self.config_file = self.config_dir / "config.toml"


PATH_FIELDS = {"marketplace", "plugins_dir", "sync_output", "project_output", "package_output", "log_file"}
BOOL_FIELDS = {"prefix", "strict"}


def _set_value(config: Config, key: str, val: object, origin: str) -> None:
	"""Coerce and assign one user-supplied setting."""
	if key in PATH_FIELDS:
		if not isinstance(val, str):
			raise ConfigError(f"{origin}: '{key}' must be a path string", config.config_file)
		setattr(config, key, Path(os.path.expanduser(val)))
	elif key in BOOL_FIELDS:
		if isinstance(val, str):
			lowered = val.strip().lower()
			if lowered in ("1", "true", "yes", "on"):
				val = True
			elif lowered in ("0", "false", "no", "off"):
				val = False
		if not isinstance(val, bool):
			raise ConfigError(f"{origin}: '{key}' must be true or false", config.config_file)
		setattr(config, key, val)
	elif key == "jobs":
		try:
			jobs = int(val)
		except (TypeError, ValueError):
			raise ConfigError(f"{origin}: 'jobs' must be an integer", config.config_file) from None
		if jobs < 1:
			raise ConfigError(f"{origin}: 'jobs' must be at least 1", config.config_file)
		config.jobs = jobs
	elif key == "resolution":
		try:
			config.resolution = ResolutionMode(val)
		except ValueError:
			choices = ", ".join(m.value for m in ResolutionMode)
			raise ConfigError(f"{origin}: 'resolution' must be one of {choices}", config.config_file) from None
	else:
		logger.warning(f"{origin}: ignoring unknown setting '{key}'")


def _apply_toml(config: Config) -> Config:
	"""Apply config.toml overrides if file exists."""
	toml_path = config.config_file
	if not toml_path.exists():
		return config

	try:
		with open(toml_path, "rb") as f:
			data = tomllib.load(f)
	except (OSError, tomllib.TOMLDecodeError) as e:
		raise ConfigError(f"cannot load {toml_path}: {e}", toml_path) from e

	for key, val in data.items():
		_set_value(config, key, val, str(toml_path))
	logger.debug(f"Applied settings from {toml_path}")
	return config


ENV_MAP = {
	"SKILLSYNC_MARKETPLACE": "marketplace",
	"SKILLSYNC_PLUGINS_DIR": "plugins_dir",
	"SKILLSYNC_OUTPUT": "sync_output",
	"SKILLSYNC_PACKAGE_OUTPUT": "package_output",
	"SKILLSYNC_RESOLUTION": "resolution",
	"SKILLSYNC_JOBS": "jobs",
	"SKILLSYNC_LOG_FILE": "log_file",
}


def _apply_env_overrides(config: Config) -> Config:
	"""Apply SKILLSYNC_* environment variable overrides."""
	for env_key, attr in ENV_MAP.items():
		val = os.getenv(env_key)
		if val:
			_set_value(config, attr, val, env_key)
	return config


def load_config() -> Config:
	"""Load config with precedence: env vars > config.toml > defaults."""
	config_dir = os.getenv("SKILLSYNC_CONFIG_DIR")
	config = Config(config_dir=Path(config_dir)) if config_dir else Config()
	config = _apply_toml(config)
	config = _apply_env_overrides(config)
	return config
