"""
Error taxonomy for skillsync.

Manifest, configuration and output-root errors are fatal and abort the run.
SkillError subclasses are scoped to a single skill: the runner records them
and moves on to the next skill.
"""

from pathlib import Path
from typing import Optional


class SkillSyncError(Exception):
	"""Base class for all skillsync errors."""

	def __init__(self, message: str, path: Optional[Path] = None):
		super().__init__(message)
		self.path = path


class ConfigError(SkillSyncError):
	"""config.toml could not be read or parsed."""


class ManifestError(SkillSyncError):
	"""The marketplace manifest could not be used."""


class ManifestReadError(ManifestError):
	"""The manifest file could not be opened or read."""

	def __init__(self, path: Path, cause: OSError):
		super().__init__(f"cannot read manifest {path}: {cause.strerror or cause}", path)


class ManifestParseError(ManifestError):
	"""The manifest is not valid JSON or does not have the expected shape."""

	def __init__(self, path: Path, detail: str):
		super().__init__(f"invalid manifest {path}: {detail}", path)
		self.detail = detail


class OutputRootError(SkillSyncError):
	"""The output root could not be created."""

	def __init__(self, path: Path, cause: OSError):
		super().__init__(f"cannot create output directory {path}: {cause.strerror or cause}", path)


class SkillError(SkillSyncError):
	"""A failure confined to one skill."""


class SkillNotFoundError(SkillError):
	"""The resolved skill directory does not exist."""

	def __init__(self, path: Path):
		super().__init__(f"source directory does not exist: {path}", path)


class SkillMetadataMissingError(SkillError):
	"""The skill directory has no SKILL.md."""

	def __init__(self, path: Path):
		super().__init__(f"SKILL.md not found in {path}", path)


class InvalidOutputNameError(SkillError):
	"""The output name would not be a single entry inside the output root."""

	def __init__(self, name: str, path: Path):
		super().__init__(f"invalid output name '{name}' for {path}", path)
		self.name = name


class SyncIOError(SkillError):
	"""An I/O error while syncing a skill into a directory tree."""

	def __init__(self, path: Path, cause: OSError):
		super().__init__(f"sync failed at {path}: {cause.strerror or cause}", path)


class PackageIOError(SkillError):
	"""An I/O error while building a skill archive."""

	def __init__(self, path: Path, cause: Exception):
		super().__init__(f"packaging failed at {path}: {getattr(cause, 'strerror', None) or cause}", path)
