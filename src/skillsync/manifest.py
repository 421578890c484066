"""
Manifest models - Pydantic schemas for the plugin marketplace manifest.

The manifest lists plugins in processing order, each with the relative
paths of the skill directories it owns. Keys the models do not declare are
ignored so the manifest format can grow without breaking older tools.
"""

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from .errors import ManifestParseError, ManifestReadError

logger = logging.getLogger(__name__)


class Owner(BaseModel):
	"""Marketplace owner contact details."""
	name: str = Field(default="")
	email: str = Field(default="")
	url: str = Field(default="")


class Plugin(BaseModel):
	"""A named group of skills sharing a source root."""
	name: str = Field(description="Plugin name, used as the prefix when prefixing is enabled")
	source: str = Field(default="", description="Base path the plugin is rooted at")
	description: str = Field(default="")
	skills: list[str] = Field(default_factory=list, description="Relative skill directory paths")


class Manifest(BaseModel):
	"""The marketplace manifest: an ordered list of plugins."""
	name: str = Field(default="")
	owner: Owner = Field(default_factory=Owner)
	plugins: list[Plugin] = Field(default_factory=list)

	@property
	def skill_count(self) -> int:
		"""Total number of skill entries across all plugins."""
		return sum(len(p.skills) for p in self.plugins)


def _format_validation_error(exc: ValidationError) -> str:
	"""Render the first few pydantic errors as 'loc: msg' pairs."""
	parts = []
	for err in exc.errors()[:3]:
		loc = ".".join(str(p) for p in err["loc"]) or "<root>"
		parts.append(f"{loc}: {err['msg']}")
	more = len(exc.errors()) - len(parts)
	if more > 0:
		parts.append(f"(+{more} more)")
	return "; ".join(parts)


def load_manifest(path: Path | str) -> Manifest:
	"""
	Read and parse a marketplace manifest.

	Args:
		path: Path to the JSON manifest

	Returns:
		The parsed Manifest

	Raises:
		ManifestReadError: the file cannot be read
		ManifestParseError: the JSON is malformed or has the wrong shape
	"""
	path = Path(path)
	try:
		text = path.read_text(encoding="utf-8")
	except OSError as e:
		raise ManifestReadError(path, e) from e
	except UnicodeDecodeError as e:
		raise ManifestParseError(path, f"not valid UTF-8 ({e.reason})") from e

	try:
		data = json.loads(text)
	except json.JSONDecodeError as e:
		raise ManifestParseError(path, f"line {e.lineno} column {e.colno}: {e.msg}") from e

	if not isinstance(data, dict):
		raise ManifestParseError(path, f"expected a JSON object, got {type(data).__name__}")

	try:
		manifest = Manifest.model_validate(data)
	except ValidationError as e:
		raise ManifestParseError(path, _format_validation_error(e)) from e

	logger.debug(f"Loaded manifest '{manifest.name}' with {len(manifest.plugins)} plugins from {path}")
	return manifest
