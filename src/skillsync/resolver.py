"""
Skill Path Resolver - turns a manifest skill entry into a SkillReference.

Two resolution conventions exist for manifest skill paths:

- MANIFEST: the entry is a path relative to the working directory
  (e.g. "./plugins/core/skills/commit-messages").
- PLUGIN: only the entry's last segment is used, recombined as
  "<plugins_dir>/<plugin.source>/skills/<name>". This tolerates manifests
  written against a different directory layout than the plugin tree.

One mode is used for a whole run. Both real runs and dry runs go through
check_skill_dir(), so a dry run can never disagree with a real run about
which skills resolve.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .errors import InvalidOutputNameError, SkillMetadataMissingError, SkillNotFoundError
from .manifest import Plugin

logger = logging.getLogger(__name__)

SKILL_FILENAME = "SKILL.md"


class ResolutionMode(str, Enum):
	"""How a manifest skill entry maps to a source directory."""
	MANIFEST = "manifest"
	PLUGIN = "plugin"


@dataclass(frozen=True)
class SkillReference:
	"""A resolved, validated skill ready to be materialized."""
	plugin_name: str
	raw_path: str
	skill_name: str
	source_dir: Path
	output_name: str


def skill_name_from_path(raw_path: str) -> str:
	"""Return the last segment of a manifest skill path, or '' if there is none."""
	segments = raw_path.replace("\\", "/").rstrip("/").split("/")
	name = segments[-1]
	if name in (".", ".."):
		return ""
	return name


def output_name_for(plugin_name: str, skill_name: str, prefix: bool) -> str:
	"""Name of the produced directory or archive for a skill."""
	if prefix:
		return f"{plugin_name}-{skill_name}"
	return skill_name


def is_safe_output_name(name: str) -> bool:
	"""True if name is a single path segment that stays inside the output root."""
	if name in ("", ".", ".."):
		return False
	return "/" not in name and "\\" not in name and "\0" not in name


def source_dir_for(
	plugin: Plugin,
	raw_path: str,
	mode: ResolutionMode,
	plugins_dir: Optional[Path] = None,
) -> Path:
	"""
	Compute the absolute source directory for a skill entry.

	Paths are made absolute and normalized but symlinks are not resolved, so
	a symlinked sync points at the path the manifest names.
	"""
	base = Path(plugins_dir) if plugins_dir else Path.cwd()
	if mode == ResolutionMode.MANIFEST:
		return Path(os.path.abspath(raw_path))
	skill_name = skill_name_from_path(raw_path)
	return Path(os.path.abspath(base / plugin.source / "skills" / skill_name))


def check_skill_dir(source_dir: Path) -> None:
	"""
	Verify that source_dir is a directory containing a SKILL.md file.

	Raises:
		SkillNotFoundError: source_dir is missing or not a directory
		SkillMetadataMissingError: SKILL.md is missing or not a regular file
	"""
	if not source_dir.is_dir():
		raise SkillNotFoundError(source_dir)
	if not (source_dir / SKILL_FILENAME).is_file():
		raise SkillMetadataMissingError(source_dir)


def resolve_skill(
	plugin: Plugin,
	raw_path: str,
	mode: ResolutionMode = ResolutionMode.MANIFEST,
	plugins_dir: Optional[Path] = None,
	prefix: bool = False,
) -> SkillReference:
	"""
	Resolve one skill entry of a plugin.

	Args:
		plugin: The owning plugin
		raw_path: The skill path as written in the manifest
		mode: Resolution convention for this run
		plugins_dir: Base directory for PLUGIN mode (default: cwd)
		prefix: Prefix the output name with the plugin name

	Returns:
		A SkillReference whose source_dir exists and holds SKILL.md

	Raises:
		InvalidOutputNameError: the output name is not a single path segment
	"""
	skill_name = skill_name_from_path(raw_path)
	if not skill_name:
		raise SkillNotFoundError(Path(os.path.abspath(raw_path or ".")))

	source_dir = source_dir_for(plugin, raw_path, mode, plugins_dir)
	output_name = output_name_for(plugin.name, skill_name, prefix)
	if not is_safe_output_name(output_name):
		raise InvalidOutputNameError(output_name, source_dir)
	check_skill_dir(source_dir)

	ref = SkillReference(
		plugin_name=plugin.name,
		raw_path=raw_path,
		skill_name=skill_name,
		source_dir=source_dir,
		output_name=output_name,
	)
	logger.debug(f"Resolved {plugin.name}:{raw_path} -> {source_dir} as '{ref.output_name}'")
	return ref
