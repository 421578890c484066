"""Tests for skill path resolution."""

from pathlib import Path

import pytest

from skillsync.errors import InvalidOutputNameError, SkillMetadataMissingError, SkillNotFoundError
from skillsync.manifest import Plugin
from skillsync.resolver import (
	ResolutionMode,
	check_skill_dir,
	is_safe_output_name,
	output_name_for,
	resolve_skill,
	skill_name_from_path,
)
from tests.helpers import make_skill


class TestSkillName:
	"""Tests for extracting the skill name from a manifest path."""

	def test_last_segment(self):
		assert skill_name_from_path("./plugins/core/skills/commit-messages") == "commit-messages"

	def test_trailing_slash(self):
		assert skill_name_from_path("./skills/react/") == "react"

	def test_backslashes(self):
		assert skill_name_from_path(".\\skills\\react") == "react"

	def test_bare_name(self):
		assert skill_name_from_path("react") == "react"

	def test_dot_segments_have_no_name(self):
		assert skill_name_from_path(".") == ""
		assert skill_name_from_path("./skills/..") == ""
		assert skill_name_from_path("") == ""


def test_output_name_prefixing():
	assert output_name_for("core", "commit-messages", prefix=False) == "commit-messages"
	assert output_name_for("core", "commit-messages", prefix=True) == "core-commit-messages"


class TestManifestMode:
	"""Skill paths resolved against the working directory."""

	def test_resolves_relative_to_cwd(self, tmp_path: Path, monkeypatch):
		make_skill(tmp_path / "plugins" / "core" / "skills" / "commit-messages")
		monkeypatch.chdir(tmp_path)
		plugin = Plugin(name="core", source="./plugins/core")

		ref = resolve_skill(plugin, "./plugins/core/skills/commit-messages", mode=ResolutionMode.MANIFEST)

		assert ref.source_dir == tmp_path / "plugins" / "core" / "skills" / "commit-messages"
		assert ref.source_dir.is_absolute()
		assert ref.skill_name == "commit-messages"
		assert ref.output_name == "commit-messages"
		assert ref.plugin_name == "core"

	def test_ignores_plugin_source(self, tmp_path: Path, monkeypatch):
		"""A path written for the plugin layout does not resolve in manifest mode."""
		make_skill(tmp_path / "plugins" / "core" / "skills" / "commit-messages")
		monkeypatch.chdir(tmp_path)
		plugin = Plugin(name="core", source="./plugins/core")

		with pytest.raises(SkillNotFoundError):
			resolve_skill(plugin, "./skills/commit-messages", mode=ResolutionMode.MANIFEST)


class TestPluginMode:
	"""Skill names recombined as <plugins_dir>/<source>/skills/<name>."""

	def test_recombines_with_plugin_source(self, tmp_path: Path, monkeypatch):
		make_skill(tmp_path / "plugins" / "core" / "skills" / "commit-messages")
		monkeypatch.chdir(tmp_path)
		plugin = Plugin(name="core", source="./plugins/core")

		ref = resolve_skill(plugin, "./skills/commit-messages", mode=ResolutionMode.PLUGIN)
		assert ref.source_dir == tmp_path / "plugins" / "core" / "skills" / "commit-messages"

	def test_ignores_other_segments(self, tmp_path: Path):
		make_skill(tmp_path / "core" / "skills" / "react")
		plugin = Plugin(name="core", source="core")

		ref = resolve_skill(
			plugin, "./somewhere/else/react", mode=ResolutionMode.PLUGIN, plugins_dir=tmp_path,
		)
		assert ref.source_dir == tmp_path / "core" / "skills" / "react"

	def test_absolute_source_ignores_plugins_dir(self, tmp_path: Path):
		make_skill(tmp_path / "abs" / "skills" / "react")
		plugin = Plugin(name="web", source=str(tmp_path / "abs"))

		ref = resolve_skill(
			plugin, "react", mode=ResolutionMode.PLUGIN, plugins_dir=tmp_path / "unused",
		)
		assert ref.source_dir == tmp_path / "abs" / "skills" / "react"


def test_prefix_applied_to_output_name(tmp_path: Path):
	make_skill(tmp_path / "core" / "skills" / "react")
	plugin = Plugin(name="web", source="core")

	ref = resolve_skill(plugin, "react", mode=ResolutionMode.PLUGIN, plugins_dir=tmp_path, prefix=True)
	assert ref.output_name == "web-react"
	assert ref.skill_name == "react"


def test_missing_directory(tmp_path: Path):
	plugin = Plugin(name="core")
	with pytest.raises(SkillNotFoundError) as exc_info:
		resolve_skill(plugin, str(tmp_path / "missing"))
	assert exc_info.value.path == tmp_path / "missing"


def test_missing_skill_md(tmp_path: Path):
	make_skill(tmp_path / "empty", {"notes.md": "x"}, with_skill_md=False)
	plugin = Plugin(name="core")
	with pytest.raises(SkillMetadataMissingError) as exc_info:
		resolve_skill(plugin, str(tmp_path / "empty"))
	assert exc_info.value.path == tmp_path / "empty"


def test_skill_md_must_be_a_file(tmp_path: Path):
	(tmp_path / "odd" / "SKILL.md").mkdir(parents=True)
	with pytest.raises(SkillMetadataMissingError):
		check_skill_dir(tmp_path / "odd")


def test_source_that_is_a_file(tmp_path: Path):
	(tmp_path / "file").write_text("x")
	with pytest.raises(SkillNotFoundError):
		check_skill_dir(tmp_path / "file")


def test_entry_without_name_is_rejected(tmp_path: Path, monkeypatch):
	"""'.' would otherwise resolve to the working directory itself."""
	make_skill(tmp_path)
	monkeypatch.chdir(tmp_path)
	with pytest.raises(SkillNotFoundError):
		resolve_skill(Plugin(name="core"), ".")


@pytest.mark.parametrize("plugin_name", ["../precious", "a/b", "a\\b"])
def test_prefixed_plugin_name_cannot_leave_output_root(tmp_path: Path, plugin_name: str):
	make_skill(tmp_path / "core" / "skills" / "react")
	plugin = Plugin(name=plugin_name, source="core")

	with pytest.raises(InvalidOutputNameError) as exc_info:
		resolve_skill(plugin, "react", mode=ResolutionMode.PLUGIN, plugins_dir=tmp_path, prefix=True)
	assert exc_info.value.name == f"{plugin_name}-react"


def test_unprefixed_plugin_name_is_not_validated(tmp_path: Path):
	make_skill(tmp_path / "core" / "skills" / "react")
	plugin = Plugin(name="../precious", source="core")

	ref = resolve_skill(plugin, "react", mode=ResolutionMode.PLUGIN, plugins_dir=tmp_path)
	assert ref.output_name == "react"


def test_safe_output_names():
	assert is_safe_output_name("core-react")
	assert is_safe_output_name("..react")
	assert not is_safe_output_name("..")
	assert not is_safe_output_name(".")
	assert not is_safe_output_name("")
	assert not is_safe_output_name("../x")
	assert not is_safe_output_name("a\\b")
