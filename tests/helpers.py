"""Shared test fixtures and helpers for skillsync tests."""

import io
import json
import os
from pathlib import Path

import pytest
from rich.console import Console

from skillsync.reporter import Reporter
from skillsync.targets.walk import iter_skill_tree


def make_skill(root: Path, files: dict[str, str] | None = None, with_skill_md: bool = True) -> Path:
	"""Create a skill directory with SKILL.md plus the given supporting files."""
	root.mkdir(parents=True, exist_ok=True)
	if with_skill_md:
		(root / "SKILL.md").write_text(f"---\nname: {root.name}\n---\n\n# {root.name}\n")
	for rel, content in (files or {}).items():
		path = root / rel
		path.parent.mkdir(parents=True, exist_ok=True)
		path.write_text(content)
	return root


def write_manifest(path: Path, plugins: list[dict], name: str = "test-marketplace") -> Path:
	"""Write a marketplace.json with the given plugin entries."""
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(json.dumps({
		"name": name,
		"owner": {"name": "Test", "email": "test@test.com", "url": "https://example.com"},
		"plugins": plugins,
	}))
	return path


def capture_reporter(verbose: bool = False) -> tuple[Reporter, io.StringIO]:
	"""A Reporter writing plain text to a buffer."""
	buffer = io.StringIO()
	console = Console(file=buffer, width=200, color_system=None, highlight=False)
	return Reporter(console=console, verbose=verbose), buffer


def regular_files(root: Path) -> dict[str, bytes]:
	"""Map of posix relative path -> bytes for every regular file under root."""
	return {
		p.relative_to(root).as_posix(): p.read_bytes()
		for p in sorted(root.rglob("*"))
		if p.is_file()
	}


def count_skill_files(root: Path) -> int:
	"""Number of regular files a copy or archive of root would contain."""
	return sum(1 for e in iter_skill_tree(root) if not e.is_dir)


UNDECODABLE_NAME = b"caf\xe9.txt"


def make_undecodable_file(directory: Path) -> Path:
	"""Create a file whose name is not valid UTF-8, or skip if the filesystem refuses it."""
	raw = os.path.join(os.fsencode(directory), UNDECODABLE_NAME)
	try:
		with open(raw, "wb") as fh:
			fh.write(b"latin-1 name")
	except OSError:
		pytest.skip("filesystem rejects non-UTF-8 file names")
	return directory / os.fsdecode(UNDECODABLE_NAME)
