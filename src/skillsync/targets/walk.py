"""Deterministic depth-first walk over a skill directory."""

import errno
import logging
import os
from pathlib import Path
from typing import Iterator, NamedTuple

logger = logging.getLogger(__name__)


class SkillEntry(NamedTuple):
	"""One file or directory inside a skill tree."""
	path: Path
	relative: Path
	is_dir: bool


def iter_skill_tree(root: Path) -> Iterator[SkillEntry]:
	"""
	Yield every directory and regular file under root, sorted by name.

	Symlinks are followed: a link to a file is reported as that file, a link
	to a directory is descended into. A directory link pointing back at one
	of its own ancestors is skipped so the walk always terminates. A dangling
	link raises FileNotFoundError.
	"""
	yield from _walk(Path(root), Path(), frozenset({os.path.realpath(root)}))


def _walk(directory: Path, relative: Path, ancestors: frozenset[str]) -> Iterator[SkillEntry]:
	with os.scandir(directory) as it:
		entries = sorted(it, key=lambda e: e.name)

	for entry in entries:
		path = Path(entry.path)
		entry_rel = relative / entry.name
		if entry.is_dir():
			real = os.path.realpath(path)
			if real in ancestors:
				logger.warning(f"Skipping {path}: symlink loop back to {real}")
				continue
			yield SkillEntry(path, entry_rel, True)
			yield from _walk(path, entry_rel, ancestors | {real})
		elif entry.is_file():
			yield SkillEntry(path, entry_rel, False)
		elif entry.is_symlink():
			raise FileNotFoundError(errno.ENOENT, "dangling symlink", str(path))
		else:
			logger.debug(f"Skipping special file {path}")
