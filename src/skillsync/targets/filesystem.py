"""
Filesystem sync target - mirrors skill directories into an output root.

Every sync deletes the previous destination first and rebuilds it from
scratch, so the result never mixes old and new files.
"""

import logging
import os
import shutil
import stat
from enum import Enum
from pathlib import Path

from ..errors import SyncIOError
from ..resolver import SkillReference
from .base import DistributionTarget, TargetResult
from .walk import iter_skill_tree

logger = logging.getLogger(__name__)


class SyncMode(str, Enum):
	"""How a skill directory is replicated."""
	COPY = "copy"
	SYMLINK = "symlink"


def _make_owner_writable(path: str | Path) -> None:
	mode = stat.S_IMODE(os.lstat(path).st_mode)
	if mode & stat.S_IRWXU != stat.S_IRWXU:
		os.chmod(path, mode | stat.S_IRWXU)


def remove_tree(path: Path) -> None:
	"""
	Delete a directory tree, including copies of read-only directories.

	Each directory is made owner-writable before it is entered, which rmtree
	needs to unlink its children. Symlinks inside the tree are never followed.
	"""
	_make_owner_writable(path)
	for root, dirs, _ in os.walk(path):
		for d in dirs:
			child = os.path.join(root, d)
			if not os.path.islink(child):
				_make_owner_writable(child)
	shutil.rmtree(path)


def remove_existing(path: Path) -> None:
	"""Remove a file, directory tree or symlink (broken or not) at path."""
	if path.is_symlink() or path.is_file():
		path.unlink()
	elif path.is_dir():
		remove_tree(path)
	elif os.path.lexists(path):
		path.unlink()


class FilesystemTarget(DistributionTarget):
	"""Sync skills to <output_root>/<output_name>/ by copy or symlink."""

	verb = "SYNCED"

	def __init__(self, output_root: Path | str, mode: SyncMode = SyncMode.SYMLINK):
		super().__init__(output_root)
		self.mode = SyncMode(mode)
		self.label = f"sync ({self.mode.value})"

	def destination(self, ref: SkillReference) -> Path:
		return self.output_root / ref.output_name

	def materialize(self, ref: SkillReference) -> TargetResult:
		dst_dir = self.destination(ref)
		try:
			remove_existing(dst_dir)
		except OSError as e:
			raise SyncIOError(Path(e.filename) if e.filename else dst_dir, e) from e

		if self.mode == SyncMode.SYMLINK:
			return self._link(ref, dst_dir)
		return self._copy(ref, dst_dir)

	def _link(self, ref: SkillReference, dst_dir: Path) -> TargetResult:
		try:
			dst_dir.parent.mkdir(parents=True, exist_ok=True)
			os.symlink(ref.source_dir, dst_dir, target_is_directory=True)
		except OSError as e:
			raise SyncIOError(dst_dir, e) from e
		logger.debug(f"Linked {dst_dir} -> {ref.source_dir}")
		return TargetResult(destination=dst_dir, links=1)

	def _copy(self, ref: SkillReference, dst_dir: Path) -> TargetResult:
		result = TargetResult(destination=dst_dir)
		# Directory modes are applied last so read-only source dirs can still be filled.
		dir_modes: list[tuple[Path, int]] = []
		current = ref.source_dir
		try:
			dst_dir.mkdir(parents=True)
			dir_modes.append((dst_dir, stat.S_IMODE(ref.source_dir.stat().st_mode)))
			for entry in iter_skill_tree(ref.source_dir):
				current = entry.path
				target = dst_dir / entry.relative
				if entry.is_dir:
					target.mkdir(exist_ok=True)
					dir_modes.append((target, stat.S_IMODE(entry.path.stat().st_mode)))
					continue
				shutil.copyfile(entry.path, target)
				shutil.copymode(entry.path, target)
				result.files += 1
				result.bytes_written += target.stat().st_size
				logger.debug(f"Copied {entry.relative}")
			for path, mode in reversed(dir_modes):
				os.chmod(path, mode)
		except OSError as e:
			self._discard_partial(dst_dir)
			raise SyncIOError(Path(e.filename) if e.filename else current, e) from e
		return result

	@staticmethod
	def _discard_partial(dst_dir: Path) -> None:
		try:
			if os.path.lexists(dst_dir):
				remove_tree(dst_dir)
		except OSError as e:
			logger.warning(f"Could not remove partial copy at {dst_dir}: {e}")
