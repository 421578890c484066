"""
Archive target - one zip per skill for web upload.

Every entry is stored under "<output_name>/", so extracting an archive
anywhere yields a single folder named after the skill. Archives are built in
a temporary file and renamed into place, so a failed build never leaves a
truncated zip where a valid one is expected.
"""

import logging
import os
import tempfile
import zipfile
from pathlib import Path

from ..errors import PackageIOError
from ..resolver import SkillReference
from .base import DistributionTarget, TargetResult
from .walk import iter_skill_tree

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIX = ".zip"


class ArchiveTarget(DistributionTarget):
	"""Package skills as <output_root>/<output_name>.zip."""

	label = "package (zip)"
	verb = "PACKAGED"

	def destination(self, ref: SkillReference) -> Path:
		return self.output_root / f"{ref.output_name}{ARCHIVE_SUFFIX}"

	def materialize(self, ref: SkillReference) -> TargetResult:
		zip_path = self.destination(ref)
		try:
			fd, tmp_name = tempfile.mkstemp(
				prefix=f".{ref.output_name}-", suffix=".tmp", dir=self.output_root,
			)
		except OSError as e:
			raise PackageIOError(zip_path, e) from e

		tmp_path = Path(tmp_name)
		result = TargetResult(destination=zip_path)
		current = ref.source_dir
		try:
			with os.fdopen(fd, "wb") as fh:
				with zipfile.ZipFile(fh, "w", compression=zipfile.ZIP_DEFLATED, strict_timestamps=False) as zf:
					for entry in iter_skill_tree(ref.source_dir):
						if entry.is_dir:
							continue
						current = entry.path
						arcname = f"{ref.output_name}/{entry.relative.as_posix()}"
						zf.write(entry.path, arcname)
						result.files += 1
						logger.debug(f"Added {arcname}")
			os.chmod(tmp_path, 0o644)
			os.replace(tmp_path, zip_path)
			result.bytes_written = zip_path.stat().st_size
		except OSError as e:
			raise PackageIOError(Path(e.filename) if e.filename else current, e) from e
		except ValueError as e:
			# zip entry names must encode as UTF-8
			raise PackageIOError(current, e) from e
		finally:
			tmp_path.unlink(missing_ok=True)
		return result
