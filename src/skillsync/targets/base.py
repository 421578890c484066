"""Base class shared by every distribution target."""

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from ..errors import OutputRootError
from ..resolver import SkillReference

logger = logging.getLogger(__name__)


@dataclass
class TargetResult:
	"""What materializing one skill produced."""
	destination: Path
	files: int = 0
	bytes_written: int = 0
	links: int = 0


class DistributionTarget(ABC):
	"""
	An output form for skills.

	Each skill is written to its own destination under output_root, so
	materializing two different skills never touches the same path.
	"""

	#: Short human label, e.g. "sync (copy)"
	label: str = ""
	#: Status tag printed for each materialized skill
	verb: str = "DONE"
	dry_run: bool = False

	def __init__(self, output_root: Path | str):
		self.output_root = Path(os.path.abspath(output_root))

	def prepare(self) -> None:
		"""Create the output root. Failure here is fatal for the whole run."""
		try:
			self.output_root.mkdir(parents=True, exist_ok=True)
		except OSError as e:
			raise OutputRootError(self.output_root, e) from e
		logger.debug(f"Output root ready: {self.output_root}")

	@abstractmethod
	def destination(self, ref: SkillReference) -> Path:
		"""Path the artifact for ref is written to."""

	@abstractmethod
	def materialize(self, ref: SkillReference) -> TargetResult:
		"""Write the artifact for ref, replacing any previous one."""
