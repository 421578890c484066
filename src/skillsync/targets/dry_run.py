"""Dry-run target - validates skills without touching the filesystem."""

import logging
from pathlib import Path

from ..resolver import SkillReference, check_skill_dir
from .base import DistributionTarget, TargetResult

logger = logging.getLogger(__name__)


class DryRunTarget(DistributionTarget):
	"""
	Wraps the target a real run would use.

	Only the resolver's existence checks run; destinations are computed by
	the wrapped target so the preview names exactly what a real run writes.
	"""

	dry_run = True

	def __init__(self, inner: DistributionTarget):
		super().__init__(inner.output_root)
		self.inner = inner
		self.label = f"{inner.label}, dry run"
		self.verb = "DRY RUN"

	def prepare(self) -> None:
		logger.debug(f"Dry run: would create {self.output_root}")

	def destination(self, ref: SkillReference) -> Path:
		return self.inner.destination(ref)

	def materialize(self, ref: SkillReference) -> TargetResult:
		check_skill_dir(ref.source_dir)
		return TargetResult(destination=self.destination(ref))
