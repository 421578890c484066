"""Distribution targets - the output forms a skill can be materialized into."""

from .archive import ArchiveTarget
from .base import DistributionTarget, TargetResult
from .dry_run import DryRunTarget
from .filesystem import FilesystemTarget, SyncMode

__all__ = [
	"ArchiveTarget",
	"DistributionTarget",
	"DryRunTarget",
	"FilesystemTarget",
	"SyncMode",
	"TargetResult",
]
