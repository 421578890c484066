"""
Run Orchestrator - drives every skill in a manifest through one target.

Plugins are processed in manifest order and skills in list order. A failure
in one skill is recorded and reported, and the run moves on: only manifest
and output-root problems stop a run.

With jobs > 1, skills fan out over a bounded pool of worker threads. Skills
never share a destination, so the RunStats accumulator is the only shared
state and it is guarded by a lock.
"""

import asyncio
import logging
import threading
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .errors import SkillError
from .manifest import Manifest, Plugin
from .reporter import Reporter
from .resolver import ResolutionMode, output_name_for, resolve_skill, skill_name_from_path
from .targets.base import DistributionTarget, TargetResult

logger = logging.getLogger(__name__)


@dataclass
class RunConfig:
	"""Per-invocation settings for skill resolution and scheduling."""
	resolution: ResolutionMode = ResolutionMode.MANIFEST
	plugins_dir: Optional[Path] = None
	prefix: bool = False
	jobs: int = 1


@dataclass
class SkillFailure:
	"""A skill that could not be processed."""
	plugin: str
	skill: str
	message: str


@dataclass
class RunStats:
	"""Counters for one run. Discarded once the summary is printed."""
	succeeded: int = 0
	failed: int = 0
	files_written: int = 0
	bytes_written: int = 0
	links_created: int = 0
	skipped_plugins: int = 0
	failures: list[SkillFailure] = field(default_factory=list)
	_lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

	@property
	def total(self) -> int:
		return self.succeeded + self.failed

	def record_success(self, result: TargetResult) -> None:
		with self._lock:
			self.succeeded += 1
			self.files_written += result.files
			self.bytes_written += result.bytes_written
			self.links_created += result.links

	def record_failure(self, plugin: str, skill: str, message: str) -> None:
		with self._lock:
			self.failed += 1
			self.failures.append(SkillFailure(plugin=plugin, skill=skill, message=message))


def _process_skill(
	plugin: Plugin,
	raw_path: str,
	target: DistributionTarget,
	config: RunConfig,
	stats: RunStats,
	reporter: Reporter,
) -> bool:
	"""Resolve and materialize one skill. Returns True on success."""
	try:
		ref = resolve_skill(
			plugin,
			raw_path,
			mode=config.resolution,
			plugins_dir=config.plugins_dir,
			prefix=config.prefix,
		)
		result = target.materialize(ref)
	except (SkillError, OSError) as e:
		logger.debug(f"Skill {plugin.name}:{raw_path} failed", exc_info=True)
		stats.record_failure(plugin.name, raw_path, str(e))
		reporter.skill_failed(plugin.name, raw_path, str(e))
		return False
	except Exception as e:
		logger.warning(f"Unexpected error processing {plugin.name}:{raw_path}", exc_info=True)
		stats.record_failure(plugin.name, raw_path, f"unexpected error: {e}")
		reporter.skill_failed(plugin.name, raw_path, f"unexpected error: {e}")
		return False

	stats.record_success(result)
	reporter.skill_succeeded(ref, result, target)
	return True


def _duplicate_outputs(work: list[tuple[Plugin, str]], prefix: bool) -> set[str]:
	names = Counter(
		output_name_for(plugin.name, skill_name_from_path(raw), prefix) for plugin, raw in work
	)
	return {name for name, count in names.items() if count > 1}


async def _run_pool(
	work: list[tuple[Plugin, str]],
	target: DistributionTarget,
	config: RunConfig,
	stats: RunStats,
	reporter: Reporter,
) -> None:
	"""Fan skills out over at most config.jobs worker threads."""
	semaphore = asyncio.Semaphore(config.jobs)

	async def process(plugin: Plugin, raw_path: str) -> None:
		async with semaphore:
			await asyncio.to_thread(_process_skill, plugin, raw_path, target, config, stats, reporter)

	tasks = [asyncio.create_task(process(plugin, raw)) for plugin, raw in work]
	await asyncio.gather(*tasks)


def run(
	manifest: Manifest,
	target: DistributionTarget,
	config: Optional[RunConfig] = None,
	reporter: Optional[Reporter] = None,
) -> RunStats:
	"""
	Process every skill in the manifest.

	Args:
		manifest: Parsed manifest
		target: Where skills are written (or a DryRunTarget)
		config: Resolution and scheduling settings
		reporter: Progress sink; a default console reporter if omitted

	Returns:
		RunStats for the run

	Raises:
		OutputRootError: the target's output root cannot be created
	"""
	config = config or RunConfig()
	reporter = reporter or Reporter()
	stats = RunStats()

	target.prepare()

	work: list[tuple[Plugin, str]] = []
	for plugin in manifest.plugins:
		if not plugin.skills:
			logger.info(f"Plugin '{plugin.name}' has no skills, skipping")
			stats.skipped_plugins += 1
			reporter.plugin_skipped(plugin.name)
			continue
		work.extend((plugin, raw) for raw in plugin.skills)

	duplicates = _duplicate_outputs(work, config.prefix)
	if duplicates:
		logger.warning(
			f"Output names produced more than once: {', '.join(sorted(duplicates))}; "
			"later skills replace earlier ones"
		)

	if config.jobs > 1 and duplicates and not target.dry_run:
		logger.warning("Duplicate output names, processing sequentially")
	elif config.jobs > 1:
		logger.debug(f"Processing {len(work)} skills with {config.jobs} workers")
		# Skill lines arrive in completion order, so all headers come first
		for plugin in manifest.plugins:
			if plugin.skills:
				reporter.plugin_started(plugin.name, target)
		asyncio.run(_run_pool(work, target, config, stats, reporter))
		return stats

	current = None
	for plugin, raw_path in work:
		if plugin is not current:
			current = plugin
			reporter.plugin_started(plugin.name, target)
		_process_skill(plugin, raw_path, target, config, stats, reporter)

	return stats
