"""CLI for skillsync: sync, package, and config commands."""

import argparse
import os
import sys
import tomllib
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from .config import Config, load_config
from .errors import ConfigError, ManifestError, OutputRootError
from .logging_config import setup_logging
from .manifest import load_manifest
from .reporter import Reporter
from .resolver import ResolutionMode
from .runner import RunConfig, run
from .targets import ArchiveTarget, DistributionTarget, DryRunTarget, FilesystemTarget, SyncMode

CODEX_HINT = (
	"You can now use these skills in Codex by typing $<skill-name>\n"
	"Example: $commit-messages or $react"
)


def _fatal(message: str) -> int:
	"""Print a fatal diagnostic and return the failure exit code."""
	Console(stderr=True, highlight=False).print(f"[red]ERROR: {escape(message)}[/red]", soft_wrap=True)
	return 1


def _default_package_output() -> Path:
	"""Timestamped output directory for archives, e.g. claude-plugins-skills-20250101-120000."""
	return Path(f"claude-plugins-skills-{datetime.now():%Y%m%d-%H%M%S}")


def _run_config(args: argparse.Namespace, config: Config) -> RunConfig:
	resolution = ResolutionMode(args.resolve) if args.resolve else config.resolution
	plugins_dir = Path(args.plugins) if args.plugins else config.plugins_dir
	jobs = args.jobs if args.jobs is not None else config.jobs
	return RunConfig(
		resolution=resolution,
		plugins_dir=Path(os.path.abspath(plugins_dir)),
		prefix=args.prefix or config.prefix,
		jobs=max(1, jobs),
	)


def _execute(args: argparse.Namespace, title: str, make_target) -> int:
	"""Shared driver for sync and package: load inputs, run, summarize."""
	try:
		config = load_config()
	except ConfigError as e:
		return _fatal(str(e))

	setup_logging(verbose=args.verbose, log_file=config.log_file)

	marketplace = Path(args.marketplace) if args.marketplace else config.marketplace
	try:
		manifest = load_manifest(marketplace)
	except ManifestError as e:
		return _fatal(str(e))

	run_config = _run_config(args, config)
	target: DistributionTarget = make_target(config)
	if args.dry_run:
		target = DryRunTarget(target)

	reporter = Reporter(verbose=args.verbose)
	rows = [
		("Target", target.label),
		("Output", str(target.output_root)),
		("Manifest", str(Path(os.path.abspath(marketplace)))),
		("Resolution", run_config.resolution.value),
		("Skills", f"{manifest.skill_count} in {len(manifest.plugins)} plugin(s)"),
	]
	if run_config.resolution == ResolutionMode.PLUGIN:
		rows.append(("Plugins directory", str(run_config.plugins_dir)))
	if run_config.prefix:
		rows.append(("Prefix", "plugin name"))
	reporter.header(title, rows, dry_run=args.dry_run)

	try:
		stats = run(manifest, target, run_config, reporter)
	except OutputRootError as e:
		return _fatal(str(e))

	strict = args.strict or config.strict
	code = reporter.summary(stats, dry_run=args.dry_run, strict=strict)
	if isinstance(target, FilesystemTarget) and stats.succeeded:
		reporter.note(f"\n[green]Successfully synced {stats.succeeded} skill(s)![/green]")
		reporter.note(CODEX_HINT)
	elif isinstance(target, ArchiveTarget) and stats.succeeded:
		reporter.note(f"\n[green]Archives written to {escape(str(target.output_root))}[/green]")
	return code


def cmd_sync(args: argparse.Namespace) -> int:
	"""Sync skills into a flat directory for a CLI agent."""
	def make_target(config: Config) -> DistributionTarget:
		if args.output:
			output = Path(args.output)
		elif args.project:
			output = config.project_output
		else:
			output = config.sync_output
		mode = SyncMode.COPY if args.copy else SyncMode.SYMLINK
		return FilesystemTarget(output, mode)

	return _execute(args, "Skills Sync", make_target)


def cmd_package(args: argparse.Namespace) -> int:
	"""Package each skill as its own zip archive."""
	def make_target(config: Config) -> DistributionTarget:
		if args.output:
			output = Path(args.output)
		else:
			output = config.package_output or _default_package_output()
		return ArchiveTarget(output)

	return _execute(args, "Package Skills", make_target)


def cmd_config(args: argparse.Namespace) -> int:
	"""Show the effective configuration."""
	print("skillsync config")
	print(f"{'=' * 40}")

	config_dir = os.getenv("SKILLSYNC_CONFIG_DIR")
	config_file = (Config(config_dir=Path(config_dir)) if config_dir else Config()).config_file
	if not config_file.exists():
		print(f"  config.toml:     {config_file} (not found, using defaults)")
	else:
		try:
			with open(config_file, "rb") as f:
				tomllib.load(f)
			print(f"  config.toml:     {config_file} (valid)")
		except (OSError, tomllib.TOMLDecodeError) as e:
			print(f"  config.toml:     {config_file} (INVALID: {e})")
			return 1

	try:
		config = load_config()
	except ConfigError as e:
		print(f"  {e}")
		return 1

	print(f"  marketplace:     {config.marketplace}")
	print(f"  plugins_dir:     {config.plugins_dir}")
	print(f"  sync_output:     {config.sync_output}")
	print(f"  project_output:  {config.project_output}")
	print(f"  package_output:  {config.package_output or '(timestamped)'}")
	print(f"  resolution:      {config.resolution.value}")
	print(f"  prefix:          {config.prefix}")
	print(f"  strict:          {config.strict}")
	print(f"  jobs:            {config.jobs}")
	print(f"  log_file:        {config.log_file or '(none)'}")
	return 0


def _positive_int(value: str) -> int:
	try:
		number = int(value)
	except ValueError:
		raise argparse.ArgumentTypeError(f"invalid integer: {value}") from None
	if number < 1:
		raise argparse.ArgumentTypeError("must be at least 1")
	return number


def _add_run_arguments(parser: argparse.ArgumentParser) -> None:
	"""Flags shared by sync and package."""
	parser.add_argument("--output", type=str, default=None, help="Output directory")
	parser.add_argument(
		"--marketplace",
		type=str,
		default=None,
		help="Path to marketplace.json (default: ./.claude-plugin/marketplace.json)",
	)
	parser.add_argument(
		"--plugins",
		type=str,
		default=None,
		help="Base directory plugin sources are resolved against (plugin resolution only)",
	)
	parser.add_argument(
		"--resolve",
		choices=[m.value for m in ResolutionMode],
		default=None,
		help="manifest: skill paths are relative to the working directory; "
		"plugin: <plugins>/<source>/skills/<name> (default: manifest)",
	)
	parser.add_argument(
		"--prefix",
		action="store_true",
		help="Prefix skill names with plugin name (e.g., core-commit-messages)",
	)
	parser.add_argument("--dry-run", action="store_true", help="Validate skills without writing anything")
	parser.add_argument("--strict", action="store_true", help="Exit non-zero if any skill fails")
	parser.add_argument("--jobs", type=_positive_int, default=None, help="Number of skills processed in parallel")
	parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(
		prog="skillsync",
		description="Distribute plugin skills to CLI agents and package them for upload",
	)
	subparsers = parser.add_subparsers(dest="command")

	# sync
	sync_parser = subparsers.add_parser("sync", help="Sync skills into a skills directory")
	_add_run_arguments(sync_parser)
	sync_parser.add_argument(
		"--project",
		action="store_true",
		help="Install to .codex/skills in the current directory instead of ~/.codex/skills",
	)
	sync_parser.add_argument("--copy", action="store_true", help="Copy files instead of symlinking")
	sync_parser.set_defaults(func=cmd_sync)

	# package
	package_parser = subparsers.add_parser("package", help="Build one zip archive per skill")
	_add_run_arguments(package_parser)
	package_parser.set_defaults(func=cmd_package)

	# config
	config_parser = subparsers.add_parser("config", help="Show effective configuration")
	config_parser.set_defaults(func=cmd_config)

	return parser


def main(argv: Optional[list[str]] = None) -> None:
	"""CLI entry point."""
	parser = build_parser()
	args = parser.parse_args(argv)

	if not args.command:
		parser.print_help()
		sys.exit(1)

	sys.exit(args.func(args))
