"""
Reporter - human-readable progress and summary for a run.

The reporter is handed to the runner explicitly, so tests and other callers
can pass a Console that writes to a buffer instead of the terminal.
"""

from typing import TYPE_CHECKING, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .resolver import SkillReference
from .targets.base import DistributionTarget, TargetResult

if TYPE_CHECKING:
	from .runner import RunStats

_ACTIONS = {
	"SYNCED": "Syncing",
	"PACKAGED": "Packaging",
	"DRY RUN": "Validating",
}


def format_size(num_bytes: int) -> str:
	"""Format a byte count for display. e.g. '512 B', '3.4 KB', '1.25 MB'."""
	if num_bytes < 1024:
		return f"{num_bytes} B"
	if num_bytes < 1024 * 1024:
		return f"{num_bytes / 1024:.1f} KB"
	return f"{num_bytes / (1024 * 1024):.2f} MB"


def exit_code(stats: "RunStats", strict: bool = False) -> int:
	"""Exit status for a completed run: partial failure is only an error when strict."""
	if strict and stats.failed:
		return 1
	return 0


class Reporter:
	"""Renders run progress to a rich Console."""

	def __init__(self, console: Optional[Console] = None, verbose: bool = False):
		self.console = console or Console(highlight=False)
		self.verbose = verbose

	def header(self, title: str, rows: list[tuple[str, str]], dry_run: bool = False) -> None:
		"""Print the run banner and its configuration."""
		self.console.print(Panel(f"[bold]{escape(title)}[/bold]", border_style="blue", expand=False))
		grid = Table.grid(padding=(0, 2))
		grid.add_column(style="blue")
		grid.add_column()
		for label, value in rows:
			grid.add_row(f"{label}:", escape(value))
		self.console.print(grid)
		if dry_run:
			self.console.print("[yellow]Dry run mode: no files will be modified[/yellow]")

	def plugin_started(self, plugin_name: str, target: DistributionTarget) -> None:
		action = _ACTIONS.get(target.verb, "Processing")
		self.console.print(f"\n[bold blue]=== {action} plugin: {escape(plugin_name)} ===[/bold blue]")

	def plugin_skipped(self, plugin_name: str) -> None:
		if self.verbose:
			self.console.print(f"[yellow]\\[SKIP][/yellow] Plugin '{escape(plugin_name)}' has no skills")

	def skill_succeeded(self, ref: SkillReference, result: TargetResult, target: DistributionTarget) -> None:
		name = escape(ref.output_name)
		if target.dry_run:
			detail = f"would write {escape(str(result.destination))}"
			self.console.print(f"[yellow]\\[{target.verb}][/yellow] {name} ({detail})")
			return

		if result.links:
			detail = f"linked to {escape(str(ref.source_dir))}"
		else:
			detail = f"{result.files} files, {format_size(result.bytes_written)}"
		self.console.print(f"[green]\\[{target.verb}][/green] {name} ({detail})")
		if self.verbose:
			self.console.print(f"  [dim]{escape(str(ref.source_dir))} -> {escape(str(result.destination))}[/dim]")

	def skill_failed(self, plugin_name: str, raw_path: str, message: str) -> None:
		self.console.print(
			f"[red]\\[ERROR][/red] {escape(plugin_name)}: {escape(raw_path)}: {escape(message)}"
		)

	def note(self, text: str) -> None:
		self.console.print(text)

	def summary(self, stats: "RunStats", dry_run: bool = False, strict: bool = False) -> int:
		"""
		Print the end-of-run summary.

		Returns:
			The process exit code for the run
		"""
		self.console.print()
		self.console.print(Panel("[bold]Summary[/bold]", border_style="green", expand=False))
		if dry_run:
			self.console.print("[yellow]Dry run completed - no files were modified[/yellow]")

		table = Table(show_header=False, box=None, padding=(0, 2))
		table.add_column(style="blue")
		table.add_column(justify="right")
		table.add_row("Skills succeeded:", str(stats.succeeded))
		if stats.failed:
			table.add_row("[red]Skills failed:[/red]", f"[red]{stats.failed}[/red]")
		if stats.skipped_plugins:
			table.add_row("Plugins skipped:", str(stats.skipped_plugins))
		if not dry_run:
			table.add_row("Files written:", str(stats.files_written))
			if stats.links_created:
				table.add_row("Links created:", str(stats.links_created))
			table.add_row("Total size:", format_size(stats.bytes_written))
		self.console.print(table)

		if stats.failures:
			self.console.print("\n[red]Failed skills:[/red]")
			for failure in stats.failures:
				self.console.print(
					f"  - {escape(failure.plugin)}: {escape(failure.skill)} ({escape(failure.message)})"
				)

		code = exit_code(stats, strict)
		if code and strict:
			self.console.print(f"\n[red]{stats.failed} of {stats.total} skill(s) failed (strict mode)[/red]")
		return code
