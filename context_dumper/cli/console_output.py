# context_dumper/cli/console_output.py
"""
Console feedback on stderr while the CLI runs: a rich progress display fed
by the dump service's observer hook, and the closing summary.
"""
import logging as stdlib_logging
import sys
from typing import Any, Optional

import click
import structlog
from rich.console import Console as RichConsole
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TaskID, TextColumn

from context_dumper.core.service import DumpResult

log = structlog.get_logger(__name__)


def make_progress() -> Progress:
    app_log_level = stdlib_logging.getLogger("context_dumper").getEffectiveLevel()
    progress_disabled = app_log_level > stdlib_logging.INFO or not sys.stderr.isatty()
    return Progress(
        SpinnerColumn(), TextColumn("[bold blue]{task.description}"), BarColumn(), MofNCompleteColumn(),
        transient=True, disable=progress_disabled, console=RichConsole(file=sys.stderr),
    )


class ProgressReporter:
    # adapts service events to a rich progress task.
    def __init__(self, progress: Progress):
        self.progress = progress
        self.task: Optional[TaskID] = None

    def __call__(self, event: str, **fields: Any):
        if event == "walk_started":
            self.task = self.progress.add_task("discovering files...", total=None)
        elif self.task is None:
            return
        elif event == "walk_finished":
            self.progress.update(
                self.task, total=fields["files_found"], completed=0,
                description=f"rendering {fields['files_found']} files...",
            )
        elif event in ("file_rendered", "file_skipped"):
            self.progress.advance(self.task)
        elif event == "chunk_planned":
            self.progress.update(self.task, description=f"chunk ready: {fields['files_included']} files")


def print_cli_summary_output(result: DumpResult):
    log.debug("console_summary_output_requested")
    click.secho("--- Execution Summary ---", fg="cyan", err=True)
    click.echo(result.summary(), err=True)
    click.echo(
        f"Files discovered: {result.files_discovered} "
        f"(binary: {result.files_skipped_binary}, unreadable: {result.files_skipped_unreadable}, "
        f"unlistable directories: {result.directories_skipped})",
        err=True,
    )
    chunk = result.chunk
    if chunk.request.total > 1:
        click.echo(
            f"Chunk byte range: {chunk.start_byte}-{min(chunk.end_byte, chunk.total_bytes)} "
            f"of {chunk.total_bytes} (target {chunk.target_chunk_bytes} bytes per chunk)",
            err=True,
        )
