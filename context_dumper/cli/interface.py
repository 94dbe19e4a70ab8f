# context_dumper/cli/interface.py
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
from click_option_group import optgroup
import structlog

from context_dumper import __version__ as app_version
from context_dumper.cli.console_output import ProgressReporter, make_progress, print_cli_summary_output
from context_dumper.config.loader import build_config, load_and_merge_configs
from context_dumper.config.settings import DumperConfig
from context_dumper.core.output import copy_to_clipboard, write_to_file, write_to_stdout
from context_dumper.core.service import ContextDumpService
from context_dumper.exceptions import ConfigError, ContextDumperError, InvalidRequestError
from context_dumper.logging_setup import configure_logging

log = structlog.get_logger(__name__)

EXIT_APP_ERROR = 1
EXIT_INVALID_REQUEST = 2


def _log_level_for(verbosity: int, fallback: str) -> str:
    if verbosity == 1:
        return "info"
    if verbosity >= 2:
        return "debug"
    return fallback


def _effective_config(ctx: click.Context, overrides: Dict[str, Any]) -> DumperConfig:
    try:
        config = build_config(overrides, file_values=ctx.obj["file_values"])
    except ConfigError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(EXIT_APP_ERROR)
    configure_logging(
        log_level_str=_log_level_for(ctx.obj["verbosity"], config.log_level),
        force_json_logs=ctx.obj["force_json_logs"],
    )
    return config


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.option("--verbose", "-v", "verbosity_level", count=True, help="Verbosity: -v info, -vv debug.")
@click.option("--force-json-logs", "force_json_logs", is_flag=True, default=False, help="Force JSON logs.")
@click.version_option(version=app_version, prog_name="context-dumper", help="Show version and exit.")
@click.pass_context
def main_cli_group(ctx: click.Context, verbosity_level: int, force_json_logs: bool):
    """context-dumper: concatenate a codebase into marker-delimited text,
    honouring nested .gitignore files and optionally split into chunks."""
    configure_logging(log_level_str=_log_level_for(verbosity_level, "warning"), force_json_logs=force_json_logs)
    ctx.ensure_object(dict)
    ctx.obj["verbosity"] = verbosity_level
    ctx.obj["force_json_logs"] = force_json_logs
    ctx.obj["file_values"] = load_and_merge_configs()
    log.debug("cli_command_invoked", subcommand=ctx.invoked_subcommand)


@main_cli_group.command("dump")
@click.argument("base_path", type=str)
@optgroup.group("Chunking Options", help="Split the dump into file-aligned chunks.")
@optgroup.option("-n", "--num-chunks", "num_chunks", type=click.IntRange(min=1), default=1, show_default=True, help="Total number of chunks to divide the output into.")
@optgroup.option("-c", "--chunk-index", "chunk_index", type=click.IntRange(min=1), default=1, show_default=True, help="1-based index of the chunk to return.")
@optgroup.group("Filtering Options", help="Control which files and directories are visited.")
@optgroup.option("--ignore-file", "ignore_filename", default=None, help="Name of the per-directory ignore file. Default: .gitignore.")
@optgroup.option("-L", "--follow-symlinks", "follow_symlinks", is_flag=True, default=False, help="Descend into symlinked directories.")
@optgroup.group("Output Options", help="Where the dump goes.")
@optgroup.option("-o", "--output", "output_file", type=click.Path(dir_okay=False, writable=True, path_type=Path), default=None, help="Path to write the output to.")
@optgroup.option("--clipboard", "clipboard", is_flag=True, default=False, help="Copy output to clipboard.")
@optgroup.option("--summary/--no-summary", "show_summary", default=True, help="Print the processing summary on stderr.")
@click.pass_context
def dump_command(
    ctx: click.Context,
    base_path: str,
    num_chunks: int,
    chunk_index: int,
    ignore_filename: Optional[str],
    follow_symlinks: bool,
    output_file: Optional[Path],
    clipboard: bool,
    show_summary: bool,
):
    """Dump the text files under BASE_PATH."""
    config = _effective_config(ctx, {"ignore_filename": ignore_filename, "follow_symlinks": follow_symlinks or None})

    try:
        with make_progress() as progress:
            service = ContextDumpService(config, observer=ProgressReporter(progress))
            result = service.dump(base_path, num_chunks=num_chunks, chunk_index=chunk_index)

        output_destination_used = False
        if output_file:
            write_to_file(output_file, result.text)
            click.echo(f"Info: Output written to: {output_file}", err=True)
            output_destination_used = True

        clipboard_copy_succeeded = False
        if clipboard:
            clipboard_copy_succeeded = copy_to_clipboard(result.text)
            output_destination_used = True

        if not output_destination_used or (clipboard and not clipboard_copy_succeeded):
            if clipboard and not clipboard_copy_succeeded:
                click.echo("Info: Clipboard copy failed. Outputting to stdout instead.", err=True)
            write_to_stdout(result.text)

        if show_summary:
            print_cli_summary_output(result)

    except InvalidRequestError as e:
        log.error("invalid_request_in_cli", message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(EXIT_INVALID_REQUEST)
    except ContextDumperError as e:
        log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(EXIT_APP_ERROR)


@main_cli_group.command("serve")
@click.option("--transport", type=click.Choice(["stdio", "sse", "streamable-http"]), default="stdio", show_default=True, help="MCP transport to serve on.")
@click.option("--ignore-file", "ignore_filename", default=None, help="Name of the per-directory ignore file. Default: .gitignore.")
@click.option("-L", "--follow-symlinks", "follow_symlinks", is_flag=True, default=False, help="Descend into symlinked directories.")
@click.pass_context
def serve_command(ctx: click.Context, transport: str, ignore_filename: Optional[str], follow_symlinks: bool):
    """Run the MCP server exposing the dump_codebase_context tool."""
    config = _effective_config(ctx, {"ignore_filename": ignore_filename, "follow_symlinks": follow_symlinks or None})
    # imported lazily: the mcp stack is only needed for this command.
    from context_dumper.server import run_server

    run_server(config, transport=transport)
