"""Command line interface for the event buffer.

Purpose
-------
Expose ``lib_event_buffer pipe`` so captured output can be turned into
size-limited, optionally JSON-wrapped lines from a shell pipeline, plus the
``info`` banner used by packaging smoke tests.

Contents
--------
* :func:`cli` - Click group with global traceback, dotenv, and verbosity flags.
* :func:`cli_info` / :func:`cli_pipe` - subcommands.
* :func:`main` - entry point delegating to :func:`lib_cli_exit_tools.run_cli`.
"""

from __future__ import annotations

import logging
import os
import sys
from functools import partial
from typing import BinaryIO, Sequence

import click
import lib_cli_exit_tools
from rich.console import Console
from rich.logging import RichHandler

from . import __init__conf__
from . import config as config_module
from .adapters.sink import StreamSink
from .event_buffer import EventBuffer

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
DEFAULT_CHUNK_SIZE = 64 * 1024

LOGGER = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    logging.basicConfig(level=logging.DEBUG, format="%(message)s", handlers=[handler], force=True)


@click.group(invoke_without_command=True, context_settings=CLICK_CONTEXT_SETTINGS)
@click.version_option(version=__init__conf__.version, prog_name=__init__conf__.shell_command, message="%(version)s")
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors.",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=False,
    help=f"Load environment variables from the nearest .env (default: ${config_module.DOTENV_ENV_VAR}).",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log buffer activity to stderr.")
@click.pass_context
def cli(ctx: click.Context, traceback: bool, use_dotenv: bool, verbose: bool) -> None:
    """Turn raw output into bounded, escaped log lines."""

    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback

    explicit: bool | None = None
    if ctx.get_parameter_source("use_dotenv") is not click.core.ParameterSource.DEFAULT:
        explicit = use_dotenv
    env_toggle = os.getenv(config_module.DOTENV_ENV_VAR)
    if config_module.should_use_dotenv(explicit=explicit, env_value=env_toggle):
        config_module.enable_dotenv()

    _configure_logging(verbose)

    if ctx.invoked_subcommand is None:
        click.echo(__init__conf__.summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print resolved metadata so users can inspect installation details."""

    click.echo(__init__conf__.summary_info(), nl=False)


@cli.command("pipe", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--max-len", type=click.IntRange(min=0), default=None, help="Byte ceiling per line; 0 for none.")
@click.option("--eol", default=None, help="Line terminator; backslash escapes such as \\n are decoded.")
@click.option("--json-field", default=None, help="Wrap each line as {\"FIELD\":\"...\"}.")
@click.option(
    "--interval",
    type=click.FloatRange(min=0),
    default=None,
    help="Seconds between background flushes; 0 flushes only at EOF.",
)
@click.option("--lines", "per_line", is_flag=True, default=False, help="Emit one event per input line.")
@click.option("--chunk-size", type=click.IntRange(min=1), default=DEFAULT_CHUNK_SIZE, show_default=True)
def cli_pipe(
    max_len: int | None,
    eol: str | None,
    json_field: str | None,
    interval: float | None,
    per_line: bool,
    chunk_size: int,
) -> None:
    """Read raw bytes from stdin and write escaped lines to stdout."""

    raw_eol: bytes | None = None
    if eol is not None:
        try:
            raw_eol = config_module.decode_escapes(eol)
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--eol") from exc
    settings = config_module.load_settings(
        max_len=max_len,
        eol=raw_eol,
        json_field=json_field,
        flush_interval=interval,
    )
    source = sys.stdin.buffer
    sink = StreamSink(sys.stdout.buffer)
    LOGGER.debug("Piping stdin with %s", settings)
    with EventBuffer(sink, **settings.buffer_kwargs()) as buffer:
        if settings.flush_interval is not None and not per_line:
            buffer.auto_flush(settings.flush_interval)
        if per_line:
            _pump_lines(source, buffer)
        else:
            _pump_chunks(source, buffer, chunk_size)


def _pump_chunks(source: BinaryIO, buffer: EventBuffer, chunk_size: int) -> None:
    read = getattr(source, "read1", source.read)
    for chunk in iter(partial(read, chunk_size), b""):
        buffer.write(chunk)


def _pump_lines(source: BinaryIO, buffer: EventBuffer) -> None:
    for line in source:
        if line.endswith(b"\n"):
            line = line[:-2] if line.endswith(b"\r\n") else line[:-1]
        buffer.write(line)
        buffer.flush()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI, restoring traceback preferences afterwards.

    Returns the process exit code produced by :func:`lib_cli_exit_tools.run_cli`.
    """

    previous_traceback = lib_cli_exit_tools.config.traceback
    previous_force_color = lib_cli_exit_tools.config.traceback_force_color
    try:
        return lib_cli_exit_tools.run_cli(
            cli,
            argv=list(argv) if argv is not None else None,
            prog_name=__init__conf__.shell_command,
        )
    finally:
        lib_cli_exit_tools.config.traceback = previous_traceback
        lib_cli_exit_tools.config.traceback_force_color = previous_force_color


__all__ = ["cli", "cli_info", "cli_pipe", "main"]
