"""
Main CLI entry point for netconf-ifstats.

Provides the `nc-ifstats` command with subcommands for:
- run: Poll continuously, writing line protocol to stdout (execd mode)
- once: Run a single poll pass and print the result
- sample-config: Print an example configuration file
- version: Show version information
"""

from __future__ import annotations

import logging
import queue
import signal
import sys
import threading
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.logging import RichHandler

from netconf_ifstats import __version__
from netconf_ifstats.core.config import SAMPLE_CONFIG, PollerConfig, get_settings, load_config
from netconf_ifstats.core.exceptions import ConfigurationError
from netconf_ifstats.formatters.output import (
    CollectingSink,
    LineProtocolSink,
    print_result_json,
    print_result_table,
)
from netconf_ifstats.poller import InterfacePoller

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="nc-ifstats",
    help="Poll interface counters from NETCONF devices",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# stdout carries metrics; everything human-facing goes to stderr
console = Console()
err_console = Console(stderr=True)

_GATHER = object()
_STOP = object()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"nc-ifstats version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option("--debug", "-d", envvar="NCIF_DEBUG", help="Enable debug output"),
    ] = False,
) -> None:
    """
    netconf-ifstats - interface counters over NETCONF.

    Polls NETCONF devices for ietf-interfaces statistics and emits
    input/output byte counters per interface.
    """
    settings = get_settings()
    if debug:
        settings.debug = True

    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=settings.debug, rich_tracebacks=True)],
    )
    logging.getLogger("ncclient").setLevel(logging.DEBUG if settings.debug else logging.WARNING)
    logging.getLogger("paramiko").setLevel(logging.DEBUG if settings.debug else logging.WARNING)


def _load(config_file: Path | None) -> PollerConfig:
    """Resolve the config path from the option or NCIF_CONFIG_FILE and load it."""
    path = config_file or get_settings().config_file
    if path is None:
        err_console.print("[red]No config file given (use --config or NCIF_CONFIG_FILE)[/red]")
        raise typer.Exit(1)
    try:
        config = load_config(path)
    except ConfigurationError as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from None
    if not config.devices:
        err_console.print(f"[yellow]Warning: no devices configured in {path}[/yellow]")
    return config


def _watch_stdin(signals: queue.Queue[Any], gather_on_line: bool) -> None:
    """Signal a gather per stdin line (if enabled) and a stop at EOF."""
    for _line in sys.stdin:
        if gather_on_line:
            signals.put(_GATHER)
    signals.put(_STOP)


def _positive_interval(value: float | None) -> float | None:
    """Reject non-positive poll intervals."""
    if value is not None and value <= 0:
        raise typer.BadParameter("must be greater than 0")
    return value


@app.command()
def run(
    config_file: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to the YAML config file"),
    ] = None,
    poll_interval: Annotated[
        float | None,
        typer.Option(
            "--poll-interval",
            "-i",
            callback=_positive_interval,
            help="Seconds between polls",
        ),
    ] = None,
    poll_interval_disabled: Annotated[
        bool,
        typer.Option(
            "--poll-interval-disabled",
            help="Poll once per line read on stdin instead of on a timer",
        ),
    ] = False,
) -> None:
    """
    Poll continuously, writing line protocol to stdout.

    Runs until stdin closes or a termination signal is received.

    Example:
        nc-ifstats run -c devices.yaml -i 10
    """
    config = _load(config_file)
    if poll_interval_disabled:
        interval = None
    elif poll_interval is not None:
        interval = poll_interval
    else:
        interval = get_settings().poll_interval

    signals: queue.Queue[Any] = queue.Queue()
    watcher = threading.Thread(
        target=_watch_stdin,
        args=(signals, poll_interval_disabled),
        name="stdin-watcher",
        daemon=True,
    )
    watcher.start()
    previous_handler = signal.signal(signal.SIGTERM, lambda signum, frame: signals.put(_STOP))

    sink = LineProtocolSink(sys.stdout)
    poller = InterfacePoller(config)
    poller.start()
    try:
        if interval is not None:
            poller.gather(sink)
        while True:
            try:
                item = signals.get(timeout=interval)
            except queue.Empty:
                item = _GATHER
            if item is _STOP:
                break
            poller.gather(sink)
    except KeyboardInterrupt:
        pass
    finally:
        poller.stop()
        signal.signal(signal.SIGTERM, previous_handler)
        logger.info("Stopped")


@app.command()
def once(
    config_file: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to the YAML config file"),
    ] = None,
    output_json: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output in JSON format"),
    ] = False,
    output_table: Annotated[
        bool,
        typer.Option("--table", help="Output as a table"),
    ] = False,
) -> None:
    """
    Run a single poll pass and print the result.

    Exits with status 1 only when every configured device failed.

    Example:
        nc-ifstats once -c devices.yaml --table
    """
    config = _load(config_file)

    with InterfacePoller(config) as poller:
        if output_json or output_table:
            result = poller.gather(CollectingSink())
        else:
            result = poller.gather(LineProtocolSink(sys.stdout))

    if output_json:
        print_result_json(result)
    elif output_table:
        print_result_table(result, console)

    for error in result.errors:
        err_console.print(f"[red]{error}[/red]")

    if config.devices and len(result.failed_devices()) == len(config.devices):
        raise typer.Exit(1)


@app.command("sample-config")
def sample_config() -> None:
    """Print an example configuration file."""
    sys.stdout.write(SAMPLE_CONFIG)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]nc-ifstats[/bold] version {__version__}")


def cli() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    cli()
