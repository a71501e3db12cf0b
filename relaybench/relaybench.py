#!/usr/bin/env python3
"""
RelayBench - VPN relay latency benchmark
Command-line orchestrator: lists countries or probes relays and writes the report.
"""

import logging
import signal
import sys
from pathlib import Path
from typing import Optional

import click

from relaybench.core.config import Config
from relaybench.core.durations import parse_duration
from relaybench.core.errors import RelayBenchError, ReportError
from relaybench.core.logger import resolve_level, setup_logging
from relaybench.directory.client import DirectoryClient, country_table
from relaybench.directory.scope import filter_relays, parse_scope
from relaybench.prober.latency_prober import LatencyProber
from relaybench.report.report_writer import write_report


class DurationType(click.ParamType):
    """Click parameter accepting durations such as 1s, 500ms or 1m30s."""
    name = "duration"

    def convert(self, value, param, ctx):
        if isinstance(value, float):
            return value
        try:
            return parse_duration(value)
        except ValueError as e:
            self.fail(str(e), param, ctx)


def signal_handler(signum, frame):
    """Handle termination signals."""
    logging.info(f"Received signal {signum}, shutting down...")
    sys.exit(1)


def pluralize(word: str, count: int) -> str:
    return word if count == 1 else word + "s"


@click.command()
@click.option('-lc', '--list-countries', 'list_countries', is_flag=True,
              help='List all available countries and exit')
@click.option('-c', '--countries', default=None,
              help='Comma-separated country codes to search within, e.g. "us,de"')
@click.option('-t', '--timeout', type=DurationType(), default=None,
              help='Timeout for each ping, e.g. 1s or 500ms  [default: 1s]')
@click.option('-o', '--output', default=None,
              help='Output file name  [default: bench_result.csv]')
@click.option('--config', 'config_file', default=None,
              type=click.Path(dir_okay=False),
              help='Optional TOML configuration file')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
def main(list_countries: bool, countries: Optional[str], timeout: Optional[float],
         output: Optional[str], config_file: Optional[str], verbose: bool):
    """RelayBench - rank VPN relays by ping"""

    signal.signal(signal.SIGTERM, signal_handler)

    try:
        if config_file and not Path(config_file).exists():
            click.echo(f"Error: Configuration file {config_file} not found", err=True)
            sys.exit(1)

        cfg = Config.from_file(Path(config_file)) if config_file else Config()
        cfg = cfg.with_overrides(
            list_countries=list_countries,
            timeout=timeout,
            output_path=output,
            log_level='DEBUG' if verbose else None
        )
        cfg.validate()

        setup_logging(cfg.logging, resolve_level(cfg.logging.level))

        if not cfg.list_countries:
            cfg = cfg.with_overrides(country_scope=tuple(parse_scope(countries)))

        logging.debug(f"Running with {cfg}")

        with DirectoryClient(cfg.directory) as client:
            if cfg.list_countries:
                run_list_countries(client)
            else:
                run_benchmark(cfg, client, LatencyProber(cfg.timeout))

    except KeyboardInterrupt:
        click.echo()
        logging.info("Interrupted by user")
        sys.exit(130)
    except RelayBenchError as e:
        click.echo()
        logging.error(f"Fatal error: {e}")
        if verbose:
            logging.exception("Full traceback:")
        sys.exit(1)


def run_list_countries(client: DirectoryClient) -> None:
    """Print every country that has at least one relay."""
    table = country_table(client.fetch_countries())

    click.echo(f"{len(table)} available countries")
    click.echo("Code \t|\t Name")
    for code, name in table.items():
        click.echo(f"{code} \t|\t {name}")


def confirm_overwrite(path: Path) -> bool:
    """Ask before replacing an existing report. Only an explicit 'y' removes it."""
    click.echo(f"Output file {path} already exists, please specify a different file name")
    try:
        answer = click.prompt("Remove the existing file? (y/N)", default="",
                              show_default=False, prompt_suffix=" ")
    except click.Abort:
        return False

    if answer.strip() != "y":
        return False

    try:
        path.unlink()
    except OSError as e:
        raise ReportError(f"Failed to remove {path}: {e}")
    click.echo("Removed the existing file")
    return True


def run_benchmark(config: Config, client: DirectoryClient, prober: LatencyProber) -> None:
    """Probe every relay in scope and write the ranked report."""
    if not config.country_scope:
        click.echo("No country specified, searching all servers...")

    output_path = Path(config.output_path)
    if output_path.exists() and not confirm_overwrite(output_path):
        click.echo("Exiting...")
        return

    relays = filter_relays(client.fetch_relays(), config.country_scope)
    click.echo(f"Found {len(relays)} {pluralize('server', len(relays))}")

    def show_progress(count: int) -> None:
        click.echo(f"\r{count} {pluralize('server', count)} processed", nl=False)

    results = prober.run(relays, on_progress=show_progress)
    if relays:
        click.echo()

    rows = write_report(output_path, results)
    click.echo(f"Saved {rows} {pluralize('result', rows)} to {output_path}")


if __name__ == '__main__':
    main()
