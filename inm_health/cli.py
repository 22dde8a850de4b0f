"""CLI for inm-health."""

from __future__ import annotations

import json
import logging
import sys

import click

from inm_health import __version__
from inm_health.errors import ConfigurationError, ResourceError, SourceIOError

USAGE = """\
Usage: inm-health N datafile
    N is the number of bits to use in predicting the next bit.
    datafile is a binary file of random data to be tested.
        Bits are shifted in MSB to LSB in each byte."""


class _Command(click.Command):
    """Command whose usage errors exit with status 1."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = 1
            raise


@click.command(cls=_Command)
@click.argument("n", type=int)
@click.argument("datafile")
@click.option("--debug", is_flag=True, help="Report progress every 2^20 bits on stderr.")
@click.option("--dump-stats", is_flag=True, help="Print the per-context counts after the estimate.")
@click.option("--json", "as_json", is_flag=True, help="Print the full report as JSON.")
@click.version_option(__version__)
def main(n: int, datafile: str, debug: bool, dump_stats: bool, as_json: bool) -> None:
    """Estimate the entropy per bit of DATAFILE with an order-N bit model."""
    from inm_health.driver import HealthCheck
    from inm_health.sources import open_source

    if debug:
        logging.basicConfig(level=logging.INFO, format="%(message)s", stream=sys.stderr)

    try:
        with HealthCheck(n, debug=debug) as hc, open_source(datafile) as source:
            hc.feed(source)
            report = hc.finalize()
            stats = list(hc.dump_stats()) if dump_stats else []
    except ConfigurationError as e:
        click.echo(f"{e}\n{USAGE}", err=True)
        sys.exit(1)
    except SourceIOError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except ResourceError as e:
        click.echo(f"Error: out of memory: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(report.as_dict(), indent=2))
    else:
        click.echo(report.summary_line())
    for line in stats:
        click.echo(line)
