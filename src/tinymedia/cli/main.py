from __future__ import annotations

import sys
from typing import Optional, Tuple

import click

from tinymedia import __version__
from tinymedia.cli.meta import handle_meta
from tinymedia.config import TinyMediaConfig
from tinymedia.utils.logging import configure_logging


@click.group()
@click.version_option(__version__, prog_name="tinymedia")
@click.option("--log-level", default=None, help="Log level (default: TINYMEDIA_LOG_LEVEL or WARNING).")
@click.option("--json-logs/--console-logs", default=None, help="Render logs as JSON.")
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str], json_logs: Optional[bool]) -> None:
    config = TinyMediaConfig.from_env()
    if log_level is not None:
        config.log_level = log_level
    if json_logs is not None:
        config.json_logs = json_logs
    try:
        configure_logging(level=config.log_level, json_output=config.json_logs)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--log-level") from e
    ctx.obj = config


@cli.command("meta")
@click.option(
    "-i",
    "--input",
    "inputs",
    multiple=True,
    type=click.Path(dir_okay=False),
    help="Input file (repeatable).",
)
@click.option("-m", "--meta", "meta", default="", help="field1,field2=value2 (read or update).")
@click.option("-v", "--vendor", "vendor", default=None, help="Metadata vendor, e.g. tinymeta.")
@click.option("-w", "--workers", type=click.IntRange(min=1), default=None, help="Files processed in parallel.")
@click.pass_obj
def meta_cmd(
    config: TinyMediaConfig,
    inputs: Tuple[str, ...],
    meta: str,
    vendor: Optional[str],
    workers: Optional[int],
) -> None:
    """Read or update vendor metadata fields in JPEG files."""
    fields = meta.split(",")
    if len(fields) == 1 and fields[0] == "":
        return

    vendor = vendor or config.vendor
    if not vendor:
        raise click.UsageError("--vendor is required when --meta is used")

    report = handle_meta(
        list(inputs),
        fields,
        vendor,
        max_workers=workers or config.max_workers,
        chunk_size=config.chunk_size,
    )
    for result in report.results:
        if result.ok:
            if result.output:
                click.echo(result.output)
        else:
            click.echo(f"{result.path}: {result.error}", err=True)

    if report.failed:
        sys.exit(1)


if __name__ == "__main__":
    cli()
