"""CLI entrypoint for kyanite."""

from __future__ import annotations

import logging
import sys
from functools import partial

import rich_click as click

from kyanite import __version__
from kyanite.dispatch.collector import OutputSink
from kyanite.dispatch.controllers import DispatchCliController, RunCommand

click.rich_click.USE_MARKDOWN = True
DISPATCH_CONTROLLER = DispatchCliController()


@click.command()
@click.version_option(version=__version__, prog_name="kyanite")
@click.option(
    "-j",
    "--jobs",
    "workers",
    type=click.IntRange(min=1),
    default=None,
    help="Number of parallel workers. Defaults to the CPU count or KYANITE_JOBS.",
)
@click.option(
    "-k",
    "--keep-order",
    is_flag=True,
    help="Print results in input order instead of completion order.",
)
@click.option(
    "-n",
    "--dry-run",
    is_flag=True,
    help="Print the expanded commands without running them.",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Tag output with job ids and log progress to stderr.",
)
@click.option(
    "--max-jobs",
    type=click.IntRange(min=0),
    default=None,
    help="Stop after this many jobs (0 = unlimited).",
)
@click.option(
    "-I",
    "--input",
    "placeholder",
    default=None,
    help="Placeholder string; its first and last characters delimit expansions. Default `{}`.",
)
@click.option(
    "--field-separator",
    default=None,
    help="Separator used to split lines into fields. Default is a single space.",
)
@click.argument("command")
def kyanite(  # noqa: PLR0913
    workers: int | None,
    keep_order: bool,
    dry_run: bool,
    verbose: bool,
    max_jobs: int | None,
    placeholder: str | None,
    field_separator: str | None,
    command: str,
) -> None:
    """Run COMMAND once per line of standard input, in parallel.

    Expansions: `{}` whole line, `{N}` field N, `{N+}` fields N..end,
    `{N-}` fields 1..N, `{s/pat/repl/gi}` substitution, `{/pat/G}` capture group.
    """

    try:
        settings = DISPATCH_CONTROLLER.resolve_settings(
            RunCommand(
                command=command,
                workers=workers,
                keep_order=keep_order,
                dry_run=dry_run,
                verbose=verbose,
                max_jobs=max_jobs,
                placeholder=placeholder,
                field_separator=field_separator,
            ),
        )
    except ValueError as error:
        raise click.UsageError(str(error)) from error

    _configure_logging(verbose=settings.verbose)
    summary = DISPATCH_CONTROLLER.run(
        settings,
        lines=click.get_text_stream("stdin"),
        sink=OutputSink(out=click.echo, err=partial(click.echo, err=True)),
    )
    if summary.input_error is not None:
        raise click.ClickException(f"error reading input: {summary.input_error}")


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        stream=sys.stderr,
        force=True,
    )


if __name__ == "__main__":  # pragma: no cover
    kyanite()
