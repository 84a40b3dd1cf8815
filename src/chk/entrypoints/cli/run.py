"""``chk run``: execute test files and report.

Each FILE is executed with :func:`runpy.run_path` while a freshly bootstrapped
runner is installed as the default, so module-level ``chk.test(...)`` calls
register on it. The runner then tests everything once, prints the report
(rich tree on stdout, or JSON with ``--json``) and the command exits with
status 1 unless every expectation passed and no test body raised.

Only the files given are executed; there is no directory discovery.
"""

from __future__ import annotations

import asyncio
import json
import logging
import runpy
from pathlib import Path

import click
from rich.console import Console

from chk.adapters.prompter.click_prompt import ClickPrompter
from chk.adapters.reporter.rich_console import RichConsoleReporter
from chk.bootstrap import bootstrap
from chk.config import InvalidSettingError, Settings
from chk.domain.report import ReportOptions
from chk.entrypoints.api import set_runner
from chk.interfaces.snapshot_store import SnapshotStoreError

from .helpers import describe_store, error

logger = logging.getLogger(__name__)

RUN_NAME = "__chk__"  # pragma: no mutate


def load_settings(**overrides: object) -> Settings:
    """Environment settings with CLI overrides applied.

    Raises:
        click.ClickException: If an environment variable is invalid.
    """
    try:
        return Settings.from_env().override(**overrides)
    except InvalidSettingError as e:
        raise click.ClickException(str(e)) from e


def _execute(path: Path) -> None:
    logger.debug("Loading %s", path)
    try:
        runpy.run_path(str(path), run_name=RUN_NAME)
    except Exception as e:
        logger.debug("Failed to load %s", path, exc_info=True)
        raise click.ClickException(f"Could not load {path}: {type(e).__name__}: {e}") from e


@click.command()
@click.argument(
    "files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--interactive/--no-interactive",
    default=None,
    help="Prompt on snapshot mismatches and run tests one at a time.",
)
@click.option("--head", is_flag=True, help="Summary only; omit expectation lines.")
@click.option(
    "--no-location", is_flag=True, help="Hide source locations of passing entries."
)
@click.option(
    "--expand", is_flag=True, help="Show children of passing tests as well."
)
@click.option("--json", "as_json", is_flag=True, help="Print the JSON report to stdout.")
@click.option(
    "--snapshot-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Local snapshot directory [env: CHK_SNAPSHOT_DIR].",
)
@click.option(
    "--snapshot-url", help="SQLAlchemy URL of a snapshot database [env: CHK_SNAPSHOT_URL]."
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    help="Seconds an async test body may run [env: CHK_TIMEOUT].",
)
@click.pass_context
def run(  # pylint: disable=too-many-arguments, too-many-positional-arguments, too-many-locals
    ctx: click.Context,
    files: tuple[Path, ...],
    interactive: bool | None,
    head: bool,
    no_location: bool,
    expand: bool,
    as_json: bool,
    snapshot_dir: Path | None,
    snapshot_url: str | None,
    timeout: float | None,
) -> None:
    """Run the tests defined in FILES."""
    settings = load_settings(
        snapshot_dir=snapshot_dir,
        snapshot_url=snapshot_url,
        timeout=timeout,
        interactive=interactive,
    )
    reporter = None
    if not as_json:
        reporter = RichConsoleReporter(Console(no_color=ctx.color is False), expand=expand)
    prompter = ClickPrompter() if settings.interactive else None

    try:
        container = bootstrap(settings, reporter=reporter, prompter=prompter)
    except SnapshotStoreError as e:
        raise click.ClickException(
            f"Cannot open snapshot store {describe_store(settings)}: {e}"
        ) from e

    previous = set_runner(container.runner)
    try:
        for path in files:
            _execute(path)
        options = ReportOptions(
            head=head, no_location=no_location, interactive=settings.interactive
        )
        summary = asyncio.run(container.runner.run(options))
    finally:
        set_runner(previous)

    if as_json:
        click.echo(json.dumps(container.runner.json(), indent=2, default=str))

    if not summary.ok:
        if as_json:
            error(summary.message)
        ctx.exit(1)
