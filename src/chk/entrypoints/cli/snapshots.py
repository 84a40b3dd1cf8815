"""``chk snapshots``: inspect and prune the snapshot store.

Works against the store the run command would use: ``--snapshot-url`` /
``CHK_SNAPSHOT_URL`` when set, otherwise ``--snapshot-dir`` /
``CHK_SNAPSHOT_DIR``. Listings go to stdout; notices go to stderr.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import click
import click_extra as clickx

from chk.bootstrap import build_snapshot_store
from chk.interfaces.snapshot_store import SnapshotStoreError

from .helpers import describe_store, success, warn
from .run import load_settings

if TYPE_CHECKING:
    from chk.config import Settings
    from chk.interfaces.snapshot_store import SnapshotStore


def _open_store(settings: Settings) -> SnapshotStore:
    try:
        return build_snapshot_store(settings)
    except SnapshotStoreError as e:
        raise click.ClickException(
            f"Cannot open snapshot store {describe_store(settings)}: {e}"
        ) from e


@click.group(cls=clickx.ExtraGroup)
@click.option(
    "--snapshot-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Local snapshot directory [env: CHK_SNAPSHOT_DIR].",
)
@click.option(
    "--snapshot-url", help="SQLAlchemy URL of a snapshot database [env: CHK_SNAPSHOT_URL]."
)
@click.pass_context
def snapshots(ctx: click.Context, snapshot_dir: Path | None, snapshot_url: str | None) -> None:
    """Inspect stored snapshots."""
    ctx.obj = load_settings(snapshot_dir=snapshot_dir, snapshot_url=snapshot_url)


@snapshots.command(name="list")
@click.option("--json", "as_json", is_flag=True, help="Print a JSON array.")
@click.pass_obj
def list_(settings: Settings, as_json: bool) -> None:
    """List snapshot identifiers."""
    store = _open_store(settings)
    try:
        ids = store.list_ids()
    except SnapshotStoreError as e:
        raise click.ClickException(str(e)) from e
    if as_json:
        click.echo(json.dumps(ids))
        return
    if not ids:
        warn(f"No snapshots in {describe_store(settings)}.")
        return
    for snapshot_id in ids:
        click.echo(snapshot_id)


@snapshots.command()
@click.argument("snapshot_id")
@click.pass_obj
def show(settings: Settings, snapshot_id: str) -> None:
    """Print one snapshot as JSON."""
    store = _open_store(settings)
    try:
        record = store.load(snapshot_id)
    except SnapshotStoreError as e:
        raise click.ClickException(str(e)) from e
    if record is None:
        raise click.ClickException(f"Snapshot '{snapshot_id}' not found.")
    click.echo(json.dumps(record.to_dict(), indent=2, sort_keys=True))


@snapshots.command()
@click.argument("snapshot_id")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_obj
def delete(settings: Settings, snapshot_id: str, yes: bool) -> None:
    """Delete one snapshot; the next run records it afresh."""
    store = _open_store(settings)
    if not yes:
        click.confirm(f"Delete snapshot '{snapshot_id}'?", abort=True, err=True)
    try:
        store.delete(snapshot_id)
    except SnapshotStoreError as e:
        raise click.ClickException(str(e)) from e
    success(f"Deleted snapshot '{snapshot_id}'.")
