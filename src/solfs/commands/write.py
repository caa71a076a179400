"""
Write - Upload file contents into a data account.

``write`` targets an existing account; ``upload`` creates one sized for
the file first. Large files are split into one update transaction per
chunk at increasing offsets.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click
from solders.keypair import Keypair

from ..client.store import DEFAULT_CHUNK_SIZE, upload_data, write_data
from ..datastore.layouts import DataStoreError
from ._shared import (
    DATA_TYPES,
    PUBKEY,
    data_type_option,
    debug_option,
    keypair_option,
    load_signer,
    report,
    rpc_option,
    use_rpc,
)


def _read_payload(path: str) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        click.secho(f"ERROR: Cannot read {path}: {exc}", fg="red")
        sys.exit(1)


@click.command()
@click.argument("data_account", type=PUBKEY)
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.option("--offset", default=0, type=click.IntRange(min=0), help="Write offset")
@click.option("--realloc-down", is_flag=True, help="Shrink the account to fit after writing")
@click.option("--chunk-size", default=DEFAULT_CHUNK_SIZE, type=click.IntRange(min=1), help="Bytes per transaction")
@data_type_option
@keypair_option
@debug_option
@rpc_option
def write(
    data_account,
    source: str,
    offset: int,
    realloc_down: bool,
    chunk_size: int,
    data_type: str,
    keypair_path: Optional[str],
    debug: bool,
    rpc_url: str,
) -> None:
    """Write SOURCE into DATA_ACCOUNT as its authority."""
    click.echo("=== SolFS Write ===")
    click.echo("")

    use_rpc(rpc_url)
    authority = load_signer(keypair_path)
    payload = _read_payload(source)

    click.echo(f"  Authority: {authority.pubkey()}")
    click.echo(f"  Data account: {data_account}")
    click.echo(f"  Bytes: {len(payload)} at offset {offset}")
    click.echo("")

    try:
        results = write_data(
            authority,
            data_account,
            payload,
            offset=offset,
            data_type=DATA_TYPES[data_type],
            realloc_down=realloc_down,
            chunk_size=chunk_size,
            debug=debug,
        )
    except DataStoreError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(1)
    except Exception as exc:
        click.secho(f"Write failed: {exc}", fg="red")
        sys.exit(1)

    report(results, "Write")


@click.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.option("--dynamic/--static", "is_dynamic", default=False, help="Allow later reallocation")
@click.option("--chunk-size", default=DEFAULT_CHUNK_SIZE, type=click.IntRange(min=1), help="Bytes per transaction")
@data_type_option
@keypair_option
@debug_option
@rpc_option
def upload(
    source: str,
    is_dynamic: bool,
    chunk_size: int,
    data_type: str,
    keypair_path: Optional[str],
    debug: bool,
    rpc_url: str,
) -> None:
    """Create a data account sized for SOURCE and write it."""
    click.echo("=== SolFS Upload ===")
    click.echo("")

    use_rpc(rpc_url)
    payer = load_signer(keypair_path)
    payload = _read_payload(source)
    data_account = Keypair()

    click.echo(f"  Authority: {payer.pubkey()}")
    click.echo(f"  Data account: {data_account.pubkey()}")
    click.echo(f"  Bytes: {len(payload)}")
    click.echo("")

    try:
        results = upload_data(
            payer,
            data_account,
            payload,
            data_type=DATA_TYPES[data_type],
            is_dynamic=is_dynamic,
            chunk_size=chunk_size,
            debug=debug,
        )
    except DataStoreError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(1)
    except Exception as exc:
        click.secho(f"Upload failed: {exc}", fg="red")
        sys.exit(1)

    report(results, "Upload")
