"""
Inspect - Read a data store's metadata and contents.

Read-only: no keypair needed.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import click

from ..client.store import fetch_data, fetch_metadata
from ..datastore.layouts import InvalidAccountDataError
from ..datastore.program import DataStoreProgram
from ._shared import PUBKEY, rpc_option, use_rpc


@click.command()
@click.argument("data_account", type=PUBKEY)
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None, help="Save account data to a file")
@click.option("--json", "as_json", is_flag=True, help="Print metadata as JSON")
@rpc_option
def inspect(data_account, output: Optional[str], as_json: bool, rpc_url: str) -> None:
    """Show the metadata of DATA_ACCOUNT."""
    use_rpc(rpc_url)

    try:
        metadata = fetch_metadata(data_account)
    except InvalidAccountDataError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        click.echo("The metadata account is missing or closed.")
        sys.exit(1)
    except Exception as exc:
        click.secho(f"ERROR: Failed to read metadata: {exc}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(metadata.to_dict(), indent=2))
    else:
        pda, _ = DataStoreProgram.get_pda(data_account)
        click.echo("=== SolFS Inspect ===")
        click.echo("")
        click.echo(f"  Data account: {data_account}")
        click.echo(f"  Metadata PDA: {pda}")
        click.echo(f"  Type:         {metadata.data_type.name.lower()}")
        click.echo(f"  Status:       {metadata.data_status.name.lower()}")
        click.echo(f"  Authority:    {metadata.authority}")
        click.echo(f"  Dynamic:      {metadata.is_dynamic}")
        click.echo(f"  Space:        {metadata.space}")
        click.echo(f"  Bump seed:    {metadata.bump_seed}")
        click.echo(f"  Data hash:    {metadata.data_hash.hex()}")

    if output:
        try:
            data = fetch_data(data_account)
        except Exception as exc:
            click.secho(f"ERROR: Failed to read data: {exc}", fg="red")
            sys.exit(1)
        if data is None:
            click.secho("ERROR: Data account not found.", fg="red")
            sys.exit(1)
        Path(output).write_bytes(data)
        click.echo(f"Saved {len(data)} bytes to {output}", err=as_json)
