"""
Create - Initialize a data account and its metadata PDA.

Flow:
1. Load the fee payer / authority keypair
2. Generate (or load) the data account keypair
3. Show the rent-exempt minimum for the requested space
4. Send the initialize instruction; the data account co-signs its creation
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click
from solders.keypair import Keypair

from ..client.rpc import get_minimum_balance_for_rent_exemption
from ..client.store import LAMPORTS_PER_SOL, create_data_store
from ..datastore.layouts import DataStoreError
from ..datastore.program import DataStoreProgram
from ..wallet.keypair import load_keypair_file
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


@click.command()
@click.option("--space", required=True, type=click.IntRange(min=0), help="Bytes to allocate")
@click.option("--dynamic/--static", "is_dynamic", default=False, help="Allow later reallocation")
@click.option("--authority", type=PUBKEY, default=None, help="Authority (default: signer)")
@click.option(
    "--data-keypair",
    type=click.Path(dir_okay=False),
    default=None,
    help="Keypair file for the data account (default: fresh keypair)",
)
@data_type_option
@keypair_option
@debug_option
@rpc_option
def create(
    space: int,
    is_dynamic: bool,
    authority,
    data_keypair: Optional[str],
    data_type: str,
    keypair_path: Optional[str],
    debug: bool,
    rpc_url: str,
) -> None:
    """
    Create a new data store account.

    Prints the data account address; keep it to write, finalize or close
    the store later.
    """
    click.echo("=== SolFS Create ===")
    click.echo("")

    use_rpc(rpc_url)
    payer = load_signer(keypair_path)

    try:
        data_account = load_keypair_file(Path(data_keypair)) if data_keypair else Keypair()
    except (ValueError, FileNotFoundError) as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(1)

    pda, bump = DataStoreProgram.get_pda(data_account.pubkey())
    click.echo(f"  Payer: {payer.pubkey()}")
    click.echo(f"  Data account: {data_account.pubkey()}")
    click.echo(f"  Metadata PDA: {pda} (bump {bump})")
    click.echo(f"  Type: {data_type}  Space: {space}  Dynamic: {is_dynamic}")
    try:
        rent = get_minimum_balance_for_rent_exemption(space)
    except Exception as exc:
        click.secho(f"Create failed: {exc}", fg="red")
        sys.exit(1)
    click.echo(f"  Rent-exempt minimum: {rent / LAMPORTS_PER_SOL:.9f} SOL ({rent} lamports)")
    click.echo("")

    try:
        result = create_data_store(
            payer,
            data_account,
            space=space,
            data_type=DATA_TYPES[data_type],
            is_dynamic=is_dynamic,
            authority=authority,
            debug=debug,
        )
    except DataStoreError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(1)
    except Exception as exc:
        click.secho(f"Create failed: {exc}", fg="red")
        sys.exit(1)

    report([result], "Create")
