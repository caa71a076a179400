"""
Lifecycle - Hand over, finalize, and close data stores.

All three are authority-only operations. The program rejects them if the
signer is not the recorded authority; that rejection surfaces here only
as a failed transaction.
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from ..client.store import close as close_store
from ..client.store import finalize as finalize_store
from ..client.store import set_authority as set_store_authority
from ..wallet.keypair import load_keypair_file
from ._shared import PUBKEY, debug_option, keypair_option, load_signer, report, rpc_option, use_rpc


@click.command("set-authority")
@click.argument("data_account", type=PUBKEY)
@click.option(
    "--new-authority-keypair",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Keypair file of the new authority (it must co-sign)",
)
@keypair_option
@debug_option
@rpc_option
def set_authority(
    data_account,
    new_authority_keypair: str,
    keypair_path: Optional[str],
    debug: bool,
    rpc_url: str,
) -> None:
    """Transfer authority of DATA_ACCOUNT to a new keypair."""
    click.echo("=== SolFS Set Authority ===")
    click.echo("")

    use_rpc(rpc_url)
    authority = load_signer(keypair_path)
    try:
        new_authority = load_keypair_file(new_authority_keypair)
    except (ValueError, FileNotFoundError) as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(1)

    click.echo(f"  Data account: {data_account}")
    click.echo(f"  Current authority: {authority.pubkey()}")
    click.echo(f"  New authority: {new_authority.pubkey()}")
    click.echo("")

    try:
        result = set_store_authority(authority, data_account, new_authority, debug=debug)
    except Exception as exc:
        click.secho(f"Set authority failed: {exc}", fg="red")
        sys.exit(1)

    report([result], "Set authority")


@click.command()
@click.argument("data_account", type=PUBKEY)
@keypair_option
@debug_option
@rpc_option
def finalize(data_account, keypair_path: Optional[str], debug: bool, rpc_url: str) -> None:
    """
    Finalize DATA_ACCOUNT.

    A finalized store can no longer be written.
    """
    click.echo("=== SolFS Finalize ===")
    click.echo("")

    use_rpc(rpc_url)
    authority = load_signer(keypair_path)
    click.echo(f"  Data account: {data_account}")
    click.echo("")

    try:
        result = finalize_store(authority, data_account, debug=debug)
    except Exception as exc:
        click.secho(f"Finalize failed: {exc}", fg="red")
        sys.exit(1)

    report([result], "Finalize")


@click.command()
@click.argument("data_account", type=PUBKEY)
@keypair_option
@debug_option
@rpc_option
def close(data_account, keypair_path: Optional[str], debug: bool, rpc_url: str) -> None:
    """Close DATA_ACCOUNT and its metadata PDA, refunding rent to the authority."""
    click.echo("=== SolFS Close ===")
    click.echo("")

    use_rpc(rpc_url)
    authority = load_signer(keypair_path)
    click.echo(f"  Data account: {data_account}")
    click.echo("")

    try:
        result = close_store(authority, data_account, debug=debug)
    except Exception as exc:
        click.secho(f"Close failed: {exc}", fg="red")
        sys.exit(1)

    report([result], "Close")
