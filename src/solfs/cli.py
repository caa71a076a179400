"""
SolFS CLI

Command-line interface for the Solana filesystem Data Store Program.

Identity = Ed25519 Solana keypair. The keypair pays fees and acts as the
authority of the data stores it creates.

Commands:
  keygen         - Create and store a new keypair
  whoami         - Show current public key
  info           - Show configuration
  pda            - Derive the metadata PDA of a data account
  airdrop        - Request devnet SOL
  create         - Initialize a data account
  write          - Write a file into a data account
  upload         - Create a data account and write a file into it
  set-authority  - Transfer authority
  finalize       - Lock a data account against writes
  close          - Close a data account and its metadata
  inspect        - Show metadata and contents
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from .client.store import LAMPORTS_PER_SOL
from .datastore.program import DataStoreProgram
from .datastore.types import get_program_id
from .wallet import keypair as wallet_keypair
from .wallet.keypair import (
    generate_keypair,
    get_pubkey,
    load_private_key,
    save_private_key,
)
from .commands._shared import PUBKEY, keypair_option, load_signer, rpc_option, use_rpc


# ============ Constants ============

VERSION = "1.0.4"


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="solfs")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """SolFS: Solana filesystem Data Store."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ============ Data Store Commands ============

from .commands.create import create
from .commands.write import upload, write
from .commands.lifecycle import close, finalize, set_authority
from .commands.inspect import inspect

cli.add_command(create)
cli.add_command(write)
cli.add_command(upload)
cli.add_command(set_authority)
cli.add_command(finalize)
cli.add_command(close)
cli.add_command(inspect)


# ============ Identity ============


@cli.command()
@click.option("--force", is_flag=True, help="Overwrite an existing key")
def keygen(force: bool) -> None:
    """Generate a keypair and store it in ~/.solfs/.env."""
    if not force:
        try:
            existing = get_pubkey(load_private_key())
            click.echo(f"Keypair already exists: {existing}")
            click.echo("Use --force to replace it.")
            return
        except ValueError:
            pass

    secret, pubkey = generate_keypair()
    env_path = save_private_key(secret)
    click.secho("Keypair created!", fg="green")
    click.echo(f"  Public key: {pubkey}")
    click.echo(f"  Saved to:   {env_path}")


@cli.command()
def whoami() -> None:
    """Show current wallet identity."""
    try:
        click.echo(f"Public key: {get_pubkey(load_private_key())}")
    except ValueError:
        click.echo("No keypair found.")
        click.echo("Run 'solfs keygen' to create one.")
        sys.exit(1)


@cli.command()
@rpc_option
def info(rpc_url: str) -> None:
    """Show configuration."""
    click.echo(click.style("SolFS", bold=True) + click.style(f" v{VERSION}", dim=True))
    click.echo(f"  RPC URL:    {rpc_url}")
    click.echo(f"  Program ID: {get_program_id()}")
    try:
        pubkey = get_pubkey(load_private_key())
        click.echo(f"  Public key: {pubkey}")
    except ValueError:
        click.echo("  Public key: " + click.style("not initialized", fg="yellow") + click.style("  (run: solfs keygen)", dim=True))
    click.echo(f"  Config:     {wallet_keypair.SOLFS_ENV}")


# ============ Utilities ============


@cli.command()
@click.argument("data_account", type=PUBKEY)
def pda(data_account) -> None:
    """Derive the metadata PDA of DATA_ACCOUNT."""
    address, bump = DataStoreProgram.get_pda(data_account)
    click.echo(f"PDA:  {address}")
    click.echo(f"Bump: {bump}")


@cli.command()
@click.option("--amount", default=1.0, type=float, show_default=True, help="SOL to request")
@click.option("--to", "recipient", type=PUBKEY, default=None, help="Recipient (default: signer)")
@keypair_option
@rpc_option
def airdrop(amount: float, recipient, keypair_path: Optional[str], rpc_url: str) -> None:
    """Request SOL from a devnet or test validator faucet."""
    from .client.rpc import get_balance, request_airdrop, wait_for_confirmation

    use_rpc(rpc_url)
    if recipient is None:
        recipient = load_signer(keypair_path).pubkey()

    lamports = int(amount * LAMPORTS_PER_SOL)
    try:
        signature = request_airdrop(recipient, lamports)
        status = wait_for_confirmation(signature)
    except Exception as exc:
        click.secho(f"Airdrop failed: {exc}", fg="red")
        sys.exit(1)

    if status.get("err") is not None:
        click.secho(f"FAILED: Airdrop rejected: {status['err']}", fg="red")
        sys.exit(1)

    balance = get_balance(recipient)
    click.secho(f"SUCCESS: Airdropped {amount} SOL to {recipient}", fg="green")
    click.echo(f"  Balance: {balance / LAMPORTS_PER_SOL:.4f} SOL")


# ============ Entry Points ============


def main() -> None:
    """SolFS CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
