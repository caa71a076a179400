"""Options and output helpers shared by the data store commands."""

from __future__ import annotations

import os
import sys
from typing import Any, Callable, Iterable, Optional

import click
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from ..client.rpc import DEFAULT_RPC_URL
from ..datastore.types import DataStoreType
from ..wallet.keypair import resolve_keypair


class PubkeyType(click.ParamType):
    """Click parameter that parses a base58 public key."""

    name = "pubkey"

    def convert(self, value: Any, param: Optional[click.Parameter], ctx: Optional[click.Context]) -> Pubkey:
        if isinstance(value, Pubkey):
            return value
        try:
            return Pubkey.from_string(value)
        except Exception:
            self.fail(f"{value!r} is not a valid base58 public key", param, ctx)


PUBKEY = PubkeyType()

DATA_TYPES = {"file": DataStoreType.FILE, "directory": DataStoreType.DIRECTORY}


def rpc_option(func: Callable) -> Callable:
    return click.option(
        "--rpc-url",
        envvar="SOLFS_RPC_URL",
        default=DEFAULT_RPC_URL,
        help="Solana RPC URL",
    )(func)


def keypair_option(func: Callable) -> Callable:
    return click.option(
        "--keypair",
        "keypair_path",
        default=None,
        type=click.Path(dir_okay=False),
        help="Solana CLI keypair file (default: SOLFS_PRIVATE_KEY)",
    )(func)


def debug_option(func: Callable) -> Callable:
    return click.option(
        "--debug/--no-debug",
        default=False,
        help="Ask the program to emit debug logs",
    )(func)


def data_type_option(func: Callable) -> Callable:
    return click.option(
        "--type",
        "data_type",
        type=click.Choice(sorted(DATA_TYPES)),
        default="file",
        show_default=True,
        help="Kind of data stored",
    )(func)


def use_rpc(rpc_url: str) -> None:
    os.environ["SOLFS_RPC_URL"] = rpc_url


def load_signer(keypair_path: Optional[str]) -> Keypair:
    """Resolve the signing keypair or exit with an error."""
    try:
        return resolve_keypair(keypair_path)
    except (ValueError, FileNotFoundError) as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        click.echo("Run 'solfs keygen' first or pass --keypair.")
        sys.exit(1)


def report(results: Iterable[dict], action: str) -> None:
    """Print transaction results; exit 1 if any was rejected."""
    failed = False
    for result in results:
        signature = result.get("signature", "unknown")
        if result.get("status") == 0:
            failed = True
            click.secho(f"FAILED: {action} rejected", fg="red")
            click.echo(f"  TX: {signature}")
            click.echo(f"  Error: {result.get('err')}")
        else:
            click.echo(f"  TX: {signature}")
    if failed:
        sys.exit(1)
    click.secho(f"SUCCESS: {action} confirmed!", fg="green")
