"""
JSON-RPC Client for Solana clusters.

Lightweight alternative to solana-py: uses httpx for HTTP and solders for
the typed values (public keys, hashes, accounts). Supports account reads,
balance queries, transaction submission, and confirmation polling.
"""

from __future__ import annotations

import os
import time
from typing import Any, Optional, Sequence

import httpx
from solders.account import Account
from solders.hash import Hash
from solders.pubkey import Pubkey

from ..utils import b64_decode, b64_encode

# Default RPC endpoint (devnet)
DEFAULT_RPC_URL = "https://api.devnet.solana.com"
DEFAULT_COMMITMENT = "confirmed"

_COMMITMENT_RANK = {"processed": 0, "confirmed": 1, "finalized": 2}


class RpcError(RuntimeError):
    """JSON-RPC error returned by the cluster."""

    def __init__(self, error: Any) -> None:
        if isinstance(error, dict):
            self.code = error.get("code")
            self.message = error.get("message", "")
            self.data = error.get("data")
        else:
            self.code = None
            self.message = str(error)
            self.data = None
        super().__init__(f"RPC error: {self.message}" + (f" (code {self.code})" if self.code is not None else ""))


def get_rpc_url() -> str:
    """Get the RPC URL from environment or default."""
    return os.environ.get("SOLFS_RPC_URL", DEFAULT_RPC_URL)


def get_commitment() -> str:
    """Get the commitment level from environment or default."""
    return os.environ.get("SOLFS_COMMITMENT", DEFAULT_COMMITMENT)


def _rpc_call(method: str, params: list, rpc_url: Optional[str] = None) -> Any:
    """
    Make a JSON-RPC call.

    Args:
        method: RPC method name (e.g., "getAccountInfo")
        params: RPC parameters
        rpc_url: RPC endpoint URL

    Returns:
        Result field from the RPC response

    Raises:
        RpcError: If the response carries an error member
        httpx.HTTPStatusError: On a non-2xx HTTP response
    """
    url = rpc_url or get_rpc_url()
    payload = {
        "jsonrpc": "2.0",
        "method": method,
        "params": params,
        "id": 1,
    }

    with httpx.Client(timeout=30) as client:
        response = client.post(url, json=payload)
        response.raise_for_status()
        data = response.json()

    if "error" in data:
        raise RpcError(data["error"])

    return data.get("result")


def _parse_account(value: Optional[dict]) -> Optional[Account]:
    if value is None:
        return None
    raw, encoding = value["data"]
    if encoding != "base64":
        raise ValueError(f"Unexpected account data encoding: {encoding}")
    return Account(
        lamports=value["lamports"],
        data=b64_decode(raw),
        owner=Pubkey.from_string(value["owner"]),
        executable=value.get("executable", False),
        rent_epoch=value.get("rentEpoch", 0),
    )


def get_account_info(pubkey: Pubkey, rpc_url: Optional[str] = None) -> Optional[Account]:
    """
    Fetch an account.

    Args:
        pubkey: Account address
        rpc_url: RPC endpoint URL

    Returns:
        The account, or None if it does not exist
    """
    result = _rpc_call(
        "getAccountInfo",
        [str(pubkey), {"encoding": "base64", "commitment": get_commitment()}],
        rpc_url=rpc_url,
    )
    return _parse_account(result["value"])


def get_multiple_accounts(
    pubkeys: Sequence[Pubkey], rpc_url: Optional[str] = None
) -> list[Optional[Account]]:
    """Fetch several accounts in one request, preserving input order."""
    result = _rpc_call(
        "getMultipleAccounts",
        [[str(p) for p in pubkeys], {"encoding": "base64", "commitment": get_commitment()}],
        rpc_url=rpc_url,
    )
    return [_parse_account(v) for v in result["value"]]


def get_balance(pubkey: Pubkey, rpc_url: Optional[str] = None) -> int:
    """
    Get SOL balance for an address.

    Returns:
        Balance in lamports
    """
    result = _rpc_call(
        "getBalance", [str(pubkey), {"commitment": get_commitment()}], rpc_url=rpc_url
    )
    return int(result["value"])


def get_minimum_balance_for_rent_exemption(size: int, rpc_url: Optional[str] = None) -> int:
    """Lamports needed to keep an account of ``size`` bytes rent exempt."""
    return int(_rpc_call("getMinimumBalanceForRentExemption", [size], rpc_url=rpc_url))


def get_latest_blockhash(rpc_url: Optional[str] = None) -> Hash:
    """Get the most recent blockhash for transaction signing."""
    result = _rpc_call(
        "getLatestBlockhash", [{"commitment": get_commitment()}], rpc_url=rpc_url
    )
    return Hash.from_string(result["value"]["blockhash"])


def send_raw_transaction(
    raw_tx: bytes,
    skip_preflight: bool = True,
    rpc_url: Optional[str] = None,
) -> str:
    """
    Send a signed, serialized transaction.

    Args:
        raw_tx: Wire-format transaction bytes
        skip_preflight: Skip the cluster's simulation step

    Returns:
        Transaction signature (base58)
    """
    return _rpc_call(
        "sendTransaction",
        [
            b64_encode(raw_tx),
            {
                "encoding": "base64",
                "skipPreflight": skip_preflight,
                "preflightCommitment": get_commitment(),
            },
        ],
        rpc_url=rpc_url,
    )


def get_signature_status(signature: str, rpc_url: Optional[str] = None) -> Optional[dict]:
    """Get the status of a transaction signature, or None if unknown."""
    result = _rpc_call(
        "getSignatureStatuses",
        [[signature], {"searchTransactionHistory": True}],
        rpc_url=rpc_url,
    )
    return result["value"][0]


def wait_for_confirmation(
    signature: str,
    timeout: int = 60,
    poll_interval: float = 1.0,
    rpc_url: Optional[str] = None,
) -> dict:
    """
    Wait until a signature reaches the configured commitment.

    Args:
        signature: Transaction signature
        timeout: Maximum wait time in seconds
        poll_interval: Polling interval in seconds
        rpc_url: RPC endpoint URL

    Returns:
        Signature status dict (``err`` is non-null if the program rejected it)

    Raises:
        TimeoutError: If the signature is not confirmed within timeout
    """
    wanted = _COMMITMENT_RANK.get(get_commitment(), 1)
    start = time.time()
    while time.time() - start < timeout:
        status = get_signature_status(signature, rpc_url=rpc_url)
        if status is not None:
            if status.get("err") is not None:
                return status
            reached = _COMMITMENT_RANK.get(status.get("confirmationStatus") or "", -1)
            if reached >= wanted:
                return status
        time.sleep(poll_interval)

    raise TimeoutError(f"Transaction {signature} not confirmed within {timeout}s")


def request_airdrop(pubkey: Pubkey, lamports: int, rpc_url: Optional[str] = None) -> str:
    """Request devnet/testnet lamports. Returns the airdrop signature."""
    return _rpc_call(
        "requestAirdrop",
        [str(pubkey), lamports, {"commitment": get_commitment()}],
        rpc_url=rpc_url,
    )
