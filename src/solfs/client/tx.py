"""
Transaction Builder - Build, sign, and send Solana transactions.

Uses solders for message construction and signing, and the httpx-based
JSON-RPC client for submission. The first signer pays the fees.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from solders.hash import Hash
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.transaction import Transaction

from .rpc import get_latest_blockhash, send_raw_transaction, wait_for_confirmation


def _dedupe_signers(signers: Sequence[Keypair]) -> list[Keypair]:
    seen: set[str] = set()
    unique: list[Keypair] = []
    for signer in signers:
        key = str(signer.pubkey())
        if key not in seen:
            seen.add(key)
            unique.append(signer)
    return unique


def build_transaction(
    instructions: Sequence[Instruction],
    signers: Sequence[Keypair],
    blockhash: Optional[Hash] = None,
) -> Transaction:
    """
    Build and sign a legacy transaction.

    Args:
        instructions: Instructions in execution order
        signers: Signing keypairs; the first one is the fee payer
        blockhash: Recent blockhash (default: fetched from the cluster)

    Returns:
        Signed transaction
    """
    if not signers:
        raise ValueError("At least one signer (the fee payer) is required")

    signers = _dedupe_signers(signers)
    if blockhash is None:
        blockhash = get_latest_blockhash()

    return Transaction.new_signed_with_payer(
        list(instructions),
        signers[0].pubkey(),
        signers,
        blockhash,
    )


def sign_and_send(
    instructions: Sequence[Instruction],
    signers: Sequence[Keypair],
    skip_preflight: bool = True,
    wait: bool = True,
    timeout: int = 60,
) -> dict:
    """
    Sign a transaction and send it.

    Args:
        instructions: Instructions in execution order
        signers: Signing keypairs; the first one is the fee payer
        skip_preflight: Skip the cluster's simulation step
        wait: Whether to wait for confirmation
        timeout: Confirmation wait timeout

    Returns:
        Dict with signature and, if waited, status (1 ok / 0 rejected) and err
    """
    tx = build_transaction(instructions, signers)
    signature = send_raw_transaction(bytes(tx), skip_preflight=skip_preflight)
    result: dict[str, Any] = {"signature": signature}

    if wait:
        status = wait_for_confirmation(signature, timeout=timeout)
        result["err"] = status.get("err")
        result["status"] = 0 if result["err"] is not None else 1

    return result
