"""
Data Store flows - create, write, hand over, finalize, close, and read.

Each function builds the instruction(s) with ``DataStoreProgram``, signs
with the given keypairs, and sends one transaction at a time. Remote
rejections are reported through the ``status``/``err`` fields of the
returned result dicts; nothing is retried.
"""

from __future__ import annotations

from typing import Optional, Sequence

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from ..datastore.layouts import require_u64
from ..datastore.program import DataStoreProgram
from ..datastore.types import DataStoreMetadata, DataStoreType
from ..utils import iter_chunks
from .rpc import get_account_info, get_balance, request_airdrop, wait_for_confirmation
from .tx import sign_and_send

# Payload bytes per update transaction. A legacy transaction is capped at
# 1232 bytes; the update accounts, signature and fixed fields take ~300.
DEFAULT_CHUNK_SIZE = 800

LAMPORTS_PER_SOL = 1_000_000_000


def create_data_store(
    payer: Keypair,
    data_account: Keypair,
    space: int,
    data_type: DataStoreType = DataStoreType.FILE,
    is_dynamic: bool = False,
    authority: Optional[Pubkey] = None,
    debug: bool = False,
) -> dict:
    """
    Create a data account and its metadata PDA.

    Args:
        payer: Fee payer (and default authority)
        data_account: Fresh keypair for the data account; it signs its own creation
        space: Initial space to allocate
        data_type: Type of data to be stored
        is_dynamic: Whether later writes may realloc the account
        authority: Authority public key (default: payer)
        debug: Ask the program to emit debug logs

    Returns:
        Result dict from ``sign_and_send``
    """
    ix = DataStoreProgram.initialize_data_store(
        fee_payer=payer.pubkey(),
        data_account=data_account.pubkey(),
        authority=authority or payer.pubkey(),
        data_type=data_type,
        is_created=False,
        space=space,
        is_dynamic=is_dynamic,
        debug=debug,
    )
    return sign_and_send([ix], [payer, data_account])


def write_data(
    authority: Keypair,
    data_account: Pubkey,
    data: bytes,
    offset: int = 0,
    data_type: DataStoreType = DataStoreType.FILE,
    realloc_down: bool = False,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    debug: bool = False,
) -> list[dict]:
    """
    Write ``data`` starting at ``offset``, one transaction per chunk.

    ``realloc_down`` is only set on the final chunk so the account is not
    shrunk between chunks. Stops at the first rejected chunk.

    Returns:
        Result dicts, one per chunk sent

    Raises:
        DataStoreError: If any chunk offset falls outside the u64 range;
            nothing is sent in that case
    """
    require_u64("offset", offset)
    require_u64("end offset", offset + max(len(data) - 1, 0))
    chunks = list(iter_chunks(data, chunk_size))
    results: list[dict] = []
    for index, (start, chunk) in enumerate(chunks):
        is_last = index == len(chunks) - 1
        ix = DataStoreProgram.update_data_store(
            authority=authority.pubkey(),
            data_account=data_account,
            data=chunk,
            offset=offset + start,
            realloc_down=realloc_down and is_last,
            data_type=data_type,
            debug=debug,
        )
        result = sign_and_send([ix], [authority])
        results.append(result)
        if result.get("status") == 0:
            break
    return results


def upload_data(
    payer: Keypair,
    data_account: Keypair,
    data: bytes,
    data_type: DataStoreType = DataStoreType.FILE,
    is_dynamic: bool = False,
    space: Optional[int] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    debug: bool = False,
) -> list[dict]:
    """
    Create a data store sized for ``data`` and write it.

    The payer is also the authority. Returns the create result followed by
    the write results; writing is skipped if creation was rejected.
    """
    created = create_data_store(
        payer,
        data_account,
        space=len(data) if space is None else space,
        data_type=data_type,
        is_dynamic=is_dynamic,
        debug=debug,
    )
    if created.get("status") == 0:
        return [created]
    written = write_data(
        payer,
        data_account.pubkey(),
        data,
        data_type=data_type,
        chunk_size=chunk_size,
        debug=debug,
    )
    return [created, *written]


def set_authority(
    authority: Keypair,
    data_account: Pubkey,
    new_authority: Keypair,
    debug: bool = False,
) -> dict:
    """Transfer authority; both the current and the new authority sign."""
    ix = DataStoreProgram.update_data_store_authority(
        old_authority=authority.pubkey(),
        data_account=data_account,
        new_authority=new_authority.pubkey(),
        debug=debug,
    )
    return sign_and_send([ix], [authority, new_authority])


def finalize(authority: Keypair, data_account: Pubkey, debug: bool = False) -> dict:
    ix = DataStoreProgram.finalize_data_store(authority.pubkey(), data_account, debug=debug)
    return sign_and_send([ix], [authority])


def close(authority: Keypair, data_account: Pubkey, debug: bool = False) -> dict:
    ix = DataStoreProgram.close_data_store(authority.pubkey(), data_account, debug=debug)
    return sign_and_send([ix], [authority])


def fetch_metadata(data_account: Pubkey) -> DataStoreMetadata:
    """Fetch and decode the metadata PDA of a data account."""
    pda, _ = DataStoreProgram.get_pda(data_account)
    return DataStoreProgram.parse_metadata_from_account_info(get_account_info(pda))


def fetch_data(data_account: Pubkey) -> Optional[bytes]:
    """Fetch the raw contents of a data account, or None if it is closed."""
    info = get_account_info(data_account)
    if info is None:
        return None
    return bytes(info.data)


def ensure_balance(
    pubkeys: Sequence[Pubkey],
    minimum: int = LAMPORTS_PER_SOL,
    airdrop_amount: int = 3 * LAMPORTS_PER_SOL // 2,
) -> list[str]:
    """
    Airdrop to every account whose balance is below ``minimum``.

    Only meaningful on devnet, testnet, or a local validator.

    Returns:
        Airdrop signatures, one per funded account
    """
    signatures: list[str] = []
    for pubkey in pubkeys:
        if get_balance(pubkey) < minimum:
            signature = request_airdrop(pubkey, airdrop_amount)
            wait_for_confirmation(signature)
            signatures.append(signature)
    return signatures
