"""
Data Store Program - instruction builders and metadata parsing.

Builders return unsigned ``solders`` instructions; signing and submission
live in ``solfs.client``. No account state is checked here: the remote
program enforces authority, finalization and reallocation rules.
"""

from __future__ import annotations

from typing import Any, Optional

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from solders.system_program import ID as SYS_PROGRAM_ID

from .layouts import (
    InvalidAccountDataError,
    create_close_instruction_data,
    create_finalize_instruction_data,
    create_initialize_instruction_data,
    create_update_authority_instruction_data,
    create_update_instruction_data,
    decode_metadata,
    require_u64,
)
from .types import PDA_SEED, DataStoreMetadata, DataStoreType, resolve_program_id


class DataStoreProgram:
    """Static instruction builders for the Data Store Program."""

    @staticmethod
    def get_pda(data_account: Pubkey, program_id: Optional[Pubkey] = None) -> tuple[Pubkey, int]:
        """
        Derive the metadata PDA for a data account.

        Returns:
            Tuple of (pda, bump_seed)
        """
        return Pubkey.find_program_address(
            [PDA_SEED, bytes(data_account)],
            resolve_program_id(program_id),
        )

    @staticmethod
    def initialize_data_store(
        fee_payer: Pubkey,
        data_account: Pubkey,
        authority: Pubkey,
        data_type: DataStoreType,
        is_created: bool,
        space: int,
        is_dynamic: bool,
        debug: bool = False,
        program_id: Optional[Pubkey] = None,
    ) -> Instruction:
        """
        Build the instruction that creates a data account and its metadata PDA.

        Args:
            fee_payer: Account paying for the transaction
            data_account: Data account to initialize
            authority: Authority of the data account
            data_type: Type of data to be stored
            is_created: Whether the data account already exists; if not, it
                must sign so the program can create it
            space: Space to allocate for the data account
            is_dynamic: Whether the account can be reallocated later
            debug: Ask the program to emit debug logs
            program_id: Override the Data Store program ID

        Returns:
            Unsigned instruction
        """
        program_id = resolve_program_id(program_id)
        pda, bump_seed = DataStoreProgram.get_pda(data_account, program_id)

        data = create_initialize_instruction_data(
            debug=debug,
            data_type=data_type,
            bump_seed=bump_seed,
            is_created=is_created,
            space=require_u64("space", space),
            authority=authority,
            is_dynamic=is_dynamic,
        )

        return Instruction(
            program_id,
            data,
            [
                AccountMeta(fee_payer, is_signer=True, is_writable=True),
                AccountMeta(data_account, is_signer=not is_created, is_writable=True),
                AccountMeta(pda, is_signer=False, is_writable=True),
                AccountMeta(SYS_PROGRAM_ID, is_signer=False, is_writable=False),
            ],
        )

    @staticmethod
    def update_data_store(
        authority: Pubkey,
        data_account: Pubkey,
        data: bytes,
        offset: int,
        realloc_down: bool,
        data_type: DataStoreType,
        debug: bool = False,
        program_id: Optional[Pubkey] = None,
    ) -> Instruction:
        """
        Build the instruction that writes ``data`` at ``offset``.

        Args:
            authority: Authority of the data account (pays for reallocation)
            data_account: Data account to update
            data: Bytes to write
            offset: Offset at which to write
            realloc_down: Whether to shrink the account to fit after the write
            data_type: Type of data being stored
            debug: Ask the program to emit debug logs
            program_id: Override the Data Store program ID
        """
        program_id = resolve_program_id(program_id)
        pda, _ = DataStoreProgram.get_pda(data_account, program_id)

        payload = create_update_instruction_data(
            debug=debug,
            data=data,
            offset=require_u64("offset", offset),
            realloc_down=realloc_down,
            data_type=data_type,
        )

        return Instruction(
            program_id,
            payload,
            [
                AccountMeta(authority, is_signer=True, is_writable=True),
                AccountMeta(data_account, is_signer=False, is_writable=True),
                AccountMeta(pda, is_signer=False, is_writable=True),
                AccountMeta(SYS_PROGRAM_ID, is_signer=False, is_writable=False),
            ],
        )

    @staticmethod
    def update_data_store_authority(
        old_authority: Pubkey,
        data_account: Pubkey,
        new_authority: Pubkey,
        debug: bool = False,
        program_id: Optional[Pubkey] = None,
    ) -> Instruction:
        """Build the instruction that hands authority to ``new_authority``.

        Both the current and the new authority must sign.
        """
        program_id = resolve_program_id(program_id)
        pda, _ = DataStoreProgram.get_pda(data_account, program_id)

        return Instruction(
            program_id,
            create_update_authority_instruction_data(debug),
            [
                AccountMeta(old_authority, is_signer=True, is_writable=False),
                AccountMeta(data_account, is_signer=False, is_writable=False),
                AccountMeta(pda, is_signer=False, is_writable=True),
                AccountMeta(new_authority, is_signer=True, is_writable=False),
            ],
        )

    @staticmethod
    def finalize_data_store(
        authority: Pubkey,
        data_account: Pubkey,
        debug: bool = False,
        program_id: Optional[Pubkey] = None,
    ) -> Instruction:
        """Build the instruction that locks a data account against further writes."""
        program_id = resolve_program_id(program_id)
        pda, _ = DataStoreProgram.get_pda(data_account, program_id)

        return Instruction(
            program_id,
            create_finalize_instruction_data(debug),
            [
                AccountMeta(authority, is_signer=True, is_writable=False),
                AccountMeta(data_account, is_signer=False, is_writable=False),
                AccountMeta(pda, is_signer=False, is_writable=True),
            ],
        )

    @staticmethod
    def close_data_store(
        authority: Pubkey,
        data_account: Pubkey,
        debug: bool = False,
        program_id: Optional[Pubkey] = None,
    ) -> Instruction:
        """Build the instruction that closes both accounts, refunding rent to the authority."""
        program_id = resolve_program_id(program_id)
        pda, _ = DataStoreProgram.get_pda(data_account, program_id)

        return Instruction(
            program_id,
            create_close_instruction_data(debug),
            [
                AccountMeta(authority, is_signer=True, is_writable=True),
                AccountMeta(data_account, is_signer=False, is_writable=True),
                AccountMeta(pda, is_signer=False, is_writable=True),
            ],
        )

    @staticmethod
    def parse_metadata_from_account_info(account_info: Optional[Any]) -> DataStoreMetadata:
        """
        Parse metadata from a metadata PDA account.

        Args:
            account_info: Any object with a ``data`` attribute (e.g.
                ``solders.account.Account``), or None if the account is missing

        Raises:
            InvalidAccountDataError: If the account is missing or empty
        """
        if account_info is None or not account_info.data:
            raise InvalidAccountDataError("Invalid metadata account data")
        return decode_metadata(bytes(account_info.data))
