"""
Data Store types - program identity, enumerations, and the metadata record.

The metadata record mirrors the program-owned PDA account that sits next to
every data account. It is only ever observed by this client, never mutated.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional

from solders.pubkey import Pubkey

# Program ID of the deployed Data Store Program
DATA_STORE_PROGRAM_ID = Pubkey.from_string("CxcgUrnSLjL7S44vLFxq6Jc7zscw5MUrZsobo711gmaq")

# Seed used to derive the metadata PDA of a data account
PDA_SEED = b"data_store"


def get_program_id() -> Pubkey:
    """Get the Data Store program ID from environment or default."""
    value = os.environ.get("SOLFS_PROGRAM_ID")
    if not value:
        return DATA_STORE_PROGRAM_ID
    return Pubkey.from_string(value)


def resolve_program_id(program_id: Optional[Pubkey] = None) -> Pubkey:
    return program_id if program_id is not None else get_program_id()


class DataStoreType(IntEnum):
    """Kind of payload held by a data account."""

    FILE = 0
    DIRECTORY = 1


class SerializationStatus(IntEnum):
    """Lifecycle status recorded in the metadata account."""

    UNINITIALIZED = 0
    INITIALIZED = 1
    FINALIZED = 2


@dataclass(frozen=True)
class DataStoreMetadata:
    """
    Metadata associated with a data account.

    Attributes:
        data_type: Type of data stored in the data account
        authority: Base58 public key of the authority
        data_status: Status of the data account
        bump_seed: Bump seed used to derive the metadata PDA
        data_hash: SHA-256 of the most recently written chunk (32 bytes)
        is_dynamic: False for fixed-size accounts, True if the account can realloc
        space: Space allocated for the data account
    """
    data_type: DataStoreType
    authority: str
    data_status: SerializationStatus
    bump_seed: int
    data_hash: bytes
    is_dynamic: bool
    space: int

    @property
    def is_finalized(self) -> bool:
        return self.data_status == SerializationStatus.FINALIZED

    def to_dict(self) -> dict[str, Any]:
        return {
            "data_type": self.data_type.name.lower(),
            "authority": self.authority,
            "data_status": self.data_status.name.lower(),
            "bump_seed": self.bump_seed,
            "data_hash": self.data_hash.hex(),
            "is_dynamic": self.is_dynamic,
            "space": self.space,
        }
