"""
Borsh layouts for the Data Store Program.

Instruction payloads are plain borsh structs with no discriminator; field
order matches the on-chain Rust structs and must not change.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Union

from borsh_construct import Bool, Bytes, CStruct, U8, U64
from solders.pubkey import Pubkey

from ..utils import U64_MAX, sha256_digest
from .types import DataStoreMetadata, DataStoreType, SerializationStatus


class DataStoreError(ValueError):
    pass


class SchemaNotFoundError(DataStoreError):
    pass


class InvalidAccountDataError(DataStoreError):
    pass


def _require_int(name: str, value: int, maximum: int, kind: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DataStoreError(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0 or value > maximum:
        raise DataStoreError(f"{name} out of range for {kind}: {value}")
    return int(value)


def require_u8(name: str, value: int) -> int:
    return _require_int(name, value, 0xFF, "u8")


def require_u64(name: str, value: int) -> int:
    return _require_int(name, value, U64_MAX, "u64")


# ============ Instruction Arguments ============


@dataclass(frozen=True)
class InitializeDataStoreArgs:
    debug: bool
    data_type: int
    bump_seed: int
    is_created: bool
    space: int
    authority: bytes
    is_dynamic: bool


@dataclass(frozen=True)
class UpdateDataStoreArgs:
    debug: bool
    data_hash: bytes
    data: bytes
    offset: int
    realloc_down: bool
    data_type: int


@dataclass(frozen=True)
class UpdateDataStoreAuthorityArgs:
    debug: bool


@dataclass(frozen=True)
class FinalizeDataStoreArgs:
    debug: bool


@dataclass(frozen=True)
class CloseDataStoreArgs:
    debug: bool


InstructionArgs = Union[
    InitializeDataStoreArgs,
    UpdateDataStoreArgs,
    UpdateDataStoreAuthorityArgs,
    FinalizeDataStoreArgs,
    CloseDataStoreArgs,
]


# ============ Layouts ============

InitializeDataStoreLayout = CStruct(
    "debug" / Bool,
    "data_type" / U8,
    "bump_seed" / U8,
    "is_created" / Bool,
    "space" / U64,
    "authority" / U8[32],
    "is_dynamic" / Bool,
)

UpdateDataStoreLayout = CStruct(
    "debug" / Bool,
    "data_hash" / U8[32],
    "data" / Bytes,
    "offset" / U64,
    "realloc_down" / Bool,
    "data_type" / U8,
)

DebugOnlyLayout = CStruct("debug" / Bool)

MetadataLayout = CStruct(
    "data_type" / U8,
    "authority" / U8[32],
    "data_status" / U8,
    "bump_seed" / U8,
    "data_hash" / U8[32],
    "is_dynamic" / Bool,
    "space" / U64,
)

METADATA_SIZE = 76

_SCHEMAS: dict[type, Any] = {
    InitializeDataStoreArgs: InitializeDataStoreLayout,
    UpdateDataStoreArgs: UpdateDataStoreLayout,
    UpdateDataStoreAuthorityArgs: DebugOnlyLayout,
    FinalizeDataStoreArgs: DebugOnlyLayout,
    CloseDataStoreArgs: DebugOnlyLayout,
}


# ============ Serialization ============


def serialize_instruction_data(args: InstructionArgs) -> bytes:
    """
    Serialize an instruction argument object with its borsh layout.

    Raises:
        SchemaNotFoundError: If no layout is registered for the argument type
    """
    layout = _SCHEMAS.get(type(args))
    if layout is None:
        raise SchemaNotFoundError(f"Schema not found for instruction: {type(args).__name__}")
    return layout.build(asdict(args))


def calculate_data_hash(data: bytes) -> bytes:
    """SHA-256 of a data chunk, as carried in update payloads."""
    return sha256_digest(data)


def create_initialize_instruction_data(
    debug: bool,
    data_type: int,
    bump_seed: int,
    is_created: bool,
    space: int,
    authority: Pubkey,
    is_dynamic: bool,
) -> bytes:
    return serialize_instruction_data(
        InitializeDataStoreArgs(
            debug=debug,
            data_type=require_u8("data_type", data_type),
            bump_seed=require_u8("bump_seed", bump_seed),
            is_created=is_created,
            space=space,
            authority=bytes(authority),
            is_dynamic=is_dynamic,
        )
    )


def create_update_instruction_data(
    debug: bool,
    data: bytes,
    offset: int,
    realloc_down: bool,
    data_type: int,
) -> bytes:
    """Build an update payload; the hash is computed over ``data``."""
    data = bytes(data)
    return serialize_instruction_data(
        UpdateDataStoreArgs(
            debug=debug,
            data_hash=calculate_data_hash(data),
            data=data,
            offset=offset,
            realloc_down=realloc_down,
            data_type=require_u8("data_type", data_type),
        )
    )


def create_update_authority_instruction_data(debug: bool) -> bytes:
    return serialize_instruction_data(UpdateDataStoreAuthorityArgs(debug=debug))


def create_finalize_instruction_data(debug: bool) -> bytes:
    return serialize_instruction_data(FinalizeDataStoreArgs(debug=debug))


def create_close_instruction_data(debug: bool) -> bytes:
    return serialize_instruction_data(CloseDataStoreArgs(debug=debug))


# ============ Deserialization ============


def decode_metadata(raw: bytes) -> DataStoreMetadata:
    """
    Decode a metadata PDA account's data.

    Trailing bytes beyond the fixed layout are ignored.

    Raises:
        InvalidAccountDataError: If the data is empty, truncated, or carries
            an unknown enum tag
    """
    if not raw:
        raise InvalidAccountDataError("Invalid metadata account data")
    if len(raw) < METADATA_SIZE:
        raise InvalidAccountDataError(
            f"Metadata account data too short: {len(raw)} < {METADATA_SIZE} bytes"
        )

    parsed = MetadataLayout.parse(bytes(raw))

    try:
        data_type = DataStoreType(parsed.data_type)
        data_status = SerializationStatus(parsed.data_status)
    except ValueError as exc:
        raise InvalidAccountDataError(f"Invalid metadata account data: {exc}") from exc

    return DataStoreMetadata(
        data_type=data_type,
        authority=str(Pubkey(bytes(parsed.authority))),
        data_status=data_status,
        bump_seed=parsed.bump_seed,
        data_hash=bytes(parsed.data_hash),
        is_dynamic=bool(parsed.is_dynamic),
        space=parsed.space,
    )
