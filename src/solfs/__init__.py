__all__ = [
    # Program
    "DATA_STORE_PROGRAM_ID",
    "PDA_SEED",
    "DataStoreProgram",
    "get_program_id",
    # Types
    "DataStoreMetadata",
    "DataStoreType",
    "SerializationStatus",
    # Layouts
    "InitializeDataStoreArgs",
    "UpdateDataStoreArgs",
    "UpdateDataStoreAuthorityArgs",
    "FinalizeDataStoreArgs",
    "CloseDataStoreArgs",
    "calculate_data_hash",
    "create_close_instruction_data",
    "create_finalize_instruction_data",
    "create_initialize_instruction_data",
    "create_update_authority_instruction_data",
    "create_update_instruction_data",
    "decode_metadata",
    "serialize_instruction_data",
    # Errors
    "DataStoreError",
    "InvalidAccountDataError",
    "RpcError",
    "SchemaNotFoundError",
    # Keys
    "generate_keypair",
    "get_keypair",
    "get_pubkey",
    "load_keypair_file",
    "load_private_key",
]

from .datastore.layouts import (
    CloseDataStoreArgs,
    DataStoreError,
    FinalizeDataStoreArgs,
    InitializeDataStoreArgs,
    InvalidAccountDataError,
    SchemaNotFoundError,
    UpdateDataStoreArgs,
    UpdateDataStoreAuthorityArgs,
    calculate_data_hash,
    create_close_instruction_data,
    create_finalize_instruction_data,
    create_initialize_instruction_data,
    create_update_authority_instruction_data,
    create_update_instruction_data,
    decode_metadata,
    serialize_instruction_data,
)
from .datastore.program import DataStoreProgram
from .datastore.types import (
    DATA_STORE_PROGRAM_ID,
    PDA_SEED,
    DataStoreMetadata,
    DataStoreType,
    SerializationStatus,
    get_program_id,
)
from .client.rpc import RpcError
from .wallet.keypair import (
    generate_keypair,
    get_keypair,
    get_pubkey,
    load_keypair_file,
    load_private_key,
)
