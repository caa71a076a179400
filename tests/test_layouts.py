"""Byte-level tests for the Data Store borsh layouts."""

from __future__ import annotations

from dataclasses import dataclass

import pytest
from solders.pubkey import Pubkey

from solfs.datastore.layouts import (
    METADATA_SIZE,
    CloseDataStoreArgs,
    DataStoreError,
    InvalidAccountDataError,
    SchemaNotFoundError,
    UpdateDataStoreLayout,
    calculate_data_hash,
    create_close_instruction_data,
    create_finalize_instruction_data,
    create_initialize_instruction_data,
    create_update_authority_instruction_data,
    create_update_instruction_data,
    decode_metadata,
    serialize_instruction_data,
)
from solfs.datastore.types import DataStoreType, SerializationStatus

HELLO_SHA256 = bytes.fromhex("2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824")


def _metadata_bytes(
    data_type: int = 1,
    authority: bytes = bytes([2] * 32),
    status: int = 2,
    bump: int = 253,
    data_hash: bytes = bytes([3] * 32),
    is_dynamic: int = 1,
    space: int = 4096,
) -> bytes:
    return (
        bytes([data_type])
        + authority
        + bytes([status, bump])
        + data_hash
        + bytes([is_dynamic])
        + space.to_bytes(8, "little")
    )


class TestInitializePayload:
    """Tests for the initialize instruction payload."""

    def test_exact_bytes(self) -> None:
        data = create_initialize_instruction_data(
            debug=False,
            data_type=DataStoreType.FILE,
            bump_seed=254,
            is_created=False,
            space=1024,
            authority=Pubkey(bytes([1] * 32)),
            is_dynamic=True,
        )
        expected = (
            bytes([0x00, 0x00, 0xFE, 0x00])
            + bytes.fromhex("0004000000000000")
            + bytes([1] * 32)
            + bytes([0x01])
        )
        assert data == expected
        assert len(data) == 45

    def test_flags_and_directory(self) -> None:
        data = create_initialize_instruction_data(
            debug=True,
            data_type=DataStoreType.DIRECTORY,
            bump_seed=0,
            is_created=True,
            space=0,
            authority=Pubkey(bytes(32)),
            is_dynamic=False,
        )
        assert data[:4] == bytes([0x01, 0x01, 0x00, 0x01])
        assert data[4:12] == bytes(8)
        assert data[-1] == 0x00

    def test_max_space(self) -> None:
        data = create_initialize_instruction_data(
            debug=False,
            data_type=DataStoreType.FILE,
            bump_seed=255,
            is_created=False,
            space=(1 << 64) - 1,
            authority=Pubkey(bytes(32)),
            is_dynamic=False,
        )
        assert data[4:12] == b"\xff" * 8

    @pytest.mark.parametrize("field, value", [("data_type", 256), ("data_type", -1), ("bump_seed", 256), ("bump_seed", True)])
    def test_u8_fields_out_of_range(self, field: str, value: int) -> None:
        kwargs = dict(
            debug=False,
            data_type=DataStoreType.FILE,
            bump_seed=255,
            is_created=False,
            space=1,
            authority=Pubkey(bytes(32)),
            is_dynamic=False,
        )
        kwargs[field] = value
        with pytest.raises(DataStoreError, match=field):
            create_initialize_instruction_data(**kwargs)


class TestUpdatePayload:
    """Tests for the update instruction payload."""

    def test_exact_bytes(self) -> None:
        data = create_update_instruction_data(
            debug=True,
            data=b"hello",
            offset=7,
            realloc_down=False,
            data_type=DataStoreType.DIRECTORY,
        )
        expected = (
            bytes([0x01])
            + HELLO_SHA256
            + bytes.fromhex("05000000")
            + b"hello"
            + bytes.fromhex("0700000000000000")
            + bytes([0x00, 0x01])
        )
        assert data == expected
        assert len(data) == 52

    def test_empty_data(self) -> None:
        data = create_update_instruction_data(
            debug=False,
            data=b"",
            offset=0,
            realloc_down=True,
            data_type=DataStoreType.FILE,
        )
        assert data[1:33] == calculate_data_hash(b"")
        assert data[33:37] == bytes(4)
        assert data[37:45] == bytes(8)
        assert data[45:] == bytes([0x01, 0x00])

    def test_layout_parses_back(self) -> None:
        payload = bytes(range(256)) * 3
        data = create_update_instruction_data(
            debug=False,
            data=payload,
            offset=1 << 40,
            realloc_down=True,
            data_type=DataStoreType.FILE,
        )
        parsed = UpdateDataStoreLayout.parse(data)
        assert parsed.data == payload
        assert parsed.offset == 1 << 40
        assert bytes(parsed.data_hash) == calculate_data_hash(payload)
        assert parsed.realloc_down is True

    def test_data_type_out_of_range(self) -> None:
        with pytest.raises(DataStoreError, match="u8"):
            create_update_instruction_data(debug=False, data=b"x", offset=0, realloc_down=False, data_type=300)


class TestDebugOnlyPayloads:
    """Authority, finalize and close payloads carry only the debug flag."""

    @pytest.mark.parametrize(
        "builder",
        [
            create_update_authority_instruction_data,
            create_finalize_instruction_data,
            create_close_instruction_data,
        ],
    )
    def test_single_byte(self, builder) -> None:
        assert builder(True) == b"\x01"
        assert builder(False) == b"\x00"

    def test_serialize_args_object(self) -> None:
        assert serialize_instruction_data(CloseDataStoreArgs(debug=True)) == b"\x01"


class TestSchemaLookup:
    """Tests for schema resolution."""

    def test_unknown_type_raises(self) -> None:
        @dataclass
        class Unregistered:
            debug: bool

        with pytest.raises(SchemaNotFoundError, match="Schema not found"):
            serialize_instruction_data(Unregistered(debug=True))

    def test_schema_error_is_datastore_error(self) -> None:
        assert issubclass(SchemaNotFoundError, DataStoreError)
        assert issubclass(DataStoreError, ValueError)


class TestCalculateDataHash:
    """Tests for calculate_data_hash."""

    def test_known_digest(self) -> None:
        assert calculate_data_hash(b"hello") == HELLO_SHA256

    def test_length(self) -> None:
        assert len(calculate_data_hash(b"x" * 10_000)) == 32


class TestDecodeMetadata:
    """Tests for metadata account decoding."""

    def test_exact_values(self) -> None:
        metadata = decode_metadata(_metadata_bytes())
        assert metadata.data_type is DataStoreType.DIRECTORY
        assert metadata.authority == str(Pubkey(bytes([2] * 32)))
        assert metadata.data_status is SerializationStatus.FINALIZED
        assert metadata.bump_seed == 253
        assert metadata.data_hash == bytes([3] * 32)
        assert metadata.is_dynamic is True
        assert metadata.space == 4096
        assert metadata.is_finalized

    def test_layout_size(self) -> None:
        assert len(_metadata_bytes()) == METADATA_SIZE

    def test_initialized_static_file(self) -> None:
        metadata = decode_metadata(_metadata_bytes(data_type=0, status=1, is_dynamic=0, space=12))
        assert metadata.data_type is DataStoreType.FILE
        assert metadata.data_status is SerializationStatus.INITIALIZED
        assert metadata.is_dynamic is False
        assert metadata.space == 12
        assert not metadata.is_finalized

    def test_trailing_bytes_ignored(self) -> None:
        metadata = decode_metadata(_metadata_bytes() + b"\x00" * 24)
        assert metadata.space == 4096

    def test_empty_raises(self) -> None:
        with pytest.raises(InvalidAccountDataError, match="Invalid metadata account data"):
            decode_metadata(b"")

    def test_truncated_raises(self) -> None:
        with pytest.raises(InvalidAccountDataError, match="too short"):
            decode_metadata(_metadata_bytes()[:-1])

    def test_unknown_status_raises(self) -> None:
        with pytest.raises(InvalidAccountDataError):
            decode_metadata(_metadata_bytes(status=9))

    def test_to_dict(self) -> None:
        result = decode_metadata(_metadata_bytes()).to_dict()
        assert result["data_type"] == "directory"
        assert result["data_status"] == "finalized"
        assert result["data_hash"] == "03" * 32
