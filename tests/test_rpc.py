"""Tests for the httpx JSON-RPC client with a mocked transport."""

from __future__ import annotations

import base64
import os
from unittest.mock import MagicMock, patch

import pytest
from solders.hash import Hash
from solders.pubkey import Pubkey

from solfs.client import rpc
from solfs.client.rpc import RpcError


def _mock_client(body: dict) -> MagicMock:
    response = MagicMock()
    response.json.return_value = body
    client = MagicMock()
    client.__enter__.return_value = client
    client.post.return_value = response
    return client


def _account_value(data: bytes, owner: Pubkey, lamports: int = 5) -> dict:
    return {
        "data": [base64.b64encode(data).decode("ascii"), "base64"],
        "executable": False,
        "lamports": lamports,
        "owner": str(owner),
        "rentEpoch": 0,
        "space": len(data),
    }


class TestRpcCall:
    """Tests for the JSON-RPC envelope."""

    def test_payload_and_result(self) -> None:
        client = _mock_client({"jsonrpc": "2.0", "result": 42, "id": 1})
        with patch("solfs.client.rpc.httpx.Client", return_value=client):
            result = rpc._rpc_call("getSlot", [], rpc_url="http://localhost:8899")

        assert result == 42
        url = client.post.call_args.args[0]
        payload = client.post.call_args.kwargs["json"]
        assert url == "http://localhost:8899"
        assert payload == {"jsonrpc": "2.0", "method": "getSlot", "params": [], "id": 1}

    def test_error_member_raises(self) -> None:
        client = _mock_client({"jsonrpc": "2.0", "error": {"code": -32002, "message": "boom"}, "id": 1})
        with patch("solfs.client.rpc.httpx.Client", return_value=client):
            with pytest.raises(RpcError, match="boom") as excinfo:
                rpc._rpc_call("sendTransaction", [])
        assert excinfo.value.code == -32002

    def test_default_url_from_env(self) -> None:
        client = _mock_client({"result": None})
        with patch.dict(os.environ, {"SOLFS_RPC_URL": "http://validator:8899"}):
            with patch("solfs.client.rpc.httpx.Client", return_value=client):
                rpc._rpc_call("getHealth", [])
        assert client.post.call_args.args[0] == "http://validator:8899"


class TestAccounts:
    """Tests for account reads."""

    def test_get_account_info(self) -> None:
        owner = Pubkey.new_unique()
        client = _mock_client({"result": {"context": {"slot": 1}, "value": _account_value(b"abc", owner)}})
        with patch("solfs.client.rpc.httpx.Client", return_value=client):
            account = rpc.get_account_info(Pubkey.new_unique())

        assert account is not None
        assert bytes(account.data) == b"abc"
        assert account.lamports == 5
        assert account.owner == owner
        params = client.post.call_args.kwargs["json"]["params"]
        assert params[1]["encoding"] == "base64"

    def test_missing_account(self) -> None:
        client = _mock_client({"result": {"context": {"slot": 1}, "value": None}})
        with patch("solfs.client.rpc.httpx.Client", return_value=client):
            assert rpc.get_account_info(Pubkey.new_unique()) is None

    def test_get_multiple_accounts_preserves_order(self) -> None:
        owner = Pubkey.new_unique()
        client = _mock_client(
            {"result": {"context": {"slot": 1}, "value": [None, _account_value(b"x", owner)]}}
        )
        with patch("solfs.client.rpc.httpx.Client", return_value=client):
            accounts = rpc.get_multiple_accounts([Pubkey.new_unique(), Pubkey.new_unique()])
        assert accounts[0] is None
        assert bytes(accounts[1].data) == b"x"


class TestQueries:
    """Tests for scalar queries."""

    def test_get_balance(self) -> None:
        with patch("solfs.client.rpc._rpc_call", return_value={"context": {}, "value": 1500}):
            assert rpc.get_balance(Pubkey.new_unique()) == 1500

    def test_get_minimum_balance_for_rent_exemption(self) -> None:
        client = _mock_client({"jsonrpc": "2.0", "result": 1002240, "id": 1})
        with patch("solfs.client.rpc.httpx.Client", return_value=client):
            assert rpc.get_minimum_balance_for_rent_exemption(16) == 1002240
        payload = client.post.call_args.kwargs["json"]
        assert payload["method"] == "getMinimumBalanceForRentExemption"
        assert payload["params"] == [16]

    def test_get_latest_blockhash(self) -> None:
        blockhash = Hash.new_unique()
        value = {"context": {}, "value": {"blockhash": str(blockhash), "lastValidBlockHeight": 9}}
        with patch("solfs.client.rpc._rpc_call", return_value=value):
            assert rpc.get_latest_blockhash() == blockhash

    def test_send_raw_transaction_encodes_base64(self) -> None:
        with patch("solfs.client.rpc._rpc_call", return_value="sig") as call:
            assert rpc.send_raw_transaction(b"\x01\x02", skip_preflight=False) == "sig"
        method, params = call.call_args.args
        assert method == "sendTransaction"
        assert params[0] == "AQI="
        assert params[1]["encoding"] == "base64"
        assert params[1]["skipPreflight"] is False


class TestWaitForConfirmation:
    """Tests for confirmation polling."""

    def test_waits_for_commitment(self) -> None:
        statuses = [
            None,
            {"confirmationStatus": "processed", "err": None},
            {"confirmationStatus": "confirmed", "err": None},
        ]
        with patch.dict(os.environ, {"SOLFS_COMMITMENT": "confirmed"}):
            with patch("solfs.client.rpc.get_signature_status", side_effect=statuses) as get_status:
                with patch("solfs.client.rpc.time.sleep"):
                    status = rpc.wait_for_confirmation("sig", timeout=60)
        assert status["confirmationStatus"] == "confirmed"
        assert get_status.call_count == 3

    def test_returns_early_on_error(self) -> None:
        failed = {"confirmationStatus": "processed", "err": {"InstructionError": [0, {"Custom": 1}]}}
        with patch("solfs.client.rpc.get_signature_status", return_value=failed):
            status = rpc.wait_for_confirmation("sig", timeout=60)
        assert status["err"] is not None

    def test_timeout(self) -> None:
        with patch("solfs.client.rpc.get_signature_status", return_value=None):
            with pytest.raises(TimeoutError, match="not confirmed"):
                rpc.wait_for_confirmation("sig", timeout=0)
