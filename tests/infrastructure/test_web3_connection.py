"""Tests for Web3ChainConnection error mapping and receipt decoding."""

import aiohttp
import pytest
from eth_abi import encode as abi_encode
from eth_utils import function_signature_to_4byte_selector, keccak, to_checksum_address
from web3.exceptions import ContractLogicError, TimeExhausted

from core.application.dtos.chain_dto import ContractBinding, TransactionReceipt
from core.domain.enums import ContractRole, Network
from core.domain.errors import (
    ChainUnavailable,
    SimulationFailed,
    TransactionReverted,
    TransactionTimeout,
)
from core.domain.value_objects import Address
from core.infrastructure.chain import Web3ChainConnection, build_network_profiles
from core.infrastructure.chain.abis import NFT_COLLECTION_ABI
from core.infrastructure.chain.gateway import Web3PendingTransaction
from core.settings.modules import NetworkSettings
from tests.conftest import OWNER, STRANGER

NFT = to_checksum_address("0x" + "ab" * 20)
OTHER = to_checksum_address("0x" + "cd" * 20)
TX_HASH = "0x" + "aa" * 32
TRANSFER_TOPIC = keccak(text="Transfer(address,address,uint256)")


@pytest.fixture
def connection():
    settings = NetworkSettings(default_network="testnet", testnet_rpc_url="http://testnet-node")
    return Web3ChainConnection(build_network_profiles(settings)[Network.TESTNET])


@pytest.fixture
def nft():
    return ContractBinding(ContractRole.NFT_COLLECTION, Address(NFT), NFT_COLLECTION_ABI)


def _revert_data(signature: str, types=(), values=()) -> str:
    data = function_signature_to_4byte_selector(signature) + abi_encode(list(types), list(values))
    return "0x" + data.hex()


def _stub(monkeypatch, connection, name, result=None, error=None, calls=None):
    async def method(*args, **kwargs):
        if calls is not None:
            calls.append((args, kwargs))
        if error is not None:
            raise error
        return result

    monkeypatch.setattr(connection.w3.eth, name, method)


def _topic(value: int) -> bytes:
    return value.to_bytes(32, "big")


def _transfer_log(address: str, to: str, token_id: int, log_index: int) -> dict:
    return {
        "address": address,
        "topics": [
            TRANSFER_TOPIC,
            _topic(0),
            _topic(int(to, 16)),
            _topic(token_id),
        ],
        "data": b"",
        "logIndex": log_index,
        "transactionIndex": 0,
        "transactionHash": bytes.fromhex(TX_HASH[2:]),
        "blockHash": b"\x01" * 32,
        "blockNumber": 12,
    }


class TestPendingTransaction:
    @pytest.mark.asyncio
    async def test_receipt_timeout(self, connection, monkeypatch):
        _stub(monkeypatch, connection, "wait_for_transaction_receipt", error=TimeExhausted("slow"))
        pending = Web3PendingTransaction(connection, TX_HASH, {})

        with pytest.raises(TransactionTimeout) as exc_info:
            await pending.wait(5)

        assert exc_info.value.details["transactionHash"] == TX_HASH

    @pytest.mark.asyncio
    async def test_transport_failure_while_waiting(self, connection, monkeypatch):
        _stub(
            monkeypatch, connection, "wait_for_transaction_receipt",
            error=aiohttp.ClientConnectionError("connection reset"),
        )
        pending = Web3PendingTransaction(connection, TX_HASH, {})

        with pytest.raises(ChainUnavailable):
            await pending.wait(5)

    @pytest.mark.asyncio
    async def test_failed_receipt_is_replayed_for_the_reason(self, connection, monkeypatch):
        calls = []
        tx = {"from": OWNER, "to": NFT, "data": "0x1234", "gas": 100000, "nonce": 3}
        _stub(
            monkeypatch, connection, "wait_for_transaction_receipt",
            result={"status": 0, "blockNumber": 12, "gasUsed": 90000},
        )
        _stub(
            monkeypatch, connection, "call", calls=calls,
            error=ContractLogicError("execution reverted", data=_revert_data("NotWhitelisted()")),
        )
        pending = Web3PendingTransaction(connection, TX_HASH, tx)

        with pytest.raises(TransactionReverted) as exc_info:
            await pending.wait(5)

        assert exc_info.value.details["errorName"] == "NotWhitelisted"
        assert exc_info.value.details["transactionHash"] == TX_HASH
        (call,), kwargs = calls[0]
        assert call == {"from": OWNER, "to": NFT, "data": "0x1234"}
        assert kwargs == {"block_identifier": 12}

    @pytest.mark.asyncio
    async def test_failed_receipt_with_error_string(self, connection, monkeypatch):
        data = "0x08c379a0" + abi_encode(["string"], ["Not an asset manager"]).hex()
        _stub(
            monkeypatch, connection, "wait_for_transaction_receipt",
            result={"status": 0, "blockNumber": 12, "gasUsed": 90000},
        )
        _stub(monkeypatch, connection, "call", error=ContractLogicError("execution reverted", data=data))
        pending = Web3PendingTransaction(connection, TX_HASH, {"to": NFT})

        with pytest.raises(TransactionReverted) as exc_info:
            await pending.wait(5)

        assert "Not an asset manager" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_successful_receipt(self, connection, monkeypatch):
        raw = {"status": 1, "blockNumber": 40, "gasUsed": 21000, "logs": []}
        _stub(monkeypatch, connection, "wait_for_transaction_receipt", result=raw)

        receipt = await Web3PendingTransaction(connection, TX_HASH, {}).wait(5)

        assert receipt.transaction_hash == TX_HASH
        assert receipt.block_number == 40
        assert receipt.gas_used == 21000
        assert receipt.succeeded
        assert receipt.raw is raw


class TestCallView:
    @pytest.mark.asyncio
    async def test_custom_error_becomes_simulation_failure(self, connection, nft, monkeypatch):
        data = _revert_data("ERC721NonexistentToken(uint256)", ["uint256"], [5])
        _stub(monkeypatch, connection, "call", error=ContractLogicError("execution reverted", data=data))

        with pytest.raises(SimulationFailed) as exc_info:
            await connection.call_view(nft, "ownerOf", [5])

        assert exc_info.value.details["errorName"] == "ERC721NonexistentToken"
        assert exc_info.value.details["method"] == "ownerOf"

    @pytest.mark.asyncio
    async def test_return_data_is_decoded(self, connection, nft, monkeypatch):
        _stub(monkeypatch, connection, "call", result=abi_encode(["address"], [OWNER]))

        assert await connection.call_view(nft, "ownerOf", [5]) == OWNER

    @pytest.mark.asyncio
    async def test_transport_failure(self, connection, nft, monkeypatch):
        _stub(monkeypatch, connection, "call", error=aiohttp.ClientConnectionError("refused"))

        with pytest.raises(ChainUnavailable):
            await connection.call_view(nft, "totalSupply")


class TestDecodeEvents:
    def test_only_logs_from_the_bound_contract(self, connection, nft):
        raw = {
            "status": 1,
            "logs": [
                _transfer_log(OTHER, STRANGER, 9, log_index=0),
                _transfer_log(NFT, OWNER, 4, log_index=1),
            ],
        }
        receipt = TransactionReceipt(TX_HASH, 12, 90000, raw=raw)

        events = connection.decode_events(nft, "Transfer", receipt)

        assert len(events) == 1
        assert events[0].name == "Transfer"
        assert events[0].address == NFT
        assert events[0].args["to"] == OWNER
        assert events[0].args["tokenId"] == 4
        assert events[0].log_index == 1

    def test_receipt_without_raw_logs(self, connection, nft):
        receipt = TransactionReceipt(TX_HASH, 12, 90000)

        assert connection.decode_events(nft, "Transfer", receipt) == []
