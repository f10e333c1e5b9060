import pytest
from eth_abi import encode
from web3 import Web3
from web3.exceptions import TimeExhausted

from app.chain.base import (
    BroadcastError,
    ChainCall,
    ChainError,
    EstimationError,
    FeeMode,
    RevertedError,
)
from app.chain.executor import TransactionExecutor
from app.chain.network import Web3Network
from app.chain.normalize import normalize
from app.config import settings
from app.services import marketplace
from conftest import CONTRACT_ADDRESSES, OTHER_ADDRESS, TEST_ADDRESS, TX_HASH, FakeNetwork, abi_args


class CountingSigner:
    def __init__(self, inner):
        self.inner = inner
        self.signed = []

    @property
    def address(self):
        return self.inner.address

    def sign_transaction(self, tx):
        self.signed.append(dict(tx))
        return self.inner.sign_transaction(tx)


def _call(value: int = 0) -> ChainCall:
    return ChainCall(
        to=Web3.to_checksum_address(CONTRACT_ADDRESSES["marketplace_contract"]),
        data="0x12345678",
        sender=TEST_ADDRESS,
        value=value,
        description="MarketplaceContract.test",
    )


@pytest.mark.asyncio
async def test_estimation_failure_never_signs(signer):
    network = FakeNetwork(estimate_error=ValueError("execution reverted: not owner"))
    counting = CountingSigner(signer)

    with pytest.raises(EstimationError, match="not owner"):
        await TransactionExecutor(network).execute(_call(), counting, FeeMode.EIP1559)

    assert counting.signed == []
    assert network.sent == []


@pytest.mark.asyncio
async def test_eip1559_transaction_fields(signer):
    network = FakeNetwork(gas_price=100)
    counting = CountingSigner(signer)

    receipt = await TransactionExecutor(network).execute(_call(value=5), counting, FeeMode.EIP1559)

    tx = counting.signed[0]
    assert tx["maxPriorityFeePerGas"] == 50
    assert tx["maxFeePerGas"] == 200
    assert "gasPrice" not in tx
    assert tx["gas"] == 50_000
    assert tx["nonce"] == 0
    assert tx["chainId"] == 31337
    assert tx["value"] == 5
    assert len(network.sent) == 1
    assert receipt["status"] == 1
    assert network.estimates[0]["from"] == TEST_ADDRESS


@pytest.mark.asyncio
async def test_legacy_transaction_fields(signer):
    network = FakeNetwork(gas_price=100)
    counting = CountingSigner(signer)

    await TransactionExecutor(network).execute(_call(), counting, FeeMode.LEGACY)

    tx = counting.signed[0]
    assert tx["gasPrice"] == 100
    assert "maxFeePerGas" not in tx
    assert "maxPriorityFeePerGas" not in tx


@pytest.mark.asyncio
async def test_reverted_transaction_carries_receipt(signer):
    network = FakeNetwork(receipt_status=0)

    with pytest.raises(RevertedError) as excinfo:
        await TransactionExecutor(network).execute(_call(), signer, FeeMode.EIP1559)

    assert excinfo.value.receipt["status"] == 0
    assert excinfo.value.receipt["transactionHash"] == TX_HASH
    assert excinfo.value.status_code == 500


@pytest.mark.asyncio
async def test_receipt_timeout_is_broadcast_error(signer):
    network = FakeNetwork(hang=True)

    with pytest.raises(BroadcastError) as excinfo:
        await TransactionExecutor(network, receipt_timeout=0.05).execute(_call(), signer, FeeMode.EIP1559)

    assert excinfo.value.timed_out is True
    assert excinfo.value.tx_hash == "0x" + TX_HASH.hex()
    assert len(network.sent) == 1


@pytest.mark.asyncio
async def test_provider_timeout_is_broadcast_error(signer):
    class SlowNetwork(FakeNetwork):
        async def wait_for_receipt(self, tx_hash):
            raise TimeExhausted("not mined")

    with pytest.raises(BroadcastError) as excinfo:
        await TransactionExecutor(SlowNetwork()).execute(_call(), signer, FeeMode.EIP1559)

    assert excinfo.value.timed_out is True


@pytest.mark.asyncio
async def test_rejected_broadcast_is_broadcast_error(signer):
    class RejectingNetwork(FakeNetwork):
        async def send_raw_transaction(self, raw_tx):
            raise ValueError("nonce too low")

    with pytest.raises(BroadcastError, match="nonce too low") as excinfo:
        await TransactionExecutor(RejectingNetwork()).execute(_call(), signer, FeeMode.EIP1559)

    assert excinfo.value.timed_out is False
    assert excinfo.value.tx_hash is None


@pytest.mark.asyncio
async def test_get_listing_normalizes_big_price(network):
    def get_listing(data):
        (token_id,) = abi_args(data, ["uint256"])
        assert token_id == 42
        return encode(["address", "uint256", "bool"], [OTHER_ADDRESS, 100000000000000000000, True])

    network.on_view("getListing(uint256)", get_listing)

    listing = normalize(await TransactionExecutor(network).read(marketplace.listing_view(42)))

    assert listing["seller"].lower() == OTHER_ADDRESS.lower()
    assert listing["price"] == "100000000000000000000"
    assert listing["isActive"] is True


@pytest.mark.asyncio
async def test_failed_view_call_is_chain_error():
    class FailingNetwork(FakeNetwork):
        async def call(self, tx):
            raise ConnectionError("rpc down")

    with pytest.raises(ChainError):
        await TransactionExecutor(FailingNetwork()).read(marketplace.listing_view(1))


@pytest.mark.asyncio
async def test_explicit_zero_receipt_timeout_is_honoured(signer, monkeypatch):
    monkeypatch.setattr(settings, "tx_receipt_timeout_seconds", 3600.0)
    network = FakeNetwork(hang=True)

    with pytest.raises(BroadcastError) as excinfo:
        await TransactionExecutor(network, receipt_timeout=0).execute(_call(), signer, FeeMode.EIP1559)

    assert excinfo.value.timed_out is True


def test_network_keeps_explicit_zero_timeouts():
    network = Web3Network("http://127.0.0.1:8545", request_timeout=0, receipt_timeout=0)
    assert network._request_timeout == 0
    assert network._receipt_timeout == 0


@pytest.mark.asyncio
async def test_receipt_without_status_is_not_a_revert(signer):
    network = FakeNetwork(receipt_status=None)

    receipt = await TransactionExecutor(network).execute(_call(), signer, FeeMode.EIP1559)

    assert "status" not in receipt
    assert receipt["transactionHash"] == TX_HASH
