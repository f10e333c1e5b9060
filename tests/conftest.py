import asyncio
import uuid

import pytest
from eth_abi import decode, encode
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from web3 import Web3

from app.auth.tokens import create_access_token
from app.chain.base import BaseNetwork
from app.chain.signer import SignerIdentity
from app.config import settings
from app.db.engine import get_db
from app.db.models import Base
from app.dependencies import get_network
from app.main import app

# Well-known local devnet account #0
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
OTHER_ADDRESS = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"

CONTRACT_ADDRESSES = {
    "admin_contract": "0x5FbDB2315678afecb367f032d93F642f64180aa3",
    "nft_book_contract": "0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512",
    "marketplace_contract": "0x9fE46736679d2D9a65F0992F2272dE9f3c7fa6e0",
    "payment_splitter_contract": "0xCf7Ed3AccA5a467e9e704C703E8D87F634fB0Fc9",
    "rights_manager_contract": "0xDc64a140Aa3E981100a9becA4E685f962f0cF6C9",
}

TX_HASH = b"\xab" * 32


def selector(signature: str) -> str:
    return bytes(Web3.keccak(text=signature)[:4]).hex()


def abi_args(data, types: list[str]) -> tuple:
    """Decode the arguments of encoded calldata (selector stripped)."""
    payload = data[2:] if isinstance(data, str) else bytes(data).hex()
    return decode(types, bytes.fromhex(payload[8:]))


class FakeNetwork(BaseNetwork):
    """In-memory network. View handlers are keyed by 4-byte selector hex."""

    def __init__(
        self,
        gas_price: int = 100,
        fee_history=None,
        estimate_error: Exception | None = None,
        receipt_status: int | None = 1,
        hang: bool = False,
    ):
        self.gas_price = gas_price
        self.fee_history = fee_history if fee_history is not None else {"reward": [[1, 2, 3]]}
        self.estimate_error = estimate_error
        self.receipt_status = receipt_status
        self.hang = hang
        self.views = {}
        self.estimates: list[dict] = []
        self.sent: list[bytes] = []
        self.calls: list[dict] = []

    async def initialize(self) -> None:
        pass

    async def close(self) -> None:
        pass

    async def estimate_gas(self, tx: dict) -> int:
        self.estimates.append(tx)
        if self.estimate_error:
            raise self.estimate_error
        return 50_000

    async def get_gas_price(self) -> int:
        return self.gas_price

    async def get_fee_history(self, block_count, newest_block, percentiles):
        return self.fee_history

    async def get_transaction_count(self, address: str) -> int:
        return len(self.sent)

    async def get_chain_id(self) -> int:
        return 31337

    async def send_raw_transaction(self, raw_tx: bytes) -> bytes:
        self.sent.append(raw_tx)
        return TX_HASH

    async def wait_for_receipt(self, tx_hash: bytes):
        if self.hang:
            await asyncio.sleep(3600)
        receipt = {
            "transactionHash": tx_hash,
            "blockNumber": 7,
            "gasUsed": 21_000,
            "effectiveGasPrice": 10**18,
            "logs": [],
        }
        if self.receipt_status is not None:
            receipt["status"] = self.receipt_status
        return receipt

    async def call(self, tx: dict) -> bytes:
        self.calls.append(tx)
        data = tx["data"]
        key = (data[2:10] if isinstance(data, str) else bytes(data)[:4].hex()).lower()
        handler = self.views[key]
        return handler(data) if callable(handler) else handler

    def on_view(self, signature: str, handler) -> None:
        self.views[selector(signature)] = handler

    def returns(self, signature: str, types: list[str], values: list) -> None:
        self.on_view(signature, encode(types, values))


@pytest.fixture(autouse=True)
def contract_settings(monkeypatch):
    for field, address in CONTRACT_ADDRESSES.items():
        monkeypatch.setattr(settings, field, address)
    monkeypatch.setattr(settings, "abi_dir", "")


@pytest.fixture
def network():
    return FakeNetwork()


@pytest.fixture
def signer():
    return SignerIdentity.from_private_key(TEST_PRIVATE_KEY)


@pytest.fixture
def signed_txs(monkeypatch):
    """Records every transaction dict handed to a signer."""
    recorded = []
    original = SignerIdentity.sign_transaction

    def spy(self, tx):
        recorded.append(dict(tx))
        return original(self, tx)

    monkeypatch.setattr(SignerIdentity, "sign_transaction", spy)
    return recorded


@pytest.fixture
def client(network):
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    sessions = async_sessionmaker(engine, expire_on_commit=False)
    tables_ready = False

    async def override_get_db():
        nonlocal tables_ready
        if not tables_ready:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            tables_ready = True
        async with sessions() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_network] = lambda: network
    with TestClient(app) as test_client:
        yield test_client
        test_client.portal.call(engine.dispose)
    app.dependency_overrides.clear()


def auth_headers(role: str = "AUTHOR", wallet_address: str = TEST_ADDRESS) -> dict:
    token = create_access_token(
        {"id": str(uuid.uuid4()), "email": "reader@example.com", "role": role, "walletAddress": wallet_address}
    )
    return {"Authorization": f"Bearer {token}"}
