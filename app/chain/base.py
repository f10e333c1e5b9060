"""
Chain abstraction layer for contract calls.
The executor talks to the network only through this interface.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from app.errors import GatewayError

TxReceipt = Mapping[str, Any]

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class ContractName(str, Enum):
    ADMIN = "AdminContract"
    NFT_BOOK = "NFTBookContract"
    MARKETPLACE = "MarketplaceContract"
    PAYMENT_SPLITTER = "PaymentSplitterContract"
    RIGHTS_MANAGER = "RightsManagerContract"


class FeeMode(str, Enum):
    LEGACY = "legacy"
    EIP1559 = "eip1559"
    FEE_HISTORY = "fee_history"


@dataclass(frozen=True)
class ChainCall:
    to: str
    data: str
    sender: str
    value: int = 0
    description: str = ""

    def as_tx_params(self) -> dict:
        return {"from": self.sender, "to": self.to, "data": self.data, "value": self.value}


@dataclass(frozen=True)
class ViewCall:
    to: str
    data: str
    outputs: tuple = field(default_factory=tuple)  # ABI "outputs" entries of the function
    description: str = ""

    def as_tx_params(self) -> dict:
        return {"to": self.to, "data": self.data}


@dataclass(frozen=True)
class LegacyFees:
    gas_price: int

    def __post_init__(self):
        if self.gas_price < 0:
            raise ValueError("gas_price must be non-negative")

    def as_tx_fields(self) -> dict:
        return {"gasPrice": self.gas_price}


@dataclass(frozen=True)
class DynamicFees:
    max_priority_fee_per_gas: int
    max_fee_per_gas: int

    def __post_init__(self):
        if self.max_priority_fee_per_gas < 0:
            raise ValueError("max_priority_fee_per_gas must be non-negative")
        if self.max_fee_per_gas < self.max_priority_fee_per_gas:
            raise ValueError("max_fee_per_gas must be >= max_priority_fee_per_gas")

    def as_tx_fields(self) -> dict:
        return {
            "maxPriorityFeePerGas": self.max_priority_fee_per_gas,
            "maxFeePerGas": self.max_fee_per_gas,
        }


FeeQuote = LegacyFees | DynamicFees


class ChainError(GatewayError):
    status_code = 500


class EstimationError(ChainError):
    """Gas or fee estimation failed. Nothing was signed or sent."""


class SigningError(ChainError):
    """Key material could not sign. Nothing was sent."""


class BroadcastError(ChainError):
    """Submission failed or timed out. The transaction may still land on chain."""

    def __init__(self, message: str, tx_hash: Optional[str] = None, timed_out: bool = False):
        self.tx_hash = tx_hash
        self.timed_out = timed_out
        super().__init__(message)


class RevertedError(ChainError):
    """Transaction was mined with status 0."""

    def __init__(self, message: str, receipt: TxReceipt):
        self.receipt = receipt
        super().__init__(message)


class BaseNetwork(ABC):
    @abstractmethod
    async def initialize(self) -> None:
        pass

    @abstractmethod
    async def close(self) -> None:
        pass

    @abstractmethod
    async def estimate_gas(self, tx: dict) -> int:
        pass

    @abstractmethod
    async def get_gas_price(self) -> int:
        pass

    @abstractmethod
    async def get_fee_history(self, block_count: int, newest_block: str, percentiles: list[int]) -> Mapping:
        pass

    @abstractmethod
    async def get_transaction_count(self, address: str) -> int:
        pass

    @abstractmethod
    async def get_chain_id(self) -> int:
        pass

    @abstractmethod
    async def send_raw_transaction(self, raw_tx: bytes) -> bytes:
        pass

    @abstractmethod
    async def wait_for_receipt(self, tx_hash: bytes) -> TxReceipt:
        pass

    @abstractmethod
    async def call(self, tx: dict) -> bytes:
        pass
