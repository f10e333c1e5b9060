"""
web3.py-backed network client.
One instance is shared by all requests; AsyncHTTPProvider pools its own sessions.
"""

import logging
from collections.abc import Mapping
from typing import Optional

from web3 import AsyncWeb3

from app.chain.base import BaseNetwork, TxReceipt
from app.config import settings

logger = logging.getLogger(__name__)


class Web3Network(BaseNetwork):
    def __init__(
        self,
        rpc_url: Optional[str] = None,
        request_timeout: Optional[float] = None,
        receipt_timeout: Optional[float] = None,
    ):
        self._rpc_url = rpc_url or settings.rpc_url
        self._request_timeout = settings.rpc_request_timeout_seconds if request_timeout is None else request_timeout
        self._receipt_timeout = settings.tx_receipt_timeout_seconds if receipt_timeout is None else receipt_timeout
        self._web3: Optional[AsyncWeb3] = None
        self._chain_id: Optional[int] = None

    async def initialize(self) -> None:
        self._web3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(
            self._rpc_url, request_kwargs={"timeout": self._request_timeout},
        ))
        logger.info(f"Network client configured for {self._rpc_url}")

    async def close(self) -> None:
        if self._web3:
            await self._web3.provider.disconnect()

    @property
    def w3(self) -> AsyncWeb3:
        if self._web3 is None:
            raise RuntimeError("Network client is not initialized")
        return self._web3

    async def estimate_gas(self, tx: dict) -> int:
        return await self.w3.eth.estimate_gas(tx)

    async def get_gas_price(self) -> int:
        return await self.w3.eth.gas_price

    async def get_fee_history(self, block_count: int, newest_block: str, percentiles: list[int]) -> Mapping:
        return await self.w3.eth.fee_history(block_count, newest_block, percentiles)

    async def get_transaction_count(self, address: str) -> int:
        return await self.w3.eth.get_transaction_count(address, "pending")

    async def get_chain_id(self) -> int:
        if self._chain_id is None:
            self._chain_id = await self.w3.eth.chain_id
        return self._chain_id

    async def send_raw_transaction(self, raw_tx: bytes) -> bytes:
        return await self.w3.eth.send_raw_transaction(raw_tx)

    async def wait_for_receipt(self, tx_hash: bytes) -> TxReceipt:
        return await self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self._receipt_timeout)

    async def call(self, tx: dict) -> bytes:
        return await self.w3.eth.call(tx)
