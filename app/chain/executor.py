"""
Transaction executor: estimate, assemble, sign, broadcast, await receipt.

Submission is irreversible once the network accepts the raw transaction.
A BroadcastError means the outcome is unknown; callers must not blindly resubmit.
"""

import asyncio
import logging
from typing import Any, Optional

from web3.exceptions import TimeExhausted

from app.chain.base import (
    BaseNetwork,
    BroadcastError,
    ChainCall,
    ChainError,
    EstimationError,
    FeeMode,
    FeeQuote,
    RevertedError,
    TxReceipt,
    ViewCall,
)
from app.chain.contracts import decode_result
from app.chain.fees import compute_fees
from app.chain.signer import SignerIdentity
from app.config import settings

logger = logging.getLogger(__name__)


def _hex(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    return str(value)


class TransactionExecutor:
    def __init__(self, network: BaseNetwork, receipt_timeout: Optional[float] = None):
        self._network = network
        self._receipt_timeout = settings.tx_receipt_timeout_seconds if receipt_timeout is None else receipt_timeout

    async def compute_fees(self, mode: FeeMode) -> FeeQuote:
        return await compute_fees(self._network, mode)

    async def execute(self, call: ChainCall, signer: SignerIdentity, mode: FeeMode) -> TxReceipt:
        fees = await self.compute_fees(mode)
        return await self.submit(call, signer, fees)

    async def submit(self, call: ChainCall, signer: SignerIdentity, fees: FeeQuote) -> TxReceipt:
        try:
            gas = await self._network.estimate_gas({**call.as_tx_params(), "from": signer.address})
            nonce = await self._network.get_transaction_count(signer.address)
            chain_id = await self._network.get_chain_id()
        except Exception as e:
            logger.warning(f"Gas estimation failed for {call.description} from {signer.address}: {e}")
            raise EstimationError(f"Gas estimation failed: {e}") from e

        tx = {
            "to": call.to,
            "data": call.data,
            "value": call.value,
            "gas": int(gas),
            "nonce": nonce,
            "chainId": chain_id,
            **fees.as_tx_fields(),
        }
        raw_tx = signer.sign_transaction(tx)

        try:
            tx_hash = await self._network.send_raw_transaction(raw_tx)
        except Exception as e:
            logger.error(f"Broadcast failed for {call.description} from {signer.address}: {e}")
            raise BroadcastError(f"Broadcast failed, transaction state unknown: {e}") from e

        tx_hash_hex = _hex(tx_hash)
        logger.info(f"Submitted {call.description} from {signer.address}: {tx_hash_hex}")

        try:
            receipt = await asyncio.wait_for(
                self._network.wait_for_receipt(tx_hash), timeout=self._receipt_timeout
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Timed out waiting for receipt of {tx_hash_hex}")
            raise BroadcastError(
                f"Timed out waiting for receipt of {tx_hash_hex}; transaction may still be mined",
                tx_hash=tx_hash_hex,
                timed_out=True,
            ) from e
        except Exception as e:
            timed_out = isinstance(e, TimeExhausted)
            logger.error(f"Receipt wait failed for {tx_hash_hex}: {e}")
            raise BroadcastError(
                f"Receipt unavailable for {tx_hash_hex}, transaction state unknown: {e}",
                tx_hash=tx_hash_hex,
                timed_out=timed_out,
            ) from e

        if receipt.get("status") == 0:
            logger.warning(f"Transaction {tx_hash_hex} reverted ({call.description})")
            raise RevertedError(f"Transaction {tx_hash_hex} reverted", receipt=receipt)

        logger.info(f"Confirmed {tx_hash_hex} in block {receipt.get('blockNumber')}")
        return receipt

    async def read(self, view: ViewCall) -> Any:
        try:
            raw = await self._network.call(view.as_tx_params())
        except Exception as e:
            logger.warning(f"View call {view.description} failed: {e}")
            raise ChainError(f"Call to {view.description} failed: {e}") from e
        return decode_result(view.outputs, raw)
