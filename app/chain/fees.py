"""Fee policy: legacy gas price, fixed-ratio EIP-1559, or fee-history EIP-1559."""

import logging

from app.chain.base import BaseNetwork, DynamicFees, EstimationError, FeeMode, FeeQuote, LegacyFees

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY_FEE = 2_000_000_000  # 2 gwei
FEE_HISTORY_PERCENTILES = [25, 50, 75]


def legacy_quote(base_fee: int) -> LegacyFees:
    return LegacyFees(gas_price=base_fee)


def fixed_ratio_quote(base_fee: int) -> DynamicFees:
    """Priority fee at 50% and max fee at 200% of the current base fee."""
    return DynamicFees(max_priority_fee_per_gas=base_fee // 2, max_fee_per_gas=base_fee * 2)


def fee_history_quote(base_fee: int, fee_history) -> DynamicFees:
    """Priority fee from the latest block's 75th-percentile reward, topped onto the base fee."""
    priority = 0
    rewards = fee_history.get("reward") or []
    if rewards and len(rewards[0]) > 2:
        priority = int(rewards[0][2])
    if priority <= 0:
        priority = DEFAULT_PRIORITY_FEE
    return DynamicFees(max_priority_fee_per_gas=priority, max_fee_per_gas=base_fee + priority)


async def compute_fees(network: BaseNetwork, mode: FeeMode) -> FeeQuote:
    try:
        base_fee = int(await network.get_gas_price())
        if mode == FeeMode.LEGACY:
            return legacy_quote(base_fee)
        if mode == FeeMode.EIP1559:
            return fixed_ratio_quote(base_fee)
        history = await network.get_fee_history(1, "latest", FEE_HISTORY_PERCENTILES)
        return fee_history_quote(base_fee, history)
    except Exception as e:
        logger.warning(f"Fee lookup failed ({mode.value}): {e}")
        raise EstimationError(f"Fee lookup failed: {e}") from e
