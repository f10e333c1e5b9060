from app.chain.base import ChainCall, ContractName, FeeMode, ViewCall
from app.chain.contracts import build_call, build_view

FEE_MODE = FeeMode.EIP1559

MARKETPLACE = ContractName.MARKETPLACE


def list_token(sender: str, token_id: int, price: int) -> ChainCall:
    return build_call(MARKETPLACE, "listToken", [token_id, price], sender)


def update_listing(sender: str, token_id: int, new_price: int) -> ChainCall:
    return build_call(MARKETPLACE, "updateListing", [token_id, new_price], sender)


def remove_listing(sender: str, token_id: int) -> ChainCall:
    return build_call(MARKETPLACE, "removeListing", [token_id], sender)


def purchase_token(sender: str, token_id: int, value: int) -> ChainCall:
    """Purchase transfers ownership and rights; `value` (wei) is attached to the call."""
    return build_call(MARKETPLACE, "purchaseToken", [token_id], sender, value=value)


def listing_view(token_id: int) -> ViewCall:
    return build_view(MARKETPLACE, "getListing", [token_id])
