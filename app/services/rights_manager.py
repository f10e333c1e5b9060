from app.chain.base import ChainCall, ContractName, FeeMode, ViewCall
from app.chain.contracts import build_call, build_view, checksum

FEE_MODE = FeeMode.EIP1559

RIGHTS_MANAGER = ContractName.RIGHTS_MANAGER


def set_marketplace(sender: str, new_marketplace: str) -> ChainCall:
    return build_call(RIGHTS_MANAGER, "setMarketplace", [checksum(new_marketplace, "newMarketplace")], sender)


def initiate_request(sender: str, token_id: int, request_date: int, buyer: str) -> ChainCall:
    return build_call(
        RIGHTS_MANAGER, "initiateRequest", [token_id, request_date, checksum(buyer, "buyer")], sender
    )


def author_approve(sender: str, token_id: int) -> ChainCall:
    return build_call(RIGHTS_MANAGER, "authorApprove", [token_id], sender)


def complete_transfer(sender: str, token_id: int, expiration_date: int, ipfs_hash: str) -> ChainCall:
    return build_call(RIGHTS_MANAGER, "completeTransfer", [token_id, expiration_date, ipfs_hash], sender)


def rights_info_view(token_id: int) -> ViewCall:
    return build_view(RIGHTS_MANAGER, "getRightsInfo", [token_id])
