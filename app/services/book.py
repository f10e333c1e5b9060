"""NFT book contract: publishing, deletion and purchase marking."""

from app.chain.base import ChainCall, ContractName, FeeMode, ViewCall
from app.chain.contracts import build_call, build_view, checksum

# Publishing requests go out as legacy transactions, approvals price their tip
# from recent fee history; everything else uses the fixed-ratio EIP-1559 policy.
REQUEST_FEE_MODE = FeeMode.LEGACY
APPROVE_FEE_MODE = FeeMode.FEE_HISTORY
FEE_MODE = FeeMode.EIP1559

NFT_BOOK = ContractName.NFT_BOOK


def request_publish(sender: str, recipient: str, title: str, book_hash: str) -> ChainCall:
    return build_call(NFT_BOOK, "requestPublishBook", [checksum(recipient, "recipient"), title, book_hash], sender)


def approve_publishing(sender: str, request_id: int) -> ChainCall:
    return build_call(NFT_BOOK, "approvePublishing", [request_id], sender)


def publish_direct(sender: str, recipient: str, title: str, book_hash: str) -> ChainCall:
    return build_call(
        NFT_BOOK, "publishForUnregistered", [checksum(recipient, "recipient"), title, book_hash], sender
    )


def request_delete(sender: str, token_id: int) -> ChainCall:
    return build_call(NFT_BOOK, "requestDeleteBook", [token_id], sender)


def approve_deletion(sender: str, request_id: int) -> ChainCall:
    return build_call(NFT_BOOK, "approveDeletion", [request_id], sender)


def delete_direct(sender: str, token_id: int) -> ChainCall:
    return build_call(NFT_BOOK, "deleteForUnregistered", [token_id], sender)


def mark_purchased(sender: str, token_id: int) -> ChainCall:
    return build_call(NFT_BOOK, "markAsPurchased", [token_id], sender)


def metadata_view(token_id: int) -> ViewCall:
    return build_view(NFT_BOOK, "bookMetadata", [token_id])


def owner_view(token_id: int) -> ViewCall:
    return build_view(NFT_BOOK, "ownerOf", [token_id])
