from fastapi import APIRouter, Depends, Path

from app.chain.executor import TransactionExecutor
from app.chain.normalize import normalize_chain
from app.chain.signer import SignerIdentity
from app.dependencies import get_current_user, get_executor, require_admin
from app.schemas.common import SignedRequest
from app.schemas.contracts import PublishBookRequest
from app.services import book

router = APIRouter()


# Publishing & approving
@router.post("/request", dependencies=[Depends(get_current_user)])
async def request_publish_book(req: PublishBookRequest, executor: TransactionExecutor = Depends(get_executor)):
    signer = SignerIdentity.from_private_key(req.private_key)
    call = book.request_publish(signer.address, req.recipient, req.title, req.book_hash)
    receipt = await executor.execute(call, signer, book.REQUEST_FEE_MODE)
    return {"success": True, "receipt": normalize_chain(receipt)}


@router.post("/approve/{request_id}", dependencies=[Depends(require_admin)])
async def approve_publishing(
    req: SignedRequest,
    request_id: int = Path(ge=0),
    executor: TransactionExecutor = Depends(get_executor),
):
    signer = SignerIdentity.from_private_key(req.private_key)
    call = book.approve_publishing(signer.address, request_id)
    receipt = await executor.execute(call, signer, book.APPROVE_FEE_MODE)
    return {"success": True, "receipt": normalize_chain(receipt)}


@router.post("/publish-direct", dependencies=[Depends(get_current_user)])
async def publish_direct(req: PublishBookRequest, executor: TransactionExecutor = Depends(get_executor)):
    signer = SignerIdentity.from_private_key(req.private_key)
    call = book.publish_direct(signer.address, req.recipient, req.title, req.book_hash)
    receipt = await executor.execute(call, signer, book.FEE_MODE)
    return {"success": True, "receipt": normalize_chain(receipt)}


# Metadata & owner
@router.get("/owner/{token_id}")
async def get_owner(token_id: int = Path(ge=0), executor: TransactionExecutor = Depends(get_executor)):
    owner = await executor.read(book.owner_view(token_id))
    return {"success": True, "owner": normalize_chain(owner)}


@router.get("/{token_id}")
async def get_book_metadata(token_id: int = Path(ge=0), executor: TransactionExecutor = Depends(get_executor)):
    metadata = await executor.read(book.metadata_view(token_id))
    return {"success": True, "metadata": normalize_chain(metadata)}


# Deleting
@router.post("/request-delete/{token_id}", dependencies=[Depends(get_current_user)])
async def request_delete_book(
    req: SignedRequest,
    token_id: int = Path(ge=0),
    executor: TransactionExecutor = Depends(get_executor),
):
    signer = SignerIdentity.from_private_key(req.private_key)
    receipt = await executor.execute(book.request_delete(signer.address, token_id), signer, book.FEE_MODE)
    return {"success": True, "receipt": normalize_chain(receipt)}


@router.post("/approve-delete/{request_id}", dependencies=[Depends(require_admin)])
async def approve_deletion(
    req: SignedRequest,
    request_id: int = Path(ge=0),
    executor: TransactionExecutor = Depends(get_executor),
):
    signer = SignerIdentity.from_private_key(req.private_key)
    receipt = await executor.execute(book.approve_deletion(signer.address, request_id), signer, book.FEE_MODE)
    return {"success": True, "receipt": normalize_chain(receipt)}


@router.post("/delete-direct/{token_id}", dependencies=[Depends(require_admin)])
async def delete_direct(
    req: SignedRequest,
    token_id: int = Path(ge=0),
    executor: TransactionExecutor = Depends(get_executor),
):
    signer = SignerIdentity.from_private_key(req.private_key)
    receipt = await executor.execute(book.delete_direct(signer.address, token_id), signer, book.FEE_MODE)
    return {"success": True, "receipt": normalize_chain(receipt)}


# Purchasing
@router.post("/mark-purchased/{token_id}", dependencies=[Depends(get_current_user)])
async def mark_as_purchased(
    req: SignedRequest,
    token_id: int = Path(ge=0),
    executor: TransactionExecutor = Depends(get_executor),
):
    signer = SignerIdentity.from_private_key(req.private_key)
    receipt = await executor.execute(book.mark_purchased(signer.address, token_id), signer, book.FEE_MODE)
    return {"success": True, "receipt": normalize_chain(receipt)}
