from fastapi import APIRouter, Depends

from app.chain.executor import TransactionExecutor
from app.chain.normalize import normalize_chain
from app.chain.signer import SignerIdentity
from app.db.models import UserRole
from app.dependencies import get_current_user, get_executor, require_roles
from app.schemas.common import SignedRequest
from app.schemas.contracts import AuthorRequest, SetAuthorSplitsRequest, SetPlatformFeeRequest, SplitPaymentRequest
from app.services import payment_splitter

router = APIRouter()

require_fee_admin = require_roles(UserRole.DEFAULT_ADMIN, UserRole.PLATFORM_ADMIN, UserRole.FUNDS_MANAGER)


# Platform fee
@router.post("/set-platform-fee", dependencies=[Depends(require_fee_admin)])
async def set_platform_fee(req: SetPlatformFeeRequest, executor: TransactionExecutor = Depends(get_executor)):
    signer = SignerIdentity.from_private_key(req.private_key)
    call = payment_splitter.set_platform_fee(signer.address, req.author, req.fee)
    receipt = await executor.execute(call, signer, payment_splitter.FEE_MODE)
    return {"success": True, "receipt": normalize_chain(receipt)}


@router.get("/get-platform-fee/{author}")
async def get_platform_fee(author: str, executor: TransactionExecutor = Depends(get_executor)):
    platform_fee = await executor.read(payment_splitter.platform_fee_view(author))
    return {"success": True, "platformFee": normalize_chain(platform_fee)}


# Author revenue splits
@router.post("/set-author-splits", dependencies=[Depends(get_current_user)])
async def set_author_splits(req: SetAuthorSplitsRequest, executor: TransactionExecutor = Depends(get_executor)):
    signer = SignerIdentity.from_private_key(req.private_key)
    call = payment_splitter.set_author_splits(signer.address, req.author, req.recipients, req.percentages)
    receipt = await executor.execute(call, signer, payment_splitter.FEE_MODE)
    return {"success": True, "receipt": normalize_chain(receipt)}


@router.post("/delete-author-splits", dependencies=[Depends(get_current_user)])
async def delete_author_splits(req: AuthorRequest, executor: TransactionExecutor = Depends(get_executor)):
    signer = SignerIdentity.from_private_key(req.private_key)
    call = payment_splitter.delete_author_splits(signer.address, req.author)
    receipt = await executor.execute(call, signer, payment_splitter.FEE_MODE)
    return {"success": True, "receipt": normalize_chain(receipt)}


@router.get("/recipients/{author}")
async def get_recipients(author: str, executor: TransactionExecutor = Depends(get_executor)):
    recipients = await executor.read(payment_splitter.recipients_view(author))
    return {"success": True, "recipients": normalize_chain(payment_splitter.filter_recipients(recipients))}


@router.get("/percentages/{author}")
async def get_percentages(author: str, executor: TransactionExecutor = Depends(get_executor)):
    percentages = await executor.read(payment_splitter.percentages_view(author))
    return {"success": True, "percentages": normalize_chain(percentages)}


# Payment & distribution
@router.post("/split-payment", dependencies=[Depends(get_current_user)])
async def split_payment(req: SplitPaymentRequest, executor: TransactionExecutor = Depends(get_executor)):
    signer = SignerIdentity.from_private_key(req.private_key)
    call = payment_splitter.split_payment(signer.address, req.author, req.amount)
    receipt = await executor.execute(call, signer, payment_splitter.FEE_MODE)
    return {"success": True, "receipt": normalize_chain(receipt)}


@router.post("/claim-failed-payments", dependencies=[Depends(get_current_user)])
async def claim_failed_payments(req: SignedRequest, executor: TransactionExecutor = Depends(get_executor)):
    signer = SignerIdentity.from_private_key(req.private_key)
    call = payment_splitter.claim_failed_payments(signer.address)
    receipt = await executor.execute(call, signer, payment_splitter.FEE_MODE)
    return {"success": True, "receipt": normalize_chain(receipt)}
