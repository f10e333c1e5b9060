from fastapi import APIRouter, Depends, Path

from app.chain.executor import TransactionExecutor
from app.chain.normalize import normalize_chain
from app.chain.signer import SignerIdentity
from app.dependencies import get_current_user, get_executor
from app.schemas.contracts import ListTokenRequest, PurchaseTokenRequest, TokenIdRequest, UpdateListingRequest
from app.services import marketplace

router = APIRouter()


# Listings
@router.post("/list", dependencies=[Depends(get_current_user)])
async def list_token(req: ListTokenRequest, executor: TransactionExecutor = Depends(get_executor)):
    signer = SignerIdentity.from_private_key(req.private_key)
    call = marketplace.list_token(signer.address, req.token_id, req.price)
    receipt = await executor.execute(call, signer, marketplace.FEE_MODE)
    return {"success": True, "receipt": normalize_chain(receipt)}


@router.post("/update", dependencies=[Depends(get_current_user)])
async def update_listing(req: UpdateListingRequest, executor: TransactionExecutor = Depends(get_executor)):
    signer = SignerIdentity.from_private_key(req.private_key)
    call = marketplace.update_listing(signer.address, req.token_id, req.new_price)
    receipt = await executor.execute(call, signer, marketplace.FEE_MODE)
    return {"success": True, "receipt": normalize_chain(receipt)}


@router.delete("/remove", dependencies=[Depends(get_current_user)])
async def remove_listing(req: TokenIdRequest, executor: TransactionExecutor = Depends(get_executor)):
    signer = SignerIdentity.from_private_key(req.private_key)
    call = marketplace.remove_listing(signer.address, req.token_id)
    receipt = await executor.execute(call, signer, marketplace.FEE_MODE)
    return {"success": True, "receipt": normalize_chain(receipt)}


@router.get("/{token_id}")
async def get_listing(token_id: int = Path(ge=0), executor: TransactionExecutor = Depends(get_executor)):
    listing = await executor.read(marketplace.listing_view(token_id))
    return {"success": True, "listing": normalize_chain(listing)}


# Purchase (transfers ownership & rights)
@router.post("/purchase", dependencies=[Depends(get_current_user)])
async def purchase_token(req: PurchaseTokenRequest, executor: TransactionExecutor = Depends(get_executor)):
    signer = SignerIdentity.from_private_key(req.private_key)
    call = marketplace.purchase_token(signer.address, req.token_id, req.value)
    receipt = await executor.execute(call, signer, marketplace.FEE_MODE)
    return {"success": True, "receipt": normalize_chain(receipt)}
