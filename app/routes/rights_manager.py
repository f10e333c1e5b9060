from fastapi import APIRouter, Depends, Path

from app.chain.executor import TransactionExecutor
from app.chain.normalize import normalize_chain
from app.chain.signer import SignerIdentity
from app.dependencies import get_current_user, get_executor, require_admin
from app.schemas.contracts import (
    CompleteTransferRequest,
    InitiateRightsRequest,
    SetMarketplaceRequest,
    TokenIdRequest,
)
from app.services import rights_manager

router = APIRouter()


@router.post("/set-marketplace", dependencies=[Depends(require_admin)])
async def set_marketplace(req: SetMarketplaceRequest, executor: TransactionExecutor = Depends(get_executor)):
    signer = SignerIdentity.from_private_key(req.private_key)
    call = rights_manager.set_marketplace(signer.address, req.new_marketplace)
    receipt = await executor.execute(call, signer, rights_manager.FEE_MODE)
    return {"success": True, "receipt": normalize_chain(receipt)}


# Rights requests
@router.post("/initiate-request", dependencies=[Depends(get_current_user)])
async def initiate_request(req: InitiateRightsRequest, executor: TransactionExecutor = Depends(get_executor)):
    signer = SignerIdentity.from_private_key(req.private_key)
    call = rights_manager.initiate_request(signer.address, req.token_id, req.request_date, req.buyer)
    receipt = await executor.execute(call, signer, rights_manager.FEE_MODE)
    return {"success": True, "receipt": normalize_chain(receipt)}


@router.post("/author-approve", dependencies=[Depends(get_current_user)])
async def author_approve(req: TokenIdRequest, executor: TransactionExecutor = Depends(get_executor)):
    signer = SignerIdentity.from_private_key(req.private_key)
    call = rights_manager.author_approve(signer.address, req.token_id)
    receipt = await executor.execute(call, signer, rights_manager.FEE_MODE)
    return {"success": True, "receipt": normalize_chain(receipt)}


@router.post("/complete-transfer", dependencies=[Depends(get_current_user)])
async def complete_transfer(req: CompleteTransferRequest, executor: TransactionExecutor = Depends(get_executor)):
    signer = SignerIdentity.from_private_key(req.private_key)
    call = rights_manager.complete_transfer(signer.address, req.token_id, req.expiration_date, req.ipfs_hash)
    receipt = await executor.execute(call, signer, rights_manager.FEE_MODE)
    return {"success": True, "receipt": normalize_chain(receipt)}


@router.get("/rights-info/{token_id}")
async def get_rights_info(token_id: int = Path(ge=0), executor: TransactionExecutor = Depends(get_executor)):
    rights_info = await executor.read(rights_manager.rights_info_view(token_id))
    return {"success": True, "rightsInfo": normalize_chain(rights_info)}
