from fastapi import APIRouter, Depends

from app.chain.executor import TransactionExecutor
from app.chain.normalize import normalize_chain
from app.chain.signer import SignerIdentity
from app.dependencies import get_executor, require_admin
from app.schemas.contracts import RoleChangeRequest, SetPlatformWalletRequest
from app.services import admin

router = APIRouter()


@router.post("/assign-role", dependencies=[Depends(require_admin)])
async def assign_role(req: RoleChangeRequest, executor: TransactionExecutor = Depends(get_executor)):
    signer = SignerIdentity.from_private_key(req.private_key)
    receipt = await admin.assign_role(executor, signer, req.role, req.address)
    return {"success": True, "receipt": normalize_chain(receipt)}


@router.post("/revoke-role", dependencies=[Depends(require_admin)])
async def revoke_role(req: RoleChangeRequest, executor: TransactionExecutor = Depends(get_executor)):
    signer = SignerIdentity.from_private_key(req.private_key)
    receipt = await admin.revoke_role(executor, signer, req.role, req.address)
    return {"success": True, "receipt": normalize_chain(receipt)}


@router.get("/roles/{address}")
async def get_roles(address: str, executor: TransactionExecutor = Depends(get_executor)):
    roles = await admin.roles_for_address(executor, address)
    return {"success": True, "address": address, "roles": roles}


@router.get("/platform-wallet")
async def get_platform_wallet(executor: TransactionExecutor = Depends(get_executor)):
    wallet = await admin.get_platform_wallet(executor)
    return {"success": True, "platformWallet": normalize_chain(wallet)}


@router.post("/set-platform-wallet", dependencies=[Depends(require_admin)])
async def set_platform_wallet(req: SetPlatformWalletRequest, executor: TransactionExecutor = Depends(get_executor)):
    signer = SignerIdentity.from_private_key(req.private_key)
    receipt = await admin.set_platform_wallet(executor, signer, req.new_wallet)
    return {"success": True, "receipt": normalize_chain(receipt)}
