"""
Admin contract service: on-chain role management and the platform wallet.

Role changes are authorized against the sender's on-chain roles before any
transaction is built:
  PLATFORM_ADMIN_ROLE, FUND_MANAGER_ROLE  <- DEFAULT_ADMIN_ROLE
  AUTHOR_ROLE                             <- PLATFORM_ADMIN_ROLE
"""

import asyncio
import enum
import logging
from typing import Callable

from web3 import Web3

from app.chain.base import ZERO_ADDRESS, ChainCall, ContractName, FeeMode, TxReceipt
from app.chain.contracts import build_call, build_view, checksum
from app.chain.executor import TransactionExecutor
from app.chain.signer import SignerIdentity
from app.errors import UnauthorizedError, ValidationError

logger = logging.getLogger(__name__)

FEE_MODE = FeeMode.EIP1559


class ContractRole(str, enum.Enum):
    DEFAULT_ADMIN_ROLE = "DEFAULT_ADMIN_ROLE"
    PLATFORM_ADMIN_ROLE = "PLATFORM_ADMIN_ROLE"
    FUND_MANAGER_ROLE = "FUND_MANAGER_ROLE"
    AUTHOR_ROLE = "AUTHOR_ROLE"


ROLE_IDS = {role: Web3.keccak(text=role.value) for role in ContractRole}


def _admin_call(fn_name: str) -> Callable[[str, str], ChainCall]:
    def builder(sender: str, account: str) -> ChainCall:
        return build_call(ContractName.ADMIN, fn_name, [account], sender)

    builder.__name__ = fn_name
    return builder


grant_platform_admin = _admin_call("grantPlatformAdmin")
grant_fund_manager = _admin_call("grantFundManager")
grant_author_role = _admin_call("grantAuthorRole")
revoke_platform_admin = _admin_call("revokePlatformAdmin")
revoke_fund_manager = _admin_call("revokeFundManager")
revoke_author_role = _admin_call("revokeAuthorRole")

GRANT_BUILDERS: dict[ContractRole, Callable[[str, str], ChainCall]] = {
    ContractRole.PLATFORM_ADMIN_ROLE: grant_platform_admin,
    ContractRole.FUND_MANAGER_ROLE: grant_fund_manager,
    ContractRole.AUTHOR_ROLE: grant_author_role,
}

REVOKE_BUILDERS: dict[ContractRole, Callable[[str, str], ChainCall]] = {
    ContractRole.PLATFORM_ADMIN_ROLE: revoke_platform_admin,
    ContractRole.FUND_MANAGER_ROLE: revoke_fund_manager,
    ContractRole.AUTHOR_ROLE: revoke_author_role,
}

REQUIRED_SENDER_ROLE = {
    ContractRole.PLATFORM_ADMIN_ROLE: ContractRole.DEFAULT_ADMIN_ROLE,
    ContractRole.FUND_MANAGER_ROLE: ContractRole.DEFAULT_ADMIN_ROLE,
    ContractRole.AUTHOR_ROLE: ContractRole.PLATFORM_ADMIN_ROLE,
}


def parse_role(role: str) -> ContractRole:
    try:
        parsed = ContractRole(role)
    except ValueError:
        raise ValidationError(f"Unknown role: {role}")
    if parsed not in GRANT_BUILDERS:
        raise ValidationError(f"Role {role} cannot be assigned or revoked")
    return parsed


async def roles_for_address(executor: TransactionExecutor, address: str) -> list[str]:
    address = checksum(address)
    views = [build_view(ContractName.ADMIN, "hasSpecificRole", [ROLE_IDS[r], address]) for r in ContractRole]
    results = await asyncio.gather(*(executor.read(v) for v in views))
    return [role.value for role, has_role in zip(ContractRole, results) if has_role]


async def _require_role(executor: TransactionExecutor, sender: str, required: ContractRole, action: str) -> None:
    sender_roles = await roles_for_address(executor, sender)
    if required.value not in sender_roles:
        logger.warning(f"{sender} lacks {required.value} for {action}")
        raise UnauthorizedError(f"Unauthorized: {sender} cannot {action}")


async def assign_role(
    executor: TransactionExecutor, signer: SignerIdentity, role: str, address: str
) -> TxReceipt:
    contract_role = parse_role(role)
    account = checksum(address)
    await _require_role(
        executor, signer.address, REQUIRED_SENDER_ROLE[contract_role], f"assign {contract_role.value}"
    )
    call = GRANT_BUILDERS[contract_role](signer.address, account)
    logger.info(f"Assigning {contract_role.value} to {account} from {signer.address}")
    return await executor.execute(call, signer, FEE_MODE)


async def revoke_role(
    executor: TransactionExecutor, signer: SignerIdentity, role: str, address: str
) -> TxReceipt:
    contract_role = parse_role(role)
    account = checksum(address)
    await _require_role(
        executor, signer.address, REQUIRED_SENDER_ROLE[contract_role], f"revoke {contract_role.value}"
    )
    call = REVOKE_BUILDERS[contract_role](signer.address, account)
    logger.info(f"Revoking {contract_role.value} from {account} by {signer.address}")
    return await executor.execute(call, signer, FEE_MODE)


async def get_platform_wallet(executor: TransactionExecutor) -> str:
    return await executor.read(build_view(ContractName.ADMIN, "getPlatformWallet", []))


async def set_platform_wallet(
    executor: TransactionExecutor, signer: SignerIdentity, new_wallet: str
) -> TxReceipt:
    wallet = checksum(new_wallet, "newWallet")
    if wallet == ZERO_ADDRESS:
        raise ValidationError("New wallet address cannot be zero")
    await _require_role(executor, signer.address, ContractRole.DEFAULT_ADMIN_ROLE, "set the platform wallet")
    call = build_call(ContractName.ADMIN, "setPlatformWallet", [wallet], signer.address)
    return await executor.execute(call, signer, FEE_MODE)
