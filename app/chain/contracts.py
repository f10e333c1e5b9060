"""
Deployed contract registry: addresses, ABIs, calldata encoding and view decoding.

Only the functions the gateway calls are bundled. Drop a full ABI at
<abi_dir>/<ContractName>.json to override a bundled fragment.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

from eth_abi import decode
from eth_utils.abi import collapse_if_tuple
from web3 import Web3

from app.chain.base import ChainCall, ChainError, ContractName, ViewCall
from app.config import settings
from app.errors import ValidationError

logger = logging.getLogger(__name__)


def _fn(name: str, inputs=(), outputs=(), mutability: str = "nonpayable") -> dict:
    return {
        "type": "function",
        "name": name,
        "stateMutability": mutability,
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "outputs": [{"name": n, "type": t} for n, t in outputs],
    }


ADMIN_ABI = [
    _fn("grantPlatformAdmin", [("account", "address")]),
    _fn("grantFundManager", [("account", "address")]),
    _fn("grantAuthorRole", [("account", "address")]),
    _fn("revokePlatformAdmin", [("account", "address")]),
    _fn("revokeFundManager", [("account", "address")]),
    _fn("revokeAuthorRole", [("account", "address")]),
    _fn("hasSpecificRole", [("role", "bytes32"), ("account", "address")], [("", "bool")], "view"),
    _fn("getPlatformWallet", [], [("", "address")], "view"),
    _fn("setPlatformWallet", [("newWallet", "address")]),
]

NFT_BOOK_ABI = [
    _fn("requestPublishBook", [("recipient", "address"), ("title", "string"), ("bookHash", "string")]),
    _fn("approvePublishing", [("requestId", "uint256")]),
    _fn("publishForUnregistered", [("recipient", "address"), ("title", "string"), ("bookHash", "string")]),
    _fn("requestDeleteBook", [("tokenId", "uint256")]),
    _fn("approveDeletion", [("requestId", "uint256")]),
    _fn("deleteForUnregistered", [("tokenId", "uint256")]),
    _fn("markAsPurchased", [("tokenId", "uint256")]),
    _fn(
        "bookMetadata",
        [("tokenId", "uint256")],
        [("title", "string"), ("bookHash", "string"), ("author", "address"), ("isPurchased", "bool")],
        "view",
    ),
    _fn("ownerOf", [("tokenId", "uint256")], [("", "address")], "view"),
]

MARKETPLACE_ABI = [
    _fn("listToken", [("tokenId", "uint256"), ("price", "uint256")]),
    _fn("updateListing", [("tokenId", "uint256"), ("newPrice", "uint256")]),
    _fn("removeListing", [("tokenId", "uint256")]),
    _fn("purchaseToken", [("tokenId", "uint256")], mutability="payable"),
    _fn(
        "getListing",
        [("tokenId", "uint256")],
        [("seller", "address"), ("price", "uint256"), ("isActive", "bool")],
        "view",
    ),
]

PAYMENT_SPLITTER_ABI = [
    _fn("setPlatformFee", [("author", "address"), ("fee", "uint256")]),
    _fn("setAuthorSplits", [("author", "address"), ("recipients", "address[]"), ("percentages", "uint256[]")]),
    _fn("deleteAuthorSplits", [("author", "address")]),
    _fn("splitPayment", [("author", "address")], mutability="payable"),
    _fn("claimFailedPayments"),
    _fn("getPlatformFee", [("author", "address")], [("", "uint256")], "view"),
    _fn("getRecipients", [("author", "address")], [("", "address[]")], "view"),
    _fn("getPercentages", [("author", "address")], [("", "uint256[]")], "view"),
]

RIGHTS_MANAGER_ABI = [
    _fn("setMarketplace", [("newMarketplace", "address")]),
    _fn("initiateRequest", [("tokenId", "uint256"), ("requestDate", "uint256"), ("buyer", "address")]),
    _fn("authorApprove", [("tokenId", "uint256")]),
    _fn("completeTransfer", [("tokenId", "uint256"), ("expirationDate", "uint256"), ("ipfsHash", "string")]),
    _fn(
        "getRightsInfo",
        [("tokenId", "uint256")],
        [
            ("author", "address"),
            ("buyer", "address"),
            ("requestDate", "uint256"),
            ("expirationDate", "uint256"),
            ("ipfsHash", "string"),
            ("authorApproved", "bool"),
        ],
        "view",
    ),
]

BUNDLED_ABIS = {
    ContractName.ADMIN: ADMIN_ABI,
    ContractName.NFT_BOOK: NFT_BOOK_ABI,
    ContractName.MARKETPLACE: MARKETPLACE_ABI,
    ContractName.PAYMENT_SPLITTER: PAYMENT_SPLITTER_ABI,
    ContractName.RIGHTS_MANAGER: RIGHTS_MANAGER_ABI,
}


def contract_address(name: ContractName) -> str:
    address = {
        ContractName.ADMIN: settings.admin_contract,
        ContractName.NFT_BOOK: settings.nft_book_contract,
        ContractName.MARKETPLACE: settings.marketplace_contract,
        ContractName.PAYMENT_SPLITTER: settings.payment_splitter_contract,
        ContractName.RIGHTS_MANAGER: settings.rights_manager_contract,
    }[name]
    if not address:
        raise ChainError(f"Address for {name.value} is not configured")
    return Web3.to_checksum_address(address)


@lru_cache(maxsize=None)
def _load_abi_file(abi_dir: str, name: str) -> list | None:
    path = Path(abi_dir) / f"{name}.json"
    if not path.is_file():
        return None
    data = json.loads(path.read_text(encoding="utf-8"))
    # Accept raw ABI arrays and build artifacts ({"abi": [...]})
    abi = data["abi"] if isinstance(data, dict) else data
    logger.info(f"Loaded ABI override for {name} from {path}")
    return abi


def load_abi(name: ContractName) -> list:
    if settings.abi_dir:
        abi = _load_abi_file(settings.abi_dir, name.value)
        if abi is not None:
            return abi
    return BUNDLED_ABIS[name]


def _function_abi(abi: list, fn_name: str) -> dict:
    for item in abi:
        if item.get("type") == "function" and item.get("name") == fn_name:
            return item
    raise ChainError(f"Function {fn_name} not found in ABI")


def checksum(address: str, field_name: str = "address") -> str:
    """Validate a user-supplied address and return its checksum form."""
    if not isinstance(address, str) or not Web3.is_address(address):
        raise ValidationError(f"Invalid {field_name}: {address!r}")
    return Web3.to_checksum_address(address)


def _encode(name: ContractName, fn_name: str, args: list) -> tuple[str, str]:
    address = contract_address(name)
    contract = Web3().eth.contract(address=address, abi=load_abi(name))
    try:
        data = contract.encode_abi(fn_name, args=args)
    except Exception as e:
        raise ValidationError(f"Invalid arguments for {fn_name}: {e}") from e
    return address, data


def build_call(
    name: ContractName, fn_name: str, args: list, sender: str, value: int = 0
) -> ChainCall:
    to, data = _encode(name, fn_name, args)
    return ChainCall(to=to, data=data, sender=sender, value=value, description=f"{name.value}.{fn_name}")


def build_view(name: ContractName, fn_name: str, args: list) -> ViewCall:
    to, data = _encode(name, fn_name, args)
    outputs = tuple(_function_abi(load_abi(name), fn_name).get("outputs", []))
    return ViewCall(to=to, data=data, outputs=outputs, description=f"{name.value}.{fn_name}")


def _shape(param: dict, value: Any) -> Any:
    abi_type = param["type"]
    if abi_type == "tuple":
        return _named(param.get("components", []), value)
    if abi_type.startswith("tuple["):
        inner = {**param, "type": abi_type[: abi_type.rindex("[")]}
        return [_shape(inner, v) for v in value]
    return value


def _named(params: list, values) -> Any:
    shaped = [_shape(p, v) for p, v in zip(params, values)]
    if params and all(p.get("name") for p in params):
        return {p["name"]: v for p, v in zip(params, shaped)}
    return shaped


def decode_result(outputs: tuple, raw: bytes) -> Any:
    """Decode eth_call return data. Single outputs are unwrapped; named outputs become a dict."""
    types = [collapse_if_tuple(o) for o in outputs]
    try:
        values = decode(types, bytes(raw))
    except Exception as e:
        raise ChainError(f"Could not decode call result: {e}") from e
    if len(outputs) == 1:
        return _shape(outputs[0], values[0])
    return _named(list(outputs), values)
