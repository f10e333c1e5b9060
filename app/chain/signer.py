"""Request-scoped signer built from a client-supplied private key."""

from eth_account import Account
from eth_account.signers.local import LocalAccount

from app.chain.base import SigningError


class SignerIdentity:
    __slots__ = ("_account",)

    def __init__(self, account: LocalAccount):
        self._account = account

    @classmethod
    def from_private_key(cls, private_key: str) -> "SignerIdentity":
        try:
            return cls(Account.from_key(private_key))
        except (ValueError, TypeError) as e:
            raise SigningError(f"Invalid private key: {type(e).__name__}") from e

    @property
    def address(self) -> str:
        return self._account.address

    def sign_transaction(self, tx: dict) -> bytes:
        try:
            signed = self._account.sign_transaction(tx)
        except (ValueError, TypeError) as e:
            raise SigningError(f"Failed to sign transaction: {e}") from e
        return bytes(signed.raw_transaction)

    def __repr__(self) -> str:
        return f"SignerIdentity(address={self.address})"
