from pydantic import Field

from app.schemas.common import SignedRequest


# Admin
class RoleChangeRequest(SignedRequest):
    role: str
    address: str


class SetPlatformWalletRequest(SignedRequest):
    new_wallet: str


# Book
class PublishBookRequest(SignedRequest):
    recipient: str
    title: str = Field(min_length=1)
    book_hash: str = Field(min_length=1)


class TokenIdRequest(SignedRequest):
    token_id: int = Field(ge=0)


# Marketplace
class ListTokenRequest(SignedRequest):
    token_id: int = Field(ge=0)
    price: int = Field(ge=0)


class UpdateListingRequest(SignedRequest):
    token_id: int = Field(ge=0)
    new_price: int = Field(ge=0)


class PurchaseTokenRequest(SignedRequest):
    token_id: int = Field(ge=0)
    value: int = Field(ge=0)


# Payment splitter
class SetPlatformFeeRequest(SignedRequest):
    author: str
    fee: int = Field(ge=0)


class SetAuthorSplitsRequest(SignedRequest):
    author: str
    recipients: list[str] = Field(min_length=1)
    percentages: list[int] = Field(min_length=1)


class AuthorRequest(SignedRequest):
    author: str


class SplitPaymentRequest(SignedRequest):
    author: str
    amount: int = Field(ge=0)


# Rights manager
class SetMarketplaceRequest(SignedRequest):
    new_marketplace: str


class InitiateRightsRequest(SignedRequest):
    token_id: int = Field(ge=0)
    request_date: int = Field(ge=0)
    buyer: str


class CompleteTransferRequest(SignedRequest):
    token_id: int = Field(ge=0)
    expiration_date: int = Field(ge=0)
    ipfs_hash: str = Field(min_length=1)
