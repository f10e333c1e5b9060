"""Payment splitter contract: platform fees, author revenue splits and payouts."""

from app.chain.base import ZERO_ADDRESS, ChainCall, ContractName, FeeMode, ViewCall
from app.chain.contracts import build_call, build_view, checksum
from app.errors import ValidationError

FEE_MODE = FeeMode.EIP1559

PAYMENT_SPLITTER = ContractName.PAYMENT_SPLITTER


def set_platform_fee(sender: str, author: str, fee: int) -> ChainCall:
    return build_call(PAYMENT_SPLITTER, "setPlatformFee", [checksum(author, "author"), fee], sender)


def set_author_splits(sender: str, author: str, recipients: list[str], percentages: list[int]) -> ChainCall:
    if len(recipients) != len(percentages):
        raise ValidationError("recipients and percentages must have the same length")
    if any(p < 0 for p in percentages):
        raise ValidationError("percentages must be non-negative")
    recipients = [checksum(r, "recipient") for r in recipients]
    return build_call(
        PAYMENT_SPLITTER, "setAuthorSplits", [checksum(author, "author"), recipients, percentages], sender
    )


def delete_author_splits(sender: str, author: str) -> ChainCall:
    return build_call(PAYMENT_SPLITTER, "deleteAuthorSplits", [checksum(author, "author")], sender)


def split_payment(sender: str, author: str, amount: int) -> ChainCall:
    return build_call(PAYMENT_SPLITTER, "splitPayment", [checksum(author, "author")], sender, value=amount)


def claim_failed_payments(sender: str) -> ChainCall:
    return build_call(PAYMENT_SPLITTER, "claimFailedPayments", [], sender)


def platform_fee_view(author: str) -> ViewCall:
    return build_view(PAYMENT_SPLITTER, "getPlatformFee", [checksum(author, "author")])


def recipients_view(author: str) -> ViewCall:
    return build_view(PAYMENT_SPLITTER, "getRecipients", [checksum(author, "author")])


def percentages_view(author: str) -> ViewCall:
    return build_view(PAYMENT_SPLITTER, "getPercentages", [checksum(author, "author")])


def filter_recipients(recipients: list[str]) -> list[str]:
    """Drop unset (zero address) slots from the recipient list."""
    return [r for r in recipients if r.lower() != ZERO_ADDRESS]
