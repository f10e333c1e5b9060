from app.chain.base import ZERO_ADDRESS
from conftest import OTHER_ADDRESS, TEST_ADDRESS, TEST_PRIVATE_KEY, abi_args, auth_headers, selector


def test_set_platform_fee_as_funds_manager(client, signed_txs):
    resp = client.post(
        "/payment-splitter/set-platform-fee",
        json={"privateKey": TEST_PRIVATE_KEY, "author": OTHER_ADDRESS, "fee": 5},
        headers=auth_headers(role="FUNDS_MANAGER"),
    )

    assert resp.status_code == 200
    assert signed_txs[0]["data"][2:10] == selector("setPlatformFee(address,uint256)")
    author, fee = abi_args(signed_txs[0]["data"], ["address", "uint256"])
    assert author.lower() == OTHER_ADDRESS.lower()
    assert fee == 5


def test_set_platform_fee_rejects_authors(client, network):
    resp = client.post(
        "/payment-splitter/set-platform-fee",
        json={"privateKey": TEST_PRIVATE_KEY, "author": OTHER_ADDRESS, "fee": 5},
        headers=auth_headers(role="AUTHOR"),
    )
    assert resp.status_code == 403
    assert network.sent == []


def test_get_platform_fee(client, network):
    network.returns("getPlatformFee(address)", ["uint256"], [2**60])

    resp = client.get(f"/payment-splitter/get-platform-fee/{OTHER_ADDRESS}")

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "platformFee": str(2**60)}


def test_recipients_drop_zero_addresses(client, network):
    network.returns("getRecipients(address)", ["address[]"], [[OTHER_ADDRESS, ZERO_ADDRESS, TEST_ADDRESS]])

    resp = client.get(f"/payment-splitter/recipients/{OTHER_ADDRESS}")

    assert resp.status_code == 200
    assert [r.lower() for r in resp.json()["recipients"]] == [OTHER_ADDRESS.lower(), TEST_ADDRESS.lower()]


def test_percentages(client, network):
    network.returns("getPercentages(address)", ["uint256[]"], [[70, 30]])

    resp = client.get(f"/payment-splitter/percentages/{OTHER_ADDRESS}")

    assert resp.json() == {"success": True, "percentages": ["70", "30"]}


def test_set_author_splits(client, signed_txs):
    resp = client.post(
        "/payment-splitter/set-author-splits",
        json={
            "privateKey": TEST_PRIVATE_KEY,
            "author": TEST_ADDRESS,
            "recipients": [OTHER_ADDRESS, TEST_ADDRESS],
            "percentages": [60, 40],
        },
        headers=auth_headers(),
    )

    assert resp.status_code == 200
    author, recipients, percentages = abi_args(signed_txs[0]["data"], ["address", "address[]", "uint256[]"])
    assert [r.lower() for r in recipients] == [OTHER_ADDRESS.lower(), TEST_ADDRESS.lower()]
    assert percentages == (60, 40)


def test_set_author_splits_length_mismatch(client, network):
    resp = client.post(
        "/payment-splitter/set-author-splits",
        json={
            "privateKey": TEST_PRIVATE_KEY,
            "author": TEST_ADDRESS,
            "recipients": [OTHER_ADDRESS],
            "percentages": [60, 40],
        },
        headers=auth_headers(),
    )

    assert resp.status_code == 400
    assert network.sent == []


def test_delete_author_splits(client, signed_txs):
    resp = client.post(
        "/payment-splitter/delete-author-splits",
        json={"privateKey": TEST_PRIVATE_KEY, "author": TEST_ADDRESS},
        headers=auth_headers(),
    )
    assert resp.status_code == 200
    assert signed_txs[0]["data"][2:10] == selector("deleteAuthorSplits(address)")


def test_split_payment_sends_amount_as_value(client, signed_txs):
    resp = client.post(
        "/payment-splitter/split-payment",
        json={"privateKey": TEST_PRIVATE_KEY, "author": TEST_ADDRESS, "amount": 10**19},
        headers=auth_headers(role="BUYER"),
    )
    assert resp.status_code == 200
    assert signed_txs[0]["value"] == 10**19


def test_claim_failed_payments(client, signed_txs):
    resp = client.post(
        "/payment-splitter/claim-failed-payments",
        json={"privateKey": TEST_PRIVATE_KEY},
        headers=auth_headers(),
    )
    assert resp.status_code == 200
    assert signed_txs[0]["data"] == "0x" + selector("claimFailedPayments()")
