"""Unit tests for receipt parsing and transaction meta"""

import pytest

from paygate.domain.exceptions import InvalidReceiptError
from paygate.domain.meta import TransactionMetaBuilder
from paygate.domain.models import DataParams, Transaction, TransactionType
from paygate.domain.receipts import PydanticReceiptParser


def test_parse_receipt():
    receipt = PydanticReceiptParser().from_raw({
        "taxation": "usn_income",
        "phone": "+70000000000",
        "items": [
            {"name": "Option fee", "price": 250, "quantity": 2, "amount": 500, "tax": "vat20"},
        ],
    })

    assert receipt.taxation == "usn_income"
    assert receipt.phone == "+70000000000"
    assert receipt.email is None
    item = receipt.items[0]
    assert (item.name, item.price, item.quantity, item.amount, item.tax) == ("Option fee", 250, 2, 500, "vat20")


def test_parse_receipt_default_tax():
    receipt = PydanticReceiptParser().from_raw({
        "taxation": "osn",
        "items": [{"name": "Repayment", "price": 100, "quantity": 1, "amount": 100}],
    })

    assert receipt.items[0].tax == "none"
    assert receipt.to_dict()["items"][0]["tax"] == "none"


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"taxation": "osn", "items": []},
        {"taxation": "osn", "items": [{"name": "", "price": 1, "quantity": 1, "amount": 1}]},
        {"taxation": "osn", "items": [{"name": "x", "price": -1, "quantity": 1, "amount": 1}]},
        {"taxation": "osn", "items": [{"name": "x", "price": 1, "quantity": 0, "amount": 1}]},
    ],
)
def test_invalid_receipt(payload):
    with pytest.raises(InvalidReceiptError):
        PydanticReceiptParser().from_raw(payload)


def test_meta_defaults(method_companies, configs):
    tx = Transaction(
        type=TransactionType.PAYMENT,
        amount=300,
        client_id=7,
        method_company=method_companies[0],
        integration_config=configs["payment"],
    )

    first = TransactionMetaBuilder("TerminalKey").build_payment(tx, DataParams(extra={"loan_id": 1}))
    second = TransactionMetaBuilder("TerminalKey").build_payment(tx, DataParams())

    assert first.order_id != second.order_id
    assert first.amount == 300
    assert first.client_id == 7
    assert first.terminal_key == "acme-terminal"
    assert first.description
    assert first.email is None
    assert first.extra == {"loan_id": 1}


def test_meta_explicit_contacts_beat_receipt(method_companies, configs):
    receipt = PydanticReceiptParser().from_raw({
        "taxation": "osn",
        "email": "receipt@example.com",
        "phone": "+71111111111",
        "items": [{"name": "Repayment", "price": 100, "quantity": 1, "amount": 100}],
    })
    tx = Transaction(
        type=TransactionType.PAYMENT,
        amount=100,
        client_id=7,
        method_company=method_companies[0],
        integration_config=configs["payment"],
        receipt=receipt,
    )

    meta = TransactionMetaBuilder("TerminalKey").build_payment(tx, DataParams(email="direct@example.com"))

    assert meta.email == "direct@example.com"
    assert meta.phone == "+71111111111"
    assert meta.receipt is receipt
