"""Provider call metadata built from a transaction"""

import uuid

from paygate.domain.models import DataParams, Transaction, TransactionMeta


class TransactionMetaBuilder:
    def __init__(self, terminal_key_field: str):
        self.terminal_key_field = terminal_key_field

    def build_payment(self, transaction: Transaction, params: DataParams) -> TransactionMeta:
        """Combine the transaction with caller data; contacts fall back to the receipt"""
        receipt = transaction.receipt
        return TransactionMeta(
            order_id=uuid.uuid4().hex,
            amount=transaction.amount,
            client_id=transaction.client_id,
            description=params.description or f"Payment by client {transaction.client_id}",
            terminal_key=transaction.integration_config.config.get(self.terminal_key_field),
            success_url=params.success_url,
            fail_url=params.fail_url,
            email=params.email or (receipt.email if receipt else None),
            phone=params.phone or (receipt.phone if receipt else None),
            receipt=receipt,
            extra=dict(params.extra),
        )
