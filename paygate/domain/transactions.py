"""Transaction orchestration - payments, payouts and transaction reads"""

import logging
import time
from typing import Optional

from paygate.domain.companies import MethodCompanyResolver
from paygate.domain.exceptions import PayoutRejectedError
from paygate.domain.integration import IntegrationConfigResolver
from paygate.domain.meta import TransactionMetaBuilder
from paygate.domain.models import (
    Direction,
    PaymentMetricEvent,
    PaymentTransactionResult,
    Transaction,
    TransactionInfoView,
    TransactionStatus,
    TransactionType,
    TransactionView,
)
from paygate.domain.ports import (
    BankCardStore,
    CardEligibilityChecker,
    MetricSink,
    ProviderRegistry,
    ReceiptParser,
    TransactionStore,
)
from paygate.domain.requests import PaymentTransactionRequest, PayoutTransactionRequest

METRIC_SINGLE_PAYMENT = "single_payment"


class PaymentAttempt:
    """
    Scope around the provider call of a payment.

    On exit, whatever way the block is left:
    - an exception marks the transaction failed, a normal exit succeeded
    - the transaction is persisted once
    - one metric event is published, even if persisting raised
    The original exception is never suppressed.
    """

    def __init__(
        self,
        transaction: Transaction,
        store: TransactionStore,
        metrics: MetricSink,
        terminal_key: Optional[str],
        started_at: float,
    ):
        self.transaction = transaction
        self.store = store
        self.metrics = metrics
        self.terminal_key = terminal_key
        self.started_at = started_at

    def __enter__(self) -> "PaymentAttempt":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc is not None:
            self.transaction.status = TransactionStatus.FAILED
        elif self.transaction.status is TransactionStatus.CREATED:
            self.transaction.mark_succeeded()

        try:
            self.store.create(self.transaction)
        finally:
            self.metrics.publish(
                PaymentMetricEvent(
                    provider_alias=self.transaction.provider_alias,
                    kind=METRIC_SINGLE_PAYMENT,
                    amount=self.transaction.amount,
                    terminal_key=self.terminal_key,
                    exception=type(exc).__name__ if exc is not None else None,
                    duration_ms=int((time.time() - self.started_at) * 1000),
                )
            )
        return False


class TransactionOrchestrator:
    """Creates payment and payout transactions"""

    def __init__(
        self,
        method_companies: MethodCompanyResolver,
        configs: IntegrationConfigResolver,
        providers: ProviderRegistry,
        transactions: TransactionStore,
        cards: BankCardStore,
        card_checker: CardEligibilityChecker,
        receipts: ReceiptParser,
        meta_builder: TransactionMetaBuilder,
        metrics: MetricSink,
        payout_company_alias: str,
        logger: Optional[logging.Logger] = None,
    ):
        self.method_companies = method_companies
        self.configs = configs
        self.providers = providers
        self.transactions = transactions
        self.cards = cards
        self.card_checker = card_checker
        self.receipts = receipts
        self.meta_builder = meta_builder
        self.metrics = metrics
        self.payout_company_alias = payout_company_alias
        self.logger = logger or logging.getLogger(__name__)

    def create_payment(self, request: PaymentTransactionRequest) -> PaymentTransactionResult:
        """
        Charge a client through the requested provider.

        Flow:
        1. Resolve method-company and integration config (no side effects on failure)
        2. Build the transaction and provider metadata
        3. Call the provider inside a PaymentAttempt, which persists the
           transaction and publishes the metric on every exit path

        Raises:
            MethodCompanyNotFoundError, ProviderNotFoundError: Resolution failed
            InvalidReceiptError: Receipt payload cannot be parsed
            AdapterError: Provider call failed; the transaction is stored as failed
        """
        started_at = time.time()

        method_company = self.method_companies.resolve(
            request.company_alias,
            request.method_alias,
            request.provider_alias,
            Direction.INCOME,
        )
        provider = self.providers.get(method_company.provider_alias)
        config = self.configs.resolve(
            {"action": "payment", "company": request.company_alias},
            method_company,
        )

        receipt = self.receipts.from_raw(request.receipt) if request.receipt else None

        transaction = Transaction(
            type=TransactionType.PAYMENT,
            amount=request.amount,
            client_id=request.client_id,
            method_company=method_company,
            integration_config=config,
            meta=dict(request.meta),
            receipt=receipt,
        )
        meta = self.meta_builder.build_payment(transaction, request.data_params)

        with PaymentAttempt(transaction, self.transactions, self.metrics, meta.terminal_key, started_at):
            result = provider.pay(transaction, meta)

        self.logger.info(
            "Payment completed",
            extra={
                "transaction_id": transaction.id,
                "client_id": transaction.client_id,
                "provider": transaction.provider_alias,
                "amount": transaction.amount,
            },
        )
        return PaymentTransactionResult(
            transaction_id=transaction.id,
            status=transaction.status,
            payment_url=result.payment_url,
            provider_payment_id=result.provider_payment_id,
            details=result.details,
        )

    def create_payout(self, request: PayoutTransactionRequest) -> int:
        """
        Register a payout to one of the client's cards.

        The transaction is stored in ``created`` status; payout execution
        happens downstream.

        Raises:
            PayoutRejectedError: Card missing, foreign, or blocked for payouts
            MethodCompanyNotFoundError, ProviderNotFoundError: Resolution failed
        """
        card = self.cards.by_id(request.card_id)
        if card is None or card.client_id != request.client_id:
            raise PayoutRejectedError("The card does not belong to the client", PayoutRejectedError.OWNERSHIP)

        self.card_checker.check_payout(card.number_mask, request.check_context)

        method_company = self.method_companies.resolve(
            request.company_alias,
            request.method_alias,
            request.provider_alias,
            Direction.OUTCOME,
        )
        config = self.configs.resolve(
            {"action": "payout", "company": self.payout_company_alias},
            method_company,
        )

        transaction = Transaction(
            type=TransactionType.PAYOUT,
            amount=request.amount,
            client_id=request.client_id,
            method_company=method_company,
            integration_config=config,
            meta=dict(request.meta),
            bank_card=card,
        )
        self.transactions.create(transaction)

        self.logger.info(
            "Payout created",
            extra={"transaction_id": transaction.id, "client_id": request.client_id, "card_id": card.id},
        )
        return transaction.id

    def get_transaction(self, transaction_id: int) -> TransactionView:
        tx = self.transactions.by_id(transaction_id)
        return TransactionView(
            id=tx.id,
            type=tx.type,
            status=tx.status,
            amount=tx.amount,
            client_id=tx.client_id,
            company_alias=tx.method_company.company.alias,
            method_alias=tx.method_company.method.alias,
            provider_alias=tx.provider_alias,
            created_at=tx.created_at,
        )

    def get_transaction_info(self, transaction_id: int) -> TransactionInfoView:
        tx = self.transactions.by_id(transaction_id)
        return TransactionInfoView(
            id=tx.id,
            status=tx.status,
            amount=tx.amount,
            terminal_key=tx.integration_config.config.get(self.meta_builder.terminal_key_field),
            card_mask=tx.bank_card.number_mask if tx.bank_card else None,
            meta=dict(tx.meta),
            receipt=tx.receipt.to_dict() if tx.receipt else None,
        )
