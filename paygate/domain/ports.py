"""
Collaborator protocols the gateway services depend on.

Services only see these protocols; SQLAlchemy repositories and httpx clients in
``paygate.infrastructure`` implement them.
"""

from typing import Any, Dict, List, Mapping, Optional, Protocol

from paygate.domain.models import (
    BankCard,
    CardType,
    Company,
    Direction,
    IntegrationConfig,
    Method,
    MethodCompany,
    PaymentMetricEvent,
    PaymentResult,
    Receipt,
    Transaction,
    TransactionMeta,
    UnbindCardMeta,
)
from paygate.domain.requests import (
    ContextMethodsRequest,
    CreatePaymentRequest,
    CreatePaymentResponse,
    MethodsRequest,
)


class CompanyDirectory(Protocol):
    def by_alias(self, alias: str) -> Company:
        """Raises CompanyNotFoundError"""
        ...


class MethodCatalog(Protocol):
    def by_company_and_direction(self, company_alias: str, direction: Direction) -> List[Method]: ...


class MethodCompanyCatalog(Protocol):
    def find(
        self, company_alias: str, method_alias: str, provider_alias: str, direction: Direction
    ) -> Optional[MethodCompany]: ...


class IntegrationRuleEngine(Protocol):
    def match(self, context: Mapping[str, Any]) -> IntegrationConfig:
        """Raises BadRuleError or IntegrationNotFoundError"""
        ...


class IntegrationConfigStore(Protocol):
    def by_config_type(self, config_type: str) -> Optional[IntegrationConfig]: ...


class TransactionStore(Protocol):
    def create(self, transaction: Transaction) -> None:
        """Persist and assign ``transaction.id``"""
        ...

    def by_id(self, transaction_id: int) -> Transaction:
        """Raises TransactionNotFoundError"""
        ...


class BankCardStore(Protocol):
    def by_id(self, card_id: int) -> Optional[BankCard]: ...

    def by_client_and_type(self, client_id: int, card_type: CardType) -> List[BankCard]: ...

    def remove(self, card: BankCard) -> None: ...


class ReceiptParser(Protocol):
    def from_raw(self, data: Dict[str, Any]) -> Receipt: ...


class CardEligibilityChecker(Protocol):
    def check_payout(self, mask: str, context: Dict[str, Any]) -> None:
        """Raises BlockedPayoutByCardError when payouts to the card are forbidden"""
        ...


class MetricSink(Protocol):
    def publish(self, event: PaymentMetricEvent) -> None: ...


class PaymentProvider(Protocol):
    alias: str

    def pay(self, transaction: Transaction, meta: TransactionMeta) -> PaymentResult: ...

    def get_bind_url(
        self, client_id: int, config: IntegrationConfig, email: Optional[str], phone: Optional[str]
    ) -> str: ...

    def unbind_card(self, card: BankCard, meta: UnbindCardMeta) -> None:
        """Raises InvalidCardError when the provider no longer knows the card"""
        ...


class ProviderRegistry(Protocol):
    def get(self, alias: str) -> PaymentProvider:
        """Raises ProviderNotFoundError"""
        ...


class ServicePaymentHandler(Protocol):
    """Loan or option service taking part in routed payments"""

    def create_payment(self, request: CreatePaymentRequest) -> CreatePaymentResponse: ...

    def build_methods_request(self, request: ContextMethodsRequest) -> MethodsRequest: ...
