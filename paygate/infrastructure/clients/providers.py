"""Payment provider HTTP adapters and the alias registry"""

from typing import Any, Dict, Mapping, Optional

import httpx

from paygate.config import settings
from paygate.domain.exceptions import (
    BindCardAdapterError,
    DoTransactionError,
    InvalidCardError,
    PaymentAdapterError,
    ProviderNotFoundError,
    UnbindCardAdapterError,
)
from paygate.domain.models import (
    BankCard,
    IntegrationConfig,
    PaymentResult,
    Transaction,
    TransactionMeta,
    UnbindCardMeta,
)
from paygate.domain.ports import PaymentProvider

REJECTED_STATUSES = {"REJECTED", "CANCELED", "DEADLINE_EXPIRED"}
INVALID_CARD_CODE = "INVALID_CARD"


class HttpPaymentProvider:
    """
    Client for a provider speaking the gateway's JSON protocol.

    Endpoints (relative to ``base_url``):
    - POST /payments: register a payment, returns status, payment_id, payment_url
    - POST /cards/bind-url: returns the hosted card binding page URL
    - POST /cards/unbind: forget a card; 404 or INVALID_CARD means already gone
    """

    def __init__(
        self,
        alias: str,
        base_url: str,
        timeout: float | None = None,
        terminal_key_field: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.alias = alias
        self.base_url = base_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.terminal_key_field = terminal_key_field or settings.terminal_key_field
        self.transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=self.transport)

    def _terminal_key(self, config: IntegrationConfig) -> Optional[str]:
        return config.config.get(self.terminal_key_field)

    def pay(self, transaction: Transaction, meta: TransactionMeta) -> PaymentResult:
        """
        Register the payment and mark the transaction succeeded.

        Raises:
            DoTransactionError: Provider rejected the payment
            PaymentAdapterError: Timeout, HTTP error or unreadable response
        """
        payload = {
            "order_id": meta.order_id,
            "amount": meta.amount,
            "client_id": meta.client_id,
            "description": meta.description,
            "terminal_key": meta.terminal_key,
            "success_url": meta.success_url,
            "fail_url": meta.fail_url,
            "email": meta.email,
            "phone": meta.phone,
            "receipt": meta.receipt.to_dict() if meta.receipt else None,
            "extra": meta.extra,
        }
        with self._client() as client:
            try:
                response = client.post("/payments", json=payload)
                response.raise_for_status()
                data = response.json()
                status = data["status"]
            except httpx.TimeoutException as e:
                raise PaymentAdapterError(f"{self.alias} timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise PaymentAdapterError(f"{self.alias} error: {e.response.status_code}") from e
            except (httpx.RequestError, KeyError, ValueError) as e:
                raise PaymentAdapterError(f"{self.alias} invalid response: {e}") from e

        if status in REJECTED_STATUSES:
            raise DoTransactionError(data.get("message") or f"{self.alias} rejected payment: {status}")

        transaction.mark_succeeded()
        return PaymentResult(
            provider_payment_id=data.get("payment_id"),
            payment_url=data.get("payment_url"),
            details={"status": status},
        )

    def get_bind_url(
        self, client_id: int, config: IntegrationConfig, email: Optional[str], phone: Optional[str]
    ) -> str:
        payload = {
            "client_id": client_id,
            "terminal_key": self._terminal_key(config),
            "email": email,
            "phone": phone,
        }
        with self._client() as client:
            try:
                response = client.post("/cards/bind-url", json=payload)
                response.raise_for_status()
                return response.json()["url"]
            except (httpx.HTTPError, KeyError, ValueError) as e:
                raise BindCardAdapterError(f"{self.alias} bind url failed: {e}") from e

    def unbind_card(self, card: BankCard, meta: UnbindCardMeta) -> None:
        """
        Raises:
            InvalidCardError: Provider does not know the card
            UnbindCardAdapterError: Any other failure
        """
        payload = {
            "card_id": card.id,
            "client_id": card.client_id,
            "terminal_key": self._terminal_key(meta.integration_config),
        }
        with self._client() as client:
            try:
                response = client.post("/cards/unbind", json=payload)
            except httpx.HTTPError as e:
                raise UnbindCardAdapterError(f"{self.alias} unbind failed: {e}") from e

        if response.status_code == 404 or _error_code(response) == INVALID_CARD_CODE:
            raise InvalidCardError(f"{self.alias} does not know card {card.id}")
        if response.is_error:
            raise UnbindCardAdapterError(f"{self.alias} unbind error: {response.status_code}")


def _error_code(response: httpx.Response) -> Optional[str]:
    try:
        return response.json().get("error_code")
    except (ValueError, AttributeError):
        return None


class StaticProviderRegistry:
    """Provider adapters keyed by alias"""

    def __init__(self, providers: Mapping[str, PaymentProvider]):
        self.providers: Dict[str, PaymentProvider] = dict(providers)

    @classmethod
    def from_urls(cls, urls: Mapping[str, str], **kwargs: Any) -> "StaticProviderRegistry":
        return cls({alias: HttpPaymentProvider(alias, url, **kwargs) for alias, url in urls.items()})

    def get(self, alias: str) -> PaymentProvider:
        try:
            return self.providers[alias]
        except KeyError as e:
            raise ProviderNotFoundError(f"Provider '{alias}' is not registered") from e
