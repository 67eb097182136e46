"""Loan and option service clients for routed payments"""

import httpx

from paygate.config import settings
from paygate.domain.exceptions import GatewayError
from paygate.domain.models import Direction
from paygate.domain.requests import (
    ContextMethodsRequest,
    CreatePaymentRequest,
    CreatePaymentResponse,
    MethodsRequest,
)


class ServiceClientError(GatewayError):
    """Loan or option service call failed"""

    pass


class ServicePaymentClient:
    """
    Client for a service owning payments of one service type.

    The service creates the payment on its side (it knows the loan or the
    option being paid) and tells which company and direction a context
    belongs to.
    """

    def __init__(
        self,
        name: str,
        base_url: str,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.name = name
        self.base_url = base_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def _post(self, path: str, payload: dict) -> dict:
        with httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=self.transport) as client:
            try:
                response = client.post(path, json=payload)
                response.raise_for_status()
                return response.json()
            except httpx.TimeoutException as e:
                raise ServiceClientError(f"{self.name} service timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise ServiceClientError(f"{self.name} service error: {e.response.status_code}") from e
            except (httpx.RequestError, ValueError) as e:
                raise ServiceClientError(f"{self.name} service unavailable: {e}") from e

    def create_payment(self, request: CreatePaymentRequest) -> CreatePaymentResponse:
        data = self._post(
            "/payments",
            {"client_id": request.client_id, "amount": request.amount, "payload": request.payload},
        )
        return CreatePaymentResponse(payment_url=data.get("payment_url"), details=data.get("details", {}))

    def build_methods_request(self, request: ContextMethodsRequest) -> MethodsRequest:
        data = self._post(
            "/payment-methods-request",
            {"client_id": request.client_id, "context": request.context},
        )
        try:
            return MethodsRequest(company_alias=data["company_alias"], direction=Direction(data["direction"]))
        except (KeyError, ValueError) as e:
            raise ServiceClientError(f"{self.name} service returned an invalid methods request: {e}") from e


def loan_service_client() -> ServicePaymentClient:
    return ServicePaymentClient("loan", settings.loan_service_url)


def option_service_client() -> ServicePaymentClient:
    return ServicePaymentClient("option", settings.option_service_url)
