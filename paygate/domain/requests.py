"""Inbound requests for the gateway services"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from paygate.domain.models import DataParams, Direction


@dataclass
class PaymentTransactionRequest:
    company_alias: str
    method_alias: str
    provider_alias: str
    amount: int
    client_id: int
    meta: Dict[str, Any] = field(default_factory=dict)
    data_params: DataParams = field(default_factory=DataParams)
    receipt: Optional[Dict[str, Any]] = None


@dataclass
class PayoutTransactionRequest:
    company_alias: str
    method_alias: str
    provider_alias: str
    amount: int
    client_id: int
    card_id: int
    meta: Dict[str, Any] = field(default_factory=dict)
    check_context: Dict[str, Any] = field(default_factory=dict)


@dataclass
class CardBindingRequest:
    client_id: int
    email: Optional[str] = None
    phone: Optional[str] = None


@dataclass
class MethodsRequest:
    """Canonical method listing request"""

    company_alias: str
    direction: Direction


@dataclass
class CreatePaymentRequest:
    """Payment routed to a loan or option service"""

    service_type: str
    client_id: int
    amount: int
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ContextMethodsRequest:
    """Method listing described by service context instead of company alias"""

    service_type: str
    client_id: int
    platform: Optional[str] = None
    context: Dict[str, Any] = field(default_factory=dict)


@dataclass
class CreatePaymentResponse:
    payment_url: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
