"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from paygate.domain.models import CardType, TransactionStatus, TransactionType


class CompanyResponse(BaseModel):
    id: int
    alias: str
    name: str


class MethodSchema(BaseModel):
    alias: str
    name: str
    provider_alias: str


class MethodListResponse(BaseModel):
    methods: List[MethodSchema]


class DataParamsSchema(BaseModel):
    """Extra data forwarded to the provider"""

    description: Optional[str] = None
    success_url: Optional[str] = None
    fail_url: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    extra: Dict[str, Any] = Field(default_factory=dict)


class PaymentTransactionRequestSchema(BaseModel):
    """Request body for POST /v1/transactions/payment"""

    company_alias: str = Field(..., min_length=1)
    method_alias: str = Field(..., min_length=1)
    provider_alias: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0, description="Amount in minor currency units")
    client_id: int = Field(..., gt=0)
    meta: Dict[str, Any] = Field(default_factory=dict)
    data_params: DataParamsSchema = Field(default_factory=DataParamsSchema)
    receipt: Optional[Dict[str, Any]] = None


class PaymentTransactionResponse(BaseModel):
    transaction_id: int
    status: TransactionStatus
    payment_url: Optional[str] = None
    provider_payment_id: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)


class PayoutTransactionRequestSchema(BaseModel):
    """Request body for POST /v1/transactions/payout"""

    company_alias: str = Field(..., min_length=1)
    method_alias: str = Field(..., min_length=1)
    provider_alias: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0)
    client_id: int = Field(..., gt=0)
    card_id: int = Field(..., gt=0)
    meta: Dict[str, Any] = Field(default_factory=dict)
    check_context: Dict[str, Any] = Field(default_factory=dict)


class TransactionRefResponse(BaseModel):
    id: int


class TransactionResponse(BaseModel):
    id: int
    type: TransactionType
    status: TransactionStatus
    amount: int
    client_id: int
    company_alias: str
    method_alias: str
    provider_alias: str
    created_at: Optional[datetime] = None


class TransactionInfoResponse(BaseModel):
    id: int
    status: TransactionStatus
    amount: int
    terminal_key: Optional[str] = None
    card_mask: Optional[str] = None
    meta: Dict[str, Any]
    receipt: Optional[Dict[str, Any]] = None


class CardBindingRequestSchema(BaseModel):
    client_id: int = Field(..., gt=0)
    email: Optional[str] = None
    phone: Optional[str] = None


class CardBindingResponse(BaseModel):
    type: str
    data: Dict[str, Any]


class GetCardsRequestSchema(BaseModel):
    """Request body for POST /v1/cards/search"""

    client_id: int = Field(..., gt=0)
    type: CardType
    check_context: Optional[Dict[str, Any]] = None


class BankCardSchema(BaseModel):
    id: int
    exp_year: int
    exp_month: int
    number_mask: str
    is_recurrent: bool


class GetCardsResponse(BaseModel):
    cards: List[BankCardSchema]


class CreatePaymentRequestSchema(BaseModel):
    """Request body for POST /v1/payments"""

    service_type: str
    client_id: int = Field(..., gt=0)
    amount: int = Field(..., gt=0)
    payload: Dict[str, Any] = Field(default_factory=dict)


class CreatePaymentResponseSchema(BaseModel):
    payment_url: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)


class ContextMethodsRequestSchema(BaseModel):
    """Request body for POST /v1/payments/methods"""

    service_type: str
    client_id: int = Field(..., gt=0)
    platform: Optional[str] = None
    context: Dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    error: str
    detail: str

