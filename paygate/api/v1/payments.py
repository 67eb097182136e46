"""Service-context payments routed to the loan and option services"""

from dataclasses import asdict

from fastapi import APIRouter, Depends

from paygate.api.dependencies import get_payment_router
from paygate.api.v1.schemas import (
    ContextMethodsRequestSchema,
    CreatePaymentRequestSchema,
    CreatePaymentResponseSchema,
    MethodListResponse,
)
from paygate.domain.requests import ContextMethodsRequest, CreatePaymentRequest
from paygate.domain.routing import PaymentRouter

router = APIRouter()


@router.post("/payments", response_model=CreatePaymentResponseSchema)
def create_payment(body: CreatePaymentRequestSchema, payments: PaymentRouter = Depends(get_payment_router)):
    response = payments.create_payment(CreatePaymentRequest(**body.model_dump()))
    return CreatePaymentResponseSchema(**asdict(response))


@router.post("/payments/methods", response_model=MethodListResponse)
def get_context_methods(
    body: ContextMethodsRequestSchema,
    payments: PaymentRouter = Depends(get_payment_router),
):
    """List methods for a loan or option context instead of a company alias"""
    return MethodListResponse(**asdict(payments.get_context_methods(ContextMethodsRequest(**body.model_dump()))))
