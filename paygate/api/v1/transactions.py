"""Payment and payout transactions"""

from dataclasses import asdict

from fastapi import APIRouter, Depends

from paygate.api.dependencies import get_orchestrator
from paygate.api.v1.schemas import (
    PaymentTransactionRequestSchema,
    PaymentTransactionResponse,
    PayoutTransactionRequestSchema,
    TransactionInfoResponse,
    TransactionRefResponse,
    TransactionResponse,
)
from paygate.domain.models import DataParams
from paygate.domain.requests import PaymentTransactionRequest, PayoutTransactionRequest
from paygate.domain.transactions import TransactionOrchestrator

router = APIRouter()


@router.post("/transactions/payment", response_model=PaymentTransactionResponse)
def create_payment_transaction(
    body: PaymentTransactionRequestSchema,
    orchestrator: TransactionOrchestrator = Depends(get_orchestrator),
):
    """
    Charge a client through a provider.

    A failed provider call still leaves a failed transaction behind.
    """
    result = orchestrator.create_payment(
        PaymentTransactionRequest(
            company_alias=body.company_alias,
            method_alias=body.method_alias,
            provider_alias=body.provider_alias,
            amount=body.amount,
            client_id=body.client_id,
            meta=body.meta,
            data_params=DataParams(**body.data_params.model_dump()),
            receipt=body.receipt,
        )
    )
    return PaymentTransactionResponse(**asdict(result))


@router.post("/transactions/payout", response_model=TransactionRefResponse)
def create_payout_transaction(
    body: PayoutTransactionRequestSchema,
    orchestrator: TransactionOrchestrator = Depends(get_orchestrator),
):
    """Register a payout to a client's card; execution happens asynchronously"""
    transaction_id = orchestrator.create_payout(PayoutTransactionRequest(**body.model_dump()))
    return TransactionRefResponse(id=transaction_id)


@router.get("/transactions/{transaction_id}", response_model=TransactionResponse)
def get_transaction_by_id(
    transaction_id: int,
    orchestrator: TransactionOrchestrator = Depends(get_orchestrator),
):
    return TransactionResponse(**asdict(orchestrator.get_transaction(transaction_id)))


@router.get("/transactions/{transaction_id}/info", response_model=TransactionInfoResponse)
def get_transaction_info_by_id(
    transaction_id: int,
    orchestrator: TransactionOrchestrator = Depends(get_orchestrator),
):
    return TransactionInfoResponse(**asdict(orchestrator.get_transaction_info(transaction_id)))
