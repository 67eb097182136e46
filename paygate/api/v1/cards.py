"""Bank card binding, listing and removal"""

from dataclasses import asdict

from fastapi import APIRouter, Depends, Response

from paygate.api.dependencies import get_card_manager
from paygate.api.v1.schemas import (
    BankCardSchema,
    CardBindingRequestSchema,
    CardBindingResponse,
    GetCardsRequestSchema,
    GetCardsResponse,
)
from paygate.domain.cards import CardLifecycleManager
from paygate.domain.requests import CardBindingRequest

router = APIRouter()


@router.post("/cards/bind", response_model=CardBindingResponse)
def bind_card(body: CardBindingRequestSchema, cards: CardLifecycleManager = Depends(get_card_manager)):
    """Return the provider page where the client binds a new card"""
    result = cards.bind_card(CardBindingRequest(client_id=body.client_id, email=body.email, phone=body.phone))
    return CardBindingResponse(type=result.type, data=result.data)


@router.post("/cards/search", response_model=GetCardsResponse)
def get_cards(body: GetCardsRequestSchema, cards: CardLifecycleManager = Depends(get_card_manager)):
    """
    List a client's cards of one type.

    With a check context, payout cards blocked for payouts are left out.
    """
    views = cards.list_cards(body.client_id, body.type, body.check_context)
    return GetCardsResponse(cards=[BankCardSchema(**asdict(v)) for v in views])


@router.delete("/cards/{card_id}", status_code=204)
def remove_bank_card(card_id: int, cards: CardLifecycleManager = Depends(get_card_manager)):
    cards.remove_card(card_id)
    return Response(status_code=204)
