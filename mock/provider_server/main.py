from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Any, Dict, Optional
import uuid

app = FastAPI(title="Mock Payment Provider", version="1.0.0")

# Amounts above this are rejected by the provider
PAYMENT_LIMIT = 1_000_000
# Masks ending like the classic declined test card are blocked for payouts
BLOCKED_MASK_SUFFIX = "0002"

unbound_cards = set()


class PaymentIn(BaseModel):
    order_id: str
    amount: int
    client_id: int
    terminal_key: Optional[str] = None
    description: Optional[str] = None


class BindUrlIn(BaseModel):
    client_id: int
    terminal_key: Optional[str] = None


class UnbindIn(BaseModel):
    card_id: int
    client_id: int
    terminal_key: Optional[str] = None


class CardCheckIn(BaseModel):
    mask: str
    context: Dict[str, Any] = {}


class ServicePaymentIn(BaseModel):
    client_id: int
    amount: int
    payload: Dict[str, Any] = {}


class MethodsRequestIn(BaseModel):
    client_id: int
    context: Dict[str, Any] = {}


@app.get("/health")
def health(): return {"status": "ok"}


@app.post("/provider/payments")
def create_payment(body: PaymentIn):
    if body.amount > PAYMENT_LIMIT:
        return {"status": "REJECTED", "message": f"amount {body.amount} over limit"}
    payment_id = uuid.uuid4().hex
    return {"status": "NEW", "payment_id": payment_id, "payment_url": f"https://mock-pay.local/{payment_id}"}


@app.post("/provider/cards/bind-url")
def bind_url(body: BindUrlIn):
    return {"url": f"https://mock-pay.local/bind/{body.client_id}?terminal={body.terminal_key}"}


@app.post("/provider/cards/unbind")
def unbind(body: UnbindIn):
    if body.card_id in unbound_cards:
        return JSONResponse(status_code=400, content={"error_code": "INVALID_CARD"})
    unbound_cards.add(body.card_id)
    return {"success": True}


@app.post("/check/payout")
def check_payout(body: CardCheckIn):
    return {"allowed": not body.mask.endswith(BLOCKED_MASK_SUFFIX)}


@app.post("/services/{service}/payments")
def service_payment(service: str, body: ServicePaymentIn):
    return {
        "payment_url": f"https://mock-pay.local/{service}/{body.client_id}",
        "details": {"service": service, "amount": body.amount},
    }


@app.post("/services/{service}/payment-methods-request")
def service_methods_request(service: str, body: MethodsRequestIn):
    return {"company_alias": body.context.get("company_alias", "acme"), "direction": "income"}
