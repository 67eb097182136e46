"""Receipt payload parsing"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from paygate.domain.exceptions import InvalidReceiptError
from paygate.domain.models import Receipt, ReceiptItem


class _ReceiptItemPayload(BaseModel):
    name: str = Field(..., min_length=1)
    price: int = Field(..., ge=0)
    quantity: float = Field(..., gt=0)
    amount: int = Field(..., ge=0)
    tax: str = "none"


class _ReceiptPayload(BaseModel):
    taxation: str
    items: List[_ReceiptItemPayload] = Field(..., min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None


class PydanticReceiptParser:
    """Builds a Receipt from the raw payload sent by the caller"""

    def from_raw(self, data: Dict[str, Any]) -> Receipt:
        try:
            payload = _ReceiptPayload.model_validate(data)
        except ValidationError as e:
            raise InvalidReceiptError(f"Invalid receipt: {e.error_count()} error(s)") from e

        return Receipt(
            taxation=payload.taxation,
            email=payload.email,
            phone=payload.phone,
            items=[
                ReceiptItem(
                    name=item.name,
                    price=item.price,
                    quantity=item.quantity,
                    amount=item.amount,
                    tax=item.tax,
                )
                for item in payload.items
            ],
        )
