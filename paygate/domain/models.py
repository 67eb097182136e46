"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class Direction(str, Enum):
    INCOME = "income"
    OUTCOME = "outcome"


class TransactionType(str, Enum):
    PAYMENT = "payment"
    PAYOUT = "payout"


class TransactionStatus(str, Enum):
    CREATED = "created"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class CardType(str, Enum):
    PAYOUT = "payout"
    RECURRENT = "recurrent"


# Direction a transaction type must be routed through
TRANSACTION_DIRECTIONS = {
    TransactionType.PAYMENT: Direction.INCOME,
    TransactionType.PAYOUT: Direction.OUTCOME,
}


@dataclass
class Company:
    id: int
    alias: str
    name: str


@dataclass
class Method:
    """Payment instrument category offered in one direction"""

    id: int
    alias: str
    name: str
    direction: Direction
    provider_alias: str
    platforms: Tuple[str, ...] = ()  # empty: offered everywhere
    position: int = 0

    def available_on(self, platform: Optional[str]) -> bool:
        return platform is None or not self.platforms or platform in self.platforms


@dataclass
class MethodCompany:
    """Method + provider bound to a company for one direction"""

    id: int
    method: Method
    company: Company
    provider_alias: str

    @property
    def direction(self) -> Direction:
        return self.method.direction


@dataclass
class IntegrationConfig:
    """Provider credentials/parameters selected by rule matching"""

    id: int
    config_type: str
    config: Dict[str, Any]


@dataclass
class IntegrationRule:
    """Condition set pointing at an integration config"""

    id: int
    priority: int
    conditions: Any  # validated by the rule engine
    config: Optional[IntegrationConfig]


@dataclass
class BindCard:
    """Result of a successful card binding flow"""

    id: int
    integration_config: IntegrationConfig


@dataclass
class BankCard:
    id: int
    client_id: int
    number_mask: str
    expire_date: date
    type: CardType
    is_recurrent: bool = False
    bind_card: Optional[BindCard] = None


@dataclass
class ReceiptItem:
    name: str
    price: int
    quantity: float
    amount: int
    tax: str


@dataclass
class Receipt:
    """Fiscal receipt sent along with a payment"""

    taxation: str
    items: List[ReceiptItem]
    email: Optional[str] = None
    phone: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "taxation": self.taxation,
            "email": self.email,
            "phone": self.phone,
            "items": [
                {
                    "name": item.name,
                    "price": item.price,
                    "quantity": item.quantity,
                    "amount": item.amount,
                    "tax": item.tax,
                }
                for item in self.items
            ],
        }


@dataclass
class Transaction:
    """Single payment or payout attempt"""

    type: TransactionType
    amount: int
    client_id: int
    method_company: MethodCompany
    integration_config: IntegrationConfig
    status: TransactionStatus = TransactionStatus.CREATED
    meta: Dict[str, Any] = field(default_factory=dict)
    receipt: Optional[Receipt] = None
    bank_card: Optional[BankCard] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        expected = TRANSACTION_DIRECTIONS[self.type]
        if self.method_company.direction != expected:
            raise ValueError(
                f"{self.type.value} transaction requires an {expected.value} method, "
                f"got {self.method_company.direction.value}"
            )
        if self.amount <= 0:
            raise ValueError("amount must be positive")

    @property
    def provider_alias(self) -> str:
        return self.method_company.provider_alias

    def mark_succeeded(self) -> None:
        self._finish(TransactionStatus.SUCCEEDED)

    def mark_failed(self) -> None:
        self._finish(TransactionStatus.FAILED)

    def _finish(self, status: TransactionStatus) -> None:
        if self.status is not TransactionStatus.CREATED:
            raise ValueError(f"Transaction already {self.status.value}")
        self.status = status


@dataclass
class DataParams:
    """Caller data forwarded to the provider with a payment"""

    description: Optional[str] = None
    success_url: Optional[str] = None
    fail_url: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class TransactionMeta:
    """Provider-call-scoped view of a transaction; never persisted"""

    order_id: str
    amount: int
    client_id: int
    description: str
    terminal_key: Optional[str]
    success_url: Optional[str] = None
    fail_url: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    receipt: Optional[Receipt] = None
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class UnbindCardMeta:
    integration_config: IntegrationConfig


@dataclass
class PaymentResult:
    """What a provider returns for an accepted payment"""

    provider_payment_id: Optional[str] = None
    payment_url: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PaymentTransactionResult:
    transaction_id: int
    status: TransactionStatus
    payment_url: Optional[str]
    provider_payment_id: Optional[str]
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PaymentMetricEvent:
    """One event per attempted payment"""

    provider_alias: str
    kind: str
    amount: int
    terminal_key: Optional[str]
    exception: Optional[str]
    duration_ms: int


@dataclass
class CardBindingResult:
    TYPE_FRAME = "frame"

    type: str
    data: Dict[str, Any]


# Read models returned by the exposed operations


@dataclass
class CompanyView:
    id: int
    alias: str
    name: str


@dataclass
class MethodView:
    alias: str
    name: str
    provider_alias: str


@dataclass
class MethodList:
    methods: List[MethodView]


@dataclass
class BankCardView:
    id: int
    exp_year: int
    exp_month: int
    number_mask: str
    is_recurrent: bool


@dataclass
class TransactionView:
    id: int
    type: TransactionType
    status: TransactionStatus
    amount: int
    client_id: int
    company_alias: str
    method_alias: str
    provider_alias: str
    created_at: Optional[datetime]


@dataclass
class TransactionInfoView:
    id: int
    status: TransactionStatus
    amount: int
    terminal_key: Optional[str]
    card_mask: Optional[str]
    meta: Dict[str, Any]
    receipt: Optional[Dict[str, Any]]
