"""Pytest fixtures for testing"""

import os

# Must be set before paygate.config is imported anywhere
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

from datetime import date
from typing import Any, Callable, Dict, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session

from paygate.api import dependencies
from paygate.api.main import create_app
from paygate.domain.cards import CardLifecycleManager
from paygate.domain.companies import MethodCompanyResolver
from paygate.domain.exceptions import (
    BlockedPayoutByCardError,
    CompanyNotFoundError,
    TransactionNotFoundError,
)
from paygate.domain.integration import IntegrationConfigResolver, RuleMatcher
from paygate.domain.meta import TransactionMetaBuilder
from paygate.domain.methods import MethodListing
from paygate.domain.models import (
    BankCard,
    BindCard,
    CardType,
    Company,
    Direction,
    IntegrationConfig,
    IntegrationRule,
    Method,
    MethodCompany,
    PaymentMetricEvent,
    PaymentResult,
    Transaction,
)
from paygate.domain.receipts import PydanticReceiptParser
from paygate.domain.requests import CreatePaymentResponse, MethodsRequest
from paygate.domain.transactions import TransactionOrchestrator
from paygate.infrastructure.clients.providers import StaticProviderRegistry
from paygate.infrastructure.database.models import (
    BankCardRow,
    Base,
    BindCardRow,
    CompanyRow,
    IntegrationConfigRow,
    IntegrationRuleRow,
    MethodCompanyRow,
    MethodRow,
    ProviderRow,
)
from paygate.infrastructure.database.session import get_db, make_engine


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = make_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# In-memory collaborators


class FakeCompanyDirectory:
    def __init__(self, companies: List[Company]):
        self.companies = {c.alias: c for c in companies}

    def by_alias(self, alias: str) -> Company:
        if alias not in self.companies:
            raise CompanyNotFoundError(alias)
        return self.companies[alias]


class FakeMethodCatalog:
    def __init__(self, method_companies: List[MethodCompany]):
        self.method_companies = method_companies

    def by_company_and_direction(self, company_alias: str, direction: Direction) -> List[Method]:
        return [
            mc.method
            for mc in self.method_companies
            if mc.company.alias == company_alias and mc.direction == direction
        ]

    def find(self, company_alias, method_alias, provider_alias, direction) -> Optional[MethodCompany]:
        for mc in self.method_companies:
            if (
                mc.company.alias == company_alias
                and mc.method.alias == method_alias
                and mc.provider_alias == provider_alias
                and mc.direction == direction
            ):
                return mc
        return None


class FakeTransactionStore:
    def __init__(self):
        self.created: List[Transaction] = []
        self.fail_with: Optional[Exception] = None

    def create(self, transaction: Transaction) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        transaction.id = len(self.created) + 1
        self.created.append(transaction)

    def by_id(self, transaction_id: int) -> Transaction:
        for tx in self.created:
            if tx.id == transaction_id:
                return tx
        raise TransactionNotFoundError(transaction_id)


class FakeCardStore:
    def __init__(self, cards: List[BankCard]):
        self.cards = list(cards)
        self.removed: List[BankCard] = []

    def by_id(self, card_id: int) -> Optional[BankCard]:
        return next((c for c in self.cards if c.id == card_id), None)

    def by_client_and_type(self, client_id: int, card_type: CardType) -> List[BankCard]:
        return [c for c in self.cards if c.client_id == client_id and c.type == card_type]

    def remove(self, card: BankCard) -> None:
        self.cards = [c for c in self.cards if c.id != card.id]
        self.removed.append(card)


class FakeCardChecker:
    def __init__(self, blocked: tuple = (), errors: Optional[Dict[str, Exception]] = None):
        self.blocked = set(blocked)
        self.errors = errors or {}
        self.calls: List[tuple] = []

    def check_payout(self, mask: str, context: Dict[str, Any]) -> None:
        self.calls.append((mask, context))
        if mask in self.errors:
            raise self.errors[mask]
        if mask in self.blocked:
            raise BlockedPayoutByCardError(mask)


class FakeConfigStore:
    def __init__(self, configs: List[IntegrationConfig]):
        self.configs = configs

    def by_config_type(self, config_type: str) -> Optional[IntegrationConfig]:
        return next((c for c in self.configs if c.config_type == config_type), None)


class FakeMetricSink:
    def __init__(self):
        self.events: List[PaymentMetricEvent] = []

    def publish(self, event: PaymentMetricEvent) -> None:
        self.events.append(event)


class FakeProvider:
    """Provider adapter double; set ``pay_error`` / ``unbind_error`` to make calls fail"""

    def __init__(self, alias: str = "demo"):
        self.alias = alias
        self.pay_error: Optional[Exception] = None
        self.unbind_error: Optional[Exception] = None
        self.bind_error: Optional[Exception] = None
        self.paid: List[tuple] = []
        self.unbound: List[tuple] = []

    def pay(self, transaction, meta) -> PaymentResult:
        self.paid.append((transaction, meta))
        if self.pay_error is not None:
            raise self.pay_error
        transaction.mark_succeeded()
        return PaymentResult(provider_payment_id="pay-1", payment_url="https://pay.example/1")

    def get_bind_url(self, client_id, config, email, phone) -> str:
        if self.bind_error is not None:
            raise self.bind_error
        return f"https://bind.example/{client_id}?terminal={config.config.get('TerminalKey')}"

    def unbind_card(self, card, meta) -> None:
        self.unbound.append((card, meta))
        if self.unbind_error is not None:
            raise self.unbind_error


class FakeServiceHandler:
    def __init__(self, company_alias: str = "acme"):
        self.company_alias = company_alias
        self.payments: List[Any] = []
        self.method_requests: List[Any] = []

    def create_payment(self, request):
        self.payments.append(request)
        return CreatePaymentResponse(payment_url="https://service.example/pay", details={"id": 1})

    def build_methods_request(self, request) -> MethodsRequest:
        self.method_requests.append(request)
        return MethodsRequest(company_alias=self.company_alias, direction=Direction.INCOME)


# Reference data


@pytest.fixture
def companies() -> Dict[str, Company]:
    return {
        "acme": Company(id=1, alias="acme", name="Acme Lending"),
        "operator": Company(id=2, alias="operator", name="Operating Company"),
    }


@pytest.fixture
def method_companies(companies) -> List[MethodCompany]:
    card_in = Method(id=1, alias="card", name="Bank card", direction=Direction.INCOME, provider_alias="demo", position=2)
    sbp_in = Method(
        id=2, alias="sbp", name="Fast payments", direction=Direction.INCOME,
        provider_alias="demo", platforms=("ios", "android"), position=1,
    )
    card_out = Method(id=3, alias="card", name="Bank card", direction=Direction.OUTCOME, provider_alias="demo")
    return [
        MethodCompany(id=1, method=card_in, company=companies["acme"], provider_alias="demo"),
        MethodCompany(id=2, method=sbp_in, company=companies["acme"], provider_alias="demo"),
        MethodCompany(id=3, method=card_out, company=companies["acme"], provider_alias="demo"),
    ]


@pytest.fixture
def configs() -> Dict[str, IntegrationConfig]:
    return {
        "payment": IntegrationConfig(id=1, config_type="acquiring", config={"TerminalKey": "acme-terminal"}),
        "payout": IntegrationConfig(id=2, config_type="e2c_payout", config={"TerminalKey": "payout-terminal"}),
        "bind": IntegrationConfig(id=3, config_type="bind", config={"TerminalKey": "bind-terminal"}),
        "e2c": IntegrationConfig(id=4, config_type="e2c", config={"TerminalKey": "e2c-terminal"}),
    }


@pytest.fixture
def rules(configs) -> List[IntegrationRule]:
    return [
        IntegrationRule(id=1, priority=0, conditions={"action": "payment", "company": "acme"}, config=configs["payment"]),
        IntegrationRule(id=2, priority=0, conditions={"action": "payout", "company": "operator"}, config=configs["payout"]),
        IntegrationRule(id=3, priority=0, conditions={"action": "bindCard"}, config=configs["bind"]),
    ]


@pytest.fixture
def cards(configs) -> List[BankCard]:
    return [
        BankCard(id=10, client_id=7, number_mask="4111****1111", expire_date=date(2027, 5, 31), type=CardType.PAYOUT),
        BankCard(
            id=11, client_id=7, number_mask="5555****4444", expire_date=date(2028, 1, 31), type=CardType.PAYOUT,
            bind_card=BindCard(id=1, integration_config=configs["bind"]),
        ),
        BankCard(id=12, client_id=8, number_mask="4000****0002", expire_date=date(2026, 12, 31), type=CardType.PAYOUT),
        BankCard(
            id=13, client_id=7, number_mask="4111****1111", expire_date=date(2027, 5, 31),
            type=CardType.RECURRENT, is_recurrent=True,
        ),
    ]


# Collaborators


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider("demo")


@pytest.fixture
def transaction_store() -> FakeTransactionStore:
    return FakeTransactionStore()


@pytest.fixture
def card_store(cards) -> FakeCardStore:
    return FakeCardStore(cards)


@pytest.fixture
def card_checker() -> FakeCardChecker:
    return FakeCardChecker()


@pytest.fixture
def metric_sink() -> FakeMetricSink:
    return FakeMetricSink()


@pytest.fixture
def config_resolver(rules) -> IntegrationConfigResolver:
    return IntegrationConfigResolver(RuleMatcher(rules))


@pytest.fixture
def method_listing(companies, method_companies) -> MethodListing:
    return MethodListing(FakeCompanyDirectory(list(companies.values())), FakeMethodCatalog(method_companies))


@pytest.fixture
def orchestrator(
    method_companies, config_resolver, provider, transaction_store, card_store, card_checker, metric_sink
) -> TransactionOrchestrator:
    return TransactionOrchestrator(
        method_companies=MethodCompanyResolver(FakeMethodCatalog(method_companies)),
        configs=config_resolver,
        providers=StaticProviderRegistry({"demo": provider}),
        transactions=transaction_store,
        cards=card_store,
        card_checker=card_checker,
        receipts=PydanticReceiptParser(),
        meta_builder=TransactionMetaBuilder("TerminalKey"),
        metrics=metric_sink,
        payout_company_alias="operator",
    )


@pytest.fixture
def card_manager_factory(
    card_store, card_checker, provider, config_resolver, configs
) -> Callable[..., CardLifecycleManager]:
    def build(default_configs: Optional[List[IntegrationConfig]] = None) -> CardLifecycleManager:
        return CardLifecycleManager(
            cards=card_store,
            card_checker=card_checker,
            providers=StaticProviderRegistry({"demo": provider}),
            configs=config_resolver,
            config_store=FakeConfigStore([configs["e2c"]] if default_configs is None else default_configs),
            card_provider_alias="demo",
            bind_company_alias="operator",
            unbind_config_type="e2c",
        )

    return build


@pytest.fixture
def card_manager(card_manager_factory) -> CardLifecycleManager:
    return card_manager_factory()


# API


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def api_provider() -> FakeProvider:
    return FakeProvider("demo")


@pytest.fixture
def api_card_checker() -> FakeCardChecker:
    return FakeCardChecker(blocked=("4000****0002",))


@pytest.fixture
def loan_service() -> FakeServiceHandler:
    return FakeServiceHandler("acme")


@pytest.fixture
def client(db: Session, api_provider, api_card_checker, loan_service) -> TestClient:
    """Create FastAPI test client with test database and fake external services"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[dependencies.get_provider_registry] = lambda: StaticProviderRegistry({"demo": api_provider})
    app.dependency_overrides[dependencies.get_card_checker] = lambda: api_card_checker
    app.dependency_overrides[dependencies.get_loan_service] = lambda: loan_service
    app.dependency_overrides[dependencies.get_option_service] = lambda: FakeServiceHandler("acme")
    return TestClient(app)


@pytest.fixture
def seeded(db: Session) -> Session:
    """Database rows mirroring the in-memory reference data, plus a second recurrent card"""
    acme = CompanyRow(id=1, alias="acme", name="Acme Lending")
    operator = CompanyRow(id=2, alias="operator", name="Operating Company")
    demo = ProviderRow(id=1, alias="demo")
    card_in = MethodRow(id=1, alias="card", name="Bank card", direction="income", provider=demo, position=2)
    sbp_in = MethodRow(
        id=2, alias="sbp", name="Fast payments", direction="income", provider=demo,
        platforms=["ios", "android"], position=1,
    )
    card_out = MethodRow(id=3, alias="card", name="Bank card", direction="outcome", provider=demo)

    payment_config = IntegrationConfigRow(id=1, config_type="acquiring", config={"TerminalKey": "acme-terminal"})
    payout_config = IntegrationConfigRow(id=2, config_type="e2c_payout", config={"TerminalKey": "payout-terminal"})
    bind_config = IntegrationConfigRow(id=3, config_type="bind", config={"TerminalKey": "bind-terminal"})
    e2c_config = IntegrationConfigRow(id=4, config_type="e2c", config={"TerminalKey": "e2c-terminal"})

    db.add_all([
        acme, operator, demo, card_in, sbp_in, card_out,
        payment_config, payout_config, bind_config, e2c_config,
        MethodCompanyRow(id=1, method=card_in, company=acme),
        MethodCompanyRow(id=2, method=sbp_in, company=acme),
        MethodCompanyRow(id=3, method=card_out, company=acme),
        IntegrationRuleRow(id=1, conditions={"action": "payment", "company": "acme"}, integration_config=payment_config),
        IntegrationRuleRow(id=2, conditions={"action": "payout", "company": "operator"}, integration_config=payout_config),
        IntegrationRuleRow(id=3, conditions={"action": "bindCard"}, integration_config=bind_config),
        BankCardRow(id=10, client_id=7, number_mask="4111****1111", expire_date=date(2027, 5, 31), type="payout"),
        BankCardRow(
            id=11, client_id=7, number_mask="5555****4444", expire_date=date(2028, 1, 31), type="payout",
            bind_card=BindCardRow(integration_config=bind_config),
        ),
        BankCardRow(id=12, client_id=7, number_mask="4000****0002", expire_date=date(2026, 12, 31), type="payout"),
        BankCardRow(
            id=13, client_id=7, number_mask="4111****1111", expire_date=date(2027, 5, 31),
            type="recurrent", is_recurrent=True,
        ),
        BankCardRow(
            id=14, client_id=7, number_mask="4111****1111", expire_date=date(2029, 8, 31),
            type="recurrent", is_recurrent=True,
        ),
    ])
    db.commit()
    return db
