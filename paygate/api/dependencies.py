"""Dependency injection for FastAPI endpoints"""

import logging

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from paygate.config import settings
from paygate.domain.cards import CardLifecycleManager
from paygate.domain.companies import CompanyService, MethodCompanyResolver
from paygate.domain.integration import IntegrationConfigResolver, RuleMatcher
from paygate.domain.meta import TransactionMetaBuilder
from paygate.domain.methods import MethodListing
from paygate.domain.ports import CardEligibilityChecker, ProviderRegistry, ServicePaymentHandler
from paygate.domain.receipts import PydanticReceiptParser
from paygate.domain.routing import PaymentRouter
from paygate.domain.transactions import TransactionOrchestrator
from paygate.infrastructure.clients.card_check import CardCheckClient
from paygate.infrastructure.clients.providers import StaticProviderRegistry
from paygate.infrastructure.clients.services import loan_service_client, option_service_client
from paygate.infrastructure.database.repositories import (
    BankCardRepository,
    CompanyRepository,
    IntegrationConfigRepository,
    MethodRepository,
    TransactionRepository,
)
from paygate.infrastructure.database.session import get_db
from paygate.infrastructure.observability.metrics import PrometheusMetricSink

logger = logging.getLogger("paygate")


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_provider_registry() -> ProviderRegistry:
    """Provide payment provider adapters by alias"""
    return StaticProviderRegistry.from_urls(settings.provider_urls)


def get_card_checker() -> CardEligibilityChecker:
    """Provide card check service client"""
    return CardCheckClient()


def get_loan_service() -> ServicePaymentHandler:
    return loan_service_client()


def get_option_service() -> ServicePaymentHandler:
    return option_service_client()


def get_config_resolver(db: Session = Depends(get_db)) -> IntegrationConfigResolver:
    rules = IntegrationConfigRepository(db).all_rules()
    return IntegrationConfigResolver(RuleMatcher(rules), logger=logger.getChild("integration"))


def get_method_listing(db: Session = Depends(get_db)) -> MethodListing:
    return MethodListing(CompanyRepository(db), MethodRepository(db))


def get_company_service(db: Session = Depends(get_db)) -> CompanyService:
    return CompanyService(CompanyRepository(db))


def get_orchestrator(
    db: Session = Depends(get_db),
    configs: IntegrationConfigResolver = Depends(get_config_resolver),
    providers: ProviderRegistry = Depends(get_provider_registry),
    card_checker: CardEligibilityChecker = Depends(get_card_checker),
) -> TransactionOrchestrator:
    return TransactionOrchestrator(
        method_companies=MethodCompanyResolver(MethodRepository(db)),
        configs=configs,
        providers=providers,
        transactions=TransactionRepository(db),
        cards=BankCardRepository(db),
        card_checker=card_checker,
        receipts=PydanticReceiptParser(),
        meta_builder=TransactionMetaBuilder(settings.terminal_key_field),
        metrics=PrometheusMetricSink(logger=logger.getChild("metrics")),
        payout_company_alias=settings.payout_company_alias,
        logger=logger.getChild("transactions"),
    )


def get_card_manager(
    db: Session = Depends(get_db),
    configs: IntegrationConfigResolver = Depends(get_config_resolver),
    providers: ProviderRegistry = Depends(get_provider_registry),
    card_checker: CardEligibilityChecker = Depends(get_card_checker),
) -> CardLifecycleManager:
    return CardLifecycleManager(
        cards=BankCardRepository(db),
        card_checker=card_checker,
        providers=providers,
        configs=configs,
        config_store=IntegrationConfigRepository(db),
        card_provider_alias=settings.card_provider_alias,
        bind_company_alias=settings.payout_company_alias,
        unbind_config_type=settings.card_unbind_config_type,
        logger=logger.getChild("cards"),
    )


def get_payment_router(
    methods: MethodListing = Depends(get_method_listing),
    loan_service: ServicePaymentHandler = Depends(get_loan_service),
    option_service: ServicePaymentHandler = Depends(get_option_service),
) -> PaymentRouter:
    return PaymentRouter(loan_service=loan_service, option_service=option_service, methods=methods)
