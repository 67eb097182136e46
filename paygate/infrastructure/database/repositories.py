"""Data access layer for gateway entities"""

from typing import List, Optional

from sqlalchemy.orm import Session

from paygate.domain.exceptions import CompanyNotFoundError, TransactionNotFoundError
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
    Receipt,
    ReceiptItem,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from paygate.infrastructure.database.models import (
    BankCardRow,
    CompanyRow,
    IntegrationConfigRow,
    IntegrationRuleRow,
    MethodCompanyRow,
    MethodRow,
    ProviderRow,
    TransactionRow,
)


def to_company(row: CompanyRow) -> Company:
    return Company(id=row.id, alias=row.alias, name=row.name)


def to_method(row: MethodRow) -> Method:
    return Method(
        id=row.id,
        alias=row.alias,
        name=row.name,
        direction=Direction(row.direction),
        provider_alias=row.provider.alias,
        platforms=tuple(row.platforms or ()),
        position=row.position,
    )


def to_method_company(row: MethodCompanyRow) -> MethodCompany:
    method = to_method(row.method)
    return MethodCompany(
        id=row.id,
        method=method,
        company=to_company(row.company),
        provider_alias=method.provider_alias,
    )


def to_config(row: IntegrationConfigRow) -> IntegrationConfig:
    return IntegrationConfig(id=row.id, config_type=row.config_type, config=dict(row.config or {}))


def to_bank_card(row: BankCardRow) -> BankCard:
    bind_card = None
    if row.bind_card is not None:
        bind_card = BindCard(id=row.bind_card.id, integration_config=to_config(row.bind_card.integration_config))
    return BankCard(
        id=row.id,
        client_id=row.client_id,
        number_mask=row.number_mask,
        expire_date=row.expire_date,
        type=CardType(row.type),
        is_recurrent=row.is_recurrent,
        bind_card=bind_card,
    )


def to_receipt(data: Optional[dict]) -> Optional[Receipt]:
    if not data:
        return None
    return Receipt(
        taxation=data["taxation"],
        email=data.get("email"),
        phone=data.get("phone"),
        items=[ReceiptItem(**item) for item in data.get("items", [])],
    )


class CompanyRepository:
    """Repository for companies"""

    def __init__(self, db: Session):
        self.db = db

    def by_alias(self, alias: str) -> Company:
        row = self.db.query(CompanyRow).filter(CompanyRow.alias == alias).first()
        if row is None:
            raise CompanyNotFoundError(alias)
        return to_company(row)


class MethodRepository:
    """Repository for methods and their company bindings"""

    def __init__(self, db: Session):
        self.db = db

    def by_company_and_direction(self, company_alias: str, direction: Direction) -> List[Method]:
        rows = (
            self.db.query(MethodRow)
            .join(MethodCompanyRow, MethodCompanyRow.method_id == MethodRow.id)
            .join(CompanyRow, MethodCompanyRow.company_id == CompanyRow.id)
            .filter(CompanyRow.alias == company_alias, MethodRow.direction == direction.value)
            .order_by(MethodRow.position, MethodRow.id)
            .all()
        )
        return [to_method(row) for row in rows]

    def find(
        self, company_alias: str, method_alias: str, provider_alias: str, direction: Direction
    ) -> Optional[MethodCompany]:
        row = (
            self.db.query(MethodCompanyRow)
            .join(MethodRow, MethodCompanyRow.method_id == MethodRow.id)
            .join(ProviderRow, MethodRow.provider_id == ProviderRow.id)
            .join(CompanyRow, MethodCompanyRow.company_id == CompanyRow.id)
            .filter(
                CompanyRow.alias == company_alias,
                MethodRow.alias == method_alias,
                ProviderRow.alias == provider_alias,
                MethodRow.direction == direction.value,
            )
            .first()
        )
        return to_method_company(row) if row is not None else None


class IntegrationConfigRepository:
    """Repository for integration configs and their selection rules"""

    def __init__(self, db: Session):
        self.db = db

    def all_rules(self) -> List[IntegrationRule]:
        rows = self.db.query(IntegrationRuleRow).order_by(IntegrationRuleRow.id).all()
        return [
            IntegrationRule(
                id=row.id,
                priority=row.priority,
                conditions=row.conditions,
                config=to_config(row.integration_config) if row.integration_config is not None else None,
            )
            for row in rows
        ]

    def by_config_type(self, config_type: str) -> Optional[IntegrationConfig]:
        row = (
            self.db.query(IntegrationConfigRow)
            .filter(IntegrationConfigRow.config_type == config_type)
            .order_by(IntegrationConfigRow.id)
            .first()
        )
        return to_config(row) if row is not None else None


class BankCardRepository:
    """Repository for stored bank cards"""

    def __init__(self, db: Session):
        self.db = db

    def by_id(self, card_id: int) -> Optional[BankCard]:
        row = self.db.get(BankCardRow, card_id)
        return to_bank_card(row) if row is not None else None

    def by_client_and_type(self, client_id: int, card_type: CardType) -> List[BankCard]:
        rows = (
            self.db.query(BankCardRow)
            .filter(BankCardRow.client_id == client_id, BankCardRow.type == card_type.value)
            .order_by(BankCardRow.id)
            .all()
        )
        return [to_bank_card(row) for row in rows]

    def remove(self, card: BankCard) -> None:
        row = self.db.get(BankCardRow, card.id)
        if row is not None:
            self.db.delete(row)
            self.db.commit()


class TransactionRepository:
    """Repository for transactions; every write is committed at once"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, transaction: Transaction) -> None:
        row = TransactionRow(
            type=transaction.type.value,
            status=transaction.status.value,
            amount=transaction.amount,
            client_id=transaction.client_id,
            method_company_id=transaction.method_company.id,
            integration_config_id=transaction.integration_config.id,
            bank_card_id=transaction.bank_card.id if transaction.bank_card else None,
            receipt=transaction.receipt.to_dict() if transaction.receipt else None,
            meta=transaction.meta,
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        transaction.id = row.id
        transaction.created_at = row.created_at

    def by_id(self, transaction_id: int) -> Transaction:
        row = self.db.get(TransactionRow, transaction_id)
        if row is None:
            raise TransactionNotFoundError(transaction_id)

        return Transaction(
            id=row.id,
            type=TransactionType(row.type),
            status=TransactionStatus(row.status),
            amount=row.amount,
            client_id=row.client_id,
            method_company=to_method_company(row.method_company),
            integration_config=to_config(row.integration_config),
            bank_card=to_bank_card(row.bank_card) if row.bank_card is not None else None,
            receipt=to_receipt(row.receipt),
            meta=dict(row.meta or {}),
            created_at=row.created_at,
        )
