"""SQLAlchemy ORM models for the payment gateway"""

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class CompanyRow(Base):
    __tablename__ = "company"

    id = Column(Integer, primary_key=True, autoincrement=True)
    alias = Column(Text, nullable=False, unique=True)
    name = Column(Text, nullable=False)


class ProviderRow(Base):
    __tablename__ = "provider"

    id = Column(Integer, primary_key=True, autoincrement=True)
    alias = Column(Text, nullable=False, unique=True)


class MethodRow(Base):
    """Payment method offered through a provider in one direction"""

    __tablename__ = "method"

    id = Column(Integer, primary_key=True, autoincrement=True)
    alias = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    direction = Column(Text, nullable=False)  # income | outcome
    provider_id = Column(Integer, ForeignKey("provider.id"), nullable=False)
    platforms = Column(JSON, nullable=False, default=list)
    position = Column(Integer, nullable=False, default=0)

    provider = relationship("ProviderRow")


class MethodCompanyRow(Base):
    __tablename__ = "method_company"
    __table_args__ = (UniqueConstraint("method_id", "company_id", name="uq_method_company"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    method_id = Column(Integer, ForeignKey("method.id"), nullable=False)
    company_id = Column(Integer, ForeignKey("company.id"), nullable=False)

    method = relationship("MethodRow")
    company = relationship("CompanyRow")


class IntegrationConfigRow(Base):
    __tablename__ = "integration_config"

    id = Column(Integer, primary_key=True, autoincrement=True)
    config_type = Column(Text, nullable=False, index=True)
    config = Column(JSON, nullable=False)


class IntegrationRuleRow(Base):
    """Condition set selecting an integration config"""

    __tablename__ = "integration_rule"

    id = Column(Integer, primary_key=True, autoincrement=True)
    priority = Column(Integer, nullable=False, default=0)
    conditions = Column(JSON, nullable=False)
    integration_config_id = Column(Integer, ForeignKey("integration_config.id"), nullable=True)

    integration_config = relationship("IntegrationConfigRow")


class BankCardRow(Base):
    __tablename__ = "bank_card"

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(BigInteger, nullable=False, index=True)
    number_mask = Column(Text, nullable=False)
    expire_date = Column(Date, nullable=False)
    type = Column(Text, nullable=False)  # payout | recurrent
    is_recurrent = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    bind_card = relationship("BindCardRow", back_populates="bank_card", uselist=False, cascade="all, delete-orphan")


class BindCardRow(Base):
    __tablename__ = "bind_card"

    id = Column(Integer, primary_key=True, autoincrement=True)
    bank_card_id = Column(Integer, ForeignKey("bank_card.id", ondelete="CASCADE"), nullable=False, unique=True)
    integration_config_id = Column(Integer, ForeignKey("integration_config.id"), nullable=False)

    bank_card = relationship("BankCardRow", back_populates="bind_card")
    integration_config = relationship("IntegrationConfigRow")


class TransactionRow(Base):
    __tablename__ = "payment_transaction"

    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(Text, nullable=False)  # payment | payout
    status = Column(Text, nullable=False)
    amount = Column(BigInteger, nullable=False)
    client_id = Column(BigInteger, nullable=False, index=True)
    method_company_id = Column(Integer, ForeignKey("method_company.id"), nullable=False)
    integration_config_id = Column(Integer, ForeignKey("integration_config.id"), nullable=False)
    bank_card_id = Column(Integer, ForeignKey("bank_card.id", ondelete="SET NULL"), nullable=True)
    receipt = Column(JSON, nullable=True)
    meta = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    method_company = relationship("MethodCompanyRow")
    integration_config = relationship("IntegrationConfigRow")
    bank_card = relationship("BankCardRow")
