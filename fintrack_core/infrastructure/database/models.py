"""SQLAlchemy ORM models for tenants, accounts, categories, tags and transactions"""

import uuid
from sqlalchemy import Column, String, Date, DateTime, ForeignKey, Numeric, Text, Index
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


def new_id() -> str:
    return str(uuid.uuid4())


class TenantRecord(Base):
    """Isolated workspace owning every other entity"""

    __tablename__ = "tenants"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    deactivated_at = Column(DateTime(timezone=True), nullable=True)


class AccountRecord(Base):
    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=new_id)
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    initial_balance = Column(Numeric(14, 2), nullable=False, default=0)
    color = Column(Text, nullable=False, default="")
    icon = Column(Text, nullable=False, default="")
    currency = Column(String(3), nullable=False)
    type = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    created_by = Column(String(36), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_by = Column(String(36), nullable=False)
    deactivated_at = Column(DateTime(timezone=True), nullable=True)
    deactivated_by = Column(String(36), nullable=True)


class CategoryRecord(Base):
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=new_id)
    parent_category_id = Column(String(36), ForeignKey("categories.id"), nullable=True)
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    type = Column(Text, nullable=False)
    color = Column(Text, nullable=False, default="")
    icon = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    created_by = Column(String(36), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_by = Column(String(36), nullable=False)
    deactivated_at = Column(DateTime(timezone=True), nullable=True)
    deactivated_by = Column(String(36), nullable=True)


class TagRecord(Base):
    __tablename__ = "tags"

    id = Column(String(36), primary_key=True, default=new_id)
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    created_by = Column(String(36), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_by = Column(String(36), nullable=False)
    deactivated_at = Column(DateTime(timezone=True), nullable=True)
    deactivated_by = Column(String(36), nullable=True)


class TransactionRecord(Base):
    """One financial movement; installment siblings point at their parent"""

    __tablename__ = "transactions"
    __table_args__ = (Index("ix_transactions_tenant_accrual", "tenant_id", "accrual_month"),)

    id = Column(String(36), primary_key=True, default=new_id)
    parent_transaction_id = Column(String(36), ForeignKey("transactions.id"), nullable=True, index=True)
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False, index=True)
    from_account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False)
    to_account_id = Column(String(36), ForeignKey("accounts.id"), nullable=True)
    currency = Column(String(3), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    accrual_month = Column(String(6), nullable=False)
    transaction_type = Column(Text, nullable=False)
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=False)
    comments = Column(Text, nullable=True)
    due_date = Column(Date, nullable=False)
    payment_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    created_by = Column(String(36), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
    updated_by = Column(String(36), nullable=False)
    deactivated_at = Column(DateTime(timezone=True), nullable=True)
    deactivated_by = Column(String(36), nullable=True)

    tags = relationship("TransactionTagRecord", back_populates="transaction", cascade="all, delete-orphan")


class TransactionTagRecord(Base):
    __tablename__ = "transactions_tags"

    transaction_id = Column(String(36), ForeignKey("transactions.id", ondelete="CASCADE"), primary_key=True)
    tag_id = Column(String(36), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True)

    transaction = relationship("TransactionRecord", back_populates="tags")
