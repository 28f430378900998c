"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field
from fintrack_core.config import settings
from fintrack_core.domain.models import (
    Account,
    AccountType,
    Category,
    CategoryType,
    Tag,
    TransactionRequest,
    TransactionType,
)
from fintrack_core.domain.validation import MAX_AMOUNT, MAX_COLOR_LENGTH


class TransactionBase(BaseModel):
    """Fields shared by create and update payloads"""

    from_account_id: str = Field(..., min_length=1, description="Source account")
    to_account_id: Optional[str] = Field(None, description="Destination account, required for transfers")
    amount: Decimal = Field(..., gt=0, lt=MAX_AMOUNT, description="Amount; for splits, the total to divide")
    currency: Optional[str] = Field(None, min_length=3, max_length=3, description="Defaults to the source account currency")
    accrual_month: Optional[str] = Field(None, description="YYYYMM bucket; defaults to the due date's month")
    transaction_type: TransactionType
    category_id: str = Field(..., min_length=1)
    comments: Optional[str] = None
    due_date: date
    payment_date: Optional[date] = None
    tag_ids: Optional[List[str]] = Field(None, description="Omit to leave tags unchanged on update")

    def to_domain(self) -> TransactionRequest:
        return TransactionRequest(
            from_account_id=self.from_account_id,
            to_account_id=self.to_account_id,
            amount=self.amount,
            currency=self.currency,
            accrual_month=self.accrual_month,
            transaction_type=self.transaction_type.value,
            category_id=self.category_id,
            comments=self.comments,
            due_date=self.due_date,
            payment_date=self.payment_date,
        )


class TransactionCreateRequest(TransactionBase):
    """Request body for POST /v1/transactions"""

    installments: int = Field(
        settings.default_installment_count,
        ge=1,
        le=settings.max_installments,
        description="Number of monthly installments",
    )
    is_recurring: bool = Field(False, description="Repeat the amount instead of splitting it")


class TransactionUpdateRequest(TransactionBase):
    """Request body for PUT /v1/transactions/{id}"""


class TransactionResponse(BaseModel):
    """Persisted transaction"""

    id: str
    parent_transaction_id: Optional[str] = None
    tenant_id: str
    from_account_id: str
    to_account_id: Optional[str] = None
    currency: str
    amount: Decimal
    accrual_month: str
    transaction_type: str
    category_id: str
    comments: Optional[str] = None
    due_date: date
    payment_date: Optional[date] = None
    tag_ids: List[str] = []
    created_at: Optional[datetime] = None
    created_by: str
    updated_at: Optional[datetime] = None
    updated_by: str


class AccountRequest(BaseModel):
    """Request body for creating or replacing an account"""

    name: str = Field(..., min_length=1)
    initial_balance: Decimal = Field(Decimal("0"), ge=0, lt=MAX_AMOUNT)
    color: str = Field(..., min_length=1, max_length=MAX_COLOR_LENGTH)
    icon: str = ""
    currency: str = Field(..., min_length=3, max_length=3)
    type: AccountType

    def to_domain(self, tenant_id: str) -> Account:
        return Account(
            id=None,
            tenant_id=tenant_id,
            name=self.name,
            initial_balance=self.initial_balance,
            color=self.color,
            icon=self.icon,
            currency=self.currency,
            type=self.type.value,
        )


class AccountResponse(BaseModel):
    id: str
    tenant_id: str
    name: str
    initial_balance: Decimal
    color: str
    icon: str
    currency: str
    type: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, account: Account) -> "AccountResponse":
        return cls(
            id=account.id,
            tenant_id=account.tenant_id,
            name=account.name,
            initial_balance=account.initial_balance,
            color=account.color,
            icon=account.icon,
            currency=account.currency,
            type=account.type,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )


class CategoryUpdateRequest(BaseModel):
    """Request body for PUT /v1/categories/{id}; the type cannot change"""

    name: str = Field(..., min_length=1)
    parent_category_id: Optional[str] = Field(None, description="Nest under another category of the tenant")
    color: str = ""
    icon: str = ""

    def to_domain(self, tenant_id: str, category_type: str = "") -> Category:
        return Category(
            id=None,
            tenant_id=tenant_id,
            name=self.name,
            type=category_type,
            parent_category_id=self.parent_category_id,
            color=self.color,
            icon=self.icon,
        )


class CategoryCreateRequest(CategoryUpdateRequest):
    type: CategoryType


class CategoryResponse(BaseModel):
    id: str
    tenant_id: str
    name: str
    type: str
    parent_category_id: Optional[str] = None
    color: str
    icon: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, category: Category) -> "CategoryResponse":
        return cls(
            id=category.id,
            tenant_id=category.tenant_id,
            name=category.name,
            type=category.type,
            parent_category_id=category.parent_category_id,
            color=category.color,
            icon=category.icon,
            created_at=category.created_at,
            updated_at=category.updated_at,
        )


class TagRequest(BaseModel):
    name: str = Field(..., min_length=1)


class TagResponse(BaseModel):
    id: str
    tenant_id: str
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, tag: Tag) -> "TagResponse":
        return cls(
            id=tag.id,
            tenant_id=tag.tenant_id,
            name=tag.name,
            created_at=tag.created_at,
            updated_at=tag.updated_at,
        )
