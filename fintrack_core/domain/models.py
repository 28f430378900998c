"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    CREDIT = "credit"
    DEBIT = "debit"
    TRANSFER = "transfer"
    PAYMENT = "payment"


class AccountType(str, Enum):
    BANK = "bank"
    CASH = "cash"
    CREDIT_CARD = "credit_card"
    INVESTMENT = "investment"
    OTHER = "other"


class CategoryType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


@dataclass
class Account:
    """Financial account owned by a tenant"""

    id: Optional[str]
    tenant_id: str
    name: str
    currency: str
    type: str  # AccountType value
    initial_balance: Decimal = Decimal("0")
    color: str = ""
    icon: str = ""
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None


@dataclass
class Category:
    """Classification for transactions, optionally nested under a parent"""

    id: Optional[str]
    tenant_id: str
    name: str
    type: str  # CategoryType value
    parent_category_id: Optional[str] = None
    color: str = ""
    icon: str = ""
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None


@dataclass
class Tag:
    id: Optional[str]
    tenant_id: str
    name: str
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None


@dataclass
class Installment:
    """Single position in a split or recurring series"""

    sequence_number: int
    amount: Decimal
    due_date: date


@dataclass
class TransactionRequest:
    """Caller-supplied values for creating or updating a transaction"""

    from_account_id: str
    amount: Decimal
    transaction_type: str
    category_id: str
    due_date: Optional[date]
    to_account_id: Optional[str] = None
    currency: Optional[str] = None
    accrual_month: Optional[str] = None
    comments: Optional[str] = None
    payment_date: Optional[date] = None


@dataclass
class Transaction:
    """A financial movement, possibly one record of an installment group"""

    tenant_id: str
    from_account_id: str
    amount: Decimal
    transaction_type: str
    category_id: str
    due_date: Optional[date]
    currency: Optional[str] = None
    accrual_month: Optional[str] = None
    to_account_id: Optional[str] = None
    comments: Optional[str] = None
    payment_date: Optional[date] = None
    parent_transaction_id: Optional[str] = None
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None
    deactivated_at: Optional[datetime] = None
    deactivated_by: Optional[str] = None


@dataclass
class TransactionFilter:
    """Optional narrowing for transaction listings"""

    accrual_month: Optional[str] = None
    account_id: Optional[str] = None
    transaction_type: Optional[str] = None
