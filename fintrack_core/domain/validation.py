"""Structural validation of transactions, accounts, categories and tags"""

import re
from decimal import Decimal
from typing import Dict
from fintrack_core.domain.models import (
    Account,
    AccountType,
    Category,
    CategoryType,
    Tag,
    Transaction,
    TransactionType,
)

ACCRUAL_MONTH_PATTERN = re.compile(r"[0-9]{4}(0[1-9]|1[0-2])")
# Numeric(14, 2) holds at most 12 integer digits
MAX_AMOUNT = Decimal("1000000000000")
VALID_TRANSACTION_TYPES = {t.value for t in TransactionType}
VALID_ACCOUNT_TYPES = {t.value for t in AccountType}
VALID_CATEGORY_TYPES = {t.value for t in CategoryType}
MAX_COLOR_LENGTH = 128


def validate_transaction(transaction: Transaction) -> Dict[str, str]:
    """
    Check required fields and business rules after defaults are applied.

    Returns a field -> reason map; empty when the transaction is valid.
    """
    errors: Dict[str, str] = {}

    if not transaction.tenant_id:
        errors["tenant_id"] = "tenant_id is required"
    if not transaction.from_account_id:
        errors["from_account_id"] = "from_account_id is required"
    if transaction.amount is None or transaction.amount <= 0:
        errors["amount"] = "amount must be greater than 0"
    elif transaction.amount >= MAX_AMOUNT:
        errors["amount"] = f"amount must be less than {MAX_AMOUNT}"

    if not transaction.transaction_type:
        errors["transaction_type"] = "transaction_type is required"
    elif transaction.transaction_type not in VALID_TRANSACTION_TYPES:
        errors["transaction_type"] = "invalid transaction type"
    elif transaction.transaction_type == TransactionType.TRANSFER.value:
        if not transaction.to_account_id:
            errors["to_account_id"] = "to_account_id is required for transfers"
        elif transaction.to_account_id == transaction.from_account_id:
            errors["to_account_id"] = "to_account_id must be different from from_account_id"

    if not transaction.category_id:
        errors["category_id"] = "category_id is required"
    _check_currency(transaction.currency, errors)
    if not transaction.accrual_month or not ACCRUAL_MONTH_PATTERN.fullmatch(transaction.accrual_month):
        errors["accrual_month"] = "accrual_month must be in YYYYMM format"
    if transaction.due_date is None:
        errors["due_date"] = "due_date is required"

    return errors


def _check_currency(currency, errors: Dict[str, str]) -> None:
    if not currency:
        errors["currency"] = "currency is required"
    elif len(currency) != 3:
        errors["currency"] = "currency must be a 3-letter code"


def validate_account(account: Account) -> Dict[str, str]:
    errors: Dict[str, str] = {}

    if not account.tenant_id:
        errors["tenant_id"] = "tenant_id is required"
    if not account.name:
        errors["name"] = "name is required"
    if account.initial_balance is None or account.initial_balance < 0:
        errors["initial_balance"] = "initial_balance must be non-negative"
    elif account.initial_balance >= MAX_AMOUNT:
        errors["initial_balance"] = f"initial_balance must be less than {MAX_AMOUNT}"
    _check_currency(account.currency, errors)
    if not account.color:
        errors["color"] = "color is required"
    elif len(account.color) > MAX_COLOR_LENGTH:
        errors["color"] = f"color must not exceed {MAX_COLOR_LENGTH} characters"
    if not account.type:
        errors["type"] = "type is required"
    elif account.type not in VALID_ACCOUNT_TYPES:
        errors["type"] = "invalid account type"

    return errors


def validate_category(category: Category) -> Dict[str, str]:
    errors: Dict[str, str] = {}

    if not category.tenant_id:
        errors["tenant_id"] = "tenant_id is required"
    if not category.name:
        errors["name"] = "name is required"
    if not category.type:
        errors["type"] = "type is required"
    elif category.type not in VALID_CATEGORY_TYPES:
        errors["type"] = "invalid category type"
    if category.id and category.parent_category_id == category.id:
        errors["parent_category_id"] = "a category cannot be its own parent"

    return errors


def validate_tag(tag: Tag) -> Dict[str, str]:
    errors: Dict[str, str] = {}

    if not tag.tenant_id:
        errors["tenant_id"] = "tenant_id is required"
    if not tag.name:
        errors["name"] = "name is required"

    return errors
