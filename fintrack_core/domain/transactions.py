"""Transaction orchestration - defaults, reference checks and installment fan-out"""

from dataclasses import replace
from typing import Iterable, List, Optional, Protocol, Sequence, Tuple
from fintrack_core.domain.exceptions import (
    InvalidReferenceError,
    MissingUserError,
    TransactionNotFoundError,
    ValidationError,
)
from fintrack_core.domain.installments import calculate_installments, to_money
from fintrack_core.domain.models import (
    Account,
    AccountType,
    Category,
    Transaction,
    TransactionFilter,
    TransactionRequest,
    TransactionType,
)
from fintrack_core.domain.validation import validate_transaction
from fintrack_core.utils.date_utils import accrual_month_for

PAYMENT_DATE_TYPES = {TransactionType.CREDIT.value, TransactionType.DEBIT.value}


class AccountLookup(Protocol):
    def get_account(self, account_id: str, tenant_id: str) -> Optional[Account]: ...


class CategoryLookup(Protocol):
    def get_category(self, category_id: str, tenant_id: str) -> Optional[Category]: ...


class TagValidator(Protocol):
    def validate_tags(self, tenant_id: str, tag_ids: Iterable[str]) -> bool: ...


class TransactionStore(Protocol):
    def get(self, tenant_id: str, transaction_id: str) -> Optional[Transaction]: ...

    def list(self, tenant_id: str, filters: TransactionFilter) -> List[Transaction]: ...

    def list_group(self, tenant_id: str, transaction_id: str) -> List[Transaction]: ...

    def create(self, transaction: Transaction, tag_ids: Sequence[str]) -> Transaction: ...

    def create_group(
        self, parent: Transaction, siblings: Sequence[Transaction], tag_ids: Sequence[str]
    ) -> Tuple[Transaction, List[Transaction]]: ...

    def update(
        self, transaction: Transaction, tag_ids: Optional[Sequence[str]] = None
    ) -> Optional[Transaction]: ...

    def soft_delete(self, tenant_id: str, transaction_id: str, user_id: str) -> bool: ...


def installment_label(sequence_number: int, count: int, comments: Optional[str]) -> str:
    """Prefix a comment with its position in the installment group"""
    return f"[Installment {sequence_number}/{count}] {comments or ''}"


def qualifies_for_payment_date(account: Optional[Account], transaction_type: str) -> bool:
    """Credit-card credits and debits are paid on their due date"""
    return (
        account is not None
        and account.type == AccountType.CREDIT_CARD.value
        and transaction_type in PAYMENT_DATE_TYPES
    )


def _dedupe(tag_ids: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(tag_ids))


class TransactionService:
    """
    Tenant-scoped transaction operations.

    Tenant and acting user are explicit arguments on every call; collaborators
    are treated as black boxes and every failure is raised to the caller.
    """

    def __init__(
        self,
        store: TransactionStore,
        accounts: AccountLookup,
        categories: CategoryLookup,
        tags: TagValidator,
    ):
        self.store = store
        self.accounts = accounts
        self.categories = categories
        self.tags = tags

    def get(self, tenant_id: str, transaction_id: str) -> Transaction:
        transaction = self.store.get(tenant_id, transaction_id)
        if transaction is None:
            raise TransactionNotFoundError(transaction_id)
        return transaction

    def list(self, tenant_id: str, filters: Optional[TransactionFilter] = None) -> List[Transaction]:
        return self.store.list(tenant_id, filters or TransactionFilter())

    def list_group(self, tenant_id: str, transaction_id: str) -> List[Transaction]:
        """Return the installment group containing the transaction, parent first"""
        group = self.store.list_group(tenant_id, transaction_id)
        if not group:
            raise TransactionNotFoundError(transaction_id)
        return group

    def create(
        self,
        tenant_id: str,
        user_id: Optional[str],
        request: TransactionRequest,
        tag_ids: Optional[Iterable[str]] = None,
        installment_count: int = 1,
        is_recurring: bool = False,
    ) -> Transaction:
        """
        Create a transaction, fanning it out into an installment group when
        installment_count > 1.

        Flow:
        1. Resolve the source account
        2. Default currency, accrual month and credit-card payment date
        3. Validate structure (field-keyed errors)
        4. Check destination account, category and tags against the tenant
        5. Persist a single record, or parent + siblings as one group

        Returns:
            The persisted parent transaction (installment 1 values when expanded)
        """
        if not user_id:
            raise MissingUserError()

        parent = Transaction(
            tenant_id=tenant_id,
            from_account_id=request.from_account_id,
            to_account_id=request.to_account_id,
            amount=to_money(request.amount) if request.amount is not None else None,
            currency=request.currency,
            accrual_month=request.accrual_month,
            transaction_type=request.transaction_type,
            category_id=request.category_id,
            comments=request.comments,
            due_date=request.due_date,
            payment_date=request.payment_date,
            created_by=user_id,
            updated_by=user_id,
        )
        source = self._resolve_source(parent)
        self._apply_defaults(parent, source)
        if qualifies_for_payment_date(source, parent.transaction_type) and parent.payment_date is None:
            parent.payment_date = parent.due_date

        errors = validate_transaction(parent)
        if errors:
            raise ValidationError(errors)

        tags = _dedupe(tag_ids or [])
        self._check_references(parent, tags)

        if installment_count <= 1:
            return self.store.create(parent, tags)

        installments = calculate_installments(parent.amount, installment_count, parent.due_date, is_recurring)
        first = installments[0]
        parent = replace(
            parent,
            amount=first.amount,
            due_date=first.due_date,
            accrual_month=accrual_month_for(first.due_date),
            comments=installment_label(1, installment_count, request.comments),
        )

        pays_on_due_date = qualifies_for_payment_date(source, parent.transaction_type)
        siblings = [
            replace(
                parent,
                id=None,
                amount=installment.amount,
                due_date=installment.due_date,
                accrual_month=accrual_month_for(installment.due_date),
                payment_date=installment.due_date if pays_on_due_date else None,
                comments=installment_label(installment.sequence_number, installment_count, request.comments),
            )
            for installment in installments[1:]
        ]

        parent, _ = self.store.create_group(parent, siblings, tags)
        return parent

    def update(
        self,
        tenant_id: str,
        user_id: Optional[str],
        transaction_id: str,
        request: TransactionRequest,
        tag_ids: Optional[Iterable[str]] = None,
    ) -> Transaction:
        """
        Update a single record; installment siblings are left untouched.

        tag_ids=None keeps the current tags, any list (empty included)
        replaces them.
        """
        if not user_id:
            raise MissingUserError()

        existing = self.get(tenant_id, transaction_id)
        transaction = replace(
            existing,
            from_account_id=request.from_account_id,
            to_account_id=request.to_account_id,
            amount=to_money(request.amount) if request.amount is not None else None,
            currency=request.currency,
            accrual_month=request.accrual_month,
            transaction_type=request.transaction_type,
            category_id=request.category_id,
            comments=request.comments,
            due_date=request.due_date,
            payment_date=request.payment_date,
            updated_by=user_id,
        )
        source = self._resolve_source(transaction)
        self._apply_defaults(transaction, source)

        errors = validate_transaction(transaction)
        if errors:
            raise ValidationError(errors)

        tags = _dedupe(tag_ids) if tag_ids is not None else None
        self._check_references(transaction, tags or [])

        updated = self.store.update(transaction, tags)
        if updated is None:
            raise TransactionNotFoundError(transaction_id)
        return updated

    def delete(self, tenant_id: str, user_id: Optional[str], transaction_id: str) -> None:
        """Soft-delete one record; siblings stay active"""
        if not user_id:
            raise MissingUserError()
        if not self.store.soft_delete(tenant_id, transaction_id, user_id):
            raise TransactionNotFoundError(transaction_id)

    def _resolve_source(self, transaction: Transaction) -> Optional[Account]:
        if not transaction.from_account_id:
            return None
        return self._require_account("from_account_id", transaction.from_account_id, transaction.tenant_id)

    def _require_account(self, field: str, account_id: str, tenant_id: str) -> Account:
        account = self.accounts.get_account(account_id, tenant_id)
        if account is None or account.tenant_id != tenant_id:
            raise InvalidReferenceError(
                field, f"{field.replace('_id', '')} does not belong to this tenant", account_id
            )
        return account

    def _apply_defaults(self, transaction: Transaction, source: Optional[Account]) -> None:
        if not transaction.currency and source is not None:
            transaction.currency = source.currency
        if not transaction.accrual_month and transaction.due_date is not None:
            transaction.accrual_month = accrual_month_for(transaction.due_date)

    def _check_references(self, transaction: Transaction, tag_ids: List[str]) -> None:
        tenant_id = transaction.tenant_id
        if transaction.to_account_id:
            self._require_account("to_account_id", transaction.to_account_id, tenant_id)

        category = self.categories.get_category(transaction.category_id, tenant_id)
        if category is None or category.tenant_id != tenant_id:
            raise InvalidReferenceError(
                "category_id", "category does not belong to this tenant", transaction.category_id
            )

        if tag_ids and not self.tags.validate_tags(tenant_id, tag_ids):
            raise InvalidReferenceError("tag_ids", "one or more tags do not belong to this tenant")
