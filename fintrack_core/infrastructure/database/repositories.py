"""Data access layer for accounts, categories, tags and transactions"""

from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence, Tuple
from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from fintrack_core.infrastructure.database.models import (
    AccountRecord,
    CategoryRecord,
    TagRecord,
    TransactionRecord,
    TransactionTagRecord,
    new_id,
)
from fintrack_core.domain.exceptions import PersistenceError
from fintrack_core.domain.models import Account, Category, Tag, Transaction, TransactionFilter

TRANSACTION_FIELDS = (
    "parent_transaction_id",
    "tenant_id",
    "from_account_id",
    "to_account_id",
    "currency",
    "amount",
    "accrual_month",
    "transaction_type",
    "category_id",
    "comments",
    "due_date",
    "payment_date",
    "created_by",
    "updated_by",
)

# Columns a single-record update may change
UPDATABLE_FIELDS = (
    "from_account_id",
    "to_account_id",
    "currency",
    "amount",
    "accrual_month",
    "transaction_type",
    "category_id",
    "comments",
    "due_date",
    "payment_date",
    "updated_by",
)

ACCOUNT_FIELDS = ("name", "initial_balance", "color", "icon", "currency", "type", "updated_by")
CATEGORY_FIELDS = ("name", "parent_category_id", "color", "icon", "updated_by")
TAG_FIELDS = ("name", "updated_by")


def _to_transaction(row: TransactionRecord) -> Transaction:
    return Transaction(
        id=row.id,
        parent_transaction_id=row.parent_transaction_id,
        tenant_id=row.tenant_id,
        from_account_id=row.from_account_id,
        to_account_id=row.to_account_id,
        currency=row.currency,
        amount=row.amount,
        accrual_month=row.accrual_month,
        transaction_type=row.transaction_type,
        category_id=row.category_id,
        comments=row.comments,
        due_date=row.due_date,
        payment_date=row.payment_date,
        created_at=row.created_at,
        created_by=row.created_by,
        updated_at=row.updated_at,
        updated_by=row.updated_by,
        deactivated_at=row.deactivated_at,
        deactivated_by=row.deactivated_by,
    )


def _to_record(transaction: Transaction) -> TransactionRecord:
    return TransactionRecord(
        id=new_id(),
        **{name: getattr(transaction, name) for name in TRANSACTION_FIELDS},
    )


def _to_account(row: AccountRecord) -> Account:
    return Account(
        id=row.id,
        tenant_id=row.tenant_id,
        name=row.name,
        currency=row.currency,
        type=row.type,
        initial_balance=row.initial_balance,
        color=row.color,
        icon=row.icon,
        created_at=row.created_at,
        created_by=row.created_by,
        updated_at=row.updated_at,
        updated_by=row.updated_by,
    )


def _to_category(row: CategoryRecord) -> Category:
    return Category(
        id=row.id,
        tenant_id=row.tenant_id,
        name=row.name,
        type=row.type,
        parent_category_id=row.parent_category_id,
        color=row.color,
        icon=row.icon,
        created_at=row.created_at,
        created_by=row.created_by,
        updated_at=row.updated_at,
        updated_by=row.updated_by,
    )


def _to_tag(row: TagRecord) -> Tag:
    return Tag(
        id=row.id,
        tenant_id=row.tenant_id,
        name=row.name,
        created_at=row.created_at,
        created_by=row.created_by,
        updated_at=row.updated_at,
        updated_by=row.updated_by,
    )


class SessionRepository:
    """
    Base for Session-scoped repositories.

    Every write method is its own unit of work: it commits on success and
    rolls the session back before raising PersistenceError on failure.
    """

    def __init__(self, db: Session):
        self.db = db

    def _commit(self, action: str) -> None:
        try:
            self.db.flush()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"failed to {action}: {e}") from e


class CatalogRepository(SessionRepository):
    """Shared tenant-scoped CRUD for accounts, categories and tags"""

    model = None
    entity = ""
    insert_fields: Tuple[str, ...] = ()
    editable_fields: Tuple[str, ...] = ()

    def _to_domain(self, row):
        raise NotImplementedError

    def _active(self, tenant_id: str):
        return self.db.query(self.model).filter(
            self.model.tenant_id == tenant_id,
            self.model.deactivated_at.is_(None),
        )

    def _find(self, entity_id: str, tenant_id: str):
        try:
            row = self._active(tenant_id).filter(self.model.id == entity_id).first()
        except SQLAlchemyError as e:
            raise PersistenceError(f"failed to get {self.entity} {entity_id}: {e}") from e
        return row

    def list(self, tenant_id: str) -> list:
        try:
            rows = self._active(tenant_id).order_by(self.model.name).all()
        except SQLAlchemyError as e:
            raise PersistenceError(f"failed to list {self.entity} rows: {e}") from e
        return [self._to_domain(row) for row in rows]

    def create(self, entity):
        fields = {name: getattr(entity, name) for name in ("tenant_id", "created_by", *self.insert_fields)}
        row = self.model(id=new_id(), **fields)
        self.db.add(row)
        self._commit(f"create {self.entity}")
        self.db.refresh(row)
        return self._to_domain(row)

    def update(self, entity):
        """Write the editable fields; None when the row is not found"""
        row = self._find(entity.id, entity.tenant_id)
        if row is None:
            return None

        for name in self.editable_fields:
            setattr(row, name, getattr(entity, name))
        row.updated_at = datetime.now(timezone.utc)

        self._commit(f"update {self.entity}")
        self.db.refresh(row)
        return self._to_domain(row)

    def soft_delete(self, tenant_id: str, entity_id: str, user_id: str) -> bool:
        row = self._find(entity_id, tenant_id)
        if row is None:
            return False

        row.deactivated_at = datetime.now(timezone.utc)
        row.deactivated_by = user_id
        self._commit(f"delete {self.entity}")
        return True


class AccountRepository(CatalogRepository):
    model = AccountRecord
    entity = "account"
    insert_fields = ACCOUNT_FIELDS
    editable_fields = ACCOUNT_FIELDS

    def _to_domain(self, row: AccountRecord) -> Account:
        return _to_account(row)

    def get_account(self, account_id: str, tenant_id: str) -> Optional[Account]:
        row = self._find(account_id, tenant_id)
        return _to_account(row) if row else None


class CategoryRepository(CatalogRepository):
    model = CategoryRecord
    entity = "category"
    insert_fields = ("type", *CATEGORY_FIELDS)
    editable_fields = CATEGORY_FIELDS

    def _to_domain(self, row: CategoryRecord) -> Category:
        return _to_category(row)

    def get_category(self, category_id: str, tenant_id: str) -> Optional[Category]:
        row = self._find(category_id, tenant_id)
        return _to_category(row) if row else None


class TagRepository(CatalogRepository):
    """Tag CRUD and ownership checks"""

    model = TagRecord
    entity = "tag"
    insert_fields = TAG_FIELDS
    editable_fields = TAG_FIELDS

    def _to_domain(self, row: TagRecord) -> Tag:
        return _to_tag(row)

    def get_tag(self, tag_id: str, tenant_id: str) -> Optional[Tag]:
        row = self._find(tag_id, tenant_id)
        return _to_tag(row) if row else None

    def validate_tags(self, tenant_id: str, tag_ids: Iterable[str]) -> bool:
        """True iff every id is an active tag of the tenant"""
        unique_ids = set(tag_ids)
        if not unique_ids:
            return True

        try:
            count = (
                self.db.query(func.count(TagRecord.id))
                .filter(
                    TagRecord.tenant_id == tenant_id,
                    TagRecord.id.in_(unique_ids),
                    TagRecord.deactivated_at.is_(None),
                )
                .scalar()
            )
        except SQLAlchemyError as e:
            raise PersistenceError(f"failed to validate tags: {e}") from e

        return count == len(unique_ids)


class TransactionRepository(SessionRepository):
    """Transaction store; group writes are a single unit of work"""

    def _active(self, tenant_id: str):
        return self.db.query(TransactionRecord).filter(
            TransactionRecord.tenant_id == tenant_id,
            TransactionRecord.deactivated_at.is_(None),
        )

    def _get_record(self, tenant_id: str, transaction_id: str) -> Optional[TransactionRecord]:
        return self._active(tenant_id).filter(TransactionRecord.id == transaction_id).first()

    def get(self, tenant_id: str, transaction_id: str) -> Optional[Transaction]:
        try:
            row = self._get_record(tenant_id, transaction_id)
        except SQLAlchemyError as e:
            raise PersistenceError(f"failed to get transaction {transaction_id}: {e}") from e
        return _to_transaction(row) if row else None

    def list(self, tenant_id: str, filters: TransactionFilter) -> List[Transaction]:
        query = self._active(tenant_id)
        if filters.accrual_month:
            query = query.filter(TransactionRecord.accrual_month == filters.accrual_month)
        if filters.account_id:
            query = query.filter(TransactionRecord.from_account_id == filters.account_id)
        if filters.transaction_type:
            query = query.filter(TransactionRecord.transaction_type == filters.transaction_type)

        try:
            rows = query.order_by(TransactionRecord.due_date, TransactionRecord.created_at).all()
        except SQLAlchemyError as e:
            raise PersistenceError(f"failed to list transactions: {e}") from e
        return [_to_transaction(row) for row in rows]

    def list_group(self, tenant_id: str, transaction_id: str) -> List[Transaction]:
        """Parent and active siblings of the group containing transaction_id"""
        try:
            row = self._get_record(tenant_id, transaction_id)
            if row is None:
                return []
            root_id = row.parent_transaction_id or row.id
            rows = (
                self._active(tenant_id)
                .filter(
                    or_(
                        TransactionRecord.id == root_id,
                        TransactionRecord.parent_transaction_id == root_id,
                    )
                )
                .order_by(TransactionRecord.due_date)
                .all()
            )
        except SQLAlchemyError as e:
            raise PersistenceError(f"failed to list installment group: {e}") from e
        return [_to_transaction(r) for r in rows]

    def list_tag_ids(self, transaction_id: str) -> List[str]:
        try:
            rows = (
                self.db.query(TransactionTagRecord.tag_id)
                .join(TagRecord, TagRecord.id == TransactionTagRecord.tag_id)
                .filter(
                    TransactionTagRecord.transaction_id == transaction_id,
                    TagRecord.deactivated_at.is_(None),
                )
                .order_by(TagRecord.name)
                .all()
            )
        except SQLAlchemyError as e:
            raise PersistenceError(f"failed to list transaction tags: {e}") from e
        return [tag_id for (tag_id,) in rows]

    def create(self, transaction: Transaction, tag_ids: Sequence[str] = ()) -> Transaction:
        """Insert one transaction with its tag links"""
        parent, _ = self.create_group(transaction, [], tag_ids)
        return parent

    def create_group(
        self,
        parent: Transaction,
        siblings: Sequence[Transaction],
        tag_ids: Sequence[str] = (),
    ) -> Tuple[Transaction, List[Transaction]]:
        """
        Insert a parent, its installment siblings and tag links atomically.

        Siblings are linked to the parent through parent_transaction_id and
        every record of the group receives the same tags.
        """
        parent_row = _to_record(parent)
        sibling_rows = []
        for sibling in siblings:
            row = _to_record(sibling)
            row.parent_transaction_id = parent_row.id
            sibling_rows.append(row)

        try:
            self.db.add(parent_row)
            self.db.add_all(sibling_rows)
            for row in [parent_row, *sibling_rows]:
                self.db.add_all(TransactionTagRecord(transaction_id=row.id, tag_id=tag_id) for tag_id in tag_ids)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"failed to stage transaction group: {e}") from e

        self._commit("create transaction group")

        for row in [parent_row, *sibling_rows]:
            self.db.refresh(row)
        return _to_transaction(parent_row), [_to_transaction(row) for row in sibling_rows]

    def update(self, transaction: Transaction, tag_ids: Optional[Sequence[str]] = None) -> Optional[Transaction]:
        """
        Update one record's editable fields; None when it is not found.

        tag_ids=None keeps the current tag links, any sequence replaces them
        in the same unit of work as the field changes.
        """
        try:
            row = self._get_record(transaction.tenant_id, transaction.id)
        except SQLAlchemyError as e:
            raise PersistenceError(f"failed to load transaction {transaction.id}: {e}") from e
        if row is None:
            return None

        for name in UPDATABLE_FIELDS:
            setattr(row, name, getattr(transaction, name))
        row.updated_at = datetime.now(timezone.utc)

        if tag_ids is not None:
            try:
                self.db.query(TransactionTagRecord).filter(
                    TransactionTagRecord.transaction_id == row.id
                ).delete(synchronize_session="fetch")
                self.db.add_all(TransactionTagRecord(transaction_id=row.id, tag_id=tag_id) for tag_id in tag_ids)
            except SQLAlchemyError as e:
                self.db.rollback()
                raise PersistenceError(f"failed to stage tag links: {e}") from e

        self._commit("update transaction")
        self.db.refresh(row)
        return _to_transaction(row)

    def soft_delete(self, tenant_id: str, transaction_id: str, user_id: str) -> bool:
        """Mark a single record deactivated; False when nothing matched"""
        try:
            row = self._get_record(tenant_id, transaction_id)
        except SQLAlchemyError as e:
            raise PersistenceError(f"failed to load transaction {transaction_id}: {e}") from e
        if row is None:
            return False

        row.deactivated_at = datetime.now(timezone.utc)
        row.deactivated_by = user_id
        self._commit("delete transaction")
        return True
