"""Accounts, categories and tags - the tenant-owned entities transactions reference"""

from dataclasses import replace
from typing import Dict, List, Optional, Protocol
from fintrack_core.domain.exceptions import (
    InvalidReferenceError,
    MissingUserError,
    NotFoundError,
    ValidationError,
)
from fintrack_core.domain.models import Account, Category, Tag
from fintrack_core.domain.validation import validate_account, validate_category, validate_tag


class AccountStore(Protocol):
    def get_account(self, account_id: str, tenant_id: str) -> Optional[Account]: ...

    def list(self, tenant_id: str) -> List[Account]: ...

    def create(self, account: Account) -> Account: ...

    def update(self, account: Account) -> Optional[Account]: ...

    def soft_delete(self, tenant_id: str, account_id: str, user_id: str) -> bool: ...


class CategoryStore(Protocol):
    def get_category(self, category_id: str, tenant_id: str) -> Optional[Category]: ...

    def list(self, tenant_id: str) -> List[Category]: ...

    def create(self, category: Category) -> Category: ...

    def update(self, category: Category) -> Optional[Category]: ...

    def soft_delete(self, tenant_id: str, category_id: str, user_id: str) -> bool: ...


class TagStore(Protocol):
    def get_tag(self, tag_id: str, tenant_id: str) -> Optional[Tag]: ...

    def list(self, tenant_id: str) -> List[Tag]: ...

    def create(self, tag: Tag) -> Tag: ...

    def update(self, tag: Tag) -> Optional[Tag]: ...

    def soft_delete(self, tenant_id: str, tag_id: str, user_id: str) -> bool: ...


def _require_user(user_id: Optional[str]) -> str:
    if not user_id:
        raise MissingUserError()
    return user_id


def _raise_if_invalid(errors: Dict[str, str]) -> None:
    if errors:
        raise ValidationError(errors)


class AccountService:
    """Tenant-scoped account management"""

    def __init__(self, store: AccountStore):
        self.store = store

    def get(self, tenant_id: str, account_id: str) -> Account:
        account = self.store.get_account(account_id, tenant_id)
        if account is None:
            raise NotFoundError("account", account_id)
        return account

    def list(self, tenant_id: str) -> List[Account]:
        return self.store.list(tenant_id)

    def create(self, tenant_id: str, user_id: Optional[str], account: Account) -> Account:
        user_id = _require_user(user_id)
        account = replace(account, id=None, tenant_id=tenant_id, created_by=user_id, updated_by=user_id)
        _raise_if_invalid(validate_account(account))
        return self.store.create(account)

    def update(self, tenant_id: str, user_id: Optional[str], account_id: str, changes: Account) -> Account:
        """Replace every editable field of the account"""
        user_id = _require_user(user_id)
        existing = self.get(tenant_id, account_id)
        account = replace(
            existing,
            name=changes.name,
            initial_balance=changes.initial_balance,
            color=changes.color,
            icon=changes.icon,
            currency=changes.currency,
            type=changes.type,
            updated_by=user_id,
        )
        _raise_if_invalid(validate_account(account))

        updated = self.store.update(account)
        if updated is None:
            raise NotFoundError("account", account_id)
        return updated

    def delete(self, tenant_id: str, user_id: Optional[str], account_id: str) -> None:
        user_id = _require_user(user_id)
        if not self.store.soft_delete(tenant_id, account_id, user_id):
            raise NotFoundError("account", account_id)


class CategoryService:
    """
    Tenant-scoped category management.

    A category's type is fixed at creation. Parents must be active categories
    of the same tenant and may not form a cycle.
    """

    def __init__(self, store: CategoryStore):
        self.store = store

    def get(self, tenant_id: str, category_id: str) -> Category:
        category = self.store.get_category(category_id, tenant_id)
        if category is None:
            raise NotFoundError("category", category_id)
        return category

    def list(self, tenant_id: str) -> List[Category]:
        return self.store.list(tenant_id)

    def create(self, tenant_id: str, user_id: Optional[str], category: Category) -> Category:
        user_id = _require_user(user_id)
        category = replace(category, id=None, tenant_id=tenant_id, created_by=user_id, updated_by=user_id)
        _raise_if_invalid(validate_category(category))
        self._check_parent(category)
        return self.store.create(category)

    def update(self, tenant_id: str, user_id: Optional[str], category_id: str, changes: Category) -> Category:
        """Update name, parent, color and icon; the type is kept"""
        user_id = _require_user(user_id)
        existing = self.get(tenant_id, category_id)
        category = replace(
            existing,
            name=changes.name,
            parent_category_id=changes.parent_category_id,
            color=changes.color,
            icon=changes.icon,
            updated_by=user_id,
        )
        _raise_if_invalid(validate_category(category))
        self._check_parent(category)

        updated = self.store.update(category)
        if updated is None:
            raise NotFoundError("category", category_id)
        return updated

    def delete(self, tenant_id: str, user_id: Optional[str], category_id: str) -> None:
        user_id = _require_user(user_id)
        if not self.store.soft_delete(tenant_id, category_id, user_id):
            raise NotFoundError("category", category_id)

    def _check_parent(self, category: Category) -> None:
        parent_id = category.parent_category_id
        seen = set()
        while parent_id:
            if category.id and parent_id == category.id:
                raise ValidationError({"parent_category_id": "parent chain would form a cycle"})
            if parent_id in seen:
                break
            seen.add(parent_id)

            parent = self.store.get_category(parent_id, category.tenant_id)
            if parent is None:
                raise InvalidReferenceError(
                    "parent_category_id", "parent category does not belong to this tenant", parent_id
                )
            parent_id = parent.parent_category_id


class TagService:
    """Tenant-scoped tag management"""

    def __init__(self, store: TagStore):
        self.store = store

    def get(self, tenant_id: str, tag_id: str) -> Tag:
        tag = self.store.get_tag(tag_id, tenant_id)
        if tag is None:
            raise NotFoundError("tag", tag_id)
        return tag

    def list(self, tenant_id: str) -> List[Tag]:
        return self.store.list(tenant_id)

    def create(self, tenant_id: str, user_id: Optional[str], name: str) -> Tag:
        user_id = _require_user(user_id)
        tag = Tag(id=None, tenant_id=tenant_id, name=name, created_by=user_id, updated_by=user_id)
        _raise_if_invalid(validate_tag(tag))
        return self.store.create(tag)

    def rename(self, tenant_id: str, user_id: Optional[str], tag_id: str, name: str) -> Tag:
        user_id = _require_user(user_id)
        tag = replace(self.get(tenant_id, tag_id), name=name, updated_by=user_id)
        _raise_if_invalid(validate_tag(tag))

        updated = self.store.update(tag)
        if updated is None:
            raise NotFoundError("tag", tag_id)
        return updated

    def delete(self, tenant_id: str, user_id: Optional[str], tag_id: str) -> None:
        user_id = _require_user(user_id)
        if not self.store.soft_delete(tenant_id, tag_id, user_id):
            raise NotFoundError("tag", tag_id)
