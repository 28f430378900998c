"""Dependency injection for FastAPI endpoints"""

from typing import Optional
from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session
from fintrack_core.domain.catalog import AccountService, CategoryService, TagService
from fintrack_core.domain.transactions import TransactionService
from fintrack_core.infrastructure.database.repositories import (
    AccountRepository,
    CategoryRepository,
    TagRepository,
    TransactionRepository,
)
from fintrack_core.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_tenant_id(x_tenant_id: str = Header(..., min_length=1)) -> str:
    """Tenant selected by the caller"""
    return x_tenant_id


def get_user_id(x_user_id: Optional[str] = Header(None)) -> Optional[str]:
    """Acting user resolved by the upstream identity layer"""
    return x_user_id


def get_transaction_repository(db: Session = Depends(get_db)) -> TransactionRepository:
    return TransactionRepository(db)


def get_transaction_service(
    db: Session = Depends(get_db),
    store: TransactionRepository = Depends(get_transaction_repository),
) -> TransactionService:
    """Wire the orchestrator to SQLAlchemy-backed collaborators"""
    return TransactionService(
        store=store,
        accounts=AccountRepository(db),
        categories=CategoryRepository(db),
        tags=TagRepository(db),
    )


def get_account_service(db: Session = Depends(get_db)) -> AccountService:
    return AccountService(AccountRepository(db))


def get_category_service(db: Session = Depends(get_db)) -> CategoryService:
    return CategoryService(CategoryRepository(db))


def get_tag_service(db: Session = Depends(get_db)) -> TagService:
    return TagService(TagRepository(db))
