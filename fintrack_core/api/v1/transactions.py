"""/v1/transactions - create, read, update and soft-delete transactions"""

import time
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request, Response

from fintrack_core.api.v1.schemas import (
    TransactionCreateRequest,
    TransactionResponse,
    TransactionUpdateRequest,
)
from fintrack_core.api.dependencies import (
    get_request_id,
    get_tenant_id,
    get_transaction_repository,
    get_transaction_service,
    get_user_id,
)
from fintrack_core.api.v1.errors import domain_errors
from fintrack_core.domain.models import Transaction, TransactionFilter, TransactionType
from fintrack_core.domain.transactions import TransactionService
from fintrack_core.infrastructure.database.repositories import TransactionRepository
from fintrack_core.infrastructure.observability.logging import log_transaction_created
from fintrack_core.infrastructure.observability.metrics import record_transaction_created

router = APIRouter()


def to_response(transaction: Transaction, store: TransactionRepository) -> TransactionResponse:
    return TransactionResponse(
        id=transaction.id,
        parent_transaction_id=transaction.parent_transaction_id,
        tenant_id=transaction.tenant_id,
        from_account_id=transaction.from_account_id,
        to_account_id=transaction.to_account_id,
        currency=transaction.currency,
        amount=transaction.amount,
        accrual_month=transaction.accrual_month,
        transaction_type=transaction.transaction_type,
        category_id=transaction.category_id,
        comments=transaction.comments,
        due_date=transaction.due_date,
        payment_date=transaction.payment_date,
        tag_ids=store.list_tag_ids(transaction.id),
        created_at=transaction.created_at,
        created_by=transaction.created_by,
        updated_at=transaction.updated_at,
        updated_by=transaction.updated_by,
    )


@router.post("/transactions", response_model=TransactionResponse, status_code=201)
def create_transaction(
    request_body: TransactionCreateRequest,
    request: Request,
    tenant_id: str = Depends(get_tenant_id),
    user_id: Optional[str] = Depends(get_user_id),
    service: TransactionService = Depends(get_transaction_service),
    store: TransactionRepository = Depends(get_transaction_repository),
):
    """
    Create a transaction, or an installment group when installments > 1.

    Split mode divides the amount across monthly installments; recurring mode
    repeats it. The response is the installment-1 parent record.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    with domain_errors(request_id, tenant_id, "transaction"):
        parent = service.create(
            tenant_id,
            user_id,
            request_body.to_domain(),
            tag_ids=request_body.tag_ids,
            installment_count=request_body.installments,
            is_recurring=request_body.is_recurring,
        )
        response = to_response(parent, store)

    duration_ms = (time.time() - start_time) * 1000
    record_transaction_created(request_body.installments, request_body.is_recurring)
    log_transaction_created(
        request_id, tenant_id, parent.id, request_body.installments, request_body.is_recurring, duration_ms
    )
    return response


@router.get("/transactions", response_model=List[TransactionResponse])
def list_transactions(
    request: Request,
    accrual_month: Optional[str] = Query(None, min_length=6, max_length=6, description="YYYYMM"),
    account_id: Optional[str] = Query(None, description="Source account"),
    transaction_type: Optional[TransactionType] = Query(None),
    tenant_id: str = Depends(get_tenant_id),
    service: TransactionService = Depends(get_transaction_service),
    store: TransactionRepository = Depends(get_transaction_repository),
):
    """List active transactions of the tenant, optionally filtered"""
    filters = TransactionFilter(
        accrual_month=accrual_month,
        account_id=account_id,
        transaction_type=transaction_type.value if transaction_type else None,
    )
    with domain_errors(get_request_id(request), tenant_id, "transaction"):
        return [to_response(t, store) for t in service.list(tenant_id, filters)]


@router.get("/transactions/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: str,
    request: Request,
    tenant_id: str = Depends(get_tenant_id),
    service: TransactionService = Depends(get_transaction_service),
    store: TransactionRepository = Depends(get_transaction_repository),
):
    with domain_errors(get_request_id(request), tenant_id, "transaction"):
        return to_response(service.get(tenant_id, transaction_id), store)


@router.get("/transactions/{transaction_id}/installments", response_model=List[TransactionResponse])
def get_installment_group(
    transaction_id: str,
    request: Request,
    tenant_id: str = Depends(get_tenant_id),
    service: TransactionService = Depends(get_transaction_service),
    store: TransactionRepository = Depends(get_transaction_repository),
):
    """Parent and siblings of the installment group containing the transaction"""
    with domain_errors(get_request_id(request), tenant_id, "transaction"):
        return [to_response(t, store) for t in service.list_group(tenant_id, transaction_id)]


@router.put("/transactions/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: str,
    request_body: TransactionUpdateRequest,
    request: Request,
    tenant_id: str = Depends(get_tenant_id),
    user_id: Optional[str] = Depends(get_user_id),
    service: TransactionService = Depends(get_transaction_service),
    store: TransactionRepository = Depends(get_transaction_repository),
):
    """Update a single record; other installments of its group are unchanged"""
    with domain_errors(get_request_id(request), tenant_id, "transaction"):
        updated = service.update(
            tenant_id,
            user_id,
            transaction_id,
            request_body.to_domain(),
            tag_ids=request_body.tag_ids,
        )
        return to_response(updated, store)


@router.delete("/transactions/{transaction_id}", status_code=204)
def delete_transaction(
    transaction_id: str,
    request: Request,
    tenant_id: str = Depends(get_tenant_id),
    user_id: Optional[str] = Depends(get_user_id),
    service: TransactionService = Depends(get_transaction_service),
):
    """Soft-delete a single record"""
    with domain_errors(get_request_id(request), tenant_id, "transaction"):
        service.delete(tenant_id, user_id, transaction_id)
    return Response(status_code=204)
