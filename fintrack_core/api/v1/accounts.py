"""/v1/accounts - tenant account management"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Request, Response

from fintrack_core.api.dependencies import get_account_service, get_request_id, get_tenant_id, get_user_id
from fintrack_core.api.v1.errors import domain_errors
from fintrack_core.api.v1.schemas import AccountRequest, AccountResponse
from fintrack_core.domain.catalog import AccountService
from fintrack_core.infrastructure.observability.logging import log_catalog_change
from fintrack_core.infrastructure.observability.metrics import record_catalog_change

router = APIRouter()


@router.post("/accounts", response_model=AccountResponse, status_code=201)
def create_account(
    request_body: AccountRequest,
    request: Request,
    tenant_id: str = Depends(get_tenant_id),
    user_id: Optional[str] = Depends(get_user_id),
    service: AccountService = Depends(get_account_service),
):
    request_id = get_request_id(request)
    with domain_errors(request_id, tenant_id, "account"):
        account = service.create(tenant_id, user_id, request_body.to_domain(tenant_id))

    record_catalog_change("account", "created")
    log_catalog_change(request_id, tenant_id, "account", account.id, "created")
    return AccountResponse.from_domain(account)


@router.get("/accounts", response_model=List[AccountResponse])
def list_accounts(
    request: Request,
    tenant_id: str = Depends(get_tenant_id),
    service: AccountService = Depends(get_account_service),
):
    """Active accounts of the tenant, by name"""
    with domain_errors(get_request_id(request), tenant_id, "account"):
        return [AccountResponse.from_domain(a) for a in service.list(tenant_id)]


@router.get("/accounts/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: str,
    request: Request,
    tenant_id: str = Depends(get_tenant_id),
    service: AccountService = Depends(get_account_service),
):
    with domain_errors(get_request_id(request), tenant_id, "account"):
        return AccountResponse.from_domain(service.get(tenant_id, account_id))


@router.put("/accounts/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: str,
    request_body: AccountRequest,
    request: Request,
    tenant_id: str = Depends(get_tenant_id),
    user_id: Optional[str] = Depends(get_user_id),
    service: AccountService = Depends(get_account_service),
):
    request_id = get_request_id(request)
    with domain_errors(request_id, tenant_id, "account"):
        account = service.update(tenant_id, user_id, account_id, request_body.to_domain(tenant_id))

    record_catalog_change("account", "updated")
    log_catalog_change(request_id, tenant_id, "account", account.id, "updated")
    return AccountResponse.from_domain(account)


@router.delete("/accounts/{account_id}", status_code=204)
def delete_account(
    account_id: str,
    request: Request,
    tenant_id: str = Depends(get_tenant_id),
    user_id: Optional[str] = Depends(get_user_id),
    service: AccountService = Depends(get_account_service),
):
    """Soft-delete an account; existing transactions keep referencing it"""
    request_id = get_request_id(request)
    with domain_errors(request_id, tenant_id, "account"):
        service.delete(tenant_id, user_id, account_id)

    record_catalog_change("account", "deleted")
    log_catalog_change(request_id, tenant_id, "account", account_id, "deleted")
    return Response(status_code=204)
