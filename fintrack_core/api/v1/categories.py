"""/v1/categories - tenant category management"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Request, Response

from fintrack_core.api.dependencies import get_category_service, get_request_id, get_tenant_id, get_user_id
from fintrack_core.api.v1.errors import domain_errors
from fintrack_core.api.v1.schemas import CategoryCreateRequest, CategoryResponse, CategoryUpdateRequest
from fintrack_core.domain.catalog import CategoryService
from fintrack_core.infrastructure.observability.logging import log_catalog_change
from fintrack_core.infrastructure.observability.metrics import record_catalog_change

router = APIRouter()


@router.post("/categories", response_model=CategoryResponse, status_code=201)
def create_category(
    request_body: CategoryCreateRequest,
    request: Request,
    tenant_id: str = Depends(get_tenant_id),
    user_id: Optional[str] = Depends(get_user_id),
    service: CategoryService = Depends(get_category_service),
):
    request_id = get_request_id(request)
    with domain_errors(request_id, tenant_id, "category"):
        category = service.create(tenant_id, user_id, request_body.to_domain(tenant_id, request_body.type.value))

    record_catalog_change("category", "created")
    log_catalog_change(request_id, tenant_id, "category", category.id, "created")
    return CategoryResponse.from_domain(category)


@router.get("/categories", response_model=List[CategoryResponse])
def list_categories(
    request: Request,
    tenant_id: str = Depends(get_tenant_id),
    service: CategoryService = Depends(get_category_service),
):
    with domain_errors(get_request_id(request), tenant_id, "category"):
        return [CategoryResponse.from_domain(c) for c in service.list(tenant_id)]


@router.get("/categories/{category_id}", response_model=CategoryResponse)
def get_category(
    category_id: str,
    request: Request,
    tenant_id: str = Depends(get_tenant_id),
    service: CategoryService = Depends(get_category_service),
):
    with domain_errors(get_request_id(request), tenant_id, "category"):
        return CategoryResponse.from_domain(service.get(tenant_id, category_id))


@router.put("/categories/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: str,
    request_body: CategoryUpdateRequest,
    request: Request,
    tenant_id: str = Depends(get_tenant_id),
    user_id: Optional[str] = Depends(get_user_id),
    service: CategoryService = Depends(get_category_service),
):
    """Rename, re-parent or restyle a category"""
    request_id = get_request_id(request)
    with domain_errors(request_id, tenant_id, "category"):
        category = service.update(tenant_id, user_id, category_id, request_body.to_domain(tenant_id))

    record_catalog_change("category", "updated")
    log_catalog_change(request_id, tenant_id, "category", category.id, "updated")
    return CategoryResponse.from_domain(category)


@router.delete("/categories/{category_id}", status_code=204)
def delete_category(
    category_id: str,
    request: Request,
    tenant_id: str = Depends(get_tenant_id),
    user_id: Optional[str] = Depends(get_user_id),
    service: CategoryService = Depends(get_category_service),
):
    request_id = get_request_id(request)
    with domain_errors(request_id, tenant_id, "category"):
        service.delete(tenant_id, user_id, category_id)

    record_catalog_change("category", "deleted")
    log_catalog_change(request_id, tenant_id, "category", category_id, "deleted")
    return Response(status_code=204)
