"""/v1/tags - tenant tag management"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Request, Response

from fintrack_core.api.dependencies import get_request_id, get_tag_service, get_tenant_id, get_user_id
from fintrack_core.api.v1.errors import domain_errors
from fintrack_core.api.v1.schemas import TagRequest, TagResponse
from fintrack_core.domain.catalog import TagService
from fintrack_core.infrastructure.observability.logging import log_catalog_change
from fintrack_core.infrastructure.observability.metrics import record_catalog_change

router = APIRouter()


@router.post("/tags", response_model=TagResponse, status_code=201)
def create_tag(
    request_body: TagRequest,
    request: Request,
    tenant_id: str = Depends(get_tenant_id),
    user_id: Optional[str] = Depends(get_user_id),
    service: TagService = Depends(get_tag_service),
):
    request_id = get_request_id(request)
    with domain_errors(request_id, tenant_id, "tag"):
        tag = service.create(tenant_id, user_id, request_body.name)

    record_catalog_change("tag", "created")
    log_catalog_change(request_id, tenant_id, "tag", tag.id, "created")
    return TagResponse.from_domain(tag)


@router.get("/tags", response_model=List[TagResponse])
def list_tags(
    request: Request,
    tenant_id: str = Depends(get_tenant_id),
    service: TagService = Depends(get_tag_service),
):
    with domain_errors(get_request_id(request), tenant_id, "tag"):
        return [TagResponse.from_domain(t) for t in service.list(tenant_id)]


@router.get("/tags/{tag_id}", response_model=TagResponse)
def get_tag(
    tag_id: str,
    request: Request,
    tenant_id: str = Depends(get_tenant_id),
    service: TagService = Depends(get_tag_service),
):
    with domain_errors(get_request_id(request), tenant_id, "tag"):
        return TagResponse.from_domain(service.get(tenant_id, tag_id))


@router.put("/tags/{tag_id}", response_model=TagResponse)
def rename_tag(
    tag_id: str,
    request_body: TagRequest,
    request: Request,
    tenant_id: str = Depends(get_tenant_id),
    user_id: Optional[str] = Depends(get_user_id),
    service: TagService = Depends(get_tag_service),
):
    request_id = get_request_id(request)
    with domain_errors(request_id, tenant_id, "tag"):
        tag = service.rename(tenant_id, user_id, tag_id, request_body.name)

    record_catalog_change("tag", "updated")
    log_catalog_change(request_id, tenant_id, "tag", tag.id, "updated")
    return TagResponse.from_domain(tag)


@router.delete("/tags/{tag_id}", status_code=204)
def delete_tag(
    tag_id: str,
    request: Request,
    tenant_id: str = Depends(get_tenant_id),
    user_id: Optional[str] = Depends(get_user_id),
    service: TagService = Depends(get_tag_service),
):
    """Soft-delete a tag; it disappears from every transaction's tag ids"""
    request_id = get_request_id(request)
    with domain_errors(request_id, tenant_id, "tag"):
        service.delete(tenant_id, user_id, tag_id)

    record_catalog_change("tag", "deleted")
    log_catalog_change(request_id, tenant_id, "tag", tag_id, "deleted")
    return Response(status_code=204)
