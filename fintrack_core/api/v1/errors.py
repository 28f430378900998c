"""Translation of domain exceptions into HTTP errors"""

import logging
from contextlib import contextmanager
from fastapi import HTTPException
from fintrack_core.domain.exceptions import (
    InvalidArgumentError,
    InvalidReferenceError,
    MissingUserError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from fintrack_core.infrastructure.observability.logging import log_rejection
from fintrack_core.infrastructure.observability.metrics import record_rejection


@contextmanager
def domain_errors(request_id: str, tenant_id: str, entity: str):
    """Map domain exceptions to status codes, counting and logging rejections"""
    try:
        yield
    except MissingUserError as e:
        record_rejection(entity, "argument")
        raise HTTPException(status_code=401, detail=str(e))
    except InvalidArgumentError as e:
        record_rejection(entity, "argument")
        log_rejection(request_id, tenant_id, entity, "argument", str(e))
        raise HTTPException(status_code=400, detail=str(e))
    except ValidationError as e:
        record_rejection(entity, "validation")
        log_rejection(request_id, tenant_id, entity, "validation", str(e))
        raise HTTPException(status_code=422, detail={"errors": e.errors})
    except InvalidReferenceError as e:
        record_rejection(entity, "reference")
        log_rejection(request_id, tenant_id, entity, "reference", str(e))
        raise HTTPException(status_code=404, detail={"field": e.field, "message": str(e)})
    except NotFoundError as e:
        record_rejection(entity, "not_found")
        raise HTTPException(status_code=404, detail=str(e))
    except PersistenceError as e:
        record_rejection(entity, "persistence")
        logging.error(f"Persistence error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Database unavailable")
    except HTTPException:
        raise
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
