"""Health & Readiness Probes - liveness and readiness endpoints for orchestration.

Invariants:
    - GET /_health/ always returns 200 if process is up (liveness)
    - GET /_health/ready returns 503 if any domain root is missing (readiness)

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
    - "/_health" prefix: underscore paths are never produced by the id generators
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.api.routes.documents import get_document_store
from app.services.document_store import DocumentStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/_health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "signed-docstore",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(store: DocumentStore = Depends(get_document_store)):
    """Readiness probe - every domain root must be a directory."""
    missing = store.missing_roots()
    if missing:
        logger.warning(f"Not ready, missing domain roots: {missing}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "domain_root_missing",
                "missing": [domain.value for domain in missing],
            },
        )
    return {
        "status": "ready",
        "checks": {domain.value: "healthy" for domain in store.stores},
    }
