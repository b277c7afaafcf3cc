"""Document Routes - catch-all GET/POST/PUT over the three storage domains.

Invariants:
    - Routes never contain storage logic (delegate to resolver/mutator)
    - Filesystem work runs on the threadpool; the body is read on the event loop
    - PUT success is always 202 Accepted with the new ETag and an empty body
    - 304 responses carry no body and no ETag

Design Decisions:
    - Services return Outcome dataclasses; _to_response is the only place that
      builds responses (pure match-case dispatch)
    - Registered last in main.py so /_health is not shadowed
"""

import logging

from fastapi import APIRouter, Depends, Header, Request, Response, status
from starlette.concurrency import run_in_threadpool

from app.core.outcomes import Content, Created, NotModified, Outcome, Redirect, Updated
from app.services.document_store import DocumentStore

logger = logging.getLogger(__name__)
router = APIRouter(tags=["documents"])

PUT_SUCCESS_STATUS = status.HTTP_202_ACCEPTED


def get_document_store(request: Request) -> DocumentStore:
    return request.app.state.document_store


@router.get("/{path:path}")
async def get_resource(
    path: str,
    request: Request,
    if_none_match: str | None = Header(None),
    store: DocumentStore = Depends(get_document_store),
):
    """Serve a file, a listing, or a redirect."""
    outcome = await run_in_threadpool(
        store.resolver.resolve, "/" + path, request.url.query, if_none_match,
    )
    return _to_response(outcome)


@router.post("/{path:path}")
async def create_resource(
    path: str,
    request: Request,
    content_type: str | None = Header(None),
    user_id: str | None = Header(None),
    store: DocumentStore = Depends(get_document_store),
):
    """Create a child resource in a user domain directory."""
    body = await request.body()
    outcome = await run_in_threadpool(
        store.mutator.create, "/" + path, content_type, body, user_id,
    )
    return _to_response(outcome)


@router.put("/{path:path}")
async def update_resource(
    path: str,
    request: Request,
    signature: str | None = Header(None),
    if_match: str | None = Header(None),
    store: DocumentStore = Depends(get_document_store),
):
    """Overwrite a user domain file; requires the owner's signature."""
    body = await request.body()
    outcome = await run_in_threadpool(
        store.mutator.update, "/" + path, body, signature, if_match,
    )
    return _to_response(outcome)


def _to_response(outcome: Outcome) -> Response:
    match outcome:
        case Content(body=body, media_type=media_type, etag=etag):
            headers = {"ETag": etag} if etag else None
            return Response(content=body, media_type=media_type, headers=headers)
        case Redirect(location=location, status_code=code):
            return Response(status_code=code, headers={"Location": location})
        case NotModified():
            return Response(status_code=status.HTTP_304_NOT_MODIFIED)
        case Created(resource_id=resource_id, location=location):
            return Response(
                status_code=status.HTTP_201_CREATED,
                headers={"Id": resource_id, "Location": location},
            )
        case Updated(etag=etag):
            return Response(status_code=PUT_SUCCESS_STATUS, headers={"ETag": etag})
    raise TypeError(f"Unhandled outcome: {outcome!r}")
