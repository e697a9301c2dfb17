"""Upload endpoint.

Any ``POST`` under the root route stores the raw request body. The storage
key comes from the request path, the ``X-file-name`` header, or a generated
name, optionally prefixed by the ``X-file-path`` header.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from app.api.deps import get_ingest_service, log_request_headers, require_bearer_token
from app.app.services.ingest_service import IngestService, resolve_destination

router = APIRouter()


def _raw_request_path(request: Request) -> str:
    """Path as sent by the client, without percent-decoding."""
    raw_path = request.scope.get("raw_path")
    if not raw_path:
        return request.url.path
    return raw_path.decode("latin-1").split("?", 1)[0]


@router.post(
    "/{file_path:path}",
    response_class=PlainTextResponse,
    dependencies=[Depends(log_request_headers), Depends(require_bearer_token)],
)
async def receive_file(
    request: Request,
    service: IngestService = Depends(get_ingest_service),
) -> PlainTextResponse:
    data = await request.body()
    destination = resolve_destination(_raw_request_path(request), request.headers)
    # provider I/O is blocking
    key = await run_in_threadpool(service.store, destination, data)
    return PlainTextResponse(f"File stored successfully: {key}")
