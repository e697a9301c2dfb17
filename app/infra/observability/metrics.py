from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.requests import Request
from starlette.responses import Response

# Upload keys are free-form; label by route template, never by raw path
REQUESTS = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "route", "status"],
)

LATENCY = Histogram(
    "http_request_duration_seconds",
    "Request latency in seconds",
    ["method", "route"],
)

STORED_FILES = Counter(
    "ingest_files_total",
    "Uploads handed to the storage backend",
    ["backend", "outcome"],
)

STORED_BYTES = Counter(
    "ingest_bytes_total",
    "Bytes successfully written to the storage backend",
    ["backend"],
)


def metrics_endpoint(request: Request) -> Response:
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
