from .ingest_service import (
    FILENAME_HEADER,
    FILEPATH_HEADER,
    IngestService,
    ResolvedDestination,
    resolve_destination,
)

__all__ = [
    "FILENAME_HEADER",
    "FILEPATH_HEADER",
    "IngestService",
    "ResolvedDestination",
    "resolve_destination",
]
