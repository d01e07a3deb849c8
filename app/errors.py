from __future__ import annotations
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    MISSING_ADDRESS = "missing_address"
    INVALID_ZIP_CODE = "invalid_zip_code"
    UNAUTHORIZED = "unauthorized"
    RATE_LIMITED = "rate_limited"
    NOT_FOUND = "not_found"
    UNREACHABLE = "unreachable"
    MALFORMED_PAYLOAD = "malformed_payload"
    PERSISTENCE = "persistence"
    UNEXPECTED = "unexpected"


# Outward HTTP status per kind. Provider credential problems are an operator
# fault, so they surface as 500 rather than 401.
STATUS_BY_KIND = {
    ErrorKind.MISSING_ADDRESS: 400,
    ErrorKind.INVALID_ZIP_CODE: 422,
    ErrorKind.UNAUTHORIZED: 500,
    ErrorKind.RATE_LIMITED: 503,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UNREACHABLE: 503,
    ErrorKind.MALFORMED_PAYLOAD: 500,
    ErrorKind.PERSISTENCE: 500,
    ErrorKind.UNEXPECTED: 500,
}

MESSAGE_BY_KIND = {
    ErrorKind.MISSING_ADDRESS: "Address is required",
    ErrorKind.INVALID_ZIP_CODE: "Invalid ZIP code",
    ErrorKind.UNAUTHORIZED: "Invalid API key",
    ErrorKind.RATE_LIMITED: "API rate limit exceeded",
    ErrorKind.NOT_FOUND: "Location not found",
    ErrorKind.UNREACHABLE: "Unable to connect to weather service",
    ErrorKind.MALFORMED_PAYLOAD: "Invalid response format from weather service",
    ErrorKind.PERSISTENCE: "An unexpected error occurred",
    ErrorKind.UNEXPECTED: "An unexpected error occurred",
}


class ForecastError(Exception):
    """
    Raised anywhere in the forecast path. `kind` decides the outward status;
    `detail` is for logs only.
    """

    def __init__(self, kind: ErrorKind, detail: Optional[str] = None):
        self.kind = kind
        self.detail = detail or MESSAGE_BY_KIND[kind]
        super().__init__(self.detail)

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]

    @property
    def public_message(self) -> str:
        return MESSAGE_BY_KIND[self.kind]
