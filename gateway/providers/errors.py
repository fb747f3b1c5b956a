"""Error taxonomy shared by the adapters, the dispatcher and the HTTP layer.

Every failure crosses the dispatcher as a ``ProviderError`` carrying an
``ErrorKind``; it is only turned into text at the HTTP boundary.
"""

from __future__ import annotations

import asyncio
from enum import Enum

import httpx

VENDOR_MESSAGE_LIMIT = 500


class ErrorKind(str, Enum):
    UNSUPPORTED_VENDOR = "unsupported_vendor"
    UPSTREAM_REJECTED = "upstream_rejected"
    UPSTREAM_EMPTY_RESPONSE = "upstream_empty_response"
    TRANSPORT_FAILURE = "transport_failure"
    CONFIGURATION_MISSING = "configuration_missing"
    INVALID_REQUEST = "invalid_request"


_DEFAULT_MESSAGES = {
    ErrorKind.UNSUPPORTED_VENDOR: "Unsupported provider",
    ErrorKind.UPSTREAM_REJECTED: "Provider rejected the request",
    ErrorKind.UPSTREAM_EMPTY_RESPONSE: "Provider returned no usable content",
    ErrorKind.TRANSPORT_FAILURE: "Could not reach provider",
    ErrorKind.CONFIGURATION_MISSING: "Provider API key not configured",
    ErrorKind.INVALID_REQUEST: "Invalid request",
}


class ProviderError(Exception):
    def __init__(
        self,
        kind: ErrorKind,
        message: str | None = None,
        *,
        http_status: int | None = None,
        vendor_message: str | None = None,
        vendor: str | None = None,
        timeout: bool = False,
    ) -> None:
        super().__init__(message or _DEFAULT_MESSAGES[kind])
        self.kind = kind
        self.http_status = http_status
        self.vendor_message = vendor_message[:VENDOR_MESSAGE_LIMIT] if vendor_message else vendor_message
        self.vendor = vendor
        self.timeout = timeout

    @property
    def message(self) -> str:
        return str(self.args[0])

    @property
    def retryable(self) -> bool:
        if self.kind in {ErrorKind.TRANSPORT_FAILURE, ErrorKind.UPSTREAM_EMPTY_RESPONSE}:
            return True
        if self.kind == ErrorKind.UPSTREAM_REJECTED:
            return self.http_status is not None and (self.http_status >= 500 or self.http_status == 429)
        return False

    def http_status_code(self) -> int:
        """Status returned to our own callers at the HTTP boundary."""
        if self.kind in {ErrorKind.UNSUPPORTED_VENDOR, ErrorKind.INVALID_REQUEST}:
            return 400
        if self.kind == ErrorKind.CONFIGURATION_MISSING:
            return 500
        if self.kind == ErrorKind.TRANSPORT_FAILURE and self.timeout:
            return 504
        return 502

    def public_message(self) -> str:
        if self.vendor and self.kind != ErrorKind.UNSUPPORTED_VENDOR:
            status_note = f" (status={self.http_status})" if self.http_status is not None else ""
            return f"{self.vendor}: {self.message}{status_note}"
        return self.message

    def __repr__(self) -> str:
        return (
            f"ProviderError(kind={self.kind.value!r}, http_status={self.http_status!r}, "
            f"vendor={self.vendor!r}, message={self.message!r})"
        )


def wrap_transport_error(exc: BaseException, *, vendor: str | None = None) -> ProviderError:
    """Map an httpx transport-level exception into a TransportFailure."""
    if isinstance(exc, asyncio.CancelledError):
        raise exc
    if isinstance(exc, ProviderError):
        if exc.vendor is None:
            exc.vendor = vendor
        return exc

    timeout = isinstance(exc, httpx.TimeoutException)
    detail = f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__
    return ProviderError(
        ErrorKind.TRANSPORT_FAILURE,
        "Provider request timed out" if timeout else None,
        vendor_message=detail,
        vendor=vendor,
        timeout=timeout,
    )


def rejected(response: httpx.Response, *, vendor: str) -> ProviderError:
    body = (response.text or "").strip()
    return ProviderError(
        ErrorKind.UPSTREAM_REJECTED,
        http_status=response.status_code,
        vendor_message=body or None,
        vendor=vendor,
    )


def empty_response(detail: str, *, vendor: str | None = None) -> ProviderError:
    return ProviderError(ErrorKind.UPSTREAM_EMPTY_RESPONSE, vendor_message=detail, vendor=vendor)
