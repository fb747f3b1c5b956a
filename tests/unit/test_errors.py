from __future__ import annotations

import asyncio

import httpx
import pytest

from gateway.providers.errors import ErrorKind, ProviderError, rejected, wrap_transport_error


def test_timeout_maps_to_transport_failure() -> None:
    err = wrap_transport_error(httpx.ReadTimeout("timed out"), vendor="openai")
    assert err.kind == ErrorKind.TRANSPORT_FAILURE
    assert err.timeout is True
    assert err.retryable is True
    assert err.http_status_code() == 504


def test_connect_error_maps_to_transport_failure() -> None:
    err = wrap_transport_error(httpx.ConnectError("connection refused"), vendor="google")
    assert err.kind == ErrorKind.TRANSPORT_FAILURE
    assert err.timeout is False
    assert err.http_status_code() == 502
    assert "ConnectError" in (err.vendor_message or "")


def test_existing_provider_error_is_enriched_not_replaced() -> None:
    base = ProviderError(ErrorKind.UPSTREAM_EMPTY_RESPONSE)
    wrapped = wrap_transport_error(base, vendor="anthropic")
    assert wrapped is base
    assert wrapped.vendor == "anthropic"


def test_cancellation_is_not_wrapped() -> None:
    with pytest.raises(asyncio.CancelledError):
        wrap_transport_error(asyncio.CancelledError(), vendor="openai")


def test_rejected_preserves_status_and_body() -> None:
    response = httpx.Response(500, text="upstream exploded")
    err = rejected(response, vendor="openai")
    assert err.kind == ErrorKind.UPSTREAM_REJECTED
    assert err.http_status == 500
    assert err.vendor_message == "upstream exploded"
    assert err.retryable is True


@pytest.mark.parametrize(("status", "retryable"), [(400, False), (401, False), (429, True), (503, True)])
def test_rejected_retry_policy(status: int, retryable: bool) -> None:
    assert rejected(httpx.Response(status), vendor="openai").retryable is retryable


def test_vendor_message_is_truncated() -> None:
    err = ProviderError(ErrorKind.UPSTREAM_REJECTED, vendor_message="x" * 2000)
    assert len(err.vendor_message or "") == 500


@pytest.mark.parametrize(
    ("kind", "status"),
    [
        (ErrorKind.UNSUPPORTED_VENDOR, 400),
        (ErrorKind.INVALID_REQUEST, 400),
        (ErrorKind.CONFIGURATION_MISSING, 500),
        (ErrorKind.UPSTREAM_REJECTED, 502),
        (ErrorKind.UPSTREAM_EMPTY_RESPONSE, 502),
        (ErrorKind.TRANSPORT_FAILURE, 502),
    ],
)
def test_boundary_status_mapping(kind: ErrorKind, status: int) -> None:
    assert ProviderError(kind).http_status_code() == status


def test_public_message_hides_vendor_body() -> None:
    err = ProviderError(ErrorKind.UPSTREAM_REJECTED, http_status=401, vendor_message="invalid key sk-123", vendor="openai")
    assert err.public_message() == "openai: Provider rejected the request (status=401)"
