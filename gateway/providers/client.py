from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from gateway.core.settings import Settings, get_settings
from gateway.providers.anthropic import AnthropicAdapter
from gateway.providers.base import ProviderAdapter
from gateway.providers.errors import ErrorKind, ProviderError, empty_response, rejected, wrap_transport_error
from gateway.providers.google import GoogleAdapter
from gateway.providers.openai import OpenAIAdapter
from gateway.providers.types import CanonicalRequest, CanonicalResponse, Vendor

logger = logging.getLogger(__name__)


def build_adapters(settings: Settings) -> dict[Vendor, ProviderAdapter]:
    return {
        Vendor.OPENAI: OpenAIAdapter(base_url=settings.openai_base_url),
        Vendor.ANTHROPIC: AnthropicAdapter(
            base_url=settings.anthropic_base_url,
            api_version=settings.anthropic_version,
        ),
        Vendor.GOOGLE: GoogleAdapter(base_url=settings.google_base_url),
    }


class ProviderClient:
    """Single entry point: canonical request in, canonical response out.

    One outbound call per ``send``; no retries, fan-out or caching. Failures
    are raised as ``ProviderError`` with a kind from ``ErrorKind``.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
        adapters: dict[Vendor, ProviderAdapter] | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.http_client = http_client
        self.adapters = adapters if adapters is not None else build_adapters(self.settings)

    def adapter_for(self, vendor: str) -> ProviderAdapter:
        try:
            key = Vendor(vendor)
        except ValueError:
            raise ProviderError(ErrorKind.UNSUPPORTED_VENDOR, f"Unsupported provider: {vendor}") from None
        adapter = self.adapters.get(key)
        if adapter is None:
            raise ProviderError(ErrorKind.UNSUPPORTED_VENDOR, f"Unsupported provider: {vendor}")
        return adapter

    def credential_status(self) -> list[dict[str, Any]]:
        return [
            {"vendor": vendor.value, "configured": bool(self._resolve_api_key(adapter))}
            for vendor, adapter in self.adapters.items()
        ]

    async def send(self, request: CanonicalRequest, *, timeout_s: float | None = None) -> CanonicalResponse:
        adapter = self.adapter_for(request.vendor)
        vendor = adapter.vendor.value
        if not request.messages:
            raise ProviderError(ErrorKind.INVALID_REQUEST, "messages must not be empty", vendor=vendor)

        api_key = self._resolve_api_key(adapter)
        if not api_key:
            raise ProviderError(
                ErrorKind.CONFIGURATION_MISSING,
                f"{adapter.credential_name.upper()} is not configured",
                vendor=vendor,
            )

        outbound = adapter.build_request(request, api_key)
        timeout = timeout_s if timeout_s is not None else self.settings.request_timeout_seconds
        logger.info("Dispatching %s request model=%s messages=%d", vendor, request.model, len(request.messages))

        started = time.perf_counter()
        try:
            response = await self._post(outbound.url, outbound.headers, outbound.body, timeout)
        except httpx.HTTPError as exc:
            error = wrap_transport_error(exc, vendor=vendor)
            self._log_failure(error, request)
            raise error from exc
        latency_ms = int((time.perf_counter() - started) * 1000)

        if not response.is_success:
            error = rejected(response, vendor=vendor)
            self._log_failure(error, request)
            raise error

        try:
            payload = response.json()
        except ValueError as exc:
            error = empty_response("response body is not valid JSON", vendor=vendor)
            self._log_failure(error, request)
            raise error from exc

        try:
            result = adapter.parse_response(payload)
        except ProviderError as error:
            self._log_failure(error, request)
            raise
        except (AttributeError, LookupError, TypeError) as exc:
            error = empty_response(f"response body has an unexpected shape: {exc}", vendor=vendor)
            self._log_failure(error, request)
            raise error from exc

        logger.info(
            "%s responded model=%s latency_ms=%d total_tokens=%d",
            vendor,
            request.model,
            latency_ms,
            result.usage.total_tokens,
        )
        return result

    async def _post(self, url: str, headers: dict[str, str], body: dict[str, Any], timeout: float) -> httpx.Response:
        if self.http_client is not None:
            return await self.http_client.post(url, headers=headers, json=body, timeout=timeout)
        async with httpx.AsyncClient(timeout=timeout) as client:
            return await client.post(url, headers=headers, json=body)

    def _resolve_api_key(self, adapter: ProviderAdapter) -> str | None:
        value = getattr(self.settings, adapter.credential_name, None)
        return value or None

    def _log_failure(self, error: ProviderError, request: CanonicalRequest) -> None:
        logger.warning(
            "%s request failed kind=%s status=%s model=%s detail=%s",
            error.vendor,
            error.kind.value,
            error.http_status,
            request.model,
            error.vendor_message,
        )
