"""Adapter protocol: the two pure mappings every vendor implements."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from gateway.providers.types import CanonicalRequest, CanonicalResponse, OutboundRequest, Vendor


@runtime_checkable
class ProviderAdapter(Protocol):
    vendor: Vendor
    # Name of the Settings field holding this vendor's API key.
    credential_name: str

    def build_request(self, request: CanonicalRequest, api_key: str) -> OutboundRequest:
        """Translate a canonical request into the vendor's URL, headers and JSON body."""
        ...

    def parse_response(self, body: Any) -> CanonicalResponse:
        """Translate a successful vendor JSON body into a canonical response."""
        ...
