from fastapi import Request

from gateway.providers.client import ProviderClient


def get_provider_client(request: Request) -> ProviderClient:
    return request.app.state.provider_client
