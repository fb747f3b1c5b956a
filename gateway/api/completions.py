from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from gateway.api.deps import get_provider_client
from gateway.providers.client import ProviderClient
from gateway.providers.normalize import build_request
from gateway.schemas import CompletionRequest, CompletionResponse, ErrorResponse, ProviderStatusOut

router = APIRouter(prefix="/api", tags=["completions"])

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


@router.options("/completions")
def completions_preflight() -> Response:
    return Response(status_code=200, headers=PREFLIGHT_HEADERS)


@router.post(
    "/completions",
    response_model=CompletionResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def create_completion(
    payload: CompletionRequest,
    provider_client: ProviderClient = Depends(get_provider_client),
) -> CompletionResponse:
    result = await provider_client.send(build_request(payload))
    return CompletionResponse.model_validate(result.to_dict())


@router.get("/providers", response_model=list[ProviderStatusOut])
def list_providers(provider_client: ProviderClient = Depends(get_provider_client)) -> list[ProviderStatusOut]:
    return [ProviderStatusOut(**row) for row in provider_client.credential_status()]
