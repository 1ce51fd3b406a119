from typing import Annotated

from fastapi import APIRouter, Body, Request
from kink import di
from pydantic import BaseModel

from client_identity.domain.client import (
    ClientInfo,
    ClientInfoResolver,
    ClientPayload,
    IPBlocklist,
)

router = APIRouter(prefix='/client', tags=['client'])


class ClientInfoResponse(BaseModel):
    client: ClientInfo
    blocked: bool


async def _resolve(
    request: Request, payload: ClientPayload | None
) -> ClientInfoResponse:
    client = await di[ClientInfoResolver].get_client_info(request.headers, payload)

    return ClientInfoResponse(
        client=client, blocked=di[IPBlocklist].has_blocked_ip(client.ip)
    )


@router.get('')
async def get_client_info(request: Request) -> ClientInfoResponse:
    """Resolve the calling client from its request headers."""
    return await _resolve(request, None)


@router.post('')
async def post_client_info(
    request: Request, payload: Annotated[ClientPayload | None, Body()] = None
) -> ClientInfoResponse:
    """Resolve a client, letting the body override any detected value."""
    return await _resolve(request, payload)
