"""
Token routes - metadata, supply, listings and per-owner token queries.
"""

from fastapi import APIRouter, Depends, Path

import structlog

from token_tracker.api.dependencies import get_page_window, get_token_service
from token_tracker.api.schemas.common import (
    PaginatedResponse,
    SuccessResponse,
    create_paginated_response,
    create_success_response,
)
from token_tracker.core.exceptions import TokenNotFoundError
from token_tracker.services.pagination import PageWindow
from token_tracker.services.token_service import TokenService


logger = structlog.get_logger(__name__)

router = APIRouter()

TokenParam = Path(..., description="Token id (<txid>_<vout>) or token address")
OwnerParam = Path(..., description="Owner address")


@router.get(
    "",
    response_model=PaginatedResponse,
    summary="List Tokens",
    description="Tokens in creation order with live supply and holder counts"
)
async def list_tokens(
    page: PageWindow = Depends(get_page_window),
    service: TokenService = Depends(get_token_service),
):
    result = await service.list_all_tokens(page.offset, page.limit)
    return create_paginated_response(
        data={
            "tokens": [t.to_public() for t in result["tokens"]],
            "trackerBlockHeight": result["tracker_block_height"],
        },
        total=result["total"],
        limit=page.limit,
        offset=page.offset,
    )


@router.get(
    "/ranked",
    response_model=PaginatedResponse,
    summary="Ranked Tokens",
    description="Tokens ranked by holder count from the statistics rollup"
)
async def ranked_tokens(
    page: PageWindow = Depends(get_page_window),
    service: TokenService = Depends(get_token_service),
):
    result = await service.get_token_list(page.offset, page.limit)
    return create_paginated_response(
        data={"tokens": [t.to_public() for t in result["tokens"]]},
        total=result["total"],
        limit=page.limit,
        offset=page.offset,
    )


@router.get("/{token_id_or_addr}", response_model=SuccessResponse, summary="Token Info")
async def get_token_info(
    token_id_or_addr: str = TokenParam,
    service: TokenService = Depends(get_token_service),
):
    token = await service.get_token_info(token_id_or_addr)
    if token is None:
        raise TokenNotFoundError(token_id_or_addr)
    return create_success_response(data=token.to_public())


@router.get("/{token_id_or_addr}/supply", response_model=SuccessResponse, summary="Token Supply")
async def get_token_supply(
    token_id_or_addr: str = TokenParam,
    service: TokenService = Depends(get_token_service),
):
    supply = await service.get_token_supply(token_id_or_addr)
    if supply is None:
        raise TokenNotFoundError(token_id_or_addr)
    return create_success_response(data={"supply": supply})


@router.get(
    "/{token_id_or_addr}/addresses/{owner_addr}/utxos",
    response_model=PaginatedResponse,
    summary="Owner Token UTXOs"
)
async def get_token_utxos(
    token_id_or_addr: str = TokenParam,
    owner_addr: str = OwnerParam,
    page: PageWindow = Depends(get_page_window),
    service: TokenService = Depends(get_token_service),
):
    result = await service.get_token_utxos_by_owner_address(
        token_id_or_addr, owner_addr, page.offset, page.limit
    )
    return create_paginated_response(
        data={
            "utxos": [u.to_public() for u in result["utxos"]],
            "trackerBlockHeight": result["tracker_block_height"],
        },
        total=result["total"],
        limit=page.limit,
        offset=page.offset,
    )


@router.get(
    "/{token_id_or_addr}/addresses/{owner_addr}/balance",
    response_model=SuccessResponse,
    summary="Owner Token Balance"
)
async def get_token_balance(
    token_id_or_addr: str = TokenParam,
    owner_addr: str = OwnerParam,
    service: TokenService = Depends(get_token_service),
):
    result = await service.get_token_balance_by_owner_address(token_id_or_addr, owner_addr)
    return create_success_response(data={
        **result["balance"].to_public(),
        "trackerBlockHeight": result["tracker_block_height"],
    })


@router.get(
    "/{token_id_or_addr}/addresses/{owner_addr}/history",
    response_model=PaginatedResponse,
    summary="Owner Token History"
)
async def get_token_history(
    token_id_or_addr: str = TokenParam,
    owner_addr: str = OwnerParam,
    page: PageWindow = Depends(get_page_window),
    service: TokenService = Depends(get_token_service),
):
    result = await service.get_token_tx_history_by_owner_address(
        token_id_or_addr, owner_addr, page.offset, page.limit
    )
    return create_paginated_response(
        data={
            "history": result["history"],
            "trackerBlockHeight": result["tracker_block_height"],
        },
        total=result["total"],
        limit=page.limit,
        offset=page.offset,
    )
