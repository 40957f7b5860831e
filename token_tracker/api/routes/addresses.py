"""
Address routes - everything an owner holds across tokens.
"""

from fastapi import APIRouter, Depends, Path

from token_tracker.api.dependencies import get_token_service
from token_tracker.api.schemas.common import SuccessResponse, create_success_response
from token_tracker.services.token_service import TokenService


router = APIRouter()


@router.get("/{owner_addr}/balances", response_model=SuccessResponse, summary="Owner Balances")
async def get_owner_balances(
    owner_addr: str = Path(..., description="Owner address"),
    service: TokenService = Depends(get_token_service),
):
    result = await service.get_token_balances_by_owner_address(owner_addr)
    return create_success_response(data={
        "balances": [b.to_public() for b in result["balances"]],
        "trackerBlockHeight": result["tracker_block_height"],
    })
