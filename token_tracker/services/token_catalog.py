"""
Token catalog - resolves token ids and token addresses to TokenInfo and
renders the public token view.
"""

from typing import Dict, Iterable, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from token_tracker.models.token_info import TokenInfo
from token_tracker.schemas.tokens import TokenInfoView
from token_tracker.utils.address import AddressCodec, default_codec


logger = structlog.get_logger(__name__)

TOKEN_ID_DELIMITER = "_"


def is_token_id(token_id_or_addr: str) -> bool:
    """Token ids are ``<txid>_<vout>``; addresses never contain ``_``."""
    return TOKEN_ID_DELIMITER in token_id_or_addr


class TokenCatalog:
    """Lookup and rendering of token metadata."""

    def __init__(self, session: AsyncSession, codec: Optional[AddressCodec] = None):
        self.session = session
        self.codec = codec or default_codec
        self.logger = logger.bind(service="token_catalog")

    async def resolve(self, token_id_or_addr: Optional[str]) -> Optional[TokenInfo]:
        """
        Look up a token by id or by token address.

        Returns None when nothing matches or the address does not decode.
        """
        if not token_id_or_addr:
            return None

        if is_token_id(token_id_or_addr):
            condition = TokenInfo.token_id == token_id_or_addr
        else:
            token_pubkey = self.codec.address_to_public_key(token_id_or_addr)
            if not token_pubkey:
                self.logger.debug("Undecodable token address", token=token_id_or_addr)
                return None
            condition = TokenInfo.token_pubkey == token_pubkey

        result = await self.session.execute(select(TokenInfo).where(condition))
        return result.scalar_one_or_none()

    async def resolve_many_by_id(self, token_ids: Iterable[str]) -> Dict[str, TokenInfo]:
        """Batch lookup keyed by token id."""
        ids = set(token_ids)
        if not ids:
            return {}
        result = await self.session.execute(
            select(TokenInfo).where(TokenInfo.token_id.in_(ids))
        )
        return {info.token_id: info for info in result.scalars()}

    async def resolve_many_by_pubkey(self, pubkeys: Iterable[str]) -> Dict[str, TokenInfo]:
        """Batch lookup keyed by token pubkey."""
        keys = set(pubkeys)
        if not keys:
            return {}
        result = await self.session.execute(
            select(TokenInfo).where(TokenInfo.token_pubkey.in_(keys))
        )
        return {info.token_pubkey: info for info in result.scalars()}

    def render(self, token_info: Optional[TokenInfo]) -> Optional[TokenInfoView]:
        """Build the public view. ``None`` renders to ``None``."""
        if token_info is None:
            return None
        return TokenInfoView(
            token_id=token_info.token_id,
            name=token_info.name,
            symbol=token_info.symbol,
            decimals=token_info.decimals,
            token_pubkey=token_info.token_pubkey,
            minter_pubkey=token_info.minter_pubkey,
            genesis_txid=token_info.genesis_txid,
            reveal_txid=token_info.reveal_txid,
            reveal_height=token_info.reveal_height,
            token_addr=self.codec.public_key_to_address(token_info.token_pubkey),
            minter_addr=self.codec.public_key_to_address(token_info.minter_pubkey),
            info=token_info.raw_info,
        )
