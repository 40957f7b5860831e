"""
Public views of tracker records.

Each view lists its fields explicitly; storage-only columns such as the
bookkeeping timestamps have no counterpart here and cannot leak out.
Amounts are decimal strings.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PublicView(BaseModel):
    """Base for camelCase public views."""
    model_config = ConfigDict(populate_by_name=True)

    def to_public(self, **kwargs) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, **kwargs)


class TokenInfoView(PublicView):
    """Public token metadata."""
    token_id: str = Field(alias="tokenId")
    name: str
    symbol: str
    decimals: int
    token_pubkey: str = Field(alias="tokenPubKey")
    minter_pubkey: str = Field(alias="minterPubKey")
    genesis_txid: str = Field(alias="genesisTxid")
    reveal_txid: str = Field(alias="revealTxid")
    reveal_height: int = Field(alias="revealHeight")
    token_addr: Optional[str] = Field(default=None, alias="tokenAddr")
    minter_addr: Optional[str] = Field(default=None, alias="minterAddr")
    info: Optional[Dict[str, Any]] = None


class TokenListEntry(TokenInfoView):
    """Token metadata with supply and holder figures."""
    supply: str
    holders: int


class UtxoRef(PublicView):
    txid: str = Field(alias="txId")
    output_index: int = Field(alias="outputIndex")
    script: str
    satoshis: str


class UtxoState(PublicView):
    address: str
    amount: str


class UtxoView(PublicView):
    """An unspent output with its transaction's per-output state hashes."""
    utxo: UtxoRef
    txo_state_hashes: List[str] = Field(alias="txoStateHashes")
    state: Optional[UtxoState] = None

    def to_public(self, **kwargs) -> Dict[str, Any]:
        # Outputs without token state carry no ``state`` key at all
        return self.model_dump(by_alias=True, exclude_none=True, **kwargs)


class TokenBalanceView(PublicView):
    token_id: Optional[str] = Field(alias="tokenId")
    confirmed: str
