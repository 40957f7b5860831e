"""
Address codec.

Converts between human-facing segwit addresses and the raw key material
stored by the indexer. Decoding never raises: malformed input yields
``None`` and callers short-circuit to an empty result.
"""

from typing import Optional, Protocol

import bech32
import structlog

from token_tracker.core.config import settings


logger = structlog.get_logger(__name__)

TAPROOT_WITNESS_VERSION = 1
XONLY_PUBKEY_LENGTH = 32
PUBKEY_HASH_LENGTH = 20


class AddressCodec(Protocol):
    """Collaborator interface used by the query core."""

    def address_to_public_key(self, address: str) -> Optional[str]:
        ...

    def public_key_to_address(self, pubkey: str) -> Optional[str]:
        ...

    def owner_address_to_hash(self, address: str) -> Optional[str]:
        ...


class Bech32AddressCodec:
    """
    Segwit codec for token and owner addresses.

    Token and minter addresses are taproot (witness v1, bech32m) addresses
    whose 32-byte program is the x-only public key. Owner addresses may be
    P2WPKH (20-byte program) or P2TR; the owner hash is the hex program.
    """

    def __init__(self, hrp: Optional[str] = None):
        self.hrp = hrp or settings.network

    def _decode(self, address: Optional[str]):
        if not address or not isinstance(address, str):
            return None, None
        try:
            witver, witprog = bech32.decode(self.hrp, address)
        except (ValueError, TypeError) as e:
            logger.debug("Address decode failed", address=address, error=str(e))
            return None, None
        if witver is None:
            return None, None
        return witver, bytes(witprog)

    def address_to_public_key(self, address: str) -> Optional[str]:
        """Taproot address -> x-only pubkey hex, or None."""
        witver, program = self._decode(address)
        if witver != TAPROOT_WITNESS_VERSION or len(program) != XONLY_PUBKEY_LENGTH:
            return None
        return program.hex()

    def public_key_to_address(self, pubkey: str) -> Optional[str]:
        """X-only pubkey hex -> taproot address, or None."""
        try:
            program = bytes.fromhex(pubkey)
        except (ValueError, TypeError):
            return None
        if len(program) != XONLY_PUBKEY_LENGTH:
            return None
        return bech32.encode(self.hrp, TAPROOT_WITNESS_VERSION, list(program))

    def owner_address_to_hash(self, address: str) -> Optional[str]:
        """P2WPKH or P2TR address -> owner hash hex, or None."""
        witver, program = self._decode(address)
        if witver == 0 and len(program) == PUBKEY_HASH_LENGTH:
            return program.hex()
        if witver == TAPROOT_WITNESS_VERSION and len(program) == XONLY_PUBKEY_LENGTH:
            return program.hex()
        return None


default_codec = Bech32AddressCodec()
