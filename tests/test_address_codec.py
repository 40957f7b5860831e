"""
Tests for the bech32 address codec.
"""

import pytest

from tests.factories import OWNER_ADDR, OWNER_PKH, TOKEN_PUBKEY


def test_owner_p2wpkh_address_to_hash(codec):
    assert codec.owner_address_to_hash(OWNER_ADDR) == OWNER_PKH


def test_all_uppercase_owner_address_decodes(codec):
    assert codec.owner_address_to_hash(OWNER_ADDR.upper()) == OWNER_PKH


def test_mixed_case_address_is_rejected(codec):
    mixed = OWNER_ADDR[:4] + OWNER_ADDR[4].upper() + OWNER_ADDR[5:]
    assert mixed != OWNER_ADDR
    assert codec.owner_address_to_hash(mixed) is None
    assert codec.address_to_public_key(codec.public_key_to_address(TOKEN_PUBKEY).replace("p", "P", 1)) is None


def test_token_address_round_trip(codec):
    address = codec.public_key_to_address(TOKEN_PUBKEY)
    assert address.startswith("bc1p")
    assert codec.address_to_public_key(address) == TOKEN_PUBKEY


def test_taproot_owner_hash_is_xonly_key(codec):
    address = codec.public_key_to_address(TOKEN_PUBKEY)
    assert codec.owner_address_to_hash(address) == TOKEN_PUBKEY


def test_p2wpkh_is_not_a_token_address(codec):
    assert codec.address_to_public_key(OWNER_ADDR) is None


def test_wrong_network_does_not_decode(codec):
    address = codec.public_key_to_address(TOKEN_PUBKEY)
    testnet = type(codec)("tb")
    assert testnet.address_to_public_key(address) is None


@pytest.mark.parametrize("bad", [
    "",
    None,
    "not-an-address",
    "bc1qw508d6qejxtdg4y5r3zarvary0c5xw7kv8f3t5",  # bad checksum
    "1BoatSLRHtKNngkdXEeobR76b53LETtpyT",  # base58 legacy
])
def test_malformed_addresses_return_none(codec, bad):
    assert codec.address_to_public_key(bad) is None
    assert codec.owner_address_to_hash(bad) is None


@pytest.mark.parametrize("bad", ["zz" * 32, "11" * 20, ""])
def test_bad_pubkeys_do_not_encode(codec, bad):
    assert codec.public_key_to_address(bad) is None
