"""
Tests for fixed-width state hash vectors.
"""

import pytest

from token_tracker.core.config import settings
from token_tracker.services.state_hash import (
    StateHashResolver,
    output_state_hashes,
    pad_state_hashes,
)
from tests.factories import make_utxo, seed


WIDTH = settings.contract_output_max_count + 1


@pytest.mark.parametrize("count", range(0, WIDTH + 1))
def test_padding_always_yields_fixed_width(count):
    hashes = [f"{i:02x}" * 20 for i in range(count)]

    vector = pad_state_hashes(hashes)

    assert len(vector) == WIDTH
    assert vector[:count] == hashes[:WIDTH]
    assert all(h == "" for h in vector[count:])


def test_output_hashes_drop_root():
    vector = pad_state_hashes(["root", "a"])
    assert output_state_hashes(vector) == ["a"] + [""] * (WIDTH - 2)


async def test_vector_ordered_by_output_index(session):
    txid = "de" * 32
    await seed(
        session,
        make_utxo(txid, output_index=2, state_hash="c2"),
        make_utxo(txid, output_index=0, owner_pkh=None, amount=None, token_pubkey=None, state_hash="c0"),
        make_utxo(txid, output_index=1, state_hash="c1"),
    )

    vector = await StateHashResolver(session).state_hash_vector(txid)

    assert vector == ["c0", "c1", "c2"] + [""] * (WIDTH - 3)


async def test_unknown_txid_is_all_placeholders(session):
    vector = await StateHashResolver(session).state_hash_vector("00" * 32)
    assert vector == [""] * WIDTH


async def test_batched_vectors_match_single_lookups(session):
    first, second = "01" * 32, "02" * 32
    await seed(
        session,
        make_utxo(first, output_index=0, state_hash="r1"),
        make_utxo(first, output_index=1, state_hash="h1"),
        make_utxo(second, output_index=0, state_hash="r2"),
    )
    resolver = StateHashResolver(session)

    vectors = await resolver.state_hash_vectors([first, second, first])

    assert vectors[first] == await resolver.state_hash_vector(first)
    assert vectors[second] == await resolver.state_hash_vector(second)
    assert await resolver.state_hash_vectors([]) == {}
