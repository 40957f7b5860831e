"""
Tests for height-bounded UTXO and token listing queries.
"""

from token_tracker.core.config import settings
from token_tracker.services.aggregators import SupplyAggregator, group_balances
from token_tracker.services.ledger_store import LedgerStore
from token_tracker.services.watermark import UNBOOTSTRAPPED, QueryContext
from tests.factories import (
    OTHER_MINTER_PUBKEY,
    OTHER_OWNER_PKH,
    OTHER_TOKEN_ID,
    OTHER_TOKEN_PUBKEY,
    OWNER_PKH,
    TOKEN_ID,
    TOKEN_PUBKEY,
    make_mint,
    make_token,
    make_utxo,
    seed,
)


TXID_A = "0a" * 32
TXID_B = "0b" * 32


async def test_watermark_bounds_visible_utxos(session):
    await seed(
        session,
        make_utxo(TXID_A, output_index=0, amount=100, block_height=10),
        make_utxo(TXID_B, output_index=0, amount=50, block_height=12),
    )
    store = LedgerStore(session)

    at_11 = await store.utxos_by_owner(QueryContext(11), OWNER_PKH, TOKEN_PUBKEY, 0, 10)
    at_12 = await store.utxos_by_owner(QueryContext(12), OWNER_PKH, TOKEN_PUBKEY, 0, 10)

    assert [u.txid for u in at_11] == [TXID_A]
    assert group_balances(at_11)[TOKEN_PUBKEY] == 100
    assert {u.txid for u in at_12} == {TXID_A, TXID_B}
    assert group_balances(at_12)[TOKEN_PUBKEY] == 150


async def test_filters_spent_foreign_and_other_token_outputs(session):
    await seed(
        session,
        make_utxo("01" * 32, amount=10),
        make_utxo("02" * 32, amount=20, spend_txid="99" * 32),
        make_utxo("03" * 32, amount=30, owner_pkh=OTHER_OWNER_PKH),
        make_utxo("04" * 32, amount=40, token_pubkey=OTHER_TOKEN_PUBKEY),
    )
    store = LedgerStore(session)
    ctx = QueryContext(100)

    filtered = await store.utxos_by_owner(ctx, OWNER_PKH, TOKEN_PUBKEY)
    any_token = await store.utxos_by_owner(ctx, OWNER_PKH)

    assert [u.txid for u in filtered] == ["01" * 32]
    assert [u.txid for u in any_token] == ["04" * 32, "01" * 32]
    assert await store.count_utxos_by_owner(ctx, OWNER_PKH, TOKEN_PUBKEY) == 1
    assert await store.count_utxos_by_owner(ctx, OWNER_PKH) == 2


async def test_balance_matches_sum_of_matching_rows(session):
    rows = [make_utxo(f"{i:02x}" * 32, amount=i * 7, block_height=i) for i in range(1, 9)]
    rows.append(make_utxo("ee" * 32, amount=1000, spend_txid="dd" * 32))
    await seed(session, *rows)
    store = LedgerStore(session)
    height = 5

    utxos = await store.utxos_by_owner(
        QueryContext(height), OWNER_PKH, TOKEN_PUBKEY, 0, settings.query_paging_max_limit
    )

    assert group_balances(utxos)[TOKEN_PUBKEY] == sum(i * 7 for i in range(1, height + 1))


async def test_ordering_is_amount_desc_then_outpoint(session):
    await seed(
        session,
        make_utxo("02" * 32, output_index=0, amount=5),
        make_utxo("01" * 32, output_index=1, amount=5),
        make_utxo("01" * 32, output_index=0, amount=5),
        make_utxo("03" * 32, output_index=0, amount=9),
    )

    utxos = await LedgerStore(session).utxos_by_owner(QueryContext(100), OWNER_PKH, TOKEN_PUBKEY)

    assert [(u.txid[:2], u.output_index) for u in utxos] == [
        ("03", 0), ("01", 0), ("01", 1), ("02", 0)
    ]


async def test_pages_concatenate_to_unpaged_result(session):
    await seed(session, *[
        make_utxo(f"{i:02x}" * 32, output_index=i % 3, amount=(i % 4) * 10 + 1)
        for i in range(1, 12)
    ])
    store = LedgerStore(session)
    ctx = QueryContext(100)

    unpaged = await store.utxos_by_owner(ctx, OWNER_PKH, TOKEN_PUBKEY)
    pages = []
    for offset in range(0, len(unpaged), 3):
        pages.extend(await store.utxos_by_owner(ctx, OWNER_PKH, TOKEN_PUBKEY, offset, 3))

    key = [(u.txid, u.output_index) for u in unpaged]
    assert [(u.txid, u.output_index) for u in pages] == key
    assert len(set(key)) == len(key) == 11


async def test_limit_above_maximum_is_clamped(session, monkeypatch):
    monkeypatch.setattr(settings, "query_paging_max_limit", 3)
    await seed(session, *[make_utxo(f"{i:02x}" * 32) for i in range(1, 6)])

    utxos = await LedgerStore(session).utxos_by_owner(
        QueryContext(100), OWNER_PKH, TOKEN_PUBKEY, 0, 1000
    )

    assert len(utxos) == 3


async def test_unbootstrapped_or_unknown_owner_is_empty(session):
    await seed(session, make_utxo(TXID_A), make_token())
    store = LedgerStore(session)

    assert await store.utxos_by_owner(UNBOOTSTRAPPED, OWNER_PKH, TOKEN_PUBKEY) == []
    assert await store.utxos_by_owner(QueryContext(100), None, TOKEN_PUBKEY) == []
    assert await store.count_utxos_by_owner(UNBOOTSTRAPPED, OWNER_PKH) == 0
    assert await store.all_tokens(UNBOOTSTRAPPED) == []
    assert await store.count_all_tokens(UNBOOTSTRAPPED) == 0


async def test_all_tokens_live_figures(session):
    await seed(
        session,
        make_token(order=0),
        make_token(OTHER_TOKEN_ID, OTHER_TOKEN_PUBKEY, OTHER_MINTER_PUBKEY, symbol="DOG", order=1),
        make_mint("m1" + "0" * 62, 500),
        make_mint("m2" + "0" * 62, 250),
        make_mint("m3" + "0" * 62, 999, block_height=50),
        make_utxo("01" * 32, amount=100),
        make_utxo("02" * 32, amount=100),
        make_utxo("03" * 32, amount=100, owner_pkh=OTHER_OWNER_PKH),
        make_utxo("04" * 32, amount=100, owner_pkh="cc" * 20, spend_txid="05" * 32),
        make_utxo("06" * 32, amount=100, owner_pkh="dd" * 20, block_height=50),
    )

    rows = await LedgerStore(session).all_tokens(QueryContext(20))

    assert [r.token.token_id for r in rows] == [TOKEN_ID, OTHER_TOKEN_ID]
    # every mint counts, including one above the watermark
    assert rows[0].supply == 1749
    assert rows[0].supply == await SupplyAggregator(session).total_supply(TOKEN_PUBKEY)
    assert rows[0].holders == 2
    assert rows[1].supply == 0
    assert rows[1].holders == 0


async def test_all_tokens_lists_every_catalog_entry(session):
    await seed(
        session,
        make_token(reveal_height=5, order=0),
        make_token(OTHER_TOKEN_ID, OTHER_TOKEN_PUBKEY, OTHER_MINTER_PUBKEY, reveal_height=30, order=1),
    )
    store = LedgerStore(session)

    rows = await store.all_tokens(QueryContext(20))

    assert [r.token.token_id for r in rows] == [TOKEN_ID, OTHER_TOKEN_ID]
    assert await store.count_all_tokens(QueryContext(20)) == 2
