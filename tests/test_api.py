"""
Tests for the HTTP routes.
"""

import httpx
import pytest
import pytest_asyncio

from token_tracker.api.main import create_app
from token_tracker.core.config import settings
from tests.factories import (
    OWNER_ADDR,
    TOKEN_ID,
    TOKEN_PUBKEY,
    make_block,
    make_mint,
    make_statistics,
    make_token,
    make_tx,
    make_utxo,
    seed,
)


PREFIX = settings.api_v1_prefix


@pytest_asyncio.fixture
async def client(session):
    await seed(
        session,
        make_block(20),
        make_token(),
        make_mint("m1" + "0" * 62, 300),
        make_tx("0a" * 32, 10),
        make_utxo("0a" * 32, output_index=0, amount=120),
        make_utxo("0a" * 32, output_index=1, amount=180),
        make_statistics(TOKEN_ID, holders=1, minted=300),
    )
    transport = httpx.ASGITransport(app=create_app())
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["services"]["database"] == "healthy"


async def test_token_info(client, codec):
    response = await client.get(f"{PREFIX}/tokens/{TOKEN_ID}")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["tokenAddr"] == codec.public_key_to_address(TOKEN_PUBKEY)
    assert "createdAt" not in data


async def test_unknown_token_is_404(client):
    response = await client.get(f"{PREFIX}/tokens/ff_0")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error_code"] == "NOT_FOUND"


async def test_supply(client):
    response = await client.get(f"{PREFIX}/tokens/{TOKEN_ID}/supply")
    assert response.json()["data"] == {"supply": "300"}


async def test_list_tokens_pagination_metadata(client):
    response = await client.get(f"{PREFIX}/tokens", params={"limit": 100000})
    body = response.json()

    assert body["pagination"]["limit"] == settings.query_paging_max_limit
    assert body["pagination"]["total"] == 1
    assert body["data"]["trackerBlockHeight"] == 20
    assert body["data"]["tokens"][0]["supply"] == "300"
    assert body["data"]["tokens"][0]["holders"] == 1


async def test_ranked_tokens(client):
    response = await client.get(f"{PREFIX}/tokens/ranked")
    tokens = response.json()["data"]["tokens"]
    assert [t["tokenId"] for t in tokens] == [TOKEN_ID]


async def test_owner_utxos_and_balance(client):
    utxos = await client.get(
        f"{PREFIX}/tokens/{TOKEN_ID}/addresses/{OWNER_ADDR}/utxos", params={"limit": 1}
    )
    balance = await client.get(f"{PREFIX}/tokens/{TOKEN_ID}/addresses/{OWNER_ADDR}/balance")

    body = utxos.json()
    assert [u["state"]["amount"] for u in body["data"]["utxos"]] == ["180"]
    assert body["pagination"]["total"] == 2
    assert body["pagination"]["has_next"] is True
    assert balance.json()["data"] == {"tokenId": TOKEN_ID, "confirmed": "300", "trackerBlockHeight": 20}


async def test_owner_history(client):
    response = await client.get(f"{PREFIX}/tokens/{TOKEN_ID}/addresses/{OWNER_ADDR}/history")
    assert response.json()["data"]["history"] == ["0a" * 32]


async def test_owner_balances(client):
    response = await client.get(f"{PREFIX}/addresses/{OWNER_ADDR}/balances")
    assert response.json()["data"]["balances"] == [{"tokenId": TOKEN_ID, "confirmed": "300"}]


@pytest.mark.parametrize("path", [
    f"{PREFIX}/tokens/{TOKEN_ID}/addresses/garbage/utxos",
    f"{PREFIX}/addresses/garbage/balances",
])
async def test_malformed_owner_address_is_empty_not_error(client, path):
    response = await client.get(path)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data.get("utxos", data.get("balances")) == []
