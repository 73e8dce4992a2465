"""Tests for pharmacy inventory endpoints."""

import pytest
from httpx import AsyncClient

from clinic_api.services.inventory_service import split_combined_name


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Paracetamol (Panadol)", ("Paracetamol", "Panadol")),
        ("  Amoxicillin  ", ("Amoxicillin", None)),
        ("Cetirizine ()", ("Cetirizine", None)),
        ("", (None, None)),
    ],
)
def test_split_combined_name(name: str, expected: tuple) -> None:
    """Test splitting "Generic (Brand)" names."""
    assert split_combined_name(name) == expected


async def create_item(client: AsyncClient, data: dict) -> dict:
    response = await client.post("/api/inventory", json=data)
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_create_item(client: AsyncClient, sample_inventory_data: dict) -> None:
    """Responses use the camelCase keys the client sends."""
    data = await create_item(client, sample_inventory_data)
    assert data["genericName"] == "Ibuprofen"
    assert data["brandName"] == "Advil"
    assert data["dosageType"] == "Tablet"
    assert data["expirationDate"] == "2026-12-31"
    assert data["stock"] == 5
    assert "generic_name" not in data


@pytest.mark.asyncio
async def test_create_item_defaults(client: AsyncClient) -> None:
    """Stock defaults to zero and negative stock is clamped."""
    data = await create_item(client, {"genericName": "Loratadine"})
    assert data["stock"] == 0

    data = await create_item(client, {"genericName": "Cetirizine", "stock": -4})
    assert data["stock"] == 0


@pytest.mark.asyncio
async def test_create_item_requires_generic_name(client: AsyncClient) -> None:
    """Test that genericName is required."""
    response = await client.post("/api/inventory", json={"brandName": "Advil"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_items(client: AsyncClient, sample_inventory_data: dict) -> None:
    """Test listing items newest first."""
    first = await create_item(client, sample_inventory_data)
    second = await create_item(client, {"genericName": "Metformin"})

    response = await client.get("/api/inventory")
    assert response.status_code == 200
    ids = [item["id"] for item in response.json()]
    assert ids == [second["id"], first["id"]]


@pytest.mark.asyncio
async def test_update_item_with_combined_name(
    client: AsyncClient,
    sample_inventory_data: dict,
) -> None:
    """A combined name fills both name fields when genericName is absent."""
    item = await create_item(client, sample_inventory_data)

    response = await client.put(
        f"/api/inventory/{item['id']}",
        json={"name": "Paracetamol (Panadol)", "stock": -2},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["genericName"] == "Paracetamol"
    assert data["brandName"] == "Panadol"
    assert data["stock"] == 0
    assert data["category"] == "Analgesic"


@pytest.mark.asyncio
async def test_update_item_generic_name_wins(
    client: AsyncClient,
    sample_inventory_data: dict,
) -> None:
    """An explicit genericName takes precedence over the combined name."""
    item = await create_item(client, sample_inventory_data)

    response = await client.put(
        f"/api/inventory/{item['id']}",
        json={"genericName": "Naproxen", "name": "Paracetamol (Panadol)"},
    )
    data = response.json()
    assert data["genericName"] == "Naproxen"
    assert data["brandName"] == "Advil"
    assert data["stock"] == 5


@pytest.mark.asyncio
async def test_update_item_not_found(client: AsyncClient) -> None:
    """Test updating a non-existent item."""
    response = await client.put("/api/inventory/99999", json={"category": "Antibiotic"})
    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ({"delta": -100}, 0),
        ({"delta": -2}, 3),
        ({"delta": 7}, 12),
        ({"stock": 42}, 42),
        ({"stock": -3}, 0),
        ({"stock": 0}, 0),
    ],
)
async def test_adjust_stock(
    client: AsyncClient,
    sample_inventory_data: dict,
    payload: dict,
    expected: int,
) -> None:
    """Stock moves by delta or is set outright, never below zero."""
    item = await create_item(client, sample_inventory_data)

    response = await client.patch(f"/api/inventory/{item['id']}/stock", json=payload)
    assert response.status_code == 200
    assert response.json()["stock"] == expected


@pytest.mark.asyncio
async def test_adjust_stock_repeated_deltas(
    client: AsyncClient,
    sample_inventory_data: dict,
) -> None:
    """Each delta applies to the current stored value."""
    item = await create_item(client, sample_inventory_data)
    url = f"/api/inventory/{item['id']}/stock"

    for _ in range(3):
        await client.patch(url, json={"delta": -2})

    response = await client.get("/api/inventory")
    assert response.json()[0]["stock"] == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"stock": 3, "delta": 1},
        {"delta": "5"},
        {"stock": True},
        {"delta": 1.5},
    ],
)
async def test_adjust_stock_invalid_payload(
    client: AsyncClient,
    sample_inventory_data: dict,
    payload: dict,
) -> None:
    """Exactly one integer field is accepted."""
    item = await create_item(client, sample_inventory_data)

    response = await client.patch(f"/api/inventory/{item['id']}/stock", json=payload)
    assert response.status_code == 422

    response = await client.get("/api/inventory")
    assert response.json()[0]["stock"] == 5


@pytest.mark.asyncio
async def test_adjust_stock_not_found(client: AsyncClient) -> None:
    """Test adjusting stock of a non-existent item."""
    response = await client.patch("/api/inventory/99999/stock", json={"delta": 1})
    assert response.status_code == 404
