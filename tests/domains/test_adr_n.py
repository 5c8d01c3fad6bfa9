# tests/domains/test_adr_n.py

"""
Integration tests of the 'adr' domain (addresses).

- `GET/POST/PUT/DELETE /address` and `GET /address/countries`
- `GET/POST/PUT/DELETE /partner/{id}/address` (address links, primary rule)
"""

import pytest
from httpx import AsyncClient
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from crm.domains.prt import models as prt_models
from crm.domains.adr import models as adr_models


# =============================================================================
# 1. Address endpoints
# =============================================================================
@pytest.mark.asyncio
async def test_create_address(client: AsyncClient):
    """
    Country codes are stored upper-case.
    """
    print("\n--- Running test_create_address ---")
    address_data = {
        "street_line1": "Marktgasse 5",
        "city": "Bern",
        "postal_code": "3011",
        "country_code": "ch",
    }
    response = await client.post("/api/v1/address", json=address_data)
    print(f"Response status code: {response.status_code}")
    print(f"Response JSON: {response.json()}")

    assert response.status_code == 201
    created = response.json()
    assert created["city"] == "Bern"
    assert created["country_code"] == "CH"
    assert created["is_verified"] is False
    assert len(created["id"]) == 36


@pytest.mark.asyncio
async def test_create_address_invalid(client: AsyncClient):
    """
    Invalid country codes and inverted validity periods are rejected with 422.
    """
    print("\n--- Running test_create_address_invalid ---")
    response = await client.post("/api/v1/address", json={"city": "Bern", "country_code": "C1"})
    assert response.status_code == 422

    response = await client.post(
        "/api/v1/address",
        json={"city": "Bern", "valid_from": "2024-05-01", "valid_to": "2024-01-01"},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_search_addresses(client: AsyncClient, db_session: AsyncSession, test_address: adr_models.Address):
    """
    Addresses are ordered by city and street; the term matches any text column.
    """
    print("\n--- Running test_search_addresses ---")
    db_session.add(adr_models.Address(street_line1="Spalenberg 2", city="Basel", postal_code="4051"))
    await db_session.commit()

    response = await client.get("/api/v1/address")
    assert response.status_code == 200
    assert [a["city"] for a in response.json()] == ["Basel", "Zurich"]

    response = await client.get("/api/v1/address", params={"search": "bahnhof"})
    assert [a["id"] for a in response.json()] == [test_address.id]

    response = await client.get("/api/v1/address", params={"search": "4051"})
    assert [a["city"] for a in response.json()] == ["Basel"]


@pytest.mark.asyncio
async def test_read_update_address(client: AsyncClient, test_address: adr_models.Address):
    print("\n--- Running test_read_update_address ---")
    response = await client.get(f"/api/v1/address/{test_address.id}")
    assert response.status_code == 200
    assert response.json()["street_line1"] == "Bahnhofstrasse 1"

    response = await client.put(
        f"/api/v1/address/{test_address.id}",
        json={"street_line2": "Postfach", "is_verified": True},
    )
    assert response.status_code == 200
    updated = response.json()
    assert updated["street_line2"] == "Postfach"
    assert updated["is_verified"] is True
    assert updated["city"] == "Zurich"

    response = await client.get("/api/v1/address/unknown-id")
    assert response.status_code == 404
    assert response.json()["detail"] == "Address not found"


@pytest.mark.asyncio
async def test_update_address_validity_against_stored_period(client: AsyncClient, test_address: adr_models.Address):
    """
    An update that only moves valid_to is checked against the stored valid_from.
    """
    print("\n--- Running test_update_address_validity_against_stored_period ---")
    response = await client.put(f"/api/v1/address/{test_address.id}", json={"valid_from": "2024-05-01"})
    assert response.status_code == 200

    response = await client.put(f"/api/v1/address/{test_address.id}", json={"valid_to": "2024-01-01"})
    print(f"Response JSON: {response.json()}")
    assert response.status_code == 400
    assert response.json()["detail"] == "valid_to must not be before valid_from"

    response = await client.put(f"/api/v1/address/{test_address.id}", json={"valid_to": "2024-12-31"})
    assert response.status_code == 200
    assert response.json()["valid_to"] == "2024-12-31"


@pytest.mark.asyncio
async def test_delete_address(client: AsyncClient, test_address: adr_models.Address):
    print("\n--- Running test_delete_address ---")
    response = await client.delete(f"/api/v1/address/{test_address.id}")
    assert response.status_code == 204

    response = await client.get(f"/api/v1/address/{test_address.id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_address_in_use(
    client: AsyncClient, test_person: prt_models.Partner, test_address: adr_models.Address
):
    """
    An address linked to a partner cannot be deleted.
    """
    print("\n--- Running test_delete_address_in_use ---")
    response = await client.post(
        f"/api/v1/partner/{test_person.id}/address", params={"address_id": test_address.id}
    )
    assert response.status_code == 201

    response = await client.delete(f"/api/v1/address/{test_address.id}")
    print(f"Response JSON: {response.json()}")

    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot delete address: it is currently in use by 1 partner(s)"


@pytest.mark.asyncio
async def test_read_countries(client: AsyncClient):
    print("\n--- Running test_read_countries ---")
    response = await client.get("/api/v1/address/countries")

    assert response.status_code == 200
    countries = response.json()
    assert {"code": "CH", "name": "Switzerland"} in countries
    codes = {c["code"] for c in countries}
    assert len(codes) >= 249
    assert {"LI", "NZ", "KE", "UY", "AQ"} <= codes
    names = [c["name"] for c in countries]
    assert names == sorted(names)


# =============================================================================
# 2. Partner address links
# =============================================================================
@pytest.mark.asyncio
async def test_link_address_to_partner(
    client: AsyncClient, test_person: prt_models.Partner, test_address: adr_models.Address
):
    """
    Without a body the link is a non-primary billing address; the address is nested in the response.
    """
    print("\n--- Running test_link_address_to_partner ---")
    response = await client.post(
        f"/api/v1/partner/{test_person.id}/address", params={"address_id": test_address.id}
    )
    print(f"Response JSON: {response.json()}")

    assert response.status_code == 201
    detail = response.json()
    assert detail["partner_id"] == test_person.id
    assert detail["address_type"] == "BILLING"
    assert detail["is_primary"] is False
    assert detail["address"]["city"] == "Zurich"

    response = await client.get(f"/api/v1/partner/{test_person.id}/address")
    assert response.status_code == 200
    assert [d["id"] for d in response.json()] == [detail["id"]]


@pytest.mark.asyncio
async def test_link_address_missing_partner_or_address(
    client: AsyncClient, test_person: prt_models.Partner, test_address: adr_models.Address
):
    print("\n--- Running test_link_address_missing_partner_or_address ---")
    response = await client.post("/api/v1/partner/unknown-id/address", params={"address_id": test_address.id})
    assert response.status_code == 404
    assert response.json()["detail"] == "Partner not found"

    response = await client.post(f"/api/v1/partner/{test_person.id}/address", params={"address_id": "unknown-id"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Address not found"


@pytest.mark.asyncio
async def test_only_one_primary_address(
    client: AsyncClient,
    db_session: AsyncSession,
    test_person: prt_models.Partner,
    test_address: adr_models.Address,
):
    """
    A new primary link clears the previous primary link of the partner.
    """
    print("\n--- Running test_only_one_primary_address ---")
    other = adr_models.Address(street_line1="Seestrasse 10", city="Zug", postal_code="6300", country_code="CH")
    db_session.add(other)
    await db_session.commit()
    await db_session.refresh(other)

    first = await client.post(
        f"/api/v1/partner/{test_person.id}/address",
        params={"address_id": test_address.id},
        json={"address_type": "HOME", "is_primary": True},
    )
    assert first.status_code == 201
    second = await client.post(
        f"/api/v1/partner/{test_person.id}/address",
        params={"address_id": other.id},
        json={"address_type": "WORK", "is_primary": True},
    )
    assert second.status_code == 201

    response = await client.get(f"/api/v1/partner/{test_person.id}/address")
    details = response.json()
    assert details[0]["id"] == second.json()["id"]
    assert [d["is_primary"] for d in details] == [True, False]

    primaries = (await db_session.exec(
        select(adr_models.AddressDetail).where(
            adr_models.AddressDetail.partner_id == test_person.id,
            adr_models.AddressDetail.is_primary == True,  # noqa: E712
        )
    )).all()
    assert len(primaries) == 1


@pytest.mark.asyncio
async def test_update_address_link_primary(
    client: AsyncClient,
    db_session: AsyncSession,
    test_person: prt_models.Partner,
    test_address: adr_models.Address,
):
    """
    Marking a link as primary through PUT clears the other primary link.
    """
    print("\n--- Running test_update_address_link_primary ---")
    other = adr_models.Address(street_line1="Seestrasse 10", city="Zug", country_code="CH")
    db_session.add(other)
    await db_session.commit()
    await db_session.refresh(other)

    first = (await client.post(
        f"/api/v1/partner/{test_person.id}/address",
        params={"address_id": test_address.id},
        json={"is_primary": True},
    )).json()
    second = (await client.post(
        f"/api/v1/partner/{test_person.id}/address",
        params={"address_id": other.id},
        json={"address_type": "SHIPPING"},
    )).json()

    response = await client.put(
        f"/api/v1/partner/{test_person.id}/address/{second['id']}",
        json={"is_primary": True},
    )
    print(f"Response JSON: {response.json()}")
    assert response.status_code == 200
    assert response.json()["is_primary"] is True
    assert response.json()["address_type"] == "SHIPPING"

    details = {d["id"]: d for d in (await client.get(f"/api/v1/partner/{test_person.id}/address")).json()}
    assert details[first["id"]]["is_primary"] is False
    assert details[second["id"]]["is_primary"] is True


@pytest.mark.asyncio
async def test_delete_address_link(
    client: AsyncClient, test_person: prt_models.Partner, test_address: adr_models.Address
):
    """
    Unlinking keeps the address itself.
    """
    print("\n--- Running test_delete_address_link ---")
    detail = (await client.post(
        f"/api/v1/partner/{test_person.id}/address", params={"address_id": test_address.id}
    )).json()

    response = await client.delete(f"/api/v1/partner/{test_person.id}/address/{detail['id']}")
    assert response.status_code == 204

    response = await client.delete(f"/api/v1/partner/{test_person.id}/address/{detail['id']}")
    assert response.status_code == 404
    assert response.json()["detail"] == "Address detail not found"

    assert (await client.get(f"/api/v1/partner/{test_person.id}/address")).json() == []
    assert (await client.get(f"/api/v1/address/{test_address.id}")).status_code == 200


@pytest.mark.asyncio
async def test_update_address_link_validity_against_stored_period(
    client: AsyncClient, test_person: prt_models.Partner, test_address: adr_models.Address
):
    """
    A link update that only moves valid_to is checked against the stored valid_from.
    """
    print("\n--- Running test_update_address_link_validity_against_stored_period ---")
    detail = (await client.post(
        f"/api/v1/partner/{test_person.id}/address",
        params={"address_id": test_address.id},
        json={"valid_from": "2024-05-01"},
    )).json()

    response = await client.put(
        f"/api/v1/partner/{test_person.id}/address/{detail['id']}", json={"valid_to": "2024-01-01"}
    )
    print(f"Response JSON: {response.json()}")
    assert response.status_code == 400
    assert response.json()["detail"] == "valid_to must not be before valid_from"

    response = await client.get(f"/api/v1/partner/{test_person.id}/address")
    assert response.json()[0]["valid_to"] is None
