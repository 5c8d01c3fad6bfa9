# tests/domains/test_tag_n.py

"""
Integration tests of the 'tag' domain.

- `GET/POST/PUT/DELETE /tag`
- `GET /partner/{id}/tag`, `POST/DELETE /partner/{id}/tag/{tag_id}`
"""

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from crm.domains.prt import models as prt_models
from crm.domains.tag import models as tag_models


# =============================================================================
# 1. Tag endpoints
# =============================================================================
@pytest.mark.asyncio
async def test_create_tag(client: AsyncClient):
    print("\n--- Running test_create_tag ---")
    tag_data = {"tag_name": "Supplier", "color_hex": "#00aa00", "description": "Delivers goods"}
    response = await client.post("/api/v1/tag", json=tag_data)
    print(f"Response status code: {response.status_code}")
    print(f"Response JSON: {response.json()}")

    assert response.status_code == 201
    created = response.json()
    assert created["tag_name"] == "Supplier"
    assert created["color_hex"] == "#00aa00"
    assert "id" in created


@pytest.mark.asyncio
async def test_create_tag_duplicate_name(client: AsyncClient, test_tag: tag_models.Tag):
    print("\n--- Running test_create_tag_duplicate_name ---")
    response = await client.post("/api/v1/tag", json={"tag_name": "VIP"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Tag with name 'VIP' already exists"


@pytest.mark.asyncio
async def test_create_tag_invalid_color(client: AsyncClient):
    print("\n--- Running test_create_tag_invalid_color ---")
    response = await client.post("/api/v1/tag", json={"tag_name": "Red", "color_hex": "red"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_search_tags(client: AsyncClient, db_session: AsyncSession, test_tag: tag_models.Tag):
    """
    Tags are ordered by name; the term matches name or description.
    """
    print("\n--- Running test_search_tags ---")
    db_session.add(tag_models.Tag(tag_name="Prospect", description="Potential customer"))
    db_session.add(tag_models.Tag(tag_name="Customer"))
    await db_session.commit()

    response = await client.get("/api/v1/tag")
    assert response.status_code == 200
    assert [t["tag_name"] for t in response.json()] == ["Customer", "Prospect", "VIP"]

    response = await client.get("/api/v1/tag", params={"search": "customer"})
    assert [t["tag_name"] for t in response.json()] == ["Customer", "Prospect"]

    response = await client.get("/api/v1/tag", params={"search": "important"})
    assert [t["tag_name"] for t in response.json()] == ["VIP"]


@pytest.mark.asyncio
async def test_update_tag(client: AsyncClient, db_session: AsyncSession, test_tag: tag_models.Tag):
    """
    Renaming keeps the other fields; renaming to an existing name is refused.
    """
    print("\n--- Running test_update_tag ---")
    response = await client.put(f"/api/v1/tag/{test_tag.id}", json={"tag_name": "Key Account"})
    assert response.status_code == 200
    assert response.json()["tag_name"] == "Key Account"
    assert response.json()["color_hex"] == "#FF0000"

    response = await client.put(f"/api/v1/tag/{test_tag.id}", json={"tag_name": "Key Account"})
    assert response.status_code == 200

    db_session.add(tag_models.Tag(tag_name="Partner"))
    await db_session.commit()
    response = await client.put(f"/api/v1/tag/{test_tag.id}", json={"tag_name": "Partner"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Tag with name 'Partner' already exists"


@pytest.mark.asyncio
async def test_delete_tag(client: AsyncClient, test_tag: tag_models.Tag):
    print("\n--- Running test_delete_tag ---")
    response = await client.delete(f"/api/v1/tag/{test_tag.id}")
    assert response.status_code == 204

    response = await client.get(f"/api/v1/tag/{test_tag.id}")
    assert response.status_code == 404
    assert response.json()["detail"] == "Tag not found"


@pytest.mark.asyncio
async def test_delete_tag_in_use(
    client: AsyncClient, test_person: prt_models.Partner, test_company: prt_models.Partner, test_tag: tag_models.Tag
):
    print("\n--- Running test_delete_tag_in_use ---")
    assert (await client.post(f"/api/v1/partner/{test_person.id}/tag/{test_tag.id}")).status_code == 201
    assert (await client.post(f"/api/v1/partner/{test_company.id}/tag/{test_tag.id}")).status_code == 201

    response = await client.delete(f"/api/v1/tag/{test_tag.id}")
    print(f"Response JSON: {response.json()}")

    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot delete tag 'VIP': it is assigned to 2 partner(s)"


# =============================================================================
# 2. Partner tag assignments
# =============================================================================
@pytest.mark.asyncio
async def test_assign_tag_to_partner(client: AsyncClient, test_person: prt_models.Partner, test_tag: tag_models.Tag):
    print("\n--- Running test_assign_tag_to_partner ---")
    response = await client.post(
        f"/api/v1/partner/{test_person.id}/tag/{test_tag.id}", params={"tagged_by": "sales"}
    )
    print(f"Response JSON: {response.json()}")

    assert response.status_code == 201
    link = response.json()
    assert link["partner_id"] == test_person.id
    assert link["tagged_by"] == "sales"
    assert link["tag"]["tag_name"] == "VIP"
    assert link["tagged_at"] is not None

    response = await client.get(f"/api/v1/partner/{test_person.id}/tag")
    assert [t["id"] for t in response.json()] == [test_tag.id]


@pytest.mark.asyncio
async def test_assign_tag_twice(client: AsyncClient, test_person: prt_models.Partner, test_tag: tag_models.Tag):
    print("\n--- Running test_assign_tag_twice ---")
    await client.post(f"/api/v1/partner/{test_person.id}/tag/{test_tag.id}")
    response = await client.post(f"/api/v1/partner/{test_person.id}/tag/{test_tag.id}")

    assert response.status_code == 400
    assert response.json()["detail"] == "Tag 'VIP' is already assigned to this partner"


@pytest.mark.asyncio
async def test_assign_missing_tag_or_partner(
    client: AsyncClient, test_person: prt_models.Partner, test_tag: tag_models.Tag
):
    print("\n--- Running test_assign_missing_tag_or_partner ---")
    response = await client.post(f"/api/v1/partner/{test_person.id}/tag/unknown-id")
    assert response.status_code == 404
    assert response.json()["detail"] == "Tag not found"

    response = await client.post(f"/api/v1/partner/unknown-id/tag/{test_tag.id}")
    assert response.status_code == 404
    assert response.json()["detail"] == "Partner not found"


@pytest.mark.asyncio
async def test_partner_tags_ordered_by_name(
    client: AsyncClient, db_session: AsyncSession, test_person: prt_models.Partner, test_tag: tag_models.Tag
):
    print("\n--- Running test_partner_tags_ordered_by_name ---")
    another = tag_models.Tag(tag_name="Newsletter")
    db_session.add(another)
    await db_session.commit()
    await db_session.refresh(another)

    await client.post(f"/api/v1/partner/{test_person.id}/tag/{test_tag.id}")
    await client.post(f"/api/v1/partner/{test_person.id}/tag/{another.id}")

    response = await client.get(f"/api/v1/partner/{test_person.id}/tag")
    assert [t["tag_name"] for t in response.json()] == ["Newsletter", "VIP"]


@pytest.mark.asyncio
async def test_remove_tag_from_partner(client: AsyncClient, test_person: prt_models.Partner, test_tag: tag_models.Tag):
    """
    Removing an assignment twice reports the missing assignment with 400.
    """
    print("\n--- Running test_remove_tag_from_partner ---")
    await client.post(f"/api/v1/partner/{test_person.id}/tag/{test_tag.id}")

    response = await client.delete(f"/api/v1/partner/{test_person.id}/tag/{test_tag.id}")
    assert response.status_code == 204
    assert (await client.get(f"/api/v1/partner/{test_person.id}/tag")).json() == []

    response = await client.delete(f"/api/v1/partner/{test_person.id}/tag/{test_tag.id}")
    assert response.status_code == 400
    assert response.json()["detail"] == "Tag assignment not found for partner"
