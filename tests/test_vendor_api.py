"""End-to-end tests for the vendor backend."""

import json

import pytest
from sqlalchemy import select

from foodvan.models import Order, OrderStatus, Vendor

PREFIX = "/api/vendor"

LOCATION = {
    "address": "700 Carlton Street",
    "location": {"longitude": 144.96, "latitude": -37.79},
}


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def vendor_token(vendor_client):
    response = await vendor_client.post(
        f"{PREFIX}/register",
        json={"email": "van@b.com", "password": "abc12345", "name": "Tasty Van"},
    )
    assert response.status_code == 302
    response = await vendor_client.post(
        f"{PREFIX}/login", json={"email": "van@b.com", "password": "abc12345"}
    )
    assert response.status_code == 200
    return response.json()["token"]


@pytest.fixture
async def vendor(db, vendor_token):
    result = await db.execute(select(Vendor).where(Vendor.email == "van@b.com"))
    return result.scalar_one()


async def add_order(db, vendor_id, status=OrderStatus.PREPARING, items=None):
    order = Order(
        vendor_id=vendor_id,
        items=json.dumps(items or [{"name": "Latte", "quantity": 1}]),
        status=status,
    )
    db.add(order)
    await db.commit()
    await db.refresh(order)
    return order


class TestStatus:

    async def test_open(self, vendor_client, vendor_token):
        response = await vendor_client.post(f"{PREFIX}/open", json=LOCATION, headers=bearer(vendor_token))
        assert response.status_code == 200
        body = response.json()
        assert body["open"] is True
        assert body["address"] == "700 Carlton Street"
        assert body["position"] == {"latitude": -37.79, "longitude": 144.96}
        assert "password" not in body

    async def test_close_is_idempotent(self, vendor_client, vendor_token):
        await vendor_client.post(f"{PREFIX}/open", json=LOCATION, headers=bearer(vendor_token))

        first = await vendor_client.post(f"{PREFIX}/close", headers=bearer(vendor_token))
        second = await vendor_client.post(f"{PREFIX}/close", headers=bearer(vendor_token))

        assert first.status_code == second.status_code == 200
        assert first.json()["open"] is False
        assert first.json() == second.json()

    async def test_relocate_keeps_open_state(self, vendor_client, vendor_token):
        await vendor_client.post(f"{PREFIX}/open", json=LOCATION, headers=bearer(vendor_token))

        response = await vendor_client.post(
            f"{PREFIX}/relocate",
            json={"address": "1 Swanston Street", "location": {"latitude": -37.8, "longitude": 144.97}},
            headers=bearer(vendor_token),
        )
        body = response.json()
        assert response.status_code == 200
        assert body["open"] is True
        assert body["address"] == "1 Swanston Street"
        assert body["position"]["latitude"] == -37.8

    @pytest.mark.parametrize("path", ["/open", "/close", "/relocate"])
    async def test_requires_valid_token(self, vendor_client, vendor_token, path):
        assert (await vendor_client.post(f"{PREFIX}{path}", json=LOCATION)).status_code == 401
        response = await vendor_client.post(f"{PREFIX}{path}", json=LOCATION, headers=bearer("73bahsbwy4"))
        assert response.status_code == 401

    async def test_relogin_revokes_previous_token(self, vendor_client, vendor_token):
        response = await vendor_client.post(
            f"{PREFIX}/login", json={"email": "van@b.com", "password": "abc12345"}
        )
        new_token = response.json()["token"]

        assert (await vendor_client.post(f"{PREFIX}/close", headers=bearer(vendor_token))).status_code == 401
        assert (await vendor_client.post(f"{PREFIX}/close", headers=bearer(new_token))).status_code == 200

    async def test_non_bearer_scheme_is_rejected(self, vendor_client):
        response = await vendor_client.post(f"{PREFIX}/close", headers={"Authorization": "Basic abc"})
        assert response.status_code == 401


class TestOrders:

    async def test_outstanding_orders(self, vendor_client, vendor_token, vendor, db):
        first = await add_order(db, vendor.id)
        second = await add_order(db, vendor.id, items=[{"name": "Scone", "quantity": 2}])
        await add_order(db, vendor.id, status=OrderStatus.READY)

        other = Vendor(email="other@b.com", password="x", name="Other")
        db.add(other)
        await db.commit()
        await add_order(db, other.id)

        response = await vendor_client.get(f"{PREFIX}/orders", headers=bearer(vendor_token))
        assert response.status_code == 200
        orders = response.json()
        assert [o["id"] for o in orders] == [first.id, second.id]
        assert all(o["status"] == "Preparing" for o in orders)
        assert orders[1]["items"] == [{"name": "Scone", "quantity": 2}]

    async def test_order_details(self, vendor_client, vendor_token, vendor, db):
        order = await add_order(db, vendor.id)

        response = await vendor_client.get(f"{PREFIX}/order/{order.id}", headers=bearer(vendor_token))
        assert response.status_code == 200
        assert response.json()["id"] == order.id

        response = await vendor_client.get(f"{PREFIX}/order/9999", headers=bearer(vendor_token))
        assert response.status_code == 404

    async def test_fulfill_order(self, vendor_client, vendor_token, vendor, db):
        order = await add_order(db, vendor.id)

        response = await vendor_client.post(
            f"{PREFIX}/fulfillOrder", json={"order": order.id}, headers=bearer(vendor_token)
        )
        assert response.status_code == 200
        assert response.json()["status"] == "Ready for pickup"

        response = await vendor_client.get(f"{PREFIX}/orders", headers=bearer(vendor_token))
        assert response.json() == []

    async def test_cannot_touch_another_vans_order(self, vendor_client, vendor_token, db):
        other = Vendor(email="other@b.com", password="x", name="Other")
        db.add(other)
        await db.commit()
        order = await add_order(db, other.id)

        response = await vendor_client.post(
            f"{PREFIX}/fulfillOrder", json={"order": order.id}, headers=bearer(vendor_token)
        )
        assert response.status_code == 404

        await db.refresh(order)
        assert order.status == OrderStatus.PREPARING


class TestVendorAccount:

    async def test_pages_and_logout(self, vendor_client, vendor_token):
        response = await vendor_client.get(f"{PREFIX}/home")
        assert response.status_code == 200
        assert "Tasty Van" in response.text

        response = await vendor_client.delete(f"{PREFIX}/logout")
        assert response.status_code == 303
        assert response.headers["location"] == f"{PREFIX}/login"

        response = await vendor_client.get(f"{PREFIX}/home")
        assert response.headers["location"] == f"{PREFIX}/login"

    async def test_weak_password(self, vendor_client):
        response = await vendor_client.post(
            f"{PREFIX}/register", json={"email": "van@b.com", "password": "1234567"}
        )
        assert response.status_code == 500
