from decimal import Decimal


def test_admin_routes_require_admin(client, auth_headers):
    assert client.get("/admin/stats").status_code == 401
    assert client.get("/admin/stats", headers=auth_headers).status_code == 403


def test_admin_sign_in_rejects_other_credentials(client):
    resp = client.post("/auth/admin/sign-in", json={"email": "admin@store.test", "password": "nope"})

    assert resp.status_code == 401


def test_admin_sign_in_is_repeatable(client, admin_headers):
    resp = client.post(
        "/auth/admin/sign-in",
        json={"email": "admin@store.test", "password": "admin-pass-123"},
    )

    assert resp.status_code == 200
    assert resp.json()["user"]["is_admin"] is True


def test_category_and_product_crud(client, admin_headers):
    resp = client.post("/admin/categories", json={"name": "Beverages", "icon": "CupSoda"}, headers=admin_headers)
    assert resp.status_code == 201
    category_id = resp.json()["id"]

    dup = client.post("/admin/categories", json={"name": "Beverages"}, headers=admin_headers)
    assert dup.status_code == 400

    resp = client.post(
        "/admin/products",
        json={"name": "Malt Drink", "price": "450", "category_id": category_id, "badge": "New"},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    product_id = resp.json()["id"]

    resp = client.put(
        f"/admin/products/{product_id}",
        json={"name": "Malt Drink", "price": "500", "category_id": category_id, "in_stock": False},
        headers=admin_headers,
    )
    assert Decimal(resp.json()["price"]) == Decimal("500")

    # out of stock products disappear from the storefront, not from the back-office
    assert client.get("/products").json() == []
    assert len(client.get("/admin/products", headers=admin_headers).json()) == 1

    categories = client.get("/categories").json()
    assert categories[0]["items_count"] == 1

    assert client.delete(f"/admin/categories/{category_id}", headers=admin_headers).status_code == 204
    assert client.get(f"/products/{product_id}").json()["category_id"] is None

    assert client.delete(f"/admin/products/{product_id}", headers=admin_headers).status_code == 204
    assert client.get(f"/products/{product_id}").status_code == 404


def test_product_with_unknown_category_is_rejected(client, admin_headers):
    resp = client.post("/admin/products", json={"name": "X", "price": "1", "category_id": 999}, headers=admin_headers)

    assert resp.status_code == 400


def test_delivery_fee_settings(client, admin_headers):
    assert Decimal(client.get("/admin/settings/delivery-fee", headers=admin_headers).json()["delivery_fee"]) == Decimal("1500")

    resp = client.put("/admin/settings/delivery-fee", json={"delivery_fee": "2000"}, headers=admin_headers)

    assert Decimal(resp.json()["delivery_fee"]) == Decimal("2000")
    assert client.put("/admin/settings/delivery-fee", json={"delivery_fee": "-1"}, headers=admin_headers).status_code == 422


def test_stats(client, admin_headers, make_product):
    make_product("A", in_stock=True)
    make_product("B", in_stock=True)
    make_product("C", in_stock=False)

    stats = client.get("/admin/stats", headers=admin_headers).json()

    assert stats == {
        "total_products": 3,
        "total_categories": 0,
        "in_stock_products": 2,
        "out_of_stock_products": 1,
    }


def test_order_status_workflow(client, make_product, auth_headers, admin_headers):
    p = make_product("Product A", "1000")
    client.post("/cart/items", json={"product_id": p.id})
    order_id = client.post(
        "/checkout/delivery",
        json={"name": "Ada", "email": "ada@example.com", "phone": "080", "address": "Lagos"},
        headers=auth_headers,
    ).json()["id"]

    def set_status(status):
        return client.patch(f"/admin/orders/{order_id}/status", json={"status": status}, headers=admin_headers)

    assert set_status("confirmed").json()["status"] == "confirmed"
    assert set_status("delivered").status_code == 409
    assert set_status("bogus").status_code == 409
    assert set_status("cancelled").json()["status"] == "cancelled"
    assert set_status("processing").status_code == 409

    listed = client.get("/admin/orders", headers=admin_headers).json()
    assert [o["status"] for o in listed] == ["cancelled"]


def test_reservation_status_workflow(client, make_product, auth_headers, admin_headers):
    p = make_product("Product A", "1000")
    client.post("/cart/items", json={"product_id": p.id})
    rid = client.post(
        "/checkout/reservation",
        json={"name": "Ada", "email": "ada@example.com", "phone": "080"},
        headers=auth_headers,
    ).json()["id"]

    def set_status(status):
        return client.patch(f"/admin/reservations/{rid}/status", json={"status": status}, headers=admin_headers)

    assert set_status("ready").json()["status"] == "ready"
    assert set_status("picked_up").json()["status"] == "picked_up"
    assert set_status("expired").status_code == 409
    assert client.patch("/admin/reservations/999/status", json={"status": "ready"}, headers=admin_headers).status_code == 404


def test_concurrent_duplicate_category_is_400(client, admin_headers, monkeypatch):
    from storefront.repos.category_repo import CategoryRepo

    assert client.post("/admin/categories", json={"name": "Snacks"}, headers=admin_headers).status_code == 201
    # drugie zadanie nie widzi jeszcze pierwszego wiersza
    monkeypatch.setattr(CategoryRepo, "get_by_name", lambda self, name: None)

    resp = client.post("/admin/categories", json={"name": "Snacks"}, headers=admin_headers)

    assert resp.status_code == 400
    assert len(client.get("/categories").json()) == 1
