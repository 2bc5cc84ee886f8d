from decimal import Decimal


def test_new_shopper_gets_session_and_empty_cart(client):
    resp = client.get("/cart")

    assert resp.status_code == 200
    body = resp.json()
    assert body["items"] == []
    assert body["item_count"] == 0
    assert resp.headers["X-Cart-Session"] == body["session"]
    assert client.cookies.get("cart_session") == body["session"]


def test_add_update_remove_flow(client, make_product):
    a = make_product("Product A", "1000")
    b = make_product("Product B", "500")

    client.post("/cart/items", json={"product_id": a.id})
    client.post("/cart/items", json={"product_id": a.id})
    resp = client.post("/cart/items", json={"product_id": b.id})

    body = resp.json()
    assert len(body["items"]) == 2
    assert body["item_count"] == 3
    assert Decimal(body["total_amount"]) == Decimal("2500")

    resp = client.put(f"/cart/items/{b.id}", json={"quantity": 3})
    assert resp.json()["item_count"] == 5

    resp = client.put(f"/cart/items/{b.id}", json={"quantity": 0})
    assert [i["product_id"] for i in resp.json()["items"]] == [a.id]

    resp = client.delete(f"/cart/items/{a.id}")
    assert resp.json()["items"] == []


def test_cart_is_scoped_by_session_header(client, make_product, storage):
    a = make_product("Product A", "1000")

    client.post("/cart/items", json={"product_id": a.id}, headers={"X-Cart-Session": "shopper-one"})
    other = client.get("/cart", headers={"X-Cart-Session": "shopper-two"})
    mine = client.get("/cart", headers={"X-Cart-Session": "shopper-one"})

    assert other.json()["item_count"] == 0
    assert mine.json()["item_count"] == 1
    assert "cart:shopper-one" in storage.data


def test_add_unknown_product_is_404(client):
    resp = client.post("/cart/items", json={"product_id": 12345})

    assert resp.status_code == 404


def test_add_out_of_stock_product_is_rejected(client, make_product):
    p = make_product("Sold out", "100", in_stock=False)

    resp = client.post("/cart/items", json={"product_id": p.id})

    assert resp.status_code == 400


def test_clear_cart_twice(client, make_product):
    a = make_product()
    client.post("/cart/items", json={"product_id": a.id})

    assert client.delete("/cart").json()["items"] == []
    resp = client.delete("/cart")
    assert resp.status_code == 200
    assert resp.json()["item_count"] == 0


def test_corrupted_stored_cart_is_served_empty(client, storage):
    storage.data["cart:corrupted-one"] = "{{{"

    resp = client.get("/cart", headers={"X-Cart-Session": "corrupted-one"})

    assert resp.status_code == 200
    assert resp.json()["items"] == []
