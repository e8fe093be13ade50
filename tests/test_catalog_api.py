"""
Customer and stone catalog API tests.
"""


# ============================================================
# Customers
# ============================================================

def test_customer_crud(client, customer):
    response = client.get(f"/api/customers/{customer['id']}")
    assert response.status_code == 200
    assert response.json()["name"] == "Ayşe Yılmaz"

    response = client.patch(f"/api/customers/{customer['id']}", json={"phone": "0555 111 22 33"})
    assert response.json()["phone"] == "0555 111 22 33"
    assert response.json()["name"] == "Ayşe Yılmaz"

    assert client.delete(f"/api/customers/{customer['id']}").status_code == 200
    assert client.get(f"/api/customers/{customer['id']}").status_code == 404


def test_customer_search(client, customer):
    client.post("/api/customers/", json={"name": "Mehmet Kaya"})
    found = client.get("/api/customers/", params={"search": "Mehmet"}).json()
    assert [c["name"] for c in found] == ["Mehmet Kaya"]
    assert len(client.get("/api/customers/").json()) == 2


def test_customer_with_orders_cannot_be_deleted(client, customer):
    client.post("/api/orders/", json={"customer_id": customer["id"], "items": []})
    assert client.delete(f"/api/customers/{customer['id']}").status_code == 409


# ============================================================
# Stone types
# ============================================================

def test_stone_types_listed_by_name(client):
    for name in ("Traverten", "Granit"):
        client.post("/api/catalog/stone-types/", json={"name": name})
    names = [t["name"] for t in client.get("/api/catalog/stone-types/").json()]
    assert names == ["Granit", "Traverten"]


def test_duplicate_stone_type_conflicts(client, stone_type):
    response = client.post("/api/catalog/stone-types/", json={"name": "Mermer"})
    assert response.status_code == 409


def test_stone_type_delete_deactivates(client, stone_type):
    assert client.delete(f"/api/catalog/stone-types/{stone_type['id']}").status_code == 200
    assert client.get("/api/catalog/stone-types/").json() == []

    # Re-adding the same name brings back the existing row
    restored = client.post("/api/catalog/stone-types/", json={"name": "Mermer"}).json()
    assert restored["id"] == stone_type["id"]
    assert restored["is_active"] is True


def test_delete_unknown_stone_type(client):
    assert client.delete("/api/catalog/stone-types/999").status_code == 404


# ============================================================
# Stone features
# ============================================================

def test_stone_feature_with_default_price(client):
    response = client.post("/api/catalog/stone-features/", json={"name": "Cilalı", "default_price": 75})
    assert response.status_code == 200
    assert response.json()["default_price"] == 75

    features = client.get("/api/catalog/stone-features/").json()
    assert [f["name"] for f in features] == ["Cilalı"]


def test_stone_feature_delete_deactivates(client):
    feature = client.post("/api/catalog/stone-features/", json={"name": "Honlu"}).json()
    client.delete(f"/api/catalog/stone-features/{feature['id']}")
    assert client.get("/api/catalog/stone-features/").json() == []
