"""
Order document download tests.

Tests:
1-2. Spreadsheet download (headers, BOM, stored totals)
3.   Print view
4.   PDF download
5.   Unknown order
"""

import pytest


@pytest.fixture
def order(client, customer, stone_type):
    response = client.post("/api/orders/", json={
        "customer_id": customer["id"],
        "discount_amount": 10,
        "vat_rate": 20,
        "notes": "Teslimat cuma",
        "items": [
            {"stone_type_id": stone_type["id"], "thickness": 2, "width": 30, "length": 600,
             "quantity": 1, "measure_type": "m2", "unit_price": 200},
            {"stone_type_name": "Granit", "length": 250, "quantity": 2,
             "measure_type": "mtul", "unit_price": 100},
            {"stone_feature_name": "Montaj", "quantity": 3, "measure_type": "none", "unit_price": 50},
        ],
    })
    assert response.status_code == 200
    return response.json()


def test_spreadsheet_download(client, order):
    response = client.get(f"/api/orders/{order['id']}/excel")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert f'filename="{order["order_number"]}.csv"' in response.headers["content-disposition"]
    assert response.content.startswith(b"\xef\xbb\xbf")

    lines = response.content.decode("utf-8-sig").split("\n")
    assert f"Sipariş No;{order['order_number']}" in lines
    assert "1;Mermer;-;2;30;600;1;1.80 M²;200,00 TL;360,00 TL" in lines
    assert ";;;;;;;;GENEL TOPLAM;1.200,00 TL" in lines
    assert "Notlar;Teslimat cuma" in lines


def test_spreadsheet_renders_stored_totals(client, order, db):
    from backend import models

    stored = db.query(models.Order).filter(models.Order.id == order["id"]).first()
    stored.grand_total = 9999.0
    db.commit()

    text = client.get(f"/api/orders/{order['id']}/excel").content.decode("utf-8-sig")
    assert "9.999,00 TL" in text


def test_print_view(client, order):
    response = client.get(f"/api/orders/{order['id']}/print")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    page = response.text
    assert order["order_number"] in page
    assert "window.print()" in page
    assert "₺1.200,00" in page
    assert "-₺10,00" in page


def test_pdf_download(client, order):
    response = client.get(f"/api/orders/{order['id']}/pdf")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content[:5] == b"%PDF-"
    assert f'filename="{order["order_number"]}.pdf"' in response.headers["content-disposition"]


@pytest.mark.parametrize("fmt", ["excel", "print", "pdf"])
def test_unknown_order_is_404(client, fmt):
    response = client.get(f"/api/orders/999/{fmt}")
    assert response.status_code == 404
    assert response.json()["detail"] == "Order not found"
