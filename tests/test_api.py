from __future__ import annotations

from vendbox.settings import get_settings


def test_change_success(change_client):
    response = change_client.post(
        "/api/change",
        json={
            "cashRegister": [{"denom": 5, "count": 2}, {"denom": 10, "count": 1}],
            "paymentAmount": 20,
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["change"] == [5, 5, 10]
    assert body["coinUsage"] == {"5": 2, "10": 1}
    assert body["updatedRegister"] == [{"denom": 5, "count": 0}, {"denom": 10, "count": 0}]
    assert body["debug"] is None


def test_change_with_debug(change_client):
    response = change_client.post(
        "/api/change",
        json={
            "cashRegister": [{"denom": 5, "count": 2}, {"denom": 10, "count": 1}],
            "paymentAmount": 20,
            "debug": True,
        },
    )

    debug = response.json()["debug"]
    assert debug["targetAmount"] == 20
    assert debug["coinSet"] == [5, 10]
    assert len(debug["dpTablePreview"]) == 21
    assert debug["naive"]["resultCoins"] == 2


def test_change_failure_is_400_with_debug(change_client):
    response = change_client.post(
        "/api/change",
        json={"cashRegister": [{"denom": 5, "count": 3}], "paymentAmount": 12, "debug": True},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["reason"] == "no_exact_solution"
    assert body["message"] == "Exact change not possible with current coin counts."
    assert body["debug"]["trace"]


def test_change_insufficient_balance(change_client):
    response = change_client.post(
        "/api/change",
        json={"cashRegister": [{"denom": 5, "count": 1}], "paymentAmount": 10},
    )

    assert response.status_code == 400
    assert response.json()["reason"] == "insufficient_balance"


def test_validation_errors_become_400(change_client):
    response = change_client.post("/api/change", json={"cashRegister": [{"denom": 5, "count": 1}]})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"].startswith("paymentAmount: ")


def test_empty_register_is_rejected(change_client):
    response = change_client.post("/api/change", json={"cashRegister": [], "paymentAmount": 5})

    assert response.status_code == 400
    assert response.json()["message"] == "cashRegister: At least one denomination is required"


def test_register_size_limit(change_client):
    coins = [{"denom": d, "count": 1} for d in range(1, 66)]
    response = change_client.post("/api/change", json={"cashRegister": coins, "paymentAmount": 5})

    assert response.status_code == 400
    assert response.json()["message"] == "cashRegister: Too many denominations (max 64)"


def test_register_size_limit_from_settings(change_client, monkeypatch):
    monkeypatch.setenv("VENDBOX_MAX_REGISTER_SLOTS", "2")
    get_settings.cache_clear()
    coins = [{"denom": d, "count": 1} for d in (1, 2, 5)]
    response = change_client.post("/api/change", json={"cashRegister": coins, "paymentAmount": 5})

    assert response.json()["message"] == "cashRegister: Too many denominations (max 2)"


def test_duplicate_denominations_are_rejected(change_client):
    coins = [{"denom": 5, "count": 1}, {"denom": 5, "count": 2}]
    response = change_client.post("/api/change", json={"cashRegister": coins, "paymentAmount": 5})

    assert response.status_code == 400
    assert response.json()["message"] == "cashRegister: Duplicate denomination 5"


def test_amount_limit(change_client):
    response = change_client.post(
        "/api/change",
        json={"cashRegister": [{"denom": 5, "count": 1}], "paymentAmount": 1_000_001},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "paymentAmount: Payment amount too large"


def test_negative_values_are_rejected(change_client):
    response = change_client.post(
        "/api/change",
        json={"cashRegister": [{"denom": -5, "count": 1}], "paymentAmount": 5},
    )

    assert response.status_code == 400
    assert response.json()["message"].startswith("cashRegister.0.denom: ")


def test_invalid_json_is_400(change_client):
    response = change_client.post(
        "/api/change",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_change_page(change_client):
    response = change_client.get("/")

    assert response.status_code == 200
    assert "Change Maker" in response.text


def test_products_listing(catalog_client):
    response = catalog_client.get("/products")

    ids = [product["id"] for product in response.json()["products"]]
    assert "paracetamol" in ids


def test_catalog_page(catalog_client):
    response = catalog_client.get("/")

    assert response.status_code == 200
    assert "$3.99" in response.text


def test_purchase_endpoint(catalog_client, register):
    response = catalog_client.post(
        "/purchase",
        json={"productId": "paracetamol", "paymentAmount": 500, "cashRegister": register},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["roundedChange"] == 100
    assert body["result"]["change"] == [100]
    assert body["product"]["stock"] == 19


def test_purchase_with_custom_catalog(catalog_client, register):
    response = catalog_client.post(
        "/purchase",
        json={
            "productId": "tea",
            "paymentAmount": 300,
            "cashRegister": register,
            "products": [{"id": "tea", "name": "Green Tea", "price": 250, "stock": 1}],
        },
    )

    assert response.status_code == 200
    assert response.json()["result"]["change"] == [50]


def test_purchase_unknown_product(catalog_client, register):
    response = catalog_client.post(
        "/purchase",
        json={"productId": "nope", "paymentAmount": 500, "cashRegister": register},
    )

    assert response.status_code == 404


def test_purchase_underpaid(catalog_client, register):
    response = catalog_client.post(
        "/purchase",
        json={"productId": "paracetamol", "paymentAmount": 100, "cashRegister": register},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Payment must exceed product price."


def test_export_endpoint(transfer_client):
    response = transfer_client.post(
        "/export",
        json={
            "cashRegister": [{"denom": 5, "count": 2}],
            "products": [{"id": "tea", "name": "Green Tea", "price": 250, "stock": 4}],
        },
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "5,2\n" in response.text
    assert "tea,Green Tea,250,4\n" in response.text


def test_import_endpoint(transfer_client):
    text = "# Coin Register (denom,count)\n5,2\n\n# Metadata\nversion=1\n"
    response = transfer_client.post("/import", json={"text": text})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "cashRegister": [{"denom": 5, "count": 2}],
        "products": [],
        "metadata": {"version": "1"},
    }


def test_import_endpoint_without_rows(transfer_client):
    response = transfer_client.post("/import", json={"text": "nothing here"})

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_transfer_page(transfer_client):
    response = transfer_client.get("/")

    assert response.status_code == 200
    assert "# Coin Register (denom,count)" in response.text


def test_export_request_fields():
    from modules.register_transfer.tool.app import ExportRequest

    request = ExportRequest.model_validate({"cashRegister": [{"denom": 5, "count": 1}]})

    assert set(ExportRequest.model_fields) == {"cash_register", "products", "metadata"}
    assert request.cash_register[0].to_slot().denom == 5


def test_export_rejects_comma_in_product_id(transfer_client):
    response = transfer_client.post(
        "/export",
        json={"products": [{"id": "a,b", "name": "Tea", "price": 250, "stock": 1}]},
    )

    assert response.status_code == 400
    assert response.json()["message"].startswith("products.0.id: ")


def test_export_keeps_commas_in_product_names(transfer_client):
    exported = transfer_client.post(
        "/export",
        json={"products": [{"id": "cold", "name": "Cold, Flu", "price": 899, "stock": 2}]},
    ).text
    imported = transfer_client.post("/import", json={"text": exported})

    assert imported.json()["products"][0]["name"] == "Cold, Flu"
