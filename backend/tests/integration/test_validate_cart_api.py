"""Integration tests for POST /api/cart/validate-cart

Runs the full stack (router, dependencies, SQL repositories, engine)
against an in-memory SQLite database.
"""

from dependencies import get_catalog_lookup

from fixtures.reconciliation import PROJECT, STORE, FailingCatalogLookup


URL = "/api/cart/validate-cart"
BODY = {"store_code": STORE, "project_code": PROJECT}


class TestValidateCart:
    """Happy-path validation responses"""

    def test_valid_cart(self, client, shopper_headers, seed_product, seed_cart):
        seed_product("2390", our_price="18", store_quantity=20)
        seed_product("2391", our_price="45", store_quantity=5)
        seed_cart([
            {"p_code": "2390", "quantity": 2, "unit_price": "18"},
            {"p_code": "2391", "quantity": 1, "unit_price": "45"},
        ])

        response = client.post(URL, json=BODY, headers=shopper_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["status"] == "valid"
        assert data["cart_status"] == "OK"
        assert data["message"] == "Cart validation successful"
        assert data["validation"]["valid"] is True
        assert data["validation"]["totalItems"] == 2
        assert data["validation"]["validItems"] == 2
        assert data["validation"]["invalidItems"] == []
        assert data["validation"]["updatedItems"] == []

    def test_price_change_reported_in_updated_items(
        self, client, shopper_headers, seed_product, seed_cart
    ):
        seed_product("2390", our_price="120")
        seed_cart([{"p_code": "2390", "quantity": 2, "unit_price": "100"}])

        response = client.post(URL, json=BODY, headers=shopper_headers)

        data = response.json()
        assert response.status_code == 200
        assert data["status"] == "price_updated"
        assert data["validation"]["valid"] is True
        assert data["validation"]["summary"]["hasPriceChanges"] is True
        assert data["validation"]["summary"]["requiresAction"] is True

        [line] = data["validation"]["updatedItems"]
        assert line["p_code"] == "2390"
        assert line["price"]["old"] == 100
        assert line["price"]["new"] == 120
        assert line["price"]["percentageChange"] == 20
        [issue] = line["issues"]
        assert issue["kind"] == "PRICE_CHANGED"
        assert issue["actionType"] == "advisory"
        assert issue["suggestedAction"]["newTotalPrice"] == 240
        assert issue["suggestedAction"]["options"][0] == {
            "action": "accept_new_price",
            "label": "Update price",
            "newPrice": 120.0,
        }

    def test_blocking_issues(self, client, shopper_headers, seed_product, seed_cart):
        seed_product("A1", store_quantity=0)
        seed_product("B2", store_quantity=2, our_price="90")
        seed_product("C3", pcode_status="N")
        seed_cart([
            {"p_code": "A1", "quantity": 3, "unit_price": "100"},
            {"p_code": "B2", "quantity": 5, "unit_price": "100"},
            {"p_code": "C3", "quantity": 1, "unit_price": "100"},
            {"p_code": "GONE", "quantity": 1, "unit_price": "100"},
        ])

        response = client.post(URL, json=BODY, headers=shopper_headers)

        data = response.json()
        validation = data["validation"]
        assert response.status_code == 200
        assert data["status"] == "invalid"
        assert data["message"] == "1 product(s) out of stock"
        assert validation["valid"] is False
        assert validation["totalInvalidItems"] == 4
        assert validation["updatedItems"] == []
        assert validation["summary"] == {
            "hasPriceChanges": True,
            "hasStockIssues": True,
            "hasOutOfStock": True,
            "requiresAction": True,
        }

        kinds = {line["p_code"]: [i["kind"] for i in line["issues"]] for line in validation["invalidItems"]}
        assert kinds == {
            "A1": ["OUT_OF_STOCK"],
            "B2": ["INSUFFICIENT_STOCK", "PRICE_CHANGED"],
            "C3": ["PRODUCT_INACTIVE"],
            "GONE": ["PRODUCT_NOT_FOUND"],
        }
        assert [line["index"] for line in validation["invalidItems"]] == [0, 1, 2, 3]

    def test_quantity_exceeds_max(self, client, shopper_headers, seed_product, seed_cart):
        seed_product("2390", store_quantity=100, max_quantity_allowed=5)
        seed_cart([{"p_code": "2390", "quantity": 10, "unit_price": "100"}])

        response = client.post(URL, json=BODY, headers=shopper_headers)

        [line] = response.json()["validation"]["invalidItems"]
        [issue] = line["issues"]
        assert issue["kind"] == "QUANTITY_EXCEEDS_MAX"
        assert issue["maxAllowed"] == 5
        assert issue["suggestedAction"]["options"] == [
            {"action": "reduce_quantity", "label": "Update to 5", "quantity": 5}
        ]

    def test_product_from_other_store_not_found(
        self, client, shopper_headers, seed_product, seed_cart
    ):
        seed_product("2390", store_code="OTHER")
        seed_cart([{"p_code": "2390", "quantity": 1, "unit_price": "100"}])

        response = client.post(URL, json=BODY, headers=shopper_headers)

        [line] = response.json()["validation"]["invalidItems"]
        assert [issue["kind"] for issue in line["issues"]] == ["PRODUCT_NOT_FOUND"]

    def test_cart_is_not_modified(self, client, shopper_headers, seed_product, seed_cart, db_session):
        seed_product("2390", our_price="120", store_quantity=1)
        cart = seed_cart([{"p_code": "2390", "quantity": 3, "unit_price": "100"}])

        client.post(URL, json=BODY, headers=shopper_headers)

        db_session.refresh(cart.items[0])
        assert cart.items[0].quantity == 3
        assert float(cart.items[0].unit_price) == 100


class TestCartStatus:
    """Missing and empty carts"""

    def test_cart_not_found(self, client, shopper_headers):
        response = client.post(URL, json=BODY, headers=shopper_headers)

        data = response.json()
        assert response.status_code == 200
        assert data["cart_status"] == "CART_NOT_FOUND"
        assert data["message"] == "No saved cart found"
        assert data["validation"]["totalItems"] == 0
        assert data["validation"]["valid"] is True

    def test_cart_empty(self, client, shopper_headers, seed_cart):
        seed_cart([])

        response = client.post(URL, json=BODY, headers=shopper_headers)

        data = response.json()
        assert response.status_code == 200
        assert data["cart_status"] == "CART_EMPTY"
        assert data["message"] == "Cart is empty"

    def test_cart_of_other_shopper_not_visible(self, client, seed_cart):
        seed_cart([{"p_code": "2390", "quantity": 1}], mobile_no="9000000000")

        response = client.post(URL, json=BODY, headers={"X-Shopper-Key": "9876543210"})

        assert response.json()["cart_status"] == "CART_NOT_FOUND"


class TestRequestValidation:
    """Malformed requests are rejected with 400"""

    def test_missing_shopper_header(self, client):
        response = client.post(URL, json=BODY)

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["error"] == "X-Shopper-Key is required"

    def test_blank_shopper_header(self, client):
        response = client.post(URL, json=BODY, headers={"X-Shopper-Key": "  "})

        assert response.status_code == 400

    def test_missing_store_code(self, client, shopper_headers):
        response = client.post(URL, json={"project_code": PROJECT}, headers=shopper_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "store_code is required"

    def test_blank_project_code(self, client, shopper_headers):
        response = client.post(
            URL,
            json={"store_code": STORE, "project_code": "   "},
            headers=shopper_headers
        )

        assert response.status_code == 400
        assert "project_code is required" in response.json()["error"]


class TestCatalogUnavailable:
    """Catalog failures fail the whole call"""

    def test_catalog_failure_returns_503(self, client, shopper_headers, seed_cart):
        from main import app

        seed_cart([{"p_code": "2390", "quantity": 1}])
        app.dependency_overrides[get_catalog_lookup] = lambda: FailingCatalogLookup(
            ConnectionError("catalog down")
        )

        response = client.post(URL, json=BODY, headers=shopper_headers)

        assert response.status_code == 503
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "CATALOG_UNAVAILABLE"
        assert "validation" not in data


class TestObservability:
    """Health and metrics endpoints"""

    def test_health_degraded_with_empty_catalog(self, client):
        response = client.get("/health")

        data = response.json()
        assert response.status_code == 200
        assert data["status"] == "degraded"
        assert data["components"]["database"]["status"] == "healthy"
        assert data["components"]["catalog"]["status"] == "degraded"

    def test_health_with_catalog(self, client, seed_product):
        seed_product("2390")
        seed_product("2391", pcode_status="N")

        response = client.get("/health")

        data = response.json()
        assert data["status"] == "healthy"
        assert data["components"]["catalog"]["message"] == "1 active products"

    def test_metrics_include_validation_counter(self, client, shopper_headers):
        client.post(URL, json=BODY, headers=shopper_headers)

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "cart_validations_total" in response.text

    def test_request_id_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"
