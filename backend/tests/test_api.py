"""
API endpoint tests for all routes.
Uses in-memory SQLite + dependency-overridden FastAPI test client.
"""


def plywood_order(seed_data, quantity=10):
    return {
        "vendor_id": seed_data["greenply"],
        "priority": "high",
        "line_items": [{
            "material_id": seed_data["plywood"],
            "quantity": quantity,
            "unit": "Sheets",
            "rate": 1450,
            "site": "Whitefield Villa",
        }],
    }


# ===================== HEALTH / ROOT =====================


async def test_root(client):
    r = await client.get("/")
    assert r.status_code == 200
    assert r.json()["status"] == "running"


async def test_health(client):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"


# ===================== IDENTITY =====================


async def test_missing_identity_headers(unauth_client, seed_data):
    r = await unauth_client.get("/api/materials/")
    assert r.status_code == 401


async def test_unknown_role(unauth_client, seed_data):
    r = await unauth_client.get(
        "/api/materials/", headers={"X-User-Name": "Guest", "X-User-Role": "accountant"}
    )
    assert r.status_code == 403


# ===================== MASTER DATA =====================


async def test_material_crud(client, seed_data):
    r = await client.post("/api/materials/", json={"name": "MDF Board 12mm", "unit": "Sheets"})
    assert r.status_code == 200
    material_id = r.json()["id"]

    r = await client.put(f"/api/materials/{material_id}", json={"unit": "Boards"})
    assert r.status_code == 200
    assert r.json()["unit"] == "Boards"

    r = await client.get("/api/materials/")
    assert "MDF Board 12mm" in [m["name"] for m in r.json()]

    r = await client.delete(f"/api/materials/{material_id}")
    assert r.status_code == 200

    r = await client.get(f"/api/materials/{material_id}")
    assert r.status_code == 404


async def test_duplicate_material_is_bad_request(client, seed_data):
    r = await client.post("/api/materials/", json={"name": "PLYWOOD 18mm", "unit": "Sheets"})
    assert r.status_code == 400
    assert "already exists" in r.json()["detail"]


async def test_bulk_materials(client, seed_data):
    r = await client.post("/api/materials/bulk", json=[{"name": "Handles"}, {"name": "handles"}])
    assert r.status_code == 200
    assert r.json() == [{"id": r.json()[0]["id"], "name": "Handles", "unit": "Nos."}]


async def test_vendor_in_use_cannot_be_deleted(client, seed_data):
    r = await client.post("/api/orders/", json=plywood_order(seed_data))
    assert r.status_code == 200

    r = await client.delete(f"/api/vendors/{seed_data['greenply']}")
    assert r.status_code == 409


async def test_sites(client, seed_data):
    r = await client.post("/api/sites/", json={"name": "HSR Layout"})
    assert r.status_code == 200
    r = await client.get("/api/sites/")
    assert [s["name"] for s in r.json()] == ["Factory Workshop", "HSR Layout", "Whitefield Villa"]


# ===================== ORDERS =====================


async def test_purchase_to_delivery_flow(client, seed_data, purchaser_headers, storekeeper_headers):
    r = await client.post("/api/orders/", json=plywood_order(seed_data), headers=purchaser_headers)
    assert r.status_code == 200
    order = r.json()
    assert order["status"] == "awaiting_approval"
    assert order["reference"] == f"PO-{order['id']:05d}"
    assert order["line_items"][0]["gst"] == 18
    assert order["total_amount"] == 17110.0

    r = await client.post(f"/api/orders/{order['id']}/deliver", headers=storekeeper_headers)
    assert r.status_code == 409

    r = await client.post(f"/api/orders/{order['id']}/approve")
    assert r.status_code == 200
    assert r.json()["status"] == "pending"

    r = await client.post(f"/api/orders/{order['id']}/deliver", headers=storekeeper_headers)
    assert r.status_code == 200
    assert r.json()["received_by"] == "Ivan D'Souza"

    r = await client.get(f"/api/inventory/{seed_data['plywood']}")
    assert r.json()["quantity"] == 50

    # Second delivery is refused and stock is unchanged
    r = await client.post(f"/api/orders/{order['id']}/deliver", headers=storekeeper_headers)
    assert r.status_code == 409
    r = await client.get(f"/api/inventory/{seed_data['plywood']}")
    assert r.json()["quantity"] == 50

    r = await client.get("/api/orders/history")
    assert [o["id"] for o in r.json()] == [order["id"]]


async def test_order_validation_error(client, seed_data):
    payload = plywood_order(seed_data)
    payload["line_items"] = []
    r = await client.post("/api/orders/", json=payload)
    assert r.status_code == 400


async def test_order_permission_error(client, seed_data, storekeeper_headers):
    r = await client.post("/api/orders/", json=plywood_order(seed_data), headers=storekeeper_headers)
    assert r.status_code == 403


async def test_reject_and_resubmit(client, seed_data, purchaser_headers):
    r = await client.post("/api/orders/", json=plywood_order(seed_data), headers=purchaser_headers)
    order_id = r.json()["id"]

    r = await client.post(f"/api/orders/{order_id}/reject", json={"reason": ""})
    assert r.status_code == 400

    r = await client.post(f"/api/orders/{order_id}/reject", json={"reason": "Rate too high"})
    assert r.status_code == 200
    assert r.json()["is_rejected"] is True

    payload = plywood_order(seed_data)
    payload["line_items"][0]["rate"] = 1300
    r = await client.put(f"/api/orders/{order_id}", json=payload, headers=purchaser_headers)
    assert r.status_code == 200
    assert r.json()["status"] == "awaiting_approval"
    assert r.json()["rejection_reason"] is None


async def test_order_not_found(client, seed_data):
    r = await client.get("/api/orders/9999")
    assert r.status_code == 404


async def test_low_stock_draft(client, seed_data):
    r = await client.get(f"/api/orders/low-stock-draft/{seed_data['hinges']}")
    assert r.status_code == 200
    draft = r.json()
    assert draft["auto_generated"] is True
    assert draft["line_items"][0]["quantity"] == 20


# ===================== INTENTS =====================


async def test_intent_conversion_flow(client, seed_data, storekeeper_headers, purchaser_headers):
    r = await client.post("/api/intents/", json={
        "notes": "Kitchen shutters",
        "line_items": [{"material_id": seed_data["hinges"], "quantity": 100, "site": "Whitefield Villa"}],
    }, headers=storekeeper_headers)
    assert r.status_code == 200
    intent = r.json()
    assert intent["status"] == "pending"

    r = await client.get("/api/intents/awaiting-review")
    assert [i["id"] for i in r.json()] == [intent["id"]]

    r = await client.post(f"/api/intents/{intent['id']}/approve", headers=purchaser_headers)
    assert r.json()["status"] == "approved"

    r = await client.post(f"/api/intents/{intent['id']}/convert", headers=purchaser_headers)
    assert r.status_code == 200
    draft = r.json()
    assert draft["intent_id"] == intent["id"]
    assert draft["notes"] == f"Generated from Purchase Intent {intent['reference']}. Reason: Kitchen shutters"

    r = await client.get("/api/intents/unfulfilled")
    assert [i["id"] for i in r.json()] == [intent["id"]]

    draft["vendor_id"] = seed_data["hettich"]
    draft["line_items"][0]["rate"] = 45
    r = await client.post("/api/orders/", json=draft, headers=purchaser_headers)
    assert r.status_code == 200
    assert r.json()["intent_id"] == intent["id"]

    r = await client.get("/api/intents/unfulfilled")
    assert r.json() == []

    r = await client.post(f"/api/intents/{intent['id']}/convert", headers=purchaser_headers)
    assert r.status_code == 409


# ===================== INVENTORY / ISSUANCE =====================


async def test_low_stock_listing(client, seed_data):
    r = await client.get("/api/inventory/low-stock")
    assert r.status_code == 200
    assert [i["material_name"] for i in r.json()] == ["Soft-close Hinges"]
    assert r.json()[0]["is_low_stock"] is True


async def test_opening_stock(client, seed_data, storekeeper_headers):
    r = await client.post("/api/inventory/opening-stock", json={
        "updates": [{"material_id": seed_data["hinges"], "quantity": 80}],
        "new_items": [{"name": "Edge Banding Tape", "unit": "Rolls", "quantity": 14}],
    }, headers=storekeeper_headers)
    assert r.status_code == 200
    assert {i["material_name"]: i["quantity"] for i in r.json()} == {
        "Soft-close Hinges": 80,
        "Edge Banding Tape": 14,
    }


async def test_issue_material(client, seed_data, storekeeper_headers):
    r = await client.post("/api/issuances/", json={
        "material_id": seed_data["plywood"],
        "quantity": 30,
        "issued_to_site": "Factory Workshop",
    }, headers=storekeeper_headers)
    assert r.status_code == 200
    assert r.json()["unit"] == "Sheets"

    r = await client.post("/api/issuances/", json={
        "material_id": seed_data["plywood"],
        "quantity": 30,
        "issued_to_site": "Factory Workshop",
    }, headers=storekeeper_headers)
    assert r.status_code == 409
    assert "Insufficient stock" in r.json()["detail"]

    r = await client.get(f"/api/inventory/{seed_data['plywood']}")
    assert r.json()["quantity"] == 10

    r = await client.get("/api/issuances/", params={"site": "factory workshop"})
    assert len(r.json()) == 1


async def test_fractional_stock_over_http(client, seed_data, storekeeper_headers):
    r = await client.post("/api/inventory/opening-stock", json={
        "updates": [{"material_id": seed_data["plywood"], "quantity": 0.3, "unit": "Kg"}],
    }, headers=storekeeper_headers)
    assert r.status_code == 200

    for quantity in (0.1, 0.2):
        r = await client.post("/api/issuances/", json={
            "material_id": seed_data["plywood"],
            "quantity": quantity,
            "issued_to_site": "Factory Workshop",
        }, headers=storekeeper_headers)
        assert r.status_code == 200
        assert r.json()["quantity"] == quantity

    r = await client.get(f"/api/inventory/{seed_data['plywood']}")
    assert r.json()["quantity"] == 0


async def test_non_finite_quantity_is_unprocessable(client, seed_data, storekeeper_headers):
    r = await client.post("/api/issuances/", json={
        "material_id": seed_data["plywood"],
        "quantity": "Infinity",
        "issued_to_site": "Factory Workshop",
    }, headers=storekeeper_headers)
    assert r.status_code == 422

    r = await client.get(f"/api/inventory/{seed_data['plywood']}")
    assert r.json()["quantity"] == 40


async def test_purchaser_cannot_issue(client, seed_data, purchaser_headers):
    r = await client.post("/api/issuances/batch", json={"items": [{
        "material_id": seed_data["plywood"],
        "quantity": 1,
        "issued_to_site": "Factory Workshop",
    }]}, headers=purchaser_headers)
    assert r.status_code == 403


# ===================== NOTIFICATIONS / DASHBOARD =====================


async def test_notifications(client, seed_data):
    await client.post("/api/vendors/", json={"name": "Ebco Fittings"})

    r = await client.get("/api/notifications/")
    assert r.status_code == 200
    notifications = r.json()
    assert notifications[0]["message"] == 'Vendor "Ebco Fittings" added.'
    assert notifications[0]["kind"] == "success"

    r = await client.post(f"/api/notifications/{notifications[0]['id']}/dismiss")
    assert r.status_code == 200
    assert r.json()["dismissed"] is True

    r = await client.get("/api/notifications/")
    assert r.json() == []

    r = await client.post("/api/notifications/9999/dismiss")
    assert r.status_code == 404


async def test_dashboard_summary(client, seed_data, purchaser_headers):
    await client.post("/api/orders/", json=plywood_order(seed_data), headers=purchaser_headers)

    r = await client.get("/api/dashboard/summary")
    assert r.status_code == 200
    summary = r.json()
    assert summary["orders_by_status"]["awaiting_approval"] == 1
    assert summary["active_orders"] == 1
    assert summary["active_order_value"] == 17110.0
    assert summary["active_order_value_display"] == "₹17,110.00"
    assert summary["low_stock_items"][0]["suggested_reorder_quantity"] == 20
