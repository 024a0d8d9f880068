def _create_delivery(client, headers, **fields):
    payload = {
        "priority": "high",
        "pickup": {"address": "Central Warehouse", "location": {"lat": 0.31, "lng": 32.6}},
        "dropoff": {
            "address": "Ntinda Shop 4",
            "time_window": {"start": "2026-10-19T08:00:00Z", "end": "2099-01-01T00:00:00Z"},
        },
        "customer": {"name": "Mukasa Stores", "phone": "+256700123456"},
        "cargo": {"type": "beverages", "quantity": 40, "weight_kg": 500},
        **fields,
    }
    response = client.post("/api/v1/deliveries", json=payload, headers=headers)
    assert response.status_code == 201
    return response.json()


def test_admin_delivery_crud(client, admin):
    headers = admin["headers"]
    delivery = _create_delivery(client, headers, scheduled_date="2026-10-20T09:00:00Z")
    assert delivery["status"] == "pending"
    assert delivery["created_by"] == admin["id"]
    assert [entry["status"] for entry in delivery["timeline"]] == ["pending"]
    assert delivery["cargo"]["weight_kg"] == 500

    later = _create_delivery(client, headers, scheduled_date="2026-10-25T09:00:00Z")
    unscheduled = _create_delivery(client, headers)

    listed = client.get("/api/v1/deliveries", headers=headers)
    assert listed.status_code == 200
    assert [item["id"] for item in listed.json()["items"]] == [
        later["id"],
        delivery["id"],
        unscheduled["id"],
    ]

    updated = client.patch(
        f"/api/v1/deliveries/{delivery['id']}",
        json={"notes": "Call ahead", "status": "cancelled"},
        headers=headers,
    )
    assert updated.status_code == 200
    assert updated.json()["notes"] == "Call ahead"
    assert [entry["status"] for entry in updated.json()["timeline"]] == ["pending", "cancelled"]

    reopened = client.patch(
        f"/api/v1/deliveries/{delivery['id']}", json={"status": "pending"}, headers=headers
    )
    assert reopened.status_code == 409
    assert reopened.json()["detail"] == "Invalid status transition: cancelled -> pending"

    cancelled = client.get("/api/v1/deliveries", params={"status": "cancelled"}, headers=headers)
    assert cancelled.json()["total"] == 1

    assert client.delete(f"/api/v1/deliveries/{delivery['id']}", headers=headers).status_code == 204
    assert client.get(f"/api/v1/deliveries/{delivery['id']}", headers=headers).status_code == 404


def test_invalid_enum_values_are_rejected(client, admin):
    response = client.post(
        "/api/v1/deliveries", json={"priority": "whenever"}, headers=admin["headers"]
    )

    assert response.status_code == 422


def test_driver_task_flow(client, admin, driver, other_driver):
    delivery = _create_delivery(client, admin["headers"])

    assign = client.post(
        f"/api/v1/deliveries/{delivery['id']}/assign",
        json={"driver_id": driver["id"]},
        headers=admin["headers"],
    )
    assert assign.status_code == 200
    assert assign.json()["status"] == "assigned"

    tasks = client.get("/api/v1/me/deliveries", headers=driver["headers"])
    assert [item["id"] for item in tasks.json()] == [delivery["id"]]
    pending_tab = client.get("/api/v1/me/deliveries", params={"tab": "pending"}, headers=driver["headers"])
    assert pending_tab.json() == []
    assert client.get("/api/v1/me/deliveries", headers=other_driver["headers"]).json() == []

    foreign = client.post(
        f"/api/v1/me/deliveries/{delivery['id']}/start", headers=other_driver["headers"]
    )
    assert foreign.status_code == 404

    started = client.post(f"/api/v1/me/deliveries/{delivery['id']}/start", headers=driver["headers"])
    assert started.status_code == 200
    assert started.json()["status"] == "in_progress"
    assert started.json()["start_time"] is not None

    navigation = client.get("/api/v1/me/navigation", headers=driver["headers"])
    assert navigation.status_code == 200
    assert navigation.json()["current_delivery"]["id"] == delivery["id"]
    assert navigation.json()["recent_locations"] == []

    completed = client.post(
        f"/api/v1/me/deliveries/{delivery['id']}/complete",
        json={
            "notes": "Signed by storekeeper",
            "proof_of_delivery": {"signature": "sig-data", "photos": ["https://cdn.test/p1.jpg"]},
        },
        headers=driver["headers"],
    )
    assert completed.status_code == 200
    body = completed.json()
    assert body["status"] == "completed"
    assert body["completion_time"] is not None
    assert body["proof_of_delivery"]["photos"] == ["https://cdn.test/p1.jpg"]
    assert [entry["status"] for entry in body["timeline"]] == [
        "pending",
        "assigned",
        "in_progress",
        "completed",
    ]

    profile = client.get("/api/v1/auth/me", headers=driver["headers"]).json()
    assert profile["status"] == "available"
    assert profile["performance_metrics"]["deliveries_completed"] == 1

    again = client.post(
        f"/api/v1/me/deliveries/{delivery['id']}/complete", json={}, headers=driver["headers"]
    )
    assert again.status_code == 409

    completed_tab = client.get(
        "/api/v1/me/deliveries", params={"tab": "completed"}, headers=driver["headers"]
    )
    assert len(completed_tab.json()) == 1
    assert client.get("/api/v1/me/navigation", headers=driver["headers"]).json()[
        "current_delivery"
    ] is None
