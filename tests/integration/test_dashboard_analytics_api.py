def _delivery(client, headers, **fields):
    response = client.post("/api/v1/deliveries", json=fields, headers=headers)
    assert response.status_code == 201
    return response.json()


def test_admin_dashboard_etag_round_trip(client, admin):
    headers = admin["headers"]
    _delivery(client, headers)

    first = client.get("/api/v1/dashboard/admin", headers=headers)
    assert first.status_code == 200
    assert first.json()["pending_deliveries"][0]["status"] == "pending"
    assert first.json()["error"] is None
    etag = first.headers["ETag"]
    assert first.headers["Cache-Control"] == "private, no-cache"

    not_modified = client.get(
        "/api/v1/dashboard/admin", headers={**headers, "If-None-Match": etag}
    )
    assert not_modified.status_code == 304
    assert not_modified.headers["ETag"] == etag
    assert not_modified.content == b""

    _delivery(client, headers)
    changed = client.get("/api/v1/dashboard/admin", headers={**headers, "If-None-Match": etag})
    assert changed.status_code == 200
    assert changed.headers["ETag"] != etag
    assert len(changed.json()["pending_deliveries"]) == 2


def test_driver_dashboard(client, admin, driver):
    delivery = _delivery(client, admin["headers"], assigned_driver_id=driver["id"])

    response = client.get("/api/v1/dashboard/driver", headers=driver["headers"])

    assert response.status_code == 200
    body = response.json()
    assert body["stats"]["total"] == 1
    assert body["stats"]["pending"] == 1
    assert body["stats"]["rating"] == 0.0
    assert [item["id"] for item in body["upcoming"]] == [delivery["id"]]


def test_analytics_report(client, admin, driver):
    headers = admin["headers"]
    assigned = _delivery(client, headers, assigned_driver_id=driver["id"], status="in_progress")
    _delivery(client, headers, status="cancelled")

    response = client.get("/api/v1/analytics", params={"time_range": "week"}, headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["time_range"] == "week"
    assert body["stats"] == {
        "total": 2,
        "completed": 0,
        "pending": 0,
        "in_progress": 1,
        "cancelled": 1,
    }
    assert len(body["by_date"]) == 1
    assert body["by_date"][0]["total"] == 2
    assert {row["name"]: row["value"] for row in body["by_status"]}["cancelled"] == 1
    assert body["driver_performance"] == [
        {
            "driver_id": driver["id"],
            "name": "Dan Driver",
            "completed": 0,
            "in_progress": 1,
            "total": 1,
            "rating": 0.0,
        }
    ]
    assert assigned["assigned_driver_id"] == driver["id"]

    fallback = client.get("/api/v1/analytics", params={"time_range": "decade"}, headers=headers)
    assert fallback.json()["time_range"] == "month"


def test_analytics_requires_admin(client, driver):
    assert client.get("/api/v1/analytics", headers=driver["headers"]).status_code == 403
