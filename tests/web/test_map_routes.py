"""Tests for map and air-quality heatmap routes."""


def test_map_data_public(client, populated_store):
    res = client.get("/api/map/data?timeRange=7days")
    assert res.status_code == 200
    body = res.json()
    points = body["points"]
    assert len(points) == 2
    # Newest first
    assert points[0]["emotion"] == "Sadness"
    assert points[0]["aqi"] == 4
    assert points[0]["airQualityDetails"]["pm2_5"] == 55.0
    assert points[1]["lat"] == -6.9
    assert body["statistics"] == {
        "avgAqi": 3,
        "dominantMood": "Sadness",
        "totalEntries": 2,
        "timeRange": "7days",
    }


def test_map_data_defaults_to_today(client, populated_store):
    body = client.get("/api/map/data").json()
    assert body["points"] == []
    assert body["statistics"] == {
        "avgAqi": 0,
        "dominantMood": "Unknown",
        "totalEntries": 0,
        "timeRange": "today",
    }


def test_air_quality_anonymous(client, populated_store):
    res = client.get("/api/air-quality?timeRange=30days")
    assert res.status_code == 200
    assert res.json() == {
        "data": [],
        "timeRange": "30days",
        "message": "No authenticated session found",
    }


def test_air_quality_user(client, auth_headers, populated_store):
    res = client.get("/api/air-quality?timeRange=7days", headers=auth_headers)
    body = res.json()
    assert body["timeRange"] == "7days"
    assert len(body["data"]) == 2
    latest = body["data"][0]
    assert latest["location"] == {"lat": -6.2, "lon": 106.8, "name": "Jakarta"}
    assert latest["airQuality"]["aqi"] == 4
    assert latest["airQuality"]["pm2_5"] == 55.0
    assert latest["airQuality"]["so2"] == 0


def test_air_quality_other_user(client, auth_headers_b, populated_store):
    body = client.get("/api/air-quality?timeRange=7days", headers=auth_headers_b).json()
    assert body["data"] == []


def test_public_heatmap_average(client, populated_store):
    res = client.get("/api/public/air-quality?timeRange=7days")
    assert res.status_code == 200
    body = res.json()
    assert body["isAverage"] is True
    assert body["timeRange"] == "7days"
    by_name = {p["location"]["name"]: p for p in body["weatherData"]}
    assert set(by_name) == {"Bandung", "Jakarta"}
    assert by_name["Jakarta"]["sampleCount"] == 1
    assert by_name["Jakarta"]["airQuality"]["aqi"] == 4
    assert len(body["journalData"]) == 2
    assert {c["dominantEmotion"] for c in body["journalData"]} == {"Joy", "Sadness"}


def test_public_heatmap_today(client, populated_store):
    body = client.get("/api/public/air-quality").json()
    assert body == {"weatherData": [], "journalData": [], "timeRange": "today", "isAverage": False}
