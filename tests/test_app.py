"""HTTP contract tests for the analytics routes."""
from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient

from sheet_analytics.app import app
from sheet_analytics.config import reset_settings


@pytest.fixture
def client():
    reset_settings()
    yield TestClient(app)
    reset_settings()


@pytest.fixture
def cells() -> dict:
    return {
        "A1": {"value": "Day"},
        "B1": {"value": "Visits"},
        "A2": {"value": 1},
        "B2": {"value": 10},
        "A3": {"value": 2},
        "B3": {"value": 12},
        "A4": {"value": 3},
        "B4": {"formula": "=B3+2"},
    }


class TestAnalyticsRoutes:
    def test_health(self, client):
        assert client.get("/api/health").json() == {"status": "ok"}

    def test_analytics_payload_is_camel_case(self, client, cells):
        resp = client.post("/api/analytics", json={"cells": cells})
        assert resp.status_code == 200
        body = resp.json()
        assert body["summary"]["totalRows"] == 3
        assert body["summary"]["numericColumns"] == ["Day", "Visits"]
        visits = next(t for t in body["trends"] if t["column"] == "Visits")
        assert visits["trend"] == "increasing"
        assert visits["forecast"][0] == pytest.approx(16.0)

    def test_empty_sheet(self, client):
        body = client.post("/api/analytics", json={"cells": {}}).json()
        assert body["summary"]["totalRows"] == 0
        assert body["trends"] == []

    def test_bad_address(self, client):
        resp = client.post("/api/analytics", json={"cells": {"not-an-address": {"value": 1}}})
        assert resp.status_code == 400
        assert resp.json()["detail"]["code"] == "INVALID_CELLS"

    def test_chart(self, client, cells):
        resp = client.post("/api/charts", json={"cells": cells, "config": {"type": "line", "xAxis": "Day", "yAxis": "Visits"}})
        assert resp.status_code == 200
        body = resp.json()
        assert body["title"] == "Visits vs Day"
        assert body["xAxis"] == "Day"
        assert len(body["data"]) == 3

    def test_chart_unknown_column(self, client, cells):
        resp = client.post("/api/charts", json={"cells": cells, "config": {"xAxis": "Day", "yAxis": "Revenue"}})
        assert resp.status_code == 400
        assert resp.json()["detail"]["code"] == "INVALID_CHART"

    def test_chart_and_analytics_run_in_worker_thread(self, client, cells, monkeypatch):
        offloaded = []
        real_to_thread = asyncio.to_thread

        async def recording_to_thread(func, *args, **kwargs):
            offloaded.append(func.__name__)
            return await real_to_thread(func, *args, **kwargs)

        monkeypatch.setattr(asyncio, "to_thread", recording_to_thread)
        chart = client.post("/api/charts", json={"cells": cells, "config": {"xAxis": "Day", "yAxis": "Visits"}})
        bad = client.post("/api/charts", json={"cells": cells, "config": {"xAxis": "Day", "yAxis": "Revenue"}})
        client.post("/api/analytics", json={"cells": cells})
        assert chart.status_code == 200
        assert bad.status_code == 400
        assert [name for name in offloaded if name in {"_chart", "_analytics"}] == ["_chart", "_chart", "_analytics"]


class TestSettingsRoutes:
    def test_update_config(self, client):
        resp = client.post("/api/config", json={"histogram_bins": 4})
        assert resp.status_code == 200
        assert resp.json()["settings"]["histogram_bins"] == 4
        assert client.get("/api/settings").json()["histogram_bins"] == 4

    def test_rejects_invalid_config(self, client):
        assert client.post("/api/config", json={"type_threshold": 2}).status_code == 422
