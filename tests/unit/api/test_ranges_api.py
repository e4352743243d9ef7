"""
Tests for the time range API endpoints

Each endpoint is exercised through the full application so request
validation, error translation and response aliases are covered.
"""

from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from rangekit.ranges.presets import RANGE_OPTIONS


NOW = "2024-03-15T12:00:00Z"
NOW_DT = datetime(2024, 3, 15, 12, 0, 0, tzinfo=timezone.utc)


def parse_instant(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class TestResolveRange:
    """Test POST /api/v1/ranges/resolve"""

    def test_relative_range(self, client):
        response = client.post("/api/v1/ranges/resolve", json={"from": "now-1h", "to": "now", "now": NOW})

        assert response.status_code == 200
        body = response.json()
        assert parse_instant(body["from"]) == datetime(2024, 3, 15, 11, 0, tzinfo=timezone.utc)
        assert parse_instant(body["to"]) == NOW_DT
        assert body["raw"] == {"from": "now-1h", "to": "now"}
        assert body["display"] == "Last 1 hour"
        assert body["is_relative"] is True
        assert body["is_fiscal"] is False
        assert body["time_zone_abbreviation"] == "UTC"

    def test_rounded_range(self, client):
        response = client.post("/api/v1/ranges/resolve", json={"from": "now/d", "to": "now/d", "now": NOW})

        body = response.json()
        assert parse_instant(body["from"]) == datetime(2024, 3, 15, tzinfo=timezone.utc)
        assert parse_instant(body["to"]) == datetime(2024, 3, 15, 23, 59, 59, 999000, tzinfo=timezone.utc)
        assert body["display"] == "Today"

    def test_fiscal_range(self, client):
        response = client.post("/api/v1/ranges/resolve", json={
            "from": "now/fy",
            "to": "now",
            "fiscal_year_start_month": 3,
            "now": NOW,
        })

        body = response.json()
        assert parse_instant(body["from"]) == datetime(2023, 4, 1, tzinfo=timezone.utc)
        assert body["is_fiscal"] is True
        assert body["display"] == "This fiscal year so far"

    def test_time_zone(self, client):
        response = client.post("/api/v1/ranges/resolve", json={
            "from": "now/d",
            "to": "now",
            "time_zone": "Europe/Berlin",
            "now": NOW,
        })

        body = response.json()
        assert parse_instant(body["from"]) == datetime(2024, 3, 14, 23, 0, tzinfo=timezone.utc)
        assert body["time_zone_abbreviation"] == "CET"

    def test_absolute_range(self, client):
        response = client.post("/api/v1/ranges/resolve", json={
            "from": "2024-03-01T00:00:00Z",
            "to": "2024-03-02T00:00:00Z",
        })

        body = response.json()
        assert response.status_code == 200
        assert body["is_relative"] is False
        assert parse_instant(body["raw"]["from"]) == datetime(2024, 3, 1, tzinfo=timezone.utc)
        assert body["display"] == "2024-03-01 00:00:00 to 2024-03-02 00:00:00"

    def test_unknown_time_zone(self, client):
        response = client.post("/api/v1/ranges/resolve", json={
            "from": "now-1h",
            "to": "now",
            "time_zone": "Mars/Olympus",
        })

        assert response.status_code == 400
        assert response.json()["detail"]["error"]["code"] == "UNKNOWN_TIMEZONE"

    def test_fiscal_month_out_of_range(self, client):
        response = client.post("/api/v1/ranges/resolve", json={
            "from": "now-1h",
            "to": "now",
            "fiscal_year_start_month": 12,
        })

        assert response.status_code == 422

    def test_missing_side(self, client):
        response = client.post("/api/v1/ranges/resolve", json={"from": "now-1h"})

        assert response.status_code == 422

    def test_blank_side(self, client):
        response = client.post("/api/v1/ranges/resolve", json={"from": "  ", "to": "now"})

        assert response.status_code == 422


class TestDescribeRange:
    """Test POST /api/v1/ranges/describe"""

    def test_preset(self, client):
        response = client.post("/api/v1/ranges/describe", json={"from": "now-6h", "to": "now"})

        assert response.status_code == 200
        assert response.json() == {"display": "Last 6 hours"}

    def test_decomposed(self, client):
        response = client.post("/api/v1/ranges/describe", json={"from": "now-45m", "to": "now"})

        assert response.json()["display"] == "Last 45 minutes"

    def test_instant_and_expression(self, client):
        response = client.post("/api/v1/ranges/describe", json={
            "from": "2024-03-15T10:00:00Z",
            "to": "now-1h",
            "now": NOW,
        })

        assert response.json()["display"] == "2024-03-15 10:00:00 to an hour ago"


class TestDescribeText:
    """Test GET /api/v1/ranges/describe-text"""

    def test_past(self, client):
        response = client.get("/api/v1/ranges/describe-text", params={"expr": "5m"})

        assert response.status_code == 200
        assert response.json() == {
            "from": "now-5m",
            "to": "now",
            "display": "Last 5 minutes",
            "section": 3,
            "invalid": False,
        }

    def test_future(self, client):
        response = client.get("/api/v1/ranges/describe-text", params={"expr": "+3h"})

        body = response.json()
        assert body["from"] == "now"
        assert body["to"] == "now+3h"
        assert body["display"] == "Next 3 hours"

    def test_invalid(self, client):
        response = client.get("/api/v1/ranges/describe-text", params={"expr": "soon"})

        body = response.json()
        assert response.status_code == 200
        assert body["invalid"] is True
        assert body["display"] == "now-soon to now"

    def test_missing_expression(self, client):
        assert client.get("/api/v1/ranges/describe-text").status_code == 422


class TestValidate:
    """Test GET /api/v1/ranges/validate"""

    @pytest.mark.parametrize("value,valid", [
        ("$myVar", True),
        ("+$offset", True),
        ("1h", True),
        ("not-a-valid-expr!!", False),
    ])
    def test_validate(self, client, value, valid):
        response = client.get("/api/v1/ranges/validate", params={"value": value})

        assert response.json() == {"value": value, "valid": valid}


class TestOptions:
    """Test GET /api/v1/ranges/options"""

    def test_lists_visible_presets(self, client):
        response = client.get("/api/v1/ranges/options")

        options = response.json()["options"]
        assert len(options) == len(RANGE_OPTIONS)
        assert options[0] == {"from": "now/d", "to": "now/d", "display": "Today", "section": 2}
        assert all(not option["display"].startswith("Next") for option in options)


class TestInterval:
    """Test POST /api/v1/ranges/interval"""

    def test_with_resolution(self, client):
        response = client.post("/api/v1/ranges/interval", json={
            "from": "now-1h",
            "to": "now",
            "resolution": 100,
        })

        assert response.status_code == 200
        assert response.json() == {"interval_ms": 30000, "interval": "30s", "resolution": 100}

    def test_default_resolution_from_settings(self, client):
        response = client.post("/api/v1/ranges/interval", json={"from": "now-1h", "to": "now"})

        assert response.json()["resolution"] == 100
        assert response.json()["interval_ms"] == 30000

    def test_min_interval(self, client):
        response = client.post("/api/v1/ranges/interval", json={
            "from": "now-1h",
            "to": "now",
            "resolution": 100,
            "min_interval": "5m",
        })

        assert response.json()["interval_ms"] == 300000
        assert response.json()["interval"] == "5m"

    def test_invalid_min_interval(self, client):
        response = client.post("/api/v1/ranges/interval", json={
            "from": "now-1h",
            "to": "now",
            "min_interval": "often",
        })

        assert response.status_code == 400
        error = response.json()["detail"]["error"]
        assert error["code"] == "INVALID_INTERVAL"
        assert error["details"] == {"field": "min_interval"}

    def test_zero_resolution(self, client):
        response = client.post("/api/v1/ranges/interval", json={"from": "now-1h", "to": "now", "resolution": 0})

        assert response.status_code == 422

    def test_unresolvable_range(self, client):
        response = client.post("/api/v1/ranges/interval", json={"from": "garbage", "to": "now"})

        assert response.status_code == 400
        error = response.json()["detail"]["error"]
        assert error["code"] == "INVALID_TIME_RANGE"
        assert error["details"] == {"field": "from"}


class TestDescribeIntervalValue:
    """Test GET /api/v1/intervals/{value}"""

    def test_minutes(self, client):
        response = client.get("/api/v1/intervals/5m")

        assert response.status_code == 200
        assert response.json() == {
            "value": "5m",
            "sec": 60,
            "type": "m",
            "count": 5,
            "seconds": 300,
            "ms": 300000,
        }

    def test_months(self, client):
        assert client.get("/api/v1/intervals/2M").json()["seconds"] == 5184000

    def test_invalid(self, client):
        response = client.get("/api/v1/intervals/often")

        assert response.status_code == 400
        error = response.json()["detail"]["error"]
        assert error["code"] == "INVALID_INTERVAL"
        assert "y, M, w, d, h, m, s, ms" in error["message"]


class TestRelativeConversion:
    """Test POST /api/v1/ranges/to-relative and /to-absolute"""

    def test_to_relative(self, client):
        response = client.post("/api/v1/ranges/to-relative", json={
            "from": "now-1h",
            "to": "now-5m",
            "now": NOW,
        })

        assert response.status_code == 200
        assert response.json() == {"from": 3600, "to": 300}

    def test_to_relative_without_now_reads_clock_once(self, client):
        ticks = [
            datetime(2024, 3, 15, 11, 59, 59, 999999, tzinfo=timezone.utc),
            datetime(2024, 3, 15, 12, 0, 0, 1, tzinfo=timezone.utc),
        ]
        with patch("rangekit.api.ranges.datetime") as mock_datetime:
            mock_datetime.now.side_effect = ticks

            response = client.post("/api/v1/ranges/to-relative", json={"from": "now-1h", "to": "now"})

        assert response.status_code == 200
        assert response.json() == {"from": 3600, "to": 0}
        assert mock_datetime.now.call_count == 1

    def test_to_relative_keeps_sub_second_offsets(self, client):
        response = client.post("/api/v1/ranges/to-relative", json={
            "from": "2024-03-15T11:59:58.750Z",
            "to": "now",
            "now": NOW,
        })

        assert response.json() == {"from": 1.25, "to": 0}

    def test_to_absolute(self, client):
        response = client.post("/api/v1/ranges/to-absolute", json={"from": 300, "to": 0, "now": NOW})

        body = response.json()
        assert response.status_code == 200
        assert parse_instant(body["from"]) == datetime(2024, 3, 15, 11, 55, tzinfo=timezone.utc)
        assert parse_instant(body["to"]) == NOW_DT

    def test_round_trip(self, client):
        relative = client.post("/api/v1/ranges/to-relative", json={
            "from": "2024-03-14T12:00:00Z",
            "to": "2024-03-15T06:00:00Z",
            "now": NOW,
        }).json()

        absolute = client.post("/api/v1/ranges/to-absolute", json={**relative, "now": NOW}).json()

        assert parse_instant(absolute["from"]) == datetime(2024, 3, 14, 12, tzinfo=timezone.utc)
        assert parse_instant(absolute["to"]) == datetime(2024, 3, 15, 6, tzinfo=timezone.utc)
