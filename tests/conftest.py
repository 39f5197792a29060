"""
Shared fixtures for the relay and dashboard tests.

Upstream HTTP is never touched; requests.get is patched per test.
"""

import copy
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from motion_weather.dashboard import WeatherPoller, create_dashboard_app
from motion_weather.motion import MotionTracker
from motion_weather.relay import WeatherRelay, create_relay_app


FORECAST_PAYLOAD = {
    "publicTime": "2024-05-01T11:00:00+09:00",
    "title": "東京都 東京 の天気",
    "description": {
        "text": "関東甲信地方は高気圧に覆われています。",
    },
    "forecasts": [
        {
            "date": "2024-05-01",
            "dateLabel": "今日",
            "telop": "晴れ",
            "temperature": {
                "min": {"celsius": None, "fahrenheit": None},
                "max": {"celsius": "24", "fahrenheit": "75.2"},
            },
            "chanceOfRain": {"T00_06": "--%", "T06_12": "0%", "T12_18": "0%", "T18_24": "10%"},
            "image": {
                "title": "晴れ",
                "url": "https://www.jma.go.jp/bosai/forecast/img/100.svg",
                "width": 80,
                "height": 60,
            },
        },
        {
            "date": "2024-05-02",
            "dateLabel": "明日",
            "telop": "曇時々雨",
            "temperature": {
                "min": {"celsius": "15", "fahrenheit": "59"},
                "max": {"celsius": "21", "fahrenheit": "69.8"},
            },
            "chanceOfRain": {"T00_06": "20%", "T06_12": "50%", "T12_18": "60%", "T18_24": "30%"},
            "image": {
                "title": "曇時々雨",
                "url": "https://www.jma.go.jp/bosai/forecast/img/202.svg",
                "width": 80,
                "height": 60,
            },
        },
        {
            "date": "2024-05-03",
            "dateLabel": "明後日",
            "telop": "晴れ",
            "temperature": {"min": None, "max": None},
            "chanceOfRain": {},
        },
    ],
}


def make_response(payload=None, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    return response


@pytest.fixture
def forecast_payload():
    return copy.deepcopy(FORECAST_PAYLOAD)


class FakeClock:
    def __init__(self, start=None):
        self.now = start or datetime(2024, 5, 1, 3, 0, 0, 123000, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def relay(clock):
    return WeatherRelay(api_url="http://upstream.test/forecast", motion=MotionTracker(clock=clock))


@pytest.fixture
def relay_client(relay):
    app = create_relay_app(relay)
    app.config["TESTING"] = True
    return app.test_client()


@pytest.fixture
def poller():
    return WeatherPoller(relay_url="http://relay.test/", interval_seconds=60)


@pytest.fixture
def dashboard_client(poller):
    app = create_dashboard_app(poller)
    app.config["TESTING"] = True
    return app.test_client()


@pytest.fixture
def upstream_response():
    """Factory for fake requests.Response objects."""
    return make_response
