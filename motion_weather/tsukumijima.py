import logging
from dataclasses import dataclass, field
from typing import Optional

import requests

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"
RAIN_BUCKETS = ("T00_06", "T06_12", "T12_18", "T18_24")


class WeatherFetchError(Exception):
    """Raised when the forecast feed cannot be fetched or has an unusable shape."""


@dataclass(frozen=True)
class ForecastSnapshot:
    date: str
    date_label: str
    telop: str
    temperature_max: str
    temperature_min: str
    chance_of_rain: dict = field(default_factory=dict)
    image: Optional[dict] = None
    description: Optional[str] = None

    def to_dict(self):
        out = {
            "date": self.date,
            "dateLabel": self.date_label,
            "telop": self.telop,
            "temperature": {
                "max": self.temperature_max,
                "min": self.temperature_min,
            },
            "chanceOfRain": dict(self.chance_of_rain),
            "image": self.image,
        }
        if self.description is not None:
            out["description"] = self.description
        return out


def fetch_forecast(url, timeout=None):
    """
    tsukumijima の天気予報 API (livedoor 互換) から JSON を取得する。
    取得・デコードに失敗した場合は WeatherFetchError を送出する。
    """
    logger.debug("Fetching forecast from %s", url)
    try:
        r = requests.get(url, timeout=timeout)
        r.raise_for_status()
        return r.json()
    except requests.RequestException as e:
        raise WeatherFetchError(f"forecast request failed: {e}") from e
    except ValueError as e:
        raise WeatherFetchError(f"forecast response is not JSON: {e}") from e


def _obj(value):
    # 型が違うブロックは欠損扱い
    return value if isinstance(value, dict) else {}


def _text(value):
    if value is None or value == "":
        return NOT_AVAILABLE
    return str(value)


def _celsius(temperature, key):
    # max / min は {"celsius": "12", "fahrenheit": "53.6"} か null
    return _text(_obj(_obj(temperature).get(key)).get("celsius"))


def _chance_of_rain(raw):
    raw = _obj(raw)
    return {bucket: _text(raw.get(bucket)) for bucket in RAIN_BUCKETS}


def to_snapshot(entry, description=None):
    """Map one upstream forecast entry to a ForecastSnapshot."""
    if not isinstance(entry, dict):
        raise WeatherFetchError(f"forecast entry is not an object: {entry!r}")

    image = entry.get("image")
    return ForecastSnapshot(
        date=entry.get("date"),
        date_label=entry.get("dateLabel"),
        telop=entry.get("telop"),
        temperature_max=_celsius(entry.get("temperature"), "max"),
        temperature_min=_celsius(entry.get("temperature"), "min"),
        chance_of_rain=_chance_of_rain(entry.get("chanceOfRain")),
        image=image if isinstance(image, dict) else None,
        description=description,
    )


def build_today_tomorrow(data):
    """
    forecasts[0] を今日、forecasts[1] を明日として返す。
    返り値: (today, tomorrow) の ForecastSnapshot
    """
    if not isinstance(data, dict):
        raise WeatherFetchError("forecast payload is not an object")

    forecasts = data.get("forecasts") or []
    if not isinstance(forecasts, list):
        raise WeatherFetchError(f"forecasts is not a list: {type(forecasts).__name__}")
    if len(forecasts) < 2:
        raise WeatherFetchError(f"expected 2 forecast entries, got {len(forecasts)}")

    description = _obj(data.get("description")).get("text") or ""
    if not isinstance(description, str):
        description = str(description)
    today = to_snapshot(forecasts[0], description=description)
    tomorrow = to_snapshot(forecasts[1])
    return today, tomorrow
