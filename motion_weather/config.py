import os
from dotenv import load_dotenv

# .env はローカル開発用
load_dotenv()

# 東京 (city code 130010)
WEATHER_API_URL = os.environ.get(
    "WEATHER_API_URL",
    "https://weather.tsukumijima.net/api/forecast/city/130010",
)

RELAY_HOST = os.environ.get("RELAY_HOST", "0.0.0.0")
RELAY_PORT = int(os.environ.get("RELAY_PORT", "3001"))
RELAY_URL = os.environ.get("RELAY_URL", f"http://localhost:{RELAY_PORT}")

DASHBOARD_HOST = os.environ.get("DASHBOARD_HOST", "0.0.0.0")
DASHBOARD_PORT = int(os.environ.get("DASHBOARD_PORT", "5000"))
POLL_INTERVAL_SECONDS = int(os.environ.get("POLL_INTERVAL_SECONDS", "60"))


def _optional_float(name):
    raw = os.environ.get(name, "").strip()
    return float(raw) if raw else None


# None = requests のデフォルト (タイムアウトなし)
HTTP_TIMEOUT = _optional_float("HTTP_TIMEOUT")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
