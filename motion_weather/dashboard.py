import atexit
import logging
from datetime import datetime

import requests
from apscheduler.schedulers.background import BackgroundScheduler
from flask import Blueprint, Flask, current_app, jsonify, render_template

from . import config

logger = logging.getLogger(__name__)

POLL_ERROR_MESSAGE = "気象データの取得に失敗しました。"

dashboard_bp = Blueprint("dashboard", __name__)


class WeatherPoller:
    """
    Polls the relay's /weather endpoint and keeps the last good payload.

    State is swapped as a whole dict on every poll, so readers never see a
    half-updated view.
    """

    def __init__(self, relay_url=None, interval_seconds=None, timeout=None):
        self.relay_url = (relay_url or config.RELAY_URL).rstrip("/")
        self.interval_seconds = interval_seconds or config.POLL_INTERVAL_SECONDS
        self.timeout = timeout if timeout is not None else config.HTTP_TIMEOUT
        self.state = {
            "today": None,
            "tomorrow": None,
            "last_motion": None,
            "error": None,
        }
        self.scheduler = None

    @property
    def weather_url(self):
        return f"{self.relay_url}/weather"

    def poll(self):
        try:
            r = requests.get(self.weather_url, timeout=self.timeout)
            r.raise_for_status()
            data = r.json()
            if not isinstance(data, dict):
                raise ValueError(f"relay body is not an object: {type(data).__name__}")
        except (requests.RequestException, ValueError) as e:
            logger.warning("Failed to fetch weather data: %s", e)
            self.state = {**self.state, "error": POLL_ERROR_MESSAGE}
            return False

        self.state = {
            "today": data.get("weather") or self.state["today"],
            "tomorrow": data.get("tomorrow") or self.state["tomorrow"],
            "last_motion": data.get("lastMotionDetected"),
            "error": None,
        }
        return True

    def start(self):
        """Poll once now, then every interval_seconds in the background."""
        self.poll()
        self.scheduler = BackgroundScheduler()
        self.scheduler.add_job(func=self.poll, trigger="interval", seconds=self.interval_seconds)
        self.scheduler.start()
        atexit.register(self.stop)
        logger.info("Polling %s every %ss", self.weather_url, self.interval_seconds)

    def stop(self):
        if self.scheduler is not None and self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        self.scheduler = None


def format_motion_time(value):
    """ISO timestamp from the relay -> local time string, like toLocaleString()."""
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return dt.astimezone().strftime("%Y/%m/%d %H:%M:%S")


def get_poller():
    return current_app.extensions["weather_poller"]


@dashboard_bp.route("/")
def index():
    poller = get_poller()
    state = poller.state
    return render_template(
        "dashboard.html",
        today=state["today"],
        tomorrow=state["tomorrow"],
        last_motion=format_motion_time(state["last_motion"]),
        error=state["error"],
        refresh_seconds=poller.interval_seconds,
    )


@dashboard_bp.route("/state.json")
def state_json():
    return jsonify(get_poller().state)


def create_dashboard_app(poller=None):
    app = Flask(__name__)
    app.json.ensure_ascii = False
    app.extensions["weather_poller"] = poller or WeatherPoller()
    app.register_blueprint(dashboard_bp)
    return app
