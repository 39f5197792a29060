import logging

from flask import Blueprint, Flask, current_app, jsonify

from . import config
from .motion import MotionTracker
from .tsukumijima import WeatherFetchError, build_today_tomorrow, fetch_forecast

logger = logging.getLogger(__name__)

ERROR_MESSAGE = "気象データの取得に失敗しました"

relay_bp = Blueprint("relay", __name__)


class WeatherRelay:
    """Owns the motion timestamp and reshapes the upstream forecast."""

    def __init__(self, api_url=None, timeout=None, motion=None):
        self.api_url = api_url or config.WEATHER_API_URL
        self.timeout = timeout if timeout is not None else config.HTTP_TIMEOUT
        self.motion = motion or MotionTracker()

    def record_motion(self):
        return self.motion.record()

    def get_weather(self):
        """
        上流 API を1回だけ取得し、画面用の形に整えて返す。
        失敗時は WeatherFetchError (リトライ・キャッシュなし)。
        """
        data = fetch_forecast(self.api_url, timeout=self.timeout)
        today, tomorrow = build_today_tomorrow(data)
        return {
            "weather": today.to_dict(),
            "tomorrow": tomorrow.to_dict(),
            "lastMotionDetected": self.motion.as_json(),
        }


def get_relay():
    return current_app.extensions["weather_relay"]


@relay_bp.after_app_request
def allow_any_origin(response):
    # ブラウザのダッシュボードから直接叩けるように
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    return response


@relay_bp.route("/motion-detected", methods=["POST"])
def motion_detected():
    get_relay().record_motion()
    return "OK", 200


@relay_bp.route("/weather")
def weather():
    try:
        return jsonify(get_relay().get_weather())
    except WeatherFetchError:
        logger.exception("Error fetching weather data")
        return jsonify({"error": ERROR_MESSAGE}), 500


def create_relay_app(relay=None):
    app = Flask(__name__)
    app.json.ensure_ascii = False
    app.extensions["weather_relay"] = relay or WeatherRelay()
    app.register_blueprint(relay_bp)
    return app
