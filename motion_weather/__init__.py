from .dashboard import WeatherPoller, create_dashboard_app
from .motion import MotionTracker
from .relay import WeatherRelay, create_relay_app
from .tsukumijima import ForecastSnapshot, WeatherFetchError

__all__ = [
    "ForecastSnapshot",
    "MotionTracker",
    "WeatherFetchError",
    "WeatherPoller",
    "WeatherRelay",
    "create_dashboard_app",
    "create_relay_app",
]
