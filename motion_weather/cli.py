import argparse
import logging
import sys

import requests

from . import config
from .dashboard import WeatherPoller, create_dashboard_app
from .logging_config import setup_logging
from .relay import create_relay_app

logger = logging.getLogger(__name__)


def run_relay(args):
    app = create_relay_app()
    logger.info("サーバーがポート%sで起動しました", args.port)
    app.run(host=args.host, port=args.port)
    return 0


def run_dashboard(args):
    poller = WeatherPoller(relay_url=args.relay_url, interval_seconds=args.interval)
    app = create_dashboard_app(poller)
    poller.start()
    try:
        app.run(host=args.host, port=args.port)
    finally:
        poller.stop()
    return 0


def send_motion(args):
    url = args.relay_url.rstrip("/") + "/motion-detected"
    try:
        r = requests.post(url, timeout=config.HTTP_TIMEOUT)
        r.raise_for_status()
    except requests.RequestException as e:
        logger.error("Failed to post motion to %s: %s", url, e)
        return 1
    print("Motion posted.")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(prog="motion-weather", description="Tokyo forecast relay and dashboard")
    parser.add_argument("--log-level", default=config.LOG_LEVEL, help="Root log level")
    sub = parser.add_subparsers(dest="command", required=True)

    relay = sub.add_parser("relay", help="Run the weather relay service")
    relay.add_argument("--host", default=config.RELAY_HOST)
    relay.add_argument("--port", type=int, default=config.RELAY_PORT)
    relay.set_defaults(func=run_relay)

    dashboard = sub.add_parser("dashboard", help="Run the polling dashboard")
    dashboard.add_argument("--host", default=config.DASHBOARD_HOST)
    dashboard.add_argument("--port", type=int, default=config.DASHBOARD_PORT)
    dashboard.add_argument("--relay-url", default=config.RELAY_URL)
    dashboard.add_argument("--interval", type=int, default=config.POLL_INTERVAL_SECONDS, help="Poll interval in seconds")
    dashboard.set_defaults(func=run_dashboard)

    motion = sub.add_parser("motion", help="Post one motion event to the relay")
    motion.add_argument("--relay-url", default=config.RELAY_URL)
    motion.set_defaults(func=send_motion)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
