import logging
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


def _utcnow():
    return datetime.now(timezone.utc)


def to_iso(dt):
    """UTC ISO-8601 with milliseconds and a Z suffix, e.g. 2024-05-01T03:04:05.678Z."""
    if dt is None:
        return None
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


class MotionTracker:
    """
    Holds the time of the last motion-sensor trigger.

    The value lives only as long as the process; a restart resets it to None.
    """

    def __init__(self, clock=_utcnow):
        self._clock = clock
        self._last_detected = None

    @property
    def last_detected(self):
        return self._last_detected

    def record(self):
        now = self._clock()
        # 時計が巻き戻っても前回値より古くはしない
        if self._last_detected is None or now >= self._last_detected:
            self._last_detected = now
        logger.debug("Motion detected at %s", to_iso(self._last_detected))
        return self._last_detected

    def as_json(self):
        return to_iso(self._last_detected)
