import logging
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from coercion import UTC_MARKER

logger = logging.getLogger(__name__)

# Capture times written by the camera, usually as naive wall-clock values
CAPTURE_TIME_FIELDS = ("date_time", "date_time_original", "date_time_digitized")


def format_utc_offset(offset):
    """Format a UTC offset as +HHMM or -HHMM"""
    seconds = int(offset.total_seconds())
    sign = "+"
    if seconds < 0:
        sign = "-"
        seconds = -seconds
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    return f"{sign}{hours:02d}{minutes:02d}"


def is_zoneless(value):
    """True for naive values and for values marked UTC only by a trailing Z"""
    return value.tzinfo is None or value.tzinfo is UTC_MARKER


def localize(value, zone):
    """Place a capture time in zone.

    Values that carry a real zone are converted. Zone-less values keep
    their wall-clock fields and only get the zone attached.
    """
    if is_zoneless(value):
        return value.replace(tzinfo=zone)
    return value.astimezone(zone)


def _utc_now():
    return datetime.now(timezone.utc)


class TimezoneAdjuster:
    """Reinterprets capture times once the GPS timezone of a photo is known"""

    def __init__(self, clock=None):
        self._clock = clock or _utc_now

    def resolve(self, zone_name):
        try:
            return ZoneInfo(zone_name)
        except (ZoneInfoNotFoundError, ValueError) as e:
            logger.warning(f"Failed to load timezone location {zone_name!r}: {e}")
            return None

    def current_offset(self, zone):
        # offset at adjustment time, not at capture time
        return format_utc_offset(self._clock().astimezone(zone).utcoffset())

    def adjust(self, image_data):
        if not image_data.gps_time_zone:
            return

        zone = self.resolve(image_data.gps_time_zone)
        if zone is None:
            return

        image_data.time_offset = self.current_offset(zone)
        image_data.has_time_offset = True

        for field_name in CAPTURE_TIME_FIELDS:
            value = getattr(image_data, field_name)
            if value is None:
                continue
            setattr(image_data, field_name, localize(value, zone))

    def to_local(self, timestamp, zone_name):
        zone = self.resolve(zone_name)
        if zone is None:
            return None
        return timestamp.astimezone(zone)
