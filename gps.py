import logging
import math
import threading
from datetime import datetime, timedelta, timezone
from typing import NamedTuple, Optional

import piexif
from timezonefinder import TimezoneFinder

from coercion import parse_float
from exif_errors import DirectoryNotFoundError, GpsInfoError
from exif_types import FieldType, GpsCoordinate

logger = logging.getLogger(__name__)

GPS_DIRECTORY = "GPS"

# Read straight from the metadata map by their exact tag name
AUXILIARY_GPS_FIELDS = (
    "gps_processing_method",
    "gps_status",
    "gps_satellites",
    "gps_h_positioning_error",
    "gps_speed",
    "gps_track",
    "gps_img_direction",
    "gps_dest_latitude",
    "gps_dest_longitude",
    "gps_dest_bearing",
    "gps_dest_distance",
)


class GpsInfo(NamedTuple):
    latitude: float
    longitude: float
    altitude: float = 0.0
    timestamp: Optional[datetime] = None

    @property
    def coordinate(self):
        return GpsCoordinate(self.latitude, self.longitude)


def _to_text(value):
    if isinstance(value, bytes):
        return value.decode("ascii", errors="ignore").strip("\x00 ")
    return str(value).strip("\x00 ")


def _rational(pair):
    numerator, denominator = pair
    if denominator == 0:
        return math.nan
    return numerator / denominator


def _degrees(values, ref, negative_ref):
    """Degrees/minutes/seconds rationals to signed decimal degrees"""
    try:
        parts = [_rational(pair) for pair in values]
    except (TypeError, ValueError) as e:
        raise GpsInfoError(f"malformed coordinate {values!r}") from e
    if not 1 <= len(parts) <= 3:
        raise GpsInfoError(f"malformed coordinate {values!r}")

    decimal = 0.0
    for part, scale in zip(parts, (1.0, 60.0, 3600.0)):
        decimal += part / scale
    if _to_text(ref).upper() == negative_ref:
        decimal = -decimal
    return decimal


def _altitude(entries):
    value = entries.get(piexif.GPSIFD.GPSAltitude)
    if value is None:
        return 0.0
    try:
        altitude = _rational(value)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring malformed GPS altitude {value!r}")
        return 0.0
    if math.isnan(altitude):
        return 0.0
    if entries.get(piexif.GPSIFD.GPSAltitudeRef) == 1:
        altitude = -altitude
    return altitude


def _timestamp(entries):
    date_stamp = entries.get(piexif.GPSIFD.GPSDateStamp)
    time_stamp = entries.get(piexif.GPSIFD.GPSTimeStamp)
    if date_stamp is None or time_stamp is None:
        return None
    try:
        day = datetime.strptime(_to_text(date_stamp), "%Y:%m:%d")
        hours, minutes, seconds = (_rational(pair) for pair in time_stamp)
        offset = timedelta(hours=hours, minutes=minutes, seconds=seconds)
    except (TypeError, ValueError, OverflowError) as e:
        logger.debug(f"Ignoring malformed GPS timestamp {date_stamp!r} {time_stamp!r}: {e}")
        return None
    return (day + offset).replace(tzinfo=timezone.utc)


def decode_gps_info(entries):
    """Position, altitude and UTC time from the raw entries of a GPS directory"""
    latitude = entries.get(piexif.GPSIFD.GPSLatitude)
    longitude = entries.get(piexif.GPSIFD.GPSLongitude)
    if latitude is None or longitude is None:
        raise GpsInfoError("GPS directory has no coordinates")

    return GpsInfo(
        latitude=_degrees(latitude, entries.get(piexif.GPSIFD.GPSLatitudeRef, b"N"), "S"),
        longitude=_degrees(longitude, entries.get(piexif.GPSIFD.GPSLongitudeRef, b"E"), "W"),
        altitude=_altitude(entries),
        timestamp=_timestamp(entries),
    )


class TimezoneLookup:
    """Coordinates to IANA zone name, backed by timezonefinder"""

    def __init__(self, finder=None):
        self._finder = finder if finder is not None else TimezoneFinder()
        self._lock = threading.Lock()

    def timezone_at(self, longitude, latitude):
        with self._lock:
            name = self._finder.timezone_at(lng=longitude, lat=latitude)
        return name or ""


class GPSExtractor:
    """Fills the GPS block of a record from the GPS directory and the metadata map"""

    def __init__(self, schema, timezone_lookup, adjuster):
        self.schema = schema
        self.timezone_lookup = timezone_lookup
        self.adjuster = adjuster

    def extract(self, image_data, metadata, directory_index):
        try:
            ifd = directory_index.child(GPS_DIRECTORY)
        except DirectoryNotFoundError as e:
            logger.warning(f"No GPS info found: {e}")
            return

        try:
            gps_info = ifd.gps_info()
        except GpsInfoError as e:
            logger.warning(f"Failed to parse GPS info: {e}")
            return

        coordinate = gps_info.coordinate
        if coordinate.is_valid:
            image_data.gps_latitude = coordinate.latitude
            image_data.gps_longitude = coordinate.longitude
            self._apply_timezone(image_data)
        else:
            logger.warning(f"Invalid GPS coordinates: {coordinate.latitude}, {coordinate.longitude}")

        if gps_info.timestamp is not None:
            image_data.gps_timestamp = gps_info.timestamp
            if image_data.gps_time_zone:
                local = self.adjuster.to_local(gps_info.timestamp, image_data.gps_time_zone)
                if local is not None:
                    image_data.gps_timestamp_local = local

        if gps_info.altitude != 0:
            image_data.gps_altitude = gps_info.altitude

        self._apply_auxiliary(image_data, metadata)

    def _apply_timezone(self, image_data):
        if self.timezone_lookup is None:
            logger.warning("Timezone lookup unavailable, skipping timezone detection")
            return

        try:
            name = self.timezone_lookup.timezone_at(image_data.gps_longitude, image_data.gps_latitude)
        except ValueError as e:
            logger.warning(f"Timezone lookup failed: {e}")
            return

        if not name:
            logger.info(
                f"No timezone found at {image_data.gps_latitude}, {image_data.gps_longitude}"
            )
            return

        image_data.gps_time_zone = name
        self.adjuster.adjust(image_data)

    def _apply_auxiliary(self, image_data, metadata):
        for field_name in AUXILIARY_GPS_FIELDS:
            descriptor = self.schema.descriptor(field_name)
            value = metadata.get(descriptor.candidates[0])
            if value is None:
                continue

            if descriptor.semantic_type is FieldType.STRING:
                setattr(image_data, field_name, value)
                continue

            try:
                setattr(image_data, field_name, parse_float(value))
            except ValueError:
                # unparsable scalars stay at zero without a warning
                continue
