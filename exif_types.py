import math
from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum
from typing import NamedTuple, Optional


class FieldType(Enum):
    """Semantic type of a decoded metadata field"""
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    TIMESTAMP = "timestamp"
    RATIONAL = "rational"


@dataclass(frozen=True)
class Rational:
    """A fraction as stored by EXIF, e.g. XResolution 72/1"""
    numerator: int
    denominator: int

    @classmethod
    def parse(cls, text):
        parts = text.split("/")
        if len(parts) != 2:
            raise ValueError(f"invalid format for Rational: {text}")
        return cls(parse_int(parts[0]), parse_int(parts[1]))

    def __str__(self):
        return f"{self.numerator}/{self.denominator}"


def parse_int(text):
    digits = text[1:] if text[:1] in ("+", "-") else text
    if not digits.isdigit() or not digits.isascii():
        raise ValueError(f"invalid integer: {text!r}")
    return int(text)


class GpsCoordinate(NamedTuple):
    latitude: float
    longitude: float

    @property
    def is_valid(self):
        return math.isfinite(self.latitude) and math.isfinite(self.longitude)


@dataclass
class ImageData:
    """Metadata decoded from one EXIF payload.

    Every field keeps its zero value unless a source tag was found and
    converted successfully.
    """

    # GPS information, filled by the GPS pass only
    gps_latitude: float = 0.0
    gps_longitude: float = 0.0
    gps_altitude: float = 0.0
    gps_time_zone: str = ""  # derived from the coordinates
    gps_timestamp: Optional[datetime] = None
    gps_timestamp_local: Optional[datetime] = None  # gps_timestamp in gps_time_zone
    gps_processing_method: str = ""
    gps_status: str = ""
    gps_satellites: str = ""
    gps_h_positioning_error: float = 0.0
    gps_speed: float = 0.0
    gps_track: float = 0.0
    gps_img_direction: float = 0.0
    gps_dest_latitude: float = 0.0
    gps_dest_longitude: float = 0.0
    gps_dest_bearing: float = 0.0
    gps_dest_distance: float = 0.0

    # Camera
    camera_make: str = ""
    camera_model: str = ""
    camera_exposure: str = ""
    iso_speed: int = 0
    shutter_speed: str = ""
    software: str = ""
    date_time: Optional[datetime] = None
    date_time_original: Optional[datetime] = None
    date_time_digitized: Optional[datetime] = None
    time_offset: str = ""  # "+0200" / "-0700" once a GPS zone is known
    sub_sec_original: str = ""
    has_time_offset: bool = False

    # Lens
    lens_make: str = ""
    lens_model: str = ""
    lens_focal_length: str = ""
    lens_aperture: str = ""
    lens_focal_length_35mm: str = ""
    lens_max_aperture: str = ""
    lens_min_aperture: str = ""
    lens_max_focal_length: str = ""

    # Image
    image_width: int = 0
    image_height: int = 0
    image_orientation: int = 0
    color_space: str = ""
    compression: str = ""
    x_resolution: Optional[Rational] = None
    y_resolution: Optional[Rational] = None
    resolution_unit: str = ""

    # Additional
    artist: str = ""
    copyright: str = ""
    description: str = ""
    white_balance: str = ""
    flash: str = ""
    metering_mode: str = ""
    exposure_program: str = ""
    scene_capture_type: str = ""
    subject_distance: float = 0.0
    digital_zoom_ratio: float = 0.0

    @property
    def gps_coordinate(self):
        return GpsCoordinate(self.gps_latitude, self.gps_longitude)

    def to_dict(self):
        """JSON-friendly view: ISO timestamps, "N/D" rationals"""
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, datetime):
                value = value.isoformat()
            elif isinstance(value, Rational):
                value = str(value)
            result[f.name] = value
        return result
