import threading
from typing import NamedTuple, Tuple

from exif_types import FieldType


class FieldDescriptor(NamedTuple):
    """Where a record field comes from: its type and the tag names to try, in order"""
    field_name: str
    semantic_type: FieldType
    candidates: Tuple[str, ...]


# (field, type, source tag names in priority order)
IMAGE_FIELDS = (
    # GPS block, filled by GPSExtractor
    ("gps_latitude", FieldType.FLOAT, ("GPSLatitude",)),
    ("gps_longitude", FieldType.FLOAT, ("GPSLongitude",)),
    ("gps_altitude", FieldType.FLOAT, ("GPSAltitude",)),
    ("gps_timestamp", FieldType.TIMESTAMP, ("GPSDateStamp", "GPSTimeStamp")),
    ("gps_processing_method", FieldType.STRING, ("GPSProcessingMethod",)),
    ("gps_status", FieldType.STRING, ("GPSStatus",)),
    ("gps_satellites", FieldType.STRING, ("GPSSatellites",)),
    ("gps_h_positioning_error", FieldType.FLOAT, ("GPSHPositioningError",)),
    ("gps_speed", FieldType.FLOAT, ("GPSSpeed",)),
    ("gps_track", FieldType.FLOAT, ("GPSTrack",)),
    ("gps_img_direction", FieldType.FLOAT, ("GPSImgDirection",)),
    ("gps_dest_latitude", FieldType.FLOAT, ("GPSDestLatitude",)),
    ("gps_dest_longitude", FieldType.FLOAT, ("GPSDestLongitude",)),
    ("gps_dest_bearing", FieldType.FLOAT, ("GPSDestBearing",)),
    ("gps_dest_distance", FieldType.FLOAT, ("GPSDestDistance",)),

    # Camera
    ("camera_make", FieldType.STRING, ("Make", "CameraMake")),
    ("camera_model", FieldType.STRING, ("Model", "CameraModel")),
    ("camera_exposure", FieldType.STRING, ("ExposureTime", "Exposure")),
    ("iso_speed", FieldType.INTEGER, ("ISOSpeedRatings", "ISO")),
    ("shutter_speed", FieldType.STRING, ("ShutterSpeedValue",)),
    ("software", FieldType.STRING, ("Software",)),
    ("date_time", FieldType.TIMESTAMP, ("DateTime", "CreateDate")),
    ("date_time_original", FieldType.TIMESTAMP, ("DateTimeOriginal", "OriginalDateTime")),
    ("date_time_digitized", FieldType.TIMESTAMP, ("DateTimeDigitized", "DigitizedDateTime")),
    ("time_offset", FieldType.STRING, ("OffsetTime", "OffsetTimeOriginal", "OffsetTimeDigitized")),
    ("sub_sec_original", FieldType.STRING, ("SubSecTimeOriginal", "SubSecTime")),

    # Lens
    ("lens_make", FieldType.STRING, ("LensMake",)),
    ("lens_model", FieldType.STRING, ("LensModel", "Lens")),
    ("lens_focal_length", FieldType.STRING, ("FocalLength",)),
    ("lens_aperture", FieldType.STRING, ("FNumber", "ApertureValue")),
    ("lens_focal_length_35mm", FieldType.STRING, ("FocalLengthIn35mmFilm",)),
    ("lens_max_aperture", FieldType.STRING, ("MaxApertureValue",)),
    ("lens_min_aperture", FieldType.STRING, ("MinApertureValue",)),
    ("lens_max_focal_length", FieldType.STRING, ("MaxFocalLength",)),

    # Image
    ("image_width", FieldType.INTEGER,
     ("ImageWidth", "PixelXDimension", "ExifImageWidth", "SourceImageWidth")),
    ("image_height", FieldType.INTEGER,
     ("ImageHeight", "PixelYDimension", "ExifImageLength", "ExifImageHeight", "SourceImageHeight")),
    ("image_orientation", FieldType.INTEGER, ("Orientation",)),
    ("color_space", FieldType.STRING, ("ColorSpace",)),
    ("compression", FieldType.STRING, ("Compression",)),
    ("x_resolution", FieldType.RATIONAL, ("XResolution",)),
    ("y_resolution", FieldType.RATIONAL, ("YResolution",)),
    ("resolution_unit", FieldType.STRING, ("ResolutionUnit",)),

    # Additional
    ("artist", FieldType.STRING, ("Artist", "Creator")),
    ("copyright", FieldType.STRING, ("Copyright", "CopyrightNotice")),
    ("description", FieldType.STRING, ("ImageDescription", "Description")),
    ("white_balance", FieldType.STRING, ("WhiteBalance",)),
    ("flash", FieldType.STRING, ("Flash", "FlashFired")),
    ("metering_mode", FieldType.STRING, ("MeteringMode",)),
    ("exposure_program", FieldType.STRING, ("ExposureProgram",)),
    ("scene_capture_type", FieldType.STRING, ("SceneCaptureType",)),
    ("subject_distance", FieldType.FLOAT, ("SubjectDistance",)),
    ("digital_zoom_ratio", FieldType.FLOAT, ("DigitalZoomRatio",)),
)

GPS_PREFIX = "gps_"


def is_special_field(field_name):
    """GPS fields are filled by the GPS pass, never by the generic field walk"""
    return field_name.startswith(GPS_PREFIX)


class FieldSchema:
    """Lookup of field descriptors, built on first use and kept for the process lifetime"""

    def __init__(self, declarations=IMAGE_FIELDS):
        self._declarations = {}
        for name, semantic_type, candidates in declarations:
            if not candidates:
                raise ValueError(f"field {name} declares no source tags")
            self._declarations[name] = (semantic_type, tuple(candidates))
        self._cache = {}
        self._lock = threading.Lock()

    def field_names(self):
        return list(self._declarations)

    def descriptor(self, field_name):
        cached = self._cache.get(field_name)
        if cached is not None:
            return cached

        with self._lock:
            cached = self._cache.get(field_name)
            if cached is None:
                semantic_type, candidates = self._declarations[field_name]
                cached = FieldDescriptor(field_name, semantic_type, candidates)
                self._cache[field_name] = cached
            return cached

    def descriptors(self):
        return [self.descriptor(name) for name in self._declarations]

    def generic_descriptors(self):
        """Descriptors of every non-GPS field, in declaration order"""
        return [self.descriptor(name) for name in self._declarations if not is_special_field(name)]

    def warm(self):
        """Build every descriptor up front so later lookups never write to the cache"""
        self.descriptors()
        return self

    def __contains__(self, field_name):
        return field_name in self._declarations

    def __len__(self):
        return len(self._declarations)


def find_value(metadata, descriptor):
    """First non-empty value among the descriptor's candidate tags, or None"""
    for tag_name in descriptor.candidates:
        value = metadata.get(tag_name)
        if value:
            return tag_name, value
    return None
