import io
import logging
import re

import exifread
import piexif

from exif_errors import DirectoryIndexBuildError, DirectoryNotFoundError, MetadataMapExtractionError
from gps import GPS_DIRECTORY, decode_gps_info

logger = logging.getLogger(__name__)

EXIF_PREAMBLE = b"Exif\x00\x00"
TIFF_HEADERS = (b"II*\x00", b"MM\x00*")

# exifread directory holding the IFD1 thumbnail entries
THUMBNAIL_DIRECTORY = "Thumbnail"

# piexif IFD names
ROOT_IFD = "0th"
EXIF_IFD = "Exif"
GPS_IFD = GPS_DIRECTORY
INTEROP_IFD = "Interop"
THUMBNAIL_IFD = "1st"
IFD_NAMES = (ROOT_IFD, EXIF_IFD, GPS_IFD, INTEROP_IFD, THUMBNAIL_IFD)

# TIFF field types as numbered by exifread
_ASCII = 2
_UNDEFINED = 7
_RATIONAL_TYPES = (5, 10)

# exifread keys are "<directory> <tag>"; IFDs past the thumbnail are named "IFD 2", "IFD 3", ...
# and unknown tags "Tag 0x1234", so neither side can be split on a plain space
_KEY_PATTERN = re.compile(r"(IFD \d+|\S+) (.+)\Z")


def tiff_payload(exif_data):
    """Strip the APP1 "Exif\\0\\0" preamble so the payload starts at the TIFF header"""
    if exif_data.startswith(EXIF_PREAMBLE):
        return exif_data[len(EXIF_PREAMBLE):]
    return exif_data


def split_key(key):
    """(directory, tag name) of an exifread key, or None for keys without a directory"""
    match = _KEY_PATTERN.match(key)
    if match is None:
        return None
    return match.group(1), match.group(2)


def format_first(tag):
    """Text of the first value of an exifread tag, cut at the first NUL"""
    values = tag.values
    if tag.field_type == _ASCII:
        text = values.decode("latin-1") if isinstance(values, bytes) else str(values)
    elif tag.field_type == _UNDEFINED:
        text = str(tag.printable)
    elif isinstance(values, (list, tuple)):
        if not values:
            return ""
        first = values[0]
        if tag.field_type in _RATIONAL_TYPES:
            text = f"{first.numerator}/{first.denominator}"
        else:
            text = str(first)
    else:
        text = str(values)
    return text.split("\x00", 1)[0]


class MetadataMapBuilder:
    """Flattens every directory entry of a payload into a tag name -> value map"""

    def entries(self, exif_data):
        """Yield (directory, tag name, tag) for every entry exifread exposes"""
        payload = tiff_payload(exif_data)
        if payload[:4] not in TIFF_HEADERS:
            raise MetadataMapExtractionError("payload does not start with a TIFF header")

        try:
            tags = exifread.process_file(io.BytesIO(payload), details=False)
        except Exception as e:
            raise MetadataMapExtractionError(f"failed to enumerate EXIF entries: {e}") from e

        for key, tag in tags.items():
            # embedded thumbnail bytes come back under a bare key
            split = split_key(key)
            if split is None or not hasattr(tag, "values"):
                continue
            directory, tag_name = split
            yield directory, tag_name, tag

    def build(self, exif_data):
        metadata = {}
        for directory, tag_name, tag in self.entries(exif_data):
            if not tag_name:
                continue

            # IFD1 usually describes the thumbnail
            if directory == THUMBNAIL_DIRECTORY:
                continue

            value = format_first(tag)
            if value:
                metadata[tag_name] = value

        logger.debug(f"Built metadata map with {len(metadata)} entries")
        return metadata


class ExifDirectory:
    """One IFD of the index: raw piexif entries keyed by tag id"""

    def __init__(self, name, entries):
        self.name = name
        self.entries = entries

    def get(self, tag_id, default=None):
        return self.entries.get(tag_id, default)

    def gps_info(self):
        return decode_gps_info(self.entries)

    def __len__(self):
        return len(self.entries)

    def __repr__(self):
        return f"ExifDirectory({self.name!r}, {len(self.entries)} entries)"


class DirectoryIndex:
    """Structured view of a payload's IFDs"""

    def __init__(self, directories=None):
        self._directories = {}
        for name, entries in (directories or {}).items():
            if name in IFD_NAMES and entries:
                self._directories[name] = ExifDirectory(name, dict(entries))

    @classmethod
    def build(cls, exif_data):
        payload = tiff_payload(exif_data)
        # piexif treats anything it does not recognise as a file path
        if payload[:4] not in TIFF_HEADERS:
            raise DirectoryIndexBuildError("payload does not start with a TIFF header")
        try:
            loaded = piexif.load(payload)
        except Exception as e:
            raise DirectoryIndexBuildError(f"failed to build IFD index: {e}") from e
        return cls(loaded)

    @property
    def root(self):
        return self.child(ROOT_IFD)

    def child(self, name):
        try:
            return self._directories[name]
        except KeyError:
            raise DirectoryNotFoundError(f"no {name} directory in EXIF data") from None

    def __contains__(self, name):
        return name in self._directories

    def names(self):
        return list(self._directories)
