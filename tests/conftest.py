import io

import piexif
import pytest
from PIL import Image

from core import ExifDataParser


def _jpeg_thumbnail():
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), (200, 200, 200)).save(buf, "JPEG")
    return buf.getvalue()


THUMBNAIL = _jpeg_thumbnail()

# 48.8566 N, 2.3522 E
PARIS_GPS = {
    piexif.GPSIFD.GPSLatitudeRef: b"N",
    piexif.GPSIFD.GPSLatitude: ((48, 1), (51, 1), (2376, 100)),
    piexif.GPSIFD.GPSLongitudeRef: b"E",
    piexif.GPSIFD.GPSLongitude: ((2, 1), (21, 1), (792, 100)),
    piexif.GPSIFD.GPSAltitudeRef: 0,
    piexif.GPSIFD.GPSAltitude: (35, 1),
    piexif.GPSIFD.GPSDateStamp: b"2021:07:04",
    piexif.GPSIFD.GPSTimeStamp: ((12, 1), (30, 1), (15, 1)),
    piexif.GPSIFD.GPSStatus: b"A",
    piexif.GPSIFD.GPSSpeed: (5, 2),
}


def make_exif(zeroth=None, exif=None, gps=None, first=None):
    """Raw APP1-style EXIF payload built with piexif"""
    exif_dict = {
        "0th": dict(zeroth or {}),
        "Exif": dict(exif or {}),
        "GPS": dict(gps or {}),
        "Interop": {},
        "1st": dict(first or {}),
        "thumbnail": THUMBNAIL if first else None,
    }
    return piexif.dump(exif_dict)


class StubLookup:
    def __init__(self, name=""):
        self.name = name
        self.calls = []

    def timezone_at(self, longitude, latitude):
        self.calls.append((longitude, latitude))
        return self.name


@pytest.fixture
def camera_ifds():
    zeroth = {
        piexif.ImageIFD.Make: b"Canon",
        piexif.ImageIFD.Model: b"Canon EOS 80D",
        piexif.ImageIFD.Orientation: 1,
        piexif.ImageIFD.XResolution: (72, 1),
        piexif.ImageIFD.YResolution: (72, 1),
        piexif.ImageIFD.Software: b"Firmware 1.0.2",
        piexif.ImageIFD.DateTime: b"2021:07:04 14:35:00",
    }
    exif = {
        piexif.ExifIFD.DateTimeOriginal: b"2021:07:04 14:30:15",
        piexif.ExifIFD.DateTimeDigitized: b"2021:07:04 14:30:15",
        piexif.ExifIFD.ISOSpeedRatings: 200,
        piexif.ExifIFD.ExposureTime: (1, 125),
        piexif.ExifIFD.FNumber: (28, 10),
        piexif.ExifIFD.PixelXDimension: 4000,
        piexif.ExifIFD.PixelYDimension: 3000,
        piexif.ExifIFD.SubjectDistance: (7, 2),
    }
    return zeroth, exif


@pytest.fixture
def stub_parser():
    return ExifDataParser(timezone_lookup=StubLookup(""))
