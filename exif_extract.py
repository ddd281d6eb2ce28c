import logging

from PIL import Image

from exif_errors import NoExifError, UnsupportedFileTypeError
from file_types import ImageFileType
from metadata_map import EXIF_PREAMBLE, TIFF_HEADERS

logger = logging.getLogger(__name__)


def search_exif(data):
    """Locate an embedded EXIF payload in arbitrary container bytes"""
    for header in TIFF_HEADERS:
        start = data.find(EXIF_PREAMBLE + header)
        if start != -1:
            return data[start + len(EXIF_PREAMBLE):]

    starts = [pos for pos in (data.find(header) for header in TIFF_HEADERS) if pos != -1]
    if starts:
        return data[min(starts):]
    return None


class ExifExtractor:
    """Pulls the raw EXIF payload out of an image file"""

    def __init__(self):
        self._strategies = {
            ImageFileType.BMP: self._search,
            ImageFileType.GIF: self._search,
            ImageFileType.HEIC: self._search,
            ImageFileType.HEIF: self._search,
            ImageFileType.JPEG: self._pillow,
            ImageFileType.PNG: self._pillow,
            ImageFileType.TIFF: self._tiff,
            ImageFileType.WEBP: self._pillow,
        }

    def extract(self, path, file_type):
        strategy = self._strategies.get(file_type)
        if strategy is None:
            raise UnsupportedFileTypeError(f"unsupported file type: {file_type}")

        exif_data = strategy(path)
        if not exif_data:
            raise NoExifError(f"no EXIF data in {path}")
        logger.debug(f"Extracted {len(exif_data)} bytes of EXIF from {path}")
        return exif_data

    def _search(self, path):
        with open(path, "rb") as f:
            return search_exif(f.read())

    def _pillow(self, path):
        with Image.open(path) as img:
            exif_data = img.info.get("exif")
            if exif_data:
                return exif_data

            exif = img.getexif()
            if not exif:
                return None
            return exif.tobytes()

    def _tiff(self, path):
        # a TIFF file is its own EXIF payload
        with open(path, "rb") as f:
            data = f.read()
        if data[:4] not in TIFF_HEADERS:
            return None
        return data
