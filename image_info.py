import logging
import os
from datetime import datetime

from PIL import Image

from core import ExifDataParser
from exif_errors import NoExifError
from exif_extract import ExifExtractor
from exif_types import ImageData
from file_types import file_type_and_extension, is_image, is_photo

logger = logging.getLogger(__name__)


class ImageInfo:
    """An image file: file facts, probed pixel size and decoded EXIF metadata"""

    def __init__(self, path, parser=None, extractor=None):
        stat = os.stat(path)

        self.path = os.path.abspath(path)
        self.name = os.path.basename(path)
        self.size = stat.st_size
        self.modified = datetime.fromtimestamp(stat.st_mtime)
        birth = getattr(stat, "st_birthtime", None)
        self.created = datetime.fromtimestamp(birth) if birth else None
        self.file_type, self.file_ext = file_type_and_extension(self.name)

        self.image_data = ImageData()
        self._parser = parser
        self._extractor = extractor

        self._probe()

    def _probe(self):
        """Minimal data read without EXIF: pixel size and file date"""
        try:
            with Image.open(self.path) as img:
                width, height = img.size
        except Exception as e:
            logger.debug(f"Could not probe {self.path}: {e}")
            return

        self.image_data.image_width = width
        self.image_data.image_height = height
        self.image_data.date_time = self.created or self.modified

    def exif(self):
        """Decode the file's EXIF into image_data; a file without EXIF keeps the probed data"""
        if self._extractor is None:
            self._extractor = ExifExtractor()
        if self._parser is None:
            self._parser = ExifDataParser()

        try:
            exif_data = self._extractor.extract(self.path, self.file_type)
        except NoExifError as e:
            logger.debug(f"{e}")
            return self

        probed = self.image_data
        image_data = self._parser.parse(exif_data)
        if not image_data.image_width:
            image_data.image_width = probed.image_width
        if not image_data.image_height:
            image_data.image_height = probed.image_height
        if image_data.date_time is None:
            image_data.date_time = probed.date_time

        self.image_data = image_data
        return self

    def is_photo(self):
        return is_photo(self.file_type)

    def is_image(self):
        return is_image(self.file_type)

    def to_dict(self):
        return {
            "path": self.path,
            "name": self.name,
            "size": self.size,
            "created": self.created.isoformat() if self.created else None,
            "modified": self.modified.isoformat(),
            "file_type": self.file_type.value if self.file_type else None,
            "file_ext": self.file_ext,
            "image_data": self.image_data.to_dict(),
        }
