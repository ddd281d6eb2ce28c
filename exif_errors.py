class ExifError(Exception):
    """Base class for EXIF decoding errors"""


class MetadataMapExtractionError(ExifError):
    """The flat tag entries of a payload could not be enumerated"""


class DirectoryIndexBuildError(ExifError):
    """The IFD structure of a payload could not be read"""


class FieldCoercionError(ExifError, ValueError):
    """A single tag value could not be converted to its field type"""

    def __init__(self, field_name, value, reason):
        self.field_name = field_name
        self.value = value
        self.reason = reason
        super().__init__(f"{field_name}: cannot convert {value!r}: {reason}")


class DirectoryNotFoundError(ExifError, LookupError):
    """The requested sub-directory is not present in the index"""


class GpsInfoError(ExifError):
    """The GPS directory does not hold usable position data"""


class NoExifError(ExifError):
    """The file carries no EXIF payload"""


class UnsupportedFileTypeError(ExifError):
    """No EXIF extraction strategy exists for the file type"""
