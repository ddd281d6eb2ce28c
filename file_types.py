import os
from enum import Enum


class ImageFileType(str, Enum):
    BMP = "bmp"     # Bitmap Image
    GIF = "gif"     # Graphics Interchange Format
    HEIC = "heic"   # High Efficiency Image Container
    HEIF = "heif"   # High Efficiency Image File Format
    JPEG = "jpg"    # Joint Photographic Experts Group
    PNG = "png"     # Portable Network Graphics
    TIFF = "tiff"   # Tagged Image File Format
    WEBP = "webp"   # Google WebP Image


IMAGE_FILE_EXTENSIONS = {
    ImageFileType.BMP: (".bmp", ".dib"),
    ImageFileType.GIF: (".gif",),
    ImageFileType.HEIC: (".heic",),
    ImageFileType.HEIF: (".heif",),
    ImageFileType.JPEG: (".jpg", ".jpeg", ".jpe", ".jif", ".jfif", ".jfi"),
    ImageFileType.PNG: (".png",),
    ImageFileType.TIFF: (".tiff", ".tif"),
    ImageFileType.WEBP: (".webp",),
}

# Formats cameras write their EXIF into
PHOTO_FILE_TYPES = frozenset({
    ImageFileType.HEIC,
    ImageFileType.HEIF,
    ImageFileType.JPEG,
    ImageFileType.TIFF,
})

_TYPE_BY_EXTENSION = {
    ext: file_type
    for file_type, extensions in IMAGE_FILE_EXTENSIONS.items()
    for ext in extensions
}


def all_extensions():
    return set(_TYPE_BY_EXTENSION)


def file_type_and_extension(name):
    """(file type, lowercase extension) for a file name; (None, "") when unknown"""
    ext = os.path.splitext(name)[1].lower()
    file_type = _TYPE_BY_EXTENSION.get(ext)
    if file_type is None:
        return None, ""
    return file_type, ext


def is_image(file_type):
    return file_type in IMAGE_FILE_EXTENSIONS


def is_photo(file_type):
    return file_type in PHOTO_FILE_TYPES
