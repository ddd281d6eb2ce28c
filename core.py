import logging

from coercion import ValueCoercer
from exif_errors import FieldCoercionError
from exif_types import ImageData
from field_schema import FieldSchema, find_value
from gps import GPSExtractor, TimezoneLookup
from metadata_map import DirectoryIndex, MetadataMapBuilder
from timezone_adjust import TimezoneAdjuster

logger = logging.getLogger(__name__)


def default_timezone_lookup():
    """Build the coordinate -> zone lookup, or None when its data cannot be loaded"""
    try:
        return TimezoneLookup()
    except Exception as e:
        logger.warning(f"Failed to initialize timezone finder: {e}")
        return None


class ExifDataParser:
    """Decodes a raw EXIF payload into an ImageData record.

    The schema, the timezone lookup and the adjuster are meant to be built
    once and shared between parsers; call schema.warm() before parsing from
    several threads.
    """

    def __init__(self, schema=None, timezone_lookup=None, adjuster=None,
                 map_builder=None, coercer=None):
        self.schema = schema if schema is not None else FieldSchema()
        self.timezone_lookup = timezone_lookup if timezone_lookup is not None else default_timezone_lookup()
        self.adjuster = adjuster if adjuster is not None else TimezoneAdjuster()
        self.map_builder = map_builder if map_builder is not None else MetadataMapBuilder()
        self.coercer = coercer if coercer is not None else ValueCoercer()
        self.gps_extractor = GPSExtractor(self.schema, self.timezone_lookup, self.adjuster)

    def parse(self, exif_data):
        """Parse a raw payload.

        Raises MetadataMapExtractionError or DirectoryIndexBuildError when the
        payload cannot be read at all; anything wrong with single fields is
        logged and leaves those fields at their zero value.
        """
        metadata = self.map_builder.build(exif_data)
        directory_index = DirectoryIndex.build(exif_data)
        return self.decode(metadata, directory_index)

    def decode(self, metadata, directory_index):
        image_data = ImageData()
        self.apply_fields(image_data, metadata)

        # GPS runs last: it relabels the capture times set above
        self.gps_extractor.extract(image_data, metadata, directory_index)
        return image_data

    def apply_fields(self, image_data, metadata):
        """Generic pass: every non-GPS field from its first present source tag.

        Float fields take decimal text and also "N/D" text, the form exifread
        gives rational tags such as SubjectDistance.
        """
        for descriptor in self.schema.generic_descriptors():
            found = find_value(metadata, descriptor)
            if found is None:
                continue

            tag_name, value = found
            try:
                setattr(image_data, descriptor.field_name, self.coercer.coerce(descriptor, value))
            except FieldCoercionError as e:
                logger.warning(f"Failed to set field {descriptor.field_name} from {tag_name}: {e.reason}")
        return image_data
