from datetime import datetime, timedelta, timezone
from fractions import Fraction

from exif_errors import FieldCoercionError
from exif_types import FieldType, Rational, parse_int

# EXIF date-time layouts, tried in this order; the first that parses wins
TIMESTAMP_LAYOUTS = (
    "%Y:%m:%d %H:%M:%S",        # 2021:07:04 14:30:15
    "%Y:%m:%d %H:%M:%S%z",      # 2021:07:04 14:30:15-0700
    "%Y:%m:%d %H:%M:%S.%fZ",    # 2021:07:04 14:30:15.000Z
    "%Y:%m:%d %H:%M:%S%z",      # 2021:07:04 14:30:15+02:00, 2021:07:04 14:30:15Z
)

# Attached to values written with a literal "Z". Distinct from timezone.utc,
# which strptime also returns for an explicit +0000 offset.
UTC_MARKER = timezone(timedelta(0), "Z")


def _with_fraction(layout):
    # fractional seconds may follow the seconds field in any layout
    if ".%f" in layout:
        return (layout,)
    return (layout, layout.replace("%S", "%S.%f", 1))


_PARSE_LAYOUTS = tuple(dict.fromkeys(
    variant for layout in TIMESTAMP_LAYOUTS for variant in _with_fraction(layout)
))


def parse_timestamp(value):
    """Parse an EXIF date-time string, trying every known layout"""
    last_error = None
    for layout in _PARSE_LAYOUTS:
        try:
            parsed = datetime.strptime(value, layout)
        except ValueError as e:
            last_error = e
            continue
        if value.endswith("Z"):
            parsed = parsed.replace(tzinfo=UTC_MARKER)
        return parsed
    raise ValueError(f"unable to parse time: {value}: {last_error}")


def parse_float(value):
    """Decimal text, or "N/D" rational text as written for EXIF rationals"""
    try:
        return float(value)
    except ValueError:
        pass
    if "/" not in value:
        raise ValueError(f"invalid float: {value!r}")
    try:
        return float(Fraction(value))
    except ZeroDivisionError as e:
        raise ValueError(f"invalid float: {value!r}") from e


class ValueCoercer:
    """Converts tag value strings to the semantic type of their field"""

    def __init__(self):
        self._converters = {
            FieldType.STRING: str,
            FieldType.INTEGER: parse_int,
            FieldType.FLOAT: parse_float,
            FieldType.TIMESTAMP: parse_timestamp,
            FieldType.RATIONAL: Rational.parse,
        }

    def coerce(self, descriptor, value):
        converter = self._converters[descriptor.semantic_type]
        try:
            return converter(value)
        except ValueError as e:
            raise FieldCoercionError(descriptor.field_name, value, e) from e
