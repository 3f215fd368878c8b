from .read_tags import REQUIRED_TAGS, SeriesFields, parse_fields

__all__ = [
    "REQUIRED_TAGS",
    "SeriesFields",
    "parse_fields",
]
