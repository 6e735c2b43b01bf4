"""Utility functions for GeoWHD"""

from .data_transform import (
    normalize_column_name,
    normalize_columns,
    strip_strings,
    require_columns,
    to_int_column,
    to_float_column,
    zero_pad_codes,
    empty_frame,
)

__all__ = [
    'normalize_column_name',
    'normalize_columns',
    'strip_strings',
    'require_columns',
    'to_int_column',
    'to_float_column',
    'zero_pad_codes',
    'empty_frame',
]
