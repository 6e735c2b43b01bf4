"""
GeoWHD error taxonomy

Reference data errors abort geography construction. Dataset load errors leave
the cache slot empty and surface to whoever asked for the dataset.
"""
from typing import Optional


class GeoWHDError(Exception):
    """Base class for all GeoWHD errors"""


class ResolutionError(GeoWHDError, LookupError):
    """Unknown office name. Carries the closest registered name as a hint."""

    def __init__(self, name: str, suggestion: Optional[str] = None):
        self.name = name
        self.suggestion = suggestion
        if suggestion:
            message = f"{name} is not a valid office name. Did you mean {suggestion}?"
        else:
            message = f"{name} is not a valid office name."
        super().__init__(message)


# ---------------------- Reference data ---------------------- #

class ReferenceDataError(GeoWHDError):
    """Geography reference data cannot be turned into a valid hierarchy"""


class DataIntegrityError(ReferenceDataError):
    """Reference rows contradict each other"""


class MissingReferenceError(ReferenceDataError):
    """A reference row points at an office or region that does not exist"""


# ---------------------- Dataset loading ---------------------- #

class DatasetLoadError(GeoWHDError):
    """An upstream dataset could not be fetched or parsed"""


class FetchError(DatasetLoadError):
    """Transport-level failure reaching an upstream resource"""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        prefix = f"HTTP {status_code}" if status_code is not None else "Network error"
        super().__init__(f"{prefix} fetching {url}: {message}")


class FormatError(DatasetLoadError):
    """Upstream payload does not have the expected structure"""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"{source}: {message}")


class ParseError(DatasetLoadError, ValueError):
    """A field could not be coerced to its expected type"""

    def __init__(self, field: str, value, message: Optional[str] = None):
        self.field = field
        self.value = value
        super().__init__(message or f"Cannot parse {field}: {value!r}")
