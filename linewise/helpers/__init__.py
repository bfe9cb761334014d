"""
Helpers package.
"""

from .exceptions import (
    BusyError,
    ConflictingOptionsError,
    InvalidRangeError,
    IOFailureError,
    LinewiseError,
    MalformedPatternError,
    NotFoundError,
    UnencodableContentError,
    classify_os_error,
)
from .line_range import LineRange
from .rotate_buffer import RotateBuffer

__all__ = [
    "BusyError",
    "ConflictingOptionsError",
    "IOFailureError",
    "InvalidRangeError",
    "LineRange",
    "LinewiseError",
    "MalformedPatternError",
    "NotFoundError",
    "RotateBuffer",
    "UnencodableContentError",
    "classify_os_error",
]
