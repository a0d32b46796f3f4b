import logging

from .errors import OutOfRangeError, RopeError
from .rope import Branch, Leaf, Rope, concat, length
from .diagnostics import to_dict, to_json

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Branch",
    "Leaf",
    "OutOfRangeError",
    "Rope",
    "RopeError",
    "concat",
    "length",
    "to_dict",
    "to_json",
]
