"""
gridstore - GridFS chunked file storage on top of MongoDB (motor).
"""

__version__ = "0.1.0"

# Core exports
from .config import settings
from .utils.logger import logger, get_logger

__all__ = [
    "settings",
    "logger",
    "get_logger",
    "__version__"
]
