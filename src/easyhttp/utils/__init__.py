"""Utils package."""

from easyhttp.utils.codec import encode_param
from easyhttp.utils.logger import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "encode_param",
]
