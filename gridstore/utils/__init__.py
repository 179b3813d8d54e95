from .logger import logger, get_logger, configure_logging

__all__ = ["logger", "get_logger", "configure_logging"]
