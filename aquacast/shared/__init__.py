"""
Shared module - Cross-cutting concerns

Constants, enums and the logging bootstrap used by every layer. Nothing in
here may depend on Infrastructure or on the web framework.
"""

from .consts import (
    CSV_MEDIA_TYPE,
    DATE_COLUMN,
    VOLUME_COLUMN,
    XLSX_MEDIA_TYPE,
    EnumEnvironment,
    EnumLogLevel,
)
from .logging import configure_logging, get_logger, update_logging_from_settings

__all__ = [
    "EnumEnvironment",
    "EnumLogLevel",
    "DATE_COLUMN",
    "VOLUME_COLUMN",
    "XLSX_MEDIA_TYPE",
    "CSV_MEDIA_TYPE",
    "configure_logging",
    "get_logger",
    "update_logging_from_settings",
]
