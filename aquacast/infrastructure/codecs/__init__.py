"""File codecs - Infrastructure Layer."""

from .workbook_codec import WorkbookCodec

__all__ = ["WorkbookCodec"]
