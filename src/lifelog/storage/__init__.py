"""Activity log storage backed by Google Sheets."""

from .sheets import SheetRecordSource, build_sheets_service, parse_timestamp, row_to_record

__all__ = [
    "SheetRecordSource",
    "build_sheets_service",
    "parse_timestamp",
    "row_to_record",
]
