"""Google Sheets access for the activity log.

The activity log is a worksheet (``DB`` by default) whose rows are laid
out by fixed column position:

    A: title    B: start    C: end    D: duration    E: category    F: date

Cells are read unformatted with date/time values as spreadsheet serial
numbers (days since 1899-12-30), so durations arrive as fractions of a day.
"""

import logging
import math
from collections.abc import Sequence
from datetime import date, datetime, timedelta, tzinfo
from typing import Any

from google.auth import default as default_credentials
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from lifelog.core.duration import classify_duration
from lifelog.core.models import RawRecord
from lifelog.core.window import DEFAULT_TIMEZONE
from lifelog.errors import MissingSourceError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

SERIAL_EPOCH = datetime(1899, 12, 30)

TITLE_COLUMN = 0
START_COLUMN = 1
DURATION_COLUMN = 3
DATE_COLUMN = 5
MIN_COLUMNS = 6

_DATETIME_FORMATS = (
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d",
)


def build_sheets_service(credentials_file: str | None = None) -> Any:
    """Build a Sheets API v4 service.

    Args:
        credentials_file: Service account key file. Application default
            credentials are used when omitted.

    Raises:
        MissingSourceError: If no usable credentials are found.
    """
    try:
        if credentials_file:
            credentials = service_account.Credentials.from_service_account_file(
                credentials_file, scopes=SCOPES
            )
        else:
            credentials, _ = default_credentials(scopes=SCOPES)
    except (GoogleAuthError, OSError, ValueError) as e:
        raise MissingSourceError(f"Cannot authenticate to Google Sheets: {e}") from e
    return build("sheets", "v4", credentials=credentials, cache_discovery=False)


def parse_timestamp(value: Any, tz: tzinfo = DEFAULT_TIMEZONE) -> datetime | None:
    """Parse a cell value into an aware datetime.

    Accepts serial numbers, datetime/date objects, ISO 8601 strings and
    ``YYYY/MM/DD[ HH:MM[:SS]]`` strings. Returns None for anything else.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=tz)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=tz)

    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        if not math.isfinite(value) or value <= 0:
            return None
        try:
            parsed = SERIAL_EPOCH + timedelta(milliseconds=round(value * 86_400_000))
        except OverflowError:
            return None
        return parsed.replace(tzinfo=tz)

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return parse_timestamp(datetime.fromisoformat(text), tz)
        except ValueError:
            pass
        for fmt in _DATETIME_FORMATS:
            try:
                return datetime.strptime(text, fmt).replace(tzinfo=tz)
            except ValueError:
                continue

    return None


def row_to_record(row: Sequence[Any], tz: tzinfo = DEFAULT_TIMEZONE) -> RawRecord | None:
    """Map a worksheet row to a RawRecord, None when the row is too short."""
    if len(row) < MIN_COLUMNS:
        return None
    return RawRecord(
        title=str(row[TITLE_COLUMN]),
        duration_raw=classify_duration(row[DURATION_COLUMN]),
        timestamp=parse_timestamp(row[DATE_COLUMN], tz),
    )


class SheetRecordSource:
    """Reads and appends activity log rows in a Google Sheets worksheet."""

    def __init__(
        self,
        service: Any,
        spreadsheet_id: str,
        worksheet: str = "DB",
        tz: tzinfo = DEFAULT_TIMEZONE,
    ) -> None:
        """Initialize the record source.

        Args:
            service: Sheets API service from ``build_sheets_service``.
            spreadsheet_id: Spreadsheet holding the activity log.
            worksheet: Worksheet name.
            tz: Time zone the spreadsheet's date values are recorded in.
        """
        self._service = service
        self._spreadsheet_id = spreadsheet_id
        self._worksheet = worksheet
        self._tz = tz

    def _range(self, cells: str) -> str:
        escaped = self._worksheet.replace("'", "''")
        return f"'{escaped}'!{cells}"

    def read_rows(self) -> list[list[Any]]:
        """Read every row of the worksheet, header included.

        Raises:
            MissingSourceError: If the spreadsheet or worksheet cannot be read.
        """
        if not self._spreadsheet_id:
            raise MissingSourceError("No spreadsheet configured for the activity log.")

        try:
            response = (
                self._service.spreadsheets()
                .values()
                .get(
                    spreadsheetId=self._spreadsheet_id,
                    range=self._range("A:F"),
                    valueRenderOption="UNFORMATTED_VALUE",
                    dateTimeRenderOption="SERIAL_NUMBER",
                )
                .execute()
            )
        except HttpError as e:
            raise MissingSourceError(
                f"'{self._worksheet}' sheet not found or unreadable "
                f"(status {e.resp.status})."
            ) from e

        rows = response.get("values", [])
        logger.debug(f"Read {len(rows)} rows from '{self._worksheet}'")
        return rows

    def read_all_records(self) -> list[RawRecord]:
        """Read a snapshot of all records, skipping the header and short rows."""
        records: list[RawRecord] = []
        skipped = 0
        for row in self.read_rows()[1:]:
            record = row_to_record(row, self._tz)
            if record is None:
                skipped += 1
                continue
            records.append(record)

        if skipped:
            logger.debug(f"Skipped {skipped} rows with fewer than {MIN_COLUMNS} columns")
        logger.info(f"Loaded {len(records)} records from '{self._worksheet}'")
        return records

    def append_rows(self, rows: list[list[Any]]) -> int:
        """Append rows after the last row of the worksheet.

        Returns:
            Number of rows appended.

        Raises:
            MissingSourceError: If the worksheet cannot be written.
        """
        if not rows:
            return 0
        if not self._spreadsheet_id:
            raise MissingSourceError("No spreadsheet configured for the activity log.")

        try:
            (
                self._service.spreadsheets()
                .values()
                .append(
                    spreadsheetId=self._spreadsheet_id,
                    range=self._range("A1"),
                    valueInputOption="USER_ENTERED",
                    insertDataOption="INSERT_ROWS",
                    body={"values": rows},
                )
                .execute()
            )
        except HttpError as e:
            raise MissingSourceError(
                f"Could not append to '{self._worksheet}' (status {e.resp.status})."
            ) from e

        logger.info(f"Appended {len(rows)} rows to '{self._worksheet}'")
        return len(rows)


__all__ = [
    "SheetRecordSource",
    "build_sheets_service",
    "parse_timestamp",
    "row_to_record",
]
