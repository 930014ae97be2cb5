"""Append RemoteError records to a text or CSV sink."""

import csv
import logging
from pathlib import Path

from .errors import RemoteError

logger = logging.getLogger(__name__)

LOG_FORMATS = ("text", "csv")

_CSV_HEADER = ["Date", "Time", "Code", "Type", "Method", "URL"]


class ErrorLog:
    """
    Sink for REST failures, injected into RemoteChannel.

    fmt="text" appends each error's message line; fmt="csv" writes a header row
    when the file is new and one row per error afterwards.
    """

    def __init__(self, path: str | Path, fmt: str = "text") -> None:
        fmt = fmt.lower()
        if fmt == "txt":
            fmt = "text"
        if fmt not in LOG_FORMATS:
            raise ValueError(f"Invalid error log format {fmt!r}; expected one of {', '.join(LOG_FORMATS)}")
        self._path = Path(path)
        self._format = fmt

    def record(self, error: RemoteError) -> None:
        if self._format == "csv":
            self._write_csv(error)
        else:
            with open(self._path, "a", encoding="utf-8") as f:
                f.write(f"{error.text}\n")
        logger.debug("Recorded remote error to %s", self._path)

    def _write_csv(self, error: RemoteError) -> None:
        already_exists = self._path.is_file()
        with open(self._path, "a", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            if not already_exists:
                writer.writerow(_CSV_HEADER)
            writer.writerow(
                [
                    f"{error.timestamp:%m/%d/%y}",
                    f"{error.timestamp:%H:%M:%S}",
                    "" if error.status is None else error.status,
                    error.error_type,
                    error.method,
                    error.url,
                ]
            )

    @property
    def path(self) -> Path:
        return self._path

    @property
    def format(self) -> str:
        return self._format
