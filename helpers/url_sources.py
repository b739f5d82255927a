# helpers/url_sources.py
# ---------------------------------------------------------------
# Lazy Url producers for the command line tool.
# Each yields one record at a time so large inputs are never loaded whole.
# ---------------------------------------------------------------

from __future__ import annotations
import csv
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from helpers.errors import ValidationError
from helpers.sitemap_utils import DateLike, Url

logger = logging.getLogger(__name__)

CSV_COLUMNS = ("loc", "lastmod", "changefreq", "priority")


def parse_lastmod(value: str) -> DateLike:
    """Parse an ISO date ("2024-05-01") or date-time ("2024-05-01T10:00:00+02:00")."""
    value = value.strip()
    try:
        if "T" in value or " " in value:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        return date.fromisoformat(value)
    except ValueError as e:
        raise ValidationError(f"Invalid lastmod {value!r}: {e}") from e


def parse_priority(value: str) -> float:
    try:
        return float(value)
    except ValueError as e:
        raise ValidationError(f"Invalid priority {value!r}") from e


def iter_csv_records(path: Union[str, Path]) -> Iterator[Url]:
    """
    Stream Url records from a CSV file with a header row.

    Required column: loc. Optional: lastmod, changefreq, priority; empty
    cells leave the field unset.
    """
    path = Path(path)
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        try:
            fields = reader.fieldnames or []
        except UnicodeDecodeError as e:
            raise ValidationError(f"{path}, line 1: not valid UTF-8 ({e.reason})") from e
        if "loc" not in fields:
            raise ValidationError(f"{path}: missing required 'loc' column (got: {', '.join(fields) or 'nothing'})")
        ignored = [c for c in fields if c not in CSV_COLUMNS]
        if ignored:
            logger.warning("%s: ignoring unknown column(s): %s", path, ", ".join(ignored))

        rows = iter(reader)
        while True:
            try:
                row = next(rows, None)
            except UnicodeDecodeError as e:
                # decoding is buffered, so the line is approximate
                raise ValidationError(f"{path}, near line {reader.line_num + 1}: not valid UTF-8 ({e.reason})") from e
            if row is None:
                return

            line = reader.line_num
            try:
                lastmod = (row.get("lastmod") or "").strip()
                changefreq = (row.get("changefreq") or "").strip()
                priority = (row.get("priority") or "").strip()
                yield Url.from_fields(
                    (row.get("loc") or "").strip(),
                    lastmod=parse_lastmod(lastmod) if lastmod else None,
                    changefreq=changefreq or None,
                    priority=parse_priority(priority) if priority else None,
                )
            except ValidationError as e:
                raise ValidationError(f"{path}, line {line}: {e}") from e


def iter_path_records(
    paths: Iterable[str],
    lastmod: Optional[DateLike] = None,
    changefreq: Optional[str] = None,
    priority: Optional[float] = None,
) -> Iterator[Url]:
    """One Url per path, all sharing the same optional fields."""
    for p in paths:
        yield Url.from_fields(p, lastmod=lastmod, changefreq=changefreq, priority=priority)
