# helpers/sitemap_utils.py

from __future__ import annotations
from datetime import date, datetime, time, timezone
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional, Union

from helpers.errors import ValidationError

MAX_LOCATION_LENGTH = 2048

DateLike = Union[date, datetime]


class ChangeFrequency(str, Enum):
    ALWAYS = "always"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    NEVER = "never"


FREQUENCIES = tuple(f.value for f in ChangeFrequency)


def add_prefix(value: str, prefix: str, sep: str = "/") -> str:
    """Join prefix and value with exactly one separator; empty prefix leaves value as is."""
    if not prefix:
        return value
    return prefix.rstrip(sep) + sep + value.lstrip(sep)


def to_aware(value: DateLike) -> datetime:
    """Normalize a date/datetime to a timezone-aware datetime (naive datetimes are UTC)."""
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def format_w3c(value: datetime) -> str:
    # e.g. 2024-05-01T10:00:00+00:00
    return to_aware(value).isoformat(timespec="seconds")


def format_priority(value: float) -> str:
    return str(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


class Url:
    """
    One <url> entry of a sitemap.

    The location is fixed at construction; the optional fields are validated
    on assignment and every setter returns the record, so calls chain:

        Url("/about").set_change_frequency("yearly").set_priority(0.6)
    """

    def __init__(self, location: str):
        if not isinstance(location, str):
            raise ValidationError(f"Location must be a string, got {type(location).__name__}")
        if len(location) > MAX_LOCATION_LENGTH:
            raise ValidationError(
                f"Location url is too long ({len(location)} > {MAX_LOCATION_LENGTH} characters)"
            )
        self._location = location
        self._last_modified: Optional[datetime] = None
        self._change_frequency: Optional[str] = None
        self._priority: Optional[float] = None

    @classmethod
    def from_fields(
        cls,
        location: str,
        lastmod: Optional[DateLike] = None,
        changefreq: Optional[str] = None,
        priority: Optional[float] = None,
    ) -> "Url":
        url = cls(location)
        if lastmod is not None:
            url.set_last_modified(lastmod)
        if changefreq is not None:
            url.set_change_frequency(changefreq)
        if priority is not None:
            url.set_priority(priority)
        return url

    def __repr__(self) -> str:
        return (
            f"Url({self._location!r}, lastmod={self._last_modified!r}, "
            f"changefreq={self._change_frequency!r}, priority={self.get_priority()!r})"
        )

    # --- getters ---
    @property
    def location(self) -> str:
        return self._location

    @property
    def last_modified(self) -> Optional[datetime]:
        return self._last_modified

    @property
    def change_frequency(self) -> Optional[str]:
        return self._change_frequency

    @property
    def priority(self) -> Optional[str]:
        return self.get_priority()

    def get_priority(self) -> Optional[str]:
        """Priority as a one-decimal string ("0.5", "1.0"), or None when unset."""
        if self._priority is None:
            return None
        return format_priority(self._priority)

    # --- setters ---
    def set_last_modified(self, last_modified: DateLike) -> "Url":
        if not isinstance(last_modified, date):
            raise ValidationError(
                f"Last modified must be a date or datetime, got {type(last_modified).__name__}"
            )
        self._last_modified = to_aware(last_modified)
        return self

    def set_change_frequency(self, change_frequency: Union[str, ChangeFrequency]) -> "Url":
        if isinstance(change_frequency, ChangeFrequency):
            change_frequency = change_frequency.value
        if change_frequency not in FREQUENCIES:
            raise ValidationError(
                f"Invalid change frequency {change_frequency!r}, expected one of: {', '.join(FREQUENCIES)}"
            )
        self._change_frequency = change_frequency
        return self

    def set_priority(self, priority: Union[float, int, Decimal]) -> "Url":
        if isinstance(priority, bool) or not isinstance(priority, (int, float, Decimal)):
            raise ValidationError(f"Priority must be a number, got {type(priority).__name__}")
        if isinstance(priority, Decimal) and priority.is_nan():
            raise ValidationError(f"Invalid priority {priority}, expected a value between 0.0 and 1.0")
        priority = float(priority)
        if not 0.0 <= priority <= 1.0:
            raise ValidationError(f"Invalid priority {priority}, expected a value between 0.0 and 1.0")
        self._priority = priority
        return self
