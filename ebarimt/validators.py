"""
POSAPI value validators and date formatting.
POSAPI expects dates as "yyyy-MM-dd HH:mm:ss" in local time.
"""

import re
from datetime import date, datetime

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

POSAPI_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_DDTD_RE = re.compile(r"[0-9]{33}")
_TIN_RE = re.compile(r"[0-9]{11}|[0-9]{14}")
_POSAPI_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2}")


def is_valid_ddtd(value) -> bool:
    """DDTD is the 33-digit receipt id assigned by the tax authority."""
    return isinstance(value, str) and _DDTD_RE.fullmatch(value) is not None


def is_valid_tin(value) -> bool:
    """TIN is 11 digits (individual) or 14 digits (organization)."""
    return isinstance(value, str) and _TIN_RE.fullmatch(value) is not None


def format_posapi_date(value: datetime) -> str:
    """Render as zero-padded "yyyy-MM-dd HH:mm:ss". Aware datetimes are converted to local time first."""
    if timezone.is_aware(value):
        value = timezone.localtime(value)
    return value.strftime(POSAPI_DATE_FORMAT)


def parse_posapi_date(text: str) -> datetime:
    """Canonical POSAPI string -> aware datetime in the current timezone."""
    return timezone.make_aware(datetime.strptime(text, POSAPI_DATE_FORMAT))


def normalize_printed_at_text(raw) -> str | None:
    """
    Return the canonical printedAt string for the cancel request.
    A valid value already in "yyyy-MM-dd HH:mm:ss" form is kept verbatim; anything else
    (ISO datetime, date-only, datetime object, epoch milliseconds) is parsed and
    reformatted. Unparseable or empty input -> None.
    """
    if raw is None or raw == "":
        return None
    if isinstance(raw, str) and _POSAPI_DATE_RE.fullmatch(raw):
        try:
            datetime.strptime(raw, POSAPI_DATE_FORMAT)
        except ValueError:
            return None
        return raw
    if isinstance(raw, bool):
        return None
    if isinstance(raw, datetime):
        return format_posapi_date(raw)
    if isinstance(raw, date):
        return format_posapi_date(datetime(raw.year, raw.month, raw.day))
    if isinstance(raw, (int, float)):
        try:
            parsed = datetime.fromtimestamp(raw / 1000, tz=timezone.get_current_timezone())
        except (OverflowError, OSError, ValueError):
            return None
        return format_posapi_date(parsed)
    text = str(raw).strip()
    try:
        parsed = parse_datetime(text)
        if parsed is None:
            day = parse_date(text)
            if day is None:
                return None
            parsed = datetime(day.year, day.month, day.day)
    except ValueError:
        return None
    return format_posapi_date(parsed)
