"""Date helpers for stamping and displaying sightings.

Example:
    >>> from datetime import datetime
    >>> from sightlog.utils.dates import form_max_date, post_timestamp
    >>> now = datetime(2021, 5, 13, 9, 7)
    >>> post_timestamp(now)
    '13/05/2021 09:07'
    >>> form_max_date(now)
    '2021-05-13'
"""

from __future__ import annotations

from datetime import datetime

POST_TIMESTAMP_FORMAT = "%d/%m/%Y %H:%M"
FORM_DATE_FORMAT = "%Y-%m-%d"


def post_timestamp(now: datetime | None = None) -> str:
    """Creation stamp stored in ``post_create_date_time``."""
    return (now or datetime.now()).strftime(POST_TIMESTAMP_FORMAT)


def form_max_date(now: datetime | None = None) -> str:
    """Latest selectable date for the sighting date input."""
    return (now or datetime.now()).strftime(FORM_DATE_FORMAT)


def parse_post_timestamp(text: str) -> datetime | None:
    """Parse a creation stamp, returning ``None`` if it is not one.

    Example:
        >>> from sightlog.utils.dates import parse_post_timestamp
        >>> parse_post_timestamp("01/02/2020 10:30")
        datetime.datetime(2020, 2, 1, 10, 30)
        >>> parse_post_timestamp("yesterday") is None
        True
    """
    try:
        return datetime.strptime(text, POST_TIMESTAMP_FORMAT)
    except (TypeError, ValueError):
        return None


def _round(value: float) -> int:
    return int(value + 0.5)


def _relative(seconds: float) -> str:
    minutes = seconds / 60
    hours = minutes / 60
    days = hours / 24

    if seconds < 45:
        return "a few seconds"
    if seconds < 90:
        return "a minute"
    if minutes < 45:
        return f"{_round(minutes)} minutes"
    if minutes < 90:
        return "an hour"
    if hours < 22:
        return f"{_round(hours)} hours"
    if hours < 36:
        return "a day"
    if days < 26:
        return f"{_round(days)} days"
    if days < 45:
        return "a month"
    if days < 320:
        return f"{_round(days / 30.4375)} months"
    if days < 548:
        return "a year"
    return f"{_round(days / 365.25)} years"


def from_now(then: datetime, now: datetime | None = None) -> str:
    """Describe ``then`` relative to ``now`` ("5 minutes ago", "in a day").

    Example:
        >>> from datetime import datetime, timedelta
        >>> from sightlog.utils.dates import from_now
        >>> now = datetime(2021, 5, 13, 12, 0)
        >>> from_now(now - timedelta(days=40), now)
        'a month ago'
        >>> from_now(now - timedelta(minutes=5), now)
        '5 minutes ago'
        >>> from_now(now + timedelta(hours=3), now)
        'in 3 hours'
    """
    delta = ((now or datetime.now()) - then).total_seconds()
    phrase = _relative(abs(delta))
    return f"{phrase} ago" if delta >= 0 else f"in {phrase}"
