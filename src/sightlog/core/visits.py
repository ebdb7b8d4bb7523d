"""Unique visitor counter.

One counter lives for the lifetime of the process: it starts at zero when
the app is created and only resets on restart. A request counts as a new
visitor when it arrives without the visit cookie.

Example:
    >>> from sightlog.core.visits import VisitCounter
    >>> visits = VisitCounter()
    >>> visits.register(has_cookie=False)
    1
    >>> visits.register(has_cookie=True)
    1
    >>> visits.count
    1
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class VisitCounter:
    """Process-wide count of unique visitors."""

    def __init__(self, start: int = 0) -> None:
        self._count = start

    @property
    def count(self) -> int:
        """Visitors seen since the process started."""
        return self._count

    def register(self, has_cookie: bool) -> int:
        """Record a request and return the current count.

        No await happens between the read and the increment, so concurrent
        requests on one event loop cannot lose a visit.
        """
        if not has_cookie:
            self._count += 1
            logger.debug(f"Unique visitor #{self._count}")
        return self._count
