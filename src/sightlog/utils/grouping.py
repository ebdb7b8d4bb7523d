"""Group sightings into buckets by a normalized field value.

Example:
    >>> from sightlog.utils.grouping import group_by_key
    >>> rows = [{"shape": "Circle"}, {"shape": "square"}, {"shape": "circle"}]
    >>> group_by_key(rows, "shape")
    {'circle': [{'shape': 'Circle'}, {'shape': 'circle'}], 'square': [{'shape': 'square'}]}
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from sightlog.models.document import Sighting

# Bucket for records without a usable value. No string key can equal it.
MISSING = None


def bucket_key(sighting: Sighting, field: str) -> str | None:
    """Return the lowercased value of ``field``, or ``MISSING``.

    Example:
        >>> from sightlog.utils.grouping import bucket_key
        >>> bucket_key({"shape": "Fireball"}, "shape")
        'fireball'
        >>> bucket_key({}, "shape") is None
        True
    """
    if not isinstance(sighting, Mapping):
        return MISSING
    value: Any = sighting.get(field)
    if not isinstance(value, str):
        return MISSING
    return value.lower()


def group_by_key(sightings: Iterable[Sighting], field: str) -> dict[str | None, list[Sighting]]:
    """Partition ``sightings`` by the lowercased value of ``field``.

    Buckets appear in the order their first member was seen and keep the
    input order of their members. Records without a string value for
    ``field`` land in the ``MISSING`` bucket. The input is not modified;
    bucket lists hold the same record objects.
    """
    buckets: dict[str | None, list[Sighting]] = {}
    for sighting in sightings:
        buckets.setdefault(bucket_key(sighting, field), []).append(sighting)
    return buckets
