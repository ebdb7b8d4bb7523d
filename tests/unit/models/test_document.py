"""Tests for sightlog.models.document."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from sightlog.models.document import ShapeBucket, SightingEntry, empty_document


class TestEmptyDocument:
    def test_shape(self) -> None:
        assert empty_document() == {"sightings": []}

    def test_fresh_each_call(self) -> None:
        first = empty_document()
        first["sightings"].append("x")

        assert empty_document() == {"sightings": []}


class TestSightingEntry:
    def test_negative_index_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SightingEntry(index=-1, sighting={})

    def test_extra_fields_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SightingEntry(index=0, sighting={}, shape="disk")


class TestShapeBucket:
    def test_label(self) -> None:
        assert ShapeBucket(key="disk", count=2).label == "disk"

    def test_missing_label(self) -> None:
        assert ShapeBucket(key=None, count=1).label == "(no shape)"
