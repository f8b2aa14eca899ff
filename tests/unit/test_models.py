"""Tests for the Metric model and its identity hash."""

from dataclasses import FrozenInstanceError
from datetime import datetime

import pytest

from cratesink.core.models import Metric, fnv1a_64

pytestmark = pytest.mark.tier(0)


class TestFnv1a64:
    """Tests for the FNV-1a 64-bit hash."""

    @pytest.mark.core
    def test_empty_input_is_offset_basis(self) -> None:
        """Hashing no bytes yields the FNV-1a 64 offset basis."""
        assert fnv1a_64(b"") == 0xCBF29CE484222325

    @pytest.mark.core
    def test_known_vector(self) -> None:
        """Hash of a single byte matches the published FNV-1a test vector."""
        assert fnv1a_64(b"a") == 0xAF63DC4C8601EC8C

    @pytest.mark.core
    def test_result_fits_in_64_bits(self) -> None:
        """The hash is always an unsigned 64-bit value."""
        assert 0 <= fnv1a_64(b"some longer input " * 50) < 2**64


@pytest.mark.tra("Core.Metric.HashId")
class TestMetricHashId:
    """Tests for Metric.hash_id."""

    @pytest.mark.core
    def test_explicit_identity_is_returned(self, timestamp: datetime) -> None:
        """An explicit identity overrides the derived hash."""
        metric = Metric(name="cpu", timestamp=timestamp, identity=42)
        assert metric.hash_id == 42

    @pytest.mark.core
    def test_derived_hash_covers_name_and_sorted_tags(
        self, timestamp: datetime
    ) -> None:
        """Derived hash is FNV-1a over name and newline-delimited sorted tags."""
        metric = Metric(
            name="cpu", timestamp=timestamp, tags={"region": "eu", "host": "a"}
        )
        assert metric.hash_id == fnv1a_64(b"cpu\nhost\na\nregion\neu\n")

    @pytest.mark.core
    def test_tag_order_does_not_change_hash(self, timestamp: datetime) -> None:
        """Same tag set in different insertion order hashes the same."""
        first = Metric(name="cpu", timestamp=timestamp, tags={"a": "1", "b": "2"})
        second = Metric(name="cpu", timestamp=timestamp, tags={"b": "2", "a": "1"})
        assert first.hash_id == second.hash_id

    @pytest.mark.core
    def test_fields_and_timestamp_do_not_change_hash(self) -> None:
        """Only the series identity feeds the hash."""
        first = Metric(name="cpu", timestamp=datetime(2023, 1, 1), fields={"v": 1})
        second = Metric(name="cpu", timestamp=datetime(2024, 1, 1), fields={"v": 2})
        assert first.hash_id == second.hash_id

    @pytest.mark.core
    def test_different_tags_change_hash(self, timestamp: datetime) -> None:
        """Different tag values give different series hashes."""
        first = Metric(name="cpu", timestamp=timestamp, tags={"host": "a"})
        second = Metric(name="cpu", timestamp=timestamp, tags={"host": "b"})
        assert first.hash_id != second.hash_id


class TestMetricValidation:
    """Tests for Metric construction rules."""

    @pytest.mark.core
    def test_empty_name_raises(self, timestamp: datetime) -> None:
        """A metric needs a non-empty name."""
        with pytest.raises(ValueError, match="name must not be empty"):
            Metric(name="", timestamp=timestamp)

    @pytest.mark.core
    @pytest.mark.parametrize("identity", [-1, 2**64])
    def test_identity_outside_uint64_raises(
        self, timestamp: datetime, identity: int
    ) -> None:
        """Identity must fit in an unsigned 64-bit integer."""
        with pytest.raises(ValueError, match="unsigned 64-bit"):
            Metric(name="cpu", timestamp=timestamp, identity=identity)

    @pytest.mark.core
    def test_metric_is_immutable(self, cpu_metric: Metric) -> None:
        """Metrics are read-only inputs."""
        with pytest.raises(FrozenInstanceError):
            cpu_metric.name = "mem"  # type: ignore[misc]

    @pytest.mark.core
    def test_defaults_to_empty_tags_and_fields(self, timestamp: datetime) -> None:
        """Tags and fields default to empty mappings."""
        metric = Metric(name="cpu", timestamp=timestamp)
        assert metric.tags == {}
        assert metric.fields == {}
