"""Tests for typed response field accessors."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from coinbridge.exchanges.errors import MappingError
from coinbridge.exchanges.fields import (
    EpochUnit,
    as_utc,
    decimal_field,
    epoch_field,
    from_epoch,
    get_field,
    int_field,
    parse_decimal,
    str_field,
    to_epoch,
)


class TestGetField:
    def test_missing_key_returns_none(self):
        assert get_field({"a": 1}, "b") is None

    def test_non_mapping_returns_none(self):
        assert get_field([1, 2], "a") is None
        assert get_field(None, "a") is None


class TestParseDecimal:
    def test_float_goes_through_repr(self):
        assert parse_decimal(0.1) == Decimal("0.1")

    def test_string_and_int(self):
        assert parse_decimal(" 2.85714285 ") == Decimal("2.85714285")
        assert parse_decimal(350) == Decimal(350)

    @pytest.mark.parametrize("value", ["abc", True, [], {}, "NaN", "Infinity"])
    def test_rejects(self, value):
        with pytest.raises(MappingError):
            parse_decimal(value)


class TestDecimalField:
    def test_required_missing(self):
        with pytest.raises(MappingError) as exc_info:
            decimal_field({}, "price")
        assert exc_info.value.field == "price"

    def test_default_for_null(self):
        assert decimal_field({"price": None}, "price", None) is None
        assert decimal_field({"price": ""}, "price", Decimal("0")) == Decimal("0")

    def test_unparsable_with_default_still_fails(self):
        with pytest.raises(MappingError):
            decimal_field({"price": "n/a"}, "price", None)


class TestIntField:
    def test_integral_decimal(self):
        assert int_field({"id": Decimal("99451")}, "id") == 99451

    def test_fraction_rejected(self):
        with pytest.raises(MappingError):
            int_field({"id": 1.5}, "id")


class TestStrField:
    def test_number_rendered(self):
        assert str_field({"id": 4910}, "id") == "4910"
        assert str_field({"v": Decimal("0.10")}, "v") == "0.10"

    def test_container_rejected(self):
        with pytest.raises(MappingError):
            str_field({"id": [1]}, "id")

    def test_default(self):
        assert str_field({}, "id", "") == ""


class TestEpoch:
    def test_seconds(self):
        assert from_epoch(1409935047, EpochUnit.SECONDS) == datetime.fromtimestamp(1409935047, tz=timezone.utc)

    def test_milliseconds(self):
        assert from_epoch(1409920636701, EpochUnit.MILLISECONDS) == datetime(
            2014, 9, 5, 12, 37, 16, 701000, tzinfo=timezone.utc
        )

    def test_to_epoch(self):
        moment = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert to_epoch(moment, EpochUnit.MILLISECONDS) == 1704067200000
        assert to_epoch(moment, EpochUnit.SECONDS) == 1704067200

    def test_naive_datetime_read_as_utc(self):
        assert to_epoch(datetime(2024, 1, 1), EpochUnit.MILLISECONDS) == 1704067200000
        assert as_utc(datetime(2024, 1, 1)) == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_as_utc_keeps_aware(self):
        moment = datetime(2024, 1, 1, tzinfo=timezone(timedelta(hours=3)))
        assert as_utc(moment) is moment

    def test_epoch_field_optional(self):
        assert epoch_field({}, "time", EpochUnit.SECONDS, None) is None

    def test_out_of_range(self):
        with pytest.raises(MappingError):
            epoch_field({"time": 10**20}, "time", EpochUnit.SECONDS)
