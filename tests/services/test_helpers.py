"""Tests for service-layer input parsing helpers."""

from datetime import date, datetime

import pytest

from tillctl.domain.errors import ValidationError
from tillctl.services._helpers import parse_cart_item, parse_day


class TestParseCartItem:
    @pytest.mark.parametrize(
        ("spec", "expected"),
        [
            ("SC-WS-M:3", ("SC-WS-M", 3)),
            ("BE-CB-Adult-S:2", ("BE-CB-Adult-S", 2)),
            ("SC-WS-M", ("SC-WS-M", 1)),
            (" SC-WS-M:0 ", ("SC-WS-M", 0)),
        ],
    )
    def test_valid(self, spec: str, expected: tuple[str, int]) -> None:
        assert parse_cart_item(spec) == expected

    @pytest.mark.parametrize("spec", ["SC-WS-M:three", ":3", "SC-WS-M:"])
    def test_invalid(self, spec: str) -> None:
        with pytest.raises(ValidationError):
            parse_cart_item(spec)


class TestParseDay:
    def test_iso(self) -> None:
        assert parse_day("2026-10-16") == date(2026, 10, 16)

    def test_receipt_format(self) -> None:
        assert parse_day("16/10/2026") == date(2026, 10, 16)

    def test_passthrough(self) -> None:
        assert parse_day(date(2026, 10, 16)) == date(2026, 10, 16)
        assert parse_day(datetime(2026, 10, 16, 9, 30)) == date(2026, 10, 16)

    def test_invalid(self) -> None:
        with pytest.raises(ValidationError):
            parse_day("yesterday")
