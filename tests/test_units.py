"""Amount parsing and formatting."""

import pytest

from predledger.units import MIN_STAKE, UNIT, format_amount, parse_amount


def test_parse_amount_decimal_strings():
    assert parse_amount("1") == UNIT
    assert parse_amount("0.01") == MIN_STAKE
    assert parse_amount("3.92") == 392 * UNIT // 100
    assert parse_amount("0.000000000000000001") == 1


@pytest.mark.parametrize("bad", ["-1", "abc", "0.0000000000000000001", "NaN"])
def test_parse_amount_rejects(bad):
    with pytest.raises(ValueError):
        parse_amount(bad)


def test_format_amount():
    assert format_amount(0) == "0"
    assert format_amount(UNIT) == "1"
    assert format_amount(392 * UNIT // 100) == "3.92"
    assert format_amount(1) == "0.000000000000000001"
