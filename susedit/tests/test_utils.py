from decimal import Decimal

from ..utils import (
    clamp,
    lcm,
    parse_decimal_prefix,
    parse_int_prefix,
    pretty_print_decimal,
    single_line,
)


def test_lcm() -> None:
    assert lcm() == 1
    assert lcm(4, 6, 3) == 12


def test_clamp() -> None:
    assert clamp(5, 0, 3) == 3
    assert clamp(-5, 0, 3) == 0
    assert clamp(Decimal("1.5"), Decimal(0), Decimal(3)) == Decimal("1.5")


def test_parse_int_prefix() -> None:
    assert parse_int_prefix("12abc") == 12
    assert parse_int_prefix(" -3") == -3
    assert parse_int_prefix("abc") is None
    assert parse_int_prefix("") is None
    assert parse_int_prefix("9" * 10000) is None


def test_parse_decimal_prefix() -> None:
    assert parse_decimal_prefix("140.5bpm") == Decimal("140.5")
    assert parse_decimal_prefix(".5") == Decimal("0.5")
    assert parse_decimal_prefix("12.") == Decimal(12)
    assert parse_decimal_prefix("fast") is None


def test_pretty_print_decimal() -> None:
    assert pretty_print_decimal(Decimal("120.500")) == "120.5"
    assert pretty_print_decimal(Decimal("120.000")) == "120"
    assert pretty_print_decimal(Decimal("1200")) == "1200"
    assert pretty_print_decimal(Decimal("1E+2")) == "100"
    assert pretty_print_decimal(Decimal("1.505E+2")) == "150.5"


def test_single_line() -> None:
    assert single_line("A\n00000:1111") == "A 00000:1111"
    assert single_line(" a\r\nb\u2028c\x0b ") == "a b c"
    assert single_line("\n") == ""
    assert single_line("plain") == "plain"
