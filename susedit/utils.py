"""General utility functions"""

import re
from collections import defaultdict
from decimal import Decimal, InvalidOperation
from fractions import Fraction
from functools import reduce
from math import gcd
from typing import Callable, Dict, Hashable, Iterable, List, Optional, TypeVar


def single_lcm(a: int, b: int) -> int:
    """Return lowest common multiple of two numbers"""
    return a * b // gcd(a, b)


def lcm(*args: int) -> int:
    """Return lcm of args."""
    return reduce(single_lcm, args, 1)


def fraction_to_decimal(frac: Fraction) -> Decimal:
    "Thanks stackoverflow ! https://stackoverflow.com/a/40468867/10768117"
    return frac.numerator / Decimal(frac.denominator)


def pretty_print_decimal(d: Decimal) -> str:
    raw_string_form = format(d, "f")
    if "." in raw_string_form:
        return raw_string_form.rstrip("0").rstrip(".")
    else:
        return raw_string_form


def single_line(text: str) -> str:
    """Join the lines of the text with spaces, for values that get written on
    a line of their own"""
    return " ".join(text.splitlines()).strip()


K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


def group_by(elements: Iterable[V], key: Callable[[V], K]) -> Dict[K, List[V]]:
    res = defaultdict(list)
    for e in elements:
        res[key(e)].append(e)

    return res


N = TypeVar("N", int, Decimal, Fraction)


def clamp(value: N, low: N, high: N) -> N:
    return min(high, max(low, value))


INTEGER_PREFIX = re.compile(r"\s*[+-]?[0-9]+")
DECIMAL_PREFIX = re.compile(r"\s*[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)")


def parse_int_prefix(text: str) -> Optional[int]:
    """Parse the integer found at the start of the text, ignoring whatever
    comes after it, like "12abc" -> 12. Returns None if there is none"""
    match = INTEGER_PREFIX.match(text)
    if match is None:
        return None
    try:
        return int(match.group())
    except ValueError:
        # too many digits for int()
        return None


def parse_decimal_prefix(text: str) -> Optional[Decimal]:
    """Same as parse_int_prefix but for decimal numbers"""
    match = DECIMAL_PREFIX.match(text)
    if match is None:
        return None
    try:
        return Decimal(match.group().strip())
    except InvalidOperation:
        return None
