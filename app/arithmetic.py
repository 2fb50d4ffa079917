from __future__ import annotations

import math
from functools import reduce
from typing import Any, Iterable, List, Optional


def as_integer(value: Any) -> Optional[int]:
    """Return ``value`` as an int if it is an integral JSON number, else None.

    Integral floats (``4.0``) count as integers; booleans never do.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def fibonacci(count: int) -> List[int]:
    seq = [0, 1]
    for i in range(2, count):
        seq.append(seq[i - 1] + seq[i - 2])
    return seq[:count]


def is_prime(n: int) -> bool:
    if n < 2:
        return False
    for i in range(2, math.isqrt(n) + 1):
        if n % i == 0:
            return False
    return True


def filter_primes(values: Iterable[Any]) -> List[int]:
    primes: List[int] = []
    for item in values:
        n = as_integer(item)
        if n is not None and is_prime(n):
            primes.append(n)
    return primes


def gcd(a: int, b: int) -> int:
    while b:
        a, b = b, a % b
    return a


def lcm(a: int, b: int) -> int:
    return a * b // gcd(a, b)


def lcm_of(values: List[int]) -> int:
    return reduce(lcm, values)


def hcf_of(values: List[int]) -> int:
    return reduce(gcd, values)
