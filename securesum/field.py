"""Arithmetic in the prime field Z_p. Every result is reduced into [0, p)."""


def add(a: int, b: int, p: int) -> int:
    return (a + b) % p


def sub(a: int, b: int, p: int) -> int:
    return (a - b) % p


def mul(a: int, b: int, p: int) -> int:
    return (a * b) % p


def inv(a: int, p: int) -> int:
    a %= p
    if a == 0:
        raise ZeroDivisionError(f"0 has no inverse mod {p}")
    return pow(a, -1, p)


def div(a: int, b: int, p: int) -> int:
    return (a * inv(b, p)) % p


def total(values, p: int) -> int:
    """Field sum of an iterable, reduced after each addition."""
    acc = 0
    for v in values:
        acc = add(acc, v, p)
    return acc
