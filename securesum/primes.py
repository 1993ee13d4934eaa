"""Prime source for the sharing field.

Primality itself is trusted: callers get a probable prime whose error bound
is set by the number of Miller-Rabin rounds.
"""
from __future__ import annotations
import secrets
from .drbg import HmacDrbg

_WITNESS_PRIMES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37)


def random_odd_bits(bits: int, token_bytes=secrets.token_bytes) -> int:
    nbytes = (bits + 7) // 8
    x = int.from_bytes(token_bytes(nbytes), "big") >> (nbytes * 8 - bits)
    x |= 1 << (bits - 1)  # top bit set
    x |= 1
    return x


def small_primes(limit=10000):
    sieve = bytearray(b"\x01")*(limit+1)
    sieve[0:2] = b"\x00\x00"
    for p in range(2, int(limit**0.5)+1):
        if sieve[p]:
            start = p*p
            sieve[start:limit+1:p] = b"\x00"*(((limit - start)//p)+1)
    return [i for i, v in enumerate(sieve) if v]


SMALL_PRIMES = small_primes(10000)


def trial_division_pass(n: int) -> bool:
    for p in SMALL_PRIMES:
        if p*p > n:
            break
        if n % p == 0:
            return n == p
    return True


def _decompose(n: int) -> tuple[int, int]:
    # n-1 = 2^s * d
    d = n - 1
    s = 0
    while d % 2 == 0:
        d //= 2
        s += 1
    return d, s


def _is_witness(a: int, n: int, d: int, s: int) -> bool:
    x = pow(a, d, n)
    if x == 1 or x == n-1:
        return False
    for _ in range(s-1):
        x = pow(x, 2, n)
        if x == n-1:
            return False
    return True


def _small_case(n: int) -> bool | None:
    if n < 2:
        return False
    for p in _WITNESS_PRIMES:
        if n % p == 0:
            return n == p
    return None


def is_probable_prime_mr(n: int, k: int) -> bool:
    small = _small_case(n)
    if small is not None:
        return small
    d, s = _decompose(n)
    for _ in range(k):
        a = secrets.randbelow(n-3) + 2  # in [2, n-2]
        if _is_witness(a, n, d, s):
            return False
    return True


def is_probable_prime_mr_bases(n: int, bases: list[int]) -> bool:
    small = _small_case(n)
    if small is not None:
        return small
    d, s = _decompose(n)
    for a in bases:
        a %= n
        if not 2 <= a <= n-2:
            a = (a % (n-3)) + 2
        if _is_witness(a, n, d, s):
            return False
    return True


def rounds_for_bits(bits: int, target_error_bits: int = 128) -> int:
    k = (target_error_bits + 1)//2
    base = 7 if bits <= 1024 else (10 if bits <= 2048 else 12)
    return max(base, k)


def generate_prime(bits: int, target_error_bits: int = 128) -> int:
    if bits < 2:
        raise ValueError("a prime needs at least 2 bits")
    k = rounds_for_bits(bits, target_error_bits)
    while True:
        n = random_odd_bits(bits)
        if trial_division_pass(n) and is_probable_prime_mr(n, k):
            return n


def generate_prime_deterministic(bits: int, bases: list[int], seed: bytes) -> int:
    """Reproducible prime: candidates from HmacDrbg(seed), fixed MR bases."""
    drbg = HmacDrbg(seed)
    while True:
        n = random_odd_bits(bits, drbg.random_bytes)
        if trial_division_pass(n) and is_probable_prime_mr_bases(n, bases):
            return n


def generate_prime_above(floor: int, bits: int = 128, target_error_bits: int = 128,
                         seed: bytes | None = None) -> int:
    """Prime strictly greater than ``floor``, at least ``bits`` long.

    With a ``seed`` the same prime comes back on every call, tested against
    the first primes as fixed Miller-Rabin bases.
    """
    bits = max(bits, floor.bit_length() + 1)
    if seed is not None:
        bases = SMALL_PRIMES[:rounds_for_bits(bits, target_error_bits)]
        return generate_prime_deterministic(bits, bases, seed)
    return generate_prime(bits, target_error_bits)
