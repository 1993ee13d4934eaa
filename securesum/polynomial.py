import secrets

from .errors import PreconditionError


class Polynomial:
    """Secret-encoding polynomial f(x) = s + a1*x + ... + a_{t-1}*x^{t-1} over Z_p.

    Only lives for the duration of one split; its repr never shows the
    coefficients.
    """

    def __init__(self, coefficients, prime: int):
        if prime < 2:
            raise PreconditionError("prime must be at least 2")
        if not coefficients:
            raise PreconditionError("polynomial needs at least one coefficient")
        self._coeffs = tuple(c % prime for c in coefficients)
        self._prime = prime

    @classmethod
    def new(cls, secret: int, threshold: int, prime: int, rng=None) -> "Polynomial":
        if threshold < 1:
            raise PreconditionError("threshold must be at least 1")
        if not 0 <= secret < prime:
            raise PreconditionError("secret must be non-negative and smaller than the prime")
        rng = rng or secrets
        coeffs = [secret] + [rng.randbelow(prime) for _ in range(threshold - 1)]
        return cls(coeffs, prime)

    @property
    def coefficients(self) -> tuple[int, ...]:
        return self._coeffs

    @property
    def prime(self) -> int:
        return self._prime

    @property
    def degree(self) -> int:
        return len(self._coeffs) - 1

    def evaluate(self, x: int) -> int:
        p = self._prime
        result = 0
        power = 1
        for c in self._coeffs:
            result = (result + c * power) % p
            power = (power * x) % p
        return result

    def __add__(self, other: "Polynomial") -> "Polynomial":
        if not isinstance(other, Polynomial):
            return NotImplemented
        if other._prime != self._prime:
            raise PreconditionError("cannot add polynomials over different primes")
        n = max(len(self._coeffs), len(other._coeffs))
        a = self._coeffs + (0,) * (n - len(self._coeffs))
        b = other._coeffs + (0,) * (n - len(other._coeffs))
        return Polynomial([(x + y) % self._prime for x, y in zip(a, b)], self._prime)

    def __len__(self) -> int:
        return len(self._coeffs)

    def __repr__(self) -> str:
        return f"Polynomial(degree={self.degree}, prime=<{self._prime.bit_length()} bits>)"
