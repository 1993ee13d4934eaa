"""Shamir threshold sharing over a prime field.

A secret is the constant term of a random polynomial of degree t-1; the
shares are its values at x = 1..n. Any t shares pin the polynomial down
and Lagrange interpolation at 0 gives the secret back. Fewer than t shares
are consistent with every possible secret.
"""
from dataclasses import dataclass

from . import field
from .audit import log_event
from .errors import DuplicateShareError, InsufficientQuorumError, PreconditionError
from .polynomial import Polynomial


@dataclass(frozen=True)
class Share:
    x: int
    y: int

    def __iter__(self):
        yield self.x
        yield self.y


def _as_share(item) -> Share:
    if isinstance(item, Share):
        return item
    x, y = item
    return Share(x, y)


def split_secret(secret: int, total_shares: int, threshold: int, prime: int, rng=None, party=None) -> list[Share]:
    if threshold > total_shares:
        raise PreconditionError("threshold cannot exceed total shares")
    if total_shares >= prime:
        # x = prime would land on field point 0, whose value is the secret
        raise PreconditionError("total_shares must be smaller than the prime")
    if not 0 <= secret < prime:
        raise PreconditionError("secret must be non-negative and smaller than the prime")
    poly = Polynomial.new(secret, threshold, prime, rng)
    shares = [Share(x, poly.evaluate(x)) for x in range(1, total_shares + 1)]
    log_event("split", party, f"n={total_shares} t={threshold}")
    return shares


def lagrange_coefficients_at(xs: list[int], at: int, prime: int) -> list[int]:
    """Basis values l_i(at) = prod_{j != i} (at - x_j) / (x_i - x_j) mod prime."""
    coeffs = []
    for i, xi in enumerate(xs):
        num = 1
        den = 1
        for j, xj in enumerate(xs):
            if i == j:
                continue
            num = field.mul(num, field.sub(at, xj, prime), prime)
            den = field.mul(den, field.sub(xi, xj, prime), prime)
        coeffs.append(field.div(num, den, prime))
    return coeffs


def interpolate(shares, at: int, prime: int) -> int:
    points = [_as_share(s) for s in shares]
    if not points:
        raise PreconditionError("no shares")
    xs = [s.x % prime for s in points]
    if len(set(xs)) != len(xs):
        raise DuplicateShareError("duplicate x-coordinate among shares")
    lams = lagrange_coefficients_at(xs, at, prime)
    return field.total((s.y * lam for s, lam in zip(points, lams)), prime)


def reconstruct_secret(shares, prime: int, threshold: int | None = None, party=None) -> int:
    """Recover the constant term from shares of one polynomial.

    Without ``threshold`` any number of shares is accepted; fewer than the
    original threshold returns a value unrelated to the secret. Passing
    ``threshold`` turns that case into InsufficientQuorumError.
    """
    shares = list(shares)
    if threshold is not None and len(shares) < threshold:
        raise InsufficientQuorumError(f"need {threshold} shares, got {len(shares)}")
    secret = interpolate(shares, 0, prime)
    log_event("reconstruct", party, "xs=" + ",".join(str(_as_share(s).x) for s in shares))
    return secret
