"""Secure summation over Shamir shares.

Every party splits its own secret, hands the k-th share of its split to the
party assigned x = k + 1, and adds up what it received. Because evaluating
a sum of polynomials equals summing their evaluations, those local sums are
shares of the sum polynomial, whose constant term is the sum of all the
secrets. A quorum of local sums therefore reconstructs the total while no
single secret is ever reconstructed.
"""
import secrets
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field as dc_field
from typing import Optional

from . import field
from .audit import log_event
from .errors import InsufficientQuorumError, PreconditionError
from .primes import generate_prime_above
from .shamir import Share, reconstruct_secret, split_secret


@dataclass
class Party:
    index: int
    secret: int = dc_field(repr=False)
    inbox: list = dc_field(default_factory=list, repr=False)

    def receive(self, share: Share):
        self.inbox.append(share)

    def local_sum(self, prime: int) -> "LocalSum":
        if not self.inbox:
            raise PreconditionError(f"party {self.index} holds no shares")
        xs = {s.x for s in self.inbox}
        if len(xs) != 1:
            raise PreconditionError(f"party {self.index} holds shares at several x-coordinates")
        y_sum = field.total((s.y for s in self.inbox), prime)
        log_event("local_sum", self.index, f"x={self.inbox[0].x} shares={len(self.inbox)}")
        return LocalSum(self.index, self.inbox[0].x, y_sum)


@dataclass(frozen=True)
class LocalSum:
    party: int
    x: int
    y: int

    @property
    def share(self) -> Share:
        return Share(self.x, self.y)


@dataclass
class SecureSumResult:
    total: int
    expected: int
    prime: int
    quorum: list
    local_sums: list

    @property
    def verified(self) -> bool:
        return self.total == self.expected


def make_parties(party_secrets) -> list[Party]:
    return [Party(i, s) for i, s in enumerate(party_secrets)]


def split_all(parties, total_shares: int, threshold: int, prime: int, rng=None, workers: Optional[int] = None):
    """One independent split per party, in party order."""
    def _split(party):
        return split_secret(party.secret, total_shares, threshold, prime, rng, party=party.index)

    if workers and workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(_split, parties))
    return [_split(p) for p in parties]


def default_recipients(total_shares: int, num_parties: int) -> list[int]:
    # share k goes to party k mod N; only a one-to-one layout when N == parties
    if total_shares != num_parties:
        raise PreconditionError(
            f"default routing needs total_shares == number of parties "
            f"({total_shares} != {num_parties}); pass recipients explicitly"
        )
    return [k % total_shares for k in range(total_shares)]


def _check_recipients(recipients, total_shares: int, num_parties: int):
    if len(recipients) != total_shares:
        raise PreconditionError("recipients must name one party per share index")
    if len(set(recipients)) != len(recipients):
        raise PreconditionError("each party can be assigned at most one x-coordinate")
    for r in recipients:
        if not 0 <= r < num_parties:
            raise PreconditionError(f"recipient {r} is not a party index")


def redistribute(parties, splits, recipients=None, channel=None):
    """Route share k of every split to ``recipients[k]``.

    With a ``channel`` each share is sealed by its sender and opened by its
    recipient instead of being handed over directly.
    """
    if len(splits) != len(parties):
        raise PreconditionError("expected one split per party")
    total_shares = len(splits[0]) if splits else 0
    if any(len(s) != total_shares for s in splits):
        raise PreconditionError("all splits must have the same number of shares")
    if recipients is None:
        recipients = default_recipients(total_shares, len(parties))
    else:
        recipients = list(recipients)
        _check_recipients(recipients, total_shares, len(parties))

    for sender, shares in zip(parties, splits):
        for k, share in enumerate(shares):
            recipient = parties[recipients[k]]
            if channel is not None:
                blob = channel.send(sender.index, recipient.index, share)
                share = channel.receive(recipient.index, blob)
            recipient.receive(share)
        log_event("redistribute", sender.index, f"shares={len(shares)}")


def local_sums(parties, prime: int) -> list[LocalSum]:
    return [p.local_sum(prime) for p in parties if p.inbox]


def choose_quorum(sums, size: int, rng=None) -> list:
    """Uniformly random ``size`` elements of ``sums`` (Fisher-Yates on a copy)."""
    if size > len(sums):
        raise InsufficientQuorumError(f"only {len(sums)} local sums available, need {size}")
    rng = rng or secrets
    pool = list(sums)
    for i in range(len(pool) - 1, 0, -1):
        j = rng.randbelow(i + 1)
        pool[i], pool[j] = pool[j], pool[i]
    return pool[:size]


def expected_sum(party_secrets, prime: int) -> int:
    return field.total(party_secrets, prime)


def reconstruct_sum(quorum, threshold: int, prime: int) -> int:
    xs = [s.x for s in quorum]
    if len(set(xs)) != len(xs):
        raise PreconditionError("quorum local sums must have distinct x-coordinates")
    return reconstruct_secret([s.share for s in quorum], prime, threshold=threshold)


def run_secure_sum(party_secrets, total_shares: int, threshold: int, prime: int, rng=None,
                   quorum_size: Optional[int] = None, recipients=None, channel=None,
                   workers: Optional[int] = None) -> SecureSumResult:
    party_secrets = list(party_secrets)
    if not party_secrets:
        raise PreconditionError("at least one party is required")
    quorum_size = threshold if quorum_size is None else quorum_size
    if quorum_size < threshold:
        raise InsufficientQuorumError(f"quorum of {quorum_size} is below threshold {threshold}")

    parties = make_parties(party_secrets)
    splits = split_all(parties, total_shares, threshold, prime, rng, workers)
    redistribute(parties, splits, recipients, channel)
    sums = local_sums(parties, prime)
    quorum = choose_quorum(sums, quorum_size, rng)
    total = reconstruct_sum(quorum, threshold, prime)
    expected = expected_sum(party_secrets, prime)
    log_event("secure_sum", None, f"parties={len(parties)} quorum={','.join(str(s.x) for s in quorum)}")
    return SecureSumResult(total=total, expected=expected, prime=prime, quorum=quorum, local_sums=sums)


def run_with_settings(party_secrets, settings, rng=None, recipients=None, channel=None) -> SecureSumResult:
    """Draw a prime above every secret (reproducible when ``prime_seed`` is set) and run
    with the configured N, T, quorum and workers.
    """
    party_secrets = list(party_secrets)
    if any(s < 0 for s in party_secrets):
        raise PreconditionError("secrets must be non-negative")
    seed = settings.prime_seed.encode() if settings.prime_seed else None
    prime = generate_prime_above(
        max(party_secrets, default=0), settings.prime_bits, settings.prime_error_bits, seed=seed
    )
    return run_secure_sum(
        party_secrets,
        settings.total_shares,
        settings.threshold,
        prime,
        rng=rng,
        quorum_size=settings.quorum_size,
        recipients=recipients,
        channel=channel,
        workers=settings.workers,
    )
