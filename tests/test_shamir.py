from itertools import combinations

import pytest

from securesum import (
    DuplicateShareError,
    InsufficientQuorumError,
    PreconditionError,
    Share,
    interpolate,
    reconstruct_secret,
    split_secret,
)
from securesum.drbg import HmacDrbg
from securesum.shamir import lagrange_coefficients_at

from conftest import P61, P127


def test_small_field_scenario(drbg):
    shares = split_secret(42, 5, 3, 97, drbg)
    assert [s.x for s in shares] == [1, 2, 3, 4, 5]
    by_x = {s.x: s for s in shares}
    assert reconstruct_secret([by_x[1], by_x[3], by_x[5]], 97) == 42
    assert reconstruct_secret([by_x[2], by_x[4], by_x[1]], 97) == 42


@pytest.mark.parametrize("n,t", [(1, 1), (3, 1), (3, 3), (5, 3), (7, 4)])
def test_every_threshold_subset_reconstructs(n, t, drbg):
    secret = 98765432123456789
    shares = split_secret(secret, n, t, P127, drbg)
    for subset in combinations(shares, t):
        assert reconstruct_secret(subset, P127) == secret


def test_more_than_threshold_also_reconstructs(drbg):
    shares = split_secret(31337, 6, 3, P61, drbg)
    for k in range(3, 7):
        assert reconstruct_secret(shares[:k], P61) == 31337


def test_default_randomness_source():
    shares = split_secret(99, 5, 3, P127)
    assert reconstruct_secret(shares[2:], P127) == 99


def test_independent_splits_differ():
    a = split_secret(5, 4, 3, P127)
    b = split_secret(5, 4, 3, P127)
    assert [s.y for s in a] != [s.y for s in b]


def test_seeded_split_is_reproducible():
    a = split_secret(5, 4, 3, P127, HmacDrbg(b"fixed"))
    b = split_secret(5, 4, 3, P127, HmacDrbg(b"fixed"))
    assert a == b


@pytest.mark.parametrize("n", range(1, 11))
def test_zero_is_never_an_x_coordinate(n, drbg):
    shares = split_secret(3, n, 1, 97, drbg)
    assert all(s.x != 0 for s in shares)


def test_threshold_one_gives_secret_everywhere(drbg):
    shares = split_secret(17, 4, 1, 97, drbg)
    assert all(s.y == 17 for s in shares)


def test_below_threshold_is_not_the_secret():
    secret = 123456
    misses = 0
    for _ in range(50):
        shares = split_secret(secret, 5, 3, P61)
        if reconstruct_secret(shares[:2], P61) != secret:
            misses += 1
    assert misses >= 48


def test_below_threshold_runs_without_guard(drbg):
    shares = split_secret(42, 5, 3, 97, drbg)
    value = reconstruct_secret(shares[:2], 97)
    assert 0 <= value < 97


def test_below_threshold_raises_with_guard(drbg):
    shares = split_secret(42, 5, 3, 97, drbg)
    with pytest.raises(InsufficientQuorumError):
        reconstruct_secret(shares[:2], 97, threshold=3)
    assert reconstruct_secret(shares[:3], 97, threshold=3) == 42


def test_threshold_above_total_rejected(drbg):
    with pytest.raises(PreconditionError):
        split_secret(1, 2, 3, 97, drbg)


@pytest.mark.parametrize("secret", [97, 500, -3])
def test_secret_outside_field_rejected(secret, drbg):
    with pytest.raises(PreconditionError):
        split_secret(secret, 5, 3, 97, drbg)


def test_duplicate_x_rejected(drbg):
    shares = split_secret(42, 5, 3, 97, drbg)
    with pytest.raises(DuplicateShareError):
        reconstruct_secret([shares[0], shares[0], shares[1]], 97)


def test_x_congruent_mod_prime_is_a_duplicate():
    with pytest.raises(DuplicateShareError):
        reconstruct_secret([(1, 5), (98, 5)], 97)


def test_empty_share_set_rejected():
    with pytest.raises(PreconditionError):
        reconstruct_secret([], 97)


def test_accepts_plain_pairs(drbg):
    shares = split_secret(42, 5, 3, 97, drbg)
    pairs = [(s.x, s.y) for s in shares[1:4]]
    assert reconstruct_secret(pairs, 97) == 42


def test_share_unpacks():
    x, y = Share(3, 9)
    assert (x, y) == (3, 9)


def test_reconstruct_stays_in_field():
    for y1 in range(0, 97, 7):
        for y2 in range(0, 97, 11):
            assert 0 <= reconstruct_secret([(1, y1), (2, y2)], 97) < 97


def test_interpolate_recovers_missing_share(drbg):
    shares = split_secret(42, 6, 3, 97, drbg)
    assert interpolate(shares[:3], 5, 97) == shares[4].y
    assert interpolate(shares[:3], 0, 97) == 42


def test_lagrange_coefficients_sum_to_one():
    # interpolating the constant polynomial 1
    lams = lagrange_coefficients_at([1, 2, 3, 4], 0, 97)
    assert sum(lams) % 97 == 1


def test_sharewise_sums_reconstruct_sum():
    s1, s2 = 60, 70
    a = split_secret(s1, 5, 3, 97)
    b = split_secret(s2, 5, 3, 97)
    summed = [Share(x.x, (x.y + y.y) % 97) for x, y in zip(a, b)]
    for subset in combinations(summed, 3):
        assert reconstruct_secret(subset, 97) == (s1 + s2) % 97


@pytest.mark.parametrize("n", [97, 100])
def test_share_count_must_stay_below_prime(n, drbg):
    with pytest.raises(PreconditionError):
        split_secret(42, n, 3, 97, drbg)


def test_largest_share_count_below_prime(drbg):
    shares = split_secret(42, 96, 3, 97, drbg)
    assert len({s.x % 97 for s in shares}) == 96
    assert all(s.x % 97 != 0 for s in shares)
    assert reconstruct_secret([shares[0], shares[50], shares[95]], 97) == 42
