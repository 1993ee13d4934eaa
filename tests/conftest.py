import pytest

from securesum.drbg import HmacDrbg

# Mersenne primes, known prime without needing the prime source
P61 = 2**61 - 1
P127 = 2**127 - 1


@pytest.fixture
def drbg():
    return HmacDrbg(b"securesum-tests")
