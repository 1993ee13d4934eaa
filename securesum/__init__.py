"""
securesum - Shamir threshold sharing and secure summation over a prime field
"""

from .errors import PreconditionError, DuplicateShareError, InsufficientQuorumError
from .polynomial import Polynomial
from .shamir import Share, split_secret, reconstruct_secret, interpolate
from .secure_sum import (
    Party,
    LocalSum,
    SecureSumResult,
    run_secure_sum,
    run_with_settings,
)
from .config import SecureSumSettings

__version__ = "1.0.0"

__all__ = [
    'PreconditionError',
    'DuplicateShareError',
    'InsufficientQuorumError',
    'Polynomial',
    'Share',
    'split_secret',
    'reconstruct_secret',
    'interpolate',
    'Party',
    'LocalSum',
    'SecureSumResult',
    'run_secure_sum',
    'run_with_settings',
    'SecureSumSettings',
]
