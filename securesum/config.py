import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, model_validator

ENV_PREFIX = "SECURESUM_"


class SecureSumSettings(BaseModel):
    total_shares: int = Field(5, ge=1, description="Shares per split (N)")
    threshold: int = Field(3, ge=1, description="Shares needed to reconstruct (T)")
    prime_bits: int = Field(128, ge=8, description="Minimum bit length of the field prime")
    prime_error_bits: int = Field(128, ge=1, description="Target Miller-Rabin error in bits")
    quorum_size: Optional[int] = Field(None, ge=1, description="Local sums fed to reconstruction")
    workers: Optional[int] = Field(None, ge=1, description="Parallel split workers")
    prime_seed: Optional[str] = Field(None, min_length=1, description="Seed for a reproducible field prime")

    @model_validator(mode="after")
    def _check_counts(self):
        if self.threshold > self.total_shares:
            raise ValueError("threshold cannot exceed total_shares")
        if self.quorum_size is not None and not self.threshold <= self.quorum_size <= self.total_shares:
            raise ValueError("quorum_size must lie between threshold and total_shares")
        return self

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SecureSumSettings":
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is not None and raw.strip() != "":
                values[name] = raw.strip()
        return cls(**values)
