import hmac, hashlib, os, threading


class HmacDrbg:
    """HMAC-DRBG (SP 800-90A style, simplified) used as a seeded randomness source.

    Deterministic for a given seed, so tests can replay a split exactly.
    Draws are serialized with a lock; sharing one instance between worker
    threads is safe but the order of draws is then not reproducible.
    """
    def __init__(self, seed: bytes, hash_fn=hashlib.sha256):
        self.hash_fn = hash_fn
        self.K = b"\x00" * hash_fn().digest_size
        self.V = b"\x01" * hash_fn().digest_size
        self._lock = threading.Lock()
        self._update(seed)

    def _hmac(self, key, data):
        return hmac.new(key, data, self.hash_fn).digest()

    def _update(self, provided_data: bytes | None):
        self.K = self._hmac(self.K, self.V + b"\x00" + (provided_data or b""))
        self.V = self._hmac(self.K, self.V)
        if provided_data:
            self.K = self._hmac(self.K, self.V + b"\x01" + provided_data)
            self.V = self._hmac(self.K, self.V)

    def random_bytes(self, n: int) -> bytes:
        with self._lock:
            out = b""
            while len(out) < n:
                self.V = self._hmac(self.K, self.V)
                out += self.V
            self._update(None)
            return out[:n]

    def randbelow(self, n: int) -> int:
        """Uniform integer in [0, n), by rejection sampling on whole bytes."""
        if n <= 0:
            raise ValueError("randbelow requires a positive bound")
        bits = n.bit_length()
        nbytes = (bits + 7) // 8
        excess = nbytes * 8 - bits
        while True:
            x = int.from_bytes(self.random_bytes(nbytes), "big") >> excess
            if x < n:
                return x


def new_drbg():
    seed = os.urandom(48)
    return HmacDrbg(seed)
