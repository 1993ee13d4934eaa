"""Logical shape of a share in transit, plus optional ECIES sealing.

Delivery between parties is left to the caller. What crosses the wire is a
ShareMessage naming its sender and recipient; sealing it to the
recipient's P-256 key keeps the y-value away from anyone relaying it.
"""
import os

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from pydantic import BaseModel, Field

from .errors import PreconditionError
from .shamir import Share

CURVE = ec.SECP256R1()
HKDF_INFO = b"securesum-share"
NONCE_LEN = 12


class ShareMessage(BaseModel):
    sender: int = Field(..., ge=0)
    recipient: int = Field(..., ge=0)
    x: int = Field(..., ge=1)
    y: int = Field(..., ge=0)

    @classmethod
    def from_share(cls, sender: int, recipient: int, share: Share) -> "ShareMessage":
        return cls(sender=sender, recipient=recipient, x=share.x, y=share.y)

    def to_share(self) -> Share:
        return Share(self.x, self.y)


def generate_party_keypair():
    private_key = ec.generate_private_key(CURVE)
    return private_key, private_key.public_key()


def _point_len(curve):
    coord_len = (curve.key_size + 7) // 8
    return 1 + 2 * coord_len  # 0x04 + X + Y


def _derive_key(shared_secret: bytes) -> bytes:
    return HKDF(
        algorithm=hashes.SHA256(),
        length=32,
        salt=None,
        info=HKDF_INFO,
    ).derive(shared_secret)


def seal(public_key, message: ShareMessage) -> bytes:
    ephemeral = ec.generate_private_key(public_key.curve)
    key = _derive_key(ephemeral.exchange(ec.ECDH(), public_key))
    nonce = os.urandom(NONCE_LEN)
    ciphertext = AESGCM(key).encrypt(nonce, message.model_dump_json().encode(), None)
    ephemeral_bytes = ephemeral.public_key().public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.UncompressedPoint,
    )
    return ephemeral_bytes + nonce + ciphertext


def unseal(private_key, data: bytes) -> ShareMessage:
    eph_len = _point_len(private_key.curve)
    if len(data) < eph_len + NONCE_LEN + 1:
        raise ValueError("sealed share is too short")
    ephemeral_pub = ec.EllipticCurvePublicKey.from_encoded_point(private_key.curve, data[:eph_len])
    nonce = data[eph_len:eph_len + NONCE_LEN]
    key = _derive_key(private_key.exchange(ec.ECDH(), ephemeral_pub))
    plaintext = AESGCM(key).decrypt(nonce, data[eph_len + NONCE_LEN:], None)
    return ShareMessage.model_validate_json(plaintext)


class SealedChannel:
    """One P-256 keypair per party; shares are sealed to their recipient."""

    def __init__(self, party_indices):
        self._keys = {i: generate_party_keypair() for i in party_indices}

    def public_key(self, party: int):
        return self._keys[party][1]

    def send(self, sender: int, recipient: int, share: Share) -> bytes:
        if recipient not in self._keys:
            raise PreconditionError(f"unknown recipient {recipient}")
        return seal(self.public_key(recipient), ShareMessage.from_share(sender, recipient, share))

    def receive(self, recipient: int, blob: bytes) -> Share:
        message = unseal(self._keys[recipient][0], blob)
        if message.recipient != recipient:
            raise PreconditionError(f"share addressed to party {message.recipient}, not {recipient}")
        return message.to_share()
