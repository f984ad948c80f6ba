"""
Ethereum encodings used by the signature variant.

Players are paid to an Ethereum address, and the signed message is the
ABI encoding of that address hashed with Keccak-256 (the pre-standard
SHA-3 variant Ethereum uses, not ``hashlib.sha3_256``).

References
----------
- Ethereum Yellow Paper, Appendix F   address derivation
- EIP-55                              mixed-case checksum encoding
- Solidity ABI spec                   static ``address`` encoding
"""

from __future__ import annotations

from dataclasses import dataclass

from Crypto.Hash import keccak

from .curve import Point
from .errors import InvalidEncoding

ADDRESS_BYTES = 20
WORD_BYTES = 32


def keccak256(data: bytes) -> bytes:
    """Keccak-256 digest (32 bytes)."""
    return keccak.new(digest_bits=256, data=data).digest()


@dataclass(frozen=True)
class Address:
    """A 20-byte Ethereum account address."""

    raw: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.raw, bytes) or len(self.raw) != ADDRESS_BYTES:
            raise InvalidEncoding(f"address needs {ADDRESS_BYTES} bytes")

    # constructors -----------------------------------------------------------
    @classmethod
    def from_hex(cls, text: str) -> Address:
        """
        Parse ``0x``-prefixed (or bare) hex.

        All-lowercase and all-uppercase inputs are accepted as is; mixed
        case must carry a valid EIP-55 checksum.
        """
        body = text[2:] if text[:2] in ("0x", "0X") else text
        if len(body) != 2 * ADDRESS_BYTES:
            raise InvalidEncoding(f"bad address length: {text!r}")
        try:
            raw = bytes.fromhex(body)
        except ValueError as exc:
            raise InvalidEncoding(f"bad address hex: {text!r}") from exc
        addr = cls(raw)
        if body != body.lower() and body != body.upper():
            if addr.to_checksum()[2:] != body:
                raise InvalidEncoding(f"bad EIP-55 checksum: {text!r}")
        return addr

    @classmethod
    def from_point(cls, point: Point) -> Address:
        """Last 20 bytes of keccak256(x || y)."""
        return cls(keccak256(point.to_bytes_uncompressed()[1:])[-ADDRESS_BYTES:])

    @classmethod
    def from_bytes(cls, data: bytes) -> Address:
        return cls(bytes(data))

    # encodings --------------------------------------------------------------
    def to_bytes(self) -> bytes:
        return self.raw

    def abi_encode(self) -> bytes:
        """Static ABI ``address``: left-padded to one 32-byte word."""
        return self.raw.rjust(WORD_BYTES, b"\x00")

    def to_checksum(self) -> str:
        """EIP-55 mixed-case hex."""
        lower = self.raw.hex()
        digest = keccak256(lower.encode("ascii")).hex()
        out = []
        for ch, nibble in zip(lower, digest):
            out.append(ch.upper() if int(nibble, 16) >= 8 else ch)
        return "0x" + "".join(out)

    def __str__(self) -> str:
        return self.to_checksum()

    def __repr__(self) -> str:
        return f"Address({self.to_checksum()})"


def message_digest(address: Address) -> bytes:
    """Digest signed by the player:  keccak256(abi.encode(address))."""
    return keccak256(address.abi_encode())
