"""
Elliptic curve arithmetic on secp256k1 via libsecp256k1.

Every group operation (scalar multiplication, point addition) is
delegated to the C library ``coincurve``, which wraps Bitcoin Core's
libsecp256k1.  Scalars are plain Python integers reduced mod the group
order, which is fast enough for the field side.

Wire formats
------------
- Scalar: 32-byte big-endian, value in [0, n).
- Point:  33-byte SEC 1 compressed encoding.  Decoding rejects the
  identity, malformed prefixes and x-coordinates with no curve point.

References
----------
- SEC 1 v2 §2.3.3-2.3.4  point encoding / decoding
- SEC 2 v2 §2.4.1        secp256k1 domain parameters
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import Callable, Optional

from coincurve import PrivateKey as _SK, PublicKey as _PK

from .errors import InvalidEncoding, PointNotOnCurve

# ── secp256k1 constants ─────────────────────────────────────────────────
ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
FIELD_PRIME = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
CURVE_B = 7
SCALAR_BYTES = 32
COMPRESSED_BYTES = 33

# n bytes -> n uniformly random bytes; must be cryptographically secure
RandomSource = Callable[[int], bytes]


# ── Scalar  (Z_n arithmetic, pure Python) ───────────────────────────────
class Scalar:
    """Element of the scalar field  Z_n  where *n* = ``ORDER``."""

    __slots__ = ("_v",)

    def __init__(self, value: int) -> None:
        self._v = value % ORDER

    # constructors -----------------------------------------------------------
    @classmethod
    def random(cls, rng: Optional[RandomSource] = None) -> Scalar:
        """Uniform in [1, n-1] via rejection sampling."""
        draw = rng or secrets.token_bytes
        while True:
            c = int.from_bytes(draw(SCALAR_BYTES), "big")
            if 0 < c < ORDER:
                return cls(c)

    @classmethod
    def from_bytes(cls, data: bytes) -> Scalar:
        if not isinstance(data, (bytes, bytearray)):
            raise InvalidEncoding(f"expected bytes, got {type(data).__name__}")
        if len(data) != SCALAR_BYTES:
            raise InvalidEncoding(
                f"scalar needs {SCALAR_BYTES} bytes, got {len(data)}"
            )
        v = int.from_bytes(data, "big")
        if v >= ORDER:
            raise InvalidEncoding("scalar out of range")
        return cls(v)

    @classmethod
    def from_bytes_reduce(cls, data: bytes) -> Scalar:
        """Hash-output safe: reduce arbitrary length modulo *n*."""
        return cls(int.from_bytes(data, "big"))

    # serialisation ----------------------------------------------------------
    def to_bytes(self) -> bytes:
        return self._v.to_bytes(SCALAR_BYTES, "big")

    @property
    def value(self) -> int:
        return self._v

    def is_zero(self) -> bool:
        return self._v == 0

    # arithmetic -------------------------------------------------------------
    def __add__(self, o: Scalar) -> Scalar:
        if not isinstance(o, Scalar):
            return NotImplemented
        return Scalar(self._v + o._v)

    def __mul__(self, o):
        if isinstance(o, Scalar):
            return Scalar(self._v * o._v)
        if isinstance(o, Point):
            return o._smul(self)
        return NotImplemented

    def __rmul__(self, o):
        if isinstance(o, int):
            return Scalar(o * self._v)
        return NotImplemented


    # comparison / hashing ---------------------------------------------------
    def __eq__(self, o: object) -> bool:
        if isinstance(o, Scalar):
            return self._v == o._v
        if isinstance(o, int):
            return self._v == o % ORDER
        return False

    def __hash__(self) -> int:
        return hash(self._v)

    def __bool__(self) -> bool:
        return self._v != 0

    def __repr__(self) -> str:
        h = hex(self._v)
        return f"Scalar(0x{h[2:10]}…)" if len(h) > 14 else f"Scalar({h})"


# ── Point  (secp256k1 group element via libsecp256k1) ───────────────────
class Point:
    """
    Point on secp256k1.

    The identity (point at infinity) is represented by a flag rather than
    a ``coincurve.PublicKey``.  It can appear as the result of arithmetic
    (``0 · G``, ``P + (-P)``) but is never accepted from the wire.
    """

    __slots__ = ("_pk", "_inf")

    def __init__(self, *, pk: Optional[_PK] = None, infinity: bool = False):
        self._pk: Optional[_PK] = pk
        self._inf: bool = infinity

    # constructors -----------------------------------------------------------
    @classmethod
    def generator(cls) -> Point:
        """Standard base point *G*."""
        return cls(pk=_SK(b"\x00" * 31 + b"\x01").public_key)

    @classmethod
    def identity(cls) -> Point:
        """Point at infinity, the additive identity."""
        return cls(infinity=True)

    @classmethod
    def from_public_key(cls, pk: _PK) -> Point:
        return cls(pk=pk)

    @classmethod
    def from_bytes(cls, data: bytes) -> Point:
        """
        Deserialise a 33-byte SEC 1 compressed point.

        Raises ``InvalidEncoding`` for a wrong length, an unknown prefix
        or an x-coordinate outside the field, and ``PointNotOnCurve``
        for the identity or an x with no matching y.
        """
        if not isinstance(data, (bytes, bytearray)):
            raise InvalidEncoding(f"expected bytes, got {type(data).__name__}")
        data = bytes(data)
        if len(data) != COMPRESSED_BYTES:
            raise InvalidEncoding(
                f"point needs {COMPRESSED_BYTES} bytes, got {len(data)}"
            )
        if not any(data):
            raise PointNotOnCurve("identity is not a valid group element input")
        if data[0] not in (0x02, 0x03):
            raise InvalidEncoding(f"bad point prefix 0x{data[0]:02x}")
        x = int.from_bytes(data[1:], "big")
        if x >= FIELD_PRIME:
            raise InvalidEncoding("x-coordinate not in the base field")
        if not _has_curve_point(x):
            raise PointNotOnCurve("x-coordinate has no point on secp256k1")
        try:
            return cls(pk=_PK(data))
        except ValueError as exc:
            raise PointNotOnCurve(str(exc)) from exc

    # serialisation ----------------------------------------------------------
    def to_bytes_compressed(self) -> bytes:
        if self._inf:
            return b"\x00" * COMPRESSED_BYTES
        return self._pk.format(compressed=True)  # type: ignore[union-attr]

    def to_bytes(self) -> bytes:
        return self.to_bytes_compressed()

    def to_bytes_uncompressed(self) -> bytes:
        """65-byte ``04 || x || y`` form (identity has none)."""
        if self._inf:
            raise ValueError("identity has no uncompressed encoding")
        return self._pk.format(compressed=False)  # type: ignore[union-attr]

    @property
    def x(self) -> int:
        if self._inf:
            return 0
        return int.from_bytes(self.to_bytes_uncompressed()[1:33], "big")

    def is_inf(self) -> bool:
        return self._inf

    # group operations -------------------------------------------------------
    def _smul(self, s: Scalar) -> Point:
        """Scalar multiplication  s · self  (C speed)."""
        if self._inf or s.is_zero():
            return Point.identity()
        return Point(pk=self._pk.multiply(s.to_bytes()))  # type: ignore

    def __neg__(self) -> Point:
        if self._inf:
            return self
        raw = bytearray(self._pk.format(compressed=True))  # type: ignore
        raw[0] ^= 0x01            # 0x02 ↔ 0x03 flip parity
        return Point(pk=_PK(bytes(raw)))

    def __add__(self, o: Point) -> Point:
        if not isinstance(o, Point):
            return NotImplemented
        if self._inf:
            return o
        if o._inf:
            return self
        # check for P + (-P) = O
        if self._pk.format() == (-o)._pk.format():  # type: ignore
            return Point.identity()
        return Point(pk=_PK.combine_keys(
            [self._pk, o._pk]))  # type: ignore[list-item]

    def __rmul__(self, s) -> Point:
        if isinstance(s, Scalar):
            return self._smul(s)
        if isinstance(s, int):
            return self._smul(Scalar(s))
        return NotImplemented

    def __eq__(self, o: object) -> bool:
        if not isinstance(o, Point):
            return False
        if self._inf and o._inf:
            return True
        if self._inf or o._inf:
            return False
        return self._pk.format() == o._pk.format()  # type: ignore

    def __hash__(self) -> int:
        return hash(self.to_bytes())

    def __repr__(self) -> str:
        if self._inf:
            return "Point(∞)"
        return f"Point(0x{self.x:064x})"[:42] + "…)"


def _has_curve_point(x: int) -> bool:
    """Euler criterion: x³ + 7 is a square mod p."""
    y_sq = (pow(x, 3, FIELD_PRIME) + CURVE_B) % FIELD_PRIME
    return y_sq == 0 or pow(y_sq, (FIELD_PRIME - 1) // 2, FIELD_PRIME) == 1


# ── module-level generator ──────────────────────────────────────────────
G = Point.generator()


# ── group parameters ────────────────────────────────────────────────────
@dataclass(frozen=True)
class GroupParams:
    """
    Fixed group configuration handed to every component.

    Only the secp256k1 group is backed by an arithmetic implementation,
    so ``order`` must be its order; the generator may be any non-identity
    element of that group.
    """

    name: str
    order: int
    generator: Point

    def __post_init__(self) -> None:
        if self.order != ORDER:
            raise ValueError("only the secp256k1 group order is supported")
        if self.generator.is_inf():
            raise ValueError("generator must not be the identity")


SECP256K1 = GroupParams(name="secp256k1", order=ORDER, generator=G)


# ── functional API ──────────────────────────────────────────────────────
def scalar_multiply(base: Point, exponent: Scalar) -> Point:
    """``base^exponent`` in multiplicative notation, ``exponent · base``."""
    return exponent * base


def add_points(a: Point, b: Point) -> Point:
    """Group operation (``a · b`` multiplicatively, ``a + b`` on the curve)."""
    return a + b


def reduce_to_scalar(data: bytes) -> Scalar:
    """Big-endian integer of *data*, reduced mod *n*."""
    return Scalar.from_bytes_reduce(data)
