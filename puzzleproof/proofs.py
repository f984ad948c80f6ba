"""
Sigma-protocol proof of knowledge of a puzzle witness.

Proves knowledge of  w  such that  h = w·G  without revealing w.  This
is Schnorr's identification protocol made non-interactive with
Fiat-Shamir in the Random Oracle Model.

    prover:    r ←$ Z_n,   a = r·G
               e = H(G, h, a)
               z = w·e + r
    verifier:  a + e·h  ==  z·G

Completeness is exact.  Soundness: a prover without w passes with
probability about 1/n per challenge (special soundness plus the ROM).
The proof leaks nothing about w (honest-verifier zero knowledge).

References
----------
- Schnorr (1989). "Efficient Identification and Signatures for Smart
  Cards."  CRYPTO 1989.
- Fiat & Shamir (1986). "How to Prove Yourself."  CRYPTO 1986.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from .commitment import Witness, as_witness
from .curve import (
    GroupParams,
    Point,
    RandomSource,
    Scalar,
    SECP256K1,
    COMPRESSED_BYTES,
    SCALAR_BYTES,
    add_points,
    scalar_multiply,
)
from .errors import InvalidEncoding
from .hash import hash_challenge

log = logging.getLogger(__name__)

PROOF_BYTES = COMPRESSED_BYTES + SCALAR_BYTES


@dataclass(frozen=True)
class SigmaProof:
    """
    Non-interactive proof  (a, z).

    ``a`` commits to the prover's randomness, ``z`` is the response to
    the challenge derived from  (G, h, a).
    """

    a: Point
    z: Scalar

    def to_bytes(self) -> bytes:
        """Serialise to 65 bytes: compressed a (33) + z (32)."""
        return self.a.to_bytes_compressed() + self.z.to_bytes()

    @classmethod
    def from_bytes(cls, data: bytes) -> SigmaProof:
        if len(data) != PROOF_BYTES:
            raise InvalidEncoding(f"expected {PROOF_BYTES} bytes, got {len(data)}")
        a = Point.from_bytes(data[:COMPRESSED_BYTES])
        z = Scalar.from_bytes(data[COMPRESSED_BYTES:])
        return cls(a=a, z=z)


class SigmaProver:
    """Produces proofs for a witness; randomness comes from *rng*."""

    def __init__(
        self,
        params: GroupParams = SECP256K1,
        rng: Optional[RandomSource] = None,
    ) -> None:
        self.params = params
        self._rng = rng

    def prove(self, w: Witness, h: Point) -> SigmaProof:
        """
        Produce a proof for  (w, h = w·G).

        Parameters
        ----------
        w : Scalar or int
            The witness.  Integers outside [0, n) raise
            ``InvalidWitness``.
        h : Point
            The posted commitment.  Not checked against *w*; a wrong
            witness yields a proof that simply fails verification.
        """
        w = as_witness(w)
        g = self.params.generator
        r = Scalar.random(self._rng)
        a = scalar_multiply(g, r)
        e = hash_challenge(g, h, a)
        z = w * e + r
        return SigmaProof(a=a, z=z)


class SigmaVerifier:
    """Stateless checker for :class:`SigmaProof`."""

    def __init__(self, params: GroupParams = SECP256K1) -> None:
        self.params = params

    def verify(
        self,
        h: Union[Point, bytes],
        proof: Union[SigmaProof, bytes],
    ) -> bool:
        """
        Check  a + e·h  ==  z·G  with  e = H(G, h, a).

        Returns False for a well-formed proof that does not verify.
        Byte inputs that fail to decode raise ``InvalidEncoding`` or
        ``PointNotOnCurve``.
        """
        if isinstance(h, (bytes, bytearray)):
            h = Point.from_bytes(h)
        if isinstance(proof, (bytes, bytearray)):
            proof = SigmaProof.from_bytes(proof)
        if not isinstance(proof, SigmaProof):
            raise InvalidEncoding(f"expected a SigmaProof, got {type(proof).__name__}")

        g = self.params.generator
        e = hash_challenge(g, h, proof.a)
        lhs = add_points(proof.a, scalar_multiply(h, e))
        rhs = scalar_multiply(g, proof.z)
        if lhs != rhs:
            log.debug("sigma proof rejected for commitment %s", h.to_bytes().hex())
            return False
        return True
