"""
Discrete-log commitment to a puzzle witness.

The author publishes

    h = w·G        (written  g^w  multiplicatively)

for the witness *w* derived from the solution.  *h* is then the public
verification key for every player attempt.

Security:
- Hiding rests on the discrete-log assumption; *w* itself is a hash of
  the solution, so a low-entropy solution can be brute forced.
- Binding is perfect: G has prime order, so *w* is unique mod n.

Unlike a Pedersen commitment there is no blinding term; the proofs in
:mod:`proofs` and :mod:`signing` need *h* to be a plain public key.
"""

from __future__ import annotations

import hmac
from dataclasses import dataclass
from typing import Union

from .curve import GroupParams, Point, Scalar, ORDER, SECP256K1
from .errors import InvalidWitness
from .eth import Address

Witness = Union[Scalar, int]


def as_witness(w: Witness) -> Scalar:
    """Check the caller contract  0 <= w < n  and return a Scalar."""
    if isinstance(w, Scalar):
        return w
    if isinstance(w, bool) or not isinstance(w, int):
        raise InvalidWitness(f"witness must be a Scalar or int, got {type(w).__name__}")
    if not 0 <= w < ORDER:
        raise InvalidWitness("witness out of range [0, n)")
    return Scalar(w)


@dataclass(frozen=True)
class SolutionCommitment:
    """Public commitment  h = w·G  posted by the puzzle author."""

    point: Point

    def to_bytes(self) -> bytes:
        return self.point.to_bytes_compressed()

    @classmethod
    def from_bytes(cls, data: bytes) -> SolutionCommitment:
        return cls(point=Point.from_bytes(data))

    @property
    def address(self) -> Address:
        """Ethereum address of *h* viewed as a public key."""
        return Address.from_point(self.point)


class CommitmentScheme:
    """Commit / re-check against a fixed generator."""

    def __init__(self, params: GroupParams = SECP256K1) -> None:
        self.params = params

    def commit(self, w: Witness) -> Point:
        """Commit(w) → h = w·G."""
        return as_witness(w) * self.params.generator

    def verify_commitment(self, candidate_w: Witness, h: Point) -> bool:
        """
        Recompute  w'·G  and compare with *h*.

        Compared on serialised encodings in constant time.
        """
        expected = self.commit(candidate_w)
        return hmac.compare_digest(expected.to_bytes(), h.to_bytes())

    def __repr__(self) -> str:
        return f"CommitmentScheme({self.params.name})"
