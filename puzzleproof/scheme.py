"""
Common interface over the two proof variants.

Both variants share one :class:`CommitmentScheme`; they differ only in
what the player submits.  The court is written against
:class:`KnowledgeProofScheme` and picks an implementation from
configuration (:func:`make_scheme`).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional, Union

from .commitment import CommitmentScheme, Witness
from .curve import GroupParams, Point, RandomSource, SECP256K1
from .eth import Address
from .proofs import SigmaProof, SigmaProver, SigmaVerifier
from .signing import SignatureProof, SignatureProver, SignatureVerifier


class SchemeKind(Enum):
    """Which knowledge proof a puzzle accepts."""

    SIGMA = "sigma"    # Fiat-Shamir proof of discrete-log knowledge
    ECDSA = "ecdsa"    # signature over the payout address


class KnowledgeProofScheme(ABC):
    """Prove / verify knowledge of the witness behind a commitment."""

    kind: SchemeKind

    def __init__(self, params: GroupParams = SECP256K1) -> None:
        self.params = params
        self.commitments = CommitmentScheme(params)

    def commit(self, w: Witness) -> Point:
        return self.commitments.commit(w)

    @abstractmethod
    def prove(self, w: Witness, h: Point, payout: Address) -> Any:
        """Build a proof for witness *w* against commitment *h*."""

    @abstractmethod
    def verify(self, h: Point, proof: Any, payout: Optional[Address] = None) -> bool:
        """True iff *proof* shows knowledge of log_G(h)."""

    @abstractmethod
    def decode_proof(self, data: bytes) -> Any:
        """Parse the wire form of a proof."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.params.name})"


class SigmaScheme(KnowledgeProofScheme):
    """
    Zero-knowledge variant.  The proof does not bind the payout address;
    the court pays whoever submits first.
    """

    kind = SchemeKind.SIGMA

    def __init__(
        self,
        params: GroupParams = SECP256K1,
        rng: Optional[RandomSource] = None,
    ) -> None:
        super().__init__(params)
        self.prover = SigmaProver(params, rng)
        self.verifier = SigmaVerifier(params)

    def prove(self, w: Witness, h: Point, payout: Optional[Address] = None) -> SigmaProof:
        return self.prover.prove(w, h)

    def verify(
        self,
        h: Union[Point, bytes],
        proof: Union[SigmaProof, bytes],
        payout: Optional[Address] = None,
    ) -> bool:
        return self.verifier.verify(h, proof)

    def decode_proof(self, data: bytes) -> SigmaProof:
        return SigmaProof.from_bytes(data)


class SignatureScheme(KnowledgeProofScheme):
    """ECDSA variant.  The payout address is the signed message."""

    kind = SchemeKind.ECDSA

    def __init__(self, params: GroupParams = SECP256K1) -> None:
        super().__init__(params)
        self.prover = SignatureProver(params)
        self.verifier = SignatureVerifier(params)

    def prove(self, w: Witness, h: Point, payout: Optional[Address] = None) -> SignatureProof:
        if payout is None:
            raise TypeError("the ECDSA variant signs a payout address")
        return self.prover.sign(w, payout)

    def verify(
        self,
        h: Union[Point, bytes],
        proof: Union[SignatureProof, bytes],
        payout: Optional[Address] = None,
    ) -> bool:
        return self.verifier.verify(h, proof, payout)

    def decode_proof(self, data: bytes) -> SignatureProof:
        return SignatureProof.from_bytes(data)


def make_scheme(
    kind: Union[SchemeKind, str],
    params: GroupParams = SECP256K1,
    rng: Optional[RandomSource] = None,
) -> KnowledgeProofScheme:
    """Instantiate the scheme named by *kind* (``"sigma"`` or ``"ecdsa"``)."""
    kind = SchemeKind(kind)
    if kind is SchemeKind.SIGMA:
        return SigmaScheme(params, rng)
    return SignatureScheme(params)
