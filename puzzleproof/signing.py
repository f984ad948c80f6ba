"""
ECDSA knowledge argument for a puzzle witness.

The witness *w* is used directly as an ECDSA secret key and the
commitment  h = w·G  as its public key.  To claim a reward the player
signs their own payout address:

    digest = keccak256(abi.encode(m_p))
    a      = ECDSA-Sign_w(digest)            (recoverable, low-S)

The court recovers the public key from  (a, digest)  and compares it to
*h* (or to the Ethereum address of *h*).

Binding the payout address into the signed message stops a front-runner
from replaying a seen proof to their own address.  The price is a weaker
guarantee than :mod:`proofs`: this is a knowledge *argument* resting on
ECDSA unforgeability, and it reveals that *h* is a usable key pair.

Nonces are RFC 6979 deterministic (libsecp256k1 default).

References
----------
- SEC 1 v2 §4.1     ECDSA
- RFC 6979          deterministic nonce generation
- EIP-2             low-S requirement
"""

from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from typing import Optional, Union

from coincurve import PrivateKey as _SK, PublicKey as _PK

from .commitment import Witness, as_witness
from .curve import G, GroupParams, Point, ORDER, SCALAR_BYTES, SECP256K1
from .errors import InvalidEncoding, InvalidWitness, ProofRejected
from .eth import ADDRESS_BYTES, Address, message_digest

log = logging.getLogger(__name__)

SIGNATURE_BYTES = 2 * SCALAR_BYTES + 1
_HALF_ORDER = ORDER // 2


# ── data structures ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class EcdsaSignature:
    """Recoverable ECDSA signature  (r, s, v)  with  v ∈ {0, 1}."""

    r: int
    s: int
    v: int

    def to_bytes(self) -> bytes:
        """Serialise to 65 bytes:  r (32) ‖ s (32) ‖ v (1)."""
        return (
            self.r.to_bytes(SCALAR_BYTES, "big")
            + self.s.to_bytes(SCALAR_BYTES, "big")
            + bytes([self.v])
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> EcdsaSignature:
        """
        Parse ``r ‖ s ‖ v``.  Ethereum-style ``v`` of 27/28 is accepted
        and normalised to 0/1.  High-S signatures are rejected.
        """
        if len(data) != SIGNATURE_BYTES:
            raise InvalidEncoding(
                f"expected {SIGNATURE_BYTES} bytes, got {len(data)}"
            )
        r = int.from_bytes(data[:SCALAR_BYTES], "big")
        s = int.from_bytes(data[SCALAR_BYTES:2 * SCALAR_BYTES], "big")
        v = data[-1]
        if not 0 < r < ORDER or not 0 < s < ORDER:
            raise InvalidEncoding("signature component out of range")
        if s > _HALF_ORDER:
            raise InvalidEncoding("high-S signature")
        if v in (27, 28):
            v -= 27
        if v not in (0, 1):
            raise InvalidEncoding(f"bad recovery id {data[-1]}")
        return cls(r=r, s=s, v=v)

    @property
    def r_word(self) -> bytes:
        """ABI ``uint256`` encoding of *r*."""
        return self.r.to_bytes(SCALAR_BYTES, "big")

    @property
    def s_word(self) -> bytes:
        """ABI ``uint256`` encoding of *s*."""
        return self.s.to_bytes(SCALAR_BYTES, "big")


@dataclass(frozen=True)
class SignatureProof:
    """Player's claim  (a, m_p):  signature *a* over payout address *m_p*."""

    a: EcdsaSignature
    m_p: Address

    def to_bytes(self) -> bytes:
        """Serialise to 85 bytes:  a (65) ‖ m_p (20)."""
        return self.a.to_bytes() + self.m_p.to_bytes()

    @classmethod
    def from_bytes(cls, data: bytes) -> SignatureProof:
        if len(data) != SIGNATURE_BYTES + ADDRESS_BYTES:
            raise InvalidEncoding(
                f"expected {SIGNATURE_BYTES + ADDRESS_BYTES} bytes, "
                f"got {len(data)}"
            )
        return cls(
            a=EcdsaSignature.from_bytes(data[:SIGNATURE_BYTES]),
            m_p=Address.from_bytes(data[SIGNATURE_BYTES:]),
        )


@dataclass(frozen=True)
class ExportedProof:
    """Verified proof split into the fields a contract call needs."""

    signature: bytes     # r ‖ s ‖ v, 65 bytes
    r: bytes             # 32-byte ABI word
    s: bytes             # 32-byte ABI word
    v: int               # recovery id, 0 or 1
    address: bytes       # payout address, 20 bytes


# ── prover ──────────────────────────────────────────────────────────────

def _check_params(params: GroupParams) -> None:
    if params.generator != G:
        raise ValueError("ECDSA requires the standard secp256k1 generator")


class SignatureProver:
    """Signs a payout address with the witness as secret key."""

    def __init__(self, params: GroupParams = SECP256K1) -> None:
        _check_params(params)
        self.params = params

    def sign(self, w: Witness, message: Address) -> SignatureProof:
        """
        Sign ``keccak256(abi.encode(message))`` with key *w*.

        ``w == 0`` is not a valid ECDSA key and raises ``InvalidWitness``.
        """
        w = as_witness(w)
        if w.is_zero():
            raise InvalidWitness("zero is not a valid signing key")
        raw = _SK(w.to_bytes()).sign_recoverable(
            message_digest(message), hasher=None,
        )
        return SignatureProof(a=EcdsaSignature.from_bytes(raw), m_p=message)


# ── verifier ────────────────────────────────────────────────────────────

class SignatureVerifier:
    """
    Standard ECDSA verification by public key recovery.

    Every check recovers the signer's key from the signature and the
    address digest, so a signature over a different address recovers a
    different (unrelated) key and fails.
    """

    def __init__(self, params: GroupParams = SECP256K1) -> None:
        _check_params(params)
        self.params = params

    def recover(
        self,
        signature: EcdsaSignature,
        message: Address,
    ) -> Optional[Point]:
        """Public key that produced *signature* over *message*, if any."""
        try:
            pk = _PK.from_signature_and_message(
                signature.to_bytes(), message_digest(message), hasher=None,
            )
        except ValueError:
            return None
        return Point.from_public_key(pk)

    def verify(
        self,
        h: Union[Point, bytes],
        signature: Union[SignatureProof, EcdsaSignature, bytes],
        message: Optional[Address] = None,
    ) -> bool:
        """
        True iff *signature* over *message* was made with the key of *h*.

        *signature* may be a bare ``EcdsaSignature`` (then *message* is
        required) or a ``SignatureProof``; for the latter *message*
        defaults to ``m_p`` and a different *message* is a rejection.
        """
        if isinstance(h, (bytes, bytearray)):
            h = Point.from_bytes(h)
        recovered = self._recover_claim(signature, message)
        if recovered is None:
            return False
        ok = hmac.compare_digest(recovered.to_bytes(), h.to_bytes())
        if not ok:
            log.debug("signature rejected for commitment %s", h.to_bytes().hex())
        return ok

    def verify_address(
        self,
        address: Address,
        signature: Union[SignatureProof, EcdsaSignature, bytes],
        message: Optional[Address] = None,
    ) -> bool:
        """Like :meth:`verify` for a commitment stored as an address."""
        recovered = self._recover_claim(signature, message)
        if recovered is None:
            return False
        return hmac.compare_digest(
            Address.from_point(recovered).to_bytes(), address.to_bytes(),
        )

    def verify_and_export(
        self,
        h: Union[Point, Address, bytes],
        proof: Union[SignatureProof, bytes],
    ) -> ExportedProof:
        """
        Verify *proof* and return its contract-call fields.

        Raises ``ProofRejected`` when the proof does not verify.
        """
        if isinstance(proof, (bytes, bytearray)):
            proof = SignatureProof.from_bytes(bytes(proof))
        if isinstance(h, Address):
            ok = self.verify_address(h, proof)
        else:
            ok = self.verify(h, proof)
        if not ok:
            raise ProofRejected("signature does not match the commitment")
        return ExportedProof(
            signature=proof.a.to_bytes(),
            r=proof.a.r_word,
            s=proof.a.s_word,
            v=proof.a.v,
            address=proof.m_p.to_bytes(),
        )

    # helpers ----------------------------------------------------------------
    def _recover_claim(
        self,
        signature: Union[SignatureProof, EcdsaSignature, bytes],
        message: Optional[Address],
    ) -> Optional[Point]:
        if isinstance(signature, (bytes, bytearray)):
            signature = SignatureProof.from_bytes(bytes(signature))
        if not isinstance(signature, (SignatureProof, EcdsaSignature)):
            raise InvalidEncoding(
                f"expected a SignatureProof, got {type(signature).__name__}"
            )
        if isinstance(signature, SignatureProof):
            if message is not None and message != signature.m_p:
                return None
            message = signature.m_p
            signature = signature.a
        if message is None:
            raise TypeError("message is required for a bare signature")
        return self.recover(signature, message)
