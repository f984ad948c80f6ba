"""
Sigma-protocol proof of knowledge.

Properties:
1. Completeness: honest proofs always verify.
2. Soundness: proofs built from a wrong witness are rejected.
3. Transcript binding: changing h (or g) invalidates a proof.
4. Encoding errors are raised, never reported as a rejected proof.
"""

import random

import pytest
from hypothesis import given, settings, strategies as st

from puzzleproof import (
    G,
    ORDER,
    CommitmentScheme,
    GroupParams,
    InvalidEncoding,
    InvalidWitness,
    Point,
    PointNotOnCurve,
    Scalar,
    SigmaProof,
    SigmaProver,
    SigmaVerifier,
    scalar_multiply,
)

commit = CommitmentScheme().commit
verifier = SigmaVerifier()


@pytest.fixture
def prover(seeded_rng):
    return SigmaProver(rng=seeded_rng)


# =============================================================================
# COMPLETENESS
# =============================================================================

class TestCompleteness:

    @settings(max_examples=25, deadline=None)
    @given(st.integers(min_value=0, max_value=ORDER - 1))
    def test_honest_proof_verifies(self, w):
        h = commit(w)
        proof = SigmaProver().prove(w, h)
        assert verifier.verify(h, proof)

    def test_zero_witness(self, prover):
        h = commit(0)
        assert h.is_inf()
        assert verifier.verify(h, prover.prove(0, h))

    def test_verifies_from_bytes(self, prover):
        w = Scalar(31337)
        h = commit(w)
        proof = prover.prove(w, h)
        assert len(proof.to_bytes()) == 65
        assert verifier.verify(h.to_bytes(), proof.to_bytes())

    def test_alternative_generator(self, seeded_rng):
        params = GroupParams("secp256k1/2G", ORDER, scalar_multiply(G, Scalar(2)))
        w = Scalar(99)
        h = CommitmentScheme(params).commit(w)
        proof = SigmaProver(params, seeded_rng).prove(w, h)
        assert SigmaVerifier(params).verify(h, proof)
        assert not SigmaVerifier().verify(h, proof)


# =============================================================================
# SOUNDNESS
# =============================================================================

class TestSoundness:

    def test_wrong_witnesses_rejected(self, prover):
        rng = random.Random(2024)
        w = rng.randrange(1, ORDER)
        h = commit(w)
        for _ in range(50):
            wrong = rng.randrange(0, ORDER)
            if wrong == w:
                continue
            assert not verifier.verify(h, prover.prove(wrong, h))

    def test_tampered_response_rejected(self, prover):
        w = Scalar(5)
        h = commit(w)
        proof = prover.prove(w, h)
        forged = SigmaProof(a=proof.a, z=proof.z + Scalar(1))
        assert not verifier.verify(h, forged)

    def test_proof_does_not_transfer(self, prover):
        w = Scalar(5)
        proof = prover.prove(w, commit(w))
        assert not verifier.verify(commit(6), proof)


# =============================================================================
# TRANSCRIPT BINDING
# =============================================================================

class TestTranscriptBinding:

    def test_negated_commitment_rejected(self, prover):
        w = Scalar(8080)
        h = commit(w)
        proof = prover.prove(w, h)
        mutated = bytearray(h.to_bytes())
        mutated[0] ^= 0x01
        assert not verifier.verify(bytes(mutated), proof)

    def test_mutated_commitment_byte(self, prover):
        w = Scalar(8080)
        h = commit(w)
        proof = prover.prove(w, h)
        data = h.to_bytes()
        checked = 0
        for i in range(1, 33):
            mutated = bytearray(data)
            mutated[-1] ^= i
            try:
                h2 = Point.from_bytes(bytes(mutated))
            except PointNotOnCurve:
                continue
            assert not verifier.verify(h2, proof)
            checked += 1
        assert checked > 0


# =============================================================================
# RANDOMNESS & DETERMINISM
# =============================================================================

class TestRandomness:

    def test_seeded_provers_agree(self):
        w = Scalar(12)
        h = commit(w)
        p1 = SigmaProver(rng=random.Random(3).randbytes).prove(w, h)
        p2 = SigmaProver(rng=random.Random(3).randbytes).prove(w, h)
        assert p1 == p2

    def test_fresh_randomness_per_proof(self, prover):
        w = Scalar(12)
        h = commit(w)
        assert prover.prove(w, h).a != prover.prove(w, h).a

    def test_rng_failure_propagates(self):
        def broken(n):
            raise OSError("entropy source unavailable")

        with pytest.raises(OSError):
            SigmaProver(rng=broken).prove(1, G)


# =============================================================================
# ERRORS
# =============================================================================

class TestErrors:

    @pytest.mark.parametrize("bad", [-1, ORDER])
    def test_invalid_witness(self, prover, bad):
        with pytest.raises(InvalidWitness):
            prover.prove(bad, G)

    def test_short_proof_bytes(self):
        with pytest.raises(InvalidEncoding):
            verifier.verify(G, b"\x02" * 64)

    def test_proof_with_bad_point(self, prover):
        proof = prover.prove(1, G).to_bytes()
        with pytest.raises(PointNotOnCurve):
            verifier.verify(G, b"\x00" * 33 + proof[33:])

    def test_proof_with_out_of_range_response(self, prover):
        proof = prover.prove(1, G).to_bytes()
        with pytest.raises(InvalidEncoding):
            verifier.verify(G, proof[:33] + ORDER.to_bytes(32, "big"))

    def test_malformed_commitment(self, prover):
        proof = prover.prove(1, G)
        with pytest.raises(InvalidEncoding):
            verifier.verify(b"\x02" * 10, proof)

    @pytest.mark.parametrize("bad", [None, "proof", (G, Scalar(1))])
    def test_non_proof_object(self, bad):
        with pytest.raises(InvalidEncoding):
            verifier.verify(G, bad)
