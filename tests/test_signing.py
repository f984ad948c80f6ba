"""
ECDSA knowledge argument: round trip, message binding, export format.
"""

import pytest
from hypothesis import given, settings, strategies as st

from puzzleproof import (
    G,
    ORDER,
    Address,
    CommitmentScheme,
    EcdsaSignature,
    GroupParams,
    InvalidEncoding,
    InvalidWitness,
    ProofRejected,
    PuzzleSolution,
    Scalar,
    SignatureProof,
    SignatureProver,
    SignatureVerifier,
    scalar_multiply,
)

commit = CommitmentScheme().commit
signer = SignatureProver()
verifier = SignatureVerifier()


# =============================================================================
# ROUND TRIP
# =============================================================================

class TestRoundTrip:

    @settings(max_examples=25, deadline=None)
    @given(
        st.integers(min_value=1, max_value=ORDER - 1),
        st.binary(min_size=20, max_size=20),
    )
    def test_sign_then_verify(self, w, raw):
        m = Address(raw)
        assert verifier.verify(commit(w), signer.sign(w, m), m)

    def test_proof_carries_message(self, payout):
        proof = signer.sign(7, payout)
        assert proof.m_p == payout
        assert verifier.verify(commit(7), proof)

    def test_bare_signature_with_message(self, payout):
        proof = signer.sign(7, payout)
        assert verifier.verify(commit(7), proof.a, payout)

    def test_bare_signature_needs_message(self, payout):
        proof = signer.sign(7, payout)
        with pytest.raises(TypeError):
            verifier.verify(commit(7), proof.a)

    def test_deterministic_nonce(self, payout):
        assert signer.sign(7, payout) == signer.sign(7, payout)

    def test_low_s(self, payout):
        for w in range(1, 20):
            assert signer.sign(w, payout).a.s <= ORDER // 2

    def test_wire_round_trip(self, payout):
        proof = signer.sign(7, payout)
        data = proof.to_bytes()
        assert len(data) == 85
        assert SignatureProof.from_bytes(data) == proof
        assert verifier.verify(commit(7).to_bytes(), data)


# =============================================================================
# REJECTION
# =============================================================================

class TestRejection:

    def test_altered_message(self, payout, other_payout):
        proof = signer.sign(7, payout)
        assert not verifier.verify(commit(7), proof.a, other_payout)
        assert not verifier.verify(commit(7), proof, other_payout)
        swapped = SignatureProof(a=proof.a, m_p=other_payout)
        assert not verifier.verify(commit(7), swapped)

    def test_wrong_key(self, payout):
        assert not verifier.verify(commit(8), signer.sign(7, payout))

    def test_wrong_solution(self, payout):
        right = PuzzleSolution(["solution1", "solution2", "solution3"])
        wrong = PuzzleSolution(["Solution1", "solution2", "solution3"])
        proof = signer.sign(wrong.witness(), payout)
        assert verifier.verify(wrong.commitment(), proof)
        assert not verifier.verify(right.commitment(), proof)


# =============================================================================
# ADDRESS COMMITMENTS & EXPORT
# =============================================================================

class TestAddressAndExport:

    def test_verify_address(self, payout):
        proof = signer.sign(1, payout)
        assert verifier.verify_address(Address.from_point(G), proof)
        assert not verifier.verify_address(Address.from_point(commit(2)), proof)

    def test_export_sizes(self, payout):
        proof = signer.sign(12345, payout)
        out = verifier.verify_and_export(commit(12345), proof)
        assert len(out.signature) == 65
        assert len(out.r) == 32
        assert len(out.s) == 32
        assert out.v in (0, 1)
        assert out.address == payout.to_bytes()
        assert out.signature == out.r + out.s + bytes([out.v])

    def test_export_against_address(self, payout):
        proof = signer.sign(12345, payout)
        out = verifier.verify_and_export(Address.from_point(commit(12345)), proof)
        assert len(out.address) == 20

    def test_export_rejects(self, payout):
        proof = signer.sign(12345, payout)
        with pytest.raises(ProofRejected):
            verifier.verify_and_export(commit(54321), proof)

    def test_recover(self, payout):
        proof = signer.sign(99, payout)
        assert verifier.recover(proof.a, payout) == commit(99)


# =============================================================================
# ERRORS
# =============================================================================

class TestErrors:

    def test_zero_witness(self, payout):
        with pytest.raises(InvalidWitness):
            signer.sign(0, payout)

    def test_out_of_range_witness(self, payout):
        with pytest.raises(InvalidWitness):
            signer.sign(ORDER, payout)

    def test_nonstandard_generator(self):
        params = GroupParams("secp256k1/2G", ORDER, scalar_multiply(G, Scalar(2)))
        with pytest.raises(ValueError):
            SignatureProver(params)
        with pytest.raises(ValueError):
            SignatureVerifier(params)

    def test_signature_length(self):
        with pytest.raises(InvalidEncoding):
            EcdsaSignature.from_bytes(b"\x01" * 64)

    def test_high_s_rejected(self, payout):
        sig = signer.sign(5, payout).a
        high = EcdsaSignature(r=sig.r, s=ORDER - sig.s, v=sig.v)
        with pytest.raises(InvalidEncoding):
            EcdsaSignature.from_bytes(high.to_bytes())

    def test_zero_component_rejected(self):
        data = b"\x00" * 32 + (1).to_bytes(32, "big") + b"\x00"
        with pytest.raises(InvalidEncoding):
            EcdsaSignature.from_bytes(data)

    def test_ethereum_v_normalised(self, payout):
        sig = signer.sign(5, payout).a
        data = sig.to_bytes()[:64] + bytes([sig.v + 27])
        assert EcdsaSignature.from_bytes(data) == sig

    def test_bad_recovery_id(self, payout):
        sig = signer.sign(5, payout).a
        with pytest.raises(InvalidEncoding):
            EcdsaSignature.from_bytes(sig.to_bytes()[:64] + b"\x04")

    def test_malformed_commitment(self, payout):
        with pytest.raises(InvalidEncoding):
            verifier.verify(b"\x04" * 33, signer.sign(5, payout))

    @pytest.mark.parametrize("bad", [None, "proof", (1, 2, 0)])
    def test_non_proof_object(self, payout, bad):
        with pytest.raises(InvalidEncoding):
            verifier.verify(commit(5), bad, payout)
        with pytest.raises(InvalidEncoding):
            verifier.verify_and_export(commit(5), bad)
