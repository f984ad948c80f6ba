"""
puzzleproof: prove you solved a puzzle without revealing the answer.

An author commits to a solution as  h = w·G  on secp256k1, where the
witness *w* is a hash of the solution.  A player who finds the solution
proves knowledge of *w* in one of two ways:

- **Sigma**: a Fiat-Shamir Schnorr proof of discrete-log knowledge
  (zero knowledge, ROM).
- **ECDSA**: a recoverable signature by key *w* over the player's
  payout address (knowledge argument under ECDSA unforgeability).

A court checks the proof and releases the reward.

Quick start
-----------
::

    from puzzleproof import PuzzleSolution, make_scheme

    scheme = make_scheme("sigma")
    h = PuzzleSolution(["cat", "dog"]).commitment()

    proof = PuzzleSolution(["cat", "dog"]).prove(scheme, h)
    assert scheme.verify(h, proof)
"""

__version__ = "0.1.0"

# ── core types ──────────────────────────────────────────────────────────
from .curve import (
    Scalar,
    Point,
    G,
    ORDER,
    GroupParams,
    SECP256K1,
    RandomSource,
    scalar_multiply,
    add_points,
    reduce_to_scalar,
)

# ── errors ──────────────────────────────────────────────────────────────
from .errors import (
    PuzzleProofError,
    InvalidEncoding,
    PointNotOnCurve,
    InvalidWitness,
    ProofRejected,
    InvalidSolution,
    UnknownPuzzle,
    PuzzleClosed,
)

# ── hashing & encodings ─────────────────────────────────────────────────
from .hash import hash_challenge, hash_solution
from .eth import Address, keccak256, message_digest

# ── commitments & proofs ────────────────────────────────────────────────
from .commitment import CommitmentScheme, SolutionCommitment
from .proofs import SigmaProof, SigmaProver, SigmaVerifier
from .signing import (
    EcdsaSignature,
    SignatureProof,
    SignatureProver,
    SignatureVerifier,
    ExportedProof,
)
from .scheme import (
    KnowledgeProofScheme,
    SchemeKind,
    SigmaScheme,
    SignatureScheme,
    make_scheme,
)

# ── puzzles & court ─────────────────────────────────────────────────────
from .puzzle import PuzzleSolution, puzzle_hash
from .protocol import Court, Puzzle, PuzzleState

__all__ = [
    # version
    "__version__",
    # core
    "Scalar", "Point", "G", "ORDER", "GroupParams", "SECP256K1",
    "RandomSource", "scalar_multiply", "add_points", "reduce_to_scalar",
    # errors
    "PuzzleProofError", "InvalidEncoding", "PointNotOnCurve",
    "InvalidWitness", "ProofRejected", "InvalidSolution",
    "UnknownPuzzle", "PuzzleClosed",
    # hashing
    "hash_challenge", "hash_solution",
    "Address", "keccak256", "message_digest",
    # commitments & proofs
    "CommitmentScheme", "SolutionCommitment",
    "SigmaProof", "SigmaProver", "SigmaVerifier",
    "EcdsaSignature", "SignatureProof", "SignatureProver",
    "SignatureVerifier", "ExportedProof",
    "KnowledgeProofScheme", "SchemeKind", "SigmaScheme",
    "SignatureScheme", "make_scheme",
    # puzzles & court
    "PuzzleSolution", "puzzle_hash", "Court", "Puzzle", "PuzzleState",
]
