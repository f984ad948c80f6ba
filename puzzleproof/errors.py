"""
Exception taxonomy for puzzleproof.

Structural failures (bad bytes, bad points, out-of-range witnesses) are
raised and must reach the caller.  A well-formed proof that simply does
not verify is *not* an error: verifiers return ``False`` for it.
``ProofRejected`` exists only for APIs that cannot return a boolean
(``verify_and_export``).
"""

from __future__ import annotations


class PuzzleProofError(Exception):
    """Base class for every error raised by this package."""


# ── structural errors (fatal, caller must see them) ─────────────────────

class InvalidEncoding(PuzzleProofError, ValueError):
    """Malformed byte input to a deserialiser."""


class PointNotOnCurve(InvalidEncoding):
    """Decoded point fails the curve equation, or is the identity."""


class InvalidWitness(PuzzleProofError, ValueError):
    """Witness scalar outside the accepted range."""


# ── outcomes ────────────────────────────────────────────────────────────

class ProofRejected(PuzzleProofError):
    """A structurally valid proof failed verification."""


class InvalidSolution(PuzzleProofError):
    """The player's solution does not open the posted commitment."""


# ── court state ─────────────────────────────────────────────────────────

class UnknownPuzzle(PuzzleProofError, KeyError):
    """No puzzle is registered under the given id."""


class PuzzleClosed(PuzzleProofError):
    """The puzzle already accepted a winning proof."""
