"""
Puzzle solutions and the witness derived from them.

A solution is an ordered sequence of strings.  Author and player both
map it to a witness with :func:`puzzle_hash`; the author publishes
``commit(w)`` and the player, after a local check that their guess
opens that commitment, builds a proof.
"""

from __future__ import annotations

from typing import Any, List, Optional, Sequence

from .commitment import CommitmentScheme
from .curve import GroupParams, Point, Scalar, SECP256K1
from .errors import InvalidSolution
from .eth import Address
from .hash import hash_solution
from .scheme import KnowledgeProofScheme


def _check_solutions(solutions: Sequence[str]) -> List[str]:
    if isinstance(solutions, (str, bytes, bytearray)):
        raise TypeError(
            f"solutions must be a sequence of strings, not {type(solutions).__name__}"
        )
    items = list(solutions)
    for item in items:
        if not isinstance(item, str):
            raise TypeError(f"solution entries must be str, got {type(item).__name__}")
        try:
            item.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise ValueError(f"solution entry is not valid UTF-8 text: {exc}") from exc
    return items


def puzzle_hash(solutions: Sequence[str]) -> Scalar:
    """
    Witness for an ordered solution; see :func:`hash.hash_solution`.

    Raises ``TypeError`` unless *solutions* is a sequence of ``str``, and
    ``ValueError`` for strings UTF-8 cannot encode (lone surrogates).
    """
    return hash_solution(_check_solutions(solutions))


class PuzzleSolution:
    """An ordered solution held by the author or a player."""

    def __init__(
        self,
        solutions: Sequence[str],
        params: GroupParams = SECP256K1,
    ) -> None:
        self.solutions: List[str] = _check_solutions(solutions)
        self._commitments = CommitmentScheme(params)

    def witness(self) -> Scalar:
        return puzzle_hash(self.solutions)

    def commitment(self) -> Point:
        """h = w·G, what the author posts."""
        return self._commitments.commit(self.witness())

    def check(self, h: Point) -> bool:
        """Player's local pre-check  w'·G == h  before submitting."""
        return self._commitments.verify_commitment(self.witness(), h)

    def prove(
        self,
        scheme: KnowledgeProofScheme,
        h: Point,
        payout: Optional[Address] = None,
        check: bool = True,
    ) -> Any:
        """
        Build a proof with *scheme* for commitment *h*.

        With ``check`` set, a guess that does not open *h* raises
        ``InvalidSolution`` instead of producing a proof that would be
        rejected.
        """
        if check and not self.check(h):
            raise InvalidSolution("solution does not match the commitment")
        return scheme.prove(self.witness(), h, payout)

    def __repr__(self) -> str:
        return f"PuzzleSolution({len(self.solutions)} entries)"
