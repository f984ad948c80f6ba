"""
Court: posts commitments, judges proofs, releases rewards.

Provides a single ``Court`` class that ties a
:class:`~puzzleproof.scheme.KnowledgeProofScheme` to puzzle bookkeeping.
Reward payment is delegated to a callable supplied by the caller.

Usage
-----
::

    from puzzleproof import Court, PuzzleSolution, Address, make_scheme

    scheme = make_scheme("sigma")
    court = Court(scheme, reward=lambda pid, addr: print(pid, addr))

    # Author
    author = PuzzleSolution(["cat", "dog"])
    pid = court.post_commitment(author.commitment())

    # Player
    payout = Address.from_hex("0x" + "11" * 20)
    guess = PuzzleSolution(["cat", "dog"])
    proof = guess.prove(scheme, court.commitment(pid), payout)
    assert court.submit_proof(pid, proof, payout)
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Dict, Optional, Union

from .curve import Point
from .errors import PuzzleClosed, UnknownPuzzle
from .eth import Address
from .scheme import KnowledgeProofScheme

log = logging.getLogger(__name__)

RewardCallback = Callable[[int, Address], None]


class PuzzleState(Enum):
    """Lifecycle of a posted puzzle."""

    OPEN = auto()      # commitment posted, no valid proof yet
    PAYING = auto()    # valid proof accepted, reward in flight
    CLOSED = auto()    # first valid proof accepted, reward released


@dataclass
class Puzzle:
    """Court record for one commitment."""

    puzzle_id: int
    commitment: Point
    state: PuzzleState = PuzzleState.OPEN
    winner: Optional[Address] = None
    attempts: int = 0


class Court:
    """
    Judges proofs against posted commitments.

    Lifecycle per puzzle:
    1. ``post_commitment(h)``          → puzzle id, state OPEN
    2. ``submit_proof(id, proof, m)``  → state PAYING while
                                         ``reward(id, m)`` runs, then
                                         True once, state CLOSED

    Rejected proofs leave the puzzle OPEN; players may retry.  Encoding
    errors in a submission propagate to the caller.
    """

    def __init__(
        self,
        scheme: KnowledgeProofScheme,
        reward: RewardCallback,
    ) -> None:
        self.scheme = scheme
        self._reward = reward
        self._puzzles: Dict[int, Puzzle] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    # ── posting ────────────────────────────────────────────────────────

    def post_commitment(self, h: Union[Point, bytes]) -> int:
        """Register commitment *h*; returns the new puzzle id."""
        if isinstance(h, (bytes, bytearray)):
            h = Point.from_bytes(h)
        if h.is_inf():
            raise ValueError("commitment must not be the identity")
        with self._lock:
            pid = next(self._ids)
            self._puzzles[pid] = Puzzle(puzzle_id=pid, commitment=h)
        log.info("puzzle %d posted with %s scheme", pid, self.scheme.kind.value)
        return pid

    # ── judging ────────────────────────────────────────────────────────

    def submit_proof(
        self,
        puzzle_id: int,
        proof: Any,
        payout: Address,
    ) -> bool:
        """
        Verify *proof* for puzzle *puzzle_id* and pay *payout* on success.

        Returns False for a rejected proof.  Raises ``UnknownPuzzle``,
        ``PuzzleClosed`` (also while another reward is being paid), or a
        decoding error for malformed bytes.  If *reward* raises, the
        puzzle is reopened and the error propagates.
        """
        puzzle = self.puzzle(puzzle_id)
        if puzzle.state is not PuzzleState.OPEN:
            raise PuzzleClosed(f"puzzle {puzzle_id} is {puzzle.state.name.lower()}")
        if isinstance(proof, (bytes, bytearray)):
            proof = self.scheme.decode_proof(bytes(proof))

        ok = self.scheme.verify(puzzle.commitment, proof, payout)

        with self._lock:
            puzzle.attempts += 1
            if not ok:
                log.info("puzzle %d: proof rejected", puzzle_id)
                return False
            # another thread may have won between the check and here
            if puzzle.state is not PuzzleState.OPEN:
                raise PuzzleClosed(f"puzzle {puzzle_id} is {puzzle.state.name.lower()}")
            puzzle.state = PuzzleState.PAYING

        log.info("puzzle %d solved, paying %s", puzzle_id, payout)
        try:
            self._reward(puzzle_id, payout)
        except Exception:
            log.warning("puzzle %d: reward to %s failed, reopening", puzzle_id, payout)
            with self._lock:
                puzzle.state = PuzzleState.OPEN
            raise

        with self._lock:
            puzzle.state = PuzzleState.CLOSED
            puzzle.winner = payout
        return True

    # ── accessors ──────────────────────────────────────────────────────

    def puzzle(self, puzzle_id: int) -> Puzzle:
        try:
            return self._puzzles[puzzle_id]
        except KeyError:
            raise UnknownPuzzle(puzzle_id) from None

    def state(self, puzzle_id: int) -> PuzzleState:
        return self.puzzle(puzzle_id).state

    def commitment(self, puzzle_id: int) -> Point:
        return self.puzzle(puzzle_id).commitment

    def __repr__(self) -> str:
        return f"Court({self.scheme!r}, puzzles={len(self._puzzles)})"
