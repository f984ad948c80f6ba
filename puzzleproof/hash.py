"""
Domain-separated hash functions for puzzleproof.

Every hash call includes a unique domain tag so that outputs for
different protocol roles (Sigma challenge, puzzle witness) are
cryptographically independent, even when fed identical data.

Convention follows BIP-340 tagged hashes:

    H_tag(x) = SHA-256( SHA-256(tag) ‖ SHA-256(tag) ‖ x )

Outputs are 256 bits and are reduced mod the group order when a scalar
is needed.
"""

from __future__ import annotations

import hashlib
from typing import Any, Sequence

from .curve import Point, Scalar, SCALAR_BYTES, reduce_to_scalar


# ── domain tags ─────────────────────────────────────────────────────────
_TAG_CHALLENGE = b"puzzleproof/v1/sigma_challenge"
_TAG_PUZZLE    = b"puzzleproof/v1/puzzle_solution"


# ── internal helpers ────────────────────────────────────────────────────
def _tagged_hasher(tag: bytes) -> "hashlib._Hash":
    """Return a SHA-256 context pre-loaded with the BIP-340 tag prefix."""
    tag_hash = hashlib.sha256(tag).digest()
    h = hashlib.sha256()
    h.update(tag_hash)
    h.update(tag_hash)
    return h


def _encode_item(item: Any) -> bytes:
    """
    Canonical encoding of a protocol element for hashing.

    Points and scalars are fixed width and go in raw.  Variable-length
    items (bytes, strings, sequences) are length-prefixed so that
    ``("ca", "tdog")`` and ``("cat", "dog")`` encode differently.
    """
    if isinstance(item, Point):
        return item.to_bytes_compressed()
    if isinstance(item, Scalar):
        return item.to_bytes()
    if isinstance(item, bytes):
        return len(item).to_bytes(4, "big") + item
    if isinstance(item, str):
        return _encode_item(item.encode("utf-8"))
    if isinstance(item, int):
        return item.to_bytes(SCALAR_BYTES, "big")
    if isinstance(item, (list, tuple)):
        parts = b"".join(_encode_item(x) for x in item)
        return len(item).to_bytes(4, "big") + parts
    raise TypeError(f"cannot encode {type(item).__name__} for hashing")


def _tagged_hash(tag: bytes, *args: Any) -> bytes:
    """Compute BIP-340 tagged hash over arbitrary protocol elements."""
    h = _tagged_hasher(tag)
    for a in args:
        h.update(_encode_item(a))
    return h.digest()


def _tagged_scalar(tag: bytes, *args: Any) -> Scalar:
    """Hash to scalar: H_tag(*args) → Z_n."""
    return reduce_to_scalar(_tagged_hash(tag, *args))


# ── Fiat-Shamir ─────────────────────────────────────────────────────────

def hash_challenge(g: Point, h: Point, a: Point) -> Scalar:
    r"""
    Sigma challenge  e = H(g ‖ h ‖ a) mod n.

    The three compressed encodings are absorbed in exactly this order;
    prover and verifier must agree byte for byte.
    """
    return _tagged_scalar(_TAG_CHALLENGE, g, h, a)


# ── puzzle witness ──────────────────────────────────────────────────────

def hash_solution(solutions: Sequence[str]) -> Scalar:
    """
    Witness  w = H_tag(len ‖ s_1 ‖ … ‖ s_k) mod n  for an ordered solution.

    Each string is UTF-8 encoded and length-prefixed; order matters.
    """
    return _tagged_scalar(_TAG_PUZZLE, list(solutions))
