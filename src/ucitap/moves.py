"""
Coordinate move resolution and PV conversion.

Engines report moves as bare UCI tokens ("e2e4", "e7e8q"). A token only
becomes a real move once it is matched against the legal moves of a concrete
position; that is also what SAN rendering needs.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from .rules import DEFAULT_RULES, Rules

logger = logging.getLogger(__name__)

PROMOTION_LETTERS = ("q", "r", "b", "n")


def _normalize_token(token: str) -> Optional[str]:
    if len(token) == 4:
        return token
    if len(token) == 5 and token[4].lower() in PROMOTION_LETTERS:
        return token[:4] + token[4].lower()
    return None


def resolve_move(token: str, board: Any, rules: Rules = DEFAULT_RULES) -> Optional[Any]:
    """
    Find the legal move on `board` denoted by a UCI token.

    A 4-character token only matches non-promotion moves, so "e7e8" never
    resolves to a promotion even when one is legal. A 5th character selects
    the promotion piece.

    Returns:
        The unique matching move, or None if there is no match (or, with a
        broken rules engine, more than one).
    """
    wanted = _normalize_token(token)
    if wanted is None:
        return None

    matches = [m for m in rules.legal_moves(board) if rules.uci(m) == wanted]
    if len(matches) != 1:
        return None
    return matches[0]


def apply_moves(board: Any, tokens: List[str], rules: Rules = DEFAULT_RULES) -> int:
    """
    Push tokens onto `board` in order, stopping at the first one that does
    not resolve.

    Returns:
        Number of moves applied.
    """
    applied = 0
    for token in tokens:
        move = resolve_move(token, board, rules)
        if move is None:
            logger.debug("stopping move list at unresolvable token %r", token)
            break
        rules.push(board, move)
        applied += 1
    return applied


def pv_to_san(pv: str, board: Any, rules: Rules = DEFAULT_RULES) -> str:
    """
    Render a whitespace-separated UCI variation in SAN.

    `board` is the position the variation starts from and is left untouched.
    Conversion stops at the first token that does not resolve; only the
    prefix before it is returned.
    """
    work = rules.copy(board)
    san_moves: List[str] = []
    for token in pv.split():
        move = resolve_move(token, work, rules)
        if move is None:
            break
        # SAN depends on the position before the move
        san_moves.append(rules.san(work, move))
        rules.push(work, move)
    return " ".join(san_moves)
