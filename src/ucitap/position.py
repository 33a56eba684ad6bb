"""
Board state tracking driven by UCI `position` commands.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from .moves import apply_moves
from .rules import DEFAULT_RULES, Rules

logger = logging.getLogger(__name__)

_MOVES_SEP = " moves "


def trim_fen(fen: str) -> str:
    """Keep placement, side to move, castling and en passant; drop counters."""
    parts = fen.split()
    if len(parts) >= 4:
        return " ".join(parts[:4])
    return fen


class BoardTracker:
    """
    Owns the live board and the fingerprint of the last accepted position.

    The fingerprint is None until a `position` command succeeds and again
    after every reset.
    """

    def __init__(self, rules: Rules = DEFAULT_RULES):
        self.rules = rules
        self.board: Any = rules.new_board()
        self.fingerprint: Optional[str] = None

    def reset(self) -> None:
        self.board = self.rules.new_board()
        self.fingerprint = None

    def set_position(self, body: str) -> Optional[str]:
        """
        Apply the body of a `position` command.

        Supports ``startpos [moves ...]`` and ``fen <FEN> [moves ...]``.
        Unresolvable moves truncate the move list. A FEN that does not parse
        leaves board and fingerprint untouched.

        Returns:
            The new fingerprint, or None if the command was ignored.
        """
        body = body.strip()
        if body == "startpos" or body.startswith("startpos "):
            board = self.rules.new_board()
            moves = _split_moves(body[len("startpos"):])
        elif body.startswith("fen "):
            fen_part = body[len("fen "):]
            idx = fen_part.find(_MOVES_SEP)
            if idx >= 0:
                fen_str = fen_part[:idx]
                moves = fen_part[idx + len(_MOVES_SEP):].split()
            else:
                fen_str = fen_part[:-len(" moves")] if fen_part.endswith(" moves") else fen_part
                moves = []
            try:
                board = self.rules.board_from_fen(fen_str.strip())
            except ValueError as exc:
                logger.debug("ignoring position with bad fen: %s", exc)
                return None
        else:
            return None

        apply_moves(board, moves, self.rules)
        self.board = board
        self.fingerprint = trim_fen(self.rules.fen(board))
        return self.fingerprint


def _split_moves(rest: str) -> List[str]:
    tokens = rest.split()
    if tokens and tokens[0] == "moves":
        return tokens[1:]
    return []
