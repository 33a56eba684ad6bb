"""
Rules capability used by the transcript parser.

The parser never inspects chess positions itself. Everything it needs from a
rules engine goes through the small `Rules` protocol below, so tests can plug
in a scripted implementation. `ChessRules` is the python-chess backed default.
"""

from __future__ import annotations

from typing import Any, Iterable, Protocol

import chess


class Rules(Protocol):
    def new_board(self) -> Any: ...

    def board_from_fen(self, fen: str) -> Any: ...

    def copy(self, board: Any) -> Any: ...

    def legal_moves(self, board: Any) -> Iterable[Any]: ...

    def uci(self, move: Any) -> str: ...

    def san(self, board: Any, move: Any) -> str: ...

    def push(self, board: Any, move: Any) -> None: ...

    def fen(self, board: Any) -> str: ...


class ChessRules:
    """Standard chess via python-chess."""

    def new_board(self) -> chess.Board:
        return chess.Board()

    def board_from_fen(self, fen: str) -> chess.Board:
        """
        Parse a FEN and reject positions python-chess considers invalid
        (missing kings, pawns on the back rank, bogus castling rights, ...).

        Raises:
            ValueError: if the FEN is malformed or the position is invalid
        """
        board = chess.Board(fen)
        if not board.is_valid():
            raise ValueError(f"invalid position: {fen!r} ({board.status()!r})")
        return board

    def copy(self, board: chess.Board) -> chess.Board:
        return board.copy(stack=False)

    def legal_moves(self, board: chess.Board) -> Iterable[chess.Move]:
        return board.legal_moves

    def uci(self, move: chess.Move) -> str:
        return move.uci()

    def san(self, board: chess.Board, move: chess.Move) -> str:
        return board.san(move)

    def push(self, board: chess.Board, move: chess.Move) -> None:
        board.push(move)

    def fen(self, board: chess.Board) -> str:
        # Only keep the en passant square when a capture is actually possible.
        return board.fen(en_passant="legal")


DEFAULT_RULES = ChessRules()
