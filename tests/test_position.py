import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT / "src") not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT / "src"))

import chess

from ucitap.position import BoardTracker, trim_fen  # pylint: disable=wrong-import-position

START_FP = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq -"
AFTER_E4_FP = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq -"


def test_trim_fen():
    assert trim_fen(chess.STARTING_FEN) == START_FP
    assert trim_fen("8/8/8/8/8/8/8/8 w") == "8/8/8/8/8/8/8/8 w"


def test_fresh_tracker_has_no_fingerprint():
    tracker = BoardTracker()
    assert tracker.fingerprint is None
    assert tracker.board.fen() == chess.STARTING_FEN


def test_startpos():
    tracker = BoardTracker()
    assert tracker.set_position("startpos") == START_FP
    assert tracker.fingerprint == START_FP


def test_startpos_with_moves():
    tracker = BoardTracker()
    assert tracker.set_position("startpos moves e2e4") == AFTER_E4_FP


def test_en_passant_square_only_when_capturable():
    tracker = BoardTracker()
    fp = tracker.set_position("startpos moves e2e4 a7a6 e4e5 d7d5")
    assert fp == "rnbqkbnr/1pp1pppp/p7/3pP3/8/8/PPPP1PPP/RNBQKBNR w KQkq d6"


def test_move_list_halts_at_bad_move():
    tracker = BoardTracker()
    fp = tracker.set_position("startpos moves e2e4 e2e4 d7d5")
    assert fp == AFTER_E4_FP


def test_fen_position():
    tracker = BoardTracker()
    fen = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 5 20"
    assert tracker.set_position(f"fen {fen}") == "r3k2r/8/8/8/8/8/8/R3K2R w KQkq -"
    assert tracker.board.halfmove_clock == 5


def test_fen_with_moves():
    tracker = BoardTracker()
    fp = tracker.set_position("fen r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1 moves e1g1 e8c8")
    assert fp == "2kr3r/8/8/8/8/8/8/R4RK1 w - -"


def test_fen_trailing_moves_keyword():
    tracker = BoardTracker()
    fp = tracker.set_position("fen r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1 moves")
    assert fp == "r3k2r/8/8/8/8/8/8/R3K2R w KQkq -"


def test_bad_fen_leaves_state_unchanged():
    tracker = BoardTracker()
    tracker.set_position("startpos moves e2e4")
    assert tracker.set_position("fen not-a-fen moves e7e5") is None
    assert tracker.fingerprint == AFTER_E4_FP
    assert tracker.board.piece_at(chess.E4) is not None
    assert tracker.board.turn == chess.BLACK


def test_invalid_position_is_rejected():
    tracker = BoardTracker()
    # no kings
    assert tracker.set_position("fen 8/8/8/8/8/8/8/8 w - - 0 1") is None
    assert tracker.fingerprint is None


def test_unknown_position_form_ignored():
    tracker = BoardTracker()
    tracker.set_position("startpos")
    assert tracker.set_position("sfen lnsgkgsnl/9 b - 1") is None
    assert tracker.fingerprint == START_FP


def test_reset():
    tracker = BoardTracker()
    tracker.set_position("startpos moves e2e4")
    tracker.reset()
    assert tracker.fingerprint is None
    assert tracker.board.fen() == chess.STARTING_FEN


def test_startpos_must_be_a_whole_token():
    tracker = BoardTracker()
    assert tracker.set_position("startposfoo") is None
    assert tracker.set_position("startpos movesfoo e2e4") == START_FP
    assert tracker.fingerprint == START_FP
