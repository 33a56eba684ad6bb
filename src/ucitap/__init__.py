"""
Turn tapped UCI engine sessions into per-search analysis records.
"""

from .errors import ConfigError, OutputError, UciTapError
from .moves import apply_moves, pv_to_san, resolve_move
from .parser import ParserState, TranscriptParser, parse_transcript
from .position import BoardTracker, trim_fen
from .records import RecordSink, SearchRecord, load_records, output_path
from .rules import ChessRules, Rules
from .search_info import SearchInfo
from .tap import TapConfig, load_config, run_tap

__all__ = [
    # Parsing
    "TranscriptParser", "ParserState", "parse_transcript",
    "BoardTracker", "trim_fen", "SearchInfo",
    "resolve_move", "apply_moves", "pv_to_san",
    "Rules", "ChessRules",

    # Output
    "SearchRecord", "RecordSink", "output_path", "load_records",

    # Tap
    "TapConfig", "load_config", "run_tap",

    # Errors
    "UciTapError", "OutputError", "ConfigError",
]
