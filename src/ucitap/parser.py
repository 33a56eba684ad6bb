"""
UCI transcript parser.

Reads a tapped UCI session line by line and turns every finished search into
a `SearchRecord`. Board state is rebuilt purely from the `position` commands
in the log; nothing in a transcript is fatal, bad input is skipped.

Line handling:
    uci / ucinewgame   reset board, search info and position (uci also
                       forgets the engine name)
    id name <name>     engine name
    position ...       new board + fingerprint
    info ...           search statistics and PV
    bestmove ...       emit a record if a position is known
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from .moves import pv_to_san
from .position import BoardTracker
from .records import SearchRecord
from .rules import DEFAULT_RULES, Rules
from .search_info import SearchInfo

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 100_000

ProgressCallback = Callable[[int], None]


@dataclass
class ParserState:
    tracker: BoardTracker
    info: SearchInfo = field(default_factory=SearchInfo)
    engine: str = ""

    def new_game(self, forget_engine: bool = False) -> None:
        self.tracker.reset()
        self.info.clear()
        if forget_engine:
            self.engine = ""


class TranscriptParser:
    """Protocol state machine fed one transcript line at a time."""

    def __init__(self, rules: Rules = DEFAULT_RULES):
        self.rules = rules
        self.state = ParserState(tracker=BoardTracker(rules))
        self.records: List[SearchRecord] = []
        self.lines_read = 0

    def feed(self, line: str) -> Optional[SearchRecord]:
        """
        Handle a single line.

        Returns:
            The record emitted by a `bestmove` line, otherwise None.
        """
        self.lines_read += 1
        line = line.strip()
        state = self.state

        if line in ("uci", "ucinewgame"):
            state.new_game(forget_engine=(line == "uci"))
        elif line.startswith("id name "):
            state.engine = line[len("id name "):]
        elif line.startswith("position "):
            state.tracker.set_position(line[len("position "):])
        elif line.startswith("info "):
            state.info.update(line, convert_pv=self._convert_pv)
        elif line.startswith("bestmove"):
            return self._flush()
        return None

    def parse(
        self,
        lines: Iterable[str],
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[SearchRecord]:
        """Feed every line and return all records emitted so far."""
        for line in lines:
            self.feed(line)
            if on_progress is not None and self.lines_read % PROGRESS_EVERY == 0:
                on_progress(self.lines_read)
        return self.records

    def _convert_pv(self, pv: str) -> str:
        return pv_to_san(pv, self.state.tracker.board, self.rules)

    def _flush(self) -> Optional[SearchRecord]:
        state = self.state
        fen = state.tracker.fingerprint
        record = None
        if fen is not None:
            record = SearchRecord(engine=state.engine, fen=fen, **state.info.as_dict())
            self.records.append(record)
        else:
            logger.debug("bestmove without a known position, line %d", self.lines_read)
        state.info.clear()
        return record


def parse_transcript(
    path: Path,
    on_progress: Optional[ProgressCallback] = None,
    rules: Rules = DEFAULT_RULES,
) -> List[SearchRecord]:
    """
    Parse a transcript file.

    Raises:
        OSError: if the file cannot be read
    """
    parser = TranscriptParser(rules)
    with Path(path).open("r", encoding="utf-8", errors="replace") as fh:
        return parser.parse(fh, on_progress=on_progress)
