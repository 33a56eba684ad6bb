"""
Search records and the sink that writes them.

Intent:
- One `SearchRecord` per finished search (`bestmove`), immutable once built.
- Keep every record in memory and write the whole document in one go, so a
  failed run never leaves a half-written file behind.
- Output is a pretty-printed JSON array, optionally zstd-compressed at the
  maximum level.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import zstandard as zstd

from .errors import OutputError

ZSTD_LEVEL = 22
JSON_SUFFIX = ".json"
ZSTD_SUFFIX = ".zst"


@dataclass(frozen=True)
class SearchRecord:
    engine: str
    fen: str
    ply: Optional[int] = None
    score: Optional[int] = None
    mate: Optional[int] = None
    nodes: Optional[int] = None
    nps: Optional[int] = None
    time: Optional[int] = None
    pv: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        # Absent fields stay in the document as null
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SearchRecord":
        return cls(
            engine=data.get("engine", ""),
            fen=data.get("fen", ""),
            ply=data.get("ply"),
            score=data.get("score"),
            mate=data.get("mate"),
            nodes=data.get("nodes"),
            nps=data.get("nps"),
            time=data.get("time"),
            pv=data.get("pv"),
        )


def output_path(log_path: Path, compress: bool = False, out_dir: Optional[Path] = None) -> Path:
    """
    Derive the output file from the transcript name: ``engine.log`` becomes
    ``engine.json`` or ``engine.zst``, placed in `out_dir` (default: cwd).
    """
    suffix = ZSTD_SUFFIX if compress else JSON_SUFFIX
    name = Path(log_path).stem + suffix
    return (Path(out_dir) if out_dir is not None else Path(".")) / name


class RecordSink:
    """
    In-memory collector for emitted records. Nothing is validated; whatever
    was added is written.
    """

    def __init__(self, records: Optional[Iterable[SearchRecord]] = None):
        self.records: List[SearchRecord] = list(records or [])

    def __len__(self) -> int:
        return len(self.records)

    def add(self, record: SearchRecord) -> None:
        self.records.append(record)

    def extend(self, records: Iterable[SearchRecord]) -> None:
        self.records.extend(records)

    def serialize(self) -> bytes:
        try:
            text = json.dumps([r.to_dict() for r in self.records], indent=2, ensure_ascii=False)
            return text.encode("utf-8")
        except (TypeError, ValueError, UnicodeEncodeError) as exc:
            raise OutputError(f"failed to encode records: {exc}") from exc

    @staticmethod
    def compress(data: bytes) -> bytes:
        try:
            return zstd.ZstdCompressor(level=ZSTD_LEVEL).compress(data)
        except zstd.ZstdError as exc:
            raise OutputError(f"zstd compression failed: {exc}") from exc

    def write(self, path: Path, compress: bool = False) -> Path:
        """
        Serialize, optionally compress, then write `path`.

        Raises:
            OutputError: on encoding, compression or write failure.
        """
        data = self.serialize()
        if compress:
            data = self.compress(data)
        return self.write_bytes(path, data)

    @staticmethod
    def write_bytes(path: Path, data: bytes) -> Path:
        """
        Write an already encoded document to `path`.

        The bytes go to a sibling ``.tmp`` file that replaces `path` only once
        fully written, so an earlier output survives a failed write.

        Raises:
            OutputError: if the file cannot be written
        """
        path = Path(path)
        tmp = path.with_name(path.name + ".tmp")
        try:
            with tmp.open("wb") as fh:
                fh.write(data)
            os.replace(tmp, path)
        except OSError as exc:
            if tmp.is_file():
                tmp.unlink()
            raise OutputError(f"failed to write {path}: {exc}") from exc
        return path


def load_records(path: Path) -> List[SearchRecord]:
    """
    Read a document written by `RecordSink.write` back into records.
    Files ending in ``.zst`` are decompressed first.
    """
    path = Path(path)
    raw = path.read_bytes()
    if path.suffix == ZSTD_SUFFIX:
        with zstd.ZstdDecompressor().stream_reader(raw) as reader:
            raw = reader.read()
    return [SearchRecord.from_dict(item) for item in json.loads(raw.decode("utf-8"))]
