import json
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT / "src") not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT / "src"))

import pytest
import zstandard as zstd

from ucitap import records as records_module  # pylint: disable=wrong-import-position
from ucitap.errors import OutputError
from ucitap.records import RecordSink, SearchRecord, load_records, output_path

FP = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq -"


def sample_records():
    return [
        SearchRecord(engine="Eng", fen=FP, ply=10, score=25, nodes=12345, nps=500000, time=20, pv="e4 e5 Nf3"),
        SearchRecord(engine="Eng", fen=FP),
    ]


def test_to_dict_keeps_absent_fields():
    data = SearchRecord(engine="Eng", fen=FP, mate=-2).to_dict()
    assert list(data) == ["engine", "fen", "ply", "score", "mate", "nodes", "nps", "time", "pv"]
    assert data["mate"] == -2
    assert data["ply"] is None
    assert data["pv"] is None


def test_record_is_immutable():
    rec = SearchRecord(engine="Eng", fen=FP)
    with pytest.raises(AttributeError):
        rec.ply = 3  # type: ignore[misc]


def test_output_path():
    assert output_path(Path("logs/engine.log")) == Path("engine.json")
    assert output_path(Path("logs/engine.log"), compress=True) == Path("engine.zst")
    assert output_path(Path("engine.log"), out_dir=Path("/tmp/out")) == Path("/tmp/out/engine.json")


def test_write_json(tmp_path: Path):
    path = tmp_path / "engine.json"
    sink = RecordSink(sample_records())
    sink.write(path)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert len(data) == 2
    assert data[0]["pv"] == "e4 e5 Nf3"
    assert data[1]["ply"] is None
    # pretty printed
    assert '\n  {\n    "engine": "Eng",' in path.read_text(encoding="utf-8")


def test_write_compressed(tmp_path: Path):
    path = tmp_path / "engine.zst"
    sink = RecordSink()
    sink.extend(sample_records())
    sink.write(path, compress=True)

    raw = path.read_bytes()
    assert raw[:4] == b"\x28\xb5\x2f\xfd"  # zstd frame magic
    with zstd.ZstdDecompressor().stream_reader(raw) as reader:
        assert json.loads(reader.read())[0]["engine"] == "Eng"
    assert load_records(path) == sample_records()


def test_load_json(tmp_path: Path):
    path = tmp_path / "engine.json"
    RecordSink(sample_records()).write(path)
    assert load_records(path) == sample_records()


def test_empty_sink_writes_empty_array(tmp_path: Path):
    path = tmp_path / "empty.json"
    RecordSink().write(path)
    assert json.loads(path.read_text()) == []


def test_write_failure_raises_output_error(tmp_path: Path):
    path = tmp_path / "missing-dir" / "engine.json"
    with pytest.raises(OutputError):
        RecordSink(sample_records()).write(path)
    assert not path.exists()


def test_failed_write_keeps_previous_output(tmp_path: Path, monkeypatch):
    path = tmp_path / "engine.json"
    RecordSink(sample_records()).write(path)
    before = path.read_bytes()

    def fail_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(records_module.os, "replace", fail_replace)
    with pytest.raises(OutputError):
        RecordSink().write(path)

    assert path.read_bytes() == before
    assert sorted(p.name for p in tmp_path.iterdir()) == ["engine.json"]


def test_write_replaces_existing_output(tmp_path: Path):
    path = tmp_path / "engine.json"
    path.write_text("stale", encoding="utf-8")
    RecordSink(sample_records()).write(path)
    assert load_records(path) == sample_records()
    assert not (tmp_path / "engine.json.tmp").exists()
