"""
Transparent tap between a UCI GUI and an engine.

The GUI launches this instead of the engine. We spawn the real engine, pass
stdin/stdout through unchanged and append every byte in both directions to a
log file. That log is the transcript `ucitap2json` consumes.

Config (JSON or YAML):
    engine: /path/to/engine
    logfile: /path/to/engine.log
    args: []          # optional extra engine arguments
"""

from __future__ import annotations

import subprocess
import sys
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, List, Optional

import yaml

from .errors import ConfigError

DEFAULT_CONFIG = "config.json"
CHUNK_SIZE = 4096
_CREATE_NO_WINDOW = 0x08000000


@dataclass
class TapConfig:
    engine: str
    logfile: str
    args: List[str] = field(default_factory=list)


def load_config(path: Path) -> TapConfig:
    """Load a tap config; JSON files are read as YAML too."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigError(f"failed to read {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"failed to parse {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping")
    missing = [key for key in ("engine", "logfile") if not data.get(key)]
    if missing:
        raise ConfigError(f"{path}: missing {', '.join(missing)}")
    return TapConfig(
        engine=str(data["engine"]),
        logfile=str(data["logfile"]),
        args=[str(a) for a in data.get("args") or []],
    )


def _read_chunk(src: BinaryIO) -> bytes:
    # read1 returns as soon as anything is available; read() would wait for
    # a full chunk and stall the protocol
    read1 = getattr(src, "read1", None)
    if read1 is not None:
        return read1(CHUNK_SIZE)
    return src.read(CHUNK_SIZE)


def _pump(src: BinaryIO, dst: BinaryIO, log: BinaryIO, lock: threading.Lock, close_dst: bool) -> None:
    try:
        while True:
            try:
                chunk = _read_chunk(src)
            except (OSError, ValueError):
                break
            if not chunk:
                break
            try:
                dst.write(chunk)
                dst.flush()
                with lock:
                    log.write(chunk)
                    log.flush()
            except (OSError, ValueError):
                break
    finally:
        if close_dst:
            try:
                dst.close()
            except OSError:
                pass


def run_tap(
    config: TapConfig,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
) -> int:
    """
    Run the engine behind the tap until its output ends.

    Returns:
        The engine's exit code.
    """
    stdin = stdin if stdin is not None else sys.stdin.buffer
    stdout = stdout if stdout is not None else sys.stdout.buffer

    kwargs = {}
    if sys.platform == "win32":
        kwargs["creationflags"] = _CREATE_NO_WINDOW

    with open(config.logfile, "ab") as log:
        proc = subprocess.Popen(
            [config.engine, *config.args],
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            **kwargs,
        )
        lock = threading.Lock()
        to_engine = threading.Thread(
            target=_pump, args=(stdin, proc.stdin, log, lock, True), daemon=True
        )
        from_engine = threading.Thread(
            target=_pump, args=(proc.stdout, stdout, log, lock, False), daemon=True
        )
        to_engine.start()
        from_engine.start()

        from_engine.join()
        code = proc.wait()
        # The GUI may keep its end open after the engine quits
        to_engine.join(timeout=1.0)
        return code
