"""
Accumulator for the `info` lines of the search in progress.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, Optional, Tuple

_INT_RE = re.compile(r"[+-]?[0-9]+")
_PV_RE = re.compile(r"(?:^| )pv (.*)$")
_STRING_RE = re.compile(r"(?:^| )string(?: |$)")

_U32 = (0, 2**32 - 1)
_I32 = (-(2**31), 2**31 - 1)
_U64 = (0, 2**64 - 1)

# info key -> (field, allowed range)
INFO_KEYS: Dict[str, Tuple[str, Tuple[int, int]]] = {
    "depth": ("ply", _U32),
    "cp": ("score", _I32),
    "mate": ("mate", _I32),
    "nodes": ("nodes", _U64),
    "nps": ("nps", _U64),
    "time": ("time", _U64),
}


def parse_int(token: Optional[str], bounds: Tuple[int, int]) -> Optional[int]:
    """Parse a plain decimal integer within `bounds`; None if it is not one."""
    if token is None or not _INT_RE.fullmatch(token):
        return None
    value = int(token)
    lo, hi = bounds
    if value < lo or value > hi:
        return None
    return value


@dataclass
class SearchInfo:
    ply: Optional[int] = None
    score: Optional[int] = None
    mate: Optional[int] = None
    nodes: Optional[int] = None
    nps: Optional[int] = None
    time: Optional[int] = None
    pv: Optional[str] = None

    def clear(self) -> None:
        for f in fields(self):
            setattr(self, f.name, None)

    def update(self, line: str, convert_pv: Optional[Callable[[str], str]] = None) -> None:
        """
        Fold one `info` line into the accumulator.

        Every recognised key overwrites its field with the following token if
        that token parses; otherwise the old value stays. Scanning ends at
        `string`, whose remainder is free text. The PV is only touched when
        `convert_pv` is given.
        """
        parts = line.split()
        for i, key in enumerate(parts):
            if key == "string":
                break
            entry = INFO_KEYS.get(key)
            if entry is None:
                continue
            name, bounds = entry
            value = parse_int(parts[i + 1] if i + 1 < len(parts) else None, bounds)
            if value is not None:
                setattr(self, name, value)

        if convert_pv is not None:
            head = _STRING_RE.split(line, maxsplit=1)[0]
            match = _PV_RE.search(head)
            if match:
                self.pv = convert_pv(match.group(1).strip())

    def as_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
