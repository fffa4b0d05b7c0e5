from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


def _now_iso() -> str:
    # ISO-ish without importing datetime (fast + good enough for logs)
    return time.strftime("%Y-%m-%dT%H:%M:%S", time.localtime())


@dataclass
class TelemetryLogger:
    """
    Append-only JSON-lines event log for gameplay telemetry
    (levels generated, deaths, level ups, saves).

    Each row carries the turn number it happened on. Rows are also kept in
    `recent` (bounded) so tests and the debug HUD can look at them without
    touching the file.
    """
    path: Optional[Path] = None
    enabled: bool = True
    keep_recent: int = 50
    turn: int = 0
    recent: List[Dict[str, Any]] = field(default_factory=list)
    _started_at: float = field(default_factory=time.time)

    def init(self, path: Path) -> None:
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Touch file (don't overwrite)
        self.path.touch(exist_ok=True)
        self.log("telemetry_init", file=str(self.path))

    def log(self, event: str, **fields: Any) -> None:
        if not self.enabled:
            return

        row: Dict[str, Any] = {
            "t": round(time.time() - self._started_at, 3),
            "ts": _now_iso(),
            "turn": self.turn,
            "event": event,
            **fields,
        }
        self.recent.append(row)
        if len(self.recent) > self.keep_recent:
            del self.recent[: len(self.recent) - self.keep_recent]

        if self.path is None:
            return
        try:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(row, ensure_ascii=False) + "\n")
        except OSError:
            # Telemetry must never break the game.
            return

    def tick_turn(self) -> int:
        self.turn += 1
        return self.turn

    def events(self, name: str) -> List[Dict[str, Any]]:
        return [row for row in self.recent if row["event"] == name]


# global singleton (easy import everywhere)
telemetry = TelemetryLogger()
