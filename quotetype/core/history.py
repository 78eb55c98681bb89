from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from quotetype.core.stats import TypingStats

logger = logging.getLogger(__name__)


@dataclass
class AttemptRecord:
    quote_key: str
    wpm: float
    accuracy: float
    timestamp: str


@dataclass
class CareerStats:
    average_wpm: float = 0.0
    average_accuracy: float = 0.0
    total_sessions: int = 0
    total_quotes: int = 0


def quote_key(quote: str) -> str:
    """Stable short identifier for a quote's text."""
    return hashlib.sha1(quote.encode("utf-8")).hexdigest()[:12]


class HistoryStore:
    """Finished typing attempts persisted as JSON.

    File: ``<data_root>/history.json`` (``~/.quotetype`` by default). Use
    :meth:`record` directly as a session's completion callback.
    """

    def __init__(self, data_root: Optional[Path] = None) -> None:
        root = Path(data_root).expanduser() if data_root is not None else Path.home() / ".quotetype"
        self._file_path = root / "history.json"
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._attempts = self._load()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def attempts(self, key: Optional[str] = None) -> List[AttemptRecord]:
        if key is None:
            return list(self._attempts)
        return [a for a in self._attempts if a.quote_key == key]

    def best_wpm(self, key: str) -> float:
        return max((a.wpm for a in self.attempts(key)), default=0.0)

    def record(self, quote: str, stats: TypingStats) -> bool:
        """Store a finished attempt. Returns True when it beats a previous best."""
        key = quote_key(quote)
        previous_best = self.best_wpm(key)
        self._attempts.append(
            AttemptRecord(
                quote_key=key,
                wpm=float(stats.wpm),
                accuracy=float(stats.accuracy),
                timestamp=datetime.now().isoformat(timespec="seconds"),
            )
        )
        self._save()
        is_best = previous_best > 0 and stats.wpm > previous_best
        if is_best:
            logger.info("New personal best %.1f wpm (previous %.1f)", stats.wpm, previous_best)
        return is_best

    def career_stats(self) -> CareerStats:
        if not self._attempts:
            return CareerStats()
        count = len(self._attempts)
        return CareerStats(
            average_wpm=sum(a.wpm for a in self._attempts) / count,
            average_accuracy=sum(a.accuracy for a in self._attempts) / count,
            total_sessions=count,
            total_quotes=len({a.quote_key for a in self._attempts}),
        )

    def reset(self) -> None:
        """Forget every recorded attempt."""
        self._attempts = []
        self._save()

    def _load(self) -> List[AttemptRecord]:
        if not self._file_path.exists():
            return []
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load history from %s: %s", self._file_path, e)
            return []

        attempts: List[AttemptRecord] = []
        for item in payload.get("attempts", []) if isinstance(payload, dict) else []:
            if not isinstance(item, dict) or "quote_key" not in item:
                continue
            attempts.append(
                AttemptRecord(
                    quote_key=str(item["quote_key"]),
                    wpm=float(item.get("wpm", 0.0)),
                    accuracy=float(item.get("accuracy", 0.0)),
                    timestamp=str(item.get("timestamp", "")),
                )
            )
        return attempts

    def _save(self) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        payload: Dict[str, object] = {"attempts": [asdict(a) for a in self._attempts]}
        try:
            self._file_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save history to %s: %s", self._file_path, e)
