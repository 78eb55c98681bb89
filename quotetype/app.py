"""Application wiring for the quotetype typing test engine."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from quotetype.config import load_config
from quotetype.core.history import HistoryStore
from quotetype.core.quotes import QuoteRepository
from quotetype.core.session import TypingSession
from quotetype.core.shortcuts import ShortcutMap
from quotetype.core.timer import QtScheduler, Scheduler


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_session(
    config: Optional[Dict[str, Any]] = None,
    scheduler: Optional[Scheduler] = None,
) -> TypingSession:
    """Build a session from configuration, recording finished attempts to history.

    The default scheduler needs a running Qt event loop to deliver ticks.
    """
    config = config if config is not None else load_config()

    quotes_dir = config.get("quotes_dir")
    repository = QuoteRepository(Path(quotes_dir) if quotes_dir else None)
    history = HistoryStore(Path(config.get("data_root", "~/.quotetype")))

    timer_cfg = config.get("timer") or {}
    session_cfg = config.get("session") or {}
    session = TypingSession(
        repository.default().quotes,
        scheduler or QtScheduler(),
        history.record,
        tick_ms=int(timer_cfg.get("tick_ms", 200)),
        auto_advance=bool(session_cfg.get("auto_advance", True)),
        shortcuts=ShortcutMap.from_config(config),
    )
    logging.info("Session ready with %d quotes, history at %s", len(session.quotes), history.file_path)
    return session
