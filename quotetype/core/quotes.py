from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import yaml

DEFAULT_QUOTES: List[str] = [
    "The quick brown fox jumps over the lazy dog.",
    "Programs must be written for people to read, and only incidentally for machines to execute.",
    "Simplicity is prerequisite for reliability.",
    "Talk is cheap. Show me the code.",
    "First, solve the problem. Then, write the code.",
    "Any fool can write code that a computer can understand. Good programmers write code that humans can understand.",
    "Make it work, make it right, make it fast.",
    "The best way to predict the future is to invent it.",
]


@dataclass(frozen=True)
class QuoteSet:
    key: str
    name: str
    quotes: List[str]


def parse_quote_text(text: str) -> List[str]:
    """Split uploaded plain text into quotes, one per non-empty line."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def _quotes_from_content(content: object) -> List[str]:
    if isinstance(content, list):
        return [str(item).strip() for item in content if str(item).strip()]
    # allow content as multiline string
    return parse_quote_text(str(content))


class QuoteRepository:
    """Quote sets loaded from ``*.yaml`` files with ``title`` and ``content`` keys.

    Without a directory the repository holds a single ``default`` set built
    from :data:`DEFAULT_QUOTES`.
    """

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self._base_dir = Path(base_dir).expanduser() if base_dir is not None else None
        self._sets = self._load_sets()

    def all(self) -> List[QuoteSet]:
        return list(self._sets.values())

    def get(self, key: str) -> QuoteSet:
        return self._sets[key]

    def default(self) -> QuoteSet:
        return next(iter(self._sets.values()))

    def _load_sets(self) -> Dict[str, QuoteSet]:
        if self._base_dir is None:
            return {"default": QuoteSet(key="default", name="Default", quotes=list(DEFAULT_QUOTES))}
        if not self._base_dir.exists():
            raise FileNotFoundError(f"Quotes directory not found: {self._base_dir}")

        def _sort_key(p: Path) -> tuple[int, str]:
            m = re.match(r"^\D*(\d+)$", p.stem)
            if m:
                return (int(m.group(1)), p.stem)
            return (10**9, p.stem)

        sets: Dict[str, QuoteSet] = {}
        for path in sorted(self._base_dir.glob("*.yaml"), key=_sort_key):
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
            if not raw or not isinstance(raw, dict):
                raise ValueError(f"{path.name}: expected YAML with 'title' and 'content'")
            title = raw.get("title")
            content = raw.get("content")
            if not title or not isinstance(title, str):
                raise ValueError(f"{path.name}: missing or invalid 'title'")
            if content is None:
                raise ValueError(f"{path.name}: missing 'content'")
            quotes = _quotes_from_content(content)
            if not quotes:
                raise ValueError(f"{path.name}: 'content' has no quotes")
            sets[path.stem] = QuoteSet(key=path.stem, name=title.strip(), quotes=quotes)

        if not sets:
            raise ValueError(f"No quote files (*.yaml) found in {self._base_dir}")
        return sets
