from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ShortcutMap:
    """Human-readable key combination labels for the engine's control actions."""

    focus: str = "Shift+Space"
    new_quote: str = "Shift+Enter"
    backspace: str = "Backspace"

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]]) -> "ShortcutMap":
        data = (config or {}).get("shortcuts") or {}
        defaults = cls()
        return cls(
            focus=str(data.get("focus", defaults.focus)),
            new_quote=str(data.get("new_quote", defaults.new_quote)),
            backspace=str(data.get("backspace", defaults.backspace)),
        )

    def as_dict(self) -> Dict[str, str]:
        return {"focus": self.focus, "newQuote": self.new_quote, "backspace": self.backspace}
