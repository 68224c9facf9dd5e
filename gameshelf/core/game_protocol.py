# gameshelf/core/game_protocol.py
from __future__ import annotations

from typing import Any, Iterator, Mapping, Optional, Protocol, runtime_checkable

from .dates import GameDates
from .models import GameResult, Match

@runtime_checkable
class Game(Protocol):
    game_id: str
    name: str
    dates: GameDates

    def find_all(self, text: str) -> Iterator[Match]:
        """
        Yield every block of this game's share text found in normalized text,
        in source order, as Match(start, end, result).
        Blocks are only reported once fully extracted; nothing is yielded
        for text that doesn't contain this game.
        """
        ...

    def try_match(self, text: str) -> Optional[GameResult]:
        """Return the first block's result, or None."""
        first = next(iter(self.find_all(text)), None)
        return first.result if first is not None else None

    def score(self, raw_score: str, meta: Mapping[str, Any]) -> int:
        """
        Numeric score used for cross-game comparison.
        Must be a pure function of its arguments.
        """
        ...
