from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class GameResult:
    game_id: str
    puzzle_number: Optional[int]
    raw_score: str
    won: bool
    numeric_score: int
    meta: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        # Freeze meta so a stored result can't drift from its score
        object.__setattr__(self, "meta", MappingProxyType(dict(self.meta)))

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict in the shape the app stores per game per day."""
        return {
            "gameId": self.game_id,
            "puzzleNumber": self.puzzle_number,
            "rawScore": self.raw_score,
            "won": self.won,
            "numericScore": self.numeric_score,
            "meta": dict(self.meta),
        }


@dataclass(frozen=True)
class Match:
    # Span of the game block inside the normalized text
    start: int
    end: int
    result: GameResult


@dataclass
class LoggedResult:
    # Daily puzzle number the result counts for (derived from the post date when the share has none)
    number: int
    result: GameResult
    timestamp: datetime

    @property
    def game_id(self) -> str:
        return self.result.game_id
