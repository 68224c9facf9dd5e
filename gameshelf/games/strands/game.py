import re
import logging
from datetime import date
from typing import Any, Dict, Iterator, Mapping

from gameshelf.core.dates import DatesConfig, GameDates
from gameshelf.core.game_protocol import Game
from gameshelf.core.models import GameResult, Match
from gameshelf.core.normalize import NUMBER_PATTERN, parse_number, scan_blocks

logger = logging.getLogger(__name__)

THEME_WORD = "🔵"
SPANGRAM = "🟡"
HINT = "💡"
_ROW_CHARS = frozenset(THEME_WORD + SPANGRAM + HINT + "\ufe0f")
# Rows are a handful of symbols; a finished board fits in a few of them
ROW_LIMIT = 16
MAX_ROWS = 10

PERFECT_LABEL = "Perfect!"
PERFECT_SCORE = 30
HINT_PENALTY = 4
MIN_SCORE = 5

# Share header like:
#   "Strands #123"
#   "Strands 456"
HEADER_PATTERN = re.compile(
    r'\bstrands\s*#?\s*'
    rf'(?P<number>{NUMBER_PATTERN})',
    re.IGNORECASE,
)

# The quoted theme line NYT puts between header and grid
_THEME_QUOTES = ("“", '"', "‘", "'")


def _is_row(line: str) -> bool:
    return bool(line) and len(line) <= ROW_LIMIT and set(line) <= _ROW_CHARS


def _is_theme_line(line: str) -> bool:
    return line.startswith(_THEME_QUOTES)


def hint_label(hints: int, perfect: bool) -> str:
    if perfect:
        return PERFECT_LABEL
    return f"{hints} hint" if hints == 1 else f"{hints} hints"


class StrandsGame(Game):
    game_id = "strands"
    name = "Strands"
    dates = GameDates(DatesConfig(epoch_date=date(2024, 3, 4), base_number=1))

    def find_all(self, text: str) -> Iterator[Match]:
        for m, rows, end in scan_blocks(text, HEADER_PATTERN, _is_row, MAX_ROWS, skip=_is_theme_line):
            hints = sum(row.count(HINT) for row in rows)
            spangram = any(SPANGRAM in row for row in rows)
            meta: Dict[str, Any] = {
                "hints": hints,
                # No spangram on the board means the puzzle wasn't finished
                "perfect": spangram and hints == 0,
                "spangram": spangram,
            }
            raw_score = hint_label(hints, meta["perfect"])
            result = GameResult(
                game_id=self.game_id,
                puzzle_number=parse_number(m.group("number")),
                raw_score=raw_score,
                won=spangram,
                numeric_score=self.score(raw_score, meta),
                meta=meta,
            )
            logger.debug("find_all: strands #%s hints=%s spangram=%s", result.puzzle_number, hints, spangram)
            yield Match(m.start(), end, result)

    def score(self, raw_score: str, meta: Mapping[str, Any]) -> int:
        if meta.get("perfect"):
            # Perfect bonus: deliberately above the 1-hint curve (30 vs 16)
            return PERFECT_SCORE
        hints = int(meta.get("hints", 0))
        return max(20 - hints * HINT_PENALTY, MIN_SCORE)
