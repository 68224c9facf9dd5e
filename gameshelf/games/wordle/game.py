import re
import logging
from typing import Any, Dict, Iterator, Mapping

from gameshelf.core.dates import GameDates
from gameshelf.core.game_protocol import Game
from gameshelf.core.models import GameResult, Match
from gameshelf.core.normalize import NUMBER_PATTERN, graphemes, parse_number, scan_blocks

logger = logging.getLogger(__name__)

MAX_GUESSES = 6
WORD_LENGTH = 5
FAIL_TOKEN = "X"

# Share header like:
#   "Wordle 1,234 3/6"
#   "wordle  999  X/6*"
HEADER_PATTERN = re.compile(
    r'\bwordle\s+'
    rf'(?P<number>{NUMBER_PATTERN})\s+'
    r'(?P<tries>[1-6X])\s*/\s*6(?!\d)'
    r'(?P<hard>\*)?',
    re.IGNORECASE,
)

# Normal, dark and high-contrast palettes
GRID_SQUARES = frozenset("⬛⬜🟨🟩🟧🟦")


def _is_grid_row(line: str) -> bool:
    # A row is at most a few code points per square; skip the grapheme split otherwise
    if not line or len(line) > WORD_LENGTH * 2:
        return False
    squares = graphemes(line)
    return len(squares) == WORD_LENGTH and all(sq in GRID_SQUARES for sq in squares)


class WordleGame(Game):
    game_id = "wordle"
    name = "Wordle"
    # Defaults already follow Wordle numbering (2021-06-19 is #0)
    dates = GameDates()

    def find_all(self, text: str) -> Iterator[Match]:
        for m, rows, end in scan_blocks(text, HEADER_PATTERN, _is_grid_row, MAX_GUESSES):
            tries_tok = m.group("tries").upper()
            raw_score = f"{m.group('tries')}/{MAX_GUESSES}"
            meta: Dict[str, Any] = {
                "guesses": None if tries_tok == FAIL_TOKEN else int(tries_tok),
                "hard_mode": m.group("hard") is not None,
            }
            result = GameResult(
                game_id=self.game_id,
                puzzle_number=parse_number(m.group("number")),
                raw_score=raw_score,
                won=tries_tok != FAIL_TOKEN,
                numeric_score=self.score(raw_score, meta),
                meta=meta,
            )
            logger.debug("find_all: wordle #%s %s (grid rows=%s)", result.puzzle_number, raw_score, len(rows))
            yield Match(m.start(), end, result)

    def score(self, raw_score: str, meta: Mapping[str, Any]) -> int:
        tries_tok = raw_score.split("/", 1)[0].upper()
        if tries_tok == FAIL_TOKEN:
            return 0
        return (MAX_GUESSES + 1 - int(tries_tok)) * 5
