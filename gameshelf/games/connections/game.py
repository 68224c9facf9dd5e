import re
import logging
from datetime import date
from typing import Any, Dict, Iterator, List, Mapping

from gameshelf.core.dates import DatesConfig, GameDates
from gameshelf.core.game_protocol import Game
from gameshelf.core.models import GameResult, Match
from gameshelf.core.normalize import NUMBER_PATTERN, graphemes, parse_number, scan_blocks

logger = logging.getLogger(__name__)

CATEGORIES = 4
GROUP_SIZE = 4
# Cap on guess rows: four categories plus the four mistakes that end a game
MAX_ROWS = 8

PERFECT_LABEL = "Perfect!"
SOLVED_LABEL = "Solved!"

# Share header like:
#   "Connections\nPuzzle #567"
#   "Connections Puzzle 567"
HEADER_PATTERN = re.compile(
    r'\bconnections\s*puzzle\s*#?\s*'
    rf'(?P<number>{NUMBER_PATTERN})',
    re.IGNORECASE,
)

# Yellow, green, blue, purple
CATEGORY_SQUARES = frozenset("🟨🟩🟦🟪")


def _split_row(line: str) -> List[str]:
    """
    Return the squares of a guess row, or [] if line isn't one.

    Widths are counted in grapheme clusters: each square is a single
    visible symbol however many code units it takes to store.
    """
    if not line or len(line) > GROUP_SIZE * 2:
        return []
    squares = graphemes(line)
    if len(squares) != GROUP_SIZE or not all(sq in CATEGORY_SQUARES for sq in squares):
        return []
    return squares


def _is_guess_row(line: str) -> bool:
    return bool(_split_row(line))


def tally_rows(rows: List[str]):
    """
    Count (categories_solved, mistakes) over guess rows in order.
    A clean row (one colour) solves a category; rows after the fourth
    clean row are ignored. Colour order is irrelevant.
    """
    solved = 0
    mistakes = 0
    for row in rows:
        if solved == CATEGORIES:
            break
        if len(set(_split_row(row))) == 1:
            solved += 1
        else:
            mistakes += 1
    return solved, mistakes


class ConnectionsGame(Game):
    game_id = "connections"
    name = "Connections"
    dates = GameDates(DatesConfig(epoch_date=date(2023, 6, 12), base_number=1))

    def find_all(self, text: str) -> Iterator[Match]:
        for m, rows, end in scan_blocks(text, HEADER_PATTERN, _is_guess_row, MAX_ROWS):
            solved, mistakes = tally_rows(rows)
            won = solved == CATEGORIES
            if won:
                raw_score = PERFECT_LABEL if mistakes == 0 else SOLVED_LABEL
            else:
                raw_score = f"{solved}/{CATEGORIES}"
            meta: Dict[str, Any] = {
                "mistakes": mistakes,
                "perfect": won and mistakes == 0,
                "categories_solved": solved,
            }
            result = GameResult(
                game_id=self.game_id,
                puzzle_number=parse_number(m.group("number")),
                raw_score=raw_score,
                won=won,
                numeric_score=self.score(raw_score, meta),
                meta=meta,
            )
            logger.debug("find_all: connections #%s rows=%s solved=%s mistakes=%s",
                         result.puzzle_number, len(rows), solved, mistakes)
            yield Match(m.start(), end, result)

    def score(self, raw_score: str, meta: Mapping[str, Any]) -> int:
        # Perfect bonus on top of a plain solve
        if raw_score == PERFECT_LABEL:
            return 35
        if raw_score == SOLVED_LABEL:
            return 25
        return 10
