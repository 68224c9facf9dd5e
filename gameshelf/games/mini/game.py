import re
import logging
from datetime import date
from typing import Any, Dict, Iterator, Mapping, Optional

from gameshelf.core.dates import DatesConfig, GameDates
from gameshelf.core.game_protocol import Game
from gameshelf.core.models import GameResult, Match

logger = logging.getLogger(__name__)

MAX_SCORE = 35
MIN_SCORE = 5
SECONDS_PER_POINT = 10
# How far past the keyword the solve time may sit on the same line
_MAX_GAP = 200

# Completion time after a "mini"/"crossword" keyword on the same line:
#   "I solved the 1/17/2026 New York Times Mini Crossword in 1:23!"
#   "Mini Crossword 2:30"
# A bare "0:15" has no keyword and is not a Mini result.
TIME_PATTERN = re.compile(
    r'\b(?:mini|crossword)\b'
    rf'[^\n]{{0,{_MAX_GAP}}}?'
    r'(?<![\d:])(?P<minutes>\d{1,3}):(?P<seconds>[0-5]\d)(?![\d:])',
    re.IGNORECASE,
)
DATE_PATTERN = re.compile(r'(?<!\d)(?P<month>\d{1,2})/(?P<day>\d{1,2})/(?P<year>\d{4})(?!\d)')


def _share_date(line: str) -> Optional[date]:
    m = DATE_PATTERN.search(line)
    if not m:
        return None
    try:
        return date(int(m.group("year")), int(m.group("month")), int(m.group("day")))
    except ValueError:
        logger.debug("_share_date: ignoring impossible date %r", m.group(0))
        return None


class MiniGame(Game):
    """
    The Mini prints no puzzle number. A share whose line carries its
    M/D/YYYY date gets the number for that day; otherwise puzzle_number is
    None and callers file the result under the day it was posted (parsing
    never consults the clock).
    """
    game_id = "mini"
    name = "Mini Crossword"
    # Count days from the first Mini
    dates = GameDates(DatesConfig(epoch_date=date(2014, 8, 21), base_number=1))

    def find_all(self, text: str) -> Iterator[Match]:
        line_end = -1
        solved_on: Optional[date] = None
        for m in TIME_PATTERN.finditer(text):
            if m.start() > line_end:
                # One date lookup per line
                line_start = text.rfind("\n", 0, m.start()) + 1
                line_end = text.find("\n", m.start())
                if line_end == -1:
                    line_end = len(text)
                solved_on = _share_date(text[line_start:line_end])

            minutes = int(m.group("minutes"))
            seconds = int(m.group("seconds"))
            raw_score = f"{m.group('minutes')}:{m.group('seconds')}"
            meta: Dict[str, Any] = {
                "seconds": minutes * 60 + seconds,
                "date": solved_on.isoformat() if solved_on else None,
            }
            result = GameResult(
                game_id=self.game_id,
                puzzle_number=self.dates.day_to_num(solved_on) if solved_on else None,
                raw_score=raw_score,
                won=True,
                numeric_score=self.score(raw_score, meta),
                meta=meta,
            )
            logger.debug("find_all: mini %s (%ss) date=%s", raw_score, meta["seconds"], meta["date"])
            yield Match(m.start(), m.end(), result)

    def score(self, raw_score: str, meta: Mapping[str, Any]) -> int:
        # Faster is better, one point per 10 seconds
        total = int(meta["seconds"])
        return max(MAX_SCORE - total // SECONDS_PER_POINT, MIN_SCORE)
