#!/usr/bin/python

from typing import Dict, List, Set, Tuple

from .dates import GameDates
from .models import LoggedResult
import logging

logger = logging.getLogger(__name__)

class User:
    def __init__(self, author):
        self.author = author
        self.results: List[LoggedResult] = []
        self.played: Set[Tuple[str, int]] = set()
        self.cur_streaks: Dict[str, int] = {}
        self.played_today: Set[str] = set()

    def add_result(self, entry: LoggedResult, dates: GameDates) -> bool:
        """
        Store one logged result. Returns False when it was rejected: a puzzle
        number from the future, or a second result for the same game/puzzle.
        """
        game_id = entry.game_id
        today_num = dates.today_num()
        if entry.number > today_num:
            logger.warning("User.add_result: invalid %s number %s (newest is %s); time zone mismatch?",
                           game_id, entry.number, today_num)
            return False

        key = (game_id, entry.number)
        if key in self.played:
            logger.debug("User.add_result: duplicate ignored for user_id=%s game=%s number=%s",
                         getattr(self.author, "id", None), game_id, entry.number)
            return False

        self.results.append(entry)
        self.results.sort(key=lambda x: (x.game_id, x.number))
        self.played.add(key)
        logger.debug("User.add_result: user_id=%s added game=%s number=%s score=%s (total_results=%s)",
                     getattr(self.author, "id", None), game_id, entry.number,
                     entry.result.numeric_score, len(self.results))

        # If result was from today, update streak
        if entry.number == today_num:
            self.played_today.add(game_id)
            if entry.result.won:
                self.cur_streaks[game_id] = self.cur_streaks.get(game_id, 0) + 1
            else:
                self.cur_streaks[game_id] = 0
        return True

    def results_for(self, game_id: str) -> List[LoggedResult]:
        return [r for r in self.results if r.game_id == game_id]

