"""
Share-text parsing entry points.

parse_one() returns the first game (in registry order) found in the text,
parse_all() every game block in the order they appear. Both accept any
input and never raise: non-str, empty or unrecognised text is simply no
match.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .game_protocol import Game
from .models import GameResult, Match
from .normalize import normalize
from gameshelf.games.wordle.game import WordleGame
from gameshelf.games.connections.game import ConnectionsGame
from gameshelf.games.strands.game import StrandsGame
from gameshelf.games.mini.game import MiniGame

logger = logging.getLogger(__name__)

Registry = Tuple[Game, ...]

# Registration order decides which game wins in parse_one()
BUILTIN_GAMES: Dict[str, Game] = {
    game.game_id: game
    for game in (WordleGame(), ConnectionsGame(), StrandsGame(), MiniGame())
}


def build_registry(game_ids: Optional[Iterable[str]] = None) -> Registry:
    """
    Ordered, immutable registry of matchers.
    game_ids selects and orders built-in games; None means all of them.
    Raises KeyError for an unknown id.
    """
    if game_ids is None:
        return tuple(BUILTIN_GAMES.values())
    registry = []
    for game_id in game_ids:
        key = game_id.strip().lower()
        if key not in BUILTIN_GAMES:
            raise KeyError(f"Unknown game id: {game_id!r} (known: {', '.join(BUILTIN_GAMES)})")
        registry.append(BUILTIN_GAMES[key])
    return tuple(registry)


DEFAULT_REGISTRY: Registry = build_registry()


def parse_one(text: Any, registry: Registry = DEFAULT_REGISTRY) -> Optional[GameResult]:
    normalized = normalize(text)
    if not normalized:
        return None
    for game in registry:
        try:
            result = game.try_match(normalized)
        except Exception:
            logger.exception("parse_one: %s matcher raised; treating as no match", getattr(game, "game_id", game))
            continue
        if result is not None:
            logger.debug("parse_one: matched %s #%s", result.game_id, result.puzzle_number)
            return result
    logger.debug("parse_one: no game found in %s chars", len(normalized))
    return None


def parse_all(text: Any, registry: Registry = DEFAULT_REGISTRY) -> List[GameResult]:
    normalized = normalize(text)
    if not normalized:
        return []

    matches: List[Match] = []
    for game in registry:
        try:
            matches.extend(game.find_all(normalized))
        except Exception:
            logger.exception("parse_all: %s matcher raised; skipping it", getattr(game, "game_id", game))
    # Source order; an earlier block keeps its span when another overlaps it
    matches.sort(key=lambda m: (m.start, -m.end))

    results: List[GameResult] = []
    taken_until = 0
    for m in matches:
        if m.start < taken_until:
            logger.debug("parse_all: dropping overlapping %s block at %s", m.result.game_id, m.start)
            continue
        results.append(m.result)
        taken_until = m.end

    logger.debug("parse_all: %s result(s) from %s chars", len(results), len(normalized))
    return results
