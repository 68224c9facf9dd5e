#!/usr/bin/python

from datetime import datetime
from typing import Any, Dict, Optional
import logging

import discord

# Local imports
from .user import User
from .models import LoggedResult
from .parser import DEFAULT_REGISTRY, Registry, parse_all

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Stats helpers
# -----------------------------------------------------------------------------

def total_games_played(user) -> int:
    results = getattr(user, "results", []) or []
    return len(results)

def total_points(user) -> int:
    """Sum of numeric scores across every game the user logged."""
    return sum(r.result.numeric_score for r in getattr(user, "results", []) or [])

def total_wins(user) -> int:
    return sum(1 for r in getattr(user, "results", []) or [] if r.result.won)

def total_perfects(user) -> int:
    return sum(1 for r in getattr(user, "results", []) or [] if r.result.meta.get("perfect"))

def longest_streak(user, game_id: str) -> int:
    """
    Longest run of consecutive puzzle numbers won for one game.
    """
    wins = {r.number for r in getattr(user, "results", []) or [] if r.game_id == game_id and r.result.won}
    if not wins:
        return 0

    longest = 0
    for n in wins:
        if (n - 1) not in wins:
            cur, length = n, 1
            while (cur + 1) in wins:
                cur += 1
                length += 1
            longest = max(longest, length)
    return longest

def current_streak(user, game, today_num: Optional[int] = None) -> int:
    """
    Consecutive wins ending today (or yesterday, if today isn't logged yet).
    """
    wins = {r.number for r in user.results_for(game.game_id) if r.result.won}
    played = {r.number for r in user.results_for(game.game_id)}
    check_num = game.dates.today_num() if today_num is None else today_num
    if check_num not in played:
        check_num -= 1
    streak = 0
    while check_num in wins:
        streak += 1
        check_num -= 1
    return streak

# -----------------------------------------------------------------------------
# Stats output
# -----------------------------------------------------------------------------

def build_stats_embed(user_dict: Dict[Any, User], bot, registry: Registry = DEFAULT_REGISTRY) -> discord.Embed:
    """
    Build the leaderboard embed: one line per player, ranked by total points.
    Current streaks and "played today" come from the last refresh_today().
    """
    embed = discord.Embed(
        title="Game Shelf Stats",
        description="Points across " + ", ".join(g.name for g in registry),
        color=discord.Color.blurple(),
    )

    rows = []
    enabled = {g.game_id for g in registry}
    totals = {"games": 0, "wins": 0, "perfects": 0, "today": 0}
    for user_id, user_obj in (user_dict or {}).items():
        games = total_games_played(user_obj)
        wins = total_wins(user_obj)
        perfects = total_perfects(user_obj)
        streaks = {g.game_id: longest_streak(user_obj, g.game_id) for g in registry}
        totals["games"] += games
        totals["wins"] += wins
        totals["perfects"] += perfects
        played_today = len(user_obj.played_today & enabled)
        if played_today:
            totals["today"] += 1

        # Resolve a readable name/mention
        member = bot.get_user(int(user_id)) if bot is not None and user_id is not None else None
        display = member.mention if member is not None else f"<@{user_id}>"
        rows.append({
            "display": display,
            "points": total_points(user_obj),
            "games": games,
            "wins": wins,
            "perfects": perfects,
            "best": max(streaks.values(), default=0),
            "streak": max((n for g, n in user_obj.cur_streaks.items() if g in enabled), default=0),
            "today": played_today,
        })

    # Most points first; then most games played
    rows.sort(key=lambda r: (r["points"], r["games"]), reverse=True)

    if rows:
        lines = []
        for idx, row in enumerate(rows[:10], start=1):
            lines.append(
                f"{idx}. {row['display']}: {row['points']} pts, Games: {row['games']}, "
                f"Wins: {row['wins']}, Perfect: {row['perfects']}, Streak: {row['streak']} (best {row['best']}), "
                f"Today: {row['today']}/{len(enabled)}"
            )
        embed.add_field(name="Leaderboard", value="\n".join(lines), inline=False)
    else:
        embed.add_field(name="Leaderboard", value="No data available yet.", inline=False)

    embed.add_field(
        name="Totals",
        value=f"Games: {totals['games']} • Wins: {totals['wins']} • Perfect: {totals['perfects']} • "
              f"Played today: {totals['today']}",
        inline=False,
    )
    return embed

async def print_stats(text_channel, user_dict: Dict[Any, User], bot, registry: Registry = DEFAULT_REGISTRY,
                      send_results: bool = True):
    embed = build_stats_embed(user_dict, bot, registry)

    if not send_results:
        # Pretty-print the embed to stdout instead of sending to Discord
        print("==== Stats (DEBUG) ====")
        print(f"Title: {embed.title or ''}")
        if embed.description:
            print(f"Description: {embed.description}")
        for f in embed.fields:
            print(f"\n{f.name}\n{'-' * len(f.name)}\n{f.value}")
        print("==== End Stats (DEBUG) ====")
        return

    await text_channel.send(embed=embed)

# -----------------------------------------------------------------------------
# Parse a message (delegates to the share-text parser)
# -----------------------------------------------------------------------------
def parse_result(msg, user_dict: Dict[Any, User], registry: Registry = DEFAULT_REGISTRY) -> int:
    """
    Parse every game result in a message and store them on its author.
    Returns the number of results ingested from this message.
    """
    parsed = parse_all(getattr(msg, "content", None), registry)
    if not parsed:
        logger.debug("parse_result: no parsable results in message id=%s", getattr(msg, "id", None))
        return 0

    games = {g.game_id: g for g in registry}
    author = msg.author
    if author.id not in user_dict:
        user_dict[author.id] = User(author)
        logger.debug("parse_result: created User for member_id=%s (%s)",
                     author.id, getattr(author, "display_name", None))
    user = user_dict[author.id]

    ingested = 0
    for result in parsed:
        try:
            game = games[result.game_id]
            # Games without a printed number count for the day they were posted
            number = result.puzzle_number
            if number is None:
                number = game.dates.date_to_num(msg.created_at)
            entry = LoggedResult(number=number, result=result, timestamp=msg.created_at)
            if user.add_result(entry, game.dates):
                logger.info("parse_result: stored result member_id=%s game=%s number=%s score=%s",
                            author.id, result.game_id, number, result.raw_score)
                ingested += 1
        except Exception:
            logger.exception("parse_result: failed to store %s result from msg id=%s",
                             result.game_id, getattr(msg, "id", None))

    return ingested

# -----------------------------------------------------------------------------
# Catch up history and daily bookkeeping
# -----------------------------------------------------------------------------
def refresh_today(user_dict: Dict[Any, User], registry: Registry = DEFAULT_REGISTRY):
    """Recompute played-today flags and current streaks from stored results."""
    for user in user_dict.values():
        user.played_today = set()
        for game in registry:
            today_num = game.dates.today_num()
            if any(r.number == today_num for r in user.results_for(game.game_id)):
                user.played_today.add(game.game_id)
            user.cur_streaks[game.game_id] = current_streak(user, game, today_num)

async def catchup(text_channel, user_dict: Dict[Any, User], registry: Registry = DEFAULT_REGISTRY,
                  min_date: str = "2024-06-19", date_format: str = "%Y-%m-%d"):
    logger.info("Catching up in channel/thread '%s'", getattr(text_channel, "name", str(text_channel)))
    start_date = datetime.strptime(min_date, date_format)
    total_messages = 0
    total_results = 0

    async for msg in text_channel.history(limit=None, after=start_date):
        total_messages += 1
        total_results += parse_result(msg, user_dict, registry)

    logger.info("Catchup scanned %s messages, ingested %s results", total_messages, total_results)
    refresh_today(user_dict, registry)
    logger.info("All caught up in %s (users=%s)", getattr(text_channel, "name", str(text_channel)), len(user_dict))
