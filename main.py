#!/usr/bin/python
import os
import logging

import discord
from discord.ext import commands
from dotenv import load_dotenv
from gameshelf.core.parser import build_registry
from gameshelf.core.runtime import print_stats, catchup, parse_result, refresh_today
from gameshelf.core.scheduler import schedule_daily_midnight

load_dotenv()

CMD_PREFIX = '!'

user_dict = {}

# Logging setup
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

intents = discord.Intents(messages=True, message_content=True, guilds=True, members=True)
bot = commands.Bot(command_prefix=CMD_PREFIX, intents=intents)

def required_env(name: str) -> str:
    v = os.environ.get(name)
    if v is None or v == "":
        raise RuntimeError(f"Missing required env var: {name}")
    return v

def _env_bool(name: str, default: bool = False) -> bool:
    v = os.environ.get(name)
    if v is None:
        return default
    v = v.strip().lower()
    return v in ("1", "true", "t", "yes", "y", "on")

def _env_list(name: str):
    v = os.environ.get(name)
    if v is None or not v.strip():
        return None
    return [item for item in v.split(",") if item.strip()]


DISCORD_TOKEN = required_env("DISCORD_BOT_TOKEN")
INPUT_CHANNEL_ID = required_env("INPUT_CHANNEL_ID")
OUTPUT_CHANNEL_ID = required_env("OUTPUT_CHANNEL_ID")
SEND_RESULTS = _env_bool("SEND_RESULTS", default=False)
CATCHUP_FROM = os.environ.get("CATCHUP_FROM", "2024-06-19")

# Enabled games, in first-match order (default: all built-in games)
REGISTRY = build_registry(_env_list("GAMES"))


@bot.event
async def on_ready():
    logger.info("Bot is ready. Guilds: %s; games: %s", [g.name for g in bot.guilds], [g.game_id for g in REGISTRY])
    input_channel = bot.get_channel(int(INPUT_CHANNEL_ID))
    output_channel = bot.get_channel(int(OUTPUT_CHANNEL_ID))
    await catchup(input_channel, user_dict, REGISTRY, min_date=CATCHUP_FROM)
    await print_stats(output_channel, user_dict, bot, REGISTRY, SEND_RESULTS)
    # New puzzles go live at midnight: nobody has played them yet
    schedule_daily_midnight(lambda: refresh_today(user_dict, REGISTRY), job_id="refresh_today")


@bot.command()
async def stats(ctx):
    logger.info("!stats invoked by %s in #%s", ctx.author, getattr(ctx.channel, "name", ctx.channel))
    await print_stats(ctx.channel, user_dict, bot, REGISTRY, SEND_RESULTS)


@bot.event
async def on_message(msg):
    if msg.author == bot.user:
        return
    if str(getattr(msg.channel, "id", "")) == INPUT_CHANNEL_ID:
        logger.debug(
            "on_message: channel=%s author=%s content='%s...'",
            getattr(getattr(msg, "channel", None), "name", None),
            getattr(getattr(msg, "author", None), "name", None),
            (getattr(msg, "content", "") or "")[:120]
        )
        count = parse_result(msg, user_dict, REGISTRY)
        if count:
            logger.info("on_message: ingested %s results from message id=%s", count, getattr(msg, "id", None))
    # Always let command handling proceed (so humans can use !commands)
    await bot.process_commands(msg)


bot.run(DISCORD_TOKEN)
